# coding: utf-8

"""
    Package Registry API
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Any, ClassVar, Dict, List
from registry_api.models.package_detail import PackageDetail
from registry_api.models.package_version_detail import PackageVersionDetail
from typing_extensions import Self


class PackageStats(BaseModel):
    """
    Registry-wide counters and top-N lists.
    """  # noqa: E501

    total_packages: int = Field(description="Live packages.")
    total_versions: int = Field(description="Versions of live packages.")
    total_downloads: int = Field(description="Accounted downloads of live packages.")
    recent_downloads: int = Field(description="Downloads in the trailing window.")
    popular_packages: List[PackageDetail] = Field(default_factory=list, description="Most downloaded packages.")
    recent_packages: List[PackageDetail] = Field(default_factory=list, description="Most recently created packages.")
    recent_versions: List[PackageVersionDetail] = Field(default_factory=list, description="Most recently published versions.")
    __properties: ClassVar[list[str]] = [
        "total_packages",
        "total_versions",
        "total_downloads",
        "recent_downloads",
        "popular_packages",
        "recent_packages",
        "recent_versions",
    ]

    model_config = {
        "populate_by_name": True,
        "validate_assignment": True,
        "protected_namespaces": (),
    }

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)

    @classmethod
    def from_json(cls, json_str: str) -> Self:
        return cls.model_validate_json(json_str)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_dict(cls, obj: Dict[str, Any]) -> Self:
        if obj is None:
            return None
        if not isinstance(obj, dict):
            return cls.model_validate(obj)
        return cls.model_validate(obj)
