# coding: utf-8

"""
    Package Registry API
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Any, ClassVar, Dict, List
from registry_api.models.package_version_detail import PackageVersionDetail
from typing_extensions import Self


class PackageVersionListResponse(BaseModel):
    """
    One page of a package's versions, newest first.
    """  # noqa: E501

    versions: List[PackageVersionDetail] = Field(default_factory=list, description="Versions on this page.")
    total: int = Field(description="Versions across all pages.")
    page: int = Field(description="1-based page index.")
    page_size: int = Field(description="Page size.")
    total_pages: int = Field(description="Number of pages.")
    __properties: ClassVar[list[str]] = ["versions", "total", "page", "page_size", "total_pages"]

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
