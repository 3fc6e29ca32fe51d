# coding: utf-8

"""
    Package Registry API
"""

from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel, Field
from typing import Any, ClassVar, Dict, List, Optional
from registry_api.models.package_version_detail import PackageVersionDetail
from typing_extensions import Self


class PackageDetail(BaseModel):
    """
    Package metadata, optionally with its versions.
    """  # noqa: E501

    id: int = Field(description="Package identifier.")
    name: str = Field(description="Unique package name.")
    description: Optional[str] = Field(default=None, description="Short description.")
    author: Optional[str] = Field(default=None, description="Author display name.")
    homepage: Optional[str] = Field(default=None, description="Project homepage URL.")
    repository: Optional[str] = Field(default=None, description="Source repository URL.")
    license: Optional[str] = Field(default=None, description="License identifier.")
    keywords: List[str] = Field(default_factory=list, description="Search keywords.")
    is_private: bool = Field(default=False, description="Downloads restricted to the owner.")
    owner_id: str = Field(description="Owning identity.")
    owner_name: Optional[str] = Field(default=None, description="Display name of the owner.")
    created_at: Optional[datetime] = Field(default=None, description="Creation time.")
    updated_at: Optional[datetime] = Field(default=None, description="Last modification time.")
    versions: Optional[List[PackageVersionDetail]] = Field(default=None, description="Versions, newest first.")
    total_downloads: Optional[int] = Field(default=None, description="Downloads summed over all versions.")
    __properties: ClassVar[list[str]] = [
        "id",
        "name",
        "description",
        "author",
        "homepage",
        "repository",
        "license",
        "keywords",
        "is_private",
        "owner_id",
        "owner_name",
        "created_at",
        "updated_at",
        "versions",
        "total_downloads",
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
