# coding: utf-8

"""
    Package Registry API
"""

from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel, Field
from typing import Any, ClassVar, Dict, Optional
from typing_extensions import Self


class PackageVersionDetail(BaseModel):
    """
    Published, immutable version of a package.
    """  # noqa: E501

    id: int = Field(description="Version identifier.")
    package_id: int = Field(description="Owning package identifier.")
    package_name: Optional[str] = Field(default=None, description="Owning package name.")
    version: str = Field(description="Version label.")
    description: Optional[str] = Field(default=None, description="Release description.")
    changelog: Optional[str] = Field(default=None, description="Release notes.")
    dependencies: Dict[str, str] = Field(default_factory=dict, description="Dependency name to constraint.")
    file_size: int = Field(description="Artifact size in bytes.")
    file_hash: str = Field(description="Hex SHA-256 of the artifact.")
    storage_key: Optional[str] = Field(default=None, description="Object key of the artifact.")
    download_count: int = Field(default=0, description="Accounted downloads.")
    is_prerelease: bool = Field(default=False, description="Prerelease flag.")
    uploader_id: Optional[str] = Field(default=None, description="Identity that published the version.")
    uploader_name: Optional[str] = Field(default=None, description="Display name of the publisher.")
    created_at: Optional[datetime] = Field(default=None, description="Publication time.")
    updated_at: Optional[datetime] = Field(default=None, description="Last modification time.")
    __properties: ClassVar[list[str]] = [
        "id",
        "package_id",
        "package_name",
        "version",
        "description",
        "changelog",
        "dependencies",
        "file_size",
        "file_hash",
        "storage_key",
        "download_count",
        "is_prerelease",
        "uploader_id",
        "uploader_name",
        "created_at",
        "updated_at",
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
