# coding: utf-8

"""
    Package Registry API
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from typing import Any, ClassVar, Dict, Optional
from typing_extensions import Self


class PackageVersionSpec(BaseModel):
    """
    Metadata submitted alongside a version artifact.
    """  # noqa: E501

    version: str = Field(min_length=1, max_length=50, description="Opaque version label.")
    description: Optional[str] = Field(default=None, max_length=500, description="Release description.")
    changelog: Optional[str] = Field(default=None, description="Release notes.")
    dependencies: Dict[str, str] = Field(default_factory=dict, description="Dependency name to constraint.")
    is_prerelease: bool = Field(default=False, description="Marks the version as a prerelease.")
    __properties: ClassVar[list[str]] = [
        "version",
        "description",
        "changelog",
        "dependencies",
        "is_prerelease",
    ]

    model_config = {
        "populate_by_name": True,
        "validate_assignment": True,
        "protected_namespaces": (),
    }

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

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
