# coding: utf-8

"""
    Package Registry API
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from typing import Any, ClassVar, Dict, List, Optional
from typing_extensions import Self

from registry_api.models.package_create_request import validate_optional_url


class PackageUpdateRequest(BaseModel):
    """
    Partial update of package metadata. Omitted or null fields are left unchanged.
    """  # noqa: E501

    description: Optional[str] = Field(default=None, max_length=500, description="Short description.")
    author: Optional[str] = Field(default=None, max_length=100, description="Author display name.")
    homepage: Optional[str] = Field(default=None, max_length=255, description="Project homepage URL.")
    repository: Optional[str] = Field(default=None, max_length=255, description="Source repository URL.")
    license: Optional[str] = Field(default=None, max_length=50, description="License identifier.")
    keywords: Optional[List[str]] = Field(default=None, description="Search keywords.")
    is_private: Optional[bool] = Field(default=None, description="Restrict downloads to the owner.")
    __properties: ClassVar[list[str]] = [
        "description",
        "author",
        "homepage",
        "repository",
        "license",
        "keywords",
        "is_private",
    ]

    model_config = {
        "populate_by_name": True,
        "validate_assignment": True,
        "protected_namespaces": (),
    }

    @field_validator("homepage", "repository")
    @classmethod
    def _check_url(cls, value: Optional[str]) -> Optional[str]:
        return validate_optional_url(value)

    def provided_fields(self) -> Dict[str, Any]:
        """Fields the caller actually set to a non-null value."""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
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
