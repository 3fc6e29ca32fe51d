# coding: utf-8

"""
    Package Registry API
"""

from __future__ import annotations

from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator
from typing import Any, ClassVar, Dict, List, Optional
from typing_extensions import Self

# Collides with the stats route under /packages.
RESERVED_PACKAGE_NAMES = frozenset({"stats"})


def validate_optional_url(value: Optional[str]) -> Optional[str]:
    """Empty strings pass through; anything else must be an absolute http(s) URL."""
    if not value:
        return value
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError("must be an http(s) URL")
    return value


class PackageCreateRequest(BaseModel):
    """
    Payload used to register a new package name.
    """  # noqa: E501

    name: str = Field(min_length=1, max_length=100, description="Unique package name.")
    description: Optional[str] = Field(default=None, max_length=500, description="Short description.")
    author: Optional[str] = Field(default=None, max_length=100, description="Author display name.")
    homepage: Optional[str] = Field(default=None, max_length=255, description="Project homepage URL.")
    repository: Optional[str] = Field(default=None, max_length=255, description="Source repository URL.")
    license: Optional[str] = Field(default=None, max_length=50, description="License identifier.")
    keywords: Optional[List[str]] = Field(default=None, description="Search keywords.")
    is_private: bool = Field(default=False, description="Restrict downloads to the owner.")
    __properties: ClassVar[list[str]] = [
        "name",
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

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        if value in RESERVED_PACKAGE_NAMES:
            raise ValueError(f"'{value}' is reserved")
        return value

    @field_validator("homepage", "repository")
    @classmethod
    def _check_url(cls, value: Optional[str]) -> Optional[str]:
        return validate_optional_url(value)

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
