# coding: utf-8

"""
    Package Registry API
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Any, ClassVar, Dict
from typing_extensions import Self


class DownloadUrlResponse(BaseModel):
    """
    Time-limited direct download link for a package version.
    """  # noqa: E501

    download_url: str = Field(description="Presigned URL of the artifact.")
    expires_in: int = Field(description="Lifetime of the URL in seconds.")
    __properties: ClassVar[list[str]] = ["download_url", "expires_in"]

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

