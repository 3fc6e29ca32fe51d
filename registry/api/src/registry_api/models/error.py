# coding: utf-8

"""
    Package Registry API
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Any, ClassVar, Dict, Optional
from typing_extensions import Self


class Error(BaseModel):
    """
    Error payload returned by every failing request.
    """  # noqa: E501

    error: str = Field(description="Machine readable error code.")
    message: str = Field(description="Human readable error message.")
    request_id: Optional[str] = Field(default=None, description="Request identifier, when known.")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Additional error context.")
    __properties: ClassVar[list[str]] = ["error", "message", "request_id", "details"]

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

