# coding: utf-8

from typing import List, Optional

from pydantic import BaseModel, Field


class TokenModel(BaseModel):
    """Identity asserted by a bearer token."""

    sub: str
    name: Optional[str] = None
    roles: List[str] = Field(default_factory=list)
