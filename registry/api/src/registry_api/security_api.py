# coding: utf-8

from __future__ import annotations

from contextvars import ContextVar
from typing import Optional

import jwt
from fastapi import Depends, Security  # noqa: F401
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer, SecurityScopes

from registry_api.config import get_settings
from registry_api.http.errors import unauthorized
from registry_api.models.extra_models import TokenModel


bearer_auth = HTTPBearer(auto_error=False)

_current_token: ContextVar[Optional[TokenModel]] = ContextVar("registry_current_token", default=None)


def decode_bearer_token(token_value: str) -> TokenModel:
    """Verify a bearer JWT and return the identity it asserts."""

    settings = get_settings()
    try:
        payload = jwt.decode(token_value, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError as exc:
        raise unauthorized("Invalid token") from exc
    subject = payload.get("sub")
    if not subject:
        raise unauthorized("Invalid token")
    return TokenModel(
        sub=str(subject),
        name=payload.get("username") or payload.get("name"),
        roles=list(payload.get("roles") or []),
    )


async def get_token_bearerAuth(
    security_scopes: SecurityScopes,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_auth),
) -> TokenModel:
    """
    Resolve the caller from the Authorization header.

    Routes declared with scopes require a token; the rest accept anonymous
    callers and receive a ``TokenModel`` with an empty subject.
    """

    if credentials is None or not credentials.credentials:
        if security_scopes.scopes:
            raise unauthorized("Missing bearer token")
        _current_token.set(None)
        return TokenModel(sub="")

    token_model = decode_bearer_token(credentials.credentials)
    _current_token.set(token_model)
    return token_model


def get_current_token() -> Optional[TokenModel]:
    return _current_token.get()


def get_current_actor() -> Optional[str]:
    token = _current_token.get()
    return token.sub if token and token.sub else None


def get_current_actor_name() -> Optional[str]:
    token = _current_token.get()
    return token.name if token else None


def require_actor() -> str:
    actor_id = get_current_actor()
    if not actor_id:
        raise unauthorized("Missing bearer token")
    return actor_id
