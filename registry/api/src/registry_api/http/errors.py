"""Shared error helpers for HTTP APIs."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from registry_api.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RegistryError,
    StorageUnavailableError,
    ValidationError,
)
from registry_api.models.error import Error

_STATUS_ERROR_CODES: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_409_CONFLICT: "conflict",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "internal_error",
    status.HTTP_503_SERVICE_UNAVAILABLE: "storage_unavailable",
}

_REGISTRY_ERROR_STATUS: dict[type[RegistryError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    StorageUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_payload(
    message: str,
    *,
    error: Optional[str] = None,
    status_code: Optional[int] = None,
    details: Optional[dict[str, Any]] = None,
    request_id: Optional[str] = None,
) -> dict[str, Any]:
    resolved_error = error or _STATUS_ERROR_CODES.get(status_code or 0, "error")
    return Error(
        error=resolved_error,
        message=message,
        request_id=request_id,
        details=details,
    ).model_dump(by_alias=True, exclude_none=True)


def http_error(
    status_code: int,
    message: str,
    *,
    error: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
    request_id: Optional[str] = None,
) -> HTTPException:
    payload = error_payload(
        message,
        error=error,
        status_code=status_code,
        details=details,
        request_id=request_id,
    )
    return HTTPException(status_code=status_code, detail=payload)


def unauthorized(
    message: str,
    *,
    error: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
) -> HTTPException:
    exc = http_error(
        status.HTTP_401_UNAUTHORIZED,
        message,
        error=error,
        details=details,
    )
    exc.headers = {"WWW-Authenticate": "Bearer"}
    return exc


def status_for_error(exc: RegistryError) -> int:
    for error_type, status_code in _REGISTRY_ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
    status_code = status_for_error(exc)
    return JSONResponse(
        status_code=status_code,
        content=error_payload(
            exc.message,
            error=exc.code,
            status_code=status_code,
            details=exc.details,
            request_id=request.headers.get("X-Request-ID"),
        ),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = exc.detail
    else:
        content = error_payload(str(exc.detail), status_code=exc.status_code)
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "loc": [str(part) for part in item.get("loc", ())],
            "msg": item.get("msg"),
            "type": item.get("type"),
        }
        for item in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_payload(
            "Invalid request",
            error=ValidationError.code,
            details={"errors": errors},
        ),
    )


__all__ = [
    "error_payload",
    "http_error",
    "http_exception_handler",
    "registry_error_handler",
    "status_for_error",
    "unauthorized",
    "validation_error_handler",
]
