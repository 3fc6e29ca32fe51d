"""Error taxonomy shared by the repository, storage and service layers."""

from __future__ import annotations

import logging
from typing import Any, Optional


class RegistryError(Exception):
    """Base class for errors surfaced to registry callers."""

    code = "error"

    def __init__(self, message: str, *, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(RegistryError):
    """Package or version is absent or soft-deleted."""

    code = "not_found"


class ConflictError(RegistryError):
    """Duplicate package name or version label."""

    code = "conflict"


class ForbiddenError(RegistryError):
    """Caller is not the owner, or is reading a private package it does not own."""

    code = "forbidden"


class ValidationError(RegistryError):
    code = "validation_error"


class StorageUnavailableError(RegistryError):
    """Metadata or blob backend unreachable. Not retried."""

    code = "storage_unavailable"


class IntegrityWarning(RegistryError):
    """Non-fatal drift between the metadata store and the blob store.

    Instances are logged, never raised to callers and never cause a rollback:
    a blob left behind after its metadata was deleted, a compensating delete
    that failed, or a download that was served but not accounted.
    """

    code = "integrity_warning"


def report_integrity_warning(
    logger: logging.Logger,
    message: str,
    *,
    exc: Optional[BaseException] = None,
    **details: Any,
) -> IntegrityWarning:
    """Log a metadata/blob drift at WARNING and return it as a value."""
    warning = IntegrityWarning(message, details=details or None)
    logger.warning("%s %s", message, details, exc_info=exc)
    return warning


__all__ = [
    "ConflictError",
    "ForbiddenError",
    "IntegrityWarning",
    "NotFoundError",
    "RegistryError",
    "StorageUnavailableError",
    "ValidationError",
    "report_integrity_warning",
]
