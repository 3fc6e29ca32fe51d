from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from registry_api.db.session import SessionLocal
from registry_api.errors import ConflictError, StorageUnavailableError


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _contains_pattern(value: str) -> str:
    return f"%{_escape_like(value.lower())}%"


@contextmanager
def session_scope(conflict_message: str = "Record already exists") -> Iterator[Session]:
    """Open a session and translate backend failures into registry errors.

    A uniqueness violation becomes ``ConflictError``; any other database error
    becomes ``StorageUnavailableError``. The caller commits explicitly.
    """
    session = SessionLocal()
    try:
        yield session
    except IntegrityError as exc:
        session.rollback()
        raise ConflictError(conflict_message) from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise StorageUnavailableError("Metadata store unavailable") from exc
    finally:
        session.close()
