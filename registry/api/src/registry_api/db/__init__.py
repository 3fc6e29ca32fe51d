"""Registry database helpers."""

from .base import Base
from .session import DATABASE_URL, SessionLocal, engine, get_session

__all__ = [
    "Base",
    "DATABASE_URL",
    "SessionLocal",
    "engine",
    "get_session",
]
