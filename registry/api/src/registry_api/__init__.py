"""Package registry service: metadata in SQL, artifacts in S3-compatible storage."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
