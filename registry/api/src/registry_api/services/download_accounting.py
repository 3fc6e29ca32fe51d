"""Asynchronous download accounting."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from registry_api.errors import report_integrity_warning
from registry_api.repo.downloads import record_download
from registry_api.services.background import TaskTracker

LOGGER = logging.getLogger(__name__)


class DownloadAccountant:
    """Record downloads off the request path.

    Each download becomes one tracked task that appends an audit row and bumps
    the version counter. Failures are logged, never retried or surfaced.
    """

    def __init__(self, tracker: TaskTracker) -> None:
        self._tracker = tracker

    def schedule(
        self,
        version_id: int,
        user_id: Optional[str],
        ip_address: Optional[str],
        user_agent: Optional[str],
    ) -> None:
        self._tracker.spawn(
            self._record(version_id, user_id, ip_address, user_agent),
            name=f"download-accounting-{version_id}",
        )

    async def _record(
        self,
        version_id: int,
        user_id: Optional[str],
        ip_address: Optional[str],
        user_agent: Optional[str],
    ) -> None:
        try:
            await asyncio.to_thread(record_download, version_id, user_id, ip_address, user_agent)
        except Exception as exc:  # noqa: BLE001
            report_integrity_warning(
                LOGGER,
                "Download served but not accounted",
                exc=exc,
                version_id=version_id,
            )
