from __future__ import annotations

from datetime import datetime, timezone

from registry_api import __version__
from registry_api.models.health_status import HealthStatus


class HealthService:
    async def get_health(self) -> HealthStatus:
        return HealthStatus(
            status="ok",
            version=__version__,
            timestamp=datetime.now(timezone.utc),
        )
