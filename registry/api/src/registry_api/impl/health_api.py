from __future__ import annotations

from registry_api.apis.health_api_base import BaseHealthApi
from registry_api.models.health_status import HealthStatus
from registry_api.services.health_service import HealthService

_service = HealthService()


class HealthApiImpl(BaseHealthApi):
    async def get_health(self) -> HealthStatus:
        return await _service.get_health()
