"""Runtime entrypoint that layers custom behaviour on the generated FastAPI app."""

from __future__ import annotations

import logging

from fastapi.middleware.cors import CORSMiddleware

from registry_api import main as generated_main
from registry_api.config import get_settings
from registry_api.db.migrations import upgrade_database
from registry_api.impl.packages_api import get_packages_service

LOGGER = logging.getLogger(__name__)

app = generated_main.app

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def _startup() -> None:
    upgrade_database()


@app.on_event("shutdown")
async def _shutdown() -> None:
    LOGGER.info("Waiting for background registry tasks")
    await get_packages_service().drain()
