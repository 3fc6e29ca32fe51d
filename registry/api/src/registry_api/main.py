# coding: utf-8

"""
    Package Registry API

    Stores named packages and their immutable versioned artifacts.
"""


from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError

from registry_api import __version__
from registry_api.apis.health_api import router as HealthApiRouter
from registry_api.apis.packages_api import router as PackagesApiRouter
from registry_api.errors import RegistryError
from registry_api.http.errors import (
    http_exception_handler,
    registry_error_handler,
    validation_error_handler,
)

app = FastAPI(
    title="Package Registry API",
    description="Stores named packages and their immutable versioned artifacts.",
    version=__version__,
)

app.add_exception_handler(RegistryError, registry_error_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

app.include_router(HealthApiRouter)
app.include_router(PackagesApiRouter)
