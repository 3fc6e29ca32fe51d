# coding: utf-8

from typing import Dict, List, Any  # noqa: F401
import importlib
import pkgutil

from registry_api.apis.packages_api_base import BasePackagesApi
import registry_api.impl

from fastapi import (  # noqa: F401
    APIRouter,
    Body,
    Depends,
    Form,
    Header,
    HTTPException,
    Path,
    Query,
    Request,
    Response,
    Security,
    status,
    File,
    UploadFile,
)

from registry_api.models.extra_models import TokenModel  # noqa: F401
from pydantic import Field, StrictStr
from typing import Any, List, Optional, Tuple, Union
from typing_extensions import Annotated
from registry_api.models.download_url_response import DownloadUrlResponse
from registry_api.models.error import Error
from registry_api.models.message_response import MessageResponse
from registry_api.models.package_create_request import PackageCreateRequest
from registry_api.models.package_detail import PackageDetail
from registry_api.models.package_list_response import PackageListResponse
from registry_api.models.package_stats import PackageStats
from registry_api.models.package_update_request import PackageUpdateRequest
from registry_api.models.package_version_detail import PackageVersionDetail
from registry_api.models.package_version_list_response import PackageVersionListResponse
from registry_api.security_api import get_token_bearerAuth

router = APIRouter()

ns_pkg = registry_api.impl
for _, name, _ in pkgutil.iter_modules(ns_pkg.__path__, ns_pkg.__name__ + "."):
    importlib.import_module(name)


@router.get(
    "/packages",
    responses={
        200: {"model": PackageListResponse, "description": "OK"},
        400: {"model": Error, "description": "Invalid input"},
    },
    tags=["Packages"],
    summary="Search packages",
    response_model_by_alias=True,
)
async def search_packages(
    query: Annotated[Optional[StrictStr], Field(description="Substring of name, description, author or keywords")] = Query(None, description="Substring of name, description, author or keywords", alias="query"),
    author: Annotated[Optional[StrictStr], Field(description="Author substring")] = Query(None, description="Author substring", alias="author"),
    keywords: Annotated[Optional[StrictStr], Field(description="Keyword substring")] = Query(None, description="Keyword substring", alias="keywords"),
    license: Annotated[Optional[StrictStr], Field(description="Exact license")] = Query(None, description="Exact license", alias="license"),
    is_private: Annotated[Optional[bool], Field(description="Visibility filter")] = Query(None, description="Visibility filter", alias="is_private"),
    page: Annotated[Optional[Annotated[int, Field(ge=1)]], Field(description="1-based page index")] = Query(1, description="1-based page index", alias="page", ge=1),
    page_size: Annotated[Optional[Annotated[int, Field(le=100, ge=1)]], Field(description="Page size")] = Query(20, description="Page size", alias="page_size", ge=1, le=100),
) -> PackageListResponse:
    if not BasePackagesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BasePackagesApi.subclasses[0]().search_packages(query, author, keywords, license, is_private, page, page_size)


@router.post(
    "/packages",
    responses={
        201: {"model": PackageDetail, "description": "Created"},
        400: {"model": Error, "description": "Invalid input"},
        401: {"model": Error, "description": "Unauthorized"},
        409: {"model": Error, "description": "Conflict"},
    },
    tags=["Packages"],
    summary="Create a package",
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_package(
    package_create_request: PackageCreateRequest = Body(..., description=""),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth, scopes=["write"]
    ),
) -> PackageDetail:
    if not BasePackagesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BasePackagesApi.subclasses[0]().create_package(package_create_request)


@router.get(
    "/packages/stats",
    responses={
        200: {"model": PackageStats, "description": "OK"},
        503: {"model": Error, "description": "Storage unavailable"},
    },
    tags=["Packages"],
    summary="Registry statistics",
    response_model_by_alias=True,
)
async def get_package_stats(
) -> PackageStats:
    if not BasePackagesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BasePackagesApi.subclasses[0]().get_package_stats()


@router.get(
    "/packages/{name}",
    responses={
        200: {"model": PackageDetail, "description": "OK"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["Packages"],
    summary="Get package detail",
    response_model_by_alias=True,
)
async def get_package(
    name: StrictStr = Path(..., description=""),
) -> PackageDetail:
    if not BasePackagesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BasePackagesApi.subclasses[0]().get_package(name)


@router.put(
    "/packages/{name}",
    responses={
        200: {"model": PackageDetail, "description": "Updated"},
        400: {"model": Error, "description": "Invalid input"},
        401: {"model": Error, "description": "Unauthorized"},
        403: {"model": Error, "description": "Forbidden"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["Packages"],
    summary="Update package metadata",
    response_model_by_alias=True,
)
async def update_package(
    name: StrictStr = Path(..., description=""),
    package_update_request: PackageUpdateRequest = Body(..., description=""),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth, scopes=["write"]
    ),
) -> PackageDetail:
    if not BasePackagesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BasePackagesApi.subclasses[0]().update_package(name, package_update_request)


@router.delete(
    "/packages/{name}",
    responses={
        200: {"model": MessageResponse, "description": "Deleted"},
        401: {"model": Error, "description": "Unauthorized"},
        403: {"model": Error, "description": "Forbidden"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["Packages"],
    summary="Delete a package and all of its versions",
    response_model_by_alias=True,
)
async def delete_package(
    name: StrictStr = Path(..., description=""),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth, scopes=["write"]
    ),
) -> MessageResponse:
    if not BasePackagesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BasePackagesApi.subclasses[0]().delete_package(name)


@router.post(
    "/packages/{name}/versions",
    responses={
        201: {"model": PackageVersionDetail, "description": "Created"},
        400: {"model": Error, "description": "Invalid input"},
        401: {"model": Error, "description": "Unauthorized"},
        403: {"model": Error, "description": "Forbidden"},
        404: {"model": Error, "description": "Not Found"},
        409: {"model": Error, "description": "Conflict"},
        503: {"model": Error, "description": "Storage unavailable"},
    },
    tags=["Packages"],
    summary="Publish a package version",
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
async def upload_package_version(
    name: StrictStr = Path(..., description=""),
    file: UploadFile = File(..., description="Package artifact"),
    version: Optional[StrictStr] = Form(None, description="Version label"),
    description: Optional[StrictStr] = Form(None, description=""),
    changelog: Optional[StrictStr] = Form(None, description=""),
    is_prerelease: Optional[bool] = Form(None, description=""),
    dependencies: Optional[StrictStr] = Form(None, description="JSON object of dependency constraints"),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth, scopes=["write"]
    ),
) -> PackageVersionDetail:
    if not BasePackagesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BasePackagesApi.subclasses[0]().upload_package_version(name, file, version, description, changelog, is_prerelease, dependencies)


@router.get(
    "/packages/{name}/versions",
    responses={
        200: {"model": PackageVersionListResponse, "description": "OK"},
        400: {"model": Error, "description": "Invalid input"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["Packages"],
    summary="List package versions",
    response_model_by_alias=True,
)
async def list_package_versions(
    name: StrictStr = Path(..., description=""),
    page: Annotated[Optional[Annotated[int, Field(ge=1)]], Field(description="1-based page index")] = Query(1, description="1-based page index", alias="page", ge=1),
    page_size: Annotated[Optional[Annotated[int, Field(le=100, ge=1)]], Field(description="Page size")] = Query(20, description="Page size", alias="page_size", ge=1, le=100),
) -> PackageVersionListResponse:
    if not BasePackagesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BasePackagesApi.subclasses[0]().list_package_versions(name, page, page_size)


@router.delete(
    "/packages/{name}/{version}",
    responses={
        200: {"model": MessageResponse, "description": "Deleted"},
        401: {"model": Error, "description": "Unauthorized"},
        403: {"model": Error, "description": "Forbidden"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["Packages"],
    summary="Delete a package version",
    response_model_by_alias=True,
)
async def delete_package_version(
    name: StrictStr = Path(..., description=""),
    version: StrictStr = Path(..., description=""),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth, scopes=["write"]
    ),
) -> MessageResponse:
    if not BasePackagesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BasePackagesApi.subclasses[0]().delete_package_version(name, version)


@router.get(
    "/packages/{name}/{version}/download",
    responses={
        200: {"description": "Package artifact"},
        403: {"model": Error, "description": "Forbidden"},
        404: {"model": Error, "description": "Not Found"},
        503: {"model": Error, "description": "Storage unavailable"},
    },
    tags=["Packages"],
    summary="Download a package version",
    response_model_by_alias=True,
)
async def download_package_version(
    request: Request,
    name: StrictStr = Path(..., description=""),
    version: StrictStr = Path(..., description=""),
    user_agent: Optional[StrictStr] = Header(None, description="", alias="User-Agent"),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth, scopes=[]
    ),
) -> Any:
    if not BasePackagesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    client_host = request.client.host if request.client else None
    return await BasePackagesApi.subclasses[0]().download_package_version(name, version, client_host, user_agent)


@router.get(
    "/packages/{name}/{version}/download-url",
    responses={
        200: {"model": DownloadUrlResponse, "description": "OK"},
        403: {"model": Error, "description": "Forbidden"},
        404: {"model": Error, "description": "Not Found"},
        503: {"model": Error, "description": "Storage unavailable"},
    },
    tags=["Packages"],
    summary="Get a presigned download URL",
    response_model_by_alias=True,
)
async def get_download_url(
    name: StrictStr = Path(..., description=""),
    version: StrictStr = Path(..., description=""),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth, scopes=[]
    ),
) -> DownloadUrlResponse:
    if not BasePackagesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BasePackagesApi.subclasses[0]().get_download_url(name, version)
