# coding: utf-8

from typing import ClassVar, Dict, List, Tuple, Any  # noqa: F401
from fastapi import UploadFile

from pydantic import Field, StrictStr
from typing import Any, List, Optional, Tuple, Union
from typing_extensions import Annotated
from registry_api.models.download_url_response import DownloadUrlResponse
from registry_api.models.message_response import MessageResponse
from registry_api.models.package_create_request import PackageCreateRequest
from registry_api.models.package_detail import PackageDetail
from registry_api.models.package_list_response import PackageListResponse
from registry_api.models.package_stats import PackageStats
from registry_api.models.package_update_request import PackageUpdateRequest
from registry_api.models.package_version_detail import PackageVersionDetail
from registry_api.models.package_version_list_response import PackageVersionListResponse


class BasePackagesApi:
    subclasses: ClassVar[Tuple] = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        BasePackagesApi.subclasses = BasePackagesApi.subclasses + (cls,)
    async def search_packages(
        self,
        query: Annotated[Optional[StrictStr], Field(description="Substring of name, description, author or keywords")],
        author: Annotated[Optional[StrictStr], Field(description="Author substring")],
        keywords: Annotated[Optional[StrictStr], Field(description="Keyword substring")],
        license: Annotated[Optional[StrictStr], Field(description="Exact license")],
        is_private: Annotated[Optional[bool], Field(description="Visibility filter")],
        page: Annotated[Optional[Annotated[int, Field(ge=1)]], Field(description="1-based page index")],
        page_size: Annotated[Optional[Annotated[int, Field(le=100, ge=1)]], Field(description="Page size")],
    ) -> PackageListResponse:
        ...


    async def create_package(
        self,
        package_create_request: PackageCreateRequest,
    ) -> PackageDetail:
        ...


    async def get_package_stats(
        self,
    ) -> PackageStats:
        ...


    async def get_package(
        self,
        name: StrictStr,
    ) -> PackageDetail:
        ...


    async def update_package(
        self,
        name: StrictStr,
        package_update_request: PackageUpdateRequest,
    ) -> PackageDetail:
        ...


    async def delete_package(
        self,
        name: StrictStr,
    ) -> MessageResponse:
        ...


    async def upload_package_version(
        self,
        name: StrictStr,
        file: UploadFile,
        version: Optional[StrictStr],
        description: Optional[StrictStr],
        changelog: Optional[StrictStr],
        is_prerelease: Optional[bool],
        dependencies: Optional[StrictStr],
    ) -> PackageVersionDetail:
        ...


    async def list_package_versions(
        self,
        name: StrictStr,
        page: Annotated[Optional[Annotated[int, Field(ge=1)]], Field(description="1-based page index")],
        page_size: Annotated[Optional[Annotated[int, Field(le=100, ge=1)]], Field(description="Page size")],
    ) -> PackageVersionListResponse:
        ...


    async def delete_package_version(
        self,
        name: StrictStr,
        version: StrictStr,
    ) -> MessageResponse:
        ...


    async def download_package_version(
        self,
        name: StrictStr,
        version: StrictStr,
        client_host: Optional[StrictStr],
        user_agent: Optional[StrictStr],
    ) -> Any:
        ...


    async def get_download_url(
        self,
        name: StrictStr,
        version: StrictStr,
    ) -> DownloadUrlResponse:
        ...
