from __future__ import annotations

from typing import Any, Iterator

from fastapi import UploadFile
from fastapi.responses import StreamingResponse

from registry_api.apis.packages_api_base import BasePackagesApi
from registry_api.models.download_url_response import DownloadUrlResponse
from registry_api.models.message_response import MessageResponse
from registry_api.models.package_create_request import PackageCreateRequest
from registry_api.models.package_detail import PackageDetail
from registry_api.models.package_list_response import PackageListResponse
from registry_api.models.package_stats import PackageStats
from registry_api.models.package_update_request import PackageUpdateRequest
from registry_api.models.package_version_detail import PackageVersionDetail
from registry_api.models.package_version_list_response import PackageVersionListResponse
from registry_api.security_api import get_current_actor, get_current_actor_name, require_actor
from registry_api.services.packages_service import PackagesService, parse_version_spec
from registry_api.storage import DEFAULT_CONTENT_TYPE, KEY_EXTENSION

_service = PackagesService()

_DOWNLOAD_CHUNK_SIZE = 64 * 1024


def get_packages_service() -> PackagesService:
    return _service


def _iter_body(body: Any) -> Iterator[bytes]:
    try:
        yield from body.iter_chunks(_DOWNLOAD_CHUNK_SIZE)
    finally:
        body.close()


class PackagesApiImpl(BasePackagesApi):
    async def search_packages(
        self,
        query: str | None,
        author: str | None,
        keywords: str | None,
        license: str | None,
        is_private: bool | None,
        page: int | None,
        page_size: int | None,
    ) -> PackageListResponse:
        return await _service.search_packages(
            query=query,
            author=author,
            keywords=keywords,
            license=license,
            is_private=is_private,
            page=page,
            page_size=page_size,
        )

    async def create_package(
        self,
        package_create_request: PackageCreateRequest,
    ) -> PackageDetail:
        actor_id = require_actor()
        return await _service.create_package(
            package_create_request,
            actor_id,
            get_current_actor_name() or actor_id,
        )

    async def get_package_stats(self) -> PackageStats:
        return await _service.get_stats()

    async def get_package(self, name: str) -> PackageDetail:
        return await _service.get_package(name)

    async def update_package(
        self,
        name: str,
        package_update_request: PackageUpdateRequest,
    ) -> PackageDetail:
        actor_id = require_actor()
        return await _service.update_package(name, package_update_request, actor_id)

    async def delete_package(self, name: str) -> MessageResponse:
        actor_id = require_actor()
        await _service.delete_package(name, actor_id)
        return MessageResponse(message="Package deleted successfully")

    async def upload_package_version(
        self,
        name: str,
        file: UploadFile,
        version: str | None,
        description: str | None,
        changelog: str | None,
        is_prerelease: bool | None,
        dependencies: str | None,
    ) -> PackageVersionDetail:
        actor_id = require_actor()
        spec = parse_version_spec(version, description, changelog, is_prerelease, dependencies)
        try:
            return await _service.upload_version(
                name,
                spec,
                file.file,
                file.size,
                actor_id,
                get_current_actor_name() or actor_id,
            )
        finally:
            await file.close()

    async def list_package_versions(
        self,
        name: str,
        page: int | None,
        page_size: int | None,
    ) -> PackageVersionListResponse:
        return await _service.list_versions(name, page, page_size)

    async def delete_package_version(self, name: str, version: str) -> MessageResponse:
        actor_id = require_actor()
        await _service.delete_version(name, version, actor_id)
        return MessageResponse(message="Package version deleted successfully")

    async def download_package_version(
        self,
        name: str,
        version: str,
        client_host: str | None,
        user_agent: str | None,
    ) -> StreamingResponse:
        body, detail = await _service.download_version(
            name,
            version,
            get_current_actor(),
            client_host,
            user_agent,
        )
        filename = f"{name}-{version}{KEY_EXTENSION}"
        return StreamingResponse(
            _iter_body(body),
            media_type=DEFAULT_CONTENT_TYPE,
            headers={
                "Content-Disposition": f"attachment; filename={filename}",
                "Content-Length": str(detail.file_size),
                "X-Package-Name": name,
                "X-Package-Version": version,
                "X-Package-Hash": detail.file_hash,
            },
        )

    async def get_download_url(self, name: str, version: str) -> DownloadUrlResponse:
        return await _service.get_download_url(name, version, get_current_actor())
