from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from datetime import datetime, timedelta, timezone
from math import ceil
from typing import Any, AsyncIterator, BinaryIO, Callable, Optional

from pydantic import ValidationError as ModelValidationError

from registry_api.config import RegistrySettings, get_settings
from registry_api.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    StorageUnavailableError,
    ValidationError,
    report_integrity_warning,
)
from registry_api.models.download_url_response import DownloadUrlResponse
from registry_api.models.package_create_request import PackageCreateRequest
from registry_api.models.package_detail import PackageDetail
from registry_api.models.package_list_response import PackageListResponse
from registry_api.models.package_stats import PackageStats
from registry_api.models.package_update_request import PackageUpdateRequest
from registry_api.models.package_version_detail import PackageVersionDetail
from registry_api.models.package_version_list_response import PackageVersionListResponse
from registry_api.models.package_version_spec import PackageVersionSpec
from registry_api.repo.packages import (
    create_package_record,
    delete_package_record,
    get_package_record,
    package_exists,
    search_package_records,
    update_package_record,
)
from registry_api.repo.stats import load_registry_stats
from registry_api.repo.versions import (
    create_version_record,
    delete_version_record,
    get_version_record,
    list_version_records,
    version_exists,
)
from registry_api.services.background import TaskTracker
from registry_api.services.download_accounting import DownloadAccountant
from registry_api.storage import (
    DEFAULT_CONTENT_TYPE,
    ObjectNotFoundError,
    ObjectStore,
    StorageError,
    get_object_store,
    package_object_key,
)

LOGGER = logging.getLogger(__name__)


def _model_errors(exc: ModelValidationError) -> list[dict[str, Any]]:
    return [
        {
            "loc": [str(part) for part in item.get("loc", ())],
            "msg": item.get("msg"),
            "type": item.get("type"),
        }
        for item in exc.errors()
    ]


def _parse_dependencies(value: str | dict | None) -> dict[str, str]:
    if value is None or value == "":
        return {}
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            raise ValidationError("Dependencies must be a JSON object") from exc
    if not isinstance(value, dict):
        raise ValidationError("Dependencies must be a JSON object")
    if not all(isinstance(key, str) and isinstance(item, str) for key, item in value.items()):
        raise ValidationError("Dependencies must map package names to constraint strings")
    return value


def parse_version_spec(
    version: Optional[str],
    description: Optional[str] = None,
    changelog: Optional[str] = None,
    is_prerelease: Optional[bool] = None,
    dependencies: str | dict | None = None,
) -> PackageVersionSpec:
    """Build a validated version spec from loosely typed upload fields."""
    payload = {
        "version": version,
        "description": description or None,
        "changelog": changelog or None,
        "dependencies": _parse_dependencies(dependencies),
        "is_prerelease": bool(is_prerelease),
    }
    try:
        return PackageVersionSpec.model_validate(payload)
    except ModelValidationError as exc:
        raise ValidationError(
            "Invalid version metadata",
            details={"errors": _model_errors(exc)},
        ) from exc


def _total_pages(total: int, page_size: int) -> int:
    return ceil(total / page_size) if total else 0


def _package_detail(record: dict) -> PackageDetail:
    return PackageDetail.from_dict(record)


def _version_detail(record: dict) -> PackageVersionDetail:
    return PackageVersionDetail.from_dict(record)


def _require_owner(record: dict, caller_id: Optional[str], action: str) -> None:
    if not caller_id or record.get("owner_id") != caller_id:
        raise ForbiddenError(f"Only the package owner may {action}")


def _require_visible(record: dict, caller_id: Optional[str]) -> None:
    if not record.get("is_private"):
        return
    if not caller_id or record.get("owner_id") != caller_id:
        raise ForbiddenError("Package is private")


class PackagesService:
    """Coordinates the metadata store and the object store.

    Blocking repository and storage calls run in worker threads. Follow-up
    work that must not delay a response (blob cleanup, download accounting)
    is spawned on a ``TaskTracker`` and can be awaited with :meth:`drain`.
    """

    def __init__(
        self,
        store: Optional[ObjectStore] = None,
        settings: Optional[RegistrySettings] = None,
        tracker: Optional[TaskTracker] = None,
    ) -> None:
        self._store = store
        self._settings = settings
        self._tracker = tracker or TaskTracker()
        self._accountant = DownloadAccountant(self._tracker)
        self._publish_locks: dict[tuple[int, str], list[Any]] = {}

    @property
    def store(self) -> ObjectStore:
        return self._store or get_object_store()

    @property
    def settings(self) -> RegistrySettings:
        return self._settings or get_settings()

    async def drain(self) -> None:
        await self._tracker.drain()

    async def _storage_call(self, func: Callable[..., Any], *args: Any) -> Any:
        try:
            return await asyncio.to_thread(func, *args)
        except ObjectNotFoundError as exc:
            raise StorageUnavailableError("Package artifact is missing from object storage") from exc
        except StorageError as exc:
            raise StorageUnavailableError("Object storage unavailable") from exc

    @contextlib.asynccontextmanager
    async def _publish_lock(self, key: tuple[int, str]) -> AsyncIterator[None]:
        entry = self._publish_locks.get(key)
        if entry is None:
            entry = self._publish_locks[key] = [asyncio.Lock(), 0]
        entry[1] += 1
        try:
            async with entry[0]:
                yield
        finally:
            entry[1] -= 1
            if entry[1] == 0:
                self._publish_locks.pop(key, None)

    def _page_params(self, page: Optional[int], page_size: Optional[int]) -> tuple[int, int]:
        page_value = page if page and page > 0 else 1
        size_value = page_size if page_size and page_size > 0 else self.settings.default_page_size
        return page_value, min(size_value, self.settings.max_page_size)

    async def _load_package(self, name: str, *, include_versions: bool = False) -> dict:
        record = await asyncio.to_thread(get_package_record, name, include_versions=include_versions)
        if not record:
            raise NotFoundError("Package not found", details={"name": name})
        return record

    async def _load_version(self, name: str, version: str) -> dict:
        record = await asyncio.to_thread(get_version_record, name, version)
        if not record:
            raise NotFoundError(
                "Package version not found",
                details={"name": name, "version": version},
            )
        return record

    async def _discard_blob(self, key: str, reason: str) -> None:
        try:
            await asyncio.to_thread(self.store.delete, key)
        except StorageError as exc:
            report_integrity_warning(LOGGER, "Unable to delete artifact", exc=exc, key=key, reason=reason)

    async def _purge_blobs(self, keys: list[str], reason: str) -> None:
        for key in keys:
            await self._discard_blob(key, reason)

    def _schedule_purge(self, keys: list[str], reason: str) -> None:
        if keys:
            self._tracker.spawn(self._purge_blobs(list(keys), reason), name=f"purge-{reason}")

    async def _put_artifact(
        self,
        key: str,
        stream: BinaryIO,
        size: Optional[int],
        metadata: dict[str, Any],
    ) -> Any:
        """Store an artifact under ``key``, surviving cancellation of the caller.

        The worker thread running the upload cannot be interrupted. On
        cancellation the write is awaited to completion while the publish lock
        is still held, the blob is discarded, and the cancellation propagates.
        """
        put = asyncio.ensure_future(
            self._storage_call(self.store.put, key, stream, size, DEFAULT_CONTENT_TYPE, metadata)
        )
        try:
            return await asyncio.shield(put)
        except asyncio.CancelledError:
            cleanup = asyncio.ensure_future(self._settle_cancelled_put(put, key))
            while not cleanup.done():
                with contextlib.suppress(asyncio.CancelledError):
                    await asyncio.shield(cleanup)
            raise

    async def _settle_cancelled_put(self, put: asyncio.Future, key: str) -> None:
        try:
            await put
        except StorageUnavailableError as exc:
            LOGGER.warning("Cancelled upload of %s did not complete: %s", key, exc)
            return
        await self._discard_blob(key, "cancelled-upload")

    async def create_package(
        self,
        request: PackageCreateRequest,
        owner_id: str,
        owner_name: Optional[str] = None,
    ) -> PackageDetail:
        if await asyncio.to_thread(package_exists, request.name):
            raise ConflictError("Package already exists", details={"name": request.name})
        record = await asyncio.to_thread(
            create_package_record,
            name=request.name,
            description=request.description,
            author=request.author,
            homepage=request.homepage,
            repository=request.repository,
            license=request.license,
            keywords=request.keywords,
            is_private=request.is_private,
            owner_id=owner_id,
            owner_name=owner_name,
        )
        LOGGER.info("Package created: %s (owner=%s)", request.name, owner_id)
        return _package_detail(record)

    async def get_package(self, name: str) -> PackageDetail:
        record = await self._load_package(name, include_versions=True)
        return _package_detail(record)

    async def update_package(
        self,
        name: str,
        request: PackageUpdateRequest,
        caller_id: Optional[str],
    ) -> PackageDetail:
        record = await self._load_package(name, include_versions=True)
        _require_owner(record, caller_id, "update it")
        updates = request.provided_fields()
        if not updates:
            return _package_detail(record)
        updated = await asyncio.to_thread(update_package_record, name, caller_id, updates)
        if updated is None:
            # Deleted between the ownership check and the update.
            raise NotFoundError("Package not found", details={"name": name})
        LOGGER.info("Package updated: %s (fields=%s)", name, sorted(updates))
        return _package_detail(updated)

    async def delete_package(self, name: str, caller_id: Optional[str]) -> None:
        record = await self._load_package(name)
        _require_owner(record, caller_id, "delete it")
        keys = await asyncio.to_thread(delete_package_record, record["id"])
        if keys is None:
            raise NotFoundError("Package not found", details={"name": name})
        LOGGER.info("Package deleted: %s (%d versions)", name, len(keys))
        self._schedule_purge(keys, "package-delete")

    async def upload_version(
        self,
        name: str,
        spec: PackageVersionSpec,
        stream: BinaryIO,
        size: Optional[int],
        uploader_id: str,
        uploader_name: Optional[str] = None,
    ) -> PackageVersionDetail:
        package = await self._load_package(name)
        _require_owner(package, uploader_id, "publish versions")
        if size is not None and size < 0:
            raise ValidationError("Declared size must not be negative")

        key = package_object_key(name, spec.version)
        async with self._publish_lock((package["id"], spec.version)):
            if await asyncio.to_thread(version_exists, package["id"], spec.version):
                raise ConflictError(
                    "Version already exists",
                    details={"name": name, "version": spec.version},
                )
            info = await self._put_artifact(
                key,
                stream,
                size,
                {"uploader-id": uploader_id, "description": spec.description},
            )
            if size is not None and info.size != size:
                await self._discard_blob(key, "size-mismatch")
                raise ValidationError(
                    "Uploaded size does not match the declared size",
                    details={"declared": size, "stored": info.size},
                )
            try:
                record = await asyncio.to_thread(
                    create_version_record,
                    package_id=package["id"],
                    version=spec.version,
                    description=spec.description,
                    changelog=spec.changelog,
                    dependencies=spec.dependencies,
                    file_size=info.size,
                    file_hash=info.sha256,
                    storage_key=key,
                    is_prerelease=spec.is_prerelease,
                    uploader_id=uploader_id,
                    uploader_name=uploader_name,
                )
            except ConflictError:
                # Another process committed this version first; the key is shared with it.
                report_integrity_warning(
                    LOGGER,
                    "Publish race lost; artifact key is shared with the committed version",
                    key=key,
                )
                raise
            except Exception:
                await self._discard_blob(key, "compensation")
                raise
        LOGGER.info(
            "Version published: %s@%s (size=%d, sha256=%s)",
            name,
            spec.version,
            info.size,
            info.sha256,
        )
        return _version_detail(record)

    async def list_versions(
        self,
        name: str,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> PackageVersionListResponse:
        package = await self._load_package(name)
        page_value, size_value = self._page_params(page, page_size)
        records, total = await asyncio.to_thread(
            list_version_records,
            package["id"],
            page=page_value,
            page_size=size_value,
        )
        return PackageVersionListResponse(
            versions=[_version_detail(record) for record in records],
            total=total,
            page=page_value,
            page_size=size_value,
            total_pages=_total_pages(total, size_value),
        )

    async def download_version(
        self,
        name: str,
        version: str,
        caller_id: Optional[str],
        source_addr: Optional[str] = None,
        agent: Optional[str] = None,
    ) -> tuple[Any, PackageVersionDetail]:
        """Open the artifact stream and schedule accounting for it.

        The caller owns the returned body and must close it.
        """
        record = await self._load_version(name, version)
        _require_visible(record, caller_id)
        body, _ = await self._storage_call(self.store.get, record["storage_key"])
        self._accountant.schedule(record["id"], caller_id or None, source_addr, agent)
        return body, _version_detail(record)

    async def get_download_url(
        self,
        name: str,
        version: str,
        caller_id: Optional[str],
    ) -> DownloadUrlResponse:
        record = await self._load_version(name, version)
        _require_visible(record, caller_id)
        ttl = self.settings.presigned_url_ttl_seconds
        url = await self._storage_call(
            self.store.presigned_url,
            record["storage_key"],
            timedelta(seconds=ttl),
        )
        return DownloadUrlResponse(download_url=url, expires_in=ttl)

    async def delete_version(self, name: str, version: str, caller_id: Optional[str]) -> None:
        record = await self._load_version(name, version)
        _require_owner(record, caller_id, "delete versions")
        key = await asyncio.to_thread(delete_version_record, record["id"])
        if key is None:
            raise NotFoundError(
                "Package version not found",
                details={"name": name, "version": version},
            )
        LOGGER.info("Version deleted: %s@%s", name, version)
        self._schedule_purge([key], "version-delete")

    async def search_packages(
        self,
        query: Optional[str] = None,
        author: Optional[str] = None,
        keywords: Optional[str] = None,
        license: Optional[str] = None,
        is_private: Optional[bool] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> PackageListResponse:
        page_value, size_value = self._page_params(page, page_size)
        records, total = await asyncio.to_thread(
            search_package_records,
            query=query,
            author=author,
            keywords=keywords,
            license=license,
            is_private=is_private,
            page=page_value,
            page_size=size_value,
        )
        return PackageListResponse(
            packages=[_package_detail(record) for record in records],
            total=total,
            page=page_value,
            page_size=size_value,
            total_pages=_total_pages(total, size_value),
        )

    async def get_stats(self) -> PackageStats:
        settings = self.settings
        since = datetime.now(timezone.utc) - timedelta(days=settings.recent_downloads_days)
        stats = await asyncio.to_thread(load_registry_stats, settings.stats_top_n, since)
        return PackageStats.from_dict(stats)
