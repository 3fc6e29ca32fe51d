"""Object storage adapter for package artifacts (S3 / MinIO)."""

from __future__ import annotations

import hashlib
import logging
import math
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, BinaryIO, Optional
from urllib.parse import quote

import boto3
from boto3.s3.transfer import TransferConfig
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from registry_api.config import RegistrySettings, get_settings

LOGGER = logging.getLogger(__name__)

KEY_PREFIX = "packages"
KEY_EXTENSION = ".pkg"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

_SEPARATOR = "/"
_MISSING_CODES = {"404", "NoSuchKey", "NotFound", "NoSuchBucket"}
_DEFAULT_CHUNK_SIZE = 8 * 1024 * 1024
_MAX_PARTS = 10_000
_METADATA_SAFE = " -_.:/@,;=+()"


class StorageError(Exception):
    """The object store rejected a request or could not be reached."""


class ObjectNotFoundError(StorageError):
    pass


@dataclass
class ObjectInfo:
    key: str
    size: int
    etag: Optional[str] = None
    content_type: Optional[str] = None
    last_modified: Optional[datetime] = None
    sha256: Optional[str] = None
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass
class ObjectEntry:
    key: str
    size: int
    etag: Optional[str]
    last_modified: Optional[datetime]
    package_name: Optional[str]
    version: Optional[str]


def _safe_component(value: str) -> str:
    return value.replace(_SEPARATOR, "_")


def package_object_key(name: str, version: str) -> str:
    safe_name = _safe_component(name)
    safe_version = _safe_component(version)
    return f"{KEY_PREFIX}/{safe_name}/{safe_version}/{safe_name}-{safe_version}{KEY_EXTENSION}"


def package_key_prefix(name: str) -> str:
    return f"{KEY_PREFIX}/{_safe_component(name)}/"


def parse_object_key(key: str) -> tuple[str, str] | None:
    """Recover (sanitized name, sanitized version) from an object key."""
    parts = key.split("/")
    if len(parts) < 4 or parts[0] != KEY_PREFIX:
        return None
    name, version = parts[1], parts[2]
    if not name or not version:
        return None
    return name, version


class HashingReader:
    """Read-only, non-seekable wrapper that hashes bytes as they stream through.

    Being non-seekable keeps the transfer manager on its sequential read path,
    so every byte is seen exactly once and in order.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._hasher = hashlib.sha256()
        self.bytes_read = 0

    def read(self, size: int = -1) -> bytes:
        chunk = self._stream.read(size)
        if chunk:
            self._hasher.update(chunk)
            self.bytes_read += len(chunk)
        return chunk

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return False

    def hexdigest(self) -> str:
        return self._hasher.hexdigest()


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


def _metadata_value(value: Any) -> str:
    # S3 user metadata travels as HTTP headers.
    return quote(str(value), safe=_METADATA_SAFE)


def _ttl_seconds(ttl: timedelta | int) -> int:
    if isinstance(ttl, timedelta):
        return int(ttl.total_seconds())
    return int(ttl)


def _transfer_config(size: Optional[int]) -> TransferConfig:
    chunk_size = _DEFAULT_CHUNK_SIZE
    if size and size > chunk_size * _MAX_PARTS:
        chunk_size = math.ceil(size / _MAX_PARTS)
    return TransferConfig(multipart_chunksize=chunk_size)


class ObjectStore:
    """Stores opaque artifacts under deterministic keys in a single bucket."""

    def __init__(self, client: Any, bucket: str, *, region: Optional[str] = None) -> None:
        self._client = client
        self._bucket = bucket
        self._region = region
        self._bucket_ready = False
        self._bucket_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: RegistrySettings) -> "ObjectStore":
        client = boto3.client(
            "s3",
            endpoint_url=settings.s3_endpoint_url,
            aws_access_key_id=settings.s3_access_key,
            aws_secret_access_key=settings.s3_secret_key,
            region_name=settings.s3_region,
            use_ssl=settings.s3_use_ssl,
            config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
        )
        return cls(client, settings.s3_bucket, region=settings.s3_region)

    @property
    def bucket(self) -> str:
        return self._bucket

    def _ensure_bucket(self) -> None:
        if self._bucket_ready:
            return
        with self._bucket_lock:
            if self._bucket_ready:
                return
            try:
                self._client.head_bucket(Bucket=self._bucket)
            except ClientError as exc:
                if _error_code(exc) not in _MISSING_CODES:
                    raise StorageError(f"Unable to check bucket {self._bucket}: {exc}") from exc
                self._create_bucket()
            except BotoCoreError as exc:
                raise StorageError(f"Unable to reach object store: {exc}") from exc
            self._bucket_ready = True

    def _create_bucket(self) -> None:
        params: dict[str, Any] = {"Bucket": self._bucket}
        if self._region and self._region != "us-east-1":
            params["CreateBucketConfiguration"] = {"LocationConstraint": self._region}
        try:
            self._client.create_bucket(**params)
        except ClientError as exc:
            if _error_code(exc) not in {"BucketAlreadyOwnedByYou", "BucketAlreadyExists"}:
                raise StorageError(f"Unable to create bucket {self._bucket}: {exc}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"Unable to create bucket {self._bucket}: {exc}") from exc
        LOGGER.info("Created bucket: %s", self._bucket)

    def _head(self, key: str) -> ObjectInfo:
        try:
            response = self._client.head_object(Bucket=self._bucket, Key=key)
        except ClientError as exc:
            if _error_code(exc) in _MISSING_CODES:
                raise ObjectNotFoundError(f"Object not found: {key}") from exc
            raise StorageError(f"Unable to stat object {key}: {exc}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"Unable to stat object {key}: {exc}") from exc
        return ObjectInfo(
            key=key,
            size=int(response.get("ContentLength", 0)),
            etag=(response.get("ETag") or "").strip('"') or None,
            content_type=response.get("ContentType"),
            last_modified=response.get("LastModified"),
            metadata=dict(response.get("Metadata") or {}),
        )

    def put(
        self,
        key: str,
        stream: BinaryIO,
        size: Optional[int] = None,
        content_type: str = DEFAULT_CONTENT_TYPE,
        metadata: Optional[dict[str, Any]] = None,
    ) -> ObjectInfo:
        """Stream ``stream`` to ``key`` and return size, ETag and SHA-256.

        The object only becomes readable once the upload completes; failed
        multipart uploads are aborted by the transfer manager.
        """
        self._ensure_bucket()
        parsed = parse_object_key(key)
        user_metadata = {
            "upload-time": datetime.now(timezone.utc).isoformat(),
        }
        if parsed:
            user_metadata["package-name"] = parsed[0]
            user_metadata["package-version"] = parsed[1]
        for meta_key, meta_value in (metadata or {}).items():
            if meta_value is not None:
                user_metadata[meta_key] = meta_value
        reader = HashingReader(stream)
        try:
            self._client.upload_fileobj(
                reader,
                self._bucket,
                key,
                ExtraArgs={
                    "ContentType": content_type or DEFAULT_CONTENT_TYPE,
                    "Metadata": {k: _metadata_value(v) for k, v in user_metadata.items()},
                },
                Config=_transfer_config(size),
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"Unable to upload object {key}: {exc}") from exc
        info = self._head(key)
        info.sha256 = reader.hexdigest()
        if info.size != reader.bytes_read:
            LOGGER.warning(
                "Object %s stored %d bytes but %d were streamed",
                key,
                info.size,
                reader.bytes_read,
            )
        LOGGER.info("Object uploaded: %s (size: %d bytes)", key, info.size)
        return info

    def get(self, key: str) -> tuple[Any, ObjectInfo]:
        """Return the object body (a closeable stream) and its metadata."""
        self._ensure_bucket()
        info = self._head(key)
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
        except ClientError as exc:
            if _error_code(exc) in _MISSING_CODES:
                raise ObjectNotFoundError(f"Object not found: {key}") from exc
            raise StorageError(f"Unable to download object {key}: {exc}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"Unable to download object {key}: {exc}") from exc
        return response["Body"], info

    def stat(self, key: str) -> ObjectInfo:
        self._ensure_bucket()
        return self._head(key)

    def exists(self, key: str) -> bool:
        try:
            self.stat(key)
        except ObjectNotFoundError:
            return False
        return True

    def delete(self, key: str) -> None:
        self._ensure_bucket()
        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"Unable to delete object {key}: {exc}") from exc
        LOGGER.info("Object deleted: %s", key)

    def presigned_url(self, key: str, ttl: timedelta | int) -> str:
        self._ensure_bucket()
        try:
            return self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self._bucket, "Key": key},
                ExpiresIn=_ttl_seconds(ttl),
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"Unable to presign object {key}: {exc}") from exc

    def list_by_prefix(self, prefix: str) -> list[ObjectEntry]:
        self._ensure_bucket()
        entries: list[ObjectEntry] = []
        paginator = self._client.get_paginator("list_objects_v2")
        try:
            for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix):
                for item in page.get("Contents", []):
                    parsed = parse_object_key(item["Key"])
                    entries.append(
                        ObjectEntry(
                            key=item["Key"],
                            size=int(item.get("Size", 0)),
                            etag=(item.get("ETag") or "").strip('"') or None,
                            last_modified=item.get("LastModified"),
                            package_name=parsed[0] if parsed else None,
                            version=parsed[1] if parsed else None,
                        )
                    )
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"Unable to list objects under {prefix}: {exc}") from exc
        return entries

    def list_package_versions(self, name: str) -> list[ObjectEntry]:
        return [
            entry
            for entry in self.list_by_prefix(package_key_prefix(name))
            if entry.version is not None
        ]

    def list_all_packages(self) -> dict[str, list[ObjectEntry]]:
        packages: dict[str, list[ObjectEntry]] = {}
        for entry in self.list_by_prefix(f"{KEY_PREFIX}/"):
            if entry.package_name is None or entry.version is None:
                continue
            packages.setdefault(entry.package_name, []).append(entry)
        return packages


@lru_cache()
def get_object_store() -> ObjectStore:
    """Return the process-wide object store built from settings."""

    return ObjectStore.from_settings(get_settings())
