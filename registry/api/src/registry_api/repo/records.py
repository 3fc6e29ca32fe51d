from __future__ import annotations

from typing import Any, Optional

from registry_api.db.models import RegistryPackage, RegistryPackageVersion


def _package_record_from_model(
    package: RegistryPackage,
    *,
    versions: Optional[list[dict[str, Any]]] = None,
) -> dict[str, Any]:
    record = {
        "id": package.id,
        "name": package.name,
        "description": package.description,
        "author": package.author,
        "homepage": package.homepage,
        "repository": package.repository,
        "license": package.license,
        "keywords": list(package.keywords or []),
        "is_private": bool(package.is_private),
        "owner_id": package.owner_id,
        "owner_name": package.owner_name,
        "created_at": package.created_at,
        "updated_at": package.updated_at,
    }
    if versions is not None:
        record["versions"] = versions
    return record


def _version_record_from_model(
    version: RegistryPackageVersion,
    package: RegistryPackage,
) -> dict[str, Any]:
    return {
        "id": version.id,
        "package_id": package.id,
        "package_name": package.name,
        "version": version.version,
        "description": version.description,
        "changelog": version.changelog,
        "dependencies": dict(version.dependencies or {}),
        "file_size": version.file_size,
        "file_hash": version.file_hash,
        "storage_key": version.storage_key,
        "download_count": version.download_count or 0,
        "is_prerelease": bool(version.is_prerelease),
        "uploader_id": version.uploader_id,
        "uploader_name": version.uploader_name,
        "created_at": version.created_at,
        "updated_at": version.updated_at,
        # Visibility and ownership come from the parent package.
        "is_private": bool(package.is_private),
        "owner_id": package.owner_id,
    }
