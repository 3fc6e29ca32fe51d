from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import delete, func, select

from registry_api.db.models import (
    RegistryPackage,
    RegistryPackageDownload,
    RegistryPackageVersion,
)
from registry_api.repo.common import _now, session_scope
from registry_api.repo.records import _version_record_from_model


def get_version_record(name: str, version: str) -> dict[str, Any] | None:
    with session_scope() as session:
        row = session.execute(
            select(RegistryPackageVersion, RegistryPackage)
            .join(RegistryPackage, RegistryPackageVersion.package_id == RegistryPackage.id)
            .where(
                RegistryPackage.name == name,
                RegistryPackage.deleted_at.is_(None),
                RegistryPackageVersion.version == version,
            )
        ).first()
        if not row:
            return None
        return _version_record_from_model(row[0], row[1])


def version_exists(package_id: int, version: str) -> bool:
    with session_scope() as session:
        found = session.execute(
            select(RegistryPackageVersion.id).where(
                RegistryPackageVersion.package_id == package_id,
                RegistryPackageVersion.version == version,
            )
        ).first()
        return found is not None


def create_version_record(
    *,
    package_id: int,
    version: str,
    description: Optional[str],
    changelog: Optional[str],
    dependencies: Optional[dict[str, str]],
    file_size: int,
    file_hash: str,
    storage_key: str,
    is_prerelease: bool,
    uploader_id: str,
    uploader_name: Optional[str],
) -> dict[str, Any]:
    with session_scope("Version already exists") as session:
        package = session.get(RegistryPackage, package_id)
        now = _now()
        record = RegistryPackageVersion(
            package_id=package_id,
            version=version,
            description=description,
            changelog=changelog,
            dependencies=dict(dependencies or {}),
            file_size=file_size,
            file_hash=file_hash,
            storage_key=storage_key,
            download_count=0,
            is_prerelease=is_prerelease,
            uploader_id=uploader_id,
            uploader_name=uploader_name,
            created_at=now,
            updated_at=now,
        )
        session.add(record)
        session.commit()
        session.refresh(record)
        return _version_record_from_model(record, package)


def list_version_records(
    package_id: int,
    *,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[dict[str, Any]], int]:
    with session_scope() as session:
        package = session.get(RegistryPackage, package_id)
        if package is None:
            return [], 0
        total = session.execute(
            select(func.count())
            .select_from(RegistryPackageVersion)
            .where(RegistryPackageVersion.package_id == package_id)
        ).scalar_one()
        versions = session.execute(
            select(RegistryPackageVersion)
            .where(RegistryPackageVersion.package_id == package_id)
            .order_by(RegistryPackageVersion.created_at.desc(), RegistryPackageVersion.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        ).scalars().all()
        return [_version_record_from_model(item, package) for item in versions], int(total)


def delete_version_record(version_id: int) -> str | None:
    """Delete a version and its download rows; return the version's storage key."""
    with session_scope() as session:
        storage_key = session.execute(
            select(RegistryPackageVersion.storage_key).where(RegistryPackageVersion.id == version_id)
        ).scalar_one_or_none()
        if storage_key is None:
            return None
        session.execute(
            delete(RegistryPackageDownload)
            .where(RegistryPackageDownload.package_version_id == version_id)
            .execution_options(synchronize_session=False)
        )
        session.execute(
            delete(RegistryPackageVersion)
            .where(RegistryPackageVersion.id == version_id)
            .execution_options(synchronize_session=False)
        )
        session.commit()
        return storage_key
