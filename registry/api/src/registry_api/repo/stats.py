from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import func, select

from registry_api.db.models import (
    RegistryPackage,
    RegistryPackageDownload,
    RegistryPackageVersion,
)
from registry_api.repo.common import session_scope
from registry_api.repo.records import _package_record_from_model, _version_record_from_model


def load_registry_stats(top_n: int, since: datetime) -> dict[str, Any]:
    """Aggregate counters and top-N lists over live packages."""
    live = RegistryPackage.deleted_at.is_(None)
    with session_scope() as session:
        total_packages = session.execute(
            select(func.count()).select_from(RegistryPackage).where(live)
        ).scalar_one()
        total_versions = session.execute(
            select(func.count())
            .select_from(RegistryPackageVersion)
            .join(RegistryPackage, RegistryPackageVersion.package_id == RegistryPackage.id)
            .where(live)
        ).scalar_one()
        total_downloads = session.execute(
            select(func.coalesce(func.sum(RegistryPackageVersion.download_count), 0))
            .select_from(RegistryPackageVersion)
            .join(RegistryPackage, RegistryPackageVersion.package_id == RegistryPackage.id)
            .where(live)
        ).scalar_one()
        recent_downloads = session.execute(
            select(func.count())
            .select_from(RegistryPackageDownload)
            .join(
                RegistryPackageVersion,
                RegistryPackageDownload.package_version_id == RegistryPackageVersion.id,
            )
            .join(RegistryPackage, RegistryPackageVersion.package_id == RegistryPackage.id)
            .where(live, RegistryPackageDownload.downloaded_at >= since)
        ).scalar_one()

        downloads_sum = func.coalesce(func.sum(RegistryPackageVersion.download_count), 0).label(
            "total_downloads"
        )
        popular_rows = session.execute(
            select(RegistryPackage, downloads_sum)
            .join(RegistryPackageVersion, RegistryPackageVersion.package_id == RegistryPackage.id)
            .where(live)
            .group_by(RegistryPackage.id)
            .order_by(downloads_sum.desc(), RegistryPackage.id.asc())
            .limit(top_n)
        ).all()
        popular_packages = []
        for package, downloads in popular_rows:
            record = _package_record_from_model(package)
            record["total_downloads"] = int(downloads or 0)
            popular_packages.append(record)

        recent_packages = session.execute(
            select(RegistryPackage)
            .where(live)
            .order_by(RegistryPackage.created_at.desc(), RegistryPackage.id.desc())
            .limit(top_n)
        ).scalars().all()

        recent_version_rows = session.execute(
            select(RegistryPackageVersion, RegistryPackage)
            .join(RegistryPackage, RegistryPackageVersion.package_id == RegistryPackage.id)
            .where(live)
            .order_by(RegistryPackageVersion.created_at.desc(), RegistryPackageVersion.id.desc())
            .limit(top_n)
        ).all()

        return {
            "total_packages": int(total_packages),
            "total_versions": int(total_versions),
            "total_downloads": int(total_downloads or 0),
            "recent_downloads": int(recent_downloads),
            "popular_packages": popular_packages,
            "recent_packages": [_package_record_from_model(item) for item in recent_packages],
            "recent_versions": [
                _version_record_from_model(version, package)
                for version, package in recent_version_rows
            ],
        }
