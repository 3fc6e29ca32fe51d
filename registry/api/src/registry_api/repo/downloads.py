from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import func, select, update

from registry_api.db.models import RegistryPackageDownload, RegistryPackageVersion
from registry_api.errors import NotFoundError
from registry_api.repo.common import _now, session_scope

_IP_MAX_LENGTH = 45
_AGENT_MAX_LENGTH = 500


def _clip(value: Optional[str], limit: int) -> Optional[str]:
    if value is None:
        return None
    return value[:limit]


def record_download(
    version_id: int,
    user_id: Optional[str],
    ip_address: Optional[str],
    user_agent: Optional[str],
) -> None:
    """Append an audit row and bump the version counter in one transaction."""
    with session_scope() as session:
        result = session.execute(
            update(RegistryPackageVersion)
            .where(RegistryPackageVersion.id == version_id)
            .values(download_count=RegistryPackageVersion.download_count + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            session.rollback()
            raise NotFoundError("Package version not found")
        session.add(
            RegistryPackageDownload(
                package_version_id=version_id,
                user_id=user_id,
                ip_address=_clip(ip_address, _IP_MAX_LENGTH),
                user_agent=_clip(user_agent, _AGENT_MAX_LENGTH),
                downloaded_at=_now(),
            )
        )
        session.commit()


def list_download_records(version_id: int, *, limit: int = 100) -> list[dict[str, Any]]:
    with session_scope() as session:
        rows = session.execute(
            select(RegistryPackageDownload)
            .where(RegistryPackageDownload.package_version_id == version_id)
            .order_by(RegistryPackageDownload.downloaded_at.desc(), RegistryPackageDownload.id.desc())
            .limit(limit)
        ).scalars().all()
        return [
            {
                "id": row.id,
                "package_version_id": row.package_version_id,
                "user_id": row.user_id,
                "ip_address": row.ip_address,
                "user_agent": row.user_agent,
                "downloaded_at": row.downloaded_at,
            }
            for row in rows
        ]


def count_download_records(version_id: Optional[int] = None) -> int:
    with session_scope() as session:
        stmt = select(func.count()).select_from(RegistryPackageDownload)
        if version_id is not None:
            stmt = stmt.where(RegistryPackageDownload.package_version_id == version_id)
        return int(session.execute(stmt).scalar_one())
