from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import delete, func, or_, select, update

from registry_api.db.models import (
    RegistryPackage,
    RegistryPackageDownload,
    RegistryPackageKeyword,
    RegistryPackageVersion,
)
from registry_api.errors import ConflictError
from registry_api.repo.common import _contains_pattern, _now, session_scope
from registry_api.repo.records import _package_record_from_model, _version_record_from_model

UPDATABLE_FIELDS = frozenset(
    {
        "description",
        "author",
        "homepage",
        "repository",
        "license",
        "keywords",
        "is_private",
    }
)


def _active_package_stmt(name: str):
    return select(RegistryPackage).where(
        RegistryPackage.name == name,
        RegistryPackage.deleted_at.is_(None),
    )


def _load_versions(session, package: RegistryPackage) -> list[dict[str, Any]]:
    versions = session.execute(
        select(RegistryPackageVersion)
        .where(RegistryPackageVersion.package_id == package.id)
        .order_by(RegistryPackageVersion.created_at.desc(), RegistryPackageVersion.id.desc())
    ).scalars().all()
    return [_version_record_from_model(version, package) for version in versions]


def _search_keywords(keywords: Optional[list[str]]) -> list[str]:
    values: list[str] = []
    for keyword in keywords or []:
        value = keyword.strip().lower()
        if value and value not in values:
            values.append(value)
    return values


def _replace_keywords(session, package_id: int, keywords: Optional[list[str]]) -> None:
    session.execute(
        delete(RegistryPackageKeyword)
        .where(RegistryPackageKeyword.package_id == package_id)
        .execution_options(synchronize_session=False)
    )
    session.add_all(
        RegistryPackageKeyword(package_id=package_id, keyword=value)
        for value in _search_keywords(keywords)
    )


def _keyword_match(pattern: str):
    return (
        select(RegistryPackageKeyword.id)
        .where(
            RegistryPackageKeyword.package_id == RegistryPackage.id,
            RegistryPackageKeyword.keyword.like(pattern, escape="\\"),
        )
        .exists()
    )


def get_package_record(name: str, *, include_versions: bool = False) -> dict[str, Any] | None:
    with session_scope() as session:
        package = session.execute(_active_package_stmt(name)).scalar_one_or_none()
        if not package:
            return None
        versions = _load_versions(session, package) if include_versions else None
        return _package_record_from_model(package, versions=versions)


def package_exists(name: str) -> bool:
    with session_scope() as session:
        found = session.execute(
            select(RegistryPackage.id).where(
                RegistryPackage.name == name,
                RegistryPackage.deleted_at.is_(None),
            )
        ).first()
        return found is not None


def create_package_record(
    *,
    name: str,
    description: str | None,
    author: str | None,
    homepage: str | None,
    repository: str | None,
    license: str | None,
    keywords: list[str] | None,
    is_private: bool,
    owner_id: str,
    owner_name: str | None,
) -> dict[str, Any]:
    with session_scope("Package already exists") as session:
        if session.execute(_active_package_stmt(name)).scalar_one_or_none():
            raise ConflictError("Package already exists")
        now = _now()
        package = RegistryPackage(
            name=name,
            description=description,
            author=author,
            homepage=homepage,
            repository=repository,
            license=license,
            keywords=list(keywords or []),
            is_private=is_private,
            owner_id=owner_id,
            owner_name=owner_name,
            created_at=now,
            updated_at=now,
            deleted_at=None,
        )
        session.add(package)
        session.flush()
        _replace_keywords(session, package.id, package.keywords)
        session.commit()
        session.refresh(package)
        return _package_record_from_model(package, versions=[])


def update_package_record(
    name: str,
    owner_id: str,
    updates: dict[str, Any],
) -> dict[str, Any] | None:
    """Apply ``updates`` if ``owner_id`` owns the live package ``name``.

    Returns ``None`` when no row matched (absent, deleted or foreign owner).
    """
    values = {key: value for key, value in updates.items() if key in UPDATABLE_FIELDS}
    with session_scope() as session:
        values["updated_at"] = _now()
        result = session.execute(
            update(RegistryPackage)
            .where(
                RegistryPackage.name == name,
                RegistryPackage.owner_id == owner_id,
                RegistryPackage.deleted_at.is_(None),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            session.rollback()
            return None
        package = session.execute(_active_package_stmt(name)).scalar_one()
        if "keywords" in values:
            _replace_keywords(session, package.id, values["keywords"])
        session.commit()
        return _package_record_from_model(package, versions=_load_versions(session, package))


def delete_package_record(package_id: int) -> list[str] | None:
    """Remove a package's versions and downloads and soft-delete the package.

    Everything happens in one transaction. Returns the storage keys of the
    removed versions, or ``None`` if the package was already gone.
    """
    with session_scope() as session:
        rows = session.execute(
            select(RegistryPackageVersion.id, RegistryPackageVersion.storage_key).where(
                RegistryPackageVersion.package_id == package_id
            )
        ).all()
        version_ids = [row.id for row in rows]
        if version_ids:
            session.execute(
                delete(RegistryPackageDownload)
                .where(RegistryPackageDownload.package_version_id.in_(version_ids))
                .execution_options(synchronize_session=False)
            )
            session.execute(
                delete(RegistryPackageVersion)
                .where(RegistryPackageVersion.id.in_(version_ids))
                .execution_options(synchronize_session=False)
            )
        now = _now()
        result = session.execute(
            update(RegistryPackage)
            .where(
                RegistryPackage.id == package_id,
                RegistryPackage.deleted_at.is_(None),
            )
            .values(deleted_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            session.rollback()
            return None
        _replace_keywords(session, package_id, None)
        session.commit()
        return [row.storage_key for row in rows]


def search_package_records(
    *,
    query: Optional[str] = None,
    author: Optional[str] = None,
    keywords: Optional[str] = None,
    license: Optional[str] = None,
    is_private: Optional[bool] = None,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[dict[str, Any]], int]:
    conditions = [RegistryPackage.deleted_at.is_(None)]
    if query:
        pattern = _contains_pattern(query)
        conditions.append(
            or_(
                func.lower(RegistryPackage.name).like(pattern, escape="\\"),
                func.lower(RegistryPackage.description).like(pattern, escape="\\"),
                func.lower(RegistryPackage.author).like(pattern, escape="\\"),
                _keyword_match(pattern),
            )
        )
    if author:
        conditions.append(
            func.lower(RegistryPackage.author).like(_contains_pattern(author), escape="\\")
        )
    if keywords:
        # Each stored keyword is matched on its own.
        conditions.append(_keyword_match(_contains_pattern(keywords)))
    if license:
        conditions.append(RegistryPackage.license == license)
    if is_private is not None:
        conditions.append(RegistryPackage.is_private.is_(is_private))

    with session_scope() as session:
        total = session.execute(
            select(func.count()).select_from(RegistryPackage).where(*conditions)
        ).scalar_one()
        packages = session.execute(
            select(RegistryPackage)
            .where(*conditions)
            .order_by(RegistryPackage.created_at.desc(), RegistryPackage.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        ).scalars().all()
        return [_package_record_from_model(package) for package in packages], int(total)
