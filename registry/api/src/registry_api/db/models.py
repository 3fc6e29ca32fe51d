"""SQLAlchemy models for registry persistence."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RegistryPackage(Base):
    __tablename__ = "registry_packages"
    __table_args__ = (
        # Names are unique among live packages; soft-deleted rows keep theirs.
        Index(
            "uq_registry_packages_name_active",
            "name",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
        Index("ix_registry_packages_owner_id", "owner_id"),
        Index("ix_registry_packages_created_at", "created_at"),
        Index("ix_registry_packages_deleted_at", "deleted_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100))
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    author: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    homepage: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    repository: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    license: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    keywords: Mapped[Optional[list[str]]] = mapped_column(JSON, nullable=True)
    is_private: Mapped[bool] = mapped_column(Boolean, default=False)
    owner_id: Mapped[str] = mapped_column(String(64))
    owner_name: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    versions: Mapped[list["RegistryPackageVersion"]] = relationship(
        "RegistryPackageVersion",
        back_populates="package",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class RegistryPackageVersion(Base):
    __tablename__ = "registry_package_versions"
    __table_args__ = (
        UniqueConstraint("package_id", "version", name="uq_registry_package_version"),
        Index("ix_registry_package_versions_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    package_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("registry_packages.id", ondelete="CASCADE"),
        index=True,
    )
    version: Mapped[str] = mapped_column(String(50))
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    changelog: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    dependencies: Mapped[Optional[dict[str, str]]] = mapped_column(JSON, nullable=True)
    file_size: Mapped[int] = mapped_column(BigInteger)
    file_hash: Mapped[str] = mapped_column(String(64))
    storage_key: Mapped[str] = mapped_column(String(255))
    download_count: Mapped[int] = mapped_column(BigInteger, default=0)
    is_prerelease: Mapped[bool] = mapped_column(Boolean, default=False)
    uploader_id: Mapped[str] = mapped_column(String(64))
    uploader_name: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)

    package: Mapped[RegistryPackage] = relationship("RegistryPackage", back_populates="versions")
    downloads: Mapped[list["RegistryPackageDownload"]] = relationship(
        "RegistryPackageDownload",
        back_populates="package_version",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class RegistryPackageDownload(Base):
    __tablename__ = "registry_package_downloads"
    __table_args__ = (
        Index("ix_registry_package_downloads_downloaded_at", "downloaded_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    package_version_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("registry_package_versions.id", ondelete="CASCADE"),
        index=True,
    )
    user_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    downloaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)

    package_version: Mapped[RegistryPackageVersion] = relationship(
        "RegistryPackageVersion",
        back_populates="downloads",
    )


class RegistryPackageKeyword(Base):
    """Lower-cased copy of a package keyword, one row per element, for search."""

    __tablename__ = "registry_package_keywords"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    package_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("registry_packages.id", ondelete="CASCADE"),
        index=True,
    )
    keyword: Mapped[str] = mapped_column(Text)
