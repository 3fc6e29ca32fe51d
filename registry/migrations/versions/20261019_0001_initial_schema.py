"""Initial registry schema."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "registry_packages",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("author", sa.String(length=100), nullable=True),
        sa.Column("homepage", sa.String(length=255), nullable=True),
        sa.Column("repository", sa.String(length=255), nullable=True),
        sa.Column("license", sa.String(length=50), nullable=True),
        sa.Column("keywords", sa.JSON(), nullable=True),
        sa.Column("is_private", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("owner_id", sa.String(length=64), nullable=False),
        sa.Column("owner_name", sa.String(length=128), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "uq_registry_packages_name_active",
        "registry_packages",
        ["name"],
        unique=True,
        sqlite_where=sa.text("deleted_at IS NULL"),
        postgresql_where=sa.text("deleted_at IS NULL"),
    )
    op.create_index("ix_registry_packages_owner_id", "registry_packages", ["owner_id"])
    op.create_index("ix_registry_packages_created_at", "registry_packages", ["created_at"])
    op.create_index("ix_registry_packages_deleted_at", "registry_packages", ["deleted_at"])

    op.create_table(
        "registry_package_versions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("package_id", sa.Integer(), nullable=False),
        sa.Column("version", sa.String(length=50), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("changelog", sa.Text(), nullable=True),
        sa.Column("dependencies", sa.JSON(), nullable=True),
        sa.Column("file_size", sa.BigInteger(), nullable=False),
        sa.Column("file_hash", sa.String(length=64), nullable=False),
        sa.Column("storage_key", sa.String(length=255), nullable=False),
        sa.Column("download_count", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("is_prerelease", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("uploader_id", sa.String(length=64), nullable=False),
        sa.Column("uploader_name", sa.String(length=128), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.ForeignKeyConstraint(
            ["package_id"], ["registry_packages.id"], ondelete="CASCADE"
        ),
        sa.UniqueConstraint("package_id", "version", name="uq_registry_package_version"),
    )
    op.create_index(
        "ix_registry_package_versions_package_id",
        "registry_package_versions",
        ["package_id"],
    )
    op.create_index(
        "ix_registry_package_versions_created_at",
        "registry_package_versions",
        ["created_at"],
    )

    op.create_table(
        "registry_package_downloads",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("package_version_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=True),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("user_agent", sa.String(length=500), nullable=True),
        sa.Column(
            "downloaded_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.ForeignKeyConstraint(
            ["package_version_id"],
            ["registry_package_versions.id"],
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_registry_package_downloads_package_version_id",
        "registry_package_downloads",
        ["package_version_id"],
    )
    op.create_index(
        "ix_registry_package_downloads_downloaded_at",
        "registry_package_downloads",
        ["downloaded_at"],
    )


def downgrade() -> None:
    op.drop_index(
        "ix_registry_package_downloads_downloaded_at",
        table_name="registry_package_downloads",
    )
    op.drop_index(
        "ix_registry_package_downloads_package_version_id",
        table_name="registry_package_downloads",
    )
    op.drop_table("registry_package_downloads")
    op.drop_index(
        "ix_registry_package_versions_created_at",
        table_name="registry_package_versions",
    )
    op.drop_index(
        "ix_registry_package_versions_package_id",
        table_name="registry_package_versions",
    )
    op.drop_table("registry_package_versions")
    op.drop_index("ix_registry_packages_deleted_at", table_name="registry_packages")
    op.drop_index("ix_registry_packages_created_at", table_name="registry_packages")
    op.drop_index("ix_registry_packages_owner_id", table_name="registry_packages")
    op.drop_index("uq_registry_packages_name_active", table_name="registry_packages")
    op.drop_table("registry_packages")
