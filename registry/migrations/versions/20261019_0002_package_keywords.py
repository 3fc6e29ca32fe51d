"""Index package keywords per element for search."""

from __future__ import annotations

import json

from alembic import op
import sqlalchemy as sa


revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None


PACKAGE_TABLE = "registry_packages"
KEYWORD_TABLE = "registry_package_keywords"


def _normalise(raw: object) -> list[str]:
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            return []
    if not isinstance(raw, list):
        return []
    seen: list[str] = []
    for item in raw:
        value = str(item).strip().lower()
        if value and value not in seen:
            seen.append(value)
    return seen


def upgrade() -> None:
    op.create_table(
        KEYWORD_TABLE,
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("package_id", sa.Integer(), nullable=False),
        sa.Column("keyword", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["package_id"], [f"{PACKAGE_TABLE}.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "ix_registry_package_keywords_package_id",
        KEYWORD_TABLE,
        ["package_id"],
    )

    bind = op.get_bind()
    rows = bind.execute(
        sa.text(f"SELECT id, keywords FROM {PACKAGE_TABLE} WHERE deleted_at IS NULL")
    ).fetchall()
    insert_stmt = sa.text(
        f"INSERT INTO {KEYWORD_TABLE} (package_id, keyword) VALUES (:package_id, :keyword)"
    )
    for row in rows:
        for keyword in _normalise(row.keywords):
            bind.execute(insert_stmt, {"package_id": row.id, "keyword": keyword})


def downgrade() -> None:
    op.drop_index("ix_registry_package_keywords_package_id", table_name=KEYWORD_TABLE)
    op.drop_table(KEYWORD_TABLE)
