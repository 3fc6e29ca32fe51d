# coding: utf-8

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect, text

REGISTRY_DIR = Path(__file__).resolve().parents[2]


def _alembic_config(url: str) -> Config:
    config = Config(str(REGISTRY_DIR / "alembic.ini"))
    config.attributes["configure_logger"] = False
    config.set_main_option("script_location", str(REGISTRY_DIR / "migrations"))
    config.set_main_option("sqlalchemy.url", url)
    return config


def test_upgrade_creates_schema(tmp_path):
    url = f"sqlite:///{(tmp_path / 'migrated.db').as_posix()}"
    config = _alembic_config(url)

    command.upgrade(config, "head")

    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names())
        assert {
            "registry_packages",
            "registry_package_versions",
            "registry_package_downloads",
            "registry_package_keywords",
        } <= tables
        indexes = {index["name"] for index in inspector.get_indexes("registry_packages")}
        assert "uq_registry_packages_name_active" in indexes
    finally:
        engine.dispose()

    command.downgrade(config, "base")


def test_keyword_index_is_backfilled(tmp_path):
    url = f"sqlite:///{(tmp_path / 'backfill.db').as_posix()}"
    config = _alembic_config(url)
    command.upgrade(config, "20261019_0001")

    engine = create_engine(url)
    try:
        with engine.begin() as connection:
            connection.execute(
                text(
                    "INSERT INTO registry_packages (id, name, keywords, owner_id, deleted_at) VALUES "
                    "(1, 'live', :live, 'user-1', NULL), "
                    "(2, 'gone', :gone, 'user-1', CURRENT_TIMESTAMP)"
                ),
                {"live": '["Über", "util", "UTIL"]', "gone": '["stale"]'},
            )

        command.upgrade(config, "head")

        with engine.connect() as connection:
            rows = connection.execute(
                text("SELECT package_id, keyword FROM registry_package_keywords ORDER BY id")
            ).fetchall()
        assert [tuple(row) for row in rows] == [(1, "über"), (1, "util")]
    finally:
        engine.dispose()
