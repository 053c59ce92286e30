from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from infradb.db import models

_ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite:///{tmp_path / 'schema.db'}"


@pytest.fixture
def alembic_cfg(sqlite_url):
    cfg = Config()
    cfg.set_main_option("script_location", str(_ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", sqlite_url)
    return cfg


def test_initial_revision_matches_models(alembic_cfg, sqlite_url):
    command.upgrade(alembic_cfg, "head")
    engine = create_engine(sqlite_url)
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names()) - {"alembic_version"}
        assert tables == set(models.Base.metadata.tables)
        for name, table in models.Base.metadata.tables.items():
            columns = {c["name"]: c for c in inspector.get_columns(name)}
            assert set(columns) == set(table.columns.keys()), name
            for column in table.columns:
                assert columns[column.name]["nullable"] == column.nullable, f"{name}.{column.name}"
            indexes = {ix["name"] for ix in inspector.get_indexes(name)}
            assert {ix.name for ix in table.indexes} <= indexes, name
        assert inspector.get_pk_constraint("fabric")["constrained_columns"] == ["id", "site_id"]
    finally:
        engine.dispose()


def test_initial_revision_downgrades_to_empty(alembic_cfg, sqlite_url):
    command.upgrade(alembic_cfg, "head")
    command.downgrade(alembic_cfg, "base")
    engine = create_engine(sqlite_url)
    try:
        assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
    finally:
        engine.dispose()
