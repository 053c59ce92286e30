import os
import shutil
import subprocess
import uuid
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from infradb.db import models

_ROOT = Path(__file__).resolve().parents[2]


def make_alembic_config(database_url: str) -> Config:
    """Return an Alembic config pointing at the project migrations."""
    cfg = Config(str(_ROOT / "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", database_url)
    cfg.set_main_option("script_location", str(_ROOT / "migrations"))
    return cfg


def _skip_without_docker():
    if os.getenv("SKIP_DOCKER_TESTS") == "1":
        pytest.skip("SKIP_DOCKER_TESTS=1")
    if not shutil.which("docker"):
        pytest.skip("Docker CLI is not available; skipping tests that require containers")
    try:
        proc = subprocess.run(["docker", "info"], capture_output=True, text=True, timeout=5)
    except (OSError, subprocess.TimeoutExpired):
        pytest.skip("Docker daemon is not available; skipping tests that require containers")
    if proc.returncode != 0:
        pytest.skip("Docker daemon is not available; skipping tests that require containers")


# Session-wide Postgres test container
@pytest.fixture(scope="session")
def pg_url():
    explicit = os.getenv("TEST_DATABASE_URL")
    if explicit:
        yield explicit
        return
    _skip_without_docker()
    from testcontainers.postgres import PostgresContainer

    image = os.getenv("TEST_POSTGRES_IMAGE", "postgres:16-alpine")
    with PostgresContainer(image) as pg:
        yield pg.get_connection_url()


@pytest.fixture(scope="session")
def alembic_config(pg_url):
    return make_alembic_config(pg_url)


# Apply Alembic migrations once
@pytest.fixture(scope="session")
def pg_engine(pg_url, alembic_config):
    command.upgrade(alembic_config, "head")
    engine = create_engine(pg_url)
    try:
        yield engine
    finally:
        engine.dispose()


# Per-test transactional session; repository rollbacks only unwind a savepoint
@pytest.fixture
def pg_db(pg_engine):
    connection = pg_engine.connect()
    trans = connection.begin()
    session = Session(bind=connection, autoflush=False, join_transaction_mode="create_savepoint")
    try:
        yield session
    finally:
        session.close()
        trans.rollback()
        connection.close()


@pytest.fixture
def pg_provider(pg_db):
    p = models.InfrastructureProvider(name="provider", org="provider-org")
    pg_db.add(p)
    pg_db.flush()
    return p


@pytest.fixture
def pg_tenant(pg_db):
    t = models.Tenant(name="tenant", org="tenant-org")
    pg_db.add(t)
    pg_db.flush()
    return t


@pytest.fixture
def pg_site(pg_db, pg_provider):
    s = models.Site(
        name="site-a",
        org=pg_provider.org,
        infrastructure_provider_id=pg_provider.id,
        status="Registered",
        created_by=uuid.uuid4(),
    )
    pg_db.add(s)
    pg_db.flush()
    return s
