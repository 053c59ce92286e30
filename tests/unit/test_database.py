import os

import pytest

from infradb.db import database, models
from infradb.db.errors import DoesNotExistError, InvalidParamsError


@pytest.mark.skipif(
    bool(os.getenv("INFRADB_TEST_DB") or os.getenv("TEST_DATABASE_URL")), reason="explicit test database configured"
)
def test_pytest_runtime_uses_sqlite():
    assert database.engine.dialect.name == "sqlite"


def test_database_url_from_components(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("POSTGRES_USER", "u")
    monkeypatch.setenv("POSTGRES_PASSWORD", "p")
    monkeypatch.setenv("POSTGRES_HOST", "db")
    monkeypatch.setenv("POSTGRES_PORT", "5433")
    monkeypatch.setenv("POSTGRES_DB", "infra")
    assert database._get_database_url() == "postgresql://u:p@db:5433/infra"


def test_database_url_missing_components(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("POSTGRES_HOST", raising=False)
    with pytest.raises(ValueError) as exc:
        database._get_database_url()
    assert "POSTGRES_HOST" in str(exc.value)


def test_database_url_prefers_explicit(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://x@y/z")
    assert database._get_database_url() == "postgresql://x@y/z"


def test_get_db_yields_and_closes():
    gen = database.get_db()
    session = next(gen)
    assert session.is_active
    with pytest.raises(StopIteration):
        next(gen)


def test_transaction_commits(db):
    with database.transaction(db):
        db.add(models.Tenant(name="t", org="t-org"))
    db.expunge_all()
    assert db.query(models.Tenant).count() == 1


def test_transaction_rolls_back_on_error(db):
    with pytest.raises(RuntimeError):
        with database.transaction(db):
            db.add(models.Tenant(name="t", org="t-org"))
            db.flush()
            raise RuntimeError("boom")
    assert db.query(models.Tenant).count() == 0


def test_advisory_locks_reject_non_postgres(db):
    with pytest.raises(InvalidParamsError):
        database.acquire_advisory_lock(db, 42)
    with pytest.raises(InvalidParamsError):
        database.try_acquire_advisory_lock(db, 42)


def test_init_schema_is_idempotent():
    database.init_schema()
    database.init_schema()


def test_error_types():
    err = DoesNotExistError("Site", "abc")
    assert str(err) == "Site abc does not exist"
    assert issubclass(InvalidParamsError, ValueError)
