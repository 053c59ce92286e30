"""
Database engine and session management.

Builds the SQLAlchemy engine from environment configuration with a test
fallback (SQLite in-memory) and exposes session and transaction helpers.
"""
import logging
import os
import sys
from contextlib import contextmanager

from sqlalchemy import create_engine, event, func, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from infradb.db.errors import InvalidParamsError
from infradb.utils.settings import get_settings

logger = logging.getLogger(__name__)


# Generate dynamically from individual components if DATABASE_URL is not provided
def _get_database_url() -> str:
    if os.getenv("DATABASE_URL"):
        return os.getenv("DATABASE_URL")

    parts = {
        "POSTGRES_USER": os.getenv("POSTGRES_USER"),
        "POSTGRES_PASSWORD": os.getenv("POSTGRES_PASSWORD"),
        "POSTGRES_HOST": os.getenv("POSTGRES_HOST"),
        "POSTGRES_PORT": os.getenv("POSTGRES_PORT"),
        "POSTGRES_DB": os.getenv("POSTGRES_DB"),
    }
    missing = [name for name, value in parts.items() if not value]
    if missing:
        raise ValueError(f"Missing required database environment variables: {', '.join(missing)}")

    return (
        f"postgresql://{parts['POSTGRES_USER']}:{parts['POSTGRES_PASSWORD']}"
        f"@{parts['POSTGRES_HOST']}:{parts['POSTGRES_PORT']}/{parts['POSTGRES_DB']}"
    )


def _is_pytest_runtime() -> bool:
    """Best-effort detection that we're executing under pytest.

    ``PYTEST_CURRENT_TEST`` is only set while a test runs, so module import
    during collection is detected through ``sys.modules`` instead.
    ``PYTEST_RUNNING=1`` forces the test behaviour.
    """
    if os.getenv("PYTEST_RUNNING") == "1":
        return True
    if "PYTEST_CURRENT_TEST" in os.environ:
        return True
    return "pytest" in sys.modules


# Test override strategy:
# 1. INFRADB_TEST_DB wins when set.
# 2. Else TEST_DATABASE_URL (integration fixtures) is used as-is.
# 3. Else under pytest an in-memory sqlite database is used.
explicit_test_db = os.getenv("INFRADB_TEST_DB")
explicit_integration_db = os.getenv("TEST_DATABASE_URL")

if explicit_test_db:
    DATABASE_URL = explicit_test_db
    _engine_kwargs = {"connect_args": {"check_same_thread": False}} if DATABASE_URL.startswith("sqlite") else {}
elif explicit_integration_db:
    DATABASE_URL = explicit_integration_db
    _engine_kwargs = {}
elif _is_pytest_runtime():
    # StaticPool keeps the in-memory schema alive across connections
    DATABASE_URL = "sqlite+pysqlite:///:memory:"
    _engine_kwargs = {
        "connect_args": {"check_same_thread": False},
        "poolclass": StaticPool,
    }
else:
    DATABASE_URL = _get_database_url()
    _engine_kwargs = {}


def _install_lock_timeout(eng, lock_timeout_ms: int) -> None:
    """Apply a session-level lock_timeout to every new PostgreSQL connection."""
    if eng.dialect.name != "postgresql" or lock_timeout_ms <= 0:
        return

    @event.listens_for(eng, "connect")
    def _set_lock_timeout(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute(f"SET lock_timeout = {int(lock_timeout_ms)}")
        finally:
            cursor.close()


def build_engine(url: str, **kwargs):
    """Create an engine configured from settings."""
    settings = get_settings()
    eng = create_engine(url, echo=settings.sql_echo, **kwargs)
    _install_lock_timeout(eng, settings.lock_timeout_ms)
    return eng


engine = build_engine(DATABASE_URL, **_engine_kwargs)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_schema(bind=None) -> None:
    """Create every table known to the models on ``bind`` (defaults to the module engine).

    Production databases are managed through Alembic; this is for SQLite test
    databases and throwaway environments.
    """
    from infradb.db import models  # local import to avoid circular import at module load

    models.Base.metadata.create_all(bind=bind or engine)


def get_db():
    """Yield a database session and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """Commit the session when the block succeeds, roll back when it raises."""
    try:
        yield db
        db.commit()
    except Exception:
        logger.error("Rolling back transaction after error", exc_info=True)
        db.rollback()
        raise


def acquire_advisory_lock(db: Session, key: int) -> None:
    """Take a transaction-scoped PostgreSQL advisory lock.

    The lock is released when the surrounding transaction commits or rolls
    back. Only PostgreSQL supports advisory locks.
    """
    dialect = db.get_bind().dialect.name
    if dialect != "postgresql":
        raise InvalidParamsError(f"advisory locks are not supported on {dialect}")
    logger.debug("Acquiring advisory lock %s", key)
    db.execute(select(func.pg_advisory_xact_lock(key)))


def try_acquire_advisory_lock(db: Session, key: int) -> bool:
    """Attempt a transaction-scoped advisory lock without waiting."""
    dialect = db.get_bind().dialect.name
    if dialect != "postgresql":
        raise InvalidParamsError(f"advisory locks are not supported on {dialect}")
    acquired = db.execute(select(func.pg_try_advisory_xact_lock(key))).scalar()
    logger.debug("Advisory lock %s acquired=%s", key, acquired)
    return bool(acquired)
