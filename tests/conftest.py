import os

import pytest

# Store original environment variables to restore after tests
_original_env = {}

_TEST_VARS = ['POSTGRES_USER', 'POSTGRES_PASSWORD', 'POSTGRES_HOST', 'POSTGRES_PORT', 'POSTGRES_DB']


def _setup_test_env():
    """Fill in connection variables so importing the database module never fails."""
    for var in _TEST_VARS:
        if var in os.environ:
            _original_env[var] = os.environ[var]

    os.environ.setdefault("PYTEST_RUNNING", "1")
    if not os.getenv("DATABASE_URL"):
        os.environ.setdefault("POSTGRES_USER", "testuser")
        os.environ.setdefault("POSTGRES_PASSWORD", "testpass")
        os.environ.setdefault("POSTGRES_HOST", "localhost")
        os.environ.setdefault("POSTGRES_PORT", "5432")
        os.environ.setdefault("POSTGRES_DB", "testdb")


def _restore_env():
    for var in _TEST_VARS:
        if var not in _original_env and var in os.environ:
            del os.environ[var]
    for var, value in _original_env.items():
        os.environ[var] = value
    _original_env.clear()


_setup_test_env()


@pytest.fixture(scope="session", autouse=True)
def _restore_test_env():
    """Restore original environment variables after all tests complete"""
    yield
    _restore_env()


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Settings are cached per process; drop the cache around every test."""
    from infradb.utils.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
