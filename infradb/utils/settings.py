"""Runtime settings for the persistence layer, sourced from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class Settings:
    default_page_limit: int
    max_batch_items: int
    lock_timeout_ms: int
    sql_echo: bool
    log_level: str


def _normalize_bool(value: str | None, default: bool = False) -> bool:
    """Return normalized boolean from environment-style value."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"", "0", "false", "no", "off"}:
        return False
    if normalized in {"1", "true", "yes", "on"}:
        return True
    return default


def _positive_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{env_var} must be an integer, got {raw!r}") from exc
    if value < 0:
        raise ValueError(f"{env_var} must not be negative, got {value}")
    return value


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """Return the cached settings state sourced from the environment."""
    return Settings(
        default_page_limit=_positive_int("INFRADB_DEFAULT_PAGE_LIMIT", 20) or 20,
        max_batch_items=_positive_int("INFRADB_MAX_BATCH_ITEMS", 100) or 100,
        lock_timeout_ms=_positive_int("INFRADB_LOCK_TIMEOUT_MS", 0),
        sql_echo=_normalize_bool(os.getenv("INFRADB_SQL_ECHO")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def configure_logging() -> None:
    """Apply LOG_LEVEL to the root logger."""
    level_name = get_settings().log_level
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level)
    logging.getLogger("infradb").setLevel(level)
    logging.getLogger(__name__).info("logging configured: log_level=%s", level_name)
