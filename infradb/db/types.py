"""Custom SQLAlchemy types used by the persistence layer."""
from __future__ import annotations

import json
from typing import Iterable, List, Sequence

from sqlalchemy import Text, cast, false, or_
from sqlalchemy.dialects import postgresql
from sqlalchemy.types import JSON, TypeDecorator


class StringArray(TypeDecorator[List[str]]):
    """Store a list of strings as ``text[]`` on PostgreSQL.

    Falls back to JSON storage on dialects without array support (e.g. SQLite
    during unit tests).
    """

    cache_ok = True
    impl = JSON

    def load_dialect_impl(self, dialect):  # type: ignore[override]
        if dialect.name == "postgresql":
            return dialect.type_descriptor(postgresql.ARRAY(Text()))
        return dialect.type_descriptor(JSON(none_as_null=True))

    def process_bind_param(self, value, dialect):  # type: ignore[override]
        if value is None:
            return None
        if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
            raise TypeError(f"StringArray expects an iterable of strings, got {type(value)!r}")
        return [str(v) for v in value]

    def process_result_value(self, value, dialect):  # type: ignore[override]
        if value is None:
            return None
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
            except json.JSONDecodeError:
                # Postgres array literal "{a,b}"
                stripped = value.strip("{}")
                return [part.strip('"') for part in stripped.split(",")] if stripped else []
            return [str(v) for v in parsed]
        return [str(v) for v in value]

    def copy(self, **kwargs):  # type: ignore[override]
        return StringArray()


def array_overlap(column, values: Sequence[str], dialect_name: str):
    """Return a predicate true when ``column`` shares at least one member with ``values``."""
    values = [str(v) for v in values]
    if not values:
        return false()
    if dialect_name == "postgresql":
        return column.op("&&", is_comparison=True)(
            cast(postgresql.array(values), postgresql.ARRAY(Text()))
        )
    # JSON-encoded arrays: match the quoted member inside the stored document
    text_value = cast(column, Text)
    return or_(*[text_value.contains(json.dumps(v), autoescape=True) for v in values])
