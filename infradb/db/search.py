"""
Free-text search predicates.

On PostgreSQL a search matches when the English tsvector of the searchable
columns satisfies the normalized tsquery, or when any column contains the raw
text case-insensitively. Other dialects only get the ILIKE half.
"""
from __future__ import annotations

import re
from typing import Sequence

from sqlalchemy import func, literal, or_

# Characters with operator meaning inside to_tsquery input
_TSQUERY_OPERATORS = re.compile(r"[&|!():*<>'\\]")


def to_tsquery_terms(text: str) -> str:
    """Turn free text into a to_tsquery expression matching any of its words."""
    tokens = (_TSQUERY_OPERATORS.sub("", token) for token in text.split())
    return " | ".join(token for token in tokens if token)


def _document(columns: Sequence):
    expr = None
    for column in columns:
        part = func.coalesce(column, literal(" "))
        expr = part if expr is None else expr.op("||")(literal(" ")).op("||")(part)
    return expr


def search_filter(dialect_name: str, columns: Sequence, text: str):
    """Build the OR group matching ``text`` against ``columns``."""
    pattern = f"%{text}%"
    clauses = [column.ilike(pattern) for column in columns]
    terms = to_tsquery_terms(text)
    if dialect_name == "postgresql" and terms:
        tsvector = func.to_tsvector("english", _document(columns))
        clauses.insert(0, tsvector.op("@@")(func.to_tsquery("english", terms)))
    return or_(*clauses)
