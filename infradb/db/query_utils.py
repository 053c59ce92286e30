"""
Query helpers shared by the repositories.

Covers soft-delete visibility, relation inclusion, IN-list filters and the
grouped status counts several entities expose.
"""
from typing import Any, Dict, Iterable, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from .errors import InvalidParamsError


def dialect_name(db: Session) -> str:
    return db.get_bind().dialect.name


def base_query(db: Session, model_class, include_deleted: bool = False):
    """Return a query on ``model_class`` hiding soft-deleted rows unless asked not to."""
    query = db.query(model_class)
    if not include_deleted and hasattr(model_class, "deleted"):
        query = query.filter(model_class.deleted.is_(None))
    return query


def apply_relations(query, model_class, include_relations: Optional[Iterable[str]], allowed: Iterable[str]):
    """Eager-load the requested relations, rejecting names the entity does not expose."""
    if not include_relations:
        return query
    allowed = set(allowed)
    for relation in include_relations:
        if relation not in allowed:
            raise InvalidParamsError(
                f"invalid relation {relation!r} for {model_class.__name__}, expected one of {sorted(allowed)}"
            )
        query = query.options(joinedload(getattr(model_class, relation)))
    return query


def filter_in(query, column, values: Optional[Sequence[Any]]):
    """Filter on ``column IN values``; ``None`` means no filter, an empty list matches nothing."""
    if values is None:
        return query
    if len(values) == 1:
        return query.filter(column == values[0])
    return query.filter(column.in_(list(values)))


def count_by_status(query, status_column, statuses: Iterable[str]) -> Dict[str, int]:
    """Return ``{"total": n, <status>: count}`` with every known status present."""
    results: Dict[str, int] = {"total": 0}
    for status in statuses:
        results[status] = 0
    rows = query.with_entities(status_column, func.count()).group_by(status_column).all()
    for status, count in rows:
        results[status] = int(count)
        results["total"] += int(count)
    return results

