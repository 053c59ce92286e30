"""
Offset/limit pagination with validated ordering.

Every ``get_*s`` repository function funnels its filtered query through
:func:`paginate`, which reports the total number of matching rows alongside
the requested page.
"""
from __future__ import annotations

from typing import Mapping, Sequence

from pydantic import BaseModel
from sqlalchemy import inspect
from sqlalchemy.orm import Query

from infradb.db.errors import InvalidParamsError
from infradb.utils.settings import get_settings

ORDER_ASCENDING = "ASC"
ORDER_DESCENDING = "DESC"


class OrderBy(BaseModel):
    field: str
    order: str = ORDER_ASCENDING


class PageInput(BaseModel):
    offset: int | None = None
    limit: int | None = None
    order_by: OrderBy | None = None


def default_order_by(field: str) -> OrderBy:
    return OrderBy(field=field, order=ORDER_ASCENDING)


def _validate_window(page: PageInput) -> tuple[int, int]:
    offset = 0 if page.offset is None else page.offset
    limit = get_settings().default_page_limit if page.limit is None else page.limit
    if offset < 0:
        raise InvalidParamsError(f"offset must not be negative, got {offset}")
    if limit <= 0:
        raise InvalidParamsError(f"limit must be positive, got {limit}")
    return offset, limit


def _order_clause(order_by: OrderBy, order_columns: Mapping[str, object]):
    if order_by.field not in order_columns:
        raise InvalidParamsError(
            f"invalid order by field {order_by.field!r}, expected one of {sorted(order_columns)}"
        )
    direction = (order_by.order or ORDER_ASCENDING).upper()
    if direction not in (ORDER_ASCENDING, ORDER_DESCENDING):
        raise InvalidParamsError(f"invalid order {order_by.order!r}, expected ASC or DESC")
    column = order_columns[order_by.field]
    # Nulls sort last regardless of direction
    if direction == ORDER_DESCENDING:
        return column.desc().nulls_last()
    return column.asc().nulls_last()


def paginate_multi(
    query: Query,
    offset: int | None,
    limit: int | None,
    order_by: Sequence[OrderBy],
    order_columns: Mapping[str, object],
):
    """Apply several orderings, then offset/limit, and return ``(rows, total)``."""
    page_offset, page_limit = _validate_window(PageInput(offset=offset, limit=limit))
    clauses = [_order_clause(ob, order_columns) for ob in order_by]

    total = query.order_by(None).count()

    # Primary key tiebreak keeps pages stable when ordered values collide
    entity = query.column_descriptions[0]["entity"]
    clauses.extend(col.asc() for col in inspect(entity).primary_key)

    rows = query.order_by(*clauses).offset(page_offset).limit(page_limit).all()
    return rows, total


def paginate(
    query: Query,
    page: PageInput | None,
    order_columns: Mapping[str, object],
    default_field: str,
):
    """Order, offset and limit ``query`` per ``page``; return ``(rows, total)``.

    ``order_columns`` maps the externally visible order-by names to column
    expressions. When ``page.order_by`` is unset ``default_field`` is used in
    ascending order.
    """
    page = page or PageInput()
    order_by = page.order_by or default_order_by(default_field)
    return paginate_multi(query, page.offset, page.limit, [order_by], order_columns)
