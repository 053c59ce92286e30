import pytest

from infradb.db import models
from infradb.db.errors import InvalidParamsError
from infradb.db.pagination import OrderBy, PageInput, paginate, paginate_multi


ORDER_COLUMNS = {"name": models.Tenant.name, "org_display_name": models.Tenant.org_display_name}


def _tenants(db, *rows):
    for name, display in rows:
        db.add(models.Tenant(name=name, org=f"{name}-org", org_display_name=display))
    db.commit()


def test_defaults_apply_limit_from_settings(db, monkeypatch):
    monkeypatch.setenv("INFRADB_DEFAULT_PAGE_LIMIT", "2")
    _tenants(db, ("a", None), ("b", None), ("c", None))
    rows, total = paginate(db.query(models.Tenant), None, ORDER_COLUMNS, "name")
    assert total == 3
    assert [r.name for r in rows] == ["a", "b"]


def test_offset_past_end_returns_empty_page_with_total(db):
    _tenants(db, ("a", None))
    rows, total = paginate(db.query(models.Tenant), PageInput(offset=5), ORDER_COLUMNS, "name")
    assert rows == []
    assert total == 1


@pytest.mark.parametrize("page", [PageInput(offset=-1), PageInput(limit=0), PageInput(limit=-3)])
def test_invalid_window_rejected(db, page):
    with pytest.raises(InvalidParamsError):
        paginate(db.query(models.Tenant), page, ORDER_COLUMNS, "name")


def test_order_is_case_insensitive(db):
    _tenants(db, ("a", None), ("b", None))
    rows, _ = paginate(db.query(models.Tenant), PageInput(order_by=OrderBy(field="name", order="desc")), ORDER_COLUMNS, "name")
    assert [r.name for r in rows] == ["b", "a"]


def test_nulls_sort_last_both_directions(db):
    _tenants(db, ("a", "Beta"), ("b", None), ("c", "Alpha"))
    query = db.query(models.Tenant)
    rows, _ = paginate(query, PageInput(order_by=OrderBy(field="org_display_name")), ORDER_COLUMNS, "name")
    assert [r.name for r in rows] == ["c", "a", "b"]
    rows, _ = paginate(query, PageInput(order_by=OrderBy(field="org_display_name", order="DESC")), ORDER_COLUMNS, "name")
    assert [r.name for r in rows] == ["a", "c", "b"]


def test_paginate_multi_orders_by_each_field(db):
    _tenants(db, ("b", "X"), ("a", "Y"), ("c", "X"))
    rows, total = paginate_multi(
        db.query(models.Tenant),
        0,
        10,
        [OrderBy(field="org_display_name"), OrderBy(field="name", order="DESC")],
        ORDER_COLUMNS,
    )
    assert total == 3
    assert [r.name for r in rows] == ["c", "b", "a"]


def test_total_ignores_limit_and_filters_apply(db):
    _tenants(db, ("a", "X"), ("b", "X"), ("c", "Y"))
    query = db.query(models.Tenant).filter(models.Tenant.org_display_name == "X")
    rows, total = paginate(query, PageInput(limit=1), ORDER_COLUMNS, "name")
    assert total == 2
    assert len(rows) == 1
