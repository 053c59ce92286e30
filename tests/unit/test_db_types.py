from types import SimpleNamespace

import pytest
from sqlalchemy import Column, MetaData, Table
from sqlalchemy.dialects import postgresql, sqlite

from infradb.db import types as db_types


class DummyDialect:
    def __init__(self, name="postgresql"):
        self.name = name
        self.calls = []

    def type_descriptor(self, value):
        self.calls.append(value)
        return value


def test_string_array_uses_text_array_on_postgres():
    dialect = DummyDialect()
    descriptor = db_types.StringArray().load_dialect_impl(dialect)
    assert isinstance(descriptor, postgresql.ARRAY)
    assert dialect.calls[0] is descriptor


def test_string_array_falls_back_to_json():
    dialect = DummyDialect(name="sqlite")
    descriptor = db_types.StringArray().load_dialect_impl(dialect)
    assert isinstance(descriptor, db_types.JSON)
    assert descriptor.none_as_null is True


def test_string_array_bind_param_coerces_members():
    dialect = SimpleNamespace(name="postgresql")
    array_type = db_types.StringArray()
    assert array_type.process_bind_param(("a", 1), dialect) == ["a", "1"]
    assert array_type.process_bind_param(None, dialect) is None
    with pytest.raises(TypeError):
        array_type.process_bind_param("abc", dialect)


def test_string_array_result_handles_strings():
    dialect = SimpleNamespace(name="sqlite")
    array_type = db_types.StringArray()
    assert array_type.process_result_value('["a", "b"]', dialect) == ["a", "b"]
    assert array_type.process_result_value("{a,b}", dialect) == ["a", "b"]
    assert array_type.process_result_value("{}", dialect) == []
    assert array_type.process_result_value(["x"], dialect) == ["x"]
    assert array_type.process_result_value(None, dialect) is None


_table = Table("boxes", MetaData(), Column("tags", db_types.StringArray()))


def test_array_overlap_postgres_operator():
    clause = db_types.array_overlap(_table.c.tags, ["a", "b"], "postgresql")
    sql = str(clause.compile(dialect=postgresql.dialect()))
    assert "&&" in sql
    assert "CAST(ARRAY[" in sql


def test_array_overlap_sqlite_matches_quoted_members():
    clause = db_types.array_overlap(_table.c.tags, ["a"], "sqlite")
    sql = str(clause.compile(dialect=sqlite.dialect(), compile_kwargs={"literal_binds": True}))
    assert "LIKE" in sql
    assert '"a"' in sql


def test_array_overlap_empty_is_false():
    clause = db_types.array_overlap(_table.c.tags, [], "postgresql")
    assert str(clause.compile(dialect=postgresql.dialect())) == "false"
