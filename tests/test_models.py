"""Unit tests for dsrouter.models: keys, entries, isolation levels."""

import pytest

from dsrouter.models import (
    ConnectionEntry,
    ConnectionHandle,
    DataSource,
    DataSourceEntry,
    DataSourceKey,
    TransactionIsolation,
)
from tests.utils.fakes import FakeConnection, FakeDataSource


def test_key_of_empty_is_default() -> None:
    assert DataSourceKey.of("") is DataSourceKey.DEFAULT
    assert DataSourceKey.of(None) is DataSourceKey.DEFAULT
    assert DataSourceKey.DEFAULT.is_default
    assert not DataSourceKey.of("db1").is_default


def test_key_of_non_str_ids_are_stringified() -> None:
    assert DataSourceKey.of(0) == DataSourceKey("0")
    assert not DataSourceKey.of(0).is_default
    assert DataSourceKey.of(1) == DataSourceKey.of("1")
    assert isinstance(DataSourceKey.of(1).id, str)


def test_key_value_equality_and_hash() -> None:
    a = DataSourceKey.of("db1")
    b = DataSourceKey("db1")
    assert a == b
    assert hash(a) == hash(b)
    assert a != DataSourceKey.of("db2")
    assert DataSourceKey("") == DataSourceKey.DEFAULT
    assert str(a) == "db1"
    assert {a: 1}[b] == 1


def test_key_is_immutable() -> None:
    key = DataSourceKey.of("db1")
    with pytest.raises(AttributeError):
        key.id = "db2"  # type: ignore[misc]


def test_datasource_entry_requires_both_fields() -> None:
    ds = FakeDataSource()
    with pytest.raises(ValueError):
        DataSourceEntry(DataSourceKey.DEFAULT, None)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        DataSourceEntry(None, ds)  # type: ignore[arg-type]


def test_datasource_entry_equality_by_key_and_datasource() -> None:
    ds = FakeDataSource()
    other = FakeDataSource()
    key = DataSourceKey.of("db1")
    assert DataSourceEntry(key, ds) == DataSourceEntry(DataSourceKey.of("db1"), ds)
    assert DataSourceEntry(key, ds) != DataSourceEntry(key, other)
    assert DataSourceEntry(key, ds) != DataSourceEntry(DataSourceKey.DEFAULT, ds)


def test_connection_entry_accessors() -> None:
    ds = FakeDataSource()
    conn = FakeConnection()
    ds_entry = DataSourceEntry(DataSourceKey.of("db1"), ds)
    entry = ConnectionEntry(ds_entry, conn)
    assert entry.key == DataSourceKey.of("db1")
    assert entry.datasource is ds
    assert entry.connection is conn
    assert entry.externally_managed is False
    with pytest.raises(ValueError):
        ConnectionEntry(ds_entry, None)  # type: ignore[arg-type]


def test_fakes_satisfy_protocols() -> None:
    assert isinstance(FakeConnection(), ConnectionHandle)
    assert isinstance(FakeDataSource(), DataSource)


@pytest.mark.parametrize(
    ("isolation", "level", "sql"),
    [
        (TransactionIsolation.NONE, 0, None),
        (TransactionIsolation.READ_UNCOMMITTED, 1, "READ UNCOMMITTED"),
        (TransactionIsolation.READ_COMMITTED, 2, "READ COMMITTED"),
        (TransactionIsolation.REPEATABLE_READ, 4, "REPEATABLE READ"),
        (TransactionIsolation.SERIALIZABLE, 8, "SERIALIZABLE"),
    ],
)
def test_isolation_constants(
    isolation: TransactionIsolation, level: int, sql: str | None
) -> None:
    assert isolation.level == level
    assert isolation.sql == sql
    assert TransactionIsolation.from_level(level) is isolation


def test_isolation_from_unknown_level() -> None:
    with pytest.raises(ValueError):
        TransactionIsolation.from_level(3)
