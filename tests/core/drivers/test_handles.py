"""Unit tests for the psycopg / pymysql ConnectionHandle adapters."""

from unittest.mock import MagicMock

import psycopg
import pytest

from dsrouter.core.director import Director
from dsrouter.core.drivers import PsycopgHandle, PyMySQLHandle, wrap_connection
from dsrouter.core.router import DataSourceRouter
from dsrouter.models import ConnectionHandle, ProductTypeEnum, TransactionIsolation


class _Source:
    def __init__(self, handle: ConnectionHandle) -> None:
        self.handle = handle

    def connect(self) -> ConnectionHandle:
        return self.handle


# --- psycopg ---


def test_psycopg_handle_state() -> None:
    raw = MagicMock()
    raw.closed = False
    raw.autocommit = True
    handle = PsycopgHandle(raw)
    assert isinstance(handle, ConnectionHandle)
    assert handle.is_open() is True
    assert handle.get_autocommit() is True
    handle.set_autocommit(False)
    assert raw.autocommit is False
    raw.closed = True
    assert handle.is_open() is False


@pytest.mark.parametrize(
    ("isolation", "expected"),
    [
        (TransactionIsolation.READ_UNCOMMITTED, psycopg.IsolationLevel.READ_UNCOMMITTED),
        (TransactionIsolation.READ_COMMITTED, psycopg.IsolationLevel.READ_COMMITTED),
        (TransactionIsolation.REPEATABLE_READ, psycopg.IsolationLevel.REPEATABLE_READ),
        (TransactionIsolation.SERIALIZABLE, psycopg.IsolationLevel.SERIALIZABLE),
        (TransactionIsolation.NONE, None),
    ],
)
def test_psycopg_isolation_mapping(
    isolation: TransactionIsolation, expected: psycopg.IsolationLevel | None
) -> None:
    raw = MagicMock()
    handle = PsycopgHandle(raw)
    handle.set_isolation_level(isolation)
    assert raw.isolation_level == expected
    assert handle.get_isolation_level() is isolation


def test_psycopg_commit_rollback_close() -> None:
    raw = MagicMock()
    handle = PsycopgHandle(raw)
    handle.commit()
    handle.rollback()
    handle.close()
    raw.commit.assert_called_once_with()
    raw.rollback.assert_called_once_with()
    raw.close.assert_called_once_with()


# --- pymysql ---


def test_pymysql_handle_state() -> None:
    raw = MagicMock()
    raw.open = True
    raw.get_autocommit.return_value = False
    handle = PyMySQLHandle(raw)
    assert isinstance(handle, ConnectionHandle)
    assert handle.is_open() is True
    assert handle.get_autocommit() is False
    handle.set_autocommit(True)
    raw.autocommit.assert_called_once_with(True)
    raw.open = False
    assert handle.is_open() is False


def test_pymysql_isolation_runs_set_session() -> None:
    raw = MagicMock()
    cur = raw.cursor.return_value
    handle = PyMySQLHandle(raw)
    assert handle.get_isolation_level() is TransactionIsolation.NONE
    handle.set_isolation_level(TransactionIsolation.REPEATABLE_READ)
    cur.execute.assert_called_once_with(
        "SET SESSION TRANSACTION ISOLATION LEVEL REPEATABLE READ"
    )
    cur.close.assert_called_once_with()
    assert handle.get_isolation_level() is TransactionIsolation.REPEATABLE_READ


def test_pymysql_isolation_none_issues_no_sql() -> None:
    raw = MagicMock()
    PyMySQLHandle(raw).set_isolation_level(TransactionIsolation.NONE)
    raw.cursor.assert_not_called()


def test_wrap_connection() -> None:
    assert isinstance(wrap_connection(MagicMock(), ProductTypeEnum.POSTGRES), PsycopgHandle)
    assert isinstance(wrap_connection(MagicMock(), ProductTypeEnum.MYSQL), PyMySQLHandle)
    with pytest.raises(ValueError):
        wrap_connection(MagicMock(), "oracle")  # type: ignore[arg-type]


# --- through the director ---


def test_director_configures_psycopg_connection() -> None:
    raw = MagicMock()
    raw.closed = False
    raw.autocommit = False
    handle = PsycopgHandle(raw)
    director = Director(
        DataSourceRouter(_Source(handle)),
        transaction_isolation=TransactionIsolation.SERIALIZABLE,
        desired_autocommit=False,
    )

    entry = director.acquire_connection()
    assert raw.isolation_level == psycopg.IsolationLevel.SERIALIZABLE
    assert raw.autocommit is False

    director.begin_transaction(entry)
    director.commit_transaction(entry)
    raw.commit.assert_called_once_with()

    director.release_connection(entry)
    assert raw.autocommit is True
    raw.close.assert_called_once_with()
