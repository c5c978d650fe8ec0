"""
ConnectionHandle adapters over raw driver connections.

psycopg exposes autocommit/isolation as properties; pymysql uses methods and
plain SQL for isolation. ``raw`` is the driver connection for running SQL.
"""

from typing import Any

import psycopg

from dsrouter.models import ProductTypeEnum, TransactionIsolation


class PsycopgHandle:
    """Adapter for ``psycopg.Connection``."""

    def __init__(self, raw: psycopg.Connection) -> None:
        self.raw = raw

    def is_open(self) -> bool:
        return not self.raw.closed

    def get_autocommit(self) -> bool:
        return bool(self.raw.autocommit)

    def set_autocommit(self, value: bool) -> None:
        self.raw.autocommit = value

    def get_isolation_level(self) -> TransactionIsolation:
        level = self.raw.isolation_level
        if level is None:
            return TransactionIsolation.NONE
        return TransactionIsolation[psycopg.IsolationLevel(level).name]

    def set_isolation_level(self, isolation: TransactionIsolation) -> None:
        if isolation is TransactionIsolation.NONE:
            self.raw.isolation_level = None
            return
        self.raw.isolation_level = psycopg.IsolationLevel[isolation.name]

    def commit(self) -> None:
        self.raw.commit()

    def rollback(self) -> None:
        self.raw.rollback()

    def close(self) -> None:
        self.raw.close()

    def __repr__(self) -> str:
        return f"PsycopgHandle({self.raw!r})"


class PyMySQLHandle:
    """Adapter for ``pymysql.connections.Connection``."""

    def __init__(self, raw: Any) -> None:
        self.raw = raw
        self._isolation = TransactionIsolation.NONE

    def is_open(self) -> bool:
        return bool(self.raw.open)

    def get_autocommit(self) -> bool:
        return bool(self.raw.get_autocommit())

    def set_autocommit(self, value: bool) -> None:
        self.raw.autocommit(value)

    def get_isolation_level(self) -> TransactionIsolation:
        return self._isolation

    def set_isolation_level(self, isolation: TransactionIsolation) -> None:
        # MySQL has no way back to "server default" short of reconnecting
        if isolation is not TransactionIsolation.NONE:
            cur = self.raw.cursor()
            try:
                cur.execute(f"SET SESSION TRANSACTION ISOLATION LEVEL {isolation.sql}")
            finally:
                cur.close()
        self._isolation = isolation

    def commit(self) -> None:
        self.raw.commit()

    def rollback(self) -> None:
        self.raw.rollback()

    def close(self) -> None:
        self.raw.close()

    def __repr__(self) -> str:
        return f"PyMySQLHandle({self.raw!r})"


def wrap_connection(conn: Any, product_type: ProductTypeEnum) -> PsycopgHandle | PyMySQLHandle:
    """Wrap a raw driver connection in the matching handle adapter."""
    if product_type == ProductTypeEnum.POSTGRES:
        return PsycopgHandle(conn)
    if product_type == ProductTypeEnum.MYSQL:
        return PyMySQLHandle(conn)
    raise ValueError(f"Unsupported product_type: {product_type}")
