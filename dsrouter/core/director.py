"""
Director: hands out connections routed by DataSourceRouter and manages
their transactional envelope (isolation, autocommit, begin/commit/rollback).

Every mutating operation has a ``*_safely`` twin that logs and returns a
bool instead of raising, for cleanup paths that already carry an error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from dsrouter.core.exceptions import ConfigurationError, PersistenceError
from dsrouter.core.lifecycle import ConnectionLifecycle
from dsrouter.core.router import DataSourceRouter
from dsrouter.models import ConnectionEntry, DataSourceEntry, TransactionIsolation

if TYPE_CHECKING:
    from dsrouter.core.builder import DirectorBuilder

_log = logging.getLogger(__name__)


class Director:
    """Routing and lifecycle coordinator. Configuration is fixed at construction."""

    def __init__(
        self,
        router: DataSourceRouter,
        transaction_isolation: TransactionIsolation | None = None,
        desired_autocommit: bool = True,
        lifecycle: ConnectionLifecycle | None = None,
    ) -> None:
        if router is None:
            raise ConfigurationError("Director requires a DataSourceRouter")
        self._router = router
        self._transaction_isolation = transaction_isolation or TransactionIsolation.NONE
        self._desired_autocommit = desired_autocommit
        self._lifecycle = lifecycle or ConnectionLifecycle()

    @staticmethod
    def builder() -> DirectorBuilder:
        from dsrouter.core.builder import DirectorBuilder

        return DirectorBuilder()

    @property
    def router(self) -> DataSourceRouter:
        return self._router

    @property
    def transaction_isolation(self) -> TransactionIsolation:
        return self._transaction_isolation

    @property
    def desired_autocommit(self) -> bool:
        return self._desired_autocommit

    @property
    def lifecycle(self) -> ConnectionLifecycle:
        return self._lifecycle

    # ------------------------------------------------------------------
    # Acquire / release
    # ------------------------------------------------------------------

    def acquire_datasource(
        self,
        data: Any = None,
        sql: str | None = None,
        params: Mapping[str, Any] | None = None,
        args: Sequence[Any] | None = None,
    ) -> DataSourceEntry:
        """Resolve the data source for a call without opening a connection."""
        _log.debug("Resolving data source")
        entry = self._router.determine_datasource(data, sql, params, args)
        if entry is None:
            raise PersistenceError("Failed to get DataSourceEntry with a null value")
        return entry

    def acquire_connection(
        self,
        data: Any = None,
        sql: str | None = None,
        params: Mapping[str, Any] | None = None,
        args: Sequence[Any] | None = None,
    ) -> ConnectionEntry:
        """
        Resolve a data source and open a connection configured with this
        director's isolation level and desired autocommit.

        Raises:
            ConfigurationError: no data source can be determined.
            PersistenceError: the data source failed or returned no connection.
            TransactionError: isolation/autocommit could not be applied.
        """
        datasource_entry = self.acquire_datasource(data, sql, params, args)
        return self._lifecycle.acquire(
            datasource_entry, self._transaction_isolation, self._desired_autocommit
        )

    def release_connection(self, entry: ConnectionEntry | None) -> None:
        """Close the connection (resetting autocommit first). No-op for None."""
        if entry is None:
            return
        self._lifecycle.release(entry)

    def release_connection_safely(self, entry: ConnectionEntry | None) -> bool:
        try:
            self.release_connection(entry)
            return True
        except Exception:
            _log.error("Error releasing connection", exc_info=True)
            return False

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def begin_transaction(self, entry: ConnectionEntry | None) -> None:
        if entry is None:
            return
        self._lifecycle.begin(entry)

    def begin_transaction_safely(self, entry: ConnectionEntry | None) -> bool:
        try:
            self.begin_transaction(entry)
            return True
        except Exception:
            _log.error("Error beginning transaction", exc_info=True)
            return False

    def commit_transaction(self, entry: ConnectionEntry | None) -> None:
        if entry is None:
            return
        self._lifecycle.commit(entry)

    def commit_transaction_safely(self, entry: ConnectionEntry | None) -> bool:
        try:
            self.commit_transaction(entry)
            return True
        except Exception:
            _log.error("Error committing transaction", exc_info=True)
            return False

    def rollback_transaction(self, entry: ConnectionEntry | None) -> None:
        if entry is None:
            return
        self._lifecycle.rollback(entry)

    def rollback_transaction_safely(self, entry: ConnectionEntry | None) -> bool:
        try:
            self.rollback_transaction(entry)
            return True
        except Exception:
            _log.error("Error rolling back transaction", exc_info=True)
            return False

    # ------------------------------------------------------------------
    # Context managers
    # ------------------------------------------------------------------

    @contextmanager
    def connection(
        self,
        data: Any = None,
        sql: str | None = None,
        params: Mapping[str, Any] | None = None,
        args: Sequence[Any] | None = None,
    ) -> Iterator[ConnectionEntry]:
        """Acquire a connection for the block and release it afterwards."""
        entry = self.acquire_connection(data, sql, params, args)
        try:
            yield entry
        except BaseException:
            self.release_connection_safely(entry)
            raise
        self.release_connection(entry)

    @contextmanager
    def transaction(
        self,
        data: Any = None,
        sql: str | None = None,
        params: Mapping[str, Any] | None = None,
        args: Sequence[Any] | None = None,
    ) -> Iterator[ConnectionEntry]:
        """
        Run the block in a transaction: begin, then commit on success or
        roll back on error. The connection is released either way; cleanup
        failures never replace the error raised by the block.
        """
        entry = self.acquire_connection(data, sql, params, args)
        try:
            self.begin_transaction(entry)
            yield entry
        except BaseException:
            self.rollback_transaction_safely(entry)
            self.release_connection_safely(entry)
            raise
        try:
            self.commit_transaction(entry)
        except BaseException:
            self.rollback_transaction_safely(entry)
            self.release_connection_safely(entry)
            raise
        self.release_connection(entry)
