"""
Connection lifecycle: how a resolved data source becomes a configured
connection, and how begin/commit/rollback/release act on it.

``ConnectionLifecycle`` owns the connection outright. ``SynchronizedLifecycle``
first asks a ``TransactionSynchronizer`` whether an outer unit of work already
holds a connection for the data source; such connections are marked
``externally_managed`` and their transaction boundary is left alone.

Transaction state lives on the handle itself: begin turns autocommit off,
commit/rollback only act while autocommit is off.
"""

import logging

from dsrouter.core.exceptions import DsRouterError, PersistenceError, TransactionError
from dsrouter.core.sync import TransactionSynchronizer
from dsrouter.models import (
    ConnectionEntry,
    ConnectionHandle,
    DataSourceEntry,
    TransactionIsolation,
)

_log = logging.getLogger(__name__)


class ConnectionLifecycle:
    """Base lifecycle: the director owns every connection it hands out."""

    def acquire(
        self,
        datasource_entry: DataSourceEntry,
        isolation: TransactionIsolation,
        desired_autocommit: bool,
    ) -> ConnectionEntry:
        try:
            connection = datasource_entry.datasource.connect()
        except DsRouterError:
            raise
        except Exception as e:
            raise PersistenceError(
                f"Error getting connection. Cause: {e}", key=datasource_entry.key.id
            ) from e
        if connection is None:
            raise PersistenceError(
                "Failed to get connection with a null value", key=datasource_entry.key.id
            )
        entry = ConnectionEntry(datasource_entry, connection)
        try:
            self._apply_policy(entry, isolation, desired_autocommit)
        except Exception as e:
            _close_quiet(connection)
            raise TransactionError(
                "Error configuring transaction isolation or autocommit. "
                "Your driver may not support them. Requested settings: "
                f"isolation={isolation.value}, autocommit={desired_autocommit}. "
                f"Cause: {e}",
                key=datasource_entry.key.id,
            ) from e
        return entry

    def release(self, entry: ConnectionEntry) -> None:
        connection = entry.connection
        try:
            if not connection.is_open():
                return
        except Exception as e:
            raise PersistenceError(f"Error releasing connection. Cause: {e}") from e
        # Some databases open a transaction on SELECT and refuse to close a
        # connection with one pending.
        try:
            if not connection.get_autocommit():
                _log.debug("Resetting autocommit to true on connection [%s]", entry)
                connection.set_autocommit(True)
        except Exception as e:
            _log.debug(
                "Error resetting autocommit to true before closing the connection. Cause: %s",
                e,
            )
        _log.debug("Releasing connection [%s]", entry)
        try:
            connection.close()
        except Exception as e:
            raise PersistenceError(f"Error releasing connection. Cause: {e}") from e

    def begin(self, entry: ConnectionEntry) -> None:
        connection = entry.connection
        try:
            if connection.get_autocommit():
                _log.debug("Begin transaction on connection [%s]", entry)
                connection.set_autocommit(False)
        except Exception as e:
            raise TransactionError(f"Error beginning transaction. Cause: {e}") from e

    def commit(self, entry: ConnectionEntry) -> None:
        connection = entry.connection
        try:
            if not connection.get_autocommit():
                _log.debug("Commit transaction on connection [%s]", entry)
                connection.commit()
        except Exception as e:
            raise TransactionError(f"Error committing transaction. Cause: {e}") from e

    def rollback(self, entry: ConnectionEntry) -> None:
        connection = entry.connection
        try:
            if not connection.get_autocommit():
                _log.debug("Rollback transaction on connection [%s]", entry)
                connection.rollback()
        except Exception as e:
            raise TransactionError(f"Error rolling back transaction. Cause: {e}") from e

    @staticmethod
    def _apply_policy(
        entry: ConnectionEntry,
        isolation: TransactionIsolation,
        desired_autocommit: bool,
    ) -> None:
        connection = entry.connection
        if isolation is not TransactionIsolation.NONE:
            _log.debug(
                "Setting isolation to %s on connection [%s]", isolation.value, entry
            )
            connection.set_isolation_level(isolation)
        if connection.get_autocommit() != desired_autocommit:
            _log.debug(
                "Setting autocommit to %s on connection [%s]", desired_autocommit, entry
            )
            connection.set_autocommit(desired_autocommit)


class SynchronizedLifecycle(ConnectionLifecycle):
    """Defers to an outer transaction synchronizer when it owns the connection."""

    def __init__(self, synchronizer: TransactionSynchronizer) -> None:
        if synchronizer is None:
            raise ValueError("SynchronizedLifecycle requires a synchronizer")
        self.synchronizer = synchronizer

    def acquire(
        self,
        datasource_entry: DataSourceEntry,
        isolation: TransactionIsolation,
        desired_autocommit: bool,
    ) -> ConnectionEntry:
        datasource = datasource_entry.datasource
        try:
            connection = self.synchronizer.get_managed_connection(datasource)
            managed = connection is not None and self.synchronizer.is_managed(
                connection, datasource
            )
            if connection is not None and not managed:
                self.synchronizer.release_managed_connection(connection, datasource)
        except Exception as e:
            raise PersistenceError(
                f"Error acquiring managed connection. Cause: {e}",
                key=datasource_entry.key.id,
            ) from e
        if not managed:
            return super().acquire(datasource_entry, isolation, desired_autocommit)
        _log.debug("Connection [%s] will be managed externally", connection)
        return ConnectionEntry(datasource_entry, connection, externally_managed=True)

    def release(self, entry: ConnectionEntry) -> None:
        if not entry.externally_managed:
            super().release(entry)
            return
        try:
            self.synchronizer.release_managed_connection(
                entry.connection, entry.datasource
            )
        except Exception as e:
            raise PersistenceError(
                f"Error releasing managed connection. Cause: {e}"
            ) from e

    def begin(self, entry: ConnectionEntry) -> None:
        if entry.externally_managed:
            _log.debug("Transaction on [%s] is controlled externally", entry)
            return
        super().begin(entry)

    def commit(self, entry: ConnectionEntry) -> None:
        if entry.externally_managed:
            _log.debug("Skipping commit on externally managed [%s]", entry)
            return
        super().commit(entry)

    def rollback(self, entry: ConnectionEntry) -> None:
        if entry.externally_managed:
            _log.debug("Skipping rollback on externally managed [%s]", entry)
            return
        super().rollback(entry)


def _close_quiet(connection: ConnectionHandle) -> None:
    try:
        connection.close()
    except Exception:
        _log.debug("Error closing connection after failed setup", exc_info=True)
