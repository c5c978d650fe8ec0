"""
Transaction synchronization: lets an outer unit of work own a connection
(and its transaction boundary) that directors built with a
``SynchronizedLifecycle`` will then reuse instead of opening their own.
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol, runtime_checkable

from dsrouter.models import ConnectionHandle, DataSource, TransactionIsolation

_log = logging.getLogger(__name__)


@runtime_checkable
class TransactionSynchronizer(Protocol):
    """Capability set of an external transaction manager."""

    def get_managed_connection(self, datasource: DataSource) -> ConnectionHandle | None:
        """Connection bound to ``datasource`` for the current unit of work, if any."""
        ...

    def release_managed_connection(
        self, connection: ConnectionHandle, datasource: DataSource
    ) -> None: ...

    def is_managed(self, connection: ConnectionHandle, datasource: DataSource) -> bool: ...


class _Bindings(threading.local):
    def __init__(self) -> None:
        # id(datasource) -> (datasource, connection)
        self.connections: dict[int, tuple[DataSource, ConnectionHandle]] = {}


class ThreadLocalSynchronizer:
    """Per-thread connection bindings, one per data source.

    The binding owner (usually ``managed_transaction``) opens, commits or
    rolls back, and closes the connection; ``release_managed_connection``
    only hands it back.
    """

    def __init__(self) -> None:
        self._bindings = _Bindings()

    def bind(self, datasource: DataSource, connection: ConnectionHandle) -> None:
        if self._lookup(datasource) is not None:
            raise RuntimeError(f"A connection is already bound to {datasource!r}")
        self._bindings.connections[id(datasource)] = (datasource, connection)

    def unbind(self, datasource: DataSource) -> ConnectionHandle | None:
        bound = self._bindings.connections.pop(id(datasource), None)
        return bound[1] if bound is not None else None

    def get_managed_connection(self, datasource: DataSource) -> ConnectionHandle | None:
        return self._lookup(datasource)

    def release_managed_connection(
        self, connection: ConnectionHandle, datasource: DataSource
    ) -> None:
        _log.debug("Returning managed connection [%r] to its owner", connection)

    def is_managed(self, connection: ConnectionHandle, datasource: DataSource) -> bool:
        return connection is not None and self._lookup(datasource) is connection

    @contextmanager
    def managed_transaction(
        self,
        datasource: DataSource,
        isolation: TransactionIsolation = TransactionIsolation.NONE,
    ) -> Iterator[ConnectionHandle]:
        """
        Open a connection on ``datasource``, bind it for this thread and run
        the block in one transaction: commit on success, rollback on error.

        Re-entering for a data source that is already bound joins the outer
        transaction instead of opening a new one.
        """
        existing = self._lookup(datasource)
        if existing is not None:
            yield existing
            return

        connection = datasource.connect()
        try:
            if isolation is not TransactionIsolation.NONE:
                connection.set_isolation_level(isolation)
            if connection.get_autocommit():
                connection.set_autocommit(False)
        except Exception:
            _close_quiet(connection)
            raise
        self.bind(datasource, connection)
        try:
            yield connection
        except BaseException:
            self.unbind(datasource)
            try:
                connection.rollback()
            except Exception:
                _log.error("Error rolling back managed transaction", exc_info=True)
            _close_quiet(connection)
            raise

        self.unbind(datasource)
        try:
            connection.commit()
        except Exception:
            _close_quiet(connection)
            raise
        connection.close()

    def _lookup(self, datasource: DataSource) -> ConnectionHandle | None:
        bound = self._bindings.connections.get(id(datasource))
        if bound is None or bound[0] is not datasource:
            return None
        return bound[1]


def _close_quiet(connection: ConnectionHandle) -> None:
    try:
        connection.close()
    except Exception:
        _log.error("Error closing managed connection", exc_info=True)
