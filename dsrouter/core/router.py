"""
Data source router: picks the data source that should serve a call.

Resolution walks the registered key routers in order (first non-None key
wins), then the designated default key router, then falls back to
``DataSourceKey.DEFAULT``. DEFAULT goes straight to the default data source;
any other key is looked up in the registry and, when missing, also falls
back to the default data source.

Writers copy-on-write under ``_lock`` and publish the new dict/tuple with a
single assignment, so a resolution pass always sees one consistent snapshot.
"""

import logging
import threading
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from dsrouter.core.exceptions import ConfigurationError
from dsrouter.models import DataSource, DataSourceEntry, DataSourceKey, KeyRouter

_log = logging.getLogger(__name__)


class DataSourceRouter:
    """Registry of data sources plus the ordered key-routing strategies."""

    def __init__(
        self,
        default_datasource: DataSource | None = None,
        key_routers: Iterable[KeyRouter | None] = (),
        default_key_router: KeyRouter | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._entries: dict[DataSourceKey, DataSourceEntry] = {}
        self._key_routers: tuple[KeyRouter, ...] = tuple(
            r for r in key_routers if r is not None
        )
        self._default_key_router = default_key_router
        self._default_datasource = default_datasource

    @property
    def default_datasource(self) -> DataSource | None:
        return self._default_datasource

    @property
    def default_key_router(self) -> KeyRouter | None:
        return self._default_key_router

    @property
    def key_routers(self) -> tuple[KeyRouter, ...]:
        return self._key_routers

    def entries(self) -> dict[DataSourceKey, DataSourceEntry]:
        """Snapshot copy of the registry."""
        return dict(self._entries)

    def register_datasource_entry(self, entry: DataSourceEntry | None) -> None:
        """Register (or replace) the data source for ``entry.key``. None is ignored."""
        if entry is None:
            return
        with self._lock:
            entries = dict(self._entries)
            entries[entry.key] = entry
            self._entries = entries
        _log.debug("Registered data source [%s]", entry)

    def register_key_router(self, key_router: KeyRouter | None) -> None:
        """Append a key router to the ordered list. None is ignored."""
        if key_router is None:
            return
        with self._lock:
            self._key_routers = self._key_routers + (key_router,)

    def determine_key(
        self,
        data: Any = None,
        sql: str | None = None,
        params: Mapping[str, Any] | None = None,
        args: Sequence[Any] | None = None,
    ) -> DataSourceKey:
        """Run the key routers; DEFAULT when none of them matched."""
        params = params if params is not None else {}
        args = args if args is not None else ()
        key: DataSourceKey | None = None
        for key_router in self._key_routers:
            key = _as_key(key_router(data, sql, params, args))
            if key is not None:
                break
        if key is None and self._default_key_router is not None:
            key = _as_key(self._default_key_router(data, sql, params, args))
        return key if key is not None else DataSourceKey.DEFAULT

    def determine_datasource(
        self,
        data: Any = None,
        sql: str | None = None,
        params: Mapping[str, Any] | None = None,
        args: Sequence[Any] | None = None,
    ) -> DataSourceEntry:
        """
        Resolve the call context to a data source entry.

        The returned entry pairs the resolved key with the chosen data source;
        on the fallback path that is the default data source, not the
        registered entry. Raises ConfigurationError when nothing matches and
        no default data source is configured.
        """
        key = self.determine_key(data, sql, params, args)
        default_datasource = self._default_datasource

        if key == DataSourceKey.DEFAULT and default_datasource is not None:
            return DataSourceEntry(key, default_datasource)

        entry = self._entries.get(key)
        if entry is not None:
            return DataSourceEntry(key, entry.datasource)
        if default_datasource is None:
            raise ConfigurationError(
                "No suitable data source found and no default data source configured.",
                key=key.id,
            )
        _log.debug("No data source registered for key %r, using default", key.id)
        return DataSourceEntry(key, default_datasource)


def _as_key(value: object) -> DataSourceKey | None:
    if value is None or isinstance(value, DataSourceKey):
        return value
    return DataSourceKey.of(value)
