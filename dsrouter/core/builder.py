"""
Fluent builder that assembles a DataSourceRouter and a Director.

    director = (
        Director.builder()
        .default_datasource(primary)
        .add_datasource("replica", replica)
        .add_key_router(lambda data, sql, params, args: "replica" if data == "ro" else None)
        .transaction_isolation(TransactionIsolation.READ_COMMITTED)
        .build()
    )
"""

from __future__ import annotations

import logging

from dsrouter.core.config import Settings, get_settings
from dsrouter.core.director import Director
from dsrouter.core.exceptions import ConfigurationError
from dsrouter.core.lifecycle import ConnectionLifecycle, SynchronizedLifecycle
from dsrouter.core.router import DataSourceRouter
from dsrouter.core.sync import TransactionSynchronizer
from dsrouter.models import (
    DataSource,
    DataSourceEntry,
    DataSourceKey,
    KeyRouter,
    TransactionIsolation,
)

_log = logging.getLogger(__name__)


class DirectorBuilder:
    """Accumulates configuration; ``build()`` requires a default data source."""

    def __init__(self) -> None:
        self._default_datasource: DataSource | None = None
        self._datasources: list[DataSourceEntry] = []
        self._key_routers: list[KeyRouter] = []
        self._default_key_router: KeyRouter | None = None
        self._transaction_isolation = TransactionIsolation.NONE
        self._desired_autocommit = True
        self._synchronizer: TransactionSynchronizer | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> DirectorBuilder:
        """
        Builder pre-filled from ``Settings``: one DriverDataSource per entry in
        DATASOURCES, registered under its name; DEFAULT_DATASOURCE (or the
        first entry) is also the default data source.
        """
        from dsrouter.core.drivers import DriverDataSource

        settings = settings or get_settings()
        builder = (
            cls()
            .transaction_isolation(settings.TRANSACTION_ISOLATION)
            .desired_autocommit(settings.DESIRED_AUTOCOMMIT)
        )
        if not settings.DATASOURCES:
            return builder

        by_name: dict[str, DataSource] = {}
        for config in settings.DATASOURCES:
            datasource = DriverDataSource(
                config, connect_timeout=settings.EXTERNAL_DB_CONNECT_TIMEOUT
            )
            by_name[config.name] = datasource
            builder.add_datasource(config.name, datasource)

        default_name = settings.DEFAULT_DATASOURCE or settings.DATASOURCES[0].name
        if default_name not in by_name:
            raise ConfigurationError(
                f"DEFAULT_DATASOURCE {default_name!r} is not one of the configured DATASOURCES",
                default_datasource=default_name,
            )
        builder.default_datasource(by_name[default_name])
        _log.debug(
            "Configured %d data source(s) from settings, default=%s",
            len(by_name),
            default_name,
        )
        return builder

    def default_datasource(self, datasource: DataSource | None) -> DirectorBuilder:
        self._default_datasource = datasource
        return self

    def add_datasource(
        self, key: DataSourceKey | str, datasource: DataSource
    ) -> DirectorBuilder:
        if isinstance(key, str):
            key = DataSourceKey.of(key)
        self._datasources.append(DataSourceEntry(key, datasource))
        return self

    def add_key_router(self, key_router: KeyRouter | None) -> DirectorBuilder:
        if key_router is not None:
            self._key_routers.append(key_router)
        return self

    def default_key_router(self, key_router: KeyRouter | None) -> DirectorBuilder:
        self._default_key_router = key_router
        return self

    def transaction_isolation(
        self, isolation: TransactionIsolation | None
    ) -> DirectorBuilder:
        self._transaction_isolation = isolation or TransactionIsolation.NONE
        return self

    def desired_autocommit(self, desired_autocommit: bool) -> DirectorBuilder:
        self._desired_autocommit = desired_autocommit
        return self

    def synchronizer(
        self, synchronizer: TransactionSynchronizer | None
    ) -> DirectorBuilder:
        """Defer to an external transaction synchronizer (SynchronizedLifecycle)."""
        self._synchronizer = synchronizer
        return self

    def build(self) -> Director:
        if self._default_datasource is None:
            raise ConfigurationError("No default data source is set.")
        router = DataSourceRouter(
            self._default_datasource,
            key_routers=self._key_routers,
            default_key_router=self._default_key_router,
        )
        for entry in self._datasources:
            router.register_datasource_entry(entry)

        lifecycle = (
            SynchronizedLifecycle(self._synchronizer)
            if self._synchronizer is not None
            else ConnectionLifecycle()
        )
        return Director(
            router,
            transaction_isolation=self._transaction_isolation,
            desired_autocommit=self._desired_autocommit,
            lifecycle=lifecycle,
        )
