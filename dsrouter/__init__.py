"""
dsrouter: route database connections across data sources and manage their
transactional envelope.
"""

from dsrouter.core import (
    ConfigurationError,
    ConnectionLifecycle,
    DataSourceRouter,
    Director,
    DirectorBuilder,
    DsRouterError,
    PersistenceError,
    SynchronizedLifecycle,
    ThreadLocalSynchronizer,
    TransactionError,
    TransactionSynchronizer,
    configure_director,
    configure_director_from_settings,
    get_director,
    reset_director,
    set_director,
)
from dsrouter.models import (
    ConnectionEntry,
    ConnectionHandle,
    DataSource,
    DataSourceEntry,
    DataSourceKey,
    KeyRouter,
    ProductTypeEnum,
    TransactionIsolation,
)

__all__ = [
    "ConfigurationError",
    "ConnectionEntry",
    "ConnectionHandle",
    "ConnectionLifecycle",
    "DataSource",
    "DataSourceEntry",
    "DataSourceKey",
    "DataSourceRouter",
    "Director",
    "DirectorBuilder",
    "DsRouterError",
    "KeyRouter",
    "PersistenceError",
    "ProductTypeEnum",
    "SynchronizedLifecycle",
    "ThreadLocalSynchronizer",
    "TransactionError",
    "TransactionIsolation",
    "TransactionSynchronizer",
    "configure_director",
    "configure_director_from_settings",
    "get_director",
    "reset_director",
    "set_director",
]
