from .builder import DirectorBuilder
from .director import Director
from .exceptions import (
    ConfigurationError,
    DsRouterError,
    PersistenceError,
    TransactionError,
)
from .holder import (
    configure_director,
    configure_director_from_settings,
    get_director,
    reset_director,
    set_director,
)
from .lifecycle import ConnectionLifecycle, SynchronizedLifecycle
from .router import DataSourceRouter
from .sync import ThreadLocalSynchronizer, TransactionSynchronizer

__all__ = [
    "Director",
    "DirectorBuilder",
    "DataSourceRouter",
    "ConnectionLifecycle",
    "SynchronizedLifecycle",
    "TransactionSynchronizer",
    "ThreadLocalSynchronizer",
    "DsRouterError",
    "ConfigurationError",
    "PersistenceError",
    "TransactionError",
    "get_director",
    "set_director",
    "configure_director",
    "configure_director_from_settings",
    "reset_director",
]
