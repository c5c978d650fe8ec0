"""
DriverDataSource: a DataSource that opens a fresh driver connection on every
``connect()``. Pooling, if wanted, belongs to a different DataSource.
"""

import logging
from typing import Any

from dsrouter.core.config import DataSourceConfig, as_datasource_config
from dsrouter.models import ProductTypeEnum

from .connect import connect
from .handles import PsycopgHandle, PyMySQLHandle, wrap_connection

_log = logging.getLogger(__name__)


class DriverDataSource:
    """Connects with psycopg or pymysql according to ``config.product_type``."""

    def __init__(
        self, config: DataSourceConfig | Any, *, connect_timeout: int | None = None
    ) -> None:
        self.config = as_datasource_config(config)
        self.connect_timeout = connect_timeout

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def product_type(self) -> ProductTypeEnum:
        return self.config.product_type

    def connect(self) -> PsycopgHandle | PyMySQLHandle:
        conn = connect(self.config, timeout=self.connect_timeout)
        _log.debug("Opened %s connection for data source %r", self.product_type.value, self.name)
        return wrap_connection(conn, self.product_type)

    def __repr__(self) -> str:
        return f"DriverDataSource(name={self.name!r}, product_type={self.product_type.value!r})"
