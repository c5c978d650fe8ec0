"""
Open raw DB-API connections for a DataSourceConfig.

Uses psycopg (PostgreSQL) or pymysql (MySQL) based on product_type.
Mappings and attribute objects are validated into a DataSourceConfig first.
"""

from typing import Any

import psycopg
import pymysql

from dsrouter.core.config import DataSourceConfig, as_datasource_config, get_settings
from dsrouter.models import ProductTypeEnum


def connect(datasource: DataSourceConfig | Any, *, timeout: int | None = None) -> Any:
    """
    Open a connection to an external DB.

    - datasource: DataSourceConfig, or a dict with the same fields.
    - timeout: connect timeout in seconds; defaults to EXTERNAL_DB_CONNECT_TIMEOUT.
    """
    config = as_datasource_config(datasource)
    if timeout is None:
        timeout = get_settings().EXTERNAL_DB_CONNECT_TIMEOUT

    if config.product_type == ProductTypeEnum.POSTGRES:
        return psycopg.connect(
            host=config.host,
            port=config.effective_port,
            dbname=config.database,
            user=config.username,
            password=config.password,
            connect_timeout=timeout,
        )
    if config.product_type == ProductTypeEnum.MYSQL:
        return pymysql.connect(
            host=config.host,
            port=config.effective_port,
            database=config.database,
            user=config.username,
            password=config.password,
            connect_timeout=timeout,
        )
    raise ValueError(f"Unsupported product_type: {config.product_type}")
