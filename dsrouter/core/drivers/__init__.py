"""
Driver-backed data sources for external databases (psycopg, pymysql).
"""

from .connect import connect
from .datasource import DriverDataSource
from .handles import PsycopgHandle, PyMySQLHandle, wrap_connection

__all__ = [
    "connect",
    "DriverDataSource",
    "PsycopgHandle",
    "PyMySQLHandle",
    "wrap_connection",
]
