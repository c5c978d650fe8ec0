"""Unit tests for the process-wide director holder."""

import threading

import pytest

from dsrouter.core import holder
from dsrouter.core.builder import DirectorBuilder
from dsrouter.core.config import DataSourceConfig, Settings
from dsrouter.core.exceptions import ConfigurationError
from dsrouter.models import DataSourceKey, ProductTypeEnum, TransactionIsolation
from tests.utils.fakes import FakeDataSource


def test_get_before_init_raises() -> None:
    with pytest.raises(ConfigurationError, match="not initialized"):
        holder.get_director()


def test_set_and_get(default_ds: FakeDataSource) -> None:
    director = DirectorBuilder().default_datasource(default_ds).build()
    holder.set_director(director)
    assert holder.get_director() is director


def test_set_none_is_ignored(default_ds: FakeDataSource) -> None:
    director = DirectorBuilder().default_datasource(default_ds).build()
    holder.set_director(director)
    holder.set_director(None)
    assert holder.get_director() is director


def test_configure_director(default_ds: FakeDataSource) -> None:
    director = holder.configure_director(
        lambda b: b.default_datasource(default_ds).transaction_isolation(
            TransactionIsolation.SERIALIZABLE
        )
    )
    assert holder.get_director() is director
    assert director.transaction_isolation is TransactionIsolation.SERIALIZABLE
    entry = director.acquire_connection()
    assert entry.connection.isolation is TransactionIsolation.SERIALIZABLE
    director.release_connection(entry)


def test_configure_without_default_keeps_previous(default_ds: FakeDataSource) -> None:
    previous = holder.configure_director(lambda b: b.default_datasource(default_ds))
    with pytest.raises(ConfigurationError):
        holder.configure_director(None)
    assert holder.get_director() is previous


def test_replacement_does_not_touch_issued_connections(default_ds: FakeDataSource) -> None:
    old = holder.configure_director(lambda b: b.default_datasource(default_ds))
    entry = old.acquire_connection()
    other = FakeDataSource("other")
    new = holder.configure_director(lambda b: b.default_datasource(other))
    assert holder.get_director() is new
    assert entry.connection.closed is False
    assert entry.datasource is default_ds
    old.release_connection(entry)
    assert entry.connection.closed is True


def test_configure_from_settings() -> None:
    settings = Settings(
        _env_file=None,
        DATASOURCES=[
            DataSourceConfig(
                name="primary",
                product_type=ProductTypeEnum.POSTGRES,
                host="localhost",
                database="app",
                username="u",
            )
        ]
    )
    director = holder.configure_director_from_settings(settings)
    assert holder.get_director() is director
    assert DataSourceKey.of("primary") in director.router.entries()


def test_concurrent_readers_see_complete_instances() -> None:
    directors = [
        DirectorBuilder().default_datasource(FakeDataSource(str(i))).build()
        for i in range(20)
    ]
    holder.set_director(directors[0])
    errors: list[BaseException] = []
    stop = threading.Event()

    def reader() -> None:
        while not stop.is_set():
            try:
                assert holder.get_director() in directors
            except BaseException as e:  # noqa: BLE001
                errors.append(e)
                return

    readers = [threading.Thread(target=reader) for _ in range(4)]
    for t in readers:
        t.start()
    for d in directors:
        holder.set_director(d)
    stop.set()
    for t in readers:
        t.join()
    assert errors == []
    assert holder.get_director() is directors[-1]
