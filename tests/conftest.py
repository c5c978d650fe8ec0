from collections.abc import Generator

import pytest

from dsrouter.core import holder
from dsrouter.core.config import get_settings
from tests.utils.fakes import FakeDataSource


@pytest.fixture(autouse=True)
def _reset_director() -> Generator[None, None, None]:
    holder.reset_director()
    get_settings.cache_clear()
    yield
    holder.reset_director()
    get_settings.cache_clear()


@pytest.fixture
def default_ds() -> FakeDataSource:
    return FakeDataSource("default")


@pytest.fixture
def db1_ds() -> FakeDataSource:
    return FakeDataSource("db1")
