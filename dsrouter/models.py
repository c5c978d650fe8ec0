"""
Core value types: product/isolation enums, data source keys and entries,
connection entries, and the capability protocols the router and director
consume (DataSource, ConnectionHandle, KeyRouter).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Protocol, runtime_checkable

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ProductTypeEnum(str, Enum):
    """Supported database product types (postgres, mysql)."""

    POSTGRES = "postgres"
    MYSQL = "mysql"


class TransactionIsolation(str, Enum):
    """Transaction isolation levels, mapped 1:1 to the standard constants."""

    NONE = "none"
    READ_UNCOMMITTED = "read_uncommitted"
    READ_COMMITTED = "read_committed"
    REPEATABLE_READ = "repeatable_read"
    SERIALIZABLE = "serializable"

    @property
    def level(self) -> int:
        """Standard numeric constant (0, 1, 2, 4, 8)."""
        return _ISOLATION_LEVELS[self]

    @property
    def sql(self) -> str | None:
        """SQL spelling, e.g. ``READ COMMITTED``. ``None`` for NONE."""
        if self is TransactionIsolation.NONE:
            return None
        return self.name.replace("_", " ")

    @classmethod
    def from_level(cls, level: int) -> TransactionIsolation:
        for member, value in _ISOLATION_LEVELS.items():
            if value == level:
                return member
        raise ValueError(f"Unknown transaction isolation level: {level}")


_ISOLATION_LEVELS: dict[TransactionIsolation, int] = {
    TransactionIsolation.NONE: 0,
    TransactionIsolation.READ_UNCOMMITTED: 1,
    TransactionIsolation.READ_COMMITTED: 2,
    TransactionIsolation.REPEATABLE_READ: 4,
    TransactionIsolation.SERIALIZABLE: 8,
}


# ---------------------------------------------------------------------------
# Capabilities
# ---------------------------------------------------------------------------


@runtime_checkable
class ConnectionHandle(Protocol):
    """The subset of a live connection the director needs."""

    def is_open(self) -> bool: ...

    def get_autocommit(self) -> bool: ...

    def set_autocommit(self, value: bool) -> None: ...

    def get_isolation_level(self) -> TransactionIsolation: ...

    def set_isolation_level(self, isolation: TransactionIsolation) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def close(self) -> None: ...


@runtime_checkable
class DataSource(Protocol):
    """A connection-providing resource (driver, pool, ...)."""

    def connect(self) -> ConnectionHandle: ...


# ---------------------------------------------------------------------------
# Keys and entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DataSourceKey:
    """Name under which a data source is registered.

    ``DataSourceKey.DEFAULT`` (empty id) denotes the unnamed default data
    source. Use ``DataSourceKey.of()`` to build keys so that ``None`` and
    ``""`` collapse to DEFAULT.
    """

    id: str

    DEFAULT: ClassVar[DataSourceKey]

    @classmethod
    def of(cls, id: object) -> DataSourceKey:
        """Key for ``id``; ``None`` and ``""`` give DEFAULT, anything else is str()-ed."""
        if id is None or id == "":
            return cls.DEFAULT
        return cls(str(id))

    @property
    def is_default(self) -> bool:
        return self.id == ""

    def __str__(self) -> str:
        return self.id


DataSourceKey.DEFAULT = DataSourceKey("")


# (data, sql, params, args) -> key, or None to abstain
KeyRouter = Callable[
    [Any, str | None, Mapping[str, Any], Sequence[Any]],
    DataSourceKey | str | None,
]


@dataclass(frozen=True)
class DataSourceEntry:
    """A data source paired with the key it was resolved or registered under."""

    key: DataSourceKey
    datasource: DataSource

    def __post_init__(self) -> None:
        if self.key is None:
            raise ValueError("DataSourceEntry requires a key")
        if self.datasource is None:
            raise ValueError("DataSourceEntry requires a datasource")

    def __str__(self) -> str:
        return f"{self.key.id or '<default>'} -> {self.datasource!r}"


@dataclass(frozen=True)
class ConnectionEntry:
    """A resolved data source and the live connection handed out for it.

    ``externally_managed`` is captured at acquisition: when True the
    transaction boundary belongs to an outer synchronizer and the director
    will neither commit, roll back nor close the connection itself.
    """

    datasource_entry: DataSourceEntry
    connection: ConnectionHandle
    externally_managed: bool = False

    def __post_init__(self) -> None:
        if self.datasource_entry is None:
            raise ValueError("ConnectionEntry requires a datasource_entry")
        if self.connection is None:
            raise ValueError("ConnectionEntry requires a connection")

    @property
    def key(self) -> DataSourceKey:
        return self.datasource_entry.key

    @property
    def datasource(self) -> DataSource:
        return self.datasource_entry.datasource

    def __str__(self) -> str:
        return f"{self.datasource_entry} : {self.connection!r}"
