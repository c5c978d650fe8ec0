"""
Settings loaded from the environment (and ``.env``), prefixed ``DSROUTER_``.

    DSROUTER_TRANSACTION_ISOLATION=read_committed
    DSROUTER_DESIRED_AUTOCOMMIT=false
    DSROUTER_DATASOURCES='[{"name": "primary", "product_type": "postgres", ...}]'
    DSROUTER_DEFAULT_DATASOURCE=primary

Nothing is read at import time; ``get_settings()`` loads on first use.
"""

from functools import lru_cache
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dsrouter.core.exceptions import ConfigurationError
from dsrouter.models import ProductTypeEnum, TransactionIsolation


class DataSourceConfig(BaseModel):
    """Connection parameters for one external database."""

    name: str = Field(min_length=1)
    product_type: ProductTypeEnum
    host: str
    port: int | None = None
    database: str
    username: str
    password: str = Field(default="", repr=False)

    @property
    def effective_port(self) -> int:
        if self.port:
            return self.port
        return 3306 if self.product_type == ProductTypeEnum.MYSQL else 5432


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DSROUTER_",
        env_ignore_empty=True,
        extra="ignore",
    )

    EXTERNAL_DB_CONNECT_TIMEOUT: int = 10
    TRANSACTION_ISOLATION: TransactionIsolation = TransactionIsolation.NONE
    DESIRED_AUTOCOMMIT: bool = True

    DATASOURCES: list[DataSourceConfig] = []
    DEFAULT_DATASOURCE: str | None = None

    @field_validator("TRANSACTION_ISOLATION", mode="before")
    @classmethod
    def _normalize_isolation(cls, v: Any) -> Any:
        if isinstance(v, str) and v.strip().isdigit():
            return TransactionIsolation.from_level(int(v))
        if isinstance(v, str):
            return v.strip().lower().replace("-", "_").replace(" ", "_")
        if isinstance(v, int) and not isinstance(v, bool):
            return TransactionIsolation.from_level(v)
        return v


def _describe(e: ValidationError) -> list[str]:
    # input values are left out, they may hold passwords
    return [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide Settings, read once. ``get_settings.cache_clear()`` re-reads."""
    try:
        return Settings()  # type: ignore
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid DSROUTER_* settings", errors=_describe(e)
        ) from e


def as_datasource_config(datasource: Any) -> DataSourceConfig:
    """Validate a mapping (or attribute object) into a DataSourceConfig."""
    if isinstance(datasource, DataSourceConfig):
        return datasource
    try:
        return DataSourceConfig.model_validate(datasource, from_attributes=True)
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid data source config", errors=_describe(e)
        ) from e
