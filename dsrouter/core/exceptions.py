"""
Error types raised by the router and director.

Driver exceptions are chained as ``__cause__`` (``raise ... from exc``);
the message names the failing operation and repeats the cause.
"""

from typing import Any


class DsRouterError(Exception):
    """Base class for all dsrouter errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Structured form for log records."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class ConfigurationError(DsRouterError):
    """No data source can be determined, or the director is misconfigured."""


class PersistenceError(DsRouterError):
    """Obtaining, inspecting or closing a connection failed."""


class TransactionError(DsRouterError):
    """Configuring isolation/autocommit or a begin/commit/rollback failed."""
