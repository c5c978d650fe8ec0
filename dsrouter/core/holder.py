"""
Process-wide Director.

One module-level reference, replaced under ``_director_lock``. Last write
wins; callers that already fetched a Director keep using it, and connections
acquired through the old instance are not touched by a replacement.
Prefer passing a Director explicitly where that is practical.
"""

import logging
import threading
from collections.abc import Callable

from dsrouter.core.builder import DirectorBuilder
from dsrouter.core.config import Settings
from dsrouter.core.director import Director
from dsrouter.core.exceptions import ConfigurationError

_log = logging.getLogger(__name__)

_director: Director | None = None
_director_lock = threading.Lock()


def get_director() -> Director:
    """Return the process-wide Director. Raises ConfigurationError if unset."""
    director = _director
    if director is None:
        raise ConfigurationError("Director is not initialized")
    return director


def set_director(director: Director | None) -> None:
    """Replace the process-wide Director. None is ignored."""
    global _director
    if director is None:
        return
    with _director_lock:
        _director = director
    _log.debug("Process-wide director replaced")


def configure_director(
    configurator: Callable[[DirectorBuilder], None] | None = None,
) -> Director:
    """Build a Director from a fresh builder passed to ``configurator`` and install it."""
    builder = DirectorBuilder()
    if configurator is not None:
        configurator(builder)
    director = builder.build()
    set_director(director)
    return director


def configure_director_from_settings(settings: Settings | None = None) -> Director:
    """Build and install a Director from DSROUTER_* settings."""
    director = DirectorBuilder.from_settings(settings).build()
    set_director(director)
    return director


def reset_director() -> None:
    """Forget the process-wide Director (tests)."""
    global _director
    with _director_lock:
        _director = None
