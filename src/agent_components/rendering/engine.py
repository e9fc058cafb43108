"""One-time initialization of external rendering engines."""

from __future__ import annotations

from collections.abc import Callable
import copy
import logging
import threading
from typing import Any

log = logging.getLogger(__name__)

# Options passed to the diagram engine's initialize call (engine key names)
DIAGRAM_ENGINE_DEFAULTS: dict[str, Any] = {
    "startOnLoad": False,
    "theme": "default",
    "securityLevel": "loose",
    "fontFamily": "inherit",
    "themeVariables": {"background": "transparent"},
}


def default_diagram_options() -> dict[str, Any]:
    """Return a fresh copy of the diagram engine options."""
    return copy.deepcopy(DIAGRAM_ENGINE_DEFAULTS)


class EngineInitializer:
    """Runs an engine's initialization exactly once.

    `ensure_initialized()` is safe to call from any number of threads or
    render calls; the init callable runs under a lock with a single
    check-and-set. A failing init leaves the initializer uninitialized so a
    later call retries.
    """

    def __init__(self, init: Callable[[], object]) -> None:
        """Initialize with the callable that configures the engine."""
        self._init = init
        self._lock = threading.Lock()
        self._initialized = False

    @property
    def initialized(self) -> bool:
        """Whether the engine has been initialized."""
        return self._initialized

    def ensure_initialized(self) -> bool:
        """Initialize the engine if needed.

        Returns:
            True if this call ran the initialization, False if it had already
            happened.
        """
        if self._initialized:
            return False
        with self._lock:
            if self._initialized:
                return False
            self._init()
            self._initialized = True
        log.debug("Rendering engine initialized")
        return True
