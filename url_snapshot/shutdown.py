"""Cooperative shutdown: signals set a token that the main loop polls."""

from __future__ import annotations

import logging
import signal
import threading
from types import FrameType
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownCoordinator:
    """Two-state machine (running -> shutting down) acting as a cancellation token.

    The transition happens at most once; later requests are no-ops. The main
    loop checks ``requested`` before starting each URL, so a URL already in
    flight finishes before the loop stops.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._previous: Dict[int, Any] = {}
        self.reason: Optional[str] = None

    @property
    def requested(self) -> bool:
        return self._event.is_set()

    def request(self, reason: str = "shutdown requested") -> bool:
        """Begin shutting down. Returns False if already shutting down."""
        # Signal handlers re-enter this on the main thread; it must not block.
        if self._event.is_set():
            logger.debug("Shutdown already in progress, ignoring: %s", reason)
            return False
        self._event.set()
        self.reason = reason
        logger.warning(
            "Graceful shutdown initiated (%s); finishing current URL before exit", reason
        )
        return True

    def _handle_signal(self, signum: int, frame: Optional[FrameType]) -> None:
        self.request(signal.Signals(signum).name)

    def install(self, signals: Iterable[signal.Signals] = DEFAULT_SIGNALS) -> None:
        """Route the given signals to this coordinator (main thread only)."""
        for sig in signals:
            self._previous[sig] = signal.signal(sig, self._handle_signal)

    def restore(self) -> None:
        for sig, handler in self._previous.items():
            signal.signal(sig, handler)
        self._previous.clear()

    def __enter__(self) -> "ShutdownCoordinator":
        self.install()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.restore()
