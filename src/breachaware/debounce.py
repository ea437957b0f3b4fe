"""
Input debouncing on the asyncio event loop.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import logging
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Debouncer(Generic[T]):
    """Collapse a burst of values into one settled value.

    Every ``push`` restarts the idle timer. When the timer expires the
    last pushed value is handed to ``callback``. Must be used from a
    running event loop.
    """

    def __init__(
        self,
        callback: Callable[[T], None],
        delay: float = 0.5,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        """Initialize debouncer.

        Args:
            callback: Called with the settled value
            delay: Idle seconds before a value settles; <= 0 emits immediately
            loop: Event loop for the timer (default: the running loop)
        """
        self.callback = callback
        self.delay = delay
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._value: T | None = None
        self._last_emitted: T | None = None
        self._has_emitted = False
        self._seen_input = False

    @property
    def pending(self) -> bool:
        """True while an emission is scheduled."""
        return self._handle is not None

    def push(self, value: T) -> None:
        """Record a new input value and restart the idle timer."""
        self.cancel()

        if not value and not self._seen_input:
            # Initial empty value before any real input
            return
        self._seen_input = True
        self._value = value

        if self.delay <= 0:
            self._fire()
            return

        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        """Drop any pending emission."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> None:
        """Emit a pending value now instead of waiting for the timer."""
        if self._handle is not None:
            self.cancel()
            self._fire()

    def _fire(self) -> None:
        self._handle = None
        value = self._value
        if self._has_emitted and value == self._last_emitted:
            logger.debug("Settled value unchanged, not emitting")
            return
        self._last_emitted = value
        self._has_emitted = True
        self.callback(value)
