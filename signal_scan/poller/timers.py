"""Injectable timer capability.

The poller never touches wall-clock timers directly; it asks a
``TimerScheduler`` to run a callback after a delay and keeps the returned
handle so the callback can be cancelled.  Production code uses the
running asyncio loop; tests substitute a virtual clock.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable


class TimerHandle(Protocol):
    """Cancellation token for a scheduled callback."""

    def cancel(self) -> None: ...


class TimerScheduler(Protocol):
    """Runs a callback once after ``delay`` seconds."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioTimerScheduler:
    """``TimerScheduler`` backed by ``loop.call_later``.

    The loop is resolved lazily on each call so one instance can be
    created before the event loop starts.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)
