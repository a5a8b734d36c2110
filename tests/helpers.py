"""Test doubles shared across the unit tests: virtual clock and scripted status source."""

from __future__ import annotations

import itertools
import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from signal_scan.models.session import RawResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from signal_scan.poller.scheduler import PollScheduler


# ---------------------------------------------------------------------------
# Virtual clock
# ---------------------------------------------------------------------------


@dataclass
class VirtualTimer:
    """Handle returned by ``VirtualScheduler.schedule``."""

    due: float
    seq: int
    callback: Callable[[], None]
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class VirtualScheduler:
    """``TimerScheduler`` driven by explicit ``advance`` calls."""

    now: float = 0.0
    timers: list[VirtualTimer] = field(default_factory=list)
    _seq: itertools.count = field(default_factory=itertools.count)

    def schedule(self, delay: float, callback: Callable[[], None]) -> VirtualTimer:
        timer = VirtualTimer(due=self.now + delay, seq=next(self._seq), callback=callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[VirtualTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due callbacks in order."""
        target = self.now + seconds
        while True:
            due = [t for t in self.pending if t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.due, t.seq))
            self.now = timer.due
            timer.fired = True
            timer.callback()
        self.now = target


# ---------------------------------------------------------------------------
# Scripted status source
# ---------------------------------------------------------------------------


class ScriptedFetch:
    """Async fetch callable replaying a script of responses.

    Each call consumes the next item; the last item repeats forever.
    Exception instances in the script are raised instead of returned.
    """

    def __init__(self, *script: RawResponse | BaseException) -> None:
        if not script:
            msg = "ScriptedFetch needs at least one response"
            raise ValueError(msg)
        self._script = list(script)
        self.calls: list[str] = []

    async def __call__(self, identifier: str) -> RawResponse:
        self.calls.append(identifier)
        item = self._script.pop(0) if len(self._script) > 1 else self._script[0]
        if isinstance(item, BaseException):
            raise item
        return item


def json_response(status_code: int = 200, body: Any = None) -> RawResponse:
    """Build a ``RawResponse`` as the HTTP client would for a JSON body."""
    return RawResponse(
        status_code=status_code,
        body=body,
        text=json.dumps(body) if body is not None else "",
    )


PENDING = json_response(200, {"status": "pending"})

COMPLETE_BODY: dict[str, Any] = {
    "status": "complete",
    "publicId": "abc123",
    "company": "Acme Inc",
    "customer_report": "Overview:\nAll good.",
    "createdAt": "2026-02-15T12:00:00Z",
    "metadata": {"confidence_level": "High"},
}


async def drive(poller: PollScheduler, scheduler: VirtualScheduler, *, max_steps: int = 100) -> None:
    """Run a started poller on the virtual clock until its session settles."""
    await poller.wait_idle()
    steps = 0
    while poller.session.is_active and steps < max_steps:
        scheduler.advance(poller.interval)
        await poller.wait_idle()
        steps += 1
