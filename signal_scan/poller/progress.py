"""Progress estimator: cosmetic progress while a report is generating.

The backend exposes no intermediate progress, so the viewer shows a
randomised, monotonically increasing estimate that stops short of 100
until the session reaches a terminal state.  The estimator only ever
calls ``ReportSession.advance_progress``; it never affects classification
or transitions.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from signal_scan.poller.timers import AsyncioTimerScheduler

if TYPE_CHECKING:
    from collections.abc import Callable

    from signal_scan.core.config import PollerConfig
    from signal_scan.models.session import SessionSnapshot
    from signal_scan.poller.session import ReportSession
    from signal_scan.poller.timers import TimerHandle, TimerScheduler


class ProgressEstimator:
    """Ticks a session's progress estimate on its own timer."""

    def __init__(
        self,
        session: ReportSession,
        *,
        config: PollerConfig,
        scheduler: TimerScheduler | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._session = session
        self._tick_seconds = config.progress_tick_seconds
        self._step_min = config.progress_step_min
        self._step_max = config.progress_step_max
        self._ceiling = config.progress_ceiling
        self._scheduler = scheduler or AsyncioTimerScheduler()
        self._rng = rng or random.Random()
        self._timer: TimerHandle | None = None
        self._unsubscribe: Callable[[], None] | None = None
        self._stopped = False

    def start(self) -> None:
        """Arm the first tick and stop automatically once the session settles."""
        self._unsubscribe = self._session.subscribe(self._on_snapshot)
        self._schedule_next()

    def stop(self) -> None:
        """Cancel the pending tick.  Idempotent."""
        self._stopped = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def tick(self) -> None:
        """Advance progress once and re-arm while the session is in flight."""
        self._timer = None
        if self._stopped or not self._session.is_active:
            return
        step = self._rng.randint(self._step_min, self._step_max)
        self._session.advance_progress(step, self._ceiling)
        self._schedule_next()

    def _on_snapshot(self, snapshot: SessionSnapshot) -> None:
        if snapshot.state.is_terminal:
            self.stop()

    def _schedule_next(self) -> None:
        if self._stopped or not self._session.is_active:
            return
        self._timer = self._scheduler.schedule(self._tick_seconds, self.tick)
