"""Poll scheduler: the fetch / classify / re-schedule loop of a session.

``start()`` issues one status fetch immediately.  Each result is
classified and applied to the session.  A pending outcome schedules the
next fetch after ``poll_interval_seconds`` until ``max_attempts``
fetches have been issued, at which point the scheduler applies a
``FAILED`` outcome with the timeout message instead.  Any other outcome
is terminal and ends the loop; errors are never re-fetched.

At most one fetch is in flight and at most one timer is pending at any
time.  ``stop()`` cancels the timer and the session; a fetch already in
flight is left to finish but its result is discarded.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from signal_scan.core.constants import TIMEOUT_MESSAGE
from signal_scan.core.exceptions import ScanError
from signal_scan.models.session import Outcome, OutcomeKind
from signal_scan.poller.classifier import classify, classify_error
from signal_scan.poller.timers import AsyncioTimerScheduler

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from signal_scan.core.config import PollerConfig
    from signal_scan.models.session import RawResponse
    from signal_scan.poller.session import ReportSession
    from signal_scan.poller.timers import TimerHandle, TimerScheduler

    FetchStatus = Callable[[str], Awaitable[RawResponse]]

logger = logging.getLogger("signal_scan.poller.scheduler")


class PollScheduler:
    """Drives status fetches for one ``ReportSession``.

    Args:
        session: Session to feed outcomes into.
        fetch_status: Async callable returning the raw status response
            for an identifier (e.g. ``HttpStatusClient.fetch_status``).
        config: Poll interval and attempt cap.
        scheduler: Timer capability; defaults to the running asyncio loop.
    """

    def __init__(
        self,
        session: ReportSession,
        fetch_status: FetchStatus,
        *,
        config: PollerConfig,
        scheduler: TimerScheduler | None = None,
    ) -> None:
        self._session = session
        self._fetch_status = fetch_status
        self._interval = config.poll_interval_seconds
        self._max_attempts = config.max_attempts
        self._scheduler = scheduler or AsyncioTimerScheduler()
        self._timer: TimerHandle | None = None
        self._in_flight: asyncio.Task[None] | None = None
        self._started = False
        self._stopped = False
        self.fetch_count = 0

    @property
    def session(self) -> ReportSession:
        return self._session

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def stopped(self) -> bool:
        return self._stopped

    def start(self) -> None:
        """Issue the first fetch.  Must be called from a running event loop.

        Raises:
            RuntimeError: If the scheduler was already started.
        """
        if self._started:
            msg = f"PollScheduler for {self._session.identifier!r} already started"
            raise RuntimeError(msg)
        self._started = True
        logger.info(
            "poll session started | identifier=%s | interval=%.1fs | max_attempts=%d",
            self._session.identifier,
            self._interval,
            self._max_attempts,
        )
        self._issue_fetch()

    def stop(self) -> None:
        """Cancel the pending timer and freeze the session.  Idempotent."""
        if self._stopped:
            return
        self._stopped = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._session.cancel()
        logger.debug(
            "poll session stopped | identifier=%s | fetches=%d",
            self._session.identifier,
            self.fetch_count,
        )

    async def wait_idle(self) -> None:
        """Wait for the fetch currently in flight, if any, to be handled."""
        task = self._in_flight
        if task is not None and not task.done():
            await asyncio.shield(task)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _issue_fetch(self) -> None:
        self._timer = None
        if self._stopped:
            return
        self.fetch_count += 1
        logger.debug(
            "fetch issued | identifier=%s | fetch=%d/%d",
            self._session.identifier,
            self.fetch_count,
            self._max_attempts,
        )
        self._in_flight = asyncio.ensure_future(self._poll_once())

    async def _poll_once(self) -> None:
        identifier = self._session.identifier
        try:
            raw = await self._fetch_status(identifier)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            outcome = classify_error(exc)
            if not self._stopped:
                detail = exc.to_error_dict() if isinstance(exc, ScanError) else repr(exc)
                logger.warning("fetch failed | identifier=%s | error=%s", identifier, detail)
        else:
            outcome = classify(raw)

        if self._stopped:
            logger.debug(
                "late result discarded | identifier=%s | outcome=%s",
                identifier,
                outcome.kind.value,
            )
            return

        self._handle(outcome)

    def _handle(self, outcome: Outcome) -> None:
        session = self._session
        session.apply(outcome)
        if outcome.kind is not OutcomeKind.PENDING:
            return

        if self.fetch_count >= self._max_attempts:
            logger.warning(
                "poll timeout | identifier=%s | fetches=%d | elapsed~%.0fs",
                session.identifier,
                self.fetch_count,
                self.fetch_count * self._interval,
            )
            session.apply(Outcome.failed(TIMEOUT_MESSAGE))
            return

        self._timer = self._scheduler.schedule(self._interval, self._issue_fetch)
