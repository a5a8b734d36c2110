"""Lifecycle controller: bind a poll session to the identifier being viewed.

``ReportWatcher`` owns at most one live session.  Starting it with a new
identifier stops the previous session (scheduler, estimator and state)
and builds a fresh one, so nothing carries over between identifiers.
Starting the same identifier again is a no-op while its session is in
flight and a retry once it has settled.  ``close()`` tears everything
down; results that arrive afterwards are discarded by the cancelled
session.

This is the only place cancellation is initiated.  Subscribers register
once on the watcher and keep receiving snapshots across identifier
changes.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import random
from typing import TYPE_CHECKING

from signal_scan.core.config import PollerConfig
from signal_scan.poller.progress import ProgressEstimator
from signal_scan.poller.scheduler import PollScheduler
from signal_scan.poller.session import ReportSession

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from signal_scan.models.session import SessionSnapshot
    from signal_scan.poller.scheduler import FetchStatus
    from signal_scan.poller.timers import TimerScheduler

logger = logging.getLogger("signal_scan.poller.lifecycle")


class ReportWatcher:
    """Reactive poll controller for a changing report identifier.

    Args:
        fetch_status: Async callable returning the raw status response for
            an identifier.
        config: Poller configuration; defaults to ``PollerConfig()``.
        scheduler: Timer capability shared by the poll loop and the
            progress estimator.
        rng: Random source for progress increments.

    Example usage::

        watcher = ReportWatcher(client.fetch_status, config=config)
        watcher.subscribe(render)
        watcher.start(public_id)
        ...
        watcher.close()
    """

    def __init__(
        self,
        fetch_status: FetchStatus,
        *,
        config: PollerConfig | None = None,
        scheduler: TimerScheduler | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._fetch_status = fetch_status
        self._config = config or PollerConfig()
        self._scheduler = scheduler
        self._rng = rng
        self._session: ReportSession | None = None
        self._poller: PollScheduler | None = None
        self._estimator: ProgressEstimator | None = None
        self._listeners: list[Callable[[SessionSnapshot], None]] = []
        self._closed = False

    @property
    def session(self) -> ReportSession | None:
        """Return the live session, or ``None`` before ``start``."""
        return self._session

    @property
    def poller(self) -> PollScheduler | None:
        return self._poller

    @property
    def identifier(self) -> str | None:
        return self._session.identifier if self._session is not None else None

    @property
    def snapshot(self) -> SessionSnapshot | None:
        """Return the current session snapshot, or ``None`` before ``start``."""
        return self._session.snapshot() if self._session is not None else None

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self, identifier: str) -> None:
        """Observe *identifier*.

        A fresh session is started unless *identifier* is already being
        polled; a settled session for the same identifier is replaced.

        Raises:
            RuntimeError: If the watcher has been closed.
            ModelValidationError: If *identifier* is blank.
        """
        if self._closed:
            msg = "ReportWatcher is closed"
            raise RuntimeError(msg)
        current = self._session
        if current is not None and current.identifier == identifier and current.is_active:
            return

        previous = self.identifier
        session = ReportSession(identifier)
        self._stop_current()

        if previous == identifier:
            logger.info("session restarted | identifier=%s", identifier)
        elif previous is not None:
            logger.info("identifier changed | previous=%s | identifier=%s", previous, identifier)

        session.subscribe(self._dispatch)
        self._session = session
        self._dispatch(session.snapshot())
        self._poller = PollScheduler(
            session,
            self._fetch_status,
            config=self._config,
            scheduler=self._scheduler,
        )
        self._estimator = ProgressEstimator(
            session,
            config=self._config,
            scheduler=self._scheduler,
            rng=self._rng,
        )
        self._poller.start()
        self._estimator.start()

    def subscribe(self, listener: Callable[[SessionSnapshot], None]) -> Callable[[], None]:
        """Register *listener* for snapshots of the current and future sessions."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def wait_idle(self) -> None:
        """Wait for the live session's in-flight fetch, if any."""
        if self._poller is not None:
            await self._poller.wait_idle()

    async def wait_settled(self) -> SessionSnapshot | None:
        """Wait until the live session is terminal or cancelled.

        Returns:
            The session's final snapshot, or ``None`` before ``start``.
        """
        session = self._session
        if session is None:
            return None
        settled = asyncio.Event()
        unsubscribe = session.subscribe(
            lambda snapshot: settled.set() if snapshot.state.is_terminal else None
        )
        try:
            while session.is_active:
                with contextlib.suppress(TimeoutError):
                    await asyncio.wait_for(settled.wait(), timeout=self._config.poll_interval_seconds)
        finally:
            unsubscribe()
        return session.snapshot()

    def close(self) -> None:
        """Stop the live session and refuse further ``start`` calls.  Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._stop_current()
        logger.debug("watcher closed")

    def __enter__(self) -> ReportWatcher:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _dispatch(self, snapshot: SessionSnapshot) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception(
                    "watcher listener failed | identifier=%s | state=%s",
                    snapshot.identifier,
                    snapshot.state.value,
                )

    def _stop_current(self) -> None:
        if self._estimator is not None:
            self._estimator.stop()
        if self._poller is not None:
            self._poller.stop()
