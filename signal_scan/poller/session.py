"""Reconciliation state machine for one report identifier.

``ReportSession`` is the authoritative state container of a poll
session.  It receives classified outcomes from the scheduler and
progress ticks from the estimator, applies the transition table, and
notifies subscribers with an immutable ``SessionSnapshot`` after every
change.

Transition table::

    LOADING / PENDING + PENDING    → PENDING    (attempt += 1)
    LOADING / PENDING + SUCCESS    → READY      (store report, progress = 100)
    LOADING / PENDING + NOT_FOUND  → NOT_FOUND
    LOADING / PENDING + FAILED     → FAILED     (store message)
    LOADING / PENDING + ERROR      → ERROR      (store message)

Terminal states are absorbing.  Once ``cancel()`` has been called the
session is frozen: every later outcome or progress tick is ignored.
Ignored inputs return ``False``; the session never raises for an outcome.
A listener that raises is logged and skipped; the transition stands.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from signal_scan.models.session import (
    ModelValidationError,
    OutcomeKind,
    SessionSnapshot,
    SessionState,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from signal_scan.models.report import ReportPayload
    from signal_scan.models.session import Outcome

logger = logging.getLogger("signal_scan.poller.session")

_TERMINAL_TARGETS: dict[OutcomeKind, SessionState] = {
    OutcomeKind.SUCCESS: SessionState.READY,
    OutcomeKind.NOT_FOUND: SessionState.NOT_FOUND,
    OutcomeKind.FAILED: SessionState.FAILED,
    OutcomeKind.ERROR: SessionState.ERROR,
}


class ReportSession:
    """Live poll session for a single report identifier.

    Attributes:
        identifier: Report identifier being polled.
        state: Current lifecycle state.
        attempt: Pending responses applied so far.
        report: Finished report (``READY`` only).
        error_detail: Failure or error message (``FAILED`` / ``ERROR`` only).
        progress: Cosmetic progress estimate (0-100).
        cancelled: Set once by ``cancel()``; freezes the session.
    """

    def __init__(self, identifier: str) -> None:
        if not identifier or not identifier.strip():
            raise ModelValidationError("ReportSession", "identifier", identifier, "must not be empty")
        self.identifier = identifier
        self.state = SessionState.LOADING
        self.attempt = 0
        self.report: ReportPayload | None = None
        self.error_detail: str | None = None
        self.progress = 0
        self.cancelled = False
        self._listeners: list[Callable[[SessionSnapshot], None]] = []

    def __repr__(self) -> str:
        return (
            f"ReportSession(identifier={self.identifier!r}, state={self.state.value}, "
            f"attempt={self.attempt}, cancelled={self.cancelled})"
        )

    @property
    def is_active(self) -> bool:
        """Return ``True`` while the session can still change."""
        return not self.cancelled and self.state.is_in_flight

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def apply(self, outcome: Outcome) -> bool:
        """Apply a classified outcome.

        Returns:
            ``True`` if the session changed, ``False`` if the outcome was
            ignored (session cancelled or already terminal).
        """
        if self.cancelled:
            logger.debug(
                "apply ignored (cancelled) | identifier=%s | outcome=%s",
                self.identifier,
                outcome.kind.value,
            )
            return False
        if self.state.is_terminal:
            logger.debug(
                "apply ignored (terminal) | identifier=%s | state=%s | outcome=%s",
                self.identifier,
                self.state.value,
                outcome.kind.value,
            )
            return False

        if outcome.kind is OutcomeKind.PENDING:
            self.state = SessionState.PENDING
            self.attempt += 1
        else:
            self.state = _TERMINAL_TARGETS[outcome.kind]
            if outcome.kind is OutcomeKind.SUCCESS:
                self.report = outcome.payload
                self.progress = 100
            elif outcome.kind in (OutcomeKind.FAILED, OutcomeKind.ERROR):
                self.error_detail = outcome.message
            logger.info(
                "session terminal | identifier=%s | state=%s | attempt=%d",
                self.identifier,
                self.state.value,
                self.attempt,
            )

        self._notify()
        return True

    def advance_progress(self, step: int, ceiling: int) -> bool:
        """Raise the progress estimate by *step*, never above *ceiling*.

        Returns:
            ``True`` if progress changed.
        """
        if not self.is_active:
            return False
        target = min(self.progress + step, ceiling)
        if target <= self.progress:
            return False
        self.progress = target
        self._notify()
        return True

    def cancel(self) -> None:
        """Freeze the session.  Idempotent."""
        if self.cancelled:
            return
        self.cancelled = True
        self._listeners.clear()
        logger.debug("session cancelled | identifier=%s | state=%s", self.identifier, self.state.value)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def snapshot(self) -> SessionSnapshot:
        """Return an immutable view of the current state."""
        return SessionSnapshot(
            identifier=self.identifier,
            state=self.state,
            report=self.report,
            error_detail=self.error_detail,
            progress=self.progress,
            attempt=self.attempt,
        )

    def subscribe(self, listener: Callable[[SessionSnapshot], None]) -> Callable[[], None]:
        """Register *listener* for snapshots; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception(
                    "listener failed | identifier=%s | state=%s",
                    self.identifier,
                    snapshot.state.value,
                )
