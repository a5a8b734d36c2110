"""Typed models for the status reconciliation engine.

Defines the data structures exchanged between the status client, the
classifier, the session state machine, and the presentation layer:

- ``RawResponse``: One HTTP response from the status endpoint
- ``OutcomeKind`` / ``Outcome``: Normalised result of classifying a response
- ``SessionState``: Lifecycle state of a poll session
- ``SessionSnapshot``: Read-only view handed to subscribers

Design notes:
- All models are frozen dataclasses for immutability.
- No magic strings: states and outcome kinds are enums.
- Loose response fields never leave the classifier; only ``Outcome``
  travels downstream.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from signal_scan.core.exceptions import ValidationError

if TYPE_CHECKING:
    from signal_scan.models.report import ReportPayload


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class ModelValidationError(ValueError, ValidationError):
    """Raised when a domain model is constructed with invalid field values.

    Attributes:
        model: Name of the model class that failed validation.
        field_name: The field that violated the invariant.
        value: The invalid value.
    """

    default_stage = "model_validation"
    default_code = "MODEL_VALIDATION_FAILED"

    def __init__(self, model: str, field_name: str, value: object, message: str) -> None:
        self.model = model
        self.field_name = field_name
        self.value = value
        formatted = f"{model}.{field_name}={value!r}: {message}"
        ValidationError.__init__(self, formatted)


# ---------------------------------------------------------------------------
# Wire response
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RawResponse:
    """A single response from the status endpoint.

    Attributes:
        status_code: HTTP status code.
        body: Decoded JSON body, or ``None`` when the body is empty or
            not JSON.
        text: Raw body text.
    """

    status_code: int
    body: Any = None
    text: str = ""

    @property
    def ok(self) -> bool:
        """Return ``True`` for 2xx responses."""
        return 200 <= self.status_code < 300


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


class OutcomeKind(enum.Enum):
    """Semantic result of one status fetch.

    Values:
        SUCCESS:   Report is finished; payload attached.
        NOT_FOUND: Identifier is unknown or expired.
        FAILED:    Backend reported the scan as failed.
        PENDING:   Scan still running; poll again.
        ERROR:     Transport failure or unrecognised response.
    """

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    FAILED = "failed"
    PENDING = "pending"
    ERROR = "error"


_CATEGORIES: dict[OutcomeKind, str] = {
    OutcomeKind.SUCCESS: "terminal",
    OutcomeKind.NOT_FOUND: "terminal",
    OutcomeKind.FAILED: "terminal",
    OutcomeKind.PENDING: "non_terminal",
    OutcomeKind.ERROR: "retryable",
}


@dataclass(frozen=True, slots=True)
class Outcome:
    """Normalised classification of one status fetch.

    Use the named constructors rather than building instances directly.

    Attributes:
        kind: Outcome kind.
        payload: Parsed report (``SUCCESS`` only).
        message: Failure or error detail (``FAILED`` / ``ERROR`` only).
    """

    kind: OutcomeKind
    payload: ReportPayload | None = None
    message: str = ""

    def __post_init__(self) -> None:
        if self.kind is OutcomeKind.SUCCESS and self.payload is None:
            raise ModelValidationError("Outcome", "payload", None, "required for SUCCESS")
        if self.kind in (OutcomeKind.FAILED, OutcomeKind.ERROR):
            _check_non_empty("Outcome", "message", self.message)

    @property
    def category(self) -> str:
        """Return ``"terminal"``, ``"non_terminal"`` or ``"retryable"``."""
        return _CATEGORIES[self.kind]

    @classmethod
    def success(cls, payload: ReportPayload) -> Outcome:
        return cls(OutcomeKind.SUCCESS, payload=payload)

    @classmethod
    def not_found(cls) -> Outcome:
        return cls(OutcomeKind.NOT_FOUND)

    @classmethod
    def failed(cls, message: str) -> Outcome:
        return cls(OutcomeKind.FAILED, message=message)

    @classmethod
    def pending(cls) -> Outcome:
        return cls(OutcomeKind.PENDING)

    @classmethod
    def error(cls, message: str) -> Outcome:
        return cls(OutcomeKind.ERROR, message=message)


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------


class SessionState(enum.Enum):
    """Lifecycle state of a poll session.

    Values:
        LOADING:   No fetch has resolved yet.
        PENDING:   At least one pending response observed.
        READY:     Report available.
        NOT_FOUND: Identifier unknown or expired.
        FAILED:    Scan failed, or polling timed out.
        ERROR:     Transport failure or unrecognised response.
    """

    LOADING = "loading"
    PENDING = "pending"
    READY = "ready"
    NOT_FOUND = "not_found"
    FAILED = "failed"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self not in (SessionState.LOADING, SessionState.PENDING)

    @property
    def is_in_flight(self) -> bool:
        return not self.is_terminal


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Read-only view of a session, re-emitted on every change.

    Attributes:
        identifier: Report identifier being polled.
        state: Current lifecycle state.
        report: Finished report (``READY`` only).
        error_detail: Failure or error message (``FAILED`` / ``ERROR`` only).
        progress: Cosmetic progress estimate (0-100).
        attempt: Pending responses observed so far.
    """

    identifier: str
    state: SessionState
    report: ReportPayload | None = None
    error_detail: str | None = None
    progress: int = 0
    attempt: int = 0

    def __post_init__(self) -> None:
        _check_non_empty("SessionSnapshot", "identifier", self.identifier)
        _check_range("SessionSnapshot", "progress", self.progress, 0, 100)
        _check_min("SessionSnapshot", "attempt", self.attempt, 0)


# ---------------------------------------------------------------------------
# Validation helpers (module-private)
# ---------------------------------------------------------------------------


def _check_range(model: str, field_name: str, value: float, lo: float, hi: float) -> None:
    """Raise `ModelValidationError` if *value* falls outside [lo, hi]."""
    if value < lo or value > hi:
        raise ModelValidationError(model, field_name, value, f"must be between {lo} and {hi}")


def _check_min(model: str, field_name: str, value: float | int, lo: float | int) -> None:
    """Raise `ModelValidationError` if *value* is below *lo*."""
    if value < lo:
        raise ModelValidationError(model, field_name, value, f"must be >= {lo}")


def _check_non_empty(model: str, field_name: str, value: str) -> None:
    """Raise `ModelValidationError` if *value* is empty or blank."""
    if not value or not value.strip():
        raise ModelValidationError(model, field_name, value, "must not be empty")
