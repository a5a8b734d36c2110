"""Status classifier: map a raw status response to an ``Outcome``.

This is the single normalisation step between the loosely-shaped wire
responses and the strict internal outcome space.  Nothing downstream of
this module looks at status codes or body fields.

Rules, applied in order:
    1. Transport failure / malformed body           → ERROR (terminal for the session)
    2. HTTP 404 or ``status == "not_found"``        → NOT_FOUND
    3. HTTP 500 or ``status == "failed"``           → FAILED (server message or default)
    4. HTTP 202, ``status == "pending"``, or no
       usable ``customer_report``                   → PENDING
    5. Report present, status absent, blank or a done marker → SUCCESS
    6. Unrecognised ``status`` / non-object body    → ERROR ("Unexpected response from server.")
    7. Any other non-2xx                            → ERROR (body ``error`` / ``message`` /
       ``errors[0].message``, raw text, or "Request failed with <status>")
"""

from __future__ import annotations

import logging
from typing import Any

import pydantic

from signal_scan.core.constants import (
    DEFAULT_ERROR_MESSAGE,
    DEFAULT_FAILED_MESSAGE,
    DONE_MARKERS,
    REPORT_FIELD,
    STATUS_FAILED,
    STATUS_NOT_FOUND,
    STATUS_PENDING,
    UNEXPECTED_RESPONSE_MESSAGE,
    request_failed_message,
)
from signal_scan.core.exceptions import ScanError
from signal_scan.models.report import ReportPayload
from signal_scan.models.session import Outcome, RawResponse

logger = logging.getLogger("signal_scan.poller.classifier")

HTTP_ACCEPTED = 202
HTTP_NOT_FOUND = 404
HTTP_SERVER_ERROR = 500


def classify(raw: RawResponse) -> Outcome:
    """Classify one status response.

    Args:
        raw: Response returned by the status client.

    Returns:
        The normalised ``Outcome``.  Never raises for any response shape.
    """
    body = raw.body
    status = _status_field(body)

    if raw.status_code == HTTP_NOT_FOUND or status == STATUS_NOT_FOUND:
        return Outcome.not_found()

    if raw.status_code == HTTP_SERVER_ERROR or status == STATUS_FAILED:
        return Outcome.failed(_server_message(body) or DEFAULT_FAILED_MESSAGE)

    if raw.status_code == HTTP_ACCEPTED or status == STATUS_PENDING:
        return Outcome.pending()

    if not raw.ok:
        return Outcome.error(error_message_from(raw))

    if body is None:
        return Outcome.pending()

    if not isinstance(body, dict):
        logger.warning(
            "classify: non-object body | status_code=%d | type=%s",
            raw.status_code,
            type(body).__name__,
        )
        return Outcome.error(UNEXPECTED_RESPONSE_MESSAGE)

    if status is not None and status not in DONE_MARKERS:
        logger.warning("classify: unrecognised status | status=%r", status)
        return Outcome.error(UNEXPECTED_RESPONSE_MESSAGE)

    report = body.get(REPORT_FIELD)
    if not isinstance(report, str) or not report.strip():
        return Outcome.pending()

    try:
        payload = ReportPayload.model_validate(body)
    except pydantic.ValidationError as exc:
        logger.warning("classify: report payload rejected | errors=%d", exc.error_count())
        return Outcome.error(UNEXPECTED_RESPONSE_MESSAGE)

    return Outcome.success(payload)


def classify_error(exc: BaseException) -> Outcome:
    """Classify a failure that produced no usable response.

    Args:
        exc: Exception raised by the status fetch.

    Returns:
        An ``ERROR`` outcome carrying the exception message, or the
        default message when the exception has none.
    """
    message = exc.message if isinstance(exc, ScanError) else str(exc)
    return Outcome.error(message.strip() or DEFAULT_ERROR_MESSAGE)


def error_message_from(raw: RawResponse) -> str:
    """Extract a human-readable error from a non-2xx response.

    Looks at ``error``, ``message`` and ``errors[0].message`` in that
    order, then the raw body text, then a generic status message.
    """
    body = raw.body
    if isinstance(body, dict):
        for key in ("error", "message"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
        errors = body.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            value = errors[0].get("message")
            if isinstance(value, str) and value.strip():
                return value
    if raw.text.strip():
        return raw.text
    return request_failed_message(raw.status_code)


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def _status_field(body: Any) -> str | None:
    """Return the body's ``status`` marker, or ``None`` when absent or blank."""
    if not isinstance(body, dict):
        return None
    status = body.get("status")
    if status is None:
        return None
    return str(status).strip() or None


def _server_message(body: Any) -> str:
    """Return the server-supplied failure message, or ``""``."""
    if not isinstance(body, dict):
        return ""
    message = body.get("message")
    if isinstance(message, str) and message.strip():
        return message
    return ""
