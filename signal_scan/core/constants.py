"""Shared poller constants: single source of truth.

Centralises the wire markers, endpoint path, and user-facing messages
used by the classifier, the scheduler, and the presentation helper.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Status endpoint
# ---------------------------------------------------------------------------

PUBLIC_RESULTS_PATH: str = "/api/public/results/{identifier}"
"""Path template of the public status query, relative to the API base URL."""

# ---------------------------------------------------------------------------
# Wire status markers
# ---------------------------------------------------------------------------

STATUS_PENDING: str = "pending"
STATUS_NOT_FOUND: str = "not_found"
STATUS_FAILED: str = "failed"

DONE_MARKERS: frozenset[str] = frozenset({"complete", "completed", "done", "ready"})
"""Body ``status`` values accepted as "report finished"."""

REPORT_FIELD: str = "customer_report"
"""Body field whose presence distinguishes a finished report from a pending one."""

# ---------------------------------------------------------------------------
# User-facing messages
# ---------------------------------------------------------------------------

DEFAULT_FAILED_MESSAGE: str = "We could not complete this scan. Please try again later."
DEFAULT_ERROR_MESSAGE: str = "Unable to load the report right now."
UNEXPECTED_RESPONSE_MESSAGE: str = "Unexpected response from server."
TIMEOUT_MESSAGE: str = "Report is taking longer than expected."
UNREACHABLE_MESSAGE: str = "Could not reach the results service. Please check your connection."


def request_failed_message(status_code: int) -> str:
    """Return the generic message for a non-2xx response with no usable body."""
    return f"Request failed with {status_code}"
