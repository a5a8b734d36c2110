"""Presentation helper: map a session snapshot to results-page copy.

Reproduces the wording of the public results viewer for each state so
that every front end (the CLI, a web page, a notification) shows the
same text.  The report body itself is passed through untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from signal_scan.core.constants import DEFAULT_ERROR_MESSAGE
from signal_scan.models.session import SessionSnapshot, SessionState

UNSPECIFIED_CONFIDENCE = "Unspecified"


@dataclass(frozen=True, slots=True)
class StatusView:
    """Rendered copy for one snapshot.

    Attributes:
        title: Heading line.
        body: Supporting text (may be multi-line).
        busy: Whether a busy indicator should be shown.
    """

    title: str
    body: str = ""
    busy: bool = False


def describe(snapshot: SessionSnapshot) -> StatusView:
    """Return the results-page copy for *snapshot*."""
    state = snapshot.state

    if state is SessionState.LOADING:
        return StatusView(title="Generating your report...", busy=True)

    if state is SessionState.PENDING:
        return StatusView(
            title="Generating your report...",
            body="Your report is in progress. We are checking for updates.",
            busy=True,
        )

    if state is SessionState.NOT_FOUND:
        return StatusView(
            title="Report not found",
            body="This report link is invalid or has expired.",
        )

    if state is SessionState.FAILED:
        return StatusView(title="Report failed", body=snapshot.error_detail or "")

    if state is SessionState.ERROR:
        return StatusView(
            title="Unable to load report",
            body=snapshot.error_detail or DEFAULT_ERROR_MESSAGE,
        )

    report = snapshot.report
    if report is None:
        # hand-built READY snapshot with no report
        return StatusView(title="Report")

    lines = [f"Confidence level: {report.metadata.confidence_level or UNSPECIFIED_CONFIDENCE}"]
    timestamp = format_timestamp(report.created_at)
    if timestamp:
        lines.append(f"Generated: {timestamp}")
    lines.extend(["", report.customer_report])
    return StatusView(title=report.company or "Report", body="\n".join(lines))


def format_timestamp(value: str | None) -> str:
    """Format an ISO 8601 timestamp for display.

    Empty values yield ``""``; values that cannot be parsed are returned
    unchanged.
    """
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.strftime("%Y-%m-%d %H:%M")
