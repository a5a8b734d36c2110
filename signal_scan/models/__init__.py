"""Data models and schemas.

Defines the data structures used throughout the poller:
- ReportPayload: Finished customer-facing report (pydantic)
- RawResponse: One response from the status endpoint
- Outcome: Normalised classification of a response
- SessionState / SessionSnapshot: Poll session lifecycle and read-only view
"""

from signal_scan.models.report import ReportMetadata, ReportPayload
from signal_scan.models.session import (
    ModelValidationError,
    Outcome,
    OutcomeKind,
    RawResponse,
    SessionSnapshot,
    SessionState,
)

__all__ = [
    "ModelValidationError",
    "Outcome",
    "OutcomeKind",
    "RawResponse",
    "ReportMetadata",
    "ReportPayload",
    "SessionSnapshot",
    "SessionState",
]
