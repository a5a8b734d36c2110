"""Pydantic model for a finished signal-scan report.

The report is the domain object the backend returns once a scan is
complete. The poller treats it as opaque pass-through data: it is parsed
once at the classifier boundary and handed to the presentation layer
untouched.

Wire names follow the results API (``createdAt``, ``publicId``); Python
attribute names are snake_case. Unknown fields are preserved so newer
backend payloads do not break older clients.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ReportMetadata(BaseModel):
    """Metadata bag attached to a report.

    Attributes:
        confidence_level: Confidence classification of the scan
            (e.g. ``"High"``), or ``None`` when the backend omits it.
    """

    model_config = ConfigDict(extra="allow")

    confidence_level: str | None = None


class ReportPayload(BaseModel):
    """A finished customer-facing report.

    Attributes:
        company: Company the scan was run for.
        customer_report: Free-text report body shown to the customer.
        created_at: Generation timestamp as sent by the backend (ISO 8601).
        public_id: Public identifier of the report, if echoed back.
        status: Status marker sent alongside the report, if any.
        metadata: Metadata bag (at minimum a confidence classification).
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    company: str = ""
    customer_report: str
    created_at: str | None = Field(default=None, alias="createdAt")
    public_id: str | None = Field(default=None, alias="publicId")
    status: str | None = None
    metadata: ReportMetadata = Field(default_factory=ReportMetadata)

    def to_wire(self) -> dict[str, Any]:
        """Return the payload using the API's field names."""
        return self.model_dump(by_alias=True, exclude_none=True)
