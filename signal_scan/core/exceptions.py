"""Exceptions raised by the signal scan poller.

``ScanError`` is the root.  Each subclass fixes the component it comes
from (``stage``) and a machine-readable ``code``; ``to_error_dict()``
flattens those fields for structured log lines.

Three families are raised in practice:

- ``ValidationError``: bad configuration or an invalid model value.
- ``TransientError``: the results service could not be reached.
- ``ContractError``: the results service answered with an undecodable body.

The poller turns any fetch failure into a terminal ``ERROR`` outcome;
``retryable`` only records whether asking again could plausibly help.
"""

from __future__ import annotations


class ScanError(Exception):
    """Root of the signal scan exception hierarchy.

    Attributes:
        message: Human-readable error description.
        stage: Component that raised (``"config"``, ``"status_client"``, ...).
        code: Machine-readable code such as ``"STATUS_TRANSPORT_FAILED"``.
        retryable: Whether a later attempt could succeed.
        correlation_id: Report identifier the error relates to, if any.
    """

    default_stage: str = ""
    default_code: str = ""
    category: str = "unclassified"

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id

    def to_error_dict(self) -> dict[str, object]:
        """Return the error fields as a flat dict for logging."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


class ValidationError(ScanError):
    """A configuration or model value is invalid."""

    category = "validation"


class TransientError(ScanError):
    """The backend was unreachable; a later attempt may succeed."""

    category = "transient"

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class ContractError(ScanError):
    """The backend answered in a shape the client cannot decode."""

    category = "contract"
