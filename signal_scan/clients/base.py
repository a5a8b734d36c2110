"""StatusClient abstract base class.

Defines the single operation the poller consumes: "fetch status by id".
The poller interacts exclusively with this interface (or any plain
``async`` callable with the same signature) and never knows which
transport is behind it.

A client returns a ``RawResponse`` for every HTTP response it receives,
whatever the status code; interpreting that response is the classifier's
job.  Only failures that produce no usable response are raised.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

from signal_scan.core.exceptions import ContractError, ScanError, TransientError

if TYPE_CHECKING:
    from types import TracebackType

    from signal_scan.models.session import RawResponse


class StatusClient(abc.ABC):
    """Abstract base class for report status clients.

    Example usage::

        async with HttpStatusClient(config) as client:
            raw = await client.fetch_status("abc123")
    """

    @abc.abstractmethod
    async def fetch_status(self, identifier: str) -> RawResponse:
        """Query the backend for the status of report *identifier*.

        Returns:
            The raw response, for any HTTP status code.

        Raises:
            StatusTransportError: When the backend could not be reached.
            MalformedResponseError: When a 2xx body cannot be decoded.
        """

    async def aclose(self) -> None:
        """Release transport resources (no-op by default)."""

    async def __aenter__(self) -> StatusClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


# ---------------------------------------------------------------------------
# Client exceptions
# ---------------------------------------------------------------------------


class StatusClientError(ScanError):
    """Base exception for status client errors.

    Attributes:
        identifier: Report identifier that was being queried.
        message: Human-readable error description.
    """

    default_stage = "status_client"
    default_code = "STATUS_CLIENT_ERROR"

    def __init__(self, identifier: str, message: str, **kwargs: object) -> None:
        self.identifier = identifier
        kwargs.setdefault("correlation_id", identifier)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class StatusTransportError(StatusClientError, TransientError):
    """Network-level failure: the backend produced no HTTP response."""

    default_code = "STATUS_TRANSPORT_FAILED"


class MalformedResponseError(StatusClientError, ContractError):
    """A successful response whose body is not valid JSON."""

    default_code = "STATUS_BODY_MALFORMED"
