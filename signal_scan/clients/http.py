"""HTTP status client for the public results API.

Queries ``GET {api_base_url}/api/public/results/{identifier}`` with
``httpx`` and returns the response as a ``RawResponse``.  Status codes
are passed through untouched (202 pending, 404 not found, 500 failed,
...) so that every interpretation happens in the classifier.

Failure mapping:
    - ``httpx.TransportError`` (DNS, connect, read timeout, ...) →
      ``StatusTransportError``.
    - 2xx response with a non-empty body that is not JSON →
      ``MalformedResponseError``.
    - Non-2xx response with a non-JSON body → ``RawResponse`` with
      ``body=None`` and the raw text preserved.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx

from signal_scan.clients.base import (
    MalformedResponseError,
    StatusClient,
    StatusTransportError,
)
from signal_scan.core.constants import PUBLIC_RESULTS_PATH, UNREACHABLE_MESSAGE
from signal_scan.models.session import RawResponse

if TYPE_CHECKING:
    from signal_scan.core.config import PollerConfig

logger = logging.getLogger("signal_scan.clients.http")


class HttpStatusClient(StatusClient):
    """Status client backed by ``httpx.AsyncClient``.

    Args:
        config: Poller configuration (base URL and request timeout).
        http_client: Optional pre-built client, e.g. one using
            ``httpx.MockTransport`` in tests. A client passed in is not
            closed by ``aclose()``.
    """

    def __init__(
        self,
        config: PollerConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = config.api_base_url.rstrip("/")
        self._client = http_client or httpx.AsyncClient(
            timeout=config.request_timeout_seconds,
            headers={"Content-Type": "application/json"},
        )
        self._owns_client = http_client is None

    def url_for(self, identifier: str) -> str:
        """Return the status URL for *identifier*."""
        path = PUBLIC_RESULTS_PATH.format(identifier=quote(identifier, safe=""))
        return f"{self._base_url}{path}"

    async def fetch_status(self, identifier: str) -> RawResponse:
        if not identifier or not identifier.strip():
            msg = "fetch_status: identifier must not be empty"
            raise ValueError(msg)
        url = self.url_for(identifier)
        logger.debug("fetch_status started | identifier=%s | url=%s", identifier, url)

        try:
            response = await self._client.get(url)
        except httpx.TransportError as exc:
            logger.warning("fetch_status unreachable | identifier=%s | error=%r", identifier, exc)
            raise StatusTransportError(identifier, UNREACHABLE_MESSAGE) from exc

        text = response.text
        body = _decode_json(text)
        if body is _MALFORMED:
            if response.is_success:
                msg = f"Malformed response body (HTTP {response.status_code})"
                raise MalformedResponseError(identifier, msg)
            body = None

        logger.debug(
            "fetch_status completed | identifier=%s | status_code=%d",
            identifier,
            response.status_code,
        )
        return RawResponse(status_code=response.status_code, body=body, text=text)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------

_MALFORMED = object()


def _decode_json(text: str) -> object:
    """Decode *text* as JSON; ``None`` for an empty body, ``_MALFORMED`` on error."""
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError:
        return _MALFORMED
