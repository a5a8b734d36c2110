"""Report status clients.

Implements the "fetch status by id" operation consumed by the poller:
- StatusClient: Abstract base class defining the interface
- HttpStatusClient: ``httpx``-backed client for the public results API
"""

from signal_scan.clients.base import (
    MalformedResponseError,
    StatusClient,
    StatusClientError,
    StatusTransportError,
)
from signal_scan.clients.http import HttpStatusClient

__all__ = [
    "HttpStatusClient",
    "MalformedResponseError",
    "StatusClient",
    "StatusClientError",
    "StatusTransportError",
]
