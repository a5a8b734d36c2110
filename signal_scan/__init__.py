"""Signal Scan report status poller.

Client-side reconciliation engine for the public signal scan results
viewer: polls the backend for a report's status, classifies each
response, and exposes state snapshots to a presentation layer.
"""

__version__ = "0.1.0"
