"""
Custom errors for the catalog client.
Raised by the remote clients, caught by the fetcher, the search engine
and the favorites store.
"""
from typing import Optional


class CatalogError(Exception):
    """Generic catalog client error."""
    pass


# ---------------- Remote APIs ----------------

class UpstreamError(CatalogError):
    """Remote API answered with a non-success status."""

    def __init__(self, status: Optional[int], message: str = ""):
        self.status = status
        self.message = message
        super().__init__(f"Status {status}: {message}" if status is not None else message)


class MalformedResponseError(UpstreamError):
    """Response body could not be parsed as structured data."""
    pass


class RemoteSearchError(UpstreamError):
    """Name-prefix search failed upstream (triggers the local fallback)."""
    pass


class NetworkError(CatalogError):
    """Transport-level failure (DNS, connection reset, timeout...)."""
    pass
