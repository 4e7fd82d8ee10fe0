"""HTTP client for delegating to a running techdb server.

Requires the 'client' extra: pip install techdb[client]
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)

_TIMEOUT = 30  # ranks are computed once at warmup, queries are lookups


def _get_httpx():
    """Lazy import httpx, raising a clear error if not installed."""
    try:
        import httpx
        return httpx
    except ImportError:
        raise ImportError(
            "httpx is required for TechDBClient. "
            "Install it with: pip install techdb[client]"
        )


class TechDBClient:
    """Client for the techdb server."""

    def __init__(self, server_url: str = "http://localhost:8233"):
        self.server_url = server_url.rstrip("/")
        self._httpx = _get_httpx()

    def health(self) -> dict:
        """Check server health."""
        resp = self._httpx.get(f"{self.server_url}/", timeout=_TIMEOUT)
        resp.raise_for_status()
        return resp.json()

    def search(self, query: str) -> Optional[str]:
        """Resolve a name or alias to an entry id (None if not found)."""
        resp = self._httpx.post(
            f"{self.server_url}/search",
            json={"query": query},
            timeout=_TIMEOUT,
        )
        resp.raise_for_status()
        return resp.json().get("id")

    def get_entry(self, entry_id: str) -> dict:
        resp = self._httpx.get(f"{self.server_url}/entries/{entry_id}", timeout=_TIMEOUT)
        resp.raise_for_status()
        return resp.json()

    def get_rank(self, entry_id: str) -> dict:
        """Rank record, percentile and inbound links of an entry."""
        resp = self._httpx.get(f"{self.server_url}/entries/{entry_id}/rank", timeout=_TIMEOUT)
        resp.raise_for_status()
        return resp.json()

    def ranking(self, limit: int = 25, languages: bool = False) -> list[dict]:
        """Top entries by rank."""
        resp = self._httpx.get(
            f"{self.server_url}/ranking",
            params={"limit": limit, "languages": languages},
            timeout=_TIMEOUT,
        )
        resp.raise_for_status()
        return resp.json()

    def entry_at_rank(self, position: int) -> dict:
        resp = self._httpx.get(f"{self.server_url}/rank/{position}", timeout=_TIMEOUT)
        resp.raise_for_status()
        return resp.json()
