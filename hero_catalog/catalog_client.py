"""
Client for the remote character catalog.

Endpoints:
  GET {MARVEL_API_URL}?ts&apikey&hash&limit&offset
  GET {MARVEL_API_URL}?ts&apikey&hash&nameStartsWith=<q>&limit=<n>
Response:
  { "data": { "results": [...], "total": int } }
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

import requests
from pydantic import ValidationError

from .errors import MalformedResponseError, RemoteSearchError, UpstreamError
from .models import CatalogEntry
from .settings import Settings, settings as default_settings
from .transport import check_response, send
from .utils import api_hash

logger = logging.getLogger(__name__)

# Upper bound accepted by the catalog for `limit`
MAX_LIMIT = 100


def parse_entries(raw_items: List[Any]) -> List[CatalogEntry]:
    """Turn raw result items into CatalogEntry, skipping unusable ones."""
    entries = []
    for raw in raw_items:
        try:
            entries.append(CatalogEntry.model_validate(raw))
        except ValidationError as e:
            logger.debug(f"Skipping unparsable catalog item: {e.error_count()} error(s)")
    return entries


class CatalogClient:
    """Thin HTTP client for the catalog API."""

    def __init__(
        self,
        base_url: str,
        public_key: str,
        *,
        ts: str = "1",
        private_key: Optional[str] = None,
        hash_: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url
        self.public_key = public_key
        self.ts = ts
        # Private key wins over a precomputed hash
        self.hash = api_hash(ts, private_key, public_key) if private_key else (hash_ or "")
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_settings(cls, cfg: Settings = default_settings, session: Optional[requests.Session] = None) -> "CatalogClient":
        cfg.validate()
        return cls(
            cfg.MARVEL_API_URL,
            cfg.MARVEL_PUBLIC_KEY,
            ts=cfg.MARVEL_TS,
            private_key=cfg.MARVEL_PRIVATE_KEY,
            hash_=cfg.MARVEL_HASH,
            session=session,
            timeout=cfg.HTTP_TIMEOUT_SECONDS,
        )

    def _auth_params(self) -> Dict[str, str]:
        return {"ts": self.ts, "apikey": self.public_key, "hash": self.hash}

    def _get_data(self, params: Dict[str, Any], error_cls=UpstreamError) -> Dict[str, Any]:
        query = {**self._auth_params(), **params}
        resp = send(self.session, "GET", self.base_url, params=query, timeout=self.timeout)
        logger.debug(f"Catalog response status: {resp.status_code}")
        body = check_response(resp, error_cls=error_cls)
        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict) or not isinstance(data.get("results"), list):
            raise MalformedResponseError(resp.status_code, "Response has no data.results")
        try:
            data["total"] = int(data.get("total") or 0)
        except (TypeError, ValueError) as e:
            raise MalformedResponseError(resp.status_code, f"Bad total: {data.get('total')!r}") from e
        return data

    def list_characters(self, offset: int, limit: int) -> Tuple[List[CatalogEntry], int]:
        """One raw page of the catalog and the total available upstream."""
        limit = max(1, min(limit, MAX_LIMIT))
        data = self._get_data({"limit": limit, "offset": max(0, offset)})
        entries = parse_entries(data["results"])
        total = data["total"]
        logger.info(f"Catalog page loaded: offset={offset} limit={limit} got={len(entries)} total={total}")
        return entries, total

    def search_by_name(self, prefix: str, limit: int = 20) -> List[CatalogEntry]:
        """Name-prefix search. Any upstream failure is a RemoteSearchError."""
        limit = max(1, min(limit, MAX_LIMIT))
        try:
            data = self._get_data({"nameStartsWith": prefix, "limit": limit}, error_cls=RemoteSearchError)
        except MalformedResponseError as e:
            raise RemoteSearchError(e.status, e.message) from e
        return parse_entries(data["results"])
