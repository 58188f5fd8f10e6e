"""
Catalog fetcher: pulls validated pages of the catalog and keeps the
cumulative entry set that the search index is built from.
"""
import logging
from typing import Dict, List, Optional, Tuple

from .catalog_client import MAX_LIMIT, CatalogClient
from .index import WordIndex
from .models import CatalogEntry
from .validity import filter_valid

logger = logging.getLogger(__name__)


class CatalogFetcher:
    """
    Owns the entries accepted so far (in arrival order) and the WordIndex
    built over them.
    """

    def __init__(
        self,
        client: CatalogClient,
        index: Optional[WordIndex] = None,
        *,
        page_size: int = 20,
        overfetch_factor: int = 2,
    ):
        self.client = client
        self.index = index if index is not None else WordIndex()
        self.page_size = page_size
        self.overfetch_factor = max(1, overfetch_factor)
        self.total: Optional[int] = None
        self.next_page = 0
        self._entries: Dict[int, CatalogEntry] = {}

    # ---------------- state ----------------

    @property
    def entries(self) -> List[CatalogEntry]:
        return list(self._entries.values())

    def get(self, entry_id: int) -> Optional[CatalogEntry]:
        return self._entries.get(entry_id)

    @property
    def has_more(self) -> bool:
        if self.total is None:
            return True
        return self.next_page * self._raw_limit(self.page_size) < self.total

    def _raw_limit(self, page_size: int) -> int:
        # Ask for more than needed: some items will be rejected by the filter
        return min(page_size * self.overfetch_factor, MAX_LIMIT)

    # ---------------- fetching ----------------

    def fetch_page(self, page_number: int, page_size: Optional[int] = None) -> Tuple[List[CatalogEntry], int]:
        """
        Fetch one page of valid entries, truncated to page_size.

        Raises UpstreamError / MalformedResponseError / NetworkError and
        leaves the accumulated state untouched in that case.
        """
        size = page_size or self.page_size
        raw_limit = self._raw_limit(size)
        raw, total = self.client.list_characters(offset=page_number * raw_limit, limit=raw_limit)
        page = filter_valid(raw)[:size]
        logger.debug(f"Page {page_number}: {len(raw)} raw, {len(page)} kept")

        self.total = total
        self._append(page)
        return page, total

    def fetch_next_page(self) -> List[CatalogEntry]:
        page, _ = self.fetch_page(self.next_page)
        self.next_page += 1
        return page

    def _append(self, page: List[CatalogEntry]) -> None:
        added = 0
        for entry in page:
            if entry.id not in self._entries:
                self._entries[entry.id] = entry
                added += 1
        if added:
            logger.info(f"Catalog grew by {added} entries ({len(self._entries)} total)")
            self.index.rebuild(self._entries.values())

    def reset(self) -> None:
        """Forget everything fetched (used on retry from scratch)."""
        self._entries = {}
        self.total = None
        self.next_page = 0
        self.index.rebuild([])
