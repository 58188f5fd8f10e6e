"""
Search result cache: normalized query -> ranked results.

No LRU: when the map grows past max_entries, or when clear_interval
seconds have passed since the last clear, the whole map is dropped.
Results may be stale relative to later catalog pages; that is accepted.
"""
import logging
import time
from typing import Callable, Dict, List, Optional

from .models import CatalogEntry
from .utils import normalize_query

logger = logging.getLogger(__name__)


class SearchResultCache:
    def __init__(
        self,
        max_entries: int = 50,
        clear_interval: float = 300.0,
        clock: Callable[[], float] = time.time,
    ):
        self.max_entries = max_entries
        self.clear_interval = clear_interval
        self._clock = clock
        self._data: Dict[str, List[CatalogEntry]] = {}
        self._last_clear = clock()
        self.hits = 0
        self.misses = 0

    # ----------------- intern -----------------

    def clear_if_due(self) -> bool:
        """Periodic clear. Called on every access; may also be called from a scheduler tick."""
        now = self._clock()
        if now - self._last_clear >= self.clear_interval:
            logger.debug(f"Search cache period elapsed, dropping {len(self._data)} entries")
            self.clear()
            return True
        return False

    # ----------------- API public -----------------

    def get(self, query: str) -> Optional[List[CatalogEntry]]:
        self.clear_if_due()
        results = self._data.get(normalize_query(query))
        if results is None:
            self.misses += 1
            return None
        self.hits += 1
        return list(results)

    def put(self, query: str, results: List[CatalogEntry]) -> None:
        self.clear_if_due()
        if len(self._data) > self.max_entries:
            logger.debug(f"Search cache over {self.max_entries} entries, clearing")
            self.clear()
        self._data[normalize_query(query)] = list(results)

    def clear(self) -> None:
        self._data.clear()
        self._last_clear = self._clock()

    def __contains__(self, query: str) -> bool:
        return normalize_query(query) in self._data

    def __len__(self) -> int:
        return len(self._data)
