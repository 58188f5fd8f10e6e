"""
Search engine over the catalog.

Strategies, tried in order (first non-empty result wins):
1. indexed lookup (exact token, else longest matching prefix; tokens OR-ed)
2. remote name-prefix search
3. local linear scan over the accumulated entries
"""
import logging
from typing import Iterable, List, Optional, Protocol, Tuple

from .errors import CatalogError
from .index import WordIndex
from .models import CatalogEntry
from .utils import normalize_query, tokenize
from .validity import filter_valid

logger = logging.getLogger(__name__)


class RemoteSearch(Protocol):
    def search_by_name(self, prefix: str, limit: int = ...) -> List[CatalogEntry]: ...


def _sort_key(entry: CatalogEntry, query: str):
    name = entry.display_name.lower()
    if name == query:
        tier = 0
    elif name.startswith(query):
        tier = 1
    else:
        tier = 2
    return tier, name, entry.id


def rank(entries: Iterable[CatalogEntry], query: str) -> List[CatalogEntry]:
    """Exact name first, then names starting with the query, then alphabetical."""
    q = normalize_query(query)
    return sorted(entries, key=lambda e: _sort_key(e, q))


def local_scan(entries: Iterable[CatalogEntry], query: str) -> List[CatalogEntry]:
    """Names equal to, starting with or containing the normalized query."""
    q = normalize_query(query)
    if not q:
        return []
    return rank((e for e in entries if q in e.display_name.lower()), q)


class SearchEngine:
    def __init__(self, index: WordIndex, remote: Optional[RemoteSearch] = None, remote_limit: int = 20):
        self.index = index
        self.remote = remote
        self.remote_limit = remote_limit
        # Strategy of the last search() call; callers sharing the engine across
        # threads should use search_with_strategy() instead
        self.last_strategy: Optional[str] = None

    def indexed_lookup(self, query: str) -> List[CatalogEntry]:
        found = set()
        for token in tokenize(query):
            found |= self.index.lookup_longest_prefix(token)
        return rank(found, query)

    def remote_lookup(self, query: str) -> List[CatalogEntry]:
        """Remote results in upstream order. Raises on upstream failure."""
        if self.remote is None:
            return []
        return filter_valid(self.remote.search_by_name(query.strip(), limit=self.remote_limit))

    def search(self, query: str) -> List[CatalogEntry]:
        results, self.last_strategy = self.search_with_strategy(query)
        return results

    def search_with_strategy(self, query: str) -> Tuple[List[CatalogEntry], Optional[str]]:
        """Results plus the strategy that produced them (index / remote / local / None)."""
        q = normalize_query(query)
        if not q:
            return [], None

        results = self.indexed_lookup(q)
        if results:
            logger.debug(f"'{q}': {len(results)} indexed hit(s)")
            return results, "index"

        try:
            results = self.remote_lookup(query)
        except CatalogError as e:
            logger.warning(f"Remote search for '{q}' failed, scanning locally: {e}")
            results = []
        if results:
            logger.debug(f"'{q}': {len(results)} remote hit(s)")
            return results, "remote"

        results = local_scan(self.index.entries, q)
        logger.debug(f"'{q}': {len(results)} local hit(s)")
        return results, ("local" if results else None)
