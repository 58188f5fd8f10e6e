"""
Inverted word/prefix index over the catalog entries seen so far.

Each entry is registered under every word of its lower-cased name and under
every prefix of those words, so partial-word lookups are a single dict hit.
The index is rebuilt wholesale from the accumulated entry set; the new
structure is built aside and swapped in with one assignment, so readers
never see a half-built index.
"""
import logging
from typing import Dict, Iterable, List, Set, Tuple

from .models import CatalogEntry
from .utils import tokenize

logger = logging.getLogger(__name__)

# token -> ids, id -> entry
_IndexState = Tuple[Dict[str, Set[int]], Dict[int, CatalogEntry]]


def index_keys(name: str) -> Set[str]:
    """All tokens a name is registered under ("Iron Man" -> i, ir, iro, iron, m, ma, man)."""
    keys: Set[str] = set()
    for word in tokenize(name):
        for end in range(1, len(word) + 1):
            keys.add(word[:end])
    return keys


class WordIndex:
    def __init__(self, entries: Iterable[CatalogEntry] = ()):
        self._state: _IndexState = ({}, {})
        self.rebuild(entries)

    def rebuild(self, entries: Iterable[CatalogEntry]) -> None:
        """Replace the whole index with one built from `entries`."""
        tokens: Dict[str, Set[int]] = {}
        by_id: Dict[int, CatalogEntry] = {}
        for entry in entries:
            by_id[entry.id] = entry
            for key in index_keys(entry.display_name):
                tokens.setdefault(key, set()).add(entry.id)
        self._state = (tokens, by_id)
        logger.info(f"Word index rebuilt: {len(by_id)} entries, {len(tokens)} tokens")

    def lookup(self, token: str) -> Set[CatalogEntry]:
        """Entries registered under exactly this token (empty set if none)."""
        tokens, by_id = self._state
        return {by_id[i] for i in tokens.get(token, ())}

    def lookup_longest_prefix(self, token: str) -> Set[CatalogEntry]:
        """
        Exact token first, then shorter and shorter prefixes of it;
        the first non-empty match wins.
        """
        for end in range(len(token), 0, -1):
            found = self.lookup(token[:end])
            if found:
                if end < len(token):
                    logger.debug(f"Token '{token}' matched by prefix '{token[:end]}'")
                return found
        return set()

    @property
    def entries(self) -> List[CatalogEntry]:
        return list(self._state[1].values())

    def tokens(self) -> List[str]:
        return list(self._state[0].keys())

    def __contains__(self, token: str) -> bool:
        return token in self._state[0]

    def __len__(self) -> int:
        return len(self._state[1])
