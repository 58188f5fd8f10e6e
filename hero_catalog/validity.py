"""
Validity filter: decides whether a catalog entry can be shown and indexed.
"""
from typing import Iterable, List

from .models import CatalogEntry

# Stock "missing image" assets served by the catalog
PLACEHOLDER_TOKENS = ("image_not_available", "4c002e0305708")


def is_placeholder(path: str) -> bool:
    low = path.lower()
    return any(token in low for token in PLACEHOLDER_TOKENS)


def is_valid(entry: CatalogEntry) -> bool:
    """
    Entry needs a name, a description and a real thumbnail
    (path + extension, not a placeholder image).
    """
    if not (entry.name or "").strip():
        return False
    if not (entry.description or "").strip():
        return False
    thumb = entry.thumbnail
    if thumb is None or not thumb.path or not thumb.extension:
        return False
    return not is_placeholder(thumb.path)


def filter_valid(entries: Iterable[CatalogEntry]) -> List[CatalogEntry]:
    return [e for e in entries if is_valid(e)]
