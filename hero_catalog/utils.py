"""
Utility functions for query normalization, tokenization, image URLs,
API signing and logging.
"""
import hashlib
import logging
import re
import sys
from typing import List, Optional

# Word delimiters: runs of whitespace, hyphen or underscore
_WORD_SPLIT = re.compile(r"[\s\-_]+")


def normalize_query(raw: Optional[str]) -> str:
    """Trim and lower-case user input."""
    return (raw or "").strip().lower()


def tokenize(text: Optional[str]) -> List[str]:
    """
    Split a name (or query) into lower-cased words.

    "Spider-Man" -> ["spider", "man"]
    "  iron_man 2" -> ["iron", "man", "2"]
    """
    return [w for w in _WORD_SPLIT.split((text or "").lower()) if w]


def secure_url(url: Optional[str]) -> str:
    """Rewrite plain http:// URLs to https://."""
    return (url or "").replace("http://", "https://")


def thumbnail_url(path: Optional[str], extension: Optional[str]) -> str:
    """Compose path + extension into a secure URL, '' when incomplete."""
    if not path or not extension:
        return ""
    return secure_url(f"{path}.{extension}")


def api_hash(ts: str, private_key: str, public_key: str) -> str:
    """Request signature expected by the catalog API: md5(ts + private + public)."""
    return hashlib.md5(f"{ts}{private_key}{public_key}".encode("utf-8")).hexdigest()


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger(name: str = "hero_catalog", level: str = "INFO") -> logging.Logger:
    """
    Package logger on stdout. Child loggers (hero_catalog.engine, ...)
    propagate to it, so configuring the root package once is enough.
    Unknown level names fall back to INFO.
    """
    logger = logging.getLogger(name)
    resolved = logging.getLevelName((level or "").upper())
    logger.setLevel(resolved if isinstance(resolved, int) else logging.INFO)

    if not any(getattr(h, "_hero_catalog", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handler._hero_catalog = True
        logger.addHandler(handler)

    return logger
