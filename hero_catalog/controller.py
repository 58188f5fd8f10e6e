"""
Query controller: debounces typed input and resolves it through the
result cache and the search engine, last query wins.

States:
    IDLE -> DEBOUNCING -> RESOLVING -> RESOLVED | FAILED

Every keystroke bumps `sequence`. A debounce timer or a resolution that
completes with a sequence number other than the current one is discarded.
In-flight network calls are not aborted, only their results are dropped.
"""
import logging
import threading
from enum import Enum
from typing import Any, Callable, List, Optional

from .cache import SearchResultCache
from .engine import SearchEngine
from .errors import CatalogError
from .fetcher import CatalogFetcher
from .models import CatalogEntry
from .utils import normalize_query

logger = logging.getLogger(__name__)

# (delay_seconds, callback) -> handle with .cancel()
TimerFactory = Callable[[float, Callable[[], None]], Any]


class QueryState(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    FAILED = "failed"


def start_timer(delay: float, callback: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


class QueryController:
    def __init__(
        self,
        engine: SearchEngine,
        cache: SearchResultCache,
        fetcher: Optional[CatalogFetcher] = None,
        *,
        debounce_seconds: float = 0.3,
        timer_factory: TimerFactory = start_timer,
        on_change: Optional[Callable[["QueryController"], None]] = None,
    ):
        self.engine = engine
        self.cache = cache
        self.fetcher = fetcher
        self.debounce_seconds = debounce_seconds
        self._timer_factory = timer_factory
        self._on_change = on_change
        self._lock = threading.RLock()
        self._timer = None
        self._pending: Optional[str] = None

        self.state = QueryState.IDLE
        self.query = ""
        self.sequence = 0
        self.results: List[CatalogEntry] = []
        self.error: Optional[CatalogError] = None
        self.browse_error: Optional[CatalogError] = None

    # ----------------- intern -----------------

    def _notify(self) -> None:
        if self._on_change:
            self._on_change(self)

    def _cancel_timer_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending = None

    def _fire(self, seq: int) -> None:
        """Debounce elapsed for query number `seq`."""
        with self._lock:
            if seq != self.sequence or self.state != QueryState.DEBOUNCING:
                return
            text = self._pending or ""
            self._timer = None
            self._pending = None
            self.state = QueryState.RESOLVING
        self._resolve(seq, text)

    def _resolve(self, seq: int, text: str) -> None:
        cached = self.cache.get(text)
        if cached is not None:
            logger.debug(f"Cache hit for '{normalize_query(text)}'")
            self._finish(seq, results=cached)
            return
        try:
            results = self.engine.search(text)
        except CatalogError as e:
            logger.error(f"Search for '{normalize_query(text)}' failed: {e}")
            self._finish(seq, error=e)
            return
        # Pure function of (snapshot, query): caching is fine even if superseded
        self.cache.put(text, results)
        self._finish(seq, results=results)

    def _finish(self, seq: int, results: Optional[List[CatalogEntry]] = None, error: Optional[CatalogError] = None) -> None:
        with self._lock:
            if seq != self.sequence:
                logger.debug(f"Dropping stale result for query #{seq} (current #{self.sequence})")
                return
            if error is not None:
                # Previously displayed results stay on screen
                self.state = QueryState.FAILED
                self.error = error
            else:
                self.state = QueryState.RESOLVED
                self.results = list(results or [])
                self.error = None
        self._notify()

    # ----------------- API public -----------------

    def on_input(self, text: str) -> None:
        """New content of the search field."""
        with self._lock:
            self.sequence += 1
            seq = self.sequence
            self._cancel_timer_locked()
            self.query = text or ""
            if not normalize_query(text):
                self.state = QueryState.IDLE
                self.results = []
                self.error = None
            else:
                self.state = QueryState.DEBOUNCING
                self._pending = self.query
                self._timer = self._timer_factory(self.debounce_seconds, lambda: self._fire(seq))
        self._notify()

    def clear(self) -> None:
        """Empty the search field: cancels pending work and returns to IDLE."""
        self.on_input("")

    def flush(self) -> bool:
        """Resolve a pending debounce right away. Returns False if nothing was pending."""
        with self._lock:
            if self.state != QueryState.DEBOUNCING:
                return False
            seq = self.sequence
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        self._fire(seq)
        return True

    @property
    def is_searching(self) -> bool:
        return self.state != QueryState.IDLE

    @property
    def visible_entries(self) -> List[CatalogEntry]:
        """Search results while a query is active, else the browsed catalog."""
        if self.is_searching:
            return list(self.results)
        return self.fetcher.entries if self.fetcher else []

    def load_more(self) -> bool:
        """Fetch the next catalog page for browsing. Returns False on failure."""
        if self.fetcher is None:
            return False
        try:
            self.fetcher.fetch_next_page()
        except CatalogError as e:
            logger.error(f"Loading catalog page {self.fetcher.next_page} failed: {e}")
            self.browse_error = e
            self._notify()
            return False
        self.browse_error = None
        self._notify()
        return True
