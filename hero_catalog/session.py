"""
One CatalogSession per signed-in (or anonymous) app session.

It owns the fetched catalog, its index, the result cache, the query
controller and the favorites store, and passes them explicitly to each
other. Nothing here is global.
"""
import logging
from typing import List, Optional, Tuple

import requests

from .cache import SearchResultCache
from .catalog_client import CatalogClient
from .controller import QueryController, TimerFactory, start_timer
from .engine import SearchEngine
from .errors import CatalogError
from .favorites import FavoritesClient, FavoritesStore
from .fetcher import CatalogFetcher
from .index import WordIndex
from .models import CatalogEntry, UserProfile
from .profiles import UserProfileClient
from .settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class CatalogSession:
    def __init__(
        self,
        catalog_client: CatalogClient,
        favorites_client: FavoritesClient,
        profile_client: Optional[UserProfileClient] = None,
        *,
        page_size: int = 20,
        overfetch_factor: int = 2,
        remote_search_limit: int = 20,
        debounce_seconds: float = 0.3,
        cache_max_entries: int = 50,
        cache_clear_seconds: float = 300.0,
        timer_factory: TimerFactory = start_timer,
    ):
        self.index = WordIndex()
        self.fetcher = CatalogFetcher(
            catalog_client, self.index, page_size=page_size, overfetch_factor=overfetch_factor
        )
        self.engine = SearchEngine(self.index, remote=catalog_client, remote_limit=remote_search_limit)
        self.cache = SearchResultCache(max_entries=cache_max_entries, clear_interval=cache_clear_seconds)
        self.controller = QueryController(
            self.engine,
            self.cache,
            self.fetcher,
            debounce_seconds=debounce_seconds,
            timer_factory=timer_factory,
        )
        self.favorites = FavoritesStore(favorites_client)
        self.profiles = profile_client
        self.user: Optional[UserProfile] = None

    @classmethod
    def from_settings(cls, cfg: Settings = default_settings, http: Optional[requests.Session] = None) -> "CatalogSession":
        http = http or requests.Session()
        timeout = cfg.HTTP_TIMEOUT_SECONDS
        return cls(
            CatalogClient.from_settings(cfg, session=http),
            FavoritesClient(cfg.HEROES_API_URL, session=http, timeout=timeout),
            UserProfileClient(cfg.HEROES_API_URL, session=http, timeout=timeout),
            page_size=cfg.CATALOG_PAGE_SIZE,
            overfetch_factor=cfg.CATALOG_OVERFETCH_FACTOR,
            remote_search_limit=cfg.REMOTE_SEARCH_LIMIT,
            debounce_seconds=cfg.SEARCH_DEBOUNCE_SECONDS,
            cache_max_entries=cfg.SEARCH_CACHE_MAX_ENTRIES,
            cache_clear_seconds=cfg.SEARCH_CACHE_CLEAR_SECONDS,
        )

    # ---------------- auth ----------------

    def sign_in(self, profile: UserProfile) -> None:
        """Called once the identity provider has authenticated the user."""
        self.user = profile
        if self.profiles is not None:
            try:
                self.profiles.save_user(profile)
            except CatalogError as e:
                logger.error(f"[{profile.firebase_uid}] Error saving user to backend: {e}")
        self.favorites.set_user(profile.firebase_uid)

    def sign_out(self) -> None:
        self.user = None
        self.favorites.set_user(None)

    # ---------------- search ----------------

    def type_query(self, text: str) -> None:
        """Debounced path used while the user is typing."""
        self.controller.on_input(text)

    def search(self, query: str) -> List[CatalogEntry]:
        """Immediate lookup: cache first, then the engine."""
        return self.search_with_strategy(query)[0]

    def search_with_strategy(self, query: str) -> Tuple[List[CatalogEntry], Optional[str]]:
        """Like search(), also naming where the results came from ("cache" on a hit)."""
        cached = self.cache.get(query)
        if cached is not None:
            return cached, "cache"
        results, strategy = self.engine.search_with_strategy(query)
        if query.strip():
            self.cache.put(query, results)
        return results, strategy
