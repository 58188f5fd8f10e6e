"""
Environment-driven configuration for the catalog client.
"""
import os
from typing import Optional


class Settings:
    """Configuration loaded from environment variables."""

    @classmethod
    def _get_marvel_api_url(cls) -> str:
        return os.getenv("MARVEL_API_URL", "https://gateway.marvel.com/v1/public/characters")

    @classmethod
    def _get_marvel_public_key(cls) -> Optional[str]:
        # Support both names
        return os.getenv("MARVEL_PUBLIC_KEY") or os.getenv("MARVEL_APIKEY")

    @classmethod
    def _get_marvel_private_key(cls) -> Optional[str]:
        return os.getenv("MARVEL_PRIVATE_KEY")

    @classmethod
    def _get_marvel_ts(cls) -> str:
        return os.getenv("MARVEL_TS", "1")

    @classmethod
    def _get_marvel_hash(cls) -> Optional[str]:
        return os.getenv("MARVEL_HASH")

    @classmethod
    def _get_heroes_api_url(cls) -> str:
        # EXPO_PUBLIC_API_URL is what the mobile build used
        url = os.getenv("HEROES_API_URL") or os.getenv("EXPO_PUBLIC_API_URL") or "http://localhost:3000/api"
        return url.rstrip("/")

    @classmethod
    def _get_page_size(cls) -> int:
        return int(os.getenv("CATALOG_PAGE_SIZE", "20"))

    @classmethod
    def _get_overfetch_factor(cls) -> int:
        return int(os.getenv("CATALOG_OVERFETCH_FACTOR", "2"))

    @classmethod
    def _get_remote_search_limit(cls) -> int:
        return int(os.getenv("REMOTE_SEARCH_LIMIT", "20"))

    @classmethod
    def _get_debounce_seconds(cls) -> float:
        return float(os.getenv("SEARCH_DEBOUNCE_SECONDS", "0.3"))

    @classmethod
    def _get_cache_max_entries(cls) -> int:
        return int(os.getenv("SEARCH_CACHE_MAX_ENTRIES", "50"))

    @classmethod
    def _get_cache_clear_seconds(cls) -> float:
        return float(os.getenv("SEARCH_CACHE_CLEAR_SECONDS", "300"))

    @classmethod
    def _get_log_level(cls) -> str:
        return os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def _get_http_timeout(cls) -> Optional[float]:
        raw = os.getenv("HTTP_TIMEOUT_SECONDS", "").strip()
        return float(raw) if raw else None

    # Properties that read from environment each time
    @property
    def MARVEL_API_URL(self) -> str:
        return self._get_marvel_api_url()

    @property
    def MARVEL_PUBLIC_KEY(self) -> Optional[str]:
        return self._get_marvel_public_key()

    @property
    def MARVEL_PRIVATE_KEY(self) -> Optional[str]:
        return self._get_marvel_private_key()

    @property
    def MARVEL_TS(self) -> str:
        return self._get_marvel_ts()

    @property
    def MARVEL_HASH(self) -> Optional[str]:
        return self._get_marvel_hash()

    @property
    def HEROES_API_URL(self) -> str:
        return self._get_heroes_api_url()

    @property
    def CATALOG_PAGE_SIZE(self) -> int:
        return self._get_page_size()

    @property
    def CATALOG_OVERFETCH_FACTOR(self) -> int:
        return self._get_overfetch_factor()

    @property
    def REMOTE_SEARCH_LIMIT(self) -> int:
        return self._get_remote_search_limit()

    @property
    def SEARCH_DEBOUNCE_SECONDS(self) -> float:
        return self._get_debounce_seconds()

    @property
    def SEARCH_CACHE_MAX_ENTRIES(self) -> int:
        return self._get_cache_max_entries()

    @property
    def SEARCH_CACHE_CLEAR_SECONDS(self) -> float:
        return self._get_cache_clear_seconds()

    @property
    def HTTP_TIMEOUT_SECONDS(self) -> Optional[float]:
        return self._get_http_timeout()

    @property
    def LOG_LEVEL(self) -> str:
        return self._get_log_level()

    def validate(self) -> None:
        """Validate the catalog credentials."""
        if not self.MARVEL_PUBLIC_KEY:
            raise ValueError("MARVEL_PUBLIC_KEY (or MARVEL_APIKEY) is required")
        if not (self.MARVEL_PRIVATE_KEY or self.MARVEL_HASH):
            raise ValueError("Catalog credentials required: set MARVEL_PRIVATE_KEY, or MARVEL_TS + MARVEL_HASH")


settings = Settings()
