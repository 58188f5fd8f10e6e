"""
Favorites: backend client plus the in-memory list mirrored per user.

Backend endpoints:
  GET    {HEROES_API_URL}/users/{uid}/favorites          -> {"favorites": [...]}
  POST   {HEROES_API_URL}/users/{uid}/favorites  {"id"}  (409 = already there, OK)
  DELETE {HEROES_API_URL}/users/{uid}/favorites/{id}     (404 = already gone, OK)

Mutations are optimistic: the local list changes first and is restored from
an explicit snapshot when the backend refuses.
"""
import logging
import threading
from typing import List, Optional

import requests
from pydantic import ValidationError

from .errors import CatalogError, MalformedResponseError, UpstreamError
from .models import CatalogEntry, Favorite
from .transport import check_response, send

logger = logging.getLogger(__name__)


class FavoritesClient:
    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _url(self, uid: str, marvel_id: Optional[int] = None) -> str:
        url = f"{self.base_url}/users/{uid}/favorites"
        return url if marvel_id is None else f"{url}/{marvel_id}"

    def list_favorites(self, uid: str) -> List[Favorite]:
        resp = send(self.session, "GET", self._url(uid), timeout=self.timeout)
        if resp.status_code == 404:
            # User has no favorites document yet
            return []
        body = check_response(resp)
        try:
            return [Favorite.model_validate(f) for f in body.get("favorites") or []]
        except (ValidationError, AttributeError) as e:
            raise MalformedResponseError(resp.status_code, f"Bad favorites payload: {e}") from e

    def add_favorite(self, uid: str, marvel_id: int) -> None:
        resp = send(self.session, "POST", self._url(uid), json={"id": marvel_id}, timeout=self.timeout)
        check_response(resp, ok_statuses=(409,), expect_body=False)

    def remove_favorite(self, uid: str, marvel_id: int) -> None:
        resp = send(self.session, "DELETE", self._url(uid, marvel_id), timeout=self.timeout)
        check_response(resp, ok_statuses=(404,), expect_body=False)


class FavoritesStore:
    """Favorites of the signed-in user, kept in sync with the backend."""

    def __init__(self, client: FavoritesClient, uid: Optional[str] = None):
        self.client = client
        self.uid = uid
        self._favorites: List[Favorite] = []
        self._lock = threading.Lock()
        self.loading = False
        self.last_error: Optional[str] = None

    # ----------------- state -----------------

    @property
    def favorites(self) -> List[Favorite]:
        with self._lock:
            return list(self._favorites)

    @property
    def favorite_ids(self) -> List[int]:
        return [f.marvel_id for f in self.favorites]

    def is_favorite(self, marvel_id: int) -> bool:
        return marvel_id in self.favorite_ids

    def _snapshot(self) -> List[Favorite]:
        with self._lock:
            return list(self._favorites)

    def _restore(self, snapshot: List[Favorite]) -> None:
        with self._lock:
            self._favorites = snapshot

    def _fail(self, action: str, error: CatalogError) -> bool:
        self.last_error = str(error.message if isinstance(error, UpstreamError) else error) or action
        logger.warning(f"[{self.uid}] {action} failed, rolled back: {error}")
        return False

    # ----------------- API public -----------------

    def set_user(self, uid: Optional[str]) -> None:
        """Switch user; signing out empties the list."""
        self.uid = uid
        self._restore([])
        if uid:
            self.refresh()

    def refresh(self) -> None:
        """Reload from the backend. On failure the current list is kept."""
        if not self.uid:
            return
        self.loading = True
        try:
            favorites = self.client.list_favorites(self.uid)
        except CatalogError as e:
            logger.error(f"[{self.uid}] Error fetching favorites: {e}")
            return
        finally:
            self.loading = False
        self._restore(favorites)
        logger.info(f"[{self.uid}] {len(favorites)} favorite(s) loaded")

    def add(self, entry: CatalogEntry) -> bool:
        if not self.uid:
            return False
        snapshot = self._snapshot()
        if any(f.marvel_id == entry.id for f in snapshot):
            return True
        self._restore(snapshot + [Favorite.from_entry(entry)])
        try:
            self.client.add_favorite(self.uid, entry.id)
        except CatalogError as e:
            self._restore(snapshot)
            return self._fail(f"Adding favorite {entry.id}", e)
        logger.info(f"[{self.uid}] Favorite added: {entry.id}")
        self.last_error = None
        self.refresh()
        return True

    def remove(self, marvel_id: int) -> bool:
        if not self.uid:
            return False
        snapshot = self._snapshot()
        self._restore([f for f in snapshot if f.marvel_id != marvel_id])
        try:
            self.client.remove_favorite(self.uid, marvel_id)
        except CatalogError as e:
            self._restore(snapshot)
            return self._fail(f"Removing favorite {marvel_id}", e)
        logger.info(f"[{self.uid}] Favorite removed: {marvel_id}")
        self.last_error = None
        return True

    def toggle(self, entry: CatalogEntry) -> bool:
        if self.is_favorite(entry.id):
            return self.remove(entry.id)
        return self.add(entry)
