"""
End-to-end tests: session wiring, profile sync and the Flask hook.
"""
import logging

import pytest

from hero_catalog.catalog_client import CatalogClient
from hero_catalog.favorites import FavoritesClient
from hero_catalog.integrations.flask_hook import create_app
from hero_catalog.models import UserProfile
from hero_catalog.profiles import UserProfileClient
from hero_catalog.session import CatalogSession
from hero_catalog.settings import Settings
from fakes import FakeResponse, FakeSession, catalog_body, raw_character

CATALOG = [
    raw_character(1, "Spider-Man"),
    raw_character(2, "Spider-Woman"),
    raw_character(3, "Iron Man"),
    raw_character(4, "Thor", path="http://i.annihil.us/u/prod/marvel/i/mg/b/40/image_not_available"),
]


class FakeServices:
    """Catalog + favorites/profile backend behind a single handler."""

    def __init__(self):
        self.favorites = {}
        self.users = {}
        self.search_status = 200
        self.catalog_down = False
        self.bad_total = False

    def __call__(self, method, url, **kwargs):
        if self.catalog_down:
            return FakeResponse(500, {"message": "down"})
        if url.startswith("https://catalog.test"):
            params = kwargs["params"]
            if "nameStartsWith" in params:
                if self.search_status != 200:
                    return FakeResponse(self.search_status, {"message": "search down"})
                prefix = params["nameStartsWith"].lower()
                hits = [c for c in CATALOG + [raw_character(9, "Hulk")] if c["name"].lower().startswith(prefix)]
                return FakeResponse(200, catalog_body(hits))
            offset, limit = params["offset"], params["limit"]
            total = "n/a" if self.bad_total else len(CATALOG)
            return FakeResponse(200, catalog_body(CATALOG[offset:offset + limit], total=total))
        if url.endswith("/users") and method == "POST":
            self.users[kwargs["json"]["firebaseUid"]] = kwargs["json"]
            return FakeResponse(200, {"message": "ok", "user": kwargs["json"]})
        if "/users/" in url and "/favorites" not in url:
            uid = url.rsplit("/", 1)[-1]
            if uid not in self.users:
                return FakeResponse(404, {"error": "User not found"})
            return FakeResponse(200, {"user": self.users[uid]})
        if url.endswith("/favorites"):
            if method == "GET":
                return FakeResponse(200, {"favorites": list(self.favorites.values())})
            marvel_id = kwargs["json"]["id"]
            self.favorites[marvel_id] = {"marvelId": marvel_id, "name": str(marvel_id), "thumbnail": ""}
            return FakeResponse(201, {"message": "Added"})
        if method == "DELETE":
            self.favorites.pop(int(url.rsplit("/", 1)[-1]), None)
            return FakeResponse(200, {"message": "Removed"})
        raise AssertionError(f"unexpected {method} {url}")


@pytest.fixture
def services():
    return FakeServices()


@pytest.fixture
def session(services, timers):
    http = FakeSession(services)
    return CatalogSession(
        CatalogClient("https://catalog.test/characters", "pub", hash_="h", session=http),
        FavoritesClient("https://backend.test/api", session=http),
        UserProfileClient("https://backend.test/api", session=http),
        page_size=10,
        timer_factory=timers,
    )


class TestSession:
    def test_browse_then_search(self, session):
        page = session.fetcher.fetch_next_page()
        assert [e.id for e in page] == [1, 2, 3]
        results, strategy = session.search_with_strategy("spi")
        assert [e.name for e in results] == ["Spider-Man", "Spider-Woman"]
        assert strategy == "index"

    def test_search_is_cached(self, session, services):
        session.fetcher.fetch_next_page()
        assert session.search_with_strategy("hul")[1] == "remote"
        services.search_status = 500
        results, strategy = session.search_with_strategy("HUL")
        assert [e.name for e in results] == ["Hulk"]
        assert strategy == "cache"

    def test_typed_query_goes_through_controller(self, session, timers):
        session.fetcher.fetch_next_page()
        session.type_query("iron")
        timers.last.fire()
        assert [e.id for e in session.controller.results] == [3]

    def test_sign_in_saves_profile_and_loads_favorites(self, session, services):
        services.favorites[1] = {"marvelId": 1, "name": "Spider-Man", "thumbnail": ""}
        session.sign_in(UserProfile(firebase_uid="u1", email="peter@bugle.com"))

        assert services.users["u1"]["displayName"] == "peter"
        assert session.favorites.favorite_ids == [1]
        assert session.profiles.get_user("u1").display_name == "peter"
        assert session.profiles.get_user("nobody") is None

        session.sign_out()
        assert session.favorites.favorites == []


class TestSettings:
    def test_defaults(self, monkeypatch):
        for var in ["HEROES_API_URL", "EXPO_PUBLIC_API_URL", "SEARCH_CACHE_MAX_ENTRIES", "HTTP_TIMEOUT_SECONDS"]:
            monkeypatch.delenv(var, raising=False)
        cfg = Settings()
        assert cfg.HEROES_API_URL == "http://localhost:3000/api"
        assert cfg.SEARCH_CACHE_MAX_ENTRIES == 50
        assert cfg.SEARCH_CACHE_CLEAR_SECONDS == 300
        assert cfg.HTTP_TIMEOUT_SECONDS is None

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("HEROES_API_URL", "https://api.example.com/api/")
        monkeypatch.setenv("SEARCH_DEBOUNCE_SECONDS", "0.5")
        cfg = Settings()
        assert cfg.HEROES_API_URL == "https://api.example.com/api"
        assert cfg.SEARCH_DEBOUNCE_SECONDS == 0.5

    def test_validate_requires_credentials(self, monkeypatch):
        for var in ["MARVEL_PUBLIC_KEY", "MARVEL_APIKEY", "MARVEL_PRIVATE_KEY", "MARVEL_HASH"]:
            monkeypatch.delenv(var, raising=False)
        with pytest.raises(ValueError):
            Settings().validate()
        monkeypatch.setenv("MARVEL_PUBLIC_KEY", "pub")
        monkeypatch.setenv("MARVEL_HASH", "h")
        Settings().validate()

    def test_session_from_settings(self, monkeypatch, services):
        monkeypatch.setenv("MARVEL_PUBLIC_KEY", "pub")
        monkeypatch.setenv("MARVEL_PRIVATE_KEY", "priv")
        monkeypatch.setenv("MARVEL_API_URL", "https://catalog.test/characters")
        monkeypatch.setenv("CATALOG_PAGE_SIZE", "2")
        session = CatalogSession.from_settings(Settings(), http=FakeSession(services))
        assert len(session.fetcher.fetch_next_page()) == 2


class TestFlaskHook:
    @pytest.fixture
    def client(self, session):
        app = create_app(session=session)
        app.config["TESTING"] = True
        return app.test_client()

    def test_health(self, client):
        assert client.get("/health").get_json() == {"ok": True}

    def test_create_app_configures_package_logger(self, monkeypatch, session):
        logger = logging.getLogger("hero_catalog")
        monkeypatch.setattr(logger, "level", logger.level)
        monkeypatch.setattr(logger, "handlers", list(logger.handlers))
        monkeypatch.setenv("LOG_LEVEL", "debug")
        create_app(session=session)
        assert logger.level == logging.DEBUG
        assert sum(1 for h in logger.handlers if getattr(h, "_hero_catalog", False)) == 1

    def test_characters_and_search(self, client):
        body = client.get("/characters?page=0").get_json()
        assert [c["id"] for c in body["results"]] == [1, 2, 3]
        assert body["total"] == 4
        assert body["results"][0]["thumbnail"].startswith("https://")

        assert client.get("/characters/3").get_json()["name"] == "Iron Man"
        assert client.get("/characters/4").status_code == 404

        body = client.get("/search?q=spider-man").get_json()
        assert body["strategy"] == "index"
        assert body["results"][0]["name"] == "Spider-Man"

    def test_repeated_search_reports_cache(self, client, session):
        client.get("/characters")
        assert client.get("/search?q=iron").get_json()["strategy"] == "index"
        # a debounced search in between must not leak its strategy into /search
        session.engine.search("zzz")
        body = client.get("/search", query_string={"q": " IRON "}).get_json()
        assert body["strategy"] == "cache"
        assert [r["id"] for r in body["results"]] == [3]

    def test_upstream_failure_is_502(self, client, services):
        services.catalog_down = True
        resp = client.get("/characters")
        assert resp.status_code == 502
        assert resp.get_json()["upstream_status"] == 500

    def test_unreadable_total_is_502(self, client, services, session):
        services.bad_total = True
        resp = client.get("/characters")
        assert resp.status_code == 502
        assert resp.get_json()["upstream_status"] == 200
        assert session.fetcher.entries == []

    def test_favorites_require_sign_in(self, client):
        client.get("/characters")
        assert client.post("/favorites", json={"id": 1}).status_code == 401

    def test_favorites_flow(self, client, session):
        client.get("/characters")
        session.sign_in(UserProfile(firebase_uid="u1", email="peter@bugle.com"))

        resp = client.post("/favorites", json={"id": 1})
        assert resp.status_code == 201
        assert resp.get_json()["favorite_ids"] == [1]
        assert client.post("/favorites", json={"id": 42}).status_code == 400

        assert [f["marvelId"] for f in client.get("/favorites").get_json()["favorites"]] == [1]
        assert client.delete("/favorites/1").get_json()["favorite_ids"] == []
