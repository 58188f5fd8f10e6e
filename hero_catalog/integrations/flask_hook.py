"""
Flask integration hook - small JSON surface over one CatalogSession.

Usage:
    from hero_catalog.integrations.flask_hook import create_app
    app = create_app()                 # session built from env settings
    app = create_app(session=session)  # or an explicit one (tests)
"""
import logging
from typing import Optional

from flask import Blueprint, Flask, current_app, jsonify, request
from dotenv import load_dotenv

from ..errors import CatalogError, UpstreamError
from ..session import CatalogSession
from ..settings import settings
from ..utils import get_logger

logger = logging.getLogger(__name__)

bp = Blueprint("hero_catalog", __name__)


def _session() -> CatalogSession:
    return current_app.config["CATALOG_SESSION"]


def _error(e: CatalogError):
    status = e.status if isinstance(e, UpstreamError) else None
    logger.error(f"Upstream call failed: {e}")
    return jsonify({"error": str(e), "upstream_status": status}), 502


@bp.get("/health")
def health():
    return {"ok": True}, 200


@bp.get("/characters")
def characters():
    session = _session()
    page = request.args.get("page", type=int)
    try:
        if page is None:
            entries = session.fetcher.fetch_next_page()
        else:
            entries, _ = session.fetcher.fetch_page(page)
    except CatalogError as e:
        return _error(e)
    return jsonify({
        "results": [e.to_public() for e in entries],
        "total": session.fetcher.total,
        "has_more": session.fetcher.has_more,
    })


@bp.get("/characters/<int:entry_id>")
def character(entry_id: int):
    entry = _session().fetcher.get(entry_id)
    if entry is None:
        return jsonify({"error": "Character not found"}), 404
    return jsonify(entry.to_public())


@bp.get("/search")
def search():
    session = _session()
    query = request.args.get("q", "")
    results, strategy = session.search_with_strategy(query)
    return jsonify({
        "query": query,
        "strategy": strategy,
        "results": [e.to_public() for e in results],
    })


@bp.get("/favorites")
def list_favorites():
    store = _session().favorites
    return jsonify({"favorites": [f.to_public() for f in store.favorites]})


@bp.post("/favorites")
def add_favorite():
    session = _session()
    if not session.favorites.uid:
        return jsonify({"error": "Sign in required"}), 401
    data = request.get_json(force=True, silent=True) or {}
    entry_id = data.get("id")
    entry = session.fetcher.get(entry_id) if isinstance(entry_id, int) else None
    if entry is None:
        return jsonify({"error": "Unknown character id"}), 400
    if not session.favorites.add(entry):
        return jsonify({"error": session.favorites.last_error or "Could not add favorite"}), 502
    return jsonify({"ok": True, "favorite_ids": session.favorites.favorite_ids}), 201


@bp.delete("/favorites/<int:marvel_id>")
def remove_favorite(marvel_id: int):
    store = _session().favorites
    if not store.uid:
        return jsonify({"error": "Sign in required"}), 401
    if not store.remove(marvel_id):
        return jsonify({"error": store.last_error or "Could not remove favorite"}), 502
    return jsonify({"ok": True, "favorite_ids": store.favorite_ids})


def create_app(session: Optional[CatalogSession] = None) -> Flask:
    # load env vars
    load_dotenv()

    app = Flask(__name__)
    get_logger("hero_catalog", settings.LOG_LEVEL)

    app.config["CATALOG_SESSION"] = session or CatalogSession.from_settings()
    app.register_blueprint(bp)
    return app
