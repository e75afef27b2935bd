"""Flask web application for Agora.

The app factory builds one store and one set of services per process and
keeps them in ``app.extensions["agora"]``. Views reach them through
:func:`get_services`, which reads the current application, so nothing is
held in module globals.
"""

import logging
import secrets
from pathlib import Path
from typing import Any, Optional

from flask import Flask, current_app, flash, jsonify, redirect, render_template, request, url_for

from agora.storage.base import ForumStore, StorageError
from agora.web.auth import get_session_user_id
from agora.web.config import WebConfig
from agora.web.filters import register_filters

logger = logging.getLogger(__name__)

EXTENSION_KEY = "agora"


def get_services() -> dict[str, Any]:
    """Services registered on the current app. Called by blueprints."""
    return current_app.extensions[EXTENSION_KEY]


def open_store(config: WebConfig) -> ForumStore:
    """Open the store the configuration points at (PostgreSQL when a URL is set)."""
    if config.database_url:
        from agora.storage.postgres_store import PostgresStore

        logger.info("Using PostgreSQL storage")
        return PostgresStore(config.database_url)

    from agora.storage.sqlite_store import SQLiteStore

    return SQLiteStore(db_path=Path(config.db_path))


def build_services(store: ForumStore) -> dict[str, Any]:
    from agora.web.services.comment_service import CommentService
    from agora.web.services.listing_service import ListingService
    from agora.web.services.post_service import PostService
    from agora.web.services.user_service import UserService

    listing = ListingService(store)
    return {
        "store": store,
        "listing_service": listing,
        "post_service": PostService(store, listing),
        "comment_service": CommentService(store, listing),
        "user_service": UserService(store),
    }


def create_app(
    config: Optional[WebConfig] = None,
    store: Optional[ForumStore] = None,
) -> Flask:
    """Create the Agora Flask application.

    Args:
        config: Web configuration. Defaults to ``WebConfig()``.
        store: Optional pre-built ForumStore. Opened from the config otherwise.
    """
    config = config or WebConfig()

    app = Flask(
        __name__,
        template_folder=str(Path(__file__).parent / "templates"),
    )
    app.secret_key = config.secret_key or secrets.token_hex(32)
    app.config["COMMENTS_PER_PAGE"] = config.comments_per_page
    app.config["DB_PATH"] = str(config.db_path)

    store = store or open_store(config)
    app.extensions[EXTENSION_KEY] = build_services(store)
    register_filters(app)

    # --- Register blueprints ---
    from agora.web.blueprints.comments import bp as comments_bp
    from agora.web.blueprints.posts import bp as posts_bp
    from agora.web.blueprints.profile import bp as profile_bp

    app.register_blueprint(posts_bp)
    app.register_blueprint(comments_bp)
    app.register_blueprint(profile_bp)

    # --- Register API blueprints ---
    from agora.web.api.v1.comments import bp as api_comments_bp
    from agora.web.api.v1.health import bp as health_bp
    from agora.web.api.v1.posts import bp as api_posts_bp
    from agora.web.api.v1.users import bp as api_users_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(api_posts_bp)
    app.register_blueprint(api_comments_bp)
    app.register_blueprint(api_users_bp)

    @app.context_processor
    def inject_session_user():
        return {"session_user_id": get_session_user_id()}

    @app.errorhandler(StorageError)
    def handle_storage_error(error):
        logger.error("Storage failure on %s: %s", request.path, error)
        if request.path.startswith("/api/"):
            return jsonify({"error": "Storage unavailable"}), 500
        if request.endpoint == "posts.index":
            return render_template("error.html", message="Storage unavailable"), 500
        flash("Something went wrong, please try again", "error")
        return redirect(url_for("posts.index"))

    logger.info("Agora web app created")
    return app
