"""Health and version API endpoints."""

from flask import Blueprint, jsonify

from agora import __version__

bp = Blueprint("api_health", __name__)


@bp.route("/api/v1/health")
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"})


@bp.route("/api/v1/version")
def version():
    """Version info endpoint."""
    return jsonify(
        {
            "version": __version__,
            "api_version": "v1",
            "name": "Agora",
        }
    )
