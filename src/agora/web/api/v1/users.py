"""User REST API endpoints."""

from flask import Blueprint, jsonify, request

from agora.pagination import PageRequest

bp = Blueprint("api_users", __name__, url_prefix="/api/v1/users")


def _get_services():
    from agora.web.app import get_services

    return get_services()


def _require_user(user_id):
    return _get_services()["user_service"].get_user_public(user_id)


@bp.route("/<int:user_id>", methods=["GET"])
def get_user(user_id):
    user = _require_user(user_id)
    if user is None:
        return jsonify({"error": "User not found"}), 404
    return jsonify(user)


@bp.route("/<int:user_id>/posts", methods=["GET"])
def list_user_posts(user_id):
    """A user's active posts, newest first."""
    if _require_user(user_id) is None:
        return jsonify({"error": "User not found"}), 404
    page_request = PageRequest.from_args(request.args)
    result = _get_services()["post_service"].list_posts_by_user(user_id, page_request)
    return jsonify(result.to_dict())


@bp.route("/<int:user_id>/comments", methods=["GET"])
def list_user_comments(user_id):
    """A user's active comments, newest first."""
    if _require_user(user_id) is None:
        return jsonify({"error": "User not found"}), 404
    page_request = PageRequest.from_args(request.args)
    result = _get_services()["comment_service"].list_comments_by_user(user_id, page_request)
    return jsonify(result.to_dict())
