"""Post REST API endpoints."""

from flask import Blueprint, jsonify, request

from agora.pagination import PageRequest

bp = Blueprint("api_posts", __name__, url_prefix="/api/v1/posts")


def _get_services():
    from agora.web.app import get_services

    return get_services()


@bp.route("/", methods=["GET"])
def list_posts():
    """List active posts, newest first."""
    page_request = PageRequest.from_args(request.args)
    result = _get_services()["post_service"].list_posts(page_request)
    return jsonify(result.to_dict())


@bp.route("/<int:post_id>", methods=["GET"])
def get_post(post_id):
    """Get a single active post."""
    post = _get_services()["post_service"].get_post(post_id)
    if post is None:
        return jsonify({"error": "Post not found"}), 404
    return jsonify(post)


@bp.route("/<int:post_id>/comments", methods=["GET"])
def list_comments(post_id):
    """List a post's active comments in thread order."""
    services = _get_services()
    if services["post_service"].get_post(post_id) is None:
        return jsonify({"error": "Post not found"}), 404

    page_request = PageRequest.from_args(request.args)
    result = services["comment_service"].list_comments(post_id, page_request)
    return jsonify(result.to_dict())
