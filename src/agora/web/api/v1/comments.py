"""Comment REST API endpoints."""

from flask import Blueprint, jsonify, request

from agora.pagination import PageRequest
from agora.web.services.listing_service import EntityNotLocatable

bp = Blueprint("api_comments", __name__, url_prefix="/api/v1/comments")


def _get_comment_service():
    from agora.web.app import get_services

    return get_services()["comment_service"]


@bp.route("/<int:comment_id>", methods=["GET"])
def get_comment(comment_id):
    comment = _get_comment_service().get_comment(comment_id)
    if comment is None:
        return jsonify({"error": "Comment not found"}), 404
    return jsonify(comment)


@bp.route("/<int:comment_id>/page", methods=["GET"])
def locate_comment(comment_id):
    """Thread page holding an active comment.

    Query params:
        per_page: Page size the page number is computed for (default 10, max 100).
    """
    per_page = PageRequest.normalize(limit=request.args.get("per_page")).limit
    try:
        page = _get_comment_service().require_page_of(comment_id, per_page)
    except EntityNotLocatable as e:
        return jsonify({"error": str(e)}), 404
    return jsonify({"comment_id": comment_id, "page": page, "per_page": per_page})
