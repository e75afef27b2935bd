"""Profile blueprint: a user's posts or comments."""

from flask import Blueprint, flash, redirect, render_template, request, url_for

from agora.pagination import PageRequest, pagination_context

bp = Blueprint("profile", __name__, url_prefix="/profile")

FETCH_MODES = ("posts", "comments")


@bp.route("/<int:user_id>/")
@bp.route("/<int:user_id>/<fetch_mode>")
def view(user_id, fetch_mode="posts"):
    """Profile page listing the user's posts (default) or comments, newest first."""
    from agora.web.app import get_services

    services = get_services()

    if fetch_mode not in FETCH_MODES:
        flash(f"Unknown profile view: {fetch_mode}", "error")
        return redirect(url_for("posts.index"))

    user = services["user_service"].get_user_public(user_id)
    if user is None:
        flash("User not found", "error")
        return redirect(url_for("posts.index"))

    page_request = PageRequest.from_args(request.args)
    if fetch_mode == "posts":
        result = services["post_service"].list_posts_by_user(user_id, page_request)
    else:
        result = services["comment_service"].list_comments_by_user(user_id, page_request)

    return render_template(
        "profile/view.html",
        title=user["name"],
        profile_user=user,
        fetch_mode=fetch_mode,
        items=result.items,
        total=result.total,
        pagination=pagination_context(result),
    )
