"""Comments blueprint: create, edit and delete comments.

Every successful change redirects to the post page that shows the
comment, anchored on it.
"""

import logging

from flask import Blueprint, current_app, flash, g, redirect, render_template, request, url_for

from agora.storage.base import StorageError
from agora.web.auth import login_required, redirect_back
from agora.web.models.forms import CommentCreateForm, CommentUpdateForm, parse_form

logger = logging.getLogger(__name__)

bp = Blueprint("comments", __name__, url_prefix="/comments")


def _comment_service():
    from agora.web.app import get_services

    return get_services()["comment_service"]


def _redirect_to_comment(comment):
    """Redirect to the thread page holding ``comment``.

    A page of 0 means the comment is no longer listed (it was just
    deleted, or deleted concurrently); fall back to the first page.
    """
    per_page = current_app.config["COMMENTS_PER_PAGE"]
    page = _comment_service().page_of(comment, per_page)
    if page == 0:
        page = 1
    return redirect(
        f"/posts/{comment['post_id']}?page={page}&per_page={per_page}#{comment['id']}"
    )


@bp.route("/create", methods=["POST"])
@login_required
def create_submit():
    form, error = parse_form(CommentCreateForm, request.form)
    if form is None:
        flash(f"Invalid comment: {error}", "error")
        return redirect_back()

    try:
        comment = _comment_service().create_comment(g.user_id, form.post_id, form.body)
    except (LookupError, StorageError) as e:
        logger.warning("Failed to create comment on post %s: %s", form.post_id, e)
        flash("Error creating comment!", "error")
        return redirect(url_for("posts.view", post_id=form.post_id))

    flash("Created comment!", "success")
    return _redirect_to_comment(comment)


@bp.route("/update/<int:comment_id>")
@login_required
def update(comment_id):
    try:
        comment = _comment_service().get_owned_comment(comment_id, g.user_id)
    except (LookupError, PermissionError) as e:
        flash(f"Error : {e}", "error")
        return redirect_back()

    return render_template(
        "comments/form.html",
        title=f"Update comment : #{comment_id}",
        form_header=f"Update comment : #{comment_id}",
        form_action=url_for("comments.update_submit", comment_id=comment_id),
        form_submit_button_text="Update",
        comment=comment,
    )


@bp.route("/update/<int:comment_id>", methods=["POST"])
@login_required
def update_submit(comment_id):
    form, error = parse_form(CommentUpdateForm, request.form)
    if form is None:
        flash(f"Invalid comment: {error}", "error")
        return redirect_back()

    try:
        comment = _comment_service().update_comment(comment_id, g.user_id, form.body)
    except (LookupError, PermissionError) as e:
        flash(f"Error : {e}", "error")
        return redirect_back()

    flash("Comment updated", "success")
    return _redirect_to_comment(comment)


@bp.route("/delete/<int:comment_id>", methods=["POST"])
@login_required
def delete(comment_id):
    try:
        comment = _comment_service().delete_comment(comment_id, g.user_id)
    except (LookupError, PermissionError) as e:
        flash(f"Error : {e}", "error")
        return redirect_back()

    flash("Comment deleted", "success")
    return _redirect_to_comment(comment)
