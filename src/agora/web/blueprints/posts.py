"""Posts blueprint: index, post pages and the post editor."""

from flask import Blueprint, flash, g, redirect, render_template, request, url_for

from agora.pagination import PageRequest, pagination_context
from agora.web.auth import get_session_user_id, login_required, redirect_back
from agora.web.models.forms import PostForm, parse_form

bp = Blueprint("posts", __name__)


def _post_service():
    from agora.web.app import get_services

    return get_services()["post_service"]


@bp.route("/")
def index():
    """Paginated list of all posts, newest first."""
    page_request = PageRequest.from_args(request.args)
    result = _post_service().list_posts(page_request)

    return render_template(
        "posts/index.html",
        title="Posts",
        posts=result.items,
        total=result.total,
        pagination=pagination_context(result),
    )


@bp.route("/posts/create")
@login_required
def create():
    return render_template(
        "posts/form.html",
        title="Create new post",
        form_header="Create new post",
        form_action=url_for("posts.create_submit"),
        form_submit_button_text="Create",
        post=None,
    )


@bp.route("/posts/create", methods=["POST"])
@login_required
def create_submit():
    form, error = parse_form(PostForm, request.form)
    if form is None:
        flash(f"Invalid post: {error}", "error")
        return redirect(url_for("posts.create"))

    post = _post_service().create_post(g.user_id, form.title, form.body)
    flash("Created post!", "success")
    return redirect(url_for("posts.view", post_id=post["id"]))


@bp.route("/posts/<int:post_id>")
def view(post_id):
    """Post page with its comment thread, oldest comment first."""
    from agora.web.app import get_services

    services = get_services()
    post = services["post_service"].get_post(post_id)
    if post is None:
        flash("Post not found", "error")
        return redirect(url_for("posts.index"))

    page_request = PageRequest.from_args(request.args)
    comments = services["comment_service"].list_comments(post_id, page_request)

    user_id = get_session_user_id()
    return render_template(
        "posts/view.html",
        title=post["title"],
        post=post,
        allow_update=user_id is not None and post["user_id"] == user_id,
        comments=comments.items,
        total_comments=comments.total,
        pagination=pagination_context(comments),
    )


@bp.route("/posts/update/<int:post_id>")
@login_required
def update(post_id):
    try:
        post = _post_service().get_owned_post(post_id, g.user_id)
    except (LookupError, PermissionError) as e:
        flash(str(e), "error")
        return redirect_back()

    return render_template(
        "posts/form.html",
        title=f"Update post : {post['title']}",
        form_header=f"Update post : {post['title']}",
        form_action=url_for("posts.update_submit", post_id=post_id),
        form_submit_button_text="Update",
        post=post,
    )


@bp.route("/posts/update/<int:post_id>", methods=["POST"])
@login_required
def update_submit(post_id):
    form, error = parse_form(PostForm, request.form)
    if form is None:
        flash(f"Failed to update post: {error}", "error")
        return redirect_back()

    try:
        post = _post_service().update_post(post_id, g.user_id, form.title, form.body)
    except (LookupError, PermissionError) as e:
        flash(f"Failed to update post: {e}", "error")
        return redirect_back()

    flash("Post updated", "success")
    return redirect(url_for("posts.view", post_id=post["id"]))


@bp.route("/posts/delete/<int:post_id>", methods=["POST"])
@login_required
def delete(post_id):
    try:
        _post_service().delete_post(post_id, g.user_id)
    except (LookupError, PermissionError) as e:
        flash(f"Failed to delete post: {e}", "error")
        return redirect_back()

    flash("Post deleted", "success")
    return redirect(url_for("posts.index"))
