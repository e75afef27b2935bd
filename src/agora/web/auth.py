"""Session user helpers for Agora views.

Signing users in is left to the surrounding auth layer; it only has to
put the user's id into the Flask session under ``SESSION_USER_KEY``.
"""

import logging
from functools import wraps
from typing import Optional

from flask import flash, g, redirect, request, session, url_for

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"


def get_session_user_id() -> Optional[int]:
    """Id of the signed-in user, or None."""
    value = session.get(SESSION_USER_KEY)
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        logger.warning("Ignoring malformed session user id %r", value)
        return None


def login_required(f):
    """Decorator that redirects anonymous users to the index with a flash message.

    The signed-in user id is exposed to the view as ``g.user_id``.
    """

    @wraps(f)
    def decorated(*args, **kwargs):
        user_id = get_session_user_id()
        if user_id is None:
            flash("You must be signed in to do that", "error")
            return redirect(url_for("posts.index"))
        g.user_id = user_id
        return f(*args, **kwargs)

    return decorated


def redirect_back(fallback: str = "/"):
    """Redirect to the referring page, or ``fallback`` when there is none."""
    return redirect(request.referrer or fallback)
