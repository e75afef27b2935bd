"""Comment service: CRUD plus thread pagination for the web UI.

After a comment is created, edited or deleted the UI sends the user to
the page of the thread where that comment sits, so this service also
exposes the page lookup for a single comment.
"""

import logging
from typing import Any

from agora.pagination import PageRequest, PageResult
from agora.storage.base import ForumStore
from agora.storage.filters import ScopeFilter
from agora.web.services.listing_service import EntityNotLocatable, ListingService

logger = logging.getLogger(__name__)


class CommentService:
    """Manages comments stored in the forum store."""

    def __init__(self, store: ForumStore, listing: ListingService) -> None:
        self._store = store
        self._listing = listing

    def create_comment(self, user_id: int, post_id: int, content: str) -> dict[str, Any]:
        """Add a comment to an active post.

        Raises:
            LookupError: If the post does not exist or was deleted.
        """
        if self._store.get_post(post_id) is None:
            raise LookupError("Post not found")
        comment = self._store.create_comment(user_id, post_id, content)
        logger.info("Created comment %s on post %s", comment["id"], post_id)
        return comment

    def get_comment(self, comment_id: int) -> dict[str, Any] | None:
        return self._store.get_comment(comment_id)

    def get_owned_comment(self, comment_id: int, user_id: int) -> dict[str, Any]:
        """Get a comment the given user is allowed to modify.

        Raises:
            LookupError: If the comment does not exist or was deleted.
            PermissionError: If the user is not the author.
        """
        comment = self._store.get_comment(comment_id)
        if comment is None:
            raise LookupError("Comment not found")
        if comment["user_id"] != user_id:
            raise PermissionError("User does not own comment")
        return comment

    def update_comment(self, comment_id: int, user_id: int, content: str) -> dict[str, Any]:
        self.get_owned_comment(comment_id, user_id)
        comment = self._store.update_comment(comment_id, content)
        if comment is None:
            raise LookupError("Comment not found")
        logger.info("Updated comment %s", comment_id)
        return comment

    def delete_comment(self, comment_id: int, user_id: int) -> dict[str, Any]:
        """Soft delete a comment and return the row as it was before deletion."""
        comment = self.get_owned_comment(comment_id, user_id)
        if not self._store.soft_delete_comment(comment_id):
            raise LookupError("Comment not found")
        logger.info("Deleted comment %s", comment_id)
        return comment

    def list_comments(self, post_id: int, page_request: PageRequest) -> PageResult:
        """Active comments on a post in thread order (oldest first)."""
        return self._listing.list(ScopeFilter.comments_on_post(post_id), page_request)

    def list_comments_by_user(self, user_id: int, page_request: PageRequest) -> PageResult:
        """A user's active comments, newest first."""
        return self._listing.list(ScopeFilter.comments_by_user(user_id), page_request)

    def page_of(self, comment: dict[str, Any], page_limit: int) -> int:
        """Thread page holding ``comment``, or 0 if it is no longer listed."""
        return self._listing.locate_page(
            ScopeFilter.comments_on_post(comment["post_id"]),
            comment["id"],
            page_limit,
        )

    def require_page_of(self, comment_id: int, page_limit: int) -> int:
        """Thread page of an active comment.

        Raises:
            EntityNotLocatable: If the comment is missing or deleted.
        """
        comment = self._store.get_comment(comment_id)
        if comment is None:
            raise EntityNotLocatable(f"comments {comment_id} is not listed")
        return self._listing.require_page(
            ScopeFilter.comments_on_post(comment["post_id"]), comment_id, page_limit
        )
