"""Post service wrapping the storage layer for web use."""

import logging
from typing import Any

from agora.pagination import PageRequest, PageResult
from agora.storage.base import ForumStore
from agora.storage.filters import ScopeFilter
from agora.web.services.listing_service import ListingService

logger = logging.getLogger(__name__)


class PostService:
    """Web-facing service for creating, editing and listing posts."""

    def __init__(self, store: ForumStore, listing: ListingService) -> None:
        self._store = store
        self._listing = listing

    def create_post(self, user_id: int, title: str, body: str) -> dict[str, Any]:
        post = self._store.create_post(user_id, title, body)
        logger.info("Created post %s by user %s", post["id"], user_id)
        return post

    def get_post(self, post_id: int) -> dict[str, Any] | None:
        """Get an active post with its author name."""
        return self._store.get_post(post_id)

    def get_owned_post(self, post_id: int, user_id: int) -> dict[str, Any]:
        """Get a post the given user is allowed to modify.

        Raises:
            LookupError: If the post does not exist or was deleted.
            PermissionError: If the user is not the author.
        """
        post = self._store.get_post(post_id)
        if post is None:
            raise LookupError("Post not found")
        if post["user_id"] != user_id:
            raise PermissionError("User does not own post")
        return post

    def update_post(self, post_id: int, user_id: int, title: str, body: str) -> dict[str, Any]:
        self.get_owned_post(post_id, user_id)
        post = self._store.update_post(post_id, title, body)
        if post is None:
            raise LookupError("Post not found")
        logger.info("Updated post %s", post_id)
        return post

    def delete_post(self, post_id: int, user_id: int) -> None:
        self.get_owned_post(post_id, user_id)
        if not self._store.soft_delete_post(post_id):
            raise LookupError("Post not found")
        logger.info("Deleted post %s", post_id)

    def list_posts(self, page_request: PageRequest) -> PageResult:
        """All active posts, newest first."""
        return self._listing.list(ScopeFilter.all_posts(), page_request)

    def list_posts_by_user(self, user_id: int, page_request: PageRequest) -> PageResult:
        """A user's active posts, newest first."""
        return self._listing.list(ScopeFilter.posts_by_user(user_id), page_request)
