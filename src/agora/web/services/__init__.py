"""Application services used by the web views and the CLI."""

from .comment_service import CommentService
from .listing_service import EntityNotLocatable, ListingService
from .post_service import PostService
from .user_service import UserService

__all__ = [
    "CommentService",
    "EntityNotLocatable",
    "ListingService",
    "PostService",
    "UserService",
]
