"""Abstract base class for forum storage backends."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .filters import Ordering, ScopeFilter


class StorageError(Exception):
    """Raised when the underlying data store cannot be reached or queried."""


class ForumStore(ABC):
    """Abstract interface for storing and querying users, posts and comments.

    Every read honours soft deletes: rows with a non-null ``deleted_at``
    are invisible to ``get_*``, ``count``, ``fetch_page`` and
    ``fetch_ordered_ids``. Driver errors surface as :class:`StorageError`.
    """

    # --- users ---

    @abstractmethod
    def create_user(self, name: str, email: str, role: str = "user") -> Dict[str, Any]:
        """Insert a user and return the stored row."""

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        """Return a user row, or None if not found."""

    # --- posts ---

    @abstractmethod
    def create_post(self, user_id: int, title: str, body: str) -> Dict[str, Any]:
        """Insert a post and return the stored row."""

    @abstractmethod
    def get_post(self, post_id: int) -> Optional[Dict[str, Any]]:
        """Return an active post joined with its author, or None."""

    @abstractmethod
    def update_post(self, post_id: int, title: str, body: str) -> Optional[Dict[str, Any]]:
        """Replace title and body of an active post.

        Returns:
            The updated row, or None if the post does not exist.
        """

    @abstractmethod
    def soft_delete_post(self, post_id: int) -> bool:
        """Set ``deleted_at`` on an active post.

        Returns:
            True if a row was marked deleted, False if not found.
        """

    # --- comments ---

    @abstractmethod
    def create_comment(self, user_id: int, post_id: int, content: str) -> Dict[str, Any]:
        """Insert a comment and return the stored row."""

    @abstractmethod
    def get_comment(self, comment_id: int) -> Optional[Dict[str, Any]]:
        """Return an active comment joined with its author, or None."""

    @abstractmethod
    def update_comment(self, comment_id: int, content: str) -> Optional[Dict[str, Any]]:
        """Replace the content of an active comment."""

    @abstractmethod
    def soft_delete_comment(self, comment_id: int) -> bool:
        """Set ``deleted_at`` on an active comment."""

    # --- listings ---

    @abstractmethod
    def count(self, scope: ScopeFilter) -> int:
        """Count active rows matching ``scope``."""

    @abstractmethod
    def fetch_page(
        self,
        scope: ScopeFilter,
        ordering: Ordering,
        offset: int,
        limit: int,
    ) -> List[Dict[str, Any]]:
        """Fetch one ordered window of active rows matching ``scope``.

        Args:
            scope: Which rows to list.
            ordering: Sort key; ties broken by id.
            offset: Number of rows to skip.
            limit: Maximum number of rows to return.

        Returns:
            Row dicts joined with the author's ``user_name``.
        """

    @abstractmethod
    def fetch_ordered_ids(self, scope: ScopeFilter, ordering: Ordering) -> List[int]:
        """Fetch the ids of every active row matching ``scope``, in order."""

    def close(self) -> None:
        """Release any held resources. Override if needed."""
