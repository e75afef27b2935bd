"""Storage backends for Agora users, posts and comments."""

from .base import ForumStore, StorageError
from .filters import NEWEST_FIRST, OLDEST_FIRST, Entity, Ordering, ScopeFilter

__all__ = [
    "ForumStore",
    "StorageError",
    "Entity",
    "Ordering",
    "ScopeFilter",
    "NEWEST_FIRST",
    "OLDEST_FIRST",
]
