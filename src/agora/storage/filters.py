"""Typed scope filters and orderings understood by every ForumStore.

A ScopeFilter always means "active rows only": a store offers no
way to list soft-deleted posts or comments.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Entity(str, Enum):
    """Listable entity kinds and their backing tables."""

    POST = "posts"
    COMMENT = "comments"


@dataclass(frozen=True)
class Ordering:
    """Sort key for a listing. Ties are broken by ``id`` in the same direction."""

    field: str = "created_at"
    descending: bool = True

    ALLOWED_FIELDS = ("created_at", "id")

    def __post_init__(self) -> None:
        if self.field not in self.ALLOWED_FIELDS:
            raise ValueError(f"field must be one of {self.ALLOWED_FIELDS}")

    @property
    def direction(self) -> str:
        return "DESC" if self.descending else "ASC"

    def sql(self, prefix: str = "") -> str:
        """Render as an ORDER BY body, e.g. ``c.created_at DESC, c.id DESC``."""
        keys = [self.field] if self.field == "id" else [self.field, "id"]
        return ", ".join(f"{prefix}{key} {self.direction}" for key in keys)


NEWEST_FIRST = Ordering("created_at", descending=True)
OLDEST_FIRST = Ordering("created_at", descending=False)


@dataclass(frozen=True)
class ScopeFilter:
    """Which active rows of one entity kind a listing covers."""

    entity: Entity
    post_id: Optional[int] = None
    user_id: Optional[int] = None

    @classmethod
    def all_posts(cls) -> "ScopeFilter":
        return cls(Entity.POST)

    @classmethod
    def posts_by_user(cls, user_id: int) -> "ScopeFilter":
        return cls(Entity.POST, user_id=user_id)

    @classmethod
    def comments_on_post(cls, post_id: int) -> "ScopeFilter":
        return cls(Entity.COMMENT, post_id=post_id)

    @classmethod
    def comments_by_user(cls, user_id: int) -> "ScopeFilter":
        return cls(Entity.COMMENT, user_id=user_id)

    def __post_init__(self) -> None:
        if self.entity is Entity.POST and self.post_id is not None:
            raise ValueError("posts cannot be scoped by post_id")

    @property
    def default_ordering(self) -> Ordering:
        """Order a scope is listed in when the caller does not pick one.

        A post's comment thread reads top-down (oldest first); every
        other listing shows the newest rows first.
        """
        if self.entity is Entity.COMMENT and self.post_id is not None:
            return OLDEST_FIRST
        return NEWEST_FIRST

    def conditions(self, prefix: str = "") -> list[tuple[str, Optional[int]]]:
        """Column/value pairs this scope pins, ``None`` meaning IS NULL."""
        pairs: list[tuple[str, Optional[int]]] = [(f"{prefix}deleted_at", None)]
        if self.post_id is not None:
            pairs.append((f"{prefix}post_id", self.post_id))
        if self.user_id is not None:
            pairs.append((f"{prefix}user_id", self.user_id))
        return pairs

    def where(self, placeholder: str = "?", prefix: str = "") -> tuple[str, list[int]]:
        """Render as a WHERE body plus its bound parameters."""
        clauses = []
        params: list[int] = []
        for column, value in self.conditions(prefix):
            if value is None:
                clauses.append(f"{column} IS NULL")
            else:
                clauses.append(f"{column} = {placeholder}")
                params.append(value)
        return " AND ".join(clauses), params
