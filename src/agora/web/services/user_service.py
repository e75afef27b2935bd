"""User lookups for profile pages."""

import logging
from typing import Any
from urllib.parse import quote

from agora.storage.base import ForumStore

logger = logging.getLogger(__name__)

AVATAR_FALLBACK_URL = "https://ui-avatars.com/api/?size=250&name={name}"


def user_to_public(user: dict[str, Any]) -> dict[str, Any]:
    """Strip a user row down to what profile pages may show."""
    picture = user.get("profile_picture_url") or AVATAR_FALLBACK_URL.format(
        name=quote(user["name"])
    )
    return {
        "id": user["id"],
        "name": user["name"],
        "created_at": user["created_at"],
        "profile_picture_url": picture,
    }


class UserService:
    def __init__(self, store: ForumStore) -> None:
        self._store = store

    def create_user(self, name: str, email: str) -> dict[str, Any]:
        user = self._store.create_user(name, email)
        logger.info("Created user %s (%s)", user["id"], name)
        return user

    def get_user_public(self, user_id: int) -> dict[str, Any] | None:
        user = self._store.get_user(user_id)
        if user is None:
            return None
        return user_to_public(user)
