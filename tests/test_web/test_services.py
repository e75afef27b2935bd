"""Tests for post, comment and user services."""

import pytest

from agora.pagination import PageRequest
from agora.web.app import build_services
from agora.web.services.listing_service import EntityNotLocatable
from agora.web.services.user_service import user_to_public


@pytest.fixture
def services(store):
    return build_services(store)


class TestPostService:
    def test_create_and_list_newest_first(self, services, author):
        svc = services["post_service"]
        first = svc.create_post(author["id"], "First", "a")
        second = svc.create_post(author["id"], "Second", "b")

        result = svc.list_posts(PageRequest())
        assert [p["id"] for p in result.items] == [second["id"], first["id"]]
        assert result.total == 2

    def test_owner_can_update(self, services, author):
        svc = services["post_service"]
        post = svc.create_post(author["id"], "Title", "Body")
        updated = svc.update_post(post["id"], author["id"], "New", "Text")
        assert updated["title"] == "New"

    def test_other_user_cannot_update(self, services, author, other_user):
        svc = services["post_service"]
        post = svc.create_post(author["id"], "Title", "Body")
        with pytest.raises(PermissionError, match="User does not own post"):
            svc.update_post(post["id"], other_user["id"], "New", "Text")

    def test_missing_post(self, services, author):
        with pytest.raises(LookupError):
            services["post_service"].get_owned_post(404, author["id"])

    def test_delete_hides_post_from_listings(self, services, author):
        svc = services["post_service"]
        post = svc.create_post(author["id"], "Title", "Body")
        svc.delete_post(post["id"], author["id"])

        assert svc.get_post(post["id"]) is None
        assert svc.list_posts_by_user(author["id"], PageRequest()).total == 0
        with pytest.raises(LookupError):
            svc.delete_post(post["id"], author["id"])


class TestCommentService:
    def test_comment_on_missing_post(self, services, author):
        with pytest.raises(LookupError, match="Post not found"):
            services["comment_service"].create_comment(author["id"], 404, "hi")

    def test_comment_on_deleted_post(self, services, store, author):
        post = store.create_post(author["id"], "Gone", "soon")
        store.soft_delete_post(post["id"])
        with pytest.raises(LookupError):
            services["comment_service"].create_comment(author["id"], post["id"], "hi")

    def test_page_of_new_comment(self, services, thread, author):
        post, _ = thread
        svc = services["comment_service"]
        comment = svc.create_comment(author["id"], post["id"], "the 26th")
        assert svc.page_of(comment, 10) == 3
        assert svc.page_of(comment, 5) == 6

    def test_page_of_deleted_comment_is_zero(self, services, thread, author):
        _, comments = thread
        svc = services["comment_service"]
        deleted = svc.delete_comment(comments[22]["id"], author["id"])
        assert deleted["id"] == comments[22]["id"]
        assert svc.page_of(deleted, 10) == 0

    def test_require_page_of(self, services, thread, author):
        _, comments = thread
        svc = services["comment_service"]
        assert svc.require_page_of(comments[22]["id"], 10) == 3
        svc.delete_comment(comments[22]["id"], author["id"])
        with pytest.raises(EntityNotLocatable):
            svc.require_page_of(comments[22]["id"], 10)

    def test_other_user_cannot_delete(self, services, thread, other_user):
        _, comments = thread
        with pytest.raises(PermissionError, match="User does not own comment"):
            services["comment_service"].delete_comment(comments[0]["id"], other_user["id"])

    def test_update_keeps_thread_position(self, services, thread, author):
        _, comments = thread
        svc = services["comment_service"]
        updated = svc.update_comment(comments[14]["id"], author["id"], "edited")
        assert updated["content"] == "edited"
        assert svc.page_of(updated, 10) == 2

    def test_list_comments_by_user(self, services, thread, author, other_user):
        post, _ = thread
        svc = services["comment_service"]
        svc.create_comment(other_user["id"], post["id"], "mine")
        result = svc.list_comments_by_user(other_user["id"], PageRequest())
        assert result.total == 1
        assert result.items[0]["post_title"] == "Thread"


class TestUserService:
    def test_public_view_hides_email(self, services):
        user = services["user_service"].create_user("Carol", "carol@example.com")
        public = services["user_service"].get_user_public(user["id"])
        assert "email" not in public
        assert public["name"] == "Carol"

    def test_avatar_fallback(self):
        public = user_to_public({"id": 1, "name": "Jo Bloggs", "created_at": "2025-01-01"})
        assert public["profile_picture_url"] == (
            "https://ui-avatars.com/api/?size=250&name=Jo%20Bloggs"
        )

    def test_avatar_kept_when_set(self):
        user = {"id": 1, "name": "Jo", "created_at": "", "profile_picture_url": "https://x/y.png"}
        assert user_to_public(user)["profile_picture_url"] == "https://x/y.png"

    def test_missing_user(self, services):
        assert services["user_service"].get_user_public(404) is None
