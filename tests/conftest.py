"""Shared fixtures for Agora tests."""

import pytest

from agora.storage.sqlite_store import SQLiteStore


@pytest.fixture
def store(tmp_path):
    s = SQLiteStore(db_path=tmp_path / "test.db")
    yield s
    s.close()


@pytest.fixture
def author(store):
    return store.create_user("Alice", "alice@example.com")


@pytest.fixture
def other_user(store):
    return store.create_user("Bob", "bob@example.com")


@pytest.fixture
def thread(store, author):
    """A post with 25 comments, returned as (post, [comments in creation order])."""
    post = store.create_post(author["id"], "Thread", "Discuss")
    comments = [
        store.create_comment(author["id"], post["id"], f"comment {i}")
        for i in range(1, 26)
    ]
    return post, comments
