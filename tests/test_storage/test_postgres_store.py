"""Tests for the PostgreSQL forum store (mocked)."""

import sys
import threading
from unittest.mock import MagicMock, patch

import pytest

from agora.storage.base import StorageError
from agora.storage.filters import NEWEST_FIRST, OLDEST_FIRST, ScopeFilter


class FakePgError(Exception):
    pass


@pytest.fixture
def mock_psycopg2():
    with patch.dict("sys.modules", {"psycopg2": MagicMock()}):
        mock_pg = sys.modules["psycopg2"]
        mock_pg.Error = FakePgError
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_conn.cursor.return_value = mock_cursor
        mock_pg.connect.return_value = mock_conn

        # Schema version check returns 0 (new DB)
        mock_cursor.fetchone.return_value = (0,)

        yield mock_pg, mock_conn, mock_cursor


def _store(mock_conn):
    if "agora.storage.postgres_store" in sys.modules:
        del sys.modules["agora.storage.postgres_store"]

    from agora.storage.postgres_store import PostgresStore

    store = PostgresStore.__new__(PostgresStore)
    store._conn = mock_conn
    store._lock = threading.Lock()
    return store


def _last_sql(mock_cursor):
    args = mock_cursor.execute.call_args[0]
    return args[0], list(args[1])


class TestPostgresStoreImport:
    def test_import_error_without_psycopg2(self):
        with patch.dict("sys.modules", {"psycopg2": None}):
            if "agora.storage.postgres_store" in sys.modules:
                del sys.modules["agora.storage.postgres_store"]
            with pytest.raises(ImportError, match="psycopg2"):
                from agora.storage.postgres_store import PostgresStore

                PostgresStore("postgresql://localhost/test")


class TestPostgresStoreInit:
    def test_fresh_database_gets_schema(self, mock_psycopg2):
        mock_pg, mock_conn, mock_cursor = mock_psycopg2
        if "agora.storage.postgres_store" in sys.modules:
            del sys.modules["agora.storage.postgres_store"]
        from agora.storage.postgres_store import PostgresStore

        PostgresStore("postgresql://localhost/test")

        mock_pg.connect.assert_called_once_with("postgresql://localhost/test")
        executed = [c[0][0] for c in mock_cursor.execute.call_args_list]
        assert any("CREATE TABLE IF NOT EXISTS comments" in sql for sql in executed)
        assert any("INSERT INTO schema_version" in sql for sql in executed)

    def test_connect_failure_raises_storage_error(self, mock_psycopg2):
        mock_pg, _, _ = mock_psycopg2
        mock_pg.connect.side_effect = FakePgError("connection refused")
        if "agora.storage.postgres_store" in sys.modules:
            del sys.modules["agora.storage.postgres_store"]
        from agora.storage.postgres_store import PostgresStore

        with pytest.raises(StorageError, match="connection refused"):
            PostgresStore("postgresql://localhost/test")

    def test_schema_failure_raises_storage_error(self, mock_psycopg2):
        _, mock_conn, mock_cursor = mock_psycopg2
        mock_cursor.execute.side_effect = FakePgError("permission denied for schema public")
        if "agora.storage.postgres_store" in sys.modules:
            del sys.modules["agora.storage.postgres_store"]
        from agora.storage.postgres_store import PostgresStore

        with pytest.raises(StorageError, match="Cannot prepare PostgreSQL schema"):
            PostgresStore("postgresql://localhost/test")
        mock_conn.rollback.assert_called()


class TestPostgresStoreListings:
    def test_count(self, mock_psycopg2):
        _, mock_conn, mock_cursor = mock_psycopg2
        store = _store(mock_conn)
        mock_cursor.fetchone.return_value = (25,)

        assert store.count(ScopeFilter.comments_on_post(7)) == 25
        sql, params = _last_sql(mock_cursor)
        assert "FROM comments c" in sql
        assert "c.deleted_at IS NULL AND c.post_id = %s" in sql
        assert params == [7]

    def test_fetch_page(self, mock_psycopg2):
        _, mock_conn, mock_cursor = mock_psycopg2
        store = _store(mock_conn)
        mock_cursor.description = [("id",), ("title",), ("user_name",)]
        mock_cursor.fetchall.return_value = [(2, "Second", "alice"), (1, "First", "alice")]

        rows = store.fetch_page(ScopeFilter.posts_by_user(3), NEWEST_FIRST, offset=20, limit=10)

        assert rows == [
            {"id": 2, "title": "Second", "user_name": "alice"},
            {"id": 1, "title": "First", "user_name": "alice"},
        ]
        sql, params = _last_sql(mock_cursor)
        assert "ORDER BY p.created_at DESC, p.id DESC LIMIT %s OFFSET %s" in sql
        assert params == [3, 10, 20]

    def test_fetch_ordered_ids(self, mock_psycopg2):
        _, mock_conn, mock_cursor = mock_psycopg2
        store = _store(mock_conn)
        mock_cursor.fetchall.return_value = [(3,), (5,), (8,)]

        ids = store.fetch_ordered_ids(ScopeFilter.comments_on_post(7), OLDEST_FIRST)

        assert ids == [3, 5, 8]
        sql, _ = _last_sql(mock_cursor)
        assert "SELECT c.id FROM comments c" in sql
        assert "ORDER BY c.created_at ASC, c.id ASC" in sql

    def test_query_failure_raises_storage_error(self, mock_psycopg2):
        _, mock_conn, mock_cursor = mock_psycopg2
        store = _store(mock_conn)
        mock_cursor.execute.side_effect = FakePgError("server closed the connection")

        with pytest.raises(StorageError):
            store.count(ScopeFilter.all_posts())
        mock_conn.rollback.assert_called_once()


class TestPostgresStoreWrites:
    def test_create_post(self, mock_psycopg2):
        _, mock_conn, mock_cursor = mock_psycopg2
        store = _store(mock_conn)
        mock_cursor.fetchone.return_value = (4,)
        mock_cursor.description = [("id",), ("title",)]
        mock_cursor.fetchall.return_value = [(4, "Hello")]

        post = store.create_post(1, "Hello", "Body")

        assert post == {"id": 4, "title": "Hello"}
        insert_sql, insert_params = mock_cursor.execute.call_args_list[0][0]
        assert "INSERT INTO posts (title, body, user_id)" in insert_sql
        assert "published" not in insert_sql
        assert list(insert_params) == ["Hello", "Body", 1]

    def test_soft_delete_comment(self, mock_psycopg2):
        _, mock_conn, mock_cursor = mock_psycopg2
        store = _store(mock_conn)
        mock_cursor.rowcount = 1

        assert store.soft_delete_comment(13) is True
        sql, params = _last_sql(mock_cursor)
        assert "SET deleted_at = NOW()" in sql
        assert "deleted_at IS NULL" in sql
        assert params == [13]
        mock_conn.commit.assert_called()

    def test_soft_delete_missing_post(self, mock_psycopg2):
        _, mock_conn, mock_cursor = mock_psycopg2
        store = _store(mock_conn)
        mock_cursor.rowcount = 0

        assert store.soft_delete_post(99) is False


class TestPostgresStoreLocking:
    def test_statements_run_under_lock(self, mock_psycopg2):
        _, mock_conn, mock_cursor = mock_psycopg2
        store = _store(mock_conn)
        store._lock = MagicMock()
        mock_cursor.fetchone.return_value = (3,)
        mock_cursor.rowcount = 1

        store.count(ScopeFilter.all_posts())
        store.soft_delete_post(1)

        assert store._lock.__enter__.call_count == 2
        assert store._lock.__exit__.call_count == 2

    def test_commit_happens_while_locked(self, mock_psycopg2):
        _, mock_conn, mock_cursor = mock_psycopg2
        store = _store(mock_conn)
        mock_cursor.rowcount = 1
        held = []
        mock_conn.commit.side_effect = lambda: held.append(store._lock.locked())

        store.soft_delete_comment(5)

        assert held == [True]
        assert not store._lock.locked()

    def test_rollback_happens_while_locked(self, mock_psycopg2):
        _, mock_conn, mock_cursor = mock_psycopg2
        store = _store(mock_conn)
        mock_cursor.execute.side_effect = FakePgError("deadlock detected")
        held = []
        mock_conn.rollback.side_effect = lambda: held.append(store._lock.locked())

        with pytest.raises(StorageError, match="deadlock detected"):
            store.count(ScopeFilter.all_posts())

        assert held == [True]
        assert not store._lock.locked()


class TestPostgresStoreClose:
    def test_close(self, mock_psycopg2):
        _, mock_conn, _ = mock_psycopg2
        store = _store(mock_conn)
        store.close()
        mock_conn.close.assert_called_once()
        assert store._conn is None
