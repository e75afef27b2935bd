"""SQLite-based forum store."""

import logging
import sqlite3
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .base import ForumStore, StorageError
from .filters import Entity, Ordering, ScopeFilter
from .migrations import get_current_version_sqlite, run_migrations_sqlite, set_version_sqlite
from .schema import SCHEMA_VERSION, SQLITE_SCHEMA

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".agora" / "agora.db"

_POST_SELECT = """SELECT p.*, u.name AS user_name
    FROM posts p JOIN users u ON u.id = p.user_id"""

_COMMENT_SELECT = """SELECT c.*, u.name AS user_name, p.title AS post_title
    FROM comments c
    JOIN users u ON u.id = c.user_id
    LEFT JOIN posts p ON p.id = c.post_id"""

# Table alias used for each entity in the SELECTs above.
_ALIASES = {Entity.POST: "p", Entity.COMMENT: "c"}


def _now() -> str:
    return datetime.now().isoformat(sep=" ", timespec="microseconds")


def _row_to_dict(row: sqlite3.Row) -> Dict[str, Any]:
    return dict(row)


class SQLiteStore(ForumStore):
    """Forum store backed by a SQLite database.

    One connection is shared by all request threads; a lock serialises
    access to it.
    """

    def __init__(self, db_path: Optional[Path] = None) -> None:
        self.db_path = db_path or DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()
        self._ensure_schema()

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA foreign_keys=ON")
        return self._conn

    def _ensure_schema(self) -> None:
        try:
            conn = self._get_conn()
            current = get_current_version_sqlite(conn)
            if current == 0:
                conn.executescript(SQLITE_SCHEMA)
                set_version_sqlite(conn, SCHEMA_VERSION)
                logger.info(f"Initialized SQLite database at {self.db_path}")
            elif current < SCHEMA_VERSION:
                run_migrations_sqlite(conn, current)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open database {self.db_path}: {e}") from e

    @property
    def schema_version(self) -> int:
        return get_current_version_sqlite(self._get_conn())

    def _fetchall(self, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        with self._lock:
            try:
                return self._get_conn().execute(sql, params).fetchall()
            except sqlite3.Error as e:
                raise StorageError(str(e)) from e

    def _fetchone(self, sql: str, params: Sequence[Any] = ()) -> Optional[sqlite3.Row]:
        rows = self._fetchall(sql, params)
        return rows[0] if rows else None

    def _write(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        with self._lock:
            conn = self._get_conn()
            try:
                cursor = conn.execute(sql, params)
                conn.commit()
                return cursor
            except sqlite3.Error as e:
                conn.rollback()
                raise StorageError(str(e)) from e

    # --- users ---

    def create_user(self, name: str, email: str, role: str = "user") -> Dict[str, Any]:
        now = _now()
        cursor = self._write(
            """INSERT INTO users (name, email, role, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?)""",
            (name, email, role, now, now),
        )
        return self.get_user(cursor.lastrowid)

    def get_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        row = self._fetchone("SELECT * FROM users WHERE id = ?", (user_id,))
        return _row_to_dict(row) if row else None

    # --- posts ---

    def create_post(self, user_id: int, title: str, body: str) -> Dict[str, Any]:
        now = _now()
        cursor = self._write(
            """INSERT INTO posts (title, body, user_id, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?)""",
            (title, body, user_id, now, now),
        )
        return self.get_post(cursor.lastrowid)

    def get_post(self, post_id: int) -> Optional[Dict[str, Any]]:
        row = self._fetchone(
            f"{_POST_SELECT} WHERE p.id = ? AND p.deleted_at IS NULL", (post_id,)
        )
        return _row_to_dict(row) if row else None

    def update_post(self, post_id: int, title: str, body: str) -> Optional[Dict[str, Any]]:
        cursor = self._write(
            """UPDATE posts SET title = ?, body = ?, updated_at = ?
               WHERE id = ? AND deleted_at IS NULL""",
            (title, body, _now(), post_id),
        )
        if cursor.rowcount == 0:
            return None
        return self.get_post(post_id)

    def soft_delete_post(self, post_id: int) -> bool:
        cursor = self._write(
            "UPDATE posts SET deleted_at = ? WHERE id = ? AND deleted_at IS NULL",
            (_now(), post_id),
        )
        return cursor.rowcount > 0

    # --- comments ---

    def create_comment(self, user_id: int, post_id: int, content: str) -> Dict[str, Any]:
        now = _now()
        cursor = self._write(
            """INSERT INTO comments (content, post_id, user_id, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?)""",
            (content, post_id, user_id, now, now),
        )
        return self.get_comment(cursor.lastrowid)

    def get_comment(self, comment_id: int) -> Optional[Dict[str, Any]]:
        row = self._fetchone(
            f"{_COMMENT_SELECT} WHERE c.id = ? AND c.deleted_at IS NULL", (comment_id,)
        )
        return _row_to_dict(row) if row else None

    def update_comment(self, comment_id: int, content: str) -> Optional[Dict[str, Any]]:
        cursor = self._write(
            """UPDATE comments SET content = ?, updated_at = ?
               WHERE id = ? AND deleted_at IS NULL""",
            (content, _now(), comment_id),
        )
        if cursor.rowcount == 0:
            return None
        return self.get_comment(comment_id)

    def soft_delete_comment(self, comment_id: int) -> bool:
        cursor = self._write(
            "UPDATE comments SET deleted_at = ? WHERE id = ? AND deleted_at IS NULL",
            (_now(), comment_id),
        )
        return cursor.rowcount > 0

    # --- listings ---

    def count(self, scope: ScopeFilter) -> int:
        alias = _ALIASES[scope.entity]
        where, params = scope.where(prefix=f"{alias}.")
        row = self._fetchone(
            f"SELECT COUNT(*) AS cnt FROM {scope.entity.value} {alias} WHERE {where}",
            params,
        )
        return row["cnt"]

    def fetch_page(
        self,
        scope: ScopeFilter,
        ordering: Ordering,
        offset: int,
        limit: int,
    ) -> List[Dict[str, Any]]:
        alias = _ALIASES[scope.entity]
        select = _POST_SELECT if scope.entity is Entity.POST else _COMMENT_SELECT
        where, params = scope.where(prefix=f"{alias}.")
        sql = (
            f"{select} WHERE {where} ORDER BY {ordering.sql(prefix=f'{alias}.')}"
            " LIMIT ? OFFSET ?"
        )
        rows = self._fetchall(sql, [*params, limit, offset])
        return [_row_to_dict(row) for row in rows]

    def fetch_ordered_ids(self, scope: ScopeFilter, ordering: Ordering) -> List[int]:
        alias = _ALIASES[scope.entity]
        where, params = scope.where(prefix=f"{alias}.")
        rows = self._fetchall(
            f"SELECT {alias}.id FROM {scope.entity.value} {alias} WHERE {where}"
            f" ORDER BY {ordering.sql(prefix=f'{alias}.')}",
            params,
        )
        return [row["id"] for row in rows]

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
