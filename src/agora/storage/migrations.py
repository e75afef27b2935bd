"""Simple version-based migration runner for Agora storage."""

import logging
from typing import Any

logger = logging.getLogger(__name__)

# Each migration is (version, description, up_sql)
Migration = tuple[int, str, str]

MIGRATIONS: list[Migration] = [
    # Version 1 is the initial schema: applied via schema.py.
    (
        2,
        "Add soft-delete aware listing indexes",
        """
        CREATE INDEX IF NOT EXISTS idx_posts_active ON posts(deleted_at, created_at);
        CREATE INDEX IF NOT EXISTS idx_comments_active ON comments(post_id, deleted_at, created_at);
        """,
    ),
    (
        3,
        "Drop unused posts.published column",
        """
        ALTER TABLE posts DROP COLUMN published;
        """,
    ),
]


def pending_migrations(current_version: int) -> list[Migration]:
    """Migrations newer than ``current_version``, oldest first."""
    return sorted(
        (m for m in MIGRATIONS if m[0] > current_version), key=lambda m: m[0]
    )


def get_current_version_sqlite(conn: Any) -> int:
    """Get current schema version from SQLite database."""
    try:
        cursor = conn.execute("SELECT MAX(version) FROM schema_version")
        row = cursor.fetchone()
        return row[0] if row and row[0] is not None else 0
    except Exception:
        return 0


def set_version_sqlite(conn: Any, version: int) -> None:
    """Record a schema version in SQLite."""
    conn.execute(
        "INSERT INTO schema_version (version) VALUES (?)",
        (version,),
    )
    conn.commit()


def run_migrations_sqlite(conn: Any, current_version: int) -> int:
    """Apply pending migrations to a SQLite database.

    Args:
        conn: SQLite connection.
        current_version: Current schema version.

    Returns:
        New schema version after migrations.
    """
    pending = pending_migrations(current_version)
    for version, description, sql in pending:
        logger.info("Applying migration v%d: %s", version, description)
        conn.executescript(sql)
        set_version_sqlite(conn, version)

    if pending:
        logger.info("Applied %d migration(s)", len(pending))
    return get_current_version_sqlite(conn)


def get_current_version_postgres(conn: Any) -> int:
    """Get current schema version from PostgreSQL database."""
    try:
        cursor = conn.cursor()
        cursor.execute("SELECT MAX(version) FROM schema_version")
        row = cursor.fetchone()
        return row[0] if row and row[0] is not None else 0
    except Exception:
        conn.rollback()
        return 0


def set_version_postgres(conn: Any, version: int) -> None:
    """Record a schema version in PostgreSQL."""
    cursor = conn.cursor()
    cursor.execute(
        "INSERT INTO schema_version (version) VALUES (%s)",
        (version,),
    )
    conn.commit()


def run_migrations_postgres(conn: Any, current_version: int) -> int:
    """Apply pending migrations to a PostgreSQL database.

    Args:
        conn: psycopg2 connection.
        current_version: Current schema version.

    Returns:
        New schema version after migrations.
    """
    pending = pending_migrations(current_version)
    cursor = conn.cursor()
    for version, description, sql in pending:
        logger.info("Applying migration v%d: %s", version, description)
        cursor.execute(sql)
        conn.commit()
        set_version_postgres(conn, version)

    if pending:
        logger.info("Applied %d migration(s)", len(pending))
    return get_current_version_postgres(conn)
