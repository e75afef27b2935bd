"""Database, user, post and demo-data CLI commands."""

import logging
import random
import secrets
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from agora.pagination import PageRequest

console = Console()
logger = logging.getLogger(__name__)

_db_path_option = click.option(
    "--db-path",
    type=click.Path(),
    default=None,
    help="SQLite database path (default: ~/.agora/agora.db)",
)


def _open_store(db_path):
    from agora.storage.base import StorageError
    from agora.storage.sqlite_store import SQLiteStore

    path = Path(db_path) if db_path else None
    try:
        return SQLiteStore(db_path=path)
    except StorageError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1)


@click.group()
def db():
    """Manage the Agora database."""


@db.command()
@_db_path_option
def init(db_path):
    """Initialize the SQLite database."""
    store = _open_store(db_path)
    console.print(f"[green]Database initialized at {store.db_path}[/green]")
    store.close()


@db.command()
@_db_path_option
def migrate(db_path):
    """Run pending database migrations."""
    store = _open_store(db_path)
    console.print(f"[green]Migrations complete (schema v{store.schema_version}).[/green]")
    store.close()


@click.group()
def users():
    """Manage forum users."""


@users.command("create")
@click.argument("name")
@click.argument("email")
@_db_path_option
def create_user(name, email, db_path):
    """Create a user with NAME and EMAIL."""
    from agora.storage.base import StorageError
    from agora.web.models.forms import UserCreate, parse_form
    from agora.web.services.user_service import UserService

    form, error = parse_form(UserCreate, {"name": name, "email": email})
    if form is None:
        console.print(f"[red]Invalid user: {escape(error)}[/red]")
        raise SystemExit(1)

    store = _open_store(db_path)
    try:
        user = UserService(store).create_user(form.name, form.email)
    except StorageError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1)
    finally:
        store.close()
    console.print(f"[green]Created user {user['name']} (ID: {user['id']})[/green]")


@click.group()
def posts():
    """Browse forum posts."""


@posts.command("list")
@click.option("--page", default=None, help="Page number (default: 1)")
@click.option("--per-page", default=None, help="Posts per page (default: 10, max: 100)")
@click.option("--user-id", type=int, default=None, help="Only posts by this user")
@_db_path_option
def list_posts(page, per_page, user_id, db_path):
    """List active posts, newest first."""
    from agora.storage.base import StorageError
    from agora.web.app import build_services

    store = _open_store(db_path)
    services = build_services(store)
    page_request = PageRequest.normalize(page, per_page)

    try:
        if user_id is None:
            result = services["post_service"].list_posts(page_request)
        else:
            result = services["post_service"].list_posts_by_user(user_id, page_request)
    except StorageError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1)
    finally:
        store.close()

    table = Table(title=f"Posts (page {result.page} of {result.total_pages})")
    table.add_column("ID", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Author")
    table.add_column("Created")

    for p in result.items:
        table.add_row(
            str(p["id"]),
            p["title"][:50],
            p.get("user_name", ""),
            str(p.get("created_at", ""))[:19],
        )

    console.print(table)
    console.print(f"Total posts: {result.total}")


@click.command()
@click.option("--users", "user_count", type=int, default=3, help="Users to create")
@click.option("--posts", "post_count", type=int, default=10, help="Posts to create")
@click.option("--comments", "comment_count", type=int, default=40, help="Comments to spread over the posts")
@_db_path_option
def seed(user_count, post_count, comment_count, db_path):
    """Fill the database with demo users, posts and comments."""
    store = _open_store(db_path)
    # Emails are unique, so tag this batch to allow seeding more than once.
    batch = secrets.token_hex(3)

    user_ids = []
    for i in range(1, user_count + 1):
        user = store.create_user(f"Demo User {i}", f"demo{i}.{batch}@example.com")
        user_ids.append(user["id"])

    post_ids = []
    if user_ids:
        for i in range(1, post_count + 1):
            post = store.create_post(
                random.choice(user_ids), f"Demo post {i}", f"Body of demo post {i}."
            )
            post_ids.append(post["id"])

    created_comments = 0
    if post_ids:
        for i in range(1, comment_count + 1):
            store.create_comment(
                random.choice(user_ids), random.choice(post_ids), f"Demo comment {i}"
            )
            created_comments += 1

    logger.info("Seeded demo data into %s", store.db_path)
    console.print(
        f"[green]Seeded {len(user_ids)} user(s), {len(post_ids)} post(s) "
        f"and {created_comments} comment(s) into {store.db_path}[/green]"
    )
    store.close()
