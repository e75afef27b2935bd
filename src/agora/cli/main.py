"""Agora CLI - Main entry point."""

import logging
import logging.handlers
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from agora import __version__

console = Console()
logger = logging.getLogger(__name__)

# Log rotation: 5 MB per file, keep 3 backups
_LOG_MAX_BYTES = 5 * 1024 * 1024
_LOG_BACKUP_COUNT = 3
_LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


def _setup_logging(verbose: bool = False, log_file: str | None = None) -> None:
    """Configure the root logger with a console handler and an optional rotating file."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                path,
                maxBytes=_LOG_MAX_BYTES,
                backupCount=_LOG_BACKUP_COUNT,
            )
        )
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format=_LOG_FORMAT,
        handlers=handlers,
    )


@click.group()
@click.version_option(version=__version__, prog_name="Agora")
@click.option("--verbose", "-v", is_flag=True, help="Log at INFO level")
@click.option("--log-file", type=click.Path(), default=None, help="Also log to a rotating file")
def cli(verbose, log_file):
    """Agora - a small discussion forum.

    Posts, comments and profiles with paginated listings.
    """
    _setup_logging(verbose, log_file)


from .forum_commands import db, posts, seed, users  # noqa: E402

cli.add_command(db)
cli.add_command(users)
cli.add_command(posts)
cli.add_command(seed)


@cli.command()
@click.option("--config", "config_path", type=click.Path(exists=True), default=None,
              help="YAML configuration file")
@click.option("--port", type=int, default=None, help="Port for the web UI")
@click.option("--host", default=None, help="Host to bind to")
@click.option("--db-path", type=click.Path(), default=None, help="SQLite database path")
@click.option("--debug", is_flag=True, help="Enable debug mode")
def web(config_path, port, host, db_path, debug):
    """Launch the forum web server."""
    from agora.config.loader import ConfigError, load_web_config
    from agora.storage.base import StorageError
    from agora.web.app import create_app

    try:
        config = load_web_config(Path(config_path) if config_path else None)
    except ConfigError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1)

    overrides = {}
    if port is not None:
        overrides["port"] = port
    if host:
        overrides["host"] = host
    if db_path:
        overrides["db_path"] = Path(db_path)
    if debug:
        overrides["debug"] = True
    config = config.model_copy(update=overrides)

    try:
        app = create_app(config)
    except StorageError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    storage = "PostgreSQL" if config.database_url else str(config.db_path)
    console.print("[bold]Agora[/bold]")
    console.print(f"  URL: http://{config.host}:{config.port}")
    console.print(f"  Storage: {storage}")
    console.print()

    app.run(host=config.host, port=config.port, debug=config.debug)


if __name__ == "__main__":
    cli()
