"""Web application configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field


class WebConfig(BaseModel):
    """Configuration for the Agora web server."""

    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False
    secret_key: str = ""
    db_path: Path = Field(default_factory=lambda: Path.home() / ".agora" / "agora.db")
    database_url: str = ""
    # Page size used when redirecting to a comment after it changes.
    comments_per_page: int = Field(default=10, ge=1, le=100)
