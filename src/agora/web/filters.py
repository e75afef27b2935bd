"""Jinja filters registered on the Agora app."""

from datetime import datetime
from typing import Any

HUMAN_TIME_FORMAT = "%d/%m/%Y %H:%M:%S"


def human_time(value: Any) -> str:
    """Render a timestamp (datetime or ISO string) as ``dd/mm/YYYY HH:MM:SS``."""
    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        return value.strftime(HUMAN_TIME_FORMAT)
    try:
        return datetime.fromisoformat(str(value)).strftime(HUMAN_TIME_FORMAT)
    except ValueError:
        return str(value)


def register_filters(app) -> None:
    app.jinja_env.filters["human_time"] = human_time
