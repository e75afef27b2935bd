"""Agora: a small discussion forum with paginated, soft-delete aware listings."""

__version__ = "0.1.0"
