"""Agora web interface."""
