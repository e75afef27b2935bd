"""Configuration loading for Agora."""

from .loader import ConfigError, load_web_config, load_yaml

__all__ = ["ConfigError", "load_web_config", "load_yaml"]
