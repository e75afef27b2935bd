"""YAML configuration file loading with Pydantic validation."""

import os
from pathlib import Path
from typing import Mapping, Optional

import yaml
from pydantic import ValidationError

from agora.web.config import WebConfig

# Environment variables that override values from the config file.
ENV_OVERRIDES = {
    "AGORA_SECRET_KEY": "secret_key",
    "AGORA_DB_PATH": "db_path",
    "AGORA_DATABASE_URL": "database_url",
}


class ConfigError(Exception):
    """Raised when configuration loading or validation fails."""


def load_yaml(path: Path) -> dict:
    """Load a YAML file and return its contents as a dict.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML contents.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Configuration file not found: {path}") from None
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping at the top of {path}")
    return data


def load_web_config(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> WebConfig:
    """Build the web configuration from an optional YAML file and the environment.

    Environment variables listed in ``ENV_OVERRIDES`` win over the file.
    """
    data = load_yaml(path) if path else {}
    env = os.environ if environ is None else environ
    for var, key in ENV_OVERRIDES.items():
        if env.get(var):
            data[key] = env[var]
    try:
        return WebConfig(**data)
    except ValidationError as e:
        source = path or "environment"
        raise ConfigError(f"Configuration validation failed for {source}: {e}") from e
