"""TOML configuration loader with deep merge support."""

import os
import tomllib
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_FILE = "default.toml"


def get_config_dir() -> Path:
    """Get the configuration directory path.

    The config directory can be overridden with HUDDLE_CONFIG_DIR env var.
    Defaults to 'config/' in the current directory or one of its parents.

    Returns:
        Path to the directory holding default.toml

    Raises:
        FileNotFoundError: If HUDDLE_CONFIG_DIR points to a missing directory
    """
    config_dir_env = os.environ.get("HUDDLE_CONFIG_DIR")
    if config_dir_env:
        path = Path(config_dir_env)
        if not path.exists():
            raise FileNotFoundError(f"Config directory not found: {config_dir_env}")
        return path

    # The API may be started from a subdirectory of the checkout
    current = Path.cwd()
    for _ in range(5):
        config_path = current / "config"
        if (config_path / DEFAULT_CONFIG_FILE).exists():
            return config_path
        current = current.parent

    return Path("config")


def get_environment() -> str:
    """Get the current environment from HUDDLE_ENV.

    Defaults to 'development' if not set.
    """
    return os.environ.get("HUDDLE_ENV", "development")


def load_toml(file_path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dictionary.

    Args:
        file_path: Path to the TOML file

    Returns:
        Dictionary containing the TOML data

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence.

    Nested tables such as [standup] or [providers.llm] are merged key by
    key, so an environment file only needs the values it changes.

    Args:
        base: Base dictionary
        override: Override dictionary (takes precedence)

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_config(environment: str | None = None) -> dict[str, Any]:
    """Load configuration from TOML files.

    Loading order:
    1. config/default.toml (required)
    2. config/{HUDDLE_ENV}.toml (optional)

    Args:
        environment: Environment name; HUDDLE_ENV when omitted

    Returns:
        Merged configuration dictionary

    Raises:
        FileNotFoundError: If default.toml is missing
    """
    config_dir = get_config_dir()
    env = environment or get_environment()

    default_path = config_dir / DEFAULT_CONFIG_FILE
    if not default_path.exists():
        raise FileNotFoundError(
            f"Default configuration file not found: {default_path}. "
            "Create config/default.toml or set HUDDLE_CONFIG_DIR."
        )

    config = load_toml(default_path)

    env_path = config_dir / f"{env}.toml"
    if env_path.exists():
        config = deep_merge(config, load_toml(env_path))

    return config
