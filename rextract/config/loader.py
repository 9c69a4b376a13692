"""TOML configuration loader with layered overrides.

The directive usually runs embedded in a host application, so missing
configuration files are not an error: the model defaults apply.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "REXTRACT_CONFIG_DIR"
ENVIRONMENT_ENV = "REXTRACT_ENV"
SEARCH_DEPTH = 5


def get_config_dir() -> Path | None:
    """Locate the configuration directory.

    REXTRACT_CONFIG_DIR wins when set and must exist. Otherwise a
    ``config/`` directory is searched for in the working directory and
    its parents.

    Raises:
        FileNotFoundError: If REXTRACT_CONFIG_DIR points nowhere
    """
    explicit = os.environ.get(CONFIG_DIR_ENV)
    if explicit:
        path = Path(explicit)
        if not path.is_dir():
            raise FileNotFoundError(f"Config directory not found: {explicit}")
        return path

    for candidate in [Path.cwd(), *Path.cwd().parents][:SEARCH_DEPTH]:
        if (candidate / "config").is_dir():
            return candidate / "config"
    return None


def get_environment() -> str:
    """Current deployment environment, 'development' unless REXTRACT_ENV is set."""
    return os.environ.get(ENVIRONMENT_ENV, "development")


def load_toml(file_path: Path) -> dict[str, Any]:
    """Load a TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    if not file_path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")
    return tomllib.loads(file_path.read_text(encoding="utf-8"))


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base, recursing into nested tables."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_config() -> dict[str, Any]:
    """Load configuration layers.

    1. config/default.toml (optional)
    2. config/{REXTRACT_ENV}.toml (optional)

    Returns:
        Merged configuration dictionary, empty when no files exist
    """
    config_dir = get_config_dir()
    if config_dir is None:
        return {}

    config: dict[str, Any] = {}
    for name in ("default", get_environment()):
        path = config_dir / f"{name}.toml"
        if path.is_file():
            config = deep_merge(config, load_toml(path))
    return config
