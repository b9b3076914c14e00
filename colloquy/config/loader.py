"""Layered TOML configuration files.

``default.toml`` is read first and ``{COLLOQUY_ENV}.toml`` is deep-merged
over it. Both layers are optional; missing ones fall back to code defaults.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_VAR = "COLLOQUY_CONFIG_DIR"
ENVIRONMENT_VAR = "COLLOQUY_ENV"
DEFAULT_ENVIRONMENT = "development"
SEARCH_DEPTH = 5


def get_environment() -> str:
    return os.environ.get(ENVIRONMENT_VAR, DEFAULT_ENVIRONMENT)


def get_config_dir() -> Path:
    """Locate the directory holding the TOML layers.

    ``COLLOQUY_CONFIG_DIR`` wins when set. Otherwise the nearest ``config/``
    containing a ``default.toml``, searching up from the working directory.

    Raises:
        FileNotFoundError: If ``COLLOQUY_CONFIG_DIR`` names a missing directory
    """
    override = os.environ.get(CONFIG_DIR_VAR)
    if override:
        path = Path(override)
        if not path.is_dir():
            raise FileNotFoundError(f"Config directory not found: {override}")
        return path

    cwd = Path.cwd()
    for directory in [cwd, *cwd.parents][:SEARCH_DEPTH]:
        candidate = directory / "config"
        if (candidate / "default.toml").is_file():
            return candidate
    return cwd / "config"


def load_toml(file_path: Path) -> dict[str, Any]:
    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``override`` merged in; nested tables merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def config_layers(config_dir: Path | None = None, environment: str | None = None) -> list[Path]:
    """Existing layer files, lowest precedence first."""
    config_dir = config_dir or get_config_dir()
    names = dict.fromkeys(["default.toml", f"{environment or get_environment()}.toml"])
    return [config_dir / name for name in names if (config_dir / name).is_file()]


def load_config(config_dir: Path | None = None, environment: str | None = None) -> dict[str, Any]:
    config: dict[str, Any] = {}
    for path in config_layers(config_dir, environment):
        config = deep_merge(config, load_toml(path))
    return config
