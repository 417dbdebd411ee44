"""Configuration discovery and loading."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

from viewrender.paths import ALIAS_MARKER

from ._loader import ENV_PREFIX, deep_merge, parse_env_vars, read_toml_file
from ._models import ViewConfig

if TYPE_CHECKING:
    from collections.abc import Mapping

CONFIG_FILE_NAME: Final = "viewrender.toml"
CONFIG_ENV_VAR: Final = f"{ENV_PREFIX}CONFIG"


def find_config_file(
    start: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path | None:
    """Locate the configuration file.

    Search order (first found wins):
    1. The path in VIEWRENDER_CONFIG
    2. ``viewrender.toml`` in ``start`` (default: the working directory)

    Returns:
        The config file path, or None if there is none.
    """
    if environ is None:
        environ = os.environ

    explicit = environ.get(CONFIG_ENV_VAR)
    if explicit:
        return Path(explicit)

    candidate = (start if start is not None else Path.cwd()) / CONFIG_FILE_NAME
    return candidate if candidate.is_file() else None


def _rebase(value: object, directory: Path) -> object:
    if isinstance(value, str) and not value.startswith(ALIAS_MARKER):
        return str(directory / value)
    return value


def _rebase_paths(
    data: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    directory: Path,
) -> None:
    """Make relative paths read from a config file relative to its directory."""
    view_section = data.get("view")
    if isinstance(view_section, dict) and "base_path" in view_section:
        view_section["base_path"] = _rebase(view_section["base_path"], directory)

    theme_section = data.get("theme")
    if isinstance(theme_section, dict):
        path_map = theme_section.get("path_map")
        if isinstance(path_map, dict):
            theme_section["path_map"] = {
                _rebase(source, directory): _rebase(target, directory)
                for source, target in path_map.items()
            }

    aliases = data.get("aliases")
    if isinstance(aliases, dict):
        data["aliases"] = {
            alias: _rebase(target, directory) for alias, target in aliases.items()
        }


def load_config(
    path: Path | None = None,
    *,
    include_env: bool = True,
    environ: Mapping[str, str] | None = None,
) -> ViewConfig:
    """Load configuration from defaults, a TOML file and the environment.

    Sources are merged in order (later values override earlier):
    1. Built-in defaults
    2. The TOML file (``path``, or the discovered file when None)
    3. VIEWRENDER_<SECTION>__<KEY> environment variables

    Relative ``view.base_path``, ``theme.path_map`` and ``aliases`` entries in a
    file are taken relative to the file's directory.

    Args:
        path: Explicit config file. Must exist when given.
        include_env: Whether to apply environment variable overrides.
        environ: Environment mapping, defaults to ``os.environ``.

    Returns:
        The validated configuration.

    Raises:
        FileNotFoundError: If an explicit or VIEWRENDER_CONFIG file is missing.
        ConfigLoadError: If the TOML file cannot be parsed.
        ConfigError: If the merged configuration is invalid.
    """
    if path is None:
        path = find_config_file(environ=environ)

    data: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]
    if path is not None:
        data = read_toml_file(path)
        _rebase_paths(data, path.parent)

    if include_env:
        data = deep_merge(data, parse_env_vars(environ))

    return ViewConfig.from_dict(data)
