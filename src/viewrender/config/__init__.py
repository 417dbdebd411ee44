"""viewrender configuration.

Example:
    >>> from viewrender.config import load_config
    >>> config = load_config()
    >>> config.view.default_extension
    'html'
"""

from viewrender.exceptions import ConfigError, ConfigLoadError

from ._defaults import DEFAULT_CONFIG
from ._load import CONFIG_ENV_VAR, CONFIG_FILE_NAME, find_config_file, load_config
from ._loader import (
    ENV_PREFIX,
    deep_merge,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
)
from ._models import (
    LogFormat,
    LoggingConfig,
    LogLevel,
    ThemeSettings,
    ViewConfig,
    ViewSettings,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILE_NAME",
    "DEFAULT_CONFIG",
    "ENV_PREFIX",
    "ConfigError",
    "ConfigLoadError",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "ThemeSettings",
    "ViewConfig",
    "ViewSettings",
    "deep_merge",
    "find_config_file",
    "load_config",
    "parse_env_vars",
    "parse_string_value",
    "read_toml_file",
    "set_nested_key",
]
