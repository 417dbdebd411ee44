"""Configuration models.

This module provides the Pydantic models for viewrender configuration:
the ``[view]``, ``[theme]``, ``[aliases]`` and ``[logging]`` sections.
"""

from enum import StrEnum
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from viewrender.exceptions import ConfigError
from viewrender.rendering import DEFAULT_EXTENSION, DEFAULT_MAX_DEPTH

from ._defaults import DEFAULT_CONFIG
from ._loader import deep_merge


class LogLevel(StrEnum):
    """Log level threshold values.

    Values are ordered from most verbose (debug) to least verbose (error).
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty logs to stderr).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.WARNING
    format: LogFormat = LogFormat.JSON
    file: str = ""


class ViewSettings(BaseModel):
    """View configuration section.

    Attributes:
        base_path: Directory (or ``@alias``) that ``//`` references resolve against.
        default_extension: Extension appended to references without one.
        fallback_extension: Extension tried when the default one is missing.
        default_parameters: Parameters passed to every render.
        language: Target locale for template lookup.
        source_language: Locale of the unlocalized templates.
        placeholder_salt: Salt for cache-busting placeholder signatures.
        max_depth: Maximum render nesting depth.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    base_path: str = "."
    default_extension: str = Field(default=DEFAULT_EXTENSION, min_length=1)
    fallback_extension: str | None = None
    default_parameters: dict[str, Any] = Field(default_factory=dict)  # pyright: ignore[reportExplicitAny]
    language: str | None = None
    source_language: str | None = None
    placeholder_salt: str = ""
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)

    @field_validator("default_extension", "fallback_extension", mode="after")
    @classmethod
    def strip_leading_dot(cls, v: str | None) -> str | None:
        """Accept ``.html`` as well as ``html``."""
        if v is None:
            return None
        v = v.strip().lstrip(".")
        if not v:
            msg = "extension cannot be empty"
            raise ValueError(msg)
        return v


class ThemeSettings(BaseModel):
    """Theme configuration section.

    Attributes:
        path_map: Source directory prefix to themed directory prefix.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    path_map: dict[str, str] = Field(default_factory=dict)


class ViewConfig(BaseModel):
    """Complete viewrender configuration."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    view: ViewSettings = Field(default_factory=ViewSettings)
    theme: ThemeSettings = Field(default_factory=ThemeSettings)
    aliases: dict[str, str] = Field(default_factory=dict)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:  # pyright: ignore[reportExplicitAny]
        """Create configuration from a dictionary merged over the defaults.

        Raises:
            ConfigError: If the merged configuration fails validation.
        """
        merged = deep_merge(DEFAULT_CONFIG, data)
        try:
            return cls.model_validate(merged)
        except ValidationError as e:
            msg = f"Invalid configuration: {e}"
            raise ConfigError(msg) from e
