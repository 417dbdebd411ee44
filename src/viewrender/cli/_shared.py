"""Shared CLI utilities for commands."""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Never

if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "ExitCode",
    "exit_with_error",
    "get_error_console",
    "parse_parameters",
]


class ExitCode(IntEnum):
    """Standard exit codes for viewrender CLI commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    VIEW_ERROR = 2
    USAGE_ERROR = 3


def get_error_console() -> Console:
    """Get a Rich console configured for error output to stderr."""
    from rich.console import Console

    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.VIEW_ERROR,
    *,
    console: Console | None = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    from rich.markup import escape

    if console is None:
        console = get_error_console()
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
    raise SystemExit(code)


def parse_parameters(pairs: list[str] | None) -> dict[str, object]:
    """Parse ``key=value`` pairs into render parameters.

    Values go through the same type inference as environment variables.

    Raises:
        ValueError: If a pair has no ``=`` or an empty key.
    """
    from viewrender.config import parse_string_value

    parameters: dict[str, object] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            msg = f"Invalid parameter '{pair}', expected key=value"
            raise ValueError(msg)
        parameters[key] = parse_string_value(value)
    return parameters
