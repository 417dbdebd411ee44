"""viewrender exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class ViewError(Exception):
    """Base exception for view rendering errors."""


class InvalidReferenceError(ViewError, ValueError):
    """Raised when a view reference cannot be resolved to a file path.

    Attributes:
        reference: The view reference that failed to resolve.
    """

    def __init__(self, message: str, *, reference: str) -> None:
        """Initialize with error message and the offending reference."""
        super().__init__(message)
        self.reference: str = reference


class BlockNotFoundError(ViewError, KeyError):
    """Raised when a block is read or removed but was never set.

    Attributes:
        block_id: The ID of the block that was not found.
    """

    def __init__(self, block_id: str) -> None:
        """Initialize with the missing block ID."""
        super().__init__(f'Block: "{block_id}" not found.')
        self.block_id: str = block_id

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0])


class ExecutionError(ViewError):
    """Raised when a template executor fails.

    Attributes:
        file: The template file that was being executed.
        cause: The exception raised by the executor.
    """

    def __init__(self, message: str, *, file: Path, cause: Exception) -> None:
        """Initialize with error message, file and underlying cause."""
        super().__init__(message)
        self.file: Path = file
        self.cause: Exception = cause


class RenderDepthError(ViewError):
    """Raised when nested renders exceed the configured maximum depth.

    Attributes:
        file: The file whose render would have exceeded the limit.
        max_depth: The configured limit.
    """

    def __init__(self, message: str, *, file: Path, max_depth: int) -> None:
        """Initialize with error message and depth context."""
        super().__init__(message)
        self.file: Path = file
        self.max_depth: int = max_depth


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(ViewError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column
