"""Shared utilities for viewrender."""

from ._logging import LogFormatType, create_view_logger

__all__ = ["LogFormatType", "create_view_logger"]
