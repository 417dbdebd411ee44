from pathlib import Path

import pytest

from viewrender.exceptions import (
    BlockNotFoundError,
    ConfigError,
    ConfigLoadError,
    ExecutionError,
    InvalidReferenceError,
    RenderDepthError,
    ViewError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            InvalidReferenceError("bad", reference="x"),
            BlockNotFoundError("title"),
            ExecutionError("failed", file=Path("/a.html"), cause=RuntimeError()),
            RenderDepthError("deep", file=Path("/a.html"), max_depth=3),
            ConfigError("invalid"),
            ConfigLoadError("unparsable"),
        ],
    )
    def test_all_errors_are_view_errors(self, error: ViewError) -> None:
        assert isinstance(error, ViewError)

    def test_config_load_error_is_config_error(self) -> None:
        assert issubclass(ConfigLoadError, ConfigError)


class TestBlockNotFoundError:
    def test_message_is_not_quoted(self) -> None:
        error = BlockNotFoundError("title")

        assert str(error) == 'Block: "title" not found.'
        assert error.block_id == "title"


class TestConfigLoadError:
    def test_location_defaults_to_none(self) -> None:
        error = ConfigLoadError("unparsable")

        assert error.path is None
        assert error.line is None
        assert error.column is None
