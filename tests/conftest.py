"""Shared test fixtures for viewrender tests."""

from collections.abc import Callable, Mapping
from pathlib import Path

import pytest
from rich.console import Console

WriteViews = Callable[[Mapping[str, str]], Path]


def write_views(root: Path, files: Mapping[str, str]) -> Path:
    """Create template files under ``root``.

    Args:
        root: Directory to create the files in.
        files: Relative file path to template source.

    Returns:
        The ``root`` directory.
    """
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def views_dir(tmp_path: Path) -> Path:
    path = tmp_path / "views"
    path.mkdir()
    return path


@pytest.fixture
def make_views(views_dir: Path) -> WriteViews:
    """Return a function writing templates into ``views_dir``."""

    def _make(files: Mapping[str, str]) -> Path:
        return write_views(views_dir, files)

    return _make


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("VIEWRENDER_CONFIG", "VIEWRENDER_DEBUG", "VIEWRENDER_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )
