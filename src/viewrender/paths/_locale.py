"""Locale-specific template lookup."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


def _is_file(path: Path) -> bool:
    return path.is_file()


def locale_candidates(locale: str) -> list[str]:
    """Split a locale into fallback candidates, most specific first.

    Both ``-`` and ``_`` are treated as subtag separators.

    Example:
        >>> locale_candidates("zh-Hant-TW")
        ['zh-Hant-TW', 'zh-Hant', 'zh']
    """
    candidates: list[str] = []
    current = locale
    while current:
        candidates.append(current)
        cut = max(current.rfind("-"), current.rfind("_"))
        if cut <= 0:
            break
        current = current[:cut]
    return candidates


def localize(
    path: str | Path,
    target_locale: str,
    source_locale: str,
    *,
    file_exists: Callable[[Path], bool] | None = None,
) -> Path:
    """Find the locale-specific variant of a template file.

    For ``views/faq.html`` and target ``de-DE`` this checks
    ``views/de-DE/faq.html`` then ``views/de/faq.html``. Lookup stops when a
    candidate equals the source locale, because source-language templates
    live at the unlocalized path.

    Args:
        path: Template file path.
        target_locale: Locale to render in.
        source_locale: Locale the unlocalized templates are written in.
        file_exists: Existence check, defaults to ``Path.is_file``.

    Returns:
        The first existing localized path, or ``path`` unchanged.
    """
    path = Path(path)
    if target_locale == source_locale:
        return path

    exists = file_exists if file_exists is not None else _is_file
    for candidate in locale_candidates(target_locale):
        if candidate == source_locale:
            break
        desired = path.parent / candidate / path.name
        if exists(desired):
            return desired

    return path
