"""Theme path-prefix substitution."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(slots=True, frozen=True)
class ThemeRule:
    """A single path-prefix substitution.

    Attributes:
        source_prefix: Directory prefix to match.
        target_prefix: Directory that replaces the matched prefix.
    """

    source_prefix: Path
    target_prefix: Path


def _normalize(path: str | Path) -> Path:
    return Path(os.path.normpath(str(path)))


class Theme:
    """Maps view files onto an alternate template tree.

    Rules match on whole path segments, so ``/views`` matches
    ``/views/site/index.html`` but not ``/views-old/index.html``. When several
    rules match, the longest source prefix wins. Paths that match no rule are
    returned unchanged.

    Example:
        theme = Theme({"/app/views": "/app/themes/dark"})
        theme.apply(Path("/app/views/site/index.html"))
        # Path("/app/themes/dark/site/index.html")
    """

    __slots__: Final = ("_rules",)

    _rules: tuple[ThemeRule, ...]

    def __init__(self, path_map: Mapping[str | Path, str | Path] | None = None) -> None:
        rules = [
            ThemeRule(_normalize(source), _normalize(target))
            for source, target in (path_map or {}).items()
        ]
        # Stable sort keeps declaration order among equally specific rules
        self._rules = tuple(
            sorted(rules, key=lambda rule: len(rule.source_prefix.parts), reverse=True)
        )

    @property
    def rules(self) -> tuple[ThemeRule, ...]:
        """Rules in match order (most specific first)."""
        return self._rules

    def match(self, path: Path) -> ThemeRule | None:
        """Return the rule that applies to ``path``, if any."""
        for rule in self._rules:
            if path.is_relative_to(rule.source_prefix):
                return rule
        return None

    def apply(self, path: str | Path) -> Path:
        """Return the themed equivalent of ``path``."""
        path = Path(path)
        rule = self.match(path)
        if rule is None:
            return path
        return rule.target_prefix / path.relative_to(rule.source_prefix)

    def __bool__(self) -> bool:
        return bool(self._rules)
