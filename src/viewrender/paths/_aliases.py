"""Path alias registry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from viewrender.exceptions import InvalidReferenceError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

ALIAS_MARKER: Final = "@"


def _normalize_alias(alias: str) -> str:
    alias = alias.rstrip("/")
    return alias if alias.startswith(ALIAS_MARKER) else ALIAS_MARKER + alias


class Aliases:
    """Registry of symbolic path prefixes such as ``@views`` or ``@app/layouts``.

    An alias maps to a directory path, which may itself start with another
    registered alias. Nested references like ``@views/site/index`` resolve
    against the longest registered alias that matches on a ``/`` boundary.

    Example:
        aliases = Aliases({"@app": "/srv/app", "@views": "@app/views"})
        aliases.get("@views/site/index")  # "/srv/app/views/site/index"
    """

    __slots__: Final = ("_aliases",)

    _aliases: dict[str, str]

    def __init__(self, aliases: Mapping[str, str | Path] | None = None) -> None:
        self._aliases = {}
        for alias, path in (aliases or {}).items():
            self.set(alias, path)

    def set(self, alias: str, path: str | Path) -> None:
        """Register an alias.

        Targets starting with an alias are expanded at registration time, so
        later changes to the referenced alias do not propagate.

        Args:
            alias: Alias name, with or without the leading ``@``.
            path: Target directory or alias-prefixed path.

        Raises:
            InvalidReferenceError: If ``path`` uses an unknown alias.
        """
        target = str(path)
        if target.startswith(ALIAS_MARKER):
            target = self.get(target)
        self._aliases[_normalize_alias(alias)] = target.rstrip("/") or "/"

    def remove(self, alias: str) -> None:
        """Unregister an alias. Unknown aliases are ignored."""
        _ = self._aliases.pop(_normalize_alias(alias), None)

    def has(self, alias: str) -> bool:
        """Check whether an alias (or an alias-prefixed path) is resolvable."""
        return self._match(alias) is not None

    def get(self, alias: str) -> str:
        """Expand an alias-prefixed path.

        Strings that do not start with ``@`` are returned unchanged.

        Raises:
            InvalidReferenceError: If no registered alias matches.
        """
        if not alias.startswith(ALIAS_MARKER):
            return alias

        name = self._match(alias)
        if name is None:
            msg = f"Invalid path alias: {alias}"
            raise InvalidReferenceError(msg, reference=alias)

        target = self._aliases[name]
        rest = alias[len(name) :]
        if target == "/":
            return rest or target
        return target + rest

    def _match(self, alias: str) -> str | None:
        for name in sorted(self._aliases, key=len, reverse=True):
            if alias == name or alias.startswith(name + "/"):
                return name
        return None

    def __len__(self) -> int:
        return len(self._aliases)
