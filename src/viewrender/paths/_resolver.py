"""View reference to file path resolution."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Final, Protocol, runtime_checkable

from viewrender.exceptions import InvalidReferenceError

from ._aliases import ALIAS_MARKER

if TYPE_CHECKING:
    from collections.abc import Callable

    from viewrender.rendering._context import ViewContext

ROOT_MARKER: Final = "//"
"""References starting with this resolve against the view base path."""

ENTRY_MARKER: Final = "/"
"""References starting with a single slash resolve against the entry view."""


@runtime_checkable
class AliasResolver(Protocol):
    """Expands alias-prefixed references like ``@views/layouts/main``."""

    def get(self, alias: str) -> str:
        """Return the expanded path for an alias-prefixed string."""
        ...


def _is_file(path: Path) -> bool:
    return path.is_file()


def _normalize(path: str | Path) -> Path:
    return Path(os.path.normpath(path))


class PathResolver:
    """Compute absolute template paths from view references.

    Resolution rules, in order:

    1. ``@alias/...`` expands through the alias resolver and is used as-is.
    2. ``//name`` resolves against the context's base path.
    3. ``/name`` resolves against the entry (first frame) view directory.
    4. Anything else resolves against the current view directory.

    When the resulting file has no extension the context's default extension
    is appended. If that file does not exist and a fallback extension is
    configured, the fallback extension is used instead.
    """

    __slots__: Final = ("_aliases", "_context", "_file_exists")

    _aliases: AliasResolver | None
    _context: ViewContext
    _file_exists: Callable[[Path], bool]

    def __init__(
        self,
        context: ViewContext,
        *,
        aliases: AliasResolver | None = None,
        file_exists: Callable[[Path], bool] | None = None,
    ) -> None:
        self._context = context
        self._aliases = aliases
        self._file_exists = file_exists if file_exists is not None else _is_file

    def resolve(
        self,
        reference: str,
        current_dir: Path | None,
        *,
        root_dir: Path | None = None,
    ) -> Path:
        """Resolve a view reference to an absolute file path.

        Args:
            reference: The view reference (``//base``, ``/shared``, ``sub``,
                ``@views/page``).
            current_dir: Directory of the currently rendering view, or None
                when no render is in progress.
            root_dir: Directory of the entry view. Defaults to ``current_dir``
                and then to the base path.

        Returns:
            The file path to render.

        Raises:
            InvalidReferenceError: If the reference is empty, uses an unknown
                alias, or is relative while no render is in progress.
        """
        if not reference:
            msg = "View reference must not be empty."
            raise InvalidReferenceError(msg, reference=reference)

        base_path = self._context.base_path

        if reference.startswith(ALIAS_MARKER):
            if self._aliases is None:
                msg = f"Unable to resolve alias in view '{reference}': no alias resolver."
                raise InvalidReferenceError(msg, reference=reference)
            file = _normalize(self._aliases.get(reference))
        elif reference.startswith(ENTRY_MARKER):
            name = reference.lstrip("/")
            if not name:
                msg = f"View reference '{reference}' does not name a file."
                raise InvalidReferenceError(msg, reference=reference)
            if reference.startswith(ROOT_MARKER):
                file = _normalize(base_path / name)
            else:
                file = _normalize((root_dir or current_dir or base_path) / name)
        elif current_dir is not None:
            file = _normalize(current_dir / reference)
        else:
            msg = (
                f"Unable to resolve view file for view '{reference}': "
                "no active view context."
            )
            raise InvalidReferenceError(msg, reference=reference)

        if not file.name or file.name == "..":
            msg = f"View reference '{reference}' does not name a file."
            raise InvalidReferenceError(msg, reference=reference)

        return self._with_extension(file)

    def _with_extension(self, file: Path) -> Path:
        if file.suffix:
            return file

        extension = self._context.default_extension
        path = file.with_name(f"{file.name}.{extension}")

        fallback = self._context.fallback_extension
        if fallback and fallback != extension and not self._file_exists(path):
            return file.with_name(f"{file.name}.{fallback}")
        return path
