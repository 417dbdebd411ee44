"""Per-view rendering state."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Final

from ._blocks import BlockStore
from ._stack import DEFAULT_MAX_DEPTH, RenderStack

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_EXTENSION: Final = "html"


@dataclass(slots=True)
class ViewContext:
    """State shared by every render issued through one view.

    A context owns its blocks and render stack. Separate contexts never share
    state; a single context is not safe for concurrent renders from multiple
    threads and must be serialized by the caller.

    Attributes:
        base_path: Directory that ``//`` references resolve against.
        default_extension: Extension appended to references without one.
        default_parameters: Parameters passed to every render.
        fallback_extension: Extension tried when the default one is missing.
        language: Target locale for template lookup.
        source_language: Locale of the unlocalized templates.
        max_depth: Maximum render nesting depth.
        blocks: Named content blocks.
        stack: Frames of the renders in progress.
    """

    base_path: Path
    default_extension: str = DEFAULT_EXTENSION
    default_parameters: dict[str, object] = field(default_factory=dict)
    fallback_extension: str | None = None
    language: str | None = None
    source_language: str | None = None
    max_depth: int = DEFAULT_MAX_DEPTH
    blocks: BlockStore = field(default_factory=BlockStore)
    stack: RenderStack = field(init=False)

    def __post_init__(self) -> None:
        self.base_path = Path(self.base_path)
        self.default_extension = self.default_extension.lstrip(".")
        if self.fallback_extension is not None:
            self.fallback_extension = self.fallback_extension.lstrip(".") or None
        self.stack = RenderStack(self.base_path, max_depth=self.max_depth)


def compose_parameters(
    defaults: Mapping[str, object],
    parameters: Mapping[str, object] | None = None,
) -> dict[str, object]:
    """Merge render parameters over the defaults.

    Explicit parameters win on key collision. Neither input is modified.
    """
    result: dict[str, object] = dict(defaults)
    if parameters:
        result = {**result, **parameters}
    return result
