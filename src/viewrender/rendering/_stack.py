"""Render stack tracking nested renders."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from viewrender.exceptions import RenderDepthError, ViewError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping
    from pathlib import Path

DEFAULT_MAX_DEPTH: Final = 64


@dataclass(slots=True, frozen=True)
class RenderFrame:
    """One in-progress render.

    Attributes:
        file: The file being executed (after theming and localization).
        parameters: Parameters passed to the executor.
        requested_file: The resolved file before theming. Relative references
            from inside this render resolve against its directory.
    """

    file: Path
    parameters: Mapping[str, object]
    requested_file: Path | None = None

    @property
    def directory(self) -> Path:
        """Directory used to resolve relative references."""
        return (self.requested_file or self.file).parent


class RenderStack:
    """Ordered frames of the renders currently in progress, last is current.

    The stack is empty between top-level renders and its length equals the
    render nesting depth. Use :meth:`frame` so the frame is popped even when
    the template executor raises.
    """

    __slots__: Final = ("_base_path", "_frames", "_max_depth")

    _base_path: Path
    _frames: list[RenderFrame]
    _max_depth: int

    def __init__(self, base_path: Path, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self._base_path = base_path
        self._frames = []
        self._max_depth = max_depth

    @property
    def max_depth(self) -> int:
        """Maximum nesting depth before :class:`RenderDepthError` is raised."""
        return self._max_depth

    @property
    def depth(self) -> int:
        """Current render nesting depth."""
        return len(self._frames)

    @property
    def current(self) -> RenderFrame | None:
        """The innermost frame, or None if no render is in progress."""
        return self._frames[-1] if self._frames else None

    @property
    def root(self) -> RenderFrame | None:
        """The outermost (entry) frame, or None if no render is in progress."""
        return self._frames[0] if self._frames else None

    def begin_frame(
        self,
        file: Path,
        parameters: Mapping[str, object],
        *,
        requested_file: Path | None = None,
    ) -> RenderFrame:
        """Push a frame for a render that is starting.

        Raises:
            RenderDepthError: If the stack is already at ``max_depth``.
        """
        if len(self._frames) >= self._max_depth:
            msg = (
                f"Maximum render depth of {self._max_depth} exceeded "
                f"while rendering '{file}'."
            )
            raise RenderDepthError(msg, file=file, max_depth=self._max_depth)

        frame = RenderFrame(file=file, parameters=parameters, requested_file=requested_file)
        self._frames.append(frame)
        return frame

    def end_frame(self) -> RenderFrame:
        """Pop the current frame.

        Raises:
            ViewError: If no frame is on the stack.
        """
        if not self._frames:
            msg = "end_frame() called without a matching begin_frame()."
            raise ViewError(msg)
        return self._frames.pop()

    @contextmanager
    def frame(
        self,
        file: Path,
        parameters: Mapping[str, object],
        *,
        requested_file: Path | None = None,
    ) -> Iterator[RenderFrame]:
        """Context manager pairing :meth:`begin_frame` with :meth:`end_frame`."""
        frame = self.begin_frame(file, parameters, requested_file=requested_file)
        try:
            yield frame
        finally:
            _ = self.end_frame()

    def current_dir(self) -> Path:
        """Directory of the current frame, or the base path when empty."""
        frame = self.current
        return frame.directory if frame is not None else self._base_path

    def root_dir(self) -> Path:
        """Directory of the entry frame, or :meth:`current_dir` when empty."""
        frame = self.root
        return frame.directory if frame is not None else self.current_dir()

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[RenderFrame]:
        return iter(self._frames)
