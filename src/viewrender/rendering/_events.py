"""Render lifecycle notifications.

Listeners receive an immutable event and return either a replacement event
or ``None`` to leave it unchanged:

    dispatcher = ListenerDispatcher()

    @dispatcher.on_before_render
    def maintenance(event: BeforeRender) -> BeforeRender | None:
        if MAINTENANCE:
            return event.stop("<p>Back soon</p>")
        return None

    @dispatcher.on_after_render
    def minify(event: AfterRender) -> AfterRender:
        return event.with_result(event.result.strip())
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Final, Protocol, TypeAlias, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(slots=True, frozen=True)
class BeforeRender:
    """Published before a template executes.

    Attributes:
        file: The template file about to be executed.
        parameters: Parameters the executor will receive.
        stopped: Whether a listener short-circuited the render.
        output: Substitute output used when ``stopped`` is set.
    """

    file: Path
    parameters: Mapping[str, object]
    stopped: bool = False
    output: str = ""

    def with_parameters(self, parameters: Mapping[str, object]) -> BeforeRender:
        """Return a copy that renders with ``parameters`` instead."""
        return replace(self, parameters=dict(parameters))

    def stop(self, output: str = "") -> BeforeRender:
        """Return a copy that skips execution and renders ``output``."""
        return replace(self, stopped=True, output=output)


@dataclass(slots=True, frozen=True)
class AfterRender:
    """Published after a template executed successfully.

    Attributes:
        file: The template file that was executed.
        parameters: Parameters the executor received.
        result: The rendered output.
    """

    file: Path
    parameters: Mapping[str, object]
    result: str

    def with_result(self, result: str) -> AfterRender:
        """Return a copy with the output replaced."""
        return replace(self, result=result)


BeforeRenderListener: TypeAlias = Callable[[BeforeRender], BeforeRender | None]
AfterRenderListener: TypeAlias = Callable[[AfterRender], AfterRender | None]


@runtime_checkable
class EventDispatcher(Protocol):
    """Publishes render lifecycle events and returns the resulting event."""

    def before_render(self, event: BeforeRender) -> BeforeRender:
        """Publish ``event`` and return the possibly replaced or stopped event."""
        ...

    def after_render(self, event: AfterRender) -> AfterRender:
        """Publish ``event`` and return the possibly replaced event."""
        ...


class ListenerDispatcher:
    """In-process dispatcher calling listeners in registration order.

    Before-render dispatch ends at the first listener that stops the event.
    """

    __slots__: Final = ("_after", "_before")

    _before: list[BeforeRenderListener]
    _after: list[AfterRenderListener]

    def __init__(self) -> None:
        self._before = []
        self._after = []

    def on_before_render(self, listener: BeforeRenderListener) -> BeforeRenderListener:
        """Register a before-render listener. Usable as a decorator."""
        self._before.append(listener)
        return listener

    def on_after_render(self, listener: AfterRenderListener) -> AfterRenderListener:
        """Register an after-render listener. Usable as a decorator."""
        self._after.append(listener)
        return listener

    def before_render(self, event: BeforeRender) -> BeforeRender:
        for listener in self._before:
            if event.stopped:
                break
            replacement = listener(event)
            if replacement is not None:
                event = replacement
        return event

    def after_render(self, event: AfterRender) -> AfterRender:
        for listener in self._after:
            replacement = listener(event)
            if replacement is not None:
                event = replacement
        return event
