r"""viewrender rendering.

The :class:`View` resolves view references, applies themes and locale
fallback, tracks nested renders on a stack, and publishes lifecycle events
around an opaque template executor.

Basic usage:
    from viewrender.rendering import View

    view = View("/srv/app/views")
    html = view.render("//site/index", {"title": "Home"})

Inside a Jinja2 template, partials render relative to the calling file:
    <header>{{ view.render("_header", {"title": title}) }}</header>

Lifecycle events:
    from viewrender.rendering import ListenerDispatcher, View

    dispatcher = ListenerDispatcher()
    dispatcher.on_after_render(lambda event: event.with_result(event.result.strip()))
    view = View("/srv/app/views", dispatcher=dispatcher)
"""

from ._blocks import BlockStore
from ._context import DEFAULT_EXTENSION, ViewContext, compose_parameters
from ._events import (
    AfterRender,
    AfterRenderListener,
    BeforeRender,
    BeforeRenderListener,
    EventDispatcher,
    ListenerDispatcher,
)
from ._executor import (
    BracesTemplateExecutor,
    EnvironmentConfig,
    JinjaTemplateExecutor,
    TemplateExecutor,
    create_environment,
)
from ._placeholder import (
    PLACEHOLDER_PREFIX,
    make_placeholder,
    placeholder_signature,
    replace_placeholders,
)
from ._stack import DEFAULT_MAX_DEPTH, RenderFrame, RenderStack
from ._view import VIEW_PARAMETER, View

__all__ = [
    "DEFAULT_EXTENSION",
    "DEFAULT_MAX_DEPTH",
    "PLACEHOLDER_PREFIX",
    "VIEW_PARAMETER",
    "AfterRender",
    "AfterRenderListener",
    "BeforeRender",
    "BeforeRenderListener",
    "BlockStore",
    "BracesTemplateExecutor",
    "EnvironmentConfig",
    "EventDispatcher",
    "JinjaTemplateExecutor",
    "ListenerDispatcher",
    "RenderFrame",
    "RenderStack",
    "TemplateExecutor",
    "View",
    "ViewContext",
    "compose_parameters",
    "create_environment",
    "make_placeholder",
    "placeholder_signature",
    "replace_placeholders",
]
