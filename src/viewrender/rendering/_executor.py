"""Template executors.

An executor turns a template file plus parameters into output. The view
decides *which* file runs and with what parameters; executors only run it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Final, Protocol, cast, runtime_checkable

from jinja2 import BaseLoader, Environment, TemplateNotFound

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping


@runtime_checkable
class TemplateExecutor(Protocol):
    """Executes one template file and returns its output."""

    def execute(self, file: Path, parameters: Mapping[str, object]) -> str:
        """Render ``file`` with ``parameters``.

        Any exception raised here is wrapped in
        :class:`~viewrender.exceptions.ExecutionError` by the view.
        """
        ...


@dataclass(slots=True, frozen=True)
class EnvironmentConfig:
    """Configuration for the Jinja2 Environment.

    Attributes:
        autoescape: Enable autoescaping. Off by default because nested
            renders return plain strings that would be escaped twice.
        trim_blocks: Remove first newline after a block tag.
        lstrip_blocks: Strip leading whitespace before block tags.
        keep_trailing_newline: Preserve trailing newline in templates.
    """

    autoescape: bool = False
    trim_blocks: bool = False
    lstrip_blocks: bool = False
    keep_trailing_newline: bool = True


class _AbsolutePathLoader(BaseLoader):
    """Jinja2 loader whose template names are absolute file paths."""

    def get_source(
        self, environment: Environment, template: str
    ) -> tuple[str, str, Callable[[], bool]]:
        path = Path(template)
        if not path.is_file():
            raise TemplateNotFound(template)
        source = path.read_text(encoding="utf-8")
        mtime = path.stat().st_mtime
        return source, str(path), lambda: path.is_file() and path.stat().st_mtime == mtime


def create_environment(*, config: EnvironmentConfig | None = None) -> Environment:
    """Create a Jinja2 Environment that loads templates by absolute path."""
    if config is None:
        config = EnvironmentConfig()

    return Environment(
        loader=_AbsolutePathLoader(),
        autoescape=config.autoescape,  # noqa: S701
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
        keep_trailing_newline=config.keep_trailing_newline,
    )


class JinjaTemplateExecutor:
    """Execute templates with Jinja2.

    Templates receive the rendering view as ``view``, so partials are
    rendered with ``{{ view.render("sub") }}`` and blocks shared with
    ``{% set _ = view.set_block("title", "Home") %}`` and
    ``{{ view.get_block("title") }}``.
    """

    __slots__: Final = ("_env",)

    _env: Environment

    def __init__(
        self,
        env: Environment | None = None,
        *,
        config: EnvironmentConfig | None = None,
    ) -> None:
        self._env = env if env is not None else create_environment(config=config)

    @property
    def environment(self) -> Environment:
        """The underlying Jinja2 environment."""
        return self._env

    def execute(self, file: Path, parameters: Mapping[str, object]) -> str:
        template = self._env.get_template(str(file))
        return cast("str", template.render(dict(parameters)))


class BracesTemplateExecutor:
    """Execute ``{name}`` placeholder templates with ``str.format_map``.

    For simple substitution without Jinja2 features. Unknown placeholders
    raise ``KeyError``.
    """

    __slots__: Final = ()

    def execute(self, file: Path, parameters: Mapping[str, object]) -> str:
        return file.read_text(encoding="utf-8").format_map(dict(parameters))
