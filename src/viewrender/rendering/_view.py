"""The view: resolves references and orchestrates renders."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Final, Self

from viewrender.exceptions import ExecutionError, ViewError
from viewrender.paths import Aliases, PathResolver, Theme
from viewrender.paths import localize as localize_path
from viewrender.utils import create_view_logger

from ._context import DEFAULT_EXTENSION, ViewContext, compose_parameters
from ._events import AfterRender, BeforeRender, ListenerDispatcher
from ._executor import JinjaTemplateExecutor
from ._placeholder import make_placeholder, placeholder_signature
from ._stack import DEFAULT_MAX_DEPTH

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from structlog.typing import FilteringBoundLogger

    from viewrender.config import ViewConfig
    from viewrender.paths import AliasResolver

    from ._events import EventDispatcher
    from ._executor import TemplateExecutor

__all__ = ["View"]

VIEW_PARAMETER: Final = "view"
"""Name under which executors receive the rendering view."""


def _is_file(path: Path) -> bool:
    return path.is_file()


class View:
    """Render template files by logical view reference.

    A render resolves the reference to a file, applies the theme, looks for a
    localized variant, publishes a before-render event, executes the template
    inside a render-stack frame, and publishes an after-render event. Nested
    renders issued from inside a template resolve relative references against
    the calling template's directory.

    A view owns its blocks and render stack. It is not safe to render through
    the same view from several threads at once; serialize access or use one
    view per thread.

    Example:
        view = View("/srv/app/views", theme=Theme({"/srv/app/views": "/srv/app/dark"}))
        view.default_parameters = {"site": "Example"}
        html = view.render("//site/index", {"title": "Home"})
    """

    __slots__: Final = (
        "_aliases",
        "_context",
        "_dispatcher",
        "_executor",
        "_file_exists",
        "_logger",
        "_placeholder_salt",
        "_placeholder_signature",
        "_renderers",
        "_resolver",
        "_theme",
    )

    _aliases: AliasResolver | None
    _context: ViewContext
    _dispatcher: EventDispatcher
    _executor: TemplateExecutor
    _file_exists: Callable[[Path], bool]
    _logger: FilteringBoundLogger
    _placeholder_salt: str
    _placeholder_signature: str
    _renderers: dict[str, TemplateExecutor]
    _resolver: PathResolver
    _theme: Theme

    def __init__(  # noqa: PLR0913
        self,
        base_path: str | Path,
        *,
        theme: Theme | None = None,
        dispatcher: EventDispatcher | None = None,
        executor: TemplateExecutor | None = None,
        renderers: Mapping[str, TemplateExecutor] | None = None,
        aliases: AliasResolver | None = None,
        file_exists: Callable[[Path], bool] | None = None,
        logger: FilteringBoundLogger | None = None,
        default_extension: str = DEFAULT_EXTENSION,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        """Initialize the view.

        Args:
            base_path: Directory ``//`` references resolve against. Expanded
                through ``aliases`` when it starts with ``@``.
            theme: Path substitution rules. Defaults to no theming.
            dispatcher: Receives before/after render events.
            executor: Default template executor. Defaults to Jinja2.
            renderers: Executors keyed by file extension (without the dot).
            aliases: Alias resolver for ``@alias/...`` references.
            file_exists: File existence check used for fallback extensions,
                theme overrides and locale lookup. Defaults to ``Path.is_file``.
            logger: Structured logger. Defaults to WARNING-level JSON
                logs on stderr.
            default_extension: Extension appended to references without one.
            max_depth: Maximum render nesting depth.
        """
        base = str(base_path)
        if aliases is not None:
            base = aliases.get(base)

        self._aliases = aliases
        self._context = ViewContext(
            base_path=Path(base),
            default_extension=default_extension,
            max_depth=max_depth,
        )
        self._theme = theme if theme is not None else Theme()
        self._dispatcher = dispatcher if dispatcher is not None else ListenerDispatcher()
        self._executor = executor if executor is not None else JinjaTemplateExecutor()
        self._renderers = {
            extension.lstrip(".").lower(): renderer
            for extension, renderer in (renderers or {}).items()
        }
        self._file_exists = file_exists if file_exists is not None else _is_file
        self._resolver = PathResolver(
            self._context, aliases=aliases, file_exists=self._file_exists
        )
        self._logger = logger if logger is not None else create_view_logger()
        self._placeholder_salt = ""
        self._placeholder_signature = placeholder_signature("")

    @classmethod
    def from_config(
        cls,
        config: ViewConfig,
        *,
        dispatcher: EventDispatcher | None = None,
        executor: TemplateExecutor | None = None,
        renderers: Mapping[str, TemplateExecutor] | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> Self:
        """Build a view from loaded configuration.

        Theme paths may use aliases; they are expanded before the theme is
        built.
        """
        settings = config.view
        if logger is None:
            logger = create_view_logger(
                level=config.logging.level.value,
                log_format=config.logging.format.value,  # type: ignore[arg-type]
                log_file=config.logging.file,
            )
        aliases = Aliases(config.aliases)
        theme = Theme(
            {
                aliases.get(source): aliases.get(target)
                for source, target in config.theme.path_map.items()
            }
        )
        view = cls(
            settings.base_path,
            theme=theme,
            dispatcher=dispatcher,
            executor=executor,
            renderers=renderers,
            aliases=aliases,
            logger=logger,
            default_extension=settings.default_extension,
            max_depth=settings.max_depth,
        )
        view.fallback_extension = settings.fallback_extension
        view.default_parameters = settings.default_parameters
        view.language = settings.language
        view.source_language = settings.source_language
        view.placeholder_salt = settings.placeholder_salt
        return view

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def context(self) -> ViewContext:
        """The rendering state owned by this view."""
        return self._context

    @property
    def base_path(self) -> Path:
        """Directory ``//`` references resolve against."""
        return self._context.base_path

    @property
    def theme(self) -> Theme:
        return self._theme

    @property
    def aliases(self) -> AliasResolver | None:
        return self._aliases

    @property
    def default_extension(self) -> str:
        """Extension appended to references without one."""
        return self._context.default_extension

    @default_extension.setter
    def default_extension(self, extension: str) -> None:
        self._context.default_extension = extension.lstrip(".")

    @property
    def fallback_extension(self) -> str | None:
        """Extension tried when the default-extension file does not exist."""
        return self._context.fallback_extension

    @fallback_extension.setter
    def fallback_extension(self, extension: str | None) -> None:
        if extension:
            extension = extension.lstrip(".")
        self._context.fallback_extension = extension or None

    @property
    def default_parameters(self) -> dict[str, object]:
        """Parameters passed to every render (a copy)."""
        return dict(self._context.default_parameters)

    @default_parameters.setter
    def default_parameters(self, parameters: Mapping[str, object]) -> None:
        self._context.default_parameters = dict(parameters)

    @property
    def language(self) -> str | None:
        """Target locale for template lookup."""
        return self._context.language

    @language.setter
    def language(self, language: str | None) -> None:
        self._context.language = language

    @property
    def source_language(self) -> str | None:
        """Locale the unlocalized templates are written in."""
        return self._context.source_language

    @source_language.setter
    def source_language(self, language: str | None) -> None:
        self._context.source_language = language

    @property
    def placeholder_salt(self) -> str:
        return self._placeholder_salt

    @placeholder_salt.setter
    def placeholder_salt(self, salt: str) -> None:
        self._placeholder_salt = salt
        self._placeholder_signature = placeholder_signature(salt)

    @property
    def placeholder_signature(self) -> str:
        """Signature derived from the placeholder salt."""
        return self._placeholder_signature

    @property
    def depth(self) -> int:
        """Current render nesting depth (0 between top-level renders)."""
        return self._context.stack.depth

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self, view: str, parameters: Mapping[str, object] | None = None) -> str:
        """Render a view by reference.

        Args:
            view: ``//path`` (from the base path), ``/path`` (from the entry
                view's directory), ``@alias/path``, or a path relative to the
                view currently rendering.
            parameters: Parameters merged over the default parameters.

        Returns:
            The rendered output.

        Raises:
            InvalidReferenceError: If the reference cannot be resolved.
            ExecutionError: If the template executor fails.
            RenderDepthError: If renders nest deeper than ``max_depth``.
        """
        requested, file = self._locate(view)
        return self._render_resolved(file, parameters, requested_file=requested)

    def render_file(
        self, file: str | Path, parameters: Mapping[str, object] | None = None
    ) -> str:
        """Render a template file directly, skipping resolution and theming.

        Raises:
            ExecutionError: If the template executor fails.
            RenderDepthError: If renders nest deeper than ``max_depth``.
        """
        file = Path(file)
        return self._render_resolved(
            self.localize(file), parameters, requested_file=file
        )

    def resolve(self, view: str) -> Path:
        """Return the file ``render`` would execute for ``view``.

        Resolves the reference, applies the theme when the themed file
        exists, then picks the localized variant.

        Raises:
            InvalidReferenceError: If the reference cannot be resolved.
        """
        return self._locate(view)[1]

    def apply_theme(self, file: str | Path) -> Path:
        """Return the themed counterpart of ``file`` if it exists, else ``file``."""
        file = Path(file)
        themed = self._theme.apply(file)
        if themed == file:
            return file
        if not self._file_exists(themed):
            self._logger.debug(
                "theme_override_missing", requested=str(file), file=str(themed)
            )
            return file
        self._logger.debug("theme_applied", requested=str(file), file=str(themed))
        return themed

    def find_view_file(self, view: str) -> Path:
        """Resolve a view reference against the current render stack."""
        stack = self._context.stack
        if not stack:
            return self._resolver.resolve(view, None)
        return self._resolver.resolve(
            view, stack.current_dir(), root_dir=stack.root_dir()
        )

    def localize(
        self,
        file: str | Path,
        language: str | None = None,
        source_language: str | None = None,
    ) -> Path:
        """Return the localized variant of ``file`` if one exists.

        Falls back to the view's language settings; when either locale is
        unset the file is returned unchanged.
        """
        file = Path(file)
        language = language if language is not None else self._context.language
        if source_language is None:
            source_language = self._context.source_language
        if language is None or source_language is None:
            return file

        localized = localize_path(
            file, language, source_language, file_exists=self._file_exists
        )
        if localized != file:
            self._logger.debug(
                "locale_fallback_applied",
                file=str(file),
                localized=str(localized),
                language=language,
            )
        return localized

    def get_view_file(self) -> Path | None:
        """The file currently executing, or None outside a render."""
        frame = self._context.stack.current
        return frame.file if frame is not None else None

    def get_requested_view_file(self) -> Path | None:
        """The un-themed file requested by the current render, or None."""
        frame = self._context.stack.current
        if frame is None:
            return None
        return frame.requested_file or frame.file

    def _locate(self, view: str) -> tuple[Path, Path]:
        requested = self.find_view_file(view)
        return requested, self.localize(self.apply_theme(requested))

    def _render_resolved(
        self,
        file: Path,
        parameters: Mapping[str, object] | None,
        *,
        requested_file: Path,
    ) -> str:
        merged = compose_parameters(self._context.default_parameters, parameters)

        before = self._dispatcher.before_render(BeforeRender(file=file, parameters=merged))
        if before.stopped:
            self._logger.debug("render_short_circuited", file=str(file))
            return before.output
        merged = dict(before.parameters)

        executor = self._executor_for(file)
        try:
            with self._context.stack.frame(file, merged, requested_file=requested_file):
                output = executor.execute(file, {VIEW_PARAMETER: self, **merged})
        except ViewError:
            raise
        except Exception as e:
            self._logger.exception("render_failed", file=str(file), depth=self.depth)
            msg = f"Failed to render view file '{file}': {e}"
            raise ExecutionError(msg, file=file, cause=e) from e

        after = self._dispatcher.after_render(
            AfterRender(file=file, parameters=merged, result=output)
        )
        self._logger.debug("view_rendered", file=str(file), depth=self.depth)
        return after.result

    def _executor_for(self, file: Path) -> TemplateExecutor:
        return self._renderers.get(file.suffix.lstrip(".").lower(), self._executor)

    # -------------------------------------------------------------------------
    # Blocks
    # -------------------------------------------------------------------------

    def set_block(self, block_id: str, content: str) -> None:
        """Store content under ``block_id``, replacing any previous value."""
        self._context.blocks.set(block_id, content)

    def get_block(self, block_id: str) -> str:
        """Return a block's content.

        Raises:
            BlockNotFoundError: If the block is not set.
        """
        return self._context.blocks.get(block_id)

    def has_block(self, block_id: str) -> bool:
        return self._context.blocks.has(block_id)

    def remove_block(self, block_id: str) -> None:
        """Delete a block.

        Raises:
            BlockNotFoundError: If the block is not set.
        """
        self._context.blocks.remove(block_id)

    # -------------------------------------------------------------------------
    # Placeholders
    # -------------------------------------------------------------------------

    def placeholder(self, name: str) -> str:
        """Return a cache-busting placeholder signed with the current salt."""
        return make_placeholder(name, self._placeholder_signature)
