"""The command-line interface for viewrender."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from viewrender.config import ConfigError, ViewConfig, load_config
from viewrender.exceptions import ViewError
from viewrender.rendering import View, placeholder_signature

from ._shared import ExitCode, exit_with_error, parse_parameters

APP_HELP = "Render template files by logical view reference."

ConfigOption = Annotated[
    Path | None, Parameter(name="--config", help="Path to config file")
]
BasePathOption = Annotated[
    Path | None,
    Parameter(name="--base-path", help="Directory // references resolve against"),
]
LanguageOption = Annotated[
    str | None, Parameter(name="--language", help="Target locale, e.g. de-DE")
]
SourceLanguageOption = Annotated[
    str | None,
    Parameter(name="--source-language", help="Locale of the unlocalized templates"),
]


def _load(
    config_path: Path | None,
    base_path: Path | None,
    error_console: Console,
) -> ViewConfig:
    try:
        config = load_config(config_path)
    except FileNotFoundError as e:
        exit_with_error(
            f"Config file not found: {e.filename or config_path}",
            ExitCode.LOAD_ERROR,
            console=error_console,
        )
    except ConfigError as e:
        exit_with_error(str(e), ExitCode.LOAD_ERROR, console=error_console)

    if base_path is not None:
        settings = config.view.model_copy(update={"base_path": str(base_path)})
        config = config.model_copy(update={"view": settings})
    return config


def _build_view(
    config: ViewConfig,
    language: str | None,
    source_language: str | None,
) -> View:
    view = View.from_config(config)
    if language is not None:
        view.language = language
    if source_language is not None:
        view.source_language = source_language
    return view


def register_commands(app: App, error_console: Console) -> None:
    """Attach the viewrender commands to ``app``."""

    @app.command(name="render")
    def _render(  # pyright: ignore[reportUnusedFunction]
        reference: str,
        /,
        *,
        param: Annotated[
            list[str] | None,
            Parameter(
                name=["--param", "-p"],
                help="Render parameter as key=value (repeatable)",
            ),
        ] = None,
        config: ConfigOption = None,
        base_path: BasePathOption = None,
        language: LanguageOption = None,
        source_language: SourceLanguageOption = None,
    ) -> None:
        """Render a view and print the output

        Args:
            reference: View reference, e.g. //site/index or @views/site/index.
            param: Parameters passed to the template as key=value.
            config: Explicit path to config file.
            base_path: Override the configured base path.
            language: Override the target locale.
            source_language: Override the source locale.
        """
        try:
            parameters = parse_parameters(param)
        except ValueError as e:
            exit_with_error(str(e), ExitCode.USAGE_ERROR, console=error_console)

        loaded = _load(config, base_path, error_console)
        view = _build_view(loaded, language, source_language)
        try:
            output = view.render(reference, parameters)
        except ViewError as e:
            exit_with_error(str(e), ExitCode.VIEW_ERROR, console=error_console)

        print(output, end="")
        raise SystemExit(ExitCode.SUCCESS)

    @app.command(name="resolve")
    def _resolve(  # pyright: ignore[reportUnusedFunction]
        reference: str,
        /,
        *,
        config: ConfigOption = None,
        base_path: BasePathOption = None,
        language: LanguageOption = None,
        source_language: SourceLanguageOption = None,
    ) -> None:
        """Print the file a view reference renders

        The path is resolved, themed and localized the same way ``render``
        does it, without executing the template.

        Args:
            reference: View reference, e.g. //site/index or @views/site/index.
            config: Explicit path to config file.
            base_path: Override the configured base path.
            language: Override the target locale.
            source_language: Override the source locale.
        """
        loaded = _load(config, base_path, error_console)
        view = _build_view(loaded, language, source_language)
        try:
            file = view.resolve(reference)
        except ViewError as e:
            exit_with_error(str(e), ExitCode.VIEW_ERROR, console=error_console)

        print(file)
        raise SystemExit(ExitCode.SUCCESS)

    @app.command(name="signature")
    def _signature(  # pyright: ignore[reportUnusedFunction]
        salt: str,
        /,
    ) -> None:
        """Print the placeholder signature for a salt

        Args:
            salt: Placeholder salt.
        """
        print(placeholder_signature(salt))
        raise SystemExit(ExitCode.SUCCESS)


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    """Create the viewrender CLI application."""
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="viewrender",
        help=APP_HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )
    register_commands(app, error_console)
    return app


app = create_app()


def main() -> None:
    """Default entrypoint for the `viewrender` CLI."""
    app = create_app()
    app()


if __name__ == "__main__":
    main()
