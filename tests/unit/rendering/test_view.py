from collections.abc import Callable, Mapping
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from viewrender.exceptions import (
    BlockNotFoundError,
    ExecutionError,
    InvalidReferenceError,
    RenderDepthError,
)
from viewrender.paths import Aliases, Theme
from viewrender.rendering import (
    VIEW_PARAMETER,
    BeforeRender,
    ListenerDispatcher,
    View,
    placeholder_signature,
)

Body = Callable[["View", Mapping[str, object]], str]


class RecordingExecutor:
    """Executor that records calls and runs per-file Python callables."""

    def __init__(self, bodies: Mapping[str, Body] | None = None) -> None:
        self.bodies: dict[str, Body] = dict(bodies or {})
        self.calls: list[tuple[Path, dict[str, object]]] = []

    def execute(self, file: Path, parameters: Mapping[str, object]) -> str:
        self.calls.append((file, dict(parameters)))
        body = self.bodies.get(str(file))
        if body is None:
            return f"<{file.name}>"
        view = parameters[VIEW_PARAMETER]
        assert isinstance(view, View)
        return body(view, parameters)


def _view(executor: RecordingExecutor, **kwargs: object) -> View:
    return View("/views", executor=executor, file_exists=lambda _: False, **kwargs)  # pyright: ignore[reportArgumentType]


class TestRender:
    def test_renders_root_reference(self) -> None:
        executor = RecordingExecutor()
        view = _view(executor)

        assert view.render("//site/index") == "<index.html>"
        assert executor.calls[0][0] == Path("/views/site/index.html")

    def test_relative_reference_without_render_raises(self) -> None:
        view = _view(RecordingExecutor())

        with pytest.raises(InvalidReferenceError):
            _ = view.render("index")

    def test_executor_receives_view_and_parameters(self) -> None:
        executor = RecordingExecutor()
        view = _view(executor)

        _ = view.render("//index", {"title": "Home"})

        _, params = executor.calls[0]
        assert params[VIEW_PARAMETER] is view
        assert params["title"] == "Home"

    def test_explicit_parameters_override_defaults(self) -> None:
        executor = RecordingExecutor()
        view = _view(executor)
        view.default_parameters = {"param": "default", "site": "Example"}

        _ = view.render("//index", {"param": "local"})

        _, params = executor.calls[0]
        assert params["param"] == "local"
        assert params["site"] == "Example"

    def test_default_parameters_copy_is_returned(self) -> None:
        view = _view(RecordingExecutor())
        view.default_parameters = {"site": "Example"}

        defaults = view.default_parameters
        defaults["site"] = "Changed"

        assert view.default_parameters == {"site": "Example"}

    def test_nested_render_resolves_relative_to_parent(self) -> None:
        executor = RecordingExecutor(
            {"/views/site/index.html": lambda view, _: view.render("nav")}
        )
        view = _view(executor)

        assert view.render("//site/index") == "<nav.html>"
        assert executor.calls[1][0] == Path("/views/site/nav.html")

    def test_single_slash_resolves_against_entry_view(self) -> None:
        executor = RecordingExecutor(
            {
                "/views/site/index.html": lambda view, _: view.render("parts/nav"),
                "/views/site/parts/nav.html": lambda view, _: view.render("/footer"),
            }
        )
        view = _view(executor)

        _ = view.render("//site/index")

        assert executor.calls[-1][0] == Path("/views/site/footer.html")

    def test_stack_empty_after_render(self) -> None:
        depths: list[int] = []
        executor = RecordingExecutor(
            {"/views/index.html": lambda view, _: str(depths.append(view.depth))}
        )
        view = _view(executor)

        _ = view.render("//index")

        assert depths == [1]
        assert view.depth == 0

    def test_render_file_skips_resolution(self) -> None:
        executor = RecordingExecutor()
        view = _view(executor, theme=Theme({"/views": "/themed"}))

        assert view.render_file("/views/raw.html") == "<raw.html>"
        assert executor.calls[0][0] == Path("/views/raw.html")

    def test_alias_reference(self) -> None:
        executor = RecordingExecutor()
        view = _view(executor, aliases=Aliases({"@layouts": "/app/layouts"}))

        _ = view.render("@layouts/main")

        assert executor.calls[0][0] == Path("/app/layouts/main.html")

    def test_alias_base_path(self) -> None:
        aliases = Aliases({"@views": "/srv/views"})
        view = View("@views", aliases=aliases, executor=RecordingExecutor())

        assert view.base_path == Path("/srv/views")


class TestTheme:
    def test_executes_themed_file(self) -> None:
        existing = {Path("/themes/dark/site/index.html")}
        executor = RecordingExecutor()
        view = View(
            "/views",
            executor=executor,
            theme=Theme({"/views": "/themes/dark"}),
            file_exists=existing.__contains__,
        )

        _ = view.render("//site/index")

        assert executor.calls[0][0] == Path("/themes/dark/site/index.html")

    def test_missing_override_executes_requested_file(self) -> None:
        executor = RecordingExecutor()
        view = _view(executor, theme=Theme({"/views": "/themes/dark"}))

        _ = view.render("//site/index")

        assert executor.calls[0][0] == Path("/views/site/index.html")

    def test_resolve_matches_rendered_file(self) -> None:
        existing = {Path("/themes/dark/faq.html"), Path("/themes/dark/de/faq.html")}
        executor = RecordingExecutor()
        view = View(
            "/views",
            executor=executor,
            theme=Theme({"/views": "/themes/dark"}),
            file_exists=existing.__contains__,
        )
        view.language = "de"
        view.source_language = "en"

        resolved = view.resolve("//faq")
        _ = view.render("//faq")

        assert resolved == Path("/themes/dark/de/faq.html")
        assert executor.calls[0][0] == resolved

    def test_apply_theme_logs_substitution(self, mocker: MockerFixture) -> None:
        logger = mocker.Mock()
        existing = {Path("/themes/dark/index.html")}
        view = View(
            "/views",
            theme=Theme({"/views": "/themes/dark"}),
            file_exists=existing.__contains__,
            logger=logger,
        )

        assert view.apply_theme("/views/index.html") == Path("/themes/dark/index.html")
        assert view.apply_theme("/views/other.html") == Path("/views/other.html")
        logger.debug.assert_any_call(
            "theme_applied",
            requested="/views/index.html",
            file="/themes/dark/index.html",
        )

    def test_relative_references_use_requested_directory(self) -> None:
        seen: dict[str, Path | None] = {}

        def base(view: View, _: Mapping[str, object]) -> str:
            seen["file"] = view.get_view_file()
            seen["requested"] = view.get_requested_view_file()
            return view.render("sub")

        existing = {Path("/theme1/base.html")}
        executor = RecordingExecutor({"/theme1/base.html": base})
        view = View(
            "/views",
            executor=executor,
            theme=Theme({"/views/base.html": "/theme1/base.html"}),
            file_exists=existing.__contains__,
        )

        _ = view.render("//base")

        assert seen == {
            "file": Path("/theme1/base.html"),
            "requested": Path("/views/base.html"),
        }
        assert executor.calls[1][0] == Path("/views/sub.html")

    def test_view_file_is_none_outside_render(self) -> None:
        view = _view(RecordingExecutor())

        assert view.get_view_file() is None
        assert view.get_requested_view_file() is None


class TestLocalize:
    def test_no_language_returns_file(self) -> None:
        view = _view(RecordingExecutor())

        assert view.localize("/views/faq.html") == Path("/views/faq.html")

    def test_render_uses_localized_file(self) -> None:
        existing = {Path("/views/de/faq.html")}
        executor = RecordingExecutor()
        view = View("/views", executor=executor, file_exists=existing.__contains__)
        view.language = "de-DE"
        view.source_language = "en-US"

        _ = view.render("//faq")

        assert executor.calls[0][0] == Path("/views/de/faq.html")

    def test_explicit_locales_override_settings(self) -> None:
        existing = {Path("/views/fr/faq.html")}
        view = View("/views", executor=RecordingExecutor(), file_exists=existing.__contains__)
        view.language = "de-DE"
        view.source_language = "en-US"

        assert view.localize("/views/faq.html", "fr-FR") == Path("/views/fr/faq.html")


class TestEvents:
    def test_before_render_short_circuits(self) -> None:
        executor = RecordingExecutor()
        dispatcher = ListenerDispatcher()
        _ = dispatcher.on_before_render(lambda event: event.stop("maintenance"))
        view = _view(executor, dispatcher=dispatcher)

        assert view.render("//index") == "maintenance"
        assert executor.calls == []
        assert view.depth == 0

    def test_before_render_replaces_parameters(self) -> None:
        executor = RecordingExecutor()
        dispatcher = ListenerDispatcher()

        @dispatcher.on_before_render
        def add_user(event: BeforeRender) -> BeforeRender:
            return event.with_parameters({**event.parameters, "user": "ada"})

        view = _view(executor, dispatcher=dispatcher)

        _ = view.render("//index")

        assert executor.calls[0][1]["user"] == "ada"

    def test_before_render_sees_merged_parameters(self) -> None:
        seen: list[Mapping[str, object]] = []
        dispatcher = ListenerDispatcher()
        _ = dispatcher.on_before_render(lambda event: seen.append(event.parameters))
        view = _view(RecordingExecutor(), dispatcher=dispatcher)
        view.default_parameters = {"site": "Example"}

        _ = view.render("//index", {"title": "Home"})

        assert seen == [{"site": "Example", "title": "Home"}]

    def test_after_render_overrides_output(self) -> None:
        dispatcher = ListenerDispatcher()
        _ = dispatcher.on_after_render(lambda event: event.with_result("overridden"))
        view = _view(RecordingExecutor(), dispatcher=dispatcher)

        assert view.render("//index") == "overridden"

    def test_after_render_not_called_on_failure(self) -> None:
        seen: list[str] = []
        dispatcher = ListenerDispatcher()
        _ = dispatcher.on_after_render(lambda event: seen.append(event.result))

        def fail(view: View, _: Mapping[str, object]) -> str:
            raise RuntimeError("boom")

        view = _view(RecordingExecutor({"/views/index.html": fail}), dispatcher=dispatcher)

        with pytest.raises(ExecutionError):
            _ = view.render("//index")

        assert seen == []


class TestFailures:
    def test_executor_error_is_wrapped_and_frame_popped(
        self, mocker: MockerFixture
    ) -> None:
        def fail(view: View, _: Mapping[str, object]) -> str:
            raise RuntimeError("boom")

        logger = mocker.Mock()
        view = _view(RecordingExecutor({"/views/index.html": fail}), logger=logger)

        with pytest.raises(ExecutionError) as exc_info:
            _ = view.render("//index")

        assert isinstance(exc_info.value.cause, RuntimeError)
        assert exc_info.value.file == Path("/views/index.html")
        assert view.depth == 0
        logger.exception.assert_called_once()
        assert logger.exception.call_args.args == ("render_failed",)

    def test_render_works_after_failure(self) -> None:
        def fail(view: View, _: Mapping[str, object]) -> str:
            raise RuntimeError("boom")

        view = _view(RecordingExecutor({"/views/broken.html": fail}))

        with pytest.raises(ExecutionError):
            _ = view.render("//broken")

        assert view.render("//index") == "<index.html>"

    def test_nested_failure_is_not_wrapped_twice(self) -> None:
        def fail(view: View, _: Mapping[str, object]) -> str:
            raise RuntimeError("boom")

        executor = RecordingExecutor(
            {
                "/views/index.html": lambda view, _: view.render("broken"),
                "/views/broken.html": fail,
            }
        )
        view = _view(executor)

        with pytest.raises(ExecutionError) as exc_info:
            _ = view.render("//index")

        assert exc_info.value.file == Path("/views/broken.html")
        assert view.depth == 0

    def test_self_recursion_hits_max_depth(self) -> None:
        executor = RecordingExecutor(
            {"/views/loop.html": lambda view, _: view.render("loop")}
        )
        view = _view(executor, max_depth=5)

        with pytest.raises(RenderDepthError) as exc_info:
            _ = view.render("//loop")

        assert exc_info.value.max_depth == 5
        assert len(executor.calls) == 5
        assert view.depth == 0


class TestBlocks:
    def test_block_set_in_child_visible_in_parent(self) -> None:
        def parent(view: View, _: Mapping[str, object]) -> str:
            body = view.render("child")
            return f"{view.get_block('title')}|{body}"

        def child(view: View, _: Mapping[str, object]) -> str:
            view.set_block("title", "Child title")
            return "body"

        executor = RecordingExecutor(
            {"/views/parent.html": parent, "/views/child.html": child}
        )
        view = _view(executor)

        assert view.render("//parent") == "Child title|body"
        assert view.has_block("title")

    def test_remove_block(self) -> None:
        view = _view(RecordingExecutor())
        view.set_block("title", "Home")

        view.remove_block("title")

        assert not view.has_block("title")
        with pytest.raises(BlockNotFoundError):
            _ = view.get_block("title")


class TestPlaceholders:
    def test_placeholder_uses_salt_signature(self) -> None:
        view = _view(RecordingExecutor())
        view.placeholder_salt = "release-42"

        signature = placeholder_signature("release-42")
        assert view.placeholder_signature == signature
        assert view.placeholder("csrf") == f"<![CDATA[VIEW-CSRF-{signature}]]>"


class TestSettings:
    def test_default_extension_setter(self) -> None:
        executor = RecordingExecutor()
        view = _view(executor)
        view.default_extension = ".tpl"

        _ = view.render("//index")

        assert executor.calls[0][0] == Path("/views/index.tpl")

    def test_fallback_extension(self) -> None:
        executor = RecordingExecutor()
        view = _view(executor)
        view.fallback_extension = "txt"

        _ = view.render("//index")

        assert executor.calls[0][0] == Path("/views/index.txt")

    def test_renderer_selected_by_extension(self) -> None:
        default = RecordingExecutor()
        text = RecordingExecutor()
        view = _view(default, renderers={".TXT": text})

        _ = view.render("//notes.txt")
        _ = view.render("//index")

        assert [call[0].name for call in text.calls] == ["notes.txt"]
        assert [call[0].name for call in default.calls] == ["index.html"]
