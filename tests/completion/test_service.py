"""
Tests for AutocompleteService.

Each test scripts what the typechecker would report through the hooks
while checking a buffer that carries the completion marker.
"""
from pathlib import Path
from unittest.mock import Mock

import pytest
from lsprotocol.types import LogMessageParams, MessageType

from fakes import (
    FakeDecls,
    FakeEnvironment,
    FakePipeline,
    FakeSearchIndex,
    class_info,
    fun,
    fun_type,
    function_hit,
    make_pos,
    prim,
)
from hackcomplete.completion.service import AutocompleteService
from hackcomplete.pipeline.host import FileDefinitions
from hackcomplete.settings import CompletionSettings
from hackcomplete.typechecker.errors import Diagnostic
from hackcomplete.typechecker.types import (
    ClassElt,
    ClassRef,
    ClassRefKind,
    FunParam,
    PositionedName,
)
from hackcomplete.workspace.symbols_cache import SymbolsCache

PATH = Path("/work/src/a.php")
MARKER_POS = make_pos(line=3, start=10, end=17)


@pytest.fixture
def server():
    """Create a mock server for testing."""
    server = Mock()
    server.window_log_message = Mock()
    return server


@pytest.fixture
def index():
    return FakeSearchIndex(
        {
            "my": [function_hit("\\myAlpha"), function_hit("\\myZed")],
        }
    )


@pytest.fixture
def decls(env):
    return FakeDecls(
        funs={
            "\\myAlpha": fun_type(ret=prim("string")),
            "\\myZed": fun_type(ret=prim("int")),
        },
        env=env,
    )


def test_member_completion(env, decls, index):
    """Members of the receiver are returned sorted by name."""
    info = class_info(
        "\\C",
        methods={"run": ClassElt(fun(ret=prim("int")))},
        props={"count": ClassElt(prim("int"))},
    )

    def script(pipeline):
        pipeline.hooks.run_cmethod_hooks(
            info,
            PositionedName(MARKER_POS, "AUTO332"),
            env,
            ClassRef(ClassRefKind.EXPR),
        )

    service = AutocompleteService(index)
    results = service.complete(FakePipeline(decls, script), PATH, "<?hh")

    assert [(r.name, r.type) for r in results] == [
        ("count", "int"),
        ("run", "(function(): int)"),
    ]
    assert index.queries == []


def test_argument_completion_prefers_expected_type(env, decls, index):
    """In f($a, myAUTO332) candidates of the second parameter's type rank first."""
    params = [FunParam("$a", prim("string")), FunParam("$b", prim("int"))]
    args = [make_pos(3, 5, 7), MARKER_POS]

    def script(pipeline):
        pipeline.hooks.run_id_hooks(env, PositionedName(MARKER_POS, "\\myAUTO332"))
        pipeline.hooks.run_fun_call_hooks(params, args, env)

    service = AutocompleteService(index)
    results = service.complete(FakePipeline(decls, script), PATH, "<?hh")

    assert [(r.name, r.expected_ty) for r in results] == [
        ("myZed", True),
        ("myAlpha", False),
    ]
    assert results[0].func_details.return_type == "int"


def test_buffer_definitions_are_not_duplicated(env, decls, index):
    """Functions declared in the buffer are listed once."""

    def script(pipeline):
        pipeline.hooks.run_id_hooks(env, PositionedName(MARKER_POS, "\\myAUTO332"))

    defs = FileDefinitions(funs={"\\myZed"})
    service = AutocompleteService(index)
    results = service.complete(FakePipeline(decls, script, defs), PATH, "<?hh")

    assert [r.name for r in results] == ["myAlpha", "myZed"]


def test_search_limit_from_settings(env, decls, index):
    """The configured search limit is passed to the index."""

    def script(pipeline):
        pipeline.hooks.run_id_hooks(env, PositionedName(MARKER_POS, "\\myAUTO332"))

    service = AutocompleteService(index, CompletionSettings(search_limit=1))
    results = service.complete(FakePipeline(decls, script), PATH, "<?hh")

    assert index.queries == [("my", 1)]
    assert [r.name for r in results] == ["myAlpha"]


def test_no_marker_no_results(decls, index):
    """A run that never meets the marker yields nothing."""
    service = AutocompleteService(index)
    results = service.complete(FakePipeline(decls, lambda pipeline: None), PATH, "<?hh")

    assert results == []
    assert index.queries == []


def test_diagnostics_are_discarded_during_completion(decls, index):
    """Errors reported while completing never reach the sink."""

    def script(pipeline):
        assert pipeline.errors.is_ignoring
        pipeline.errors.add(Diagnostic(make_pos(), 4110, "Invalid argument"))

    pipeline = FakePipeline(decls, script)
    AutocompleteService(index).complete(pipeline, PATH, "<?hh")

    assert pipeline.errors.get_all() == []
    assert not pipeline.errors.is_ignoring


def test_hooks_removed_after_run(env, decls, index):
    """Hooks are detached once the run completes."""

    def script(pipeline):
        assert pipeline.hooks.auto_complete
        pipeline.hooks.run_id_hooks(env, PositionedName(MARKER_POS, "\\myAUTO332"))

    pipeline = FakePipeline(decls, script)
    AutocompleteService(index).complete(pipeline, PATH, "<?hh")

    assert pipeline.hooks.auto_complete is False
    assert pipeline.hooks.hook_count() == 0


def test_hooks_removed_when_run_fails(decls, index):
    """A failing typechecker run still leaves the hooks detached."""

    def script(pipeline):
        raise RuntimeError("typechecker crashed")

    pipeline = FakePipeline(decls, script)
    service = AutocompleteService(index)

    with pytest.raises(RuntimeError):
        service.complete(pipeline, PATH, "<?hh")

    assert pipeline.hooks.hook_count() == 0
    assert not pipeline.errors.is_ignoring
    assert service.session.kind is None


def test_session_is_fresh_per_request(env, decls, index):
    """A second request does not see the first one's candidates."""
    locals_ = {"$x": (make_pos(1), 1)}
    local_env = FakeEnvironment(locals_={1: prim("int")})

    def locals_script(pipeline):
        name = PositionedName(MARKER_POS, "$AUTO332")
        pipeline.hooks.run_lvar_naming_hooks(name, locals_)
        pipeline.hooks.run_lvar_typing_hooks(name, local_env)

    service = AutocompleteService(index)
    first = service.complete(FakePipeline(decls, locals_script), PATH, "<?hh")
    second = service.complete(FakePipeline(decls, lambda pipeline: None), PATH, "<?hh")

    assert [r.name for r in first] == ["$x"]
    assert second == []


def test_logs_result_count(env, decls, index, server):
    """The result count is logged when a server is attached."""

    def script(pipeline):
        pipeline.hooks.run_id_hooks(env, PositionedName(MARKER_POS, "\\myAUTO332"))

    service = AutocompleteService(index, server=server)
    service.complete(FakePipeline(decls, script), PATH, "<?hh")

    server.window_log_message.assert_called_once_with(
        LogMessageParams(type=MessageType.Log, message="Autocomplete: 2 results for a.php")
    )


def test_results_use_workspace_root(env, decls, index):
    """Relative declaration positions are reported against the root."""

    def script(pipeline):
        pipeline.hooks.run_id_hooks(env, PositionedName(MARKER_POS, "\\myAUTO332"))

    service = AutocompleteService(index, root=Path("/work"))
    results = service.complete(FakePipeline(decls, script), PATH, "<?hh")

    assert all(r.pos.filename == str(Path("/work") / "test.php") for r in results)


def test_namespaced_function_from_workspace_index_listed_once(env, tmp_path):
    """An unqualified call inside a namespace lists each indexed function once."""
    (tmp_path / "lib.hack").write_text("<?hh\nnamespace NS;\n\nfunction myFunc(): void {}\n")
    symbols = SymbolsCache(tmp_path)
    symbols.scan()
    decls = FakeDecls(funs={"\\NS\\myFunc": fun_type()}, env=env)
    typed_pos = make_pos(line=3, start=10, end=10 + len("myFuAUTO332"))

    def script(pipeline):
        pipeline.hooks.run_id_hooks(env, PositionedName(typed_pos, "\\NS\\myFuAUTO332"))

    results = AutocompleteService(symbols).complete(FakePipeline(decls, script), PATH, "<?hh")

    assert [r.name for r in results] == ["NS\\myFunc"]
