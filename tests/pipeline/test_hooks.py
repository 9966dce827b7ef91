"""
Tests for PipelineHooks: registration, gating and dispatch order.
"""
import pytest

from fakes import make_pos, prim
from hackcomplete.pipeline.hooks import PipelineHooks
from hackcomplete.typechecker.types import (
    ClassRef,
    ClassRefKind,
    FunParam,
    PositionedName,
)

NAME = PositionedName(make_pos(), "fooAUTO332")


@pytest.fixture
def hooks():
    hooks = PipelineHooks()
    hooks.auto_complete = True
    return hooks


def test_hook_registration(hooks):
    """Test that every kind of hook can be registered."""
    noop = lambda *args: None

    hooks.attach_id_hook(noop)
    hooks.attach_smethod_hook(noop)
    hooks.attach_cmethod_hook(noop)
    hooks.attach_lvar_typing_hook(noop)
    hooks.attach_fun_call_hook(noop)
    hooks.attach_new_id_hook(noop)
    hooks.attach_lvar_naming_hook(noop)
    hooks.attach_hint_hook(noop)

    assert hooks.hook_count() == 8


def test_hooks_run_in_registration_order(hooks, env):
    """Test that multiple hooks run in registration order."""
    execution_order = []

    hooks.attach_id_hook(lambda env, name: execution_order.append(1))
    hooks.attach_id_hook(lambda env, name: execution_order.append(2))
    hooks.attach_id_hook(lambda env, name: execution_order.append(3))

    hooks.run_id_hooks(env, NAME)

    assert execution_order == [1, 2, 3]


def test_hooks_gated_by_auto_complete(env):
    """Test that nothing runs while completion is off."""
    hooks = PipelineHooks()
    calls = []
    hooks.attach_id_hook(lambda env, name: calls.append("id"))
    hooks.attach_hint_hook(lambda name: calls.append("hint"))
    hooks.attach_new_id_hook(lambda cid, env: calls.append("new"))

    hooks.run_id_hooks(env, NAME)
    hooks.run_hint_hooks(NAME)
    hooks.run_new_id_hooks(ClassRef(ClassRefKind.STATIC), env)

    assert calls == []


def test_hooks_receive_arguments(hooks, env):
    """Test that dispatch passes the pipeline's arguments through."""
    received = {}

    def on_call(params, arg_positions, env):
        received["call"] = (params, arg_positions, env)

    def on_naming(name, locals_):
        received["naming"] = (name, locals_)

    hooks.attach_fun_call_hook(on_call)
    hooks.attach_lvar_naming_hook(on_naming)

    params = [FunParam("$a", prim("int"))]
    args = [make_pos(1, 2, 3)]
    locals_ = {"$x": (make_pos(), 1)}
    hooks.run_fun_call_hooks(params, args, env)
    hooks.run_lvar_naming_hooks(NAME, locals_)

    assert received["call"] == (params, args, env)
    assert received["naming"] == (NAME, locals_)


def test_member_hooks_are_separate(hooks, env):
    """Test that static and instance access reach different hooks."""
    calls = []
    hooks.attach_smethod_hook(lambda *args: calls.append("static"))
    hooks.attach_cmethod_hook(lambda *args: calls.append("instance"))

    hooks.run_cmethod_hooks(None, NAME, env, ClassRef(ClassRefKind.EXPR))

    assert calls == ["instance"]


def test_remove_typing_hooks_keeps_naming_hooks(hooks):
    """Test that typing and naming hooks are cleared independently."""
    noop = lambda *args: None
    hooks.attach_id_hook(noop)
    hooks.attach_fun_call_hook(noop)
    hooks.attach_hint_hook(noop)

    hooks.remove_all_typing_hooks()
    assert hooks.hook_count() == 1

    hooks.remove_all_naming_hooks()
    assert hooks.hook_count() == 0


def test_remove_all_hooks(hooks):
    """Test that remove_all_hooks clears both phases."""
    noop = lambda *args: None
    hooks.attach_lvar_typing_hook(noop)
    hooks.attach_lvar_naming_hook(noop)

    hooks.remove_all_hooks()

    assert hooks.hook_count() == 0


def test_hook_errors_propagate(hooks, env):
    """Test that a failing hook stops dispatch and reaches the caller."""
    calls = []

    def failing_hook(env, name):
        raise ValueError("Hook failed")

    hooks.attach_id_hook(failing_hook)
    hooks.attach_id_hook(lambda env, name: calls.append("after"))

    with pytest.raises(ValueError, match="Hook failed"):
        hooks.run_id_hooks(env, NAME)

    assert calls == []
