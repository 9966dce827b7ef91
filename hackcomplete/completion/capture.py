"""
Completion capture.

Callbacks attached to the pipeline hooks for one completion request. Each
callback does nothing unless the token it is handed carries the completion
marker; when it does, it records the context into the session and, for
member and local completions, emits candidates right away. Global
identifier completion is deferred until after the pipeline run (see
`hackcomplete.completion.globals`).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Sequence

from hackcomplete.completion.locals import collect_local_candidates, record_locals
from hackcomplete.completion.members import member_types
from hackcomplete.context.session import CompletionSession
from hackcomplete.context.types import CompletionKind
from hackcomplete.typechecker.types import (
    NO_REASON,
    AnyTy,
    ClassInfo,
    ClassRef,
    ClassRefKind,
    DeclTy,
    FunParam,
    Pos,
    PositionedName,
)

if TYPE_CHECKING:
    from hackcomplete.pipeline.hooks import PipelineHooks
    from hackcomplete.typechecker.environment import TypingEnvironment


def is_target(target: Pos, pos: Pos) -> bool:
    """Whether the marker at `target` falls inside the expression at `pos`."""
    line, char_pos, _ = target.info()
    start_line, start_col, end_col = pos.info()
    return start_line == line and start_col <= char_pos and char_pos - 1 <= end_col


def argument_index(target: Pos, arg_positions: Sequence[Pos]) -> int | None:
    """Index of the call argument holding the marker; the last match wins."""
    index = None
    for i, pos in enumerate(arg_positions):
        if is_target(target, pos):
            index = i
    return index


class CompletionCapture:
    """Hook callbacks writing into a `CompletionSession`."""

    def __init__(self, session: CompletionSession) -> None:
        self.session = session

    # ===== Lifecycle =====

    def attach(self, hooks: PipelineHooks) -> None:
        """Reset the session and install every callback on `hooks`."""
        self.session.reset()
        hooks.auto_complete = True
        hooks.attach_id_hook(self.on_identifier_named)
        hooks.attach_smethod_hook(self.on_static_member_access)
        hooks.attach_cmethod_hook(self.on_instance_member_access)
        hooks.attach_lvar_typing_hook(self.on_local_variable_typed)
        hooks.attach_fun_call_hook(self.on_function_call_arguments)
        hooks.attach_new_id_hook(self.on_new_instance)
        hooks.attach_hint_hook(self.on_type_hint_named)
        hooks.attach_lvar_naming_hook(self.on_local_variable_named)

    def detach(self, hooks: PipelineHooks) -> None:
        self.session.reset()
        hooks.auto_complete = False
        hooks.remove_all_hooks()

    # ===== Global names =====

    def _capture_token(
        self,
        kind: CompletionKind,
        env: TypingEnvironment | None,
        name: PositionedName,
    ) -> None:
        if not self.session.is_marker(name.name):
            return
        self.session.env = env
        self.session.marker_pos = name.pos
        self.session.kind = kind
        self.session.global_name = name.name

    def on_identifier_named(
        self, env: TypingEnvironment, name: PositionedName
    ) -> None:
        self._capture_token(CompletionKind.IDENTIFIER, env, name)

    def on_type_hint_named(self, name: PositionedName) -> None:
        self._capture_token(CompletionKind.TYPE_HINT, None, name)

    def on_new_instance(self, cid: ClassRef, env: TypingEnvironment) -> None:
        if cid.kind == ClassRefKind.NAMED and cid.name is not None:
            self._capture_token(CompletionKind.NEW_INSTANCE, env, cid.name)

    # ===== Members =====

    def _on_member_access(
        self,
        is_static: bool,
        class_info: ClassInfo,
        name: PositionedName,
        env: TypingEnvironment,
        cid: ClassRef,
    ) -> None:
        if not self.session.is_marker(name.name):
            return
        if not self.session.allows_members():
            return
        self.session.env = env
        self.session.marker_pos = name.pos
        self.session.kind = CompletionKind.CLASS_MEMBER
        for member, ty in member_types(env, class_info, cid, is_static).items():
            self.session.add_result(member, DeclTy(ty))

    def on_static_member_access(
        self,
        class_info: ClassInfo,
        name: PositionedName,
        env: TypingEnvironment,
        cid: ClassRef,
    ) -> None:
        self._on_member_access(True, class_info, name, env, cid)

    def on_instance_member_access(
        self,
        class_info: ClassInfo,
        name: PositionedName,
        env: TypingEnvironment,
        cid: ClassRef,
    ) -> None:
        self._on_member_access(False, class_info, name, env, cid)

    # ===== Locals =====

    def on_local_variable_named(
        self, name: PositionedName, locals_: Mapping[str, tuple[Pos, int]]
    ) -> None:
        if not self.session.is_marker(name.name):
            return
        self.session.kind = CompletionKind.LOCAL_VARIABLE
        self.session.marker_pos = name.pos
        record_locals(self.session, locals_)

    def on_local_variable_typed(
        self, name: PositionedName, env: TypingEnvironment
    ) -> None:
        if self.session.marker_pos is None or name.pos != self.session.marker_pos:
            return
        self.session.env = env
        collect_local_candidates(self.session, env)

    # ===== Expected type =====

    def on_function_call_arguments(
        self,
        params: Sequence[FunParam],
        arg_positions: Sequence[Pos],
        env: TypingEnvironment,
    ) -> None:
        """
        Record the declared type of the argument slot holding the marker.

        The pipeline calls this after the arguments have been typed, so an
        inner call is seen before the call enclosing it and keeps its
        result.
        """
        target = self.session.marker_pos
        if target is None or self.session.expected_type is not None:
            return

        index = argument_index(target, arg_positions)
        if index is None:
            return
        if index < len(params):
            self.session.set_expected_type(params[index].ty)
        else:
            # More arguments than parameters: anything goes
            self.session.set_expected_type(AnyTy(NO_REASON))
