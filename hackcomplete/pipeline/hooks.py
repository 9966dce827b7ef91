"""
Pipeline Hooks

Extension points the host typechecker calls while naming and typing a
buffer. Completion attaches callbacks here for the duration of one request.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Mapping, Sequence

from hackcomplete.typechecker.types import (
    ClassInfo,
    ClassRef,
    FunParam,
    Pos,
    PositionedName,
)

if TYPE_CHECKING:
    from hackcomplete.typechecker.environment import TypingEnvironment


# Type aliases for hook signatures
IdHook = Callable[["TypingEnvironment", PositionedName], None]
MemberHook = Callable[
    [ClassInfo, PositionedName, "TypingEnvironment", ClassRef], None
]
LvarTypingHook = Callable[[PositionedName, "TypingEnvironment"], None]
FunCallHook = Callable[[Sequence[FunParam], Sequence[Pos], "TypingEnvironment"], None]
NewIdHook = Callable[[ClassRef, "TypingEnvironment"], None]
LvarNamingHook = Callable[[PositionedName, Mapping[str, tuple[Pos, int]]], None]
HintHook = Callable[[PositionedName], None]


class PipelineHooks:
    """
    Hook registry owned by the host pipeline.

    Design Principles:
    - Hooks run in registration order
    - Nothing runs unless `auto_complete` is set, so plain typechecking
      pays nothing for the extension points
    - Naming and typing hooks are kept apart; `remove_all_hooks()` clears both

    Usage:
        hooks = PipelineHooks()
        hooks.auto_complete = True
        hooks.attach_id_hook(on_identifier)

        # Inside the typechecker, when an identifier is typed
        hooks.run_id_hooks(env, PositionedName(pos, name))
    """

    def __init__(self) -> None:
        self.auto_complete = False

        # Typing phase
        self._id_hooks: list[IdHook] = []
        self._smethod_hooks: list[MemberHook] = []
        self._cmethod_hooks: list[MemberHook] = []
        self._lvar_typing_hooks: list[LvarTypingHook] = []
        self._fun_call_hooks: list[FunCallHook] = []
        self._new_id_hooks: list[NewIdHook] = []

        # Naming phase
        self._lvar_naming_hooks: list[LvarNamingHook] = []
        self._hint_hooks: list[HintHook] = []

    # ===== Registration =====

    def attach_id_hook(self, hook: IdHook) -> None:
        self._id_hooks.append(hook)

    def attach_smethod_hook(self, hook: MemberHook) -> None:
        """Static member access: `C::name`."""
        self._smethod_hooks.append(hook)

    def attach_cmethod_hook(self, hook: MemberHook) -> None:
        """Instance member access: `$obj->name`."""
        self._cmethod_hooks.append(hook)

    def attach_lvar_typing_hook(self, hook: LvarTypingHook) -> None:
        self._lvar_typing_hooks.append(hook)

    def attach_fun_call_hook(self, hook: FunCallHook) -> None:
        """
        Called once the arguments of a call have been typed.

        Receives the callee's declared parameters and the positions of the
        argument expressions actually used.
        """
        self._fun_call_hooks.append(hook)

    def attach_new_id_hook(self, hook: NewIdHook) -> None:
        self._new_id_hooks.append(hook)

    def attach_lvar_naming_hook(self, hook: LvarNamingHook) -> None:
        """Receives every local in scope: name -> (position, identifier)."""
        self._lvar_naming_hooks.append(hook)

    def attach_hint_hook(self, hook: HintHook) -> None:
        self._hint_hooks.append(hook)

    def remove_all_typing_hooks(self) -> None:
        self._id_hooks.clear()
        self._smethod_hooks.clear()
        self._cmethod_hooks.clear()
        self._lvar_typing_hooks.clear()
        self._fun_call_hooks.clear()
        self._new_id_hooks.clear()

    def remove_all_naming_hooks(self) -> None:
        self._lvar_naming_hooks.clear()
        self._hint_hooks.clear()

    def remove_all_hooks(self) -> None:
        self.remove_all_typing_hooks()
        self.remove_all_naming_hooks()

    def hook_count(self) -> int:
        return sum(
            len(hooks)
            for hooks in (
                self._id_hooks,
                self._smethod_hooks,
                self._cmethod_hooks,
                self._lvar_typing_hooks,
                self._fun_call_hooks,
                self._new_id_hooks,
                self._lvar_naming_hooks,
                self._hint_hooks,
            )
        )

    # ===== Dispatch (called by the pipeline) =====

    def run_id_hooks(self, env: TypingEnvironment, name: PositionedName) -> None:
        if not self.auto_complete:
            return
        for hook in self._id_hooks:
            hook(env, name)

    def run_smethod_hooks(
        self,
        class_info: ClassInfo,
        name: PositionedName,
        env: TypingEnvironment,
        cid: ClassRef,
    ) -> None:
        if not self.auto_complete:
            return
        for hook in self._smethod_hooks:
            hook(class_info, name, env, cid)

    def run_cmethod_hooks(
        self,
        class_info: ClassInfo,
        name: PositionedName,
        env: TypingEnvironment,
        cid: ClassRef,
    ) -> None:
        if not self.auto_complete:
            return
        for hook in self._cmethod_hooks:
            hook(class_info, name, env, cid)

    def run_lvar_typing_hooks(
        self, name: PositionedName, env: TypingEnvironment
    ) -> None:
        if not self.auto_complete:
            return
        for hook in self._lvar_typing_hooks:
            hook(name, env)

    def run_fun_call_hooks(
        self,
        params: Sequence[FunParam],
        arg_positions: Sequence[Pos],
        env: TypingEnvironment,
    ) -> None:
        if not self.auto_complete:
            return
        for hook in self._fun_call_hooks:
            hook(params, arg_positions, env)

    def run_new_id_hooks(self, cid: ClassRef, env: TypingEnvironment) -> None:
        if not self.auto_complete:
            return
        for hook in self._new_id_hooks:
            hook(cid, env)

    def run_lvar_naming_hooks(
        self, name: PositionedName, locals_: Mapping[str, tuple[Pos, int]]
    ) -> None:
        if not self.auto_complete:
            return
        for hook in self._lvar_naming_hooks:
            hook(name, locals_)

    def run_hint_hooks(self, name: PositionedName) -> None:
        if not self.auto_complete:
            return
        for hook in self._hint_hooks:
            hook(name)
