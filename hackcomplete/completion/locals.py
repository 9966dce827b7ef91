from __future__ import annotations

from typing import TYPE_CHECKING, Mapping

from hackcomplete.typechecker.types import LoclTy, Pos

if TYPE_CHECKING:
    from hackcomplete.context.session import CompletionSession
    from hackcomplete.typechecker.environment import TypingEnvironment


# Name of the implicit receiver inside instance methods
THIS = "$this"


def record_locals(
    session: CompletionSession, locals_: Mapping[str, tuple[Pos, int]]
) -> None:
    """Keep name -> identifier for every local in scope at the marker."""
    session.local_vars = {name: ident for name, (_, ident) in locals_.items()}


def collect_local_candidates(
    session: CompletionSession, env: TypingEnvironment
) -> None:
    """
    Emit the recorded locals with their current types.

    Any previous candidates are dropped first: the typechecker may visit
    the same marker more than once (loop bodies are checked to a fixpoint)
    and only the last visit counts.
    """
    session.results = []
    for name, ident in session.local_vars.items():
        session.add_result(name, LoclTy(env.get_local(ident)))

    self_ty = env.get_self()
    if not env.is_static() and not self_ty.reason.is_none():
        session.add_result(THIS, LoclTy(self_ty))
