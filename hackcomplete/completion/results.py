"""
Completion results as sent to the client, and their assembly from the
raw candidates captured during the pipeline run.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from hackcomplete.completion.ranking import (
    DEFAULT_MAX_MATCH_DEPTH,
    matches_expected_type,
    sort_results,
)
from hackcomplete.typechecker.environment import localize_phase
from hackcomplete.typechecker.types import (
    NO_REASON,
    AnyTy,
    ArityKind,
    FunParam,
    FunTy,
    FunType,
    Pos,
)

if TYPE_CHECKING:
    from hackcomplete.context.session import CompletionSession, RawCandidate
    from hackcomplete.typechecker.environment import DeclProvider, TypingEnvironment


@dataclass(frozen=True)
class FunctionParam:
    name: str
    type: str
    variadic: bool = False

    def to_json(self) -> dict:
        return {"name": self.name, "type": self.type, "variadic": self.variadic}


@dataclass(frozen=True)
class FunctionDetails:
    params: tuple[FunctionParam, ...]
    return_type: str
    min_arity: int

    def to_json(self) -> dict:
        return {
            "min_arity": self.min_arity,
            "return_type": self.return_type,
            "params": [p.to_json() for p in self.params],
        }


@dataclass(frozen=True)
class CompletionResult:
    name: str
    type: str
    pos: Pos
    expected_ty: bool = False
    func_details: FunctionDetails | None = None

    def to_json(self) -> dict:
        return {
            "name": self.name,
            "type": self.type,
            "pos": self.pos.to_json(),
            "func_details": (
                self.func_details.to_json() if self.func_details else None
            ),
            "expected_ty": self.expected_ty,
        }


def results_to_json(results: list[CompletionResult]) -> list[dict]:
    return [r.to_json() for r in results]


def function_details(env: TypingEnvironment, fun: FunType) -> FunctionDetails:
    """
    Build call-signature details for a function-typed candidate.

    A variadic tail is listed as one extra parameter flagged `variadic`;
    a bare `...` gets an empty name and type `_`.
    """

    def to_param(param: FunParam, variadic: bool = False) -> FunctionParam:
        return FunctionParam(
            name=param.name or "",
            type=env.print_type(param.ty),
            variadic=variadic,
        )

    params = [to_param(p) for p in fun.params]
    if fun.arity.kind == ArityKind.ELLIPSIS:
        params.append(to_param(FunParam(None, AnyTy(NO_REASON)), variadic=True))
    elif fun.arity.kind == ArityKind.VARIADIC and fun.arity.variadic is not None:
        params.append(to_param(fun.arity.variadic, variadic=True))

    return FunctionDetails(
        params=tuple(params),
        return_type=env.print_type(fun.ret),
        min_arity=fun.arity.min,
    )


def _finalize(
    candidate: RawCandidate,
    session: CompletionSession,
    env: TypingEnvironment,
    max_depth: int,
    root: Path | None,
) -> CompletionResult:
    ty = localize_phase(env, candidate.ty)
    desc = candidate.desc if candidate.desc is not None else env.print_type(ty)
    details = function_details(env, ty.fun) if isinstance(ty, FunTy) else None
    return CompletionResult(
        name=candidate.name,
        type=desc,
        pos=ty.reason.to_pos().to_absolute(root),
        expected_ty=matches_expected_type(
            session.expected_type, session.env, ty, max_depth
        ),
        func_details=details,
    )


def assemble_results(
    session: CompletionSession,
    decls: DeclProvider,
    max_depth: int = DEFAULT_MAX_MATCH_DEPTH,
    root: Path | None = None,
) -> list[CompletionResult]:
    """
    Turn the session's raw candidates into sorted client results.

    Does not modify the session, so assembling twice gives the same list.

    Args:
        session: Session after the pipeline run (and global completion)
        decls: Used for an empty environment if none was captured
        max_depth: Bound for the expected-type walk through return types
        root: Root against which relative positions are made absolute
    """
    env = session.env if session.env is not None else decls.empty_env()
    results = [
        _finalize(candidate, session, env, max_depth, root)
        for candidate in session.results
    ]
    return sort_results(results)
