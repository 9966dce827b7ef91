from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from hackcomplete.typechecker.types import AnyTy, FunTy, Ty

if TYPE_CHECKING:
    from hackcomplete.completion.results import CompletionResult
    from hackcomplete.typechecker.environment import TypingEnvironment

DEFAULT_MAX_MATCH_DEPTH = 32


def matches_expected_type(
    expected: Ty | None,
    env: TypingEnvironment | None,
    ty: Ty,
    max_depth: int = DEFAULT_MAX_MATCH_DEPTH,
) -> bool:
    """
    Check whether a candidate of type `ty` fits the expected type.

    A function fits if it is itself a subtype of the expected type or if
    one of its (nested) return types is. Against `_` everything fits, so
    such matches are not reported. `max_depth` bounds the walk through
    return types.
    """
    if expected is None or env is None:
        return False

    depth = 0
    while True:
        if isinstance(expected, AnyTy) or isinstance(ty, AnyTy):
            return False
        if env.is_sub_type(ty, expected):
            return True
        if not isinstance(ty, FunTy) or depth >= max_depth:
            return False
        ty = ty.fun.ret
        depth += 1


def result_sort_key(result: CompletionResult) -> tuple[bool, str]:
    return (not result.expected_ty, result.name)


def sort_results(results: Iterable[CompletionResult]) -> list[CompletionResult]:
    """Expected-type matches first, then by name."""
    return sorted(results, key=result_sort_key)
