"""
Global identifier completion.

Runs after the pipeline, once the names declared by the buffer itself
are known. Candidates come from the buffer first, then from the symbol
index, then (for functions) from a second index query for the
global-namespace fallback prefix.
"""

from __future__ import annotations

from dataclasses import replace
from typing import AbstractSet

from hackcomplete.completion.markers import SUFFIX_LEN, strip_suffix
from hackcomplete.context.kind_filter import (
    describe_class_kind,
    should_complete_class,
    should_complete_fun,
)
from hackcomplete.context.session import CompletionSession, RawCandidate
from hackcomplete.context.types import CompletionKind
from hackcomplete.errors import InvariantViolation
from hackcomplete.search.index import SearchIndex, SearchResultType
from hackcomplete.typechecker.environment import DeclProvider
from hackcomplete.typechecker.types import (
    ApplyTy,
    ClassInfo,
    DeclTy,
    FunTy,
    Pos,
    Reason,
    make_ft,
)
from hackcomplete.utils.names import NAMESPACE_SEPARATOR, strip_all_ns, strip_ns

DEFAULT_SEARCH_LIMIT = 100


def global_fallback_prefix(
    gname: str, marker_pos: Pos | None, kind: CompletionKind | None
) -> str | None:
    """
    Prefix to search in the global namespace, or None if fallback is moot.

    An unqualified function call falls back to the global namespace when
    the current namespace has no such function. By now naming has fully
    qualified `gname`, so whether the user wrote a qualified name is
    recovered from the length of the marked source token: qualification
    only ever prepends, so the tail of `gname` that is as long as the typed
    token shows what was actually written.

    Args:
        gname: Qualified, marker-stripped name (no leading separator)
        marker_pos: Span of the marked token in the source
        kind: Completion kind of the session

    Returns:
        The unqualified prefix, or None when fallback does not apply
    """
    if not should_complete_fun(kind) or marker_pos is None:
        return None
    typed_len = marker_pos.length() - SUFFIX_LEN
    start = len(gname) - typed_len
    if start < 0 or NAMESPACE_SEPARATOR in gname[start:]:
        return None
    return strip_all_ns(gname)


def constructor_type(class_info: ClassInfo) -> FunTy:
    """
    Function type of `new C(...)`, returning an instance of C.

    Classes without a constructor get a synthesized zero-argument one. A
    declared constructor keeps its parameters but its return type is
    replaced by the class type.
    """
    pos = class_info.pos
    reason = Reason(pos)
    return_ty = ApplyTy(reason, class_info.name)

    if class_info.construct is None:
        return FunTy(reason, make_ft(pos, [], return_ty))

    ty = class_info.construct.ty
    if not isinstance(ty, FunTy):
        raise InvariantViolation(
            f"Constructor of {class_info.name} is not a function: "
            f"{type(ty).__name__}"
        )
    return FunTy(ty.reason, replace(ty.fun, ret=return_ty))


class GlobalCompleter:
    """Resolves IDENTIFIER, NEW_INSTANCE and TYPE_HINT completions."""

    def __init__(
        self,
        session: CompletionSession,
        decls: DeclProvider,
        search_index: SearchIndex,
        search_limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> None:
        self.session = session
        self.decls = decls
        self.search_index = search_index
        self.search_limit = search_limit

    def complete(self, content_funs: set[str], content_classes: set[str]) -> None:
        """
        Add global candidates to the session.

        Args:
            content_funs: Functions declared in the edited buffer
            content_classes: Classes declared in the edited buffer
        """
        gname = strip_suffix(strip_ns(self.session.global_name))
        gname_gns = global_fallback_prefix(
            gname, self.session.marker_pos, self.session.kind
        )

        # Names declared in the buffer first
        no_names: frozenset[str] = frozenset()
        for name in sorted(content_classes):
            self._add(self._on_class(name, gname, seen=no_names))
        for name in sorted(content_funs):
            self._add(self._on_function(name, gname, gname_gns, seen=no_names))

        # Index hits, skipping what was already emitted
        seen_funs = set(content_funs)
        for hit in self.search_index.query(gname, self.search_limit):
            if hit.result_type == SearchResultType.CLASS:
                self._add(self._on_class(hit.name, gname, seen=content_classes))
            elif hit.result_type == SearchResultType.FUNCTION:
                candidate = self._on_function(
                    hit.name, gname, gname_gns, seen=seen_funs
                )
                if candidate is not None:
                    seen_funs.add(hit.name)
                self._add(candidate)

        if gname_gns is not None and gname_gns != gname:
            for hit in self.search_index.query(gname_gns, self.search_limit):
                if hit.result_type == SearchResultType.FUNCTION:
                    candidate = self._on_function(
                        hit.name, gname, gname_gns, seen=seen_funs
                    )
                    if candidate is not None:
                        seen_funs.add(hit.name)
                    self._add(candidate)

    def _add(self, candidate: RawCandidate | None) -> None:
        if candidate is not None:
            self.session.results.append(candidate)

    def _on_class(
        self, name: str, gname: str, seen: AbstractSet[str]
    ) -> RawCandidate | None:
        if name in seen:
            return None
        if not strip_ns(name).startswith(gname):
            return None

        class_info = self.decls.get_class(name)
        if class_info is None:
            return None
        if not should_complete_class(self.session.kind, class_info.kind):
            return None

        short_name = strip_ns(name)
        if (
            self.session.env is not None
            and self.session.kind == CompletionKind.NEW_INSTANCE
        ):
            return RawCandidate(short_name, DeclTy(constructor_type(class_info)))

        ty = ApplyTy(Reason(class_info.pos), name)
        return RawCandidate(
            short_name, DeclTy(ty), describe_class_kind(class_info.kind)
        )

    def _on_function(
        self,
        name: str,
        gname: str,
        gname_gns: str | None,
        seen: AbstractSet[str],
    ) -> RawCandidate | None:
        if name in seen:
            return None
        if not should_complete_fun(self.session.kind):
            return None

        stripped_name = strip_ns(name)
        matches_gname = stripped_name.startswith(gname)
        matches_gname_gns = gname_gns is not None and stripped_name.startswith(
            gname_gns
        )
        if not (matches_gname or matches_gname_gns):
            return None

        fun = self.decls.get_fun(name)
        if fun is None:
            return None
        return RawCandidate(stripped_name, DeclTy(FunTy(Reason(fun.pos), fun)))
