from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from hackcomplete.completion.markers import is_auto_complete_name
from hackcomplete.context.types import CompletionKind
from hackcomplete.typechecker.types import PhaseTy, Pos, Ty

if TYPE_CHECKING:
    from hackcomplete.typechecker.environment import TypingEnvironment


@dataclass(frozen=True)
class RawCandidate:
    """A candidate whose type has not been localized or rendered yet."""

    name: str
    ty: PhaseTy
    desc: str | None = None


@dataclass
class CompletionSession:
    """
    State of the single in-flight completion request.

    Hooks write into it while the typechecker runs over the buffer;
    result assembly reads it afterwards. `reset()` runs at the start and
    end of every request.
    """

    # Position of the token carrying the completion marker
    marker_pos: Pos | None = None

    # How the marked token is being completed
    kind: CompletionKind | None = None

    # Type required at the marker (argument position of a call); first wins
    expected_type: Ty | None = None

    # Environment captured when the marker was matched
    env: TypingEnvironment | None = None

    # Locals in scope at the marker: name -> local identifier
    local_vars: dict[str, int] = field(default_factory=dict)

    # Marked name as seen by the identifier/new/hint hooks
    global_name: str = ""

    # Candidates in emission order
    results: list[RawCandidate] = field(default_factory=list)

    def reset(self) -> None:
        self.marker_pos = None
        self.kind = None
        self.expected_type = None
        self.env = None
        self.local_vars = {}
        self.global_name = ""
        self.results = []

    def is_marker(self, name: str) -> bool:
        """
        Check whether `name` is the marked token.

        Once candidates have been recorded the marker is considered
        consumed, so later tokens cannot re-open the session.
        """
        if self.results:
            return False
        return is_auto_complete_name(name)

    def add_result(self, name: str, ty: PhaseTy, desc: str | None = None) -> None:
        self.results.append(RawCandidate(name=name, ty=ty, desc=desc))

    def set_expected_type(self, ty: Ty) -> None:
        if self.expected_type is None:
            self.expected_type = ty

    def allows_members(self) -> bool:
        return self.kind is None or self.kind == CompletionKind.CLASS_MEMBER
