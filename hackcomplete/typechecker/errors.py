from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from hackcomplete.typechecker.types import Pos


@dataclass(frozen=True)
class Diagnostic:
    """A typechecker error report."""

    pos: Pos
    code: int
    message: str


class TypingErrors:
    """
    Diagnostic sink the host typechecker reports into.

    While inside `ignored()`, reported diagnostics are dropped. Completion
    runs over a buffer the user is still editing, so errors elsewhere in the
    file must not reach the completion client.
    """

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []
        self._ignore_depth = 0

    @property
    def is_ignoring(self) -> bool:
        return self._ignore_depth > 0

    def add(self, diagnostic: Diagnostic) -> None:
        if self.is_ignoring:
            return
        self._diagnostics.append(diagnostic)

    def get_all(self) -> list[Diagnostic]:
        return list(self._diagnostics)

    def clear(self) -> None:
        self._diagnostics.clear()

    @contextmanager
    def ignored(self) -> Iterator[None]:
        self._ignore_depth += 1
        try:
            yield
        finally:
            self._ignore_depth -= 1
