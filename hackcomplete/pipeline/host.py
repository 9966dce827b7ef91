from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from hackcomplete.pipeline.hooks import PipelineHooks
from hackcomplete.typechecker.environment import DeclProvider
from hackcomplete.typechecker.errors import TypingErrors


@dataclass
class FileDefinitions:
    """Fully qualified names declared in the checked buffer."""

    funs: set[str] = field(default_factory=set)
    classes: set[str] = field(default_factory=set)


class TypecheckPipeline(ABC):
    """
    Host typechecker that runs naming and typing over one buffer.

    Implementations call into `self.hooks` at the extension points and
    report diagnostics into `self.errors`.
    """

    def __init__(self) -> None:
        self.hooks = PipelineHooks()
        self.errors = TypingErrors()

    @property
    @abstractmethod
    def decls(self) -> DeclProvider:
        """Declarations visible to the checked buffer."""
        pass

    @abstractmethod
    def check(self, path: Path, text: str) -> FileDefinitions:
        """
        Name and typecheck `text` as the contents of `path`.

        Returns the functions and classes the buffer itself declares.
        """
        pass
