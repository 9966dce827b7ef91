from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class SearchResultType(Enum):
    CLASS = "class"
    FUNCTION = "function"
    CONSTANT = "constant"
    TYPEDEF = "typedef"


@dataclass(frozen=True)
class SearchResult:
    """A symbol index hit; `name` is fully qualified."""

    name: str
    result_type: SearchResultType


class SearchIndex(ABC):
    """Symbol search collaborator used for global identifier completion."""

    @abstractmethod
    def query(self, prefix: str, limit: int = 100) -> list[SearchResult]:
        """Return at most `limit` best matches for `prefix`."""
        pass
