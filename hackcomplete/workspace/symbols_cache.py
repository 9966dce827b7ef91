"""
SymbolsCache: in-memory symbol index for the workspace.

Scans Hack/PHP source files for namespaced class-like and function
declarations and answers prefix queries for global completion.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Mapping

from lsprotocol.types import LogMessageParams, MessageType

from hackcomplete.search.index import SearchIndex, SearchResult, SearchResultType
from hackcomplete.utils.names import strip_all_ns, strip_ns

if TYPE_CHECKING:
    from pygls.lsp.server import LanguageServer


SKIPPED_DIRS = {".git", "node_modules", "vendor", ".hackcomplete", "__pycache__"}


@dataclass(frozen=True)
class SymbolDefinition:
    """A declared symbol; `name` is fully qualified with a leading separator."""

    name: str
    result_type: SearchResultType
    file_path: Path | None
    line_number: int

    @property
    def short_name(self) -> str:
        return strip_all_ns(self.name)


class SymbolsCache(SearchIndex):
    """Symbol index built by scanning workspace files."""

    def __init__(
        self,
        workspace_root: Path,
        extensions: tuple[str, ...] = (".php", ".hack", ".hh"),
        server: LanguageServer | None = None,
    ) -> None:
        self.workspace_root = workspace_root
        self.extensions = extensions
        self.server = server
        self._symbols: dict[str, SymbolDefinition] = {}

        self._namespace_pattern = re.compile(r"^[ \t]*namespace\s+([\w\\]+)\s*[;{]", re.MULTILINE)
        self._class_pattern = re.compile(
            r"^[ \t]*(?:abstract\s+|final\s+)*"       # optional modifiers
            r"(class|interface|trait|enum)\s+(\w+)",  # kind and name
            re.MULTILINE,
        )
        self._function_pattern = re.compile(
            r"^(?:async\s+)?function\s+(\w+)\s*[<(]",  # top-level functions only
            re.MULTILINE,
        )

    def scan(self) -> None:
        """Scan every source file under the workspace root."""
        self._symbols.clear()

        for root, dirs, files in os.walk(self.workspace_root):
            dirs[:] = [d for d in dirs if d not in SKIPPED_DIRS]
            for file in files:
                if file.endswith(self.extensions):
                    self._parse_file(Path(root) / file)

    def _parse_file(self, file_path: Path) -> None:
        try:
            content = file_path.read_text(encoding="utf-8", errors="ignore")
        except OSError as e:
            self._log(MessageType.Warning, f"Error reading {file_path}: {e}")
            return

        for definition in self.parse_source(content, file_path):
            self._symbols[definition.name] = definition

    def parse_source(
        self, content: str, file_path: Path | None = None
    ) -> list[SymbolDefinition]:
        """Extract declarations from source text."""
        namespace = ""
        namespace_match = self._namespace_pattern.search(content)
        if namespace_match:
            namespace = strip_ns(namespace_match.group(1).strip())

        def qualify(name: str) -> str:
            return f"\\{namespace}\\{name}" if namespace else f"\\{name}"

        def line_of(offset: int) -> int:
            return content[:offset].count("\n") + 1

        definitions = []
        for match in self._class_pattern.finditer(content):
            definitions.append(
                SymbolDefinition(
                    name=qualify(match.group(2)),
                    result_type=SearchResultType.CLASS,
                    file_path=file_path,
                    line_number=line_of(match.start()),
                )
            )
        for match in self._function_pattern.finditer(content):
            definitions.append(
                SymbolDefinition(
                    name=qualify(match.group(1)),
                    result_type=SearchResultType.FUNCTION,
                    file_path=file_path,
                    line_number=line_of(match.start()),
                )
            )
        return definitions

    def add(self, definition: SymbolDefinition) -> None:
        self._symbols[definition.name] = definition

    def get(self, name: str) -> SymbolDefinition | None:
        return self._symbols.get(name)

    def get_all(self) -> Mapping[str, SymbolDefinition]:
        return self._symbols

    def query(self, prefix: str, limit: int = 100) -> list[SearchResult]:
        """
        Find symbols whose qualified or short name starts with `prefix`.

        Exact-case matches on the short name rank first, then shorter names.
        """
        prefix_lower = prefix.lower()
        matches = [
            d
            for d in self._symbols.values()
            if strip_ns(d.name).lower().startswith(prefix_lower)
            or d.short_name.lower().startswith(prefix_lower)
        ]
        matches.sort(key=lambda d: (
            not d.short_name.startswith(prefix),
            len(d.short_name),
            d.name,
        ))
        return [SearchResult(d.name, d.result_type) for d in matches[:limit]]

    def invalidate_file(self, file_path: Path) -> None:
        """Drop entries from `file_path` and re-parse it if it still exists."""
        self._symbols = {
            name: d for name, d in self._symbols.items()
            if d.file_path != file_path
        }
        if file_path.exists() and file_path.name.endswith(self.extensions):
            self._parse_file(file_path)

    def _log(self, message_type: MessageType, message: str) -> None:
        if self.server:
            self.server.window_log_message(
                LogMessageParams(type=message_type, message=message)
            )
