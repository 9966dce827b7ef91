"""
Type-directed completion capability.

Marks the cursor in the current buffer, runs the host typechecker with
the completion hooks attached, and turns the ranked results into LSP
completion items.
"""

from __future__ import annotations

from pathlib import Path

from lsprotocol.types import (
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionParams,
)

from hackcomplete.completion.markers import insert_marker
from hackcomplete.completion.results import CompletionResult
from hackcomplete.lsp.capabilities.capabilities import CompletionCapability

CLASS_DESCRIPTION_KINDS: dict[str, CompletionItemKind] = {
    "class": CompletionItemKind.Class,
    "abstract class": CompletionItemKind.Class,
    "interface": CompletionItemKind.Interface,
    "trait": CompletionItemKind.Module,
    "enum": CompletionItemKind.Enum,
}


def completion_item_kind(result: CompletionResult) -> CompletionItemKind:
    if result.func_details is not None:
        return CompletionItemKind.Function
    if result.name.startswith("$"):
        return CompletionItemKind.Variable
    return CLASS_DESCRIPTION_KINDS.get(result.type, CompletionItemKind.Field)


def to_completion_item(result: CompletionResult, rank: int) -> CompletionItem:
    """
    Convert a ranked result to an LSP item.

    `sort_text` keeps the engine's order (expected-type matches first);
    matches are also preselected.
    """
    return CompletionItem(
        label=result.name,
        kind=completion_item_kind(result),
        detail=result.type,
        sort_text=f"{rank:05d}",
        preselect=result.expected_ty or None,
        data=result.to_json(),
    )


class TypeDirectedCompletionCapability(CompletionCapability):
    """Completes identifiers, members and locals from typechecker state."""

    @property
    def name(self) -> str:
        return "type_completion"

    @property
    def description(self) -> str:
        return "Complete names at the cursor, ranked by the expected type"

    async def can_handle(self, params: CompletionParams) -> bool:
        return (
            self.server.pipeline is not None
            and self.server.autocomplete is not None
        )

    async def complete(self, params: CompletionParams) -> CompletionList:
        doc = self.server.workspace.get_text_document(params.text_document.uri)
        text = insert_marker(
            list(doc.lines), params.position.line, params.position.character
        )
        file_path = Path(params.text_document.uri.replace("file://", ""))

        results = self.server.autocomplete.complete(  # pyright: ignore
            self.server.pipeline, file_path, text  # pyright: ignore
        )

        return CompletionList(
            is_incomplete=False,
            items=[to_completion_item(r, rank) for rank, r in enumerate(results)],
        )
