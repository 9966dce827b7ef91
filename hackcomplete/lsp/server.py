from __future__ import annotations

from pathlib import Path

from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_SAVE,
    CompletionList,
    CompletionParams,
    DidSaveTextDocumentParams,
    LogMessageParams,
    MessageType,
)

from hackcomplete.completion.service import AutocompleteService
from hackcomplete.errors import HackCompleteError
from hackcomplete.lsp.capabilities.capabilities import CapabilityManager
from hackcomplete.lsp.hack_language_server import HackLanguageServer
from hackcomplete.pipeline.host import TypecheckPipeline
from hackcomplete.settings import load_settings
from hackcomplete.workspace.symbols_cache import SymbolsCache


def create_server(pipeline: TypecheckPipeline | None = None) -> HackLanguageServer:
    """
    Create a configured Language Server.

    Args:
        pipeline: Host typechecker used for completion runs. Without one
                  the server starts but returns no completions.
    """
    server = HackLanguageServer("hackcomplete", "0.1.0", pipeline=pipeline)

    @server.feature("initialize")
    async def initialize(ls: HackLanguageServer, params):
        """Load settings, index the workspace and set up capabilities."""
        workspace_root = None
        if params.root_uri:
            workspace_root = Path(params.root_uri.replace("file://", ""))

        try:
            ls.settings = load_settings(
                workspace_root, params.initialization_options
            )
        except HackCompleteError as e:
            ls.window_log_message(
                LogMessageParams(MessageType.Warning, f"Using default settings: {e}")
            )

        if workspace_root is not None:
            ls.symbols_cache = SymbolsCache(
                workspace_root, ls.settings.symbol_extensions, server=ls
            )
            ls.symbols_cache.scan()
            count = len(ls.symbols_cache.get_all())
            ls.window_log_message(
                LogMessageParams(MessageType.Info, f"Indexed {count} symbols")
            )
            ls.autocomplete = AutocompleteService(
                ls.symbols_cache, ls.settings, server=ls, root=workspace_root
            )

        if ls.pipeline is None:
            ls.window_log_message(
                LogMessageParams(
                    MessageType.Info,
                    "No typechecker pipeline configured; completion disabled",
                )
            )

        ls.capability_manager = CapabilityManager(ls)
        ls.capability_manager.register_all()

    @server.feature(TEXT_DOCUMENT_COMPLETION)
    async def completion(ls: HackLanguageServer, params: CompletionParams):
        if ls.capability_manager:
            return await ls.capability_manager.handle_completion(params)
        return CompletionList(is_incomplete=False, items=[])

    @server.feature(TEXT_DOCUMENT_DID_SAVE)
    async def did_save(ls: HackLanguageServer, params: DidSaveTextDocumentParams):
        """Keep the symbol index in sync with saved files."""
        if ls.symbols_cache:
            file_path = Path(params.text_document.uri.replace("file://", ""))
            ls.symbols_cache.invalidate_file(file_path)

    return server
