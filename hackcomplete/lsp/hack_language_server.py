from __future__ import annotations

from pygls.lsp.server import LanguageServer

from hackcomplete.completion.service import AutocompleteService
from hackcomplete.lsp.capabilities.capabilities import CapabilityManager
from hackcomplete.pipeline.host import TypecheckPipeline
from hackcomplete.settings import CompletionSettings
from hackcomplete.workspace.symbols_cache import SymbolsCache


class HackLanguageServer(LanguageServer):
    """
    Language Server exposing type-directed Hack completion.

    Attributes:
        pipeline: Host typechecker; completion is disabled without one
        symbols_cache: Workspace symbol index used for global names
        autocomplete: Completion service bound to the symbol index
    """

    def __init__(
        self,
        name: str,
        version: str,
        pipeline: TypecheckPipeline | None = None,
    ):
        super().__init__(name, version)

        self.pipeline = pipeline
        self.settings = CompletionSettings()
        self.symbols_cache: SymbolsCache | None = None
        self.autocomplete: AutocompleteService | None = None
        self.capability_manager: CapabilityManager | None = None
