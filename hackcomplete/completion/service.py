from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from lsprotocol.types import LogMessageParams, MessageType

from hackcomplete.completion.capture import CompletionCapture
from hackcomplete.completion.globals import GlobalCompleter
from hackcomplete.completion.results import CompletionResult, assemble_results
from hackcomplete.context.kind_filter import GLOBAL_COMPLETION_KINDS
from hackcomplete.context.session import CompletionSession
from hackcomplete.settings import CompletionSettings

if TYPE_CHECKING:
    from pygls.lsp.server import LanguageServer

    from hackcomplete.pipeline.hooks import PipelineHooks
    from hackcomplete.pipeline.host import TypecheckPipeline
    from hackcomplete.search.index import SearchIndex
    from hackcomplete.typechecker.environment import DeclProvider


class AutocompleteService:
    """
    Type-directed completion over one typechecker run.

    Usage:
        service = AutocompleteService(search_index)
        results = service.complete(pipeline, path, text_with_marker)

    Or, when the caller drives the pipeline itself:
        service.attach_hooks(pipeline.hooks)
        defs = pipeline.check(path, text_with_marker)
        results = service.get_results(pipeline.decls, defs.funs, defs.classes)
        service.detach_hooks(pipeline.hooks)
    """

    def __init__(
        self,
        search_index: SearchIndex,
        settings: CompletionSettings | None = None,
        server: LanguageServer | None = None,
        root: Path | None = None,
    ) -> None:
        self.search_index = search_index
        self.settings = settings or CompletionSettings()
        self.server = server
        self.root = root

        self.session = CompletionSession()
        self.capture = CompletionCapture(self.session)

    def attach_hooks(self, hooks: PipelineHooks) -> None:
        self.capture.attach(hooks)

    def detach_hooks(self, hooks: PipelineHooks) -> None:
        self.capture.detach(hooks)

    def get_results(
        self,
        decls: DeclProvider,
        content_funs: set[str],
        content_classes: set[str],
    ) -> list[CompletionResult]:
        """
        Resolve global names if needed and assemble the sorted results.

        Args:
            decls: Declarations of the checked program
            content_funs: Functions declared in the edited buffer
            content_classes: Classes declared in the edited buffer
        """
        if self.session.kind in GLOBAL_COMPLETION_KINDS:
            GlobalCompleter(
                self.session,
                decls,
                self.search_index,
                search_limit=self.settings.search_limit,
            ).complete(content_funs, content_classes)

        return assemble_results(
            self.session,
            decls,
            max_depth=self.settings.max_match_depth,
            root=self.root,
        )

    def complete(
        self, pipeline: TypecheckPipeline, path: Path, text: str
    ) -> list[CompletionResult]:
        """
        Run the pipeline over `text` (which carries the marker) and return
        the completions at the marker.

        Typechecker diagnostics produced meanwhile are discarded. Hooks are
        always detached afterwards, even if the run fails.
        """
        self.attach_hooks(pipeline.hooks)
        try:
            with pipeline.errors.ignored():
                defs = pipeline.check(path, text)
                results = self.get_results(pipeline.decls, defs.funs, defs.classes)
        finally:
            self.detach_hooks(pipeline.hooks)

        if self.server:
            self.server.window_log_message(
                LogMessageParams(
                    type=MessageType.Log,
                    message=f"Autocomplete: {len(results)} results for {path.name}",
                )
            )
        return results
