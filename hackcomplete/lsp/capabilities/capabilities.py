"""
LSP Capabilities Manager

Feature handlers are plugins: each capability decides whether it can
answer a request, and the manager aggregates the answers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from lsprotocol.types import (
    CompletionList,
    CompletionParams,
    LogMessageParams,
    MessageType,
)

if TYPE_CHECKING:
    from hackcomplete.lsp.hack_language_server import HackLanguageServer


class Capability(ABC):
    """Base class for all LSP capability handlers."""

    def __init__(self, server: HackLanguageServer) -> None:
        self.server = server

    def register(self) -> None:
        """Hook for one-time setup when the manager registers capabilities."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this capability."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        pass

    @abstractmethod
    async def can_handle(self, params) -> bool:
        pass


class CompletionCapability(Capability):
    """Base class for completion capabilities."""

    @abstractmethod
    async def can_handle(self, params: CompletionParams) -> bool:
        pass

    @abstractmethod
    async def complete(self, params: CompletionParams) -> CompletionList:
        """
        Provide completion items.

        Only called if can_handle() returns True.
        """
        pass


class CapabilityManager:
    """
    Central manager for all LSP capabilities.

    Usage:
        manager = CapabilityManager(server)
        manager.register_all()
        items = await manager.handle_completion(params)
    """

    def __init__(
        self,
        server: HackLanguageServer,
        capabilities: dict[str, Capability] | None = None,
    ):
        self.server = server

        if capabilities is None:
            from hackcomplete.lsp.capabilities.type_completion import (
                TypeDirectedCompletionCapability,
            )

            capabilities = {
                "type_completion": TypeDirectedCompletionCapability(server),
            }

        self.capabilities = capabilities
        self._registered = False

    def register_all(self) -> None:
        if self._registered:
            return

        for capability in self.capabilities.values():
            capability.register()

        self._registered = True

    def get_capability(self, name: str) -> Capability | None:
        return self.capabilities.get(name)

    def get_capabilities_by_type(self, capability_type: type) -> list[Capability]:
        return [
            cap
            for cap in self.capabilities.values()
            if isinstance(cap, capability_type)
        ]

    async def handle_completion(self, params: CompletionParams) -> CompletionList:
        """
        Aggregate completion items from all capable handlers.

        A failing capability is logged and contributes nothing; the client
        always gets a list.
        """
        all_items = []

        for capability in self.get_capabilities_by_type(CompletionCapability):
            try:
                if await capability.can_handle(params):
                    result = await capability.complete(params)  # pyright: ignore
                    all_items.extend(result.items)
            except Exception as e:
                self.server.window_log_message(
                    LogMessageParams(
                        type=MessageType.Error,
                        message=f"Completion error in {capability.name}: "
                                f"{type(e).__name__}: {e}",
                    )
                )

        return CompletionList(is_incomplete=False, items=all_items)
