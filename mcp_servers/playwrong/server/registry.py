"""
Tool registry with dispatch table for MCP server.

Clean O(1) lookup from tool name to handler coroutine.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .types import ToolHandler, ToolResult

if TYPE_CHECKING:
    from ..config import PlaywrongConfig
    from ..session_manager import SessionManager

logger = logging.getLogger("mcp.playwrong.registry")


class ToolRegistry:
    """Registry for tool handlers."""

    def __init__(self) -> None:
        self._handlers: dict[str, ToolHandler] = {}

    def register(self, name: str, handler: ToolHandler) -> None:
        """Register a tool handler."""
        self._handlers[name] = handler

    def register_many(self, handlers: dict[str, ToolHandler]) -> None:
        """Register multiple handlers at once."""
        self._handlers.update(handlers)

    def has(self, name: str) -> bool:
        """Check if handler exists."""
        return name in self._handlers

    async def dispatch(
        self,
        name: str,
        config: PlaywrongConfig,
        sessions: SessionManager,
        arguments: dict[str, Any],
    ) -> ToolResult:
        """
        Dispatch tool call to appropriate handler.

        Raises:
            KeyError: If tool not found
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise KeyError(f"Unknown tool: {name}")
        return await handler(config, sessions, arguments)

    @property
    def tool_names(self) -> list[str]:
        """Get list of registered tool names."""
        return list(self._handlers.keys())

    def __len__(self) -> int:
        return len(self._handlers)


def create_default_registry() -> ToolRegistry:
    """Create registry with the browser tool handlers."""
    from .handlers import TOOL_HANDLERS

    registry = ToolRegistry()
    registry.register_many(TOOL_HANDLERS)
    return registry
