"""
Base utilities for browser tools.

Provides:
- SmartToolError: Structured errors for AI agents
- resolve_session: explicit id lookup or default-session fallback
- handler_boundary: turns every failure into an in-band error result
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from functools import wraps
from typing import TYPE_CHECKING, Any

from ..server.types import ToolResult

if TYPE_CHECKING:
    from ..browser_session import BrowserSession
    from ..config import PlaywrongConfig
    from ..session_manager import SessionManager
    from .params import SessionArgs

logger = logging.getLogger("mcp.playwrong.tools")

NO_SESSION_MESSAGE = "No browser session available"


@dataclass
class SmartToolError(Exception):
    """Structured error with context for AI agents."""

    tool: str
    action: str
    reason: str
    suggestion: str
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.tool}] {self.action} failed: {self.reason}. Suggestion: {self.suggestion}"

    def to_result(self) -> ToolResult:
        return ToolResult.error(self.reason, tool=self.tool, suggestion=self.suggestion, details=self.details or None)


async def resolve_session(sessions: SessionManager, args: SessionArgs) -> BrowserSession | None:
    """Explicit ids are looked up (absent is not an error); otherwise use the default session."""
    if args.session_id:
        return sessions.get_session(args.session_id)
    return await sessions.get_or_create_default_session(args.show_browser)


def no_session_result(tool: str, session_id: str | None) -> ToolResult:
    return ToolResult.error(
        NO_SESSION_MESSAGE,
        tool=tool,
        suggestion="Omit session_id to use the default session, or create one via POST /sessions/create",
        details={"sessionId": session_id} if session_id else None,
    )


HandlerCoro = Callable[["PlaywrongConfig", "SessionManager", dict[str, Any]], Awaitable[ToolResult]]


def handler_boundary(tool: str, failure: str) -> Callable[[HandlerCoro], HandlerCoro]:
    """Decorator: a handler never raises, every failure becomes an error result."""

    def decorator(func: HandlerCoro) -> HandlerCoro:
        @wraps(func)
        async def wrapper(config: PlaywrongConfig, sessions: SessionManager, arguments: dict[str, Any]) -> ToolResult:
            try:
                return await func(config, sessions, arguments or {})
            except SmartToolError as e:
                logger.info("tool_error tool=%s action=%s reason=%s", e.tool, e.action, e.reason)
                return e.to_result()
            except Exception as exc:  # noqa: BLE001
                logger.warning("tool_failed tool=%s error=%s", tool, exc)
                return ToolResult.error(f"{failure}: {exc}", tool=tool)

        return wrapper

    return decorator
