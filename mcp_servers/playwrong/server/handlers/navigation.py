"""
Navigation tool handler.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...browser_session import iso_now
from ...tools import NavigateArgs, handler_boundary, resolve_session
from ...tools.base import no_session_result
from ..types import ToolResult

if TYPE_CHECKING:
    from ...config import PlaywrongConfig
    from ...session_manager import SessionManager


@handler_boundary("navigate", "Failed to navigate")
async def handle_navigate(config: PlaywrongConfig, sessions: SessionManager, arguments: dict[str, Any]) -> ToolResult:
    args = NavigateArgs.from_args(arguments)
    session = await resolve_session(sessions, args)
    if session is None:
        return no_session_result("navigate", args.session_id)

    page = session.page
    # Basic document readiness only; waiting for network idle stalls on busy pages.
    await page.goto(args.url, wait_until="domcontentloaded")
    return ToolResult.json(
        {
            "success": True,
            "url": page.url,
            "title": await page.title(),
            "timestamp": iso_now(),
            "sessionId": session.id,
        }
    )


NAVIGATION_HANDLERS: dict[str, Any] = {
    "navigate": handle_navigate,
}
