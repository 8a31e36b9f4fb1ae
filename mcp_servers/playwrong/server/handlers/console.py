"""
Console log tool handler.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...tools import ConsoleLogsArgs, handler_boundary, resolve_session
from ...tools.base import no_session_result
from ..types import ToolResult

if TYPE_CHECKING:
    from ...config import PlaywrongConfig
    from ...session_manager import SessionManager


@handler_boundary("read_console_logs", "Failed to read console logs")
async def handle_console_logs(
    config: PlaywrongConfig, sessions: SessionManager, arguments: dict[str, Any]
) -> ToolResult:
    args = ConsoleLogsArgs.from_args(arguments)
    session = await resolve_session(sessions, args)
    if session is None:
        return no_session_result("read_console_logs", args.session_id)

    logs = sessions.get_console_logs(session.id, args.log_type)
    if args.clear:
        sessions.clear_console_logs(session.id)
    return ToolResult.json(
        {
            "logs": [entry.to_dict() for entry in logs],
            "totalCount": len(logs),
            "logType": args.log_type,
            "cleared": args.clear,
            "sessionId": session.id,
        }
    )


CONSOLE_HANDLERS: dict[str, Any] = {
    "read_console_logs": handle_console_logs,
}
