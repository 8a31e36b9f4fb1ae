"""
HTTP transport for the playwrong MCP server.

Routes:
- POST /mcp                      JSON-RPC envelope (same handling as stdio)
- GET  /health                   liveness plus open sessions
- POST /sessions/create          explicit session creation
- GET  /sessions                 open sessions with live url/title
- POST /sessions/{id}/close      close one session

Tool calls always answer 200; only protocol misuse changes the status code.
"""

from __future__ import annotations

import contextlib
import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from .browser_session import iso_now
from .main import McpServer, jsonrpc_error
from .server.contract import INTERNAL_ERROR, PARSE_ERROR
from .session_manager import SessionCreationError

logger = logging.getLogger("mcp.playwrong.http")


async def _read_json(request: Request) -> Any:
    body = await request.body()
    if not body.strip():
        return None
    return json.loads(body)


def create_app(server: McpServer | None = None) -> Starlette:
    """Build the Starlette app around one McpServer (and its session registry)."""
    mcp = server if server is not None else McpServer()

    async def handle_mcp(request: Request) -> Response:
        try:
            message = await _read_json(request)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.info("parse_error %s", exc)
            return JSONResponse(jsonrpc_error(None, PARSE_ERROR, "Parse error"), status_code=400)

        response = await mcp.handle_message(message)
        if response is None:
            return Response(status_code=202)
        error = response.get("error")
        status = 500 if isinstance(error, dict) and error.get("code") == INTERNAL_ERROR else 200
        return JSONResponse(response, status_code=status)

    async def health(request: Request) -> Response:
        sessions = await mcp.sessions.list_sessions()
        return JSONResponse(
            {
                "status": "ok",
                "timestamp": iso_now(),
                "uptime": round(mcp.uptime, 3),
                "activeSessions": len(sessions),
                "sessions": sessions,
            }
        )

    async def create_session(request: Request) -> Response:
        try:
            body = await _read_json(request)
        except (json.JSONDecodeError, UnicodeDecodeError):
            body = None
        show_browser = body.get("show_browser") if isinstance(body, dict) else None
        try:
            session_id = await mcp.sessions.create_session(show_browser if isinstance(show_browser, bool) else None)
        except SessionCreationError as exc:
            logger.warning("session_create_failed error=%s", exc)
            return JSONResponse({"success": False, "error": str(exc)}, status_code=500)
        return JSONResponse({"success": True, "sessionId": session_id})

    async def list_sessions(request: Request) -> Response:
        sessions = await mcp.sessions.list_sessions()
        return JSONResponse({"sessions": sessions, "count": len(sessions)})

    async def close_session(request: Request) -> Response:
        session_id = request.path_params["session_id"]
        closed = await mcp.sessions.close_session(session_id)
        return JSONResponse({"success": closed, "sessionId": session_id})

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        logger.info("playwrong_http_start engine=%s headless=%s", mcp.config.browser_type, mcp.config.headless)
        try:
            yield
        finally:
            await mcp.shutdown()

    app = Starlette(
        debug=mcp.config.debug,
        routes=[
            Route("/mcp", endpoint=handle_mcp, methods=["POST"]),
            Route("/health", endpoint=health, methods=["GET"]),
            Route("/sessions/create", endpoint=create_session, methods=["POST"]),
            Route("/sessions", endpoint=list_sessions, methods=["GET"]),
            Route("/sessions/{session_id}/close", endpoint=close_session, methods=["POST"]),
        ],
        middleware=[Middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])],
        lifespan=lifespan,
    )
    app.state.mcp = mcp
    return app


def main() -> None:
    """Main entry point for the HTTP MCP server."""
    server = McpServer()
    if server.config.debug:
        logging.getLogger("mcp.playwrong").setLevel(logging.DEBUG)
    uvicorn.run(
        create_app(server),
        host=server.config.host,
        port=server.config.port,
        log_level="debug" if server.config.debug else "info",
    )


if __name__ == "__main__":
    main()
