"""
MCP server for browser automation via Playwright.

This module provides the stdio entry point and the JSON-RPC handling shared
with the HTTP shell. Tool dispatch is handled via registry pattern in
server/registry.py.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import signal
import sys
import threading
import time
from typing import Any

from .config import PlaywrongConfig
from .server.contract import (
    DEFAULT_PROTOCOL_VERSION,
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    LATEST_PROTOCOL_VERSION,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    SUPPORTED_PROTOCOL_VERSIONS,
    initialize_result,
    select_protocol,
    tools_list,
)
from .server.redaction import redact_jsonrpc_for_log, redact_tool_arguments
from .server.registry import ToolRegistry, create_default_registry
from .session_manager import SessionManager

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("mcp.playwrong")

__all__ = [
    "SUPPORTED_PROTOCOL_VERSIONS",
    "LATEST_PROTOCOL_VERSION",
    "DEFAULT_PROTOCOL_VERSION",
    "McpServer",
    "jsonrpc_error",
    "serve_stdio",
    "main",
]


def jsonrpc_error(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}


def _write_message(payload: dict[str, Any]) -> None:
    """Write JSON-RPC message to stdout."""
    data = json.dumps(payload, ensure_ascii=False)
    sys.stdout.buffer.write((data + "\n").encode())
    sys.stdout.buffer.flush()


class McpServer:
    """MCP server with registry-based tool dispatch.

    Owns the session registry for the lifetime of the process; both transport
    shells feed messages through `handle_message`.
    """

    def __init__(
        self,
        config: PlaywrongConfig | None = None,
        sessions: SessionManager | None = None,
        registry: ToolRegistry | None = None,
    ) -> None:
        self.config = config if config is not None else PlaywrongConfig.from_env()
        self.sessions = sessions if sessions is not None else SessionManager(self.config)
        self.registry = registry if registry is not None else create_default_registry()
        self.started_at = time.monotonic()

    @property
    def uptime(self) -> float:
        return time.monotonic() - self.started_at

    async def shutdown(self) -> None:
        count = len(self.sessions)
        await self.sessions.shutdown()
        logger.info("server_shutdown sessions_closed=%s", count)

    def _log_call(self, name: str, arguments: dict[str, Any]) -> None:
        """Log tool call with sanitized arguments."""
        safe_args = redact_tool_arguments(name, arguments)
        logger.info("tool=%s args=%s", name, safe_args)

    async def handle_line(self, raw: bytes | str) -> dict[str, Any] | None:
        """Decode one framed message and handle it."""
        try:
            message = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.info("parse_error %s", exc)
            return jsonrpc_error(None, PARSE_ERROR, "Parse error")
        return await self.handle_message(message)

    async def handle_message(self, message: Any) -> dict[str, Any] | None:
        """Handle a decoded JSON-RPC message. Returns None for notifications."""
        if not isinstance(message, dict):
            return jsonrpc_error(None, INVALID_REQUEST, "Invalid Request")

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("recv %s", redact_jsonrpc_for_log(message))

        method = message.get("method")
        request_id = message.get("id")
        params = message.get("params")
        if not isinstance(params, dict):
            params = {}

        if not isinstance(method, str) or not method:
            return jsonrpc_error(request_id, INVALID_REQUEST, "Invalid Request: missing method")
        if method.startswith("notifications/"):
            return None

        try:
            response = await self._dispatch(method, request_id, params)
        except Exception as exc:
            logger.exception("request_failed method=%s", method)
            response = jsonrpc_error(request_id, INTERNAL_ERROR, f"Internal error: {exc}")

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("send %s", redact_jsonrpc_for_log(response))
        return response

    async def _dispatch(self, method: str, request_id: Any, params: dict[str, Any]) -> dict[str, Any]:
        if method == "initialize":
            protocol = select_protocol(params.get("protocolVersion"))
            return {"jsonrpc": "2.0", "id": request_id, "result": initialize_result(protocol)}
        if method == "tools/list":
            return {"jsonrpc": "2.0", "id": request_id, "result": {"tools": tools_list()}}
        if method == "tools/call":
            return await self.handle_call_tool(request_id, params)
        if method == "ping":
            return {"jsonrpc": "2.0", "id": request_id, "result": {"pong": True}}
        if method == "resources/list":
            return {"jsonrpc": "2.0", "id": request_id, "result": {"resources": []}}
        if method == "prompts/list":
            return {"jsonrpc": "2.0", "id": request_id, "result": {"prompts": []}}
        return jsonrpc_error(request_id, METHOD_NOT_FOUND, f"Method {method} not found")

    async def handle_call_tool(self, request_id: Any, params: dict[str, Any]) -> dict[str, Any]:
        """Route a tools/call request through the registry.

        Handlers never raise; a missing or unknown tool name is a protocol
        error, everything else comes back as a normal result.
        """
        name = params.get("name")
        arguments = params.get("arguments")
        if not isinstance(arguments, dict):
            arguments = {}

        if not isinstance(name, str) or not name:
            return jsonrpc_error(request_id, INVALID_PARAMS, "Missing tool name")
        if not self.registry.has(name):
            return jsonrpc_error(request_id, INVALID_PARAMS, f"Unknown tool: {name}")

        self._log_call(name, arguments)
        result = await self.registry.dispatch(name, self.config, self.sessions, arguments)
        return {"jsonrpc": "2.0", "id": request_id, "result": result.to_response()}


# ═══════════════════════════════════════════════════════════════════════════════
# STDIO TRANSPORT
# ═══════════════════════════════════════════════════════════════════════════════


def _start_stdin_reader(loop: asyncio.AbstractEventLoop, queue: asyncio.Queue[bytes | None]) -> threading.Thread:
    """Pump stdin lines into the loop from a daemon thread; None marks EOF."""

    def pump() -> None:
        # The loop may already be closed when a late line arrives.
        with contextlib.suppress(RuntimeError):
            for line in iter(sys.stdin.buffer.readline, b""):
                loop.call_soon_threadsafe(queue.put_nowait, line)
            loop.call_soon_threadsafe(queue.put_nowait, None)

    thread = threading.Thread(target=pump, name="playwrong-stdin", daemon=True)
    thread.start()
    return thread


async def serve_stdio(server: McpServer) -> None:
    """Serve newline-delimited JSON-RPC on stdin/stdout until EOF or a signal."""
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue[bytes | None] = asyncio.Queue()
    stop = asyncio.Event()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(sig, stop.set)

    _start_stdin_reader(loop, queue)
    stop_wait = asyncio.ensure_future(stop.wait())
    try:
        while True:
            next_line = asyncio.ensure_future(queue.get())
            done, _ = await asyncio.wait({next_line, stop_wait}, return_when=asyncio.FIRST_COMPLETED)
            if next_line not in done:
                next_line.cancel()
                logger.info("signal_received")
                break
            line = next_line.result()
            if line is None:
                logger.info("stdin_closed")
                break
            if not line.strip():
                continue
            response = await server.handle_line(line)
            if response is not None:
                _write_message(response)
    finally:
        stop_wait.cancel()
        await server.shutdown()


def main() -> None:
    """Main entry point for the stdio MCP server."""
    server = McpServer()
    if server.config.debug:
        logging.getLogger("mcp.playwrong").setLevel(logging.DEBUG)
    logger.info(
        "playwrong_stdio_start engine=%s headless=%s artifacts=%s",
        server.config.browser_type,
        server.config.headless,
        server.config.artifacts_dir(),
    )
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(serve_stdio(server))


if __name__ == "__main__":
    main()
