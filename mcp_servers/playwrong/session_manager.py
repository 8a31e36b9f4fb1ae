"""Session registry.

Single source of truth for which browsers are open. Maps opaque session ids to
a browser/page pair and to that page's console log buffer. The two mappings
are always updated together: an id is present in both or in neither.

One instance is created at process start and handed to every tool handler and
transport shell; it is drained with `close_all_sessions()` on shutdown.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any

from .browser_session import BrowserSession, ConsoleEntry
from .config import DEFAULT_VIEWPORT, PlaywrongConfig
from .launcher import BrowserDriver, BrowserLauncher

logger = logging.getLogger("mcp.playwrong.sessions")

ALL_LOG_TYPES = "all"


class SessionCreationError(Exception):
    """Raised when a browser or its page cannot be started."""


class SessionManager:
    def __init__(self, config: PlaywrongConfig, driver: BrowserDriver | None = None) -> None:
        self.config = config
        self.driver: BrowserDriver = driver if driver is not None else BrowserLauncher(config)
        self._sessions: dict[str, BrowserSession] = {}
        self._console_logs: dict[str, list[ConsoleEntry]] = {}
        self._lock = asyncio.Lock()
        # Serializes default-session resolution so concurrent calls share one browser.
        self._default_lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def session_ids(self) -> list[str]:
        return list(self._sessions)

    # ─────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    async def create_session(self, show_browser: bool | None = None) -> str:
        """Launch a browser with one desktop-sized page and register it.

        Nothing is registered unless both the browser and its page came up.
        """
        headless = self.config.resolve_headless(show_browser)
        engine = self.config.browser_type
        try:
            browser = await self.driver.launch(engine, headless=headless)
        except Exception as exc:
            raise SessionCreationError(f"Failed to create browser session: {exc}") from exc

        try:
            page = await browser.new_page(viewport=dict(DEFAULT_VIEWPORT))
        except Exception as exc:
            try:
                await browser.close()
            except Exception as close_exc:  # noqa: BLE001
                logger.warning("orphan_browser_close_failed error=%s", close_exc)
            raise SessionCreationError(f"Failed to create browser session: {exc}") from exc

        async with self._lock:
            session_id = str(uuid.uuid4())
            while session_id in self._sessions:
                session_id = str(uuid.uuid4())
            session = BrowserSession(id=session_id, browser=browser, page=page, headless=headless)
            self._console_logs[session_id] = []
            self._attach_listeners(session)
            self._sessions[session_id] = session

        logger.info("session_created id=%s engine=%s headless=%s", session_id, engine, headless)
        return session_id

    async def close_session(self, session_id: str) -> bool:
        """Close and forget a session. Returns False for unknown ids.

        The entry is removed before the handles are closed, so a failing close
        never leaves a half torn-down browser reachable from the registry.
        """
        async with self._lock:
            session = self._sessions.pop(session_id, None)
            if session is None:
                return False
            self._console_logs.pop(session_id, None)

        try:
            await session.page.close()
        except Exception as exc:  # noqa: BLE001
            logger.warning("page_close_failed id=%s error=%s", session_id, exc)
        try:
            await session.browser.close()
        except Exception as exc:  # noqa: BLE001
            logger.warning("browser_close_failed id=%s error=%s", session_id, exc)

        logger.info("session_closed id=%s", session_id)
        return True

    async def close_all_sessions(self) -> int:
        """Best-effort drain of every session in creation order."""
        closed = 0
        for session_id in list(self._sessions):
            try:
                if await self.close_session(session_id):
                    closed += 1
            except Exception as exc:  # noqa: BLE001
                logger.warning("session_close_failed id=%s error=%s", session_id, exc)
        return closed

    async def shutdown(self) -> None:
        await self.close_all_sessions()
        await self.driver.stop()

    # ─────────────────────────────────────────────────────────────────────────
    # Lookup
    # ─────────────────────────────────────────────────────────────────────────

    def get_session(self, session_id: str) -> BrowserSession | None:
        session = self._sessions.get(session_id)
        if session is not None:
            session.touch()
        return session

    async def get_or_create_default_session(self, show_browser: bool | None = None) -> BrowserSession:
        """Return the first-created open session, creating one if none exists."""
        async with self._default_lock:
            session = next(iter(self._sessions.values()), None)
            if session is not None:
                session.touch()
                return session
            session_id = await self.create_session(show_browser)
            session = self.get_session(session_id)
            if session is None:
                raise SessionCreationError(f"Session {session_id} was closed before it could be used")
            return session

    async def list_sessions(self) -> list[dict[str, Any]]:
        """Snapshot of open sessions with live url/title (queried, not cached)."""
        async with self._lock:
            sessions = list(self._sessions.values())

        out: list[dict[str, Any]] = []
        for session in sessions:
            try:
                url = session.page.url
                title = await session.page.title()
                out.append({"id": session.id, "url": url, "title": title})
            except Exception as exc:  # noqa: BLE001
                out.append({"id": session.id, "url": None, "title": None, "error": str(exc)})
        return out

    # ─────────────────────────────────────────────────────────────────────────
    # Console logs
    # ─────────────────────────────────────────────────────────────────────────

    def get_console_logs(self, session_id: str, log_type: str | None = None) -> list[ConsoleEntry]:
        logs = list(self._console_logs.get(session_id) or [])
        if log_type and log_type != ALL_LOG_TYPES:
            return [entry for entry in logs if entry.type == log_type]
        return logs

    def clear_console_logs(self, session_id: str) -> None:
        # Unknown ids already read as empty; only live sessions own a buffer.
        if session_id in self._sessions:
            self._console_logs[session_id] = []

    def _append_log(self, session_id: str, entry: ConsoleEntry) -> None:
        buffer = self._console_logs.get(session_id)
        if buffer is not None:
            buffer.append(entry)

    def _attach_listeners(self, session: BrowserSession) -> None:
        session_id = session.id

        def _on_console(message: Any) -> None:
            self._append_log(session_id, ConsoleEntry(type=str(message.type), message=str(message.text)))

        def _on_page_error(error: Any) -> None:
            self._append_log(session_id, ConsoleEntry(type="error", message=str(error)))

        session.page.on("console", _on_console)
        session.page.on("pageerror", _on_page_error)
