"""Browser launcher backed by Playwright's async API.

The launcher owns the single Playwright driver process and hands out one
browser instance per session.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from playwright.async_api import async_playwright

from .config import SUPPORTED_ENGINES, PlaywrongConfig

logger = logging.getLogger("mcp.playwrong.launcher")


class BrowserDriver(Protocol):
    """What the session registry needs from a browser engine."""

    async def launch(self, engine: str, *, headless: bool) -> Any: ...

    async def stop(self) -> None: ...


class BrowserLauncher:
    def __init__(self, config: PlaywrongConfig | None = None) -> None:
        self.config = config or PlaywrongConfig.from_env()
        self._playwright: Any | None = None
        self._start_lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._playwright is not None

    async def _ensure_started(self) -> Any:
        async with self._start_lock:
            if self._playwright is None:
                self._playwright = await async_playwright().start()
                logger.info("playwright_started")
            return self._playwright

    async def launch(self, engine: str, *, headless: bool) -> Any:
        """Launch a fresh browser of the given engine family."""
        if engine not in SUPPORTED_ENGINES:
            raise ValueError(f"Unsupported browser engine: {engine!r} (expected one of {', '.join(SUPPORTED_ENGINES)})")
        playwright = await self._ensure_started()
        browser_type = getattr(playwright, engine)
        browser = await browser_type.launch(headless=headless)
        logger.info("browser_launched engine=%s headless=%s", engine, headless)
        return browser

    async def stop(self) -> None:
        """Stop the Playwright driver (browsers must be closed first)."""
        async with self._start_lock:
            playwright, self._playwright = self._playwright, None
        if playwright is None:
            return
        try:
            await playwright.stop()
        except Exception as exc:  # noqa: BLE001
            logger.warning("playwright_stop_failed error=%s", exc)
            return
        logger.info("playwright_stopped")
