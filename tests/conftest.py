"""Shared fixtures: an in-memory browser driver standing in for Playwright.

The fakes implement only the calls the session registry and tool handlers make.
"""

from __future__ import annotations

import asyncio
import io
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Callable

import pytest
from PIL import Image
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from mcp_servers.playwrong.config import PlaywrongConfig
from mcp_servers.playwrong.session_manager import SessionManager


def make_png(width: int, height: int, color: tuple[int, int, int] = (200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


class FakeLocator:
    def __init__(self, page: FakePage, selector: str) -> None:
        self.page = page
        self.selector = selector

    def _matches(self) -> list[dict[str, Any]]:
        return self.page.elements.get(self.selector, [])

    async def count(self) -> int:
        return len(self._matches())

    @property
    def first(self) -> FakeLocator:
        return self

    async def click(self) -> None:
        matches = self._matches()
        if not matches:
            raise PlaywrightTimeoutError(f"locator.click: no element for {self.selector}")
        matches[0]["clicks"] = matches[0].get("clicks", 0) + 1

    async def fill(self, text: str) -> None:
        matches = self._matches()
        if not matches:
            raise PlaywrightTimeoutError(f"locator.fill: no element for {self.selector}")
        matches[0]["value"] = text

    async def wait_for(self, timeout: float | None = None) -> None:
        if self._matches():
            return
        await asyncio.sleep((timeout or 0) / 1000)
        raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")


class FakePage:
    def __init__(self, viewport: dict[str, int] | None = None) -> None:
        self.url = "about:blank"
        self.page_title = ""
        self.viewport_size: dict[str, int] | None = dict(viewport) if viewport else None
        self.elements: dict[str, list[dict[str, Any]]] = {}
        self.listeners: dict[str, list[Callable[[Any], None]]] = {}
        self.html = "<html><head></head><body></body></html>"
        self.body_text = ""
        self.outline: dict[str, Any] | None = None
        self.screenshot_png: bytes | None = None
        self.goto_calls: list[tuple[str, str | None]] = []
        self.goto_error: Exception | None = None
        self.title_error: Exception | None = None
        self.close_error: Exception | None = None
        self.closed = False

    def on(self, event: str, callback: Callable[[Any], None]) -> None:
        self.listeners.setdefault(event, []).append(callback)

    def emit_console(self, kind: str, text: str) -> None:
        for callback in self.listeners.get("console", []):
            callback(SimpleNamespace(type=kind, text=text))

    def emit_page_error(self, error: Exception) -> None:
        for callback in self.listeners.get("pageerror", []):
            callback(error)

    async def goto(self, url: str, wait_until: str | None = None) -> None:
        self.goto_calls.append((url, wait_until))
        if self.goto_error is not None:
            raise self.goto_error
        self.url = url
        self.page_title = f"Title of {url}"

    async def title(self) -> str:
        if self.title_error is not None:
            raise self.title_error
        return self.page_title

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    async def content(self) -> str:
        return self.html

    async def inner_text(self, selector: str) -> str:
        return self.body_text

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        return self.outline

    async def set_viewport_size(self, size: dict[str, int]) -> None:
        self.viewport_size = dict(size)

    async def screenshot(self, full_page: bool = False, type: str = "png") -> bytes:  # noqa: A002
        if self.screenshot_png is not None:
            return self.screenshot_png
        size = self.viewport_size or {"width": 1280, "height": 720}
        return make_png(size["width"], size["height"])

    async def close(self) -> None:
        if self.close_error is not None:
            raise self.close_error
        self.closed = True


class FakeBrowser:
    def __init__(self, engine: str, headless: bool) -> None:
        self.engine = engine
        self.headless = headless
        self.pages: list[FakePage] = []
        self.new_page_error: Exception | None = None
        self.close_error: Exception | None = None
        self.closed = False

    async def new_page(self, viewport: dict[str, int] | None = None) -> FakePage:
        if self.new_page_error is not None:
            raise self.new_page_error
        page = FakePage(viewport)
        self.pages.append(page)
        return page

    async def close(self) -> None:
        if self.close_error is not None:
            raise self.close_error
        self.closed = True


class FakeDriver:
    def __init__(self) -> None:
        self.browsers: list[FakeBrowser] = []
        self.launch_error: Exception | None = None
        # Applied to the next launched browser.
        self.next_new_page_error: Exception | None = None
        self.stopped = False

    async def launch(self, engine: str, *, headless: bool) -> FakeBrowser:
        if self.launch_error is not None:
            raise self.launch_error
        browser = FakeBrowser(engine, headless)
        browser.new_page_error, self.next_new_page_error = self.next_new_page_error, None
        self.browsers.append(browser)
        return browser

    async def stop(self) -> None:
        self.stopped = True


@pytest.fixture
def config(tmp_path: Path) -> PlaywrongConfig:
    return PlaywrongConfig(output_dir=str(tmp_path / "artifacts"))


@pytest.fixture
def driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def sessions(config: PlaywrongConfig, driver: FakeDriver) -> SessionManager:
    return SessionManager(config, driver=driver)
