"""
Interaction tool handlers: click, fill, wait.

Selectors are passed through to the driver untouched (CSS or `text=` queries).
When several elements match, only the first in document order is used.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ...tools import ClickArgs, FillInputArgs, WaitForArgs, handler_boundary, resolve_session
from ...tools.base import no_session_result
from ..types import ToolResult

if TYPE_CHECKING:
    from ...config import PlaywrongConfig
    from ...session_manager import SessionManager


# ═══════════════════════════════════════════════════════════════════════════════
# CLICK
# ═══════════════════════════════════════════════════════════════════════════════


@handler_boundary("click_element", "Failed to click element")
async def handle_click(config: PlaywrongConfig, sessions: SessionManager, arguments: dict[str, Any]) -> ToolResult:
    args = ClickArgs.from_args(arguments)
    session = await resolve_session(sessions, args)
    if session is None:
        return no_session_result("click_element", args.session_id)

    locator = session.page.locator(args.selector)
    if await locator.count() == 0:
        return ToolResult.json(
            {"success": False, "message": f"Element not found: {args.selector}", "elementFound": False}
        )

    await locator.first.click()
    return ToolResult.json(
        {"success": True, "message": f"Successfully clicked element: {args.selector}", "elementFound": True}
    )


# ═══════════════════════════════════════════════════════════════════════════════
# FILL
# ═══════════════════════════════════════════════════════════════════════════════


@handler_boundary("fill_input", "Failed to fill input")
async def handle_fill_input(config: PlaywrongConfig, sessions: SessionManager, arguments: dict[str, Any]) -> ToolResult:
    args = FillInputArgs.from_args(arguments)
    session = await resolve_session(sessions, args)
    if session is None:
        return no_session_result("fill_input", args.session_id)

    locator = session.page.locator(args.selector)
    if await locator.count() == 0:
        return ToolResult.json(
            {"success": False, "message": f"Input field not found: {args.selector}", "fieldsFilled": 0}
        )

    # fill() clears the current value before typing.
    await locator.first.fill(args.text)
    return ToolResult.json(
        {"success": True, "message": f"Successfully filled input: {args.selector}", "fieldsFilled": 1}
    )


# ═══════════════════════════════════════════════════════════════════════════════
# WAIT
# ═══════════════════════════════════════════════════════════════════════════════


@handler_boundary("wait_for_element", "Failed to wait for element")
async def handle_wait_for(config: PlaywrongConfig, sessions: SessionManager, arguments: dict[str, Any]) -> ToolResult:
    args = WaitForArgs.from_args(arguments)
    session = await resolve_session(sessions, args)
    if session is None:
        return no_session_result("wait_for_element", args.session_id)

    started = time.monotonic()
    try:
        await session.page.locator(args.selector).first.wait_for(timeout=args.timeout_ms)
    except PlaywrightTimeoutError:
        return ToolResult.json(
            {
                "success": False,
                "message": f"Element did not appear within {args.timeout_ms}ms: {args.selector}",
                "elementFound": False,
                "waitTimeMs": _elapsed_ms(started),
            }
        )

    return ToolResult.json(
        {
            "success": True,
            "message": f"Element appeared: {args.selector}",
            "elementFound": True,
            "waitTimeMs": _elapsed_ms(started),
        }
    )


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


INTERACTION_HANDLERS: dict[str, Any] = {
    "click_element": handle_click,
    "fill_input": handle_fill_input,
    "wait_for_element": handle_wait_for,
}
