"""
Capture tool handlers: screenshots and page content.
"""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING, Any

from ...browser_session import iso_now
from ...tools import PageContentArgs, ScreenshotArgs, handler_boundary, page_outline, resolve_session
from ...tools.base import no_session_result
from ...tools.params import VIEWPORT_PRESETS
from ...tools.screenshot import fit_inline, png_size
from ..artifacts import ArtifactWriter
from ..types import ToolResult

if TYPE_CHECKING:
    from ...config import PlaywrongConfig
    from ...session_manager import SessionManager


def _viewport_label(width: int | None, height: int | None) -> str:
    for name, size in VIEWPORT_PRESETS.items():
        if size == (width, height):
            return name
    if width and height:
        return f"{width}x{height}"
    return "viewport"


def normalize_text(raw: str) -> str:
    """Collapse runs of whitespace inside lines and drop blank lines."""
    lines = (" ".join(line.split()) for line in str(raw or "").splitlines())
    return "\n".join(line for line in lines if line)


# ═══════════════════════════════════════════════════════════════════════════════
# SCREENSHOT
# ═══════════════════════════════════════════════════════════════════════════════


@handler_boundary("take_screenshot", "Failed to take screenshot")
async def handle_screenshot(config: PlaywrongConfig, sessions: SessionManager, arguments: dict[str, Any]) -> ToolResult:
    args = ScreenshotArgs.from_args(arguments)
    session = await resolve_session(sessions, args)
    if session is None:
        return no_session_result("take_screenshot", args.session_id)

    page = session.page
    requested = args.requested_size()
    if requested is not None:
        _, width, height = requested
        await page.set_viewport_size({"width": width, "height": height})

    viewport = page.viewport_size or {}
    vw, vh = viewport.get("width"), viewport.get("height")
    label = requested[0] if requested is not None else _viewport_label(vw, vh)

    png = await page.screenshot(full_page=args.full_page, type="png")
    captured = png_size(png)
    width, height = captured or (vw, vh)
    payload: dict[str, Any] = {
        "success": True,
        "fullPage": args.full_page,
        "viewport": {"name": label, "width": vw, "height": vh},
        "dimensions": {"width": width, "height": height},
        "bytes": len(png),
        "timestamp": iso_now(),
    }

    writer = ArtifactWriter(config)
    if args.output == "file":
        ref = writer.write_bytes(
            png, filename=args.filename, default_name=writer.screenshot_name(label), ext=".png", mime_type="image/png"
        )
        payload["path"] = ref.path
        return ToolResult.json(payload)

    fitted = fit_inline(png, config.inline_image_max_bytes)
    if fitted is None:
        ref = writer.write_bytes(
            png, filename=args.filename, default_name=writer.screenshot_name(label), ext=".png", mime_type="image/png"
        )
        payload["path"] = ref.path
        if captured is None:
            payload["note"] = "Image could not be decoded for inline sizing; saved to file"
        else:
            payload["note"] = f"Image exceeds the inline limit of {config.inline_image_max_bytes} bytes; saved to file"
        return ToolResult.json(payload)

    data, (inline_w, inline_h) = fitted
    if data is not png:
        payload["inline"] = {"width": inline_w, "height": inline_h, "bytes": len(data), "downscaled": True}
    return ToolResult.with_image(payload, base64.b64encode(data).decode("ascii"))


# ═══════════════════════════════════════════════════════════════════════════════
# PAGE CONTENT
# ═══════════════════════════════════════════════════════════════════════════════


@handler_boundary("get_page_content", "Failed to get page content")
async def handle_page_content(
    config: PlaywrongConfig, sessions: SessionManager, arguments: dict[str, Any]
) -> ToolResult:
    args = PageContentArgs.from_args(arguments)
    session = await resolve_session(sessions, args)
    if session is None:
        return no_session_result("get_page_content", args.session_id)

    page = session.page
    payload: dict[str, Any] = {"format": args.format, "title": await page.title(), "url": page.url}

    if args.format == "snapshot":
        payload["snapshot"] = await page_outline(page)
        return ToolResult.json(payload)

    if args.format == "text":
        text = normalize_text(await page.inner_text("body"))
        payload["totalChars"] = len(text)
        payload["truncated"] = len(text) > config.text_max_chars
        payload["content"] = text[: config.text_max_chars]
        return ToolResult.json(payload)

    # html: full markup goes to disk, only the path comes back.
    writer = ArtifactWriter(config)
    ref = writer.write_text(
        await page.content(),
        filename=args.filename,
        default_name=writer.html_name(),
        ext=".html",
        mime_type="text/html",
    )
    payload["path"] = ref.path
    payload["bytes"] = ref.bytes
    return ToolResult.json(payload)


CAPTURE_HANDLERS: dict[str, Any] = {
    "take_screenshot": handle_screenshot,
    "get_page_content": handle_page_content,
}
