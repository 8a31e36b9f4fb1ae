from __future__ import annotations

import asyncio
import base64
import io
import os
from pathlib import Path
from typing import Any

from PIL import Image

from mcp_servers.playwrong.config import PlaywrongConfig
from mcp_servers.playwrong.server.handlers import TOOL_HANDLERS
from mcp_servers.playwrong.server.types import ToolResult
from mcp_servers.playwrong.session_manager import SessionManager
from mcp_servers.playwrong.tools import NO_SESSION_MESSAGE


def _call(config: PlaywrongConfig, sessions: SessionManager, name: str, args: dict[str, Any]) -> ToolResult:
    return asyncio.run(TOOL_HANDLERS[name](config, sessions, args))


def _default_page(sessions: SessionManager):
    session = asyncio.run(sessions.get_or_create_default_session())
    return session.page


def _noise_png(width: int, height: int) -> bytes:
    img = Image.frombytes("RGB", (width, height), os.urandom(width * height * 3))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def test_all_catalog_tools_have_handlers() -> None:
    from mcp_servers.playwrong.server.definitions import TOOL_DEFINITIONS

    assert {t["name"] for t in TOOL_DEFINITIONS} == set(TOOL_HANDLERS)


# ═══════════════════════════════════════════════════════════════════════════════
# navigate
# ═══════════════════════════════════════════════════════════════════════════════


def test_navigate_creates_default_session_and_waits_for_dom(config, sessions, driver) -> None:
    result = _call(config, sessions, "navigate", {"url": "https://example.com"})

    assert result.is_error is False
    assert result.data["success"] is True
    assert result.data["url"] == "https://example.com"
    assert result.data["title"] == "Title of https://example.com"
    assert len(driver.browsers) == 1
    assert driver.browsers[0].pages[0].goto_calls == [("https://example.com", "domcontentloaded")]


def test_navigate_reuses_default_session(config, sessions, driver) -> None:
    _call(config, sessions, "navigate", {"url": "https://a.test"})
    _call(config, sessions, "navigate", {"url": "https://b.test"})
    assert len(driver.browsers) == 1


def test_navigate_engine_failure_is_in_band(config, sessions) -> None:
    page = _default_page(sessions)
    page.goto_error = RuntimeError("net::ERR_NAME_NOT_RESOLVED")

    result = _call(config, sessions, "navigate", {"url": "https://nope.invalid"})

    assert result.is_error is True
    assert result.data["ok"] is False
    assert result.data["tool"] == "navigate"
    assert "ERR_NAME_NOT_RESOLVED" in result.data["error"]


def test_navigate_launch_failure_is_in_band(config, sessions, driver) -> None:
    driver.launch_error = RuntimeError("Executable doesn't exist")

    result = _call(config, sessions, "navigate", {"url": "https://example.com"})

    assert result.is_error is True
    assert "Failed to create browser session" in result.data["error"]
    assert len(sessions) == 0


def test_navigate_missing_url_is_handler_error(config, sessions, driver) -> None:
    result = _call(config, sessions, "navigate", {})

    assert result.is_error is True
    assert "url" in result.data["error"]
    assert driver.browsers == []


def test_unknown_session_id_reports_no_session(config, sessions, driver) -> None:
    result = _call(config, sessions, "navigate", {"url": "https://example.com", "session_id": "ghost"})

    assert result.is_error is True
    assert result.data["error"] == NO_SESSION_MESSAGE
    assert driver.browsers == []


def test_explicit_session_id_targets_that_session(config, sessions) -> None:
    first = asyncio.run(sessions.create_session())
    second = asyncio.run(sessions.create_session())

    _call(config, sessions, "navigate", {"url": "https://second.test", "session_id": second})

    assert sessions.get_session(second).page.url == "https://second.test"
    assert sessions.get_session(first).page.url == "about:blank"


# ═══════════════════════════════════════════════════════════════════════════════
# click / fill / wait
# ═══════════════════════════════════════════════════════════════════════════════


def test_click_existing_element(config, sessions) -> None:
    page = _default_page(sessions)
    page.elements["#go"] = [{}]

    result = _call(config, sessions, "click_element", {"selector": "#go"})

    assert result.is_error is False
    assert result.data == {"success": True, "message": "Successfully clicked element: #go", "elementFound": True}
    assert page.elements["#go"][0]["clicks"] == 1


def test_click_missing_element_is_not_an_error(config, sessions) -> None:
    _default_page(sessions)

    result = _call(config, sessions, "click_element", {"selector": "#missing"})

    assert result.is_error is False
    assert result.data["success"] is False
    assert result.data["elementFound"] is False
    assert result.data["message"] == "Element not found: #missing"


def test_click_clicks_first_of_many(config, sessions) -> None:
    page = _default_page(sessions)
    page.elements["button"] = [{}, {}]

    _call(config, sessions, "click_element", {"selector": "button"})

    assert page.elements["button"][0]["clicks"] == 1
    assert "clicks" not in page.elements["button"][1]


def test_fill_input_fills_only_first_match(config, sessions) -> None:
    page = _default_page(sessions)
    page.elements["input.q"] = [{"value": "old"}, {"value": "other"}]

    result = _call(config, sessions, "fill_input", {"selector": "input.q", "text": "hello"})

    assert result.data["success"] is True
    assert result.data["fieldsFilled"] == 1
    assert page.elements["input.q"][0]["value"] == "hello"
    assert page.elements["input.q"][1]["value"] == "other"


def test_fill_input_accepts_empty_text(config, sessions) -> None:
    page = _default_page(sessions)
    page.elements["#name"] = [{"value": "something"}]

    result = _call(config, sessions, "fill_input", {"selector": "#name", "text": ""})

    assert result.data["success"] is True
    assert page.elements["#name"][0]["value"] == ""


def test_fill_input_missing_field(config, sessions) -> None:
    _default_page(sessions)

    result = _call(config, sessions, "fill_input", {"selector": "#nope", "text": "x"})

    assert result.is_error is False
    assert result.data["success"] is False
    assert result.data["fieldsFilled"] == 0


def test_fill_input_requires_text(config, sessions) -> None:
    _default_page(sessions)

    result = _call(config, sessions, "fill_input", {"selector": "#name"})

    assert result.is_error is True
    assert "text" in result.data["error"]


def test_wait_for_present_element(config, sessions) -> None:
    page = _default_page(sessions)
    page.elements["#ready"] = [{}]

    result = _call(config, sessions, "wait_for_element", {"selector": "#ready", "timeout_ms": 100})

    assert result.data["success"] is True
    assert result.data["elementFound"] is True


def test_wait_for_times_out_in_band(config, sessions) -> None:
    _default_page(sessions)

    result = _call(config, sessions, "wait_for_element", {"selector": "#never", "timeout_ms": 100})

    assert result.is_error is False
    assert result.data["success"] is False
    assert result.data["elementFound"] is False
    assert "100ms" in result.data["message"]
    assert result.data["waitTimeMs"] >= 90


def test_wait_for_rejects_non_positive_timeout(config, sessions) -> None:
    result = _call(config, sessions, "wait_for_element", {"selector": "#x", "timeout_ms": 0})
    assert result.is_error is True
    assert "timeout_ms" in result.data["error"]


# ═══════════════════════════════════════════════════════════════════════════════
# take_screenshot
# ═══════════════════════════════════════════════════════════════════════════════


def test_screenshot_inline_returns_image_content(config, sessions) -> None:
    _default_page(sessions)

    result = _call(config, sessions, "take_screenshot", {})

    content = result.to_content_list()
    assert [c["type"] for c in content] == ["text", "image"]
    assert content[1]["mimeType"] == "image/png"
    decoded = base64.b64decode(content[1]["data"])
    assert decoded.startswith(b"\x89PNG")
    assert result.data["dimensions"] == {"width": 1280, "height": 720}
    assert result.data["viewport"]["name"] == "desktop"


def test_screenshot_viewport_preset_to_file(config, sessions) -> None:
    page = _default_page(sessions)

    result = _call(config, sessions, "take_screenshot", {"viewport": "mobile", "output": "file"})

    assert page.viewport_size == {"width": 375, "height": 667}
    path = Path(result.data["path"])
    assert path.exists()
    assert path.parent == Path(config.output_dir).resolve()
    assert path.name.startswith("screenshot-mobile-")
    assert ":" not in path.name
    assert result.data["dimensions"] == {"width": 375, "height": 667}


def test_screenshot_custom_size_and_filename(config, sessions) -> None:
    page = _default_page(sessions)

    result = _call(
        config,
        sessions,
        "take_screenshot",
        {"width": 800, "height": 600, "output": "file", "filename": "../../etc/shot"},
    )

    assert page.viewport_size == {"width": 800, "height": 600}
    path = Path(result.data["path"])
    assert path.name == "shot.png"
    assert path.parent == Path(config.output_dir).resolve()


def test_screenshot_downscales_large_inline_image(config, sessions) -> None:
    page = _default_page(sessions)
    page.screenshot_png = _noise_png(1000, 800)
    config.inline_image_max_bytes = 500_000

    result = _call(config, sessions, "take_screenshot", {})

    assert result.data["dimensions"] == {"width": 1000, "height": 800}
    assert result.data["inline"]["downscaled"] is True
    assert result.data["inline"]["width"] < 1000
    image = result.to_content_list()[1]
    assert len(base64.b64decode(image["data"])) <= 500_000


def test_screenshot_too_large_for_inline_is_saved(config, sessions) -> None:
    _default_page(sessions)
    config.inline_image_max_bytes = 100

    result = _call(config, sessions, "take_screenshot", {})

    assert [c["type"] for c in result.to_content_list()] == ["text"]
    assert Path(result.data["path"]).exists()
    assert "inline limit" in result.data["note"]


def test_screenshot_rejects_unknown_preset(config, sessions) -> None:
    result = _call(config, sessions, "take_screenshot", {"viewport": "watch"})
    assert result.is_error is True
    assert "watch" in result.data["error"]


def test_screenshot_requires_width_and_height_together(config, sessions) -> None:
    result = _call(config, sessions, "take_screenshot", {"width": 800})
    assert result.is_error is True


# ═══════════════════════════════════════════════════════════════════════════════
# get_page_content
# ═══════════════════════════════════════════════════════════════════════════════


def test_page_content_snapshot_is_default(config, sessions) -> None:
    page = _default_page(sessions)
    page.url = "https://example.com/"
    page.page_title = "Example"
    page.outline = {
        "tag": "body",
        "attrs": {},
        "text": "Hello",
        "children": [{"tag": "h1", "attrs": {}, "text": "Hello", "children": [], "omitted": 0}],
        "omitted": 0,
    }

    result = _call(config, sessions, "get_page_content", {})

    assert result.data["format"] == "snapshot"
    assert result.data["title"] == "Example"
    assert result.data["url"] == "https://example.com/"
    assert result.data["snapshot"] == '- document\n  - heading "Hello" [level=1]'


def test_page_content_text_is_normalized_and_capped(config, sessions) -> None:
    page = _default_page(sessions)
    page.body_text = "  Hello \t  world \n\n\n  second   line  "
    config.text_max_chars = 5

    result = _call(config, sessions, "get_page_content", {"format": "text"})

    assert result.data["totalChars"] == len("Hello world\nsecond line")
    assert result.data["truncated"] is True
    assert result.data["content"] == "Hello"


def test_page_content_html_is_written_to_file(config, sessions) -> None:
    page = _default_page(sessions)
    page.html = "<html><body><p>hi</p></body></html>"

    result = _call(config, sessions, "get_page_content", {"format": "html", "filename": "dump"})

    path = Path(result.data["path"])
    assert path.name == "dump.html"
    assert path.read_text(encoding="utf-8") == page.html
    assert result.data["bytes"] == len(page.html)


def test_page_content_rejects_unknown_format(config, sessions) -> None:
    result = _call(config, sessions, "get_page_content", {"format": "pdf"})
    assert result.is_error is True


# ═══════════════════════════════════════════════════════════════════════════════
# read_console_logs
# ═══════════════════════════════════════════════════════════════════════════════


def test_read_console_logs_filters_and_clears(config, sessions) -> None:
    page = _default_page(sessions)
    page.emit_console("log", "hello")
    page.emit_console("warning", "careful")
    page.emit_page_error(RuntimeError("boom"))

    everything = _call(config, sessions, "read_console_logs", {})
    assert everything.data["totalCount"] == 3
    assert [e["message"] for e in everything.data["logs"]] == ["hello", "careful", "boom"]

    warnings = _call(config, sessions, "read_console_logs", {"log_type": "warn"})
    assert warnings.data["logType"] == "warning"
    assert [e["message"] for e in warnings.data["logs"]] == ["careful"]

    cleared = _call(config, sessions, "read_console_logs", {"log_type": "error", "clear": True})
    assert [e["type"] for e in cleared.data["logs"]] == ["error"]
    assert cleared.data["cleared"] is True

    after = _call(config, sessions, "read_console_logs", {})
    assert after.data["totalCount"] == 0


def test_wait_for_rejects_infinite_timeout(config, sessions) -> None:
    result = _call(config, sessions, "wait_for_element", {"selector": "#x", "timeout_ms": float("inf")})

    assert result.is_error is True
    assert result.data["error"] == "timeout_ms must be a number"


def test_screenshot_undecodable_png_is_saved_with_decode_note(config, sessions) -> None:
    page = _default_page(sessions)
    page.screenshot_png = b"not really a png"

    result = _call(config, sessions, "take_screenshot", {})

    assert Path(result.data["path"]).read_bytes() == b"not really a png"
    assert "could not be decoded" in result.data["note"]
    assert "inline limit" not in result.data["note"]
    assert result.data["dimensions"] == {"width": 1280, "height": 720}


def test_console_clear_empties_whole_buffer_not_just_filtered(config, sessions) -> None:
    page = _default_page(sessions)
    page.emit_console("log", "info line")
    page.emit_page_error(RuntimeError("boom"))

    read = _call(config, sessions, "read_console_logs", {"log_type": "error", "clear": True})
    assert [e["message"] for e in read.data["logs"]] == ["boom"]

    assert _call(config, sessions, "read_console_logs", {}).data["totalCount"] == 0
