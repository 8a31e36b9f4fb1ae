"""
MCP tool definitions.

Every tool shares the session preamble: an explicit `session_id`, or the
default session (created on first use, optionally headed via `show_browser`).
"""

from __future__ import annotations

from typing import Any

_SESSION_PROPERTIES: dict[str, Any] = {
    "session_id": {
        "type": "string",
        "description": "Optional session ID. If not provided, uses the default (first-created) session.",
    },
    "show_browser": {
        "type": "boolean",
        "default": False,
        "description": "Show browser window instead of headless when a default session has to be created.",
    },
}


def _schema(properties: dict[str, Any], required: list[str] | None = None) -> dict[str, Any]:
    return {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "type": "object",
        "properties": {**properties, **_SESSION_PROPERTIES},
        "required": list(required or []),
    }


# ═══════════════════════════════════════════════════════════════════════════════
# NAVIGATION
# ═══════════════════════════════════════════════════════════════════════════════

NAVIGATE_TOOL: dict[str, Any] = {
    "name": "navigate",
    "description": """Navigate to a URL in the browser.
Waits for DOMContentLoaded (not network idle).
RESPONSE EXAMPLE:
{
  "success": true,
  "url": "https://example.com/",
  "title": "Example Domain",
  "timestamp": "2025-01-01T00:00:00Z"
}""",
    "inputSchema": _schema(
        {"url": {"type": "string", "description": "Full URL to navigate to (e.g., https://example.com)"}},
        ["url"],
    ),
}

# ═══════════════════════════════════════════════════════════════════════════════
# INTERACTION
# ═══════════════════════════════════════════════════════════════════════════════

CLICK_TOOL: dict[str, Any] = {
    "name": "click_element",
    "description": """Click on an element on the page using CSS selector or text content.
Only the first match (document order) is clicked.
RESPONSE EXAMPLE:
{"success": true, "message": "Successfully clicked element: #go", "elementFound": true}""",
    "inputSchema": _schema(
        {
            "selector": {
                "type": "string",
                "description": 'CSS selector or text to match (e.g., "#button-id", ".btn-primary", "text=Submit")',
            }
        },
        ["selector"],
    ),
}

FILL_INPUT_TOOL: dict[str, Any] = {
    "name": "fill_input",
    "description": """Fill a text input field on the page (clears the current value first).
Only the first match (document order) is filled.
RESPONSE EXAMPLE:
{"success": true, "message": "Successfully filled input: #email", "fieldsFilled": 1}""",
    "inputSchema": _schema(
        {
            "selector": {"type": "string", "description": "CSS selector for the input field"},
            "text": {"type": "string", "description": "Text to fill in the field"},
        },
        ["selector", "text"],
    ),
}

WAIT_FOR_TOOL: dict[str, Any] = {
    "name": "wait_for_element",
    "description": """Wait for an element to appear on the page with timeout.
Never fails on timeout: returns success=false with the elapsed time instead.""",
    "inputSchema": _schema(
        {
            "selector": {"type": "string", "description": "CSS selector or text to wait for"},
            "timeout_ms": {
                "type": "number",
                "default": 30000,
                "description": "Timeout in milliseconds. Default: 30000",
            },
        },
        ["selector"],
    ),
}

# ═══════════════════════════════════════════════════════════════════════════════
# CAPTURE
# ═══════════════════════════════════════════════════════════════════════════════

SCREENSHOT_TOOL: dict[str, Any] = {
    "name": "take_screenshot",
    "description": """Take a PNG screenshot of the current page.
Returned inline (image content) by default, or saved to the output directory with output="file".
Supports mobile, tablet, desktop viewports.""",
    "inputSchema": _schema(
        {
            "full_page": {
                "type": "boolean",
                "default": True,
                "description": "Capture entire page (true) or viewport only (false). Default: true",
            },
            "viewport": {
                "type": "string",
                "enum": ["mobile", "tablet", "desktop", "desktop-hd"],
                "description": 'Viewport preset: "mobile" (375x667), "tablet" (768x1024), '
                '"desktop" (1280x720), "desktop-hd" (1920x1080)',
            },
            "width": {"type": "number", "description": "Custom viewport width (use with height)"},
            "height": {"type": "number", "description": "Custom viewport height (use with width)"},
            "output": {
                "type": "string",
                "enum": ["inline", "file"],
                "default": "inline",
                "description": "Return the image inline or save it to a file and return the path",
            },
            "filename": {
                "type": "string",
                "description": "Custom filename for output=file. Default: screenshot-{viewport}-{timestamp}.png",
            },
        }
    ),
}

CONTENT_TOOL: dict[str, Any] = {
    "name": "get_page_content",
    "description": """Get page content as accessibility snapshot (default), plain text, or HTML file.
- snapshot: compact outline of the rendered element tree (roles, names, key attributes)
- text: whitespace-normalized visible text
- html: full HTML saved to a file (path returned)""",
    "inputSchema": _schema(
        {
            "format": {
                "type": "string",
                "enum": ["snapshot", "text", "html"],
                "default": "snapshot",
                "description": 'Output format: "snapshot" (structured tree, default), "text" (plain text), '
                'or "html" (saves to file)',
            },
            "filename": {"type": "string", "description": "Custom filename for format=html"},
        }
    ),
}

CONSOLE_TOOL: dict[str, Any] = {
    "name": "read_console_logs",
    "description": """Read console logs, errors, and warnings captured from the page since session start or last clear.""",
    "inputSchema": _schema(
        {
            "log_type": {
                "type": "string",
                "default": "all",
                "description": 'Filter by log type: "all", "error", "warning", "log", "info". Default: "all"',
            },
            "clear": {
                "type": "boolean",
                "default": False,
                "description": "After reading, clear the entire log buffer "
                "(all types, not only entries matching log_type)",
            },
        }
    ),
}


TOOL_DEFINITIONS: list[dict[str, Any]] = [
    SCREENSHOT_TOOL,
    CLICK_TOOL,
    FILL_INPUT_TOOL,
    NAVIGATE_TOOL,
    CONSOLE_TOOL,
    CONTENT_TOOL,
    WAIT_FOR_TOOL,
]
