"""Typed argument structs for each tool.

Arguments are parsed once at the handler boundary. Unknown keys are ignored;
missing or malformed required arguments raise SmartToolError, which the
handler boundary turns into an error result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .base import SmartToolError

DEFAULT_WAIT_TIMEOUT_MS = 30_000

VIEWPORT_PRESETS: dict[str, tuple[int, int]] = {
    "mobile": (375, 667),
    "tablet": (768, 1024),
    "desktop": (1280, 720),
    "desktop-hd": (1920, 1080),
}

CONTENT_FORMATS = ("snapshot", "text", "html")
SCREENSHOT_OUTPUTS = ("inline", "file")


def _invalid(tool: str, reason: str, suggestion: str) -> SmartToolError:
    return SmartToolError(tool=tool, action="validate", reason=reason, suggestion=suggestion)


def _opt_str(args: dict[str, Any], key: str) -> str | None:
    value = args.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None
    return str(value)


def _opt_bool(args: dict[str, Any], key: str, default: bool | None = None) -> bool | None:
    value = args.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _opt_positive_int(tool: str, args: dict[str, Any], key: str) -> int | None:
    value = args.get(key)
    if value is None or value == "":
        return None
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        raise _invalid(tool, f"{key} must be a number", f"Pass {key} as a positive number") from None
    if number <= 0:
        raise _invalid(tool, f"{key} must be positive", f"Pass {key} as a positive number")
    return number


def _require_str(tool: str, args: dict[str, Any], key: str, *, allow_empty: bool = False) -> str:
    value = args.get(key)
    if not isinstance(value, str) or (not allow_empty and not value.strip()):
        raise _invalid(tool, f"{key} parameter is required", f"Provide {key}=...")
    return value


@dataclass(frozen=True)
class SessionArgs:
    session_id: str | None = None
    show_browser: bool | None = None

    @staticmethod
    def _session_fields(args: dict[str, Any]) -> dict[str, Any]:
        return {"session_id": _opt_str(args, "session_id"), "show_browser": _opt_bool(args, "show_browser")}


@dataclass(frozen=True)
class NavigateArgs(SessionArgs):
    url: str = ""

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> NavigateArgs:
        return cls(url=_require_str("navigate", args, "url").strip(), **cls._session_fields(args))


@dataclass(frozen=True)
class ClickArgs(SessionArgs):
    selector: str = ""

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> ClickArgs:
        return cls(selector=_require_str("click_element", args, "selector"), **cls._session_fields(args))


@dataclass(frozen=True)
class FillInputArgs(SessionArgs):
    selector: str = ""
    text: str = ""

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> FillInputArgs:
        selector = _require_str("fill_input", args, "selector")
        # Empty text is valid: it clears the field.
        text = _require_str("fill_input", args, "text", allow_empty=True)
        return cls(selector=selector, text=text, **cls._session_fields(args))


@dataclass(frozen=True)
class WaitForArgs(SessionArgs):
    selector: str = ""
    timeout_ms: int = DEFAULT_WAIT_TIMEOUT_MS

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> WaitForArgs:
        selector = _require_str("wait_for_element", args, "selector")
        timeout = _opt_positive_int("wait_for_element", args, "timeout_ms") or DEFAULT_WAIT_TIMEOUT_MS
        return cls(selector=selector, timeout_ms=timeout, **cls._session_fields(args))


@dataclass(frozen=True)
class ScreenshotArgs(SessionArgs):
    full_page: bool = True
    viewport: str | None = None
    width: int | None = None
    height: int | None = None
    output: str = "inline"
    filename: str | None = None

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> ScreenshotArgs:
        tool = "take_screenshot"
        viewport = _opt_str(args, "viewport")
        if viewport is not None:
            viewport = viewport.lower()
            if viewport not in VIEWPORT_PRESETS:
                raise _invalid(tool, f"Unknown viewport preset: {viewport}", f"Use one of: {', '.join(VIEWPORT_PRESETS)}")
        width = _opt_positive_int(tool, args, "width")
        height = _opt_positive_int(tool, args, "height")
        if (width is None) != (height is None):
            raise _invalid(tool, "width and height must be given together", "Pass both width and height, or a viewport preset")
        output = (_opt_str(args, "output") or "inline").lower()
        if output not in SCREENSHOT_OUTPUTS:
            raise _invalid(tool, f"Unknown output: {output}", "Use output='inline' or output='file'")
        return cls(
            full_page=bool(_opt_bool(args, "full_page", True)),
            viewport=viewport,
            width=width,
            height=height,
            output=output,
            filename=_opt_str(args, "filename"),
            **cls._session_fields(args),
        )

    def requested_size(self) -> tuple[str, int, int] | None:
        """(label, width, height) if a resize was requested. Custom size wins over a preset."""
        if self.width is not None and self.height is not None:
            return f"{self.width}x{self.height}", self.width, self.height
        if self.viewport is not None:
            width, height = VIEWPORT_PRESETS[self.viewport]
            return self.viewport, width, height
        return None


@dataclass(frozen=True)
class ConsoleLogsArgs(SessionArgs):
    log_type: str = "all"
    clear: bool = False

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> ConsoleLogsArgs:
        log_type = (_opt_str(args, "log_type") or "all").lower()
        # The driver reports warnings as "warning".
        if log_type == "warn":
            log_type = "warning"
        return cls(
            log_type=log_type,
            clear=bool(_opt_bool(args, "clear", False)),
            **cls._session_fields(args),
        )


@dataclass(frozen=True)
class PageContentArgs(SessionArgs):
    format: str = "snapshot"
    filename: str | None = None

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> PageContentArgs:
        fmt = (_opt_str(args, "format") or "snapshot").lower()
        if fmt not in CONTENT_FORMATS:
            raise _invalid("get_page_content", f"Unknown format: {fmt}", f"Use one of: {', '.join(CONTENT_FORMATS)}")
        return cls(format=fmt, filename=_opt_str(args, "filename"), **cls._session_fields(args))
