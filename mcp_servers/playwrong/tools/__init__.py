"""
Browser tool building blocks.

Each module provides focused functionality:
- base: errors, session resolution, handler boundary
- params: typed argument structs per tool
- snapshot: compact page outline
- screenshot: PNG sizing and inline downscaling
"""

from .base import NO_SESSION_MESSAGE, SmartToolError, handler_boundary, resolve_session
from .params import (
    ClickArgs,
    ConsoleLogsArgs,
    FillInputArgs,
    NavigateArgs,
    PageContentArgs,
    ScreenshotArgs,
    WaitForArgs,
)
from .snapshot import page_outline, render_outline

__all__ = [
    "NO_SESSION_MESSAGE",
    "SmartToolError",
    "handler_boundary",
    "resolve_session",
    "ClickArgs",
    "ConsoleLogsArgs",
    "FillInputArgs",
    "NavigateArgs",
    "PageContentArgs",
    "ScreenshotArgs",
    "WaitForArgs",
    "page_outline",
    "render_outline",
]
