"""
Tool handlers organized by domain.

Each module exports a dict of handlers that can be registered with ToolRegistry.
"""

from typing import Any

from .capture import CAPTURE_HANDLERS
from .console import CONSOLE_HANDLERS
from .interaction import INTERACTION_HANDLERS
from .navigation import NAVIGATION_HANDLERS

TOOL_HANDLERS: dict[str, Any] = {
    **CAPTURE_HANDLERS,
    **INTERACTION_HANDLERS,
    **NAVIGATION_HANDLERS,
    **CONSOLE_HANDLERS,
}

__all__ = [
    "TOOL_HANDLERS",
    "CAPTURE_HANDLERS",
    "CONSOLE_HANDLERS",
    "INTERACTION_HANDLERS",
    "NAVIGATION_HANDLERS",
]
