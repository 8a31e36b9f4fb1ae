"""Session records kept by the session registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_now() -> str:
    return utc_now().isoformat().replace("+00:00", "Z")


@dataclass(slots=True, frozen=True)
class ConsoleEntry:
    """One console message or uncaught page error."""

    type: str
    message: str
    timestamp: str = field(default_factory=iso_now)

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "message": self.message, "timestamp": self.timestamp}


@dataclass(slots=True)
class BrowserSession:
    """A live browser plus its single page.

    Both handles are owned exclusively by the session and are closed with it.
    """

    id: str
    browser: Any
    page: Any
    headless: bool = True
    created_at: datetime = field(default_factory=utc_now)
    last_used_at: datetime = field(default_factory=utc_now)

    def touch(self) -> None:
        self.last_used_at = utc_now()
