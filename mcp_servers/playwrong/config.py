from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

SUPPORTED_ENGINES: tuple[str, ...] = ("chromium", "firefox", "webkit")

OUTPUT_MODES: tuple[str, ...] = ("cwd", "subdir", "temp")

# Desktop viewport every new page starts with.
DEFAULT_VIEWPORT: dict[str, int] = {"width": 1280, "height": 720}


def expand_path(raw: str) -> str:
    return str(Path(raw).expanduser())


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off"}


def _env_int(name: str, default: int, *, min_v: int = 0) -> int:
    try:
        value = int(os.environ.get(name, "") or default)
    except ValueError:
        return default
    return value if value >= min_v else default


@dataclass
class PlaywrongConfig:
    browser_type: str = "chromium"
    headless: bool = True
    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = False
    output_mode: str = "subdir"
    output_dir: str | None = None
    inline_image_max_bytes: int = 1_000_000
    text_max_chars: int = 20_000

    @staticmethod
    def normalize_engine(raw: str | None) -> str:
        engine = (raw or "").strip().lower()
        if engine in {"", "chromium", "chrome", "chromium-browser", "msedge", "edge"}:
            return "chromium"
        if engine in {"firefox", "ff", "gecko"}:
            return "firefox"
        if engine in {"webkit", "safari"}:
            return "webkit"
        # Unknown engines are rejected when a session is created.
        return engine

    @staticmethod
    def normalize_output_mode(raw: str | None) -> str:
        mode = (raw or "").strip().lower()
        if mode in {"cwd", "workdir", "here"}:
            return "cwd"
        if mode in {"temp", "tmp", "tempdir"}:
            return "temp"
        return "subdir"

    @classmethod
    def from_env(cls) -> PlaywrongConfig:
        load_dotenv()
        output_dir = os.environ.get("MCP_OUTPUT_DIR")
        return cls(
            browser_type=cls.normalize_engine(os.environ.get("MCP_BROWSER_TYPE")),
            headless=_env_bool("MCP_HEADLESS", True),
            host=(os.environ.get("MCP_HTTP_HOST") or "127.0.0.1").strip(),
            port=_env_int("MCP_HTTP_PORT", 3000, min_v=1),
            debug=_env_bool("MCP_DEBUG", False),
            output_mode=cls.normalize_output_mode(os.environ.get("MCP_OUTPUT_MODE")),
            output_dir=expand_path(output_dir) if output_dir and output_dir.strip() else None,
            inline_image_max_bytes=_env_int("MCP_INLINE_IMAGE_MAX_BYTES", 1_000_000, min_v=1),
            text_max_chars=_env_int("MCP_TEXT_MAX_CHARS", 20_000, min_v=1),
        )

    def resolve_headless(self, show_browser: bool | None) -> bool:
        """An explicit request to show the browser wins over the configured default."""
        if show_browser is True:
            return False
        return self.headless

    def artifacts_dir(self) -> Path:
        if self.output_dir:
            return Path(self.output_dir)
        if self.output_mode == "cwd":
            return Path.cwd()
        if self.output_mode == "temp":
            return Path(tempfile.gettempdir()) / "playwrong"
        return Path.cwd() / ".playwrong"
