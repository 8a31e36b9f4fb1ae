"""Artifact writer for screenshots and saved page HTML.

Keeps large payloads out of tool responses: the file is written to the
configured output directory and only its path travels back to the client.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from ..browser_session import iso_now
from ..config import PlaywrongConfig

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]+")


def sanitized_timestamp(iso: str | None = None) -> str:
    """ISO-8601 timestamp safe for filenames (`:` and `.` become `-`)."""
    return re.sub(r"[:.]", "-", iso or iso_now())


def safe_filename(raw: str, *, default_ext: str) -> str:
    """Reduce a caller-supplied name to a bare, filesystem-safe basename."""
    name = Path(str(raw or "").replace("\\", "/")).name
    name = _UNSAFE_CHARS_RE.sub("_", name).strip("._")
    if not name:
        raise ValueError("filename is empty after sanitizing")
    ext = default_ext if default_ext.startswith(".") else f".{default_ext}"
    if not name.lower().endswith(ext.lower()):
        name += ext
    return name


@dataclass(frozen=True)
class ArtifactRef:
    path: str
    bytes: int
    mime_type: str


class ArtifactWriter:
    def __init__(self, config: PlaywrongConfig, base_dir: Path | None = None) -> None:
        self.config = config
        self._base_dir = base_dir

    @property
    def base_dir(self) -> Path:
        return self._base_dir or self.config.artifacts_dir()

    def _target(self, filename: str | None, *, default_name: str, ext: str) -> Path:
        base = self.base_dir
        base.mkdir(parents=True, exist_ok=True)
        name = safe_filename(filename, default_ext=ext) if filename else default_name
        return (base / name).resolve()

    def screenshot_name(self, viewport_label: str) -> str:
        label = _UNSAFE_CHARS_RE.sub("_", viewport_label or "viewport").strip("_") or "viewport"
        return f"screenshot-{label}-{sanitized_timestamp()}.png"

    def html_name(self) -> str:
        return f"page-{sanitized_timestamp()}.html"

    def write_bytes(
        self, data: bytes, *, filename: str | None, default_name: str, ext: str, mime_type: str
    ) -> ArtifactRef:
        path = self._target(filename, default_name=default_name, ext=ext)
        path.write_bytes(data)
        return ArtifactRef(path=str(path), bytes=path.stat().st_size, mime_type=mime_type)

    def write_text(
        self, text: str, *, filename: str | None, default_name: str, ext: str, mime_type: str
    ) -> ArtifactRef:
        path = self._target(filename, default_name=default_name, ext=ext)
        path.write_text(text, encoding="utf-8")
        return ArtifactRef(path=str(path), bytes=path.stat().st_size, mime_type=mime_type)
