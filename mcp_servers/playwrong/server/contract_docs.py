"""Render user-facing contract docs.

Deterministic rendering of the tool contract markdown, kept as a real module
so tests can exercise it against the live `tools/list` output.
"""

from __future__ import annotations

from typing import Any


def _arguments_line(schema: dict[str, Any]) -> str:
    props = schema.get("properties") or {}
    required = set(schema.get("required") or [])
    parts: list[str] = []
    for name, prop in props.items():
        typ = prop.get("type", "any") if isinstance(prop, dict) else "any"
        parts.append(f"`{name}`{'*' if name in required else ''}: {typ}")
    return ", ".join(parts)


def render_tools_markdown(snapshot: dict[str, Any]) -> str:
    tools = snapshot.get("tools") or []
    lines: list[str] = []
    lines.append("# MCP Tool Contract")
    lines.append("")
    lines.append(f"- protocolVersion: `{snapshot.get('protocolVersion')}`")

    server_info = snapshot.get("serverInfo") or {}
    lines.append(f"- server: `{server_info.get('name')}` v`{server_info.get('version')}`")
    lines.append(f"- tools: `{len(tools)}`")
    lines.append("")

    lines.append("## Tools")
    lines.append("")
    lines.append("| name | description | arguments (* = required) |")
    lines.append("|---|---|---|")
    for tool in tools:
        if not isinstance(tool, dict):
            continue
        name = str(tool.get("name", ""))
        desc = str(tool.get("description", "")).strip().splitlines()[0] if tool.get("description") else ""
        desc = desc.replace("|", "\\|")
        args = _arguments_line(tool.get("inputSchema") or {}).replace("|", "\\|")
        lines.append(f"| `{name}` | {desc} | {args} |")

    lines.append("")
    lines.append("## Notes")
    lines.append("")
    lines.append("- `tools/list` is the source of truth for the tool list and input schemas.")
    lines.append("- Tool outputs are returned as MCP `content[]` items (`text` or `image`).")
    lines.append("- Unknown arguments are ignored; missing required arguments produce `isError=true`, not a protocol error.")
    lines.append(
        "- Browser failures (timeouts, missing elements, crashed pages) are reported inside the result payload."
    )

    return "\n".join(lines) + "\n"
