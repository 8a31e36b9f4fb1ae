"""Redaction utilities for logging.

Prefers safety over perfect fidelity: removes obvious secrets and large
payloads (e.g. screenshots) from logs.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from ..sensitivity import is_sensitive_key

_MAX_LOG_STRING = 200


def redact_url(url: str) -> str:
    """Redact suspicious URL parameters without destroying normal queries.

    - Keeps non-sensitive query params intact (e.g., q=search, filters).
    - Redacts values for keys like token/auth/secret/api-key.
    - Removes userinfo (`user:pass@host`) from netloc.

    Returns the original URL unchanged when no redaction is needed.
    """
    if not isinstance(url, str) or not url:
        return url
    try:
        parts = urlsplit(url)
    except ValueError:
        return url

    changed = False
    netloc = parts.netloc
    query = parts.query

    if "@" in netloc:
        netloc = netloc.split("@", 1)[1]
        changed = True

    if query:
        pairs = parse_qsl(query, keep_blank_values=True)
        out_pairs: list[tuple[str, str]] = []
        redacted_any = False
        for k, v in pairs:
            if is_sensitive_key(k) and v:
                out_pairs.append((k, "<redacted>"))
                redacted_any = True
            else:
                out_pairs.append((k, v))
        if redacted_any:
            query = urlencode(out_pairs, doseq=True)
            changed = True

    if not changed:
        return url
    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


def _redacted_summary(value: Any) -> str:
    if value is None:
        return "<redacted>"
    if isinstance(value, (bytes, bytearray)):
        return f"<redacted bytes len={len(value)}>"
    if isinstance(value, str):
        return f"<redacted str len={len(value)}>"
    if isinstance(value, (list, tuple, set)):
        return f"<redacted list len={len(value)}>"
    if isinstance(value, dict):
        return f"<redacted dict keys={len(value)}>"
    return "<redacted>"


def _truncate(value: str, limit: int = _MAX_LOG_STRING) -> str:
    if len(value) <= limit:
        return value
    return value[:limit] + f"… <truncated len={len(value)}>"


def redact_tool_arguments(tool: str, args: dict[str, Any]) -> dict[str, Any]:
    """Redact tool arguments for safe logging."""
    if not isinstance(args, dict):
        return {}
    out: dict[str, Any] = {}
    selector = args.get("selector")
    sensitive_target = isinstance(selector, str) and is_sensitive_key(selector)
    for key, value in args.items():
        lk = str(key).lower()
        if lk == "url" and isinstance(value, str):
            out[key] = redact_url(value)
        elif tool == "fill_input" and lk == "text" and sensitive_target:
            out[key] = _redacted_summary(value)
        elif is_sensitive_key(lk):
            out[key] = _redacted_summary(value)
        elif isinstance(value, str):
            out[key] = _truncate(value)
        else:
            out[key] = value
    return out


def redact_jsonrpc_for_log(payload: dict[str, Any], *, max_text_chars: int = 512) -> dict[str, Any]:
    """Redact a JSON-RPC message for debug logs.

    - Tool call args are redacted based on tool name.
    - Image content is replaced with a short placeholder.
    - Large text blobs are truncated.
    """
    msg = dict(payload) if isinstance(payload, dict) else {}

    params = msg.get("params")
    if msg.get("method") == "tools/call" and isinstance(params, dict):
        name = params.get("name")
        args = params.get("arguments")
        if isinstance(name, str) and isinstance(args, dict):
            params = dict(params)
            params["arguments"] = redact_tool_arguments(name, args)
            msg["params"] = params

    result = msg.get("result")
    if isinstance(result, dict) and isinstance(result.get("content"), list):
        redacted_content = []
        for item in result["content"]:
            if not isinstance(item, dict):
                redacted_content.append(item)
                continue
            it = dict(item)
            if it.get("type") == "image" and isinstance(it.get("data"), str):
                it["data"] = f"<omitted image base64 len={len(it['data'])}>"
            if it.get("type") == "text" and isinstance(it.get("text"), str):
                it["text"] = _truncate(it["text"], max_text_chars)
            redacted_content.append(it)
        result = dict(result)
        result["content"] = redacted_content
        msg["result"] = result

    return msg
