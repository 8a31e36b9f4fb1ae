"""Small helpers for identifying potentially sensitive keys and selectors.

Used when logging tool arguments so secrets typed into forms never reach logs.
"""

from __future__ import annotations

import re

_SENSITIVE_SUBSTRINGS = (
    "token",
    "secret",
    "password",
    "passwd",
    "pwd",
    "authorization",
    "cookie",
    "jwt",
    "bearer",
    "api-key",
    "api_key",
    "apikey",
    "cvv",
)

# Matched as whole tokens only, so "author" and "#footprint" stay visible.
_SENSITIVE_TOKENS = {"auth", "otp"}

_TOKEN_SPLIT_RE = re.compile(r"[^a-z0-9]+")


def is_sensitive_key(key: str) -> bool:
    k = (key or "").strip().lower()
    if not k:
        return False
    if any(s in k for s in _SENSITIVE_SUBSTRINGS):
        return True
    return any(token in _SENSITIVE_TOKENS for token in _TOKEN_SPLIT_RE.split(k))
