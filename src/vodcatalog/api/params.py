"""Lenient coercion of query-string values.

Query parameters are read as raw strings and parsed here; anything that
does not parse falls back to the parameter's default instead of failing
the request.
"""

from __future__ import annotations

import re

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIST_LIMIT = 100


def parse_int(value: str | None) -> int | None:
    """Parse the leading integer of ``value`` ("12abc" -> 12, "abc" -> None)."""
    if value is None:
        return None
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def positive_int(value: str | None, default: int) -> int:
    """Leading integer of ``value`` if it is at least 1, else ``default``."""
    parsed = parse_int(value)
    if parsed is None or parsed < 1:
        return default
    return parsed


def list_page(value: str | None) -> int:
    """``page`` for the list endpoint: default 1."""
    return positive_int(value, DEFAULT_PAGE)


def list_limit(value: str | None) -> int:
    """``limit`` for the list endpoint: default 20, at most 100."""
    return min(MAX_LIST_LIMIT, positive_int(value, DEFAULT_LIMIT))


def search_limit(value: str | None) -> int:
    """``limit`` for the search endpoint: default 20, no upper bound."""
    return positive_int(value, DEFAULT_LIMIT)


def collect_pages(value: str | None) -> int:
    """``pages`` for the manual collection trigger: default 1."""
    return positive_int(value, 1)


def parse_vod_id(value: str) -> int | None:
    """A detail path segment as a video id, or None when it is not one."""
    text = value.strip()
    return int(text) if text.isascii() and text.isdigit() else None
