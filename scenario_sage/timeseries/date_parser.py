"""
Best-effort parsing of heterogeneous date tokens into comparable naive datetimes.
Known layouts are tried in a fixed order before a free-form fallback, so ambiguous
tokens such as `01/02/2024` always resolve the same way (month first).
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Final

import pandas as pd

# Order matters: the first layout that yields a calendar-valid date wins.
DATE_LAYOUTS: Final[tuple[str, ...]] = (
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%Y/%m/%d",
    "%m-%d-%Y",
    "%d-%m-%Y",
    "%Y%m%d",
)

_COMPACT_DATE_RE = re.compile(r"^\d{8}$")


def _parse_with_layouts(token: str) -> datetime | None:
    for layout in DATE_LAYOUTS:
        if layout == "%Y%m%d" and not _COMPACT_DATE_RE.match(token):
            continue
        try:
            return datetime.strptime(token, layout)
        except ValueError:
            continue
    return None


def _parse_free_form(token: str) -> datetime | None:
    try:
        parsed = pd.to_datetime(token, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed is None or pd.isna(parsed):
        return None
    if parsed.tzinfo is not None:
        # Keep the wall-clock reading; offsets are not normalized.
        parsed = parsed.tz_localize(None)
    return parsed.to_pydatetime()


def parse_date(token: str | None) -> datetime | None:
    """Parse a raw timestamp token, returning None when no layout yields a valid date."""

    if not isinstance(token, str):
        return None
    cleaned = token.strip()
    if not cleaned:
        return None
    return _parse_with_layouts(cleaned) or _parse_free_form(cleaned)


def date_sort_key(token: str) -> tuple[int, datetime] | tuple[int, str]:
    """Total-order sort key: parseable tokens chronologically, then unparseable tokens lexically."""

    parsed = parse_date(token)
    if parsed is not None:
        return (0, parsed)
    return (1, token)


def compare_date_tokens(left: str, right: str) -> int:
    """Three-way comparison in the same total order as `date_sort_key`."""

    left_key = date_sort_key(left)
    right_key = date_sort_key(right)
    return (left_key > right_key) - (left_key < right_key)
