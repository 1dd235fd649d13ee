# This file enforces size limits on CSV text submitted to the API.
# Oversized uploads are rejected before any parsing work starts.

from __future__ import annotations

from scenario_sage.api.error_handlers import APIError


def ensure_csv_within_limit(csv_text: str | None, *, max_chars: int, field_name: str) -> None:
    """Raise a 413 APIError when `csv_text` exceeds `max_chars` characters."""

    if csv_text is not None and len(csv_text) > max_chars:
        raise APIError(
            status_code=413,
            error_code="CSV_TOO_LARGE",
            message=f"{field_name} exceeds the maximum of {max_chars} characters.",
            details={"field": field_name, "length": len(csv_text), "max_chars": max_chars},
        )
