"""
Heuristic detection of daily versus monthly sampling for uploaded history.
The thresholds below drive the default forecast horizon units, so they are kept fixed.
"""

from __future__ import annotations

import calendar
from collections.abc import Sequence
from datetime import datetime
from functools import cmp_to_key
from typing import Final

from scenario_sage.timeseries.date_parser import parse_date
from scenario_sage.timeseries.models import Frequency, TimeSeriesPoint

MAX_SAMPLED_GAPS: Final[int] = 10
MAJORITY_SHARE: Final[float] = 0.7
MONTHLY_GAP_DAYS: Final[tuple[int, int]] = (28, 31)
LOOSE_DAILY_MAX_DAYS: Final[int] = 7
MONTHLY_AVERAGE_DAYS: Final[tuple[float, float]] = (25.0, 35.0)
DAILY_AVERAGE_DAYS: Final[tuple[float, float]] = (0.8, 1.5)
MONTH_SPAN_TOLERANCE: Final[float] = 0.2
DEFAULT_MAX_FORECAST_LENGTH: Final[int] = 100
DEFAULT_FORECAST_LENGTH: Final[int] = 30

_SECONDS_PER_DAY = 86400


def _day_difference(earlier: datetime, later: datetime) -> int:
    """Whole days between two instants, truncated toward zero."""

    return int((later - earlier).total_seconds() / _SECONDS_PER_DAY)


def _is_last_day_of_month(value: datetime) -> bool:
    return value.day == calendar.monthrange(value.year, value.month)[1]


def _month_difference(earlier: datetime, later: datetime) -> int:
    """Whole calendar months elapsed; a month ending on its last day counts as complete."""

    if later < earlier:
        return -_month_difference(later, earlier)
    months = (later.year - earlier.year) * 12 + (later.month - earlier.month)
    if months > 0:
        incomplete = (later.day, later.time()) < (earlier.day, earlier.time())
        if incomplete and not _is_last_day_of_month(later):
            months -= 1
    return months


def _compare_parsed(
    left: tuple[TimeSeriesPoint, datetime | None], right: tuple[TimeSeriesPoint, datetime | None]
) -> int:
    left_dt, right_dt = left[1], right[1]
    if left_dt is None or right_dt is None:
        return 0
    return (left_dt > right_dt) - (left_dt < right_dt)


def _classify_gap(day_diff: int, month_diff: int) -> str | None:
    if month_diff == 1 and MONTHLY_GAP_DAYS[0] <= day_diff <= MONTHLY_GAP_DAYS[1]:
        return "monthly"
    if day_diff == 1 and month_diff == 0:
        return "daily"
    if 1 < day_diff < LOOSE_DAILY_MAX_DAYS and month_diff == 0:
        return "daily"
    if month_diff == 1:
        return "monthly"
    return None


def detect_time_series_frequency(points: Sequence[TimeSeriesPoint]) -> Frequency:
    """Infer whether points are sampled daily or monthly.

    Up to the first ten consecutive gaps are classified; a 70% majority decides. Otherwise
    the average spacing over the whole series is checked against monthly and daily bands.
    """

    if len(points) < 2:
        return Frequency.UNKNOWN

    parsed = sorted(
        ((point, parse_date(point.date)) for point in points),
        key=cmp_to_key(_compare_parsed),
    )

    sample_size = min(len(parsed) - 1, MAX_SAMPLED_GAPS)
    daily_gaps = 0
    monthly_gaps = 0
    for index in range(sample_size):
        current = parsed[index][1]
        following = parsed[index + 1][1]
        if current is None or following is None:
            return Frequency.UNKNOWN

        kind = _classify_gap(
            _day_difference(current, following),
            _month_difference(current, following),
        )
        if kind == "monthly":
            monthly_gaps += 1
        elif kind == "daily":
            daily_gaps += 1

    if monthly_gaps > daily_gaps and monthly_gaps >= MAJORITY_SHARE * sample_size:
        return Frequency.MONTHS
    if daily_gaps > monthly_gaps and daily_gaps >= MAJORITY_SHARE * sample_size:
        return Frequency.DAYS

    first = parsed[0][1]
    last = parsed[-1][1]
    if first is None or last is None:
        return Frequency.UNKNOWN

    intervals = len(parsed) - 1
    average_days = _day_difference(first, last) / intervals
    month_span = _month_difference(first, last)
    if (
        MONTHLY_AVERAGE_DAYS[0] <= average_days <= MONTHLY_AVERAGE_DAYS[1]
        and abs(month_span - intervals) <= MONTH_SPAN_TOLERANCE * intervals
    ):
        return Frequency.MONTHS
    if DAILY_AVERAGE_DAYS[0] <= average_days <= DAILY_AVERAGE_DAYS[1]:
        return Frequency.DAYS
    return Frequency.UNKNOWN


def format_forecast_length(length: int, frequency: Frequency) -> str:
    """Render the horizon phrase sent to the forecast service, e.g. `next 30 days`."""

    unit = "periods" if frequency is Frequency.UNKNOWN else frequency.value
    return f"next {length} {unit}"


def forecast_length_bounds(
    demand_points: Sequence[TimeSeriesPoint],
    price_points: Sequence[TimeSeriesPoint],
    current: int = DEFAULT_FORECAST_LENGTH,
) -> tuple[int, int]:
    """Return `(max_length, clamped_length)` for the forecast horizon selector."""

    if demand_points:
        max_length = len(demand_points)
    elif price_points:
        max_length = len(price_points)
    else:
        max_length = DEFAULT_MAX_FORECAST_LENGTH
    return max_length, max(1, min(current, max_length))
