"""
Typed containers shared by the time-series parsing, frequency, and reconciliation modules.
Points are immutable once parsed; reconciled rows carry one value per series keyed by series id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

HISTORICAL_KEY = "historical"


class Frequency(str, Enum):
    """Sampling frequency inferred from consecutive point gaps."""

    DAYS = "days"
    MONTHS = "months"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TimeSeriesPoint:
    date: str
    value: float

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "value": self.value}


@dataclass
class ReconciledRow:
    """One chart row: a raw date token plus the values observed for it."""

    date: str
    historical: float | None = None
    series: dict[str, float] = field(default_factory=dict)

    def to_record(self) -> dict[str, Any]:
        """Flatten into the `{date, historical, <series_id>...}` chart record."""

        record: dict[str, Any] = {"date": self.date}
        if self.historical is not None:
            record[HISTORICAL_KEY] = self.historical
        record.update(self.series)
        return record


@dataclass(frozen=True)
class ScenarioRecord:
    """A generated scenario: its identity, the request that produced it, and the service output."""

    id: str
    name: str
    price_change_description: str
    forecast_length: str
    forecasted_data: str
    summary: str = ""
    is_custom_price_scenario: bool = False


@dataclass
class ReconciliationResult:
    rows: list[ReconciledRow]
    series_ids: list[str]
    warnings: list[str] = field(default_factory=list)

    def to_records(self) -> list[dict[str, Any]]:
        return [row.to_record() for row in self.rows]
