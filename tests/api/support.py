# This file provides shared helpers for API endpoint tests.
# Tests can override the forecast-service client without touching the network.
# The helpers build consistent config objects and scoped TestClient contexts.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastapi.testclient import TestClient

from scenario_sage.api.api_config import ApiConfig
from scenario_sage.api.app import app
from scenario_sage.api.dependencies import get_config, get_forecast_client


def build_test_config(*, max_csv_chars: int = 10_000) -> ApiConfig:
    """Create deterministic API config for tests."""

    return ApiConfig(
        api_name="Test Scenario API",
        api_version_path="/api/v1",
        schema_version="1.0.0",
        host="0.0.0.0",
        port=8000,
        environment="test",
        max_csv_chars=max_csv_chars,
        default_forecast_length=30,
        allowed_origins=[],
        app_version="0.1.0",
    )


class FakeForecastClient:
    """Forecast-service stand-in that records payloads and replays canned results."""

    def __init__(
        self,
        *,
        forecast_result: Any = None,
        summary_result: Any = None,
        error: Exception | None = None,
    ) -> None:
        self.forecast_result = forecast_result
        self.summary_result = summary_result
        self.error = error
        self.forecast_calls: list[Any] = []
        self.summary_calls: list[Any] = []

    def generate_scenario_forecast(self, payload: Any) -> Any:
        self.forecast_calls.append(payload)
        if self.error is not None:
            raise self.error
        return self.forecast_result

    def summarize_scenario_results(self, payload: Any) -> Any:
        self.summary_calls.append(payload)
        if self.error is not None:
            raise self.error
        return self.summary_result


@contextmanager
def api_test_client(
    *,
    config: ApiConfig | None = None,
    forecast_client: Any | None = None,
) -> Iterator[TestClient]:
    """Yield a TestClient with scoped dependency overrides."""

    resolved_config = config or build_test_config()
    resolved_client = forecast_client or FakeForecastClient()

    app.dependency_overrides[get_config] = lambda: resolved_config
    app.dependency_overrides[get_forecast_client] = lambda: resolved_client

    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
