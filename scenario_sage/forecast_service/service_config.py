# This file defines runtime configuration for the forecast-service client.
# Endpoint paths and timeouts can be tuned through environment variables without code edits.
# The base URL comes from the shared settings so one `.env` entry configures both API and client.

from __future__ import annotations

import os
from dataclasses import dataclass

from scenario_sage.common.settings import get_settings


@dataclass(frozen=True)
class ForecastServiceConfig:
    base_url: str
    forecast_path: str
    summarize_path: str
    timeout_seconds: int


def _normalize_path(raw: str) -> str:
    cleaned = raw.strip()
    return cleaned if cleaned.startswith("/") else f"/{cleaned}"


def load_forecast_service_config() -> ForecastServiceConfig:
    settings = get_settings()
    return ForecastServiceConfig(
        base_url=settings.FORECAST_SERVICE_URL.rstrip("/"),
        forecast_path=_normalize_path(os.getenv("FORECAST_SERVICE_FORECAST_PATH", "/forecast")),
        summarize_path=_normalize_path(os.getenv("FORECAST_SERVICE_SUMMARIZE_PATH", "/summarize")),
        timeout_seconds=settings.FORECAST_SERVICE_TIMEOUT_SECONDS,
    )
