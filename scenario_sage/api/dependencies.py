# This file provides dependency factories for FastAPI routes.
# Shared collaborators are created once and injected, which keeps routers thin
# and lets endpoint tests swap in fakes through dependency overrides.

from __future__ import annotations

from functools import lru_cache

from scenario_sage.api.api_config import ApiConfig, get_api_config
from scenario_sage.forecast_service.client import ForecastServiceClient


@lru_cache(maxsize=1)
def get_forecast_client() -> ForecastServiceClient:
    return ForecastServiceClient.from_config()


def get_config() -> ApiConfig:
    return get_api_config()
