# This file implements the HTTP client for the hosted forecast and summarization services.
# It keeps request details in one place so the actions and API routers only deal with typed contracts.
# Transport failures become one clear exception type; an `{"error": ...}` payload becomes a ServiceError.

from __future__ import annotations

import logging
from typing import Any, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from scenario_sage.forecast_service.schemas import (
    ScenarioForecastInput,
    ScenarioForecastOutput,
    ServiceError,
    SummarizeScenarioResultsInput,
    SummarizeScenarioResultsOutput,
)
from scenario_sage.forecast_service.service_config import (
    ForecastServiceConfig,
    load_forecast_service_config,
)

LOGGER = logging.getLogger("forecast_service")

_OutputT = TypeVar("_OutputT", bound=BaseModel)


class ForecastServiceUnavailableError(RuntimeError):
    """Raised when the forecast service cannot be reached or responds with server errors."""


class ForecastServiceClient:
    def __init__(
        self,
        *,
        base_url: str,
        forecast_path: str = "/forecast",
        summarize_path: str = "/summarize",
        timeout_seconds: int = 60,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.forecast_path = forecast_path
        self.summarize_path = summarize_path
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    @classmethod
    def from_config(
        cls, config: ForecastServiceConfig | None = None, *, session: requests.Session | None = None
    ) -> ForecastServiceClient:
        resolved = config or load_forecast_service_config()
        return cls(
            base_url=resolved.base_url,
            forecast_path=resolved.forecast_path,
            summarize_path=resolved.summarize_path,
            timeout_seconds=resolved.timeout_seconds,
            session=session,
        )

    def generate_scenario_forecast(
        self, payload: ScenarioForecastInput
    ) -> ScenarioForecastOutput | ServiceError:
        body = self._post_json(self.forecast_path, payload.to_wire())
        return self._parse_result(body, ScenarioForecastOutput, self.forecast_path)

    def summarize_scenario_results(
        self, payload: SummarizeScenarioResultsInput
    ) -> SummarizeScenarioResultsOutput | ServiceError:
        body = self._post_json(self.summarize_path, payload.to_wire())
        return self._parse_result(body, SummarizeScenarioResultsOutput, self.summarize_path)

    def _parse_result(
        self, body: dict[str, Any], model: type[_OutputT], path: str
    ) -> _OutputT | ServiceError:
        if "error" in body:
            LOGGER.warning("Forecast service reported an error for %s: %s", path, body["error"])
            return ServiceError(error=str(body["error"]))
        try:
            return model.model_validate(body)
        except ValidationError as exc:
            raise ForecastServiceUnavailableError(
                f"Unexpected payload shape from {self.base_url}{path}: {exc.error_count()} invalid field(s)"
            ) from exc

    def _post_json(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.post(url, json=body, timeout=self.timeout_seconds)
        except requests.RequestException as exc:
            raise ForecastServiceUnavailableError(
                f"Forecast service request failed for {url}: {exc}"
            ) from exc

        if response.status_code >= 500:
            raise ForecastServiceUnavailableError(
                f"Forecast service request failed with status {response.status_code} for {url}"
            )
        if response.status_code >= 400:
            raise ValueError(
                f"Forecast service rejected the request with status {response.status_code} for {url}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ForecastServiceUnavailableError(
                f"Forecast service did not return valid JSON for {url}"
            ) from exc

        if not isinstance(payload, dict):
            raise ForecastServiceUnavailableError(f"Unexpected payload shape from {url}")
        return payload
