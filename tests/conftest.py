"""
Shared test configuration.
It seeds the environment every module expects and resets cached settings between tests.
These tests are executed by `pytest` locally and in CI and should remain deterministic.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

TEST_ENV_DEFAULTS = {
    "PROJECT_NAME": "scenario-sage-test",
    "ENV": "test",
    "LOG_LEVEL": "INFO",
    "FORECAST_SERVICE_URL": "http://forecast.test",
    "API_HOST": "0.0.0.0",
    "API_PORT": "8000",
}

# The API module builds its app at import time, which reads settings.
for _key, _value in TEST_ENV_DEFAULTS.items():
    os.environ.setdefault(_key, _value)


@pytest.fixture(autouse=True)
def base_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure required environment variables are present during tests."""

    from scenario_sage.api.api_config import get_api_config
    from scenario_sage.common.settings import get_settings

    for key, value in TEST_ENV_DEFAULTS.items():
        if os.getenv(key) is None:
            monkeypatch.setenv(key, value)

    get_settings.cache_clear()
    get_api_config.cache_clear()
