import json
import sys
from typing import Any, Dict, List, Optional

import pytest
import requests

from agent_tools.core.config import Settings
from agent_tools.tools.code_exec import CodeExecutor
from agent_tools.tools.weather import OpenMeteoClient


def make_response(
    payload: Any = None,
    status_code: int = 200,
    reason: str = "OK",
    text: Optional[str] = None,
) -> requests.Response:
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.encoding = "utf-8"
    body = text if text is not None else json.dumps(payload)
    response._content = body.encode("utf-8")
    return response


def forecast_body(days: int = 3, variables: Optional[List[str]] = None) -> Dict[str, Any]:
    variables = variables or [
        "temperature_2m_max",
        "temperature_2m_min",
        "precipitation_sum",
        "windspeed_10m_max",
        "weathercode",
    ]
    units = {"time": "iso8601"}
    daily: Dict[str, List[Any]] = {
        "time": [f"2026-10-{18 + i:02d}" for i in range(days)]
    }
    for name in variables:
        units[name] = "°C" if name.startswith("temperature") else "mm"
        daily[name] = [float(i) for i in range(days)]
    return {
        "latitude": 35.7,
        "longitude": 139.625,
        "timezone": "Asia/Tokyo",
        "daily_units": units,
        "daily": daily,
    }


class FakeSession:
    """Stands in for requests.Session; records every GET."""

    def __init__(self, response: Optional[requests.Response] = None, exc: Optional[Exception] = None):
        self.response = response
        self.exc = exc
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.response

    def close(self):
        self.closed = True


@pytest.fixture
def executor() -> CodeExecutor:
    return CodeExecutor(interpreter=sys.executable, timeout_seconds=5)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession(make_response(forecast_body()))


@pytest.fixture
def weather_client(fake_session) -> OpenMeteoClient:
    return OpenMeteoClient(base_url="https://weather.test/v1", session=fake_session)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, PYTHON_INTERPRETER=sys.executable)
