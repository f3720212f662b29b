"""
Open-Meteo Tools: Daily forecast retrieval for the agent.
The caller supplies coordinates; the provider infers the timezone from them.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

import requests
from pydantic import BaseModel, Field, field_validator

from agent_tools.core.config import Settings, get_settings
from agent_tools.core.errors import WeatherAPIError

logger = logging.getLogger(__name__)

SOURCE = "open-meteo"


class DailyVariable(str, Enum):
    """Daily forecast variables the tool may request."""

    TEMPERATURE_MAX = "temperature_2m_max"
    TEMPERATURE_MIN = "temperature_2m_min"
    PRECIPITATION_SUM = "precipitation_sum"
    WINDSPEED_MAX = "windspeed_10m_max"
    WEATHERCODE = "weathercode"


DEFAULT_DAILY_VARS = [
    DailyVariable.TEMPERATURE_MAX,
    DailyVariable.TEMPERATURE_MIN,
    DailyVariable.PRECIPITATION_SUM,
    DailyVariable.WINDSPEED_MAX,
    DailyVariable.WEATHERCODE,
]


class ForecastInput(BaseModel):
    """Arguments accepted by the get_weather tool."""

    latitude: float = Field(
        ge=-90,
        le=90,
        description="Latitude of the location in decimal degrees (-90 to 90).",
    )
    longitude: float = Field(
        ge=-180,
        le=180,
        description="Longitude of the location in decimal degrees (-180 to 180).",
    )
    forecast_days: int = Field(
        default=3,
        ge=1,
        le=7,
        description="Number of days to forecast (1-7). Defaults to 3.",
    )
    daily: Optional[List[DailyVariable]] = Field(
        default=None,
        description="Daily weather variables to include. Defaults to a useful set of common variables.",
    )

    @field_validator("latitude", "longitude", "forecast_days", mode="before")
    @classmethod
    def _require_number(cls, value: Any):
        # Lax mode would coerce true -> 1 and "35.6" -> 35.6
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("must be a JSON number")
        return value

    @field_validator("daily")
    @classmethod
    def _dedupe_daily(cls, value: Optional[List[DailyVariable]]):
        if value is None:
            return None
        return list(dict.fromkeys(value))

    @property
    def daily_variables(self) -> List[str]:
        """Requested variables, falling back to the defaults when none given."""
        selected = self.daily or DEFAULT_DAILY_VARS
        return [v.value for v in selected]

    def to_query(self) -> Dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "forecast_days": self.forecast_days,
            "daily": self.daily_variables,
        }


class OpenMeteoClient:
    """Client for Open-Meteo weather API (free, no key needed)."""

    def __init__(
        self,
        base_url: str = "https://api.open-meteo.com/v1",
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "OpenMeteoClient":
        settings = settings or get_settings()
        return cls(
            base_url=settings.open_meteo_base_url,
            timeout=settings.weather_request_timeout,
        )

    @property
    def forecast_url(self) -> str:
        return f"{self.base_url}/forecast"

    def close(self) -> None:
        self.session.close()

    def get_forecast(self, request: ForecastInput) -> Dict[str, Any]:
        """
        Fetch the daily forecast for one location.

        Args:
            request: Validated forecast arguments

        Returns:
            Forecast body from Open-Meteo, with 'daily_units' and 'daily'

        Raises:
            WeatherAPIError: non-2xx status or a body that is not a JSON object
            requests.RequestException: network failure
        """
        params = {
            "latitude": request.latitude,
            "longitude": request.longitude,
            "forecast_days": request.forecast_days,
            "timezone": "auto",
            "daily": ",".join(request.daily_variables),
        }

        response = self.session.get(self.forecast_url, params=params, timeout=self.timeout)

        if not response.ok:
            message = f"Weather API error: {response.status_code} {response.reason}"
            reason = _error_reason(response)
            if reason:
                message = f"{message} ({reason})"
            raise WeatherAPIError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise WeatherAPIError(f"Weather API returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise WeatherAPIError("Weather API returned an unexpected response format")

        return data


def _error_reason(response: requests.Response) -> Optional[str]:
    """Open-Meteo error bodies look like {"error": true, "reason": "..."}."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("reason"):
        return str(body["reason"])
    return None


# ── Agent Tool Interface ──────────────────────────────────────────

def get_forecast_for_agent(
    latitude: float,
    longitude: float,
    forecast_days: int = 3,
    daily: Optional[List[str]] = None,
    client: Optional[OpenMeteoClient] = None,
) -> Dict[str, Any]:
    """
    Weather tool for the agentic orchestrator.

    Called by the agent as:
      {"tool": "get_weather", "args": {"latitude": 35.68, "longitude": 139.65}}

    Arguments are validated before any network call; a bad argument raises
    pydantic.ValidationError. Every later failure comes back as {"error": ...}.

    Returns:
        Dict with source, query, units and daily, or error
    """
    request = ForecastInput(
        latitude=latitude,
        longitude=longitude,
        forecast_days=forecast_days,
        daily=daily,
    )
    owns_client = client is None
    if owns_client:
        client = OpenMeteoClient.from_settings()

    try:
        data = client.get_forecast(request)
    except WeatherAPIError as e:
        logger.warning(f"Weather tool error: {e}")
        return {"error": str(e)}
    except requests.RequestException as e:
        logger.warning(f"Weather API request failed: {e}")
        return {"error": f"Weather API request failed: {e}"}
    except Exception as e:
        logger.exception("Weather tool error")
        return {"error": str(e) or "Checking weather failed due to an unknown error."}
    finally:
        if owns_client:
            client.close()

    return {
        "source": SOURCE,
        "query": request.to_query(),
        "units": data.get("daily_units"),
        "daily": data.get("daily"),
    }
