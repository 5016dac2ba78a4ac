"""
agent.tools.weather - Current weather lookup via the Open-Meteo public API.

Uses requests via run_in_executor for async compat (same pattern as every
other blocking HTTP call in the project). Any upstream failure raises
ToolExecutionError; the executor never retries.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional

import requests
from pydantic import BaseModel, ConfigDict, Field

from application.context import InvocationContext
from agent.tools.base import BaseTool, ToolName, ToolResult
from domain.exceptions import ToolExecutionError

logger = logging.getLogger(__name__)

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"


class WeatherInput(BaseModel):
    """Input schema for the get_weather tool."""

    model_config = ConfigDict(extra="forbid")

    city: str = Field(min_length=1, description="City to report current weather for")


class WeatherTool(BaseTool):
    """Report current conditions for a city."""

    name = ToolName.GET_WEATHER
    description = (
        "Get the current weather (temperature, wind, conditions code) for a city. "
        "Use when the user asks about the weather or temperature somewhere."
    )
    required_permission = "can_use_weather"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        self._session = session or requests.Session()
        self._timeout = timeout

    def get_schema(self) -> type[BaseModel]:
        return WeatherInput

    async def execute(self, ctx: InvocationContext, city: str = "", **kwargs) -> ToolResult:
        loop = asyncio.get_running_loop()
        try:
            report = await loop.run_in_executor(None, self._fetch, city)
        except ToolExecutionError:
            raise
        except (requests.RequestException, KeyError, ValueError) as e:
            raise ToolExecutionError(f"Weather lookup for '{city}' failed: {e}") from e
        return ToolResult(output=json.dumps(report), data=report)

    def _fetch(self, city: str) -> dict[str, Any]:
        geo = self._get_json(GEOCODING_URL, {"name": city, "count": 1})
        results = geo.get("results") or []
        if not results:
            raise ToolExecutionError(f"Unknown city: {city}")
        place = results[0]

        forecast = self._get_json(FORECAST_URL, {
            "latitude": place["latitude"],
            "longitude": place["longitude"],
            "current": "temperature_2m,wind_speed_10m,weather_code",
        })
        current = forecast["current"]
        logger.debug("Weather for %s: %s", place.get("name", city), current)
        return {
            "city": place.get("name", city),
            "country": place.get("country", ""),
            "latitude": place["latitude"],
            "longitude": place["longitude"],
            "temperature_c": current["temperature_2m"],
            "wind_speed_kmh": current["wind_speed_10m"],
            "weather_code": current["weather_code"],
        }

    def _get_json(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        response = self._session.get(url, params=params, timeout=self._timeout)
        response.raise_for_status()
        return response.json()
