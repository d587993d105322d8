import os
from dataclasses import dataclass

import httpx

from smoke_buddy.errors import ExternalFetchError
from smoke_buddy.journal import log_error

FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
AIR_QUALITY_URL = "https://air-quality-api.open-meteo.com/v1/air-quality"

# Taipei City
DEFAULT_LATITUDE = "25.0478"
DEFAULT_LONGITUDE = "121.5319"


@dataclass
class Weather:
    city: str
    code: int
    current_temp: float
    max_temp: float
    min_temp: float
    precipitation_chance: int | None = None
    us_aqi: int | None = None
    pm2_5: float | None = None


def _location() -> dict[str, str]:
    return {
        "latitude": os.getenv("WEATHER_LATITUDE", DEFAULT_LATITUDE),
        "longitude": os.getenv("WEATHER_LONGITUDE", DEFAULT_LONGITUDE),
        "timezone": os.getenv("WEATHER_TIMEZONE", "Asia/Taipei"),
    }


async def _fetch_air_quality(client: httpx.AsyncClient) -> dict:
    """Best effort: air quality is an extra line in the report, never a reason to fail it."""
    try:
        resp = await client.get(
            AIR_QUALITY_URL, params={**_location(), "current": "us_aqi,pm2_5"}
        )
        resp.raise_for_status()
        return resp.json().get("current") or {}
    except (httpx.HTTPError, ValueError, AttributeError) as e:
        log_error("air_quality_fetch", e)
        return {}


async def fetch_weather(city: str | None = None) -> Weather:
    """Fetch today's forecast for the configured location from Open-Meteo.

    Raises:
        ExternalFetchError: the forecast API was unreachable, returned a non-2xx
            status, or the body did not have the expected shape.
    """
    params = {
        **_location(),
        "current_weather": "true",
        "daily": "temperature_2m_max,temperature_2m_min,precipitation_probability_max",
    }
    async with httpx.AsyncClient(timeout=10) as client:
        try:
            resp = await client.get(FORECAST_URL, params=params)
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ExternalFetchError(f"Weather fetch failed: {e}") from e
        air = await _fetch_air_quality(client)

    try:
        current = body["current_weather"]
        daily = body["daily"]
        precipitation = (daily.get("precipitation_probability_max") or [None])[0]
        return Weather(
            city=city or os.getenv("WEATHER_CITY", "台北市"),
            code=int(current["weathercode"]),
            current_temp=current["temperature"],
            max_temp=daily["temperature_2m_max"][0],
            min_temp=daily["temperature_2m_min"][0],
            precipitation_chance=precipitation,
            us_aqi=air.get("us_aqi"),
            pm2_5=air.get("pm2_5"),
        )
    except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
        raise ExternalFetchError(f"Unexpected weather payload: {e}") from e
