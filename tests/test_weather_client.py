import asyncio

import httpx
import pytest
import respx

from smoke_buddy.clients.weather import Weather, fetch_weather
from smoke_buddy.errors import ExternalFetchError

FORECAST = {
    "current_weather": {"temperature": 24.5, "weathercode": 3},
    "daily": {
        "temperature_2m_max": [27.1],
        "temperature_2m_min": [22.0],
        "precipitation_probability_max": [40],
    },
}
AIR = {"current": {"us_aqi": 55, "pm2_5": 12.4}}


def _routes(mock):
    forecast = mock.get(host="api.open-meteo.com", path="/v1/forecast")
    air = mock.get(host="air-quality-api.open-meteo.com", path="/v1/air-quality")
    return forecast, air


def test_fetch_weather_success(monkeypatch):
    monkeypatch.setenv("WEATHER_CITY", "台北市")
    with respx.mock(assert_all_called=True) as respx_mock:
        forecast, air = _routes(respx_mock)
        forecast.respond(200, json=FORECAST)
        air.respond(200, json=AIR)
        weather = asyncio.run(fetch_weather())

    assert weather == Weather(
        city="台北市",
        code=3,
        current_temp=24.5,
        max_temp=27.1,
        min_temp=22.0,
        precipitation_chance=40,
        us_aqi=55,
        pm2_5=12.4,
    )
    assert forecast.calls.last.request.url.params["latitude"] == "25.0478"


def test_fetch_weather_uses_configured_location(monkeypatch):
    monkeypatch.setenv("WEATHER_LATITUDE", "24.1477")
    monkeypatch.setenv("WEATHER_LONGITUDE", "120.6736")
    with respx.mock(assert_all_called=False) as respx_mock:
        forecast, air = _routes(respx_mock)
        forecast.respond(200, json=FORECAST)
        air.respond(200, json=AIR)
        asyncio.run(fetch_weather(city="台中市"))
        params = forecast.calls.last.request.url.params
    assert (params["latitude"], params["longitude"]) == ("24.1477", "120.6736")


def test_air_quality_failure_is_not_fatal():
    with respx.mock(assert_all_called=False) as respx_mock:
        forecast, air = _routes(respx_mock)
        forecast.respond(200, json=FORECAST)
        air.respond(503)
        weather = asyncio.run(fetch_weather())
    assert weather.us_aqi is None and weather.pm2_5 is None
    assert weather.code == 3


def test_forecast_http_error_raises():
    with respx.mock(assert_all_called=False) as respx_mock:
        forecast, _air = _routes(respx_mock)
        forecast.respond(500)
        with pytest.raises(ExternalFetchError):
            asyncio.run(fetch_weather())


def test_forecast_network_error_raises():
    with respx.mock(assert_all_called=False) as respx_mock:
        forecast, _air = _routes(respx_mock)
        forecast.mock(side_effect=httpx.ConnectError("unreachable"))
        with pytest.raises(ExternalFetchError):
            asyncio.run(fetch_weather())


@pytest.mark.parametrize("body", [{}, {"current_weather": {}, "daily": {}}, []])
def test_forecast_malformed_payload_raises(body):
    with respx.mock(assert_all_called=False) as respx_mock:
        forecast, air = _routes(respx_mock)
        forecast.respond(200, json=body)
        air.respond(200, json=AIR)
        with pytest.raises(ExternalFetchError):
            asyncio.run(fetch_weather())
