# smartkisan/tools/weather.py
import math
import random
import time
import datetime as dt
from typing import Any, Dict, List, Optional, Tuple

import httpx

from smartkisan.config import settings
from smartkisan.errors import InvalidInput, UpstreamUnavailable
from smartkisan.http import get_http_client
from smartkisan.models.domain import ForecastDay, Location, WeatherReport, WeatherSnapshot
from smartkisan.tools.regions import REGION_COORDINATES, DEFAULT_REGION
from smartkisan.utils.logger import get_logger

log = get_logger(__name__)

def t(): return time.perf_counter()

# WMO weather interpretation codes as documented by Open-Meteo
WEATHER_CONDITIONS = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow fall",
    73: "Moderate snow fall",
    75: "Heavy snow fall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}


def condition_for(code: Any) -> str:
    """Human-readable condition for a WMO code; anything unmapped is 'Unknown'."""
    try:
        return WEATHER_CONDITIONS.get(int(code), "Unknown")
    except (TypeError, ValueError):
        return "Unknown"


def parse_coordinates(latitude: Any, longitude: Any) -> Tuple[float, float]:
    try:
        lat = float(latitude)
        lng = float(longitude)
    except (TypeError, ValueError):
        raise InvalidInput("Please provide valid latitude and longitude values")
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InvalidInput("Please provide valid latitude and longitude values")
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        raise InvalidInput("Latitude must be within ±90 and longitude within ±180")
    return lat, lng


def parse_days(days: Any) -> int:
    if days is None or days == "":
        return settings.WX_FORECAST_DAYS
    try:
        n = int(days)
    except (TypeError, ValueError):
        raise InvalidInput("days must be an integer")
    return max(1, min(n, settings.WX_MAX_FORECAST_DAYS))


def _day_label(date_str: str) -> str:
    try:
        return dt.date.fromisoformat(date_str).strftime("%a")
    except ValueError:
        return date_str


def _at(values: List[Any], i: int, default: Any = None) -> Any:
    if i < len(values) and values[i] is not None:
        return values[i]
    return default


def _transform(data: Dict[str, Any], lat: float, lng: float) -> WeatherReport:
    cur = data["current"]
    daily = data["daily"]

    current = WeatherSnapshot(
        temperature=round(cur["temperature_2m"]),
        humidity=round(cur["relative_humidity_2m"]),
        rainfall=cur.get("precipitation") or 0.0,
        windSpeed=round(cur["wind_speed_10m"]),
        condition=condition_for(cur.get("weather_code")),
        weatherCode=cur.get("weather_code"),
    )

    dtime: List[str] = daily.get("time") or []
    tmax:  List[float] = daily.get("temperature_2m_max") or []
    tmin:  List[float] = daily.get("temperature_2m_min") or []
    rain:  List[float] = daily.get("precipitation_sum") or []
    prob:  List[float] = daily.get("precipitation_probability_max") or []
    codes: List[int] = daily.get("weather_code") or []

    forecast = []
    for i in range(min(len(dtime), len(tmax), len(tmin))):
        if tmax[i] is None or tmin[i] is None:
            continue
        code = _at(codes, i)
        forecast.append(ForecastDay(
            date=dtime[i],
            day=_day_label(dtime[i]),
            temp=round(tmax[i]),
            minTemp=round(tmin[i]),
            rain=round(float(_at(rain, i, 0.0)), 1),
            rainProbability=_at(prob, i),
            condition=condition_for(code),
            weatherCode=code,
        ))

    return WeatherReport(
        current=current,
        forecast=forecast,
        location=Location(latitude=lat, longitude=lng),
        lastUpdated=dt.datetime.now(dt.timezone.utc).isoformat(),
    )


async def forecast(lat: float, lng: float, days: int = 7) -> WeatherReport:
    """
    Current conditions + `days`-day daily series from Open-Meteo (no API key).

    Raises UpstreamUnavailable on transport errors, non-2xx status, a body
    that is not JSON, or a body missing the `current`/`daily` blocks.
    """
    start = t()
    params = {
        "latitude": lat,
        "longitude": lng,
        "current": "temperature_2m,relative_humidity_2m,precipitation,wind_speed_10m,weather_code",
        "daily": "weather_code,temperature_2m_max,temperature_2m_min,precipitation_sum,precipitation_probability_max",
        "timezone": "auto",
        "forecast_days": days,
        "wind_speed_unit": "kmh",
    }

    client = get_http_client()
    try:
        r = await client.get(settings.OPEN_METEO_URL, params=params)
    except httpx.HTTPError as e:
        raise UpstreamUnavailable(f"Open-Meteo request failed: {e}") from e

    if r.status_code != 200:
        raise UpstreamUnavailable(f"Open-Meteo API returned {r.status_code}", status_code=r.status_code)

    try:
        data = r.json()
    except ValueError as e:
        raise UpstreamUnavailable("Invalid response format from weather API") from e

    if not isinstance(data, dict) or not data.get("current") or not data.get("daily"):
        raise UpstreamUnavailable("Invalid response format from weather API")

    try:
        report = _transform(data, lat, lng)
    except (KeyError, TypeError, ValueError) as e:
        raise UpstreamUnavailable(f"Invalid response format from weather API: {e}") from e

    log.info("⏱️  Weather forecast: %dms", round((t() - start) * 1000))
    return report


def mock_weather(lat: Optional[float] = None, lng: Optional[float] = None,
                 days: int = 7, rng: Optional[random.Random] = None) -> WeatherReport:
    """Plausible stand-in used when the provider is unavailable."""
    rng = rng or random.Random()
    if lat is None or lng is None:
        lat, lng = REGION_COORDINATES[DEFAULT_REGION]

    today = dt.date.today()
    conditions = ["Sunny", "Partly Cloudy", "Cloudy"]
    forecast_days = []
    for i in range(days):
        d = today + dt.timedelta(days=i)
        forecast_days.append(ForecastDay(
            date=d.isoformat(),
            day=d.strftime("%a"),
            temp=28 + rng.randint(-2, 2),
            minTemp=18 + rng.randint(-2, 2),
            rain=float(rng.randint(0, 19)),
            rainProbability=rng.randint(0, 49),
            condition=rng.choice(conditions),
            weatherCode=rng.randint(0, 9),
        ))

    return WeatherReport(
        current=WeatherSnapshot(
            temperature=28,
            humidity=65,
            rainfall=12,
            windSpeed=15,
            condition="Partly Cloudy",
            weatherCode=2,
        ),
        forecast=forecast_days,
        location=Location(latitude=lat, longitude=lng),
        lastUpdated=dt.datetime.now(dt.timezone.utc).isoformat(),
    )
