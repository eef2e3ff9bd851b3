# smartkisan/tools/weather_cached.py
from time import perf_counter

from smartkisan.models.domain import WeatherReport
from smartkisan.utils.cache import get_json, set_json
from smartkisan.utils.logger import get_logger
from .weather import forecast as _wx

log = get_logger(__name__)

def t(): return perf_counter()

def _key(lat: float, lon: float, days: int) -> str:
    # round to ~1km cell to increase hit-rate
    return f"wx:{round(lat, 2)}:{round(lon, 2)}:{days}"

async def forecast_cached(lat: float, lon: float, days: int = 7) -> WeatherReport:
    start = t()
    key = _key(lat, lon, days)

    hit = await get_json(key, "weather")
    if hit:
        log.info("⏱️  Weather forecast: %dms (cached)", round((t() - start) * 1000))
        return WeatherReport.model_validate(hit)

    # failures propagate; only good provider data is cached
    fresh = await _wx(lat, lon, days=days)
    await set_json(key, fresh.model_dump(), "weather")
    return fresh
