# smartkisan/services/weather.py
from typing import Any, Optional, Tuple

from smartkisan.config import settings
from smartkisan.errors import InvalidInput, UpstreamUnavailable
from smartkisan.models.domain import RegionWeather, WeatherReport
from smartkisan.models.result import Degraded, Invalid, Ok, Outcome
from smartkisan.tools.regions import canonical_region, resolve_region
from smartkisan.tools.weather import mock_weather, parse_coordinates, parse_days
from smartkisan.tools.weather_cached import forecast_cached
from smartkisan.utils.logger import get_logger

log = get_logger(__name__)

# Regional stand-in used by the advice pipeline when the provider is down
REGIONAL_MOCK_DAYS = 3


class WeatherService:
    """Wrapper around the weather tools; never raises for upstream failures."""

    async def fetch_weather(self, latitude: Any, longitude: Any, days: Any = None) -> Outcome[WeatherReport]:
        """
        Validated forecast for a coordinate pair.

        Returns:
            Invalid(message) for unparseable coordinates/days,
            Ok(report) with provider data, or
            Degraded(mock report, reason) when the provider fails.
        """
        try:
            lat, lng = parse_coordinates(latitude, longitude)
            n_days = parse_days(days)
        except InvalidInput as e:
            return Invalid(str(e))

        try:
            return Ok(await forecast_cached(lat, lng, n_days))
        except UpstreamUnavailable as e:
            log.warning("⚠️ Weather provider failed, using mock data: %s", e)
            return Degraded(mock_weather(lat, lng, n_days), str(e))

    async def region_weather(self, region: Optional[str]) -> Optional[RegionWeather]:
        """Current conditions for a named region, or None when the provider fails."""
        lat, lng = resolve_region(region)
        try:
            report = await forecast_cached(lat, lng, settings.WX_FORECAST_DAYS)
        except UpstreamUnavailable as e:
            log.warning("⚠️ Region weather unavailable for %s: %s", region, e)
            return None

        cur = report.current
        return RegionWeather(
            temperature=cur.temperature,
            humidity=cur.humidity,
            rainfall=cur.rainfall,
            windSpeed=cur.windSpeed,
            condition=cur.condition,
            region=canonical_region(region),
        )

    async def realtime_weather(self, coordinates: Optional[Any], region: Optional[str]) -> Tuple[WeatherReport, bool]:
        """
        Forecast for explicit coordinates (falling back to the region centre).

        Returns (report, used) where `used` is False when the regional mock
        had to be substituted.
        """
        lat = lng = None
        if coordinates is not None:
            lat = getattr(coordinates, "lat", None)
            lng = getattr(coordinates, "lng", None)
            if isinstance(coordinates, dict):
                lat, lng = coordinates.get("lat"), coordinates.get("lng")
        if lat is None or lng is None:
            lat, lng = resolve_region(region)

        try:
            lat, lng = parse_coordinates(lat, lng)
            return await forecast_cached(lat, lng, settings.WX_FORECAST_DAYS), True
        except InvalidInput as e:
            log.warning("⚠️ Ignoring bad advice coordinates: %s", e)
        except UpstreamUnavailable as e:
            log.warning("⚠️ Real-time weather unavailable, using regional mock: %s", e)

        lat, lng = resolve_region(region)
        return mock_weather(lat, lng, REGIONAL_MOCK_DAYS), False
