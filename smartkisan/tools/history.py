# smartkisan/tools/history.py
"""
Historical weather, crop-yield and soil lookups over the bundled JSON tables.

Everything here is pure: no network, no writes. A missing region or crop
yields None, which callers treat as "skip this section".
"""
import datetime as dt
import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from smartkisan.tools.regions import REGION_ALIASES

DATA_DIR = Path(__file__).resolve().parents[1] / "data"

SOWING_REFERENCE_MONTHS = ["march", "april", "october", "november"]

RECOMMENDED_MONTHS = {
    "wheat": ["October", "November", "December"],
    "rice": ["June", "July"],
    "cotton": ["April", "May", "June"],
    "sugarcane": ["February", "March", "September", "October"],
    "maize": ["June", "July", "January", "February"],
}

TEMP_TREND_THRESHOLD_C = 0.5
RAIN_TREND_THRESHOLD_PCT = 10.0


@lru_cache(maxsize=None)
def load_table(name: str) -> Dict[str, Any]:
    with open(DATA_DIR / f"{name}.json", encoding="utf-8") as fh:
        return json.load(fh)


def _region_key(region: Optional[str]) -> str:
    key = " ".join((region or "").strip().lower().split())
    return REGION_ALIASES.get(key, key)


def _this_year(current_year: Optional[int]) -> int:
    return current_year if current_year is not None else dt.date.today().year


def historical_weather(region: str, years: int = 10, *,
                       table: Optional[Dict[str, Any]] = None,
                       current_year: Optional[int] = None) -> Optional[Dict[int, Dict[str, Any]]]:
    """Monthly records for the `years` full years before the current one."""
    table = table if table is not None else load_table("historical_weather")
    region_data = table.get(_region_key(region))
    if region_data is None:
        return None

    now = _this_year(current_year)
    out = {}
    for year in range(now - years, now):
        rec = region_data.get(str(year), region_data.get(year))
        if rec:
            out[year] = rec
    return out


def _yearly_average(year_data: Dict[str, Any], metric: str) -> float:
    months = list(year_data.values())
    return sum(m[metric] for m in months) / len(months)


def _yearly_total(year_data: Dict[str, Any], metric: str) -> float:
    return sum(m[metric] for m in year_data.values())


def _months_average(year_data: Dict[str, Any], months: List[str], metric: str) -> float:
    values = [(year_data.get(m) or {}).get(metric) or 0 for m in months]
    return sum(values) / len(values)


def weather_trend(region: str, *,
                  table: Optional[Dict[str, Any]] = None,
                  current_year: Optional[int] = None) -> Optional[Dict[str, Any]]:
    """
    Compare the earliest and latest year in a 15-year lookback.

    Temperature: increasing/decreasing beyond ±0.5°C (exclusive), else stable.
    Rainfall: increasing/decreasing beyond ±10% of the first year's total.
    Fewer than two years gives the stable default without a delta.
    """
    historical = historical_weather(region, 15, table=table, current_year=current_year)
    if historical is None:
        return None

    trends = {
        "temperature": {"trend": "stable", "change": 0.0},
        "rainfall": {"trend": "stable", "change": 0.0},
        "extreme_events": [],
    }

    years = sorted(historical)
    if len(years) < 2:
        return trends

    first, last = historical[years[0]], historical[years[-1]]

    temp_change = round(_yearly_average(last, "avg_temp") - _yearly_average(first, "avg_temp"), 2)
    trends["temperature"]["change"] = temp_change
    if temp_change > TEMP_TREND_THRESHOLD_C:
        trends["temperature"]["trend"] = "increasing"
    elif temp_change < -TEMP_TREND_THRESHOLD_C:
        trends["temperature"]["trend"] = "decreasing"

    first_rain = _yearly_total(first, "rainfall")
    last_rain = _yearly_total(last, "rainfall")
    rain_change = round((last_rain - first_rain) / first_rain * 100, 1) if first_rain else 0.0
    trends["rainfall"]["change"] = rain_change
    if rain_change > RAIN_TREND_THRESHOLD_PCT:
        trends["rainfall"]["trend"] = "increasing"
    elif rain_change < -RAIN_TREND_THRESHOLD_PCT:
        trends["rainfall"]["trend"] = "decreasing"

    return trends


def crop_performance(crop: str, region: str, *,
                     table: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
    table = table if table is not None else load_table("crop_yield_data")
    crop_data = (table.get((crop or "").strip().lower()) or {}).get(_region_key(region))
    if not crop_data:
        return None

    points = [
        {"year": int(y), "yield": rec["yield_per_acre"], "quality": rec.get("quality")}
        for y, rec in sorted(crop_data.items(), key=lambda kv: int(kv[0]))
    ]

    avg_yield = sum(p["yield"] for p in points) / len(points)
    # strict comparisons keep the first-encountered year on ties
    best = points[0]
    worst = points[0]
    for p in points[1:]:
        if p["yield"] > best["yield"]:
            best = p
        if p["yield"] < worst["yield"]:
            worst = p

    return {
        "average_yield": round(avg_yield, 1),
        "best_performance": best,
        "worst_performance": worst,
        "trend": "improving" if points[-1]["yield"] > avg_yield else "declining",
        "data_points": points,
    }


def soil_analysis(region: str, *, table: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
    table = table if table is not None else load_table("soil_data")
    return table.get(_region_key(region))


def recommended_months(crop: str) -> List[str]:
    return RECOMMENDED_MONTHS.get((crop or "").strip().lower(), ["Varies by region"])


def predict_optimal_sowing(crop: str, region: str, *,
                           weather_table: Optional[Dict[str, Any]] = None,
                           yield_table: Optional[Dict[str, Any]] = None,
                           current_year: Optional[int] = None) -> Optional[Dict[str, Any]]:
    """Average reference-month temperature over the years rated 'excellent'."""
    historical = historical_weather(region, 10, table=weather_table, current_year=current_year)
    performance = crop_performance(crop, region, table=yield_table)
    if not historical or not performance:
        return None

    best_years = [p["year"] for p in performance["data_points"] if p["quality"] == "excellent"]
    temps = [
        _months_average(historical[y], SOWING_REFERENCE_MONTHS, "avg_temp")
        for y in best_years if y in historical
    ]
    optimal = round(sum(temps) / len(temps), 1) if temps else None

    return {
        "crop": crop,
        "region": _region_key(region),
        "optimal_temperature": optimal,
        "recommended_months": recommended_months(crop),
        "confidence": "high" if len(best_years) > 3 else "medium",
        "historical_best_years": best_years[:3],
    }


def quality_pattern(data_points: List[Dict[str, Any]]) -> str:
    qualities = [p.get("quality") for p in data_points]
    excellent = qualities.count("excellent")
    good = qualities.count("good")
    if excellent > good:
        return "Mostly Excellent"
    if good > excellent:
        return "Mostly Good"
    return "Variable Performance"
