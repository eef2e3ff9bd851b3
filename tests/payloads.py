"""Canned upstream bodies shared by the test modules."""
import datetime as dt


def open_meteo_body(temperature=24.6, humidity=55, precipitation=0.0, wind=11.2, code=1, days=3):
    start = dt.date(2025, 3, 3)  # a Monday
    dates = [(start + dt.timedelta(days=i)).isoformat() for i in range(days)]
    return {
        "current": {
            "temperature_2m": temperature,
            "relative_humidity_2m": humidity,
            "precipitation": precipitation,
            "wind_speed_10m": wind,
            "weather_code": code,
        },
        "daily": {
            "time": dates,
            "weather_code": [1] * days,
            "temperature_2m_max": [30.4] * days,
            "temperature_2m_min": [17.6] * days,
            "precipitation_sum": [0.26] * days,
            "precipitation_probability_max": [10] * days,
        },
    }


def completion_body(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


ADVICE_JSON = {
    "irrigation": {"recommendation": "Irrigate lightly", "schedule": "Every 8 days",
                   "water_amount": "3 acre-inches", "urgency": "medium"},
    "fertilizer": {"recommendation": "Apply urea", "type": "Urea",
                   "quantity": ["50kg", "per acre"], "timing": "After irrigation"},
    "pest_control": {"recommendation": "Scout weekly", "common_pests": "Aphids",
                     "organic_options": "Neem oil", "chemical_options": "Imidacloprid"},
    "sowing_harvest": {"optimal_timing": "November", "preparation": "Plough twice",
                       "harvest_window": "April", "yield_expectation": 35},
    "weather_alerts": {"current_risks": "None", "precautions": "Monitor", "timeline": "7 days"},
    "summary": "All good",
    "confidence": "high",
}
