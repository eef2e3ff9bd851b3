from typing import Optional, List, Dict, Any

from pydantic import BaseModel, Field, model_validator


# ---------- Weather ----------

class WeatherSnapshot(BaseModel):
    temperature: float                   # °C, rounded
    humidity: int                        # %
    rainfall: float                      # mm
    windSpeed: float                     # km/h, rounded
    condition: str
    weatherCode: Optional[int] = None

class ForecastDay(BaseModel):
    date: str
    day: str                             # short weekday label, e.g. "Mon"
    temp: float                          # daily max °C
    minTemp: float                       # daily min °C
    rain: float                          # mm, one decimal
    rainProbability: Optional[int] = None
    condition: str
    weatherCode: Optional[int] = None

class Location(BaseModel):
    latitude: float
    longitude: float

class WeatherReport(BaseModel):
    current: WeatherSnapshot
    forecast: List[ForecastDay] = Field(default_factory=list)
    location: Location
    lastUpdated: str

class RegionWeather(BaseModel):
    """Compact current-conditions view the chat prompt is built from."""
    temperature: float
    humidity: int
    rainfall: float
    windSpeed: float
    condition: str
    region: str


# ---------- Conversation ----------

class ConversationContext(BaseModel):
    crop: Optional[str] = None
    region: Optional[str] = None
    growthStage: Optional[str] = None    # sowing|vegetative|flowering|harvest|unknown
    soilType: Optional[str] = None       # sandy|clay|loam
    irrigationType: Optional[str] = None # canal|tube well|rainfed
    challenges: List[str] = Field(default_factory=list)
    tone: str = "friendly"               # friendly|casual
    userPreferences: Dict[str, Any] = Field(default_factory=dict)


# ---------- Advice payload (UI contract: names and nesting are fixed) ----------

class _Section(BaseModel):
    @model_validator(mode="before")
    @classmethod
    def _flatten_values(cls, data: Any) -> Any:
        # Models often answer with lists or numbers where the UI expects text
        if not isinstance(data, dict):
            return data
        out = {}
        for k, v in data.items():
            if isinstance(v, (list, tuple)):
                v = ", ".join(str(x) for x in v)
            elif isinstance(v, (int, float)) and not isinstance(v, bool):
                v = str(v)
            out[k] = v
        return out

class IrrigationAdvice(_Section):
    recommendation: str
    schedule: str
    water_amount: str
    urgency: str

class FertilizerAdvice(_Section):
    recommendation: str
    type: str
    quantity: str
    timing: str

class PestControlAdvice(_Section):
    recommendation: str
    common_pests: str
    organic_options: str
    chemical_options: str

class SowingHarvestAdvice(_Section):
    optimal_timing: str
    preparation: str
    harvest_window: str
    yield_expectation: str

class WeatherAlerts(_Section):
    current_risks: str
    precautions: str
    timeline: str

class AdvicePayload(BaseModel):
    irrigation: IrrigationAdvice
    fertilizer: FertilizerAdvice
    pest_control: PestControlAdvice
    sowing_harvest: SowingHarvestAdvice
    weather_alerts: WeatherAlerts
    summary: str
    confidence: str = "medium"


# ---------- User preferences (client-side record, request input only) ----------

class Notifications(BaseModel):
    email: bool = True
    sms: bool = False

class Coordinates(BaseModel):
    lat: float = 31.5204
    lng: float = 74.3587

class UserSettings(BaseModel):
    cropType: str = "wheat"
    region: str = "punjab"
    language: str = "en"
    notifications: Notifications = Field(default_factory=Notifications)
    units: str = "metric"
    theme: str = "light"
    coordinates: Coordinates = Field(default_factory=Coordinates)
