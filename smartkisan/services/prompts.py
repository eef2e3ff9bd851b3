# smartkisan/services/prompts.py
import re
from typing import Any, Dict, List, NamedTuple, Optional

from smartkisan.models.domain import ConversationContext, RegionWeather, WeatherReport
from smartkisan.tools.history import quality_pattern


class Prompt(NamedTuple):
    system: str
    user: str


URDU_CROP_NAMES = {
    "wheat": "گندم",
    "rice": "چاول",
    "cotton": "کپاس",
    "sugarcane": "گنا",
    "maize": "مکئی",
}

URDU_CHALLENGES = {
    "pests": "کیڑے",
    "diseases": "بیماریاں",
    "irrigation": "آبپاشی",
    "soil_health": "مٹی کی صحت",
    "weather": "موسم",
}

STAGE_LABELS = {
    "en": {
        "sowing": "sowing/planting stage",
        "vegetative": "growth stage",
        "flowering": "flowering stage",
        "harvest": "harvest stage",
    },
    "ur": {
        "sowing": "بوائی کا مرحلہ",
        "vegetative": "نشوونما کا مرحلہ",
        "flowering": "پھول آنے کا مرحلہ",
        "harvest": "کٹائی کا مرحلہ",
    },
}
UNKNOWN_STAGE = {"en": "unknown stage", "ur": "نامعلوم مرحلہ"}

# (note_en, note_ur) per threshold; see weather_impact()
IMPACT_NOTES = {
    "heat": ("• HIGH TEMPERATURE: Risk of heat stress on crops, increase irrigation frequency",
             "• زیادہ درجہ حرارت: فصلوں پر حرارتی دباؤ کا خطرہ، آبپاشی کی فریکوئنسی بڑھائیں"),
    "cold": ("• LOW TEMPERATURE: Risk of cold stress, protect sensitive crops",
             "• کم درجہ حرارت: سردی کے دباؤ کا خطرہ، حساس فصلوں کو محفوظ کریں"),
    "heavy_rain": ("• HEAVY RAINFALL: Reduce irrigation, monitor for waterlogging and fungal diseases",
                   "• شدید بارش: آبپاشی کم کریں، پانی کے کھڑے ہونے اور fungal بیماریوں کی نگرانی کریں"),
    "moderate_rain": ("• MODERATE RAINFALL: Adjust irrigation schedule, good for soil moisture",
                      "• معتدل بارش: آبپاشی کا شیڈول ایڈجسٹ کریں، مٹی کی نمی کے لیے اچھا ہے"),
    "no_rain": ("• NO RECENT RAIN: Irrigation needed, check soil moisture regularly",
                "• حالیہ بارش نہیں: آبپاشی درکار، مٹی کی نمی باقاعدہ چیک کریں"),
    "humid": ("• HIGH HUMIDITY: Increased risk of fungal diseases, monitor crops closely",
              "• زیادہ نمی: fungal بیماریوں کا بڑھتا ہوا خطرہ، فصلوں کی قریب سے نگرانی کریں"),
    "dry": ("• LOW HUMIDITY: Increased irrigation needs, watch for drought stress",
            "• کم نمی: آبپاشی کی ضروریات میں اضافہ، خشک سالی کے دباؤ پر نظر رکھیں"),
    "normal": ("• Normal weather conditions for this season",
               "• اس موسم کے لیے عام موسمی حالات"),
}

LANGUAGE_INSTRUCTION = {
    "en": "Reply in simple English.",
    "ur": "Reply in Urdu (اردو) using the Urdu script.",
}


def is_english(language: Optional[str]) -> bool:
    return (language or "en") != "ur"


def _lang(language: Optional[str]) -> str:
    return "en" if is_english(language) else "ur"


def _get(obj: Any, name: str, default: Any = None) -> Any:
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def weather_impact_keys(weather: Any) -> List[str]:
    """
    Threshold table:
        temperature >35 heat, <10 cold
        rainfall    >20 heavy, >5 (to 20) moderate, ==0 none
        humidity    >80 fungal risk, <40 drought stress
    """
    keys = []
    temp = _get(weather, "temperature")
    rain = _get(weather, "rainfall")
    hum = _get(weather, "humidity")

    if temp is not None:
        if temp > 35:
            keys.append("heat")
        elif temp < 10:
            keys.append("cold")
    if rain is not None:
        if rain > 20:
            keys.append("heavy_rain")
        elif rain > 5:
            keys.append("moderate_rain")
        elif rain == 0:
            keys.append("no_rain")
    if hum is not None:
        if hum > 80:
            keys.append("humid")
        elif hum < 40:
            keys.append("dry")
    return keys


def weather_impact(weather: Any, language: str = "en") -> str:
    idx = 0 if is_english(language) else 1
    keys = weather_impact_keys(weather) or ["normal"]
    return "\n".join(IMPACT_NOTES[k][idx] for k in keys)


def urdu_crop_name(crop: str) -> str:
    return URDU_CROP_NAMES.get((crop or "").lower(), crop)


# ---------- context blocks ----------

def format_weather_context(weather: Optional[RegionWeather], language: str = "en") -> str:
    """Current-conditions block for the chat prompt."""
    if weather is None:
        return ("Weather data unavailable - use general seasonal advice" if is_english(language)
                else "موسمیاتی ڈیٹا دستیاب نہیں - عمومی موسمی مشورے استعمال کریں")

    region = weather.region.upper()
    if is_english(language):
        return (
            f"CURRENT WEATHER IN {region}:\n"
            f"• Temperature: {weather.temperature}°C\n"
            f"• Humidity: {weather.humidity}%\n"
            f"• Recent Rainfall: {weather.rainfall}mm\n"
            f"• Wind Speed: {weather.windSpeed} km/h\n"
            f"• Condition: {weather.condition}\n\n"
            f"WEATHER IMPACT ANALYSIS:\n{weather_impact(weather, language)}"
        )
    return (
        f"{region} میں موجودہ موسم:\n"
        f"• درجہ حرارت: {weather.temperature}°C\n"
        f"• نمی: {weather.humidity}%\n"
        f"• حالیہ بارش: {weather.rainfall} ملی میٹر\n"
        f"• ہوا کی رفتار: {weather.windSpeed} کلومیٹر/گھنٹہ\n"
        f"• حالت: {weather.condition}\n\n"
        f"موسم کے اثرات کا تجزیہ:\n{weather_impact(weather, language)}"
    )


def format_realtime_weather_context(report: Optional[WeatherReport], language: str = "en") -> str:
    """Current conditions + 3-day forecast head for the advice prompt."""
    if report is None:
        return "WEATHER DATA UNAVAILABLE - Using general recommendations"

    cur = report.current
    lines = [
        "CURRENT WEATHER CONDITIONS (REAL-TIME):",
        f"- Temperature: {cur.temperature}°C",
        f"- Rainfall: {cur.rainfall}mm",
        f"- Humidity: {cur.humidity}%",
        f"- Wind Speed: {cur.windSpeed} km/h",
        f"- Condition: {cur.condition}",
        "",
        f"{len(report.forecast) or 7}-DAY WEATHER FORECAST:",
    ]
    for day in report.forecast[:3]:
        lines.append(f"- {day.day}: {day.temp}°C, {day.rain}mm rain, {day.rainProbability or 0}% rain chance")
    if len(report.forecast) > 3:
        lines.append(f"- ... and {len(report.forecast) - 3} more days")

    lines += ["", "IMMEDIATE WEATHER IMPACT ANALYSIS:", weather_impact(cur, language)]
    return "\n".join(lines)


def format_historical_context(trends: Optional[Dict[str, Any]],
                              soil: Optional[Dict[str, Any]],
                              performance: Optional[Dict[str, Any]],
                              sowing: Optional[Dict[str, Any]] = None) -> str:
    lines = ["HISTORICAL CONTEXT (For Comparison):"]

    if trends:
        lines.append(f"- Temperature Trend: {trends['temperature']['trend']} ({trends['temperature']['change']:+}°C)")
        lines.append(f"- Rainfall Trend: {trends['rainfall']['trend']} ({trends['rainfall']['change']:+}%)")

    if soil:
        n = soil["nutrient_levels"]
        lines.append(f"- Soil Type: {soil['soil_types'][0]}")
        lines.append(f"- pH Level: {soil['ph_range']['min']}-{soil['ph_range']['max']}")
        lines.append(
            f"- Nutrient Levels: N-{n['nitrogen']['level']}, "
            f"P-{n['phosphorus']['level']}, K-{n['potassium']['level']}"
        )

    if performance:
        lines.append(f"- Avg Yield: {performance['average_yield']} q/acre")
        lines.append(f"- Performance: {performance['trend']}")
        lines.append(f"- Quality History: {quality_pattern(performance['data_points'])}")

    if sowing:
        if sowing.get("optimal_temperature") is not None:
            lines.append(
                f"- Best-year sowing temperature: {sowing['optimal_temperature']}°C "
                f"({sowing['confidence']} confidence)"
            )
        lines.append(f"- Recommended sowing months: {', '.join(sowing['recommended_months'])}")

    if len(lines) == 1:
        lines.append("- General agricultural knowledge available.")
    return "\n".join(lines)


def format_conversation_context(ctx: ConversationContext, language: str = "en") -> str:
    lang = _lang(language)
    lines = []
    if ctx.crop:
        lines.append(f"- Crop: {ctx.crop}")
    if ctx.region:
        lines.append(f"- Region: {ctx.region}")
    if ctx.growthStage:
        stage = STAGE_LABELS[lang].get(ctx.growthStage, UNKNOWN_STAGE[lang])
        lines.append(f"- Growth Stage: {stage}")
    if ctx.soilType:
        lines.append(f"- Soil Type: {ctx.soilType}")
    if ctx.irrigationType:
        lines.append(f"- Irrigation: {ctx.irrigationType}")
    if ctx.challenges and "none" not in ctx.challenges:
        names = ctx.challenges if lang == "en" else [URDU_CHALLENGES.get(c, c) for c in ctx.challenges]
        lines.append(f"- Challenges: {', '.join(names)}")
    lines.append(f"- Conversation Style: {ctx.tone}")
    return "\n".join(lines)


# ---------- prompts ----------

CHAT_SYSTEM_TEMPLATE = """You are SmartKisan AI - a friendly, conversational farming assistant for Pakistani farmers. You're having a real-time conversation with a farmer.

AGRICULTURAL EXPERTISE:
- You have deep knowledge of Pakistani agriculture, crops, and regional conditions
- You understand soil types, irrigation methods, and crop cycles
- You provide specific, actionable advice for Pakistani farming conditions
- You consider regional variations in climate and soil

CURRENT WEATHER CONTEXT (USE THIS FOR REAL-TIME ADVICE):
{weather}

CONVERSATION STYLE:
- Be NATURAL and CONVERSATIONAL - talk like a real person, not a robot
- Remember context from previous messages in this conversation
- Ask follow-up questions to understand their situation better
- Use simple, clear language that farmers can understand
- If they mention crops/regions, use that context in your response

RESPONSE FORMATTING (IMPORTANT - USE THIS STYLE):
- Use **bold** for important terms and key recommendations
- Use bullet points • for lists and step-by-step advice
- Use emojis to make it engaging 🌱💧🌞
- Structure information clearly with line breaks
- Include weather-specific advice based on current conditions

CURRENT CONTEXT:
{context}

WEATHER-BASED RECOMMENDATIONS:
- Adjust irrigation advice based on recent rainfall
- Consider temperature for pest/disease risks
- Use humidity levels for fungal disease warnings
- Factor in wind conditions for spraying schedules

{language}"""


ADVICE_SYSTEM_TEMPLATE = """You are SmartKisan AI, an expert agricultural advisor specializing in Pakistani farming conditions. Provide REAL-TIME, weather-aware farming advice.

CRITICAL WEATHER CONTEXT - USE THIS FOR ALL RECOMMENDATIONS:
{weather}

RESPONSE FORMAT REQUIREMENTS:
You MUST return your response in this exact JSON format:
{{
  "irrigation": {{
    "recommendation": "specific advice based on CURRENT rainfall and temperature",
    "schedule": "adjust based on upcoming forecast",
    "water_amount": "adjust based on recent rainfall",
    "urgency": "high/medium/low based on conditions"
  }},
  "fertilizer": {{
    "recommendation": "advice considering CURRENT soil moisture and temperature",
    "type": "fertilizer types suitable for current weather",
    "quantity": "amount per acre",
    "timing": "when to apply considering weather forecast"
  }},
  "pest_control": {{
    "recommendation": "pest risks based on CURRENT humidity and temperature",
    "common_pests": "pests likely in current conditions",
    "organic_options": "natural remedies",
    "chemical_options": "if necessary"
  }},
  "sowing_harvest": {{
    "optimal_timing": "adjust based on CURRENT conditions vs historical",
    "preparation": "field preparation considering current weather",
    "harvest_window": "when to harvest",
    "yield_expectation": "expected yield given current conditions"
  }},
  "weather_alerts": {{
    "current_risks": "immediate weather risks to crops",
    "precautions": "protective measures needed NOW",
    "timeline": "when to expect issues based on forecast"
  }},
  "summary": "brief overall summary focusing on CURRENT situation",
  "confidence": "high/medium/low"
}}
Return ONLY the JSON object, with no text before or after it.

KEY GUIDELINES FOR REAL-TIME ADVICE:
- Base ALL recommendations on CURRENT weather conditions
- Adjust irrigation based on RECENT rainfall and FORECAST
- Consider temperature impact on fertilizer effectiveness
- Account for humidity in pest/disease risk assessment
- Compare current conditions to historical averages

ADDITIONAL CONTEXT:
{history}

{language} Keep the JSON keys in English."""


def build_chat_prompt(message: str, ctx: ConversationContext, language: str,
                      weather: Optional[RegionWeather]) -> Prompt:
    system = CHAT_SYSTEM_TEMPLATE.format(
        weather=format_weather_context(weather, language),
        context=format_conversation_context(ctx, language),
        language=LANGUAGE_INSTRUCTION[_lang(language)],
    )
    return Prompt(system=system, user=message or "")


def build_advice_prompt(crop: str, region: str, language: str,
                        report: Optional[WeatherReport],
                        trends: Optional[Dict[str, Any]] = None,
                        soil: Optional[Dict[str, Any]] = None,
                        performance: Optional[Dict[str, Any]] = None,
                        sowing: Optional[Dict[str, Any]] = None,
                        specific_question: str = "") -> Prompt:
    system = ADVICE_SYSTEM_TEMPLATE.format(
        weather=format_realtime_weather_context(report, language),
        history=format_historical_context(trends, soil, performance, sowing),
        language=LANGUAGE_INSTRUCTION[_lang(language)],
    )
    if specific_question:
        system += f"\n\nUSER'S SPECIFIC QUESTION: {specific_question}"

    if is_english(language):
        user = (f"Generate REAL-TIME farming advice for {crop} in {region} considering the current "
                "weather conditions shown above. Focus on immediate actions and adjustments needed "
                "based on actual weather.")
    else:
        user = (f"مندرجہ بالا موجودہ موسمی حالات کو مدنظر رکھتے ہوئے {region} میں {urdu_crop_name(crop)} "
                "کے لیے رئیل ٹائم کاشتکاری کا مشورہ دیں۔ اصل موسم کی بنیاد پر فوری اقدامات اور "
                "ایڈجسٹمنٹ پر توجہ مرکوز کریں۔")
    return Prompt(system=system, user=user)


# ---------- reply post-processing ----------

_ARTIFACTS = re.compile(r"</?s>|\[/?INST\]")

_EMOJI_TOPICS = {
    "en": [("irrigation", "💧"), ("fertilizer", "🌿"), ("weather", "🌦️")],
    "ur": [("آبپاشی", "💧"), ("کھاد", "🌿"), ("موسم", "🌦️")],
}


def enhance_formatting(text: str, language: str = "en") -> str:
    """Strip instruction-tuning artifacts and tag key topics with an emoji unless one is already present."""
    cleaned = _ARTIFACTS.sub("", text or "").strip()
    flags = re.IGNORECASE if is_english(language) else 0
    for word, emoji in _EMOJI_TOPICS[_lang(language)]:
        if emoji not in cleaned and re.search(re.escape(word), cleaned, flags):
            cleaned = re.sub(re.escape(word), lambda m: f"{m.group(0)} {emoji}", cleaned, flags=flags)
    return cleaned
