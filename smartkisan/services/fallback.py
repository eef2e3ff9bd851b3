# smartkisan/services/fallback.py
"""
Network-free advice used whenever the completion provider is unconfigured,
unreachable, or answers with something unparseable.

Two independent strategies:
  generate_dynamic_advice()  full six-section AdvicePayload from weather thresholds
  fallback_reply()           canned chat answer picked by keywords in the message
English and Urdu are written out separately; nothing is translated at runtime.
"""
import re
from typing import Any, Dict, List, Optional

from smartkisan.models.domain import (
    AdvicePayload,
    ConversationContext,
    FertilizerAdvice,
    ForecastDay,
    IrrigationAdvice,
    PestControlAdvice,
    RegionWeather,
    SowingHarvestAdvice,
    WeatherAlerts,
    WeatherReport,
    WeatherSnapshot,
)
from smartkisan.services.context import CROP_RULES
from smartkisan.services.prompts import is_english, urdu_crop_name, weather_impact_keys
from smartkisan.tools.history import recommended_months
from smartkisan.tools.regions import REGION_LABELS, canonical_region


def _t(en: bool, english: str, urdu: str) -> str:
    return english if en else urdu


# ---------- weather-driven selectors ----------

def irrigation_urgency(cur: WeatherSnapshot) -> str:
    if cur.rainfall > 15:
        return "low"
    if cur.rainfall > 5:
        return "medium"
    if cur.temperature > 30:
        return "high"
    return "medium"


def pest_risk(cur: WeatherSnapshot) -> str:
    if cur.humidity > 75 and cur.temperature > 25:
        return "high"
    if cur.humidity > 65:
        return "medium"
    return "low"


def _upcoming_rain(forecast: List[ForecastDay], days: int = 3) -> float:
    return round(sum(d.rain or 0 for d in forecast[:days]), 1)


def irrigation_advice(cur: WeatherSnapshot, en: bool) -> str:
    if cur.rainfall > 20:
        return _t(en, "Recent heavy rainfall detected. Skip next irrigation to prevent waterlogging.",
                  "حالیہ شدید بارش کا پتہ چلا ہے۔ پانی کے کھڑے ہونے سے روکنے کے لیے اگلی آبپاشی چھوڑ دیں۔")
    if cur.rainfall > 5:
        return _t(en, "Moderate rainfall received. Reduce irrigation frequency and monitor soil moisture.",
                  "معتدل بارش ہوئی ہے۔ آبپاشی کی فریکوئنسی کم کریں اور مٹی کی نمی پر نظر رکھیں۔")
    if cur.temperature > 32:
        return _t(en, "High temperatures increasing water demand. Maintain regular irrigation schedule.",
                  "زیادہ درجہ حرارت پانی کی مانگ بڑھا رہا ہے۔ باقاعدہ آبپاشی کا شیڈول برقرار رکھیں۔")
    return _t(en, "Normal conditions. Continue with standard irrigation practices.",
              "عام حالات۔ معیاری آبپاشی کے طریقوں کو جاری رکھیں۔")


def irrigation_schedule(cur: WeatherSnapshot, forecast: List[ForecastDay], en: bool) -> str:
    rain = _upcoming_rain(forecast)
    if rain > 15:
        return _t(en, f"Delay the next irrigation; about {rain}mm of rain is expected in the next 3 days.",
                  f"اگلی آبپاشی مؤخر کریں؛ اگلے 3 دنوں میں تقریباً {rain} ملی میٹر بارش متوقع ہے۔")
    if cur.temperature > 32:
        return _t(en, "Irrigate every 5-7 days, early morning or evening.",
                  "ہر 5 سے 7 دن بعد صبح سویرے یا شام کو آبپاشی کریں۔")
    return _t(en, "Irrigate every 8-10 days; check soil moisture before watering.",
              "ہر 8 سے 10 دن بعد آبپاشی کریں؛ پانی دینے سے پہلے مٹی کی نمی چیک کریں۔")


def water_amount(cur: WeatherSnapshot, en: bool) -> str:
    if cur.rainfall > 20:
        return _t(en, "Skip the next watering", "اگلی بار پانی نہ دیں")
    if cur.rainfall > 5:
        return _t(en, "About 2 acre-inches per irrigation", "فی آبپاشی تقریباً 2 ایکڑ انچ")
    if cur.temperature > 32:
        return _t(en, "About 3-3.5 acre-inches per irrigation", "فی آبپاشی تقریباً 3 سے 3.5 ایکڑ انچ")
    return _t(en, "About 3 acre-inches per irrigation", "فی آبپاشی تقریباً 3 ایکڑ انچ")


def fertilizer_advice(cur: WeatherSnapshot, soil: Optional[Dict[str, Any]], en: bool) -> str:
    if cur.rainfall > 20:
        base = _t(en, "Wait until the field drains before applying fertilizer to avoid nutrient runoff.",
                  "کھاد ڈالنے سے پہلے کھیت سے پانی نکلنے کا انتظار کریں تاکہ غذائی اجزاء ضائع نہ ہوں۔")
    elif cur.temperature > 35:
        base = _t(en, "Apply fertilizer in the evening and irrigate lightly afterwards to reduce urea loss in the heat.",
                  "گرمی میں یوریا کے ضیاع سے بچنے کے لیے شام کو کھاد ڈالیں اور بعد میں ہلکی آبپاشی کریں۔")
    else:
        base = _t(en, "Apply balanced NPK fertilizer after next irrigation cycle.",
                  "اگلی آبپاشی کے بعد متوازن NPK کھاد ڈالیں۔")

    nitrogen = ((soil or {}).get("nutrient_levels") or {}).get("nitrogen", {}).get("level", "")
    if "low" in nitrogen:
        base += _t(en, " Soil nitrogen is low in this region, so split the urea dose.",
                   " اس علاقے کی مٹی میں نائٹروجن کم ہے، اس لیے یوریا کی خوراک تقسیم کر کے دیں۔")
    return base


def fertilizer_type(soil: Optional[Dict[str, Any]]) -> str:
    nitrogen = ((soil or {}).get("nutrient_levels") or {}).get("nitrogen", {}).get("level", "")
    if "low" in nitrogen:
        return "Urea + DAP (NPK 50:25:25)"
    return "NPK 50:25:25"


def fertilizer_timing(cur: WeatherSnapshot, forecast: List[ForecastDay], en: bool) -> str:
    if _upcoming_rain(forecast, 2) > 10:
        return _t(en, "After the expected rain passes", "متوقع بارش گزرنے کے بعد")
    if cur.rainfall > 5:
        return _t(en, "Once the field is workable (2-3 days)", "جب کھیت قابلِ کاشت ہو جائے (2 سے 3 دن)")
    return _t(en, "After irrigation", "آبپاشی کے بعد")


def pest_control_advice(risk: str, en: bool) -> str:
    if risk == "high":
        return _t(en, "Warm, humid weather favours pests and fungal disease. Scout fields every 2-3 days.",
                  "گرم اور مرطوب موسم کیڑوں اور fungal بیماریوں کے لیے سازگار ہے۔ ہر 2 سے 3 دن کھیت کا معائنہ کریں۔")
    if risk == "medium":
        return _t(en, "Moderate pest risk. Inspect leaves weekly and remove infected plants early.",
                  "کیڑوں کا معتدل خطرہ۔ ہفتہ وار پتوں کا معائنہ کریں اور متاثرہ پودے جلد نکال دیں۔")
    return _t(en, "Low pest risk in current conditions. Continue routine monitoring.",
              "موجودہ حالات میں کیڑوں کا خطرہ کم ہے۔ معمول کی نگرانی جاری رکھیں۔")


CROP_PESTS = {
    "wheat": ("Aphids, termites, rust", "تیلا، دیمک، کنگی"),
    "rice": ("Stem borer, leaf folder, brown planthopper", "تنے کی سنڈی، پتہ لپیٹ سنڈی، بھورا تیلا"),
    "cotton": ("Whitefly, pink bollworm, jassid", "سفید مکھی، گلابی سنڈی، سبز تیلا"),
    "sugarcane": ("Top borer, pyrilla, termites", "چوٹی کی سنڈی، پائریلا، دیمک"),
    "maize": ("Fall armyworm, stem borer, aphids", "فال آرمی ورم، تنے کی سنڈی، تیلا"),
}


def common_pests(cur: WeatherSnapshot, crop: str, en: bool) -> str:
    pests = CROP_PESTS.get((crop or "").lower(), ("Aphids, whitefly, mites", "تیلا، سفید مکھی، مائٹس"))
    text = pests[0 if en else 1]
    if cur.humidity > 75:
        text += _t(en, ", fungal diseases", "، fungal بیماریاں")
    return text


HARVEST_WINDOWS = {
    "wheat": ("Apr-May", "اپریل تا مئی"),
    "rice": ("Oct-Nov", "اکتوبر تا نومبر"),
    "cotton": ("Sep-Nov", "ستمبر تا نومبر"),
    "sugarcane": ("Nov-Mar", "نومبر تا مارچ"),
    "maize": ("Sep-Oct", "ستمبر تا اکتوبر"),
}

URDU_MONTHS = {
    "January": "جنوری", "February": "فروری", "March": "مارچ", "April": "اپریل",
    "May": "مئی", "June": "جون", "July": "جولائی", "August": "اگست",
    "September": "ستمبر", "October": "اکتوبر", "November": "نومبر", "December": "دسمبر",
}


def optimal_timing(cur: WeatherSnapshot, crop: str, en: bool) -> str:
    months = recommended_months(crop)
    if not en:
        months = [URDU_MONTHS.get(m, m) for m in months]
    month_text = ", ".join(months)
    if cur.temperature > 35:
        return _t(en, f"Recommended sowing: {month_text}. It is too hot right now; wait for cooler days.",
                  f"تجویز کردہ بوائی: {month_text}۔ ابھی بہت گرمی ہے؛ ٹھنڈے دنوں کا انتظار کریں۔")
    if cur.temperature < 10:
        return _t(en, f"Recommended sowing: {month_text}. Cold conditions may slow germination.",
                  f"تجویز کردہ بوائی: {month_text}۔ سردی سے اگاؤ سست ہو سکتا ہے۔")
    return _t(en, f"Recommended sowing: {month_text}. Current temperatures are suitable.",
              f"تجویز کردہ بوائی: {month_text}۔ موجودہ درجہ حرارت موزوں ہے۔")


def field_preparation(cur: WeatherSnapshot, en: bool) -> str:
    if cur.rainfall > 20:
        return _t(en, "Let the soil dry to workable moisture before ploughing; open drainage channels.",
                  "ہل چلانے سے پہلے مٹی کو مناسب حد تک خشک ہونے دیں؛ نکاسی کی نالیاں کھولیں۔")
    if cur.rainfall == 0 and cur.humidity < 40:
        return _t(en, "Give a pre-sowing irrigation (rauni) and level the field to save water.",
                  "بوائی سے پہلے رونی کریں اور پانی بچانے کے لیے کھیت ہموار کریں۔")
    return _t(en, "Plough twice, level the field and mix in well-rotted farmyard manure.",
              "دو بار ہل چلائیں، کھیت ہموار کریں اور گلی سڑی گوبر کی کھاد ملائیں۔")


def yield_expectation(cur: WeatherSnapshot, crop: str, performance: Optional[Dict[str, Any]], en: bool) -> str:
    stressed = cur.temperature > 35 or cur.temperature < 10 or cur.rainfall > 20
    if performance:
        avg = performance["average_yield"]
        if stressed:
            return _t(en, f"Slightly below the historical average of {avg} q/acre due to weather stress",
                      f"موسمی دباؤ کی وجہ سے تاریخی اوسط {avg} من فی ایکڑ سے کچھ کم")
        return _t(en, f"Close to the historical average of {avg} q/acre",
                  f"تاریخی اوسط {avg} من فی ایکڑ کے قریب")
    if stressed:
        return _t(en, "Below average if current weather stress continues",
                  "اگر موجودہ موسمی دباؤ جاری رہا تو اوسط سے کم")
    return _t(en, "Average to good under current conditions", "موجودہ حالات میں اوسط سے اچھی")


RISK_TEXT = {
    "heat": ("heat stress", "حرارتی دباؤ"),
    "cold": ("cold stress", "سردی کا دباؤ"),
    "heavy_rain": ("waterlogging", "پانی کھڑا ہونا"),
    "moderate_rain": ("wet soil delaying field work", "گیلی مٹی سے کھیت کا کام مؤخر"),
    "no_rain": ("moisture stress without irrigation", "آبپاشی کے بغیر نمی کی کمی"),
    "humid": ("fungal disease", "fungal بیماری"),
    "dry": ("drought stress", "خشک سالی کا دباؤ"),
}

PRECAUTION_TEXT = {
    "heat": ("Irrigate in the evening and avoid spraying at midday", "شام کو آبپاشی کریں اور دوپہر کو سپرے نہ کریں"),
    "cold": ("Give light irrigation on frost-risk nights", "کورے کے خطرے والی راتوں میں ہلکی آبپاشی کریں"),
    "heavy_rain": ("Open drainage channels and postpone fertilizer", "نکاسی کی نالیاں کھولیں اور کھاد مؤخر کریں"),
    "moderate_rain": ("Postpone spraying until leaves are dry", "پتے خشک ہونے تک سپرے مؤخر کریں"),
    "no_rain": ("Check soil moisture every few days", "ہر چند دن بعد مٹی کی نمی چیک کریں"),
    "humid": ("Improve air flow and use a preventive fungicide if spots appear", "ہوا کا گزر بہتر کریں اور دھبے نظر آئیں تو حفاظتی fungicide استعمال کریں"),
    "dry": ("Mulch to keep moisture in the soil", "مٹی میں نمی برقرار رکھنے کے لیے ملچ کریں"),
}


def current_risks(cur: WeatherSnapshot, en: bool) -> str:
    keys = weather_impact_keys(cur)
    if not keys:
        return _t(en, "No major weather risks right now", "اس وقت کوئی بڑا موسمی خطرہ نہیں")
    sep = ", " if en else "، "
    return sep.join(RISK_TEXT[k][0 if en else 1] for k in keys)


def precautions(cur: WeatherSnapshot, en: bool) -> str:
    keys = weather_impact_keys(cur)
    if not keys:
        return _t(en, "Continue regular field monitoring", "کھیت کی باقاعدہ نگرانی جاری رکھیں")
    sep = "; " if en else "؛ "
    return sep.join(PRECAUTION_TEXT[k][0 if en else 1] for k in keys)


def risk_timeline(forecast: List[ForecastDay], en: bool) -> str:
    for day in forecast:
        if (day.rain or 0) >= 10 or (day.rainProbability or 0) >= 70:
            return _t(en, f"Rain expected on {day.day} ({day.rain}mm, {day.rainProbability or 0}% chance)",
                      f"{day.date} کو بارش متوقع ہے ({day.rain} ملی میٹر، {day.rainProbability or 0}% امکان)")
        if day.temp > 38:
            return _t(en, f"Heat spike expected on {day.day} ({day.temp}°C)",
                      f"{day.date} کو شدید گرمی متوقع ہے ({day.temp}°C)")
    n = len(forecast) or 7
    return _t(en, f"No significant weather events expected in the next {n} days",
              f"اگلے {n} دنوں میں کوئی اہم موسمی واقعہ متوقع نہیں")


def dynamic_summary(cur: WeatherSnapshot, crop: str, region: str, en: bool) -> str:
    key = canonical_region(region)
    urgency = irrigation_urgency(cur)
    if en:
        return (f"{crop.title()} in {REGION_LABELS['en'][key]}: {cur.temperature}°C, {cur.condition.lower()}, "
                f"{cur.rainfall}mm recent rain. Irrigation urgency is {urgency}; "
                f"pest risk is {pest_risk(cur)}.")
    urgency_ur = {"high": "زیادہ", "medium": "درمیانی", "low": "کم"}
    return (f"{REGION_LABELS['ur'][key]} میں {urdu_crop_name(crop)}: {cur.temperature}°C، "
            f"{cur.rainfall} ملی میٹر حالیہ بارش۔ آبپاشی کی ضرورت {urgency_ur[urgency]} ہے؛ "
            f"کیڑوں کا خطرہ {urgency_ur[pest_risk(cur)]} ہے۔")


def generate_dynamic_advice(crop: str, region: str, language: str,
                            report: WeatherReport,
                            trends: Optional[Dict[str, Any]] = None,
                            soil: Optional[Dict[str, Any]] = None,
                            performance: Optional[Dict[str, Any]] = None,
                            confidence: str = "high") -> AdvicePayload:
    en = is_english(language)
    crop = crop or "wheat"
    cur = report.current
    forecast = report.forecast
    risk = pest_risk(cur)
    harvest = HARVEST_WINDOWS.get(crop.lower(), ("Varies by variety", "قسم کے مطابق"))

    return AdvicePayload(
        irrigation=IrrigationAdvice(
            recommendation=irrigation_advice(cur, en),
            schedule=irrigation_schedule(cur, forecast, en),
            water_amount=water_amount(cur, en),
            urgency=irrigation_urgency(cur),
        ),
        fertilizer=FertilizerAdvice(
            recommendation=fertilizer_advice(cur, soil, en),
            type=fertilizer_type(soil),
            quantity="50kg/acre",
            timing=fertilizer_timing(cur, forecast, en),
        ),
        pest_control=PestControlAdvice(
            recommendation=pest_control_advice(risk, en),
            common_pests=common_pests(cur, crop, en),
            organic_options=_t(en, "Neem oil, Garlic spray", "نیم کا تیل، لہسن کا سپرے"),
            chemical_options=_t(en, "Use only if infestation severe",
                                "صرف شدید انفیکشن کی صورت میں استعمال کریں"),
        ),
        sowing_harvest=SowingHarvestAdvice(
            optimal_timing=optimal_timing(cur, crop, en),
            preparation=field_preparation(cur, en),
            harvest_window=harvest[0 if en else 1],
            yield_expectation=yield_expectation(cur, crop, performance, en),
        ),
        weather_alerts=WeatherAlerts(
            current_risks=current_risks(cur, en),
            precautions=precautions(cur, en),
            timeline=risk_timeline(forecast, en),
        ),
        summary=dynamic_summary(cur, crop, region, en),
        confidence=confidence,
    )


# ---------- conversational fallback ----------

_GREETING = re.compile(r"^\s*(hi|hello|hey|salam|assalam\s*o?\s*alaikum|aoa)\b|ہیلو|السلام", re.IGNORECASE)
_IRRIGATION_WORDS = ("irrigat", "water", "پانی", "آبپاشی")
_FERTILIZER_WORDS = ("fertili", "urea", "dap", "npk", "کھاد")

CROP_TIPS = {
    "wheat": (
        "**Wheat** 🌾 does best when sown from late October to mid November.\n"
        "• Use certified seed, about 50 kg/acre\n"
        "• First irrigation 20-25 days after sowing (crown root stage)\n"
        "• Watch for **rust** and aphids in February",
        "**گندم** 🌾 کی بوائی اکتوبر کے آخر سے نومبر کے وسط تک بہترین رہتی ہے۔\n"
        "• تصدیق شدہ بیج استعمال کریں، تقریباً 50 کلو فی ایکڑ\n"
        "• پہلا پانی بوائی کے 20 سے 25 دن بعد دیں\n"
        "• فروری میں **کنگی** اور تیلے پر نظر رکھیں",
    ),
    "rice": (
        "**Rice** 🌾 nursery goes in around late May, transplanting in late June to July.\n"
        "• Keep 2-3 inches of standing water after transplanting\n"
        "• Apply zinc sulphate in zinc-deficient fields\n"
        "• Scout for **stem borer** from August",
        "**چاول** 🌾 کی پنیری مئی کے آخر میں اور منتقلی جون کے آخر سے جولائی تک کریں۔\n"
        "• منتقلی کے بعد 2 سے 3 انچ پانی کھڑا رکھیں\n"
        "• زنک کی کمی والے کھیتوں میں زنک سلفیٹ ڈالیں\n"
        "• اگست سے **تنے کی سنڈی** کا معائنہ کریں",
    ),
    "cotton": (
        "**Cotton** 🌱 is best sown from April to May.\n"
        "• Keep plant-to-plant distance of about 9-12 inches\n"
        "• Avoid water stress at flowering and boll formation\n"
        "• Monitor **whitefly** and pink bollworm weekly",
        "**کپاس** 🌱 کی بوائی اپریل سے مئی تک بہترین ہے۔\n"
        "• پودوں کا درمیانی فاصلہ تقریباً 9 سے 12 انچ رکھیں\n"
        "• پھول اور ٹینڈے بننے کے وقت پانی کی کمی نہ ہونے دیں\n"
        "• ہفتہ وار **سفید مکھی** اور گلابی سنڈی کی نگرانی کریں",
    ),
    "sugarcane": (
        "**Sugarcane** 🎋 is planted in Feb-March (spring) or Sept-Oct (autumn).\n"
        "• Use healthy 3-bud setts\n"
        "• Irrigate every 10-12 days in summer\n"
        "• Earth up the crop before the monsoon",
        "**گنا** 🎋 بہاریہ (فروری-مارچ) یا ستمبر-اکتوبر میں کاشت کریں۔\n"
        "• صحت مند تین آنکھوں والے سَٹے استعمال کریں\n"
        "• گرمیوں میں ہر 10 سے 12 دن بعد پانی دیں\n"
        "• مون سون سے پہلے مٹی چڑھائیں",
    ),
    "maize": (
        "**Maize** 🌽 has spring (Jan-Feb) and autumn (July-Aug) seasons.\n"
        "• Use hybrid seed for higher yield\n"
        "• Keep the field weed-free for the first 6 weeks\n"
        "• Watch for **fall armyworm** in the whorl",
        "**مکئی** 🌽 کی بہاریہ (جنوری-فروری) اور خریف (جولائی-اگست) کاشت ہوتی ہے۔\n"
        "• زیادہ پیداوار کے لیے ہائبرڈ بیج استعمال کریں\n"
        "• پہلے 6 ہفتے کھیت جڑی بوٹیوں سے پاک رکھیں\n"
        "• گوبھ میں **فال آرمی ورم** پر نظر رکھیں",
    ),
}

CANNED = {
    "greeting": (
        "Hello! 👋 I'm SmartKisan AI, your farming assistant. 🌱\n\n"
        "I can help with:\n"
        "• **Irrigation** timing and water amounts 💧\n"
        "• **Fertilizer** choice and doses 🌿\n"
        "• **Pests and diseases** 🐛\n"
        "• **Sowing and harvest** planning 🌾\n\n"
        "Which crop are you growing, and in which region?",
        "السلام علیکم! 👋 میں اسمارٹ کسان AI ہوں، آپ کا کاشتکاری معاون۔ 🌱\n\n"
        "میں ان چیزوں میں مدد کر سکتا ہوں:\n"
        "• **آبپاشی** کا وقت اور مقدار 💧\n"
        "• **کھاد** کا انتخاب اور مقدار 🌿\n"
        "• **کیڑے اور بیماریاں** 🐛\n"
        "• **بوائی اور کٹائی** کی منصوبہ بندی 🌾\n\n"
        "آپ کون سی فصل اور کس علاقے میں کاشت کر رہے ہیں؟",
    ),
    "irrigation": (
        "Great question about **irrigation** 💧\n\n"
        "• Irrigate early morning or evening to cut evaporation\n"
        "• Check soil moisture by hand at 4-6 inches before watering\n"
        "• Skip a turn after more than 20mm of rain\n"
        "• Level fields so water spreads evenly\n\n"
        "Which crop is it, and is your water from a canal or tube well?",
        "**آبپاشی** کے بارے میں بہت اچھا سوال 💧\n\n"
        "• بخارات کم کرنے کے لیے صبح سویرے یا شام کو پانی دیں\n"
        "• پانی دینے سے پہلے 4 سے 6 انچ گہرائی پر مٹی کی نمی ہاتھ سے چیک کریں\n"
        "• 20 ملی میٹر سے زیادہ بارش کے بعد ایک باری چھوڑ دیں\n"
        "• کھیت ہموار رکھیں تاکہ پانی برابر پھیلے\n\n"
        "آپ کی فصل کون سی ہے، اور پانی نہر سے آتا ہے یا ٹیوب ویل سے؟",
    ),
    "fertilizer": (
        "Let's talk **fertilizer** 🌿\n\n"
        "• Get a soil test every 2-3 years if you can\n"
        "• Apply all phosphorus (DAP) at sowing\n"
        "• Split nitrogen (urea) into 2-3 doses with irrigation\n"
        "• Add farmyard manure to improve soil health\n\n"
        "Which crop are you fertilizing, and at what stage is it?",
        "آئیے **کھاد** کی بات کرتے ہیں 🌿\n\n"
        "• ہو سکے تو ہر 2 سے 3 سال بعد مٹی کا تجزیہ کروائیں\n"
        "• فاسفورس (DAP) ساری بوائی کے وقت ڈالیں\n"
        "• نائٹروجن (یوریا) 2 سے 3 حصوں میں آبپاشی کے ساتھ دیں\n"
        "• مٹی کی صحت کے لیے گوبر کی کھاد شامل کریں\n\n"
        "آپ کس فصل کو کھاد دے رہے ہیں، اور وہ کس مرحلے میں ہے؟",
    ),
    "generic": (
        "I'd love to help you with your farming questions! 🌱\n\n"
        "Tell me a little more so I can give useful advice:\n"
        "• Which **crop** are you growing?\n"
        "• Which **region** is your farm in?\n"
        "• Is your question about irrigation, fertilizer, pests or sowing?",
        "میں آپ کے کاشتکاری کے سوالات میں مدد کرنا پسند کروں گا! 🌱\n\n"
        "بہتر مشورے کے لیے مجھے کچھ مزید بتائیں:\n"
        "• آپ کون سی **فصل** کاشت کر رہے ہیں؟\n"
        "• آپ کا کھیت کس **علاقے** میں ہے؟\n"
        "• آپ کا سوال آبپاشی، کھاد، کیڑوں یا بوائی کے بارے میں ہے؟",
    ),
}


def _detect_topic(message: str) -> str:
    text = (message or "").lower()
    if any(w in text for w in _IRRIGATION_WORDS):
        return "irrigation"
    if any(w in text for w in _FERTILIZER_WORDS):
        return "fertilizer"
    for crop, keywords in CROP_RULES:
        if any(k in text for k in keywords):
            return crop
    if _GREETING.search(message or ""):
        return "greeting"
    return "generic"


def _weather_line(weather: Optional[RegionWeather], en: bool) -> str:
    if weather is None:
        return ""
    if en:
        return (f"\n\nCurrent weather in {weather.region}: {weather.temperature}°C, "
                f"{weather.condition}, {weather.rainfall}mm rain")
    return (f"\n\n{weather.region} میں موجودہ موسم: {weather.temperature}°C، "
            f"{weather.condition}، {weather.rainfall} ملی میٹر بارش")


def fallback_reply(message: Optional[str], ctx: Optional[ConversationContext] = None,
                   language: str = "en", weather: Optional[RegionWeather] = None) -> str:
    """Canned reply chosen by keywords in the message. Never empty."""
    en = is_english(language)
    idx = 0 if en else 1
    topic = _detect_topic(message or "")

    if topic in CROP_TIPS:
        body = CROP_TIPS[topic][idx]
    else:
        body = CANNED[topic][idx]
        if topic == "generic" and ctx is not None and ctx.crop in CROP_TIPS:
            body += "\n\n" + CROP_TIPS[ctx.crop][idx]

    return body + _weather_line(weather, en)
