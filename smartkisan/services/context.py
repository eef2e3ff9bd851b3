# smartkisan/services/context.py
"""
Conversation context extraction.

The whole history plus the current message is folded message by message.
Single-valued fields take the LAST match in iteration order (later rules in
a table also override earlier ones within the same message). Challenges
accumulate; a "no challenge" phrase resets them to ["none"], and a later
challenge mention replaces that marker again.
"""
from functools import reduce
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from smartkisan.models.domain import ConversationContext

Rule = Tuple[str, Sequence[str]]

CROP_RULES: List[Rule] = [
    ("wheat", ("wheat", "گندم")),
    ("rice", ("rice", "چاول")),
    ("cotton", ("cotton", "کپاس")),
    ("sugarcane", ("sugarcane", "گنا")),
    ("maize", ("maize", "مکئی")),
]

REGION_RULES: List[Rule] = [
    ("punjab", ("punjab", "پنجاب")),
    ("sindh", ("sindh", "سندھ")),
    ("khyber pakhtunkhwa", ("khyber", "خیبر")),
    ("balochistan", ("balochistan", "بلوچستان")),
]

GROWTH_STAGE_RULES: List[Rule] = [
    ("sowing", ("sowing", "بوائی", "planting")),
    ("vegetative", ("vegetative", "نشوونما")),
    ("flowering", ("flowering", "پھول")),
    ("harvest", ("harvest", "کٹائی")),
    ("unknown", ("idk", "not sure", "پتہ نہیں")),
]

SOIL_RULES: List[Rule] = [
    ("sandy", ("sandy", "ریتیلی")),
    ("clay", ("clay", "چکنی")),
    ("loam", ("loam", "بھاری")),
]

IRRIGATION_RULES: List[Rule] = [
    ("canal", ("canal", "نہر")),
    ("tube well", ("tube well", "ٹیوب ویل")),
    ("rainfed", ("rain", "بارش")),
]

CHALLENGE_RULES: List[Rule] = [
    ("pests", ("pest", "کیڑے", "insect")),
    ("diseases", ("disease", "بیماری")),
    ("irrigation", ("water", "پانی", "irrigation")),
    ("soil_health", ("soil", "مٹی", "fertili")),
    ("weather", ("weather", "موسم")),
]

NO_CHALLENGE_PHRASES = ("no challenge", "کوئی مسئلہ نہیں")

TONE_RULES: List[Rule] = [
    ("casual", ("bro", "بھائی", "dude")),
    ("friendly", ("hello", "hi", "ہیلو")),
]

SINGLE_VALUED = {
    "crop": CROP_RULES,
    "region": REGION_RULES,
    "growthStage": GROWTH_STAGE_RULES,
    "soilType": SOIL_RULES,
    "irrigationType": IRRIGATION_RULES,
    "tone": TONE_RULES,
}


def _last_match(rules: List[Rule], text: str) -> Optional[str]:
    found = None
    for value, keywords in rules:
        if any(k in text for k in keywords):
            found = value
    return found


def _content_of(turn: Any) -> str:
    if isinstance(turn, dict):
        content = turn.get("content")
    else:
        content = getattr(turn, "content", turn)
    return content if isinstance(content, str) else ""


def _fold(state: Dict[str, Any], content: str) -> Dict[str, Any]:
    text = content.lower()
    nxt = dict(state)

    for field, rules in SINGLE_VALUED.items():
        value = _last_match(rules, text)
        if value is not None:
            nxt[field] = value

    challenges = list(state["challenges"])
    for value, keywords in CHALLENGE_RULES:
        if any(k in text for k in keywords):
            if challenges == ["none"]:
                challenges = []
            if value not in challenges:
                challenges.append(value)
    if any(p in text for p in NO_CHALLENGE_PHRASES):
        challenges = ["none"]
    nxt["challenges"] = challenges

    return nxt


def extract_context(history: Optional[Iterable[Any]], message: Optional[str]) -> ConversationContext:
    """Build the context record for this turn. Never raises; unmatched fields stay unset."""
    turns = [_content_of(t) for t in (history or [])]
    turns.append(message if isinstance(message, str) else "")

    initial = ConversationContext().model_dump()
    return ConversationContext(**reduce(_fold, turns, initial))
