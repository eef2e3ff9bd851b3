"""
Unit tests for conversation context extraction
"""

from smartkisan.schemas import ChatTurn
from smartkisan.services.context import extract_context


def _turns(*texts):
    return [{"role": "user", "content": t} for t in texts]


class TestContextExtraction:

    def test_last_match_wins(self):
        ctx = extract_context(_turns("I grow rice"), "actually I grow wheat")
        assert ctx.crop == "wheat"

    def test_later_history_overrides_earlier(self):
        ctx = extract_context(_turns("farm in sindh", "moved to punjab"), "")
        assert ctx.region == "punjab"

    def test_reset_then_reaccumulate(self):
        ctx = extract_context(_turns("I have no challenges"), "but pests are a problem")
        assert ctx.challenges == ["pests"]

    def test_no_challenge_resets_accumulated(self):
        ctx = extract_context(_turns("pests and disease everywhere"), "now there is no challenge at all")
        assert ctx.challenges == ["none"]

    def test_challenges_accumulate_without_duplicates(self):
        ctx = extract_context(_turns("pest attack", "more pests"), "and some disease")
        assert ctx.challenges == ["pests", "diseases"]

    def test_all_fields(self):
        ctx = extract_context([], "My cotton in khyber is flowering, clay soil, tube well water")
        assert ctx.crop == "cotton"
        assert ctx.region == "khyber pakhtunkhwa"
        assert ctx.growthStage == "flowering"
        assert ctx.soilType == "clay"
        assert ctx.irrigationType == "tube well"
        assert "irrigation" in ctx.challenges

    def test_urdu_keywords(self):
        ctx = extract_context([], "میری گندم پنجاب میں ہے")
        assert ctx.crop == "wheat"
        assert ctx.region == "punjab"

    def test_accepts_chat_turn_models_and_none(self):
        ctx = extract_context([ChatTurn(role="user", content="bro my maize")], None)
        assert ctx.crop == "maize"
        assert ctx.tone == "casual"

    def test_empty_input_defaults(self):
        ctx = extract_context(None, "")
        assert ctx.crop is None
        assert ctx.challenges == []
        assert ctx.tone == "friendly"
