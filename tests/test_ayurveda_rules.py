"""
Ayurveda Evaluator Tests

Tests:
- test_neutral_without_properties: no ayurveda block -> neutral
- test_neutral_without_assessment: no prakriti/vikriti -> neutral
- test_balancing_food: Decrease on dominant dosha scales with severity
- test_severe_penalty_exceeds_mild: aggravation costs more when severe
- test_overlay_over_baseline: vikriti drives the dominant dosha
- test_agni_adjustments: guna vs digestive strength
- test_never_blocks

Version: rule_engine_v1
"""

import pytest

from nutriveda.rules import ayurveda
from nutriveda.rules.models import (
    AyurvedaDoshaEffect,
    AyurvedaProperties,
    DoshaScores,
    FoodItem,
    UserHealthProfile,
)


# ============================================================================
# TEST FIXTURES
# ============================================================================

@pytest.fixture
def pitta_profile() -> UserHealthProfile:
    return UserHealthProfile(
        user_id="u-pitta",
        prakriti=DoshaScores(vata=30, pitta=40, kapha=30),
        vikriti=DoshaScores(vata=20, pitta=70, kapha=10),
    )


@pytest.fixture
def cooling_food() -> FoodItem:
    return FoodItem(
        id="cucumber",
        name="Cucumber",
        category="Vegetable",
        ayurveda=AyurvedaProperties(
            rasa=["Sweet"],
            guna=[],
            virya="Cold",
            dosha_effect=AyurvedaDoshaEffect(vata="Neutral", pitta="Decrease", kapha="Neutral"),
        ),
    )


def _aggravating(virya=None) -> FoodItem:
    return FoodItem(
        id="chili",
        name="Chili",
        category="Spice",
        ayurveda=AyurvedaProperties(
            dosha_effect=AyurvedaDoshaEffect(pitta="Increase"),
            virya=virya,
        ),
    )


# ============================================================================
# TESTS
# ============================================================================

class TestNeutral:
    def test_neutral_without_properties(self, pitta_profile):
        result = ayurveda.evaluate(pitta_profile, FoodItem(id="x", name="Plain"))
        assert result.score_delta == 0
        assert not result.reasons and not result.warnings

    def test_neutral_without_assessment(self, cooling_food):
        result = ayurveda.evaluate(UserHealthProfile(), cooling_food)
        assert result.score_delta == 0


class TestDoshaCorrection:
    def test_balancing_food(self, pitta_profile, cooling_food):
        result = ayurveda.evaluate(pitta_profile, cooling_food)
        # severe Decrease (+12), Cold virya for Pitta (+2), Sweet rasa (+1)
        assert result.score_delta == 15
        assert "Balances your aggravated Pitta dosha" in result.reasons

    def test_severe_penalty_exceeds_mild(self):
        severe = UserHealthProfile(vikriti=DoshaScores(vata=15, pitta=70, kapha=15))
        mild = UserHealthProfile(vikriti=DoshaScores(vata=30, pitta=45, kapha=25))
        item = _aggravating()

        severe_delta = ayurveda.evaluate(severe, item).score_delta
        mild_delta = ayurveda.evaluate(mild, item).score_delta
        assert severe_delta == -12
        assert mild_delta == -4
        assert severe_delta < mild_delta

    def test_aggravation_warns(self, pitta_profile):
        result = ayurveda.evaluate(pitta_profile, _aggravating(virya="Hot"))
        assert any("aggravate your Pitta" in w for w in result.warnings)
        assert any("Heating potency" in w for w in result.warnings)

    def test_overlay_over_baseline(self, cooling_food):
        profile = UserHealthProfile(
            prakriti=DoshaScores(vata=70, pitta=20, kapha=10),
            vikriti=DoshaScores(vata=10, pitta=55, kapha=35),
        )
        result = ayurveda.evaluate(profile, cooling_food)
        assert "Balances your aggravated Pitta dosha" in result.reasons

    def test_baseline_when_no_overlay(self, cooling_food):
        profile = UserHealthProfile(prakriti=DoshaScores(vata=20, pitta=65, kapha=15))
        result = ayurveda.evaluate(profile, cooling_food)
        assert "Balances your aggravated Pitta dosha" in result.reasons

    def test_secondary_elevated_dosha(self):
        profile = UserHealthProfile(vikriti=DoshaScores(vata=10, pitta=48, kapha=42))
        item = FoodItem(
            id="ghee",
            name="Ghee",
            ayurveda=AyurvedaProperties(dosha_effect=AyurvedaDoshaEffect(pitta="Decrease", kapha="Increase")),
        )
        result = ayurveda.evaluate(profile, item)
        # mild Decrease (+4), elevated Kapha raised (-2)
        assert result.score_delta == 2
        assert any("Kapha" in w for w in result.warnings)


class TestAgni:
    def _profile(self, strength):
        return UserHealthProfile(
            vikriti=DoshaScores(vata=45, pitta=30, kapha=25),
            digestive_strength=strength,
        )

    def _item(self, guna, category="Grain"):
        return FoodItem(id="i", name="Item", category=category, ayurveda=AyurvedaProperties(guna=guna))

    def test_light_food_suits_variable_agni(self):
        result = ayurveda.evaluate(self._profile("variable"), self._item(["Light"]))
        assert result.score_delta == 3

    def test_weak_reads_as_variable(self):
        weak = ayurveda.evaluate(self._profile("weak"), self._item(["Heavy"]))
        variable = ayurveda.evaluate(self._profile("variable"), self._item(["Heavy"]))
        assert weak.score_delta == variable.score_delta == -3

    def test_dry_vegetable_on_variable_agni(self):
        result = ayurveda.evaluate(self._profile("variable"), self._item(["Dry"], category="Vegetable"))
        # Dry has no variable-agni entry; only the raw-vegetable penalty applies
        assert result.score_delta == -1

    def test_balanced_agni(self):
        result = ayurveda.evaluate(self._profile("balanced"), self._item(["Heavy"]))
        assert result.score_delta == 1


class TestNeverBlocks:
    def test_never_blocks(self, pitta_profile):
        assert ayurveda.evaluate(pitta_profile, _aggravating(virya="Hot")).block is False
