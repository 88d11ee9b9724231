"""
Active Framework Resolution Tests

Tests:
- test_check_order: dosha > humor > pattern > modern
- test_cold_heat_selects_pattern
- test_default_framework: configured default when nothing is assessed
- test_dominant_state: overlay and tie-breaking

Version: rule_engine_v1
"""

import pytest

from nutriveda.rules.framework import (
    DoshaBased,
    HumorBased,
    ModernNutrition,
    PatternBased,
    resolve_framework,
)
from nutriveda.rules.models import DoshaScores, HumorScores, UserHealthProfile
from nutriveda.rules.state import SeverityTier, dominant_state, severity_tier


class TestResolveFramework:
    def test_check_order(self):
        profile = UserHealthProfile(
            prakriti=DoshaScores(vata=50, pitta=30, kapha=20),
            humor_constitution=HumorScores(dam=40),
            tcm_patterns={"heat": 60},
            clinical_goals=["weight_loss"],
        )
        framework = resolve_framework(profile)
        assert isinstance(framework, DoshaBased)
        assert framework.system == "ayurveda"

    def test_humor_before_pattern(self):
        profile = UserHealthProfile(humor_imbalance=HumorScores(sauda=40), tcm_patterns={"heat": 60})
        assert isinstance(resolve_framework(profile), HumorBased)

    def test_cold_heat_selects_pattern(self):
        profile = UserHealthProfile(cold_heat="Cold", clinical_goals=["general_health"])
        assert isinstance(resolve_framework(profile), PatternBased)

    def test_goals_select_modern(self):
        framework = resolve_framework(UserHealthProfile(clinical_goals=["muscle_gain"]))
        assert isinstance(framework, ModernNutrition)
        assert framework.system == "modern"

    @pytest.mark.parametrize("default,expected", [
        ("ayurveda", DoshaBased),
        ("unani", HumorBased),
        ("tcm", PatternBased),
        ("modern", ModernNutrition),
    ])
    def test_default_framework(self, default, expected):
        assert isinstance(resolve_framework(UserHealthProfile(), default), expected)


class TestDominantState:
    def test_severity_tiers(self):
        assert severity_tier(61) == SeverityTier.SEVERE
        assert severity_tier(60) == SeverityTier.MODERATE
        assert severity_tier(51) == SeverityTier.MODERATE
        assert severity_tier(50) == SeverityTier.MILD

    def test_tie_goes_to_check_order(self):
        state = dominant_state({"vata": 40, "pitta": 40, "kapha": 20}, ("vata", "pitta", "kapha"))
        assert state.name == "vata"

    def test_nothing_elevated(self):
        assert dominant_state({"vata": 0, "pitta": 0}, ("vata", "pitta")) is None
        assert dominant_state({}, ("vata",)) is None
