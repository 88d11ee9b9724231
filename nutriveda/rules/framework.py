"""
Active Framework Resolution

Exactly one non-safety framework is evaluated per scoring pass. The
framework is resolved once from which assessment fields the profile
carries, checked in fixed order:

1. DoshaBased   - prakriti / vikriti
2. HumorBased   - humor_constitution / humor_imbalance
3. PatternBased - tcm_constitution / tcm_patterns / cold_heat
4. ModernNutrition - clinical_goals

When nothing is populated the configured default framework applies.

Safety is never part of this union; the score engine always runs it.

Version: rule_engine_v1
"""

from dataclasses import dataclass
from typing import ClassVar, Dict, Type, Union

from . import ayurveda, modern, tcm, unani
from .models import FoodItem, UserHealthProfile
from .results import RuleResult


@dataclass(frozen=True)
class DoshaBased:
    profile: UserHealthProfile
    system: ClassVar[str] = "ayurveda"

    def evaluate(self, item: FoodItem) -> RuleResult:
        return ayurveda.evaluate(self.profile, item)


@dataclass(frozen=True)
class HumorBased:
    profile: UserHealthProfile
    system: ClassVar[str] = "unani"

    def evaluate(self, item: FoodItem) -> RuleResult:
        return unani.evaluate(self.profile, item)


@dataclass(frozen=True)
class PatternBased:
    profile: UserHealthProfile
    system: ClassVar[str] = "tcm"

    def evaluate(self, item: FoodItem) -> RuleResult:
        return tcm.evaluate(self.profile, item)


@dataclass(frozen=True)
class ModernNutrition:
    profile: UserHealthProfile
    system: ClassVar[str] = "modern"

    def evaluate(self, item: FoodItem) -> RuleResult:
        return modern.evaluate(self.profile, item)


ActiveFramework = Union[DoshaBased, HumorBased, PatternBased, ModernNutrition]

FRAMEWORKS_BY_SYSTEM: Dict[str, Type] = {
    "ayurveda": DoshaBased,
    "unani": HumorBased,
    "tcm": PatternBased,
    "modern": ModernNutrition,
}


def resolve_framework(profile: UserHealthProfile, default: str = "ayurveda") -> ActiveFramework:
    """
    Pick the single framework that applies to this profile.

    Args:
        profile: User health profile
        default: System name used when no assessment fields are populated

    Returns:
        One ActiveFramework variant bound to the profile
    """
    if profile.prakriti is not None or profile.vikriti is not None:
        return DoshaBased(profile)
    if profile.humor_constitution is not None or profile.humor_imbalance is not None:
        return HumorBased(profile)
    if profile.tcm_constitution or profile.tcm_patterns or profile.cold_heat is not None:
        return PatternBased(profile)
    if profile.clinical_goals:
        return ModernNutrition(profile)
    return FRAMEWORKS_BY_SYSTEM.get(default, DoshaBased)(profile)
