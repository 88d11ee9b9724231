"""
TCM Evaluator

Scores an item against the user's primary and secondary TCM patterns and
their cold/heat tendency (thermal-nature state).

Scoring components:
1. Primary pattern correction: +4 x severity when the item treats the
   pattern, -3 x severity when it aggravates it
2. Secondary pattern support: +2
3. Cold/heat balance: +/-2 from the item's thermal nature
4. Spleen/stomach fit for weak digestion

Never blocks.

Version: rule_engine_v1
"""

from typing import Dict, Optional, Tuple

from .models import FoodItem, TcmProperties, UserHealthProfile
from .results import RuleResult
from .state import DominantState, ranked_states


PATTERNS = (
    "cold",
    "heat",
    "qi_deficiency",
    "dampness",
    "dryness",
    "qi_stagnation",
    "yin_deficiency",
    "yang_deficiency",
)

PATTERN_LABELS = {
    "cold": "Cold Pattern",
    "heat": "Heat Pattern",
    "qi_deficiency": "Qi Deficiency",
    "dampness": "Dampness",
    "dryness": "Dryness",
    "qi_stagnation": "Liver Qi Stagnation",
    "yin_deficiency": "Yin Deficiency",
    "yang_deficiency": "Yang Deficiency",
}

# pattern -> (treating flag, description)
PATTERN_TREATMENTS: Dict[str, Tuple[str, str]] = {
    "dampness": ("resolves_dampness", "Resolves dampness"),
    "qi_deficiency": ("tonifies_qi", "Tonifies Qi"),
    "yin_deficiency": ("nourishes_yin", "Nourishes Yin"),
    "dryness": ("nourishes_yin", "Moistens dryness"),
    "yang_deficiency": ("warms_yang", "Warms Yang"),
    "heat": ("clears_heat", "Clears heat"),
    "qi_stagnation": ("moves_qi", "Moves Qi"),
}

PRIMARY_CORRECTION_WEIGHT = 4
PRIMARY_AGGRAVATION_WEIGHT = 3
SECONDARY_WEIGHT = 2
THERMAL_WEIGHT = 2

WARMING_NATURES = ("Warm", "Hot")
COOLING_NATURES = ("Cool", "Cold")


def evaluate(profile: UserHealthProfile, item: FoodItem) -> RuleResult:
    """
    Evaluate an item under TCM.

    Neutral when the item has no TCM block or the profile has neither a
    pattern assessment nor a cold/heat tendency.
    """
    props = item.tcm
    ranked = ranked_states(profile.current_patterns(), PATTERNS)
    if props is None or (not ranked and profile.cold_heat is None):
        return RuleResult.neutral()

    result = RuleResult()
    if ranked:
        _score_primary(result, props, ranked[0])
    if len(ranked) > 1:
        _score_secondary(result, props, ranked[1].name)
    _score_cold_heat(result, props, profile.cold_heat)
    _score_digestion(result, props, profile.digestive_strength)
    return result


def _score_primary(result: RuleResult, props: TcmProperties, state: DominantState) -> None:
    gain = PRIMARY_CORRECTION_WEIGHT * state.tier
    loss = PRIMARY_AGGRAVATION_WEIGHT * state.tier
    label = PATTERN_LABELS[state.name]

    treatment = PATTERN_TREATMENTS.get(state.name)
    if treatment and getattr(props, treatment[0]):
        result.add(gain, reason=f"{treatment[1]} ({label}, primary pattern)")

    if state.name == "dampness" and props.damp_forming and "Sweet" in props.flavor:
        result.add(-loss, warning=f"Sweet and damp-forming, aggravates {label}")
    elif state.name == "heat" and props.thermal_nature == "Hot":
        result.add(-loss, warning=f"Hot thermal nature aggravates {label}")
    elif state.name == "cold":
        if props.thermal_nature in WARMING_NATURES:
            result.add(loss, reason=f"{props.thermal_nature} nature warms {label}")
        elif props.thermal_nature == "Cold":
            result.add(-loss, warning=f"Cold nature aggravates {label}")


def _score_secondary(result: RuleResult, props: TcmProperties, pattern: str) -> None:
    treatment = PATTERN_TREATMENTS.get(pattern)
    if treatment and getattr(props, treatment[0]):
        result.add(SECONDARY_WEIGHT, reason=f"{treatment[1]} ({PATTERN_LABELS[pattern]}, secondary pattern)")


def _score_cold_heat(result: RuleResult, props: TcmProperties, cold_heat: Optional[str]) -> None:
    nature = props.thermal_nature
    if nature is None or cold_heat in (None, "Neutral"):
        return

    if cold_heat == "Cold":
        if nature in WARMING_NATURES:
            result.add(THERMAL_WEIGHT, reason=f"{nature} nature balances cold tendency")
        elif nature == "Cold":
            result.add(-THERMAL_WEIGHT, warning="Cold nature aggravates cold tendency")
    elif cold_heat == "Heat":
        if nature in COOLING_NATURES:
            result.add(THERMAL_WEIGHT, reason=f"{nature} nature balances heat tendency")
        elif nature == "Hot":
            result.add(-THERMAL_WEIGHT, warning="Hot nature aggravates heat tendency")


def _score_digestion(result: RuleResult, props: TcmProperties, digestive_strength: Optional[str]) -> None:
    if digestive_strength not in ("weak", "slow"):
        return

    if props.thermal_nature in COOLING_NATURES:
        result.add(-2, warning=f"{props.thermal_nature} nature strains weak Spleen Qi")
    elif props.thermal_nature in ("Warm", "Neutral"):
        result.add(1, reason=f"{props.thermal_nature} nature is gentle on the Spleen")
    if props.damp_forming:
        result.add(-1, warning="Damp-forming foods burden sluggish digestion")
