"""
Ayurveda Evaluator

Scores an item against the user's aggravated dosha.

Scoring components:
1. Dosha correction: +/-4 x severity on the dominant dosha, with smaller
   adjustments for other doshas that are also elevated
2. Agni (digestive fire) compatibility with the item's guna
3. Virya (potency) against the dominant dosha
4. Rasa (taste) and guna refinements

Never blocks.

Version: rule_engine_v1
"""

from typing import Dict, Optional

from .models import AyurvedaProperties, FoodItem, UserHealthProfile
from .results import RuleResult
from .state import DominantState, dominant_state


DOSHAS = ("vata", "pitta", "kapha")

DOSHA_CORRECTION_WEIGHT = 4
SECONDARY_ELEVATED_THRESHOLD = 40

# Guna deltas per agni type. weak digestion reads as variable, strong as sharp.
AGNI_GUNA_EFFECTS: Dict[str, Dict[str, float]] = {
    "variable": {"Light": 3, "Heavy": -3, "Oily": 1},
    "sharp": {"Light": 1, "Heavy": 1, "Oily": -2, "Dry": 1},
    "slow": {"Light": 3, "Heavy": -3, "Oily": -2, "Dry": 2},
}
AGNI_ALIASES = {"weak": "variable", "strong": "sharp"}

BENEFICIAL_RASA = {
    "vata": ("Sweet", "Sour", "Salty"),
    "pitta": ("Sweet", "Bitter", "Astringent"),
    "kapha": ("Pungent", "Bitter", "Astringent"),
}


def evaluate(profile: UserHealthProfile, item: FoodItem) -> RuleResult:
    """
    Evaluate an item under Ayurveda.

    Neutral when the item has no Ayurveda block or the profile has no dosha
    assessment.
    """
    props = item.ayurveda
    doshas = profile.current_doshas()
    state = dominant_state(doshas, DOSHAS)
    if props is None or state is None:
        return RuleResult.neutral()

    result = RuleResult()
    _score_dosha_effect(result, props, state, doshas)
    _score_agni(result, props, profile.digestive_strength, item.category)
    _score_virya(result, props, state.name)
    _score_rasa_guna(result, props, state.name)
    return result


def _score_dosha_effect(
    result: RuleResult,
    props: AyurvedaProperties,
    state: DominantState,
    doshas: Dict[str, float],
) -> None:
    effects = props.dosha_effect
    if effects is None:
        return

    label = state.name.capitalize()
    effect = getattr(effects, state.name)
    magnitude = DOSHA_CORRECTION_WEIGHT * state.tier
    if effect == "Decrease":
        result.add(magnitude, reason=f"Balances your aggravated {label} dosha")
    elif effect == "Increase":
        result.add(-magnitude, warning=f"May aggravate your {label} dosha")
    elif effect == "Neutral":
        result.add(1, reason=f"Neutral effect on {label} dosha")

    for dosha in DOSHAS:
        if dosha == state.name or doshas.get(dosha, 0) <= SECONDARY_ELEVATED_THRESHOLD:
            continue
        other = getattr(effects, dosha)
        if other == "Increase":
            result.add(-2, warning=f"May also raise your elevated {dosha.capitalize()} dosha")
        elif other == "Decrease":
            result.add(1, reason=f"Also calms your elevated {dosha.capitalize()} dosha")


def _score_agni(
    result: RuleResult,
    props: AyurvedaProperties,
    digestive_strength: Optional[str],
    category: str,
) -> None:
    if not digestive_strength or not props.guna:
        return

    agni = AGNI_ALIASES.get(digestive_strength, digestive_strength)
    if agni == "balanced":
        result.add(1, reason="Balanced agni digests this food well")
        return

    for guna, delta in AGNI_GUNA_EFFECTS.get(agni, {}).items():
        if guna not in props.guna:
            continue
        if delta > 0:
            result.add(delta, reason=f"{guna} quality suits {agni} agni")
        else:
            result.add(delta, warning=f"{guna} quality burdens {agni} agni")

    if agni == "variable" and "Dry" in props.guna and category == "Vegetable":
        result.add(-1, warning="Dry raw vegetables are hard on variable agni")


def _score_virya(result: RuleResult, props: AyurvedaProperties, dominant: str) -> None:
    label = dominant.capitalize()
    if props.virya == "Hot":
        if dominant == "pitta":
            result.add(-2, warning="Heating potency may aggravate Pitta")
        else:
            result.add(2, reason=f"Warming potency balances {label}")
    elif props.virya == "Cold":
        if dominant == "pitta":
            result.add(2, reason="Cooling potency balances Pitta")
        else:
            result.add(-1, warning=f"Cooling potency may increase {label}")


def _score_rasa_guna(result: RuleResult, props: AyurvedaProperties, dominant: str) -> None:
    beneficial = BENEFICIAL_RASA[dominant]
    helpful = [taste for taste in props.rasa if taste in beneficial]
    others = len(props.rasa) - len(helpful)
    if helpful:
        result.add(len(helpful), reason=f"{', '.join(helpful)} taste balances {dominant.capitalize()}")
    if others:
        result.add(-0.5 * others)

    if dominant == "vata":
        if "Stable" in props.guna:
            result.add(0.5)
        if "Mobile" in props.guna:
            result.add(-0.5)
    elif dominant == "kapha":
        if "Mobile" in props.guna:
            result.add(0.5)
        if "Stable" in props.guna:
            result.add(-0.5)
