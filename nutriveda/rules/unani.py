"""
Unani Evaluator

Scores an item against the user's dominant humor (khilt) and baseline
temperament (mizaj).

Scoring components:
1. Humor correction: reduces dominant humor +4 x severity,
   neutral +1 x severity, increases it -4 x severity
2. Temperament balancing by the principle of opposites (+/-2 per quality
   at degree 2 or above)
3. Digestive adjustment from digestibility and flatulence potential

Never blocks.

Version: rule_engine_v1
"""

from typing import Optional

from .models import FoodItem, UnaniProperties, UserHealthProfile
from .results import RuleResult
from .state import DominantState, dominant_state


HUMORS = ("dam", "safra", "balgham", "sauda")

HUMOR_LABELS = {
    "dam": "Dam (Hot + Moist)",
    "safra": "Safra (Hot + Dry)",
    "balgham": "Balgham (Cold + Moist)",
    "sauda": "Sauda (Cold + Dry)",
}

HUMOR_CORRECTION_WEIGHT = 4
TEMPERAMENT_DEGREE_THRESHOLD = 2
TEMPERAMENT_WEIGHT = 2

# mizaj -> (qualities that balance it, qualities that aggravate it)
TEMPERAMENT_OPPOSITES = {
    "dam": (("cold", "dry"), ("hot", "moist")),
    "safra": (("cold", "moist"), ("hot", "dry")),
    "balgham": (("hot", "dry"), ("cold", "moist")),
    "sauda": (("hot", "moist"), ("cold", "dry")),
}

DEFAULT_DIGESTIBILITY = 3


def evaluate(profile: UserHealthProfile, item: FoodItem) -> RuleResult:
    """
    Evaluate an item under Unani.

    Neutral when the item has no Unani block or the profile has no humor
    assessment. The baseline constitution sets the mizaj; the imbalance
    overlay (or baseline, if none) sets the dominant humor.
    """
    props = item.unani
    state = dominant_state(profile.current_humors(), HUMORS)
    if props is None or state is None:
        return RuleResult.neutral()

    mizaj = state.name
    if profile.humor_constitution is not None:
        baseline = dominant_state(profile.humor_constitution.model_dump(), HUMORS)
        if baseline is not None:
            mizaj = baseline.name

    result = RuleResult()
    _score_humor(result, props, state)
    _score_temperament(result, props, mizaj)
    _score_digestion(result, props, profile.digestive_strength)
    return result


def _score_humor(result: RuleResult, props: UnaniProperties, state: DominantState) -> None:
    if props.humor_effects is None:
        return

    label = HUMOR_LABELS[state.name]
    effect = getattr(props.humor_effects, state.name)
    if effect == -1:
        result.add(HUMOR_CORRECTION_WEIGHT * state.tier, reason=f"Reduces {label}, your dominant humor")
    elif effect == 0:
        result.add(1 * state.tier, reason=f"Neutral effect on {label}")
    elif effect == 1:
        result.add(-HUMOR_CORRECTION_WEIGHT * state.tier, warning=f"Increases {label}, which is already dominant")


def _score_temperament(result: RuleResult, props: UnaniProperties, mizaj: str) -> None:
    temperament = props.temperament
    if temperament is None:
        return

    balancing, aggravating = TEMPERAMENT_OPPOSITES[mizaj]
    for quality in balancing:
        level = getattr(temperament, f"{quality}_level")
        if level >= TEMPERAMENT_DEGREE_THRESHOLD:
            result.add(
                TEMPERAMENT_WEIGHT,
                reason=f"{quality.capitalize()} temperament ({level}/4) balances {mizaj.capitalize()} mizaj",
            )
    for quality in aggravating:
        level = getattr(temperament, f"{quality}_level")
        if level >= TEMPERAMENT_DEGREE_THRESHOLD:
            result.add(
                -TEMPERAMENT_WEIGHT,
                warning=f"{quality.capitalize()} temperament ({level}/4) aggravates {mizaj.capitalize()}",
            )


def _score_digestion(
    result: RuleResult,
    props: UnaniProperties,
    digestive_strength: Optional[str],
) -> None:
    digestibility = props.digestibility_level or DEFAULT_DIGESTIBILITY
    flatulence = props.flatulence_potential or "low"

    if digestive_strength == "weak":
        if digestibility >= 4:
            result.add(-3, warning=f"Hard to digest ({digestibility}/5) for weak digestion")
        if flatulence == "high":
            result.add(-2, warning="High flatulence potential with weak digestion")
        if digestibility <= 2:
            result.add(2, reason=f"Easy to digest ({digestibility}/5), good for weak digestion")
    elif digestive_strength == "slow":
        if digestibility >= 5:
            result.add(-2, warning=f"Very heavy ({digestibility}/5), may burden slow digestion")
        if digestibility <= 2:
            result.add(1, reason=f"Light food ({digestibility}/5) suits slow digestion")
