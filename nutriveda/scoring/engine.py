"""
Score Aggregation Engine

score_item(profile, item, config) is a pure function:

1. Start from the configured base score
2. Resolve the single active framework and evaluate only that one
3. Always evaluate Safety
4. Weight each raw delta (explicit override > config > 1.0)
5. Sum onto the base and clamp to [min_score, max_score]
6. Blocked items score 0, no matter what the other systems said

explain_score() rebuilds that arithmetic for "why did I get this score"
queries, alongside which property blocks the item carries.

PRINCIPLE: One evaluator failing must never abort scoring. A failing
traditional evaluator is downgraded to a neutral result; a failing Safety
evaluator blocks the item, since its verdict is unknown.

Version: score_engine_v1
"""

import logging
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

from nutriveda.config.models import SystemConfig
from nutriveda.rules import safety
from nutriveda.rules.framework import resolve_framework
from nutriveda.rules.models import FoodItem, Recipe, UserHealthProfile
from nutriveda.rules.results import RuleResult, clamp, merge_rule_results

from .models import DataCompleteness, ScoreBreakdown, ScoreResult

logger = logging.getLogger(__name__)


Scoreable = Union[FoodItem, Recipe]

DEFAULT_WEIGHT = 1.0
SCORE_PRECISION = 2


def recipe_as_item(recipe: Recipe) -> FoodItem:
    """Flatten a recipe into the food shape; its snapshot stands in for modern_nutrition."""
    return FoodItem(
        id=recipe.id,
        name=recipe.name,
        category=recipe.category or "Recipe",
        tags=list(recipe.tags),
        cooking_method=recipe.cooking_method,
        meal_types=list(recipe.meal_types),
        modern_nutrition=recipe.nutrition_snapshot,
        ayurveda=recipe.ayurveda,
        unani=recipe.unani,
        tcm=recipe.tcm,
    )


def resolve_weights(
    config: SystemConfig,
    override: Optional[Mapping[str, float]] = None,
) -> Dict[str, float]:
    """Merge an explicit weight override over the configured weights, key by key."""
    weights = config.rule_weights.model_dump()
    if override:
        weights.update({system: float(w) for system, w in override.items()})
    return weights


def _safe_evaluate(
    system: str,
    evaluate: Callable[[FoodItem], RuleResult],
    item: FoodItem,
) -> RuleResult:
    try:
        return evaluate(item)
    except Exception:
        logger.exception(f"{system} evaluator failed on item '{item.id}'")
        if system == "safety":
            return RuleResult().veto("BLOCKED: Safety checks could not be completed")
        return RuleResult.neutral()


def score_item(
    profile: UserHealthProfile,
    item: Scoreable,
    config: Optional[SystemConfig] = None,
    weights: Optional[Mapping[str, float]] = None,
) -> ScoreResult:
    """
    Score one item for one profile.

    Args:
        profile: User health profile (read-only)
        item: FoodItem or Recipe
        config: Active configuration; defaults when omitted
        weights: Optional per-system weight override

    Returns:
        ScoreResult with final score, merged text and per-system breakdown
    """
    config = config or SystemConfig()
    if isinstance(item, Recipe):
        item = recipe_as_item(item)

    rules = config.scoring_rules
    framework = resolve_framework(profile, rules.default_framework)
    evaluations: List[Tuple[str, RuleResult]] = [
        (framework.system, _safe_evaluate(framework.system, framework.evaluate, item)),
        ("safety", _safe_evaluate("safety", lambda i: safety.evaluate(profile, i), item)),
    ]

    resolved = resolve_weights(config, weights)
    system_scores: Dict[str, float] = {}
    weighted_scores: Dict[str, float] = {}
    for system, result in evaluations:
        system_scores[system] = result.score_delta
        weighted_scores[system] = result.score_delta * resolved.get(system, DEFAULT_WEIGHT)

    merged = merge_rule_results(result for _, result in evaluations)
    total = rules.base_score + sum(weighted_scores.values())
    final = clamp(total, rules.min_score, rules.max_score)
    if merged.block:
        final = 0

    return ScoreResult(
        final_score=round(final, SCORE_PRECISION),
        reasons=merged.reasons,
        warnings=merged.warnings,
        blocked=merged.block,
        system_scores=system_scores,
        weighted_scores=weighted_scores,
        active_framework=framework.system,
    )


def _has_data(block) -> bool:
    return block is not None and bool(block.model_dump(exclude_defaults=True))


def data_completeness(item: Scoreable) -> DataCompleteness:
    """Report which property blocks an item carries. A recipe's modern data is its snapshot."""
    if isinstance(item, Recipe):
        item = recipe_as_item(item)
    flags = {
        "has_ayurveda_data": _has_data(item.ayurveda),
        "has_unani_data": _has_data(item.unani),
        "has_tcm_data": _has_data(item.tcm),
        "has_modern_data": _has_data(item.modern_nutrition),
    }
    return DataCompleteness(
        **flags,
        completeness_score=round(100 * sum(flags.values()) / len(flags)),
    )


def explain_score(
    item: Scoreable,
    result: ScoreResult,
    config: Optional[SystemConfig] = None,
    weights: Optional[Mapping[str, float]] = None,
) -> ScoreBreakdown:
    """
    Rebuild the arithmetic behind a ScoreResult.

    Args:
        item: The item that was scored
        result: Output of score_item for that item
        config: Config used for scoring; defaults when omitted
        weights: The weight override passed to score_item, if any

    Returns:
        ScoreBreakdown with base score, clamping, weights and data completeness
    """
    config = config or SystemConfig()
    rules = config.scoring_rules
    resolved = resolve_weights(config, weights)

    raw_total = rules.base_score + sum(result.weighted_scores.values())
    clamped_total = clamp(raw_total, rules.min_score, rules.max_score)

    terms = " ".join(
        f"{'-' if delta < 0 else '+'} {abs(delta):g} ({system})"
        for system, delta in result.weighted_scores.items()
    )
    calculation = f"{rules.base_score:g} {terms} = {round(raw_total, SCORE_PRECISION):g}"
    if result.blocked:
        calculation += " -> 0 (blocked)"
    elif clamped_total != raw_total:
        calculation += f" -> {round(clamped_total, SCORE_PRECISION):g} (clamped)"

    return ScoreBreakdown(
        base_score=rules.base_score,
        raw_total=round(raw_total, SCORE_PRECISION),
        min_score=rules.min_score,
        max_score=rules.max_score,
        clamped=clamped_total != raw_total,
        blocked=result.blocked,
        weights={system: resolved.get(system, DEFAULT_WEIGHT) for system in result.weighted_scores},
        formula=(
            f"final = clamp({rules.base_score:g} + sum(weight x delta), "
            f"{rules.min_score:g}, {rules.max_score:g}); 0 when blocked"
        ),
        calculation=calculation,
        data_completeness=data_completeness(item),
    )
