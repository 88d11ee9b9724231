"""
Recommendation / Ranking Layer

Turns per-item scores into a sorted recommendation list.

Pipeline:
1. Pre-filter candidates by category and meal slot
2. Score every remaining candidate (score_item)
3. Drop blocked items unconditionally
4. Apply practitioner overrides (when enabled in config)
5. Drop items below min_score
6. Sort descending (stable on input order) and keep the top `limit`

Meal and daily-plan variants are thin compositions of recommend(): a meal
slot is only an options preset.

PRINCIPLE: Blocked items never appear, whatever min_score says.

Version: recommendation_layer_v1
"""

from typing import Dict, List, Mapping, Optional, Sequence, Union

from nutriveda.config.models import SystemConfig
from nutriveda.rules.framework import resolve_framework
from nutriveda.rules.models import FoodItem, NutritionFacts, Recipe, UserHealthProfile
from nutriveda.rules.tcm import PATTERN_LABELS
from nutriveda.scoring.engine import score_item
from nutriveda.scoring.models import ScoreResult
from nutriveda.shared.hashing import canonicalize_and_hash

from .models import (
    DailyPlan,
    MealTime,
    PractitionerOverride,
    RankingAudit,
    Recommendation,
    RecommendationResult,
    RecommendationSummary,
    RecommendOptions,
)
from .overrides import apply_override


Candidate = Union[FoodItem, Recipe]

MEAL_MIN_SCORES: Dict[str, float] = {
    "breakfast": 50,
    "lunch": 45,
    "dinner": 40,
    "snack": 35,
}

# slot -> (meal time, limit)
DAILY_PLAN_SLOTS = {
    "breakfast": ("breakfast", 3),
    "lunch": ("lunch", 3),
    "dinner": ("dinner", 3),
    "snacks": ("snack", 5),
}
MAIN_MEALS = ("breakfast", "lunch", "dinner")


# ============================================================================
# HELPERS
# ============================================================================

def _passes_filters(candidate: Candidate, options: RecommendOptions) -> bool:
    if options.category and candidate.category != options.category:
        return False
    if options.meal_time and candidate.meal_types:
        return options.meal_time in {m.lower() for m in candidate.meal_types}
    return True


def _to_recommendation(candidate: Candidate, result: ScoreResult) -> Recommendation:
    if isinstance(candidate, Recipe):
        snapshot = candidate.nutrition_snapshot
        return Recommendation(
            item_id=candidate.id,
            item_type="recipe",
            name=candidate.name,
            category=candidate.category,
            score=result.final_score,
            reasons=result.reasons,
            warnings=result.warnings,
            system_scores=result.system_scores,
            weighted_scores=result.weighted_scores,
            nutrition=snapshot.facts() if snapshot else None,
            prep_time=candidate.prep_time,
            cook_time=candidate.cook_time,
            servings=candidate.servings,
        )
    return Recommendation(
        item_id=candidate.id,
        item_type="food",
        name=candidate.name,
        category=candidate.category,
        score=result.final_score,
        reasons=result.reasons,
        warnings=result.warnings,
        system_scores=result.system_scores,
        weighted_scores=result.weighted_scores,
        nutrition=candidate.modern_nutrition,
    )


def _strict_leader(scores: Mapping[str, float]) -> Optional[str]:
    """Key with a value strictly greater than every other, else None."""
    if not scores:
        return None
    best = max(scores, key=scores.get)
    if any(v >= scores[best] for k, v in scores.items() if k != best):
        return None
    return best


def dominant_constitution_label(profile: UserHealthProfile, system: str) -> str:
    """
    Human-readable constitution for the summary, from the baseline assessment.

    Returns "Balanced" when no single attribute leads.
    """
    leader = None
    if system == "ayurveda" and profile.prakriti is not None:
        leader = _strict_leader(profile.prakriti.model_dump())
    elif system == "unani" and profile.humor_constitution is not None:
        leader = _strict_leader(profile.humor_constitution.model_dump())
    elif system == "tcm":
        pattern = _strict_leader(profile.tcm_constitution or profile.tcm_patterns)
        if pattern is not None:
            return PATTERN_LABELS.get(pattern, pattern)
        if profile.cold_heat in ("Cold", "Heat"):
            return f"{profile.cold_heat} tendency"
    return leader.capitalize() if leader else "Balanced"


def _summarize(
    profile: UserHealthProfile,
    recommendations: List[Recommendation],
    system: str,
) -> RecommendationSummary:
    count = len(recommendations)
    average = round(sum(r.score for r in recommendations) / count) if count else 0
    top_category = recommendations[0].category if recommendations else None

    prep_times = [r.prep_time for r in recommendations if r.item_type == "recipe" and r.prep_time is not None]
    average_prep = round(sum(prep_times) / len(prep_times)) if prep_times else None

    return RecommendationSummary(
        total_recommended=count,
        average_score=average,
        top_category=top_category,
        average_prep_time=average_prep,
        dominant_constitution=dominant_constitution_label(profile, system),
        active_framework=system,
        medical_conditions=list(profile.medical_conditions),
        dietary_preferences=list(profile.dietary_preferences),
    )


def _hash_ranking(recommendations: List[Recommendation], options: RecommendOptions) -> str:
    return canonicalize_and_hash({
        "ranked": [[r.item_type, r.item_id, r.score] for r in recommendations],
        "options": options.model_dump(),
    })


# ============================================================================
# PUBLIC API
# ============================================================================

def recommend(
    profile: UserHealthProfile,
    candidates: Sequence[Candidate],
    config: Optional[SystemConfig] = None,
    options: Optional[RecommendOptions] = None,
    weights: Optional[Mapping[str, float]] = None,
    overrides: Optional[Sequence[PractitionerOverride]] = None,
) -> RecommendationResult:
    """
    Rank candidates for a profile.

    Args:
        profile: User health profile
        candidates: Foods and/or recipes, in catalog order
        config: Active configuration; defaults when omitted
        options: limit / min_score / category / meal_time
        weights: Optional per-system weight override
        overrides: Practitioner overrides for this user

    Returns:
        RecommendationResult with ranked items, summary and audit
    """
    config = config or SystemConfig()
    options = options or RecommendOptions()
    override_map = {}
    if overrides and config.allows_overrides():
        override_map = {(o.item_type, o.item_id): o for o in overrides}

    eligible = [c for c in candidates if _passes_filters(c, options)]
    qualified: List[Recommendation] = []
    blocked_count = below_count = applied = 0

    for candidate in eligible:
        result = score_item(profile, candidate, config, weights)
        if result.blocked:
            blocked_count += 1
            continue

        recommendation = _to_recommendation(candidate, result)
        override = override_map.get((recommendation.item_type, recommendation.item_id))
        if override is not None:
            recommendation = apply_override(recommendation, override)
            applied += 1

        if recommendation.score < options.min_score:
            below_count += 1
            continue
        qualified.append(recommendation)

    qualified.sort(key=lambda r: r.score, reverse=True)
    top = qualified[:options.limit]
    system = resolve_framework(profile, config.scoring_rules.default_framework).system

    return RecommendationResult(
        recommendations=top,
        summary=_summarize(profile, top, system),
        audit=RankingAudit(
            total_candidates=len(candidates),
            filtered_out=len(candidates) - len(eligible),
            blocked_count=blocked_count,
            below_threshold_count=below_count,
            returned_count=len(top),
            overrides_applied=applied,
            min_score=options.min_score,
            limit=options.limit,
        ),
        result_hash=_hash_ranking(top, options),
    )


def options_for_meal(meal_time: MealTime, **overrides) -> RecommendOptions:
    """Meal-slot preset; explicit keyword overrides win."""
    preset = {"min_score": MEAL_MIN_SCORES[meal_time], "meal_time": meal_time}
    preset.update({k: v for k, v in overrides.items() if v is not None})
    return RecommendOptions(**preset)


def recommend_for_meal(
    profile: UserHealthProfile,
    candidates: Sequence[Candidate],
    meal_time: MealTime,
    config: Optional[SystemConfig] = None,
    weights: Optional[Mapping[str, float]] = None,
    overrides: Optional[Sequence[PractitionerOverride]] = None,
    **option_overrides,
) -> RecommendationResult:
    options = options_for_meal(meal_time, **option_overrides)
    return recommend(profile, candidates, config, options, weights, overrides)


def _sum_nutrition(picks: List[Recommendation]) -> NutritionFacts:
    facts = [p.nutrition for p in picks if p.nutrition is not None]
    return NutritionFacts(
        calories=round(sum(n.calories for n in facts)),
        protein=round(sum(n.protein for n in facts), 1),
        carbs=round(sum(n.carbs for n in facts), 1),
        fat=round(sum(n.fat for n in facts), 1),
        fiber=round(sum(n.fiber for n in facts), 1),
    )


def build_daily_plan(
    profile: UserHealthProfile,
    candidates: Sequence[Candidate],
    config: Optional[SystemConfig] = None,
    weights: Optional[Mapping[str, float]] = None,
    overrides: Optional[Sequence[PractitionerOverride]] = None,
) -> DailyPlan:
    """
    One recommend_for_meal() call per slot.

    Total nutrition sums the top pick of breakfast, lunch and dinner.
    """
    slots: Dict[str, RecommendationResult] = {
        slot: recommend_for_meal(profile, candidates, meal_time, config, weights, overrides, limit=limit)
        for slot, (meal_time, limit) in DAILY_PLAN_SLOTS.items()
    }
    top_picks = [slots[s].recommendations[0] for s in MAIN_MEALS if slots[s].recommendations]

    return DailyPlan(
        breakfast=slots["breakfast"].recommendations,
        lunch=slots["lunch"].recommendations,
        dinner=slots["dinner"].recommendations,
        snacks=slots["snacks"].recommendations,
        total_nutrition=_sum_nutrition(top_picks),
        plan_hash=canonicalize_and_hash({s: r.result_hash for s, r in slots.items()}),
    )
