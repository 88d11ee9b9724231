"""
Recommendation Layer

Filters, scores, thresholds and ranks candidates; builds meal and daily
plans. The async RecommendationService lives in .service and is imported
directly by its callers.

Version: recommendation_layer_v1
"""

from .models import (
    MealTime,
    ItemType,
    RecommendOptions,
    PractitionerOverride,
    OverrideInfo,
    Recommendation,
    RecommendationSummary,
    RankingAudit,
    RecommendationResult,
    DailyPlan,
)
from .overrides import apply_override
from .rank import (
    MEAL_MIN_SCORES,
    DAILY_PLAN_SLOTS,
    recommend,
    recommend_for_meal,
    options_for_meal,
    build_daily_plan,
    dominant_constitution_label,
)

__all__ = [
    "MealTime",
    "ItemType",
    "RecommendOptions",
    "PractitionerOverride",
    "OverrideInfo",
    "Recommendation",
    "RecommendationSummary",
    "RankingAudit",
    "RecommendationResult",
    "DailyPlan",
    "apply_override",
    "MEAL_MIN_SCORES",
    "DAILY_PLAN_SLOTS",
    "recommend",
    "recommend_for_meal",
    "options_for_meal",
    "build_daily_plan",
    "dominant_constitution_label",
]

__version__ = "recommendation_layer_v1"
