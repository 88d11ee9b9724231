"""
Recommendation Models

Pydantic models for ranking options, ranked items, summaries, practitioner
overrides, audit trails and daily plans.

Version: recommendation_layer_v1
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from nutriveda.rules.models import NutritionFacts


MealTime = Literal["breakfast", "lunch", "dinner", "snack"]
ItemType = Literal["food", "recipe"]


class RecommendOptions(BaseModel):
    limit: int = Field(default=10, ge=1, le=100)
    min_score: float = Field(default=40, description="Items scoring below are dropped")
    category: Optional[str] = Field(default=None, description="Only rank items in this category")
    meal_time: Optional[MealTime] = Field(
        default=None,
        description="Only rank items whose meal_types include this slot (or list none)"
    )

    class Config:
        extra = "forbid"


class PractitionerOverride(BaseModel):
    """Clinical judgment replacing the computed score of one item for one user."""
    item_id: str
    item_type: ItemType = "food"
    new_score: float = Field(ge=0, le=100)
    reason: str
    action: Literal["approve", "reject"] = "approve"
    practitioner_id: Optional[str] = None
    applied_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        extra = "forbid"


class OverrideInfo(BaseModel):
    action: str
    reason: str
    applied_by: Optional[str] = None
    applied_at: datetime
    original_score: float

    class Config:
        extra = "forbid"


class Recommendation(BaseModel):
    """One ranked item with its justification."""
    item_id: str
    item_type: ItemType
    name: str
    category: str
    score: float
    reasons: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    system_scores: Dict[str, float] = Field(default_factory=dict)
    weighted_scores: Dict[str, float] = Field(default_factory=dict)
    nutrition: Optional[NutritionFacts] = None
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    servings: Optional[int] = None
    overridden: bool = False
    override_info: Optional[OverrideInfo] = None

    class Config:
        extra = "forbid"


class RecommendationSummary(BaseModel):
    total_recommended: int
    average_score: int
    top_category: Optional[str] = None
    average_prep_time: Optional[int] = Field(
        default=None,
        description="Mean prep time in minutes; recipes only"
    )
    dominant_constitution: str
    active_framework: str
    medical_conditions: List[str] = Field(default_factory=list)
    dietary_preferences: List[str] = Field(default_factory=list)

    class Config:
        extra = "forbid"


class RankingAudit(BaseModel):
    total_candidates: int
    filtered_out: int = Field(description="Excluded by category or meal slot before scoring")
    blocked_count: int
    below_threshold_count: int
    returned_count: int
    overrides_applied: int = 0
    min_score: float
    limit: int
    processed_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())

    class Config:
        extra = "forbid"


class RecommendationResult(BaseModel):
    recommendations: List[Recommendation]
    summary: RecommendationSummary
    audit: RankingAudit
    result_hash: str = Field(description="Deterministic hash of the ranked list")
    version: str = "recommendation_layer_v1"

    class Config:
        extra = "forbid"


class DailyPlan(BaseModel):
    breakfast: List[Recommendation] = Field(default_factory=list)
    lunch: List[Recommendation] = Field(default_factory=list)
    dinner: List[Recommendation] = Field(default_factory=list)
    snacks: List[Recommendation] = Field(default_factory=list)
    total_nutrition: NutritionFacts = Field(
        default_factory=NutritionFacts,
        description="Sum of the top pick of breakfast, lunch and dinner"
    )
    plan_hash: str
    version: str = "recommendation_layer_v1"

    class Config:
        extra = "forbid"
