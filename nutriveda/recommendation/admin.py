"""
Recommendation Endpoints

Stateless ranking (profile and candidates in the body) plus user-based
food, recipe, meal and daily-plan recommendations against the store.

Security: recording a practitioner override requires the admin key;
everything else is operational.

Version: recommendation_layer_v1
"""

import logging
from datetime import datetime
from typing import Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from nutriveda.errors import NutrivedaException
from nutriveda.nutrition.aggregate import inline_resolver, refresh_recipes
from nutriveda.rules.models import FoodItem, Recipe, UserHealthProfile
from nutriveda.runtime import Runtime
from nutriveda.shared.http import to_http_exception, verify_admin_key

from .models import (
    DailyPlan,
    MealTime,
    PractitionerOverride,
    RecommendationResult,
    RecommendOptions,
)
from .rank import MEAL_MIN_SCORES, recommend

logger = logging.getLogger(__name__)


router = APIRouter(
    prefix="/api/v1/recommendations",
    tags=["recommendations"],
)


class RankRequest(BaseModel):
    profile: UserHealthProfile
    foods: List[FoodItem] = Field(default_factory=list)
    recipes: List[Recipe] = Field(default_factory=list)
    options: RecommendOptions = Field(default_factory=RecommendOptions)
    weights: Optional[Dict[str, float]] = None
    overrides: List[PractitionerOverride] = Field(default_factory=list)


class RecommendationResponse(BaseModel):
    success: bool = True
    result: RecommendationResult
    generated_at: datetime = Field(default_factory=datetime.utcnow)


class DailyPlanResponse(BaseModel):
    success: bool = True
    plan: DailyPlan
    generated_at: datetime = Field(default_factory=datetime.utcnow)


@router.get("/health")
async def recommendation_health():
    return {
        "status": "ok",
        "module": "recommendation_layer",
        "version": "recommendation_layer_v1",
        "meal_min_scores": MEAL_MIN_SCORES,
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.post("/rank", response_model=RecommendationResponse)
async def rank(request: RankRequest):
    runtime = Runtime.get_instance()
    # Recipe snapshots are re-derived from ingredients; inline foods win over the catalog
    resolve = inline_resolver(request.foods, runtime.store.get_food)
    try:
        recipes = await refresh_recipes(request.recipes, resolve)
    except Exception as e:
        logger.error(f"Food lookup failed while deriving recipe nutrition: {e}")
        raise HTTPException(status_code=503, detail="Food catalog unavailable")

    config = await runtime.config.get_config()
    candidates = [*request.foods, *recipes]
    result = recommend(
        request.profile,
        candidates,
        config,
        request.options,
        request.weights,
        request.overrides,
    )
    return RecommendationResponse(result=result)


async def _for_user(user_id: str, item_type: str, limit: int, min_score: float, category: Optional[str]):
    options = RecommendOptions(limit=limit, min_score=min_score, category=category)
    try:
        result = await Runtime.get_instance().recommendations.recommend_for_user(user_id, item_type, options)
    except NutrivedaException as e:
        raise to_http_exception(e)
    return RecommendationResponse(result=result)


@router.get("/users/{user_id}/foods", response_model=RecommendationResponse)
async def foods_for_user(
    user_id: str,
    limit: int = Query(default=10, ge=1, le=100),
    min_score: float = Query(default=40),
    category: Optional[str] = None,
):
    return await _for_user(user_id, "food", limit, min_score, category)


@router.get("/users/{user_id}/recipes", response_model=RecommendationResponse)
async def recipes_for_user(
    user_id: str,
    limit: int = Query(default=10, ge=1, le=100),
    min_score: float = Query(default=40),
    category: Optional[str] = None,
):
    return await _for_user(user_id, "recipe", limit, min_score, category)


@router.get("/users/{user_id}/meal/{meal_time}", response_model=RecommendationResponse)
async def meal_for_user(
    user_id: str,
    meal_time: MealTime,
    item_type: Literal["food", "recipe", "both"] = Query(default="both", alias="type"),
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    min_score: Optional[float] = None,
):
    try:
        result = await Runtime.get_instance().recommendations.recommend_meal(
            user_id, meal_time, item_type, limit=limit, min_score=min_score
        )
    except NutrivedaException as e:
        raise to_http_exception(e)
    return RecommendationResponse(result=result)


@router.get("/users/{user_id}/daily-plan", response_model=DailyPlanResponse)
async def daily_plan_for_user(
    user_id: str,
    item_type: Literal["food", "recipe", "both"] = Query(default="recipe", alias="type"),
):
    try:
        plan = await Runtime.get_instance().recommendations.daily_plan(user_id, item_type)
    except NutrivedaException as e:
        raise to_http_exception(e)
    return DailyPlanResponse(plan=plan)


@router.post("/users/{user_id}/overrides")
async def record_override(
    user_id: str,
    override: PractitionerOverride,
    admin_key: str = Depends(verify_admin_key),
):
    try:
        await Runtime.get_instance().recommendations.record_override(user_id, override)
    except NutrivedaException as e:
        raise to_http_exception(e)
    return {"success": True, "user_id": user_id, "item_id": override.item_id}
