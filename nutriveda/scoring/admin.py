"""
Score Engine Endpoints

Single-item "why did I get this score" queries, either stateless (profile
and item in the body) or against stored records. Every response carries the
score breakdown: base score, clamping, applied weights and which property
blocks the item had.

Version: score_engine_v1
"""

import logging
from datetime import datetime
from typing import Dict, List, Literal, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from nutriveda.errors import NutrivedaException
from nutriveda.nutrition.aggregate import inline_resolver, refresh_recipes
from nutriveda.rules.models import FoodItem, Recipe, UserHealthProfile
from nutriveda.runtime import Runtime
from nutriveda.shared.http import to_http_exception

from .engine import explain_score, score_item
from .models import ScoreBreakdown, ScoreResult

logger = logging.getLogger(__name__)


router = APIRouter(
    prefix="/api/v1/scoring",
    tags=["scoring"],
)


class ScoreRequest(BaseModel):
    """Provide exactly one of food or recipe."""
    profile: UserHealthProfile
    food: Optional[FoodItem] = None
    recipe: Optional[Recipe] = None
    foods: List[FoodItem] = Field(
        default_factory=list,
        description="Inline foods for the recipe's ingredients; the catalog covers the rest"
    )
    weights: Optional[Dict[str, float]] = Field(
        default=None,
        description="Per-system weight override, e.g. {'safety': 2.0}"
    )


class ScoreResponse(BaseModel):
    success: bool = True
    result: ScoreResult
    breakdown: ScoreBreakdown
    generated_at: datetime = Field(default_factory=datetime.utcnow)


@router.get("/health")
async def scoring_health():
    return {
        "status": "ok",
        "module": "score_engine",
        "version": "score_engine_v1",
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.post("/score", response_model=ScoreResponse)
async def score(request: ScoreRequest):
    if (request.food is None) == (request.recipe is None):
        raise HTTPException(status_code=400, detail="Provide exactly one of 'food' or 'recipe'")

    runtime = Runtime.get_instance()
    item = request.food
    if request.recipe is not None:
        # A supplied snapshot is only a cache: re-derive it from the ingredients
        resolve = inline_resolver(request.foods, runtime.store.get_food)
        try:
            item = (await refresh_recipes([request.recipe], resolve))[0]
        except Exception as e:
            logger.error(f"Food lookup failed while deriving recipe nutrition: {e}")
            raise HTTPException(status_code=503, detail="Food catalog unavailable")

    config = await runtime.config.get_config()
    result = score_item(request.profile, item, config, request.weights)
    return ScoreResponse(result=result, breakdown=explain_score(item, result, config, request.weights))


@router.get("/users/{user_id}/items/{item_id}", response_model=ScoreResponse)
async def score_for_user(
    user_id: str,
    item_id: str,
    item_type: Literal["food", "recipe"] = Query(default="food"),
):
    try:
        result, breakdown = await Runtime.get_instance().recommendations.explain_for_user(
            user_id, item_id, item_type
        )
    except NutrivedaException as e:
        raise to_http_exception(e)
    return ScoreResponse(result=result, breakdown=breakdown)
