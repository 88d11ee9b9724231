"""
Nutrition Aggregator Endpoints

Exposes the aggregator standalone so recipe-management callers can derive
nutrition whenever ingredients change.

Version: nutrition_aggregator_v1
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from nutriveda.rules.models import FoodItem, NutritionSnapshot, Recipe, RecipeIngredient
from nutriveda.runtime import Runtime

from .aggregate import aggregate_nutrition, inline_resolver
from .units import GRAMS_PER_UNIT

logger = logging.getLogger(__name__)


router = APIRouter(
    prefix="/api/v1/nutrition",
    tags=["nutrition"],
)


class AggregateRequest(BaseModel):
    ingredients: List[RecipeIngredient]
    foods: Optional[List[FoodItem]] = Field(
        default=None,
        description="Inline foods to resolve against. If omitted, the catalog store is used."
    )


class AggregateResponse(BaseModel):
    success: bool = True
    nutrition: NutritionSnapshot
    generated_at: datetime = Field(default_factory=datetime.utcnow)


class RefreshResponse(BaseModel):
    success: bool = True
    recipe: Recipe


@router.get("/health")
async def nutrition_health():
    return {
        "status": "ok",
        "module": "nutrition_aggregator",
        "version": "nutrition_aggregator_v1",
        "units": sorted(GRAMS_PER_UNIT),
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.post("/aggregate", response_model=AggregateResponse)
async def aggregate(request: AggregateRequest):
    if request.foods is not None:
        resolve = inline_resolver(request.foods)
    else:
        resolve = Runtime.get_instance().store.get_food

    try:
        snapshot = await aggregate_nutrition(request.ingredients, resolve)
    except Exception as e:
        logger.error(f"Food lookup failed during aggregation: {e}")
        raise HTTPException(status_code=503, detail="Food catalog unavailable")
    return AggregateResponse(nutrition=snapshot)


@router.post("/recipes/{recipe_id}/refresh", response_model=RefreshResponse)
async def refresh_recipe(recipe_id: str):
    """Recompute and store a recipe's nutrition snapshot from its current ingredients."""
    store = Runtime.get_instance().store
    try:
        recipe = await store.get_recipe(recipe_id)
        if recipe is None:
            raise HTTPException(status_code=404, detail=f"Recipe '{recipe_id}' not found")
        refreshed = await store.save_recipe(recipe)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Recipe refresh failed for '{recipe_id}': {e}")
        raise HTTPException(status_code=503, detail="Recipe store unavailable")
    return RefreshResponse(recipe=refreshed)
