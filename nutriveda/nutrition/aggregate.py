"""
Nutrition Aggregator

Derives a recipe's nutrition snapshot from its ingredient list. This is the
single source of truth for recipe nutrition: snapshots are recomputed
whenever ingredients change and are never hand-edited.

Rules:
- Foods store nutrition per 100 g; contribution = per_100 x grams / 100
- Totals are summed first and rounded at the end
  (calories whole, everything else one decimal)
- Unresolvable foods and foods without nutrition are skipped with a warning
- Serving size is the sum of all normalized ingredient quantities

Version: nutrition_aggregator_v1
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from nutriveda.rules.models import FoodItem, NutritionSnapshot, Recipe, RecipeIngredient

from .units import BASE_UNIT, to_grams

logger = logging.getLogger(__name__)


FoodResolver = Callable[[str], Awaitable[Optional[FoodItem]]]

MACROS = ("protein", "carbs", "fat", "fiber")


def aggregate_resolved(
    entries: Iterable[Tuple[RecipeIngredient, Optional[FoodItem]]],
) -> NutritionSnapshot:
    """
    Pure aggregation over ingredients whose foods are already resolved.

    Args:
        entries: (ingredient, food or None) pairs in recipe order

    Returns:
        NutritionSnapshot; an empty input yields all zeros
    """
    totals: Dict[str, float] = {"calories": 0.0, **{m: 0.0 for m in MACROS}}
    micronutrients: Dict[str, float] = {}
    serving_grams = 0.0
    warnings: List[str] = []

    for ingredient, food in entries:
        grams, caveat = to_grams(ingredient.quantity, ingredient.unit)
        serving_grams += grams
        if caveat:
            warnings.append(caveat)

        if food is None:
            message = f"Food '{ingredient.food_id}' not found, ingredient skipped"
            logger.warning(message)
            warnings.append(message)
            continue
        nutrition = food.modern_nutrition
        if nutrition is None:
            message = f"Food '{food.name}' has no nutrition data, ingredient skipped"
            logger.warning(message)
            warnings.append(message)
            continue

        ratio = grams / 100
        totals["calories"] += nutrition.calories * ratio
        for macro in MACROS:
            totals[macro] += getattr(nutrition, macro) * ratio
        for name, pct in nutrition.micronutrients.items():
            key = name.lower()
            micronutrients[key] = micronutrients.get(key, 0.0) + pct * ratio

    return NutritionSnapshot(
        calories=round(totals["calories"]),
        protein=round(totals["protein"], 1),
        carbs=round(totals["carbs"], 1),
        fat=round(totals["fat"], 1),
        fiber=round(totals["fiber"], 1),
        micronutrients={k: round(v, 1) for k, v in sorted(micronutrients.items())},
        serving_size=round(serving_grams),
        serving_unit=BASE_UNIT,
        warnings=warnings,
    )


async def aggregate_nutrition(
    ingredients: Sequence[RecipeIngredient],
    resolve_food: FoodResolver,
) -> NutritionSnapshot:
    """
    Resolve each ingredient's food and aggregate.

    Resolver failures propagate; a resolver returning None is an
    unresolvable reference and is skipped.
    """
    foods = await asyncio.gather(*(resolve_food(i.food_id) for i in ingredients))
    return aggregate_resolved(zip(ingredients, foods))


async def recompute_recipe_nutrition(recipe: Recipe, resolve_food: FoodResolver) -> Recipe:
    """Return a copy of the recipe carrying a freshly derived snapshot."""
    snapshot = await aggregate_nutrition(recipe.ingredients, resolve_food)
    return recipe.model_copy(update={"nutrition_snapshot": snapshot})


def inline_resolver(foods: Iterable[FoodItem], fallback: Optional[FoodResolver] = None) -> FoodResolver:
    """Resolve against the given foods first, then the fallback (usually the catalog store)."""
    by_id = {f.id: f for f in foods}

    async def resolve(food_id: str) -> Optional[FoodItem]:
        if food_id in by_id:
            return by_id[food_id]
        return await fallback(food_id) if fallback is not None else None

    return resolve


async def refresh_recipes(recipes: Sequence[Recipe], resolve_food: FoodResolver) -> List[Recipe]:
    """
    Re-derive the snapshot of every recipe that lists ingredients.

    A caller-supplied snapshot is only a cache; recipes without ingredients
    keep theirs since there is nothing to derive it from.
    """
    return list(await asyncio.gather(*(
        recompute_recipe_nutrition(r, resolve_food) if r.ingredients else _unchanged(r)
        for r in recipes
    )))


async def _unchanged(recipe: Recipe) -> Recipe:
    return recipe
