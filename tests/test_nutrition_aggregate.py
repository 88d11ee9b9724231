"""
Nutrition Aggregator Tests

Tests:
- test_empty_recipe: no ingredients -> all zeros
- test_rice_and_water: 100 g rice + 200 ml water = 130 kcal, 300 g serving
- test_cup_conversion: 1 cup = 240 g -> 2.4x the per-100 g values
- test_missing_food_skipped: warning recorded, serving still counts it
- test_unknown_unit_passthrough
- test_micronutrients_summed
- test_rounding_at_end
- test_recompute_recipe: snapshot replaced, recipe otherwise unchanged
- test_refresh_recipes: only recipes with ingredients are re-derived
- test_inline_first_then_fallback

Version: nutrition_aggregator_v1
"""

import asyncio
from typing import Optional

import pytest

from nutriveda.nutrition.aggregate import (
    aggregate_nutrition,
    aggregate_resolved,
    inline_resolver,
    recompute_recipe_nutrition,
    refresh_recipes,
)
from nutriveda.nutrition.units import to_grams
from nutriveda.rules.models import FoodItem, NutritionFacts, NutritionSnapshot, Recipe, RecipeIngredient


# ============================================================================
# TEST FIXTURES
# ============================================================================

@pytest.fixture
def catalog():
    foods = [
        FoodItem(
            id="rice",
            name="Basmati Rice",
            category="Grain",
            modern_nutrition=NutritionFacts(
                calories=130, protein=2.7, carbs=28, fat=0.3, fiber=0.4,
                micronutrients={"iron": 1, "potassium": 1},
            ),
        ),
        FoodItem(id="water", name="Water", category="Beverage", modern_nutrition=NutritionFacts()),
        FoodItem(
            id="spinach",
            name="Spinach",
            category="Vegetable",
            modern_nutrition=NutritionFacts(
                calories=23, protein=2.9, carbs=3.6, fat=0.4, fiber=2.2,
                micronutrients={"Iron": 15, "potassium": 16},
            ),
        ),
        FoodItem(id="salt", name="Salt", category="Spice"),
    ]
    return {f.id: f for f in foods}


@pytest.fixture
def resolver(catalog):
    async def resolve(food_id: str) -> Optional[FoodItem]:
        return catalog.get(food_id)
    return resolve


def _aggregate(ingredients, resolver):
    return asyncio.run(aggregate_nutrition(ingredients, resolver))


# ============================================================================
# TESTS
# ============================================================================

class TestAggregation:
    def test_empty_recipe(self):
        snapshot = aggregate_resolved([])
        assert snapshot.calories == 0
        assert snapshot.protein == 0
        assert snapshot.carbs == 0
        assert snapshot.fat == 0
        assert snapshot.fiber == 0
        assert snapshot.serving_size == 0
        assert snapshot.micronutrients == {}
        assert snapshot.warnings == []

    def test_rice_and_water(self, resolver):
        snapshot = _aggregate(
            [
                RecipeIngredient(food_id="rice", quantity=100, unit="g"),
                RecipeIngredient(food_id="water", quantity=200, unit="ml"),
            ],
            resolver,
        )
        assert snapshot.calories == 130
        assert snapshot.carbs == 28
        assert snapshot.serving_size == 300
        assert snapshot.serving_unit == "g"

    def test_cup_conversion(self, resolver):
        snapshot = _aggregate([RecipeIngredient(food_id="rice", quantity=1, unit="cup")], resolver)
        assert snapshot.calories == 312
        assert snapshot.protein == 6.5
        assert snapshot.carbs == 67.2
        assert snapshot.serving_size == 240

    def test_missing_food_skipped(self, resolver):
        snapshot = _aggregate(
            [
                RecipeIngredient(food_id="rice", quantity=100),
                RecipeIngredient(food_id="saffron", quantity=1),
            ],
            resolver,
        )
        assert snapshot.calories == 130
        assert snapshot.serving_size == 101
        assert any("saffron" in w for w in snapshot.warnings)

    def test_food_without_nutrition_skipped(self, resolver):
        snapshot = _aggregate([RecipeIngredient(food_id="salt", quantity=5)], resolver)
        assert snapshot.calories == 0
        assert any("no nutrition data" in w for w in snapshot.warnings)

    def test_unknown_unit_passthrough(self, resolver):
        snapshot = _aggregate([RecipeIngredient(food_id="rice", quantity=50, unit="handful")], resolver)
        assert snapshot.calories == 65
        assert any("handful" in w for w in snapshot.warnings)

    def test_micronutrients_summed(self, resolver):
        snapshot = _aggregate(
            [
                RecipeIngredient(food_id="rice", quantity=100),
                RecipeIngredient(food_id="spinach", quantity=200),
            ],
            resolver,
        )
        assert snapshot.micronutrients == {"iron": 31, "potassium": 33}

    def test_rounding_at_end(self, resolver):
        snapshot = _aggregate(
            [RecipeIngredient(food_id="spinach", quantity=10, unit="g") for _ in range(3)],
            resolver,
        )
        # 3 x 2.3 kcal = 6.9 -> 7; rounding each line first would give 6
        assert snapshot.calories == 7

    def test_deterministic(self, resolver):
        ingredients = [
            RecipeIngredient(food_id="rice", quantity=1, unit="cup"),
            RecipeIngredient(food_id="spinach", quantity=2, unit="tbsp"),
        ]
        assert _aggregate(ingredients, resolver) == _aggregate(ingredients, resolver)


class TestUnits:
    @pytest.mark.parametrize("quantity,unit,grams", [
        (100, "g", 100),
        (250, "ml", 250),
        (2, "pieces", 200),
        (1, "Tbsp", 15),
        (2, "tsp", 10),
    ])
    def test_to_grams(self, quantity, unit, grams):
        converted, caveat = to_grams(quantity, unit)
        assert converted == grams
        assert caveat is None


class TestRecompute:
    def test_recompute_recipe(self, resolver):
        recipe = Recipe(
            id="rice-bowl",
            name="Rice Bowl",
            ingredients=[RecipeIngredient(food_id="rice", quantity=100)],
            prep_time=5,
        )
        refreshed = asyncio.run(recompute_recipe_nutrition(recipe, resolver))
        assert refreshed.nutrition_snapshot.calories == 130
        assert refreshed.prep_time == 5
        assert recipe.nutrition_snapshot is None

    def test_refresh_recipes(self, resolver):
        cached = Recipe(
            id="stale",
            name="Stale Bowl",
            ingredients=[RecipeIngredient(food_id="rice", quantity=200)],
            nutrition_snapshot=NutritionSnapshot(calories=20, carbs=5, serving_size=200),
        )
        bare = Recipe(
            id="bare",
            name="Bare Bowl",
            nutrition_snapshot=NutritionSnapshot(calories=99, serving_size=100),
        )
        refreshed, untouched = asyncio.run(refresh_recipes([cached, bare], resolver))
        assert refreshed.nutrition_snapshot.calories == 260
        assert untouched == bare


class TestInlineResolver:
    def test_inline_first_then_fallback(self, resolver):
        inline = FoodItem(id="rice", name="Brown Rice", modern_nutrition=NutritionFacts(calories=110))
        resolve = inline_resolver([inline], resolver)
        assert asyncio.run(resolve("rice")) == inline
        assert asyncio.run(resolve("spinach")).name == "Spinach"
        assert asyncio.run(resolve("saffron")) is None

    def test_without_fallback(self):
        resolve = inline_resolver([])
        assert asyncio.run(resolve("rice")) is None
