"""
Nutrition Aggregator Module

Derives a recipe's nutrition snapshot from its ingredient list.

Version: nutrition_aggregator_v1
"""

from .units import GRAMS_PER_UNIT, BASE_UNIT, to_grams
from .aggregate import (
    FoodResolver,
    aggregate_resolved,
    aggregate_nutrition,
    recompute_recipe_nutrition,
    inline_resolver,
    refresh_recipes,
)

__all__ = [
    "GRAMS_PER_UNIT",
    "BASE_UNIT",
    "to_grams",
    "FoodResolver",
    "aggregate_resolved",
    "aggregate_nutrition",
    "recompute_recipe_nutrition",
    "inline_resolver",
    "refresh_recipes",
]

__version__ = "nutrition_aggregator_v1"
