"""
In-Memory Store

Dict-backed implementation of every store contract. Used by the test suite
and when DATABASE_URL is not configured.
"""

from typing import Dict, Iterable, List, Optional

from nutriveda.config.models import SystemConfig
from nutriveda.nutrition.aggregate import recompute_recipe_nutrition
from nutriveda.recommendation.models import PractitionerOverride
from nutriveda.rules.models import FoodItem, Recipe, UserHealthProfile


class InMemoryStore:
    """Single-process store. Saved values are immutable models, so no copying is needed."""

    def __init__(
        self,
        profiles: Iterable[UserHealthProfile] = (),
        foods: Iterable[FoodItem] = (),
        recipes: Iterable[Recipe] = (),
    ):
        self._profiles: Dict[str, UserHealthProfile] = {p.user_id: p for p in profiles if p.user_id}
        self._foods: Dict[str, FoodItem] = {f.id: f for f in foods}
        self._recipes: Dict[str, Recipe] = {r.id: r for r in recipes}
        self._overrides: Dict[str, List[PractitionerOverride]] = {}
        self._configs: Dict[str, SystemConfig] = {}

    # Profiles

    async def get_profile(self, user_id: str) -> Optional[UserHealthProfile]:
        return self._profiles.get(user_id)

    async def save_profile(self, profile: UserHealthProfile) -> None:
        if not profile.user_id:
            raise ValueError("profile.user_id is required to save a profile")
        self._profiles[profile.user_id] = profile

    async def list_overrides(self, user_id: str) -> List[PractitionerOverride]:
        return list(self._overrides.get(user_id, []))

    async def save_override(self, user_id: str, override: PractitionerOverride) -> None:
        key = (override.item_type, override.item_id)
        kept = [o for o in self._overrides.get(user_id, []) if (o.item_type, o.item_id) != key]
        self._overrides[user_id] = kept + [override]

    # Catalog

    async def get_food(self, food_id: str) -> Optional[FoodItem]:
        return self._foods.get(food_id)

    async def list_foods(self, category: Optional[str] = None) -> List[FoodItem]:
        return [f for f in self._foods.values() if category is None or f.category == category]

    async def save_food(self, food: FoodItem) -> None:
        self._foods[food.id] = food

    async def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        return self._recipes.get(recipe_id)

    async def list_recipes(self, category: Optional[str] = None) -> List[Recipe]:
        return [r for r in self._recipes.values() if category is None or r.category == category]

    async def save_recipe(self, recipe: Recipe) -> Recipe:
        """Store a recipe with its nutrition snapshot recomputed from its ingredients."""
        refreshed = await recompute_recipe_nutrition(recipe, self.get_food)
        self._recipes[refreshed.id] = refreshed
        return refreshed

    # Configuration

    async def load_config(self, config_key: str) -> Optional[SystemConfig]:
        return self._configs.get(config_key)

    async def save_config(self, config: SystemConfig) -> None:
        self._configs[config.config_key] = config
