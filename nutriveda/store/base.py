"""
Store Contracts

The scoring core reads profiles, catalogs and configuration only through
these async contracts. Implementations: InMemoryStore (tests, local dev)
and PostgresStore (asyncpg).

Lookups return None for a missing record. Any raised exception means the
store itself is unavailable.
"""

from typing import TYPE_CHECKING, List, Optional, Protocol

from nutriveda.rules.models import FoodItem, Recipe, UserHealthProfile

if TYPE_CHECKING:
    from nutriveda.config.models import SystemConfig
    from nutriveda.recommendation.models import PractitionerOverride


class ProfileStore(Protocol):
    async def get_profile(self, user_id: str) -> Optional[UserHealthProfile]: ...

    async def save_profile(self, profile: UserHealthProfile) -> None: ...

    async def list_overrides(self, user_id: str) -> List["PractitionerOverride"]: ...

    async def save_override(self, user_id: str, override: "PractitionerOverride") -> None: ...


class CatalogStore(Protocol):
    async def get_food(self, food_id: str) -> Optional[FoodItem]: ...

    async def list_foods(self, category: Optional[str] = None) -> List[FoodItem]: ...

    async def save_food(self, food: FoodItem) -> None: ...

    async def get_recipe(self, recipe_id: str) -> Optional[Recipe]: ...

    async def list_recipes(self, category: Optional[str] = None) -> List[Recipe]: ...

    async def save_recipe(self, recipe: Recipe) -> Recipe: ...


class ConfigStore(Protocol):
    async def load_config(self, config_key: str) -> Optional["SystemConfig"]: ...

    async def save_config(self, config: "SystemConfig") -> None: ...


class Store(ProfileStore, CatalogStore, ConfigStore, Protocol):
    """Everything the service layer needs."""
