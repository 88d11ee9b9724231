"""
PostgreSQL Store

asyncpg-backed implementation of the store contracts. Every record is a
JSONB document validated through its pydantic model on the way out.

Usage:
    store = await PostgresStore.connect(os.getenv("DATABASE_URL"))
    await store.ensure_schema()
"""

import json
import logging
from typing import List, Optional

import asyncpg

from nutriveda.config.models import SystemConfig
from nutriveda.nutrition.aggregate import recompute_recipe_nutrition
from nutriveda.recommendation.models import PractitionerOverride
from nutriveda.rules.models import FoodItem, Recipe, UserHealthProfile

logger = logging.getLogger(__name__)


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS nutriveda_profiles (
    user_id TEXT PRIMARY KEY,
    doc JSONB NOT NULL,
    updated_at TIMESTAMPTZ DEFAULT NOW()
);
CREATE TABLE IF NOT EXISTS nutriveda_overrides (
    user_id TEXT NOT NULL,
    item_type TEXT NOT NULL DEFAULT 'food',
    item_id TEXT NOT NULL,
    doc JSONB NOT NULL,
    created_at TIMESTAMPTZ DEFAULT NOW(),
    PRIMARY KEY (user_id, item_type, item_id)
);
CREATE TABLE IF NOT EXISTS nutriveda_foods (
    id TEXT PRIMARY KEY,
    category TEXT NOT NULL DEFAULT '',
    doc JSONB NOT NULL
);
CREATE TABLE IF NOT EXISTS nutriveda_recipes (
    id TEXT PRIMARY KEY,
    category TEXT NOT NULL DEFAULT '',
    doc JSONB NOT NULL,
    updated_at TIMESTAMPTZ DEFAULT NOW()
);
CREATE TABLE IF NOT EXISTS nutriveda_config (
    config_key TEXT PRIMARY KEY,
    doc JSONB NOT NULL,
    updated_at TIMESTAMPTZ DEFAULT NOW()
);
"""


def _load(raw):
    # asyncpg hands JSONB back as text unless a codec is registered
    return json.loads(raw) if isinstance(raw, str) else raw


class PostgresStore:
    """Store backed by an asyncpg pool."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    @classmethod
    async def connect(cls, database_url: str, min_size: int = 1, max_size: int = 5) -> "PostgresStore":
        pool = await asyncpg.create_pool(database_url, min_size=min_size, max_size=max_size)
        return cls(pool)

    async def close(self) -> None:
        await self._pool.close()

    async def ensure_schema(self) -> None:
        async with self._pool.acquire() as conn:
            await conn.execute(SCHEMA_SQL)
        logger.info("NutriVeda tables ensured")

    # Profiles

    async def get_profile(self, user_id: str) -> Optional[UserHealthProfile]:
        async with self._pool.acquire() as conn:
            raw = await conn.fetchval("SELECT doc FROM nutriveda_profiles WHERE user_id = $1", user_id)
        return UserHealthProfile.model_validate(_load(raw)) if raw is not None else None

    async def save_profile(self, profile: UserHealthProfile) -> None:
        if not profile.user_id:
            raise ValueError("profile.user_id is required to save a profile")
        async with self._pool.acquire() as conn:
            await conn.execute("""
                INSERT INTO nutriveda_profiles (user_id, doc, updated_at)
                VALUES ($1, $2::jsonb, NOW())
                ON CONFLICT (user_id) DO UPDATE SET doc = EXCLUDED.doc, updated_at = NOW()
            """, profile.user_id, profile.model_dump_json())

    async def list_overrides(self, user_id: str) -> List[PractitionerOverride]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT doc FROM nutriveda_overrides WHERE user_id = $1 ORDER BY created_at",
                user_id,
            )
        return [PractitionerOverride.model_validate(_load(r["doc"])) for r in rows]

    async def save_override(self, user_id: str, override: PractitionerOverride) -> None:
        async with self._pool.acquire() as conn:
            await conn.execute("""
                INSERT INTO nutriveda_overrides (user_id, item_type, item_id, doc)
                VALUES ($1, $2, $3, $4::jsonb)
                ON CONFLICT (user_id, item_type, item_id) DO UPDATE SET doc = EXCLUDED.doc, created_at = NOW()
            """, user_id, override.item_type, override.item_id, override.model_dump_json())

    # Catalog

    async def get_food(self, food_id: str) -> Optional[FoodItem]:
        async with self._pool.acquire() as conn:
            raw = await conn.fetchval("SELECT doc FROM nutriveda_foods WHERE id = $1", food_id)
        return FoodItem.model_validate(_load(raw)) if raw is not None else None

    async def list_foods(self, category: Optional[str] = None) -> List[FoodItem]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT doc FROM nutriveda_foods WHERE ($1::text IS NULL OR category = $1) ORDER BY id",
                category,
            )
        return [FoodItem.model_validate(_load(r["doc"])) for r in rows]

    async def save_food(self, food: FoodItem) -> None:
        async with self._pool.acquire() as conn:
            await conn.execute("""
                INSERT INTO nutriveda_foods (id, category, doc)
                VALUES ($1, $2, $3::jsonb)
                ON CONFLICT (id) DO UPDATE SET category = EXCLUDED.category, doc = EXCLUDED.doc
            """, food.id, food.category, food.model_dump_json())

    async def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        async with self._pool.acquire() as conn:
            raw = await conn.fetchval("SELECT doc FROM nutriveda_recipes WHERE id = $1", recipe_id)
        return Recipe.model_validate(_load(raw)) if raw is not None else None

    async def list_recipes(self, category: Optional[str] = None) -> List[Recipe]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT doc FROM nutriveda_recipes WHERE ($1::text IS NULL OR category = $1) ORDER BY id",
                category,
            )
        return [Recipe.model_validate(_load(r["doc"])) for r in rows]

    async def save_recipe(self, recipe: Recipe) -> Recipe:
        """Store a recipe with its nutrition snapshot recomputed from its ingredients."""
        refreshed = await recompute_recipe_nutrition(recipe, self.get_food)
        async with self._pool.acquire() as conn:
            await conn.execute("""
                INSERT INTO nutriveda_recipes (id, category, doc, updated_at)
                VALUES ($1, $2, $3::jsonb, NOW())
                ON CONFLICT (id) DO UPDATE
                SET category = EXCLUDED.category, doc = EXCLUDED.doc, updated_at = NOW()
            """, refreshed.id, refreshed.category, refreshed.model_dump_json())
        return refreshed

    # Configuration

    async def load_config(self, config_key: str) -> Optional[SystemConfig]:
        async with self._pool.acquire() as conn:
            raw = await conn.fetchval("SELECT doc FROM nutriveda_config WHERE config_key = $1", config_key)
        return SystemConfig.model_validate(_load(raw)) if raw is not None else None

    async def save_config(self, config: SystemConfig) -> None:
        async with self._pool.acquire() as conn:
            await conn.execute("""
                INSERT INTO nutriveda_config (config_key, doc, updated_at)
                VALUES ($1, $2::jsonb, NOW())
                ON CONFLICT (config_key) DO UPDATE SET doc = EXCLUDED.doc, updated_at = NOW()
            """, config.config_key, config.model_dump_json())
