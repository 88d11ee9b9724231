"""
NutriVeda Runtime
Process-wide holder for the store and the services built on it.

Usage:
    from nutriveda.runtime import Runtime

    runtime = Runtime.get_instance()
    await runtime.startup()          # connects Postgres when DATABASE_URL is set
    result = await runtime.recommendations.recommend_for_user(user_id, "food")

Tests swap in an in-memory store with Runtime.configure(store).
"""

import logging
import os
from threading import Lock
from typing import Optional

from nutriveda.config.models import DEFAULT_CONFIG_KEY
from nutriveda.config.service import ConfigService
from nutriveda.recommendation.service import RecommendationService
from nutriveda.store.base import Store
from nutriveda.store.memory import InMemoryStore
from nutriveda.store.postgres import PostgresStore

logger = logging.getLogger(__name__)


class Runtime:
    """
    Singleton wiring of store, ConfigService and RecommendationService.
    Thread-safe construction; services are replaced together on configure().
    """

    _instance = None
    _lock = Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self._db_url = os.getenv("DATABASE_URL")
        self._config_key = os.getenv("NUTRIVEDA_CONFIG_KEY", DEFAULT_CONFIG_KEY)
        self._postgres = None
        self.configure(InMemoryStore())

    @classmethod
    def get_instance(cls) -> "Runtime":
        """Get singleton instance."""
        return cls()

    def configure(self, store: Store, config_key: Optional[str] = None) -> "Runtime":
        """Rebuild services around a store."""
        self.store = store
        self.config = ConfigService(store, config_key or self._config_key)
        self.recommendations = RecommendationService(store, self.config)
        return self

    async def startup(self) -> None:
        """Switch to Postgres when DATABASE_URL is configured."""
        if not self._db_url:
            logger.warning("DATABASE_URL not set, using in-memory store")
            return
        self._postgres = await PostgresStore.connect(self._db_url)
        await self._postgres.ensure_schema()
        self.configure(self._postgres)
        logger.info("Connected to PostgreSQL store")

    async def shutdown(self) -> None:
        if self._postgres is not None:
            await self._postgres.close()
            self._postgres = None
