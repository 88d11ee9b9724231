"""
Configuration Service

Owns the read-through-defaults lifecycle of the SystemConfig for one
deployment key. The scoring engine never reads configuration itself; it is
handed a SystemConfig value.

Guarantees:
- get_config() creates and stores defaults on first read
- A store read failure falls back to hard-coded defaults, never raises
- update_config() propagates store read failures instead of patching
  the fallback
- update_config() deep-merges a patch, validates it, and replaces the
  cached snapshot atomically (readers see the old or the new config,
  never a mix)

Version: config_service_v1
"""

import asyncio
import logging
import time
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from nutriveda.errors import ConfigUpdateError
from nutriveda.store.base import ConfigStore

from .models import DEFAULT_CONFIG_KEY, SystemConfig

logger = logging.getLogger(__name__)


# Retry interval after a failed store read, seconds
FALLBACK_RETRY_SECONDS = 5


def deep_merge(base: Dict[str, Any], patch: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge patch into a copy of base. Lists are replaced, not merged."""
    merged = dict(base)
    for key, value in patch.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigService:
    """
    Cached, hot-reloadable configuration for one deployment key.

    The cached SystemConfig is immutable; refreshes and updates swap the
    reference under a lock.
    """

    def __init__(
        self,
        store: ConfigStore,
        config_key: str = DEFAULT_CONFIG_KEY,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._store = store
        self._config_key = config_key
        self._clock = clock
        self._lock = asyncio.Lock()
        self._snapshot: Optional[SystemConfig] = None
        self._expires_at = 0.0

    @property
    def config_key(self) -> str:
        return self._config_key

    def current(self) -> SystemConfig:
        """Last loaded config without I/O; defaults before the first load."""
        return self._snapshot or SystemConfig(config_key=self._config_key)

    def invalidate(self) -> None:
        """Force the next get_config() to re-read the store."""
        self._expires_at = 0.0

    def _is_fresh(self) -> bool:
        if self._snapshot is None:
            return False
        if not self._snapshot.cache_settings.enable_caching:
            return False
        return self._clock() < self._expires_at

    def _install(self, config: SystemConfig, ttl: Optional[float] = None) -> SystemConfig:
        if ttl is None:
            ttl = config.cache_settings.config_ttl
        self._snapshot = config
        self._expires_at = self._clock() + ttl
        return config

    async def get_config(self) -> SystemConfig:
        """Return the active config, loading or creating it when stale."""
        if self._is_fresh():
            return self._snapshot
        async with self._lock:
            if self._is_fresh():
                return self._snapshot
            return await self._load_locked()

    async def _load_locked(self) -> SystemConfig:
        try:
            stored = await self._store.load_config(self._config_key)
            if stored is None:
                stored = SystemConfig(config_key=self._config_key)
                await self._store.save_config(stored)
                logger.info(f"Created default configuration for key '{self._config_key}'")
        except Exception as e:
            logger.error(f"Config read failed for key '{self._config_key}', using defaults: {e}")
            fallback = self._snapshot or SystemConfig(config_key=self._config_key)
            return self._install(fallback, ttl=FALLBACK_RETRY_SECONDS)
        return self._install(stored)

    async def update_config(self, patch: Dict[str, Any]) -> SystemConfig:
        """
        Apply a partial update.

        Args:
            patch: Nested dict of fields to change, e.g.
                {"rule_weights": {"tcm": 0.5}}

        Returns:
            The new active SystemConfig

        Raises:
            ConfigUpdateError: patch fails validation
            Exception: the store could not be read; nothing is written
        """
        async with self._lock:
            # Read straight from the store: a patch is never applied to fallback defaults
            current = await self._store.load_config(self._config_key)
            if current is None:
                current = SystemConfig(config_key=self._config_key)
            data = deep_merge(current.model_dump(), patch)
            data["config_key"] = self._config_key
            data["revision"] = current.revision + 1
            try:
                updated = SystemConfig.model_validate(data)
            except ValidationError as e:
                raise ConfigUpdateError(str(e)) from e

            await self._store.save_config(updated)
            logger.info(
                f"Configuration '{self._config_key}' updated to revision {updated.revision}: "
                f"{sorted(patch.keys())}"
            )
            return self._install(updated)
