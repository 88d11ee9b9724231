"""
Store Module

Async persistence boundary for profiles, catalogs and configuration.
"""

from .base import ProfileStore, CatalogStore, ConfigStore, Store
from .memory import InMemoryStore

__all__ = [
    "ProfileStore",
    "CatalogStore",
    "ConfigStore",
    "Store",
    "InMemoryStore",
]
