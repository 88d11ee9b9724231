"""
Configuration Module

Versioned SystemConfig (rule weights, conflict resolution, cache and
scoring bounds) plus the caching ConfigService.

Version: config_service_v1
"""

from .models import (
    SYSTEMS,
    CONFLICT_POLICIES,
    DEFAULT_CONFIG_KEY,
    RuleWeights,
    ConflictResolution,
    CacheSettings,
    ScoringRules,
    SystemConfig,
)
from .service import ConfigService, deep_merge

__all__ = [
    "SYSTEMS",
    "CONFLICT_POLICIES",
    "DEFAULT_CONFIG_KEY",
    "RuleWeights",
    "ConflictResolution",
    "CacheSettings",
    "ScoringRules",
    "SystemConfig",
    "ConfigService",
    "deep_merge",
]

__version__ = "config_service_v1"
