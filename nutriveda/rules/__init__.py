"""
Rule Engine Module

Per-system evaluators. Each exposes a single evaluate(profile, item)
returning a RuleResult.

Design Principles:
- PURE: evaluators never mutate the profile or the item
- NEUTRAL ON MISSING DATA: absent properties or assessments yield a
  zero-delta, non-blocking result, never an exception
- SAFETY IS PRIVILEGED: only the Safety evaluator may block

Version: rule_engine_v1
"""

from .models import (
    UserHealthProfile,
    DoshaScores,
    HumorScores,
    NutritionFacts,
    NutritionSnapshot,
    AyurvedaProperties,
    AyurvedaDoshaEffect,
    UnaniProperties,
    UnaniTemperament,
    UnaniHumorEffects,
    TcmProperties,
    FoodItem,
    Recipe,
    RecipeIngredient,
)
from .results import RuleResult, merge_rule_results, clamp
from .state import SeverityTier, DominantState, dominant_state, severity_tier
from .framework import (
    ActiveFramework,
    DoshaBased,
    HumorBased,
    PatternBased,
    ModernNutrition,
    resolve_framework,
)

__all__ = [
    # Models
    "UserHealthProfile",
    "DoshaScores",
    "HumorScores",
    "NutritionFacts",
    "NutritionSnapshot",
    "AyurvedaProperties",
    "AyurvedaDoshaEffect",
    "UnaniProperties",
    "UnaniTemperament",
    "UnaniHumorEffects",
    "TcmProperties",
    "FoodItem",
    "Recipe",
    "RecipeIngredient",
    # Results
    "RuleResult",
    "merge_rule_results",
    "clamp",
    # State
    "SeverityTier",
    "DominantState",
    "dominant_state",
    "severity_tier",
    # Frameworks
    "ActiveFramework",
    "DoshaBased",
    "HumorBased",
    "PatternBased",
    "ModernNutrition",
    "resolve_framework",
]

__version__ = "rule_engine_v1"
