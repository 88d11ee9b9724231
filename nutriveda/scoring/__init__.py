"""
Score Aggregation Engine

Version: score_engine_v1
"""

from .models import DataCompleteness, ScoreBreakdown, ScoreResult
from .engine import data_completeness, explain_score, score_item, recipe_as_item, resolve_weights

__all__ = [
    "DataCompleteness",
    "ScoreBreakdown",
    "ScoreResult",
    "data_completeness",
    "explain_score",
    "score_item",
    "recipe_as_item",
    "resolve_weights",
]

__version__ = "score_engine_v1"
