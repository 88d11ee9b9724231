"""
Score Engine Models

Version: score_engine_v1
"""

from typing import Dict, List

from pydantic import BaseModel, Field


class ScoreResult(BaseModel):
    """
    Final score of one item for one profile.

    system_scores holds raw (unweighted) deltas of every evaluated system;
    weighted_scores holds the same deltas after weights were applied.
    """
    final_score: float
    reasons: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    blocked: bool = False
    system_scores: Dict[str, float] = Field(default_factory=dict)
    weighted_scores: Dict[str, float] = Field(default_factory=dict)
    active_framework: str = Field(description="Non-safety system evaluated for this profile")

    class Config:
        extra = "forbid"


class DataCompleteness(BaseModel):
    """Which property blocks the item actually carries."""
    has_ayurveda_data: bool
    has_unani_data: bool
    has_tcm_data: bool
    has_modern_data: bool
    completeness_score: int = Field(ge=0, le=100, description="Share of the four blocks present, in percent")

    class Config:
        extra = "forbid"


class ScoreBreakdown(BaseModel):
    """
    How a ScoreResult was reached.

    Separates "neutral because the item has no data for the system" from
    "neutral because the effects cancelled out".
    """
    base_score: float
    raw_total: float = Field(description="Base plus weighted deltas, before clamping")
    min_score: float
    max_score: float
    clamped: bool
    blocked: bool
    weights: Dict[str, float] = Field(default_factory=dict, description="Weights applied to the evaluated systems")
    formula: str
    calculation: str
    data_completeness: DataCompleteness

    class Config:
        extra = "forbid"
