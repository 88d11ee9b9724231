"""
System Configuration Models

One active configuration per deployment key. Values are frozen: updates
produce a new SystemConfig that replaces the old one atomically.

Version: config_service_v1
"""

from typing import List, Literal

from pydantic import BaseModel, Field, field_validator, model_validator


SYSTEMS = ("ayurveda", "unani", "tcm", "modern", "safety")

CONFLICT_POLICIES = (
    "safety",
    "medicalCondition",
    "practitionerOverride",
    "dominantSystem",
    "aggregateScore",
)

DEFAULT_CONFIG_KEY = "default"


class RuleWeights(BaseModel):
    """Multiplier applied to each system's raw score delta."""
    ayurveda: float = Field(default=1.0, ge=0, le=2)
    unani: float = Field(default=1.0, ge=0, le=2)
    tcm: float = Field(default=1.0, ge=0, le=2)
    modern: float = Field(default=1.0, ge=0, le=2)
    safety: float = Field(default=1.5, ge=0, le=2)

    class Config:
        extra = "forbid"
        frozen = True


class ConflictResolution(BaseModel):
    priority_order: List[str] = Field(
        default_factory=lambda: list(CONFLICT_POLICIES),
        description="Policy names, highest priority first"
    )

    class Config:
        extra = "forbid"
        frozen = True

    @field_validator("priority_order")
    @classmethod
    def check_priority_order(cls, value: List[str]) -> List[str]:
        unknown = [p for p in value if p not in CONFLICT_POLICIES]
        if unknown:
            raise ValueError(f"Unknown conflict policies: {unknown}")
        if len(set(value)) != len(value):
            raise ValueError("Conflict policies must not repeat")
        if not value or value[0] != "safety":
            raise ValueError("'safety' must be the first conflict policy")
        return value


class CacheSettings(BaseModel):
    """TTLs in seconds."""
    user_profile_ttl: int = Field(default=300, ge=0)
    recommendation_ttl: int = Field(default=600, ge=0)
    config_ttl: int = Field(default=60, ge=0)
    enable_caching: bool = True

    class Config:
        extra = "forbid"
        frozen = True


class ScoringRules(BaseModel):
    min_score: float = 0
    max_score: float = 100
    base_score: float = 50
    default_framework: Literal["ayurveda", "unani", "tcm", "modern"] = Field(
        default="ayurveda",
        description="Framework used when a profile has no assessment fields"
    )

    class Config:
        extra = "forbid"
        frozen = True

    @model_validator(mode="after")
    def check_bounds(self) -> "ScoringRules":
        if not self.min_score <= self.base_score <= self.max_score:
            raise ValueError("Scores must satisfy min_score <= base_score <= max_score")
        return self


class SystemConfig(BaseModel):
    """Complete scoring configuration for one deployment key."""
    config_key: str = DEFAULT_CONFIG_KEY
    rule_weights: RuleWeights = Field(default_factory=RuleWeights)
    conflict_resolution: ConflictResolution = Field(default_factory=ConflictResolution)
    cache_settings: CacheSettings = Field(default_factory=CacheSettings)
    scoring_rules: ScoringRules = Field(default_factory=ScoringRules)
    revision: int = Field(default=1, ge=1, description="Incremented on every update")

    class Config:
        extra = "forbid"
        frozen = True

    def allows_overrides(self) -> bool:
        return "practitionerOverride" in self.conflict_resolution.priority_order
