"""
Dominant State & Severity

The dominant state is the dosha/humor/pattern with the highest current
imbalance value. Ties go to the first attribute in check order.

Severity tiers scale corrective and aggravating effects:
- SEVERE   (3): value > 60
- MODERATE (2): value > 50
- MILD     (1): otherwise

Version: rule_engine_v1
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Mapping, Optional, Sequence


SEVERE_THRESHOLD = 60
MODERATE_THRESHOLD = 50


class SeverityTier(IntEnum):
    MILD = 1
    MODERATE = 2
    SEVERE = 3


@dataclass(frozen=True)
class DominantState:
    name: str
    value: float
    tier: SeverityTier


def severity_tier(value: float) -> SeverityTier:
    if value > SEVERE_THRESHOLD:
        return SeverityTier.SEVERE
    if value > MODERATE_THRESHOLD:
        return SeverityTier.MODERATE
    return SeverityTier.MILD


def ranked_states(scores: Mapping[str, float], order: Sequence[str]) -> List[DominantState]:
    """
    Rank attributes by value, highest first.

    Only attributes named in order with a positive value take part. The sort
    is stable, so equal values keep check order.
    """
    present = [
        DominantState(name=name, value=float(scores[name]), tier=severity_tier(scores[name]))
        for name in order
        if scores.get(name, 0) > 0
    ]
    return sorted(present, key=lambda s: s.value, reverse=True)


def dominant_state(scores: Mapping[str, float], order: Sequence[str]) -> Optional[DominantState]:
    """Highest-valued attribute, or None when nothing is elevated."""
    ranked = ranked_states(scores, order)
    return ranked[0] if ranked else None
