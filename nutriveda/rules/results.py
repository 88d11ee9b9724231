"""
Rule Results

Every evaluator (Ayurveda, Unani, TCM, Modern, Safety) returns a RuleResult:
a signed score delta, human-readable reasons, cautionary warnings and a
block flag.

PRINCIPLE: Only the Safety evaluator ever sets block.

Merging is commutative and associative on score_delta (sum) and block (OR).
Reasons and warnings concatenate in evaluator-invocation order.

Version: rule_engine_v1
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional


@dataclass
class RuleResult:
    """Uniform opinion returned by every evaluator."""
    score_delta: float = 0.0
    reasons: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    block: bool = False

    @classmethod
    def neutral(cls) -> "RuleResult":
        """Zero delta, no text, non-blocking."""
        return cls()

    def add(
        self,
        delta: float,
        reason: Optional[str] = None,
        warning: Optional[str] = None,
    ) -> "RuleResult":
        """Accumulate a delta with its justification. Returns self."""
        self.score_delta += delta
        if reason:
            self.reasons.append(reason)
        if warning:
            self.warnings.append(warning)
        return self

    def veto(self, warning: str) -> "RuleResult":
        """Mark the item as blocked and record why."""
        self.block = True
        self.warnings.append(warning)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score_delta": self.score_delta,
            "reasons": list(self.reasons),
            "warnings": list(self.warnings),
            "block": self.block,
        }


def merge_rule_results(results: Iterable[RuleResult]) -> RuleResult:
    """
    Combine evaluator opinions into one RuleResult.

    Args:
        results: RuleResults in evaluator-invocation order

    Returns:
        New RuleResult; inputs are not modified
    """
    merged = RuleResult()
    for result in results:
        merged.score_delta += result.score_delta
        merged.reasons.extend(result.reasons)
        merged.warnings.extend(result.warnings)
        merged.block = merged.block or result.block
    return merged


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value into [lower, upper]."""
    return max(lower, min(upper, value))
