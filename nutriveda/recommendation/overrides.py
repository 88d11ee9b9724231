"""
Practitioner Overrides

A practitioner may replace the computed score of an item for one user.
Overrides are applied after scoring, only when 'practitionerOverride' is in
the configured conflict priority order.

PRINCIPLE: Overrides never unblock. Safety-blocked items are dropped before
overrides are considered.
"""

from .models import OverrideInfo, PractitionerOverride, Recommendation


def apply_override(recommendation: Recommendation, override: PractitionerOverride) -> Recommendation:
    """
    Return a copy of the recommendation carrying the practitioner's score.

    The original score is preserved in override_info.
    """
    info = OverrideInfo(
        action=override.action,
        reason=override.reason,
        applied_by=override.practitioner_id,
        applied_at=override.applied_at,
        original_score=recommendation.score,
    )
    return recommendation.model_copy(update={
        "score": override.new_score,
        "overridden": True,
        "override_info": info,
        "reasons": recommendation.reasons + [f"Practitioner Override: {override.reason}"],
    })
