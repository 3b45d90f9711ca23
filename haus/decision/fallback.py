from datetime import datetime
from typing import Optional

from haus.decision.judge import utc_now
from haus.models.moderation_decision import ModerationDecision, ModerationVerdict

CLASSIFIER_UNAVAILABLE_REASON = "automated-check-unavailable"


def build_unavailable_decision(now: Optional[datetime] = None) -> ModerationDecision:
    """
    Decision used when no risk scores could be obtained.

    Content is queued for review: never published unreviewed, never
    removed without automated evidence. The threshold table is not consulted.
    """
    return ModerationDecision(
        verdict=ModerationVerdict.PENDING_REVIEW,
        reasons=(CLASSIFIER_UNAVAILABLE_REASON,),
        evaluated_at=now or utc_now(),
    )
