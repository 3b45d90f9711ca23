import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Tuple, Union

from haus.models.moderation_decision import (
    ContentType,
    ModerationDecision,
    ModerationVerdict,
)
from haus.models.risk_scores import RiskScoreVector
from haus.scoring.thresholds import CATEGORY_TAGS, DEFAULT_POLICY, ThresholdPolicy

logger = logging.getLogger("haus.decision")

ScoresInput = Union[RiskScoreVector, Mapping[str, Any]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_risk_vector(scores: ScoresInput) -> RiskScoreVector:
    if isinstance(scores, RiskScoreVector):
        return scores
    return RiskScoreVector.from_mapping(scores or {})


def build_reason_tags(categories: Tuple[str, ...], tier: str) -> Tuple[str, ...]:
    return tuple(f"{CATEGORY_TAGS[c]}-{tier}" for c in categories)


class ModerationEngine:
    """
    Maps a risk-score vector to exactly one moderation verdict.

    Pure and synchronous: no I/O, no shared mutable state. The only inputs
    besides the scores are the (immutable) threshold policy and the clock
    used to stamp ``evaluated_at``.
    """

    def __init__(
        self,
        policy: ThresholdPolicy = DEFAULT_POLICY,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.policy = policy
        self.clock = clock

    def decide(
        self,
        scores: ScoresInput,
        content_type: Union[str, ContentType, None] = None,
    ) -> ModerationDecision:
        vector = as_risk_vector(scores)
        table = self.policy.table_for(content_type)
        category_scores = vector.category_scores()

        # First match wins: steps are ordered most severe first.
        for step in table.steps:
            triggered = step.triggered_categories(category_scores)
            if triggered:
                reasons = build_reason_tags(triggered, step.tier)
                logger.debug(
                    "verdict=%s table=%s reasons=%s",
                    step.verdict.value, table.name, ",".join(reasons),
                )
                return ModerationDecision(
                    verdict=step.verdict,
                    reasons=reasons,
                    evaluated_at=self.clock(),
                )

        return ModerationDecision(
            verdict=ModerationVerdict.APPROVED,
            reasons=(),
            evaluated_at=self.clock(),
        )


DEFAULT_ENGINE = ModerationEngine()


def decide_moderation(
    scores: ScoresInput,
    content_type: Union[str, ContentType, None] = None,
    *,
    now: Optional[datetime] = None,
) -> ModerationDecision:
    """
    Functional entry point over the default policy.
    Pass ``now`` to pin ``evaluated_at`` (tests, replays).
    """
    if now is None:
        return DEFAULT_ENGINE.decide(scores, content_type)
    return ModerationEngine(clock=lambda: now).decide(scores, content_type)
