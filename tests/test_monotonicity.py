import itertools

from haus.decision.judge import ModerationEngine
from haus.models.risk_scores import CATEGORY_FIELDS, RiskScoreVector
from haus.scoring.severity import most_severe, verdict_severity
from haus.models.moderation_decision import ModerationVerdict

# Values straddling every threshold in the table
LADDER = [0.0, 0.2, 0.21, 0.3, 0.31, 0.5, 0.51, 0.6, 0.61, 0.7, 0.71, 0.8, 0.81, 1.0]
BASES = [0.0, 0.25, 0.55, 0.75]


def test_raising_one_score_never_lowers_the_verdict():
    engine = ModerationEngine()

    for base in itertools.product(BASES, repeat=len(CATEGORY_FIELDS)):
        for index, category in enumerate(CATEGORY_FIELDS):
            previous = None
            for value in LADDER:
                scores = dict(zip(CATEGORY_FIELDS, base))
                scores[category] = value
                severity = verdict_severity(engine.decide(RiskScoreVector(**scores)).verdict)

                if previous is not None:
                    assert severity >= previous, (base, category, value)
                previous = severity


def test_severity_order_is_total():
    ordered = [
        ModerationVerdict.APPROVED,
        ModerationVerdict.PENDING_REVIEW,
        ModerationVerdict.FLAGGED,
        ModerationVerdict.REJECTED,
    ]

    severities = [verdict_severity(v) for v in ordered]
    assert severities == sorted(severities)
    assert len(set(severities)) == 4


def test_most_severe_picks_the_worst_verdict():
    assert most_severe(
        ModerationVerdict.APPROVED,
        ModerationVerdict.FLAGGED,
        ModerationVerdict.PENDING_REVIEW,
    ) == ModerationVerdict.FLAGGED
