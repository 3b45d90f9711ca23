from haus.decision.judge import decide_moderation
from haus.decision.risk_level import RiskLevel, max_risk_score, summarize_risk_level
from haus.models.moderation_decision import ModerationVerdict
from haus.models.risk_scores import RiskScoreVector


def test_risk_level_buckets():
    assert summarize_risk_level({"toxicity": 0.71}) == RiskLevel.HIGH
    assert summarize_risk_level({"toxicity": 0.7}) == RiskLevel.MEDIUM
    assert summarize_risk_level({"violence": 0.41}) == RiskLevel.MEDIUM
    assert summarize_risk_level({"violence": 0.4}) == RiskLevel.LOW
    assert summarize_risk_level({}) == RiskLevel.LOW


def test_extra_categories_count_for_display():
    vector = RiskScoreVector(toxicity=0.1, extra={"self-harm": 0.9})

    assert max_risk_score(vector) == 0.9
    assert summarize_risk_level(vector) == RiskLevel.HIGH


def test_risk_level_is_independent_of_verdict():
    # Shown as high risk, but the verdict table still decides on its own
    scores = {"toxicity": 0.75}

    assert summarize_risk_level(scores) == RiskLevel.HIGH
    assert decide_moderation(scores).verdict == ModerationVerdict.FLAGGED
