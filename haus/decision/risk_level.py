from enum import Enum
from typing import Any, Mapping, Union

from haus.models.risk_scores import RiskScoreVector

HIGH_RISK_MIN = 0.7
MEDIUM_RISK_MIN = 0.4

# Interpretation (display only, never used for the verdict):
# > 0.7  -> HIGH
# > 0.4  -> MEDIUM
# else   -> LOW


class RiskLevel(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


def max_risk_score(scores: Union[RiskScoreVector, Mapping[str, Any]]) -> float:
    if not isinstance(scores, RiskScoreVector):
        scores = RiskScoreVector.from_mapping(scores or {})
    return max(scores.all_scores().values(), default=0.0)


def summarize_risk_level(scores: Union[RiskScoreVector, Mapping[str, Any]]) -> RiskLevel:
    highest = max_risk_score(scores)

    if highest > HIGH_RISK_MIN:
        return RiskLevel.HIGH
    if highest > MEDIUM_RISK_MIN:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW
