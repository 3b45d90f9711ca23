from typing import Protocol, runtime_checkable

from haus.models.risk_scores import RiskScoreVector


@runtime_checkable
class RiskClassifier(Protocol):
    """
    Anything that turns text into a risk-score vector.
    Implementations raise ClassifierUnavailableError instead of guessing scores.
    """

    def classify(self, text: str) -> RiskScoreVector:
        ...
