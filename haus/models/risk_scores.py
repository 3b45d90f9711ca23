from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple

from haus.scoring.utils import clamp_score


# Canonical category order. Reasons are always emitted in this order.
CATEGORY_FIELDS: Tuple[str, ...] = (
    "toxicity",
    "hate_speech",
    "violence",
    "sexual_content",
)

# Upstream payloads use snake_case or camelCase depending on the caller.
FIELD_ALIASES: Dict[str, str] = {
    "toxicity": "toxicity",
    "hate_speech": "hate_speech",
    "hateSpeech": "hate_speech",
    "violence": "violence",
    "sexual_content": "sexual_content",
    "sexualContent": "sexual_content",
}


@dataclass(frozen=True)
class RiskScoreVector:
    """
    Per-category risk scores produced by an external classifier.

    Every score is clamped into [0, 1] on construction, so a vector that
    exists is always safe to feed to the decision engine. Categories the
    engine does not know about are kept in ``extra`` and ignored by it.
    """

    toxicity: float = 0.0
    hate_speech: float = 0.0
    violence: float = 0.0
    sexual_content: float = 0.0
    extra: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        # frozen dataclass: bypass __setattr__ to store the clamped values
        for name in CATEGORY_FIELDS:
            object.__setattr__(self, name, clamp_score(getattr(self, name)))
        object.__setattr__(
            self,
            "extra",
            {str(k): clamp_score(v) for k, v in dict(self.extra or {}).items()},
        )

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "RiskScoreVector":
        """
        Build a vector from a classifier JSON object.
        Accepts both ``hate_speech`` and ``hateSpeech`` style keys.
        """
        known: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}

        for key, value in (payload or {}).items():
            canonical = FIELD_ALIASES.get(key)
            if canonical is None:
                extra[key] = value
            elif canonical not in known:
                known[canonical] = value

        return cls(extra=extra, **known)

    def category_scores(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in CATEGORY_FIELDS}

    def all_scores(self) -> Dict[str, float]:
        """Known categories followed by any extra categories."""
        scores = self.category_scores()
        for key, value in self.extra.items():
            scores.setdefault(key, value)
        return scores

    def to_dict(self) -> dict:
        return {**self.category_scores(), "extra": dict(self.extra)}
