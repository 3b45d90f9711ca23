# Deterministic moderation thresholds.
# This is the single "Policy Gate" table shared by every call site
# (API, batch flow, admin widgets). Changing a number changes product behavior.
#
# Hate speech and violence have lower bars than toxicity and sexual content.
#
# A score must be strictly greater than the limit to trigger a step.

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Union

from haus.models.moderation_decision import ContentType, ModerationVerdict
from haus.models.risk_scores import CATEGORY_FIELDS
from haus.scoring.severity import verdict_severity

REJECT_THRESHOLDS = {
    "toxicity": 0.8,
    "hate_speech": 0.7,
    "violence": 0.7,
    "sexual_content": 0.8,
}

FLAG_THRESHOLDS = {
    "toxicity": 0.6,
    "hate_speech": 0.5,
    "violence": 0.5,
    "sexual_content": 0.6,
}

REVIEW_THRESHOLDS = {
    "toxicity": 0.3,
    "hate_speech": 0.2,
    "violence": 0.2,
    "sexual_content": 0.3,
}

# Reason tags: "<category>-<tier>", e.g. "hate-speech-high"
CATEGORY_TAGS = {
    "toxicity": "toxicity",
    "hate_speech": "hate-speech",
    "violence": "violence",
    "sexual_content": "sexual-content",
}

DEFAULT_POLICY_VERSION = "haus-moderation-2024.1"


@dataclass(frozen=True)
class ThresholdStep:
    verdict: ModerationVerdict
    tier: str
    limits: Mapping[str, float]

    def __post_init__(self):
        # read-only copy, detached from the caller's dict
        object.__setattr__(self, "limits", MappingProxyType(dict(self.limits)))

    def triggered_categories(self, scores: Mapping[str, float]) -> Tuple[str, ...]:
        return tuple(
            name for name in CATEGORY_FIELDS
            if scores.get(name, 0.0) > self.limits[name]
        )


@dataclass(frozen=True)
class ThresholdTable:
    """
    Ordered steps, most severe first. First matching step wins.
    """

    steps: Tuple[ThresholdStep, ...]
    name: str = "default"

    def __post_init__(self):
        object.__setattr__(self, "steps", tuple(self.steps))
        for step in self.steps:
            missing = [c for c in CATEGORY_FIELDS if c not in step.limits]
            if missing:
                raise ValueError(f"Step '{step.tier}' is missing limits for {missing}")

        # Later steps must be less severe and never have a higher bar,
        # otherwise raising a score could lower the verdict.
        for upper, lower in zip(self.steps, self.steps[1:]):
            if verdict_severity(lower.verdict) >= verdict_severity(upper.verdict):
                raise ValueError(
                    f"Step '{lower.tier}' ({lower.verdict.value}) must be less severe "
                    f"than '{upper.tier}' ({upper.verdict.value})"
                )
            for category in CATEGORY_FIELDS:
                if lower.limits[category] > upper.limits[category]:
                    raise ValueError(
                        f"Threshold for {category} in '{lower.tier}' "
                        f"exceeds the one in '{upper.tier}'"
                    )


DEFAULT_TABLE = ThresholdTable(
    steps=(
        ThresholdStep(ModerationVerdict.REJECTED, "high", REJECT_THRESHOLDS),
        ThresholdStep(ModerationVerdict.FLAGGED, "medium", FLAG_THRESHOLDS),
        ThresholdStep(ModerationVerdict.PENDING_REVIEW, "low", REVIEW_THRESHOLDS),
    ),
)


def _content_type_key(content_type: Union[str, ContentType, None]) -> Optional[str]:
    if content_type is None:
        return None
    if isinstance(content_type, ContentType):
        return content_type.value
    return str(content_type).strip().lower() or None


@dataclass(frozen=True)
class ThresholdPolicy:
    """
    Default table plus named per-content-type variants.
    Divergence between call sites must go through an explicit override here.
    """

    default: ThresholdTable = DEFAULT_TABLE
    overrides: Dict[str, ThresholdTable] = field(default_factory=dict)
    version: str = DEFAULT_POLICY_VERSION

    def table_for(self, content_type: Union[str, ContentType, None] = None) -> ThresholdTable:
        key = _content_type_key(content_type)
        if key is None:
            return self.default
        # Unknown content types fall back to the default table.
        return self.overrides.get(key, self.default)


DEFAULT_POLICY = ThresholdPolicy()
