from typing import Iterable, List

from haus.decision.fallback import CLASSIFIER_UNAVAILABLE_REASON

# Author-facing wording. Keyed by category tag; tier only changes the prefix
# for toxicity, which reads oddly as "toxicity detected".
_CATEGORY_TEXT = {
    "toxicity": "toxicity detected",
    "hate-speech": "Hate speech detected",
    "violence": "Violent content detected",
    "sexual-content": "Inappropriate sexual content",
}

_TOXICITY_PREFIX = {
    "high": "Severe",
    "medium": "High",
    "low": "Possible",
}

_FIXED_TEXT = {
    CLASSIFIER_UNAVAILABLE_REASON: "Automated check unavailable; queued for review",
}


def describe_reason(tag: str) -> str:
    """
    Display text for a reason tag. Unknown tags pass through unchanged.
    """
    if tag in _FIXED_TEXT:
        return _FIXED_TEXT[tag]

    category, _, tier = tag.rpartition("-")
    if category not in _CATEGORY_TEXT:
        return tag

    if category == "toxicity":
        return f"{_TOXICITY_PREFIX.get(tier, 'Possible')} {_CATEGORY_TEXT[category]}"
    return _CATEGORY_TEXT[category]


def describe_reasons(tags: Iterable[str]) -> List[str]:
    """Batch helper"""
    return [describe_reason(t) for t in tags]
