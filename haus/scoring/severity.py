# haus/scoring/severity.py

from haus.models.moderation_decision import ModerationVerdict

"""
Total severity order over verdicts.

APPROVED < PENDING_REVIEW < FLAGGED < REJECTED
"""

VERDICT_SEVERITY = {
    ModerationVerdict.APPROVED: 0,
    ModerationVerdict.PENDING_REVIEW: 1,
    ModerationVerdict.FLAGGED: 2,
    ModerationVerdict.REJECTED: 3,
}


def verdict_severity(verdict: ModerationVerdict) -> int:
    if verdict not in VERDICT_SEVERITY:
        raise ValueError(f"Unknown verdict: {verdict}")

    return VERDICT_SEVERITY[verdict]


def most_severe(*verdicts: ModerationVerdict) -> ModerationVerdict:
    """Pick the highest-severity verdict, e.g. across a batch or a thread."""
    if not verdicts:
        raise ValueError("At least one verdict is required")

    return max(verdicts, key=verdict_severity)
