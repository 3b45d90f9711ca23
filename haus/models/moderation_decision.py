from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Tuple


class ModerationVerdict(str, Enum):
    APPROVED = "APPROVED"
    PENDING_REVIEW = "PENDING_REVIEW"
    FLAGGED = "FLAGGED"
    REJECTED = "REJECTED"


class ContentType(str, Enum):
    POST = "post"
    COMMENT = "comment"
    DOCUMENT = "document"
    PROFILE = "profile"


@dataclass(frozen=True)
class ModerationDecision:
    """
    Outcome of one moderation check.
    Built once per request and persisted by the caller next to the content row.
    """

    verdict: ModerationVerdict
    reasons: Tuple[str, ...]
    evaluated_at: datetime

    def __post_init__(self):
        object.__setattr__(self, "reasons", tuple(self.reasons))
        if (self.verdict == ModerationVerdict.APPROVED) != (not self.reasons):
            raise ValueError(
                f"Reasons must be empty exactly when approved "
                f"(verdict={self.verdict.value}, reasons={list(self.reasons)})"
            )

    @property
    def is_publishable(self) -> bool:
        return self.verdict == ModerationVerdict.APPROVED

    def to_dict(self) -> dict:
        return {
            "verdict": self.verdict.value,
            "reasons": list(self.reasons),
            "evaluated_at": self.evaluated_at.isoformat(),
        }
