from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional, Tuple

DecisionPath = Literal["classifier", "fallback", "scores", "empty"]


@dataclass(frozen=True)
class ModerationAuditRecord:
    """
    Who triggered which moderation check, and what came out of it.
    Raw content is never part of the record; only its fingerprint.
    """

    audit_id: str
    timestamp: datetime

    # Accountability
    actor_id: Optional[str]
    content_id: Optional[str]
    content_type: str
    content_fingerprint: str

    # Decision evidence
    verdict: str
    reasons: Tuple[str, ...]
    decision_path: DecisionPath
    risk_level: str

    # Version locking
    engine_version: str
    policy_version: str

    # Hash integrity
    record_hash: str
    previous_record_hash: Optional[str] = None

    def to_payload(self) -> dict:
        return {
            "audit_id": self.audit_id,
            "timestamp": self.timestamp.isoformat(),
            "actor_id": self.actor_id,
            "content_id": self.content_id,
            "content_type": self.content_type,
            "content_fingerprint": self.content_fingerprint,
            "verdict": self.verdict,
            "reasons": list(self.reasons),
            "decision_path": self.decision_path,
            "risk_level": self.risk_level,
            "engine_version": self.engine_version,
            "policy_version": self.policy_version,
            "record_hash": self.record_hash,
            "previous_record_hash": self.previous_record_hash,
        }
