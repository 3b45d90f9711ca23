import uuid
from datetime import datetime, timezone
from typing import Optional, Sequence

from haus.audit.hash_utils import compute_audit_hash, fingerprint_content
from haus.models.audit_record import DecisionPath, ModerationAuditRecord
from haus.models.moderation_decision import ModerationDecision


def build_moderation_audit_record(
    *,
    decision: ModerationDecision,
    content: str,
    content_type: str,
    decision_path: DecisionPath,
    risk_level: str,
    engine_version: str,
    policy_version: str,
    actor_id: Optional[str] = None,
    content_id: Optional[str] = None,
    audit_id: Optional[str] = None,
    timestamp: Optional[datetime] = None,
    previous_record_hash: Optional[str] = None,
) -> ModerationAuditRecord:
    """
    Builds a single immutable audit record for one moderation check.
    """
    if actor_id is not None and not str(actor_id).strip():
        raise ValueError("Actor identity must not be blank when provided")

    audit_id = audit_id or str(uuid.uuid4())
    timestamp = timestamp or datetime.now(timezone.utc)

    # Canonical payload (NO hash yet)
    payload = dict(
        audit_id=audit_id,
        timestamp=timestamp.isoformat(),
        actor_id=actor_id,
        content_id=content_id,
        content_type=content_type,
        content_fingerprint=fingerprint_content(content),
        verdict=decision.verdict.value,
        reasons=list(decision.reasons),
        decision_path=decision_path,
        risk_level=risk_level,
        engine_version=engine_version,
        policy_version=policy_version,
        previous_record_hash=previous_record_hash,
    )

    record_hash = compute_audit_hash(payload)

    return ModerationAuditRecord(
        audit_id=audit_id,
        timestamp=timestamp,
        actor_id=actor_id,
        content_id=content_id,
        content_type=content_type,
        content_fingerprint=payload["content_fingerprint"],
        verdict=payload["verdict"],
        reasons=tuple(decision.reasons),
        decision_path=decision_path,
        risk_level=risk_level,
        engine_version=engine_version,
        policy_version=policy_version,
        record_hash=record_hash,
        previous_record_hash=previous_record_hash,
    )


def verify_audit_record(record: ModerationAuditRecord) -> bool:
    """
    Recompute the record hash and compare. False means the record was altered.
    """
    return compute_audit_hash(record.to_payload()) == record.record_hash


def verify_audit_chain(records: Sequence[ModerationAuditRecord]) -> bool:
    """
    Every record must verify on its own and point at the hash of the
    record before it. The first record's link is not checked, so a chain
    can start mid-log.
    """
    for index, record in enumerate(records):
        if not verify_audit_record(record):
            return False
        if index and record.previous_record_hash != records[index - 1].record_hash:
            return False
    return True
