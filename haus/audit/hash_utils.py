import json
import hashlib
from typing import Dict, Any, Optional

# The record's own hash cannot be part of its input.
# previous_record_hash IS hashed, so re-linking a record breaks it.
SELF_HASH_FIELD = "record_hash"


def compute_audit_hash(audit_payload: Dict[str, Any]) -> str:
    """
    SHA-256 over the canonical JSON form of a moderation audit payload.
    Key order never changes the result.
    """
    canonical_payload = {
        k: v for k, v in audit_payload.items() if k != SELF_HASH_FIELD
    }

    serialized = json.dumps(
        canonical_payload,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )

    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()


def fingerprint_content(content: Optional[str]) -> str:
    """Content is audited by fingerprint only, never stored raw."""
    return hashlib.sha256((content or "").encode("utf-8")).hexdigest()
