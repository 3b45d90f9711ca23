from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Tuple

from haus.classifier.base import RiskClassifier
from haus.config import HausConfig
from haus.decision.fallback import build_unavailable_decision
from haus.decision.judge import ModerationEngine, utc_now
from haus.decision.risk_level import RiskLevel, summarize_risk_level
from haus.enhancement.captions import CaptionService
from haus.errors import ClassifierUnavailableError
from haus.integration.notifications import NOTIFY_VERDICTS, WebhookNotifier
from haus.models.audit_record import DecisionPath, ModerationAuditRecord
from haus.models.moderation_decision import ContentType, ModerationDecision
from haus.models.risk_scores import RiskScoreVector
from haus.orchestrator.audit_builder import build_moderation_audit_record
from haus.telemetry import emit_exception_telemetry, emit_moderation_telemetry

logger = logging.getLogger("haus.orchestrator")
audit_logger = logging.getLogger("audit")

SUGGESTION_STYLE = "tone"


@dataclass(frozen=True)
class ModerationOutcome:
    decision: ModerationDecision
    risk_level: RiskLevel
    decision_path: DecisionPath
    scores: Optional[RiskScoreVector] = None
    audit_record: Optional[ModerationAuditRecord] = None
    notified: bool = False
    suggestions: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            **self.decision.to_dict(),
            "risk_level": self.risk_level.value,
            "decision_path": self.decision_path,
            "scores": self.scores.to_dict() if self.scores else None,
            "audit_id": self.audit_record.audit_id if self.audit_record else None,
            "notified": self.notified,
            "suggestions": list(self.suggestions),
        }


def _content_type_label(content_type) -> str:
    if isinstance(content_type, ContentType):
        return content_type.value
    return str(content_type or ContentType.POST.value)


class ModerationFlow:
    """
    Caller-side moderation pipeline around the pure decision engine:

    1) get risk scores from the classifier (or fall back if it is down)
    2) decide the verdict
    3) emit telemetry, write the audit record
    4) notify the author of REJECTED / FLAGGED outcomes
    5) offer a tone rewrite of REJECTED / FLAGGED content

    Audit records written by one flow form a hash chain: each record
    carries the hash of the one before it.
    """

    def __init__(
        self,
        classifier: RiskClassifier,
        engine: Optional[ModerationEngine] = None,
        notifier: Optional[WebhookNotifier] = None,
        audit: bool = True,
        caption_service: Optional[CaptionService] = None,
        engine_version: str = HausConfig.engine_version,
    ):
        self.classifier = classifier
        self.engine = engine or ModerationEngine()
        self.notifier = notifier
        self.audit = audit
        self.caption_service = caption_service
        self.engine_version = engine_version

        self._last_record_hash: Optional[str] = None
        self._chain_lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: HausConfig,
        classifier: RiskClassifier,
        caption_service: Optional[CaptionService] = None,
    ) -> "ModerationFlow":
        return cls(
            classifier=classifier,
            notifier=WebhookNotifier(
                config.notify_webhook_url,
                timeout=config.notify_timeout_seconds,
            ),
            caption_service=caption_service,
            engine_version=config.engine_version,
        )

    @property
    def last_record_hash(self) -> Optional[str]:
        return self._last_record_hash

    def moderate(
        self,
        content: str,
        content_type=ContentType.POST,
        actor_id: Optional[str] = None,
        author_id: Optional[str] = None,
        content_id: Optional[str] = None,
    ) -> ModerationOutcome:
        start_time = time.perf_counter()
        scores: Optional[RiskScoreVector] = None

        if not content or not content.strip():
            # Nothing to classify
            decision_path: DecisionPath = "empty"
            decision = self.engine.decide(RiskScoreVector(), content_type)
        else:
            try:
                scores = self.classifier.classify(content)
            except ClassifierUnavailableError as e:
                logger.warning("Classifier unavailable, queueing for review: %s", e)
                emit_exception_telemetry(e)
                decision_path = "fallback"
                decision = build_unavailable_decision(self.engine.clock())
            else:
                decision_path = "classifier"
                decision = self.engine.decide(scores, content_type)

        return self._finish(
            decision=decision,
            scores=scores,
            decision_path=decision_path,
            content=content or "",
            content_type=content_type,
            actor_id=actor_id,
            author_id=author_id,
            content_id=content_id,
            start_time=start_time,
        )

    def moderate_scores(
        self,
        scores,
        content: str = "",
        content_type=ContentType.POST,
        actor_id: Optional[str] = None,
        author_id: Optional[str] = None,
        content_id: Optional[str] = None,
    ) -> ModerationOutcome:
        """Same pipeline for callers that already hold classifier scores."""
        start_time = time.perf_counter()
        if not isinstance(scores, RiskScoreVector):
            scores = RiskScoreVector.from_mapping(scores or {})

        decision = self.engine.decide(scores, content_type)
        return self._finish(
            decision=decision,
            scores=scores,
            decision_path="scores",
            content=content or "",
            content_type=content_type,
            actor_id=actor_id,
            author_id=author_id,
            content_id=content_id,
            start_time=start_time,
        )

    def moderate_batch(self, items: Iterable[Mapping]) -> List[ModerationOutcome]:
        """
        Independent repeated invocation; results keep input order.
        Each item: {"content", "content_type"?, "actor_id"?, "author_id"?, "content_id"?}
        """
        return [
            self.moderate(
                item.get("content", ""),
                content_type=item.get("content_type") or ContentType.POST,
                actor_id=item.get("actor_id"),
                author_id=item.get("author_id"),
                content_id=item.get("content_id"),
            )
            for item in items
        ]

    def _write_audit_record(
        self,
        *,
        decision: ModerationDecision,
        content: str,
        content_type,
        decision_path: DecisionPath,
        risk_level: RiskLevel,
        actor_id: Optional[str],
        content_id: Optional[str],
    ) -> ModerationAuditRecord:
        with self._chain_lock:
            record = build_moderation_audit_record(
                decision=decision,
                content=content,
                content_type=_content_type_label(content_type),
                decision_path=decision_path,
                risk_level=risk_level.value,
                engine_version=self.engine_version,
                policy_version=self.engine.policy.version,
                actor_id=(actor_id or "").strip() or None,
                content_id=content_id,
                timestamp=utc_now(),
                previous_record_hash=self._last_record_hash,
            )
            self._last_record_hash = record.record_hash

        audit_logger.info(
            f"AUDIT_ID={record.audit_id} ACTOR={actor_id or '-'} "
            f"CONTENT={record.content_fingerprint[:12]} PATH={decision_path} "
            f"VERDICT={decision.verdict.value} RISK={risk_level.value} "
            f"HASH={record.record_hash[:12]}"
        )
        return record

    def _suggest_rewrites(self, decision: ModerationDecision, content: str) -> Tuple[str, ...]:
        if self.caption_service is None or not content.strip():
            return ()
        if decision.verdict not in NOTIFY_VERDICTS:
            return ()

        result = self.caption_service.enhance(content, SUGGESTION_STYLE)
        if not result.success or not result.text:
            logger.info("No rewrite suggestion available: %s", result.error)
            return ()
        return (result.text,)

    def _finish(
        self,
        *,
        decision: ModerationDecision,
        scores: Optional[RiskScoreVector],
        decision_path: DecisionPath,
        content: str,
        content_type,
        actor_id: Optional[str],
        author_id: Optional[str],
        content_id: Optional[str],
        start_time: float,
    ) -> ModerationOutcome:
        risk_level = summarize_risk_level(scores) if scores else RiskLevel.LOW
        latency_ms = int((time.perf_counter() - start_time) * 1000)

        emit_moderation_telemetry(
            decision_latency_ms=latency_ms,
            verdict=decision.verdict.value,
            risk_level=risk_level.value,
            decision_path=decision_path,
            fallback_triggered=decision_path == "fallback",
        )

        record = None
        if self.audit:
            record = self._write_audit_record(
                decision=decision,
                content=content,
                content_type=content_type,
                decision_path=decision_path,
                risk_level=risk_level,
                actor_id=actor_id,
                content_id=content_id,
            )

        notified = False
        if self.notifier is not None:
            notified = self.notifier.notify_author(
                decision, author_id=author_id, content_id=content_id
            )

        return ModerationOutcome(
            decision=decision,
            risk_level=risk_level,
            decision_path=decision_path,
            scores=scores,
            audit_record=record,
            notified=notified,
            suggestions=self._suggest_rewrites(decision, content),
        )
