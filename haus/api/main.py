import logging
import time
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from haus.classifier.base import RiskClassifier
from haus.classifier.openai_moderation import OpenAIModerationClassifier
from haus.config import HausConfig
from haus.enhancement.captions import CaptionService
from haus.explainability.reasons import describe_reasons
from haus.integration.notifications import WebhookNotifier
from haus.orchestrator.moderation_flow import ModerationFlow, ModerationOutcome
from haus.scoring.severity import most_severe
from haus.telemetry import emit_exception_telemetry, init_telemetry, scrub_exception_for_telemetry

# --- 1. SETUP AUDIT LOGGING ---
logging.basicConfig(
    filename="audit.log",
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
audit_logger = logging.getLogger("audit")

tags_metadata = [
    {
        "name": "Moderation",
        "description": "Risk scores in, verdict out (Approved / Pending review / Flagged / Rejected).",
    },
    {
        "name": "AI",
        "description": "Writing assistance for posts.",
    },
    {
        "name": "System",
        "description": "Health checks and operational metadata.",
    },
]


# --- DATA MODELS ---
class ModerateRequest(BaseModel):
    content: str
    content_type: str = "post"
    actor_id: Optional[str] = None
    author_id: Optional[str] = None
    content_id: Optional[str] = None


class ScoresRequest(BaseModel):
    scores: Dict[str, Any]
    content: str = ""
    content_type: str = "post"
    actor_id: Optional[str] = None
    author_id: Optional[str] = None
    content_id: Optional[str] = None


class BatchRequest(BaseModel):
    items: List[ModerateRequest] = Field(default_factory=list)


class ModerationResponse(BaseModel):
    verdict: str
    reasons: List[str]
    messages: List[str]
    evaluated_at: str
    risk_level: str
    decision_path: str
    audit_id: Optional[str] = None
    notified: bool = False
    suggestions: List[str] = Field(default_factory=list)


class BatchResponse(BaseModel):
    results: List[ModerationResponse]
    most_severe_verdict: Optional[str] = None


class CaptionRequest(BaseModel):
    content: str
    media_type: str = "text"
    profile: Optional[Dict[str, Any]] = None


class HashtagRequest(BaseModel):
    content: str
    count: int = Field(default=5, ge=1, le=20)


class EnhanceRequest(BaseModel):
    content: str
    enhancement_type: str = "grammar"


class TranslateRequest(BaseModel):
    content: str
    target_language: str = "Spanish"


class SummaryRequest(BaseModel):
    content: str
    max_length: int = Field(default=200, ge=1, le=2000)


def to_response(outcome: ModerationOutcome) -> ModerationResponse:
    decision = outcome.decision
    return ModerationResponse(
        verdict=decision.verdict.value,
        reasons=list(decision.reasons),
        messages=describe_reasons(decision.reasons),
        evaluated_at=decision.evaluated_at.isoformat(),
        risk_level=outcome.risk_level.value,
        decision_path=outcome.decision_path,
        audit_id=outcome.audit_record.audit_id if outcome.audit_record else None,
        notified=outcome.notified,
        suggestions=list(outcome.suggestions),
    )


def create_app(
    config: HausConfig,
    classifier: Optional[RiskClassifier] = None,
    caption_service: Optional[CaptionService] = None,
    notifier: Optional[WebhookNotifier] = None,
) -> FastAPI:
    """
    Build the HTTP surface with every collaborator passed in explicitly.
    Missing collaborators are built from ``config``.
    """
    app = FastAPI(
        title="Haus Moderation Engine",
        description="""
        **Content moderation** for the Haus of Basquiat community.

        * **Classifier:** per-category risk scores from the upstream provider.
        * **Decision:** one shared threshold table, first match wins.
        * **Fallback:** classifier outages queue content for review.
        """,
        version="0.1.0",
        openapi_tags=tags_metadata,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    init_telemetry(config.appinsights_connection_string)

    captions = caption_service or CaptionService(config)
    flow = ModerationFlow(
        classifier=classifier or OpenAIModerationClassifier(config),
        caption_service=captions,
        notifier=notifier or WebhookNotifier(
            config.notify_webhook_url, timeout=config.notify_timeout_seconds
        ),
        engine_version=config.engine_version,
    )

    app.state.config = config
    app.state.flow = flow
    app.state.captions = captions

    # --- MIDDLEWARE: AUDIT TRAIL ---
    @app.middleware("http")
    async def audit_middleware(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        client_host = request.client.host if request.client else "-"
        audit_logger.info(
            f"METHOD={request.method} PATH={request.url.path} "
            f"STATUS={response.status_code} CLIENT={client_host} "
            f"DURATION={process_time:.4f}s"
        )
        return response

    # --- ENDPOINTS ---
    @app.post("/moderate", response_model=ModerationResponse, tags=["Moderation"])
    def moderate_content(request: ModerateRequest):
        """
        Classify the content upstream, then decide.
        """
        try:
            outcome = flow.moderate(
                request.content,
                content_type=request.content_type,
                actor_id=request.actor_id,
                author_id=request.author_id,
                content_id=request.content_id,
            )
        except Exception as e:
            emit_exception_telemetry(e)
            audit_logger.error(f"ENGINE_ERROR: {scrub_exception_for_telemetry(e)}")
            raise HTTPException(status_code=500, detail="Moderation failed")
        return to_response(outcome)

    @app.post("/moderate/scores", response_model=ModerationResponse, tags=["Moderation"])
    def moderate_scores(request: ScoresRequest):
        """
        Decide from scores the caller already has. No classifier call.
        """
        try:
            outcome = flow.moderate_scores(
                request.scores,
                content=request.content,
                content_type=request.content_type,
                actor_id=request.actor_id,
                author_id=request.author_id,
                content_id=request.content_id,
            )
        except Exception as e:
            emit_exception_telemetry(e)
            audit_logger.error(f"ENGINE_ERROR: {scrub_exception_for_telemetry(e)}")
            raise HTTPException(status_code=500, detail="Moderation failed")
        return to_response(outcome)

    @app.post("/moderate/batch", response_model=BatchResponse, tags=["Moderation"])
    def moderate_batch(request: BatchRequest):
        try:
            outcomes = flow.moderate_batch([item.model_dump() for item in request.items])
        except Exception as e:
            emit_exception_telemetry(e)
            audit_logger.error(f"ENGINE_ERROR: {scrub_exception_for_telemetry(e)}")
            raise HTTPException(status_code=500, detail="Moderation failed")
        worst = most_severe(*[o.decision.verdict for o in outcomes]) if outcomes else None
        return BatchResponse(
            results=[to_response(o) for o in outcomes],
            most_severe_verdict=worst.value if worst else None,
        )

    @app.post("/ai/caption", tags=["AI"])
    def generate_caption(request: CaptionRequest):
        return captions.generate_caption(
            request.content, request.media_type, request.profile
        ).to_dict()

    @app.post("/ai/hashtags", tags=["AI"])
    def generate_hashtags(request: HashtagRequest):
        return captions.generate_hashtags(request.content, request.count).to_dict()

    @app.post("/ai/enhance", tags=["AI"])
    def enhance_content(request: EnhanceRequest):
        return captions.enhance(request.content, request.enhancement_type).to_dict()

    @app.post("/ai/translate", tags=["AI"])
    def translate_content(request: TranslateRequest):
        return captions.translate(request.content, request.target_language).to_dict()

    @app.post("/ai/summarize", tags=["AI"])
    def summarize_content(request: SummaryRequest):
        return captions.summarize(request.content, request.max_length).to_dict()

    @app.get("/health", tags=["System"])
    def health():
        return {
            "status": "online",
            "policy_version": flow.engine.policy.version,
            "engine_version": config.engine_version,
            "classifier_configured": config.openai_enabled or classifier is not None,
        }

    return app


app = create_app(HausConfig.from_env())
