import logging
from typing import Any, Dict, Mapping, Optional

from openai import OpenAI, OpenAIError

from haus.config import HausConfig
from haus.errors import ClassifierUnavailableError
from haus.models.risk_scores import RiskScoreVector
from haus.telemetry import scrub_exception_for_telemetry

logger = logging.getLogger("haus.classifier")

# Our category <- OpenAI moderation categories (max of the group).
CATEGORY_SOURCES = {
    "toxicity": ("harassment", "harassment/threatening"),
    "hate_speech": ("hate", "hate/threatening"),
    "violence": ("violence", "violence/graphic"),
    "sexual_content": ("sexual", "sexual/minors"),
}


def _as_score_dict(category_scores: Any) -> Dict[str, Any]:
    if isinstance(category_scores, Mapping):
        return dict(category_scores)
    if hasattr(category_scores, "model_dump"):
        # SDK models expose the wire names ("hate/threatening") as aliases
        return category_scores.model_dump(by_alias=True)
    raise ClassifierUnavailableError(
        f"Unexpected category_scores type: {type(category_scores).__name__}"
    )


def map_openai_scores(category_scores: Any) -> RiskScoreVector:
    """
    Normalize OpenAI moderation ``category_scores`` into a RiskScoreVector.
    Categories outside the four policy groups are kept as extras.
    """
    raw = _as_score_dict(category_scores)
    used = set()
    mapped: Dict[str, Any] = {}

    for target, sources in CATEGORY_SOURCES.items():
        values = [raw[s] for s in sources if raw.get(s) is not None]
        used.update(sources)
        mapped[target] = max(values) if values else 0.0

    extra = {k: v for k, v in raw.items() if k not in used and v is not None}
    return RiskScoreVector(extra=extra, **mapped)


class OpenAIModerationClassifier:
    """
    Upstream classifier backed by the OpenAI moderation endpoint.

    The client is injected or built from HausConfig; there is no module-level
    client. Retries and timeouts are the SDK's.
    """

    def __init__(self, config: HausConfig, client: Optional[OpenAI] = None):
        self.config = config
        self.client = client

        if self.client is None and config.openai_enabled:
            self.client = OpenAI(
                api_key=config.openai_api_key,
                base_url=config.openai_base_url,
                timeout=config.request_timeout_seconds,
            )
            logger.info("OpenAI moderation client initialized")

    def classify(self, text: str) -> RiskScoreVector:
        if self.client is None:
            raise ClassifierUnavailableError("OpenAI API key not configured")

        try:
            response = self.client.moderations.create(
                model=self.config.moderation_model,
                input=text,
            )
        except OpenAIError as e:
            logger.error("Moderation request failed: %s", scrub_exception_for_telemetry(e))
            raise ClassifierUnavailableError("Moderation request failed") from e

        if not getattr(response, "results", None):
            raise ClassifierUnavailableError("Moderation response contained no results")

        return map_openai_scores(response.results[0].category_scores)
