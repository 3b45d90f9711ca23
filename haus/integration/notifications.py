import logging
from datetime import datetime, timezone
from typing import Optional

import requests

from haus.explainability.reasons import describe_reasons
from haus.models.moderation_decision import ModerationDecision, ModerationVerdict

logger = logging.getLogger("haus.integration")

NOTIFY_VERDICTS = {ModerationVerdict.REJECTED, ModerationVerdict.FLAGGED}


def build_author_payload(
    decision: ModerationDecision,
    author_id: Optional[str],
    content_id: Optional[str],
) -> dict:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "content_id": content_id,
        "author_id": author_id,
        "verdict": decision.verdict.value,
        "reasons": list(decision.reasons),
        # Display text for the messaging layer
        "messages": describe_reasons(decision.reasons),
    }


class WebhookNotifier:
    """
    Tells authors their content was removed or held back.

    Delivery failures are logged, never raised: the moderation decision
    stands whether or not the message goes out.
    """

    def __init__(self, webhook_url: Optional[str], timeout: float = 2.0):
        self.webhook_url = webhook_url
        self.timeout = timeout

    def notify_author(
        self,
        decision: ModerationDecision,
        author_id: Optional[str] = None,
        content_id: Optional[str] = None,
    ) -> bool:
        if decision.verdict not in NOTIFY_VERDICTS:
            return False

        if not self.webhook_url:
            logger.warning("Author notification skipped: no webhook URL configured.")
            return False

        payload = build_author_payload(decision, author_id, content_id)

        try:
            response = requests.post(
                self.webhook_url,
                json=payload,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
            logger.info(f"Author notification sent. Status: {response.status_code}")
            return True

        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to send author notification: {e}")
            return False
