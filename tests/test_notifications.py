from datetime import datetime, timezone

import requests

from haus.integration.notifications import WebhookNotifier
from haus.models.moderation_decision import ModerationDecision, ModerationVerdict

NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


class FakeResponse:
    status_code = 202

    def raise_for_status(self):
        return None


def _decision(verdict, reasons):
    return ModerationDecision(verdict=verdict, reasons=reasons, evaluated_at=NOW)


def test_rejected_content_notifies_author(monkeypatch):
    calls = []

    def fake_post(url, json=None, timeout=None, headers=None):
        calls.append((url, json, timeout))
        return FakeResponse()

    monkeypatch.setattr(requests, "post", fake_post)
    notifier = WebhookNotifier("https://hooks.example.test/moderation", timeout=1.5)

    sent = notifier.notify_author(
        _decision(ModerationVerdict.REJECTED, ("hate-speech-high",)),
        author_id="author-1",
        content_id="post-9",
    )

    assert sent is True
    url, payload, timeout = calls[0]
    assert url == "https://hooks.example.test/moderation"
    assert timeout == 1.5
    assert payload["verdict"] == "REJECTED"
    assert payload["reasons"] == ["hate-speech-high"]
    assert payload["messages"] == ["Hate speech detected"]
    assert payload["author_id"] == "author-1"


def test_approved_and_pending_are_not_sent(monkeypatch):
    def fail_post(*args, **kwargs):
        raise AssertionError("should not post")

    monkeypatch.setattr(requests, "post", fail_post)
    notifier = WebhookNotifier("https://hooks.example.test/moderation")

    assert notifier.notify_author(_decision(ModerationVerdict.APPROVED, ())) is False
    assert notifier.notify_author(
        _decision(ModerationVerdict.PENDING_REVIEW, ("toxicity-low",))
    ) is False


def test_missing_webhook_is_a_no_op():
    notifier = WebhookNotifier(None)

    assert notifier.notify_author(
        _decision(ModerationVerdict.FLAGGED, ("violence-medium",))
    ) is False


def test_delivery_failure_is_logged_not_raised(monkeypatch):
    def broken_post(*args, **kwargs):
        raise requests.exceptions.ConnectionError("unreachable")

    monkeypatch.setattr(requests, "post", broken_post)
    notifier = WebhookNotifier("https://hooks.example.test/moderation")

    assert notifier.notify_author(
        _decision(ModerationVerdict.FLAGGED, ("violence-medium",))
    ) is False
