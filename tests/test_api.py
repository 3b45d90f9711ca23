from types import SimpleNamespace

from fastapi.testclient import TestClient

from haus.api.main import create_app
from haus.config import HausConfig
from haus.enhancement.captions import CaptionService
from haus.errors import ClassifierUnavailableError
from haus.integration.notifications import WebhookNotifier
from haus.models.risk_scores import RiskScoreVector


class KeywordClassifier:
    """Steers the verdict by keyword."""

    def classify(self, text):
        if "outage" in text:
            raise ClassifierUnavailableError("simulated outage")
        if "hateful" in text:
            return RiskScoreVector(hate_speech=0.95)
        if "edgy" in text:
            return RiskScoreVector(toxicity=0.35)
        return RiskScoreVector(toxicity=0.05)


class FakeCompletions:
    def create(self, **kwargs):
        message = SimpleNamespace(content="Legendary energy ✨ #ballroom #basquiat")
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client():
    config = HausConfig()
    openai_client = SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions()))
    app = create_app(
        config,
        classifier=KeywordClassifier(),
        caption_service=CaptionService(config, client=openai_client),
        notifier=WebhookNotifier(None),
    )
    return TestClient(app)


client = _client()


def test_health_check():
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "online"
    assert response.json()["policy_version"] == "haus-moderation-2024.1"


def test_clean_post_is_approved():
    response = client.post("/moderate", json={"content": "Congrats on the grand prize!"})

    assert response.status_code == 200
    data = response.json()
    assert data["verdict"] == "APPROVED"
    assert data["reasons"] == []
    assert data["decision_path"] == "classifier"
    assert data["audit_id"]


def test_hateful_comment_is_rejected_with_display_text():
    response = client.post(
        "/moderate",
        json={"content": "hateful words", "content_type": "comment", "actor_id": "user-9"},
    )

    data = response.json()
    assert data["verdict"] == "REJECTED"
    assert data["reasons"] == ["hate-speech-high"]
    assert data["messages"] == ["Hate speech detected"]
    assert data["risk_level"] == "High"


def test_classifier_outage_is_queued_for_review():
    response = client.post("/moderate", json={"content": "posted during an outage"})

    data = response.json()
    assert data["verdict"] == "PENDING_REVIEW"
    assert data["reasons"] == ["automated-check-unavailable"]
    assert data["decision_path"] == "fallback"


def test_scores_endpoint_clamps_and_normalizes():
    response = client.post(
        "/moderate/scores",
        json={"scores": {"toxicity": 1.5, "hateSpeech": -0.2, "self-harm": 0.1}},
    )

    data = response.json()
    assert data["verdict"] == "REJECTED"
    assert data["reasons"] == ["toxicity-high"]
    assert data["decision_path"] == "scores"


def test_batch_endpoint_keeps_order():
    response = client.post(
        "/moderate/batch",
        json={"items": [{"content": "edgy joke"}, {"content": "nice"}, {"content": "hateful"}]},
    )

    verdicts = [r["verdict"] for r in response.json()["results"]]
    assert verdicts == ["PENDING_REVIEW", "APPROVED", "REJECTED"]
    assert response.json()["most_severe_verdict"] == "REJECTED"


def test_caption_endpoint():
    response = client.post(
        "/ai/caption",
        json={"content": "First ball!", "profile": {"display_name": "Ari", "pronouns": "they/them"}},
    )

    data = response.json()
    assert data["success"] is True
    assert data["hashtags"] == ["#ballroom", "#basquiat"]


def test_hashtag_count_is_validated():
    response = client.post("/ai/hashtags", json={"content": "vogue", "count": 0})

    assert response.status_code == 422


def test_scores_endpoint_clamps_integers_too_large_for_float():
    response = client.post(
        "/moderate/scores",
        content='{"scores": {"toxicity": 1' + "0" * 400 + ', "violence": -1' + "0" * 400 + "}}",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 200
    assert response.json()["verdict"] == "REJECTED"
    assert response.json()["reasons"] == ["toxicity-high"]


def test_scores_endpoint_reports_engine_errors_as_500(monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("engine bug")

    app_client = _client()
    monkeypatch.setattr(app_client.app.state.flow, "moderate_scores", broken)

    response = app_client.post("/moderate/scores", json={"scores": {"toxicity": 0.1}})

    assert response.status_code == 500
    assert response.json()["detail"] == "Moderation failed"


def test_rejected_content_comes_with_a_rewrite_suggestion():
    response = client.post("/moderate", json={"content": "hateful words"})

    data = response.json()
    assert data["verdict"] == "REJECTED"
    assert data["suggestions"] == ["Legendary energy ✨ #ballroom #basquiat"]


def test_approved_content_has_no_suggestions():
    response = client.post("/moderate", json={"content": "Congrats on the grand prize!"})

    assert response.json()["suggestions"] == []


def test_enhance_translate_and_summarize_endpoints():
    enhanced = client.post("/ai/enhance", json={"content": "we slayed", "enhancement_type": "tone"})
    translated = client.post("/ai/translate", json={"content": "we slayed", "target_language": "French"})
    summarized = client.post("/ai/summarize", json={"content": "a long recap", "max_length": 90})

    for response in (enhanced, translated, summarized):
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["text"] == "Legendary energy ✨ #ballroom #basquiat"


def test_summary_length_is_validated():
    response = client.post("/ai/summarize", json={"content": "recap", "max_length": 0})

    assert response.status_code == 422
