import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


@dataclass(frozen=True)
class HausConfig:
    """
    Every external setting the moderation stack needs.

    Built once at process start and passed into the classifier, caption
    service, notifier and API. Nothing else in the package reads the
    environment.
    """

    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    moderation_model: str = "omni-moderation-latest"
    completion_model: str = "gpt-4"
    request_timeout_seconds: float = 10.0
    notify_webhook_url: Optional[str] = None
    notify_timeout_seconds: float = 2.0
    appinsights_connection_string: Optional[str] = None
    engine_version: str = "haus-moderation-0.1.0"

    @property
    def openai_enabled(self) -> bool:
        return bool(self.openai_api_key) and "PLACEHOLDER" not in self.openai_api_key

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "HausConfig":
        load_dotenv(dotenv_path)

        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
            moderation_model=os.getenv("HAUS_MODERATION_MODEL", cls.moderation_model),
            completion_model=os.getenv("HAUS_COMPLETION_MODEL", cls.completion_model),
            request_timeout_seconds=_env_float(
                "HAUS_REQUEST_TIMEOUT_SECONDS", cls.request_timeout_seconds
            ),
            notify_webhook_url=os.getenv("HAUS_NOTIFY_WEBHOOK_URL") or None,
            notify_timeout_seconds=_env_float(
                "HAUS_NOTIFY_TIMEOUT_SECONDS", cls.notify_timeout_seconds
            ),
            appinsights_connection_string=(
                os.getenv("AZURE_APPINSIGHTS_CONNECTION_STRING") or None
            ),
            engine_version=os.getenv("ENGINE_VERSION", cls.engine_version),
        )
