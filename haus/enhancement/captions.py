import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from openai import OpenAI, OpenAIError

from haus.config import HausConfig
from haus.errors import CompletionUnavailableError
from haus.telemetry import scrub_exception_for_telemetry

logger = logging.getLogger("haus.enhancement")

FALLBACK_HASHTAGS = ["#ballroom", "#voguing", "#community", "#performance", "#hausofbasquiat"]

_FALLBACK_EMOJIS = ["✨", "💫", "🔥", "👑", "💖", "🌟"]

_STYLE_GUIDELINES = """

Style guidelines:
- Use ballroom/voguing terminology authentically
- Be celebratory and empowering
- Include relevant emojis
- Keep it under 280 characters
- Make it engaging and shareable
- Honor the culture and community"""

_HASHTAG_PATTERN = re.compile(r"#\w+")


# ---------------------------------------------------------------------------
# Prompt builders (pure)
# ---------------------------------------------------------------------------

def build_caption_prompt(
    content: str,
    media_type: str = "text",
    profile: Optional[Mapping[str, Any]] = None,
) -> str:
    prompt = (
        "Generate an engaging social media caption for a ballroom/voguing community "
        "platform. The content should be authentic, celebratory, and community-focused."
    )

    if profile:
        prompt += f"\nUser context: {profile.get('display_name') or 'A member'}"
        house = profile.get("house") or {}
        if isinstance(house, Mapping) and house.get("name"):
            prompt += f" from {house['name']}"
        if profile.get("pronouns"):
            prompt += f" ({profile['pronouns']})"

    if media_type == "image":
        prompt += f'\nThis post includes images. Original text: "{content}"'
    else:
        prompt += f'\nOriginal content: "{content}"'

    return prompt + _STYLE_GUIDELINES


def build_hashtag_prompt(content: str, count: int = 5) -> str:
    return (
        f"Based on the following content, suggest {count} relevant hashtags for a "
        "ballroom/voguing community social platform. Focus on ballroom culture, voguing, "
        "performance, community, and related themes. Return only the hashtags, one per "
        f"line, including the # symbol:\n\n{content}"
    )


def build_enhancement_prompt(content: str, enhancement_type: str = "grammar") -> str:
    return f"Enhance the {enhancement_type} of the following content: {content}"


def build_translation_prompt(content: str, target_language: str = "Spanish") -> str:
    return f"Translate the following content to {target_language}: {content}"


def build_summary_prompt(content: str, max_length: int = 200) -> str:
    return (
        f"Please provide a concise summary of the following content in {max_length} "
        "characters or less. Focus on the key points and main message:\n\n"
        f"{content}"
    )


# ---------------------------------------------------------------------------
# Response shaping (pure)
# ---------------------------------------------------------------------------

def extract_hashtags(text: str, limit: int = 5) -> List[str]:
    return _HASHTAG_PATTERN.findall(text or "")[:limit]


def parse_hashtag_lines(text: str, count: int = 5) -> List[str]:
    lines = [line.strip() for line in (text or "").splitlines()]
    return [line for line in lines if line.startswith("#")][:count]


def clean_completion(raw: str) -> str:
    """Strip conversational prefixes and wrapping quotes from a completion."""
    cleaned = re.sub(
        r"^(here is|here's|caption|sure)[^:\n]*:\s*",
        "",
        (raw or "").strip(),
        flags=re.I,
    ).strip()

    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in "\"'":
        cleaned = cleaned[1:-1].strip()

    return cleaned


def fallback_caption(content: str, media_type: str = "text") -> str:
    emoji = _FALLBACK_EMOJIS[len(content or "") % len(_FALLBACK_EMOJIS)]

    if media_type == "image":
        return f"Serving looks and living my truth {emoji} #ballroom #voguing #community"

    return f"{(content or '')[:200]}... {emoji} #ballroom #community"


# ---------------------------------------------------------------------------
# Completion service
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CaptionResult:
    success: bool
    text: Optional[str] = None
    hashtags: List[str] = field(default_factory=list)
    error: Optional[str] = None
    fallback: Optional[Any] = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "text": self.text,
            "hashtags": list(self.hashtags),
            "error": self.error,
            "fallback": self.fallback,
        }


class CaptionService:
    """
    Single-call request builders over a chat-completion API.
    No decision logic and no state beyond the injected client.
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

    def complete(self, prompt: str, max_tokens: int = 300, temperature: float = 0.7) -> str:
        if self.client is None:
            raise CompletionUnavailableError("OpenAI API key not configured")

        try:
            response = self.client.chat.completions.create(
                model=self.config.completion_model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except OpenAIError as e:
            logger.error("Completion request failed: %s", scrub_exception_for_telemetry(e))
            raise CompletionUnavailableError("Completion request failed") from e

        if not response.choices:
            raise CompletionUnavailableError("Completion response contained no choices")

        return clean_completion(response.choices[0].message.content or "")

    def generate_caption(
        self,
        content: str,
        media_type: str = "text",
        profile: Optional[Mapping[str, Any]] = None,
    ) -> CaptionResult:
        try:
            caption = self.complete(build_caption_prompt(content, media_type, profile))
        except CompletionUnavailableError as e:
            return CaptionResult(
                success=False,
                error=str(e),
                fallback=fallback_caption(content, media_type),
            )

        return CaptionResult(success=True, text=caption, hashtags=extract_hashtags(caption))

    def generate_hashtags(self, content: str, count: int = 5) -> CaptionResult:
        try:
            raw = self.complete(build_hashtag_prompt(content, count), max_tokens=150)
        except CompletionUnavailableError as e:
            return CaptionResult(success=False, error=str(e), fallback=list(FALLBACK_HASHTAGS))

        return CaptionResult(success=True, hashtags=parse_hashtag_lines(raw, count))

    def enhance(self, content: str, enhancement_type: str = "grammar") -> CaptionResult:
        return self._simple(build_enhancement_prompt(content, enhancement_type))

    def translate(self, content: str, target_language: str = "Spanish") -> CaptionResult:
        return self._simple(build_translation_prompt(content, target_language))

    def summarize(self, content: str, max_length: int = 200) -> CaptionResult:
        # roughly three characters per token
        return self._simple(
            build_summary_prompt(content, max_length),
            max_tokens=max(1, -(-max_length // 3)),
        )

    def _simple(self, prompt: str, max_tokens: int = 300) -> CaptionResult:
        try:
            return CaptionResult(success=True, text=self.complete(prompt, max_tokens=max_tokens))
        except CompletionUnavailableError as e:
            return CaptionResult(success=False, error=str(e))
