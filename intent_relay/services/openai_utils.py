"""Utilities for working with OpenAI SDK objects."""

from typing import Any, Optional

from openai import OpenAI

from intent_relay.core.config import Settings, settings
from intent_relay.core.logging import get_logger

logger = get_logger(__name__)


def build_openai_client(app_settings: Optional[Settings] = None) -> OpenAI:
    """Return an OpenAI client whose timeout bounds every backend call."""
    resolved = app_settings or settings
    return OpenAI(
        api_key=resolved.OPENAI_API_KEY,
        timeout=resolved.RELAY_HANDLER_TIMEOUT_SECONDS,
        max_retries=1,
    )


def extract_cached_input_tokens(usage: Any) -> int | None:
    """Best-effort extraction of cached input token counts from SDK usage objects.

    Supports:
    - Responses API: usage.input_tokens_details.cached_tokens
    - Chat Completions: usage.prompt_tokens_details.cached_tokens
    """
    for attr in ("input_tokens_details", "prompt_tokens_details"):
        details = getattr(usage, attr, None)
        if details is None:
            continue
        val = getattr(details, "cached_tokens", None)
        if val is None and isinstance(details, dict):
            val = details.get("cached_tokens")
        if isinstance(val, int) and val > 0:
            return val
    return None


def log_openai_usage(usage: Any, model: str, call_site: str) -> None:
    """Log token usage from Responses or Chat Completions usage objects."""
    if usage is None:
        return

    # Try Responses API field names first, then Chat Completions field names
    it = getattr(usage, "input_tokens", None) or getattr(usage, "prompt_tokens", None)
    ot = getattr(usage, "output_tokens", None) or getattr(usage, "completion_tokens", None)
    tt = getattr(usage, "total_tokens", None)
    if tt is None and (it is not None or ot is not None):
        tt = (it or 0) + (ot or 0)

    logger.info(
        "[openai] %s usage model=%s input=%s output=%s total=%s cached_input=%s",
        call_site,
        model,
        it,
        ot,
        tt,
        extract_cached_input_tokens(usage),
    )


def completion_text(completion: Any) -> str:
    """Normalize the first chat completion choice into a plain string."""
    content = completion.choices[0].message.content
    if isinstance(content, list):
        return "".join(part.get("text", "") if isinstance(part, dict) else "" for part in content)
    if content is None:
        return ""
    return str(content)


__all__ = [
    "build_openai_client",
    "completion_text",
    "extract_cached_input_tokens",
    "log_openai_usage",
]
