"""Post-processing of the consolidated message: identity or translation."""

from __future__ import annotations

from typing import Optional, cast

from openai import OpenAI, OpenAIError
from openai.types.chat.chat_completion_message_param import ChatCompletionMessageParam

from intent_relay.core.config import config
from intent_relay.core.exceptions import PostProcessError
from intent_relay.core.logging import get_logger
from intent_relay.core.ports import PostProcessor
from intent_relay.services.openai_utils import completion_text, log_openai_usage

logger = get_logger(__name__)

RESPONSE_TRANSLATOR_SYSTEM_PROMPT = (
    "You are a translator for the final output in a chatbot system. "
    "You will receive text that needs to be translated into the language represented by "
    "the specified ISO 639-1 code. Keep the same tone and style, but make it natural in "
    "the target language. ALWAYS translate every part of the input text. NEVER drop, "
    "summarize, or omit sentences. If there is ASCII art or other preformatted text, "
    "keep it exactly intact. Return only the translated text."
)


class IdentityPostProcessor:  # pylint: disable=too-few-public-methods
    """Pass the message through unchanged."""

    def transform(self, message: str) -> str:
        """Return ``message`` as-is."""
        return message


class TranslationPostProcessor:  # pylint: disable=too-few-public-methods
    """Translate the consolidated message into a fixed target language."""

    def __init__(
        self,
        client: OpenAI,
        target_language: str,
        *,
        model: Optional[str] = None,
    ) -> None:
        self._client = client
        self._target_language = target_language
        self._model = model or config.RELAY_TRANSLATION_MODEL

    @property
    def target_language(self) -> str:
        """ISO 639-1 code the processor translates into."""
        return self._target_language

    def transform(self, message: str) -> str:
        """Translate ``message``; raises :class:`PostProcessError` on failure."""
        chat_messages = cast(
            list[ChatCompletionMessageParam],
            [
                {"role": "system", "content": RESPONSE_TRANSLATOR_SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": (
                        f"text to translate: {message}\n\n"
                        f"ISO 639-1 code representing target language: {self._target_language}"
                    ),
                },
            ],
        )
        try:
            completion = self._client.chat.completions.create(
                model=self._model,
                messages=chat_messages,
            )
        except OpenAIError as exc:
            raise PostProcessError(f"translation backend error: {exc}") from exc
        log_openai_usage(getattr(completion, "usage", None), self._model, "translate")
        text = completion_text(completion)
        if not text.strip():
            raise PostProcessError("translation returned empty text")
        logger.info("[post-process] Translated message to %s", self._target_language)
        return text


def apply_post_processing(processor: Optional[PostProcessor], message: str) -> str:
    """Run ``processor`` over ``message``, falling back to the original on any failure."""
    if processor is None:
        return message
    try:
        transformed = processor.transform(message)
    except Exception:  # pylint: disable=broad-except
        logger.warning(
            "[post-process] Transform failed; returning the original message", exc_info=True
        )
        return message
    if not isinstance(transformed, str):
        logger.warning(
            "[post-process] Transform returned %s; returning the original message",
            type(transformed).__name__,
        )
        return message
    return transformed


def build_post_processor(client: OpenAI, target_language: Optional[str]) -> PostProcessor:
    """Return a translator for ``target_language`` or the identity processor when unset."""
    if target_language and target_language.strip():
        return TranslationPostProcessor(client, target_language.strip())
    return IdentityPostProcessor()


__all__ = [
    "IdentityPostProcessor",
    "TranslationPostProcessor",
    "apply_post_processing",
    "build_post_processor",
]
