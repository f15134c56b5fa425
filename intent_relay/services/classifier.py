"""Classifier gateway: turn raw user text into one typed intent.

The gateway asks the model for a flat structured verdict and converts it into
the closed :data:`Intent` union. It fails closed: backend errors, unparsable
output, and verdicts outside the allowed set all become ``UnknownIntent``.
"""

from __future__ import annotations

from typing import AbstractSet, Any, Optional, cast

from openai import OpenAI, OpenAIError
from openai.types.responses.easy_input_message_param import EasyInputMessageParam
from pydantic import BaseModel, ValidationError

from intent_relay.core.config import config
from intent_relay.core.exceptions import ClassificationError
from intent_relay.core.intents import (
    CommandIntent,
    CompositeIntent,
    Intent,
    IntentKind,
    QueryIntent,
    UnknownIntent,
    intent_kind,
)
from intent_relay.core.logging import get_logger
from intent_relay.services.openai_utils import log_openai_usage

logger = get_logger(__name__)

ALL_INTENT_KINDS: frozenset[IntentKind] = frozenset(IntentKind)

COMMAND_SCOPES: dict[str, str] = {
    "novelty": "see banana ASCII art, get a fortune cookie message, or hear a dad joke",
    "console": (
        "change the studio mixing console: rename channels, change channel colors, "
        "or update channel routing"
    ),
}

INTENT_CLASSIFICATION_SYSTEM_PROMPT = """
Classify the intent of the user's message into exactly one of:
- command: the user wants to {command_scope} (one or more actions, one request)
- query: the user is asking a general question or requesting information
- composite: the user has BOTH commands AND questions in the same message
  (e.g. "show me a banana and tell me where they come from")
- unknown: the user's intent is unclear or matches none of the above

Examples:
- "Show me a banana" -> command (description: "banana art")
- "Where do bananas come from?" -> query (question: "Where do bananas come from?")
- "Show me a banana and tell me where they come from" -> composite
  (commands: ["banana art"], queries: ["where do bananas come from"])
- "Tell me a joke and explain why it's funny" -> composite

Fill only the fields of the chosen intent:
- command: description, a clear description of what they want done
- query: question, the question being asked
- composite: commands and queries, each a list of self-contained descriptions
- unknown: reason, a short explanation of why the intent is unclear
"""


class ClassifierVerdict(BaseModel):
    """Flat structured output requested from the classification model."""

    intent: IntentKind
    description: Optional[str] = None
    question: Optional[str] = None
    commands: Optional[list[str]] = None
    queries: Optional[list[str]] = None
    reason: Optional[str] = None


def verdict_to_intent(verdict: ClassifierVerdict) -> Intent:
    """Convert a flat verdict into its tagged intent, validating required payloads."""
    if verdict.intent is IntentKind.COMMAND:
        if not (verdict.description or "").strip():
            raise ClassificationError("command verdict is missing its description")
        return CommandIntent(description=cast(str, verdict.description).strip())
    if verdict.intent is IntentKind.QUERY:
        if not (verdict.question or "").strip():
            raise ClassificationError("query verdict is missing its question")
        return QueryIntent(question=cast(str, verdict.question).strip())
    if verdict.intent is IntentKind.COMPOSITE:
        return CompositeIntent(
            commands=tuple(entry.strip() for entry in verdict.commands or ()),
            queries=tuple(entry.strip() for entry in verdict.queries or ()),
        )
    return UnknownIntent(reason=(verdict.reason or "").strip() or "no reason given")


class OpenAIIntentClassifier:
    """Classifier gateway backed by OpenAI structured outputs."""

    def __init__(
        self,
        client: OpenAI,
        *,
        model: Optional[str] = None,
        command_domain: Optional[str] = None,
    ) -> None:
        self._client = client
        self._model = model or config.RELAY_CLASSIFIER_MODEL
        domain = command_domain or config.RELAY_COMMAND_DOMAIN
        self._system_prompt = INTENT_CLASSIFICATION_SYSTEM_PROMPT.format(
            command_scope=COMMAND_SCOPES.get(domain, COMMAND_SCOPES["novelty"])
        )

    def classify(
        self, raw_text: str, allowed: AbstractSet[IntentKind] = ALL_INTENT_KINDS
    ) -> Intent:
        """Classify ``raw_text``; never raises."""
        try:
            intent = self._classify_or_raise(raw_text)
        except ClassificationError as exc:
            logger.warning("[classifier] Classification failed: %s", exc)
            return UnknownIntent(reason=f"classification failed: {exc}")
        except Exception as exc:  # pylint: disable=broad-except
            logger.error("[classifier] Unexpected classification failure", exc_info=True)
            return UnknownIntent(reason=f"classification failed: {exc}")

        kind = intent_kind(intent)
        if kind is not IntentKind.UNKNOWN and kind not in allowed:
            logger.warning("[classifier] Verdict %s is outside the allowed set", kind.value)
            return UnknownIntent(reason=f"'{kind.value}' requests are not supported here")
        logger.info("[classifier] Classified message as %s", kind.value)
        return intent

    def _classify_or_raise(self, raw_text: str) -> Intent:
        messages: list[EasyInputMessageParam] = [
            {"role": "system", "content": self._system_prompt},
            {"role": "user", "content": f"User message: {raw_text}"},
        ]
        try:
            response = self._client.responses.parse(
                model=self._model,
                input=cast(Any, messages),
                text_format=ClassifierVerdict,
                store=False,
            )
        except (OpenAIError, ValidationError) as exc:
            raise ClassificationError(f"classifier backend error: {exc}") from exc

        log_openai_usage(getattr(response, "usage", None), self._model, "classify")
        verdict = getattr(response, "output_parsed", None)
        if not isinstance(verdict, ClassifierVerdict):
            raise ClassificationError("classifier returned no parsable verdict")
        return verdict_to_intent(verdict)


__all__ = [
    "ALL_INTENT_KINDS",
    "ClassifierVerdict",
    "OpenAIIntentClassifier",
    "verdict_to_intent",
]
