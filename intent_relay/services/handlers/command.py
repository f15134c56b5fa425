"""Novelty command handler: split a command into art, fortune, and joke parts.

One structured call decides which parts the command asks for; the parts then
run through a :class:`FanOutExecutor` of their own and are folded back into a
single sub-result for the parent request.
"""

from __future__ import annotations

from typing import Optional

from openai import OpenAI
from pydantic import BaseModel

from intent_relay.core.intents import HandlerKind, SubRequest, SubResult
from intent_relay.core.logging import get_logger
from intent_relay.services.consolidation import collapse_results
from intent_relay.services.fan_out import FanOutExecutor
from intent_relay.services.handlers.base import LeafHandler

logger = get_logger(__name__)

NO_COMMAND_MESSAGE = "I couldn't understand that command. Try asking for a banana, fortune, or joke!"

COMMAND_PLAN_PROMPT = """Analyze the user's command and determine which services should be invoked.
You can populate one or more of the following fields:

- banana_art: If the user wants ASCII art of a banana
- fortune: If the user wants a fortune cookie message or inspirational quote
- joke: If the user wants a dad joke

User command: {description}

Examples:
- "Show me a banana" -> populate only banana_art
- "Tell me a joke" -> populate only joke
- "Show me a banana and tell me a joke" -> populate banana_art and joke
- "Give me a fortune, a banana, and a joke" -> populate all three

For each applicable service, provide a description extracted from the user's request.
Leave other fields null."""


class CommandPlan(BaseModel):
    """Which novelty services a command asks for, with a description for each."""

    banana_art: Optional[str] = None
    fortune: Optional[str] = None
    joke: Optional[str] = None

    def sub_requests(self) -> list[SubRequest]:
        """Return the requested parts in art, fortune, joke order."""
        parts = (
            (HandlerKind.ART, self.banana_art),
            (HandlerKind.FORTUNE, self.fortune),
            (HandlerKind.JOKE, self.joke),
        )
        return [
            SubRequest(kind=kind, description=text.strip())
            for kind, text in parts
            if text and text.strip()
        ]


class NoveltyCommandHandler(LeafHandler):
    """Plan a command into novelty parts and run them concurrently."""

    failure_label = "Command failed"

    def __init__(
        self,
        client: OpenAI,
        parts_executor: FanOutExecutor,
        *,
        model: Optional[str] = None,
    ) -> None:
        super().__init__(client, model=model)
        self._parts_executor = parts_executor

    def execute(self, description: str) -> SubResult:
        return self.run_guarded(lambda: self._run_plan(description))

    def _run_plan(self, description: str) -> SubResult:
        plan = self.parse_structured(
            COMMAND_PLAN_PROMPT.format(description=description), CommandPlan, "classify-command"
        )
        requests = plan.sub_requests()
        if not requests:
            logger.info("[command] Plan selected no services")
            return SubResult.ok(NO_COMMAND_MESSAGE)
        logger.info("[command] Plan selected %s", [request.kind.value for request in requests])
        return collapse_results(self._parts_executor.dispatch(requests))


__all__ = ["CommandPlan", "NoveltyCommandHandler", "NO_COMMAND_MESSAGE"]
