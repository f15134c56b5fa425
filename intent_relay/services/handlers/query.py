"""General question answering handler."""

from __future__ import annotations

from typing import Callable, Optional

from openai import OpenAI

from intent_relay.services.handlers.base import LeafHandler

QUERY_PROMPT = """You are a helpful assistant. Answer the user's question.

User question: {question}"""

CONTEXT_QUERY_PROMPT = """You are a studio assistant. Use the current console state to answer \
the user's question.

{context}

User question: {question}"""


class QueryHandler(LeafHandler):
    """Answer a question, optionally grounded in context supplied at call time."""

    failure_label = "Answer failed"

    def __init__(
        self,
        client: OpenAI,
        *,
        model: Optional[str] = None,
        context_provider: Optional[Callable[[], str]] = None,
    ) -> None:
        super().__init__(client, model=model)
        self._context_provider = context_provider

    def generate(self, description: str) -> str:
        if self._context_provider is None:
            prompt = QUERY_PROMPT.format(question=description)
        else:
            prompt = CONTEXT_QUERY_PROMPT.format(
                context=self._context_provider(), question=description
            )
        return self.generate_text(prompt, "answer-query")


__all__ = ["QueryHandler"]
