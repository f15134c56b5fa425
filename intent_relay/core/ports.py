"""Protocol definitions for the collaborators the pipeline invokes."""

# pylint: disable=unnecessary-ellipsis

from __future__ import annotations

from typing import AbstractSet, Protocol

from intent_relay.core.intents import Intent, IntentKind, SubResult


class Handler(Protocol):
    """Leaf capability that executes one sub-request."""

    def execute(self, description: str) -> SubResult:
        """Run the request and return its outcome; must never raise."""
        ...


class Classifier(Protocol):
    """Gateway turning raw user text into one typed intent."""

    def classify(self, raw_text: str, allowed: AbstractSet[IntentKind] = ...) -> Intent:
        """Return the intent for ``raw_text``; failures collapse to ``UnknownIntent``."""
        ...


class PostProcessor(Protocol):
    """Optional single transform applied to the consolidated message."""

    def transform(self, message: str) -> str:
        """Return the transformed message; may raise, the caller falls back."""
        ...


__all__ = ["Handler", "Classifier", "PostProcessor"]
