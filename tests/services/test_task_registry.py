"""Unit tests for the task registry."""

from __future__ import annotations

import pytest

from intent_relay.core.exceptions import FatalConfigurationError
from intent_relay.core.intents import HandlerKind, SubResult
from intent_relay.services.task_registry import TaskRegistry

# pylint: disable=missing-function-docstring,too-few-public-methods


class EchoHandler:
    def execute(self, description: str) -> SubResult:
        return SubResult.ok(f"You said: {description}")


def test_resolve_returns_registered_handler() -> None:
    handler = EchoHandler()
    registry = TaskRegistry({HandlerKind.QUERY: handler})

    assert registry.resolve(HandlerKind.QUERY) is handler
    assert registry.kinds() == frozenset({HandlerKind.QUERY})


def test_resolve_unregistered_kind_is_fatal() -> None:
    registry = TaskRegistry()
    with pytest.raises(FatalConfigurationError):
        registry.resolve(HandlerKind.COMMAND)


def test_register_replace_and_unregister() -> None:
    registry = TaskRegistry()
    first, second = EchoHandler(), EchoHandler()
    registry.register(HandlerKind.JOKE, first)
    registry.register(HandlerKind.JOKE, second)
    assert registry.resolve(HandlerKind.JOKE) is second

    registry.unregister(HandlerKind.JOKE)
    registry.unregister(HandlerKind.JOKE)
    assert registry.kinds() == frozenset()


def test_handlers_returns_a_copy() -> None:
    registry = TaskRegistry({HandlerKind.ART: EchoHandler()})
    snapshot = registry.handlers()
    snapshot.clear()  # type: ignore[attr-defined]
    assert HandlerKind.ART in registry.kinds()
