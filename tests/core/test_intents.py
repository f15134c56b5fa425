"""Tests for intent variants and sub-request/sub-result models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from intent_relay.core.intents import (
    CommandIntent,
    CompositeIntent,
    ErrorKind,
    IntentKind,
    QueryIntent,
    SubResult,
    UnknownIntent,
    intent_adapter,
    intent_kind,
)

# pylint: disable=missing-function-docstring


def test_intent_adapter_resolves_variant_from_kind_tag() -> None:
    intent = intent_adapter.validate_python({"kind": "query", "question": "Why?"})
    assert isinstance(intent, QueryIntent)
    assert intent_kind(intent) is IntentKind.QUERY

    composite = intent_adapter.validate_python(
        {"kind": "composite", "commands": ["banana art"], "queries": []}
    )
    assert isinstance(composite, CompositeIntent)
    assert composite.commands == ("banana art",)


def test_intent_adapter_rejects_unknown_tag() -> None:
    with pytest.raises(ValidationError):
        intent_adapter.validate_python({"kind": "smalltalk", "reason": "hi"})


def test_intents_are_immutable() -> None:
    intent = CommandIntent(description="banana art")
    with pytest.raises(ValidationError):
        intent.description = "joke"  # type: ignore[misc]


def test_composite_drops_blank_entries_and_reports_empty() -> None:
    composite = CompositeIntent(commands=("banana art", "  "), queries=("",))
    assert composite.actionable_commands() == ["banana art"]
    assert composite.actionable_queries() == []
    assert not composite.is_empty

    assert CompositeIntent(commands=(" ",), queries=()).is_empty
    assert CompositeIntent().is_empty


def test_unknown_intent_kind() -> None:
    assert intent_kind(UnknownIntent(reason="no match")) is IntentKind.UNKNOWN


def test_sub_result_carries_exactly_one_outcome() -> None:
    ok = SubResult.ok("hello")
    assert ok.is_success
    assert ok.error_kind is None

    err = SubResult.err(ErrorKind.TIMEOUT, "took too long")
    assert not err.is_success
    assert err.error_kind is ErrorKind.TIMEOUT
    assert err.error_detail == "took too long"

    with pytest.raises(ValueError):
        SubResult()
    with pytest.raises(ValueError):
        SubResult(message="hi", error_kind=ErrorKind.TIMEOUT, error_detail="x")
    with pytest.raises(ValueError):
        SubResult(error_kind=ErrorKind.TIMEOUT)


def test_empty_message_is_still_a_success() -> None:
    assert SubResult.ok("").is_success
