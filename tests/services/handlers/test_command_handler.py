"""Tests for the novelty command handler and its nested fan-out."""

from __future__ import annotations

import threading

from intent_relay.core.intents import ErrorKind, HandlerKind, SubRequest, SubResult
from intent_relay.services.fan_out import FanOutExecutor, cancel_event_context
from intent_relay.services.handlers.command import (
    NO_COMMAND_MESSAGE,
    CommandPlan,
    NoveltyCommandHandler,
)
from intent_relay.services.task_registry import TaskRegistry

# pylint: disable=missing-function-docstring,too-few-public-methods


class PartHandler:
    def __init__(self, label: str, fail: bool = False) -> None:
        self.label = label
        self.fail = fail
        self.calls: list[str] = []

    def execute(self, description: str) -> SubResult:
        self.calls.append(description)
        if self.fail:
            return SubResult.err(ErrorKind.TIMEOUT, f"{self.label} failed: slow")
        return SubResult.ok(f"{self.label}: {description}")


def _parts(fail: bool = False) -> tuple[FanOutExecutor, dict[HandlerKind, PartHandler]]:
    parts = {
        HandlerKind.ART: PartHandler("art", fail),
        HandlerKind.FORTUNE: PartHandler("fortune", fail),
        HandlerKind.JOKE: PartHandler("joke", fail),
    }
    return FanOutExecutor(TaskRegistry(parts)), parts


def test_plan_lists_parts_in_fixed_order() -> None:
    plan = CommandPlan(joke="pun", banana_art="banana", fortune="  ")
    assert plan.sub_requests() == [
        SubRequest(kind=HandlerKind.ART, description="banana"),
        SubRequest(kind=HandlerKind.JOKE, description="pun"),
    ]


def test_requested_parts_run_and_are_joined(stub_client) -> None:
    executor, parts = _parts()
    client = stub_client({CommandPlan: CommandPlan(banana_art="a banana", joke="a pun")})

    result = NoveltyCommandHandler(client, executor).execute("banana and a joke")

    assert result == SubResult.ok("art: a banana\n\njoke: a pun")
    assert not parts[HandlerKind.FORTUNE].calls


def test_empty_plan_returns_guidance(stub_client) -> None:
    executor, parts = _parts()
    result = NoveltyCommandHandler(stub_client({CommandPlan: CommandPlan()}), executor).execute(
        "make me a sandwich"
    )

    assert result == SubResult.ok(NO_COMMAND_MESSAGE)
    assert not any(part.calls for part in parts.values())


def test_all_parts_failing_fails_the_command(stub_client) -> None:
    executor, _ = _parts(fail=True)
    client = stub_client({CommandPlan: CommandPlan(banana_art="banana", fortune="luck")})

    result = NoveltyCommandHandler(client, executor).execute("banana and fortune")

    assert result.error_kind is ErrorKind.TIMEOUT
    assert result.error_detail == "art failed: slow; fortune failed: slow"


def test_unparsable_plan_is_malformed_output(stub_client) -> None:
    executor, _ = _parts()
    result = NoveltyCommandHandler(stub_client({CommandPlan: None}), executor).execute("banana")

    assert result.error_kind is ErrorKind.MALFORMED_OUTPUT
    assert result.error_detail is not None
    assert result.error_detail.startswith("Command failed: ")


def test_cancellation_during_planning_skips_every_part(stub_client) -> None:
    executor, parts = _parts()
    cancel = threading.Event()

    def plan_then_cancel(kwargs) -> CommandPlan:
        del kwargs
        cancel.set()
        return CommandPlan(banana_art="banana", fortune="luck", joke="pun")

    handler = NoveltyCommandHandler(stub_client({CommandPlan: plan_then_cancel}), executor)
    with cancel_event_context(cancel):
        result = handler.execute("everything")

    assert result.error_kind is ErrorKind.CANCELLED
    assert not any(part.calls for part in parts.values())
