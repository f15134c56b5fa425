"""Tests for the studio console channel edit handler."""

from __future__ import annotations

import threading

from intent_relay.adapters.studio_console import DEFAULT_CHANNELS, ChannelState, StudioConsole
from intent_relay.core.intents import ErrorKind, HandlerKind, SubRequest, SubResult
from intent_relay.services.fan_out import FanOutExecutor
from intent_relay.services.handlers.channel_edit import (
    NO_EDITS_MESSAGE,
    ChannelEditHandler,
    ColorEdit,
    EditPlan,
    NameEdit,
    RouteEdit,
    build_edit_tasks,
)
from intent_relay.services.task_registry import TaskRegistry

# pylint: disable=missing-function-docstring


def _handler(client, console: StudioConsole) -> ChannelEditHandler:
    return ChannelEditHandler(client, console, FanOutExecutor(TaskRegistry()))


def test_edits_apply_concurrently_and_report_in_plan_order(stub_client) -> None:
    console = StudioConsole()
    plan = EditPlan(
        name_edits=[NameEdit(channel_number=1, name="Drums")],
        color_edits=[
            ColorEdit(channel_number=1, hex_color="#123456"),
            ColorEdit(channel_number=2, hex_color="blue"),
        ],
        route_edits=[RouteEdit(channel_number=3, destination="Master")],
    )

    result = _handler(stub_client({EditPlan: plan}), console).execute("rework the console")

    assert result == SubResult.ok(
        "Channel 1 renamed to 'Drums'\n\n"
        "Channel 1 color set to '#123456'\n\n"
        "Channel 3 routed to 'Master'\n\n"
        "Errors: Failed to set color for channel 2: 'blue' is not a hex color like #FF8800"
    )
    assert console.get_channel(1) == ChannelState(name="Drums", color="#123456", route="Master")
    assert console.get_channel(2).color == "#00FF00"
    assert console.get_channel(3).route == "Master"


def test_plan_prompt_includes_console_state(stub_client) -> None:
    client = stub_client({EditPlan: EditPlan()})
    _handler(client, StudioConsole()).execute("rename channel 2")

    prompt = client.calls[0][1]["input"][0]["content"]
    assert "Channel 2: Name=Snare, Color=#00FF00, Route=Master" in prompt
    assert "Request: rename channel 2" in prompt


def test_empty_plan_reports_no_edits(stub_client) -> None:
    console = StudioConsole()
    result = _handler(stub_client({EditPlan: EditPlan(name_edits=[])}), console).execute("hmm")

    assert result == SubResult.ok(NO_EDITS_MESSAGE)
    assert console.channels() == StudioConsole().channels()


def test_all_edits_failing_fails_the_command(stub_client) -> None:
    plan = EditPlan(name_edits=[NameEdit(channel_number=0, name="Ghost")])

    result = _handler(stub_client({EditPlan: plan}), StudioConsole()).execute("rename 0")

    assert result.error_kind is ErrorKind.HANDLER_FAILURE
    assert result.error_detail is not None
    assert result.error_detail.startswith("Failed to rename channel 0: ")


def test_build_edit_tasks_labels_each_edit() -> None:
    plan = EditPlan(
        color_edits=[ColorEdit(channel_number=4, hex_color="#ABCDEF")],
        name_edits=[NameEdit(channel_number=4, name="Bass")],
    )
    tasks, labels = build_edit_tasks(plan, StudioConsole())

    assert labels == ["channel-edit:name:4", "channel-edit:color:4"]
    assert [task().message for task in tasks] == [
        "Channel 4 renamed to 'Bass'",
        "Channel 4 color set to '#ABCDEF'",
    ]


def test_cancellation_during_planning_leaves_console_untouched(stub_client) -> None:
    console = StudioConsole()
    cancel = threading.Event()
    plan = EditPlan(
        name_edits=[
            NameEdit(channel_number=1, name="X"),
            NameEdit(channel_number=2, name="Y"),
        ]
    )

    def plan_then_cancel(kwargs) -> EditPlan:
        del kwargs
        cancel.set()
        return plan

    handler = _handler(stub_client({EditPlan: plan_then_cancel}), console)
    request_executor = FanOutExecutor(TaskRegistry({HandlerKind.COMMAND: handler}))

    [result] = request_executor.dispatch(
        [SubRequest(kind=HandlerKind.COMMAND, description="rename")], cancel_event=cancel
    )

    assert result.error_kind is ErrorKind.CANCELLED
    assert console.channels() == dict(DEFAULT_CHANNELS)


def test_cancelled_request_skips_planning(stub_client) -> None:
    client = stub_client({EditPlan: EditPlan(name_edits=[NameEdit(channel_number=1, name="X")])})
    cancel = threading.Event()
    cancel.set()

    results = FanOutExecutor(TaskRegistry()).run_all(
        [lambda: _handler(client, StudioConsole()).execute("rename")], cancel_event=cancel
    )

    assert results[0].error_kind is ErrorKind.CANCELLED
    assert not client.calls
