"""Channel edit handler: plan console edits and apply them concurrently."""

from __future__ import annotations

from functools import partial
from typing import Optional

from openai import OpenAI
from pydantic import BaseModel

from intent_relay.adapters.studio_console import StudioConsole
from intent_relay.core.intents import ErrorKind, HandlerKind, SubResult
from intent_relay.core.logging import get_logger
from intent_relay.services.consolidation import collapse_results
from intent_relay.services.fan_out import FanOutExecutor, SubTask
from intent_relay.services.handlers.base import LeafHandler

logger = get_logger(__name__)

NO_EDITS_MESSAGE = "I couldn't identify any specific edits to perform in your request."

EDIT_PLAN_PROMPT = """Analyze the following request for a studio mixing console and break it \
down into specific tasks.
The console currently has the following state:
{console_state}

Request: {description}

Populate the following lists as applicable:
- name_edits: if the user wants to rename a channel.
- color_edits: if the user wants to change a channel's color (hex, like #FF8800).
- route_edits: if the user wants to change where a channel is routed.

If a specific edit type is not requested, leave that list null or empty."""


class NameEdit(BaseModel):
    channel_number: int
    name: str


class ColorEdit(BaseModel):
    channel_number: int
    hex_color: str


class RouteEdit(BaseModel):
    channel_number: int
    destination: str


class EditPlan(BaseModel):
    """Console edits requested by one command."""

    name_edits: Optional[list[NameEdit]] = None
    color_edits: Optional[list[ColorEdit]] = None
    route_edits: Optional[list[RouteEdit]] = None

    def is_empty(self) -> bool:
        """True when no edit of any type was requested."""
        return not (self.name_edits or self.color_edits or self.route_edits)


def apply_name_edit(console: StudioConsole, edit: NameEdit) -> SubResult:
    try:
        console.set_channel_name(edit.channel_number, edit.name)
    except Exception as exc:  # pylint: disable=broad-except
        return SubResult.err(
            ErrorKind.HANDLER_FAILURE,
            f"Failed to rename channel {edit.channel_number}: {exc}",
        )
    return SubResult.ok(f"Channel {edit.channel_number} renamed to '{edit.name}'")


def apply_color_edit(console: StudioConsole, edit: ColorEdit) -> SubResult:
    try:
        console.set_channel_color(edit.channel_number, edit.hex_color)
    except Exception as exc:  # pylint: disable=broad-except
        return SubResult.err(
            ErrorKind.HANDLER_FAILURE,
            f"Failed to set color for channel {edit.channel_number}: {exc}",
        )
    return SubResult.ok(f"Channel {edit.channel_number} color set to '{edit.hex_color}'")


def apply_route_edit(console: StudioConsole, edit: RouteEdit) -> SubResult:
    try:
        console.set_channel_route(edit.channel_number, edit.destination)
    except Exception as exc:  # pylint: disable=broad-except
        return SubResult.err(
            ErrorKind.HANDLER_FAILURE,
            f"Failed to route channel {edit.channel_number}: {exc}",
        )
    return SubResult.ok(f"Channel {edit.channel_number} routed to '{edit.destination}'")


def build_edit_tasks(plan: EditPlan, console: StudioConsole) -> tuple[list[SubTask], list[str]]:
    """Return one task per edit (names, then colors, then routes) with log labels."""
    prefix = HandlerKind.CHANNEL_EDIT.value
    tasks: list[SubTask] = []
    labels: list[str] = []
    for name_edit in plan.name_edits or []:
        tasks.append(partial(apply_name_edit, console, name_edit))
        labels.append(f"{prefix}:name:{name_edit.channel_number}")
    for color_edit in plan.color_edits or []:
        tasks.append(partial(apply_color_edit, console, color_edit))
        labels.append(f"{prefix}:color:{color_edit.channel_number}")
    for route_edit in plan.route_edits or []:
        tasks.append(partial(apply_route_edit, console, route_edit))
        labels.append(f"{prefix}:route:{route_edit.channel_number}")
    return tasks, labels


class ChannelEditHandler(LeafHandler):
    """Turn a console command into an edit plan and apply every edit concurrently."""

    failure_label = "Channel edit failed"

    def __init__(
        self,
        client: OpenAI,
        console: StudioConsole,
        edit_executor: FanOutExecutor,
        *,
        model: Optional[str] = None,
    ) -> None:
        super().__init__(client, model=model)
        self._console = console
        self._edit_executor = edit_executor

    def execute(self, description: str) -> SubResult:
        return self.run_guarded(lambda: self._run_plan(description))

    def _run_plan(self, description: str) -> SubResult:
        plan = self.parse_structured(
            EDIT_PLAN_PROMPT.format(
                console_state=self._console.describe_channels(), description=description
            ),
            EditPlan,
            "plan-channel-edits",
        )
        if plan.is_empty():
            logger.info("[channel-edit] Plan contained no edits")
            return SubResult.ok(NO_EDITS_MESSAGE)
        tasks, labels = build_edit_tasks(plan, self._console)
        return collapse_results(self._edit_executor.run_all(tasks, labels=labels))


__all__ = [
    "ChannelEditHandler",
    "ColorEdit",
    "EditPlan",
    "NameEdit",
    "RouteEdit",
    "NO_EDITS_MESSAGE",
    "apply_color_edit",
    "apply_name_edit",
    "apply_route_edit",
    "build_edit_tasks",
]
