"""Intent types and sub-request/sub-result models for the intent relay."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class IntentKind(str, Enum):
    """Tags of the closed intent variant set."""

    COMMAND = "command"
    QUERY = "query"
    COMPOSITE = "composite"
    UNKNOWN = "unknown"


class HandlerKind(str, Enum):
    """Kinds of handler a sub-request can be routed to."""

    COMMAND = "command"
    QUERY = "query"
    ART = "art"
    FORTUNE = "fortune"
    JOKE = "joke"
    CHANNEL_EDIT = "channel-edit"


class ErrorKind(str, Enum):
    """Failure categories carried by an error sub-result."""

    HANDLER_FAILURE = "handler-failure"
    BACKEND_ERROR = "backend-error"
    TIMEOUT = "timeout"
    MALFORMED_OUTPUT = "malformed-output"
    CANCELLED = "cancelled"


class _IntentBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class CommandIntent(_IntentBase):
    """The user wants something done."""

    kind: Literal["command"] = "command"
    description: str


class QueryIntent(_IntentBase):
    """The user is asking a question."""

    kind: Literal["query"] = "query"
    question: str


class CompositeIntent(_IntentBase):
    """The user asked for several independent things in one message."""

    kind: Literal["composite"] = "composite"
    commands: tuple[str, ...] = ()
    queries: tuple[str, ...] = ()

    def actionable_commands(self) -> list[str]:
        """Return the non-blank commands in their given order."""
        return [command for command in self.commands if command.strip()]

    def actionable_queries(self) -> list[str]:
        """Return the non-blank queries in their given order."""
        return [query for query in self.queries if query.strip()]

    @property
    def is_empty(self) -> bool:
        """True when nothing in the composite can be dispatched."""
        return not self.actionable_commands() and not self.actionable_queries()


class UnknownIntent(_IntentBase):
    """The classifier could not map the message to an actionable intent."""

    kind: Literal["unknown"] = "unknown"
    reason: str


Intent = Annotated[
    Union[CommandIntent, QueryIntent, CompositeIntent, UnknownIntent],
    Field(discriminator="kind"),
]

intent_adapter: TypeAdapter[Intent] = TypeAdapter(Intent)


def intent_kind(intent: Intent) -> IntentKind:
    """Return the tag of ``intent`` as an :class:`IntentKind`."""
    return IntentKind(intent.kind)


@dataclass(slots=True, frozen=True)
class SubRequest:
    """One independently executable unit of work."""

    kind: HandlerKind
    description: str


@dataclass(slots=True, frozen=True)
class SubResult:
    """Outcome of one sub-request: a message or an error, never both."""

    message: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    error_detail: Optional[str] = None

    def __post_init__(self) -> None:
        has_message = self.message is not None
        has_error = self.error_kind is not None
        if has_message == has_error:
            raise ValueError("SubResult must carry exactly one of message or error")
        if has_error and self.error_detail is None:
            raise ValueError("error sub-results require a detail")

    @classmethod
    def ok(cls, message: str) -> "SubResult":
        """Build a successful sub-result."""
        return cls(message=message)

    @classmethod
    def err(cls, kind: ErrorKind, detail: str) -> "SubResult":
        """Build a failed sub-result."""
        return cls(error_kind=kind, error_detail=detail)

    @property
    def is_success(self) -> bool:
        """True when this result carries a message."""
        return self.message is not None


__all__ = [
    "IntentKind",
    "HandlerKind",
    "ErrorKind",
    "CommandIntent",
    "QueryIntent",
    "CompositeIntent",
    "UnknownIntent",
    "Intent",
    "intent_adapter",
    "intent_kind",
    "SubRequest",
    "SubResult",
]
