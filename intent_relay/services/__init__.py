"""Application service layer for intent handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from intent_relay.core.ports import Classifier, PostProcessor

if TYPE_CHECKING:  # pragma: no cover - type narrowing only
    from intent_relay.adapters.studio_console import StudioConsole

    from .fan_out import FanOutExecutor
    from .task_registry import TaskRegistry


@dataclass(slots=True)
class ServiceContainer:
    """Aggregate of the collaborators one pipeline is assembled from."""

    classifier: Optional[Classifier] = None
    registry: Optional["TaskRegistry"] = None
    executor: Optional["FanOutExecutor"] = None
    post_processor: Optional[PostProcessor] = None
    console: Optional["StudioConsole"] = None


__all__ = ["ServiceContainer"]
