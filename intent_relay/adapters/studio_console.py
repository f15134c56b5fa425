"""In-memory studio mixing console with per-channel write locking.

Channel edits arrive from concurrent fan-out tasks. Every mutation holds the
lock of the channel it touches for its whole read-modify-write, so two edits
to different fields of one channel never overwrite each other, while edits to
different channels run in parallel. The channel map itself is only touched
under ``_meta_lock``.
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass, replace
from typing import Any, Mapping

from intent_relay.core.logging import get_logger

logger = get_logger(__name__)

HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


@dataclass(slots=True, frozen=True)
class ChannelState:
    """Immutable snapshot of one console channel."""

    name: str
    color: str
    route: str


EMPTY_CHANNEL = ChannelState(name="Empty", color="#CCCCCC", route="None")

DEFAULT_CHANNELS: Mapping[int, ChannelState] = {
    1: ChannelState(name="Kick", color="#FF0000", route="Master"),
    2: ChannelState(name="Snare", color="#00FF00", route="Master"),
    3: ChannelState(name="Vocals", color="#0000FF", route="VocalBus"),
}


class StudioConsole:
    """Channel registry shared by every request in the process."""

    def __init__(self, channels: Mapping[int, ChannelState] | None = None) -> None:
        self._channels: dict[int, ChannelState] = dict(
            DEFAULT_CHANNELS if channels is None else channels
        )
        self._channel_locks: dict[int, threading.Lock] = {}
        self._meta_lock = threading.Lock()  # Protects both dictionaries

    def _lock_for(self, channel_number: int) -> threading.Lock:
        with self._meta_lock:
            lock = self._channel_locks.get(channel_number)
            if lock is None:
                lock = threading.Lock()
                self._channel_locks[channel_number] = lock
            return lock

    def get_channel(self, channel_number: int) -> ChannelState:
        """Return the channel's current state, or the empty placeholder."""
        with self._meta_lock:
            return self._channels.get(channel_number, EMPTY_CHANNEL)

    def channels(self) -> dict[int, ChannelState]:
        """Return a snapshot of all channels keyed by number."""
        with self._meta_lock:
            return dict(self._channels)

    def set_channel_name(self, channel_number: int, name: str) -> ChannelState:
        """Rename a channel."""
        if not name.strip():
            raise ValueError("channel name must not be blank")
        return self._update(channel_number, name=name.strip())

    def set_channel_color(self, channel_number: int, color: str) -> ChannelState:
        """Recolor a channel; ``color`` must be ``#RRGGBB``."""
        if not HEX_COLOR_PATTERN.match(color.strip()):
            raise ValueError(f"'{color}' is not a hex color like #FF8800")
        return self._update(channel_number, color=color.strip().upper())

    def set_channel_route(self, channel_number: int, destination: str) -> ChannelState:
        """Route a channel to ``destination``."""
        if not destination.strip():
            raise ValueError("route destination must not be blank")
        return self._update(channel_number, route=destination.strip())

    def describe_channels(self) -> str:
        """Describe every channel for model prompts."""
        snapshot = self.channels()
        if not snapshot:
            return "The console is currently empty."
        lines = [
            f"Channel {number}: Name={state.name}, Color={state.color}, Route={state.route}"
            for number, state in sorted(snapshot.items())
        ]
        return "Current Console State:\n" + "\n".join(lines)

    def _update(self, channel_number: int, **changes: Any) -> ChannelState:
        if channel_number < 1:
            raise ValueError(f"channel number must be positive, got {channel_number}")
        with self._lock_for(channel_number):
            current = self.get_channel(channel_number)
            updated = self._merge(current, changes)
            with self._meta_lock:
                self._channels[channel_number] = updated
        logger.info("[console] Channel %d updated: %s", channel_number, sorted(changes))
        return updated

    def _merge(self, current: ChannelState, changes: Mapping[str, Any]) -> ChannelState:
        return replace(current, **changes)


__all__ = ["ChannelState", "StudioConsole", "DEFAULT_CHANNELS", "EMPTY_CHANNEL"]
