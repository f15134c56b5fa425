"""Infrastructure adapter exports."""

from .studio_console import ChannelState, StudioConsole

__all__ = ["ChannelState", "StudioConsole"]
