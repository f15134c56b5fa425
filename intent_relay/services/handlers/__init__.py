"""Sub-request handlers executed by the fan-out layer."""

from .art import BananaArtHandler
from .base import LeafHandler
from .channel_edit import ChannelEditHandler
from .command import NoveltyCommandHandler
from .fortune import FortuneHandler
from .joke import JokeHandler
from .query import QueryHandler

__all__ = [
    "BananaArtHandler",
    "ChannelEditHandler",
    "FortuneHandler",
    "JokeHandler",
    "LeafHandler",
    "NoveltyCommandHandler",
    "QueryHandler",
]
