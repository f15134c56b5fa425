"""Banana ASCII art handler."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from intent_relay.services.handlers.base import LeafHandler

ART_STYLE_PROMPT = """Classify the user's art style preference:
- classic: Traditional detailed ASCII art (default if not specified)
- simple: Minimalist, small ASCII art
- detailed: Complex, large ASCII art with fine details

User request: {description}

Return the appropriate style."""


class ArtStyle(str, Enum):
    """Available banana renderings."""

    CLASSIC = "classic"
    SIMPLE = "simple"
    DETAILED = "detailed"


class ArtStyleChoice(BaseModel):
    """Structured output for the style classification."""

    style: ArtStyle


CLASSIC_BANANA = r"""
 _
//\
V  \
 \  \_
  \,'.`-.
   |\ `. `.
   ( \  `. `-.                        _,.-:\
    \ \   `.  `-._             __..--' ,-';/
     \ `.   `-.   `-..___..---'   _.--' ,'/
      `. `.    `-._        __..--'    ,' /
        `. `-_     ``--..''       _.-' ,'
          `-_ `-.___        __,--'   ,'
             `-.__  `----'''    __.-'
                  `--..____..--'
""".strip("\n")

SIMPLE_BANANA = r"""
  ___
 _)_)_
(______)
""".strip("\n")

DETAILED_BANANA = r"""
          _.._
        .'    '.
       /   __   \
      |  ,'  '.  |
      | /      \ |
      |/        \|
     _||        ||_
   ,'  |        |  '.
  /    |        |    \
 /     |        |     \
|      |        |      |
|      |        |      |
|      |        |      |
 \     |        |     /
  \    |        |    /
   '.  |        |  .'
     '-|        |-'
       |        |
       |________|
       (__/  \__)
""".strip("\n")

ART_BY_STYLE: dict[ArtStyle, str] = {
    ArtStyle.CLASSIC: CLASSIC_BANANA,
    ArtStyle.SIMPLE: SIMPLE_BANANA,
    ArtStyle.DETAILED: DETAILED_BANANA,
}


class BananaArtHandler(LeafHandler):
    """Pick a banana rendering matching the requested style."""

    failure_label = "Banana art failed"

    def generate(self, description: str) -> str:
        choice = self.parse_structured(
            ART_STYLE_PROMPT.format(description=description), ArtStyleChoice, "classify-art-style"
        )
        return ART_BY_STYLE[choice.style]


__all__ = ["ArtStyle", "ArtStyleChoice", "BananaArtHandler", "ART_BY_STYLE"]
