"""Fortune cookie handler."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from intent_relay.services.handlers.base import LeafHandler

FORTUNE_STYLE_PROMPT = """Classify the user's fortune cookie preferences:

Categories:
- career: Work, business, professional success
- love: Relationships, romance, connections
- wisdom: General life wisdom (default if not specified)
- technology: Programming, tech, digital life

Tones:
- mystical: Mysterious, ancient wisdom
- optimistic: Positive, uplifting (default if not specified)
- philosophical: Deep, thoughtful
- humorous: Funny, playful

User request: {description}

Return both category and tone."""

FORTUNE_GENERATION_PROMPT = """Generate a fortune cookie message with these characteristics:
Category: {category}
Tone: {tone}

Requirements:
- Keep it under 30 words
- Make it memorable and impactful
- Match the specified category and tone
- End with a thought-provoking or uplifting note

Generate only the fortune message, no explanation."""


class FortuneCategory(str, Enum):
    CAREER = "career"
    LOVE = "love"
    WISDOM = "wisdom"
    TECHNOLOGY = "technology"


class FortuneTone(str, Enum):
    MYSTICAL = "mystical"
    OPTIMISTIC = "optimistic"
    PHILOSOPHICAL = "philosophical"
    HUMOROUS = "humorous"


class FortuneStyle(BaseModel):
    category: FortuneCategory
    tone: FortuneTone


CATEGORY_DESCRIPTIONS: dict[FortuneCategory, str] = {
    FortuneCategory.CAREER: "Career and professional success",
    FortuneCategory.LOVE: "Love and relationships",
    FortuneCategory.WISDOM: "General life wisdom",
    FortuneCategory.TECHNOLOGY: "Technology and programming",
}

TONE_DESCRIPTIONS: dict[FortuneTone, str] = {
    FortuneTone.MYSTICAL: "Mysterious and ancient",
    FortuneTone.OPTIMISTIC: "Positive and uplifting",
    FortuneTone.PHILOSOPHICAL: "Deep and thoughtful",
    FortuneTone.HUMOROUS: "Funny and playful",
}


class FortuneHandler(LeafHandler):
    """Classify the requested fortune style, then generate the fortune."""

    failure_label = "Fortune failed"

    def generate(self, description: str) -> str:
        style = self.parse_structured(
            FORTUNE_STYLE_PROMPT.format(description=description),
            FortuneStyle,
            "classify-fortune-style",
        )
        return self.generate_text(
            FORTUNE_GENERATION_PROMPT.format(
                category=CATEGORY_DESCRIPTIONS[style.category],
                tone=TONE_DESCRIPTIONS[style.tone],
            ),
            "generate-fortune",
        )


__all__ = ["FortuneCategory", "FortuneTone", "FortuneStyle", "FortuneHandler"]
