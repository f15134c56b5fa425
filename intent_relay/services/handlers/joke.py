"""Programming dad joke handler."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from intent_relay.services.handlers.base import LeafHandler

JOKE_STYLE_PROMPT = """Classify the user's joke preferences:

Domains:
- java: Java programming jokes
- python: Python programming jokes
- javascript: JavaScript programming jokes
- database: SQL and database jokes
- general: General programming/tech jokes (default if not specified)

Formats:
- question-answer: Traditional "Why did X?" setup with punchline
- one-liner: Single sentence joke (default if not specified)
- pun: Wordplay and puns

User request: {description}

Return both domain and format."""

JOKE_GENERATION_PROMPT = """Generate a dad joke with these characteristics:
Domain: {domain}
Format: {format}

Requirements:
- Make it wholesome and groan-worthy
- Use technical concepts creatively
- Keep it appropriate for all audiences
- Make it clearly a dad joke (corny, punny, etc.)
{instructions}

Generate only the joke, no explanation."""


class JokeDomain(str, Enum):
    """Subject area of the joke."""

    JAVA = "java"
    PYTHON = "python"
    JAVASCRIPT = "javascript"
    DATABASE = "database"
    GENERAL = "general"


class JokeFormat(str, Enum):
    """Shape of the joke."""

    QUESTION_ANSWER = "question-answer"
    ONE_LINER = "one-liner"
    PUN = "pun"


class JokeStyle(BaseModel):
    """Structured output for the joke style classification."""

    domain: JokeDomain
    format: JokeFormat


DOMAIN_DESCRIPTIONS: dict[JokeDomain, str] = {
    JokeDomain.JAVA: "Java programming and JVM",
    JokeDomain.PYTHON: "Python programming and its features",
    JokeDomain.JAVASCRIPT: "JavaScript and web development",
    JokeDomain.DATABASE: "SQL, databases, and data",
    JokeDomain.GENERAL: "General programming and technology",
}

FORMAT_DESCRIPTIONS: dict[JokeFormat, str] = {
    JokeFormat.QUESTION_ANSWER: "Question and answer format",
    JokeFormat.ONE_LINER: "One-liner format",
    JokeFormat.PUN: "Pun/wordplay format",
}

FORMAT_INSTRUCTIONS: dict[JokeFormat, str] = {
    JokeFormat.QUESTION_ANSWER: (
        "- Start with a question (Why did...? What do you call...? How does...?)\n"
        "- Follow with a punchline"
    ),
    JokeFormat.ONE_LINER: "- Write as a single complete sentence or statement",
    JokeFormat.PUN: "- Focus on wordplay and double meanings\n- Use technical terms creatively",
}


class JokeHandler(LeafHandler):
    """Classify the requested joke style, then generate the joke."""

    failure_label = "Joke failed"

    def generate(self, description: str) -> str:
        style = self.parse_structured(
            JOKE_STYLE_PROMPT.format(description=description), JokeStyle, "classify-joke-style"
        )
        return self.generate_text(
            JOKE_GENERATION_PROMPT.format(
                domain=DOMAIN_DESCRIPTIONS[style.domain],
                format=FORMAT_DESCRIPTIONS[style.format],
                instructions=FORMAT_INSTRUCTIONS[style.format],
            ),
            "generate-joke",
        )


__all__ = ["JokeDomain", "JokeFormat", "JokeStyle", "JokeHandler"]
