"""Fixtures shared by handler tests: a stub OpenAI client."""

from __future__ import annotations

import threading
from types import SimpleNamespace
from typing import Any, Callable, Mapping, cast

import pytest
from openai import OpenAI


def _stub_client(
    parsed: Mapping[type, Any] | None = None,
    text: Callable[[str], Any] | Any = "",
) -> OpenAI:
    """Return a client whose ``responses.parse`` answers by schema and chat by prompt.

    Values that are exceptions are raised instead of returned; parsed values that
    are callables are called with the request kwargs to produce the output.
    """
    parsed = dict(parsed or {})
    calls: list[tuple[str, Any]] = []
    lock = threading.Lock()

    def parse(**kwargs: Any) -> SimpleNamespace:
        with lock:
            calls.append(("parse", kwargs))
        outcome = parsed.get(kwargs["text_format"])
        if callable(outcome):
            outcome = outcome(kwargs)
        if isinstance(outcome, Exception):
            raise outcome
        return SimpleNamespace(output_parsed=outcome, usage=None)

    def create(**kwargs: Any) -> SimpleNamespace:
        with lock:
            calls.append(("create", kwargs))
        prompt = kwargs["messages"][-1]["content"]
        outcome = text(prompt) if callable(text) else text
        if isinstance(outcome, Exception):
            raise outcome
        message = SimpleNamespace(content=outcome)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=None)

    return cast(
        OpenAI,
        SimpleNamespace(
            responses=SimpleNamespace(parse=parse),
            chat=SimpleNamespace(completions=SimpleNamespace(create=create)),
            calls=calls,
        ),
    )


@pytest.fixture(name="stub_client")
def stub_client_fixture() -> Callable[..., OpenAI]:
    """Factory for stub clients; see :func:`_stub_client`."""
    return _stub_client
