"""Tests for the intent-relay CLI."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from intent_relay import cli
from intent_relay.adapters.studio_console import StudioConsole
from intent_relay.services import ServiceContainer

# pylint: disable=missing-function-docstring,too-few-public-methods

runner = CliRunner()


class EchoPipeline:
    def __init__(self) -> None:
        self.handled: list[str] = []

    def handle(self, raw_text: str) -> str:
        self.handled.append(raw_text)
        return f"handled: {raw_text}"


@pytest.fixture(name="pipeline")
def pipeline_fixture(monkeypatch: pytest.MonkeyPatch) -> EchoPipeline:
    pipeline = EchoPipeline()
    container = ServiceContainer(console=StudioConsole())
    monkeypatch.setattr(cli, "_build", lambda: (pipeline, container))
    return pipeline


def test_ask_prints_final_message(pipeline: EchoPipeline) -> None:
    result = runner.invoke(cli.main_app, ["ask", "show me a banana"])

    assert result.exit_code == 0
    assert "handled: show me a banana" in result.stdout
    assert pipeline.handled == ["show me a banana"]


def test_shell_handles_lines_until_exit(pipeline: EchoPipeline) -> None:
    result = runner.invoke(
        cli.main_app, ["shell"], input="tell me a joke\n\n:state\nquit\nignored\n"
    )

    assert result.exit_code == 0
    assert pipeline.handled == ["tell me a joke"]
    assert "handled: tell me a joke" in result.stdout
    assert "Kick" in result.stdout
    assert "Goodbye." in result.stdout


def test_shell_stops_at_end_of_input(pipeline: EchoPipeline) -> None:
    result = runner.invoke(cli.main_app, ["shell"], input="why?\n")

    assert result.exit_code == 0
    assert pipeline.handled == ["why?"]
