"""
Tests for the command line interface.
"""

import io

import pytest
from rich.console import Console

from config import Settings
from tests.conftest import StubTagger
from tools import cli
from tools.cli import CLIController


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def controller(data_dir, output):
    console = Console(file=output, width=120, color_system=None)
    return CLIController(Settings(DATA_DIR=data_dir), console=console, tagger=StubTagger())


def test_ask(controller, output):
    controller.cmd_ask("Hi")
    assert "Hello!" in output.getvalue()


def test_ask_detail(controller, output):
    controller.cmd_ask("What is a goroutine?", detail=True)
    text = output.getvalue()
    assert "A lightweight thread." in text
    assert "tier=knowledge_base" in text


def test_chat_learns_and_answers(controller, output):
    lines = iter([
        "/learn tell me something => Something.",
        "tell me something",
        "/learn broken",
        "/stats",
        "/quit",
    ])
    controller.cmd_chat(input_fn=lambda prompt: next(lines))

    text = output.getvalue()
    assert "Learned answer for: tell me something" in text
    assert "Something." in text
    assert "Usage: /learn" in text
    assert "Learned entries" in text


def test_chat_stops_on_eof(controller):
    def eof(prompt):
        raise EOFError

    controller.cmd_chat(input_fn=eof)


def test_main_without_command():
    assert cli.main([]) == 0


def test_main_configuration_error(tmp_path):
    # tmp_path holds no prompt.json
    assert cli.main(["--data-dir", str(tmp_path), "stats"]) == 1


def test_main_ask(data_dir, monkeypatch, capsys):
    real_create = cli.create_resolver
    monkeypatch.setattr(cli, "create_resolver", lambda settings, tagger=None: real_create(settings, tagger=StubTagger()))
    assert cli.main(["--data-dir", str(data_dir), "ask", "Hi"]) == 0
    assert "Hello!" in capsys.readouterr().out
