"""
Tests for the interactive session loop.
"""

import io
import os
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock
import click
import pytest
from replkit.commands.app import AppState, cli, echo_handle
from replkit.commands.base import ShellCommand
from replkit.commands.interactive import interactive_command
from replkit.config.settings import App, appsettings
from replkit.lib.registry import CommandRegistry
from replkit.lib.repl import Shell
from replkit.lib.session import LEVEL_KEY, SESSION_KEY, SessionContext, session_context


@pytest.fixture
def settings(tmp_path: Path) -> App:
    return App(history_file=str(tmp_path / "history"), prompt="> ", commandMarker="/")


@pytest.fixture
def make_shell(settings: App, reader_cls, captured: io.StringIO):
    """Build a Shell over the demo commands reading from a script."""

    def make(script, **kwargs: Any) -> Shell:
        kwargs.setdefault("state_factory", AppState)
        kwargs.setdefault("context", SessionContext({}))
        kwargs.setdefault("settings", settings)
        return Shell(CommandRegistry(cli), reader=reader_cls(script), **kwargs)

    return make


def test_state_persists_for_the_session(make_shell, captured: io.StringIO) -> None:
    factory = MagicMock(side_effect=AppState)
    shell = make_shell(["count", "/count", "notes"], state_factory=factory)
    shell.run()
    output = captured.getvalue()
    assert "Count: 1" in output and "Count: 2" in output
    assert factory.call_count == 1
    assert shell.instance is None


@pytest.mark.parametrize("word", ["exit", "QUIT", "  q  ", "/Exit", "/ quit"])
def test_exit_words_end_the_session(make_shell, captured: io.StringIO, word: str) -> None:
    shell = make_shell([word, "count"])
    shell.run()
    assert "Count" not in captured.getvalue()
    assert "Goodbye!" in captured.getvalue()
    assert shell.reader.script == ["count"]


def test_end_of_input_ends_the_session(make_shell, captured: io.StringIO) -> None:
    shell = make_shell(["count", None, "count"])
    shell.run()
    assert captured.getvalue().count("Count:") == 1
    assert "Goodbye!" in captured.getvalue()


def test_double_interrupt_ends_the_session(make_shell, captured: io.StringIO) -> None:
    shell = make_shell([KeyboardInterrupt, KeyboardInterrupt, "count"])
    shell.interrupts.clock = lambda: 5.0
    shell.run()
    assert "Count" not in captured.getvalue()
    assert "Goodbye!" in captured.getvalue()


def test_slow_interrupts_do_not_end_the_session(make_shell, captured: io.StringIO) -> None:
    readings = iter([1.0, 9.0])
    shell = make_shell([KeyboardInterrupt, KeyboardInterrupt, "count"])
    shell.interrupts.clock = lambda: next(readings)
    shell.run()
    assert "Count: 1" in captured.getvalue()


def test_read_line_resets_interrupt_window(make_shell, captured: io.StringIO) -> None:
    shell = make_shell([KeyboardInterrupt, "count", KeyboardInterrupt, "count"])
    shell.interrupts.clock = lambda: 5.0
    shell.run()
    assert "Count: 2" in captured.getvalue()
    assert captured.getvalue().count("^C") == 2


def test_errors_never_end_the_session(make_shell, captured: io.StringIO) -> None:
    shell = make_shell(["hello", "process f --limit x", "/nope", "count"])
    shell.run()
    output = captured.getvalue()
    assert "Missing argument 'NAME'." in output
    assert "Expected numeric value for '--limit'" in output
    assert "Unknown command: 'nope'" in output
    assert "Count: 1" in output


def test_loop_contains_unexpected_errors(make_shell, captured: io.StringIO) -> None:
    shell = make_shell(["anything", "count"])
    original = shell.router.route
    shell.router.route = MagicMock(
        side_effect=[RuntimeError("router broke"), original("count")]
    )
    shell.run()
    assert "Error in main loop: router broke" in captured.getvalue()
    assert "Count: 1" in captured.getvalue()


def test_natural_language_reaches_default_handler(make_shell, captured: io.StringIO) -> None:
    seen: list = []

    def handler(line: str, state: AppState) -> None:
        seen.append((line, state))
        echo_handle(line, state)

    shell = make_shell(["count", "unparsed input"], default_handler=handler)
    shell.run()
    line, state = seen[0]
    assert line == "unparsed input"
    assert state.counter == 1 and state.said == 1
    assert "You said: unparsed input" in captured.getvalue()


def test_default_handler_errors_are_reported(make_shell, captured: io.StringIO) -> None:
    handler = MagicMock(side_effect=ValueError("no idea"))
    shell = make_shell(["what now", "count"], default_handler=handler)
    shell.run()
    output = captured.getvalue()
    assert "Error in default handler: no idea" in output
    assert "Input was: what now" in output
    assert "Count: 1" in output


def test_natural_language_without_handler_is_rejected(
    make_shell, captured: io.StringIO
) -> None:
    make_shell(["what now"]).run()
    assert "No default handler configured" in captured.getvalue()


def test_help_output(make_shell, captured: io.StringIO) -> None:
    make_shell(["help", "/help process"], default_handler=echo_handle).run()
    output = captured.getvalue()
    assert "Available commands (prefix with /):" in output
    assert "Special commands:" in output
    assert "/exit, /quit, /q" in output
    assert "Natural language mode:" in output
    assert "Usage:" in output and "--limit" in output


def test_history_is_loaded_and_saved(make_shell, settings: App) -> None:
    Path(settings.history_file).write_text("old\n")
    shell = make_shell(["count", "   ", "exit"])
    shell.run()
    assert shell.reader.seeded == ["old"]
    assert Path(settings.history_file).read_text() == "old\ncount\nexit\n"


def test_history_length_is_applied(make_shell, settings: App) -> None:
    settings.historyLength = 2
    make_shell(["count", "count", "count", "notes"]).run()
    assert Path(settings.history_file).read_text() == "count\nnotes\n"


def test_prompt_and_markers(make_shell, captured: io.StringIO) -> None:
    context = SessionContext({})
    shell = make_shell(["count"], prompt="demo> ", context=context)
    shell.run()
    assert shell.reader.prompts[0] == "demo> "
    assert shell.level == 1
    assert context.marker().depth == 0
    assert "replkit Interactive Shell" in captured.getvalue()
    assert callable(shell.reader.complete)


@pytest.mark.parametrize(
    "template, expected",
    [
        ("[{level}] {prompt}", "[3] > "),
        ("({depth}) {prompt}", "(3) > "),
        ("{0} {prompt}", "(3) > "),
        ("{level", "(3) > "),
    ],
)
def test_nested_prompt_format(
    make_shell, settings: App, template: str, expected: str
) -> None:
    settings.nestedPromptFormat = template
    shell = make_shell([])
    assert shell.prompt_build(1) == "> "
    assert shell.prompt_build(3) == expected


def test_nested_session_depth_and_messages(
    isolated: str, reader_cls, captured: io.StringIO, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(appsettings, "allowNested", True)
    depths: list[int] = []

    @click.group(name="nest")
    def nest() -> None:
        pass

    @nest.command(cls=ShellCommand)
    def depth() -> None:
        depths.append(session_context.depth)

    inner = reader_cls(["depth", "exit"])
    nest.add_command(interactive_command(nest, reader_factory=lambda: inner))

    outer = Shell(CommandRegistry(nest), reader=reader_cls(["depth", "interactive", "depth"]))
    outer.run()

    assert depths == [1, 2, 1]
    assert inner.prompts[0] == "(2) > "
    assert SESSION_KEY not in os.environ and LEVEL_KEY not in os.environ
    output = captured.getvalue()
    assert "nest Interactive Shell (nested level 2)" in output
    assert output.index("Exiting nested session...") < output.index("Goodbye!")


def test_nested_session_refused_by_default(
    isolated: str, reader_cls, captured: io.StringIO
) -> None:
    factory = MagicMock()

    @click.group(name="nest")
    def nest() -> None:
        pass

    nest.add_command(interactive_command(nest, reader_factory=factory))
    Shell(CommandRegistry(nest), reader=reader_cls(["interactive", "exit"])).run()

    factory.assert_not_called()
    assert "Already in an interactive session." in captured.getvalue()
