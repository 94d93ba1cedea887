"""
Shared fixtures: a scripted line reader, captured console output and an
isolated session environment.
"""

import io
from typing import Generator, Iterable, Optional, Union
import pytest
from rich.console import Console
from replkit.config.settings import appsettings
from replkit.lib.session import LEVEL_KEY, SESSION_KEY
from replkit.models.dataModel import ReadKind, ReadOutcome

CONSOLE_MODULES: tuple[str, ...] = (
    "replkit.lib.repl",
    "replkit.lib.command",
    "replkit.lib.interrupt",
    "replkit.commands.app",
    "replkit.commands.interactive",
)

ScriptItem = Union[str, None, type[KeyboardInterrupt]]


class ScriptedReader:
    """
    LineReader that replays a script. Strings are typed lines, None is
    Ctrl-D and KeyboardInterrupt is Ctrl-C; reading past the end is EOF.
    """

    def __init__(self, script: Iterable[ScriptItem] = ()) -> None:
        self.script: list[ScriptItem] = list(script)
        self.prompts: list[str] = []
        self.seeded: list[str] = []
        self.complete = None

    def line_read(self, prompt: str) -> ReadOutcome:
        self.prompts.append(prompt)
        if not self.script:
            return ReadOutcome(kind=ReadKind.EOF)
        item: ScriptItem = self.script.pop(0)
        if item is None:
            return ReadOutcome(kind=ReadKind.EOF)
        if item is KeyboardInterrupt:
            return ReadOutcome(kind=ReadKind.INTERRUPTED)
        return ReadOutcome(kind=ReadKind.LINE, text=str(item))

    def completer_set(self, complete) -> None:
        self.complete = complete

    def history_seed(self, lines: list[str]) -> None:
        self.seeded.extend(lines)


@pytest.fixture
def reader_cls() -> type[ScriptedReader]:
    """The scripted reader class, for tests that build their own."""
    return ScriptedReader


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> io.StringIO:
    """Route every module console into one plain-text buffer."""
    output = io.StringIO()
    console = Console(file=output, width=200, color_system=None)
    for module in CONSOLE_MODULES:
        monkeypatch.setattr(f"{module}.console", console)
    return output


@pytest.fixture
def isolated(
    monkeypatch: pytest.MonkeyPatch, tmp_path
) -> Generator[Optional[str], None, None]:
    """
    No session running, nesting refused and history kept under tmp_path.
    Yields the history file path.
    """
    history_file = str(tmp_path / "history")
    monkeypatch.delenv(SESSION_KEY, raising=False)
    monkeypatch.delenv(LEVEL_KEY, raising=False)
    monkeypatch.setattr(appsettings, "history_file", history_file)
    monkeypatch.setattr(appsettings, "allowNested", False)
    monkeypatch.setattr(appsettings, "prompt", "> ")
    monkeypatch.setattr(appsettings, "debug_mode", False)
    yield history_file
