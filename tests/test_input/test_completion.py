"""
Tests for tab completion: command names, flags and filesystem paths.
"""

from pathlib import Path
import click
import pytest
from prompt_toolkit.document import Document
from replkit.commands.base import ShellCommand
from replkit.lib.completion import (
    CompletionEngine,
    ShellCompleter,
    after_path_flag,
    path_complete,
    path_like,
)
from replkit.lib.registry import CommandRegistry


@pytest.fixture
def registry() -> CommandRegistry:
    @click.group(name="demo")
    def demo() -> None:
        pass

    @demo.command(cls=ShellCommand)
    @click.argument("name")
    def hello(name: str) -> None:
        pass

    @demo.command(cls=ShellCommand)
    def history() -> None:
        pass

    @demo.command(cls=ShellCommand)
    @click.argument("file")
    @click.option("--output", "-o", type=click.Path())
    @click.option("--verbose", "-v", is_flag=True)
    @click.option("--into", type=str)
    def process(file: str, output: str, verbose: bool, into: str) -> None:
        pass

    return CommandRegistry(demo)


@pytest.fixture
def engine(registry: CommandRegistry) -> CompletionEngine:
    return CompletionEngine(registry)


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    (tmp_path / "notes.txt").write_text("")
    (tmp_path / "notes 2.txt").write_text("")
    (tmp_path / "data").mkdir()
    (tmp_path / ".hidden").write_text("")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_command_names_include_builtins(engine: CompletionEngine) -> None:
    assert engine.command_complete("h") == ["hello", "help", "history"]
    assert engine.command_complete("q") == ["q", "quit"]
    assert engine.command_complete("H") == []


def test_marker_prefixed_command_names(engine: CompletionEngine) -> None:
    assert engine.complete("/h", "/h") == ["/hello", "/help", "/history"]
    assert engine.complete("/", "/") == [
        "/exit",
        "/hello",
        "/help",
        "/history",
        "/process",
        "/q",
        "/quit",
    ]


def test_flags_of_the_command(engine: CompletionEngine, workdir: Path) -> None:
    assert engine.complete("process file.txt --v", "--v") == ["--verbose"]
    assert engine.complete("/process -", "-") == [
        "--into",
        "--output",
        "--verbose",
        "-o",
        "-v",
    ]


def test_plain_argument_falls_back_to_paths(engine: CompletionEngine, workdir: Path) -> None:
    assert engine.complete("process no", "no") == ["notes.txt", "notes\\ 2.txt"]


def test_value_after_path_flag(engine: CompletionEngine, workdir: Path) -> None:
    assert engine.complete("process file.txt -o ", "") == [
        "data/",
        "notes.txt",
        "notes\\ 2.txt",
    ]
    assert engine.complete("process file.txt --output d", "d") == ["data/"]


def test_attached_path_flag_value(engine: CompletionEngine, workdir: Path) -> None:
    assert engine.complete("process file.txt --output=./da", "--output=./da") == [
        "--output=./data/"
    ]
    assert engine.complete("process --output=no", "--output=no") == [
        "--output=notes.txt",
        "--output=notes\\ 2.txt",
    ]
    assert engine.complete("process --verbose=x", "--verbose=x") == []


def test_value_after_non_path_flag_is_not_forced(
    engine: CompletionEngine, workdir: Path
) -> None:
    assert not after_path_flag("process --into ", engine.registry.lookup("process"))


def test_path_styles_are_preserved(
    engine: CompletionEngine, workdir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    assert engine.complete("process ./d", "./d") == ["./data/"]
    absolute = f"{workdir}/no"
    assert engine.complete(f"process {absolute}", absolute) == [
        f"{workdir}/notes.txt",
        f"{workdir}/notes\\ 2.txt",
    ]
    monkeypatch.setenv("HOME", str(workdir))
    assert engine.complete("process ~/da", "~/da") == ["~/data/"]


def test_escaped_space_prefix(workdir: Path) -> None:
    assert path_complete("notes\\ ") == ["notes\\ 2.txt"]


def test_dot_entries_are_excluded(workdir: Path) -> None:
    assert path_complete(".") == [".hidden"]


def test_natural_language_gets_nothing(engine: CompletionEngine, workdir: Path) -> None:
    assert engine.complete("what is no", "no") == []
    assert engine.complete("he", "he") == []


@pytest.mark.parametrize(
    "token, expected",
    [
        ("/etc", True),
        ("~/x", True),
        ("~", True),
        ("./a", True),
        ("a/b", True),
        ("file.txt", True),
        ("REPORT.PDF", True),
        ("hello", False),
        ("v1.2", False),
        ("-v", False),
        ("", False),
    ],
)
def test_path_like(token: str, expected: bool) -> None:
    assert path_like(token) is expected


def test_shell_completer_replaces_word(engine: CompletionEngine) -> None:
    completer = ShellCompleter(engine.complete)
    completions = list(completer.get_completions(Document("/he"), None))
    assert [c.text for c in completions] == ["/hello", "/help"]
    assert all(c.start_position == -3 for c in completions)
