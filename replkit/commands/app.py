"""
Defines the demo Click command group for replkit.

This module provides:
- The root `cli` command group, which starts an interactive session when
  run without a subcommand.
- A small set of commands that exercise the shell: state kept on the
  session instance, free-text arguments, every flag kind, and nested
  sessions through `interactive`.
- `echo_handle`, the natural-language handler for lines that are not
  commands.

Usage:
    $ replkit                      # start a session
    $ replkit process notes.txt --format yaml --tags a b
    > count
    > add Buy milk
    > /process notes.txt -v --config mode:fast --output out.json
    > what is this?                # sent to echo_handle
"""

from dataclasses import dataclass, field
from typing import Any, Final, Optional
from rich.console import Console
from rich.markup import escape
import click
from replkit.commands.base import KEY_VALUE, RichGroup, ShellCommand, rich_help
from replkit.commands.interactive import interactive_command
from replkit.lib.log import LOG

console: Console = Console()

DISPLAY_TITLE: Final[
    str
] = """
█▀█ █▀▀ █▀█ █   █▄▀ █ ▀█▀
█▀▄ ██▄ █▀▀ █▄▄ █ █ █  █
"""


@dataclass
class AppState:
    """Per-session state handed to every command as `ctx.obj`."""

    counter: int = 0
    notes: list[str] = field(default_factory=list)
    said: int = 0


def echo_handle(line: str, state: Any) -> None:
    """Echo natural-language input back, counting lines per session."""
    if isinstance(state, AppState):
        state.said += 1
    console.print(f"[magenta]You said:[/magenta] {escape(line)}")


@click.group(
    name="replkit",
    cls=RichGroup,
    invoke_without_command=True,
    help="""
    replkit demo

    Run without a command to start an interactive session.
    """,
)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """
    The root Click command group for replkit.
    """
    if ctx.invoked_subcommand is None:
        console.print(DISPLAY_TITLE)
        ctx.invoke(ctx.command.commands["interactive"])


# Explicitly annotate `cli` as `click.Group` for static type checking
cli: click.Group = cli


@cli.command(
    cls=ShellCommand,
    short_help="Greet someone",
    help=rich_help(
        command="hello",
        description="Greet someone by name",
        usage="/hello NAME [--shout]",
        args={"NAME": "who to greet", "--shout, -s": "greet loudly"},
    ),
)
@click.argument("name")
@click.option("--shout", "-s", is_flag=True, help="Greet loudly")
def hello(name: str, shout: bool) -> str:
    """
    Greet `name`.
    """
    greeting: str = f"Hello, {name}!"
    if shout:
        greeting = greeting.upper()
    console.print(f"[green]{escape(greeting)}[/green]")
    return greeting


@cli.command(
    cls=ShellCommand,
    short_help="Increment the session counter",
    help=rich_help(
        command="count",
        description="Increment a counter kept for the whole session",
        usage="/count",
        args={"<None>": "no arguments"},
    ),
)
@click.pass_obj
def count(state: Optional[AppState]) -> int:
    if state is None:
        console.print("[yellow]count keeps state only inside a session[/yellow]")
        return 0
    state.counter += 1
    console.print(f"Count: {state.counter}")
    return state.counter


@cli.command(
    cls=ShellCommand,
    free_text=True,
    short_help="Add a note",
    help=rich_help(
        command="add",
        description="Add a note; the rest of the line is the note",
        usage="/add TEXT",
        args={"TEXT": "note text, quotes and all"},
    ),
)
@click.argument("text", nargs=-1, required=True)
@click.pass_obj
def add(state: Optional[AppState], text: tuple[str, ...]) -> str:
    if not text:
        raise click.UsageError("Missing argument 'TEXT'.")
    note: str = " ".join(text)
    if state is not None:
        state.notes.append(note)
    LOG(f"Note added: {note!r}")
    console.print(f"[green]Added:[/green] {escape(note)}")
    return note


@cli.command(
    cls=ShellCommand,
    short_help="List notes",
    help=rich_help(
        command="notes",
        description="List the notes added this session",
        usage="/notes [--clear]",
        args={"--clear": "forget all notes after listing them"},
    ),
)
@click.option("--clear", is_flag=True, help="Forget all notes after listing them")
@click.pass_obj
def notes(state: Optional[AppState], clear: bool) -> list[str]:
    items: list[str] = list(state.notes) if state is not None else []
    if not items:
        console.print("[yellow]No notes yet.[/yellow]")
    for index, note in enumerate(items, start=1):
        console.print(f"  {index}. {escape(note)}")
    if clear and state is not None:
        state.notes.clear()
    return items


@cli.command(
    cls=ShellCommand,
    short_help="Process a file",
    help=rich_help(
        command="process",
        description="Pretend to process a file, echoing the options received",
        usage="/process FILE [-v] [--format F] [--limit N] [--tags T...] "
        "[--config K:V...] [--output PATH]",
        args={
            "FILE": "file to process",
            "--verbose, -v": "verbose output",
            "--format": "json, xml or yaml",
            "--limit": "maximum number of records",
            "--tags": "one or more tags",
            "--config": "key:value settings",
            "--output, -o": "where to write the result",
        },
    ),
)
@click.argument("file", type=click.Path())
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["json", "xml", "yaml"]),
    default="json",
    help="Output format",
)
@click.option("--limit", type=int, help="Maximum number of records")
@click.option("--tags", multiple=True, help="Tags to attach")
@click.option("--config", type=KEY_VALUE, multiple=True, help="key:value settings")
@click.option("--output", "-o", type=click.Path(), help="Where to write the result")
def process(
    file: str,
    verbose: bool,
    fmt: str,
    limit: Optional[int],
    tags: tuple[str, ...],
    config: Any,
    output: Optional[str],
) -> dict[str, Any]:
    """
    Echo back what was received, as a summary dict.
    """
    summary: dict[str, Any] = {
        "file": file,
        "format": fmt,
        "verbose": verbose,
        "limit": limit,
        "tags": list(tags),
        "config": dict(config),
        "output": output,
    }
    console.print(f"Processing [cyan]{escape(file)}[/cyan] as {fmt}")
    if verbose:
        for key, value in summary.items():
            console.print(f"  {key}: {escape(str(value))}")
    return summary


cli.add_command(
    interactive_command(cli, state_factory=AppState, default_handler=echo_handle)
)

# Export the `cli` group for use in other modules
cli_group: click.Group = cli
