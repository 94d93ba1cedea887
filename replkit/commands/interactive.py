"""
The `interactive` verb.

`interactive_command(group)` builds a click command that starts a session
over `group`'s commands. Add it to the group itself and the verb works both
from the command line and from inside a session, where it starts a nested
session if nesting is allowed:

    cli.add_command(interactive_command(cli, state_factory=AppState))

    $ app interactive --prompt "app> " --history-file ~/.app_history
"""

from types import SimpleNamespace
from typing import Any, Callable, Optional
from rich.console import Console
import click
from replkit.commands.base import ShellCommand, rich_help
from replkit.config.settings import appsettings
from replkit.lib.input import LineReader
from replkit.lib.registry import CommandRegistry
from replkit.lib.repl import Shell
from replkit.lib.router import DefaultHandler
from replkit.lib.session import session_context

console: Console = Console()


def interactive_command(
    group: click.Group,
    state_factory: Callable[[], Any] = SimpleNamespace,
    default_handler: Optional[DefaultHandler] = None,
    reader_factory: Optional[Callable[[], LineReader]] = None,
    name: str = "interactive",
) -> click.Command:
    """Build the `interactive` command for a click group.

    :param group: Group whose commands the session offers.
    :param state_factory: Builds each session's persistent instance.
    :param default_handler: Receives natural-language lines.
    :param reader_factory: Builds the line reader; prompt_toolkit by default.
    :param name: Command name.
    :return: The click command.
    """

    @click.command(
        name=name,
        cls=ShellCommand,
        short_help="Start an interactive REPL for this application",
        help=rich_help(
            command=name,
            description="Start an interactive REPL for this application.",
            usage=f"{name} [--prompt TEXT] [--history-file PATH]",
            args={
                "--prompt": "Custom prompt for the REPL",
                "--history-file": "Custom history file location",
            },
        ),
    )
    @click.option("--prompt", type=str, help="Custom prompt for the REPL")
    @click.option(
        "--history-file",
        type=click.Path(dir_okay=False),
        help="Custom history file location",
    )
    def interactive(prompt: Optional[str], history_file: Optional[str]) -> None:
        if session_context.active and not appsettings.allowNested:
            console.print("[yellow]Already in an interactive session.[/yellow]")
            console.print(
                "To allow nested sessions, set [white]RPL_ALLOWNESTED=true[/white]"
            )
            return

        Shell(
            CommandRegistry(group),
            state_factory=state_factory,
            default_handler=default_handler,
            prompt=prompt,
            history_file=history_file,
            reader=reader_factory() if reader_factory else None,
        ).run()

    return interactive
