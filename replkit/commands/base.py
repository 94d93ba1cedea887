"""
Base classes for Rich-enhanced Click commands and groups.

This module defines:
- `RichGroup`: A custom Click group with Rich-enhanced help rendering.
- `RichCommand`: A custom Click command with Rich-enhanced help rendering.
- `ShellCommand`: A `RichCommand` carrying the hints the interactive shell
  reads when it builds its command table (free-text mode, path flags).
- `KEY_VALUE`: A parameter type for `key:value` options, read by the shell
  as a map flag.

These classes provide enhanced formatting and colorized output for CLI commands,
offering an improved user experience in terminal environments.
"""

from typing import Any, Optional
from rich.console import Console
from rich.panel import Panel
import click
from replkit.lib.log import LOG

console: Console = Console()


def rich_help(command: str, description: str, usage: str, args: dict) -> str:
    """
    Generate Rich-enhanced help text for commands.

    :param command: The command name.
    :param description: Description of the command.
    :param usage: Usage syntax for the command.
    :param args: Dictionary of arguments and their descriptions.
    :return: Formatted Rich help string.
    """
    help_text = f"[bold cyan]{description}[/bold cyan]\n\n"
    help_text += f"[bold yellow]Usage:[/bold yellow]\n    [green]{usage}[/green]\n\n"
    help_text += "[bold yellow]Arguments:[/bold yellow]\n"
    for arg, desc in args.items():
        help_text += f"    [green]{arg}[/green]: {desc}\n"
    return help_text


class KeyValueType(click.ParamType):
    """`key:value` pairs; use with `multiple=True` and read with `dict(value)`."""

    name = "key:value"

    def convert(
        self, value: Any, param: Optional[click.Parameter], ctx: Optional[click.Context]
    ) -> tuple[str, str]:
        if isinstance(value, tuple):
            return value
        key, sep, item = str(value).partition(":")
        if not sep or not key:
            self.fail(f"{value!r} is not a key:value pair", param, ctx)
        return key, item


KEY_VALUE: KeyValueType = KeyValueType()


class RichGroup(click.Group):
    """
    A Click Group that uses Rich for rendering help messages with enhanced colorization.
    """

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """
        Render the help message for the group using Rich with enhanced colorization.

        :param ctx: The Click context for the command group.
        :param formatter: The Click help formatter.
        """
        try:
            info_name: str = ctx.info_name or ""
            console.print(
                f"[bold yellow]Usage:[/bold yellow] [cyan]{info_name}[/cyan] "
                f"[magenta][OPTIONS] COMMAND [ARGS]...[/magenta]\n"
            )

            if self.help:
                console.print(f"[bold cyan]{self.help.strip()}[/bold cyan]\n")

            if self.commands:
                console.print("[bold green]Available Commands:[/bold green]")
                for name, command in self.commands.items():
                    console.print(
                        f"- [cyan]{name}[/cyan]: [white]{command.get_short_help_str() or 'No description available.'}[/white]"
                    )
                console.print()

            params = self.get_params(ctx)
            if params:
                console.print("[bold yellow]Options:[/bold yellow]")
                for param in params:
                    help_line: str = getattr(param, "help", None) or "No description"
                    console.print(f"- [cyan]{param.opts[0]}[/cyan]: {help_line}")
        except Exception as e:
            LOG(f"Help rendering error: {e}")
            console.print(f"[bold red]Help rendering error:[/bold red] {e}")


class RichCommand(click.Command):
    """
    A Click Command that uses Rich for rendering help messages.
    """

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """
        Render the help message for the command using Rich.

        :param ctx: The Click context for the command.
        :param formatter: The Click help formatter.
        """
        try:
            help_text = self.help or "No help text available."
            panel_width = max(len(line) for line in help_text.splitlines()) + 10
            panel_width = min(panel_width, 80)  # Cap the width to avoid excessive size
            panel = Panel(
                help_text, expand=False, width=panel_width, border_style="cyan"
            )
            console.print(panel)
        except Exception as e:
            LOG(f"Help rendering error: {e}")
            console.print(f"[bold red]Help rendering error:[/bold red] {e}")


class ShellCommand(RichCommand):
    """
    A RichCommand with explicit hints for the interactive shell.

    Attributes:
        free_text: True to receive everything after the command name as one
            unparsed argument; None lets the shell decide from the
            command's parameters.
        path_flags: Flag tokens whose value is a path (e.g. ["--into", "-t"]);
            None uses the shell's default list.
    """

    def __init__(
        self,
        *args: Any,
        free_text: Optional[bool] = None,
        path_flags: Optional[list[str]] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.free_text: Optional[bool] = free_text
        self.path_flags: Optional[list[str]] = path_flags
