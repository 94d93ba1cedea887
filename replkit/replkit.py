"""
replkit Main Module.

This module serves as the main entry point for replkit, an interactive shell
layered over a Click command group.

Features:
- Runs any command of the group directly from the command line
- Starts an interactive session when run without a command
- Reports the version with -V / --version

Examples:
    Start a session:
        $ replkit

    Run one command without a session:
        $ replkit hello world

    Custom prompt and history file:
        $ replkit interactive --prompt "demo> " --history-file ~/.demo_history

Note:
    Settings come from RPL_* environment variables or the JSON config file
    under the user config directory, see replkit.config.settings.
"""

from typing import Final
from rich.console import Console
import click
from replkit.commands.app import cli_group
from replkit.lib.log import LOG

__version__: Final[str] = "0.1.0"

console: Final[Console] = Console()

cli: click.Group = click.version_option(
    __version__, "-V", "--version", prog_name="replkit"
)(cli_group)


def main() -> None:
    """Main entry point for the `replkit` console script."""
    try:
        cli(prog_name="replkit")
    except KeyboardInterrupt:
        LOG("Interrupted at top level")
        console.print("\n[bold cyan]Program interrupted by user. Exiting.[/bold cyan]")


if __name__ == "__main__":
    main()
