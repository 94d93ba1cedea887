"""
REPL implementation for replkit.

This module provides the interactive session loop, managing:
- Session entry and exit (nesting depth, persistent instance, history)
- The read / classify / execute cycle
- Interrupt and end-of-input handling
- Help output
- Error containment: no command error ends a session

States:
    Idle -> ReadingLine -> Classifying -> Executing -> Idle ... -> Exited

Exits on:
- End of input (Ctrl-D)
- exit / quit / q, with or without the marker, any case
- Two Ctrl-C within the configured window
"""

from types import SimpleNamespace
from typing import Any, Callable, Final, Optional
from rich.console import Console
from rich.markup import escape
from replkit.config.settings import (
    App,
    EXIT_COMMANDS,
    NESTED_PROMPT_FORMAT,
    appsettings,
)
from replkit.lib.command import CommandInvoker
from replkit.lib.completion import CompletionEngine
from replkit.lib.history import history_load, history_save
from replkit.lib.input import LineReader, PromptReader
from replkit.lib.interrupt import InterruptPolicy
from replkit.lib.log import LOG
from replkit.lib.registry import CommandRegistry
from replkit.lib.router import DefaultHandler, InputRouter
from replkit.lib.session import SessionContext, session_context, sessionID_generate
from replkit.models.dataModel import (
    Action,
    ActionKind,
    ReadKind,
    ReadOutcome,
    SessionMarker,
)

console: Final[Console] = Console()


class Shell:
    """An interactive session over a command registry.

    Attributes:
        registry: Commands available in the session
        state_factory: Builds the persistent instance when the session starts
        default_handler: Receives natural-language lines, if configured
        prompt: Prompt for a top-level session
        history_file: Where history is loaded from and saved to
        reader: Line-reading primitive
        context: Process-wide session markers
        settings: Configuration
        instance: The persistent instance while a session runs, else None
        history: Lines read during this session, after any loaded ones
    """

    def __init__(
        self,
        registry: CommandRegistry,
        state_factory: Callable[[], Any] = SimpleNamespace,
        default_handler: Optional[DefaultHandler] = None,
        prompt: Optional[str] = None,
        history_file: Optional[str] = None,
        reader: Optional[LineReader] = None,
        context: Optional[SessionContext] = None,
        settings: Optional[App] = None,
    ) -> None:
        self.settings: App = settings or appsettings
        self.registry: CommandRegistry = registry
        self.state_factory: Callable[[], Any] = state_factory
        self.default_handler: Optional[DefaultHandler] = default_handler
        self.prompt: str = prompt or self.settings.prompt
        self.history_file: str = history_file or self.settings.history_file
        self.context: SessionContext = context or session_context
        self.marker: str = self.settings.commandMarker

        self.reader: LineReader = reader or PromptReader()
        self.completion: CompletionEngine = CompletionEngine(registry, self.marker)
        self.reader.completer_set(self.completion.complete)

        self.router: InputRouter = InputRouter(registry, self.marker, default_handler)
        self.interrupts: InterruptPolicy = InterruptPolicy(
            self.settings.ctrlCBehavior, self.settings.doubleCtrlCTimeout
        )

        self.instance: Any = None
        self.invoker: Optional[CommandInvoker] = None
        self.history: list[str] = []
        self.level: int = 0
        self.session_id: str = ""

    def exit_requested(self, line: Optional[str]) -> bool:
        """Return whether a read result ends the session (EOF or exit word)."""
        if line is None:
            return True
        word: str = line.strip().lower()
        if word.startswith(self.marker):
            word = word[len(self.marker) :].strip()
        return word in EXIT_COMMANDS

    def prompt_build(self, level: int) -> str:
        """Prompt for a session at `level` (1 is top level)."""
        if level <= 1:
            return self.prompt
        try:
            return self.settings.nestedPromptFormat.format(level=level, prompt=self.prompt)
        except (KeyError, IndexError, ValueError, AttributeError) as e:
            LOG(f"Bad nestedPromptFormat {self.settings.nestedPromptFormat!r}: {e!r}")
            return NESTED_PROMPT_FORMAT.format(level=level, prompt=self.prompt)

    def welcome_show(self) -> None:
        name: str = escape(self.registry.name)
        if self.level > 1:
            console.print(f"[cyan]{name} Interactive Shell (nested level {self.level})[/cyan]")
            console.print(
                "[green]Type [white]exit[/white] to return to previous level, "
                "or [white]help[/white] for commands[/green]"
            )
        else:
            console.print(f"[cyan]{name} Interactive Shell[/cyan]")
            console.print(
                "[green]Type [white]help[/white] for available commands, "
                "[white]exit[/white] to quit[/green]"
            )
        console.print()

    def help_show(self, command: Optional[str] = None) -> None:
        """Print help for one command, or the overview."""
        if command and command in self.registry:
            console.print(self.registry.help_render(command, self.marker))
            return

        marker: str = escape(self.marker)
        console.print(self.registry.help_render(None, self.marker))
        console.print()
        console.print("[bold green]Special commands:[/bold green]")
        console.print(f"  [cyan]{marker}help [COMMAND][/cyan]      Show help for command")
        exits: str = ", ".join(f"{self.marker}{word}" for word in EXIT_COMMANDS)
        console.print(f"  [cyan]{escape(exits)}[/cyan]     Exit the REPL")
        console.print()
        if self.default_handler is not None:
            console.print("[bold green]Natural language mode:[/bold green]")
            console.print(f"  Type anything without {marker} to use default handler")
        else:
            console.print(f"Use {marker}command syntax for all commands")

    def action_do(self, action: Action) -> None:
        """Execute a routed action."""
        if action.kind == ActionKind.NOOP:
            return
        if action.kind == ActionKind.INVOKE:
            if self.invoker is None:
                raise RuntimeError("Session is not running")
            self.invoker.invoke(action.command, action.remainder)
        elif action.kind == ActionKind.SHOW_HELP:
            self.help_show(action.command)
        elif action.kind == ActionKind.DEFAULT:
            self.default_send(action.line)
        elif action.kind == ActionKind.REJECT:
            console.print(f"[yellow]{escape(action.reason)}[/yellow]")

    def default_send(self, line: str) -> None:
        """Pass a natural-language line to the default handler."""
        if self.default_handler is None:
            return
        try:
            self.default_handler(line, self.instance)
        except Exception as e:
            LOG(f"Default handler failed: {e}")
            console.print(f"[bold red]Error in default handler:[/bold red] {escape(str(e))}")
            console.print(f"Input was: {escape(line)}")
            console.print(
                f"Try using {escape(self.marker)}commands or type "
                f"'{escape(self.marker)}help' for available commands."
            )

    def line_process(self, line: str) -> None:
        """Classify and execute one line."""
        action: Action = self.router.route(line)
        LOG(f"[{self.session_id}] {line!r} -> {action.kind.value}")
        self.action_do(action)

    def history_restore(self) -> None:
        lines: list[str] = history_load(self.history_file)
        self.history = list(lines)
        self.reader.history_seed(lines)

    def run(self) -> None:
        """Run the session until EOF, an exit word, or a double Ctrl-C.

        The persistent instance is created here and discarded on exit. The
        session markers are restored on the way out however the loop ends.
        """
        prior: SessionMarker = self.context.enter()
        self.level = prior.depth + 1
        self.session_id = sessionID_generate(str(self.level))
        try:
            self.instance = self.state_factory()
            self.invoker = CommandInvoker(self.registry, self.instance, self.marker)
            self.history_restore()
            self.interrupts.reset()
            self.welcome_show()
            self.loop()
            history_save(self.history_file, self.history, self.settings.historyLength)
            if prior.depth > 0:
                console.print("[bold cyan]Exiting nested session...[/bold cyan]")
            else:
                console.print("[bold cyan]Goodbye![/bold cyan]")
        finally:
            self.instance = None
            self.invoker = None
            self.context.exit(prior)

    def loop(self) -> None:
        display_prompt: str = self.prompt_build(self.level)
        while True:
            outcome: ReadOutcome = self.reader.line_read(display_prompt)

            if outcome.kind == ReadKind.EOF:
                console.print()
                break
            if outcome.kind == ReadKind.INTERRUPTED:
                if self.interrupts.handle():
                    break
                continue

            self.interrupts.reset()
            line: str = outcome.text
            if line.strip():
                self.history.append(line)
            if self.exit_requested(line):
                break
            if not line.strip():
                continue

            try:
                self.line_process(line)
            except KeyboardInterrupt:
                console.print("\n[yellow](Interrupted - press Ctrl+D or type 'exit' to quit)[/yellow]")
            except SystemExit as e:
                console.print(
                    f"[yellow]A command tried to exit with code {e.code}. "
                    "Staying in interactive mode.[/yellow]"
                )
            except Exception as e:
                LOG(f"Error in main loop: {e}")
                if self.settings.debug_mode:
                    console.print_exception()
                console.print(f"[bold red]Error in main loop:[/bold red] {escape(str(e))}")
