"""
Command invocation for the interactive shell.

Resolves a command name, decides how to split the rest of the line, parses
flags, and runs the command against the session's persistent instance.
Every failure is classified, reported as one line, and returned as an
`InvocationOutcome`; nothing raised by a command escapes to the session loop
except a Ctrl-C, which is reported and returned the same way.

Calling conventions:
- Free-text commands receive everything after the command name as a single
  argument, untouched ("add Buy milk" -> add("Buy milk")).
- Other commands get shell-style tokens; when the command declares flags the
  tokens go through the flag parser first, and a parse error means the
  command is not run at all.
- Groups get their tokens untouched; click parses the group's options and
  the chosen subcommand's.
"""

from typing import Any, Final, Optional
import click
from rich.console import Console
from rich.markup import escape
from replkit.config.settings import appsettings
from replkit.lib.errors import (
    ArgumentCountError,
    CommandRuntimeError,
    FlagParseError,
    ProcessExitRequest,
    UnknownCommandError,
)
from replkit.lib.log import LOG
from replkit.lib.parser import flags_parse, tokenize_safe
from replkit.lib.registry import CommandRegistry
from replkit.models.dataModel import (
    CommandSpec,
    InvocationOutcome,
    OutcomeKind,
    ParsedInvocation,
)

console: Final[Console] = Console()


class CommandInvoker:
    """Runs registry commands against one persistent instance.

    Attributes:
        registry: Where commands are looked up
        instance: The object every command of the session runs against
        marker: Command marker, used in hints
    """

    def __init__(self, registry: CommandRegistry, instance: Any, marker: str = "/") -> None:
        self.registry: CommandRegistry = registry
        self.instance: Any = instance
        self.marker: str = marker

    def invocation_parse(self, spec: CommandSpec, remainder: str) -> ParsedInvocation:
        """Turn the text after a command name into positionals and flags.

        Raises:
            FlagParseError: If a non-group command declares flags and they do
                not parse
        """
        if spec.free_text:
            positionals: list[str] = [remainder] if remainder else []
            return ParsedInvocation(command=spec.name, positionals=positionals)

        tokens: list[str] = tokenize_safe(remainder)
        if spec.subcommands or not spec.flags:
            return ParsedInvocation(command=spec.name, positionals=tokens)

        positionals, flags = flags_parse(tokens, spec)
        return ParsedInvocation(command=spec.name, positionals=positionals, flags=flags)

    def invoke(self, name: str, remainder: str = "") -> InvocationOutcome:
        """Resolve, parse and run one command.

        Args:
            name: Command name (marker already stripped)
            remainder: Raw text after the command name

        Returns:
            InvocationOutcome classifying the result
        """
        spec: Optional[CommandSpec] = self.registry.lookup(name)
        if spec is None:
            return self._report(
                OutcomeKind.UNKNOWN_COMMAND,
                name,
                f"Unknown command: '{name}'. Type '{self.marker}help' for available commands.",
            )

        try:
            parsed: ParsedInvocation = self.invocation_parse(spec, remainder.strip())
        except FlagParseError as e:
            LOG(f"Flag parsing failed for {name}: {e}")
            return self._report(OutcomeKind.USAGE_ERROR, name, f"Error: {e}")

        LOG(f"Invoking {parsed.command} {parsed.positionals} {parsed.flags}")
        try:
            result: Any = self.registry.invoke(
                self.instance, parsed.command, parsed.positionals, parsed.flags
            )
        except (ArgumentCountError, click.UsageError) as e:
            message: str = e.format_message() if isinstance(e, click.UsageError) else str(e)
            return self._report(
                OutcomeKind.USAGE_ERROR,
                name,
                f"Error: {message} Try: {self.marker}help {name}",
            )
        except UnknownCommandError as e:
            return self._report(OutcomeKind.UNKNOWN_COMMAND, name, str(e))
        except click.exceptions.Exit as e:
            return self._exit_report(name, ProcessExitRequest(e.exit_code))
        except SystemExit as e:
            return self._exit_report(name, ProcessExitRequest(e.code))
        except click.Abort:
            return self._report(OutcomeKind.INTERRUPTED, name, "Aborted!")
        except KeyboardInterrupt:
            return self._report(OutcomeKind.INTERRUPTED, name, f"{name}: interrupted")
        except click.ClickException as e:
            return self._report(OutcomeKind.RUNTIME_ERROR, name, f"Error: {e.format_message()}")
        except Exception as e:
            error: CommandRuntimeError = CommandRuntimeError(name, e)
            LOG(f"Command {name} raised {type(e).__name__}: {error}")
            if appsettings.debug_mode:
                console.print_exception()
            return self._report(OutcomeKind.RUNTIME_ERROR, name, f"Error: {error.cause}")

        return InvocationOutcome(kind=OutcomeKind.OK, command=name, result=result)

    def _exit_report(self, name: str, request: ProcessExitRequest) -> InvocationOutcome:
        if request.code == 0:
            message: str = (
                "Command completed successfully "
                "(would have exited with code 0 in CLI mode)"
            )
        else:
            message = f"Command failed with exit code {request.code}"
        outcome: InvocationOutcome = self._report(OutcomeKind.EXIT_REQUEST, name, message)
        outcome.exit_code = request.code
        return outcome

    def _report(self, kind: OutcomeKind, name: str, message: str) -> InvocationOutcome:
        style: str = "bold red" if kind != OutcomeKind.EXIT_REQUEST else "yellow"
        console.print(f"[{style}]{escape(message)}[/{style}]")
        return InvocationOutcome(kind=kind, command=name, message=message)
