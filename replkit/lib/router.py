"""
Input routing for the interactive shell.

Decides what a typed line means. Rules, first match wins:

1. Blank line                        -> Noop
2. Marker-prefixed line ("/cmd ...") -> Invoke, or ShowHelp for "/help [cmd]"
3. Bare line whose first word is a
   registered command ("cmd ...")    -> Invoke
4. "help" or "help <cmd>"            -> ShowHelp
5. Anything else, with a default
   handler configured                -> SendToDefaultHandler(entire line)
6. Anything else                     -> Reject, suggesting command syntax

A command line whose arguments contain "--help" shows that command's help
instead of running it, unless the command takes free text.

Example flow:
    /process notes.txt --limit 5  -> Invoke("process", "notes.txt --limit 5")
    help process                  -> ShowHelp("process")
    what time is it               -> SendToDefaultHandler("what time is it")
"""

from typing import Any, Callable, Optional
from replkit.config.settings import HELP_COMMAND
from replkit.lib.registry import CommandRegistry
from replkit.models.dataModel import (
    Action,
    CommandSpec,
    DefaultAction,
    HelpAction,
    InvokeAction,
    NoopAction,
    RejectAction,
)

DefaultHandler = Callable[[str, Any], Any]


def line_split(text: str) -> tuple[str, str]:
    """Split off the first whitespace-delimited word.

    Returns:
        Tuple of (first word, rest with leading whitespace removed)
    """
    parts: list[str] = text.strip().split(maxsplit=1)
    if not parts:
        return "", ""
    return parts[0], parts[1] if len(parts) > 1 else ""


class InputRouter:
    """Classifies raw lines into actions.

    Attributes:
        registry: Registered commands
        marker: Prefix marking an explicit command
        default_handler: Receives natural-language lines, if configured
    """

    def __init__(
        self,
        registry: CommandRegistry,
        marker: str = "/",
        default_handler: Optional[DefaultHandler] = None,
    ) -> None:
        self.registry: CommandRegistry = registry
        self.marker: str = marker
        self.default_handler: Optional[DefaultHandler] = default_handler

    def _command_route(self, command: str, remainder: str) -> Action:
        if command == HELP_COMMAND and command not in self.registry:
            topic, _ = line_split(remainder)
            return HelpAction(command=topic or None)
        spec: Optional[CommandSpec] = self.registry.lookup(command)
        if spec and not spec.free_text and "--help" in remainder.split():
            return HelpAction(command=command)
        return InvokeAction(command=command, remainder=remainder)

    def route(self, line: str) -> Action:
        """Classify one line.

        Args:
            line: Raw input as typed

        Returns:
            The action to take
        """
        stripped: str = line.strip()
        if not stripped:
            return NoopAction()

        if stripped.startswith(self.marker):
            command, remainder = line_split(stripped[len(self.marker) :])
            if not command:
                return NoopAction()
            return self._command_route(command, remainder)

        first, remainder = line_split(stripped)
        if first in self.registry:
            return self._command_route(first, remainder)

        if first.lower() == HELP_COMMAND:
            topic, _ = line_split(remainder)
            return HelpAction(command=topic or None)

        if self.default_handler is not None:
            return DefaultAction(line=line)

        return RejectAction(
            reason=(
                f"No default handler configured. Use {self.marker}command for commands, "
                f"or type '{self.marker}help' for available commands."
            )
        )
