"""
Line reading for the interactive shell.

The shell only needs a blocking "read one line" primitive that reports end
of input and Ctrl-C as values, accepts a completion callback, and can be
seeded with history. `LineReader` is that contract; `PromptReader`
implements it over prompt_toolkit.

Reads never raise for the two expected signals:
- Ctrl-D / end of input  -> ReadOutcome(kind=EOF)
- Ctrl-C at the prompt   -> ReadOutcome(kind=INTERRUPTED)
"""

from typing import Callable, Optional, Protocol, Self, runtime_checkable
from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from replkit.lib.completion import ShellCompleter
from replkit.lib.log import LOG
from replkit.models.dataModel import ReadKind, ReadOutcome

CompleteFn = Callable[[str, str], list[str]]


@runtime_checkable
class LineReader(Protocol):
    """Protocol for the shell's line-reading primitive."""

    def line_read(self: Self, prompt: str) -> ReadOutcome:
        """Block until a line, end of input, or an interrupt.

        Args:
            prompt: Prompt text to show

        Returns:
            ReadOutcome describing what happened
        """
        ...

    def completer_set(self: Self, complete: CompleteFn) -> None:
        """Install `complete(text_before_cursor, token) -> candidates`."""
        ...

    def history_seed(self: Self, lines: list[str]) -> None:
        """Make previously saved lines available for recall, oldest first."""
        ...


class PromptReader:
    """LineReader over a prompt_toolkit PromptSession with in-memory history."""

    def __init__(self, session: Optional[PromptSession] = None) -> None:
        self.session: PromptSession = session or PromptSession(
            history=InMemoryHistory(),
            enable_history_search=True,
            complete_while_typing=False,
        )

    def line_read(self, prompt: str) -> ReadOutcome:
        try:
            text: str = self.session.prompt(prompt)
        except KeyboardInterrupt:
            return ReadOutcome(kind=ReadKind.INTERRUPTED)
        except EOFError:
            return ReadOutcome(kind=ReadKind.EOF)
        return ReadOutcome(kind=ReadKind.LINE, text=text)

    def completer_set(self, complete: CompleteFn) -> None:
        self.session.completer = ShellCompleter(complete)

    def history_seed(self, lines: list[str]) -> None:
        for line in lines:
            self.session.history.append_string(line)
        LOG(f"Seeded {len(lines)} history lines")
