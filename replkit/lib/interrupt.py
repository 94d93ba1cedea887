"""
Ctrl-C handling for the interactive shell.

A single interrupt at the prompt never exits: it records when it happened
and, depending on the configured behavior, clears the line with a hint,
shows a help reminder, or stays silent. A second interrupt within the
timeout window exits. The recorded time is cleared on exit and whenever a
line is read successfully, so an interrupt long ago never pairs with a
later one and a third interrupt starts a fresh window.
"""

import time
from typing import Callable, Final, Optional
from rich.console import Console
from replkit.lib.log import LOG
from replkit.models.dataModel import InterruptBehavior

console: Final[Console] = Console()

DEFAULT_TIMEOUT: Final[float] = 0.5


class InterruptPolicy:
    """Decides whether an interrupt at the prompt ends the session.

    Attributes:
        behavior: What a single interrupt shows
        timeout: Seconds within which a second interrupt exits
        last_interrupt: Clock reading of the pending interrupt, if any
    """

    def __init__(
        self,
        behavior: InterruptBehavior = InterruptBehavior.CLEAR_PROMPT,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.behavior: InterruptBehavior = InterruptBehavior(behavior)
        self.timeout: float = DEFAULT_TIMEOUT if timeout is None else timeout
        self.clock: Callable[[], float] = clock
        self.last_interrupt: Optional[float] = None

    def handle(self) -> bool:
        """Register an interrupt.

        Returns:
            bool: True if the session should exit
        """
        now: float = self.clock()
        if self.last_interrupt is not None and now - self.last_interrupt < self.timeout:
            LOG("Double interrupt; exiting session")
            self.last_interrupt = None
            return True

        self.last_interrupt = now
        if self.behavior == InterruptBehavior.CLEAR_PROMPT:
            console.print("^C")
            console.print(
                "[dim](Press Ctrl-C again quickly or Ctrl-D to exit)[/dim]"
            )
        elif self.behavior == InterruptBehavior.SHOW_HELP:
            console.print("^C - Interrupt")
            console.print(
                "[yellow]Press Ctrl-C again to exit, or type 'help' for commands[/yellow]"
            )
        return False

    def reset(self) -> None:
        """Forget the pending interrupt; called after every successful read."""
        self.last_interrupt = None
