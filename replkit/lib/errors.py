"""
Exception types for replkit.

Every error here is local to one iteration of the session loop; none of them
ends a session. Tokenize errors are recovered by naive splitting, flag and
argument errors abort the invocation before the command runs, and runtime
errors and exit requests are reported after it.
"""

from typing import Iterable, Optional


class ReplkitError(Exception):
    """Base exception for replkit."""


class TokenizeError(ReplkitError, ValueError):
    """Raised when a line has malformed quoting."""


class UnknownCommandError(ReplkitError, LookupError):
    """Raised when a command name is not in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown command: '{name}'")
        self.name: str = name


class FlagParseError(ReplkitError, ValueError):
    """Base for errors found while parsing flags. The command is never run."""


class UnknownFlagError(FlagParseError):
    """Raised with every flag-looking token that matched no declared flag."""

    def __init__(self, tokens: Iterable[str]) -> None:
        self.tokens: list[str] = list(tokens)
        super().__init__(f"Unknown switches: {', '.join(self.tokens)}")


class InvalidFlagValueError(FlagParseError):
    """Raised when a flag's value is missing or has the wrong shape."""

    def __init__(self, flag: str, message: str) -> None:
        super().__init__(message)
        self.flag: str = flag


class MissingFlagError(FlagParseError):
    """Raised when a required flag was not given."""

    def __init__(self, flags: Iterable[str]) -> None:
        self.flags: list[str] = list(flags)
        super().__init__(
            f"No value provided for required options {', '.join(self.flags)}"
        )


class EnumFlagError(FlagParseError):
    """Raised when a flag's value is outside its allowed set."""

    def __init__(self, flag: str, value: str, choices: Iterable[str]) -> None:
        self.flag: str = flag
        self.choices: list[str] = list(choices)
        super().__init__(
            f"Expected '{flag}' to be one of {', '.join(self.choices)}; got {value}"
        )


class ArgumentCountError(ReplkitError, ValueError):
    """Raised when positionals do not fit the command's parameters."""


class CommandRuntimeError(ReplkitError, RuntimeError):
    """Wraps an exception raised by a command itself."""

    def __init__(self, command: str, cause: BaseException) -> None:
        super().__init__(f"{command}: {cause}")
        self.command: str = command
        self.cause: BaseException = cause


class ProcessExitRequest(ReplkitError):
    """A command tried to terminate the whole process."""

    def __init__(self, code: Optional[int]) -> None:
        self.code: int = code if isinstance(code, int) else (0 if code is None else 1)
        super().__init__(f"exit requested with code {self.code}")
