"""
dataModel.py

This module defines the data models and schemas used throughout replkit.
The models leverage Pydantic for validation and type safety.

Features:
- Command and flag shapes as published by the command registry.
- The result of parsing one line against a command's flag spec.
- Line-reader outcomes (line, end of input, interrupt) as explicit values.
- Router actions and invoker outcomes.
- Session markers for nested-session bookkeeping.

Usage:
Import these models to validate and structure data used in the application.
"""

from enum import Enum
from typing import Any, Optional, Union
from pydantic import BaseModel, Field


class FlagKind(str, Enum):
    """
    Enum for the value shape a flag accepts.
    """

    BOOLEAN = "boolean"
    STRING = "string"
    NUMBER = "number"
    ARRAY = "array"
    MAP = "map"


class InterruptBehavior(str, Enum):
    """
    What a single Ctrl-C at the prompt shows the user.
    """

    CLEAR_PROMPT = "clear_prompt"
    SHOW_HELP = "show_help"
    SILENT = "silent"


class FlagSpec(BaseModel):
    """
    Model describing one flag a command accepts.

    Attributes:
        name (str): Long name without leading dashes, e.g. "dry-run".
        dest (str): Keyword the command callback receives the value under.
        kind (FlagKind): Value shape.
        alias (Optional[str]): Single-character short alias without the dash.
        default (Any): Value used when the flag is not given.
        choices (Optional[list[str]]): Allowed values, if restricted.
        required (bool): Whether the flag must be given.
        is_path (bool): Whether the flag's value is a filesystem path.
        help (Optional[str]): One-line description for help output.
    """

    name: str
    dest: str
    kind: FlagKind = FlagKind.STRING
    alias: Optional[str] = None
    default: Any = None
    choices: Optional[list[str]] = None
    required: bool = False
    is_path: bool = False
    help: Optional[str] = None

    @property
    def long(self) -> str:
        return f"--{self.name}"

    @property
    def short(self) -> Optional[str]:
        return f"-{self.alias}" if self.alias else None


class CommandSpec(BaseModel):
    """
    Model describing one invocable command.

    Attributes:
        name (str): Unique command key in the registry.
        required (list[str]): Names of required positional parameters, in order.
        optional (list[str]): Names of optional positional parameters, in order.
        variadic (Optional[str]): Name of the trailing variadic parameter, if any.
        flags (list[FlagSpec]): Declared flags, in declaration order.
        free_text (bool): Pass the rest of the line as one unparsed argument.
        path_flags (list[str]): Flag tokens (e.g. "--output", "-o") whose
            following value is a path, for completion.
        subcommands (list[str]): Subcommand names when the command is a group.
        help (str): Short help line.
        description (str): Full help text.
    """

    name: str
    required: list[str] = Field(default_factory=list)
    optional: list[str] = Field(default_factory=list)
    variadic: Optional[str] = None
    flags: list[FlagSpec] = Field(default_factory=list)
    free_text: bool = False
    path_flags: list[str] = Field(default_factory=list)
    subcommands: list[str] = Field(default_factory=list)
    help: str = ""
    description: str = ""

    def flag_find(self, token: str) -> Optional[FlagSpec]:
        """Return the flag matching a long (--name) or short (-x) token."""
        for flag in self.flags:
            if token == flag.long or (flag.short and token == flag.short):
                return flag
        return None


class ParsedInvocation(BaseModel):
    """
    One line resolved against a command: created per line, discarded after.

    Attributes:
        command (str): Command name.
        positionals (list[str]): Ordered positional arguments.
        flags (dict[str, Any]): Flag name to typed value.
    """

    command: str
    positionals: list[str] = Field(default_factory=list)
    flags: dict[str, Any] = Field(default_factory=dict)


class ReadKind(str, Enum):
    LINE = "line"
    EOF = "eof"
    INTERRUPTED = "interrupted"


class ReadOutcome(BaseModel):
    """Result of one blocking read from the line reader.

    Attributes:
        kind: A line was read, input ended, or the read was interrupted
        text: The line, for LINE outcomes
    """

    kind: ReadKind
    text: str = ""


class ActionKind(str, Enum):
    NOOP = "noop"
    INVOKE = "invoke"
    SHOW_HELP = "show_help"
    DEFAULT = "default"
    REJECT = "reject"


class NoopAction(BaseModel):
    kind: ActionKind = ActionKind.NOOP


class InvokeAction(BaseModel):
    """Run a command.

    Attributes:
        command: Command name as typed (marker stripped)
        remainder: Raw text after the command name, leading space removed
    """

    kind: ActionKind = ActionKind.INVOKE
    command: str
    remainder: str = ""


class HelpAction(BaseModel):
    kind: ActionKind = ActionKind.SHOW_HELP
    command: Optional[str] = None


class DefaultAction(BaseModel):
    """Forward the entire original line to the default handler."""

    kind: ActionKind = ActionKind.DEFAULT
    line: str


class RejectAction(BaseModel):
    kind: ActionKind = ActionKind.REJECT
    reason: str


Action = Union[NoopAction, InvokeAction, HelpAction, DefaultAction, RejectAction]


class OutcomeKind(str, Enum):
    OK = "ok"
    UNKNOWN_COMMAND = "unknown_command"
    USAGE_ERROR = "usage_error"
    RUNTIME_ERROR = "runtime_error"
    EXIT_REQUEST = "exit_request"
    INTERRUPTED = "interrupted"


class InvocationOutcome(BaseModel):
    """Result of one command invocation.

    Attributes:
        kind: Classification of how the invocation ended
        command: Command name
        message: The single line shown to the user, if any
        exit_code: Code of an intercepted exit request
        result: Whatever the command callback returned
    """

    kind: OutcomeKind
    command: str
    message: Optional[str] = None
    exit_code: Optional[int] = None
    result: Any = None

    @property
    def success(self) -> bool:
        return self.kind == OutcomeKind.OK


class SessionMarker(BaseModel):
    """Process-wide session markers as they were before a session started.

    Attributes:
        active: Whether an interactive session was already running
        depth: Nesting depth before entry
    """

    active: bool = False
    depth: int = 0
