"""
Tab completion for the interactive shell.

Given the text before the cursor and the token being typed, proposes:
- command names, when the line starts with the command marker and the
  first word is still being typed;
- filesystem paths, when the token looks like a path, follows a flag that
  takes a path (also in the attached `--flag=value` form), or is a plain
  argument of a known command;
- flag names of the command, when the token starts with a dash.

Free text (natural language) gets no completions. Nothing is cached: the
registry and the filesystem are read again on every call.
"""

import glob
import os
import re
from typing import Callable, Final, Iterable, Optional
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document
from replkit.config.settings import EXIT_COMMANDS, HELP_COMMAND
from replkit.lib.registry import DEFAULT_PATH_FLAGS, CommandRegistry
from replkit.models.dataModel import CommandSpec

COMMON_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {
        "txt", "md", "rst", "log", "csv", "tsv", "json", "yaml", "yml", "toml",
        "ini", "cfg", "conf", "xml", "html", "css", "js", "ts", "py", "rb",
        "sh", "c", "h", "cpp", "go", "rs", "java", "sql", "pdf", "png", "jpg",
        "gif", "zip", "gz", "tar",
    }
)
EXTENSION_RE: Final[re.Pattern[str]] = re.compile(r"\.([A-Za-z0-9]{1,5})$")


def path_like(token: str) -> bool:
    """Return whether a token looks like a filesystem path."""
    if not token or token.startswith("-"):
        return False
    if token == "~" or token.startswith(("/", "~/", "./", "../")):
        return True
    if "/" in token:
        return True
    match: Optional[re.Match[str]] = EXTENSION_RE.search(token)
    return bool(match and match.group(1).lower() in COMMON_EXTENSIONS)


def path_complete(token: str) -> list[str]:
    """List filesystem entries starting with `token`.

    Directories get a trailing `/`, spaces are backslash-escaped, and each
    match keeps the style it was typed in (`~/`, `./`, absolute or bare).
    """
    raw: str = token.replace("\\ ", " ")
    home: str = os.path.expanduser("~")
    expanded: str = os.path.expanduser(raw) if raw.startswith("~") else raw

    directory, base = os.path.split(expanded)
    pattern: str = glob.escape(base) + "*"
    if directory:
        pattern = os.path.join(glob.escape(directory), pattern)

    results: set[str] = set()
    for match in glob.glob(pattern):
        if os.path.basename(match) in (".", ".."):
            continue
        rendered: str = match
        if os.path.isdir(match) and not rendered.endswith("/"):
            rendered += "/"
        if raw.startswith("~") and rendered.startswith(home):
            rendered = "~" + rendered[len(home) :]
        results.add(rendered.replace(" ", "\\ "))
    return sorted(results)


def flag_complete(spec: Optional[CommandSpec], token: str) -> list[str]:
    """Long and short flag names of a command starting with `token`."""
    if spec is None:
        return []
    candidates: set[str] = set()
    for flag in spec.flags:
        candidates.add(flag.long)
        if flag.short:
            candidates.add(flag.short)
    return sorted(c for c in candidates if c.startswith(token))


def after_path_flag(preposing: str, spec: Optional[CommandSpec] = None) -> bool:
    """Return whether the token being typed is the value of a path flag."""
    if not preposing or not preposing[-1].isspace():
        return False
    words: list[str] = preposing.split()
    if not words:
        return False
    path_flags: Iterable[str] = spec.path_flags if spec else DEFAULT_PATH_FLAGS
    return words[-1] in path_flags


class CompletionEngine:
    """Proposes completions from the registry and the filesystem.

    Attributes:
        registry: Command registry to complete names and flags from
        marker: Prefix marking an explicit command
        builtins: Names offered alongside registry commands
    """

    def __init__(
        self,
        registry: CommandRegistry,
        marker: str = "/",
        builtins: Iterable[str] = (*EXIT_COMMANDS, HELP_COMMAND),
    ) -> None:
        self.registry: CommandRegistry = registry
        self.marker: str = marker
        self.builtins: tuple[str, ...] = tuple(builtins)

    def command_complete(self, prefix: str) -> list[str]:
        """Command names (registry and builtins) starting with `prefix`."""
        names: set[str] = set(self.registry.names()) | set(self.builtins)
        return sorted(name for name in names if name.startswith(prefix))

    def complete(self, text_before_cursor: str, current_token: str) -> list[str]:
        """Return sorted, duplicate-free candidates for `current_token`.

        Args:
            text_before_cursor: The whole line up to the cursor
            current_token: The word being completed (may be empty)
        """
        preposing: str = text_before_cursor
        if current_token and text_before_cursor.endswith(current_token):
            preposing = text_before_cursor[: -len(current_token)]
        head: str = preposing.lstrip()
        line: str = text_before_cursor.lstrip()

        if line.startswith(self.marker) and head.strip() in ("", self.marker):
            if current_token.startswith(self.marker):
                prefix: str = current_token[len(self.marker) :]
                return [self.marker + n for n in self.command_complete(prefix)]
            return self.command_complete(current_token)

        words: list[str] = head.split()
        if not words:
            return []
        command: str = words[0]
        if command.startswith(self.marker):
            command = command[len(self.marker) :]
        spec: Optional[CommandSpec] = self.registry.lookup(command)
        if spec is None:
            return []

        if path_like(current_token):
            return path_complete(current_token)
        if after_path_flag(preposing, spec):
            return path_complete(current_token)
        flag, sep, value = current_token.partition("=")
        if sep and flag in spec.path_flags:
            return [f"{flag}={match}" for match in path_complete(value)]
        if current_token.startswith("-"):
            return flag_complete(spec, current_token)
        return path_complete(current_token)


class ShellCompleter(Completer):
    """prompt_toolkit completer replacing the WORD before the cursor."""

    def __init__(self, complete: Callable[[str, str], list[str]]) -> None:
        self.complete: Callable[[str, str], list[str]] = complete

    def get_completions(self, document: Document, complete_event: CompleteEvent):
        token: str = document.get_word_before_cursor(WORD=True)
        for candidate in self.complete(document.text_before_cursor, token):
            yield Completion(candidate, start_position=-len(token))
