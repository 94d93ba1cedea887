"""
GNU-style flag parser.

Parses a token list against a command's flag specs into positional
arguments and a map of typed flag values. Pure: no I/O, no side effects.

Supported forms:
    --name value     --name=value     -n value     -n=value
    --flag           --no-flag        -vq  (grouped boolean aliases)
    --tags a b c     (arrays consume until the next flag-looking token)
    --env K:V X:Y    (maps consume key:value pairs the same way)
    --               (everything after is positional)

A token "looks like a flag" when it starts with a dash, is not a lone "-",
and is not a signed number. Flag-looking tokens that match nothing are
collected and reported together; parsing never swallows a typo.
"""

import re
from typing import Any, Final, Optional
from replkit.lib.errors import (
    EnumFlagError,
    InvalidFlagValueError,
    MissingFlagError,
    UnknownFlagError,
)
from replkit.models.dataModel import CommandSpec, FlagKind, FlagSpec

NUMBER_RE: Final[re.Pattern[str]] = re.compile(
    r"^[-+]?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?$"
)
INTEGER_RE: Final[re.Pattern[str]] = re.compile(r"^[-+]?\d+$")
SHORT_GROUP_RE: Final[re.Pattern[str]] = re.compile(r"^-[A-Za-z0-9]{2,}$")

TRUE_WORDS: Final[frozenset[str]] = frozenset({"true", "yes", "on", "1"})
FALSE_WORDS: Final[frozenset[str]] = frozenset({"false", "no", "off", "0"})


def flag_like(token: str) -> bool:
    """Return whether a token would be read as a flag rather than a value."""
    return token.startswith("-") and token != "-" and not NUMBER_RE.match(token)


def number_convert(flag: FlagSpec, text: str) -> int | float:
    """Convert flag text to an int or float.

    Raises:
        InvalidFlagValueError: If the text is not numeric
    """
    if INTEGER_RE.match(text):
        return int(text)
    if NUMBER_RE.match(text):
        return float(text)
    raise InvalidFlagValueError(
        flag.long, f"Expected numeric value for '{flag.long}'; got \"{text}\""
    )


def _boolean_convert(flag: FlagSpec, text: str) -> bool:
    word: str = text.strip().lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    raise InvalidFlagValueError(
        flag.long, f"Expected boolean value for '{flag.long}'; got \"{text}\""
    )


def _choice_check(flag: FlagSpec, value: Any) -> None:
    if flag.choices and str(value) not in flag.choices:
        raise EnumFlagError(flag.long, str(value), flag.choices)


def _no_value(flag: FlagSpec) -> InvalidFlagValueError:
    return InvalidFlagValueError(
        flag.long, f"No value provided for option '{flag.long}'"
    )


def _short_group(token: str, spec: CommandSpec) -> Optional[list[FlagSpec]]:
    """Resolve `-vq` into its boolean flags, or None if it is not such a group."""
    if not SHORT_GROUP_RE.match(token):
        return None
    group: list[FlagSpec] = []
    for char in token[1:]:
        flag: Optional[FlagSpec] = spec.flag_find(f"-{char}")
        if flag is None or flag.kind != FlagKind.BOOLEAN:
            return None
        group.append(flag)
    return group


def _flag_consume(
    flag: FlagSpec,
    attached: Optional[str],
    negated: bool,
    tokens: list[str],
    index: int,
    flags: dict[str, Any],
) -> int:
    """Store one flag's value and return the index of the next unread token."""
    if flag.kind == FlagKind.BOOLEAN:
        if negated:
            flags[flag.name] = False
        elif attached is not None:
            flags[flag.name] = _boolean_convert(flag, attached)
        else:
            flags[flag.name] = True
        return index

    if flag.kind in (FlagKind.ARRAY, FlagKind.MAP):
        values: list[str] = [] if attached is None else [attached]
        while index < len(tokens) and not flag_like(tokens[index]):
            values.append(tokens[index])
            index += 1
        if not values:
            raise _no_value(flag)
        if flag.kind == FlagKind.ARRAY:
            for value in values:
                _choice_check(flag, value)
            flags.setdefault(flag.name, []).extend(values)
        else:
            entries: dict[str, str] = flags.setdefault(flag.name, {})
            for value in values:
                key, sep, item = value.partition(":")
                if not sep or not key:
                    raise InvalidFlagValueError(
                        flag.long,
                        f"Expected key:value pairs for '{flag.long}'; got \"{value}\"",
                    )
                entries[key] = item
        return index

    if attached is not None:
        text: str = attached
    else:
        if index >= len(tokens) or flag_like(tokens[index]):
            raise _no_value(flag)
        text = tokens[index]
        index += 1

    value: Any = number_convert(flag, text) if flag.kind == FlagKind.NUMBER else text
    _choice_check(flag, text)
    flags[flag.name] = value
    return index


def flags_parse(tokens: list[str], spec: CommandSpec) -> tuple[list[str], dict[str, Any]]:
    """Parse tokens against a command's flag specs.

    Args:
        tokens: Tokens after the command name
        spec: The command's spec

    Returns:
        Tuple of (positional arguments, flag name -> typed value). Flags not
        given but declared with a default carry that default.

    Raises:
        UnknownFlagError: Naming every unmatched flag-looking token
        InvalidFlagValueError: Missing or malformed value
        EnumFlagError: Value outside the allowed set
        MissingFlagError: A required flag was not given
    """
    positionals: list[str] = []
    flags: dict[str, Any] = {}
    unknown: list[str] = []

    index: int = 0
    while index < len(tokens):
        token: str = tokens[index]
        if token == "--":
            positionals.extend(tokens[index + 1 :])
            break
        if not flag_like(token):
            positionals.append(token)
            index += 1
            continue

        name, sep, value = token.partition("=")
        attached: Optional[str] = value if sep else None
        flag: Optional[FlagSpec] = spec.flag_find(name)
        negated: bool = False

        if flag is None and name.startswith("--no-") and attached is None:
            candidate: Optional[FlagSpec] = spec.flag_find(f"--{name[5:]}")
            if candidate and candidate.kind == FlagKind.BOOLEAN:
                flag, negated = candidate, True

        if flag is None and attached is None:
            group: Optional[list[FlagSpec]] = _short_group(name, spec)
            if group:
                for member in group:
                    flags[member.name] = True
                index += 1
                continue

        if flag is None:
            unknown.append(token)
            index += 1
            continue

        index = _flag_consume(flag, attached, negated, tokens, index + 1, flags)

    if unknown:
        raise UnknownFlagError(unknown)

    missing: list[str] = [f.long for f in spec.flags if f.required and f.name not in flags]
    if missing:
        raise MissingFlagError(missing)

    for flag in spec.flags:
        if flag.name not in flags and flag.default is not None:
            default: Any = flag.default
            if isinstance(default, (list, tuple)):
                default = list(default)
            elif isinstance(default, dict):
                default = dict(default)
            flags[flag.name] = default

    return positionals, flags


def flags_serialize(
    positionals: list[str], flags: dict[str, Any], spec: CommandSpec
) -> list[str]:
    """Render a parsed result back into canonical tokens.

    Flags come first in declaration order, each value attached with `=` so no
    value can be mistaken for a flag; positionals follow a `--` terminator.
    """
    tokens: list[str] = []
    for flag in spec.flags:
        if flag.name not in flags:
            continue
        value: Any = flags[flag.name]
        if flag.kind == FlagKind.BOOLEAN:
            tokens.append(flag.long if value else f"--no-{flag.name}")
        elif flag.kind == FlagKind.ARRAY:
            tokens.extend(f"{flag.long}={item}" for item in value)
        elif flag.kind == FlagKind.MAP:
            tokens.extend(f"{flag.long}={key}:{item}" for key, item in value.items())
        else:
            tokens.append(f"{flag.long}={value}")
    if positionals:
        tokens.append("--")
        tokens.extend(positionals)
    return tokens
