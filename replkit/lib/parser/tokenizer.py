"""
Shell-style tokenizer for command lines.

Splits a raw line on whitespace using POSIX shell-word rules: single and
double quotes group words, backslash escapes the next character. Malformed
quoting never blocks a command: `tokenize_safe` falls back to splitting on
whitespace.

Example:
    tokenize('process "my file.txt" --tags a b')
    -> ['process', 'my file.txt', '--tags', 'a', 'b']
"""

import shlex
from replkit.lib.errors import TokenizeError
from replkit.lib.log import LOG


def tokenize(line: str) -> list[str]:
    """Split a line into shell words.

    Args:
        line: Raw input text

    Returns:
        List of tokens with quoting removed

    Raises:
        TokenizeError: On an unterminated quote or dangling escape
    """
    try:
        return shlex.split(line, posix=True)
    except ValueError as e:
        raise TokenizeError(f"Cannot parse '{line}': {e}") from e


def tokenize_safe(line: str) -> list[str]:
    """Split a line into shell words, falling back to a whitespace split."""
    try:
        return tokenize(line)
    except TokenizeError as e:
        LOG(f"{e}; falling back to whitespace split")
        return line.split()
