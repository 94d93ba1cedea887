"""
Parser package for replkit command lines.

Provides shell-style tokenizing of raw lines and GNU-style flag parsing of
the resulting tokens against a command's flag specs.
"""

from .tokenizer import tokenize, tokenize_safe
from .flags import flag_like, flags_parse, flags_serialize, number_convert

__all__ = [
    "tokenize",
    "tokenize_safe",
    "flag_like",
    "flags_parse",
    "flags_serialize",
    "number_convert",
]
