"""
Comparison Strings

Literal strings used as one side of a subspec comparison.
In spec text a comparison string is prefixed with a backslash; whitespace is
written as ``\\s`` and characters with a meaning in MARCspec are escaped with
a backslash.
"""

import re
from typing import Dict

from .exceptions import Component, ErrorKind, InvalidMARCspecError, check_if_string

# Backslash first so the escapes added for the others are not doubled
SPECIAL_CHARS = ['\\', '{', '}', '!', '=', '~', '?', '|']

WHITESPACE_PATTERN = re.compile(r'\s')
ESCAPE_PATTERN = re.compile(r'\\(.)')


class ComparisonString:
    """Immutable wrapper around the raw (still escaped) text of a comparison string."""

    def __init__(self, raw: str):
        check_if_string(raw)
        if WHITESPACE_PATTERN.search(raw):
            raise InvalidMARCspecError(Component.CS, ErrorKind.SPACE, raw)
        self._raw = raw

    @property
    def raw(self) -> str:
        return self._raw

    @property
    def comparable(self) -> str:
        """The text to compare against, with escapes resolved."""
        return ESCAPE_PATTERN.sub(
            lambda match: ' ' if match.group(1) == 's' else match.group(1),
            self._raw
        )

    @staticmethod
    def escape(value: str) -> str:
        """Escape a plain string so it can be used as a comparison string."""
        check_if_string(value)
        for char in SPECIAL_CHARS:
            value = value.replace(char, '\\' + char)
        return value.replace(' ', '\\s')

    def to_dict(self) -> Dict[str, str]:
        return {"comparison_string": self._raw}

    def __eq__(self, other) -> bool:
        if not isinstance(other, ComparisonString):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(self._raw)

    def __repr__(self) -> str:
        return f"ComparisonString({self._raw!r})"

    def __str__(self) -> str:
        return '\\' + self._raw
