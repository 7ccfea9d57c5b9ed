"""
Data Reference Tokenizer

Splits what follows the fieldspec of a MARCspec into subfield tokens and the
bracketed subspec groups that belong to them.

Input:  $a{$b=\\x}{$c}$d-f{?$g}
Output: [DataRef('$a', ['{$b=\\x}', '{$c}']), DataRef('$d-f', ['{?$g}'])]

A '{', '}' or '$' directly after '$' or a backslash is a literal character,
not structure: ${ is the subfield code '{', \\} is a literal bracket.
"""

import string
from dataclasses import dataclass, field
from typing import List, Optional

from .exceptions import Component, ErrorKind, InvalidMARCspecError, check_if_string

ESCAPE_CHARS = ('$', '\\')

SUBFIELD_CLASSES = (string.ascii_lowercase, string.ascii_uppercase, string.digits)


@dataclass
class DataRef:
    """A subfield token and its subspec groups.

    ``subfield`` is None for groups written directly after the fieldspec;
    those belong to the field.
    """
    subfield: Optional[str] = None
    subspecs: List[str] = field(default_factory=list)

    @property
    def is_range(self) -> bool:
        return self.subfield is not None and self.subfield.find('-') == 2


def parse_data_ref(arg: str) -> List[DataRef]:
    """Tokenize the subfield and subspec part of a MARCspec."""
    check_if_string(arg)

    refs: List[DataRef] = []
    current: Optional[DataRef] = None
    group: List[str] = []
    depth = 0

    for i, char in enumerate(arg):
        escaped = i > 0 and arg[i - 1] in ESCAPE_CHARS

        if depth > 0:
            group.append(char)
            if char == '{' and not escaped:
                depth += 1
            elif char == '}' and not escaped:
                depth -= 1
                if depth == 0:
                    current.subspecs.append("".join(group))
                    group = []
            continue

        if char == '{' and not escaped:
            if current is None:
                current = DataRef()
                refs.append(current)
            depth = 1
            group = [char]
        elif char == '}' and not escaped:
            raise InvalidMARCspecError(Component.MS, ErrorKind.BRACKET, arg)
        elif char == '$' and not escaped:
            current = DataRef(subfield=char)
            refs.append(current)
        elif current is None or current.subfield is None:
            raise InvalidMARCspecError(Component.SF, ErrorKind.PREFIX, arg)
        else:
            current.subfield += char

    if depth != 0:
        raise InvalidMARCspecError(Component.MS, ErrorKind.BRACKET, arg)

    return refs


def expand_subfield_range(arg: str) -> List[str]:
    """Expand a subfield range like ``a-c`` into ``['$a', '$b', '$c']``."""
    check_if_string(arg)
    if len(arg) != 3:
        raise InvalidMARCspecError(Component.SF, ErrorKind.LENGTH3, arg)

    start, end = arg[0], arg[2]
    if arg[1] != '-' or not any(start in chars and end in chars for chars in SUBFIELD_CLASSES):
        raise InvalidMARCspecError(Component.SF, ErrorKind.RANGE, arg)

    step = 1 if end >= start else -1
    return ['$' + chr(code) for code in range(ord(start), ord(end) + step, step)]
