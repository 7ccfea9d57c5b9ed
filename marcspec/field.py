"""
Fieldspec

The field part of a MARCspec: a three character tag, an optional index and
either a character position/range or indicators.

Format:
- Tag only: 245, LDR, 00., 7..
- Index: 020[0], 300[0-1], 650[#]
- Character position or range: 008/35-37, LDR/6
- Indicators: 245_10, 856_4_
"""

import re
from typing import List, Optional

from .exceptions import Component, ErrorKind, InvalidMARCspecError, check_if_string
from .position import PositionOrRange, split_index
from .subspec import SubSpecEntry, subspec_entry_to_dict, subspec_entry_to_string


class Field:
    """Field reference with attachable subspecs."""

    TAG_PATTERN = re.compile(r'^(?:[0-9a-z.]{3}|[0-9A-Z.]{3})$')
    INDICATORS_PATTERN = re.compile(r'^[a-z0-9_]{1,2}$')
    WHITESPACE_PATTERN = re.compile(r'\s')

    def __init__(self, spec: str):
        check_if_string(spec)
        if len(spec) < 3:
            raise InvalidMARCspecError(Component.FS, ErrorKind.MINIMUM3, spec)
        if self.WHITESPACE_PATTERN.search(spec):
            raise InvalidMARCspecError(Component.FS, ErrorKind.SPACE, spec)

        self.tag = spec[:3]
        if not self.TAG_PATTERN.match(self.tag):
            raise InvalidMARCspecError(Component.FS, ErrorKind.TAG, spec)

        self.index, rest = split_index(spec[3:], Component.FS, spec)
        self.char_pos: Optional[PositionOrRange] = None
        self.indicators: Optional[str] = None

        if rest.startswith('/'):
            self.char_pos = PositionOrRange.parse(rest[1:])
        elif rest.startswith('_'):
            if not self.INDICATORS_PATTERN.match(rest[1:]):
                raise InvalidMARCspecError(Component.FS, ErrorKind.INDICATOR, spec)
            self.indicators = rest[1:]
        elif rest:
            raise InvalidMARCspecError(Component.FS, ErrorKind.USELESS, spec)

        self._subspecs: List[SubSpecEntry] = []

    @property
    def indicator1(self) -> Optional[str]:
        if self.indicators and self.indicators[0] != '_':
            return self.indicators[0]
        return None

    @property
    def indicator2(self) -> Optional[str]:
        if self.indicators and len(self.indicators) == 2 and self.indicators[1] != '_':
            return self.indicators[1]
        return None

    @property
    def subspecs(self) -> List[SubSpecEntry]:
        return list(self._subspecs)

    def add_subspec(self, subspec: SubSpecEntry):
        """Attach one subspec, or a list of alternative subspecs from a single group."""
        self._subspecs.append(subspec)

    def get_base_spec(self) -> str:
        """Canonical field spec without subspecs."""
        base = self.tag
        if self.index is not None:
            base += f"[{self.index}]"
        if self.char_pos is not None:
            base += f"/{self.char_pos}"
        elif self.indicators is not None:
            base += f"_{self.indicators}"
        return base

    def to_dict(self) -> dict:
        data = {"tag": self.tag}
        if self.index is not None:
            data.update(self.index.to_dict("index"))
        if self.char_pos is not None:
            data.update(self.char_pos.to_dict("char"))
        if self.indicator1 is not None:
            data["indicator1"] = self.indicator1
        if self.indicator2 is not None:
            data["indicator2"] = self.indicator2
        if self._subspecs:
            data["subspecs"] = [subspec_entry_to_dict(entry) for entry in self._subspecs]
        return data

    def __eq__(self, other) -> bool:
        if not isinstance(other, Field):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))

    def __repr__(self) -> str:
        return f"Field({str(self)!r})"

    def __str__(self) -> str:
        return self.get_base_spec() + "".join(
            subspec_entry_to_string(entry) for entry in self._subspecs
        )
