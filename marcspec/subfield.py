"""
Subfieldspec

A subfield reference: '$' followed by a single character code, an optional
index and an optional character position/range, e.g. $a, $a[0], $b/0-3.
"""

from typing import List, Optional

from .exceptions import Component, ErrorKind, InvalidMARCspecError, check_if_string
from .position import PositionOrRange, split_index
from .subspec import SubSpecEntry, subspec_entry_to_dict, subspec_entry_to_string


class Subfield:
    """Subfield reference with attachable subspecs."""

    def __init__(self, spec: str):
        check_if_string(spec)
        if len(spec) < 2:
            raise InvalidMARCspecError(Component.SF, ErrorKind.MINIMUM2, spec)
        if spec[0] != '$':
            raise InvalidMARCspecError(Component.SF, ErrorKind.PREFIX, spec)

        # Any printable ASCII character except space
        self.tag = spec[1]
        if not '!' <= self.tag <= '~':
            raise InvalidMARCspecError(Component.SF, ErrorKind.SUBFIELD_TAG, spec)

        self.index, rest = split_index(spec[2:], Component.SF, spec)
        self.char_pos: Optional[PositionOrRange] = None
        if rest.startswith('/'):
            self.char_pos = PositionOrRange.parse(rest[1:])
        elif rest:
            raise InvalidMARCspecError(Component.SF, ErrorKind.USELESS, spec)

        self._subspecs: List[SubSpecEntry] = []

    @property
    def subspecs(self) -> List[SubSpecEntry]:
        return list(self._subspecs)

    def get_tag(self) -> str:
        return self.tag

    def add_subspec(self, subspec: SubSpecEntry):
        """Attach one subspec, or a list of alternative subspecs from a single group."""
        self._subspecs.append(subspec)

    def get_base_spec(self) -> str:
        """Canonical subfield spec without subspecs."""
        base = '$' + self.tag
        if self.index is not None:
            base += f"[{self.index}]"
        if self.char_pos is not None:
            base += f"/{self.char_pos}"
        return base

    def to_dict(self) -> dict:
        data = {"tag": self.tag}
        if self.index is not None:
            data.update(self.index.to_dict("index"))
        if self.char_pos is not None:
            data.update(self.char_pos.to_dict("char"))
        if self._subspecs:
            data["subspecs"] = [subspec_entry_to_dict(entry) for entry in self._subspecs]
        return data

    def __eq__(self, other) -> bool:
        if not isinstance(other, Subfield):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))

    def __repr__(self) -> str:
        return f"Subfield({str(self)!r})"

    def __str__(self) -> str:
        return self.get_base_spec() + "".join(
            subspec_entry_to_string(entry) for entry in self._subspecs
        )
