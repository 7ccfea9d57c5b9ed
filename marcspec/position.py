"""Position or range values used by field and subfield indexes and character specs."""

import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from .exceptions import Component, ErrorKind, InvalidMARCspecError

LAST = "#"


@dataclass(frozen=True)
class PositionOrRange:
    """A single position or an inclusive range, e.g. ``0``, ``0-3`` or ``1-#``.

    Positions are kept as written so leading zeros survive re-encoding.
    """
    start: str
    end: Optional[str] = None

    POSITION_PATTERN = re.compile(r'^(?:\d+|#)$')

    @classmethod
    def parse(cls, spec: str) -> "PositionOrRange":
        """Parse ``start[-end]`` where each end is digits or '#'."""
        parts = spec.split('-')
        if len(parts) > 2:
            raise InvalidMARCspecError(Component.PR, ErrorKind.POSITION, spec)
        for part in parts:
            if not cls.POSITION_PATTERN.match(part):
                raise InvalidMARCspecError(Component.PR, ErrorKind.POSITION, spec)

        position = cls(start=parts[0], end=parts[1] if len(parts) == 2 else None)
        if position.end is not None and position.start != LAST and position.end != LAST:
            if int(position.end) < int(position.start):
                raise InvalidMARCspecError(Component.PR, ErrorKind.NEGATIVE, spec)
        return position

    @property
    def is_range(self) -> bool:
        return self.end is not None

    @property
    def length(self) -> Optional[int]:
        """Number of positions covered, or None when an end is '#'."""
        if self.start == LAST:
            return None
        if self.end is None:
            return 1
        if self.end == LAST:
            return None
        return int(self.end) - int(self.start) + 1

    def to_dict(self, prefix: str) -> Dict[str, Union[int, str]]:
        """Render as ``{prefix}_start``, ``{prefix}_end`` and ``{prefix}_length`` entries."""
        data = {f"{prefix}_start": _json_position(self.start)}
        if self.end is not None:
            data[f"{prefix}_end"] = _json_position(self.end)
        if self.length is not None:
            data[f"{prefix}_length"] = self.length
        return data

    def __str__(self) -> str:
        if self.end is None:
            return self.start
        return f"{self.start}-{self.end}"


def _json_position(position: str) -> Union[int, str]:
    return position if position == LAST else int(position)


def split_index(rest: str, component: Component, spec: str) -> Tuple[Optional[PositionOrRange], str]:
    """Split a leading ``[index]`` off ``rest``, returning the index and what follows it."""
    if not rest.startswith('['):
        return None, rest
    end = rest.find(']')
    if end == -1:
        raise InvalidMARCspecError(component, ErrorKind.INDEX, spec)
    return PositionOrRange.parse(rest[1:end]), rest[end + 1:]
