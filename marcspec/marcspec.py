"""
MARCspec

Decodes, validates and encodes MARCspec strings, references to a set of data
within a MARC record. For the specification of MARCspec see
<http://marcspec.github.io/MARCspec/>.

Format:
- Field: 245, 008/35-37, 020[0], 245_10
- Subfields: 245$a, 245$a$b, 245$a-c (range, expanded to $a$b$c)
- Subspecs: 245$a{$b}, 020$a{$q=\\paperback}, 245{$a?}$c
"""

import json
import re
from typing import List, Optional, Union

from .exceptions import Component, ErrorKind, InvalidMARCspecError, check_if_string
from .field import Field
from .subfield import Subfield
from .subspec import SubSpecEntry, create_subspecs
from .tokenizer import DataRef, expand_subfield_range, parse_data_ref

# Deepest allowed nesting of MARCspecs built for subspec subterms
MAX_DEPTH = 32

SPEC_PATTERN = re.compile(r'^([^{$]*)(.*)$', re.DOTALL)
WHITESPACE_PATTERN = re.compile(r'\s')


class MarcSpec:
    """A field reference and the subfields that follow it."""

    def __init__(self, spec: Union[str, Field], max_depth: int = MAX_DEPTH, depth: int = 0):
        self.max_depth = max_depth
        self.depth = depth
        self._subfields: List[Subfield] = []

        if isinstance(spec, Field):
            self._field = spec
            return

        check_if_string(spec)
        if depth > max_depth:
            raise InvalidMARCspecError(Component.MS, ErrorKind.DEPTH, spec)

        spec = spec.strip()
        if not spec:
            raise InvalidMARCspecError(Component.MS, ErrorKind.EMPTY, spec)
        if len(spec) < 3:
            raise InvalidMARCspecError(Component.MS, ErrorKind.MINIMUM3, spec)
        if WHITESPACE_PATTERN.search(spec):
            raise InvalidMARCspecError(Component.MS, ErrorKind.SPACE, spec)

        field_spec, rest = SPEC_PATTERN.match(spec).groups()
        if not field_spec:
            raise InvalidMARCspecError(Component.MS, ErrorKind.MISSING_FIELD, spec)

        self._field = Field(field_spec)
        if rest:
            self._create_instances(parse_data_ref(rest))

    @classmethod
    def set_field(cls, field: Field) -> "MarcSpec":
        """Create a MARCspec without subfields from an existing field."""
        if not isinstance(field, Field):
            raise TypeError(f"Method only accepts Field as argument. {type(field).__name__} given.")
        return cls(field)

    @property
    def field(self) -> Field:
        return self._field

    @property
    def subfields(self) -> List[Subfield]:
        return list(self._subfields)

    def get_field(self) -> Field:
        return self._field

    def get_subfields(self) -> List[Subfield]:
        return list(self._subfields)

    def get_subfield(self, tag: str) -> List[Subfield]:
        """Get all subfields with the given single character tag."""
        check_if_string(tag)
        if len(tag) > 1:
            raise ValueError(f"Method only allows argument to be 1 character long. Got {len(tag)}")
        return [subfield for subfield in self._subfields if subfield.tag == tag]

    def add_subfields(self, subfields: Union[str, Subfield]):
        """Append a subfield, or the subfields parsed from a string like ``$a$b{$c}``."""
        if isinstance(subfields, Subfield):
            self._subfields.append(subfields)
            return

        check_if_string(subfields)
        if len(subfields) < 2:
            raise InvalidMARCspecError(Component.SF, ErrorKind.MINIMUM2, subfields)
        if subfields[0] != '$':
            raise InvalidMARCspecError(Component.SF, ErrorKind.PREFIX, subfields)
        self._create_instances(parse_data_ref(subfields))

    def _create_instances(self, refs: List[DataRef]):
        """Build subfields and subspecs from tokenized data references.

        Nothing is attached until every reference has been built, so a
        failure leaves this MARCspec unchanged.
        """
        base_spec = self._field.get_base_spec()
        field_subspecs: List[SubSpecEntry] = []
        subfields: List[Subfield] = []

        for ref in refs:
            if ref.subfield is None:
                for group in ref.subspecs:
                    field_subspecs.append(self._create_subspecs(group, base_spec))
                continue

            tokens = expand_subfield_range(ref.subfield[1:]) if ref.is_range else [ref.subfield]
            for token in tokens:
                subfield = Subfield(token)
                context = base_spec + subfield.get_base_spec()
                for group in ref.subspecs:
                    subfield.add_subspec(self._create_subspecs(group, context))
                subfields.append(subfield)

        for entry in field_subspecs:
            self._field.add_subspec(entry)
        self._subfields.extend(subfields)

    def _create_subspecs(self, group: str, context: str) -> SubSpecEntry:
        return create_subspecs(group, context, depth=self.depth, max_depth=self.max_depth)

    def to_dict(self) -> dict:
        data = {"field": self._field.to_dict()}
        if self._subfields:
            data["subfields"] = [subfield.to_dict() for subfield in self._subfields]
        return data

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def __eq__(self, other) -> bool:
        if not isinstance(other, MarcSpec):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))

    def __repr__(self) -> str:
        return f"MarcSpec({str(self)!r})"

    def __str__(self) -> str:
        return str(self._field) + "".join(str(subfield) for subfield in self._subfields)
