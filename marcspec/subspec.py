"""
Subspecs

Conditional comparison expressions attached to a field or subfield, written
in curly brackets after the spec they belong to:

- 245$a{$b}           existence, operator omitted
- 245$a{?$b}          existence
- 245$a{!$b}          non-existence
- 245$a{$b=\\foo}      equality against a comparison string
- 245$a{/0!~\\x}       non-similarity of a character range of the context
- 245$a{$b|$c}        alternatives: either subspec may hold

A term starting with '[', '/', '_' or '$' is relative: it is resolved
against the spec the subspec is attached to (its context). Any other term
that is not a comparison string is parsed as a complete MARCspec.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union, TYPE_CHECKING

from .comparison import ComparisonString
from .exceptions import Component, ErrorKind, InvalidMARCspecError, check_if_string

if TYPE_CHECKING:
    from .marcspec import MarcSpec

OPERATORS = ('=', '!=', '~', '!~', '?', '!')
UNARY_OPERATORS = ('?', '!')
OPERATOR_CHARS = '?!~='
DEFAULT_OPERATOR = '?'

ESCAPE_CHARS = ('$', '\\')
REFERENCE_MARKERS = ('[', '/', '_', '$')

UNESCAPED_BRACKET_PATTERN = re.compile(r'(?<![\\$])[{}]')
TERM_SET_SEPARATOR_PATTERN = re.compile(r'(?<!\\)\|')


class TermKind(Enum):
    """The three shapes a subterm can take."""
    ABSENT = "absent"
    LITERAL = "literal"
    SPEC = "spec"


@dataclass(frozen=True)
class AbsentTerm:
    """A left subterm that was not written; it stands for the context itself."""
    context: str = ""

    kind = TermKind.ABSENT

    @property
    def spec(self) -> "MarcSpec":
        from .marcspec import MarcSpec
        return MarcSpec(self.context)

    def to_dict(self) -> None:
        return None

    def __str__(self) -> str:
        return ""


@dataclass(frozen=True)
class ComparisonTerm:
    literal: ComparisonString

    kind = TermKind.LITERAL

    def to_dict(self) -> dict:
        return self.literal.to_dict()

    def __str__(self) -> str:
        return str(self.literal)


@dataclass(frozen=True)
class SpecTerm:
    """A MARCspec subterm. ``source`` keeps the term as written, before context resolution."""
    spec: "MarcSpec"
    source: str

    kind = TermKind.SPEC

    def to_dict(self) -> dict:
        return self.spec.to_dict()

    def __str__(self) -> str:
        return self.source


Term = Union[AbsentTerm, ComparisonTerm, SpecTerm]


class SubSpec:
    """A comparison of an optional left subterm with a right subterm."""

    def __init__(self, left: Optional[Term], operator: str, right: Term, source: Optional[str] = None):
        if operator not in OPERATORS:
            raise InvalidMARCspecError(Component.SS, ErrorKind.OPERATOR, operator)
        if right is None or right.kind is TermKind.ABSENT:
            raise InvalidMARCspecError(Component.SS, ErrorKind.MISSING_RIGHT, source or operator)
        self.left = left if left is not None else AbsentTerm()
        self.operator = operator
        self.right = right
        self.source = source

    def get_term_set(self) -> str:
        """The subspec without its brackets, as written when parsed."""
        if self.source is not None:
            return self.source
        return f"{self.left}{self.operator}{self.right}"

    def to_dict(self) -> dict:
        data = {}
        if self.left.kind is not TermKind.ABSENT:
            data["left_subterm"] = self.left.to_dict()
        data["operator"] = self.operator
        data["right_subterm"] = self.right.to_dict()
        return data

    def __eq__(self, other) -> bool:
        if not isinstance(other, SubSpec):
            return NotImplemented
        return (self.left, self.operator, self.right) == (other.left, other.operator, other.right)

    def __hash__(self) -> int:
        return hash((self.left, self.operator, self.right))

    def __repr__(self) -> str:
        return f"SubSpec({str(self)!r})"

    def __str__(self) -> str:
        return "{" + self.get_term_set() + "}"


# One bracketed group: a single subspec, or alternatives separated by '|'
SubSpecEntry = Union[SubSpec, List[SubSpec]]


def subspec_entry_to_string(entry: SubSpecEntry) -> str:
    if isinstance(entry, list):
        return "{" + "|".join(subspec.get_term_set() for subspec in entry) + "}"
    return str(entry)


def subspec_entry_to_dict(entry: SubSpecEntry):
    if isinstance(entry, list):
        return [subspec.to_dict() for subspec in entry]
    return entry.to_dict()


def resolve_reference(context: str, term: str) -> str:
    """Resolve a relative subterm against its context.

    If the context already contains the subterm's leading marker, the context
    is cut at the last occurrence of that marker before the subterm is
    appended: context ``245$a`` with ``$b`` gives ``245$b``, with ``/0-3``
    gives ``245$a/0-3``.
    """
    if not context:
        raise InvalidMARCspecError(Component.SS, ErrorKind.MISSING_FIELD, term)
    position = context.rfind(term[0])
    if position > 0:
        return context[:position] + term
    return context + term


def _is_escaped(text: str, i: int) -> bool:
    return i > 0 and text[i - 1] in ESCAPE_CHARS


def split_term_set(term_set: str) -> Tuple[str, Optional[str], str]:
    """Split a term set into left text, operator and right text.

    The last unescaped operator character decides the split. Contiguous
    operator characters before it belong to the operator; repeated ones are
    folded, so ``$a==\\x`` reads as ``$a=\\x``. The operator is None when the
    term set has none.
    """
    last = None
    for i, char in enumerate(term_set):
        if char in OPERATOR_CHARS and not _is_escaped(term_set, i):
            last = i
    if last is None:
        return "", None, term_set

    start = last
    while start > 0 and term_set[start - 1] in OPERATOR_CHARS and not _is_escaped(term_set, start - 1):
        start -= 1
    run = term_set[start:last + 1]
    operator = "".join(char for i, char in enumerate(run) if i == 0 or char != run[i - 1])
    if operator not in OPERATORS:
        operator = run[-1]
        start = last
    return term_set[:start], operator, term_set[last + 1:]


def create_subspecs(group: str, context: str, depth: int = 0,
                    max_depth: Optional[int] = None) -> SubSpecEntry:
    """Create the subspec(s) of one bracketed group like ``{$b=\\x|$c}``.

    Returns a single SubSpec, or a list when the group holds alternatives.
    ``depth`` is the nesting depth of the spec the group belongs to; specs
    built for subterms are parsed one level deeper.
    """
    check_if_string(group)
    if max_depth is None:
        from .marcspec import MAX_DEPTH
        max_depth = MAX_DEPTH

    if len(group) < 2 or group[0] != '{' or group[-1] != '}':
        raise InvalidMARCspecError(Component.SS, ErrorKind.BRACKET, group)

    subspecs = [
        _create_subspec(term_set, context, depth, max_depth, group)
        for term_set in TERM_SET_SEPARATOR_PATTERN.split(group[1:-1])
    ]
    return subspecs[0] if len(subspecs) == 1 else subspecs


def _create_subspec(term_set: str, context: str, depth: int, max_depth: int, group: str) -> SubSpec:
    if UNESCAPED_BRACKET_PATTERN.search(term_set):
        raise InvalidMARCspecError(Component.SS, ErrorKind.ESCAPE, group)

    left, operator, right = split_term_set(term_set)
    if operator is None:
        operator = DEFAULT_OPERATOR
    elif not right and left and operator in UNARY_OPERATORS:
        # Postfix form: $a? means ?$a
        left, right = "", left
    if not right:
        raise InvalidMARCspecError(Component.SS, ErrorKind.MISSING_RIGHT, term_set or group)

    return SubSpec(
        _resolve_term(left, context, depth, max_depth),
        operator,
        _resolve_term(right, context, depth, max_depth),
        source=term_set
    )


def _resolve_term(term: str, context: str, depth: int, max_depth: int) -> Term:
    from .marcspec import MarcSpec

    if not term:
        return AbsentTerm(context)
    if term[0] == '\\':
        return ComparisonTerm(ComparisonString(term[1:]))

    spec = resolve_reference(context, term) if term[0] in REFERENCE_MARKERS else term
    return SpecTerm(MarcSpec(spec, max_depth=max_depth, depth=depth + 1), source=term)
