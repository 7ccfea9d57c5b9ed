"""MARCspec decoding, validation and encoding."""

from .comparison import ComparisonString
from .exceptions import Component, ErrorKind, InvalidMARCspecError
from .field import Field
from .marcspec import MAX_DEPTH, MarcSpec
from .position import PositionOrRange
from .subfield import Subfield
from .subspec import (
    AbsentTerm,
    ComparisonTerm,
    SpecTerm,
    SubSpec,
    TermKind,
    create_subspecs,
    resolve_reference,
)
from .tokenizer import DataRef, expand_subfield_range, parse_data_ref

__all__ = [
    "MarcSpec",
    "MAX_DEPTH",
    "Field",
    "Subfield",
    "SubSpec",
    "AbsentTerm",
    "ComparisonTerm",
    "SpecTerm",
    "TermKind",
    "ComparisonString",
    "PositionOrRange",
    "DataRef",
    "parse_data_ref",
    "expand_subfield_range",
    "create_subspecs",
    "resolve_reference",
    "InvalidMARCspecError",
    "Component",
    "ErrorKind",
]
