"""
MARCspec Exceptions

Validation errors raised while decoding a MARCspec string.
Every error names the component that failed, the kind of failure and
the substring that could not be parsed.
"""

from enum import Enum


class Component(Enum):
    """Parts of a MARCspec that can fail validation."""
    MS = "MARCspec: "
    FS = "Fieldspec: "
    SF = "Subfieldspec: "
    SS = "Subspec: "
    PR = "PositionOrRange: "
    CS = "ComparisonString: "


class ErrorKind(Enum):
    """Kinds of validation failure."""
    EMPTY = "Spec must not be empty."
    MINIMUM3 = "Spec length must be at least 3 characters long."
    MINIMUM2 = "Spec length must be at least 2 characters long."
    SPACE = "Spec must not contain whitespace."
    MISSING_FIELD = "Fieldspec must be provided."
    BRACKET = "Unequal count of opening and closing brackets."
    PREFIX = "Subfieldspec must start with '$'."
    LENGTH3 = "Subfield range must be exactly 3 characters long."
    RANGE = "Invalid subfield range. Start and end must both be lowercase, uppercase or digits."
    ESCAPE = "Unescaped character detected."
    MISSING_RIGHT = "Right hand subterm is missing."
    OPERATOR = "Invalid operator."
    DEPTH = "Maximum nesting depth exceeded."
    TAG = "Fieldtag must be 3 characters of digits, '.' and either lowercase or uppercase letters."
    SUBFIELD_TAG = "Subfieldtag must be a single printable ASCII character."
    INDEX = "Invalid index."
    POSITION = "Position must be digits or '#'."
    NEGATIVE = "Ending position must be equal or higher than starting position."
    INDICATOR = "Indicators must be 1 or 2 characters of lowercase letters, digits or '_'."
    USELESS = "Detected useless data fragment."


class InvalidMARCspecError(Exception):
    """Raised when a MARCspec or one of its parts fails validation."""

    def __init__(self, component: Component, kind: ErrorKind, spec: str):
        self.component = component
        self.kind = kind
        self.spec = spec
        super().__init__(f"{component.value}{kind.value} Tried to parse: {spec}")


def check_if_string(arg) -> None:
    """Reject non-string arguments where a spec string is required."""
    if not isinstance(arg, str):
        raise TypeError(f"Method only accepts string as argument. {type(arg).__name__} given.")
