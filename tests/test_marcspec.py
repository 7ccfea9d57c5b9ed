"""Tests for marcspec.marcspec."""

import json

import pytest

from marcspec import (
    ErrorKind,
    Field,
    InvalidMARCspecError,
    MarcSpec,
    SubSpec,
    Subfield,
    TermKind,
)

ROUND_TRIP_SPECS = [
    "245",
    "LDR/6",
    "008/35-37",
    "245_10",
    "245$a",
    "245$a$b$a",
    "245[0]$a[1]/0-3",
    "245{$a?}",
    "245$a{$b}",
    "245$a{?$b}",
    "245$a{!$b}",
    "020$a{$q=\\paperback}",
    "020$a{$q!=\\paperback}",
    "245$a{$b~\\Title}",
    "245$a{$b!~\\x}",
    "245$a{$b|$c}",
    "245$a{$b}{$c}",
    "245{$a}$b{$c=\\x}",
    "245$a{300$a=\\x}",
    "245$a{$b=$c}",
    "LDR/6{/6=\\a}",
    "245$a{/0-3=\\Tit}",
    "650[#]_0$a",
    "245$a{$b=\\a\\sb}",
    "245${$}{$a}",
]


@pytest.mark.parametrize("spec", ROUND_TRIP_SPECS)
def test_round_trip(spec):
    assert str(MarcSpec(spec)) == spec


@pytest.mark.parametrize("spec", ROUND_TRIP_SPECS + ["245$a-c{$d}"])
def test_parse_is_idempotent(spec):
    parsed = MarcSpec(spec)
    reparsed = MarcSpec(str(parsed))
    assert reparsed == parsed
    assert reparsed.to_dict() == parsed.to_dict()


def test_single_subfield():
    spec = MarcSpec("245$a")
    assert str(spec.get_field()) == "245"
    assert [subfield.tag for subfield in spec.get_subfields()] == ["a"]
    assert spec.get_subfields()[0].subspecs == []
    assert spec.get_field().subspecs == []


def test_subfield_range_is_expanded():
    spec = MarcSpec("245$a-c")
    assert [subfield.tag for subfield in spec.get_subfields()] == ["a", "b", "c"]
    assert all(subfield.subspecs == [] for subfield in spec.get_subfields())
    assert str(spec) == "245$a$b$c"


def test_subfield_range_resolves_subspecs_per_subfield():
    spec = MarcSpec("245$a-b{/0=\\x}")
    assert str(spec) == "245$a{/0=\\x}$b{/0=\\x}"
    left_specs = [str(subfield.subspecs[0].left.spec) for subfield in spec.get_subfields()]
    assert left_specs == ["245$a/0", "245$b/0"]


def test_field_subspec():
    spec = MarcSpec("245{$a?}")
    assert spec.get_subfields() == []

    subspecs = spec.get_field().subspecs
    assert len(subspecs) == 1
    subspec = subspecs[0]
    assert isinstance(subspec, SubSpec)
    assert subspec.left.kind is TermKind.ABSENT
    assert subspec.operator == "?"
    assert subspec.right.kind is TermKind.SPEC
    assert str(subspec.right.spec) == "245$a"


def test_field_and_first_subfield_subspecs_are_not_conflated():
    spec = MarcSpec("245{$a}$a{$b}")
    field_subspecs = spec.get_field().subspecs
    subfields = spec.get_subfields()

    assert len(field_subspecs) == 1
    assert str(field_subspecs[0].right.spec) == "245$a"
    assert len(subfields) == 1
    assert len(subfields[0].subspecs) == 1
    assert str(subfields[0].subspecs[0].right.spec) == "245$b"


def test_alternatives_are_one_entry():
    spec = MarcSpec("245$a{$b|$c}{$d}")
    subspecs = spec.get_subfield("a")[0].subspecs
    assert len(subspecs) == 2
    assert isinstance(subspecs[0], list)
    assert [str(s.right.spec) for s in subspecs[0]] == ["245$b", "245$c"]
    assert isinstance(subspecs[1], SubSpec)


def test_comparison_string_term():
    subspec = MarcSpec("245$a{$b=\\x\\sy}").get_subfield("a")[0].subspecs[0]
    assert subspec.right.kind is TermKind.LITERAL
    assert subspec.right.literal.raw == "x\\sy"
    assert subspec.right.literal.comparable == "x y"


def test_surrounding_whitespace_is_stripped():
    assert str(MarcSpec("  245$a \n")) == "245$a"


def test_to_dict():
    assert MarcSpec("245").to_dict() == {"field": {"tag": "245"}}
    assert MarcSpec("245_10$a{$b=\\x}").to_dict() == {
        "field": {"tag": "245", "indicator1": "1", "indicator2": "0"},
        "subfields": [
            {
                "tag": "a",
                "subspecs": [
                    {
                        "left_subterm": {
                            "field": {"tag": "245", "indicator1": "1", "indicator2": "0"},
                            "subfields": [{"tag": "b"}],
                        },
                        "operator": "=",
                        "right_subterm": {"comparison_string": "x"},
                    }
                ],
            }
        ],
    }


def test_to_json():
    spec = MarcSpec("245$a{$b|$c}")
    assert json.loads(spec.to_json()) == spec.to_dict()


def test_get_subfield_filters_by_tag():
    spec = MarcSpec("245$a$b$a")
    assert [str(subfield) for subfield in spec.get_subfield("a")] == ["$a", "$a"]
    assert spec.get_subfield("z") == []


def test_get_subfield_rejects_long_tag():
    with pytest.raises(ValueError):
        MarcSpec("245$a").get_subfield("ab")


def test_from_field():
    field = Field("245_10")
    spec = MarcSpec.set_field(field)
    assert spec.get_field() is field
    assert spec.get_subfields() == []
    assert str(spec) == "245_10"
    assert str(MarcSpec(field)) == "245_10"


def test_set_field_rejects_string():
    with pytest.raises(TypeError):
        MarcSpec.set_field("245")


def test_add_subfields():
    spec = MarcSpec("245$a")
    spec.add_subfields("$b{$c}$d-e")
    spec.add_subfields(Subfield("$f"))
    assert str(spec) == "245$a$b{$c}$d$e$f"
    assert str(spec.get_subfield("b")[0].subspecs[0].right.spec) == "245$c"


@pytest.mark.parametrize("arg,kind", [
    ("a", ErrorKind.MINIMUM2),
    ("ab", ErrorKind.PREFIX),
    ("$b{", ErrorKind.BRACKET),
    ("$b$c{$d=}", ErrorKind.MISSING_RIGHT),
])
def test_add_subfields_invalid(arg, kind):
    spec = MarcSpec("245$a")
    with pytest.raises(InvalidMARCspecError) as excinfo:
        spec.add_subfields(arg)
    assert excinfo.value.kind is kind
    assert str(spec) == "245$a"


@pytest.mark.parametrize("spec,kind", [
    ("", ErrorKind.EMPTY),
    ("   ", ErrorKind.EMPTY),
    ("24", ErrorKind.MINIMUM3),
    ("245 $a", ErrorKind.SPACE),
    ("245$a{$b=\\a b}", ErrorKind.SPACE),
    ("$a{$b}", ErrorKind.MISSING_FIELD),
    ("{$a}", ErrorKind.MISSING_FIELD),
    ("245{$a", ErrorKind.BRACKET),
    ("245$a}", ErrorKind.BRACKET),
    ("245$a{$b{$c}", ErrorKind.BRACKET),
    ("245{$a}x", ErrorKind.PREFIX),
    ("245$a-3", ErrorKind.RANGE),
    ("245$a-cd", ErrorKind.LENGTH3),
    ("245$a{$b{$c}}", ErrorKind.ESCAPE),
    ("245$a{$b=}", ErrorKind.MISSING_RIGHT),
    ("2a5B$a", ErrorKind.USELESS),
    ("2aB$a", ErrorKind.TAG),
    ("245$a{300=\\x}x", ErrorKind.USELESS),
])
def test_invalid(spec, kind):
    with pytest.raises(InvalidMARCspecError) as excinfo:
        MarcSpec(spec)
    assert excinfo.value.kind is kind


def test_error_carries_offending_substring():
    with pytest.raises(InvalidMARCspecError) as excinfo:
        MarcSpec("245$a{$b=}")
    assert excinfo.value.spec == "$b="
    assert "Right hand subterm is missing." in str(excinfo.value)


def test_rejects_non_string():
    with pytest.raises(TypeError):
        MarcSpec(245)


def test_depth_limit():
    assert str(MarcSpec("245$a{300$b}", max_depth=1)) == "245$a{300$b}"
    with pytest.raises(InvalidMARCspecError) as excinfo:
        MarcSpec("245$a{300$b}", max_depth=0)
    assert excinfo.value.kind is ErrorKind.DEPTH


def test_nested_spec_carries_depth():
    spec = MarcSpec("245$a{$b}", max_depth=5)
    nested = spec.get_subfield("a")[0].subspecs[0].right.spec
    assert nested.depth == 1
    assert nested.max_depth == 5


def test_equality_and_hash():
    assert MarcSpec("245$a") == MarcSpec("245$a")
    assert MarcSpec("245$a") != MarcSpec("245$b")
    assert len({MarcSpec("245$a"), MarcSpec("245$a")}) == 1
