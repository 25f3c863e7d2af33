from __future__ import annotations

import pytest

from helpgen.errors import VariableRedefinedError
from helpgen.parser.base import Variable
from helpgen.parser.lines import (
    LineKind,
    classify_line,
    extract_variables,
    is_valid_variable_name,
    normalize_line_breaks,
    split_lines,
    substitute_variables,
)


@pytest.mark.parametrize(
    ("text", "kind"),
    [
        ("===", LineKind.EQUALS_RULE),
        ("----------", LineKind.MINUS_RULE),
        ("....", LineKind.DOTTED_RULE),
        ("==", LineKind.TEXT),
        ("=-=", LineKind.TEXT),
        ("***", LineKind.TEXT),
        ("=== ", LineKind.TEXT),
        ("", LineKind.TEXT),
    ],
)
def test_classify_line(text: str, kind: LineKind) -> None:
    assert classify_line(text) is kind


def test_normalize_line_breaks() -> None:
    assert normalize_line_breaks("a\r\nb\rc\nd") == "a\nb\nc\nd"


def test_split_lines_numbers_from_one() -> None:
    lines = split_lines("one\r\n===\n")
    assert [(line.text, line.kind, line.number) for line in lines] == [
        ("one", LineKind.TEXT, 1),
        ("===", LineKind.EQUALS_RULE, 2),
        ("", LineKind.TEXT, 3),
    ]


def test_extract_variables_removes_definition_lines() -> None:
    lines, variables = extract_variables(split_lines("a\n[\\name=Value with = sign]\nb"))
    assert [line.text for line in lines] == ["a", "b"]
    assert [line.number for line in lines] == [1, 3]
    assert variables == {"name": Variable(value="Value with = sign", line=2)}


@pytest.mark.parametrize("text", ["[\\=x]", "[\\a_b=x]", "[\\ab=x] ", "x[\\ab=x]", "[\\ab]"])
def test_lines_that_are_not_definitions(text: str) -> None:
    lines, variables = extract_variables(split_lines(text))
    assert variables == {}
    assert [line.text for line in lines] == [text]


def test_empty_variable_value() -> None:
    _, variables = extract_variables(split_lines("[\\empty=]"))
    assert variables["empty"].value == ""


def test_redefinition_reports_both_lines_in_order() -> None:
    with pytest.raises(VariableRedefinedError) as info:
        extract_variables(split_lines("[\\x=1]\ntext\n[\\y=2]\n[\\x=3]"))
    assert (info.value.first_line, info.value.second_line) == (1, 4)
    assert info.value.line == 4


@pytest.mark.parametrize(("name", "valid"), [("abc", True), ("a b 1", True), ("Größe", True), ("", False), ("a-b", False)])
def test_variable_names(name: str, valid: bool) -> None:
    assert is_valid_variable_name(name) is valid


def test_substitution_is_not_recursive() -> None:
    variables = {"a": Variable("[b]", 1), "b": Variable("B", 2)}
    assert substitute_variables("x [a] [b] [c]", variables) == "x [b] B [c]"
