import pytest

from earlgrey import plus, prepare, run
from earlgrey.general import (
    digits,
    flatten_join,
    float_number,
    identifier,
    integer_number,
    join_with,
    quoted_string,
    ws0,
    ws1,
)


def test_flatten_join():
    assert flatten_join(["a", ["b", ["c"]], "d"]) == "abcd"
    assert flatten_join("abc") == "abc"
    assert flatten_join([]) == ""


def test_join_with():
    assert join_with(", ")(["a", "b", "c"]) == "a, b, c"
    assert join_with("\n\n")([]) == ""


def test_digits():
    result = digits(prepare("123abc"))
    assert result.value.value == "123"
    assert not digits(prepare("abc"))


@pytest.mark.parametrize(
    "text,value",
    [
        ("42", 42),
        ("-42", -42),
        ("+7", 7),
        ("0x1F", 31),
        ("0Xff", 255),
        ("0o17", 15),
        ("0b101", 5),
        ("-0b11", -3),
    ],
)
def test_integer_number(text, value):
    result = run(integer_number, text)
    assert result.value.value == value
    assert result.end == len(text)


def test_integer_number_needs_digits():
    assert not run(integer_number, "abc")
    assert not run(integer_number, "-")


@pytest.mark.parametrize(
    "text,value",
    [
        ("1.5", 1.5),
        (".5", 0.5),
        ("1.", 1.0),
        ("1e3", 1000.0),
        ("-2.5E-3", -0.0025),
    ],
)
def test_float_number(text, value):
    result = run(float_number, text)
    assert result.value.value == value
    assert result.end == len(text)


def test_float_number_needs_a_fraction_or_exponent():
    assert not run(float_number, "12")


def test_identifier():
    assert run(identifier, "foo_1 bar").value.value == "foo_1"
    assert run(identifier, "_x").value.value == "_x"
    assert not run(identifier, "1abc")


@pytest.mark.parametrize(
    "text,value",
    [
        ('""', ""),
        ('"hello"', "hello"),
        ('"a\\nb"', "a\nb"),
        ('"a\\"b"', 'a"b'),
        ('"\\u00e9t\\u00E9"', "été"),
        ('"\\q"', "q"),
    ],
)
def test_quoted_string(text, value):
    result = run(quoted_string(), text)
    assert result.value.value == value
    assert result.end == len(text)


def test_quoted_string_other_quote():
    assert run(quoted_string("'"), "'hi'").value.value == "hi"
    assert not run(quoted_string("'"), '"hi"')


def test_quoted_string_unterminated():
    assert not run(quoted_string(), '"abc')


def test_whitespace():
    assert plus("a", ws0, "b")(prepare("a  \n b")).value.value == ["a", "b"]
    assert plus("a", ws0, "b")(prepare("ab")).value.value == ["a", "b"]
    assert not plus("a", ws1, "b")(prepare("ab"))
