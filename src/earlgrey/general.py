"""
General purpose parsers built from the combinators. Also useful as examples.
"""

from __future__ import annotations
from typing import Any, Callable, Final

from collections.abc import Mapping

import earlgrey.const as const
from earlgrey.main import (
    Parser,
    any_,
    fmap,
    lift,
    many,
    many1,
    none_of,
    one_of,
    option,
    or_,
    plus,
    skip,
    iword,
)


def flatten_join(values: Any) -> str:
    """Concatenates a payload made of strings and (nested) lists of strings."""
    if isinstance(values, str):
        return values
    return "".join(flatten_join(value) for value in values)

joined = lift(flatten_join)
"""`joined(parser)` turns the payload of `parser` into a single string."""

def first(values: list[Any]) -> Any:
    return values[0]

def join_with(separator: str) -> Callable[[list[str]], str]:
    """Makes a function that joins a list of strings with `separator`."""
    return lambda values: separator.join(values)


# whitespace

ws0: Final[Parser[Any]] = skip(many(one_of(const.WHITESPACE)))
"""Zero or more whitespaces. No payload."""
ws1: Final[Parser[Any]] = skip(many1(one_of(const.WHITESPACE)))
"""One or more whitespaces. No payload."""


# identifiers and numbers

identifier: Final[Parser[str]] = joined(plus(one_of(const.ALPHABETIC + "_"), many(one_of(const.ALNUM + "_"))))

digits: Final[Parser[str]] = joined(many1(one_of(const.DECIMAL)))

def _prefixed(prefix: str, charset: str, base: int) -> Parser[int]:
    return fmap(lambda text: int(text, base), joined(plus(skip(iword(prefix)), many1(one_of(charset)))))

def _apply_sign(values: list[Any]) -> int:
    sign, number = values
    return -number if sign == "-" else number

integer_number: Final[Parser[int]] = fmap(_apply_sign, plus(
    option(one_of("+-"), default="+"),
    or_(
        _prefixed("0x", const.HEXADECIMAL, 16),
        _prefixed("0o", const.OCTAL, 8),
        _prefixed("0b", const.BINARY, 2),
        fmap(int, digits),
    ),
))
"""
An optionally signed integer.

The `0x`, `0o` and `0b` prefixes (any case) select the base, otherwise it's decimal.
"""

_exponent = plus(one_of("eE"), option(one_of("+-")), digits)
_fraction = or_(plus(digits, ".", option(digits)), plus(".", digits))

float_number: Final[Parser[float]] = fmap(float, joined(plus(
    option(one_of("+-")),
    or_(plus(_fraction, option(_exponent)), plus(digits, _exponent)),
)))
"""A number with a fraction, an exponent or both. `1.5`, `.5`, `1.`, `1e3`, `-2.5E-3`"""


# quoted strings

GENERAL_ESCAPES: Final[Mapping[str, str]] = {
    'b': '\b',
    'f': '\f',
    'n': '\n',
    'r': '\r',
    't': '\t',
}

unicode_escape: Final[Parser[str]] = fmap(
    lambda code: chr(int(code, base=16)),
    joined(plus(skip("u"), *[one_of(const.HEXADECIMAL)] * 4)),
)
"""The part of `\\u00e9` after the backslash."""

def quoted_string(
    quote: str = '"',
    *,
    escape: str = "\\",
    escapes: Mapping[str, str] = GENERAL_ESCAPES,
) -> Parser[str]:
    """
    Parser factory for strings delimited by the `quote` character.

    The payload is the unescaped content. Unknown escapes stand for the escaped character itself.
    """
    escaped = plus(skip(escape), or_(unicode_escape, fmap(lambda c: escapes.get(c, c), any_)))
    content = joined(many(or_(escaped, none_of(quote + escape))))
    return fmap(first, plus(skip(quote), content, skip(quote)))
