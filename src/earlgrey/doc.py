"""
Documentation comment extraction.

Outputs the plain text contents of all comments beginning with `/**`, ignoring code, `//` comments, other
`/* */` comments and anything inside quoted strings. A leading `*` banner on each comment line is removed,
along with one space directly after the opening `/**`. Nothing else is transformed.

```
/**
 * Greet a user.
 */
```
gives `"\\nGreet a user.\\n "`, and comments are joined by a blank line.
"""

from __future__ import annotations
from typing import Any, Final

import logging

import earlgrey.const as const
from earlgrey.general import first, join_with, joined
from earlgrey.main import (
    Parser,
    eof,
    fmap,
    many,
    many1,
    not_,
    one_of,
    option,
    or_,
    peek,
    plus,
    run,
    separated_by,
    skip,
    word,
)


logger = logging.getLogger(__name__)

single_quote = word("'")
double_quote = word('"')
newline = word("\n")
escaped_single_quote = word("\\'")
escaped_double_quote = word('\\"')
star = word("*")
slash = word("/")

star_not_ending_comment = joined(plus(star, skip(peek(not_(slash)))))

start_multiline_comment = joined(plus(slash, star))
end_multiline_comment = joined(plus(star, slash))
start_inline_comment = joined(plus(slash, slash))
start_doc_comment = joined(plus(slash, star, star))
start_comment = or_(start_inline_comment, start_multiline_comment)

inline_comment: Final[Parser[str]] = joined(plus(
    start_inline_comment,
    joined(many(not_(newline))),
    or_(skip(eof), newline),
))
"""A `//` comment, up to and including the newline."""

multiline_comment: Final[Parser[str]] = joined(or_(
    word("/**/"),
    plus(
        start_multiline_comment,
        skip(peek(not_(star))),
        many(not_(end_multiline_comment)),
        end_multiline_comment,
    ),
))
"""A `/* */` comment that isn't a documentation comment."""

js_single_quote: Final[Parser[str]] = joined(plus(
    single_quote,
    joined(many(or_(escaped_single_quote, not_(single_quote)))),
    single_quote,
))

js_double_quote: Final[Parser[str]] = joined(plus(
    double_quote,
    joined(many(or_(escaped_double_quote, not_(double_quote)))),
    double_quote,
))

not_doc_comment: Final[Parser[str]] = joined(many(or_(
    js_single_quote,
    js_double_quote,
    inline_comment,
    multiline_comment,
    not_(start_comment),
)))
"""Text that doesn't contain a documentation comment. Can be empty."""

banner: Final[Parser[list[Any]]] = plus(
    many(one_of(const.BLANK)),
    plus(star_not_ending_comment, option(word(" "))),
)
"""Any amount of blanks, an asterisk that doesn't end the comment, and optionally one space."""

doc_comment_line: Final[Parser[str]] = fmap(first, plus(
    option(skip(banner)),
    or_(
        joined(plus(
            many1(not_(or_(newline, end_multiline_comment))),
            or_(newline, skip(peek(end_multiline_comment))),
        )),
        newline,
    ),
))
"""A line of a documentation comment, without its banner. Keeps the newline."""

doc_comment: Final[Parser[str]] = fmap(first, plus(
    skip(start_doc_comment),
    skip(option(word(" "))),
    joined(many(doc_comment_line)),
    skip(end_multiline_comment),
))
"""A `/** */` comment. The payload is the body without delimiters and banners."""

doc_comments: Final[Parser[list[str]]] = fmap(
    lambda values: values[0] if len(values) == 1 else [],
    plus(
        skip(option(not_doc_comment)),
        option(separated_by(doc_comment, skip(not_doc_comment))),
        skip(option(not_doc_comment)),
    ),
)
"""All the documentation comments in a text. The payload is the list of their bodies."""

document: Final[Parser[list[str]]] = fmap(first, plus(doc_comments, eof))
"""`doc_comments` over the whole text. Fails where an unterminated comment starts."""


def parse(text: str, name: str = "") -> str:
    """
    Extracts the documentation comments from `text`, separated by a blank line.

    Raises a `ParseError` if the text can't be parsed.
    """
    result = run(document, text, name)
    if not result:
        raise result.error()
    comments: list[str] = result.value.value
    logger.debug("Found %d documentation comments.", len(comments))
    return join_with("\n\n")(comments)
