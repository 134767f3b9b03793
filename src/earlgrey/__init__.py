"""
Parser combinator library for top-down, recursive-descent parsing.

See the objects for more explanations.

See the `earlgrey.general` module for general purpose parsers you can use as examples,
and `earlgrey.doc` for a complete grammar.

A parser is any function that takes a `State` and returns a `Result`.
Primitive parsers match characters, combinators build new parsers out of others.
Defining parsers:
```
space       = word(" ")
alpha       = one_of(const.ALPHABETIC)
sentence    = separated_by(many1(alpha), space)
remark      = plus("(", sentence, ")")
```

Using parsers:
```
result = remark(prepare("(Hello world)"))

if result:
    result.value.value  # ["(", [[...], " ", [...]], ")"]
else:
    raise result.error()
```
"""

import earlgrey.const as const
import earlgrey.main
from earlgrey.main import (
    Maybe,
    Nothing,
    just,
    ParseError,
    Body,
    State,
    Result,
    success,
    failure,
    Parser,
    one_of,
    none_of,
    word,
    iword,
    any_,
    eof,
    plus,
    or_,
    and_,
    many,
    many1,
    separated_by,
    skip,
    option,
    peek,
    not_,
    lift,
    fmap,
    prepare,
    run,
)
import earlgrey.general as general
