"""
The implementations of the main classes, primitive parsers and combinators.
"""

from __future__ import annotations
from typing import Any, Callable, Final, Generic, Protocol, TypeVar

from collections.abc import Container, Sequence
import logging


logger = logging.getLogger(__name__)

_T = TypeVar("_T")
_U = TypeVar("_U")
_DataCovT = TypeVar("_DataCovT", covariant=True)



class Maybe(Generic[_DataCovT]):
    """
    A value that may or may not be there.

    Used as the payload of every `Result`. Use `just()` to make a present one, and `Nothing` for the empty one.
    """
    def __init__(self, has_value: bool, value: Any = None) -> None:
        self.has_value: Final[bool] = has_value
        self.value: Final[Any] = value

    def map(self, f: Callable[[Any], _U]) -> Maybe[_U]:
        """Applies `f` to the stored value, if any. Returns a new `Maybe`."""
        if self.has_value:
            return Maybe(True, f(self.value))
        return Nothing

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Maybe):
            return NotImplemented
        return self.has_value == other.has_value and self.value == other.value

    def __repr__(self) -> str:
        return f"just({self.value!r})" if self.has_value else "Nothing"

Nothing: Final[Maybe[Any]] = Maybe(False)
"""The `Maybe` that stores no value."""

def just(value: _T) -> Maybe[_T]:
    """Constructs a `Maybe` that stores `value`."""
    return Maybe(True, value)



class ParseError(Exception):
    """
    The exception that's raised when a failed parse has to be reported.

    Usually created from a failed `Result` with `Result.error()`.
    """

    def __init__(self, src: str, pos: int, msg: str | None = None, name: str = "") -> None:
        """
        `src`: The string that was being parsed.
        `pos`: The position of the error.
        `msg`: The reason for the error.
        `name`: The name of the parsed body, if any.
        """
        if msg is None:
            super().__init__()
        else:
            super().__init__(msg)
        self.src: str = src
        self.pos: int = pos
        self.name: str = name
        self.add_note(self.position_note())

    def position_note(self) -> str:
        """Describes the position with its line, column and an excerpt of the line pointing at it."""
        pos = min(self.pos, len(self.src))
        # works with CRLF too, the column just counts the `\r`
        line = self.src.count("\n", 0, pos) + 1
        column = pos - self.src.rfind("\n", 0, pos) # rfind gives -1 on the first line
        where = f"{self.name}: " if self.name else ""
        note = [f"{where}At position {pos} (line {line}, column {column})"]

        lines = self.src.splitlines()
        if len(lines) > line-1:
            line_str = lines[line-1]
            if len(line_str) >= column-1:
                if column <= 20:
                    note.append(f"{line_str[:40]}\n{' '*(column-1)}^")
                else:
                    note.append(f"{line_str[(column-20):(column+20)]}\n{' '*19}^")
        return "\n".join(note)



class Body:
    """
    A body of text to be parsed. Never modified once created.
    """
    def __init__(self, text: str, name: str = "") -> None:
        self.name: Final[str] = name
        """Used in diagnostics only."""
        self.text: Final[str] = text
        self.length: Final[int] = len(text)

    def __len__(self) -> int:
        return self.length

    def at(self, i: int) -> str:
        """Returns the character at position `i`, or the empty string if `i` is out of bounds."""
        if 0 <= i < self.length:
            return self.text[i]
        return ""


class State:
    """
    A cursor into a `Body`.

    Advancing is the only mutation. Parsers that may have to abandon an attempt hand a `copy()` to the
    sub-parser instead of the state they were given, so a failed attempt never moves the caller's cursor.
    """
    def __init__(self, body: Body, position: int = 0) -> None:
        self.body: Final[Body] = body
        self.position: int = position
        self.current: str = body.at(position)
        """The character at `position`, or the empty string at the end of the input."""

    def copy(self) -> State:
        return State(self.body, self.position)

    def advance(self) -> None:
        """Consumes one character."""
        self.advance_by(1)

    def advance_by(self, n: int) -> None:
        """Consumes `n` characters."""
        self.position += n
        self.current = self.body.at(self.position)

    def is_eof(self) -> bool:
        return self.position >= self.body.length

    def __str__(self) -> str:
        return f"{self.body.name}: {self.position} [{self.current}]"

    def __repr__(self) -> str:
        return f"<State {self.position} {self.current!r}>"


class Result(Generic[_DataCovT]):
    """
    Returned from every parser.

    ```
    r = parser(state)
    if r:
        r.value.value   # the payload, if `r.value.has_value`
        r.matched()     # the consumed text
    else:
        raise r.error()
    ```

    `start` is the position before the attempt and `end` the position of `state` after it.
    On failure, `state` is where the attempt gave up, which is what diagnostics report.
    """
    def __init__(self, success: bool, value: Maybe[_DataCovT], state: State, start: int) -> None:
        self.success: Final[bool] = success
        self.value: Final[Maybe[_DataCovT]] = value if success else Nothing
        self.state: Final[State] = state
        self.start: Final[int] = start
        self.end: Final[int] = state.position

    def __bool__(self) -> bool:
        return self.success

    def matched(self) -> str:
        """The consumed text."""
        return self.state.body.text[self.start : self.end]

    def describe(self) -> str:
        """A human readable description of where the parse stopped."""
        if self.success:
            return f"matched {self.end - self.start} characters at position {self.start}"
        if self.state.current == "":
            return "unexpected end-of-file"
        return f"error at character {self.state.position}: unexpected character '{self.state.current}'"

    def error(self, msg: str | None = None) -> ParseError:
        """Creates a `ParseError` at the position where this result stopped."""
        return ParseError(
            self.state.body.text,
            self.state.position,
            self.describe() if msg is None else msg,
            self.state.body.name,
        )

    def unwrap(self) -> Any:
        """
        Returns the payload (`None` if there is none).

        Raises a `ParseError` if the parse failed.
        """
        if not self.success:
            raise self.error()
        return self.value.value

    def __str__(self) -> str:
        if self.success:
            return "" if not self.value.has_value else str(self.value.value)
        return f"Failure: {self.describe()}"

    def __repr__(self) -> str:
        status = "ok" if self.success else "fail"
        return f"<Result {status} {self.start}..{self.end} {self.value!r}>"


def success(value: _T, state: State, start: int) -> Result[_T]:
    """Constructs a successful `Result` storing `value`, spanning from `start` to the position of `state`."""
    return Result(True, just(value), state, start)

def failure(state: State, start: int | None = None) -> Result[Any]:
    """Constructs a failed `Result` at `state`."""
    return Result(False, Nothing, state, state.position if start is None else start)



class Parser(Protocol[_DataCovT]):
    """
    A protocol for parsers: anything that takes a `State` and returns a `Result`.

    Parsers may advance the state they are given. Combinators that might backtrack give their sub-parsers a copy.
    """
    def __call__(self, state: State) -> Result[_DataCovT]: ...

ParserParameter = Parser[Any] | str
"""What combinators accept. A string is shorthand for `word(string)`."""

def convert_parser(parser: ParserParameter) -> Parser[Any]:
    if isinstance(parser, str):
        return word(parser)
    assert callable(parser)
    return parser

def convert_parsers(parsers: Sequence[ParserParameter]) -> tuple[Parser[Any], ...]:
    return tuple(convert_parser(parser) for parser in parsers)



def one_of(charset: str | Container[str]) -> Parser[str]:
    """
    Parser factory. Matches one character that's in `charset`.

    ```
    lower = one_of("abcdefghijklmnopqrstuvwxyz")
    ```
    """
    def parse(state: State) -> Result[str]:
        start = state.position
        cur = state.current
        if cur != "" and cur in charset:
            state.advance()
            return success(cur, state, start)
        return failure(state)
    return parse

def none_of(charset: str | Container[str]) -> Parser[str]:
    """
    Parser factory. Matches one character that's not in `charset`. Always fails at the end of the input.

    ```
    visible = none_of(" \\t\\n\\r\\f")
    ```
    """
    def parse(state: State) -> Result[str]:
        start = state.position
        cur = state.current
        # must consume one character
        if cur == "" or cur in charset:
            return failure(state)
        state.advance()
        return success(cur, state, start)
    return parse

def word(s: str) -> Parser[str]:
    """
    Parser factory. Matches `s` exactly. The empty string always matches.
    """
    length = len(s)
    def parse(state: State) -> Result[str]:
        start = state.position
        if state.body.text.startswith(s, start):
            state.advance_by(length)
            return success(s, state, start)
        return failure(state)
    return parse

def iword(s: str) -> Parser[str]:
    """
    Parser factory. Matches `s`, ignoring case.

    The payload is always the lower case form of `s`, not the matched text. Use `Result.matched()` for that.
    """
    # measured before lowering, some characters get longer in lower case
    length = len(s)
    lowered = s.lower()
    def parse(state: State) -> Result[str]:
        start = state.position
        chunk = state.body.text[start : start+length]
        if len(chunk) == length and chunk.lower() == lowered:
            state.advance_by(length)
            return success(lowered, state, start)
        return failure(state)
    return parse

any_: Final[Parser[str]] = none_of("")
"""Matches any single character. Only fails at the end of the input."""

def eof(state: State) -> Result[str]:
    """
    Matches the end of the input without consuming anything. The payload is the empty string.

    Since it never advances, it can match any number of times at the same position.
    """
    if state.position == state.body.length:
        return success("", state, state.position)
    return failure(state)



def plus(*parsers: ParserParameter) -> Parser[list[Any]]:
    """
    Combinator. Matches the parsers in sequence.

    The payload is the list of every present payload, in order. Returns the first failure as-is.

    ```
    word_pair = plus(letters, " ", letters)
    ```
    """
    new_parsers = convert_parsers(parsers)
    def parse(state: State) -> Result[list[Any]]:
        start = state.position
        values: list[Any] = []
        for parser in new_parsers:
            result = parser(state.copy())
            if not result.success:
                return result
            if result.value.has_value:
                values.append(result.value.value)
            state = result.state
        return success(values, state, start)
    return parse

def or_(*parsers: ParserParameter, deepest: bool = False) -> Parser[Any]:
    """
    Combinator. Tries the parsers in order, each from the original position, and returns the first success.

    If none match, fails at the original position. With `deepest=True`, returns the failure
    that got the furthest instead (the earliest one on ties), for better error messages.
    """
    new_parsers = convert_parsers(parsers)
    def parse(state: State) -> Result[Any]:
        furthest: Result[Any] | None = None
        for parser in new_parsers:
            result = parser(state.copy())
            if result.success:
                return result
            if deepest and (furthest is None or result.state.position > furthest.state.position):
                furthest = result
        if furthest is not None:
            return furthest
        return failure(state)
    return parse

def and_(*parsers: ParserParameter) -> Parser[Any]:
    """
    Combinator. All the parsers must match at the same position.

    Returns the result of the first parser. The others are only checked, they don't advance the state.
    """
    if len(parsers) <= 0:
        raise ValueError("At least one parser required.")
    first, *others = convert_parsers(parsers)
    def parse(state: State) -> Result[Any]:
        result = first(state.copy())
        if not result.success:
            return result
        for parser in others:
            check = parser(state.copy())
            if not check.success:
                return check
        return result
    return parse



def many(parser: ParserParameter) -> Parser[list[Any]]:
    """
    Combinator. Matches the parser zero or more times. Never fails.

    The payload is the list of the present payloads.

    A match that doesn't advance ends the repetition and isn't collected, so `many(eof)` or `many(peek(p))`
    stop instead of looping forever.
    """
    p = convert_parser(parser)
    def parse(state: State) -> Result[list[Any]]:
        start = state.position
        values: list[Any] = []
        while True:
            result = p(state.copy())
            if not result.success or result.state.position <= state.position:
                break
            if result.value.has_value:
                values.append(result.value.value)
            state = result.state
        return success(values, state, start)
    return parse

def _prepend_first(values: list[Any]) -> list[Any]:
    if len(values) == 2:
        return [values[0], *values[1]]
    # the first parser had no payload, only the repetition's list is left
    return values[0]

def _flatten(groups: list[list[Any]]) -> list[Any]:
    return [value for group in groups for value in group]

def many1(parser: ParserParameter) -> Parser[list[Any]]:
    """
    Combinator. Matches the parser one or more times.
    """
    p = convert_parser(parser)
    return fmap(_prepend_first, plus(p, many(p)))

def separated_by(parser: ParserParameter, separator: ParserParameter) -> Parser[list[Any]]:
    """
    Combinator. Matches one or more of `parser`, with `separator` between each.

    The separators' payloads are kept. Use `skip(separator)` to drop them.

    ```
    separated_by("!", "?")          # "!" -> ["!"], "!?!" -> ["!", "?", "!"]
    separated_by(item, skip(","))   # "a,b" -> [a, b]
    ```
    """
    p = convert_parser(parser)
    q = convert_parser(separator)
    return fmap(_prepend_first, plus(p, fmap(_flatten, many(plus(q, p)))))



def skip(parser: ParserParameter) -> Parser[Any]:
    """
    Combinator. Matches the parser, but throws away the payload.

    ```
    inside_parens = plus(skip("("), any_, skip(")"))
    ```
    """
    p = convert_parser(parser)
    def parse(state: State) -> Result[Any]:
        result = p(state)
        if not result.success:
            return result
        return Result(True, Nothing, result.state, result.start)
    return parse

_ABSENT: Final = object()

def option(parser: ParserParameter, default: Any = _ABSENT) -> Parser[Any]:
    """
    Combinator. Matches the parser zero or one times.

    If the parser doesn't match, succeeds without advancing. The payload is then `default` if it was given, otherwise none.

    ```
    signed = plus(option(one_of("+-")), many1(one_of(DECIMAL)))
    ```
    """
    p = convert_parser(parser)
    def parse(state: State) -> Result[Any]:
        result = p(state.copy())
        if result.success:
            return result
        if default is _ABSENT:
            return Result(True, Nothing, state, state.position)
        return success(default, state, state.position)
    return parse

def peek(parser: ParserParameter) -> Parser[Any]:
    """
    Combinator. Matches the parser without consuming anything.

    On failure the state of the failure is returned as usual, to allow for useful error messages.

    Once it succeeds it succeeds forever at the same position, take care with it inside repetitions.
    """
    p = convert_parser(parser)
    def parse(state: State) -> Result[Any]:
        result = p(state.copy())
        if not result.success:
            return result
        return Result(True, result.value, state, state.position)
    return parse

def not_(parser: ParserParameter) -> Parser[str]:
    """
    Combinator. Fails if the parser matches. Otherwise consumes one character with `any_`.

    This is not a pure negative lookahead: it consumes a character on success, and so also fails at the end of the input.
    Wrap it in `peek` (and usually `skip`) for a zero width check.

    ```
    # "/" that doesn't start a comment
    plus("/", skip(peek(not_("*"))))
    # content between delimiters
    plus(delim, many(not_(delim)), delim)
    ```
    """
    p = convert_parser(parser)
    def parse(state: State) -> Result[str]:
        result = p(state.copy())
        if result.success:
            return failure(state)
        return any_(state)
    return parse

def lift(f: Callable[[Any], _U]) -> Callable[[ParserParameter], Parser[_U]]:
    """
    Turns `f` into a function that transforms parsers: the new parser matches the same way, with `f` applied to the payload.
    """
    def wrap(parser: ParserParameter) -> Parser[_U]:
        p = convert_parser(parser)
        def parse(state: State) -> Result[_U]:
            result = p(state)
            if not result.success or not result.value.has_value:
                return result
            return Result(True, result.value.map(f), result.state, result.start)
        return parse
    return wrap

def fmap(f: Callable[[Any], _U], parser: ParserParameter) -> Parser[_U]:
    """Same as `lift(f)(parser)`."""
    return lift(f)(parser)



def prepare(text: str, name: str = "") -> State:
    """
    Creates a `Body` for `text` and a `State` at its start.

    ```
    result = many("!")(prepare("!!"))
    ```
    """
    return State(Body(text, name))

def run(parser: ParserParameter, text: str, name: str = "") -> Result[Any]:
    """Runs the parser over `text` from the start and returns the result."""
    result = convert_parser(parser)(prepare(text, name))
    if result.success:
        logger.debug("Matched %d of %d characters of %s.", result.end, len(text), name or "input")
    else:
        logger.debug("Parse of %s failed: %s", name or "input", result.describe())
    return result
