import pytest

from earlgrey import Body, Nothing, ParseError, Result, State, just, prepare, word


def test_body_at_is_bounds_checked():
    body = Body("abc")
    assert len(body) == 3
    assert body.at(0) == "a"
    assert body.at(2) == "c"
    assert body.at(3) == ""
    assert body.at(-1) == ""


def test_state_advance_keeps_current_in_sync():
    state = prepare("ab")
    assert (state.position, state.current) == (0, "a")
    state.advance()
    assert (state.position, state.current) == (1, "b")
    state.advance()
    assert (state.position, state.current) == (2, "")
    assert state.is_eof()


def test_state_advance_by():
    state = prepare("hello")
    state.advance_by(4)
    assert (state.position, state.current) == (4, "o")


def test_state_copy_is_independent():
    state = prepare("ab")
    copy = state.copy()
    copy.advance()
    assert state.position == 0
    assert copy.position == 1
    assert copy.body is state.body


def test_state_str():
    state = State(Body("ab", "file.js"))
    assert str(state) == "file.js: 0 [a]"


def test_maybe_map():
    assert just(1).map(lambda x: x + 1) == just(2)
    assert Nothing.map(lambda x: x + 1) is Nothing
    assert just(None).has_value


def test_result_success():
    result = word("ab")(prepare("abc"))
    assert result
    assert result.success
    assert result.value == just("ab")
    assert (result.start, result.end) == (0, 2)
    assert result.state.position == result.end
    assert result.matched() == "ab"
    assert result.unwrap() == "ab"
    assert str(result) == "ab"


def test_failed_result_has_no_value():
    state = prepare("abc")
    result = Result(False, just(1), state, 0)
    assert not result
    assert result.value is Nothing


def test_failure_messages():
    result = word("x")(prepare("abc"))
    assert str(result) == "Failure: error at character 0: unexpected character 'a'"
    result = word("x")(prepare(""))
    assert str(result) == "Failure: unexpected end-of-file"


def test_unwrap_raises_parse_error():
    result = word("x")(prepare("abc"))
    with pytest.raises(ParseError) as info:
        result.unwrap()
    assert info.value.pos == 0
    assert "unexpected character 'a'" in str(info.value)
    assert info.value.__notes__[0].startswith("At position 0 (line 1, column 1)")


def test_parse_error_line_and_column():
    error = ParseError("ab\ncd", 4, "bad", name="file.js")
    note = error.__notes__[0]
    assert note.startswith("file.js: At position 4 (line 2, column 2)")
    assert note.endswith("cd\n ^")
