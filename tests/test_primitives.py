import pytest

from earlgrey import any_, eof, iword, none_of, one_of, plus, prepare, run, word


def test_one_of():
    result = one_of("abc")(prepare("bx"))
    assert result.value.value == "b"
    assert result.end == 1

    assert not one_of("abc")(prepare("x"))
    assert not one_of("abc")(prepare(""))


def test_one_of_accepts_sets():
    assert one_of(frozenset("xyz"))(prepare("y"))


def test_one_of_failure_does_not_advance():
    state = prepare("x")
    result = one_of("abc")(state)
    assert result.state.position == 0
    assert state.position == 0


def test_none_of():
    assert none_of("abc")(prepare("x")).value.value == "x"
    assert not none_of("abc")(prepare("a"))
    assert not none_of("abc")(prepare(""))


def test_any_only_fails_at_eof():
    assert any_(prepare("z")).matched() == "z"
    assert any_(prepare("\n")).matched() == "\n"
    assert not any_(prepare(""))


@pytest.mark.parametrize("s", ["", "a", "hello", "héllo wörld", "/**"])
def test_word_matches_itself(s):
    result = run(word(s), s)
    assert result.success
    assert result.end - result.start == len(s)
    assert result.matched() == s


def test_word_needs_the_whole_string():
    result = word("abc")(prepare("ab"))
    assert not result
    assert result.state.position == 0


def test_word_is_case_sensitive():
    assert not word("abc")(prepare("ABC"))


def test_iword():
    result = iword("HeLLo")(prepare("hELLO world"))
    assert result.value.value == "hello"
    assert result.matched() == "hELLO"
    assert not iword("hello")(prepare("help"))


def test_iword_stays_inside_the_input():
    # "İ" is one character but lower-cases to two
    result = iword("İ")(prepare("İ"))
    assert result.end <= 1
    assert result.state.position <= result.state.body.length
    assert plus(iword("İ"), eof)(prepare("İ"))
    assert not plus(iword("i\u0307"), eof)(prepare("İ"))


def test_eof():
    result = eof(prepare(""))
    assert result.value.value == ""
    assert result.end == 0
    assert not eof(prepare("a"))
    assert plus("a", eof)(prepare("a")).value.value == ["a", ""]


def test_eof_is_zero_width():
    result = plus(eof, eof, eof)(prepare(""))
    assert result.success
    assert result.end == 0
