import re

import pytest

from lrlex.lexemes import Span
from lrlex.rule import Rule


def make(re_str, tok_id=0, name="x"):
    return Rule(tok_id, name, Span(0, 0), re_str)


def test_match_at_start():
    rule = make("[0-9]+")
    assert rule.match_len("123 abc", 0) == 3


def test_match_at_position():
    rule = make("[a-zA-Z]+")
    assert rule.match_len("123 abc", 4) == 3


def test_no_match_returns_none():
    rule = make("[0-9]+")
    assert rule.match_len("abc", 0) is None


def test_match_is_anchored():
    rule = make("b")
    assert rule.match_len("ab", 0) is None
    assert rule.match_len("ab", 1) == 1


def test_dot_matches_newline():
    rule = make("'.*'")
    s = "'a\nb'\n"
    assert rule.match_len(s, 0) == len("'a\nb'")


def test_caret_matches_at_position():
    rule = make("^z")
    assert rule.match_len("az", 1) == 1


def test_alternation_is_grouped():
    rule = make("a|bc")
    assert rule.match_len("bc", 0) == 2
    assert rule.match_len("xa", 1) == 1


def test_invalid_regex_raises():
    with pytest.raises(re.error):
        make("[0-9")


def test_fields_kept_and_tok_id_mutable():
    rule = Rule(None, None, Span(21, 21), "[ ]")
    assert rule.name is None
    assert rule.name_span == Span(21, 21)
    assert rule.re_str == "[ ]"
    rule.tok_id = 5
    assert rule.tok_id == 5
    assert rule.match_len(" ", 0) == 1