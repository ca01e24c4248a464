import pytest

from lrlex.errors import LexBuildError
from lrlex.lexemes import DefaultLexeme, LexError, Span
from lrlex.lexer import LRNonStreamingLexer, LRNonStreamingLexerDef
from lrlex.rule import Rule


def _id_lexerdef(pattern: str = "[a-z]+"):
    src = f"%%\n{pattern} 'ID'\n[ \\n] ;"
    lexerdef = LRNonStreamingLexerDef.from_str(src)
    assert lexerdef.set_rule_ids({"ID": 0}) == (None, None)
    return lexerdef


def test_basic():
    src = "\n%%\n[0-9]+ 'int'\n[a-zA-Z]+ 'id'\n[ \\t] ;\n        "
    lexerdef = LRNonStreamingLexerDef.from_str(src, 255)
    assert lexerdef.set_rule_ids({"int": 0, "id": 1}) == (None, None)

    lexemes = list(lexerdef.lexer("abc 123"))
    assert len(lexemes) == 2
    lex1, lex2 = lexemes
    assert lex1.tok_id == 1
    assert lex1.span().start == 0
    assert len(lex1.span()) == 3
    assert lex2.tok_id == 0
    assert lex2.span().start == 4
    assert len(lex2.span()) == 3


def test_basic_error():
    src = "\n%%\n[0-9]+ 'int'\n        "
    lexerdef = LRNonStreamingLexerDef.from_str(src, 255)
    with pytest.raises(LexError) as excinfo:
        next(iter(lexerdef.lexer("abc")))
    assert excinfo.value.span == Span(0, 0)


def test_longest_match():
    src = "%%\nif 'IF'\n[a-z]+ 'ID'\n[ ] ;"
    lexerdef = LRNonStreamingLexerDef.from_str(src)
    assert lexerdef.set_rule_ids({"IF": 0, "ID": 1}) == (None, None)

    lexemes = list(lexerdef.lexer("iff if"))
    assert len(lexemes) == 2
    assert lexemes[0].tok_id == 1
    assert lexemes[0].span() == Span(0, 3)
    assert lexemes[1].tok_id == 0
    assert lexemes[1].span() == Span(4, 6)


def test_multibyte():
    src = "%%\n[a❤]+ 'ID'\n[ ] ;"
    lexerdef = LRNonStreamingLexerDef.from_str(src)
    assert lexerdef.set_rule_ids({"ID": 0}) == (None, None)

    lexer = lexerdef.lexer("a ❤ a")
    lexemes = list(lexer)
    assert len(lexemes) == 3
    assert lexemes[0].span() == Span(0, 1)
    assert lexer.span_str(lexemes[0].span()) == "a"
    # Offsets count characters, so the heart occupies a single position.
    assert lexemes[1].span() == Span(2, 3)
    assert lexer.span_str(lexemes[1].span()) == "❤"
    assert lexemes[2].span() == Span(4, 5)
    assert lexer.span_str(lexemes[2].span()) == "a"


def test_line_col():
    lexerdef = _id_lexerdef()

    lexer = lexerdef.lexer("a b c")
    lexemes = list(lexer)
    assert len(lexemes) == 3
    assert lexer.line_col(lexemes[1].span()) == ((1, 3), (1, 4))
    assert lexer.span_lines_str(lexemes[1].span()) == "a b c"
    assert lexer.span_lines_str(lexemes[2].span()) == "a b c"

    lexer = lexerdef.lexer("a b c\n")
    lexemes = list(lexer)
    assert len(lexemes) == 3
    assert lexer.line_col(lexemes[1].span()) == ((1, 3), (1, 4))
    assert lexer.span_lines_str(lexemes[1].span()) == "a b c"
    assert lexer.span_lines_str(lexemes[2].span()) == "a b c"

    lexer = lexerdef.lexer(" a\nb\n  c d")
    lexemes = list(lexer)
    assert len(lexemes) == 4
    assert lexer.line_col(lexemes[0].span()) == ((1, 2), (1, 3))
    assert lexer.line_col(lexemes[1].span()) == ((2, 1), (2, 2))
    assert lexer.line_col(lexemes[2].span()) == ((3, 3), (3, 4))
    assert lexer.line_col(lexemes[3].span()) == ((3, 5), (3, 6))
    assert lexer.span_lines_str(lexemes[0].span()) == " a"
    assert lexer.span_lines_str(lexemes[1].span()) == "b"
    assert lexer.span_lines_str(lexemes[2].span()) == "  c d"
    assert lexer.span_lines_str(lexemes[3].span()) == "  c d"


def test_line_col_many_lines():
    lexerdef = _id_lexerdef()
    lines = []
    offs = [0]
    for i in range(71):
        offs.append(offs[i] + i + 1)
        lines.append(" ".join(["a"] * i))
    s = "\n".join(lines)
    lexer = lexerdef.lexer(s)
    lexemes = list(lexer)
    assert len(lexemes) == offs[70]
    assert lexer.span_lines_str(Span(0, 0)) == ""
    assert lexer.span_lines_str(Span(0, 2)) == "\na"
    assert lexer.span_lines_str(Span(0, 4)) == "\na\na a"
    assert lexer.span_lines_str(Span(0, 7)) == "\na\na a\na a a"
    assert lexer.span_lines_str(Span(4, 7)) == "a a\na a a"
    assert lexer.span_lines_str(lexemes[0].span()) == "a"
    assert lexer.span_lines_str(lexemes[1].span()) == "a a"
    assert lexer.span_lines_str(lexemes[3].span()) == "a a a"
    for i in range(70):
        assert lexer.span_lines_str(lexemes[offs[i]].span()) == " ".join(["a"] * (i + 1))


def test_line_col_multibyte():
    lexerdef = _id_lexerdef("[a-z❤]+")
    lexer = lexerdef.lexer(" a\n❤ b")
    lexemes = list(lexer)
    assert len(lexemes) == 3
    assert lexer.line_col(lexemes[0].span()) == ((1, 2), (1, 3))
    assert lexer.line_col(lexemes[1].span()) == ((2, 1), (2, 2))
    assert lexer.line_col(lexemes[2].span()) == ((2, 3), (2, 4))
    assert lexer.span_lines_str(lexemes[0].span()) == " a"
    assert lexer.span_lines_str(lexemes[1].span()) == "❤ b"
    assert lexer.span_lines_str(lexemes[2].span()) == "❤ b"


def test_bad_line_col():
    lexer = _id_lexerdef().lexer("a b c")
    with pytest.raises(IndexError):
        lexer.line_col(Span(100, 100))


def test_bad_span_str():
    lexer = _id_lexerdef().lexer("a b c")
    with pytest.raises(IndexError):
        lexer.span_str(Span(3, 6))


def test_missing_from_lexer_and_parser():
    src = "%%\n[a-z]+ 'ID'\n[ \\n] ;"
    lexerdef = LRNonStreamingLexerDef.from_str(src, 255)
    assert lexerdef.set_rule_ids({"INT": 0}) == ({"INT"}, {"ID"})

    with pytest.raises(LexError) as excinfo:
        next(iter(lexerdef.lexer(" a ")))
    assert excinfo.value.span == Span(1, 1)


def test_multiline_lexeme():
    src = "%%\n'.*' 'STR'\n[ \\n] ;"
    lexerdef = LRNonStreamingLexerDef.from_str(src)
    assert lexerdef.set_rule_ids({"STR": 0}) == (None, None)

    lexer = lexerdef.lexer("'a\nb'\n")
    lexemes = list(lexer)
    assert len(lexemes) == 1
    assert lexer.line_col(lexemes[0].span()) == ((1, 1), (2, 3))
    assert lexer.span_lines_str(lexemes[0].span()) == "'a\nb'"


def test_token_span():
    src = "%%\na 'A'\nb 'B'\n[ \\n] ;"
    lexerdef = LRNonStreamingLexerDef.from_str(src, 255)
    assert lexerdef.get_rule_by_name("A").name_span == Span(6, 7)
    assert lexerdef.get_rule_by_name("B").name_span == Span(12, 13)
    anonymous = [r for r in lexerdef.iter_rules() if r.name is None]
    assert anonymous[0].name_span == Span(21, 21)


def test_lexemes_before_error_are_yielded():
    lexerdef = _id_lexerdef()
    lexer = lexerdef.lexer("ab 9")
    seen = []
    with pytest.raises(LexError) as excinfo:
        for lexeme in lexer:
            seen.append(lexeme)
    assert seen == [DefaultLexeme(0, 0, 2)]
    assert excinfo.value.span == Span(3, 3)


def test_get_rule_and_by_id():
    lexerdef = LRNonStreamingLexerDef.from_str("%%\n[0-9]+ 'int'\n[a-z]+ 'id'\n")
    assert lexerdef.get_rule(0).name == "int"
    assert lexerdef.get_rule(1).name == "id"
    assert lexerdef.get_rule(2) is None
    assert lexerdef.get_rule(-1) is None
    assert lexerdef.get_rule_by_id(1).name == "id"
    with pytest.raises(KeyError):
        lexerdef.get_rule_by_id(7)
    assert lexerdef.get_rule_by_name("nope") is None


def test_set_rule_ids_updates_ids():
    lexerdef = LRNonStreamingLexerDef.from_str("%%\n[0-9]+ 'int'\n[a-z]+ 'id'\n")
    assert lexerdef.set_rule_ids({"int": 5, "id": 9}) == (None, None)
    assert lexerdef.get_rule_by_id(9).name == "id"
    assert list(lexerdef.lexer("12")) == [DefaultLexeme(5, 0, 2)]


def test_from_rules():
    rules = [Rule(0, "NUM", Span(0, 0), "[0-9]+"), Rule(1, None, Span(0, 0), " ")]
    lexerdef = LRNonStreamingLexerDef.from_rules(rules)
    assert [r.name for r in lexerdef.iter_rules()] == ["NUM", None]
    lexer = lexerdef.lexer("1 22")
    assert [lexer.span_str(l.span()) for l in lexer] == ["1", "22"]


def test_from_str_error():
    with pytest.raises(LexBuildError):
        LRNonStreamingLexerDef.from_str("%%\n[0-9] int")


def test_manual_lexer_construction():
    lexer = LRNonStreamingLexer("x\ny", [DefaultLexeme(0, 0, 1), DefaultLexeme(0, 2, 1)], [2])
    assert [l.start for l in lexer] == [0, 2]
    assert lexer.line_col(Span(2, 3)) == ((2, 1), (2, 2))
    assert lexer.span_lines_str(Span(2, 3)) == "y"


def test_empty_input():
    lexer = _id_lexerdef().lexer("")
    assert list(lexer) == []