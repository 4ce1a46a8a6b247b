import pytest
from hypothesis import given
from hypothesis import strategies as st

from kscope.kscope_lexer import (
    CharacterStream,
    Lexer,
    LexerError,
    Token,
    strip_comments,
    tokenize,
)


def test_function_definition_tokens() -> None:
    assert tokenize("def func(x) x + 1;") == [
        Token("DEF", "def"),
        Token("IDENT", "func"),
        Token("LPAREN", "("),
        Token("IDENT", "x"),
        Token("RPAREN", ")"),
        Token("IDENT", "x"),
        Token("OPERATOR", "+"),
        Token("NUMBER", 1.0),
        Token("DELIM", ";"),
    ]


def test_punctuation_tokens() -> None:
    types = [tok.type for tok in tokenize("; ( ) ,")]
    assert types == ["DELIM", "LPAREN", "RPAREN", "COMMA"]


def test_extern_keyword() -> None:
    assert tokenize("extern sin(x)")[0] == Token("EXTERN", "extern")


def test_keyword_prefix_is_identifier() -> None:
    assert tokenize("define externs") == [
        Token("IDENT", "define"),
        Token("IDENT", "externs"),
    ]


def test_letter_followed_by_digits_is_one_identifier() -> None:
    assert tokenize("x1_y2") == [Token("IDENT", "x1_y2")]


def test_leading_underscore_is_an_operator() -> None:
    assert tokenize("_x") == [Token("OPERATOR", "_"), Token("IDENT", "x")]


def test_combining_mark_stays_in_identifier() -> None:
    # "e" followed by U+0301 COMBINING ACUTE ACCENT
    assert tokenize("e\u0301 + 1") == [
        Token("IDENT", "e\u0301"),
        Token("OPERATOR", "+"),
        Token("NUMBER", 1.0),
    ]


@pytest.mark.parametrize(  # type: ignore[misc]
    "source",
    [
        "\u216b",  # ROMAN NUMERAL TWELVE, a letter number
        "a\u203fb",  # UNDERTIE, connector punctuation
        "caf\u00e9",
        "x\u0308\u0301",
    ],
)
def test_unicode_identifiers(source: str) -> None:
    assert tokenize(source) == [Token("IDENT", source)]


def test_combining_mark_alone_is_an_operator() -> None:
    assert tokenize("\u0301x") == [Token("OPERATOR", "\u0301"), Token("IDENT", "x")]


@pytest.mark.parametrize(  # type: ignore[misc]
    "source,value",
    [
        ("123", 123.0),
        ("1.5", 1.5),
        ("1.", 1.0),
        ("007", 7.0),
        ("0.125", 0.125),
    ],
)
def test_number_token(source: str, value: float) -> None:
    tokens = tokenize(source)
    assert tokens == [Token("NUMBER", value)]
    assert isinstance(tokens[0].value, float)


def test_number_with_two_dots_splits() -> None:
    assert tokenize("1.2.3") == [
        Token("NUMBER", 1.2),
        Token("OPERATOR", "."),
        Token("NUMBER", 3.0),
    ]


def test_number_then_identifier() -> None:
    assert tokenize("2x") == [Token("NUMBER", 2.0), Token("IDENT", "x")]


def test_leading_dot_is_an_operator() -> None:
    assert tokenize(".5") == [Token("OPERATOR", "."), Token("NUMBER", 5.0)]


def test_any_other_character_is_an_operator() -> None:
    assert tokenize("a:b<c") == [
        Token("IDENT", "a"),
        Token("OPERATOR", ":"),
        Token("IDENT", "b"),
        Token("OPERATOR", "<"),
        Token("IDENT", "c"),
    ]


def test_operators_are_single_characters() -> None:
    assert tokenize("<=") == [Token("OPERATOR", "<"), Token("OPERATOR", "=")]


def test_whitespace_produces_no_tokens() -> None:
    assert tokenize("  \t\r\n ") == []
    assert tokenize("") == []


def test_strip_comments_removes_to_end_of_line() -> None:
    assert strip_comments("# somebody \na") == "\na"
    assert strip_comments("x # trailing\ny") == "x \ny"


def test_comment_line_tokenizes_like_nothing() -> None:
    assert tokenize("# note\na") == tokenize("a")


def test_comment_hides_operators_and_keywords() -> None:
    assert tokenize("1 # def f(x) + ;\n+ 2") == [
        Token("NUMBER", 1.0),
        Token("OPERATOR", "+"),
        Token("NUMBER", 2.0),
    ]


@given(st.text(alphabet="ab #;\n(", max_size=40))  # type: ignore[misc]
def test_strip_comments_is_idempotent(text: str) -> None:
    once = strip_comments(text)
    assert strip_comments(once) == once
    assert "#" not in once


def test_line_and_column_tracking() -> None:
    tokens = tokenize("def f(x)\n  x * 2")
    x = tokens[5]
    assert x == Token("IDENT", "x")
    assert (x.line, x.col) == (2, 3)
    assert (tokens[0].line, tokens[0].col) == (1, 1)


def test_token_equality_ignores_position() -> None:
    assert Token("IDENT", "a", 1, 1) == Token("IDENT", "a", 4, 9)
    assert hash(Token("IDENT", "a", 1, 1)) == hash(Token("IDENT", "a", 4, 9))
    assert Token("IDENT", "a") != Token("OPERATOR", "a")
    assert Token("IDENT", "a") != "a"


def test_token_repr_and_describe() -> None:
    tok = Token("OPERATOR", "+", 2, 5)
    assert repr(tok) == "Token(OPERATOR, '+')"
    assert tok.describe() == "OPERATOR '+' at line 2, col 5"
    assert Token("EOF", None).describe() == "end of input"


def test_lexer_returns_eof_repeatedly() -> None:
    lexer = Lexer(CharacterStream("x"))
    assert lexer.next_token() == Token("IDENT", "x")
    assert lexer.next_token().type == "EOF"
    assert lexer.next_token().type == "EOF"


def test_character_stream_methods() -> None:
    stream = CharacterStream("ab\nc")
    assert stream.peek() == "a"
    assert stream.peek(3) == "c"
    assert stream.peek(10) == ""
    assert stream.next() == "a"
    stream.next()
    stream.next()
    assert (stream.line, stream.column) == (2, 1)
    stream.next()
    assert stream.end_of_file()
    with pytest.raises(LexerError):
        stream.next()


def test_unconvertible_number_is_internal_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(Lexer, "read_number", lambda self: "1.2.3")
    with pytest.raises(LexerError, match="Failed to parse number"):
        Lexer(CharacterStream("1")).next_token()


def test_lexer_error_is_not_a_syntax_error() -> None:
    assert not issubclass(LexerError, SyntaxError)


@given(st.text(max_size=60))  # type: ignore[misc]
def test_tokenize_never_fails(text: str) -> None:
    for tok in tokenize(text):
        assert tok.type != "EOF"
        if tok.type == "OPERATOR":
            assert isinstance(tok.value, str) and len(tok.value) == 1
            assert not tok.value.isspace()
