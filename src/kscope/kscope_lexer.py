"""
Lexical analyzer for the kscope expression language.

This module turns raw source text into the flat token sequence consumed by the parser:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, value, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.
    LexerError: Internal failure of the lexical rules (never expected in practice).

Functions:
    strip_comments: Removes `#` line comments from source text.
    is_word_start / is_word_char: Character classes of identifiers.
    tokenize: Convenience wrapper returning every token of a source string, in source order.

Features:
    - Strips `#` comments up to the end of their line before scanning
    - Skips whitespace
    - Recognizes, in priority order:
        * Identifiers and the keywords `def` / `extern` (a letter, then letters,
          digits, combining marks or connector punctuation)
        * Numbers (`1`, `1.5`, `1.`), always converted to float
        * Punctuation: `;`, `(`, `)`, `,`
        * Any other single non-whitespace character as an operator

Example:
    >>> tokenize("def f(x) x + 1;")[:2]
    [Token(DEF, 'def'), Token(IDENT, 'f')]

Exports:
    - CharacterStream
    - Token
    - Lexer
    - LexerError
    - is_word_char
    - is_word_start
    - strip_comments
    - tokenize
"""

import re
import unicodedata
from typing import Any

from kscope.kscope_constants import COMMENT_CHAR, keyword_tokens, punctuation_tokens

COMMENT_RE = re.compile(rf"{re.escape(COMMENT_CHAR)}.*$", re.MULTILINE)
# ZERO WIDTH NON-JOINER and ZERO WIDTH JOINER
JOIN_CONTROLS = frozenset("\u200c\u200d")


class LexerError(RuntimeError):
    """Raised when a lexeme matched a lexical rule but could not be converted.

    This signals a defect in the lexical rules rather than bad user input, so it
    deliberately does not derive from `SyntaxError`.
    """


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Returns:
            str: The next character.

        Raises:
            LexerError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise LexerError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """
        Returns the character at the given offset from the current position without advancing.

        Args:
            offset (int, optional): Number of characters to look ahead. Defaults to 0.

        Returns:
            str: The character at the offset, or an empty string if out of bounds.
        """
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        """Checks if the stream has consumed all characters."""
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token.

    Token types are `DEF`, `EXTERN`, `DELIM`, `LPAREN`, `RPAREN`, `COMMA`,
    `IDENT`, `OPERATOR` and `NUMBER`, plus the internal `EOF` sentinel.
    `NUMBER` tokens hold a float value; every other token holds its text.

    Source position is informational only: two tokens are equal when their
    type and value are equal, wherever they appeared.

    Attributes:
        type (str): The token type.
        value (str | float): The lexeme, or the parsed number.
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
    """

    def __init__(self, type_: str, value: str | float | None, line: int = 0, col: int = 0):
        self.type = type_
        self.value = value
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value))

    def describe(self) -> str:
        """Returns the token as it would be quoted in an error message."""
        if self.type == "EOF":
            return "end of input"
        where = f" at line {self.line}, col {self.col}" if self.line else ""
        return f"{self.type} {self.value!r}{where}"


def strip_comments(source: str) -> str:
    """Removes every `#` comment, leaving the line breaks in place.

    Args:
        source (str): Raw source text, possibly spanning several lines.

    Returns:
        str: The source with each comment cut off at the end of its line.
    """
    return COMMENT_RE.sub("", source)


def is_word_start(ch: str) -> bool:
    """Alphabetic characters, including letter numbers such as `Ⅻ`."""
    return ch.isalpha() or unicodedata.category(ch) == "Nl"


def is_word_char(ch: str) -> bool:
    """Letters, decimal digits, combining marks and connector punctuation (`_`, `‿`)."""
    if is_word_start(ch) or ch.isdecimal() or ch in JOIN_CONTROLS:
        return True
    category = unicodedata.category(ch)
    return category.startswith("M") or category == "Pc"


class Lexer:
    """Lexical analyzer for kscope source.

    The Lexer takes a CharacterStream and converts it into a stream of Token objects,
    one per call to `next_token()`, ending with an `EOF` token. Comments must already
    have been removed with `strip_comments`; `tokenize` does both.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips all whitespace in the stream."""
        while not self.stream.end_of_file() and self.peek().isspace():
            self.advance()

    def read_word(self) -> str:
        """Consumes a maximal run of word characters (see `is_word_char`)."""
        word = ""
        while not self.stream.end_of_file() and is_word_char(self.peek()):
            word += self.advance()
        return word

    def read_number(self) -> str:
        """Consumes digits, then at most one `.` followed by more digits."""
        num = ""
        while not self.stream.end_of_file() and self.peek().isdecimal():
            num += self.advance()
        if self.peek() == ".":
            num += self.advance()
            while not self.stream.end_of_file() and self.peek().isdecimal():
                num += self.advance()
        return num

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Returns:
            Token: The next token, or an `EOF` token once the source is exhausted.

        Raises:
            LexerError: If a numeric lexeme cannot be converted to a float.
        """
        self.skip_whitespace()

        if self.stream.end_of_file():
            return Token("EOF", None, self.stream.line, self.stream.column)

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        # 1. Identifier or keyword
        if is_word_start(ch):
            ident = self.read_word()
            return Token(keyword_tokens.get(ident, "IDENT"), ident, line, col)

        # 2. Number
        if ch.isdecimal():
            num = self.read_number()
            try:
                value = float(num)
            except ValueError as e:
                raise LexerError(
                    f"Failed to parse number {num!r} at line {line}, col {col}"
                ) from e
            return Token("NUMBER", value, line, col)

        # 3. Punctuation
        if ch in punctuation_tokens:
            return Token(punctuation_tokens[ch], self.advance(), line, col)

        # 4. Anything else is a single-character operator
        return Token("OPERATOR", self.advance(), line, col)


def tokenize(source: str) -> list[Token]:
    """Tokenizes a whole source string.

    Args:
        source (str): Source text, possibly containing comments.

    Returns:
        list[Token]: Every token in source order, without the `EOF` sentinel.
    """
    lexer = Lexer(CharacterStream(strip_comments(source)))
    tokens = []
    while True:
        tok = lexer.next_token()
        if tok.type == "EOF":
            break
        tokens.append(tok)
    return tokens


__all__ = [
    "CharacterStream",
    "Lexer",
    "LexerError",
    "Token",
    "is_word_char",
    "is_word_start",
    "strip_comments",
    "tokenize",
]
