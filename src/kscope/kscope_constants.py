"""
Shared lexical tables and parser defaults for kscope.

Exports:
    keyword_tokens: Reserved words and the token types they produce.
    punctuation_tokens: Single-character punctuation and its token types.
    DEFAULT_PRECEDENCE: Binding power of the built-in infix operators.
    COMMENT_CHAR: Character that starts a line comment.
"""

keyword_tokens: dict[str, str] = {
    "def": "DEF",
    "extern": "EXTERN",
}

punctuation_tokens: dict[str, str] = {
    ";": "DELIM",
    "(": "LPAREN",
    ")": "RPAREN",
    ",": "COMMA",
}

# Higher binds tighter.
DEFAULT_PRECEDENCE: dict[str, int] = {
    "*": 40,
    "/": 40,
    "+": 20,
    "-": 20,
}

COMMENT_CHAR = "#"

__all__ = ["COMMENT_CHAR", "DEFAULT_PRECEDENCE", "keyword_tokens", "punctuation_tokens"]
