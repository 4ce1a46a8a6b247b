"""
kscope Parser

Parses kscope tokens into the top-level AST handed to the code generator.

This module transforms the flat list of lexer-generated `Token` objects into a list of
`Extern` and `Function` nodes. Statement-level structure is parsed by recursive descent;
infix expressions are parsed by precedence climbing driven by a per-parser operator table.

Supported Constructs
--------------------
- `def name(a, b) expr`   : function definition with a single-expression body
- `extern name(a, b)`     : external declaration
- `;`                     : separator between top-level items, otherwise ignored
- `expr`                  : bare expression, wrapped as an anonymous zero-argument function

- Expressions:
    * Number literals and variables
    * Calls: `f()`, `f(a, b + 1)`
    * Parenthesized sub-expressions
    * Infix operators from the precedence table (default `* /` at 40, `+ -` at 20)

Parser Behavior
---------------
- Fails fast: the first malformed construct raises a `ParserError` and nothing is returned.
- No semantic checks: duplicate parameters and unknown names are left to the code generator.
- Equal-precedence operators fold to the left; higher precedence nests to the right.

Entry Points
------------
- `Parser.parse()`: Parse a full program into a list of top-level AST nodes.
- `Parser.parse_expression()`: Parse a single expression.
- `parse_source()`: Tokenize and parse a source string in one call.

Raises
------
InvalidToken
    A token appeared where the grammar does not allow it.
InvalidOperator
    An operator appeared that has no entry in the precedence table.
UnexpectedEOF
    The input ended while the grammar required more.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from kscope.kscope_ast import (
    ASTNode,
    Binary,
    Call,
    Expression,
    Extern,
    Function,
    Literal,
    Prototype,
    Variable,
)
from kscope.kscope_constants import (
    COMMENT_CHAR,
    DEFAULT_PRECEDENCE,
    punctuation_tokens,
)
from kscope.kscope_lexer import Token, is_word_char, tokenize

logger = logging.getLogger(__name__)


class ParserError(SyntaxError):
    """Base class of every syntax error reported by the parser."""

    def __eq__(self, other: Any) -> bool:
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class InvalidToken(ParserError):
    """A token was present but not valid at this position of the grammar."""

    def __init__(self, token: Token) -> None:
        super().__init__(f"invalid token {token.describe()}")
        self.token = token
        self.args = (token,)


class InvalidOperator(ParserError):
    """An operator token has no configured precedence."""

    def __init__(self, symbol: str) -> None:
        super().__init__(f"invalid operator {symbol!r}")
        self.symbol = symbol
        self.args = (symbol,)


class UnexpectedEOF(ParserError):
    """The token stream ran out while the grammar required more input."""

    def __init__(self) -> None:
        super().__init__("unexpected end of file")
        self.args = ()


def validate_precedence(precedence: Mapping[str, int]) -> dict[str, int]:
    """Checks an operator table and returns a private copy of it.

    Args:
        precedence: Mapping of operator symbol to binding power.

    Returns:
        dict[str, int]: A copy safe to keep for the lifetime of a parser.

    Raises:
        ValueError: If a symbol could never be lexed as an operator, or a binding
            power is not a non-negative integer.
    """
    table: dict[str, int] = {}
    for symbol, power in precedence.items():
        if (
            not isinstance(symbol, str)
            or len(symbol) != 1
            or symbol.isspace()
            or is_word_char(symbol)
            or symbol == COMMENT_CHAR
            or symbol in punctuation_tokens
        ):
            raise ValueError(f"Operator must be a single operator character, got {symbol!r}")
        if isinstance(power, bool) or not isinstance(power, int) or power < 0:
            raise ValueError(
                f"Precedence of {symbol!r} must be a non-negative integer, got {power!r}"
            )
        table[symbol] = power
    return table


class Parser:
    """
    kscope Parser Class

    Walks a token list with a forward cursor and builds top-level AST nodes.
    The cursor is the only state that changes while parsing; the precedence table
    is copied on construction and only read afterwards.

    Attributes
    ----------
    tokens : list[Token]
        The input token stream, in source order. A trailing `EOF` token is allowed.
    position : int
        Current index into the token stream.
    precedence : dict[str, int]
        Binding power of every accepted operator symbol.

    Raises
    ------
    ParserError
        When an invalid construct or malformed syntax is encountered during parsing.
    ValueError
        When the precedence table is malformed.
    """

    def __init__(
        self, tokens: list[Token], precedence: Mapping[str, int] | None = None
    ) -> None:
        self.tokens: list[Token] = tokens
        self.position: int = 0
        self.precedence: dict[str, int] = validate_precedence(
            DEFAULT_PRECEDENCE if precedence is None else precedence
        )

    def current(self) -> Token:
        return (
            self.tokens[self.position]
            if self.position < len(self.tokens)
            else Token("EOF", None)
        )

    def advance(self) -> Token:
        tok = self.current()
        self.position += 1
        return tok

    def at_end(self) -> bool:
        return self.current().type == "EOF"

    def expect(self, *types: str) -> Token:
        """Consume the current token if its type is one of `types`."""
        tok = self.current()
        if tok.type == "EOF":
            raise UnexpectedEOF()
        if tok.type not in types:
            raise InvalidToken(tok)
        return self.advance()

    def operator_precedence(self, tok: Token) -> int:
        """Binding power of an operator token; unknown symbols are an error."""
        symbol = str(tok.value)
        if symbol not in self.precedence:
            raise InvalidOperator(symbol)
        return self.precedence[symbol]

    def parse(self) -> list[ASTNode]:
        """Parse a full program and return its top-level AST nodes in source order."""
        ast: list[ASTNode] = []
        while not self.at_end():
            tok = self.current()
            if tok.type == "DEF":
                self.advance()
                ast.append(self.parse_function())
            elif tok.type == "EXTERN":
                self.advance()
                ast.append(self.parse_extern())
            elif tok.type == "DELIM":
                self.advance()
                continue
            else:
                ast.append(self.parse_lambda())
            logger.debug("parsed top-level %s", ast[-1].kind)
        return ast

    def parse_function(self) -> Function:
        """Parse `name(params) body` after the `def` keyword."""
        proto = self.parse_prototype()
        body = self.parse_expression()
        return Function(proto, body)

    def parse_extern(self) -> Extern:
        """Parse `name(params)` after the `extern` keyword."""
        return Extern(self.parse_prototype())

    def parse_lambda(self) -> Function:
        """Wrap a bare top-level expression as an anonymous function."""
        return Function.anonymous(self.parse_expression())

    def parse_prototype(self) -> Prototype:
        """Parse a function name followed by a parenthesized list of parameter names."""
        name = self.expect("IDENT").value
        self.expect("LPAREN")
        params: list[str] = []
        if self.current().type != "RPAREN":
            while True:
                params.append(str(self.expect("IDENT").value))
                if self.current().type != "COMMA":
                    break
                self.advance()
        self.expect("RPAREN")
        return Prototype(str(name), params)

    def parse_expression(self) -> Expression:
        """Parse one complete infix expression."""
        lhs = self.parse_primary()
        return self.parse_rhs(0, lhs)

    def parse_primary(self) -> Expression:
        """Parse a literal, variable, call, or parenthesized expression."""
        tok = self.current()
        if tok.type == "NUMBER":
            self.advance()
            return Literal(float(tok.value))  # type: ignore[arg-type]
        if tok.type == "IDENT":
            return self.parse_identifier()
        if tok.type == "LPAREN":
            return self.parse_nested()
        if tok.type == "EOF":
            raise UnexpectedEOF()
        raise InvalidToken(tok)

    def parse_identifier(self) -> Expression:
        """Parse a variable reference, or a call when `(` follows the name."""
        name = str(self.advance().value)
        if self.current().type != "LPAREN":
            return Variable(name)

        self.advance()
        args: list[Expression] = []
        if self.current().type != "RPAREN":
            while True:
                args.append(self.parse_expression())
                if self.current().type != "COMMA":
                    break
                self.advance()
        self.expect("RPAREN")
        return Call(name, args)

    def parse_nested(self) -> Expression:
        """Parse `( expr )`; the parentheses leave no node behind."""
        self.expect("LPAREN")
        expr = self.parse_expression()
        self.expect("RPAREN")
        return expr

    def parse_rhs(self, min_precedence: int, lhs: Expression) -> Expression:
        """Fold `op operand` pairs onto `lhs` while operators bind at least `min_precedence`.

        An operand followed by a tighter-binding operator first absorbs that suffix,
        so `1 + 2 * 3` nests the product on the right while `1 - 2 - 3` folds left.
        """
        while True:
            tok = self.current()
            if tok.type != "OPERATOR":
                return lhs
            precedence = self.operator_precedence(tok)
            if precedence < min_precedence:
                return lhs
            self.advance()

            rhs = self.parse_primary()

            nxt = self.current()
            if nxt.type == "OPERATOR" and self.operator_precedence(nxt) > precedence:
                rhs = self.parse_rhs(precedence + 1, rhs)

            lhs = Binary(str(tok.value), lhs, rhs)


def parse_source(
    source: str, precedence: Mapping[str, int] | None = None
) -> list[ASTNode]:
    """Tokenize and parse `source` in one step.

    Args:
        source: kscope source text.
        precedence: Optional operator table; defaults to `DEFAULT_PRECEDENCE`.

    Returns:
        list[ASTNode]: The top-level nodes in source order.

    Raises:
        ParserError: On the first syntax error.
    """
    return Parser(tokenize(source), precedence).parse()


__all__ = [
    "InvalidOperator",
    "InvalidToken",
    "Parser",
    "ParserError",
    "UnexpectedEOF",
    "parse_source",
    "validate_precedence",
]
