"""
Prints kscope AST nodes back to canonical kscope source.

This module defines the `SourceEmitter` class, used by the `Transpiler` to turn a parsed
program back into text. The output is canonical rather than a copy of the input:

Behavior:
    - One top-level item per line, each terminated by `;`.
    - Anonymous functions print as their bare body expression.
    - Every operand that is itself a binary expression is parenthesized, so the
      printed text re-parses to the same tree under any precedence table.
    - Numbers print in plain positional decimal with a `.` (`1.0`, `0.0000001`),
      which the lexer reads back to the identical float.

Raises:
    - `ValueError`: If a literal is infinite or NaN, which the language cannot spell.
    - `NotImplementedError`: If an expression node has no corresponding emitter.
"""

import math
from decimal import Decimal

from kscope.kscope_ast import (
    Binary,
    Call,
    Expression,
    Extern,
    Function,
    Literal,
    Prototype,
    Variable,
)


def format_number(value: float) -> str:
    """Spell a float so that the kscope lexer reads back exactly the same value."""
    if not math.isfinite(value):
        raise ValueError(f"Cannot emit non-finite literal: {value!r}")
    if math.copysign(1.0, value) < 0:
        raise ValueError(f"Cannot emit negative literal: {value!r}")
    text = format(Decimal(repr(value)), "f")
    if "." not in text:
        text += ".0"
    return text


class SourceEmitter:
    """Emits canonical kscope source from AST nodes.

    Attributes:
        lines (list[str]): Accumulated lines of emitted source.
    """

    def __init__(self) -> None:
        self.lines: list[str] = []

    def get_output(self) -> str:
        return "\n".join(self.lines)

    def emit_prototype(self, proto: Prototype) -> str:
        return f"{proto.name}({', '.join(proto.params)})"

    def emit_extern(self, node: Extern) -> None:
        self.lines.append(f"extern {self.emit_prototype(node.prototype)};")

    def emit_function(self, node: Function) -> None:
        body = self.emit_expr(node.body)
        if node.is_anonymous:
            self.lines.append(f"{body};")
        else:
            self.lines.append(f"def {self.emit_prototype(node.prototype)} {body};")

    def emit_expr(self, node: Expression) -> str:
        """
        Emits an expression by dispatching on its kind.

        Parameters
        ----------
        node : Expression
            Any expression node.

        Returns
        -------
        str
            The canonical source text of the expression.
        """
        method = getattr(self, f"emit_expr_{node.kind}", None)
        if method is None:
            raise NotImplementedError(f"No emitter for expression kind '{node.kind}'")
        return method(node)  # type: ignore[no-any-return]

    def emit_expr_literal(self, node: Literal) -> str:
        return format_number(node.value)

    def emit_expr_variable(self, node: Variable) -> str:
        return node.name

    def emit_expr_call(self, node: Call) -> str:
        args = ", ".join(self.emit_expr(a) for a in node.args)
        return f"{node.callee}({args})"

    def emit_expr_binary(self, node: Binary) -> str:
        left = self.emit_operand(node.left)
        right = self.emit_operand(node.right)
        return f"{left} {node.op} {right}"

    def emit_operand(self, node: Expression) -> str:
        text = self.emit_expr(node)
        if isinstance(node, Binary):
            return f"({text})"
        return text
