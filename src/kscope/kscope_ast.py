"""
Defines the abstract syntax tree (AST) produced by the kscope parser.

Classes:
    Prototype:
        A function signature: name plus ordered parameter names.

    Expression, Literal, Variable, Binary, Call:
        The expression tree. Each node exclusively owns its children.

    ASTNode, Extern, Function:
        Top-level items. `parse()` returns them in source order.

    ASTDict:
        TypedDict representation for serializing nodes to plain Python dictionaries,
        suitable for JSON output or debugging.

Every node exposes:
    kind (str): The syntactic construct type (e.g., "binary", "call", "function").
    to_dict(): A nested dictionary form of the node.

Nodes compare structurally, so tests can build the expected tree directly:

Example:
    Function(Prototype("add", ["x", "y"]), Binary("+", Variable("x"), Variable("y")))
"""

from typing import Any, TypedDict


class ASTDict(TypedDict, total=False):
    """
    TypedDict representation of a node used for serialization.

    Only the fields relevant to a node's kind are present.

    Fields:
        kind (str): The type of AST node (e.g., "literal", "binary", "extern").
        value (float): Literal value.
        name (str): Variable, prototype name.
        params (list[str]): Prototype parameter names.
        op (str): Binary operator symbol.
        left (ASTDict): Binary left operand.
        right (ASTDict): Binary right operand.
        callee (str): Called function name.
        args (list[ASTDict]): Call arguments.
        prototype (ASTDict): Signature of an extern or function.
        body (ASTDict): Function body.
    """

    kind: str
    value: float
    name: str
    params: list[str]
    op: str
    left: "ASTDict"
    right: "ASTDict"
    callee: str
    args: list["ASTDict"]
    prototype: "ASTDict"
    body: "ASTDict"


class Prototype:
    """
    A function signature: every parameter and the return value are numbers.

    Parameter names are not checked for uniqueness here.

    Args:
        name (str): Function name, empty for an anonymous top-level expression.
        params (list[str], optional): Ordered parameter names.
    """

    kind = "prototype"

    def __init__(self, name: str, params: list[str] | None = None):
        self.name = name
        self.params: list[str] = list(params or [])

    def __repr__(self) -> str:
        return f"Prototype({self.name!r}, {self.params!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Prototype)
            and self.name == other.name
            and self.params == other.params
        )

    def to_dict(self) -> ASTDict:
        return {"kind": self.kind, "name": self.name, "params": list(self.params)}


class Expression:
    """Base class of expression nodes."""

    kind = "expression"

    def to_dict(self) -> ASTDict:  # pragma: no cover
        raise NotImplementedError


class Literal(Expression):
    """A numeric constant."""

    kind = "literal"

    def __init__(self, value: float):
        self.value = float(value)

    def __repr__(self) -> str:
        return f"Literal({self.value!r})"

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Literal) and self.value == other.value

    def to_dict(self) -> ASTDict:
        return {"kind": self.kind, "value": self.value}


class Variable(Expression):
    """A reference to a function parameter."""

    kind = "variable"

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"Variable({self.name!r})"

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Variable) and self.name == other.name

    def to_dict(self) -> ASTDict:
        return {"kind": self.kind, "name": self.name}


class Binary(Expression):
    """
    An infix operation `left op right`.

    Args:
        op (str): Single-character operator symbol.
        left (Expression): Left operand.
        right (Expression): Right operand.
    """

    kind = "binary"

    def __init__(self, op: str, left: Expression, right: Expression):
        self.op = op
        self.left = left
        self.right = right

    def __repr__(self) -> str:
        return f"Binary({self.op!r}, {self.left!r}, {self.right!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Binary)
            and self.op == other.op
            and self.left == other.left
            and self.right == other.right
        )

    def to_dict(self) -> ASTDict:
        return {
            "kind": self.kind,
            "op": self.op,
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
        }


class Call(Expression):
    """
    A call of a named function with zero or more argument expressions.

    Args:
        callee (str): Name of the called function.
        args (list[Expression], optional): Argument expressions, in order.
    """

    kind = "call"

    def __init__(self, callee: str, args: list[Expression] | None = None):
        self.callee = callee
        self.args: list[Expression] = list(args or [])

    def __repr__(self) -> str:
        return f"Call({self.callee!r}, {self.args!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Call)
            and self.callee == other.callee
            and self.args == other.args
        )

    def to_dict(self) -> ASTDict:
        return {
            "kind": self.kind,
            "callee": self.callee,
            "args": [a.to_dict() for a in self.args],
        }


class ASTNode:
    """
    Base class of top-level items handed to the code generator.

    Attributes:
        prototype (Prototype): Signature declared or defined by the item.
    """

    kind = "node"

    def __init__(self, prototype: Prototype):
        self.prototype = prototype

    @property
    def name(self) -> str:
        return self.prototype.name

    def to_dict(self) -> ASTDict:  # pragma: no cover
        raise NotImplementedError


class Extern(ASTNode):
    """An external function declaration (`extern sin(x)`)."""

    kind = "extern"

    def __repr__(self) -> str:
        return f"Extern({self.prototype!r})"

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Extern) and self.prototype == other.prototype

    def to_dict(self) -> ASTDict:
        return {"kind": self.kind, "prototype": self.prototype.to_dict()}


class Function(ASTNode):
    """
    A function definition, or a bare top-level expression wrapped as one.

    A bare expression becomes an anonymous function: empty name, no parameters.
    The code generator uses that to find the expression to run right away.

    Args:
        prototype (Prototype): The function signature.
        body (Expression): The single expression making up the body.
    """

    kind = "function"

    def __init__(self, prototype: Prototype, body: Expression):
        super().__init__(prototype)
        self.body = body

    @classmethod
    def anonymous(cls, body: Expression) -> "Function":
        return cls(Prototype("", []), body)

    @property
    def is_anonymous(self) -> bool:
        return self.prototype.name == "" and not self.prototype.params

    def __repr__(self) -> str:
        return f"Function({self.prototype!r}, {self.body!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Function)
            and self.prototype == other.prototype
            and self.body == other.body
        )

    def to_dict(self) -> ASTDict:
        return {
            "kind": self.kind,
            "prototype": self.prototype.to_dict(),
            "body": self.body.to_dict(),
        }


__all__ = [
    "ASTDict",
    "ASTNode",
    "Binary",
    "Call",
    "Expression",
    "Extern",
    "Function",
    "Literal",
    "Prototype",
    "Variable",
]
