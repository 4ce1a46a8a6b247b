"""Serializes kscope AST nodes to JSON through their `to_dict()` form."""

import json

from kscope.kscope_ast import ASTDict, Extern, Function


class JsonEmitter:
    """Collects top-level nodes and renders them as one JSON array."""

    def __init__(self, indent: int | None = 2) -> None:
        self.items: list[ASTDict] = []
        self.indent = indent

    def get_output(self) -> str:
        # Literals that overflowed to inf have no JSON spelling.
        return json.dumps(self.items, indent=self.indent, allow_nan=False)

    def emit_extern(self, node: Extern) -> None:
        self.items.append(node.to_dict())

    def emit_function(self, node: Function) -> None:
        self.items.append(node.to_dict())
