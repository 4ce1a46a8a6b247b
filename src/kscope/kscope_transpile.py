"""
Turns a parsed kscope program back into text for one of the supported output targets.

A program is the list of top-level `Extern` and `Function` nodes returned by
`Parser.parse()`. The transpiler hands each of them, in order, to the emitter's
`emit_extern` or `emit_function` method and returns whatever the emitter
accumulated.

Targets:
    source (alias `ks`): Canonical kscope source, one `;`-terminated item per line.
        Re-parsing the output yields the same AST.
    json: A JSON array holding the `to_dict()` form of every top-level node.
        Fails with `ValueError` if a literal overflowed to infinity.

Target names are matched case-insensitively.

Example:
    >>> Transpiler("source").transpile(parse_source("def f(x) x*2"))
    'def f(x) x * 2.0;'

Raises:
    ValueError: If the target is not supported.
    TypeError: If the program contains something other than top-level nodes.
    NotImplementedError: If the emitter lacks an `emit_*` method for a node kind.
"""

from typing import Protocol

from kscope.emitters.json_emitter import JsonEmitter
from kscope.emitters.source_emitter import SourceEmitter
from kscope.kscope_ast import ASTNode, Extern, Function

TARGETS = ("source", "json")
TARGET_ALIASES = {"ks": "source"}


class Emitter(Protocol):  # pragma: no cover
    """What the transpiler needs from an output target: one hook per top-level kind."""

    def emit_extern(self, node: Extern) -> None: ...  # pragma: no cover

    def emit_function(self, node: Function) -> None: ...  # pragma: no cover

    def get_output(self) -> str: ...  # pragma: no cover


def resolve_target(target: str) -> str:
    """Normalizes a target name, following aliases.

    Raises:
        ValueError: If the name is not a known target or alias.
    """
    name = target.strip().lower()
    name = TARGET_ALIASES.get(name, name)
    if name not in TARGETS:
        known = ", ".join(sorted((*TARGETS, *TARGET_ALIASES)))
        raise ValueError(f"Unknown transpilation target: {target!r} (expected one of {known})")
    return name


def make_emitter(target: str) -> Emitter:
    """Creates a fresh emitter for `target`."""
    name = resolve_target(target)
    if name == "json":
        return JsonEmitter()
    return SourceEmitter()


class Transpiler:
    """Feeds the top-level nodes of a program to an emitter.

    Attributes:
        target (str): The resolved target name, or `None` for an injected emitter.
        emitter (Emitter): The emitter receiving the nodes.
    """

    def __init__(self, target: str | None = "source", emitter: Emitter | None = None) -> None:
        if emitter is not None:
            self.target = None
            self.emitter = emitter
            return
        if target is None:
            raise ValueError("Either a target or an emitter is required")
        self.target = resolve_target(target)
        self.emitter = make_emitter(self.target)

    def transpile(self, ast: list[ASTNode]) -> str:
        """Emits every node of a parsed program and returns the emitter's output.

        Nodes are checked before anything is emitted, so a bad program leaves the
        emitter untouched.

        Raises:
            TypeError: If any element in the AST list is not an ASTNode.
        """
        for index, node in enumerate(ast):
            if not isinstance(node, ASTNode):
                raise TypeError(
                    f"Item {index} is a {type(node).__name__}, expected an ASTNode"
                )
        for node in ast:
            self.emit_node(node)
        return self.emitter.get_output()

    def emit_node(self, node: ASTNode) -> None:
        """Calls `emit_<kind>` on the emitter for one top-level node."""
        emit = getattr(self.emitter, f"emit_{node.kind}", None)
        if emit is None:
            raise NotImplementedError(
                f"{type(self.emitter).__name__} cannot emit node kind '{node.kind}' ({node.name!r})"
            )
        emit(node)
