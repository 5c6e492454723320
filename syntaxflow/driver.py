"""
syntaxflow - Demonstration Driver
Builds the sample trees, prints them, disposes them and reports leaks.
Also holds the JSON form of a tree used by --emit-ast.
"""

import json
import logging
import sys
from dataclasses import fields
from enum import Enum
from typing import Callable, List, Optional, TextIO, Tuple

from .ast_nodes import ASTNode, BinaryOperation, NodeState, ensure_live
from .builders import (
    make_assignment, make_binary_expr, make_constant,
    make_identifier, make_procedure_call,
)
from .disposal import dispose
from .memory import Allocator, SyntaxFlowError
from .printer import write

logger = logging.getLogger(__name__)

BANNER = "$ syntaxflowc"


class _Scratch:
    """
    Remembers every node built during a multi-step construction. If a later
    step fails, the nodes that are still free-standing are disposed; the ones
    already moved into a parent were handled by that parent's constructor.
    """

    def __init__(self):
        self._nodes: List[ASTNode] = []

    def __call__(self, node: ASTNode) -> ASTNode:
        self._nodes.append(node)
        return node

    def __enter__(self) -> "_Scratch":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None and issubclass(exc_type, SyntaxFlowError):
            for node in reversed(self._nodes):
                if node.state is NodeState.FREE:
                    dispose(node)
        return False


def build_assignment_sample(allocator: Optional[Allocator] = None) -> ASTNode:
    """my_var_x = (4 + 3)"""
    with _Scratch() as keep:
        expression = keep(make_binary_expr(
            BinaryOperation.ADD,
            keep(make_constant(4, allocator=allocator)),
            keep(make_constant(3, allocator=allocator)),
            allocator=allocator,
        ))
        variable = keep(make_identifier("my_var_x", allocator=allocator))
        return make_assignment(variable, expression, allocator=allocator)


def build_procedure_call_sample(allocator: Optional[Allocator] = None) -> ASTNode:
    """my_procedure((1 + 5))"""
    with _Scratch() as keep:
        proc_args = keep(make_binary_expr(
            BinaryOperation.ADD,
            keep(make_constant(1, allocator=allocator)),
            keep(make_constant(5, allocator=allocator)),
            allocator=allocator,
        ))
        return make_procedure_call("my_procedure", proc_args, allocator=allocator)


# Each sample is built, printed and disposed before the next one is built.
SAMPLES: List[Tuple[str, Callable[[Optional[Allocator]], ASTNode]]] = [
    ("Assignment AST", build_assignment_sample),
    ("Procedure Call AST", build_procedure_call_sample),
]


def run_demo(
    stream: TextIO = None,
    allocator: Optional[Allocator] = None,
    emit_ast: bool = False,
) -> int:
    """
    Build, print and dispose each sample tree in turn.

    Parameters
    ----------
    stream     : output sink, stdout by default
    allocator  : storage to build from; a fresh unlimited Allocator if None
    emit_ast   : print each tree as JSON instead of its canonical text

    Returns
    -------
    Number of allocations still live afterwards (0 unless something leaked).

    Raises
    ------
    AllocationError if the allocator runs out of storage
    """
    if stream is None:
        stream = sys.stdout
    if allocator is None:
        allocator = Allocator()

    stream.write(BANNER + "\n")

    for title, build in SAMPLES:
        logger.debug("building %s", title)
        tree = build(allocator)
        logger.debug("  %d allocation(s) live", allocator.live)
        try:
            if emit_ast:
                stream.write(f"{title}:\n{tree_to_json(tree)}\n")
            else:
                stream.write(f"{title}: ")
                write(tree, stream)
                stream.write("\n")
        finally:
            dispose(tree)

    leaks = allocator.leaks()
    for leak in leaks:
        logger.warning("leaked %s #%d (size %d)", leak.kind, leak.serial, leak.size)
    logger.debug("  %d allocated, %d released", allocator.allocated, allocator.released)
    return len(leaks)


# ── AST serialization (for --emit-ast) ────────────────────────────────────────

def tree_to_json(tree: Optional[ASTNode]) -> str:
    return json.dumps(_node_to_dict(tree), indent=2)


def _node_to_dict(node):
    if node is None:
        return None
    if isinstance(node, Enum):
        return node.value
    if not isinstance(node, ASTNode):
        return node  # primitive
    ensure_live(node)
    d = {"_type": type(node).__name__}
    for f in fields(node):
        if f.name.startswith("_"):
            continue
        d[f.name] = _node_to_dict(getattr(node, f.name))
    return d
