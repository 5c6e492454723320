"""
syntaxflow - Renderer
Produces the canonical text of a tree. Every binary expression is fully
parenthesized, so the output never depends on operator precedence.
"""

import sys
from typing import List, Optional, TextIO, Tuple, Union

from .ast_nodes import (
    ASTNode, NodeVisitor, ensure_live,
    AssignmentNode, BinaryExprNode, ConstantNode,
    IdentifierNode, ProcedureCallNode,
)

Piece = Union[str, ASTNode, None]


class Renderer(NodeVisitor):
    """
    Each visit_* method lays a node out as a sequence of text and child
    nodes. render() expands that layout with an explicit stack.
    """

    def render(self, tree: Optional[ASTNode]) -> str:
        if tree is not None and not isinstance(tree, ASTNode):
            raise TypeError(f"Not an AST node: {tree!r}")
        out: List[str] = []
        stack: List[Piece] = [tree]
        while stack:
            piece = stack.pop()
            if piece is None:
                continue
            if isinstance(piece, str):
                out.append(piece)
                continue
            ensure_live(piece)
            stack.extend(reversed(self.visit(piece)))
        return "".join(out)

    # ------------------------------------------------------------------ layouts

    def visit_ConstantNode(self, node: ConstantNode) -> Tuple[Piece, ...]:
        return (str(node.value),)

    def visit_IdentifierNode(self, node: IdentifierNode) -> Tuple[Piece, ...]:
        return (node.name,)

    def visit_BinaryExprNode(self, node: BinaryExprNode) -> Tuple[Piece, ...]:
        return ("(", node.left, f" {node.operation.value} ", node.right, ")")

    def visit_ProcedureCallNode(self, node: ProcedureCallNode) -> Tuple[Piece, ...]:
        return (node.name, "(", node.arguments, ")")

    def visit_AssignmentNode(self, node: AssignmentNode) -> Tuple[Piece, ...]:
        return (node.left, " = ", node.right)


def render(tree: Optional[ASTNode]) -> str:
    """Canonical text of `tree`; empty string for None."""
    return Renderer().render(tree)


def write(tree: Optional[ASTNode], stream: TextIO = None) -> None:
    """Write the canonical text of `tree` to `stream` (stdout by default)."""
    if stream is None:
        stream = sys.stdout
    stream.write(render(tree))
