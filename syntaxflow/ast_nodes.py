"""
syntaxflow - AST Node Definitions
The closed set of node variants, their lifecycle state, and the read-only
traversal helpers shared by the renderer, disposal and future collaborators.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional, Tuple, Union

from .memory import Allocation, Allocator, OwnershipError


class BinaryOperation(Enum):
    ADD      = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE   = "/"


class NodeState(Enum):
    FREE     = "free"       # built, not yet handed to a constructor
    OWNED    = "owned"      # moved into a parent node
    RELEASED = "released"   # disposed


def _present(*nodes: Optional["ASTNode"]) -> Tuple["ASTNode", ...]:
    return tuple(node for node in nodes if node is not None)


@dataclass
class ASTNode:
    """Base class for all AST nodes."""
    line: int = 0
    _state: NodeState = field(default=NodeState.FREE, init=False, repr=False, compare=False)
    _allocator: Optional[Allocator] = field(default=None, init=False, repr=False, compare=False)
    _storage: Optional[Allocation] = field(default=None, init=False, repr=False, compare=False)

    def __setattr__(self, name: str, value: Any) -> None:
        # Public fields are fixed once a constructor has bound storage.
        if not name.startswith("_") and getattr(self, "_storage", None) is not None:
            raise AttributeError(f"{type(self).__name__}.{name} cannot change after construction")
        object.__setattr__(self, name, value)

    @property
    def state(self) -> NodeState:
        return self._state

    def children(self) -> Tuple["ASTNode", ...]:
        """Owned child nodes in source order."""
        return ()

    def owned_buffers(self) -> Tuple[Allocation, ...]:
        """Text buffers owned by this node itself (not by its children)."""
        return ()


@dataclass
class BinaryExprNode(ASTNode):
    """left <op> right"""
    operation: BinaryOperation = BinaryOperation.ADD
    left: ASTNode = field(default=None, repr=False)
    right: ASTNode = field(default=None, repr=False)

    def children(self) -> Tuple[ASTNode, ...]:
        return _present(self.left, self.right)


@dataclass
class IdentifierNode(ASTNode):
    """A bare variable name."""
    name: str = ""
    _name_buffer: Optional[Allocation] = field(default=None, init=False, repr=False, compare=False)

    def owned_buffers(self) -> Tuple[Allocation, ...]:
        return (self._name_buffer,) if self._name_buffer is not None else ()


@dataclass
class ConstantNode(ASTNode):
    """An integer literal."""
    value: int = 0


@dataclass
class ProcedureCallNode(ASTNode):
    """name(arguments) - arguments is a single expression or None."""
    name: str = ""
    arguments: Optional[ASTNode] = field(default=None, repr=False)
    _name_buffer: Optional[Allocation] = field(default=None, init=False, repr=False, compare=False)

    def children(self) -> Tuple[ASTNode, ...]:
        return _present(self.arguments)

    def owned_buffers(self) -> Tuple[Allocation, ...]:
        return (self._name_buffer,) if self._name_buffer is not None else ()


@dataclass
class AssignmentNode(ASTNode):
    """left = right"""
    left: ASTNode = field(default=None, repr=False)
    right: ASTNode = field(default=None, repr=False)

    def children(self) -> Tuple[ASTNode, ...]:
        return _present(self.left, self.right)


Node = Union[BinaryExprNode, IdentifierNode, ConstantNode, ProcedureCallNode, AssignmentNode]

NODE_TYPES = (BinaryExprNode, IdentifierNode, ConstantNode, ProcedureCallNode, AssignmentNode)


def ensure_live(node: ASTNode) -> None:
    if node._state is NodeState.RELEASED:
        raise OwnershipError(f"{type(node).__name__} used after it was disposed")


def walk(tree: Optional[ASTNode]) -> Iterator[ASTNode]:
    """Pre-order iteration over every node of a tree. Does not recurse."""
    if tree is None:
        return
    stack = [tree]
    while stack:
        node = stack.pop()
        ensure_live(node)
        yield node
        stack.extend(reversed(node.children()))


class NodeVisitor:
    """
    Dispatches visit(node) to visit_<ClassName>(node).

    Only the node variants above are accepted; anything else raises
    TypeError instead of falling through to a generic handler.
    """

    def visit(self, node: ASTNode) -> Any:
        if not isinstance(node, NODE_TYPES):
            raise TypeError(f"Not an AST node: {node!r}")
        method = getattr(self, f"visit_{type(node).__name__}", None)
        if method is None:
            raise TypeError(f"{type(self).__name__} cannot handle {type(node).__name__}")
        return method(node)
