"""
syntaxflow - Node Constructors
One constructor per node variant.

Ownership of child nodes transfers when the constructor is called, not when
it returns. If storage runs out part-way, the constructor disposes the
children it was given before re-raising AllocationError, so the caller never
disposes a node it has passed in.
"""

import logging
from typing import Optional, Union

from .ast_nodes import (
    ASTNode, NODE_TYPES, NodeState, ensure_live,
    AssignmentNode, BinaryExprNode, BinaryOperation,
    ConstantNode, IdentifierNode, ProcedureCallNode,
)
from .disposal import release_tree
from .memory import Allocation, AllocationError, Allocator, OwnershipError, default_allocator

logger = logging.getLogger(__name__)


def make_constant(value: int, *, allocator: Allocator = None, line: int = 0) -> ConstantNode:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Constant value must be an int, got {type(value).__name__}")
    allocator = _resolve(allocator)
    storage = allocator.allocate("ConstantNode")
    return _bind(ConstantNode(line=line, value=value), allocator, storage)


def make_identifier(name: str, *, allocator: Allocator = None, line: int = 0) -> IdentifierNode:
    _check_name(name)
    allocator = _resolve(allocator)
    storage = allocator.allocate("IdentifierNode")
    try:
        buffer = allocator.allocate("text", len(name) + 1)
    except AllocationError:
        allocator.release(storage)
        raise
    node = _bind(IdentifierNode(line=line, name=str(name)), allocator, storage)
    node._name_buffer = buffer
    return node


def make_assignment(left: ASTNode, right: ASTNode, *,
                    allocator: Allocator = None, line: int = 0) -> AssignmentNode:
    _claim(left)
    _claim(right)
    _check_distinct(left, right)
    allocator = _resolve(allocator)

    _transfer(left, right)
    try:
        storage = allocator.allocate("AssignmentNode")
    except AllocationError:
        _rollback(left, right)
        raise
    return _bind(AssignmentNode(line=line, left=left, right=right), allocator, storage)


def make_binary_expr(operation: Union[BinaryOperation, str], left: ASTNode, right: ASTNode, *,
                     allocator: Allocator = None, line: int = 0) -> BinaryExprNode:
    operation = _operation(operation)
    _claim(left)
    _claim(right)
    _check_distinct(left, right)
    allocator = _resolve(allocator)

    _transfer(left, right)
    try:
        storage = allocator.allocate("BinaryExprNode")
    except AllocationError:
        _rollback(left, right)
        raise
    node = BinaryExprNode(line=line, operation=operation, left=left, right=right)
    return _bind(node, allocator, storage)


def make_procedure_call(name: str, arguments: Optional[ASTNode] = None, *,
                        allocator: Allocator = None, line: int = 0) -> ProcedureCallNode:
    _check_name(name)
    if arguments is not None:
        _claim(arguments)
    allocator = _resolve(allocator)

    _transfer(arguments)
    try:
        storage = allocator.allocate("ProcedureCallNode")
    except AllocationError:
        _rollback(arguments)
        raise
    try:
        buffer = allocator.allocate("text", len(name) + 1)
    except AllocationError:
        allocator.release(storage)
        _rollback(arguments)
        raise
    node = _bind(ProcedureCallNode(line=line, name=str(name), arguments=arguments),
                 allocator, storage)
    node._name_buffer = buffer
    return node


# ── helpers ───────────────────────────────────────────────────────────────────

def _resolve(allocator: Optional[Allocator]) -> Allocator:
    return default_allocator() if allocator is None else allocator


def _bind(node: ASTNode, allocator: Allocator, storage: Allocation) -> ASTNode:
    node._allocator = allocator
    node._storage = storage
    return node


def _operation(operation) -> BinaryOperation:
    try:
        return BinaryOperation(operation)
    except ValueError:
        raise ValueError(f"Unknown binary operation {operation!r}") from None


def _check_name(name) -> None:
    if not isinstance(name, str):
        raise TypeError(f"Name must be a str, got {type(name).__name__}")


def _claim(child) -> None:
    # Validation only; nothing is transferred yet.
    if not isinstance(child, NODE_TYPES):
        raise TypeError(f"Expected an AST node, got {child!r}")
    ensure_live(child)
    if child._state is NodeState.OWNED:
        raise OwnershipError(f"{type(child).__name__} already belongs to another node")


def _check_distinct(left: ASTNode, right: ASTNode) -> None:
    if left is right:
        raise OwnershipError("The same node cannot be both children of one parent")


def _transfer(*children: Optional[ASTNode]) -> None:
    for child in children:
        if child is not None:
            child._state = NodeState.OWNED


def _rollback(*children: Optional[ASTNode]) -> None:
    for child in children:
        if child is not None:
            logger.debug("construction failed, disposing transferred %s", type(child).__name__)
            release_tree(child)
