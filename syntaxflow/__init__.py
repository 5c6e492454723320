"""
syntaxflow - AST core for a small expression/statement language.
"""

from .ast_nodes import (
    ASTNode, Node, NodeState, NodeVisitor, BinaryOperation,
    BinaryExprNode, IdentifierNode, ConstantNode, ProcedureCallNode, AssignmentNode,
    walk,
)
from .builders import (
    make_constant, make_identifier, make_assignment,
    make_binary_expr, make_procedure_call,
)
from .disposal import dispose
from .memory import (
    Allocation, Allocator, AllocationError, OwnershipError, SyntaxFlowError,
    default_allocator,
)
from .printer import Renderer, render, write

__version__ = "0.1.0"
