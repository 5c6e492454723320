"""
syntaxflow - Disposal
Releases a tree and everything it owns, children before parents.
"""

import logging
from typing import List, Optional, Tuple

from .ast_nodes import ASTNode, NODE_TYPES, NodeState, ensure_live
from .memory import OwnershipError

logger = logging.getLogger(__name__)


def dispose(tree: Optional[ASTNode]) -> None:
    """
    Release `tree` and its whole subtree exactly once.

    None is a no-op. Only a root may be disposed: a node that was moved into
    a parent is released together with that parent.
    """
    if tree is None:
        return
    if not isinstance(tree, NODE_TYPES):
        raise TypeError(f"Not an AST node: {tree!r}")
    ensure_live(tree)
    if tree._state is NodeState.OWNED:
        raise OwnershipError(
            f"{type(tree).__name__} is owned by a parent node; dispose the root instead"
        )
    release_tree(tree)


def release_tree(root: ASTNode) -> int:
    """
    Post-order release of a subtree the caller holds ownership of.
    Returns the number of nodes released.
    """
    count = 0
    stack: List[Tuple[ASTNode, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if not expanded:
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children()))
            continue
        _release_node(node)
        count += 1
    logger.debug("released %s with %d node(s)", type(root).__name__, count)
    return count


def _release_node(node: ASTNode) -> None:
    allocator = node._allocator
    for buffer in node.owned_buffers():
        allocator.release(buffer)
    if hasattr(node, "_name_buffer"):
        node._name_buffer = None
    if node._storage is not None:
        allocator.release(node._storage)
        node._storage = None
    node._state = NodeState.RELEASED
