"""
Bottom-up rewriting of ESTree JSON trees.
"""

from collections.abc import Callable
from typing import Any

from .nodes import is_node

Rewrite = Callable[[dict[str, Any]], dict[str, Any]]

# Position data never contains nodes worth visiting
SKIPPED_KEYS = frozenset({"loc", "range", "start", "end", "parent"})


def visit(tree: Any, callback: Rewrite) -> Any:
    """Rewrite a tree, calling ``callback`` once for every node, children first.

    A node is copied only when one of its children was replaced; untouched
    subtrees are returned as the very same objects.

    Args:
        tree: Node, list or JSON scalar
        callback: Function receiving a node and returning it or a replacement

    Returns:
        The rewritten tree
    """
    if isinstance(tree, list):
        items = [visit(item, callback) for item in tree]
        if all(new is old for new, old in zip(items, tree)):
            return tree
        return items

    if not isinstance(tree, dict):
        return tree

    changed: dict[str, Any] = {}
    for key, value in tree.items():
        if key in SKIPPED_KEYS or not isinstance(value, (dict, list)):
            continue
        new_value = visit(value, callback)
        if new_value is not value:
            changed[key] = new_value

    node = {**tree, **changed} if changed else tree

    if is_node(node):
        return callback(node)
    return node
