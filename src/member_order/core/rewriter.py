"""
Declaration rewriting: reorders the members of every declaration body in a tree.
"""

import logging
from typing import Any

from .comparator import capture
from .dependency_analyzer import DataDependencyMap, extract_dependencies
from .names import extract_name
from .nodes import DECLARATION_MEMBER_FIELDS, Node, is_member_like, node_type
from .ordering import build_comparator
from .visit import visit

logger = logging.getLogger(__name__)


class DeclarationRewriter:
    """Rewrite callback reordering ClassBody, TSInterfaceBody and TSTypeLiteral."""

    def __init__(self, options: Any = None):
        """
        Initialize rewriter

        Args:
            options: Ordering configuration passed to the comparator builder
        """
        self.options = options
        self.visited = 0
        self.reordered = 0
        self.dependency_maps: list[tuple[str, DataDependencyMap]] = []

    def __call__(self, node: Node) -> Node:
        kind = node_type(node)
        field_name = DECLARATION_MEMBER_FIELDS.get(kind or "")
        if field_name is None:
            return node

        self.visited += 1
        members = node.get(field_name) or []

        dependency_map = extract_dependencies(node)
        self.dependency_maps.append((kind, dependency_map))

        comparator = build_comparator(self.options, dependency_map)
        ordered = capture(members, is_member_like, comparator)

        if all(new is old for new, old in zip(ordered, members)):
            return node

        self.reordered += 1
        logger.debug(
            f"Reordered {kind}: "
            f"{[extract_name(m) for m in members]} -> "
            f"{[extract_name(m) for m in ordered]}"
        )
        return {**node, field_name: ordered}


def preprocess(tree: Any, options: Any = None) -> Any:
    """Reorder the members of every declaration body in ``tree``.

    Args:
        tree: ESTree JSON tree (typescript-estree or babel flavour)
        options: Ordering configuration

    Returns:
        New tree; declarations whose order did not change are shared with the input
    """
    return visit(tree, DeclarationRewriter(options))
