"""
Ordering comparators for declaration members.

Combines the data dependency comparator with the optional tie breakers
selected by the ordering configuration.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from .comparator import Comparator, Order, by, chain, prefer
from .dependency_analyzer import DataDependencyMap
from .names import extract_name
from .nodes import Node, NodeType, node_type, type_set

logger = logging.getLogger(__name__)


@dataclass
class MemberInfo:
    """Name and closed dependencies of one member."""

    name: str | None
    dependencies: list[str] = field(default_factory=list)


def member_info(node: Node, dependency_map: DataDependencyMap) -> MemberInfo:
    name = extract_name(node)
    deps: list[str] = []
    if name is not None:
        deps = dependency_map.get(name, [])
    return MemberInfo(name=name, dependencies=deps)


def compare_dependencies(a: MemberInfo, b: MemberInfo) -> Order:
    """Order two members so that a dependency comes before its dependent.

    Direct relationships take priority over the size fallback, so a member
    with many dependencies still sorts after a member it reads even if that
    one has more dependencies of its own.
    """
    if not a.dependencies and not b.dependencies:
        return Order.EQUAL

    # Does a depend on b?
    if b.name is not None and b.name in a.dependencies:
        return Order.GREATER

    # Does b depend on a?
    if a.name is not None and a.name in b.dependencies:
        return Order.LESS

    # Fewer dependencies first
    if len(a.dependencies) < len(b.dependencies):
        return Order.LESS
    if len(a.dependencies) > len(b.dependencies):
        return Order.GREATER
    return Order.EQUAL


def data_dependency(dependency_map: DataDependencyMap) -> Comparator:
    """Build the member comparator for one declaration's dependency map."""
    return by(lambda node: member_info(node, dependency_map), compare_dependencies)


# typescript-estree and babel class fields
_CLASS_FIELDS = type_set(
    NodeType.PROPERTY_DEFINITION,
    NodeType.CLASS_PROPERTY,
    NodeType.CLASS_PRIVATE_PROPERTY,
)


def is_inject_call(node: Any) -> bool:
    """Check for a field initialised through ``inject(...)``.

    Matches the Angular dependency injection idiom
    ``private readonly http = inject(HttpClient);``
    """
    if node_type(node) not in _CLASS_FIELDS:
        return False

    value = node.get("value")
    if node_type(value) != NodeType.CALL_EXPRESSION:
        return False

    callee = value.get("callee") or {}
    return callee.get("name") == "inject"


def is_readonly_property(node: Any) -> bool:
    if node_type(node) not in _CLASS_FIELDS:
        return False
    return bool(node.get("readonly"))


def build_comparator(options: Any, dependency_map: DataDependencyMap) -> Comparator:
    """
    Build the comparator used to reorder one declaration.

    The data dependency comparator decides first; the tie breakers enabled in
    ``options`` only apply to members it leaves unordered.

    Args:
        options: Ordering configuration (anything exposing ``dependency_order``,
            ``inject_first`` and ``readonly_first``; missing flags use their
            defaults)
        dependency_map: Closed dependency map of the declaration

    Returns:
        Comparator over member nodes
    """
    comparators: list[Comparator] = []

    if getattr(options, "dependency_order", True):
        comparators.append(data_dependency(dependency_map))
    if getattr(options, "inject_first", False):
        comparators.append(prefer(is_inject_call))
    if getattr(options, "readonly_first", False):
        comparators.append(prefer(is_readonly_property))

    if not comparators:
        logger.debug("No member comparator enabled, order is preserved")

    return chain(*comparators)
