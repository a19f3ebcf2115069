"""
Dependency Analysis for Declaration Members.

Discovers which members of a declaration read other members through a self
reference (``this.x``) and closes that relation transitively, so that members
can be ordered with their dependencies first.
"""

import logging
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Any

from .names import extract_name
from .nodes import (
    Node,
    NodeType,
    declaration_members,
    is_declaration,
    node_type,
    type_set,
)

logger = logging.getLogger(__name__)

DataDependencyMap = dict[str, list[str]]

# Members and expressions whose value is walked, never their key
_VALUE_HOLDERS = type_set(
    NodeType.PROPERTY_DEFINITION,
    NodeType.TS_ABSTRACT_PROPERTY_DEFINITION,
    NodeType.ACCESSOR_PROPERTY,
    NodeType.TS_ABSTRACT_ACCESSOR_PROPERTY,
    NodeType.PROPERTY,
    NodeType.CLASS_PROPERTY,
    NodeType.CLASS_PRIVATE_PROPERTY,
    NodeType.CLASS_ACCESSOR_PROPERTY,
    NodeType.OBJECT_PROPERTY,
    NodeType.METHOD_DEFINITION,
    NodeType.TS_ABSTRACT_METHOD_DEFINITION,
)

_BODY_HOLDERS = type_set(
    NodeType.FUNCTION_EXPRESSION,
    NodeType.ARROW_FUNCTION_EXPRESSION,
    NodeType.CLASS_METHOD,
    NodeType.CLASS_PRIVATE_METHOD,
    NodeType.OBJECT_METHOD,
)

# Transparent wrappers around a single expression
_WRAPPERS = type_set(
    NodeType.CHAIN_EXPRESSION,
    NodeType.TS_AS_EXPRESSION,
    NodeType.TS_SATISFIES_EXPRESSION,
    NodeType.TS_NON_NULL_EXPRESSION,
    NodeType.TS_TYPE_ASSERTION,
    NodeType.EXPRESSION_STATEMENT,
)

# Statements and expressions whose listed fields hold child nodes or node lists
_CHILD_FIELDS = {
    NodeType.VARIABLE_DECLARATION.value: ("declarations",),
    NodeType.VARIABLE_DECLARATOR.value: ("init",),
    NodeType.IF_STATEMENT.value: ("test", "consequent", "alternate"),
    NodeType.CONDITIONAL_EXPRESSION.value: ("test", "consequent", "alternate"),
    NodeType.LOGICAL_EXPRESSION.value: ("left", "right"),
    NodeType.BINARY_EXPRESSION.value: ("left", "right"),
    NodeType.TEMPLATE_LITERAL.value: ("expressions",),
}

_CALLS = type_set(NodeType.CALL_EXPRESSION, NodeType.OPTIONAL_CALL_EXPRESSION)
_MEMBER_ACCESSES = type_set(
    NodeType.MEMBER_EXPRESSION, NodeType.OPTIONAL_MEMBER_EXPRESSION
)


@dataclass(frozen=True)
class QueueEntry:
    """A node waiting to be visited, tagged with the member it belongs to."""

    node: Any
    parent: str | None = None


class DependencyAnalyzer:
    """Builds the self-reference dependency map of one declaration."""

    def __init__(self):
        self.passes = 0

    def analyze(self, declaration: Node) -> DataDependencyMap:
        """
        Analyze a declaration and return its closed dependency map.

        Args:
            declaration: ClassBody, TSInterfaceBody or TSTypeLiteral node

        Returns:
            Dict mapping member names to the sorted names they depend on,
            directly or transitively
        """
        raw = self.collect_edges(declaration)
        closed = self.close_transitively(raw)
        logger.debug(f"Dependency map for {node_type(declaration)}: {closed}")
        return closed

    def collect_edges(self, declaration: Node) -> dict[str, list[str]]:
        """
        Walk the members of a declaration and record self-reference edges.

        The walk is breadth first. Only the direct members of ``declaration``
        act as dependency sources; a member whose name cannot be resolved
        (computed key) never sources an edge.

        Args:
            declaration: Declaration node

        Returns:
            Raw mapping, duplicates allowed
        """
        edges: dict[str, list[str]] = defaultdict(list)
        queue: deque[QueueEntry] = deque()

        if is_declaration(declaration):
            for member in declaration_members(declaration):
                queue.append(QueueEntry(member, extract_name(member)))

        while queue:
            cur = queue.popleft()
            kind = node_type(cur.node)
            if kind is None:
                continue

            if is_declaration(cur.node):
                # Nested declarations are analyzed on their own
                continue

            if kind in _VALUE_HOLDERS:
                queue.extend(self._tag(cur, [cur.node.get("value")]))

            elif kind in _BODY_HOLDERS:
                queue.extend(self._tag(cur, [cur.node.get("body")]))

            elif kind == NodeType.BLOCK_STATEMENT:
                queue.extend(self._tag(cur, cur.node.get("body") or []))

            elif kind == NodeType.RETURN_STATEMENT:
                queue.extend(self._tag(cur, [cur.node.get("argument")]))

            elif kind == NodeType.OBJECT_EXPRESSION:
                queue.extend(self._tag(cur, cur.node.get("properties") or []))

            elif kind == NodeType.ARRAY_EXPRESSION:
                queue.extend(self._tag(cur, cur.node.get("elements") or []))

            elif kind in _CALLS:
                callee = cur.node.get("callee")
                if node_type(callee) in _MEMBER_ACCESSES:
                    queue.extend(self._tag(cur, [callee.get("object")]))
                queue.extend(self._tag(cur, cur.node.get("arguments") or []))

            elif kind in _MEMBER_ACCESSES:
                self._visit_member_access(cur, edges, queue)

            elif kind in _WRAPPERS:
                queue.extend(self._tag(cur, [cur.node.get("expression")]))

            elif kind in _CHILD_FIELDS:
                queue.extend(self._tag(cur, self._children(cur.node, kind)))

        return dict(edges)

    def _visit_member_access(
        self,
        cur: QueueEntry,
        edges: dict[str, list[str]],
        queue: deque[QueueEntry],
    ) -> None:
        node = cur.node
        prop = node.get("property")
        if node_type(prop) != NodeType.IDENTIFIER or node.get("computed") is True:
            return

        receiver = node.get("object")
        receiver_type = node_type(receiver)

        if receiver_type == NodeType.THIS_EXPRESSION:
            if cur.parent is None:
                return
            dep_name = prop.get("name") or ""
            # this.a? and this.a denote the same member
            if dep_name.endswith("?"):
                dep_name = dep_name[:-1]
            edges[cur.parent].append(dep_name)

        elif receiver_type in _MEMBER_ACCESSES:
            queue.append(QueueEntry(receiver, cur.parent))

    @staticmethod
    def _children(node: Node, kind: str) -> list[Any]:
        children: list[Any] = []
        for name in _CHILD_FIELDS[kind]:
            value = node.get(name)
            if isinstance(value, list):
                children.extend(value)
            else:
                children.append(value)
        return children

    @staticmethod
    def _tag(cur: QueueEntry, nodes: list[Any]) -> list[QueueEntry]:
        return [QueueEntry(n, cur.parent) for n in nodes if n is not None]

    def close_transitively(
        self,
        dependencies: dict[str, list[str]],
    ) -> DataDependencyMap:
        """
        Expand a dependency mapping to its transitive closure.

        Repeats full passes until one of them changes nothing. Each entry is
        deduplicated on every pass, so an entry never grows beyond the number
        of distinct names and cycles cannot keep the loop alive.

        Args:
            dependencies: Raw mapping from member name to names it reads

        Returns:
            Closed mapping with every entry deduplicated and sorted
        """
        closed = {k: sorted(set(v)) for k, v in dependencies.items()}
        self.passes = 0

        modified = True
        while modified:
            modified = False
            self.passes += 1

            for key in list(closed):
                deps = closed[key]
                if not deps:
                    continue

                with_transitives = set(deps)
                for dep in deps:
                    with_transitives.update(closed.get(dep, ()))

                expanded = sorted(with_transitives)
                if expanded != deps:
                    closed[key] = expanded
                    modified = True

        return closed


def extract_dependencies(declaration: Node) -> DataDependencyMap:
    """Return the closed dependency map of a declaration node."""
    return DependencyAnalyzer().analyze(declaration)
