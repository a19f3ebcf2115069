"""
Member name resolution.
"""

from .nodes import Node, NodeType, is_node, node_type


def extract_name(node: Node | None) -> str | None:
    """Derive the textual identity of a member-like node.

    Handles the key shapes produced by both typescript-estree and babel:
    - Identifier / PrivateIdentifier keys (None when the key is computed)
    - Literal keys holding a string
    - babel PrivateName and StringLiteral keys

    Args:
        node: Member-like node (PropertyDefinition, MethodDefinition, ...)

    Returns:
        str | None: The member name, or None when it cannot be known statically
    """
    if not is_node(node) or "key" not in node:
        return None

    key = node["key"]
    key_type = node_type(key)

    if key_type in (NodeType.IDENTIFIER, NodeType.PRIVATE_IDENTIFIER):
        if node.get("computed") is True:
            return None
        return key.get("name")

    if key_type == NodeType.LITERAL:
        value = key.get("value")
        # bool is not a str, numbers and regexes fall out here as well
        if not isinstance(value, str):
            return None
        return value

    if key_type == NodeType.PRIVATE_NAME:
        inner = key.get("id")
        if node_type(inner) != NodeType.IDENTIFIER:
            return None
        return inner.get("name")

    if key_type == NodeType.STRING_LITERAL:
        return key.get("value")

    return None
