"""
ESTree node vocabulary.

Syntax trees are plain JSON documents as dumped by typescript-estree or babel:
every node is a dict carrying a string ``type`` tag. This module names the tags
the reordering core inspects and offers a few accessors for them.
"""

from enum import Enum
from typing import Any

Node = dict[str, Any]


class NodeType(str, Enum):
    """Node type tags understood by the traversal and the rewriter."""

    # Declaration bodies
    CLASS_BODY = "ClassBody"
    TS_INTERFACE_BODY = "TSInterfaceBody"
    TS_TYPE_LITERAL = "TSTypeLiteral"

    # Class members
    PROPERTY_DEFINITION = "PropertyDefinition"
    TS_ABSTRACT_PROPERTY_DEFINITION = "TSAbstractPropertyDefinition"
    METHOD_DEFINITION = "MethodDefinition"
    TS_ABSTRACT_METHOD_DEFINITION = "TSAbstractMethodDefinition"
    ACCESSOR_PROPERTY = "AccessorProperty"
    TS_ABSTRACT_ACCESSOR_PROPERTY = "TSAbstractAccessorProperty"
    TS_INDEX_SIGNATURE = "TSIndexSignature"

    # Structural type members
    TS_PROPERTY_SIGNATURE = "TSPropertySignature"
    TS_METHOD_SIGNATURE = "TSMethodSignature"
    TS_CALL_SIGNATURE_DECLARATION = "TSCallSignatureDeclaration"
    TS_CONSTRUCT_SIGNATURE_DECLARATION = "TSConstructSignatureDeclaration"

    # Babel class and object members
    CLASS_PROPERTY = "ClassProperty"
    CLASS_PRIVATE_PROPERTY = "ClassPrivateProperty"
    CLASS_ACCESSOR_PROPERTY = "ClassAccessorProperty"
    CLASS_METHOD = "ClassMethod"
    CLASS_PRIVATE_METHOD = "ClassPrivateMethod"
    OBJECT_PROPERTY = "ObjectProperty"
    OBJECT_METHOD = "ObjectMethod"

    # Expressions
    PROPERTY = "Property"
    OBJECT_EXPRESSION = "ObjectExpression"
    ARRAY_EXPRESSION = "ArrayExpression"
    CALL_EXPRESSION = "CallExpression"
    OPTIONAL_CALL_EXPRESSION = "OptionalCallExpression"
    MEMBER_EXPRESSION = "MemberExpression"
    OPTIONAL_MEMBER_EXPRESSION = "OptionalMemberExpression"
    THIS_EXPRESSION = "ThisExpression"
    CHAIN_EXPRESSION = "ChainExpression"
    TS_AS_EXPRESSION = "TSAsExpression"
    TS_SATISFIES_EXPRESSION = "TSSatisfiesExpression"
    TS_NON_NULL_EXPRESSION = "TSNonNullExpression"
    TS_TYPE_ASSERTION = "TSTypeAssertion"
    FUNCTION_EXPRESSION = "FunctionExpression"
    ARROW_FUNCTION_EXPRESSION = "ArrowFunctionExpression"
    CONDITIONAL_EXPRESSION = "ConditionalExpression"
    LOGICAL_EXPRESSION = "LogicalExpression"
    BINARY_EXPRESSION = "BinaryExpression"
    TEMPLATE_LITERAL = "TemplateLiteral"

    # Statements
    BLOCK_STATEMENT = "BlockStatement"
    RETURN_STATEMENT = "ReturnStatement"
    EXPRESSION_STATEMENT = "ExpressionStatement"
    VARIABLE_DECLARATION = "VariableDeclaration"
    VARIABLE_DECLARATOR = "VariableDeclarator"
    IF_STATEMENT = "IfStatement"

    # Keys
    IDENTIFIER = "Identifier"
    PRIVATE_IDENTIFIER = "PrivateIdentifier"
    LITERAL = "Literal"
    PRIVATE_NAME = "PrivateName"
    STRING_LITERAL = "StringLiteral"


def type_set(*types: NodeType) -> frozenset[str]:
    """Build a set of plain type tags, comparable with the tags of JSON nodes."""
    return frozenset(t.value for t in types)


# Declaration node type -> name of the field holding its member list
DECLARATION_MEMBER_FIELDS: dict[str, str] = {
    NodeType.CLASS_BODY.value: "body",
    NodeType.TS_INTERFACE_BODY.value: "body",
    NodeType.TS_TYPE_LITERAL.value: "members",
}

MEMBER_LIKE_NODE_TYPES: frozenset[str] = type_set(
    NodeType.PROPERTY_DEFINITION,
    NodeType.TS_ABSTRACT_PROPERTY_DEFINITION,
    NodeType.METHOD_DEFINITION,
    NodeType.TS_ABSTRACT_METHOD_DEFINITION,
    NodeType.ACCESSOR_PROPERTY,
    NodeType.TS_ABSTRACT_ACCESSOR_PROPERTY,
    NodeType.TS_INDEX_SIGNATURE,
    NodeType.TS_PROPERTY_SIGNATURE,
    NodeType.TS_METHOD_SIGNATURE,
    NodeType.TS_CALL_SIGNATURE_DECLARATION,
    NodeType.TS_CONSTRUCT_SIGNATURE_DECLARATION,
    NodeType.CLASS_PROPERTY,
    NodeType.CLASS_PRIVATE_PROPERTY,
    NodeType.CLASS_ACCESSOR_PROPERTY,
    NodeType.CLASS_METHOD,
    NodeType.CLASS_PRIVATE_METHOD,
    NodeType.PROPERTY,
    NodeType.OBJECT_PROPERTY,
    NodeType.OBJECT_METHOD,
)


def is_node(value: Any) -> bool:
    """Check whether a JSON value is a syntax node (a dict with a type tag)."""
    return isinstance(value, dict) and isinstance(value.get("type"), str)


def node_type(node: Any) -> str | None:
    """Return the type tag of a node, or None for anything else."""
    if is_node(node):
        return node["type"]
    return None


def is_member_like(node: Any) -> bool:
    """Check whether a node may be reordered inside a declaration body."""
    return node_type(node) in MEMBER_LIKE_NODE_TYPES


def is_declaration(node: Any) -> bool:
    return node_type(node) in DECLARATION_MEMBER_FIELDS


def declaration_members(node: Node) -> list[Any]:
    """Return the member list of a declaration node (empty when missing)."""
    field_name = DECLARATION_MEMBER_FIELDS.get(node_type(node) or "")
    if field_name is None:
        return []
    return node.get(field_name) or []
