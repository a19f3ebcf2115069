"""
Pytest configuration and shared fixtures
"""

import json
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Any, Generator

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


class EstreeBuilder:
    """Small factory for typescript-estree shaped nodes"""

    @staticmethod
    def ident(name: str) -> dict[str, Any]:
        return {"type": "Identifier", "name": name}

    @staticmethod
    def literal(value: Any) -> dict[str, Any]:
        return {"type": "Literal", "value": value, "raw": json.dumps(value)}

    @staticmethod
    def this() -> dict[str, Any]:
        return {"type": "ThisExpression"}

    @classmethod
    def member(cls, obj: dict[str, Any], name: str, **extra) -> dict[str, Any]:
        return {
            "type": "MemberExpression",
            "object": obj,
            "property": cls.ident(name),
            "computed": False,
            "optional": False,
            **extra,
        }

    @classmethod
    def this_member(cls, *path: str) -> dict[str, Any]:
        """this.a.b.c for this_member("a", "b", "c")"""
        node = cls.this()
        for name in path:
            node = cls.member(node, name)
        return node

    @staticmethod
    def call(callee: dict[str, Any], *args: dict[str, Any]) -> dict[str, Any]:
        return {
            "type": "CallExpression",
            "callee": callee,
            "arguments": list(args),
            "optional": False,
        }

    @classmethod
    def field(cls, name: str, value: dict[str, Any] | None = None, **extra):
        """PropertyDefinition `name = value`"""
        return {
            "type": "PropertyDefinition",
            "key": cls.ident(name),
            "value": value,
            "computed": False,
            "static": False,
            "readonly": False,
            **extra,
        }

    @classmethod
    def method(cls, name: str, *statements: dict[str, Any], kind: str = "method"):
        """MethodDefinition with a block body"""
        return {
            "type": "MethodDefinition",
            "key": cls.ident(name),
            "kind": kind,
            "computed": False,
            "static": False,
            "value": {
                "type": "FunctionExpression",
                "params": [],
                "body": {"type": "BlockStatement", "body": list(statements)},
            },
        }

    @classmethod
    def getter(cls, name: str, returned: dict[str, Any]):
        return cls.method(name, cls.ret(returned), kind="get")

    @staticmethod
    def ret(argument: dict[str, Any]) -> dict[str, Any]:
        return {"type": "ReturnStatement", "argument": argument}

    @classmethod
    def prop(cls, name: str, value: dict[str, Any]) -> dict[str, Any]:
        """Object literal Property `name: value`"""
        return {
            "type": "Property",
            "key": cls.ident(name),
            "value": value,
            "computed": False,
            "kind": "init",
            "method": False,
            "shorthand": False,
        }

    @staticmethod
    def obj(*properties: dict[str, Any]) -> dict[str, Any]:
        return {"type": "ObjectExpression", "properties": list(properties)}

    @staticmethod
    def array(*elements: dict[str, Any] | None) -> dict[str, Any]:
        return {"type": "ArrayExpression", "elements": list(elements)}

    @staticmethod
    def class_body(*members: dict[str, Any]) -> dict[str, Any]:
        return {"type": "ClassBody", "body": list(members)}

    @classmethod
    def program(cls, *bodies: dict[str, Any]) -> dict[str, Any]:
        """Program holding one class declaration per class body"""
        return {
            "type": "Program",
            "sourceType": "module",
            "body": [
                {
                    "type": "ClassDeclaration",
                    "id": cls.ident(f"C{i}"),
                    "body": body,
                    "superClass": None,
                }
                for i, body in enumerate(bodies)
            ],
        }

    @staticmethod
    def names(members: list[dict[str, Any]]) -> list[str | None]:
        """Key names of a member list, None for keys without a name"""
        return [(m.get("key") or {}).get("name") for m in members]


@pytest.fixture
def b() -> type[EstreeBuilder]:
    """ESTree node builder"""
    return EstreeBuilder


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing"""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def unordered_class_body(b) -> dict[str, Any]:
    """class { c() { return this.a }  a = 1;  b = this.c }"""
    return b.class_body(
        b.method("c", b.ret(b.this_member("a"))),
        b.field("a", b.literal(1)),
        b.field("b", b.this_member("c")),
    )


@pytest.fixture
def sample_ast_file(temp_dir: Path, b, unordered_class_body) -> Path:
    """JSON AST file with one class whose members need reordering"""
    ast_file = temp_dir / "component.json"
    ast_file.write_text(json.dumps(b.program(unordered_class_body), indent=2))
    return ast_file


@pytest.fixture
def ordered_ast_file(temp_dir: Path, b) -> Path:
    """JSON AST file already in dependency order"""
    ast_file = temp_dir / "ordered.json"
    body = b.class_body(
        b.field("a", b.literal(1)),
        b.field("b", b.this_member("a")),
    )
    ast_file.write_text(json.dumps(b.program(body), indent=2))
    return ast_file
