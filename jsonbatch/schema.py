"""Schema node types and compilation from JSON-shaped schemas.

Schemas are written as plain JSON: strings are expressions, objects map
keys to schemas, and arrays hold element schemas that name the collection
they iterate with the reserved ``__array_path`` key::

    {
        "total": "num sum($.items[*].amount)",
        "lines": [
            {"__array_path": "$.items[*]", "sku": "str $.sku"}
        ]
    }

``compile_schema`` turns that into explicit nodes so the builder never has
to look for the reserved key again.
"""

from dataclasses import dataclass
from typing import Any, Tuple, Union

from .errors import SchemaError

ARRAY_PATH_KEY = "__array_path"


@dataclass(frozen=True)
class Scalar:
    """An expression leaf such as ``int $.id``."""

    expression: str


@dataclass(frozen=True)
class ObjectNode:
    """An ordered mapping of output keys to child nodes."""

    fields: Tuple[Tuple[str, "SchemaNode"], ...]


@dataclass(frozen=True)
class ArrayOf:
    """Builds ``element`` once per item selected by ``path``."""

    path: str
    element: "SchemaNode"


@dataclass(frozen=True)
class ListNode:
    """An array schema: the concatenated output of each part, in order."""

    parts: Tuple[ArrayOf, ...]


SchemaNode = Union[Scalar, ObjectNode, ArrayOf, ListNode]

_NODE_TYPES = (Scalar, ObjectNode, ArrayOf, ListNode)


def compile_schema(schema: Any) -> SchemaNode:
    """Compile a JSON-shaped schema into schema nodes.

    Already compiled nodes are returned unchanged.

    The reserved ``__array_path`` key only has meaning in array element
    schemas; ordinary mappings skip it.

    Raises:
        SchemaError: If an array element lacks ``__array_path`` or a node is
            not a string, mapping or list
    """
    if isinstance(schema, _NODE_TYPES):
        return schema
    if isinstance(schema, str):
        return Scalar(schema)
    if isinstance(schema, dict):
        return _compile_object(schema)
    if isinstance(schema, (list, tuple)):
        return ListNode(tuple(_compile_element(element) for element in schema))
    raise SchemaError(f"Unsupported schema node: {type(schema).__name__}")


def _compile_object(schema: dict) -> ObjectNode:
    return ObjectNode(
        tuple(
            (str(key), compile_schema(child))
            for key, child in schema.items()
            if key != ARRAY_PATH_KEY
        )
    )


def _compile_element(element: Any) -> ArrayOf:
    if not isinstance(element, dict):
        raise SchemaError(
            f"Array element schema must be an object, got {type(element).__name__}"
        )
    path = element.get(ARRAY_PATH_KEY)
    if not isinstance(path, str) or not path.strip():
        raise SchemaError(f"Missing '{ARRAY_PATH_KEY}' in array element schema")
    return ArrayOf(path=path, element=_compile_object(element))
