"""JSON document context with JSONPath queries."""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Optional

from jsonpath_ng import jsonpath
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError
from jsonpath_ng.ext import parse as parse_jsonpath

from .errors import QueryError
from .types import dump_json, load_json


@lru_cache(maxsize=512)
def _compile(path: str) -> jsonpath.JSONPath:
    try:
        return parse_jsonpath(path)
    except (JsonPathLexerError, JsonPathParserError) as e:
        raise QueryError(path, str(e)) from e


def _is_definite(expr: jsonpath.JSONPath) -> bool:
    """Check whether a compiled path can select at most one value.

    Only plain field names and single indexes are definite; wildcards,
    slices, filters, unions and recursive descent select a list.
    """
    if isinstance(expr, (jsonpath.Root, jsonpath.This)):
        return True
    if isinstance(expr, jsonpath.Child):
        return _is_definite(expr.left) and _is_definite(expr.right)
    if isinstance(expr, jsonpath.Fields):
        return len(expr.fields) == 1 and expr.fields[0] != "*"
    if isinstance(expr, jsonpath.Index):
        indices = getattr(expr, "indices", None)
        return indices is None or len(indices) == 1
    return False


def serialize(value: Any) -> str:
    """Serialize a value to JSON text.

    Decimal values are written as JSON numbers with their exact digits.
    """
    return dump_json(value)


@dataclass
class DocumentContext:
    """A parsed JSON document that answers JSONPath queries.

    The wrapped value is treated as read-only: queries return values from
    the document but the context itself never changes after creation.
    """

    document: Any = field(default=None)

    @classmethod
    def parse(cls, text: str) -> "DocumentContext":
        """Parse JSON text into a new context.

        Fractional numbers are read as Decimal so no digits are lost.
        """
        return cls(document=load_json(text))

    @classmethod
    def of(cls, value: Any) -> "DocumentContext":
        """Wrap a detached copy of ``value`` as a new context."""
        return cls.parse(serialize(value))

    def read(self, path: str) -> Optional[Any]:
        """Evaluate a JSONPath query against the document.

        Args:
            path: JSONPath expression, e.g. ``$.items[0].id`` or ``$.items[*]``

        Returns:
            For definite paths the selected value, or None if nothing matches.
            For indefinite paths the list of matched values (possibly empty).

        Raises:
            QueryError: If the path is malformed
        """
        expr = _compile(path.strip())
        matches = expr.find(self.document)
        if _is_definite(expr):
            return matches[0].value if matches else None
        return [match.value for match in matches]

    def to_json(self) -> str:
        """Serialize the wrapped document."""
        return serialize(self.document)
