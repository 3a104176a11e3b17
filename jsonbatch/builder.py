"""Schema evaluator that builds JSON values from schemas and documents.

A schema leaf is an expression string: a type tag, whitespace, then a
JSONPath query, a function call or a literal::

    "int $.order.id"                   -> 42
    "num sum($.items[*].amount)"       -> Decimal('4.0')
    "str Hello, @{str $.name}@!"       -> 'Hello, Ada!'
    "obj {\"fixed\": true}"            -> {'fixed': True}
"""

import json
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Iterator, List, Optional

from .context import DocumentContext
from .errors import (
    EvaluationError,
    ExpressionSyntaxError,
    SchemaError,
    UnsupportedTypeTagError,
)
from .functions import FunctionRegistry
from .schema import ArrayOf, ListNode, ObjectNode, Scalar, SchemaNode, compile_schema
from .tokenizer import Token, TokenKind, tokenize
from .types import Type, cast, to_text

logger = logging.getLogger(__name__)

# Type tag and expression are separated by the first run of whitespace
_TYPE_DELIMITER = re.compile(r"\s+")

# @{<schema>}@ spans; a span never contains another opening marker
_INLINE_PATTERN = re.compile(r"@\{((?:(?!@\{).)*?)\}@")


class JsonBuilder:
    """Recursively evaluates schemas against document contexts.

    The builder holds no per-call state, so one instance can serve any
    number of evaluations.
    """

    DEFAULT_MAX_DEPTH = 100

    def __init__(
        self,
        functions: Optional[FunctionRegistry] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.functions = functions if functions is not None else FunctionRegistry.default()
        self.max_depth = max_depth

    def build(self, schema: Any, context: Any) -> Any:
        """Evaluate a schema against a document.

        Args:
            schema: JSON-shaped schema (str, dict or list) or compiled node
            context: DocumentContext, or any JSON value to wrap as one

        Returns:
            The built JSON value

        Raises:
            SchemaError: If the schema is malformed or nested too deeply
            EvaluationError: If a literal cannot be parsed
            CastError: If a value cannot be cast to its type tag
        """
        if not isinstance(context, DocumentContext):
            context = DocumentContext.of(context)
        logger.debug("Build schema: %s", schema)
        return self._build(compile_schema(schema), context, 0)

    def _build(self, node: SchemaNode, context: DocumentContext, depth: int) -> Any:
        self._check_depth(depth)
        if isinstance(node, Scalar):
            return self._build_scalar(node.expression, context, depth)
        if isinstance(node, ObjectNode):
            return self._build_object(node, context, depth)
        if isinstance(node, ListNode):
            result: List[Any] = []
            for part in node.parts:
                result.extend(self._build_items(part, context, depth + 1))
            return result
        if isinstance(node, ArrayOf):
            return self._build_items(node, context, depth + 1)
        raise SchemaError(f"Unsupported schema node: {type(node).__name__}")

    def _check_depth(self, depth: int) -> None:
        if depth > self.max_depth:
            logger.error("Schema nesting exceeds maximum depth of %d", self.max_depth)
            raise SchemaError(
                f"Schema nesting exceeds maximum depth of {self.max_depth}"
            )

    def _build_object(self, node: ObjectNode, context: DocumentContext, depth: int) -> dict:
        result = {}
        for key, child in node.fields:
            logger.debug("Build for [%s] key", key)
            result[key] = self._build(child, context, depth + 1)
        return result

    def _build_items(self, node: ArrayOf, context: DocumentContext, depth: int) -> List[Any]:
        logger.debug("Build items from [%s]", node.path)
        items = context.read(node.path)
        if items is None:
            return []
        if not isinstance(items, list):
            items = [items]
        return [
            self._build(node.element, DocumentContext.of(item), depth + 1)
            for item in items
        ]

    def _build_scalar(self, expression: str, context: DocumentContext, depth: int) -> Any:
        parts = _TYPE_DELIMITER.split(expression.lstrip(), maxsplit=1)
        if len(parts) < 2 or not parts[1]:
            logger.error("Invalid node schema: %s", expression)
            raise SchemaError(f"Invalid schema: {expression!r}")

        word, remainder = parts
        type = Type.from_word(word)
        if type is None:
            logger.error("Unsupported type: %s", word)
            raise UnsupportedTypeTagError(word)

        tokens = iter(tokenize(remainder))
        first = next(tokens)
        if first.kind is TokenKind.PATH:
            return self._build_from_path(type, first.value, context)
        if first.kind is TokenKind.FUNCTION_START:
            return self._build_from_function(type, first.value, tokens, context, depth + 1)
        return self._build_from_raw(type, remainder, context, depth)

    def _build_from_path(self, type: Type, path: str, context: DocumentContext) -> Any:
        logger.debug("Build node with [%s] path to [%s] type", path, type.label)
        value = context.read(path)
        if value is None:
            return None

        if not type.is_array:
            if isinstance(value, list):
                value = value[0] if value else None
                if value is None:
                    return None
            return cast(value, type)

        if not isinstance(value, list):
            value = [value]
        element_type = type.element_type
        return [None if item is None else cast(item, element_type) for item in value]

    def _build_from_function(
        self,
        type: Optional[Type],
        name: str,
        tokens: Iterator[Token],
        context: DocumentContext,
        depth: int,
    ) -> Any:
        """Evaluate a call whose FUNCTION_START token was just consumed.

        Consumes tokens up to and including the matching FUNCTION_END.
        Nested calls are evaluated without a type.
        """
        self._check_depth(depth)
        logger.debug("Build node with [%s] function", name)
        if name not in self.functions:
            logger.error("Unsupported function: %s", name)
        function = self.functions.get(name)

        arguments: List[Any] = []
        for token in tokens:
            if token.kind is TokenKind.FUNCTION_END:
                return function.invoke(type, arguments)
            if token.kind is TokenKind.PATH:
                arguments.append(context.read(token.value))
            elif token.kind is TokenKind.FUNCTION_START:
                arguments.append(
                    self._build_from_function(None, token.value, tokens, context, depth + 1)
                )
            else:
                arguments.append(self._parse_raw(token.value, context, depth))

        raise ExpressionSyntaxError("Missing closing parenthesis", name)

    def _parse_raw(self, raw: str, context: DocumentContext, depth: int) -> Any:
        """Parse a literal function argument.

        Tries decimal (when it has a '.'), then integer, then boolean, and
        falls back to an interpolated string.
        """
        if "." in raw:
            try:
                return Decimal(raw)
            except InvalidOperation:
                logger.debug("Cannot parse [%s] as decimal", raw)
        else:
            try:
                return int(raw)
            except ValueError:
                logger.debug("Cannot parse [%s] as integer", raw)

        if raw.lower() in ("true", "false"):
            return raw.lower() == "true"
        return self._interpolate(raw, context, depth)

    def _build_from_raw(
        self, type: Type, raw: str, context: DocumentContext, depth: int
    ) -> Any:
        logger.debug("Build node with raw data to [%s] type", type.label)
        if type is Type.STRING:
            return self._interpolate(raw, context, depth)
        if type in (Type.INTEGER, Type.NUMBER, Type.BOOLEAN):
            return cast(raw, type)

        value = self._parse_json(raw)
        if not type.is_array:
            return value
        if not isinstance(value, list):
            value = [value]
        element_type = type.element_type
        return [None if item is None else cast(item, element_type) for item in value]

    def _parse_json(self, raw: str) -> Any:
        try:
            return DocumentContext.parse(raw).document
        except json.JSONDecodeError as e:
            raise EvaluationError(f"Invalid JSON literal {raw!r}: {e}") from e

    def _interpolate(self, raw: str, context: DocumentContext, depth: int) -> str:
        """Replace every @{<schema>}@ span with its built value."""

        def replace_match(match: "re.Match[str]") -> str:
            value = self._build(Scalar(match.group(1)), context, depth + 1)
            return to_text(value)

        return _INLINE_PATTERN.sub(replace_match, raw)
