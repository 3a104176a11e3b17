"""JSON schema builder and batch request engine."""

from .builder import JsonBuilder
from .config import (
    JsonBatchConfig,
    load_batch_template,
    load_config,
    load_document,
    load_request,
    parse_batch_template,
    parse_request,
    validate_template_file,
)
from .context import DocumentContext, serialize
from .dispatcher import HttpxDispatcher, RequestDispatcher
from .engine import BatchEngine, BatchListener
from .errors import (
    CastError,
    ConfigError,
    DispatchError,
    EvaluationError,
    ExpressionSyntaxError,
    FunctionArgumentError,
    JsonBatchError,
    QueryError,
    SchemaError,
    UnsupportedFunctionError,
    UnsupportedTypeError,
    UnsupportedTypeTagError,
)
from .functions import BaseFunction, FunctionRegistry
from .models import BatchTemplate, Request, RequestTemplate, Response, ResponseTemplate
from .schema import ARRAY_PATH_KEY, ArrayOf, ListNode, ObjectNode, Scalar, compile_schema
from .tokenizer import Token, TokenKind, tokenize
from .types import Type, cast

__all__ = [
    # Builder
    "JsonBuilder",
    # Config
    "JsonBatchConfig",
    "load_batch_template",
    "load_config",
    "load_document",
    "load_request",
    "parse_batch_template",
    "parse_request",
    "validate_template_file",
    # Context
    "DocumentContext",
    "serialize",
    # Dispatcher
    "HttpxDispatcher",
    "RequestDispatcher",
    # Engine
    "BatchEngine",
    "BatchListener",
    # Errors
    "CastError",
    "ConfigError",
    "DispatchError",
    "EvaluationError",
    "ExpressionSyntaxError",
    "FunctionArgumentError",
    "JsonBatchError",
    "QueryError",
    "SchemaError",
    "UnsupportedFunctionError",
    "UnsupportedTypeError",
    "UnsupportedTypeTagError",
    # Functions
    "BaseFunction",
    "FunctionRegistry",
    # Models
    "BatchTemplate",
    "Request",
    "RequestTemplate",
    "Response",
    "ResponseTemplate",
    # Schema
    "ARRAY_PATH_KEY",
    "ArrayOf",
    "ListNode",
    "ObjectNode",
    "Scalar",
    "compile_schema",
    # Tokenizer
    "Token",
    "TokenKind",
    "tokenize",
    # Types
    "Type",
    "cast",
]
