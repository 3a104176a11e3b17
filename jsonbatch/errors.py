"""Custom exceptions for schema evaluation and batch execution."""

from typing import Any, List, Optional


class JsonBatchError(Exception):
    """Base exception for all jsonbatch errors."""

    pass


class ExpressionSyntaxError(JsonBatchError):
    """Raised when an expression cannot be tokenized.

    Attributes:
        expression: The expression text that failed to tokenize
    """

    def __init__(self, message: str, expression: Optional[str] = None):
        self.expression = expression
        if expression is not None:
            message = f"{message}: {expression!r}"
        super().__init__(message)


class SchemaError(JsonBatchError):
    """Raised when a schema node has a structurally invalid shape."""

    pass


class UnsupportedTypeTagError(SchemaError):
    """Raised when the leading word of an expression is not a known type tag.

    Attributes:
        word: The unrecognized type word
    """

    def __init__(self, word: str):
        self.word = word
        super().__init__(f"Unsupported type: {word}")


class UnsupportedFunctionError(JsonBatchError):
    """Raised when an expression calls a function that is not registered.

    Attributes:
        name: The requested function name
        available: Names of the registered functions
    """

    def __init__(self, name: str, available: Optional[List[str]] = None):
        self.name = name
        self.available = available or []
        message = f"Unsupported function: {name}"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message)


class UnsupportedTypeError(JsonBatchError):
    """Raised when a function is invoked for a type it does not produce.

    Attributes:
        function_name: Name of the invoked function
        type_name: Name of the requested type
    """

    def __init__(self, function_name: str, type_name: str):
        self.function_name = function_name
        self.type_name = type_name
        super().__init__(
            f"Function '{function_name}' does not support type '{type_name}'"
        )


class FunctionArgumentError(JsonBatchError):
    """Raised when a function receives the wrong number or shape of arguments."""

    pass


class CastError(JsonBatchError):
    """Raised when a value cannot be coerced to the requested type.

    Attributes:
        value: The value that failed to cast
        target: Name of the requested type
    """

    def __init__(self, value: Any, target: str):
        self.value = value
        self.target = target
        super().__init__(
            f"Cannot cast {type(value).__name__} {value!r} to {target}"
        )


class EvaluationError(JsonBatchError):
    """Raised when a schema evaluates to something unusable."""

    pass


class QueryError(JsonBatchError):
    """Raised when a JSONPath query is malformed.

    Attributes:
        path: The offending JSONPath expression
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid JSONPath {path!r}: {reason}")


class DispatchError(JsonBatchError):
    """Raised when the dispatcher fails to obtain a response.

    Attributes:
        method: HTTP method of the failed request
        url: URL of the failed request
    """

    def __init__(self, method: str, url: str, error: str):
        self.method = method
        self.url = url
        self.error = error
        super().__init__(f"{method} {url} failed: {error}")


class ConfigError(JsonBatchError):
    """Raised when a template or configuration file has an invalid shape.

    Attributes:
        source: File path or description of the offending input
    """

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)
