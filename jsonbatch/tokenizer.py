"""Tokenizer for schema expressions.

An expression is the part of a schema string after its type tag. It is one
of:

- a JSONPath query: ``$.items[*].amount``
- a function call: ``sum($.items[*].amount)``, ``max(count($.a), 3)``
- anything else, kept as a single raw literal: ``Hello, @{str $.name}@!``

Function calls are flattened into ``FUNCTION_START name``, the argument
tokens, then ``FUNCTION_END``; nested calls appear inline.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .errors import ExpressionSyntaxError

PATH_ROOT = "$"

_FUNCTION_PATTERN = re.compile(r"([A-Za-z_][A-Za-z0-9_]*)\(")
_QUOTES = ("'", '"')
_CLOSERS = {"(": ")", "[": "]"}


class TokenKind(Enum):
    """Kinds of tokens produced by the tokenizer."""

    PATH = "path"
    FUNCTION_START = "function_start"
    FUNCTION_END = "function_end"
    RAW = "raw"


@dataclass(frozen=True)
class Token:
    """A single token: its kind and, except for FUNCTION_END, its text."""

    kind: TokenKind
    value: Optional[str] = None


def tokenize(expression: str) -> List[Token]:
    """Split an expression into an ordered list of tokens.

    Args:
        expression: Expression text without its leading type tag

    Returns:
        Flat list of tokens

    Raises:
        ExpressionSyntaxError: If a function call is not closed or its
            arguments contain unbalanced quotes or brackets
    """
    text = expression.strip()
    if text.startswith(PATH_ROOT):
        return [Token(TokenKind.PATH, text)]

    match = _FUNCTION_PATTERN.match(text)
    if match:
        close = _find_closing(text, match.end() - 1)
        if close == len(text) - 1:
            return _function_tokens(match.group(1), text[match.end():close])

    return [Token(TokenKind.RAW, expression)]


def _function_tokens(name: str, arguments: str) -> List[Token]:
    tokens = [Token(TokenKind.FUNCTION_START, name)]
    for argument in _split_arguments(arguments):
        tokens.extend(_argument_tokens(argument))
    tokens.append(Token(TokenKind.FUNCTION_END))
    return tokens


def _argument_tokens(argument: str) -> List[Token]:
    """Tokenize one function argument."""
    if argument[0] in _QUOTES:
        if len(argument) < 2 or argument[-1] != argument[0]:
            raise ExpressionSyntaxError("Unterminated string argument", argument)
        return [Token(TokenKind.RAW, argument[1:-1])]

    if argument.startswith(PATH_ROOT):
        return [Token(TokenKind.PATH, argument)]

    match = _FUNCTION_PATTERN.match(argument)
    if match:
        close = _find_closing(argument, match.end() - 1)
        if close != len(argument) - 1:
            raise ExpressionSyntaxError("Unexpected text after function call", argument)
        return _function_tokens(match.group(1), argument[match.end():close])

    return [Token(TokenKind.RAW, argument)]


def _opens_quote(text: str, pos: int) -> bool:
    """A quote opens a string unless it follows a word character (e.g. it's)."""
    return text[pos] in _QUOTES and (pos == 0 or not text[pos - 1].isalnum())


def _find_closing(text: str, open_index: int) -> int:
    """Return the index of the bracket closing the one at ``open_index``."""
    stack: List[str] = []
    quote: Optional[str] = None
    pos = open_index
    while pos < len(text):
        char = text[pos]
        if quote:
            if char == "\\":
                pos += 1
            elif char == quote:
                quote = None
        elif _opens_quote(text, pos):
            quote = char
        elif char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif char in _CLOSERS.values():
            if not stack or stack.pop() != char:
                raise ExpressionSyntaxError(f"Unexpected '{char}'", text)
            if not stack:
                return pos
        pos += 1

    if quote:
        raise ExpressionSyntaxError("Unterminated string", text)
    raise ExpressionSyntaxError("Missing closing parenthesis", text)


def _split_arguments(text: str) -> List[str]:
    """Split an argument list on commas and whitespace at the top level."""
    arguments: List[str] = []
    current: List[str] = []
    stack: List[str] = []
    quote: Optional[str] = None
    pos = 0

    while pos < len(text):
        char = text[pos]
        if quote:
            current.append(char)
            if char == "\\" and pos + 1 < len(text):
                pos += 1
                current.append(text[pos])
            elif char == quote:
                quote = None
        elif not stack and (char == "," or char.isspace()):
            if current:
                arguments.append("".join(current))
                current = []
        else:
            if _opens_quote(text, pos):
                quote = char
            elif char in _CLOSERS:
                stack.append(_CLOSERS[char])
            elif char in _CLOSERS.values():
                if not stack or stack.pop() != char:
                    raise ExpressionSyntaxError(f"Unexpected '{char}'", text)
            current.append(char)
        pos += 1

    if quote:
        raise ExpressionSyntaxError("Unterminated string", text)
    if stack:
        raise ExpressionSyntaxError("Unbalanced brackets", text)
    if current:
        arguments.append("".join(current))
    return arguments
