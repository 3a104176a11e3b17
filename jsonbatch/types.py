"""Type tags and value casting for schema expressions."""

import json
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, Tuple

from .errors import CastError


class Type(Enum):
    """Closed set of type tags recognized at the head of an expression.

    Each member carries its element type (``None`` for scalars) and the
    words that select it. Lookup is case-insensitive.
    """

    STRING = (None, ("str", "string"))
    INTEGER = (None, ("int", "integer"))
    NUMBER = (None, ("num", "number"))
    BOOLEAN = (None, ("bool", "boolean"))
    OBJECT = (None, ("obj", "object"))
    STRING_ARRAY = ("STRING", ("str[]", "string[]"))
    INTEGER_ARRAY = ("INTEGER", ("int[]", "integer[]"))
    NUMBER_ARRAY = ("NUMBER", ("num[]", "number[]"))
    BOOLEAN_ARRAY = ("BOOLEAN", ("bool[]", "boolean[]"))
    OBJECT_ARRAY = ("OBJECT", ("obj[]", "object[]"))

    def __init__(self, element_name: Optional[str], aliases: Tuple[str, ...]) -> None:
        self._element_name = element_name
        self.aliases = aliases

    @property
    def is_array(self) -> bool:
        return self._element_name is not None

    @property
    def element_type(self) -> Optional["Type"]:
        """Element tag of an array type, ``None`` for scalar types."""
        if self._element_name is None:
            return None
        return Type[self._element_name]

    @property
    def label(self) -> str:
        """Long alias, used in messages (e.g. ``integer[]``)."""
        return self.aliases[-1]

    @classmethod
    def from_word(cls, word: str) -> Optional["Type"]:
        """Find the type selected by ``word``, or None if unknown."""
        lowered = word.lower()
        for member in cls:
            if lowered in member.aliases:
                return member
        return None


def to_text(value: Any) -> str:
    """Render a value the way it appears inside built strings."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return dump_json(value, compact=True)
    return str(value)


def load_json(text: str) -> Any:
    """Parse JSON text, reading fractional numbers as Decimal."""
    return json.loads(text, parse_float=Decimal)


def dump_json(value: Any, compact: bool = False) -> str:
    """Serialize a value to JSON text.

    Decimal values are written with their exact digits; integral ones
    (``Decimal("4")``, ``Decimal("1E+2")``) as plain integers.

    Raises:
        TypeError: If the value holds something JSON cannot represent
    """
    item_separator, key_separator = (",", ":") if compact else (", ", ": ")
    if isinstance(value, Decimal):
        return _number_text(value)
    if isinstance(value, dict):
        members = (
            json.dumps(key if isinstance(key, str) else to_text(key))
            + key_separator
            + dump_json(item, compact)
            for key, item in value.items()
        )
        return "{" + item_separator.join(members) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + item_separator.join(dump_json(item, compact) for item in value) + "]"
    return json.dumps(value)


def _number_text(value: Decimal) -> str:
    if not value.is_finite():
        return json.dumps(float(value))
    if value.as_tuple().exponent >= 0:
        return str(int(value))
    return str(value)


def _is_numeric(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def cast(value: Any, target: Type) -> Any:
    """Coerce ``value`` to a scalar type tag.

    Args:
        value: A non-null value read from a document or literal
        target: The scalar type to produce

    Returns:
        The coerced value (str, int, Decimal, bool or the value itself)

    Raises:
        CastError: If the value has no representation in the target type
    """
    if target is Type.STRING:
        return to_text(value)

    if target is Type.INTEGER:
        if isinstance(value, bool):
            raise CastError(value, target.label)
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                raise CastError(value, target.label) from None
        if isinstance(value, (float, Decimal)):
            try:
                return int(Decimal(str(value)).to_integral_value(rounding=ROUND_HALF_UP))
            except (InvalidOperation, ValueError, OverflowError):
                raise CastError(value, target.label) from None
        raise CastError(value, target.label)

    if target is Type.NUMBER:
        if isinstance(value, Decimal):
            return value
        if isinstance(value, str) or _is_numeric(value):
            try:
                return Decimal(str(value).strip())
            except InvalidOperation:
                raise CastError(value, target.label) from None
        raise CastError(value, target.label)

    if target is Type.BOOLEAN:
        if isinstance(value, bool):
            return value
        if _is_numeric(value):
            return value != 0
        if isinstance(value, str):
            return value.strip().lower() == "true"
        raise CastError(value, target.label)

    if target is Type.OBJECT:
        return value

    raise CastError(value, target.label)
