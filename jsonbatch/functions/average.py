"""Average function: decimal mean of numeric values."""

from decimal import Decimal
from typing import Any, List, Optional, Tuple

from ..types import Type
from .base import BaseFunction, flatten, numeric_items


class AverageFunction(BaseFunction):
    """Arithmetic mean of all items, computed in Decimal.

    Returns null when no non-null items are given.
    """

    @property
    def name(self) -> str:
        return "average"

    @property
    def supported_types(self) -> Tuple[Type, ...]:
        return (Type.NUMBER,)

    def handle(self, type: Optional[Type], arguments: List[Any]) -> Any:
        items, _ = numeric_items(flatten(arguments), Type.NUMBER)
        if not items:
            return None
        return sum(items, Decimal(0)) / len(items)
