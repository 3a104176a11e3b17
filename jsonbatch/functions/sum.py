"""Sum function: adds up numeric values."""

from decimal import Decimal
from typing import Any, List, Optional, Tuple

from ..types import Type
from .base import BaseFunction, flatten, numeric_items


class SumFunction(BaseFunction):
    """Sum of all items across the arguments.

    ``int sum($.items[*].qty)`` folds integers from 0,
    ``num sum($.items[*].amount)`` folds decimals from Decimal(0).
    """

    @property
    def name(self) -> str:
        """Return function name."""
        return "sum"

    @property
    def supported_types(self) -> Tuple[Type, ...]:
        return (Type.INTEGER, Type.NUMBER)

    def handle(self, type: Optional[Type], arguments: List[Any]) -> Any:
        items, type = numeric_items(flatten(arguments), type)
        start = 0 if type is Type.INTEGER else Decimal(0)
        return sum(items, start)
