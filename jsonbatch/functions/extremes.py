"""Min and max functions."""

from typing import Any, List, Optional, Tuple

from ..types import Type
from .base import BaseFunction, flatten, numeric_items


class MinFunction(BaseFunction):
    """Smallest item across the arguments, null when there are none."""

    @property
    def name(self) -> str:
        return "min"

    @property
    def supported_types(self) -> Tuple[Type, ...]:
        return (Type.INTEGER, Type.NUMBER)

    def handle(self, type: Optional[Type], arguments: List[Any]) -> Any:
        items, _ = numeric_items(flatten(arguments), type)
        return min(items) if items else None


class MaxFunction(BaseFunction):
    """Largest item across the arguments, null when there are none."""

    @property
    def name(self) -> str:
        return "max"

    @property
    def supported_types(self) -> Tuple[Type, ...]:
        return (Type.INTEGER, Type.NUMBER)

    def handle(self, type: Optional[Type], arguments: List[Any]) -> Any:
        items, _ = numeric_items(flatten(arguments), type)
        return max(items) if items else None
