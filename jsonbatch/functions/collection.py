"""Count and concat functions."""

from typing import Any, List, Optional, Tuple

from ..types import Type, to_text
from .base import BaseFunction, flatten


class CountFunction(BaseFunction):
    """Number of non-null items across the arguments."""

    @property
    def name(self) -> str:
        return "count"

    @property
    def supported_types(self) -> Tuple[Type, ...]:
        return (Type.INTEGER,)

    def handle(self, type: Optional[Type], arguments: List[Any]) -> Any:
        return len(flatten(arguments))


class ConcatFunction(BaseFunction):
    """Joins the text form of every non-null item.

    ``str concat($.first, " ", $.last)``
    """

    @property
    def name(self) -> str:
        return "concat"

    @property
    def supported_types(self) -> Tuple[Type, ...]:
        return (Type.STRING,)

    def handle(self, type: Optional[Type], arguments: List[Any]) -> Any:
        return "".join(to_text(item) for item in flatten(arguments))
