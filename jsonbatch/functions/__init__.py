"""Function registry and exports for expression functions."""

from typing import Dict, Iterable, List, Optional

from ..errors import UnsupportedFunctionError
from .average import AverageFunction
from .base import BaseFunction
from .collection import ConcatFunction, CountFunction
from .extremes import MaxFunction, MinFunction
from .sum import SumFunction


class FunctionRegistry:
    """Registry of functions callable from expressions.

    Each builder owns its registry; use ``FunctionRegistry.default()`` for
    one holding every built-in function.
    """

    def __init__(self, functions: Optional[Iterable[BaseFunction]] = None) -> None:
        self._functions: Dict[str, BaseFunction] = {}
        for function in functions or ():
            self.register(function)

    @classmethod
    def default(cls) -> "FunctionRegistry":
        """Create a registry with the built-in functions."""
        return cls(
            [
                SumFunction(),
                MinFunction(),
                MaxFunction(),
                AverageFunction(),
                CountFunction(),
                ConcatFunction(),
            ]
        )

    def register(self, function: BaseFunction) -> None:
        """Register a function instance, replacing any with the same name."""
        self._functions[function.name] = function

    def get(self, name: str) -> BaseFunction:
        """Get a function by name.

        Args:
            name: Function identifier (e.g., 'sum')

        Returns:
            The registered function instance

        Raises:
            UnsupportedFunctionError: If the function is not registered
        """
        if name not in self._functions:
            raise UnsupportedFunctionError(name, self.available())
        return self._functions[name]

    def available(self) -> List[str]:
        """List all registered function names."""
        return list(self._functions.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._functions


__all__ = [
    "BaseFunction",
    "FunctionRegistry",
    "SumFunction",
    "MinFunction",
    "MaxFunction",
    "AverageFunction",
    "CountFunction",
    "ConcatFunction",
]
