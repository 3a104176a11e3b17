"""Base function abstraction for schema expressions."""

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional, Tuple

from ..errors import FunctionArgumentError, UnsupportedTypeError
from ..types import Type, cast


def flatten(arguments: Iterable[Any]) -> List[Any]:
    """Flatten list arguments one level and drop null items."""
    items: List[Any] = []
    for argument in arguments:
        if isinstance(argument, list):
            items.extend(item for item in argument if item is not None)
        elif argument is not None:
            items.append(argument)
    return items


def numeric_items(items: List[Any], type: Optional[Type]) -> Tuple[List[Any], Type]:
    """Cast items for a numeric function.

    A typeless (nested) call folds integers when every item already is one
    and decimals otherwise.

    Returns:
        The cast items and the type they were cast to
    """
    if type is None:
        all_ints = all(isinstance(i, int) and not isinstance(i, bool) for i in items)
        type = Type.INTEGER if all_ints else Type.NUMBER
    return [cast(item, type) for item in items], type


class BaseFunction(ABC):
    """Abstract base class for all expression functions.

    To add a new function:
    1. Create a new class inheriting from BaseFunction
    2. Implement the name and supported_types properties and handle method
    3. Register the function in functions/__init__.py
    """

    # Minimum number of arguments accepted by handle()
    min_arguments: int = 1

    @property
    @abstractmethod
    def name(self) -> str:
        """Function identifier used in expressions (e.g., 'sum')."""
        pass

    @property
    @abstractmethod
    def supported_types(self) -> Tuple[Type, ...]:
        """Type tags this function can produce."""
        pass

    def invoke(self, type: Optional[Type], arguments: List[Any]) -> Any:
        """Run the function for a requested type.

        Args:
            type: Requested type tag, or None for a nested call
            arguments: Already evaluated argument values

        Returns:
            The function result

        Raises:
            UnsupportedTypeError: If type is not in supported_types
            FunctionArgumentError: If too few arguments are given
        """
        if type is not None and type not in self.supported_types:
            raise UnsupportedTypeError(self.name, type.label)
        if len(arguments) < self.min_arguments:
            raise FunctionArgumentError(
                f"Function '{self.name}' expects at least {self.min_arguments} "
                f"argument(s), got {len(arguments)}"
            )
        return self.handle(type, arguments)

    @abstractmethod
    def handle(self, type: Optional[Type], arguments: List[Any]) -> Any:
        """Compute the result from validated arguments."""
        pass
