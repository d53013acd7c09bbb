"""
Runtime values of the Kody language.

A ``Value`` is an immutable tagged union: a ``ValueType`` tag plus the
payload that belongs to it. Values never share mutable state, so they can
be handed around and stored in several scope frames freely.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Callable, List, Tuple, TYPE_CHECKING

from .number import Number

if TYPE_CHECKING:
    from ..parser.ast_nodes import ASTNode


class ValueType(Enum):
    """Tags of the Value union."""
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    FUNCTION = "function"
    NATIVE_FUNCTION = "native function"
    EMPTY = "empty"


@dataclass(frozen=True)
class FunctionDefinition:
    """A user function hoisted out of the token stream by the parser."""
    name: str
    parameters: Tuple[str, ...]
    body: "ASTNode" = field(hash=False)

    @property
    def arity(self) -> int:
        return len(self.parameters)

    def __str__(self) -> str:
        return f"func {self.name}({', '.join(self.parameters)})"


@dataclass(frozen=True)
class NativeFunction:
    """A built-in operation implemented in Python."""
    name: str
    implementation: Callable[[List["Value"]], "Value"]

    def __call__(self, arguments: List["Value"]) -> "Value":
        return self.implementation(arguments)


@dataclass(frozen=True)
class Value:
    """
    Tagged runtime value.

    Use the factory class methods rather than the constructor so that tag
    and payload always agree.
    """
    type: ValueType
    data: Any = None

    @classmethod
    def boolean(cls, value: bool) -> "Value":
        return cls(ValueType.BOOL, bool(value))

    @classmethod
    def number(cls, value: Number) -> "Value":
        return cls(ValueType.NUMBER, value)

    @classmethod
    def string(cls, value: str) -> "Value":
        return cls(ValueType.STRING, value)

    @classmethod
    def function(cls, definition: FunctionDefinition) -> "Value":
        return cls(ValueType.FUNCTION, definition)

    @classmethod
    def native(cls, function: NativeFunction) -> "Value":
        return cls(ValueType.NATIVE_FUNCTION, function)

    @property
    def is_callable(self) -> bool:
        return self.type in (ValueType.FUNCTION, ValueType.NATIVE_FUNCTION)

    def display(self) -> str:
        """Text written by ``print`` for this value."""
        if self.type == ValueType.NUMBER:
            return str(self.data)
        if self.type == ValueType.BOOL:
            return "true" if self.data else "false"
        if self.type == ValueType.STRING:
            return self.data
        return self.debug()

    def debug(self) -> str:
        """Debug form, also used for kinds without a natural display form."""
        if self.type == ValueType.FUNCTION:
            return f"<{self.data}>"
        if self.type == ValueType.NATIVE_FUNCTION:
            return f"<native {self.data.name}>"
        if self.type == ValueType.EMPTY:
            return "<empty>"
        if self.type == ValueType.STRING:
            return repr(self.data)
        return self.display()

    def __str__(self) -> str:
        return self.display()


EMPTY = Value(ValueType.EMPTY)
TRUE = Value.boolean(True)
FALSE = Value.boolean(False)
