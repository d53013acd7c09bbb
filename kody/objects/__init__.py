"""
Kody Object Model

The values shared by the parser (literal constants) and the runtime:
the exact rational ``Number`` and the tagged ``Value`` union.
"""

from .number import Number, Ordering
from .values import (
    Value, ValueType, FunctionDefinition, NativeFunction, EMPTY, TRUE, FALSE
)

__all__ = [
    "Number", "Ordering",
    "Value", "ValueType", "FunctionDefinition", "NativeFunction",
    "EMPTY", "TRUE", "FALSE",
]
