"""
Native function library.

Built-in operations are ordinary values of kind ``NATIVE_FUNCTION``. The
parser lowers every operator to a call of one of the ``__`` names below, and
the evaluator falls back to this table when a name is not bound in any
scope frame. The table is built once at import and is read-only.
"""

import sys
from types import MappingProxyType
from typing import Callable, Dict, List, Optional

from ..objects import Value, ValueType, Number, Ordering, NativeFunction, EMPTY
from .errors import ArityMismatchError, TypeMismatchError, DivisionByZeroError

NativeImplementation = Callable[[List[Value]], Value]

_registry: Dict[str, Value] = {}


def _check_arguments(name: str, arguments: List[Value], arity: int, kind: ValueType):
    if len(arguments) != arity:
        raise ArityMismatchError(name, arity, len(arguments))
    for position, argument in enumerate(arguments, 1):
        if argument.type != kind:
            raise TypeMismatchError(
                f"Argument {position} of '{name}' must be a {kind.value}, got {argument.type.value}"
            )


def native(name: str, arity: Optional[int] = None, kind: Optional[ValueType] = None):
    """
    Register a native implementation under ``name``.

    When ``arity`` is given the argument count and kind are checked before
    the implementation runs.
    """
    def decorator(function: NativeImplementation) -> NativeImplementation:
        def checked(arguments: List[Value]) -> Value:
            if arity is not None:
                _check_arguments(name, arguments, arity, kind)
            return function(arguments)

        _registry[name] = Value.native(NativeFunction(name, checked))
        return function

    return decorator


# ============================================================================
# Output
# ============================================================================

@native("print")
def _print(arguments: List[Value]) -> Value:
    sys.stdout.write("".join(argument.display() for argument in arguments) + "\n")
    return EMPTY


# ============================================================================
# Arithmetic
# ============================================================================

@native("__add", 2, ValueType.NUMBER)
def _add(arguments: List[Value]) -> Value:
    return Value.number(arguments[0].data + arguments[1].data)


@native("__subtract", 2, ValueType.NUMBER)
def _subtract(arguments: List[Value]) -> Value:
    return Value.number(arguments[0].data - arguments[1].data)


@native("__multiply", 2, ValueType.NUMBER)
def _multiply(arguments: List[Value]) -> Value:
    return Value.number(arguments[0].data * arguments[1].data)


@native("__divide", 2, ValueType.NUMBER)
def _divide(arguments: List[Value]) -> Value:
    divisor: Number = arguments[1].data
    if divisor.is_zero:
        raise DivisionByZeroError(f"Cannot divide {arguments[0].data} by zero")
    return Value.number(arguments[0].data / divisor)


@native("__negate", 1, ValueType.NUMBER)
def _negate(arguments: List[Value]) -> Value:
    return Value.number(-arguments[0].data)


# ============================================================================
# Comparison
# ============================================================================

def _comparison(name: str, accepted):
    @native(name, 2, ValueType.NUMBER)
    def compare(arguments: List[Value]) -> Value:
        return Value.boolean(arguments[0].data.compare(arguments[1].data) in accepted)
    return compare


_comparison("__equal", {Ordering.EQUAL})
_comparison("__not_equal", {Ordering.LESS, Ordering.GREATER})
_comparison("__less_than", {Ordering.LESS})
_comparison("__less_than_or_equal", {Ordering.LESS, Ordering.EQUAL})
_comparison("__greater_than", {Ordering.GREATER})
_comparison("__greater_than_or_equal", {Ordering.GREATER, Ordering.EQUAL})


# ============================================================================
# Logic (both operands are always evaluated)
# ============================================================================

@native("__and", 2, ValueType.BOOL)
def _and(arguments: List[Value]) -> Value:
    return Value.boolean(arguments[0].data and arguments[1].data)


@native("__or", 2, ValueType.BOOL)
def _or(arguments: List[Value]) -> Value:
    return Value.boolean(arguments[0].data or arguments[1].data)


@native("__not", 1, ValueType.BOOL)
def _not(arguments: List[Value]) -> Value:
    return Value.boolean(not arguments[0].data)


NATIVE_FUNCTIONS = MappingProxyType(_registry)
