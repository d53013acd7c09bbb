"""
Kody Runtime Package

Evaluates parsed Kody programs.

Key Features:
- Tree-walking interpreter over the syntax tree
- Block-scoped variable frames with a shared global frame
- Read-only table of native functions backing every operator
- Typed runtime errors with diagnostic codes
"""

from .evaluator import Interpreter, execute
from .natives import NATIVE_FUNCTIONS
from .scope import ScopeStack
from .errors import (
    ExecutionError, UnknownVariableError, TypeMismatchError,
    ArityMismatchError, NotCallableError, DivisionByZeroError,
    UnsupportedOperationError, RecursionDepthError
)

__all__ = [
    "Interpreter",
    "execute",
    "NATIVE_FUNCTIONS",
    "ScopeStack",
    "ExecutionError",
    "UnknownVariableError",
    "TypeMismatchError",
    "ArityMismatchError",
    "NotCallableError",
    "DivisionByZeroError",
    "UnsupportedOperationError",
    "RecursionDepthError",
]
