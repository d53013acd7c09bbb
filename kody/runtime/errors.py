"""
Runtime error handling for Kody.

Every failure during evaluation is an ``ExecutionError`` subclass. The tree
carries no source positions, so runtime diagnostics have no location.
"""

from typing import Optional, List

from ..lexer.errors import Diagnostic


class ExecutionError(Exception):
    """
    Exception raised when evaluation of a program fails.

    Contains detailed diagnostic information for error reporting.
    """

    code = "R000"

    def __init__(
        self,
        message: str,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.message = message
        self.diagnostic = Diagnostic(
            message=message,
            location=None,
            severity="error",
            code=self.code,
            help_text=help_text,
            suggestions=suggestions
        )

    def __str__(self) -> str:
        return str(self.diagnostic)


class UnknownVariableError(ExecutionError):
    code = "R001"

    def __init__(self, name: str):
        super().__init__(
            f"Unknown variable '{name}'",
            help_text="Variables must be assigned before use; functions only see globals and their parameters.",
        )
        self.name = name


class TypeMismatchError(ExecutionError):
    code = "R002"


class ArityMismatchError(ExecutionError):
    code = "R003"

    def __init__(self, function_name: str, expected: int, received: int):
        super().__init__(
            f"Function '{function_name}' expects {expected} "
            f"argument{'s' if expected != 1 else ''}, received {received}"
        )
        self.function_name = function_name
        self.expected = expected
        self.received = received


class NotCallableError(ExecutionError):
    code = "R004"


class DivisionByZeroError(ExecutionError):
    code = "R005"


class UnsupportedOperationError(ExecutionError):
    code = "R006"


class RecursionDepthError(ExecutionError):
    code = "R007"

