"""
Error handling for the Kody parser.

Syntax errors carry the location of the offending token when one exists,
and an error code for categorization.
"""

from typing import Optional, List, Sequence

from ..lexer.tokens import Token, TokenType, SourceLocation
from ..lexer.errors import Diagnostic


class ParseError(Exception):
    """
    Exception raised when the parser encounters a syntax error.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.message = message
        if location is None and token is not None:
            location = token.location
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token

    @property
    def location(self) -> Optional[SourceLocation]:
        return self.diagnostic.location

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


def _describe(token: Token) -> str:
    return f"'{token.lexeme}'" if token.lexeme else token.type.name


# Helper functions for creating common parser errors

def create_unexpected_token_error(found: Token, context: str) -> ParseError:
    """Create an error for a token that cannot appear where it was found."""
    return ParseError(
        message=f"Unexpected {_describe(found)} {context}",
        token=found,
        code="P001",
    )


def create_missing_token_error(expected: str, after: Token) -> ParseError:
    """Create an error for a missing expected token."""
    return ParseError(
        message=f"Expected {expected} after {_describe(after)}",
        token=after,
        code="P002",
        help_text=f"The parser expected to see {expected} at this position.",
    )


def create_unclosed_delimiter_error(opening: Token) -> ParseError:
    """Create an error for an unclosed bracket or brace."""
    closing = {TokenType.LEFT_PAREN: ")", TokenType.LEFT_BRACE: "}"}.get(opening.type, "")
    return ParseError(
        message=f"Unclosed {opening.lexeme}",
        token=opening,
        code="P004",
        help_text=f"The opening '{opening.lexeme}' at {opening.location} was never closed.",
        suggestions=[f"Add a closing '{closing}'"]
    )


def create_unmatched_delimiter_error(closing: Token) -> ParseError:
    """Create an error for a closing bracket without an opening partner."""
    return ParseError(
        message=f"Can't find pair for closing {closing.lexeme}",
        token=closing,
        code="P004",
    )


def create_malformed_expression_error(tokens: Sequence[Token], reason: str) -> ParseError:
    """Create an error for a span that no expression rule accepts."""
    first = tokens[0] if tokens else None
    text = " ".join(token.lexeme for token in tokens)
    return ParseError(
        message=f"Malformed expression '{text}': {reason}" if text else f"Malformed expression: {reason}",
        token=first,
        code="P005",
        suggestions=["Check the expression syntax", "Ensure all operators have operands"]
    )


def create_function_signature_error(reason: str, token: Optional[Token]) -> ParseError:
    """Create an error for a malformed func declaration header."""
    return ParseError(
        message=reason,
        token=token,
        code="P008",
        help_text="Functions are declared as: func name(param, param) body",
    )


def create_operator_error(reason: str, token: Token) -> ParseError:
    """Create an error for an operator used in an invalid position."""
    return ParseError(message=reason, token=token, code="P009")


def create_unexpected_eof_error(expected: str, last: Optional[Token] = None) -> ParseError:
    """Create an error for unexpected end of input."""
    return ParseError(
        message=f"Unexpected end of input, expected {expected}",
        token=last,
        code="P010",
        help_text=f"The parser reached the end of the input while expecting {expected}.",
    )
