"""
Error handling for the Kody lexer.

Provides error reporting with source location information and the shared
Diagnostic record used by the parser and the runtime as well.
"""

from typing import Optional, List
from dataclasses import dataclass
from .tokens import SourceLocation


@dataclass
class Diagnostic:
    """Base record for diagnostics (errors and warnings)."""
    message: str
    location: Optional[SourceLocation]
    severity: str  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        code = f"[{self.code}]" if self.code else ""
        result = f"{severity_prefix}{code}: {self.message}\n"
        if self.location is not None:
            result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class LexerError(Exception):
    """
    Exception raised when the lexer encounters an invalid piece of source.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.message = message
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


VALID_ESCAPES = ["\\\\", "\\n", "\\'", '\\"', "\\<newline>", "\\U+<hex>"]


# Helper functions for creating common errors
def create_invalid_character_error(char: str, location: SourceLocation) -> LexerError:
    """Create an error for an invalid character."""
    if char == "!":
        help_text = "'!' is only valid as part of '!='. Use 'not' for logical negation."
    elif char.isprintable():
        help_text = f"The character '{char}' is not valid in Kody source code."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."

    return LexerError(
        message=f"Could not match character '{char}' to any token",
        location=location,
        code="L001",
        help_text=help_text
    )


def create_unterminated_string_error(location: SourceLocation) -> LexerError:
    """Create an error for an unterminated string literal."""
    return LexerError(
        message="String literal not closed",
        location=location,
        code="L002",
        help_text='String literals must be closed with a matching " quote.',
        suggestions=['Add a closing " quote', "Check for unescaped quotes in the string"]
    )


def create_invalid_number_error(lexeme: str, location: SourceLocation, reason: str) -> LexerError:
    """Create an error for an invalid numeric literal."""
    return LexerError(
        message=f"Invalid numeric literal: '{lexeme}'",
        location=location,
        code="L003",
        help_text=reason,
        suggestions=["Use at most one decimal point", "Use underscores for readability only"]
    )


def create_letter_in_number_error(lexeme: str, location: SourceLocation) -> LexerError:
    """Create an error for a letter that appears inside a numeric literal."""
    return LexerError(
        message=f"Found an alphabetical character in number '{lexeme}'",
        location=location,
        code="L010",
        help_text="Identifiers cannot start with a digit and numbers cannot carry suffixes."
    )


def create_invalid_escape_error(sequence: str, location: SourceLocation) -> LexerError:
    """Create an error for an unknown escape sequence."""
    return LexerError(
        message=f"Invalid escape sequence '{sequence}'",
        location=location,
        code="L006",
        help_text="Expected any of \\, n, ', \", a newline or U+<hex> after the escape character \\.",
        suggestions=VALID_ESCAPES
    )


def create_invalid_unicode_error(sequence: str, location: SourceLocation) -> LexerError:
    """Create an error for an invalid Unicode code point escape."""
    return LexerError(
        message=f"Invalid Unicode code point: '{sequence}'",
        location=location,
        code="L004",
        help_text="Code points are written as \\U+ followed by 1 to 6 hex digits, up to U+10FFFF "
                  "and excluding surrogates."
    )
