"""
Kody Lexer - turns source text into a flat list of tokens.

Whitespace and '#' comments never produce tokens, numbers are stored in a
canonical decimal form and string literals are stored after escape
processing, so the parser never has to look at raw source again.
"""

import logging
from typing import List

from .tokens import (
    Token, TokenType, SourceLocation, KEYWORDS, COMPOUND_OPERATORS, PUNCTUATION
)
from .errors import (
    LexerError, create_invalid_character_error, create_unterminated_string_error,
    create_invalid_number_error, create_letter_in_number_error,
    create_invalid_escape_error, create_invalid_unicode_error
)

logger = logging.getLogger(__name__)

HEX_DIGITS = "0123456789abcdefABCDEF"
MAX_CODE_POINT_DIGITS = 6


def canonicalize_number(literal: str) -> str:
    """
    Bring a numeric literal into its canonical form.

    Underscores are dropped, leading zeros of the integer part and trailing
    zeros of the fractional part are trimmed, and both sides of a decimal
    point always keep at least one digit:

        >>> canonicalize_number("0000_25_._300")
        '25.3'
        >>> canonicalize_number("2.")
        '2.0'
    """
    digits = literal.replace("_", "")
    if "." not in digits:
        return digits.lstrip("0") or "0"

    integer_part, fraction_part = digits.split(".", 1)
    integer_part = integer_part.lstrip("0") or "0"
    fraction_part = fraction_part.rstrip("0") or "0"
    return f"{integer_part}.{fraction_part}"


def _is_identifier_start(char: str) -> bool:
    return char == "_" or ("a" <= char <= "z") or ("A" <= char <= "Z")


def _is_identifier_continue(char: str) -> bool:
    return _is_identifier_start(char) or ("0" <= char <= "9")


class Lexer:
    """
    Kody lexical analyzer.

    Converts source code text into a list of tokens. Errors are collected
    while lexing continues past the offending character, so that
    ``errors`` holds every problem found in one pass.
    """

    def __init__(self, source: str, filename: str = "<unknown>"):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            filename: Name of source file for error reporting
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []
        self.errors: List[LexerError] = []

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.

        Returns:
            List of tokens (no end-of-file marker)
        """
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens.clear()
        self.errors.clear()

        while self.pos < len(self.source):
            self._skip_whitespace_and_comments()

            if self.pos >= len(self.source):
                break

            start_pos = self.pos
            try:
                self.tokens.append(self._next_token())

            except LexerError as e:
                self.errors.append(e)
                # Skip the problematic character if nothing was consumed
                if self.pos == start_pos:
                    self._advance()

        logger.debug("Lexed %d tokens from %s (%d errors)",
                     len(self.tokens), self.filename, len(self.errors))
        return self.tokens

    def _next_token(self) -> Token:
        """Get the next token from the source."""
        location = self._location()
        current_char = self.source[self.pos]

        if "0" <= current_char <= "9":
            return self._tokenize_number(location)

        if _is_identifier_start(current_char):
            return self._tokenize_identifier_or_keyword(location)

        if current_char == '"':
            return self._tokenize_string(location)

        if current_char in COMPOUND_OPERATORS:
            single, compound = COMPOUND_OPERATORS[current_char]
            if self._peek() == "=":
                self._advance_by(2)
                return Token(compound, current_char + "=", None, location)
            if single is not None:
                self._advance()
                return Token(single, current_char, None, location)

        if current_char in PUNCTUATION:
            self._advance()
            return Token(PUNCTUATION[current_char], current_char, None, location)

        raise create_invalid_character_error(current_char, location)

    def _tokenize_number(self, location: SourceLocation) -> Token:
        """Tokenize a number literal into its canonical decimal string."""
        start_pos = self.pos
        has_decimal_point = False

        while self.pos < len(self.source):
            char = self.source[self.pos]
            if char == "_" or "0" <= char <= "9":
                self._advance()
            elif char == ".":
                if has_decimal_point:
                    self._skip_number_tail()
                    raise create_invalid_number_error(
                        self.source[start_pos:self.pos],
                        location,
                        "Multiple decimal separators in one number"
                    )
                has_decimal_point = True
                self._advance()
            elif char.isalpha():
                self._skip_number_tail()
                raise create_letter_in_number_error(self.source[start_pos:self.pos], location)
            else:
                break

        lexeme = self.source[start_pos:self.pos]
        return Token(TokenType.NUMBER, lexeme, canonicalize_number(lexeme), location)

    def _skip_number_tail(self):
        """Consume the rest of a malformed number so lexing resumes after it."""
        while self.pos < len(self.source) and (
            _is_identifier_continue(self.source[self.pos]) or self.source[self.pos] == "."
        ):
            self._advance()

    def _tokenize_identifier_or_keyword(self, location: SourceLocation) -> Token:
        """Tokenize an identifier or keyword."""
        start_pos = self.pos
        self._advance()

        while self.pos < len(self.source) and _is_identifier_continue(self.source[self.pos]):
            self._advance()

        lexeme = self.source[start_pos:self.pos]
        token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)
        value = lexeme if token_type == TokenType.IDENTIFIER else None

        return Token(token_type, lexeme, value, location)

    def _tokenize_string(self, location: SourceLocation) -> Token:
        """Tokenize a string literal, processing escape sequences."""
        start_pos = self.pos
        self._advance()  # Skip opening quote

        value_parts = []

        while self.pos < len(self.source) and self.source[self.pos] != '"':
            if self.source[self.pos] == "\\":
                value_parts.append(self._handle_escape_sequence(location))
            else:
                value_parts.append(self.source[self.pos])
                self._advance()

        if self.pos >= len(self.source):
            raise create_unterminated_string_error(location)

        self._advance()  # Skip closing quote

        lexeme = self.source[start_pos:self.pos]
        return Token(TokenType.STRING, lexeme, "".join(value_parts), location)

    def _handle_escape_sequence(self, string_location: SourceLocation) -> str:
        """Handle one escape sequence; the current character is the backslash."""
        escape_location = self._location()
        self._advance()  # Skip backslash

        if self.pos >= len(self.source):
            raise create_unterminated_string_error(string_location)

        escape_char = self.source[self.pos]
        self._advance()

        escape_sequences = {
            "\\": "\\",
            "n": "\n",
            "'": "'",
            '"': '"',
            "\n": "",
        }

        if escape_char in escape_sequences:
            return escape_sequences[escape_char]
        if escape_char == "\r" and self._current() == "\n":
            self._advance()
            return ""
        if escape_char == "U":
            return self._handle_code_point(escape_location)

        raise create_invalid_escape_error("\\" + escape_char, escape_location)

    def _handle_code_point(self, location: SourceLocation) -> str:
        """Handle the \\U+<hex> part of a code point escape."""
        if self._current() != "+":
            raise create_invalid_unicode_error("\\U" + self._current(), location)
        self._advance()

        start_pos = self.pos
        while (self.pos < len(self.source)
               and self.source[self.pos] in HEX_DIGITS
               and self.pos - start_pos < MAX_CODE_POINT_DIGITS):
            self._advance()

        hex_digits = self.source[start_pos:self.pos]
        sequence = "\\U+" + hex_digits
        if not hex_digits:
            raise create_invalid_unicode_error(sequence, location)

        code_point = int(hex_digits, 16)
        if code_point > 0x10FFFF or 0xD800 <= code_point <= 0xDFFF:
            raise create_invalid_unicode_error(sequence, location)

        return chr(code_point)

    def _skip_whitespace_and_comments(self):
        """Skip whitespace and '#' comments."""
        while self.pos < len(self.source):
            char = self.source[self.pos]
            if char.isspace():
                self._advance()
                continue

            if char == "#":
                while self.pos < len(self.source) and self.source[self.pos] != "\n":
                    self._advance()
                continue

            break

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            if self.source[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _advance_by(self, count: int):
        """Advance position by multiple characters."""
        for _ in range(count):
            self._advance()

    def _current(self) -> str:
        if self.pos < len(self.source):
            return self.source[self.pos]
        return "\0"

    def _peek(self, offset: int = 1) -> str:
        """Peek at character ahead without advancing."""
        peek_pos = self.pos + offset
        if peek_pos < len(self.source):
            return self.source[peek_pos]
        return "\0"

    def has_errors(self) -> bool:
        """Check if lexer encountered any errors."""
        return len(self.errors) > 0


def tokenize(source: str, filename: str = "<string>") -> List[Token]:
    """
    Tokenize a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        List of tokens

    Raises:
        LexerError: The first error encountered, if any
    """
    lexer = Lexer(source, filename)
    tokens = lexer.tokenize()

    if lexer.has_errors():
        raise lexer.errors[0]

    return tokens


def format_tokens(tokens: List[Token]) -> str:
    """Render a token list one token per line, used by the verbose CLI mode."""
    return "\n".join(
        f"{token.location.line:>4}:{token.location.column:<4} {token}" for token in tokens
    )
