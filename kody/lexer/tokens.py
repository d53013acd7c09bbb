"""
Token definitions for the Kody lexer.

This module defines every token type the Kody language knows about:
- Literals (identifiers, numbers, strings)
- Keywords (control flow, boolean literals, logic operators)
- Operators (arithmetic, assignment, comparison)
- Punctuation (brackets, separator, member access)
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Any, Dict


class TokenType(Enum):
    """
    Enumeration of all token types in Kody.

    Organized by category for clarity.
    """

    # ========================================================================
    # Literals
    # ========================================================================
    IDENTIFIER = auto()             # counter, _tmp, print
    NUMBER = auto()                 # 12, 25.3 (canonical decimal string)
    STRING = auto()                 # "hello\n"

    # ========================================================================
    # Keywords
    # ========================================================================
    IF = auto()                     # if
    ELSE = auto()                   # else
    WHILE = auto()                  # while
    AND = auto()                    # and
    OR = auto()                     # or
    NOT = auto()                    # not
    TRUE = auto()                   # true
    FALSE = auto()                  # false
    FUNC = auto()                   # func
    RETURN = auto()                 # return

    # ========================================================================
    # Operators
    # ========================================================================

    # Arithmetic
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    MULTIPLY = auto()               # *
    DIVIDE = auto()                 # /

    # Assignment
    ASSIGN = auto()                 # =
    PLUS_ASSIGN = auto()            # +=
    MINUS_ASSIGN = auto()           # -=
    MULTIPLY_ASSIGN = auto()        # *=
    DIVIDE_ASSIGN = auto()          # /=

    # Comparison
    EQUAL = auto()                  # ==
    NOT_EQUAL = auto()              # !=
    LESS_THAN = auto()              # <
    GREATER_THAN = auto()           # >
    LESS_EQUAL = auto()             # <=
    GREATER_EQUAL = auto()          # >=

    # ========================================================================
    # Punctuation and Delimiters
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACE = auto()             # {
    RIGHT_BRACE = auto()            # }
    COMMA = auto()                  # ,
    DOT = auto()                    # . (member access)


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and the verbose token dump.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of file

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the Kody language.

    Two tokens are equal when their type, lexeme and value match; the source
    location is carried along for diagnostics only.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any = None               # Identifier name, canonical number, unescaped string
    location: SourceLocation = field(
        default=SourceLocation("<unknown>", 0, 0, 0), compare=False
    )

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")


# Lookup tables used by the lexer for keyword/operator recognition

KEYWORDS: Dict[str, TokenType] = {
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "and": TokenType.AND,
    "or": TokenType.OR,
    "not": TokenType.NOT,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "func": TokenType.FUNC,
    "return": TokenType.RETURN,
}

# Operators that may be followed by '=' to form a two character operator.
# A value of None means the single character is not a token on its own.
COMPOUND_OPERATORS: Dict[str, tuple] = {
    "+": (TokenType.PLUS, TokenType.PLUS_ASSIGN),
    "-": (TokenType.MINUS, TokenType.MINUS_ASSIGN),
    "*": (TokenType.MULTIPLY, TokenType.MULTIPLY_ASSIGN),
    "/": (TokenType.DIVIDE, TokenType.DIVIDE_ASSIGN),
    "=": (TokenType.ASSIGN, TokenType.EQUAL),
    "<": (TokenType.LESS_THAN, TokenType.LESS_EQUAL),
    ">": (TokenType.GREATER_THAN, TokenType.GREATER_EQUAL),
    "!": (None, TokenType.NOT_EQUAL),
}

PUNCTUATION: Dict[str, TokenType] = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
}
