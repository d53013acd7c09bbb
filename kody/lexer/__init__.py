"""
Kody Lexer Package

Implements the lexical analyzer (tokenizer) for the Kody language.

Key Features:
- Keyword recognition for the ten reserved words
- Canonical decimal number literals (underscores, redundant zeros removed)
- String literals with escape and \\U+<hex> code point processing
- Source location tracking for diagnostics
"""

from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer, tokenize, canonicalize_number, format_tokens
from .errors import LexerError, Diagnostic

__all__ = [
    "Lexer",
    "tokenize",
    "canonicalize_number",
    "format_tokens",
    "Token",
    "TokenType",
    "SourceLocation",
    "LexerError",
    "Diagnostic",
]
