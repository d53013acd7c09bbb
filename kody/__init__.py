"""
Kody Language Package

A small interpreted scripting language with exact rational numbers.

Architecture:
    kody/
    ├── lexer/           # Tokenization and literal processing
    ├── objects/         # Number and Value model
    ├── parser/          # Function hoisting, segmentation, syntax tree
    ├── runtime/         # Native functions and tree-walking evaluator
    └── cli.py           # Command line driver
"""

import logging

__version__ = "0.1.0"

from .lexer import Lexer, tokenize
from .parser import Parser, parse
from .runtime import Interpreter, execute
from .objects import Value

logging.getLogger(__name__).addHandler(logging.NullHandler())


def run_source(source: str, filename: str = "<string>") -> Value:
    """
    Tokenize, parse and execute a Kody program.

    Returns:
        The program result (value of a top-level ``return``, else empty)

    Raises:
        LexerError, ParseError, ExecutionError: On the first failure
    """
    program = parse(tokenize(source, filename))
    return execute(program.functions, program.main)


__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "Interpreter",
    "Value",

    # Pipeline
    "tokenize",
    "parse",
    "execute",
    "run_source",

    # Version info
    "__version__",
]
