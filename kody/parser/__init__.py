"""
Kody Parser Package

Turns the flat token list into a function table and an abstract syntax tree.

Key Features:
- Hoisting of func declarations into a global function table
- Statement segmentation without terminators
- Precedence encoded as an ordered chain of span-resolution rules
- Operators lowered to calls of reserved native functions
"""

from .ast_nodes import *
from .parser import Parser, parse, parse_string
from .printer import format_tree
from .errors import ParseError

__all__ = [
    # Core parser
    "Parser", "parse", "parse_string", "format_tree",

    # AST nodes
    "ASTNode", "ASTVisitor", "Program",
    "CodeBlock", "IfStatement", "WhileStatement", "ReturnFromFunction",
    "SetVariable", "GetVariable", "GetConstant", "CallFunction", "GetMember",
    "call_operator",

    # Error handling
    "ParseError",
]
