"""
Kody Parser Implementation

Kody has no statement terminators, so the parser works on token spans:

1. every ``func`` declaration is hoisted out of the token stream into the
   function table;
2. the remaining tokens are cut into statements by looking for a token that
   can end an expression followed by a token that can only start a new one;
3. each statement span is resolved by a fixed chain of rules. Each rule
   either claims the whole span or defers to the next one, and the order of
   the chain encodes operator precedence.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..lexer.tokens import Token, TokenType
from ..objects import Value, Number, FunctionDefinition, EMPTY
from .ast_nodes import (
    ASTNode, CodeBlock, IfStatement, WhileStatement, ReturnFromFunction,
    SetVariable, GetVariable, GetConstant, CallFunction, GetMember, Program,
    call_operator
)
from .errors import (
    create_unexpected_token_error, create_missing_token_error,
    create_unclosed_delimiter_error, create_unmatched_delimiter_error,
    create_malformed_expression_error, create_function_signature_error,
    create_operator_error, create_unexpected_eof_error
)

logger = logging.getLogger(__name__)

TokenSpan = Sequence[Token]

# Tokens that may end an expression ...
STATEMENT_TERMINATORS = frozenset({
    TokenType.IDENTIFIER, TokenType.NUMBER, TokenType.STRING,
    TokenType.RIGHT_PAREN, TokenType.RIGHT_BRACE,
    TokenType.TRUE, TokenType.FALSE,
})

# ... and tokens that can only start a new one when they follow such a token
STATEMENT_STARTERS = frozenset({
    TokenType.IDENTIFIER, TokenType.NUMBER, TokenType.STRING,
    TokenType.LEFT_BRACE, TokenType.IF, TokenType.WHILE, TokenType.ELSE,
    TokenType.TRUE, TokenType.FALSE, TokenType.RETURN, TokenType.FUNC,
})

# A '+' or '-' is binary only directly after one of these
BINARY_OPERAND_ENDS = frozenset({
    TokenType.NUMBER, TokenType.IDENTIFIER, TokenType.STRING,
    TokenType.RIGHT_PAREN, TokenType.RIGHT_BRACE,
})

ASSIGNMENT_OPERATORS: Dict[TokenType, Optional[str]] = {
    TokenType.ASSIGN: None,
    TokenType.PLUS_ASSIGN: "__add",
    TokenType.MINUS_ASSIGN: "__subtract",
    TokenType.MULTIPLY_ASSIGN: "__multiply",
    TokenType.DIVIDE_ASSIGN: "__divide",
}

COMPARISON_OPERATORS: Dict[TokenType, str] = {
    TokenType.EQUAL: "__equal",
    TokenType.NOT_EQUAL: "__not_equal",
    TokenType.GREATER_THAN: "__greater_than",
    TokenType.GREATER_EQUAL: "__greater_than_or_equal",
    TokenType.LESS_THAN: "__less_than",
    TokenType.LESS_EQUAL: "__less_than_or_equal",
}

ADDITIVE_OPERATORS: Dict[TokenType, str] = {
    TokenType.PLUS: "__add",
    TokenType.MINUS: "__subtract",
}

MULTIPLICATIVE_OPERATORS: Dict[TokenType, str] = {
    TokenType.MULTIPLY: "__multiply",
    TokenType.DIVIDE: "__divide",
}

BRACKET_PAIRS = {
    TokenType.LEFT_PAREN: TokenType.RIGHT_PAREN,
    TokenType.LEFT_BRACE: TokenType.RIGHT_BRACE,
}


def find_closing(tokens: TokenSpan, open_index: int) -> Optional[int]:
    """Index of the bracket closing the one at ``open_index``, or None."""
    opening = tokens[open_index].type
    closing = BRACKET_PAIRS[opening]
    depth = 0
    for index in range(open_index, len(tokens)):
        kind = tokens[index].type
        if kind == opening:
            depth += 1
        elif kind == closing:
            depth -= 1
            if depth == 0:
                return index
    return None


def find_opening(tokens: TokenSpan, close_index: int) -> Optional[int]:
    """Index of the '(' matching the ')' at ``close_index``, scanning backwards."""
    depth = 0
    for index in range(close_index, -1, -1):
        kind = tokens[index].type
        if kind == TokenType.RIGHT_PAREN:
            depth += 1
        elif kind == TokenType.LEFT_PAREN:
            depth -= 1
            if depth == 0:
                return index
    return None


def find_top_level(
    tokens: TokenSpan,
    types,
    predicate: Optional[Callable[[int], bool]] = None
) -> Optional[int]:
    """
    Index of the first token of one of ``types`` that is not nested inside
    parentheses or braces opened earlier in the span.
    """
    parens = 0
    braces = 0
    for index, token in enumerate(tokens):
        kind = token.type
        if kind in types and parens <= 0 and braces <= 0:
            if predicate is None or predicate(index):
                return index
        if kind == TokenType.LEFT_PAREN:
            parens += 1
        elif kind == TokenType.RIGHT_PAREN:
            parens -= 1
        elif kind == TokenType.LEFT_BRACE:
            braces += 1
        elif kind == TokenType.RIGHT_BRACE:
            braces -= 1
    return None


def _is_enclosed(tokens: TokenSpan, opening: TokenType) -> bool:
    """True when the first token opens a bracket that the last token closes."""
    return (
        len(tokens) >= 2
        and tokens[0].type == opening
        and find_closing(tokens, 0) == len(tokens) - 1
    )


class Parser:
    """
    Kody parser.

    ``parse()`` returns a ``Program``: the hoisted function table and the
    program body as a ``CodeBlock``. The first syntax error aborts parsing.
    """

    def __init__(self, tokens: List[Token]):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: List of tokens from the lexer
        """
        self.tokens = list(tokens)
        self._init_parsing_tables()

    def _init_parsing_tables(self):
        """Set up the precedence-ordered chain of expression rules."""
        self.expression_rules: List[Callable[[TokenSpan], Optional[ASTNode]]] = [
            self._check_parentheses,
            self._check_code_block,
            self._check_return,
            self._check_if,
            self._check_while,
            self._check_negation,
            self._check_value,
            self._check_assignment,
            self._check_comparison,
            self._check_addition_and_subtraction,
            self._check_multiplication_and_division,
            self._check_or,
            self._check_and,
            self._check_not,
            self._check_call_and_member_access,
        ]

    def parse(self) -> Program:
        """
        Parse the token stream.

        Returns:
            Program holding the function table and the main code block

        Raises:
            ParseError: On the first syntax error
        """
        functions, remaining = self._hoist_functions(self.tokens)

        if not remaining:
            last = self.tokens[-1] if self.tokens else None
            raise create_unexpected_eof_error("program statements", last)

        main = CodeBlock(self.parse_statements(remaining))
        logger.debug("Parsed %d functions and %d top-level statements",
                     len(functions), len(main.statements))
        return Program(functions, main)

    # ------------------------------------------------------------------
    # Function hoisting
    # ------------------------------------------------------------------

    def _hoist_functions(self, tokens: TokenSpan) -> Tuple[Dict[str, FunctionDefinition], List[Token]]:
        """
        Remove every func declaration from the stream.

        Declarations are taken from the end of the stream first, so a nested
        declaration is removed before the body that contains it is parsed.
        When a name repeats, the declaration further down the source is kept.
        """
        functions: Dict[str, FunctionDefinition] = {}
        remaining = list(tokens)

        while True:
            positions = [i for i, token in enumerate(remaining) if token.type == TokenType.FUNC]
            if not positions:
                break

            start = positions[-1]
            definition, length = self._parse_function(remaining[start:])
            del remaining[start:start + length]

            if definition.name in functions:
                # The registered definition sits further down the source and stays
                logger.warning("Function '%s' is declared more than once, keeping the later declaration",
                               definition.name)
                continue

            logger.debug("Hoisted function %s", definition)
            functions[definition.name] = definition

        return functions, remaining

    def _parse_function(self, tokens: TokenSpan) -> Tuple[FunctionDefinition, int]:
        """Parse ``func NAME ( PARAMS ) BODY``; returns the definition and its token length."""
        func_token = tokens[0]

        if len(tokens) < 2 or tokens[1].type != TokenType.IDENTIFIER:
            found = tokens[1] if len(tokens) > 1 else func_token
            raise create_function_signature_error("Expected identifier after function keyword", found)
        name = tokens[1].value

        if len(tokens) < 3 or tokens[2].type != TokenType.LEFT_PAREN:
            found = tokens[2] if len(tokens) > 2 else tokens[1]
            raise create_function_signature_error("Expected parentheses after function identifier", found)

        parameters: List[str] = []
        index = 3
        if index < len(tokens) and tokens[index].type == TokenType.RIGHT_PAREN:
            index += 1
        else:
            while True:
                if index >= len(tokens):
                    raise create_unclosed_delimiter_error(tokens[2])
                parameter = tokens[index]
                if parameter.type != TokenType.IDENTIFIER:
                    raise create_function_signature_error(
                        f"Unexpected '{parameter.lexeme}' in arguments of function '{name}'", parameter
                    )
                if parameter.value in parameters:
                    raise create_function_signature_error(
                        f"Duplicate parameter '{parameter.value}' in function '{name}'", parameter
                    )
                parameters.append(parameter.value)
                index += 1

                if index >= len(tokens):
                    raise create_unclosed_delimiter_error(tokens[2])
                separator = tokens[index]
                index += 1
                if separator.type == TokenType.RIGHT_PAREN:
                    break
                if separator.type != TokenType.COMMA:
                    raise create_function_signature_error(
                        f"Unexpected '{separator.lexeme}' in arguments of function '{name}'", separator
                    )

        if index >= len(tokens):
            raise create_unexpected_eof_error(f"a body for function '{name}'", tokens[index - 1])

        body_tokens, _ = self.next_statement(tokens[index:])
        body = self.parse_expression(body_tokens)

        return FunctionDefinition(name, tuple(parameters), body), index + len(body_tokens)

    # ------------------------------------------------------------------
    # Statement segmentation
    # ------------------------------------------------------------------

    def parse_statements(self, tokens: TokenSpan) -> List[ASTNode]:
        """Parse every statement of a span, in order."""
        return [self.parse_expression(statement) for statement in self.split_statements(tokens)]

    def split_statements(self, tokens: TokenSpan) -> List[TokenSpan]:
        """Cut a span into consecutive complete statements."""
        statements = []
        remaining = tokens
        while remaining:
            statement, remaining = self.next_statement(remaining)
            statements.append(statement)
        return statements

    def next_statement(self, tokens: TokenSpan) -> Tuple[TokenSpan, TokenSpan]:
        """
        Split off the first complete statement.

        Returns:
            (statement tokens, remaining tokens)
        """
        if not tokens:
            raise create_unexpected_eof_error("an expression")

        first = tokens[0].type
        if first == TokenType.IF:
            return self._split_if(tokens)
        if first == TokenType.WHILE:
            return self._split_while(tokens)

        index = 0
        if first == TokenType.RETURN:
            if len(tokens) == 1:
                return tokens[:1], tokens[1:]
            index = 1

        while index < len(tokens):
            token = tokens[index]
            kind = token.type

            if kind in STATEMENT_TERMINATORS:
                if index + 1 < len(tokens) and tokens[index + 1].type in STATEMENT_STARTERS:
                    return tokens[:index + 1], tokens[index + 1:]
            elif kind == TokenType.FUNC:
                raise create_unexpected_token_error(token, "in an unfinished expression")
            elif kind == TokenType.ELSE:
                raise create_unexpected_token_error(token, "without a matching if")
            elif kind == TokenType.RETURN:
                raise create_unexpected_token_error(token, "in the middle of an expression")
            elif kind in (TokenType.IF, TokenType.WHILE):
                # Skip the nested construct, then look at its last token
                nested, _ = self.next_statement(tokens[index:])
                index += len(nested) - 1
                continue
            elif kind == TokenType.LEFT_BRACE:
                closing = find_closing(tokens, index)
                if closing is None:
                    raise create_unclosed_delimiter_error(token)
                index = closing
                continue

            index += 1

        return tokens, tokens[len(tokens):]

    def _split_if(self, tokens: TokenSpan) -> Tuple[TokenSpan, TokenSpan]:
        condition, action, else_action = self._if_parts(tokens)
        length = 1 + len(condition) + len(action)
        if else_action is not None:
            length += 1 + len(else_action)
        return tokens[:length], tokens[length:]

    def _if_parts(self, tokens: TokenSpan) -> Tuple[TokenSpan, TokenSpan, Optional[TokenSpan]]:
        """Condition, action and optional else-action spans of an if construct."""
        if len(tokens) < 2:
            raise create_missing_token_error("a condition", tokens[0])

        condition, other = self.next_statement(tokens[1:])
        if not other:
            raise create_missing_token_error("an action", condition[-1])

        action, other = self.next_statement(other)

        if other and other[0].type == TokenType.ELSE:
            if len(other) < 2:
                raise create_missing_token_error("an action", other[0])
            else_action, _ = self.next_statement(other[1:])
            return condition, action, else_action

        return condition, action, None

    def _split_while(self, tokens: TokenSpan) -> Tuple[TokenSpan, TokenSpan]:
        condition, action = self._while_parts(tokens)
        length = 1 + len(condition) + len(action)
        return tokens[:length], tokens[length:]

    def _while_parts(self, tokens: TokenSpan) -> Tuple[TokenSpan, TokenSpan]:
        if len(tokens) < 2:
            raise create_missing_token_error("a condition", tokens[0])

        condition, other = self.next_statement(tokens[1:])
        if not other:
            raise create_missing_token_error("an action", condition[-1])

        action, _ = self.next_statement(other)
        return condition, action

    # ------------------------------------------------------------------
    # Expression resolution
    # ------------------------------------------------------------------

    def parse_expression(self, tokens: TokenSpan) -> ASTNode:
        """Resolve one statement span into a node."""
        if not tokens:
            raise create_unexpected_eof_error("an expression")

        for rule in self.expression_rules:
            node = rule(tokens)
            if node is not None:
                return node

        raise create_malformed_expression_error(tokens, "no expression form matches")

    def _parse_binary(self, tokens: TokenSpan, index: int, function_name: str) -> CallFunction:
        """Split at ``index`` and call ``function_name`` on both sides."""
        return call_operator(
            function_name,
            self.parse_expression(tokens[:index]),
            self.parse_expression(tokens[index + 1:]),
        )

    def _check_parentheses(self, tokens: TokenSpan) -> Optional[ASTNode]:
        if not _is_enclosed(tokens, TokenType.LEFT_PAREN):
            return None
        if len(tokens) == 2:
            raise create_malformed_expression_error(tokens, "empty parentheses")
        return self.parse_expression(tokens[1:-1])

    def _check_code_block(self, tokens: TokenSpan) -> Optional[ASTNode]:
        if not _is_enclosed(tokens, TokenType.LEFT_BRACE):
            return None
        return CodeBlock(self.parse_statements(tokens[1:-1]))

    def _check_return(self, tokens: TokenSpan) -> Optional[ASTNode]:
        if tokens[0].type != TokenType.RETURN:
            return None
        if len(tokens) == 1:
            return ReturnFromFunction(GetConstant(EMPTY))
        return ReturnFromFunction(self.parse_expression(tokens[1:]))

    def _check_if(self, tokens: TokenSpan) -> Optional[ASTNode]:
        if tokens[0].type != TokenType.IF:
            return None

        condition, action, else_action = self._if_parts(tokens)
        length = 1 + len(condition) + len(action)

        if else_action is not None:
            # Everything after 'else' belongs to the else branch
            else_node = self.parse_expression(tokens[length + 1:])
        else:
            if length < len(tokens):
                raise create_unexpected_token_error(tokens[length], "after if statement")
            else_node = None

        return IfStatement(
            self.parse_expression(condition),
            self.parse_expression(action),
            else_node,
        )

    def _check_while(self, tokens: TokenSpan) -> Optional[ASTNode]:
        if tokens[0].type != TokenType.WHILE:
            return None

        condition, action = self._while_parts(tokens)
        length = 1 + len(condition) + len(action)
        if length < len(tokens):
            raise create_unexpected_token_error(tokens[length], "after while statement")

        return WhileStatement(self.parse_expression(condition), self.parse_expression(action))

    def _check_negation(self, tokens: TokenSpan) -> Optional[ASTNode]:
        if tokens[0].type != TokenType.MINUS:
            return None
        if len(tokens) == 1:
            raise create_unexpected_eof_error("an operand for '-'", tokens[0])
        return call_operator("__negate", self.parse_expression(tokens[1:]))

    def _check_value(self, tokens: TokenSpan) -> Optional[ASTNode]:
        if len(tokens) != 1:
            return None

        token = tokens[0]
        if token.type == TokenType.IDENTIFIER:
            return GetVariable(token.value)
        if token.type == TokenType.NUMBER:
            return GetConstant(Value.number(Number.from_literal(token.value)))
        if token.type == TokenType.STRING:
            return GetConstant(Value.string(token.value))
        if token.type == TokenType.TRUE:
            return GetConstant(Value.boolean(True))
        if token.type == TokenType.FALSE:
            return GetConstant(Value.boolean(False))

        raise create_malformed_expression_error(tokens, f"'{token.lexeme}' is not a value")

    def _check_assignment(self, tokens: TokenSpan) -> Optional[ASTNode]:
        index = find_top_level(tokens, ASSIGNMENT_OPERATORS)
        if index is None:
            return None

        operator = tokens[index]
        target, value_tokens = tokens[:index], tokens[index + 1:]

        if not value_tokens:
            raise create_unexpected_eof_error(f"a value after '{operator.lexeme}'", operator)
        if len(target) != 1 or target[0].type != TokenType.IDENTIFIER:
            raise create_operator_error("Cannot assign to a non-identifier variable", operator)

        name = target[0].value
        value = self.parse_expression(value_tokens)

        function_name = ASSIGNMENT_OPERATORS[operator.type]
        if function_name is None:
            return SetVariable(name, value)
        return SetVariable(name, call_operator(function_name, GetVariable(name), value))

    def _check_comparison(self, tokens: TokenSpan) -> Optional[ASTNode]:
        index = find_top_level(tokens, COMPARISON_OPERATORS)
        if index is None:
            return None
        return self._parse_binary(tokens, index, COMPARISON_OPERATORS[tokens[index].type])

    def _check_addition_and_subtraction(self, tokens: TokenSpan) -> Optional[ASTNode]:
        def is_binary(index: int) -> bool:
            return index > 0 and tokens[index - 1].type in BINARY_OPERAND_ENDS

        index = find_top_level(tokens, ADDITIVE_OPERATORS, is_binary)
        if index is None:
            return None

        if index + 1 < len(tokens) and tokens[index + 1].type in ADDITIVE_OPERATORS:
            raise create_operator_error("Two consecutive addition or subtraction symbols", tokens[index + 1])

        return self._parse_binary(tokens, index, ADDITIVE_OPERATORS[tokens[index].type])

    def _check_multiplication_and_division(self, tokens: TokenSpan) -> Optional[ASTNode]:
        index = find_top_level(tokens, MULTIPLICATIVE_OPERATORS)
        if index is None:
            return None
        return self._parse_binary(tokens, index, MULTIPLICATIVE_OPERATORS[tokens[index].type])

    def _check_or(self, tokens: TokenSpan) -> Optional[ASTNode]:
        index = find_top_level(tokens, (TokenType.OR,))
        if index is None:
            return None
        return self._parse_binary(tokens, index, "__or")

    def _check_and(self, tokens: TokenSpan) -> Optional[ASTNode]:
        index = find_top_level(tokens, (TokenType.AND,))
        if index is None:
            return None
        return self._parse_binary(tokens, index, "__and")

    def _check_not(self, tokens: TokenSpan) -> Optional[ASTNode]:
        index = find_top_level(tokens, (TokenType.NOT,))
        if index is None:
            return None
        if index != 0:
            raise create_unexpected_token_error(tokens[index], "after an operand")
        if len(tokens) == 1:
            raise create_unexpected_eof_error("an operand for 'not'", tokens[0])
        return call_operator("__not", self.parse_expression(tokens[1:]))

    def _check_call_and_member_access(self, tokens: TokenSpan) -> Optional[ASTNode]:
        last = tokens[-1]

        if last.type == TokenType.RIGHT_PAREN:
            opening = find_opening(tokens, len(tokens) - 1)
            if opening is None:
                raise create_unmatched_delimiter_error(last)

            callee = tokens[:opening]
            arguments = [
                self.parse_expression(argument)
                for argument in self._split_arguments(tokens[opening + 1:-1])
            ]
            return CallFunction(self.parse_expression(callee), arguments)

        if len(tokens) >= 2 and last.type == TokenType.IDENTIFIER and tokens[-2].type == TokenType.DOT:
            return GetMember(self.parse_expression(tokens[:-2]), last.value)

        return None

    def _split_arguments(self, tokens: TokenSpan) -> List[TokenSpan]:
        """Split call arguments on commas that are not nested in brackets."""
        if not tokens:
            return []

        arguments = []
        start = 0
        while True:
            comma = find_top_level(tokens[start:], (TokenType.COMMA,))
            if comma is None:
                arguments.append(tokens[start:])
                return arguments
            arguments.append(tokens[start:start + comma])
            start += comma + 1


def parse(tokens: List[Token]) -> Program:
    """
    Parse a token list into a Program.

    Raises:
        ParseError: If parsing fails
    """
    return Parser(tokens).parse()


def parse_string(source: str, filename: str = "<string>") -> Program:
    """
    Convenience function to tokenize and parse a source string.

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
    """
    from ..lexer import tokenize

    return parse(tokenize(source, filename))
