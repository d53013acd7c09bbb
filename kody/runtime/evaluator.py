"""
Tree-walking evaluator for Kody.

The ``Interpreter`` visits the syntax tree produced by the parser. User
functions from the parser's function table are bound in the global frame;
names that no frame binds fall back to the native function table.
"""

import logging
from typing import Dict, List, Mapping

from ..objects import Value, ValueType, FunctionDefinition, EMPTY
from ..parser.ast_nodes import (
    ASTVisitor, CodeBlock, IfStatement, WhileStatement, ReturnFromFunction,
    SetVariable, GetVariable, GetConstant, CallFunction, GetMember
)
from .errors import (
    UnknownVariableError, TypeMismatchError, ArityMismatchError,
    NotCallableError, UnsupportedOperationError, RecursionDepthError
)
from .natives import NATIVE_FUNCTIONS
from .scope import ScopeStack

logger = logging.getLogger(__name__)


class _ReturnSignal(Exception):
    """Unwinds the Python stack from a ``return`` to the enclosing call."""

    def __init__(self, value: Value):
        super().__init__()
        self.value = value


class Interpreter(ASTVisitor):
    """
    Evaluates Kody syntax trees.

    Every ``visit_*`` method returns the ``Value`` of the node. Errors are
    raised as ``ExecutionError`` subclasses and abort the evaluation.
    """

    def __init__(
        self,
        functions: Dict[str, FunctionDefinition],
        natives: Mapping[str, Value] = NATIVE_FUNCTIONS
    ):
        self.natives = natives
        self.scopes = ScopeStack({
            name: Value.function(definition) for name, definition in functions.items()
        })

    def run(self, main: CodeBlock) -> Value:
        """Run the program body; a top-level ``return`` supplies the result."""
        try:
            main.accept(self)
        except _ReturnSignal as signal:
            return signal.value
        return EMPTY

    # ------------------------------------------------------------------
    # Blocks and control flow
    # ------------------------------------------------------------------

    def visit_code_block(self, node: CodeBlock) -> Value:
        self.scopes.push()
        try:
            result = EMPTY
            for statement in node.statements:
                result = statement.accept(self)
            return result
        finally:
            self.scopes.pop()

    def visit_if_statement(self, node: IfStatement) -> Value:
        if self._condition(node.condition, "if"):
            return node.action.accept(self)
        if node.else_action is not None:
            return node.else_action.accept(self)
        return EMPTY

    def visit_while_statement(self, node: WhileStatement) -> Value:
        while self._condition(node.condition, "while"):
            node.action.accept(self)
        return EMPTY

    def visit_return_from_function(self, node: ReturnFromFunction) -> Value:
        raise _ReturnSignal(node.value.accept(self))

    def _condition(self, node, construct: str) -> bool:
        value = node.accept(self)
        if value.type != ValueType.BOOL:
            raise TypeMismatchError(
                f"Condition of '{construct}' must be a bool, got {value.type.value}"
            )
        return value.data

    # ------------------------------------------------------------------
    # Variables and values
    # ------------------------------------------------------------------

    def visit_set_variable(self, node: SetVariable) -> Value:
        self.scopes.assign(node.name, node.value.accept(self))
        return EMPTY

    def visit_get_variable(self, node: GetVariable) -> Value:
        value = self.scopes.lookup(node.name)
        if value is not None:
            return value
        if node.name in self.natives:
            return self.natives[node.name]
        raise UnknownVariableError(node.name)

    def visit_get_constant(self, node: GetConstant) -> Value:
        return node.value

    def visit_get_member(self, node: GetMember) -> Value:
        raise UnsupportedOperationError(
            f"Member access '.{node.member_name}' is not supported"
        )

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    def visit_call_function(self, node: CallFunction) -> Value:
        function = node.function.accept(self)
        arguments = [argument.accept(self) for argument in node.arguments]

        if not function.is_callable:
            raise NotCallableError(f"Value {function.debug()} of kind {function.type.value} is not callable")

        if function.type == ValueType.NATIVE_FUNCTION:
            return function.data(arguments)
        return self._call_user_function(function.data, arguments)

    def _call_user_function(self, definition: FunctionDefinition, arguments: List[Value]) -> Value:
        if len(arguments) != definition.arity:
            raise ArityMismatchError(definition.name, definition.arity, len(arguments))

        logger.debug("Calling %s with %s", definition,
                     ", ".join(argument.debug() for argument in arguments))

        caller_scopes = self.scopes
        self.scopes = caller_scopes.for_call(dict(zip(definition.parameters, arguments)))
        try:
            definition.body.accept(self)
        except _ReturnSignal as signal:
            return signal.value
        finally:
            self.scopes = caller_scopes

        return EMPTY


def execute(
    functions: Dict[str, FunctionDefinition],
    main: CodeBlock,
    natives: Mapping[str, Value] = NATIVE_FUNCTIONS
) -> Value:
    """
    Evaluate a parsed program.

    Args:
        functions: Hoisted function table from the parser
        main: Program body

    Returns:
        The value of a top-level ``return``, else ``EMPTY``

    Raises:
        ExecutionError: On the first runtime error
    """
    interpreter = Interpreter(functions, natives)
    try:
        return interpreter.run(main)
    except RecursionError:
        raise RecursionDepthError(
            "Maximum recursion depth exceeded",
            help_text="Raise the limit with --recursion-limit or reduce the nesting depth.",
        ) from None
