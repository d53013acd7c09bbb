"""
Abstract Syntax Tree node definitions for Kody.

Every construct of the language maps onto one node class. Nodes own their
children exclusively and compare structurally, which keeps parser tests
readable. The evaluator walks the tree through the visitor interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..objects import Value, FunctionDefinition


class ASTVisitor(ABC):
    """Abstract visitor interface for traversing AST nodes."""

    @abstractmethod
    def visit_code_block(self, node: "CodeBlock") -> Any:
        pass

    @abstractmethod
    def visit_if_statement(self, node: "IfStatement") -> Any:
        pass

    @abstractmethod
    def visit_while_statement(self, node: "WhileStatement") -> Any:
        pass

    @abstractmethod
    def visit_return_from_function(self, node: "ReturnFromFunction") -> Any:
        pass

    @abstractmethod
    def visit_set_variable(self, node: "SetVariable") -> Any:
        pass

    @abstractmethod
    def visit_get_variable(self, node: "GetVariable") -> Any:
        pass

    @abstractmethod
    def visit_get_constant(self, node: "GetConstant") -> Any:
        pass

    @abstractmethod
    def visit_call_function(self, node: "CallFunction") -> Any:
        pass

    @abstractmethod
    def visit_get_member(self, node: "GetMember") -> Any:
        pass


class ASTNode(ABC):
    """Base class for all AST nodes."""

    @abstractmethod
    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""

    @abstractmethod
    def children(self) -> List["ASTNode"]:
        """Get all child nodes."""


# ============================================================================
# Blocks and control flow
# ============================================================================

@dataclass
class CodeBlock(ASTNode):
    """A brace-delimited sequence of statements; also the program body."""
    statements: List[ASTNode] = field(default_factory=list)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_code_block(self)

    def children(self) -> List[ASTNode]:
        return list(self.statements)


@dataclass
class IfStatement(ASTNode):
    condition: ASTNode
    action: ASTNode
    else_action: Optional[ASTNode] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_if_statement(self)

    def children(self) -> List[ASTNode]:
        children = [self.condition, self.action]
        if self.else_action is not None:
            children.append(self.else_action)
        return children


@dataclass
class WhileStatement(ASTNode):
    condition: ASTNode
    action: ASTNode

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_while_statement(self)

    def children(self) -> List[ASTNode]:
        return [self.condition, self.action]


@dataclass
class ReturnFromFunction(ASTNode):
    value: ASTNode

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_return_from_function(self)

    def children(self) -> List[ASTNode]:
        return [self.value]


# ============================================================================
# Variables and values
# ============================================================================

@dataclass
class SetVariable(ASTNode):
    name: str
    value: ASTNode

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_set_variable(self)

    def children(self) -> List[ASTNode]:
        return [self.value]


@dataclass
class GetVariable(ASTNode):
    name: str

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_get_variable(self)

    def children(self) -> List[ASTNode]:
        return []


@dataclass
class GetConstant(ASTNode):
    """A literal embedded in the tree."""
    value: Value

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_get_constant(self)

    def children(self) -> List[ASTNode]:
        return []


# ============================================================================
# Calls and member access
# ============================================================================

@dataclass
class CallFunction(ASTNode):
    """Call of a user or native function; operators are calls too."""
    function: ASTNode
    arguments: List[ASTNode] = field(default_factory=list)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_call_function(self)

    def children(self) -> List[ASTNode]:
        return [self.function] + list(self.arguments)


@dataclass
class GetMember(ASTNode):
    """``base.member`` accessor. Parsed, but not supported at runtime."""
    base: ASTNode
    member_name: str

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_get_member(self)

    def children(self) -> List[ASTNode]:
        return [self.base]


# ============================================================================
# Parser output
# ============================================================================

@dataclass
class Program:
    """Result of parsing: hoisted functions plus the remaining program body."""
    functions: Dict[str, FunctionDefinition]
    main: CodeBlock


def call_operator(name: str, *arguments: ASTNode) -> CallFunction:
    """Build the call of an operator function such as ``__add``."""
    return CallFunction(GetVariable(name), list(arguments))
