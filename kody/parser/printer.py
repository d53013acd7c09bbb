"""
Indented text rendering of Kody syntax trees, used by the verbose CLI mode.
"""

from typing import List, Union

from .ast_nodes import (
    ASTNode, ASTVisitor, CodeBlock, IfStatement, WhileStatement,
    ReturnFromFunction, SetVariable, GetVariable, GetConstant, CallFunction,
    GetMember, Program
)

INDENT = "  "


class TreePrinter(ASTVisitor):
    """Produces the one-line label of each node; ``format`` adds the nesting."""

    def format(self, node: ASTNode, depth: int = 0) -> List[str]:
        lines = [INDENT * depth + node.accept(self)]
        for child in node.children():
            lines.extend(self.format(child, depth + 1))
        return lines

    def visit_code_block(self, node: CodeBlock) -> str:
        return f"CodeBlock ({len(node.statements)} statements)"

    def visit_if_statement(self, node: IfStatement) -> str:
        return "IfStatement" if node.else_action is None else "IfStatement (with else)"

    def visit_while_statement(self, node: WhileStatement) -> str:
        return "WhileStatement"

    def visit_return_from_function(self, node: ReturnFromFunction) -> str:
        return "ReturnFromFunction"

    def visit_set_variable(self, node: SetVariable) -> str:
        return f"SetVariable {node.name}"

    def visit_get_variable(self, node: GetVariable) -> str:
        return f"GetVariable {node.name}"

    def visit_get_constant(self, node: GetConstant) -> str:
        return f"GetConstant {node.value.debug()}"

    def visit_call_function(self, node: CallFunction) -> str:
        return f"CallFunction ({len(node.arguments)} arguments)"

    def visit_get_member(self, node: GetMember) -> str:
        return f"GetMember .{node.member_name}"


def format_tree(tree: Union[Program, ASTNode]) -> str:
    """Render a program (functions first, then main) or a single node."""
    printer = TreePrinter()

    if isinstance(tree, Program):
        lines = ["Program"]
        for definition in tree.functions.values():
            lines.append(INDENT + str(definition))
            lines.extend(printer.format(definition.body, 2))
        lines.append(INDENT + "main")
        lines.extend(printer.format(tree.main, 2))
        return "\n".join(lines)

    return "\n".join(printer.format(tree))
