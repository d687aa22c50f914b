from typing import List

from asc.exceptions import Diagnostic, ErrorCode
from asc.parser.core.classes import ArrowFunctionExpression, ASTNode, Program, ReturnStatement, iter_child_nodes


def _check_block(function: ArrowFunctionExpression, diagnostics: List[Diagnostic]):
    statements = function.body.statements
    for statement in statements[:-1]:
        if isinstance(statement, ReturnStatement):
            diagnostics.append(Diagnostic.create(ErrorCode.RETURN_NOT_LAST, statement.offset))


def _walk(node: ASTNode, diagnostics: List[Diagnostic]):
    if isinstance(node, ArrowFunctionExpression):
        _check_block(node, diagnostics)
    for child in iter_child_nodes(node):
        _walk(child, diagnostics)


def validate(program: Program) -> List[Diagnostic]:
    """
    Enforces the structural rules that do not depend on types: a return statement
    inside an arrow function body must be the last statement of that body.
    Every violation is reported; the walk never stops early.
    """
    diagnostics: List[Diagnostic] = []
    _walk(program, diagnostics)
    return diagnostics
