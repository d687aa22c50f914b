"""
Lexical name resolution.

Builds the scope tree of a program, links every identifier to the declaration it
refers to and records the reference on that declaration. The program body is the
root scope; each arrow function opens a child scope holding its parameters and
its local constants (blocks do not open scopes of their own).
"""

from typing import Dict, List, Optional, Tuple, Union

from asc.exceptions import Diagnostic, ErrorCode, InternalCompilerError
from asc.parser.core.classes import *


class Declaration:
    """A declared name together with the node that declares it and every use of it."""

    def __init__(self, name: str, node: Union[ConstDeclaration, Parameter]):
        self.name = name
        self.node = node
        self.references: List[Identifier] = []

    def __repr__(self) -> str:
        return f"Declaration({self.name!r}, {type(self.node).__name__}, references={len(self.references)})"


class Scope:
    def __init__(self, parent: Optional["Scope"] = None, node: Optional[ASTNode] = None):
        self.parent = parent
        self.node = node
        self.declarations: Dict[str, Declaration] = {}
        self.children: List["Scope"] = []
        if parent is not None:
            parent.children.append(self)

    def declare(self, name: str, node: Union[ConstDeclaration, Parameter]) -> Optional[Declaration]:
        """Adds a declaration to this scope. Returns None if the name is already declared here."""
        if name in self.declarations:
            return None
        declaration = Declaration(name, node)
        self.declarations[name] = declaration
        return declaration

    def lookup(self, name: str) -> Optional[Declaration]:
        scope = self
        while scope is not None:
            if name in scope.declarations:
                return scope.declarations[name]
            scope = scope.parent
        return None

    def __repr__(self) -> str:
        return f"Scope({list(self.declarations)}, children={len(self.children)})"


class NameResolver:
    def __init__(self):
        self.diagnostics: List[Diagnostic] = []
        self.root_scope: Optional[Scope] = None
        self.current_scope: Optional[Scope] = None

    def resolve(self, program: Program) -> Scope:
        self.root_scope = Scope(node=program)
        self.current_scope = self.root_scope
        for statement in program.body:
            self._visit(statement)
        return self.root_scope

    def _visit(self, node: ASTNode):
        method = getattr(self, f"_visit_{type(node).__name__}", None)
        if method is None:
            raise InternalCompilerError(f"Name resolver has no rule for node '{type(node).__name__}'.")
        method(node)

    def _visit_children(self, node: ASTNode):
        for child in iter_child_nodes(node):
            self._visit(child)

    # --- Statements ---

    def _visit_ConstDeclaration(self, node: ConstDeclaration):
        # The initializer is resolved first, so `const x = x;` does not see itself.
        self._visit(node.init)
        declaration = self.current_scope.declare(node.id.name, node)
        if declaration is None:
            self.diagnostics.append(Diagnostic.create(ErrorCode.DUPLICATE_DECLARATION, node.id.offset, name=node.id.name))
            return
        node.id.declaration = declaration

    def _visit_ReturnStatement(self, node: ReturnStatement):
        if node.argument is not None:
            self._visit(node.argument)

    def _visit_BlockStatement(self, node: BlockStatement):
        for statement in node.statements:
            self._visit(statement)

    # --- Expressions ---

    def _visit_Identifier(self, node: Identifier):
        declaration = self.current_scope.lookup(node.name)
        if declaration is None:
            self.diagnostics.append(Diagnostic.create(ErrorCode.UNDECLARED_REFERENCE, node.offset, name=node.name))
            return
        node.declaration = declaration
        declaration.references.append(node)

    def _visit_ArrowFunctionExpression(self, node: ArrowFunctionExpression):
        enclosing_scope = self.current_scope
        self.current_scope = Scope(parent=enclosing_scope, node=node)
        try:
            for param in node.params:
                declaration = self.current_scope.declare(param.name, param)
                if declaration is None:
                    self.diagnostics.append(Diagnostic.create(ErrorCode.DUPLICATE_PARAMETER, param.offset, name=param.name))
                    continue
                param.declaration = declaration
            self._visit(node.body)
        finally:
            self.current_scope = enclosing_scope

    def _visit_NumericLiteral(self, node: NumericLiteral):
        pass

    def _visit_StringLiteral(self, node: StringLiteral):
        pass

    def _visit_BooleanLiteral(self, node: BooleanLiteral):
        pass

    _visit_ArrayLiteral = _visit_children
    _visit_MemberExpression = _visit_children
    _visit_BinaryExpression = _visit_children
    _visit_ConditionalExpression = _visit_children
    _visit_CallExpression = _visit_children


def analyze(program: Program) -> Tuple[Program, List[Diagnostic], Scope]:
    """
    Resolves every name in the program. Returns the (mutated) program, the naming
    diagnostics in visit order, and the root of the scope tree.
    """
    resolver = NameResolver()
    root_scope = resolver.resolve(program)
    return program, resolver.diagnostics, root_scope
