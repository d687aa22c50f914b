from typing import Dict, List, Optional, Set, Tuple

from asc.config import PRIMITIVE_ANNOTATIONS
from asc.exceptions import Diagnostic, ErrorCode, InternalCompilerError
from asc.parser.core.classes import *

from .types import ArrayType, FunctionType, Primitive, PrimitiveType, TypeTerm, TypeVariable, compress, occurs_in


class TypeEnvironment:
    """Maps names to type terms. Lookups fall through to the parent environment."""

    def __init__(self, parent: Optional["TypeEnvironment"] = None):
        self.parent = parent
        self.bindings: Dict[str, TypeTerm] = {}

    def bind(self, name: str, term: TypeTerm):
        self.bindings[name] = term

    def lookup(self, name: str) -> Optional[TypeTerm]:
        environment = self
        while environment is not None:
            if name in environment.bindings:
                return environment.bindings[name]
            environment = environment.parent
        return None


class TypeInferrer:
    """
    Hindley-Milner type inference over the ArrowScript AST.

    Every expression receives a type term; unification links type variables
    together (union-find with path compression). A name bound by `const` is
    polymorphic: each use gets a fresh copy of its type, except for the type
    variables that belong to the parameters of a function still being inferred
    (the non-generic set), which are shared by identity.

    The walk never stops at an error. Problems are recorded as diagnostics and
    inference carries on with whatever unification already succeeded.
    """

    def __init__(self):
        self.diagnostics: List[Diagnostic] = []
        self.next_variable_id = 0
        self.environment = TypeEnvironment()
        self.non_generic: Set[TypeTerm] = set()

    # --- Type variables and instantiation ---

    def new_type_variable(self) -> TypeVariable:
        variable = TypeVariable(self.next_variable_id)
        self.next_variable_id += 1
        return variable

    def is_generic(self, variable: TypeVariable) -> bool:
        return not any(occurs_in(variable, term) for term in self.non_generic)

    def fresh_instance(self, term: TypeTerm, mappings: Optional[Dict[TypeVariable, TypeVariable]] = None) -> TypeTerm:
        """
        Copies `term`, replacing each generic type variable with a fresh one.
        The same variable is replaced by the same fresh variable throughout the copy.
        """
        if mappings is None:
            mappings = {}
        term = compress(term)

        if isinstance(term, TypeVariable):
            if not self.is_generic(term):
                return term
            if term not in mappings:
                mappings[term] = self.new_type_variable()
            return mappings[term]
        if isinstance(term, ArrayType):
            return ArrayType(self.fresh_instance(term.element_type, mappings))
        if isinstance(term, FunctionType):
            param_types = [self.fresh_instance(p, mappings) for p in term.param_types]
            return FunctionType(param_types, self.fresh_instance(term.return_type, mappings))
        return term

    def lookup(self, name: str) -> TypeTerm:
        term = self.environment.lookup(name)
        if term is None:
            # Already reported by the name resolver.
            return self.new_type_variable()
        return self.fresh_instance(term)

    # --- Unification ---

    def _report(self, code: ErrorCode, node: ASTNode, **kwargs):
        self.diagnostics.append(Diagnostic.create(code, node.offset, **kwargs))

    def unify(self, a: TypeTerm, b: TypeTerm, node: ASTNode):
        a = compress(a)
        b = compress(b)

        if isinstance(a, TypeVariable):
            if a is b:
                return
            if occurs_in(a, b):
                self._report(ErrorCode.INFINITE_TYPE, node, left=str(a), right=str(b))
                return
            a.link = b
        elif isinstance(b, TypeVariable):
            self.unify(b, a, node)
        elif isinstance(a, ArrayType) and isinstance(b, ArrayType):
            self.unify(a.element_type, b.element_type, node)
        elif isinstance(a, FunctionType) and isinstance(b, FunctionType):
            if len(a.param_types) != len(b.param_types):
                self._report(ErrorCode.ARITY_MISMATCH, node, expected=len(a.param_types), provided=len(b.param_types))
                return
            for param_a, param_b in zip(a.param_types, b.param_types):
                self.unify(param_a, param_b, node)
            self.unify(a.return_type, b.return_type, node)
        elif isinstance(a, PrimitiveType) and isinstance(b, PrimitiveType):
            if a.tag is not b.tag:
                self._report(ErrorCode.TYPE_MISMATCH, node, left=str(a), right=str(b))
        else:
            self._report(ErrorCode.TYPE_MISMATCH, node, left=str(a), right=str(b))

    # --- Annotations ---

    def type_from_annotation(self, annotation: TypeAnnotation) -> TypeTerm:
        if isinstance(annotation, NamedTypeAnnotation):
            tag_name = PRIMITIVE_ANNOTATIONS.get(annotation.name)
            if tag_name is None:
                # Unknown type names stand for an unconstrained type.
                return self.new_type_variable()
            return PrimitiveType(Primitive(tag_name))
        if isinstance(annotation, ArrayTypeAnnotation):
            return ArrayType(self.type_from_annotation(annotation.element_type))
        if isinstance(annotation, FunctionTypeAnnotation):
            param_types = [self.type_from_annotation(p.type_annotation) if p.type_annotation else self.new_type_variable() for p in annotation.params]
            return FunctionType(param_types, self.type_from_annotation(annotation.return_type))
        raise InternalCompilerError(f"Unknown type annotation '{type(annotation).__name__}'.")

    # --- Inference rules ---

    def infer_program(self, program: Program) -> TypeTerm:
        result: TypeTerm = PrimitiveType(Primitive.UNKNOWN)
        for statement in program.body:
            result = self.infer(statement)
            statement.inferred_type = result
        return result

    def infer(self, node: ASTNode) -> TypeTerm:
        rule = getattr(self, f"_infer_{type(node).__name__}", None)
        if rule is None:
            raise InternalCompilerError(f"Type inferrer has no rule for node '{type(node).__name__}'.")
        return rule(node)

    def _infer_NumericLiteral(self, node: NumericLiteral) -> TypeTerm:
        if isinstance(node.value, int) or node.value.is_integer():
            return PrimitiveType(Primitive.NUMBER)
        return PrimitiveType(Primitive.FLOAT)

    def _infer_StringLiteral(self, node: StringLiteral) -> TypeTerm:
        return PrimitiveType(Primitive.STRING)

    def _infer_BooleanLiteral(self, node: BooleanLiteral) -> TypeTerm:
        return PrimitiveType(Primitive.BOOL)

    def _infer_Identifier(self, node: Identifier) -> TypeTerm:
        return self.lookup(node.name)

    def _infer_ArrayLiteral(self, node: ArrayLiteral) -> TypeTerm:
        if not node.elements:
            return ArrayType(self.new_type_variable())

        element_type = self.infer(node.elements[0])
        for element in node.elements[1:]:
            self.unify(element_type, self.infer(element), element)
        return ArrayType(element_type)

    def _infer_MemberExpression(self, node: MemberExpression) -> TypeTerm:
        object_type = self.infer(node.object)
        index_type = self.infer(node.index)
        self.unify(index_type, PrimitiveType(Primitive.NUMBER), node.index)

        element_type = self.new_type_variable()
        self.unify(object_type, ArrayType(element_type), node.object)
        return element_type

    def _infer_BinaryExpression(self, node: BinaryExpression) -> TypeTerm:
        left_type = self.infer(node.left)
        right_type = self.infer(node.right)

        if node.operator != "+":
            self._report(ErrorCode.UNSUPPORTED_OPERATOR, node, op=node.operator)
            return self.new_type_variable()

        if _is_primitive(left_type, Primitive.STRING) or _is_primitive(right_type, Primitive.STRING):
            self.unify(left_type, PrimitiveType(Primitive.STRING), node.left)
            self.unify(right_type, PrimitiveType(Primitive.STRING), node.right)
            return PrimitiveType(Primitive.STRING)

        reported_before = len(self.diagnostics)
        numeric_type = self.new_type_variable()
        self.unify(left_type, numeric_type, node.left)
        self.unify(right_type, numeric_type, node.right)

        # Operands still unconstrained default to Number; Float is kept when already fixed.
        resolved = compress(numeric_type)
        if isinstance(resolved, TypeVariable):
            resolved.link = PrimitiveType(Primitive.NUMBER)
            return PrimitiveType(Primitive.NUMBER)
        if isinstance(resolved, PrimitiveType) and resolved.tag in (Primitive.NUMBER, Primitive.FLOAT):
            return PrimitiveType(resolved.tag)

        # An operand mismatch was already reported for this expression.
        if len(self.diagnostics) > reported_before:
            return self.new_type_variable()
        self._report(ErrorCode.OPERATOR_TYPE_MISMATCH, node, op=node.operator, provided_type=str(resolved))
        return self.new_type_variable()

    def _infer_ConditionalExpression(self, node: ConditionalExpression) -> TypeTerm:
        self.unify(self.infer(node.test), PrimitiveType(Primitive.BOOL), node.test)

        consequent_type = self.infer(node.consequent)
        alternate_type = self.infer(node.alternate)
        result_type = self.new_type_variable()
        self.unify(consequent_type, result_type, node.consequent)
        self.unify(alternate_type, result_type, node.alternate)
        return result_type

    def _infer_ArrowFunctionExpression(self, node: ArrowFunctionExpression) -> TypeTerm:
        outer_environment = self.environment
        outer_non_generic = self.non_generic
        self.environment = TypeEnvironment(parent=outer_environment)
        self.non_generic = set(outer_non_generic)

        try:
            param_types: List[TypeTerm] = []
            for param in node.params:
                if param.type_annotation is not None:
                    param_type = self.type_from_annotation(param.type_annotation)
                else:
                    param_type = self.new_type_variable()
                self.environment.bind(param.name, param_type)
                self.non_generic.add(param_type)
                param_types.append(param_type)

            return_type: Optional[TypeTerm] = None
            for statement in node.body.statements:
                statement_type = self.infer(statement)
                if isinstance(statement, ReturnStatement) and return_type is None:
                    return_type = statement_type
            if return_type is None:
                return_type = PrimitiveType(Primitive.VOID)

            if node.return_type is not None:
                annotated_type = self.type_from_annotation(node.return_type)
                self.unify(return_type, annotated_type, node)
                return_type = annotated_type

            return FunctionType(param_types, return_type)
        finally:
            self.environment = outer_environment
            self.non_generic = outer_non_generic

    def _infer_CallExpression(self, node: CallExpression) -> TypeTerm:
        callee_type = compress(self.infer(node.callee))
        argument_types = [self.infer(argument) for argument in node.arguments]

        if isinstance(callee_type, TypeVariable):
            result_type = self.new_type_variable()
            self.unify(callee_type, FunctionType(argument_types, result_type), node)
            return result_type

        if isinstance(callee_type, FunctionType):
            if len(callee_type.param_types) != len(argument_types):
                self._report(ErrorCode.ARITY_MISMATCH, node, expected=len(callee_type.param_types), provided=len(argument_types))
                return self.new_type_variable()
            for param_type, argument_type, argument in zip(callee_type.param_types, argument_types, node.arguments):
                self.unify(param_type, argument_type, argument)
            return callee_type.return_type

        self._report(ErrorCode.NOT_CALLABLE, node, provided_type=str(callee_type))
        return self.new_type_variable()

    def _infer_ConstDeclaration(self, node: ConstDeclaration) -> TypeTerm:
        init_type = self.infer(node.init)

        if node.type_annotation is not None:
            declared_type = self.type_from_annotation(node.type_annotation)
            self.unify(init_type, declared_type, node.init)
        else:
            declared_type = init_type

        self.environment.bind(node.id.name, declared_type)
        node.inferred_type = declared_type
        return declared_type

    def _infer_ReturnStatement(self, node: ReturnStatement) -> TypeTerm:
        if node.argument is None:
            return_type: TypeTerm = PrimitiveType(Primitive.VOID)
        else:
            return_type = self.infer(node.argument)
        node.inferred_type = return_type
        return return_type


def _is_primitive(term: TypeTerm, tag: Primitive) -> bool:
    term = compress(term)
    return isinstance(term, PrimitiveType) and term.tag is tag


def infer_types(program: Program) -> Tuple[Program, List[Diagnostic]]:
    """
    Annotates every ConstDeclaration and top-level statement with its inferred
    type. Returns the program and the type diagnostics in AST visit order.
    """
    inferrer = TypeInferrer()
    inferrer.infer_program(program)
    return program, inferrer.diagnostics
