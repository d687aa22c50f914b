"""
Defines the formal data structures (contracts) for the tokens and the Abstract
Syntax Tree (AST) produced by the lexer and parser stages.

Every node records the character offset of its first token so that later stages
can report diagnostics at a precise position in the source.
"""

from typing import Any, Iterator, List, Optional, Union

from pydantic import BaseModel, Field, field_serializer

# --- Core Data Structures ---


class Token(BaseModel):
    """A lexeme classified by kind, with its decoded value and source offset."""

    type: str
    value: Union[str, int, float, bool, None] = None
    offset: int


class ASTNode(BaseModel):
    """A base class for all AST nodes, ensuring they have a source offset."""

    offset: int


# --- Type Annotations ---


class NamedTypeAnnotation(ASTNode):
    name: str


class ArrayTypeAnnotation(ASTNode):
    element_type: "TypeAnnotation"


class FunctionTypeAnnotation(ASTNode):
    params: List["Parameter"]
    return_type: "TypeAnnotation"


TypeAnnotation = Union[NamedTypeAnnotation, ArrayTypeAnnotation, FunctionTypeAnnotation]


# --- Literals and Identifiers ---


class NumericLiteral(ASTNode):
    value: Union[int, float]


class StringLiteral(ASTNode):
    value: str


class BooleanLiteral(ASTNode):
    value: bool


class Identifier(ASTNode):
    name: str
    # Filled in by the name resolver; points at the Declaration record.
    declaration: Optional[Any] = Field(default=None, exclude=True, repr=False)


class ArrayLiteral(ASTNode):
    elements: List["Expression"]


# --- Expressions ---


class MemberExpression(ASTNode):
    object: "Expression"
    index: "Expression"


class BinaryExpression(ASTNode):
    left: "Expression"
    operator: str
    right: "Expression"


class ConditionalExpression(ASTNode):
    test: "Expression"
    consequent: "Expression"
    alternate: "Expression"


class Parameter(ASTNode):
    name: str
    type_annotation: Optional[TypeAnnotation] = None
    declaration: Optional[Any] = Field(default=None, exclude=True, repr=False)


class ArrowFunctionExpression(ASTNode):
    params: List[Parameter]
    return_type: Optional[TypeAnnotation] = None
    body: "BlockStatement"


class CallExpression(ASTNode):
    callee: "Expression"
    arguments: List["Expression"]


Expression = Union[
    NumericLiteral,
    StringLiteral,
    BooleanLiteral,
    Identifier,
    ArrayLiteral,
    MemberExpression,
    BinaryExpression,
    ConditionalExpression,
    ArrowFunctionExpression,
    CallExpression,
]


# --- Statements ---


class _TypedNode(ASTNode):
    """A node that receives an `inferred_type` from the type inferrer."""

    inferred_type: Optional[Any] = Field(default=None, repr=False)

    @field_serializer("inferred_type")
    def _serialize_inferred_type(self, inferred_type: Any) -> Optional[str]:
        return str(inferred_type) if inferred_type is not None else None


class ConstDeclaration(_TypedNode):
    id: Identifier
    type_annotation: Optional[TypeAnnotation] = None
    init: Expression


class ReturnStatement(_TypedNode):
    argument: Optional[Expression] = None


Statement = Union[ConstDeclaration, ReturnStatement]


class BlockStatement(ASTNode):
    statements: List[Statement]


class Program(ASTNode):
    """The root of the AST. Holds the top-level statements in source order."""

    body: List[Statement]


for _model in (
    ArrayTypeAnnotation,
    FunctionTypeAnnotation,
    ArrayLiteral,
    MemberExpression,
    BinaryExpression,
    ConditionalExpression,
    Parameter,
    ArrowFunctionExpression,
    CallExpression,
    ConstDeclaration,
    ReturnStatement,
    BlockStatement,
    Program,
):
    _model.model_rebuild()


# Fields holding analysis results rather than syntactic children.
ANALYSIS_FIELDS = {"declaration", "inferred_type"}


def iter_child_nodes(node: ASTNode) -> Iterator[ASTNode]:
    """Yields the direct syntactic children of a node, in field order."""
    for field_name in type(node).model_fields:
        if field_name in ANALYSIS_FIELDS:
            continue
        value = getattr(node, field_name)
        if isinstance(value, ASTNode):
            yield value
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, ASTNode):
                    yield item
