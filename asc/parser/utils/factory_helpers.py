from typing import List, Optional, Union

from asc.parser.core.classes import *

# Offsets are ignored by assert_asts_equal, so every helper uses 0.


def get_identifier(name: str):
    return Identifier(offset=0, name=name)


def get_number_literal(value: Union[int, float]):
    return NumericLiteral(offset=0, value=value)


def get_string_literal(value: str):
    return StringLiteral(offset=0, value=value)


def get_boolean_literal(value: bool):
    return BooleanLiteral(offset=0, value=value)


def get_array_literal(elements: List[Expression]):
    return ArrayLiteral(offset=0, elements=elements)


def get_member_expression(obj: Expression, index: Expression):
    return MemberExpression(offset=0, object=obj, index=index)


def get_binary_expression(left: Expression, right: Expression, operator: str = "+"):
    return BinaryExpression(offset=0, left=left, operator=operator, right=right)


def get_conditional_expression(test: Expression, consequent: Expression, alternate: Expression):
    return ConditionalExpression(offset=0, test=test, consequent=consequent, alternate=alternate)


def get_call_expression(callee: Expression, arguments: List[Expression]):
    return CallExpression(offset=0, callee=callee, arguments=arguments)


def get_named_type(name: str):
    return NamedTypeAnnotation(offset=0, name=name)


def get_array_type(element_type: TypeAnnotation):
    return ArrayTypeAnnotation(offset=0, element_type=element_type)


def get_function_type(params: List[Parameter], return_type: TypeAnnotation):
    return FunctionTypeAnnotation(offset=0, params=params, return_type=return_type)


def get_param(name: str, type_annotation: Optional[TypeAnnotation] = None):
    return Parameter(offset=0, name=name, type_annotation=type_annotation)


def get_block(statements: List[Statement]):
    return BlockStatement(offset=0, statements=statements)


def get_arrow_function(params: List[Parameter], statements: List[Statement], return_type: Optional[TypeAnnotation] = None):
    return ArrowFunctionExpression(offset=0, params=params, return_type=return_type, body=get_block(statements))


def get_const(name: str, init: Expression, type_annotation: Optional[TypeAnnotation] = None):
    return ConstDeclaration(offset=0, id=get_identifier(name), type_annotation=type_annotation, init=init)


def get_return(argument: Optional[Expression] = None):
    return ReturnStatement(offset=0, argument=argument)


def get_program(body: List[Statement]):
    return Program(offset=0, body=body)
