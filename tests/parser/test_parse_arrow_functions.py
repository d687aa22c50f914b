import pytest

from asc.exceptions import ErrorCode
from asc.parser.core.parser import parse_arrowscript
from asc.parser.core.classes import *
from asc.parser.utils.factory_helpers import *
from asc.parser.utils.assertion_helper import assert_asts_equal

# A '(' in expression position is either a parenthesized expression or the
# parameter list of an arrow function. These tests pin down how the parser
# tells them apart, plus the block-body requirement.

x = get_identifier("x")
return_x = get_return(x)


@pytest.mark.parametrize(
    "expression, expected",
    [
        pytest.param("() => { return 1; }", get_arrow_function([], [get_return(get_number_literal(1))]), id="no_params"),
        pytest.param("(x) => { return x; }", get_arrow_function([get_param("x")], [return_x]), id="one_param"),
        pytest.param(
            "(a, b) => { return a + b; }",
            get_arrow_function([get_param("a"), get_param("b")], [get_return(get_binary_expression(get_identifier("a"), get_identifier("b")))]),
            id="two_params",
        ),
        pytest.param(
            "(x: number): number => { return x; }",
            get_arrow_function([get_param("x", get_named_type("number"))], [return_x], get_named_type("number")),
            id="annotated_param_and_return",
        ),
        pytest.param(
            "(x: Array<string>, y) => { return x; }",
            get_arrow_function([get_param("x", get_array_type(get_named_type("string"))), get_param("y")], [return_x]),
            id="partially_annotated",
        ),
        pytest.param(
            "(x): (y: number) => number => { return x; }",
            get_arrow_function(
                [get_param("x")],
                [return_x],
                get_function_type([get_param("y", get_named_type("number"))], get_named_type("number")),
            ),
            id="function_typed_return",
        ),
        pytest.param("() => { }", get_arrow_function([], []), id="empty_body"),
        pytest.param("() => { return; }", get_arrow_function([], [get_return()]), id="empty_return"),
        pytest.param(
            "(x) => { return (y) => { return x; }; }",
            get_arrow_function([get_param("x")], [get_return(get_arrow_function([get_param("y")], [return_x]))]),
            id="nested_arrow",
        ),
        pytest.param(
            "((x) => { return x; })(1)",
            get_call_expression(get_arrow_function([get_param("x")], [return_x]), [get_number_literal(1)]),
            id="immediately_invoked_through_parentheses",
        ),
        pytest.param(
            "f((x) => { return x; }, 2)",
            get_call_expression(get_identifier("f"), [get_arrow_function([get_param("x")], [return_x]), get_number_literal(2)]),
            id="arrow_as_argument",
        ),
        pytest.param(
            "c ? (x) : y",
            get_conditional_expression(get_identifier("c"), x, get_identifier("y")),
            id="parenthesized_consequent_is_not_an_arrow",
        ),
        pytest.param(
            "c ? (x) : any",
            get_conditional_expression(get_identifier("c"), x, get_identifier("any")),
            id="lookahead_tolerates_any",
        ),
        pytest.param(
            "c ? (x) : (y) => { return y; }",
            get_conditional_expression(get_identifier("c"), x, get_arrow_function([get_param("y")], [get_return(get_identifier("y"))])),
            id="arrow_in_alternate",
        ),
    ],
)
def test_arrow_function_disambiguation(expression, expected):
    # --- ACT ---
    program, diagnostics = parse_arrowscript(f"const a = {expression};")

    # --- ASSERT ---
    assert diagnostics == []
    assert_asts_equal(program.body[0].init, expected)


def test_expression_body_is_rejected():
    # --- ACT ---
    program, diagnostics = parse_arrowscript("const f = (x) => x;")

    # --- ASSERT ---
    assert program.body == []
    assert len(diagnostics) == 1
    assert diagnostics[0].code == ErrorCode.EXPRESSION_BODY_REJECTED
    assert diagnostics[0].offset == 17


def test_arrow_function_is_not_a_call_target_without_parentheses():
    # --- ACT ---
    program, diagnostics = parse_arrowscript("const f = (x) => { return x; }(1);")

    # --- ASSERT ---
    assert isinstance(program.body[0].init, ArrowFunctionExpression)
    assert len(diagnostics) == 1
    assert diagnostics[0].code == ErrorCode.UNEXPECTED_TOKEN
    assert diagnostics[0].offset == 30


def test_arrow_function_offsets():
    # --- ACT ---
    program, _ = parse_arrowscript("const f = (a, b) => { return a; };")

    # --- ASSERT ---
    function = program.body[0].init
    assert function.offset == 10
    assert [p.offset for p in function.params] == [11, 14]
    assert function.body.offset == 20
    assert function.body.statements[0].offset == 22
