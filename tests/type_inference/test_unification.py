import pytest

from asc.exceptions import ErrorCode
from asc.parser.core.classes import NumericLiteral
from asc.semantic_analyser.core.type_inferrer import TypeEnvironment, TypeInferrer
from asc.semantic_analyser.core.types import *

NODE = NumericLiteral(offset=7, value=0)


def number():
    return PrimitiveType(Primitive.NUMBER)


def string():
    return PrimitiveType(Primitive.STRING)


@pytest.fixture
def inferrer():
    return TypeInferrer()


# --- compress / occurs_in ---


def test_compress_collapses_the_link_chain(inferrer):
    # --- ARRANGE ---
    t0, t1, t2 = (inferrer.new_type_variable() for _ in range(3))
    target = number()
    t0.link, t1.link, t2.link = t1, t2, target

    # --- ACT ---
    result = compress(t0)

    # --- ASSERT ---
    assert result is target
    assert t0.link is target
    assert t1.link is target
    assert compress(compress(t0)) is compress(t0)


def test_compress_returns_root_variable(inferrer):
    t0, t1 = inferrer.new_type_variable(), inferrer.new_type_variable()
    t0.link = t1
    assert compress(t0) is t1
    assert compress(t1) is t1


def test_compress_leaves_constructed_types_alone():
    array = ArrayType(number())
    assert compress(array) is array


def test_occurs_in(inferrer):
    v = inferrer.new_type_variable()
    other = inferrer.new_type_variable()
    linked = inferrer.new_type_variable()
    linked.link = v

    assert occurs_in(v, v)
    assert occurs_in(v, ArrayType(v))
    assert occurs_in(v, FunctionType([number()], v))
    assert occurs_in(v, FunctionType([ArrayType(linked)], number()))
    assert not occurs_in(v, FunctionType([other], number()))
    assert not occurs_in(v, number())


# --- unify ---


def test_unify_links_variable(inferrer):
    v = inferrer.new_type_variable()
    inferrer.unify(v, number(), NODE)
    assert inferrer.diagnostics == []
    assert str(v) == "Number"


def test_unify_variable_on_the_right(inferrer):
    v = inferrer.new_type_variable()
    inferrer.unify(ArrayType(string()), v, NODE)
    assert str(v) == "Array<String>"


def test_unify_same_variable_is_a_no_op(inferrer):
    v = inferrer.new_type_variable()
    inferrer.unify(v, v, NODE)
    assert v.link is None
    assert inferrer.diagnostics == []


def test_unify_structural_types(inferrer):
    # --- ARRANGE ---
    a, b = inferrer.new_type_variable(), inferrer.new_type_variable()
    left = FunctionType([ArrayType(a), number()], a)
    right = FunctionType([ArrayType(string()), b], string())

    # --- ACT ---
    inferrer.unify(left, right, NODE)

    # --- ASSERT ---
    assert inferrer.diagnostics == []
    assert str(left) == str(right) == "(Array<String>, Number) -> String"


def test_unify_primitive_mismatch(inferrer):
    inferrer.unify(number(), string(), NODE)

    assert len(inferrer.diagnostics) == 1
    assert inferrer.diagnostics[0].code == ErrorCode.TYPE_MISMATCH
    assert inferrer.diagnostics[0].offset == 7
    assert inferrer.diagnostics[0].message == "Type mismatch: Number is not compatible with String."


def test_unify_constructor_mismatch(inferrer):
    inferrer.unify(ArrayType(number()), FunctionType([], number()), NODE)
    assert inferrer.diagnostics[0].message == "Type mismatch: Array<Number> is not compatible with () -> Number."


def test_unify_function_arity_mismatch(inferrer):
    inferrer.unify(FunctionType([number()], number()), FunctionType([number(), number()], number()), NODE)

    assert [d.code for d in inferrer.diagnostics] == [ErrorCode.ARITY_MISMATCH]
    assert inferrer.diagnostics[0].message == "Function parameter count mismatch: expected 1 but got 2."


def test_unify_occurs_check(inferrer):
    # --- ARRANGE ---
    v = inferrer.new_type_variable()

    # --- ACT ---
    inferrer.unify(v, ArrayType(v), NODE)

    # --- ASSERT ---
    assert [d.code for d in inferrer.diagnostics] == [ErrorCode.INFINITE_TYPE]
    assert inferrer.diagnostics[0].message == "Infinite type: cannot unify t0 with Array<t0>."
    assert v.link is None


def test_unify_reports_every_mismatching_component(inferrer):
    inferrer.unify(FunctionType([number(), string()], number()), FunctionType([string(), number()], number()), NODE)
    assert [d.code for d in inferrer.diagnostics] == [ErrorCode.TYPE_MISMATCH, ErrorCode.TYPE_MISMATCH]


# --- fresh_instance / lookup ---


def test_fresh_instance_renames_generic_variables_consistently(inferrer):
    # --- ARRANGE ---
    a = inferrer.new_type_variable()
    scheme = FunctionType([ArrayType(a)], a)

    # --- ACT ---
    instance = inferrer.fresh_instance(scheme)

    # --- ASSERT ---
    assert instance is not scheme
    fresh = instance.return_type
    assert fresh is not a
    assert instance.param_types[0].element_type is fresh
    assert str(instance) == "(Array<t1>) -> t1"


def test_fresh_instance_keeps_non_generic_variables(inferrer):
    # --- ARRANGE ---
    a, b = inferrer.new_type_variable(), inferrer.new_type_variable()
    inferrer.non_generic.add(ArrayType(a))

    # --- ACT ---
    instance = inferrer.fresh_instance(FunctionType([a], b))

    # --- ASSERT ---
    assert instance.param_types[0] is a
    assert instance.return_type is not b


def test_fresh_instance_of_primitive_is_itself(inferrer):
    term = number()
    assert inferrer.fresh_instance(term) is term


def test_lookup_of_unbound_name_is_a_fresh_variable(inferrer):
    assert isinstance(inferrer.lookup("missing"), TypeVariable)


def test_type_environment_falls_through_to_parent():
    outer = TypeEnvironment()
    inner = TypeEnvironment(parent=outer)
    term = number()
    outer.bind("a", term)

    assert inner.lookup("a") is term
    assert inner.lookup("b") is None


def test_variable_ids_restart_for_every_inferrer():
    assert TypeInferrer().new_type_variable().name == "t0"
    assert TypeInferrer().new_type_variable().name == "t0"
