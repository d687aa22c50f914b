from typing import Any

from pydantic import BaseModel

from asc.parser.core.classes import ANALYSIS_FIELDS

# Offsets and analysis links never take part in structural comparison.
IGNORED_FIELDS = {"offset"} | ANALYSIS_FIELDS


def _compare(actual: Any, expected: Any, path: str):
    if type(actual) is not type(expected):
        raise AssertionError(f"{path}: expected {type(expected).__name__} but got {type(actual).__name__}")

    if isinstance(expected, BaseModel):
        for field_name in type(expected).model_fields:
            if field_name not in IGNORED_FIELDS:
                _compare(getattr(actual, field_name), getattr(expected, field_name), f"{path}.{field_name}")
        return

    if isinstance(expected, list):
        if len(actual) != len(expected):
            raise AssertionError(f"{path}: expected {len(expected)} items but got {len(actual)}")
        for index, (actual_item, expected_item) in enumerate(zip(actual, expected)):
            _compare(actual_item, expected_item, f"{path}[{index}]")
        return

    if actual != expected:
        raise AssertionError(f"{path}: expected {expected!r} but got {actual!r}")


def assert_asts_equal(actual, expected):
    """
    Asserts that two ASTs have the same shape and values, ignoring offsets and
    the links added by the analysis stages. The failure message names the path
    of the first differing field, e.g. `Program.body[0].init.elements[1]`.
    """
    _compare(actual, expected, type(expected).__name__)
