"""
Custom exception and diagnostic types for the ArrowScript compiler.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_serializer


class ErrorCode(Enum):

    # --- Lexical Errors ---
    UNEXPECTED_CHARACTER = "Unexpected character '{char}'."

    # --- Syntax Errors ---
    # The 'details' will be dynamically generated (e.g., "Expected ')' but found ';'").
    UNEXPECTED_TOKEN = "Syntax Error: {details}"
    ANY_TYPE_REJECTED = "The 'any' type is not supported."
    EXPRESSION_BODY_REJECTED = "Arrow functions must have a block body with an explicit return statement."

    # --- Structural Errors ---
    RETURN_NOT_LAST = "Return statement must be the last statement in a function."

    # --- Naming Errors ---
    DUPLICATE_DECLARATION = "Duplicate declaration of '{name}'."
    DUPLICATE_PARAMETER = "Duplicate parameter name '{name}'."
    UNDECLARED_REFERENCE = "Reference to undeclared variable '{name}'."

    # --- Type Errors ---
    TYPE_MISMATCH = "Type mismatch: {left} is not compatible with {right}."
    OPERATOR_TYPE_MISMATCH = "The '{op}' operator requires either numeric operands or string operands, but got '{provided_type}'."
    INFINITE_TYPE = "Infinite type: cannot unify {left} with {right}."
    ARITY_MISMATCH = "Function parameter count mismatch: expected {expected} but got {provided}."
    NOT_CALLABLE = "Called value of type '{provided_type}' is not a function."
    UNSUPPORTED_OPERATOR = "Unsupported binary operator '{op}'."


class Diagnostic(BaseModel):
    """A single problem found by one of the compiler stages."""

    code: ErrorCode
    message: str
    offset: int

    @classmethod
    def create(cls, code: ErrorCode, offset: int, **kwargs) -> "Diagnostic":
        return cls(code=code, message=code.value.format(**kwargs), offset=offset)

    @field_serializer("code")
    def _serialize_code(self, code: ErrorCode) -> str:
        return code.name


class ArrowScriptError(Exception):
    def __init__(self, code: ErrorCode, offset: Optional[int] = None, **kwargs):
        self.code = code
        self.offset = offset
        self.details = kwargs

        # The format string (e.g., "Duplicate declaration of '{name}'") is populated
        # with any extra data it needs from kwargs.
        core_message = code.value.format(**kwargs)
        self.core_message = core_message

        location_prefix = f"Error at offset {offset}: " if offset is not None else ""
        self.message = location_prefix + core_message

        super().__init__(self.message)

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(code=self.code, message=self.core_message, offset=self.offset or 0)


class InternalCompilerError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
