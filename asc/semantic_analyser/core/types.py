"""
Type terms used by the type inferrer, together with the union-find helpers
(`compress`, `occurs_in`) and the type printer.

Terms are compared by identity. A TypeVariable is either a root (its `link` is
None) or forwards to another term; `compress` collapses those chains.
"""

from enum import Enum
from typing import List, Optional


class TypeTerm:
    """Base class of every type term."""

    __slots__ = ()

    def __str__(self) -> str:
        return type_to_string(self)


class TypeVariable(TypeTerm):
    __slots__ = ("id", "name", "link")

    def __init__(self, id: int, name: Optional[str] = None):
        self.id = id
        self.name = name or f"t{id}"
        self.link: Optional[TypeTerm] = None

    def __repr__(self) -> str:
        return f"TypeVariable({self.name}, link={self.link!r})"


class Primitive(Enum):
    NUMBER = "Number"
    FLOAT = "Float"
    BOOL = "Bool"
    STRING = "String"
    VOID = "Void"
    UNKNOWN = "Unknown"


class PrimitiveType(TypeTerm):
    __slots__ = ("tag",)

    def __init__(self, tag: Primitive):
        self.tag = tag

    def __repr__(self) -> str:
        return f"PrimitiveType({self.tag.value})"


class ArrayType(TypeTerm):
    __slots__ = ("element_type",)

    def __init__(self, element_type: TypeTerm):
        self.element_type = element_type

    def __repr__(self) -> str:
        return f"ArrayType({self.element_type!r})"


class FunctionType(TypeTerm):
    __slots__ = ("param_types", "return_type")

    def __init__(self, param_types: List[TypeTerm], return_type: TypeTerm):
        self.param_types = list(param_types)
        self.return_type = return_type

    def __repr__(self) -> str:
        return f"FunctionType({self.param_types!r}, {self.return_type!r})"


def compress(term: TypeTerm) -> TypeTerm:
    """
    Follows the link chain starting at `term` and returns its end: a root variable
    or a constructed type. Every variable on the chain is re-pointed at that end.
    """
    end = term
    while isinstance(end, TypeVariable) and end.link is not None:
        end = end.link

    current = term
    while isinstance(current, TypeVariable) and current.link is not None:
        following = current.link
        if following is not end:
            current.link = end
        current = following
    return end


def occurs_in(variable: TypeVariable, term: TypeTerm) -> bool:
    """Tells whether `variable` appears anywhere inside `term`."""
    term = compress(term)
    if term is variable:
        return True
    if isinstance(term, ArrayType):
        return occurs_in(variable, term.element_type)
    if isinstance(term, FunctionType):
        return any(occurs_in(variable, p) for p in term.param_types) or occurs_in(variable, term.return_type)
    return False


def type_to_string(term: TypeTerm) -> str:
    term = compress(term)
    if isinstance(term, TypeVariable):
        return term.name
    if isinstance(term, PrimitiveType):
        return term.tag.value
    if isinstance(term, ArrayType):
        return f"Array<{type_to_string(term.element_type)}>"
    if isinstance(term, FunctionType):
        params = []
        for param in term.param_types:
            rendered = type_to_string(param)
            if isinstance(compress(param), FunctionType):
                rendered = f"({rendered})"
            params.append(rendered)
        return f"({', '.join(params)}) -> {type_to_string(term.return_type)}"
    return "<unknown>"
