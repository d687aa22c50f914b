"""
Utility functions for the ArrowScript compiler, including terminal coloring,
source location helpers and a robust JSON artifact serializer.
"""

import json
from enum import Enum
from typing import Tuple

from pydantic import BaseModel


class TerminalColors:
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    RESET = "\033[0m"


def offset_to_line_col(source: str, offset: int) -> Tuple[int, int]:
    """Converts a character offset into a 1-based (line, column) pair."""
    offset = max(0, min(offset, len(source)))
    line = source.count("\n", 0, offset) + 1
    line_start = source.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


class CompilerArtifactEncoder(json.JSONEncoder):
    def default(self, o):
        # Imported lazily: the semantic analyser depends on this module through the pipeline.
        from asc.semantic_analyser.core.resolver import Scope
        from asc.semantic_analyser.core.types import TypeTerm

        if isinstance(o, BaseModel):
            return o.model_dump(mode="json")
        if isinstance(o, TypeTerm):
            return str(o)
        if isinstance(o, Scope):
            return {
                "node": type(o.node).__name__ if o.node is not None else None,
                "declarations": {name: {"kind": type(d.node).__name__, "references": len(d.references)} for name, d in o.declarations.items()},
                "children": o.children,
            }
        if isinstance(o, Enum):
            return o.name
        if isinstance(o, set):
            return list(o)
        return super().default(o)
