import pytest

from asc.compiler import typecheck_source
from asc.parser.core.classes import ConstDeclaration


@pytest.fixture
def inferred_types():
    """
    Type-checks a snippet and returns ({name: type string} for the top-level
    constants, diagnostics).
    """

    def _run(source: str):
        program, diagnostics = typecheck_source(source)
        types = {s.id.name: str(s.inferred_type) for s in program.body if isinstance(s, ConstDeclaration)}
        return types, diagnostics

    return _run
