"""
Language server for ArrowScript: publishes the compiler diagnostics of an open
document and shows the inferred type of a constant on hover.
"""

from typing import List, Optional

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_HOVER,
    Diagnostic,
    DiagnosticSeverity,
    Hover,
    MarkupContent,
    MarkupKind,
    Position,
    Range,
)
from pygls.server import LanguageServer

from asc.compiler import typecheck_source
from asc.exceptions import Diagnostic as CompilerDiagnostic
from asc.parser.core.classes import ASTNode, ConstDeclaration, Program, iter_child_nodes
from asc.utils import offset_to_line_col

server = LanguageServer("arrowscript-server", "v0.1")


def offset_to_position(source: str, offset: int) -> Position:
    """Converts a character offset into a zero-based LSP position."""
    line, column = offset_to_line_col(source, offset)
    return Position(line=line - 1, character=column - 1)


def position_to_offset(source: str, position: Position) -> int:
    lines = source.split("\n")
    line = min(position.line, len(lines) - 1)
    return sum(len(text) + 1 for text in lines[:line]) + min(position.character, len(lines[line]))


def _word_end(source: str, offset: int) -> int:
    end = offset
    while end < len(source) and (source[end].isalnum() or source[end] == "_"):
        end += 1
    return max(end, offset + 1)


def to_lsp_diagnostics(source: str, diagnostics: List[CompilerDiagnostic]) -> List[Diagnostic]:
    lsp_diagnostics = []
    for diagnostic in diagnostics:
        start = offset_to_position(source, diagnostic.offset)
        end = offset_to_position(source, _word_end(source, diagnostic.offset))
        lsp_diagnostics.append(
            Diagnostic(
                range=Range(start=start, end=end),
                message=diagnostic.message,
                severity=DiagnosticSeverity.Error,
                code=diagnostic.code.name,
                source="arrowscript",
            )
        )
    return lsp_diagnostics


def _const_declarations(node: ASTNode):
    if isinstance(node, ConstDeclaration):
        yield node
    for child in iter_child_nodes(node):
        yield from _const_declarations(child)


def _word_at(source: str, offset: int) -> str:
    start, end = offset, offset
    while start > 0 and (source[start - 1].isalnum() or source[start - 1] == "_"):
        start -= 1
    while end < len(source) and (source[end].isalnum() or source[end] == "_"):
        end += 1
    return source[start:end]


def find_hover_text(program: Program, source: str, offset: int) -> Optional[str]:
    """
    Returns the hover text for the word at `offset`: the inferred type of the
    nearest constant with that name declared at or before the cursor.
    """
    word = _word_at(source, offset)
    if not word:
        return None

    candidates = [d for d in _const_declarations(program) if d.id.name == word and d.inferred_type is not None]
    if not candidates:
        return None
    preceding = [d for d in candidates if d.id.offset <= offset]
    declaration = preceding[-1] if preceding else candidates[0]
    return f"```arrowscript\n(constant) {word}: {declaration.inferred_type}\n```"


def _validate(ls: LanguageServer, uri: str):
    document = ls.workspace.get_text_document(uri)
    _, diagnostics = typecheck_source(document.source)
    ls.publish_diagnostics(uri, to_lsp_diagnostics(document.source, diagnostics))


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls, params):
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls, params):
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_HOVER)
def hover(ls, params):
    document = ls.workspace.get_text_document(params.text_document.uri)
    source = document.source
    program, _ = typecheck_source(source)

    text = find_hover_text(program, source, position_to_offset(source, params.position))
    if text is None:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.Markdown, value=text))


def start():
    server.start_io()


if __name__ == "__main__":
    start()
