import os
from typing import List

from lark import Lark
from lark.exceptions import UnexpectedCharacters

from asc.exceptions import ArrowScriptError, ErrorCode

from .classes import Token

try:
    # Use importlib.resources for robust package data access
    from importlib.resources import files as pkg_files

    arrowscript_grammar = (pkg_files("asc.parser.core") / "arrowscript.lark").read_text()
except (ModuleNotFoundError, FileNotFoundError):
    # Running from a source checkout that is not installed as a package
    grammar_path = os.path.join(os.path.dirname(__file__), "arrowscript.lark")
    with open(grammar_path, "r", encoding="utf-8") as f:
        arrowscript_grammar = f.read()

# Only the basic lexer is used; the LALR parser is required by Lark to build it.
LARK_LEXER = Lark(arrowscript_grammar, start="start", parser="lalr", lexer="basic")

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "\\": "\\", '"': '"', "'": "'"}


def _decode_string(raw: str) -> str:
    """Strips the quotes from a string lexeme and decodes its escape sequences."""
    body = raw[1:-1]
    decoded = []
    i = 0
    while i < len(body):
        char = body[i]
        if char == "\\" and i + 1 < len(body):
            escaped = body[i + 1]
            decoded.append(_ESCAPES.get(escaped, escaped))
            i += 2
        else:
            decoded.append(char)
            i += 1
    return "".join(decoded)


def _convert_value(kind: str, text: str):
    if kind == "NUMBER":
        return float(text) if "." in text else int(text)
    if kind == "STRING":
        return _decode_string(text)
    if kind == "TRUE":
        return True
    if kind == "FALSE":
        return False
    return text


def tokenize(source: str) -> List[Token]:
    """
    Converts ArrowScript source text into a token list terminated by an EOF token.

    Whitespace and comments are skipped. The first character that no token pattern
    matches raises an `ArrowScriptError` with code `UNEXPECTED_CHARACTER`.
    """
    tokens: List[Token] = []
    try:
        for lark_token in LARK_LEXER.lex(source):
            tokens.append(
                Token(
                    type=lark_token.type,
                    value=_convert_value(lark_token.type, lark_token.value),
                    offset=lark_token.start_pos,
                )
            )
    except UnexpectedCharacters as e:
        raise ArrowScriptError(ErrorCode.UNEXPECTED_CHARACTER, offset=e.pos_in_stream, char=e.char)

    tokens.append(Token(type="EOF", value=None, offset=len(source)))
    return tokens
