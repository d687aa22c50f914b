"""
Recursive-descent parser for ArrowScript.

The parser consumes the token list produced by the lexer with a one-token peek.
The only backtracking happens at a `(` in expression position, where a bounded
scan decides whether an arrow function or a parenthesized expression follows.
Syntax errors are collected as diagnostics; after each error the parser skips
ahead to the next statement boundary and carries on.
"""

from typing import List, Optional, Tuple

from asc.config import FRIENDLY_TOKEN_NAMES, PRIMITIVE_TYPE_TOKENS, REJECTED_TYPE_NAMES
from asc.exceptions import ArrowScriptError, Diagnostic, ErrorCode

from .classes import *
from .lexer import tokenize

# Tokens that end a `return` statement without an argument.
_RETURN_TERMINATORS = ("SEMICOLON", "RIGHT_CURLY", "EOF", "CONST", "RETURN")


class Parser:
    def __init__(self, tokens: List[Token]):
        if not tokens or tokens[-1].type != "EOF":
            tokens = list(tokens) + [Token(type="EOF", offset=tokens[-1].offset if tokens else 0)]
        self.tokens = tokens
        self.position = 0
        self.diagnostics: List[Diagnostic] = []

    # --- Token cursor ---

    def _peek(self, k: int = 0) -> Token:
        index = min(self.position + k, len(self.tokens) - 1)
        return self.tokens[index]

    def _advance(self) -> Token:
        token = self._peek()
        if token.type != "EOF":
            self.position += 1
        return token

    def _check(self, *types: str) -> bool:
        return self._peek().type in types

    def _match(self, *types: str) -> Optional[Token]:
        if self._check(*types):
            return self._advance()
        return None

    def _expect(self, token_type: str, expected: Optional[str] = None) -> Token:
        if self._check(token_type):
            return self._advance()
        raise self._unexpected(expected or FRIENDLY_TOKEN_NAMES.get(token_type, token_type))

    def _unexpected(self, expected: str) -> ArrowScriptError:
        token = self._peek()
        found = FRIENDLY_TOKEN_NAMES.get(token.type, token.type)
        if token.type in ("IDENTIFIER", "NUMBER"):
            found = f"{found} '{token.value}'"
        return ArrowScriptError(ErrorCode.UNEXPECTED_TOKEN, offset=token.offset, details=f"Expected {expected} but found {found}.")

    def _checkpoint(self) -> int:
        return self.position

    def _restore(self, checkpoint: int):
        self.position = checkpoint

    # --- Statements ---

    def parse_program(self) -> Tuple[Program, List[Diagnostic]]:
        """Parses the whole token stream. Always returns a Program node."""
        body: List[Statement] = []
        while not self._check("EOF"):
            if self._match("SEMICOLON"):
                continue
            statement = self._parse_statement_with_recovery(in_block=False)
            if statement is not None:
                body.append(statement)
        return Program(offset=0, body=body), self.diagnostics

    def _parse_statement_with_recovery(self, in_block: bool) -> Optional[Statement]:
        try:
            return self._parse_statement()
        except ArrowScriptError as e:
            self.diagnostics.append(e.to_diagnostic())
            self._synchronize(in_block)
            return None

    def _synchronize(self, in_block: bool):
        """
        Skips tokens up to the next statement boundary. A `;` is consumed; a `}`
        is left for the enclosing block to close, or consumed at the top level.
        Braces opened while skipping are skipped together with their contents.
        """
        depth = 0
        while not self._check("EOF"):
            if self._check("LEFT_CURLY"):
                depth += 1
            elif self._check("RIGHT_CURLY"):
                if depth == 0:
                    if not in_block:
                        self._advance()
                    return
                depth -= 1
            elif self._check("SEMICOLON") and depth == 0:
                self._advance()
                return
            self._advance()

    def _parse_statement(self) -> Statement:
        if self._check("CONST"):
            return self._parse_const_declaration()
        if self._check("RETURN"):
            return self._parse_return_statement()
        raise self._unexpected("a 'const' declaration or a 'return' statement")

    def _parse_const_declaration(self) -> ConstDeclaration:
        const_token = self._advance()
        name_token = self._expect("IDENTIFIER")
        identifier = Identifier(offset=name_token.offset, name=name_token.value)

        type_annotation = None
        if self._match("COLON"):
            type_annotation = self._parse_type_annotation()

        self._expect("EQUAL")
        init = self._parse_expression()
        self._match("SEMICOLON")
        return ConstDeclaration(offset=const_token.offset, id=identifier, type_annotation=type_annotation, init=init)

    def _parse_return_statement(self) -> ReturnStatement:
        return_token = self._advance()
        argument = None
        if not self._check(*_RETURN_TERMINATORS):
            argument = self._parse_expression()
        self._match("SEMICOLON")
        return ReturnStatement(offset=return_token.offset, argument=argument)

    def _parse_block(self) -> BlockStatement:
        open_token = self._expect("LEFT_CURLY")
        statements: List[Statement] = []
        while not self._check("RIGHT_CURLY", "EOF"):
            if self._match("SEMICOLON"):
                continue
            statement = self._parse_statement_with_recovery(in_block=True)
            if statement is not None:
                statements.append(statement)
        self._expect("RIGHT_CURLY")
        return BlockStatement(offset=open_token.offset, statements=statements)

    # --- Expressions ---

    def _parse_expression(self) -> Expression:
        return self._parse_ternary()

    def _parse_ternary(self) -> Expression:
        test = self._parse_binary()
        if not self._match("QUESTION"):
            return test
        # Both branches recurse into the full expression grammar: `?:` is right-associative.
        consequent = self._parse_expression()
        self._expect("COLON")
        alternate = self._parse_expression()
        return ConditionalExpression(offset=test.offset, test=test, consequent=consequent, alternate=alternate)

    def _parse_binary(self) -> Expression:
        left = self._parse_postfix()
        while self._check("PLUS"):
            operator = self._advance()
            right = self._parse_postfix()
            left = BinaryExpression(offset=left.offset, left=left, operator=operator.value, right=right)
        return left

    def _parse_postfix(self) -> Expression:
        if self._check("LEFT_PAREN") and self._is_arrow_function_ahead():
            return self._parse_arrow_function()

        expression = self._parse_primary()
        while True:
            if self._match("LEFT_PAREN"):
                arguments = self._parse_expression_list("RIGHT_PAREN")
                expression = CallExpression(offset=expression.offset, callee=expression, arguments=arguments)
            elif self._match("LEFT_BRACKET"):
                index = self._parse_expression()
                self._expect("RIGHT_BRACKET")
                expression = MemberExpression(offset=expression.offset, object=expression, index=index)
            else:
                return expression

    def _parse_primary(self) -> Expression:
        token = self._peek()

        if token.type == "NUMBER":
            self._advance()
            return NumericLiteral(offset=token.offset, value=token.value)
        if token.type == "STRING":
            self._advance()
            return StringLiteral(offset=token.offset, value=token.value)
        if token.type in ("TRUE", "FALSE"):
            self._advance()
            return BooleanLiteral(offset=token.offset, value=token.value)
        if token.type == "IDENTIFIER":
            self._advance()
            return Identifier(offset=token.offset, name=token.value)
        if token.type == "LEFT_BRACKET":
            self._advance()
            elements = self._parse_expression_list("RIGHT_BRACKET")
            return ArrayLiteral(offset=token.offset, elements=elements)
        if token.type == "LEFT_PAREN":
            self._advance()
            expression = self._parse_expression()
            self._expect("RIGHT_PAREN")
            return expression

        raise self._unexpected("an expression")

    def _parse_expression_list(self, closing: str) -> List[Expression]:
        """Parses `expr {, expr}` up to and including the closing token."""
        items: List[Expression] = []
        if not self._check(closing):
            items.append(self._parse_expression())
            while self._match("COMMA"):
                items.append(self._parse_expression())
        self._expect(closing)
        return items

    # --- Arrow functions ---

    def _is_arrow_function_ahead(self) -> bool:
        """
        Speculatively scans `( params ) [: type]` and reports whether `=>` follows.
        The cursor is always restored, whatever the outcome.
        """
        checkpoint = self._checkpoint()
        try:
            self._parse_arrow_head(reject_any=False)
            return self._check("ARROW")
        except ArrowScriptError:
            return False
        finally:
            self._restore(checkpoint)

    def _parse_arrow_head(self, reject_any: bool) -> Tuple[List[Parameter], Optional[TypeAnnotation]]:
        params = self._parse_parameter_list(reject_any)
        return_type = None
        if self._match("COLON"):
            return_type = self._parse_type_annotation(reject_any)
        return params, return_type

    def _parse_arrow_function(self) -> ArrowFunctionExpression:
        start_token = self._peek()
        params, return_type = self._parse_arrow_head(reject_any=True)
        self._expect("ARROW")
        if not self._check("LEFT_CURLY"):
            raise ArrowScriptError(ErrorCode.EXPRESSION_BODY_REJECTED, offset=self._peek().offset)
        body = self._parse_block()
        return ArrowFunctionExpression(offset=start_token.offset, params=params, return_type=return_type, body=body)

    def _parse_parameter_list(self, reject_any: bool) -> List[Parameter]:
        self._expect("LEFT_PAREN")
        params: List[Parameter] = []
        if not self._check("RIGHT_PAREN"):
            params.append(self._parse_parameter(reject_any))
            while self._match("COMMA"):
                params.append(self._parse_parameter(reject_any))
        self._expect("RIGHT_PAREN")
        return params

    def _parse_parameter(self, reject_any: bool) -> Parameter:
        name_token = self._expect("IDENTIFIER", "a parameter name")
        type_annotation = None
        if self._match("COLON"):
            type_annotation = self._parse_type_annotation(reject_any)
        return Parameter(offset=name_token.offset, name=name_token.value, type_annotation=type_annotation)

    # --- Type annotations ---

    def _parse_type_annotation(self, reject_any: bool = True) -> TypeAnnotation:
        annotation = self._parse_base_type(reject_any)
        # `T[]`, possibly repeated. A `[` not followed by `]` belongs to someone else.
        while self._check("LEFT_BRACKET") and self._peek(1).type == "RIGHT_BRACKET":
            self._advance()
            self._advance()
            annotation = ArrayTypeAnnotation(offset=annotation.offset, element_type=annotation)
        return annotation

    def _parse_base_type(self, reject_any: bool) -> TypeAnnotation:
        token = self._peek()

        if token.type in PRIMITIVE_TYPE_TOKENS:
            self._advance()
            return NamedTypeAnnotation(offset=token.offset, name=token.value)

        if token.type == "IDENTIFIER":
            if reject_any and token.value in REJECTED_TYPE_NAMES:
                raise ArrowScriptError(ErrorCode.ANY_TYPE_REJECTED, offset=token.offset)
            self._advance()
            return NamedTypeAnnotation(offset=token.offset, name=token.value)

        if token.type == "TYPE_ARRAY":
            self._advance()
            self._expect("LESS_THAN")
            element_type = self._parse_type_annotation(reject_any)
            self._expect("GREATER_THAN")
            return ArrayTypeAnnotation(offset=token.offset, element_type=element_type)

        if token.type == "LEFT_PAREN":
            params = self._parse_parameter_list(reject_any)
            self._expect("ARROW")
            return_type = self._parse_type_annotation(reject_any)
            return FunctionTypeAnnotation(offset=token.offset, params=params, return_type=return_type)

        raise self._unexpected("a type")


def parse_program(tokens: List[Token]) -> Tuple[Program, List[Diagnostic]]:
    """Parses a token list into a Program, collecting syntax diagnostics."""
    return Parser(tokens).parse_program()


def parse_arrowscript(source: str) -> Tuple[Program, List[Diagnostic]]:
    """
    Lexes and parses ArrowScript source. A lexing failure yields an empty Program
    together with the single `UNEXPECTED_CHARACTER` diagnostic.
    """
    try:
        tokens = tokenize(source)
    except ArrowScriptError as e:
        return Program(offset=0, body=[]), [e.to_diagnostic()]
    return parse_program(tokens)
