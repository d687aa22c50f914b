"""
Static configuration data for the ArrowScript compiler.
This includes the compilation stages, token names and type annotation mappings.
"""

# Ordered stages of the pipeline, keyed by the value accepted by `asc -c`.
STAGE_MAP = {
    "1": ("tokens", "Token Stream"),
    "2": ("ast", "Abstract Syntax Tree"),
    "3a": ("validation", "Structural Validation Diagnostics"),
    "3b": ("resolution", "Scope Tree (Name Resolution)"),
    "3": ("typed_ast", "Typed Abstract Syntax Tree"),
}

# Token kinds that spell a primitive type annotation.
PRIMITIVE_TYPE_TOKENS = {
    "TYPE_NUMBER",
    "TYPE_STRING",
    "TYPE_BOOLEAN",
    "TYPE_VOID",
    "TYPE_VOID_ALIAS",
    "TYPE_FLOAT",
    "TYPE_BOOL",
    "TYPE_UNIT",
}

# Annotation spellings mapped to the canonical primitive tag names.
# Any other type name is treated as an unknown type and becomes a type variable.
PRIMITIVE_ANNOTATIONS = {
    "number": "Number",
    "string": "String",
    "boolean": "Bool",
    "Bool": "Bool",
    "Float": "Float",
    "void": "Void",
    "Void": "Void",
    "Unit": "Void",
}

REJECTED_TYPE_NAMES = {"any"}

FRIENDLY_TOKEN_NAMES = {
    "CONST": "the 'const' keyword",
    "RETURN": "the 'return' keyword",
    "TRUE": "'true'",
    "FALSE": "'false'",
    "TYPE_NUMBER": "the 'number' type",
    "TYPE_STRING": "the 'string' type",
    "TYPE_BOOLEAN": "the 'boolean' type",
    "TYPE_ARRAY": "the 'Array' type",
    "TYPE_VOID": "the 'void' type",
    "TYPE_VOID_ALIAS": "the 'Void' type",
    "TYPE_FLOAT": "the 'Float' type",
    "TYPE_BOOL": "the 'Bool' type",
    "TYPE_UNIT": "the 'Unit' type",
    "ARROW": "an arrow '=>'",
    "QUESTION": "a question mark '?'",
    "COLON": "a colon ':'",
    "EQUAL": "an equals sign '='",
    "PIPE": "a pipe '|'",
    "LESS_THAN": "a '<'",
    "GREATER_THAN": "a '>'",
    "PLUS": "a plus sign '+'",
    "LEFT_PAREN": "an opening parenthesis '('",
    "RIGHT_PAREN": "a closing parenthesis ')'",
    "LEFT_CURLY": "an opening brace '{'",
    "RIGHT_CURLY": "a closing brace '}'",
    "LEFT_BRACKET": "an opening bracket '['",
    "RIGHT_BRACKET": "a closing bracket ']'",
    "COMMA": "a comma ','",
    "SEMICOLON": "a semicolon ';'",
    "IDENTIFIER": "a variable name",
    "NUMBER": "a number",
    "STRING": "a string literal",
    "EOF": "the end of the file",
}
