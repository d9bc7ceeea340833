"""Token model for HiveScript.

The lexer produces a flat list of `Token` records. Token types are
grouped into punctuation, operators, the four literal kinds
(`int`, `flt`, `str`, `bool`), the four declared-type keywords
(`INT`, `FLT`, `STR`, `BOOL`), identifiers and reserved keywords.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet


class TokenType(Enum):
    LEFT_PAREN = '('
    RIGHT_PAREN = ')'
    LEFT_BRACE = '{'
    RIGHT_BRACE = '}'
    LEFT_BRACKET = '['
    RIGHT_BRACKET = ']'
    COMMA = ','
    DOT = '.'
    MINUS = '-'
    PLUS = '+'
    SEMICOLON = ';'
    SLASH = '/'
    STAR = '*'

    BANG = '!'
    BANG_EQUAL = '!='
    EQUAL = '='
    EQUAL_EQUAL = '=='
    GREATER = '>'
    GREATER_EQUAL = '>='
    LESS = '<'
    LESS_EQUAL = '<='

    # Literal kinds
    INTEGER = 'int'
    FLOAT = 'flt'
    STRING = 'str'
    BOOLEAN = 'bool'

    # Declared-type keywords
    INTEGER_TYPE = 'INT'
    FLOAT_TYPE = 'FLT'
    STRING_TYPE = 'STR'
    BOOLEAN_TYPE = 'BOOL'

    IDENTIFIER = 'IDENTIFIER'

    ELSE = 'else'
    FALSE = 'false'
    FOR = 'for'
    FUN = 'fun'
    IF = 'if'
    NIL = 'nil'
    OR = 'or'
    RETURN = 'return'
    SUPER = 'super'
    THIS = 'this'
    TRUE = 'true'
    VAR = 'var'
    WHILE = 'while'

    CLASS = 'entity'
    FUNCTION = 'prog'
    NEW = 'create'
    RUN = 'run'
    PRINT = 'output'
    CLEAR = 'clear'

    EOF = 'EOF'

    def __repr__(self) -> str:
        return f"TokenType.{self.name}"


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    literal: Any
    line: int

    def __repr__(self) -> str:
        if self.literal is None:
            return f"Token({self.type.name}, {self.lexeme!r}, line {self.line})"
        return f"Token({self.type.name}, {self.lexeme!r}, {self.literal!r}, line {self.line})"


KEYWORDS: Dict[str, TokenType] = {
    'else': TokenType.ELSE,
    'false': TokenType.FALSE,
    'for': TokenType.FOR,
    'fun': TokenType.FUN,
    'if': TokenType.IF,
    'nil': TokenType.NIL,
    'or': TokenType.OR,
    'return': TokenType.RETURN,
    'super': TokenType.SUPER,
    'this': TokenType.THIS,
    'true': TokenType.TRUE,
    'var': TokenType.VAR,
    'while': TokenType.WHILE,
    # type keywords double as declarations
    'int': TokenType.INTEGER_TYPE,
    'flt': TokenType.FLOAT_TYPE,
    'str': TokenType.STRING_TYPE,
    'bool': TokenType.BOOLEAN_TYPE,
    'entity': TokenType.CLASS,
    'prog': TokenType.FUNCTION,
    'create': TokenType.NEW,
    'run': TokenType.RUN,
    'output': TokenType.PRINT,
    'clear': TokenType.CLEAR,
}

SINGLE_CHAR_TOKENS: Dict[str, TokenType] = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    '[': TokenType.LEFT_BRACKET,
    ']': TokenType.RIGHT_BRACKET,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    ';': TokenType.SEMICOLON,
    '/': TokenType.SLASH,
    '*': TokenType.STAR,
}

# Characters that become a two-character operator when followed by '='.
COMPOUND_TOKENS: Dict[str, tuple] = {
    '!': (TokenType.BANG, TokenType.BANG_EQUAL),
    '=': (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    '>': (TokenType.GREATER, TokenType.GREATER_EQUAL),
    '<': (TokenType.LESS, TokenType.LESS_EQUAL),
}

ARITHMETIC_OPERATORS: FrozenSet[TokenType] = frozenset({
    TokenType.PLUS, TokenType.MINUS, TokenType.STAR, TokenType.SLASH,
})

COMPARISON_OPERATORS: FrozenSet[TokenType] = frozenset({
    TokenType.EQUAL_EQUAL, TokenType.BANG_EQUAL,
    TokenType.GREATER, TokenType.GREATER_EQUAL,
    TokenType.LESS, TokenType.LESS_EQUAL,
})

LITERAL_TYPES: FrozenSet[TokenType] = frozenset({
    TokenType.INTEGER, TokenType.FLOAT, TokenType.STRING, TokenType.BOOLEAN,
})

DECLARED_TYPES: FrozenSet[TokenType] = frozenset({
    TokenType.INTEGER_TYPE, TokenType.FLOAT_TYPE,
    TokenType.STRING_TYPE, TokenType.BOOLEAN_TYPE,
})
