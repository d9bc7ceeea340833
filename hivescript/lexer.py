"""Lexer for HiveScript.

A single left-to-right pass turns source text into a list of tokens
terminated by an `EOF` token. The lexer is deliberately permissive:
characters it does not recognise are skipped without a diagnostic.
The only lexical error is a string literal that runs into the end of
the input.
"""

from __future__ import annotations

from typing import Any, List, Optional

from .errors import HiveError
from .tokens import Token, TokenType, KEYWORDS, SINGLE_CHAR_TOKENS, COMPOUND_TOKENS


ESCAPES = {'n': '\n', 't': '\t', '"': '"', '\\': '\\'}


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def is_alnum(c: str) -> bool:
    return c.isascii() and c.isalnum()


def parse_number(text: str) -> Any:
    """Decode a digit/dot run, ignoring everything from a second dot on."""
    if '.' not in text:
        return int(text)
    whole, _, rest = text.partition('.')
    fraction = rest.split('.', 1)[0]
    return float(f"{whole}.{fraction or '0'}")


class Lexer:
    def __init__(self, source: str):
        self.source = source
        self.tokens: List[Token] = []
        self.start = 0
        self.current = 0
        self.line = 1
        self.start_line = 1

    def at_end(self) -> bool:
        return self.current >= len(self.source)

    def advance(self) -> str:
        c = self.source[self.current]
        self.current += 1
        if c == '\n':
            self.line += 1
        return c

    def peek(self) -> str:
        if self.at_end():
            return '\0'
        return self.source[self.current]

    def match(self, expected: str) -> bool:
        if self.peek() != expected:
            return False
        self.current += 1
        return True

    def add_token(self, token_type: TokenType, literal: Optional[Any] = None):
        lexeme = self.source[self.start:self.current]
        self.tokens.append(Token(token_type, lexeme, literal, self.start_line))

    def scan_tokens(self) -> List[Token]:
        while not self.at_end():
            self.start = self.current
            self.start_line = self.line
            self.scan_token()
        self.tokens.append(Token(TokenType.EOF, '', None, self.line))
        return self.tokens

    def scan_token(self):
        c = self.advance()
        if c in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[c])
            return
        if c in COMPOUND_TOKENS:
            single, double = COMPOUND_TOKENS[c]
            self.add_token(double if self.match('=') else single)
            return
        if c == '#':
            while self.peek() != '\n' and not self.at_end():
                self.advance()
            return
        if c == '"':
            self.string()
            return
        if is_digit(c):
            self.number()
            return
        if is_alnum(c):
            self.identifier()
            return
        # whitespace, newlines and anything unrecognised produce no token

    def string(self):
        chars: List[str] = []
        while not self.at_end() and self.peek() != '"':
            ch = self.advance()
            if ch == '\\' and not self.at_end():
                escaped = self.advance()
                chars.append(ESCAPES.get(escaped, escaped))
                continue
            chars.append(ch)
        if self.at_end():
            raise HiveError.of('UnterminatedString', self.start_line)
        self.advance()  # closing quote
        self.add_token(TokenType.STRING, ''.join(chars))

    def number(self):
        while is_digit(self.peek()) or self.peek() == '.':
            self.advance()
        value = parse_number(self.source[self.start:self.current])
        self.add_token(TokenType.FLOAT if isinstance(value, float) else TokenType.INTEGER, value)

    def identifier(self):
        while is_alnum(self.peek()):
            self.advance()
        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))


def tokenize(source: str) -> List[Token]:
    """Convert HiveScript source into a list of tokens ending with EOF."""
    return Lexer(source).scan_tokens()
