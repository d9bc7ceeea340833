"""Runtime values for HiveScript.

Every runtime value is a `Literal`: one of `IntLiteral`, `FltLiteral`,
`StrLiteral` or `BoolLiteral`. The class is the value-type tag, so two
literals compare equal only when both their kind and their value match.
Variables and functions are the two kinds of entries an environment
holds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type, Union

from .tokens import Token, TokenType


@dataclass(frozen=True)
class IntLiteral:
    value: int
    value_type = TokenType.INTEGER


@dataclass(frozen=True)
class FltLiteral:
    value: float
    value_type = TokenType.FLOAT


@dataclass(frozen=True)
class StrLiteral:
    value: str
    value_type = TokenType.STRING


@dataclass(frozen=True)
class BoolLiteral:
    value: bool
    value_type = TokenType.BOOLEAN


Literal = Union[IntLiteral, FltLiteral, StrLiteral, BoolLiteral]

NUMERIC = (IntLiteral, FltLiteral)

LITERAL_CLASSES: Dict[TokenType, Type] = {
    TokenType.INTEGER: IntLiteral,
    TokenType.FLOAT: FltLiteral,
    TokenType.STRING: StrLiteral,
    TokenType.BOOLEAN: BoolLiteral,
}

# declared-type keyword -> literal class it accepts
DECLARED_CLASSES: Dict[TokenType, Type] = {
    TokenType.INTEGER_TYPE: IntLiteral,
    TokenType.FLOAT_TYPE: FltLiteral,
    TokenType.STRING_TYPE: StrLiteral,
    TokenType.BOOLEAN_TYPE: BoolLiteral,
}

NATIVE_TYPES: Dict[Type, Type] = {
    IntLiteral: int,
    FltLiteral: float,
    StrLiteral: str,
    BoolLiteral: bool,
}


@dataclass
class Variable:
    name: Token
    value: Optional[Any]
    declared_type: TokenType

    def __repr__(self) -> str:
        return f"<{type_label(self.declared_type)} {self.name.lexeme} = {to_string(self.value)}>"


@dataclass
class Function:
    name: Token
    return_type: Token
    params: List[Variable] = field(default_factory=list)
    body: List[Token] = field(default_factory=list)

    def __repr__(self) -> str:
        params = ', '.join(f"{type_label(p.declared_type)} {p.name.lexeme}" for p in self.params)
        return f"<prog {type_label(self.return_type.type)} {self.name.lexeme}({params})>"


def make_literal(cls: Type, value: Any) -> Literal:
    """Build a literal of the given kind, converting the native value to match."""
    # int() truncates toward zero, so an int kind drops any fraction
    return cls(NATIVE_TYPES[cls](value))


def literal_from_token(tok: Token) -> Literal:
    if tok.type == TokenType.TRUE:
        return BoolLiteral(True)
    if tok.type == TokenType.FALSE:
        return BoolLiteral(False)
    return LITERAL_CLASSES[tok.type](tok.literal)


def token_from_literal(lit: Literal, line: int) -> Token:
    """Synthesise a token standing in for a resolved value."""
    return Token(lit.value_type, to_string(lit), lit.value, line)


def type_label(token_type: Optional[TokenType]) -> str:
    """Lower-case source spelling of a literal kind or declared type."""
    if token_type is None:
        return 'nil'
    return token_type.value.lower()


def type_name(value: Any) -> str:
    """Return the HiveScript type name of a runtime value."""
    if value is None:
        return 'nil'
    if isinstance(value, Function):
        return 'prog'
    return value.value_type.value


def check_value(value: Any, declared_type: TokenType) -> Literal:
    """Check a value against a declared type, promoting int to flt.

    Returns the (possibly promoted) literal. Raises a plain TypeError when
    the value does not fit; callers turn that into a HiveScript error.
    """
    expected = DECLARED_CLASSES[declared_type]
    if isinstance(value, expected):
        return value
    if expected is FltLiteral and isinstance(value, IntLiteral):
        return FltLiteral(float(value.value))
    raise TypeError(f"expected {type_label(declared_type)}, got {type_name(value)}")


def to_string(value: Any) -> str:
    """Convert a HiveScript value to its printed form."""
    if value is None:
        return 'nil'
    if isinstance(value, BoolLiteral):
        return 'true' if value.value else 'false'
    if isinstance(value, FltLiteral):
        return repr(value.value)
    if isinstance(value, (IntLiteral, StrLiteral)):
        return str(value.value)
    return repr(value)
