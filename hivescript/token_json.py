"""JSON serialization/deserialization for HiveScript token streams.

A lexed program can be written out as plain dict/list structures and
executed later without re-lexing. Token types are stored by enum name.
"""

from __future__ import annotations

from typing import Any, Dict, List

from .tokens import Token, TokenType


def token_to_obj(tok: Token) -> Dict[str, Any]:
    return {
        "type": tok.type.name,
        "lexeme": tok.lexeme,
        "literal": tok.literal,
        "line": tok.line,
    }


def token_from_obj(obj: Dict[str, Any]) -> Token:
    if not isinstance(obj, dict):
        raise ValueError(f"token entry must be a JSON object, got {obj!r}")
    try:
        token_type = TokenType[obj["type"]]
    except KeyError:
        raise ValueError(f"Unknown token type: {obj.get('type')}")
    literal = obj.get("literal")
    # JSON has a single number type; restore the lexer's int/float split
    if token_type == TokenType.FLOAT and literal is not None:
        literal = float(literal)
    elif token_type == TokenType.INTEGER and literal is not None:
        literal = int(literal)
    return Token(token_type, obj.get("lexeme", ""), literal, int(obj.get("line", 0)))


def tokens_to_obj(tokens: List[Token]) -> List[Dict[str, Any]]:
    return [token_to_obj(t) for t in tokens]


def tokens_from_obj(obj: Any) -> List[Token]:
    if not isinstance(obj, list):
        raise ValueError("token stream must be a JSON list")
    return [token_from_obj(o) for o in obj]
