"""Parser-evaluator for HiveScript.

HiveScript has no separate syntax tree for top-level code: each
statement is parsed and evaluated in the same step by `Evaluator`,
which walks the token list with a cursor. Function bodies are the only
deferred part; they are stored as raw tokens and handed to a fresh
`Evaluator` with its own `Environment` on every call.

`Interpreter` is the host-facing object. It owns the top-level
environment, the output stream and the debug channel.
"""

from __future__ import annotations

import operator
import sys
import time
from typing import Any, Callable, Dict, List, Optional, TextIO, Union

from .environment import Environment
from .errors import HiveError, ReturnSignal
from .lexer import tokenize
from .tokens import (
    Token, TokenType, ARITHMETIC_OPERATORS, COMPARISON_OPERATORS, DECLARED_TYPES,
)
from .types import (
    Function, Variable, Literal, IntLiteral, FltLiteral, StrLiteral, BoolLiteral, NUMERIC,
    check_value, literal_from_token, make_literal, token_from_literal, to_string, type_label, type_name,
)

LITERAL_INSTANCES = (IntLiteral, FltLiteral, StrLiteral, BoolLiteral)

VALUE_TOKENS = frozenset({
    TokenType.INTEGER, TokenType.FLOAT, TokenType.STRING, TokenType.BOOLEAN,
    TokenType.TRUE, TokenType.FALSE,
})

TERMINATORS = frozenset({TokenType.SEMICOLON, TokenType.EOF})

COMPARATORS: Dict[TokenType, Callable[[Any, Any], Any]] = {
    TokenType.EQUAL_EQUAL: operator.eq,
    TokenType.BANG_EQUAL: operator.ne,
    TokenType.GREATER: operator.gt,
    TokenType.GREATER_EQUAL: operator.ge,
    TokenType.LESS: operator.lt,
    TokenType.LESS_EQUAL: operator.le,
}

ARITHMETIC: Dict[TokenType, Callable[[Any, Any], Any]] = {
    TokenType.PLUS: operator.add,
    TokenType.MINUS: operator.sub,
    TokenType.STAR: operator.mul,
}

# Working buffers of arithmetic and concatenation hold a mix of raw
# tokens and already-reduced literals.
Item = Union[Token, Literal]


def is_token(item: Item, *types: TokenType) -> bool:
    return isinstance(item, Token) and item.type in types


def find_first(buffer: List[Item], types, start: int = 0) -> Optional[int]:
    for index in range(start, len(buffer)):
        if is_token(buffer[index], *types):
            return index
    return None


class Evaluator:
    """Fused parser/evaluator over one token sequence and one environment."""

    def __init__(self, tokens: List[Token], interpreter: 'Interpreter',
                 environment: Optional[Environment] = None, allow_return: bool = False):
        self.tokens = tokens
        self.interpreter = interpreter
        self.environment = environment if environment is not None else Environment()
        self.allow_return = allow_return
        self.position = -1
        self.in_arguments = False

    # Cursor helpers

    def is_at_end(self) -> bool:
        return self.position + 1 >= len(self.tokens)

    def end_token(self) -> Token:
        line = self.tokens[-1].line if self.tokens else 0
        return Token(TokenType.EOF, '', None, line)

    def advance(self, count: int = 1) -> Token:
        self.position += count
        if self.position >= len(self.tokens):
            return self.end_token()
        return self.tokens[self.position]

    def look_ahead(self, count: int = 1) -> Token:
        index = self.position + count
        if index >= len(self.tokens):
            return self.end_token()
        return self.tokens[index]

    def debug(self, level: int, msg: str):
        if self.interpreter.debug_level >= level:
            self.interpreter.debug(msg)

    # Driver

    def parse(self) -> Optional[Literal]:
        latest = None
        try:
            while not self.is_at_end():
                tok = self.advance()
                if tok.type in TERMINATORS:
                    continue
                latest = self.expression(tok)
        except ReturnSignal as signal:
            self.position = len(self.tokens)
            return signal.value
        return latest

    def expression(self, tok: Token, resolve_operators: bool = True) -> Any:
        if tok.type == TokenType.IDENTIFIER:
            if resolve_operators and self.look_ahead().type == TokenType.EQUAL:
                return self.assignment(tok)
            variable = self.environment.get_variable(tok)
            tok = token_from_literal(variable.value, tok.line)

        kind = tok.type
        following = self.look_ahead().type

        if kind in (TokenType.INTEGER, TokenType.FLOAT):
            if resolve_operators and following in ARITHMETIC_OPERATORS:
                return self.operation(tok)
            if resolve_operators and following in COMPARISON_OPERATORS:
                return self.comparison(tok)
            return literal_from_token(tok)

        if kind == TokenType.STRING:
            if resolve_operators and following == TokenType.DOT:
                return self.concatenation(tok)
            if following in ARITHMETIC_OPERATORS:
                raise HiveError.of('UnsupportedOperationType', tok.line, type_label(kind))
            if resolve_operators and following in COMPARISON_OPERATORS:
                return self.comparison(tok)
            return literal_from_token(tok)

        if kind in (TokenType.BOOLEAN, TokenType.TRUE, TokenType.FALSE):
            if resolve_operators and following in COMPARISON_OPERATORS:
                return self.comparison(tok)
            return literal_from_token(tok)

        if kind in DECLARED_TYPES:
            return self.declaration(tok)
        if kind == TokenType.LEFT_PAREN:
            return self.operation(tok)
        if kind == TokenType.FUNCTION:
            return_type = self.advance()
            return self.function_declaration(return_type, self.advance())
        if kind == TokenType.RUN:
            return self.call(self.advance())
        if kind == TokenType.RETURN:
            if not self.allow_return:
                raise HiveError.of('ReturnOutsideFunction', tok.line)
            raise ReturnSignal(self.expression(self.advance()))
        return self.reserved(tok)

    # Operand resolution

    def resolve_operand(self, item: Item, line: int) -> Literal:
        """Turn a buffer element into a literal without consuming operators."""
        if isinstance(item, LITERAL_INSTANCES):
            return item
        if item.type == TokenType.IDENTIFIER:
            return self.environment.get_variable(item).value
        if item.type in VALUE_TOKENS:
            return literal_from_token(item)
        raise HiveError.of('UnsupportedOperationType', line, item.lexeme or type_label(item.type))

    def collect(self, first: Token) -> List[Item]:
        """Gather the tokens of the current expression, up to its terminator.

        Inside call arguments the expression also ends at a top-level ','
        or at the ')' closing the call.
        """
        buffer: List[Item] = [first]
        depth = 1 if first.type == TokenType.LEFT_PAREN else 0
        while True:
            following = self.look_ahead().type
            if following in TERMINATORS:
                break
            if self.in_arguments:
                if following == TokenType.COMMA and depth == 0:
                    break
                if following == TokenType.RIGHT_PAREN:
                    if depth == 0:
                        break
                    depth -= 1
                elif following == TokenType.LEFT_PAREN:
                    depth += 1
            buffer.append(self.advance())
        return buffer

    # Arithmetic

    def operation(self, tok: Optional[Token], buffer: Optional[List[Item]] = None) -> Literal:
        if buffer is None:
            buffer = self.collect(tok)
        line = tok.line if tok is not None else self.look_ahead(0).line

        while len(buffer) > 1:
            index = find_first(buffer, (TokenType.LEFT_PAREN,))
            if index is not None:
                close = find_first(buffer, (TokenType.RIGHT_PAREN,), index + 1)
                if close is None:
                    raise HiveError.of('UnterminatedParenthesis', buffer[index].line)
                # the group keeps its ')' as a trailing element, which reduction ignores
                value = self.operation(None, buffer[index + 1:close + 1])
                buffer[index:close + 1] = [value]
                continue

            index = find_first(buffer, (TokenType.STAR, TokenType.SLASH))
            if index is None:
                index = find_first(buffer, (TokenType.PLUS, TokenType.MINUS))
            if index is None:
                break
            op = buffer[index]
            if index == 0 or index == len(buffer) - 1:
                raise HiveError.of('InvalidOperation', op.line)
            left = self.resolve_operand(buffer[index - 1], op.line)
            right = self.resolve_operand(buffer[index + 1], op.line)
            value = self.arithmetic(op, left, right)
            self.debug(3, f"reduce {to_string(left)} {op.lexeme} {to_string(right)} -> {to_string(value)}")
            buffer[index - 1:index + 2] = [value]

        # a group carries its closing paren along
        while len(buffer) > 1 and is_token(buffer[-1], TokenType.RIGHT_PAREN):
            buffer.pop()
        if len(buffer) > 1:
            raise HiveError.of('InvalidOperation', line)
        return self.resolve_operand(buffer[0], line)

    def arithmetic(self, op: Token, left: Literal, right: Literal) -> Literal:
        for operand in (left, right):
            if not isinstance(operand, NUMERIC):
                raise HiveError.of('UnsupportedOperationType', op.line, type_name(operand))
        if op.type == TokenType.SLASH:
            if right.value == 0:
                raise HiveError.of('DivisionByZero', op.line)
            return FltLiteral(left.value / right.value)
        # the left operand decides the result type
        raw = ARITHMETIC[op.type](left.value, right.value)
        value = make_literal(type(left), raw)
        if value.value != raw:
            self.debug(2, f"line {op.line}: {raw} truncated to {to_string(value)}")
        return value

    # Comparison and concatenation

    def comparison(self, tok: Token) -> BoolLiteral:
        left = literal_from_token(tok)
        op = self.advance()
        right = self.expression(self.advance(), resolve_operators=False)
        if not isinstance(right, LITERAL_INSTANCES):
            raise HiveError.of('UnsupportedOperationType', op.line, type_name(right))
        compare = COMPARATORS.get(op.type)
        if compare is None:
            raise HiveError.of('UnsupportedOperator', op.line, op.lexeme)
        try:
            result = compare(left.value, right.value)
        except TypeError:
            raise HiveError.of('UnsupportedOperationType', op.line, type_name(right))
        self.debug(3, f"compare {to_string(left)} {op.lexeme} {to_string(right)} -> {bool(result)}")
        return BoolLiteral(bool(result))

    def concatenation(self, tok: Token) -> StrLiteral:
        buffer = self.collect(tok)
        while len(buffer) > 1:
            index = find_first(buffer, (TokenType.DOT,))
            if index is None or index == 0 or index == len(buffer) - 1:
                raise HiveError.of('InvalidOperation', tok.line)
            dot = buffer[index]
            left = self.resolve_operand(buffer[index - 1], dot.line)
            right = self.resolve_operand(buffer[index + 1], dot.line)
            if not isinstance(left, StrLiteral):
                raise HiveError.of('UnsupportedOperationType', dot.line, type_name(left))
            buffer[index - 1:index + 2] = [StrLiteral(left.value + to_string(right))]
        return self.resolve_operand(buffer[0], tok.line)

    # Declarations and assignment

    def declaration(self, type_tok: Token) -> None:
        name = self.advance()
        if name.type != TokenType.IDENTIFIER:
            raise HiveError.of('MalformedDeclaration', name.line, type_label(type_tok.type), name.lexeme)
        following = self.advance()
        if following.type == TokenType.LEFT_PAREN:
            self.position -= 1
            return self.function_declaration(type_tok, name)
        if following.type != TokenType.EQUAL:
            raise HiveError.of('MalformedDeclaration', following.line, name.lexeme, following.lexeme)
        value = self.expression(self.advance())
        variable = self.environment.declare(name, type_tok.type, value)
        self.debug(2, f"declare {variable!r}")
        return None

    def assignment(self, name: Token) -> Literal:
        if not isinstance(self.environment.lookup(name.lexeme), Variable):
            raise HiveError.of('VariableNotDeclared', name.line, name.lexeme)
        value = self.expression(self.advance(2))
        value = self.environment.assign(name, value)
        self.debug(2, f"assign {name.lexeme} = {to_string(value)}")
        return value

    # Functions

    def function_declaration(self, return_type: Token, name: Token) -> None:
        if return_type.type not in DECLARED_TYPES:
            raise HiveError.of('MalformedDeclaration', return_type.line, 'prog', return_type.lexeme)
        if name.type != TokenType.IDENTIFIER:
            raise HiveError.of('MalformedDeclaration', name.line, 'prog', name.lexeme)
        opening = self.advance()
        if opening.type != TokenType.LEFT_PAREN:
            raise HiveError.of('MalformedDeclaration', opening.line, name.lexeme, opening.lexeme)

        params: List[Variable] = []
        if self.look_ahead().type == TokenType.RIGHT_PAREN:
            self.advance()
        else:
            while True:
                param_type = self.advance()
                param_name = self.advance()
                if param_type.type not in DECLARED_TYPES or param_name.type != TokenType.IDENTIFIER:
                    raise HiveError.of('MalformedFunctionParameter', param_type.line, name.lexeme,
                                       f"{param_type.lexeme} {param_name.lexeme}".strip())
                params.append(Variable(param_name, None, param_type.type))
                separator = self.advance()
                if separator.type == TokenType.RIGHT_PAREN:
                    break
                if separator.type != TokenType.COMMA:
                    raise HiveError.of('MalformedFunctionParameter', separator.line, name.lexeme, separator.lexeme)

        brace = self.advance()
        if brace.type != TokenType.LEFT_BRACE:
            raise HiveError.of('MalformedDeclaration', brace.line, name.lexeme, brace.lexeme)
        body: List[Token] = []
        while self.look_ahead().type not in (TokenType.RIGHT_BRACE, TokenType.EOF):
            body.append(self.advance())
        closing = self.advance()
        if closing.type != TokenType.RIGHT_BRACE:
            raise HiveError.of('MalformedDeclaration', closing.line, name.lexeme, 'end of input')

        function = Function(name, return_type, params, body)
        self.environment.define_function(function)
        self.debug(2, f"define function {function!r}")
        return None

    def argument(self) -> Any:
        previous = self.in_arguments
        self.in_arguments = True
        try:
            return self.expression(self.advance())
        finally:
            self.in_arguments = previous

    def call(self, name: Token) -> Optional[Literal]:
        if name.type != TokenType.IDENTIFIER:
            raise HiveError.of('CallSyntaxError', name.line, 'run', 'a function name', name.lexeme)
        if self.look_ahead().type != TokenType.LEFT_PAREN:
            raise HiveError.of('CallSyntaxError', name.line, name.lexeme, '(', self.look_ahead().lexeme)
        function = self.find_function(name)
        self.advance()

        args: List[Any] = []
        if self.look_ahead().type != TokenType.RIGHT_PAREN:
            while True:
                args.append(self.argument())
                if self.look_ahead().type != TokenType.COMMA:
                    break
                self.advance()
        closing = self.look_ahead()
        if closing.type != TokenType.RIGHT_PAREN:
            raise HiveError.of('CallSyntaxError', closing.line, name.lexeme, ')', closing.lexeme)
        self.advance()
        return self.invoke(function, args, name.line)

    def find_function(self, name: Token) -> Function:
        # call scopes hold only parameters; functions come from the program scope
        top = self.interpreter.environment
        if self.environment is not top and self.environment.lookup(name.lexeme) is None:
            return top.get_function(name)
        return self.environment.get_function(name)

    def invoke(self, function: Function, args: List[Any], line: int) -> Optional[Literal]:
        if len(args) != len(function.params):
            raise HiveError.of('ArgumentCountMismatch', line, function.name.lexeme,
                               len(function.params), len(args))
        scope = Environment()
        for param, value in zip(function.params, args):
            try:
                value = check_value(value, param.declared_type)
            except TypeError:
                raise HiveError.of('ArgumentTypeError', line, param.name.lexeme,
                                   type_label(param.declared_type), type_name(value))
            scope.bind(Variable(param.name, value, param.declared_type))
        self.debug(2, f"call {function.name.lexeme}({', '.join(to_string(a) for a in args)})")
        body = Evaluator(function.body, self.interpreter, scope, allow_return=True)
        result = body.parse()
        self.debug(2, f"return {function.name.lexeme} -> {to_string(result)}")
        return result

    # Statements

    def reserved(self, tok: Token) -> None:
        if tok.type == TokenType.PRINT:
            value = self.expression(self.advance())
            self.interpreter.write(to_string(value))
        elif tok.type == TokenType.CLEAR:
            name = self.advance()
            self.environment.remove(name.lexeme)
            self.debug(2, f"clear {name.lexeme}")
        elif tok.lexeme.isalpha():
            self.debug(3, f"skip unsupported keyword {tok.lexeme!r} at line {tok.line}")
        return None


class Interpreter:
    """Runs HiveScript token streams against a top-level environment."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt', out: Optional[TextIO] = None):
        self.environment = Environment()
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None
        self.out = out
        self.result: Optional[Literal] = None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    def write(self, text: str):
        print(text, file=self.out if self.out is not None else sys.stdout)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def run(self, tokens: List[Token]) -> Optional[Literal]:
        try:
            return self.execute(tokens)
        finally:
            self.close()

    def run_source(self, source: str) -> Optional[Literal]:
        try:
            started = time.perf_counter()
            tokens = tokenize(source)
            if self.debug_level >= 1:
                self.debug(f"lexer: {len(tokens)} tokens in {(time.perf_counter() - started) * 1000:.3f} ms")
            return self.execute(tokens)
        finally:
            self.close()

    def execute(self, tokens: List[Token]) -> Optional[Literal]:
        started = time.perf_counter()
        evaluator = Evaluator(tokens, self, self.environment)
        self.result = evaluator.parse()
        if self.debug_level >= 1:
            self.debug(f"evaluator: {(time.perf_counter() - started) * 1000:.3f} ms")
            self.debug(f"environment: {self.environment!r}")
        return self.result


def run_program(source: str, debug_level: int = 0) -> Interpreter:
    """Lex and run a HiveScript program from a source string."""
    interpreter = Interpreter(debug_level=debug_level)
    interpreter.run_source(source)
    return interpreter


def run_file(file_path: str, debug_level: int = 0) -> Interpreter:
    """Lex and run a HiveScript file, returning the interpreter instance."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_program(source, debug_level=debug_level)
