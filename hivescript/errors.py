from typing import Any, Callable, Dict, Optional


MESSAGES: Dict[str, Callable[..., str]] = {
    'UnterminatedString': lambda: 'Unterminated string.',
    'UndefinedVariable': lambda name: f'Variable {name} is not defined',
    'VariableNotDeclared': lambda name: f'Variable {name} has not been declared',
    'VariableAlreadyDeclared': lambda name: f'Variable {name} is already defined',
    'VariableTypeMismatch': lambda name, expected, got: f'Variable {name} type is {expected}, but got {got}',
    'UnsupportedOperationType': lambda value_type: f'{value_type} is not valid for this operation.',
    'UnsupportedOperator': lambda op: f'Attempted to use unsupported operator {op} in a binary operation',
    'ReturnOutsideFunction': lambda: 'Return statement outside of function.',
    'CallSyntaxError': lambda name, expected, got: f"Expected {expected!r} in call to {name}, but got {got!r}",
    'MalformedDeclaration': lambda name, got: f'Malformed declaration of {name}: unexpected {got!r}',
    'MalformedFunctionParameter': lambda name, got: f'Malformed parameter in declaration of {name}: {got!r}',
    'InvalidOperation': lambda: 'Invalid operation.',
    'UndefinedFunction': lambda name: f'Function {name} is not defined',
    'ArgumentCountMismatch': lambda name, expected, got: f'Function {name} expects {expected} arguments, but got {got}.',
    'ArgumentTypeError': lambda name, expected, got: f'Argument {name} expected {expected}, but got {got}.',
    'DivisionByZero': lambda: 'Division by zero.',
    'UnterminatedParenthesis': lambda: "Missing ')' in expression.",
}

HINTS: Dict[str, str] = {
    'UnsupportedOperationType': "You likely are using a value that cannot be 'just' added with regular operators, like a string.",
    'VariableTypeMismatch': 'You likely attempted to assign a value with a type that does not match.',
    'ReturnOutsideFunction': 'You may have placed a return statement outside of a function. Make sure you are returning inside of a function.',
    'ArgumentTypeError': 'You likely attempted to pass a value with a type that does not match, or maybe you forgot to pass an argument.',
    'ArgumentCountMismatch': 'Check that the call passes one value for every declared parameter.',
    'UnterminatedString': 'Close the string with a matching double quote.',
    'InvalidOperation': "Strings can only be joined with '.'.",
}


def format_error(kind: str, *args: Any) -> str:
    """Render the human-readable message for an error kind."""
    return MESSAGES[kind](*args)


class HiveError(Exception):
    """Fatal HiveScript diagnostic; aborts the whole program run."""
    def __init__(self, kind: str, message: str, line: Optional[int] = None, hint: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.line = line
        self.hint = hint

    @classmethod
    def of(cls, kind: str, line: Optional[int], *args: Any) -> 'HiveError':
        return cls(kind, format_error(kind, *args), line, HINTS.get(kind))

    def __str__(self) -> str:
        where = f"Error at line {self.line}" if self.line is not None else "Error"
        text = f"{where}: {self.message}"
        if self.hint:
            text += f"\n{self.hint}"
        return text


class ReturnSignal(Exception):
    """Internal exception to unwind a function body on return."""
    def __init__(self, value: Any):
        super().__init__('return')
        self.value = value
