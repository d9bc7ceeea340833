from typing import Any, Dict, Iterator, Optional, Tuple, Union

from .errors import HiveError
from .tokens import Token
from .types import Function, Literal, Variable, check_value, type_label, type_name


Entry = Union[Variable, Function]


class Environment:
    """Name -> Variable/Function mapping for one program run or one call.

    There is no parent scope: a function call gets a fresh environment
    seeded only with its parameters.
    """
    def __init__(self):
        self.values: Dict[str, Entry] = {}

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def __iter__(self) -> Iterator[Tuple[str, Entry]]:
        return iter(self.values.items())

    def __len__(self) -> int:
        return len(self.values)

    def __repr__(self) -> str:
        entries = ', '.join(f"{k}: {v!r}" for k, v in self.values.items())
        return '{' + entries + '}'

    def declare(self, name: Token, declared_type, value: Any) -> Variable:
        if name.lexeme in self.values:
            raise HiveError.of('VariableAlreadyDeclared', name.line, name.lexeme)
        try:
            value = check_value(value, declared_type)
        except TypeError:
            raise HiveError.of('VariableTypeMismatch', name.line,
                               name.lexeme, type_label(declared_type), type_name(value))
        variable = Variable(name, value, declared_type)
        self.values[name.lexeme] = variable
        return variable

    def define_function(self, function: Function) -> Function:
        name = function.name
        if name.lexeme in self.values:
            raise HiveError.of('VariableAlreadyDeclared', name.line, name.lexeme)
        self.values[name.lexeme] = function
        return function

    def bind(self, variable: Variable):
        """Bind an already type-checked call argument."""
        self.values[variable.name.lexeme] = variable

    def get_variable(self, name: Token) -> Variable:
        entry = self.values.get(name.lexeme)
        if not isinstance(entry, Variable):
            raise HiveError.of('UndefinedVariable', name.line, name.lexeme)
        return entry

    def get_function(self, name: Token) -> Function:
        entry = self.values.get(name.lexeme)
        if not isinstance(entry, Function):
            raise HiveError.of('UndefinedFunction', name.line, name.lexeme)
        return entry

    def lookup(self, name: str) -> Optional[Entry]:
        return self.values.get(name)

    def assign(self, name: Token, value: Any) -> Literal:
        entry = self.values.get(name.lexeme)
        if not isinstance(entry, Variable):
            raise HiveError.of('VariableNotDeclared', name.line, name.lexeme)
        try:
            value = check_value(value, entry.declared_type)
        except TypeError:
            raise HiveError.of('VariableTypeMismatch', name.line,
                               name.lexeme, type_label(entry.declared_type), type_name(value))
        entry.value = value
        return value

    def remove(self, name: str):
        self.values.pop(name, None)

    def snapshot(self) -> Dict[str, Any]:
        """Plain-Python view of the scope: variables map to native values."""
        result: Dict[str, Any] = {}
        for key, entry in self.values.items():
            if isinstance(entry, Variable):
                result[key] = entry.value.value if entry.value is not None else None
            else:
                result[key] = entry
        return result
