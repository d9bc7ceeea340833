import pytest

from hivescript.environment import Environment
from hivescript.errors import HiveError
from hivescript.interpreter import run_program
from hivescript.tokens import Token, TokenType
from hivescript.types import IntLiteral, FltLiteral, StrLiteral


def error_kind(source):
    with pytest.raises(HiveError) as excinfo:
        run_program(source)
    return excinfo.value.kind


def test_int_promoted_to_flt():
    interp = run_program('flt x = 3;')
    assert interp.environment.lookup('x').value == FltLiteral(3.0)


def test_flt_not_demoted_to_int():
    assert error_kind('int x = 3.5;') == 'VariableTypeMismatch'


def test_redeclaration():
    assert error_kind('int x = 1; int x = 2;') == 'VariableAlreadyDeclared'
    assert error_kind('int x = 1; str x = "a";') == 'VariableAlreadyDeclared'


def test_assign_to_undeclared():
    assert error_kind('y = 1;') == 'VariableNotDeclared'
    # checked before the right-hand side is evaluated
    assert error_kind('y = z;') == 'VariableNotDeclared'


def test_assignment_keeps_declared_type():
    interp = run_program('flt x = 1.5; x = 2;')
    variable = interp.environment.lookup('x')
    assert variable.value == FltLiteral(2.0)
    assert variable.declared_type == TokenType.FLOAT_TYPE
    assert error_kind('int x = 1; x = "a";') == 'VariableTypeMismatch'


def test_assignment_is_statement_value():
    interp = run_program('int x = 1; x = x + 41;')
    assert interp.result == IntLiteral(42)


def test_clear_removes_variable():
    assert error_kind('int x = 1; clear x; output x;') == 'UndefinedVariable'
    assert error_kind('int x = 1; clear x; x = 2;') == 'VariableNotDeclared'
    interp = run_program('clear nothing;')
    assert len(interp.environment) == 0


def test_clear_allows_redeclaration():
    interp = run_program('int x = 1; clear x; str x = "again";')
    assert interp.environment.lookup('x').value == StrLiteral('again')


def test_undefined_reference():
    assert error_kind('output missing;') == 'UndefinedVariable'


def test_declaration_without_value():
    assert error_kind('int x;') == 'MalformedDeclaration'


def test_environment_direct_use():
    env = Environment()
    name = Token(TokenType.IDENTIFIER, 'n', None, 1)
    env.declare(name, TokenType.INTEGER_TYPE, IntLiteral(1))
    assert 'n' in env
    assert env.assign(name, IntLiteral(5)) == IntLiteral(5)
    assert env.get_variable(name).value == IntLiteral(5)
    with pytest.raises(HiveError) as excinfo:
        env.declare(name, TokenType.INTEGER_TYPE, IntLiteral(2))
    assert excinfo.value.kind == 'VariableAlreadyDeclared'
    env.remove('n')
    assert 'n' not in env
    with pytest.raises(HiveError) as excinfo:
        env.get_variable(name)
    assert excinfo.value.kind == 'UndefinedVariable'
