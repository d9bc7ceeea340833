import pytest

from hivescript.errors import HiveError
from hivescript.interpreter import run_program
from hivescript.types import Function, IntLiteral, FltLiteral, StrLiteral

ADD = 'prog int add(int a, int b) { return a + b; }\n'


def error_kind(source):
    with pytest.raises(HiveError) as excinfo:
        run_program(source)
    return excinfo.value.kind


def test_call_result_and_scope():
    interp = run_program(ADD + 'run add(2,3);')
    assert interp.result == IntLiteral(5)
    assert 'a' not in interp.environment
    assert 'b' not in interp.environment
    function = interp.environment.lookup('add')
    assert isinstance(function, Function)
    assert [p.name.lexeme for p in function.params] == ['a', 'b']
    # the body stays as raw tokens
    assert [t.lexeme for t in function.body] == ['return', 'a', '+', 'b', ';']


def test_argument_expressions(capsys):
    run_program(ADD + 'output run add(1 + 2, 3 * 4);\noutput run add((1 + 2) * 2, 1);')
    assert capsys.readouterr().out.split() == ['15', '7']


def test_function_without_parameters(capsys):
    run_program('prog str greet() { return "hi"; }\noutput run greet();')
    assert capsys.readouterr().out.strip() == 'hi'


def test_typed_declaration_form(capsys):
    run_program('int twice(int n) { return n * 2; }\noutput run twice(4);')
    assert capsys.readouterr().out.strip() == '8'


def test_no_access_to_caller_scope():
    assert error_kind('int g = 1;\nprog int f() { return g; }\nrun f();') == 'UndefinedVariable'


def test_each_call_gets_fresh_scope():
    source = (
        'prog int f(int n) { int local = n * 10; return local; }\n'
        'int a = run f(1);\n'
        'int b = run f(2);\n'
    )
    interp = run_program(source)
    assert interp.environment.snapshot()['a'] == 10
    assert interp.environment.snapshot()['b'] == 20


def test_return_stops_the_body(capsys):
    interp = run_program('prog int f() { return 1; output "unreachable"; }\nint x = run f();')
    assert capsys.readouterr().out == ''
    assert interp.environment.lookup('x').value == IntLiteral(1)


def test_body_output_and_missing_return(capsys):
    assert error_kind('prog int f() { output 1; }\nint x = run f();') == 'VariableTypeMismatch'
    assert capsys.readouterr().out.strip() == '1'


def test_argument_promotion():
    interp = run_program('prog flt same(flt x) { return x; }\nflt y = run same(3);')
    assert interp.environment.lookup('y').value == FltLiteral(3.0)


def test_argument_checks():
    assert error_kind(ADD + 'run add(1);') == 'ArgumentCountMismatch'
    assert error_kind(ADD + 'run add(1, 2, 3);') == 'ArgumentCountMismatch'
    assert error_kind(ADD + 'run add(1, "two");') == 'ArgumentTypeError'


def test_call_syntax():
    assert error_kind(ADD + 'run add;') == 'CallSyntaxError'
    assert error_kind(ADD + 'run add(1, 2;') == 'CallSyntaxError'
    assert error_kind('run nope(1);') == 'UndefinedFunction'


def test_malformed_parameters():
    assert error_kind('prog int f(int) { return 1; }') == 'MalformedFunctionParameter'
    assert error_kind('prog int f(x y) { return 1; }') == 'MalformedFunctionParameter'
    assert error_kind('prog int f(int a int b) { return 1; }') == 'MalformedFunctionParameter'


def test_malformed_function_declaration():
    assert error_kind('prog int f(int a) return a;') == 'MalformedDeclaration'
    assert error_kind('prog int f(int a) { return a;') == 'MalformedDeclaration'


def test_function_redefinition():
    assert error_kind(ADD + ADD) == 'VariableAlreadyDeclared'


def test_return_outside_function():
    assert error_kind('return 1;') == 'ReturnOutsideFunction'


def test_function_is_not_a_variable():
    assert error_kind(ADD + 'output add;') == 'UndefinedVariable'


def test_string_function():
    interp = run_program(
        'prog str wrap(str s) { return "[" . s . "]"; }\n'
        'str w = run wrap("x");'
    )
    assert interp.environment.lookup('w').value == StrLiteral('[x]')


def test_call_from_inside_a_body(capsys):
    source = ADD + (
        'prog int triple(int n) { int twice = run add(n, n); return run add(twice, n); }\n'
        'output run triple(4);'
    )
    run_program(source)
    assert capsys.readouterr().out.strip() == '12'


def test_body_still_cannot_see_program_variables():
    source = ADD + 'int g = 1;\nprog int f(int n) { return run add(n, g); }\nrun f(2);'
    assert error_kind(source) == 'UndefinedVariable'


def test_recursive_call_resolves_to_itself():
    # the inner call passes the wrong count, so reaching it means the name resolved
    assert error_kind('prog int f(int n) { return run f(n + 1, 1); }\nrun f(0);') == 'ArgumentCountMismatch'


def test_recursive_function_returning_early():
    interp = run_program(
        'prog int f(int n) { return n; run f(n + 1); }\n'
        'prog int g(int n) { return run f(n * 2); }\n'
        'int x = run g(3);'
    )
    assert interp.environment.lookup('x').value == IntLiteral(6)


def test_parameter_shadows_function_name():
    assert error_kind(ADD + 'prog int f(int add) { return run add(1, 2); }\nrun f(0);') == 'UndefinedFunction'
