from pathlib import Path

from hivescript.interpreter import Interpreter
from hivescript.lexer import tokenize

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_5_reassign_compare_clear(capsys):
    with open(EXAMPLES / 'program_5.hive', 'r', encoding='utf-8') as f:
        source = f.read()
    interp = Interpreter()
    interp.run(tokenize(source))
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['2', 'true', 'false']
    assert 'count' not in interp.environment
    assert interp.environment.snapshot() == {'big': True}
