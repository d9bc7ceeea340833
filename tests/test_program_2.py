from pathlib import Path

from hivescript.interpreter import Interpreter
from hivescript.lexer import tokenize

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_2_arithmetic(capsys):
    with open(EXAMPLES / 'program_2.hive', 'r', encoding='utf-8') as f:
        source = f.read()
    interp = Interpreter()
    interp.run(tokenize(source))
    out_lines = capsys.readouterr().out.strip().split('\n')
    # precedence, parentheses, division always yields flt, int promoted to flt
    assert out_lines == ['14', '20', '5.0', '3.0']
