from pathlib import Path

from hivescript.interpreter import Interpreter
from hivescript.lexer import tokenize

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_1_hello(capsys):
    with open(EXAMPLES / 'program_1.hive', 'r', encoding='utf-8') as f:
        source = f.read()
    tokens = tokenize(source)
    interp = Interpreter()
    interp.run(tokens)
    out = capsys.readouterr().out.strip()
    assert out == 'Hello HiveScript'
