# HiveScript language package
# This package provides a lexer and a fused parser/evaluator for HiveScript.
from .errors import HiveError
from .interpreter import run_program, run_file, Interpreter
from .lexer import tokenize

__all__ = [
    'run_program',
    'run_file',
    'Interpreter',
    'HiveError',
    'tokenize',
]
