"""CLI entry point for the HiveScript interpreter.

Usage:
    python -m hivescript [-v|-vv|-vvv] [--env] <program_file>
    python -m hivescript [-v...] --emit-tokens <program_file>
    python -m hivescript [-v...] [--env] --tokens <tokens_json_file>

Options:
  -v             Increase debug verbosity (can be repeated)
  --env          Print the final environment after a successful run
  --emit-tokens  Lex the given .hive file and emit a token JSON file
  --tokens       Execute a previously emitted token JSON file

Debug information, including lexer and evaluator timings, is written to
`debug.txt` in the current directory when verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path

from .errors import HiveError
from .interpreter import Interpreter
from .lexer import tokenize
from .token_json import tokens_to_obj, tokens_from_obj


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def print_environment(interpreter: Interpreter) -> None:
    for name, entry in interpreter.environment:
        print(f"{name}: {entry!r}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog='hivescript', description="HiveScript interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--env', action='store_true', help='print the final environment after the run')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-tokens', metavar='HIVE_FILE', help='emit token JSON for the given .hive file')
    group.add_argument('--tokens', metavar='TOKENS_JSON_FILE', help='execute a token stream from a JSON file')
    parser.add_argument('program', nargs='?', help='HiveScript program file (.hive) to execute')
    args = parser.parse_args(argv)

    # Emit tokens mode
    if args.emit_tokens:
        program_file = Path(args.emit_tokens)
        source = read_source(program_file)
        try:
            tokens = tokenize(source)
        except HiveError as e:
            print(str(e), file=sys.stderr)
            sys.exit(1)
        out_path = program_file.with_name(program_file.name + '.tokens.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(tokens_to_obj(tokens), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    if not args.tokens and not args.program:
        parser.error('missing program file; or use --emit-tokens/--tokens')

    tokens = None
    source = None
    if args.tokens:
        token_file = Path(args.tokens)
        try:
            tokens = tokens_from_obj(json.loads(read_source(token_file)))
        except ValueError as e:
            print(f"Error: invalid token file {token_file}: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        source = read_source(Path(args.program))

    interpreter = Interpreter(debug_level=args.v)
    try:
        if tokens is not None:
            interpreter.run(tokens)
        else:
            interpreter.run_source(source)
    except HiveError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    if args.env:
        print_environment(interpreter)


if __name__ == '__main__':
    main()
