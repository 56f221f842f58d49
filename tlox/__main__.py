"""CLI entry point for the tlox interpreter.

Usage:
    python -m tlox [-v|-vv|-vvv]               start an interactive session
    python -m tlox [-v...] <script>            run a script file
    python -m tlox --emit-ast <script>         write <script>.ast.json

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given file and emit an AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. The exit status tells the outcome apart:
0 success, 1 bad usage, 2 unreadable file, 3 scan error, 4 parse error,
5 runtime error.
"""

import argparse
import json
import sys
from enum import IntEnum
from pathlib import Path

from .ast_json import program_to_obj
from .errors import Reporter
from .parser import Parser
from .runner import Lox, Outcome
from .scanner import Scanner


class ExitCode(IntEnum):
    OK = 0
    BAD_USAGE = 1
    INVALID_FILE = 2
    SCAN_ERROR = 3
    PARSE_ERROR = 4
    RUNTIME_ERROR = 5


OUTCOME_EXIT_CODES = {
    Outcome.OK: ExitCode.OK,
    Outcome.SCAN_ERROR: ExitCode.SCAN_ERROR,
    Outcome.PARSE_ERROR: ExitCode.PARSE_ERROR,
    Outcome.RUNTIME_ERROR: ExitCode.RUNTIME_ERROR,
}


def read_source(path: str) -> str:
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def emit_ast(path: str) -> int:
    try:
        source = read_source(path)
    except (OSError, UnicodeDecodeError):
        print(f"Could not open file: {path}", file=sys.stderr)
        return ExitCode.INVALID_FILE
    reporter = Reporter()
    tokens = Scanner(source, reporter).scan_tokens()
    if reporter.had_scan_error:
        return ExitCode.SCAN_ERROR
    statements = Parser(tokens, reporter).parse()
    if reporter.had_parse_error:
        return ExitCode.PARSE_ERROR
    program_file = Path(path)
    out_path = program_file.with_name(program_file.name + '.ast.json')
    try:
        text = json.dumps(program_to_obj(statements), ensure_ascii=False, indent=2)
    except RecursionError:
        print(f"Could not emit AST for {path}: nesting too deep.", file=sys.stderr)
        return ExitCode.PARSE_ERROR
    with open(out_path, 'w', encoding='utf-8') as out:
        out.write(text)
    print(str(out_path))
    return ExitCode.OK


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog='tlox', description="tlox language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--emit-ast', metavar='SCRIPT', help='emit AST JSON for the given script')
    parser.add_argument('script', nargs='*', help='script file to run; omit for an interactive session')
    args = parser.parse_args(argv)

    if args.emit_ast and not args.script:
        return emit_ast(args.emit_ast)

    if args.emit_ast or len(args.script) > 1:
        print("Usage: tlox [script]", file=sys.stderr)
        return ExitCode.BAD_USAGE

    with Lox(debug_level=args.v) as lox:
        if not args.script:
            lox.run_prompt()
            return ExitCode.OK
        path = args.script[0]
        try:
            outcome = lox.run_file(path)
        except (OSError, UnicodeDecodeError):
            print(f"Could not open file: {path}", file=sys.stderr)
            return ExitCode.INVALID_FILE
        return OUTCOME_EXIT_CODES[outcome]


if __name__ == '__main__':
    sys.exit(main())
