"""Runs source units through scanner, parser and interpreter.

A `Lox` session owns one reporter and one interpreter, so the global
environment persists across `run` calls; this is what lets a REPL line
use a variable defined on an earlier line. Fault flags are reset at the
start of every unit.
"""

from __future__ import annotations

import builtins
from enum import Enum
from typing import Optional, TextIO

from .errors import LoxRuntimeError, Reporter
from .interpreter import Interpreter
from .parser import Parser
from .scanner import Scanner
from .values import stringify


class Outcome(Enum):
    OK = 'ok'
    SCAN_ERROR = 'scan error'
    PARSE_ERROR = 'parse error'
    RUNTIME_ERROR = 'runtime error'


class Lox:
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt', err: Optional[TextIO] = None):
        self.reporter = Reporter(err)
        self.interpreter = Interpreter(debug_level=debug_level, debug_file=debug_file)

    def __enter__(self) -> 'Lox':
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self.interpreter.close()

    def run(self, source: str) -> Outcome:
        self.reporter.reset()
        tokens = Scanner(source, self.reporter).scan_tokens()
        if self.reporter.had_scan_error:
            return Outcome.SCAN_ERROR
        statements = Parser(tokens, self.reporter).parse()
        if self.reporter.had_parse_error:
            return Outcome.PARSE_ERROR
        try:
            self.interpreter.run(statements)
        except LoxRuntimeError as e:
            self.reporter.report(e)
            return Outcome.RUNTIME_ERROR
        return Outcome.OK

    def run_line(self, line: str) -> Outcome:
        """Run one REPL line, echoing the value of a bare expression."""
        self.reporter.reset()
        tokens = Scanner(line, self.reporter).scan_tokens()
        if self.reporter.had_scan_error:
            return Outcome.SCAN_ERROR
        parsed = Parser(tokens, self.reporter).parse_repl()
        if self.reporter.had_parse_error or parsed is None:
            return Outcome.PARSE_ERROR
        try:
            if isinstance(parsed, list):
                self.interpreter.run(parsed)
            else:
                print(stringify(self.interpreter.evaluate_expression(parsed)))
        except LoxRuntimeError as e:
            self.reporter.report(e)
            return Outcome.RUNTIME_ERROR
        return Outcome.OK

    def run_file(self, path: str) -> Outcome:
        """Run a whole source file. OSError or UnicodeDecodeError propagates if it can't be read."""
        with open(path, 'r', encoding='utf-8') as f:
            source = f.read()
        return self.run(source)

    def run_prompt(self, prompt: str = '> '):
        """Read and run lines until end of input."""
        while True:
            try:
                line = builtins.input(prompt)
            except EOFError:
                print()
                return
            self.run_line(line)


def run_program(source: str, debug_level: int = 0) -> Outcome:
    """Convenience function to run a tlox program from a source string."""
    with Lox(debug_level=debug_level) as lox:
        return lox.run(source)
