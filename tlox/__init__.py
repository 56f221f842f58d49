# tlox language package
# This package provides a scanner, parser and tree-walking interpreter for tlox.
from .errors import LoxError, LoxRuntimeError, ParseError, Reporter, ScanError
from .interpreter import Interpreter
from .parser import Parser, parse_program
from .runner import Lox, Outcome, run_program
from .scanner import Scanner, tokenize

__all__ = [
    'Interpreter',
    'Lox',
    'LoxError',
    'LoxRuntimeError',
    'Outcome',
    'ParseError',
    'Parser',
    'Reporter',
    'ScanError',
    'Scanner',
    'parse_program',
    'run_program',
    'tokenize',
]
