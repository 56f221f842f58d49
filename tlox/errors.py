import sys
from typing import Any, List, Optional, TextIO

from tlox.tokens import Token, TokenType


def format_diagnostic(line: int, column: int, location: str, message: str) -> str:
    return f"[line: {line}, column: {column} at {location}] error: {message}"


def token_location(token: Token) -> str:
    if token.type == TokenType.EOF:
        return 'end'
    return token.lexeme


class LoxError(Exception):
    """Base type for every fault the pipeline can report."""
    def __init__(self, message: str, line: int, column: int, location: str):
        super().__init__(format_diagnostic(line, column, location, message))
        self.message = message
        self.line = line
        self.column = column
        self.location = location


class ScanError(LoxError):
    pass


class ParseError(LoxError):
    @classmethod
    def at(cls, token: Token, message: str) -> 'ParseError':
        return cls(message, token.line, token.column, token_location(token))


class LoxRuntimeError(LoxError):
    """Raised while evaluating; aborts the rest of the current run."""
    def __init__(self, token: Token, message: str):
        super().__init__(message, token.line, token.column, token_location(token))
        self.token = token


class Reporter:
    """Collects diagnostics for one session and echoes them to a stream.

    The flags are per run: a REPL calls `reset()` before each line so a
    bad line does not poison the ones after it.
    """
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.errors: List[LoxError] = []
        self.had_scan_error = False
        self.had_parse_error = False
        self.had_runtime_error = False

    def report(self, error: LoxError):
        if isinstance(error, ScanError):
            self.had_scan_error = True
        elif isinstance(error, ParseError):
            self.had_parse_error = True
        elif isinstance(error, LoxRuntimeError):
            self.had_runtime_error = True
        self.errors.append(error)
        print(str(error), file=self.stream or sys.stderr)

    @property
    def had_error(self) -> bool:
        return self.had_scan_error or self.had_parse_error or self.had_runtime_error

    def reset(self):
        self.errors = []
        self.had_scan_error = False
        self.had_parse_error = False
        self.had_runtime_error = False


# Statement execution returns None for normal completion, or one of the
# signals below. Loops consume Break/Continue, calls consume Return.

class BreakSignal:
    def __repr__(self) -> str:
        return 'break'


class ContinueSignal:
    def __repr__(self) -> str:
        return 'continue'


class ReturnSignal:
    """Carries the value of a `return` statement out to the call site."""
    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f'return {self.value!r}'


BREAK = BreakSignal()
CONTINUE = ContinueSignal()
