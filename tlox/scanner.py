"""Lexical scanner for tlox source text.

The scanner makes a single forward pass over the source with one and two
characters of lookahead. Faults (unexpected characters, unterminated
strings or block comments) are handed to the reporter and scanning
carries on, so one run surfaces every lexical problem in the input. The
returned token list always ends with exactly one EOF token.
"""

from __future__ import annotations

from typing import List, Optional

from .errors import Reporter, ScanError
from .tokens import KEYWORDS, Literal, Token, TokenType


SINGLE_CHAR_TOKENS = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    ';': TokenType.SEMICOLON,
    '*': TokenType.STAR,
    '?': TokenType.QUESTION,
    ':': TokenType.COLON,
}

# first char -> (second char, combined type, single type)
TWO_CHAR_TOKENS = {
    '!': ('=', TokenType.BANG_EQUAL, TokenType.BANG),
    '=': ('=', TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    '<': ('=', TokenType.LESS_EQUAL, TokenType.LESS),
    '>': ('=', TokenType.GREATER_EQUAL, TokenType.GREATER),
    '+': ('+', TokenType.PLUS_PLUS, TokenType.PLUS),
    '-': ('-', TokenType.MINUS_MINUS, TokenType.MINUS),
}

ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '"': '"',
    '\\': '\\',
}


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def is_alpha(c: str) -> bool:
    return ('a' <= c <= 'z') or ('A' <= c <= 'Z') or c == '_'


def is_alphanumeric(c: str) -> bool:
    return is_alpha(c) or is_digit(c)


class Scanner:
    def __init__(self, source: str, reporter: Optional[Reporter] = None):
        self.source = source
        self.reporter = reporter or Reporter()
        self.tokens: List[Token] = []
        self.start = 0
        self.current = 0
        self.line = 1
        self.column = 1
        self.start_line = 1
        self.start_column = 1

    def scan_tokens(self) -> List[Token]:
        while not self.is_at_end():
            self.start = self.current
            self.start_line = self.line
            self.start_column = self.column
            self.scan_token()
        self.tokens.append(Token(TokenType.EOF, '', None, self.line, self.column))
        return self.tokens

    def scan_token(self):
        c = self.advance()
        if c in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[c])
            return
        if c in TWO_CHAR_TOKENS:
            second, combined, single = TWO_CHAR_TOKENS[c]
            self.add_token(combined if self.match(second) else single)
            return
        if c == '/':
            if self.match('/'):
                while self.peek() != '\n' and not self.is_at_end():
                    self.advance()
            elif self.match('*'):
                self.block_comment()
            else:
                self.add_token(TokenType.SLASH)
            return
        if c in (' ', '\r', '\t', '\n'):
            return
        if c == '"':
            self.string()
            return
        if is_digit(c):
            self.number()
            return
        if is_alpha(c):
            self.identifier()
            return
        self.error(c, 'Unexpected character.')

    def block_comment(self):
        while not self.is_at_end():
            if self.peek() == '*' and self.peek_next() == '/':
                self.advance()
                self.advance()
                return
            self.advance()
        self.error('/*', 'Unterminated block comment.')

    def string(self):
        chars: List[str] = []
        while self.peek() != '"' and not self.is_at_end():
            c = self.advance()
            if c == '\\' and not self.is_at_end():
                escaped = self.advance()
                chars.append(ESCAPES.get(escaped, escaped))
            else:
                chars.append(c)
        if self.is_at_end():
            self.error('"', 'Unterminated string.')
            return
        # closing quote
        self.advance()
        self.add_token(TokenType.STRING, ''.join(chars))

    def number(self):
        while is_digit(self.peek()):
            self.advance()
        if self.peek() == '.' and is_digit(self.peek_next()):
            self.advance()
            while is_digit(self.peek()):
                self.advance()
        self.add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def identifier(self):
        while is_alphanumeric(self.peek()):
            self.advance()
        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def advance(self) -> str:
        c = self.source[self.current]
        self.current += 1
        if c == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return c

    def match(self, expected: str) -> bool:
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.advance()
        return True

    def peek(self) -> str:
        if self.is_at_end():
            return '\0'
        return self.source[self.current]

    def peek_next(self) -> str:
        if self.current + 1 >= len(self.source):
            return '\0'
        return self.source[self.current + 1]

    def is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def add_token(self, token_type: TokenType, literal: Literal = None):
        text = self.source[self.start:self.current]
        self.tokens.append(Token(token_type, text, literal, self.start_line, self.start_column))

    def error(self, location: str, message: str):
        self.reporter.report(ScanError(message, self.start_line, self.start_column, location))


def tokenize(source: str, reporter: Optional[Reporter] = None) -> List[Token]:
    """Scan `source` into tokens, reporting faults to `reporter`."""
    return Scanner(source, reporter).scan_tokens()
