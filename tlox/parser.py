"""Recursive-descent parser for tlox.

Grammar, lowest precedence first::

    program     -> declaration* EOF
    declaration -> fun_decl | var_decl | statement
    statement   -> print | block | if | while | for | break | continue
                 | return | ";" | expr_stmt
    expression  -> comma
    comma       -> assignment ( "," assignment )*
    assignment  -> IDENTIFIER "=" assignment | ternary
    ternary     -> logic_or ( "?" assignment ":" ternary )?
    logic_or    -> logic_and ( "or" logic_and )*
    logic_and   -> equality ( "and" equality )*
    equality    -> comparison ( ( "!=" | "==" ) comparison )*
    comparison  -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term        -> factor ( ( "-" | "+" ) factor )*
    factor      -> unary ( ( "/" | "*" ) unary )*
    unary       -> ( "!" | "-" | "++" | "--" ) unary | call
    call        -> primary ( "(" arguments? ")" )* ( "++" | "--" )*
    primary     -> NUMBER | STRING | "true" | "false" | "nil"
                 | IDENTIFIER | "(" expression ")"

A fault inside a declaration is reported, the parser skips ahead to the
next statement boundary and carries on, so a single pass reports every
independent syntax error. A `for` loop never reaches the interpreter as
such: it is rewritten into a block holding the initializer and a while
loop.
"""

from __future__ import annotations

from typing import List, Optional, Union

from .ast import (
    Assign, BinaryOp, Block, BreakStmt, Call, Comma, ContinueStmt, Crement,
    EmptyStmt, Expr, ExprStmt, FuncDecl, Grouping, IfStmt, Literal,
    LogicalAnd, LogicalOr, PrintStmt, ReturnStmt, Stmt, Ternary, UnaryOp,
    VarDecl, Variable, WhileStmt,
)
from .errors import ParseError, Reporter
from .tokens import Token, TokenType


MAX_ARGUMENTS = 255

# Tokens that start a new declaration or statement; synchronization stops here.
SYNC_TOKENS = {
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
}

STATEMENT_STARTS = SYNC_TOKENS | {
    TokenType.LEFT_BRACE,
    TokenType.BREAK,
    TokenType.CONTINUE,
    TokenType.SEMICOLON,
}


class Parser:
    def __init__(self, tokens: List[Token], reporter: Optional[Reporter] = None):
        self.tokens = tokens
        self.pos = 0
        self.reporter = reporter or Reporter()
        self.loop_depth = 0
        self.function_depth = 0

    # Entry points

    def parse(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.is_at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    def parse_repl(self) -> Union[List[Stmt], Expr, None]:
        """Parse one interactive line.

        A line that is a single expression without a terminating `;` is
        returned as an `Expr` so the caller can echo its value; anything
        else parses as a statement list. Returns None if the bare
        expression failed to parse.
        """
        if not self.is_bare_expression():
            return self.parse()
        try:
            expr = self.parse_expression()
            if not self.is_at_end():
                raise self.error(self.peek(), 'Expect end of expression.')
            return expr
        except ParseError:
            return None
        except RecursionError:
            self.error(self.peek(), 'Expression nesting too deep.')
            return None

    def is_bare_expression(self) -> bool:
        if self.is_at_end() or self.peek().type in STATEMENT_STARTS:
            return False
        last = self.tokens[-2] if len(self.tokens) >= 2 else self.tokens[-1]
        return last.type not in (TokenType.SEMICOLON, TokenType.RIGHT_BRACE)

    # Declarations

    def parse_declaration(self) -> Optional[Stmt]:
        try:
            if self.match(TokenType.FUN):
                return self.parse_function()
            if self.match(TokenType.VAR):
                return self.parse_var_decl()
            return self.parse_statement()
        except ParseError:
            self.synchronize()
            return None
        except RecursionError:
            self.error(self.peek(), 'Expression nesting too deep.')
            self.synchronize()
            return None

    def parse_function(self) -> FuncDecl:
        name = self.consume(TokenType.IDENTIFIER, 'Expect function name.')
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after function name.")
        params: List[Token] = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGUMENTS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGUMENTS} parameters.")
                params.append(self.consume(TokenType.IDENTIFIER, 'Expect parameter name.'))
                if not self.match(TokenType.COMMA):
                    break
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")
        self.consume(TokenType.LEFT_BRACE, "Expect '{' before function body.")
        # a loop outside the function does not make break/continue legal inside it
        saved_loop_depth = self.loop_depth
        self.loop_depth = 0
        self.function_depth += 1
        try:
            body = self.parse_block()
        finally:
            self.function_depth -= 1
            self.loop_depth = saved_loop_depth
        return FuncDecl(name, params, body)

    def parse_var_decl(self) -> VarDecl:
        name = self.consume(TokenType.IDENTIFIER, 'Expect variable name.')
        initializer: Optional[Expr] = None
        if self.match(TokenType.EQUAL):
            initializer = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return VarDecl(name, initializer)

    # Statements

    def parse_statement(self) -> Stmt:
        if self.match(TokenType.PRINT):
            return self.parse_print_stmt()
        if self.match(TokenType.LEFT_BRACE):
            return Block(self.parse_block())
        if self.match(TokenType.IF):
            return self.parse_if_stmt()
        if self.match(TokenType.WHILE):
            return self.parse_while_stmt()
        if self.match(TokenType.FOR):
            return self.parse_for_stmt()
        if self.match(TokenType.BREAK):
            return self.parse_loop_jump(BreakStmt)
        if self.match(TokenType.CONTINUE):
            return self.parse_loop_jump(ContinueStmt)
        if self.match(TokenType.RETURN):
            return self.parse_return_stmt()
        if self.match(TokenType.SEMICOLON):
            return EmptyStmt()
        return self.parse_expr_stmt()

    def parse_print_stmt(self) -> PrintStmt:
        value = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return PrintStmt(value)

    def parse_expr_stmt(self) -> ExprStmt:
        expr = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ExprStmt(expr)

    def parse_block(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def parse_if_stmt(self) -> IfStmt:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")
        then_branch = self.parse_statement()
        else_branch = None
        if self.match(TokenType.ELSE):
            else_branch = self.parse_statement()
        return IfStmt(condition, then_branch, else_branch)

    def parse_while_stmt(self) -> WhileStmt:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        body = self.parse_loop_body()
        return WhileStmt(condition, body)

    def parse_for_stmt(self) -> Stmt:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")
        initializer: Optional[Stmt]
        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.parse_var_decl()
        else:
            initializer = self.parse_expr_stmt()

        condition: Optional[Expr] = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment: Optional[Expr] = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.parse_loop_body()
        if condition is None:
            condition = Literal(True)
        loop = WhileStmt(condition, body, increment)
        if initializer is None:
            return loop
        return Block([initializer, loop])

    def parse_loop_body(self) -> Stmt:
        self.loop_depth += 1
        try:
            return self.parse_statement()
        finally:
            self.loop_depth -= 1

    def parse_loop_jump(self, node_type):
        keyword = self.previous()
        if self.loop_depth == 0:
            self.error(keyword, f"Must be inside a loop to use '{keyword.lexeme}'.")
        self.consume(TokenType.SEMICOLON, f"Expect ';' after '{keyword.lexeme}'.")
        return node_type(keyword)

    def parse_return_stmt(self) -> ReturnStmt:
        keyword = self.previous()
        if self.function_depth == 0:
            self.error(keyword, "Can't return from top-level code.")
        value = None
        if not self.check(TokenType.SEMICOLON):
            value = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return ReturnStmt(keyword, value)

    # Expressions

    def parse_expression(self) -> Expr:
        return self.parse_comma()

    def parse_comma(self) -> Expr:
        expr = self.parse_assignment()
        while self.match(TokenType.COMMA):
            operator = self.previous()
            right = self.parse_assignment()
            expr = Comma(expr, operator, right)
        return expr

    def parse_assignment(self) -> Expr:
        expr = self.parse_ternary()
        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.parse_assignment()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            # reported, but not worth resynchronizing over
            self.error(equals, 'Invalid assignment target.')
        return expr

    def parse_ternary(self) -> Expr:
        expr = self.parse_logic_or()
        if self.match(TokenType.QUESTION):
            then_branch = self.parse_assignment()
            self.consume(TokenType.COLON, "Expect ':' after then branch of conditional expression.")
            else_branch = self.parse_ternary()
            return Ternary(expr, then_branch, else_branch)
        return expr

    def parse_logic_or(self) -> Expr:
        expr = self.parse_logic_and()
        while self.match(TokenType.OR):
            operator = self.previous()
            right = self.parse_logic_and()
            expr = LogicalOr(expr, operator, right)
        return expr

    def parse_logic_and(self) -> Expr:
        expr = self.parse_equality()
        while self.match(TokenType.AND):
            operator = self.previous()
            right = self.parse_equality()
            expr = LogicalAnd(expr, operator, right)
        return expr

    def parse_equality(self) -> Expr:
        return self.parse_binary(self.parse_comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def parse_comparison(self) -> Expr:
        return self.parse_binary(
            self.parse_term,
            TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL,
        )

    def parse_term(self) -> Expr:
        return self.parse_binary(self.parse_factor, TokenType.MINUS, TokenType.PLUS)

    def parse_factor(self) -> Expr:
        return self.parse_binary(self.parse_unary, TokenType.SLASH, TokenType.STAR)

    def parse_binary(self, operand, *operators: TokenType) -> Expr:
        # left-associative: fold each operator/operand pair onto the left
        expr = operand()
        while self.match(*operators):
            op = self.previous()
            right = operand()
            expr = BinaryOp(expr, op, right)
        return expr

    def parse_unary(self) -> Expr:
        if self.match(TokenType.BANG, TokenType.MINUS):
            op = self.previous()
            return UnaryOp(op, self.parse_unary())
        if self.match(TokenType.PLUS_PLUS, TokenType.MINUS_MINUS):
            op = self.previous()
            return Crement(op, self.parse_unary())
        return self.parse_call()

    def parse_call(self) -> Expr:
        expr = self.parse_primary()
        while self.match(TokenType.LEFT_PAREN):
            expr = self.finish_call(expr)
        while self.match(TokenType.PLUS_PLUS, TokenType.MINUS_MINUS):
            expr = Crement(self.previous(), expr)
        return expr

    def finish_call(self, callee: Expr) -> Call:
        arguments: List[Expr] = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGUMENTS} arguments.")
                arguments.append(self.parse_assignment())
                if not self.match(TokenType.COMMA):
                    break
        paren = self.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return Call(callee, paren, arguments)

    def parse_primary(self) -> Expr:
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(None)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)
        if self.match(TokenType.IDENTIFIER):
            return Variable(self.previous())
        if self.match(TokenType.LEFT_PAREN):
            expr = self.parse_expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)
        raise self.error(self.peek(), 'Expect expression.')

    # Token helpers

    def synchronize(self):
        self.advance()
        while not self.is_at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return
            if self.peek().type in SYNC_TOKENS:
                return
            self.advance()

    def consume(self, token_type: TokenType, message: str) -> Token:
        if self.check(token_type):
            return self.advance()
        raise self.error(self.peek(), message)

    def match(self, *token_types: TokenType) -> bool:
        for token_type in token_types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def check(self, token_type: TokenType) -> bool:
        if self.is_at_end():
            return False
        return self.peek().type == token_type

    def advance(self) -> Token:
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def is_at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[max(0, self.pos - 1)]

    def error(self, token: Token, message: str) -> ParseError:
        """Report a parse fault and hand it back for the caller to raise if fatal."""
        error = ParseError.at(token, message)
        self.reporter.report(error)
        return error


def parse_program(tokens: List[Token], reporter: Optional[Reporter] = None) -> List[Stmt]:
    """Parse a token list into statements, reporting faults to `reporter`."""
    return Parser(tokens, reporter).parse()
