"""Tree-walking evaluator for tlox.

The interpreter walks the AST produced by the parser. The current scope is
never stored on the interpreter: every `execute`/`evaluate` call receives
the environment it runs in, and a nested scope is simply a fresh child
environment passed down, so leaving a block, loop body or call by any
route (normal completion, a propagating fault, break/continue/return)
automatically returns to the caller's scope.

Statement execution returns None on normal completion or one of the
signals from `errors` (BREAK, CONTINUE, ReturnSignal). Loops consume
break/continue, function calls consume returns.
"""

from __future__ import annotations

from typing import Any, List, Optional, TextIO

from .ast import (
    Assign, BinaryOp, Block, BreakStmt, Call, Comma, ContinueStmt, Crement,
    EmptyStmt, Expr, ExprStmt, FuncDecl, Grouping, IfStmt, Literal,
    LogicalAnd, LogicalOr, PrintStmt, ReturnStmt, Stmt, Ternary,
    UnaryOp, VarDecl, Variable, WhileStmt,
)
from .callable import LoxCallable, LoxFunction
from .environment import Environment
from .errors import BREAK, CONTINUE, BreakSignal, LoxRuntimeError, ReturnSignal
from .std import define_natives
from .tokens import Token, TokenType
from .values import is_equal, is_number, is_truthy, stringify


class Interpreter:
    """Core interpreter that executes tlox statements."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.global_env = Environment()
        self.debug_level = debug_level
        self.debug_fp: Optional[TextIO] = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None
        self.load_standard_module()

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def load_standard_module(self):
        define_natives(self.global_env)

    # Public API
    def run(self, statements: List[Stmt]):
        """Execute a program in the global scope.

        The first runtime fault aborts the run and propagates to the
        caller as a `LoxRuntimeError`.
        """
        self.debug(f"run {len(statements)} statement(s)")
        try:
            self.execute_block(statements, self.global_env)
        except LoxRuntimeError as e:
            self.debug(f"runtime error: {e}")
            raise
        self.debug("run finished")

    def evaluate_expression(self, expr: Expr) -> Any:
        """Evaluate a bare REPL expression in the global scope."""
        return self.evaluate(expr, self.global_env)

    def execute_block(self, statements: List[Stmt], env: Environment) -> Any:
        for stmt in statements:
            res = self.execute(stmt, env)
            # propagate break/continue/return to the enclosing construct
            if res is not None:
                return res
        return None

    def execute_scoped(self, stmt: Stmt, env: Environment) -> Any:
        return self.execute(stmt, Environment(parent=env))

    def execute(self, node: Stmt, env: Environment) -> Any:
        if isinstance(node, ExprStmt):
            self.evaluate(node.expr, env)
            return None
        if isinstance(node, PrintStmt):
            value = self.evaluate(node.expr, env)
            print(stringify(value))
            return None
        if isinstance(node, VarDecl):
            value = self.evaluate(node.initializer, env) if node.initializer is not None else None
            env.define(node.name.lexeme, value)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name.lexeme} = {stringify(value)}")
            return None
        if isinstance(node, Block):
            return self.execute_block(node.statements, Environment(parent=env))
        if isinstance(node, IfStmt):
            cond = self.evaluate(node.condition, env)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {stringify(cond)} -> {truthy}")
            if truthy:
                return self.execute_scoped(node.then_branch, env)
            if node.else_branch is not None:
                return self.execute_scoped(node.else_branch, env)
            return None
        if isinstance(node, WhileStmt):
            return self.execute_while(node, env)
        if isinstance(node, BreakStmt):
            return BREAK
        if isinstance(node, ContinueStmt):
            return CONTINUE
        if isinstance(node, ReturnStmt):
            value = self.evaluate(node.value, env) if node.value is not None else None
            return ReturnSignal(value)
        if isinstance(node, FuncDecl):
            env.define(node.name.lexeme, LoxFunction(node, env))
            if self.debug_level >= 2:
                self.debug(f"define function {node.name.lexeme}")
            return None
        if isinstance(node, EmptyStmt):
            return None
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def execute_while(self, node: WhileStmt, env: Environment) -> Any:
        while True:
            cond = self.evaluate(node.condition, env)
            if self.debug_level >= 3:
                self.debug(f"loop condition {stringify(cond)}")
            if not is_truthy(cond):
                break
            res = self.execute_scoped(node.body, env)
            if isinstance(res, BreakSignal):
                break
            if isinstance(res, ReturnSignal):
                return res
            # normal completion or continue: the increment still runs
            if node.increment is not None:
                self.evaluate(node.increment, env)
        return None

    def evaluate(self, node: Expr, env: Environment) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression, env)
        if isinstance(node, Variable):
            return env.get(node.name)
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            env.assign(node.name, value)
            return value
        if isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand, env)
            if node.operator.type == TokenType.BANG:
                return not is_truthy(operand)
            if node.operator.type == TokenType.MINUS:
                self.check_number_operand(node.operator, operand)
                return -operand
            raise LoxRuntimeError(node.operator, f"Unsupported unary operator '{node.operator.lexeme}'.")
        if isinstance(node, (BinaryOp, LogicalOr, LogicalAnd, Comma)):
            # chains are built by a loop in the parser and nest to the left
            try:
                return self.evaluate_chain(node, env)
            except RecursionError:
                raise LoxRuntimeError(node.operator, 'Stack overflow.') from None
        if isinstance(node, Ternary):
            if is_truthy(self.evaluate(node.condition, env)):
                return self.evaluate(node.then_branch, env)
            return self.evaluate(node.else_branch, env)
        if isinstance(node, Crement):
            try:
                return self.evaluate_crement(node, env)
            except RecursionError:
                raise LoxRuntimeError(node.operator, 'Stack overflow.') from None
        if isinstance(node, Call):
            try:
                callee = self.evaluate(node.callee, env)
            except RecursionError:
                raise LoxRuntimeError(node.paren, 'Stack overflow.') from None
            args = [self.evaluate(arg, env) for arg in node.arguments]
            return self.call_function(callee, args, node.paren)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def evaluate_chain(self, node: Expr, env: Environment) -> Any:
        left = self.evaluate(node.left, env)
        if isinstance(node, LogicalOr):
            return left if is_truthy(left) else self.evaluate(node.right, env)
        if isinstance(node, LogicalAnd):
            return self.evaluate(node.right, env) if is_truthy(left) else left
        right = self.evaluate(node.right, env)
        if isinstance(node, Comma):
            return right
        return self.apply_binary_op(node.operator, left, right)

    def evaluate_crement(self, node: Crement, env: Environment) -> Any:
        delta = 1.0 if node.operator.type == TokenType.PLUS_PLUS else -1.0
        if isinstance(node.target, Variable):
            value = env.get(node.target.name)
            self.check_number_operand(node.operator, value)
            updated = value + delta
            env.assign(node.target.name, updated)
            return updated
        # not an lvalue: compute the result, nothing to store it in
        value = self.evaluate(node.target, env)
        self.check_number_operand(node.operator, value)
        return value + delta

    def call_function(self, callee: Any, args: List[Any], paren: Token) -> Any:
        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(paren, 'Can only call functions.')
        if len(args) != callee.arity():
            raise LoxRuntimeError(paren, f"Expected {callee.arity()} arguments but got {len(args)}.")
        try:
            return callee.call(self, args)
        except RecursionError:
            raise LoxRuntimeError(paren, 'Stack overflow.') from None

    def apply_binary_op(self, operator: Token, a: Any, b: Any) -> Any:
        op = operator.type
        if op == TokenType.PLUS:
            if is_number(a) and is_number(b):
                return a + b
            if isinstance(a, str) and isinstance(b, str):
                return a + b
            raise LoxRuntimeError(operator, 'Operands must be two numbers or two strings.')
        if op == TokenType.EQUAL_EQUAL:
            return is_equal(a, b)
        if op == TokenType.BANG_EQUAL:
            return not is_equal(a, b)

        self.check_number_operands(operator, a, b)
        if op == TokenType.MINUS:
            return a - b
        if op == TokenType.STAR:
            return a * b
        if op == TokenType.SLASH:
            if b == 0.0:
                raise LoxRuntimeError(operator, 'Division by zero.')
            return a / b
        if op == TokenType.GREATER:
            return a > b
        if op == TokenType.GREATER_EQUAL:
            return a >= b
        if op == TokenType.LESS:
            return a < b
        if op == TokenType.LESS_EQUAL:
            return a <= b
        raise LoxRuntimeError(operator, f"Unknown operator '{operator.lexeme}'.")

    def check_number_operand(self, operator: Token, operand: Any):
        if not is_number(operand):
            raise LoxRuntimeError(operator, 'Operand must be a number.')

    def check_number_operands(self, operator: Token, a: Any, b: Any):
        if not (is_number(a) and is_number(b)):
            raise LoxRuntimeError(operator, 'Operands must be numbers.')
