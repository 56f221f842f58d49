"""Abstract Syntax Tree (AST) definitions for tlox.

Nodes fall into two closed families, `Expr` and `Stmt`. Every consumer
(the interpreter, the JSON dumper) dispatches on the concrete node class,
so adding a consumer means writing one more dispatch function rather than
touching the node classes. Nodes are immutable once the parser builds
them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .tokens import Literal as LiteralValue, Token


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


###############################################################################
# Expressions
###############################################################################

@dataclass(frozen=True)
class Expr(Node):
    pass


@dataclass(frozen=True)
class Literal(Expr):
    value: LiteralValue


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True)
class UnaryOp(Expr):
    operator: Token
    operand: Expr


@dataclass(frozen=True)
class BinaryOp(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class LogicalAnd(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class LogicalOr(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Ternary(Expr):
    condition: Expr
    then_branch: Expr
    else_branch: Expr


@dataclass(frozen=True)
class Comma(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Crement(Expr):
    operator: Token  # PLUS_PLUS or MINUS_MINUS
    target: Expr


@dataclass(frozen=True)
class Variable(Expr):
    name: Token


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, used to locate call faults
    arguments: List[Expr]


###############################################################################
# Statements
###############################################################################

@dataclass(frozen=True)
class Stmt(Node):
    pass


@dataclass(frozen=True)
class EmptyStmt(Stmt):
    pass


@dataclass(frozen=True)
class ExprStmt(Stmt):
    expr: Expr


@dataclass(frozen=True)
class PrintStmt(Stmt):
    expr: Expr


@dataclass(frozen=True)
class VarDecl(Stmt):
    name: Token
    initializer: Optional[Expr]


@dataclass(frozen=True)
class Block(Stmt):
    statements: List[Stmt]


@dataclass(frozen=True)
class IfStmt(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass(frozen=True)
class WhileStmt(Stmt):
    condition: Expr
    body: Stmt
    # Set only for desugared for-loops; runs after the body and after `continue`.
    increment: Optional[Expr] = None


@dataclass(frozen=True)
class BreakStmt(Stmt):
    keyword: Token


@dataclass(frozen=True)
class ContinueStmt(Stmt):
    keyword: Token


@dataclass(frozen=True)
class FuncDecl(Stmt):
    name: Token
    params: List[Token]
    body: List[Stmt]


@dataclass(frozen=True)
class ReturnStmt(Stmt):
    keyword: Token
    value: Optional[Expr]
