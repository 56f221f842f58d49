"""JSON serialization of the tlox AST, for debugging.

This module converts AST dataclasses into plain Python dict/list
structures suitable for JSON encoding. Tokens are reduced to their
lexeme and source position.
"""

from __future__ import annotations

from typing import Any, Dict, List

from .ast import (
    Assign,
    BinaryOp,
    Block,
    BreakStmt,
    Call,
    Comma,
    ContinueStmt,
    Crement,
    EmptyStmt,
    ExprStmt,
    FuncDecl,
    Grouping,
    IfStmt,
    Literal,
    LogicalAnd,
    LogicalOr,
    PrintStmt,
    ReturnStmt,
    Stmt,
    Ternary,
    UnaryOp,
    VarDecl,
    Variable,
    WhileStmt,
)
from .tokens import Token


def token_to_obj(t: Token) -> Dict[str, Any]:
    return {"lexeme": t.lexeme, "line": t.line, "column": t.column}


def program_to_obj(statements: List[Stmt]) -> Dict[str, Any]:
    return {"type": "Program", "body": [ast_to_obj(s) for s in statements]}


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    # Statements
    if isinstance(node, EmptyStmt):
        return {"type": "EmptyStmt"}
    if isinstance(node, ExprStmt):
        return {"type": "ExprStmt", "expr": ast_to_obj(node.expr)}
    if isinstance(node, PrintStmt):
        return {"type": "PrintStmt", "expr": ast_to_obj(node.expr)}
    if isinstance(node, VarDecl):
        return {"type": "VarDecl", "name": token_to_obj(node.name), "initializer": ast_to_obj(node.initializer)}
    if isinstance(node, Block):
        return {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, IfStmt):
        return {
            "type": "IfStmt",
            "condition": ast_to_obj(node.condition),
            "then_branch": ast_to_obj(node.then_branch),
            "else_branch": ast_to_obj(node.else_branch),
        }
    if isinstance(node, WhileStmt):
        return {
            "type": "WhileStmt",
            "condition": ast_to_obj(node.condition),
            "body": ast_to_obj(node.body),
            "increment": ast_to_obj(node.increment),
        }
    if isinstance(node, BreakStmt):
        return {"type": "BreakStmt", "keyword": token_to_obj(node.keyword)}
    if isinstance(node, ContinueStmt):
        return {"type": "ContinueStmt", "keyword": token_to_obj(node.keyword)}
    if isinstance(node, FuncDecl):
        return {
            "type": "FuncDecl",
            "name": token_to_obj(node.name),
            "params": [token_to_obj(p) for p in node.params],
            "body": [ast_to_obj(s) for s in node.body],
        }
    if isinstance(node, ReturnStmt):
        return {"type": "ReturnStmt", "keyword": token_to_obj(node.keyword), "value": ast_to_obj(node.value)}

    # Expressions
    if isinstance(node, Literal):
        return {"type": "Literal", "value": node.value}
    if isinstance(node, Grouping):
        return {"type": "Grouping", "expression": ast_to_obj(node.expression)}
    if isinstance(node, UnaryOp):
        return {"type": "UnaryOp", "op": node.operator.lexeme, "operand": ast_to_obj(node.operand)}
    if isinstance(node, (BinaryOp, LogicalAnd, LogicalOr, Comma)):
        return {
            "type": type(node).__name__,
            "op": node.operator.lexeme,
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Ternary):
        return {
            "type": "Ternary",
            "condition": ast_to_obj(node.condition),
            "then_branch": ast_to_obj(node.then_branch),
            "else_branch": ast_to_obj(node.else_branch),
        }
    if isinstance(node, Crement):
        return {"type": "Crement", "op": node.operator.lexeme, "target": ast_to_obj(node.target)}
    if isinstance(node, Variable):
        return {"type": "Variable", "name": token_to_obj(node.name)}
    if isinstance(node, Assign):
        return {"type": "Assign", "name": token_to_obj(node.name), "value": ast_to_obj(node.value)}
    if isinstance(node, Call):
        return {
            "type": "Call",
            "callee": ast_to_obj(node.callee),
            "arguments": [ast_to_obj(a) for a in node.arguments],
        }

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")
