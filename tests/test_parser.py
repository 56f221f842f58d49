import io

from tlox.ast import (
    Assign, BinaryOp, Block, BreakStmt, Call, Comma, Crement, EmptyStmt,
    ExprStmt, FuncDecl, Grouping, IfStmt, Literal, LogicalAnd, LogicalOr,
    PrintStmt, ReturnStmt, Ternary, UnaryOp, VarDecl, Variable, WhileStmt,
)
from tlox.errors import Reporter
from tlox.parser import Parser
from tlox.scanner import Scanner
from tlox.tokens import TokenType


def parse(source):
    reporter = Reporter(io.StringIO())
    tokens = Scanner(source, reporter).scan_tokens()
    statements = Parser(tokens, reporter).parse()
    return statements, reporter


def parse_expr(source):
    statements, reporter = parse(source)
    assert not reporter.had_error, [str(e) for e in reporter.errors]
    assert len(statements) == 1
    assert isinstance(statements[0], ExprStmt)
    return statements[0].expr


def test_factor_binds_tighter_than_term():
    expr = parse_expr('1 + 2 * 3;')
    assert isinstance(expr, BinaryOp)
    assert expr.operator.type == TokenType.PLUS
    assert expr.left == Literal(1.0)
    assert isinstance(expr.right, BinaryOp)
    assert expr.right.operator.type == TokenType.STAR


def test_binary_operators_are_left_associative():
    expr = parse_expr('1 - 2 - 3;')
    assert isinstance(expr.left, BinaryOp)
    assert expr.left.left == Literal(1.0)
    assert expr.right == Literal(3.0)


def test_comparison_and_equality_levels():
    expr = parse_expr('1 < 2 == true;')
    assert expr.operator.type == TokenType.EQUAL_EQUAL
    assert expr.left.operator.type == TokenType.LESS


def test_unary_and_grouping():
    expr = parse_expr('-(1 + 2);')
    assert isinstance(expr, UnaryOp)
    assert isinstance(expr.operand, Grouping)
    expr = parse_expr('!!true;')
    assert isinstance(expr.operand, UnaryOp)


def test_logical_operators():
    expr = parse_expr('a or b and c;')
    assert isinstance(expr, LogicalOr)
    assert isinstance(expr.right, LogicalAnd)


def test_assignment_is_right_associative():
    expr = parse_expr('a = b = 1;')
    assert isinstance(expr, Assign)
    assert expr.name.lexeme == 'a'
    assert isinstance(expr.value, Assign)
    assert expr.value.name.lexeme == 'b'


def test_ternary_is_right_associative():
    expr = parse_expr('a ? b : c ? d : e;')
    assert isinstance(expr, Ternary)
    assert expr.condition.name.lexeme == 'a'
    assert isinstance(expr.else_branch, Ternary)


def test_comma_is_lowest_precedence():
    expr = parse_expr('a = 1, b = 2;')
    assert isinstance(expr, Comma)
    assert isinstance(expr.left, Assign)
    assert isinstance(expr.right, Assign)


def test_call_arguments_are_not_comma_expressions():
    expr = parse_expr('f(1, g(2), 3)(4);')
    assert isinstance(expr, Call)
    assert len(expr.arguments) == 1
    inner = expr.callee
    assert isinstance(inner, Call)
    assert len(inner.arguments) == 3
    assert isinstance(inner.arguments[1], Call)


def test_prefix_and_postfix_crement():
    expr = parse_expr('++i;')
    assert isinstance(expr, Crement)
    assert expr.operator.type == TokenType.PLUS_PLUS
    assert isinstance(expr.target, Variable)
    expr = parse_expr('i--;')
    assert isinstance(expr, Crement)
    assert expr.operator.type == TokenType.MINUS_MINUS


def test_statements():
    statements, reporter = parse(
        'var a; var b = 1; print b; { a = b; } ; '
        'if (a) print 1; else print 2; while (false) print 3;'
        'fun add(x, y) { return x + y; }'
    )
    assert not reporter.had_error
    kinds = [type(s) for s in statements]
    assert kinds == [VarDecl, VarDecl, PrintStmt, Block, EmptyStmt, IfStmt, WhileStmt, FuncDecl]
    assert statements[0].initializer is None
    func = statements[-1]
    assert [p.lexeme for p in func.params] == ['x', 'y']
    assert isinstance(func.body[0], ReturnStmt)


def test_for_loop_desugars_into_block_and_while():
    statements, reporter = parse('for (var i = 0; i < 3; i++) print i;')
    assert not reporter.had_error
    assert len(statements) == 1
    block = statements[0]
    assert isinstance(block, Block)
    init, loop = block.statements
    assert isinstance(init, VarDecl)
    assert isinstance(loop, WhileStmt)
    assert isinstance(loop.body, PrintStmt)
    assert isinstance(loop.increment, Crement)


def test_for_loop_without_clauses():
    statements, reporter = parse('for (;;) break;')
    assert not reporter.had_error
    loop = statements[0]
    assert isinstance(loop, WhileStmt)
    assert loop.condition == Literal(True)
    assert loop.increment is None
    assert isinstance(loop.body, BreakStmt)


def test_synchronizes_after_bad_statement():
    statements, reporter = parse('1 + ; print "ok";')
    assert len(reporter.errors) == 1
    assert reporter.errors[0].message == 'Expect expression.'
    assert statements == [PrintStmt(Literal('ok'))]


def test_reports_every_independent_error():
    statements, reporter = parse('var = 1;\nprint ;\nprint "fine";')
    assert [e.line for e in reporter.errors] == [1, 2]
    assert [e.message for e in reporter.errors] == ['Expect variable name.', 'Expect expression.']
    assert statements == [PrintStmt(Literal('fine'))]


def test_invalid_assignment_target_is_not_fatal():
    statements, reporter = parse('1 = 2; print 3;')
    assert len(reporter.errors) == 1
    assert reporter.errors[0].message == 'Invalid assignment target.'
    assert len(statements) == 2


def test_error_at_end_of_input():
    _, reporter = parse('print 1')
    assert str(reporter.errors[0]) == "[line: 1, column: 8 at end] error: Expect ';' after value."


def test_error_names_offending_lexeme():
    _, reporter = parse('var x = );')
    assert str(reporter.errors[0]) == '[line: 1, column: 9 at )] error: Expect expression.'


def test_break_and_continue_outside_loop():
    _, reporter = parse('break; continue;')
    assert [e.message for e in reporter.errors] == [
        "Must be inside a loop to use 'break'.",
        "Must be inside a loop to use 'continue'.",
    ]


def test_break_inside_function_inside_loop_is_rejected():
    _, reporter = parse('while (true) { fun f() { break; } }')
    assert len(reporter.errors) == 1


def test_return_outside_function():
    _, reporter = parse('return 1;')
    assert reporter.errors[0].message == "Can't return from top-level code."


def test_unclosed_block():
    _, reporter = parse('{ print 1;')
    assert reporter.errors[0].message == "Expect '}' after block."
    assert reporter.errors[0].location == 'end'


def test_repl_bare_expression():
    reporter = Reporter(io.StringIO())
    parsed = Parser(Scanner('1 + 2').scan_tokens(), reporter).parse_repl()
    assert isinstance(parsed, BinaryOp)
    parsed = Parser(Scanner('print 1;').scan_tokens(), reporter).parse_repl()
    assert isinstance(parsed, list)
    assert isinstance(parsed[0], PrintStmt)
    assert not reporter.had_error


def test_repl_bare_expression_with_trailing_tokens():
    reporter = Reporter(io.StringIO())
    parsed = Parser(Scanner('1 2').scan_tokens(), reporter).parse_repl()
    assert parsed is None
    assert reporter.errors[0].message == 'Expect end of expression.'


def test_module_level_helpers():
    from tlox import parse_program, tokenize

    reporter = Reporter(io.StringIO())
    statements = parse_program(tokenize('var a = 1; print a;', reporter), reporter)
    assert not reporter.had_error
    assert [type(s) for s in statements] == [VarDecl, PrintStmt]
