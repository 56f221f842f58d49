import builtins
import json

from tlox.__main__ import ExitCode, main


def write_script(tmp_path, source, name='script.lox'):
    path = tmp_path / name
    path.write_text(source, encoding='utf-8')
    return str(path)


def test_runs_script(tmp_path, capsys):
    path = write_script(tmp_path, 'for (var i = 0; i < 3; i++) print i;')
    assert main([path]) == ExitCode.OK
    assert capsys.readouterr().out == '0\n1\n2\n'


def test_too_many_arguments(capsys):
    assert main(['a.lox', 'b.lox']) == ExitCode.BAD_USAGE
    assert capsys.readouterr().err == 'Usage: tlox [script]\n'


def test_unreadable_file(tmp_path, capsys):
    missing = str(tmp_path / 'missing.lox')
    assert main([missing]) == ExitCode.INVALID_FILE
    assert capsys.readouterr().err == f'Could not open file: {missing}\n'


def test_exit_codes_per_outcome(tmp_path, capsys):
    assert main([write_script(tmp_path, 'print 1; $')]) == ExitCode.SCAN_ERROR
    assert main([write_script(tmp_path, 'print (1;')]) == ExitCode.PARSE_ERROR
    assert main([write_script(tmp_path, 'print nil + 1;')]) == ExitCode.RUNTIME_ERROR
    err = capsys.readouterr().err.splitlines()
    assert err == [
        '[line: 1, column: 10 at $] error: Unexpected character.',
        "[line: 1, column: 9 at ;] error: Expect ')' after expression.",
        '[line: 1, column: 11 at +] error: Operands must be two numbers or two strings.',
    ]


def test_interactive_session(monkeypatch, capsys):
    lines = iter(['fun sq(n) { return n * n; }', 'sq(7)', 'print oops;', 'sq(2)'])

    def fake_input(prompt=''):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr(builtins, 'input', fake_input)
    assert main([]) == ExitCode.OK
    captured = capsys.readouterr()
    assert captured.out.split() == ['49', '4']
    assert "Undefined variable 'oops'." in captured.err


def test_verbose_run_writes_debug_file(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    path = write_script(tmp_path, 'var a = 3;')
    assert main(['-vv', path]) == ExitCode.OK
    trace = (tmp_path / 'debug.txt').read_text(encoding='utf-8')
    assert 'declare a = 3' in trace


def test_emit_ast(tmp_path, capsys):
    path = write_script(tmp_path, 'var a = 1 + 2;\nprint a;')
    assert main(['--emit-ast', path]) == ExitCode.OK
    out_path = tmp_path / 'script.lox.ast.json'
    assert capsys.readouterr().out.strip() == str(out_path)
    obj = json.loads(out_path.read_text(encoding='utf-8'))
    assert obj['type'] == 'Program'
    decl, stmt = obj['body']
    assert decl['type'] == 'VarDecl'
    assert decl['name']['lexeme'] == 'a'
    assert decl['initializer'] == {
        'type': 'BinaryOp',
        'op': '+',
        'left': {'type': 'Literal', 'value': 1.0},
        'right': {'type': 'Literal', 'value': 2.0},
    }
    assert stmt['type'] == 'PrintStmt'
    assert stmt['expr']['name'] == {'lexeme': 'a', 'line': 2, 'column': 7}


def test_emit_ast_refuses_broken_source(tmp_path):
    path = write_script(tmp_path, 'var;')
    assert main(['--emit-ast', path]) == ExitCode.PARSE_ERROR
    assert not (tmp_path / 'script.lox.ast.json').exists()


def test_undecodable_file(tmp_path, capsys):
    path = tmp_path / 'latin1.lox'
    path.write_bytes(b'print "\xff";')
    assert main([str(path)]) == ExitCode.INVALID_FILE
    assert main(['--emit-ast', str(path)]) == ExitCode.INVALID_FILE
    assert capsys.readouterr().err == f'Could not open file: {path}\n' * 2


def test_emit_ast_with_script_is_bad_usage(tmp_path, capsys):
    first = write_script(tmp_path, 'print 1;', name='a.lox')
    second = write_script(tmp_path, 'print 2;', name='b.lox')
    assert main(['--emit-ast', first, second]) == ExitCode.BAD_USAGE
    assert capsys.readouterr() == ('', 'Usage: tlox [script]\n')
    assert not (tmp_path / 'a.lox.ast.json').exists()


def test_emit_ast_records_logical_operators(tmp_path, capsys):
    path = write_script(tmp_path, 'print a or b;')
    assert main(['--emit-ast', path]) == ExitCode.OK
    obj = json.loads((tmp_path / 'script.lox.ast.json').read_text(encoding='utf-8'))
    assert obj['body'][0]['expr']['type'] == 'LogicalOr'
    assert obj['body'][0]['expr']['op'] == 'or'
