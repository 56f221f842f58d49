import pytest

from tlox.environment import Environment
from tlox.errors import LoxRuntimeError
from tlox.tokens import Token, TokenType


def name(lexeme, line=1, column=1):
    return Token(TokenType.IDENTIFIER, lexeme, None, line, column)


def test_define_and_get():
    env = Environment()
    env.define('a', 1.0)
    assert env.get(name('a')) == 1.0


def test_define_overwrites_in_current_scope():
    env = Environment()
    env.define('a', 1.0)
    env.define('a', 'two')
    assert env.get(name('a')) == 'two'


def test_get_and_assign_search_enclosing_scopes():
    outer = Environment()
    outer.define('a', 1.0)
    inner = Environment(parent=Environment(parent=outer))
    assert inner.get(name('a')) == 1.0
    inner.assign(name('a'), 2.0)
    assert outer.get(name('a')) == 2.0
    assert 'a' not in inner.values


def test_shadowing_leaves_outer_binding_alone():
    outer = Environment()
    outer.define('a', 1.0)
    inner = Environment(parent=outer)
    inner.define('a', 2.0)
    inner.assign(name('a'), 3.0)
    assert inner.get(name('a')) == 3.0
    assert outer.get(name('a')) == 1.0


def test_undefined_variable_read():
    env = Environment(parent=Environment())
    with pytest.raises(LoxRuntimeError) as excinfo:
        env.get(name('missing', line=4, column=9))
    assert str(excinfo.value) == "[line: 4, column: 9 at missing] error: Undefined variable 'missing'."


def test_undefined_variable_assign():
    env = Environment()
    with pytest.raises(LoxRuntimeError) as excinfo:
        env.assign(name('missing', line=2, column=3), 1.0)
    assert excinfo.value.message == "Undefined variable 'missing'."
    assert (excinfo.value.line, excinfo.value.column) == (2, 3)
