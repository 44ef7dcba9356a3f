import pytest

from lox.environment import Environment
from lox.errors import LoxRuntimeError
from lox.tokens import Token, TokenType


def name(text):
    return Token(TokenType.IDENTIFIER, text, text, 1)


def test_define_and_get():
    env = Environment()
    env.define('a', 1.0)
    assert env.get(name('a')) == 1.0


def test_lookup_walks_enclosing_chain():
    root = Environment()
    root.define('a', 'root')
    child = Environment(Environment(root))
    assert child.get(name('a')) == 'root'
    assert 'a' in child
    assert 'b' not in child


def test_define_shadows_in_current_scope_only():
    root = Environment()
    root.define('a', 'root')
    child = Environment(root)
    child.define('a', 'child')
    assert child.get(name('a')) == 'child'
    assert root.get(name('a')) == 'root'


def test_redefine_same_scope_overwrites():
    env = Environment()
    env.define('a', 1.0)
    env.define('a', 2.0)
    assert env.get(name('a')) == 2.0


def test_assign_updates_innermost_existing_binding():
    root = Environment()
    root.define('a', 1.0)
    middle = Environment(root)
    middle.define('a', 2.0)
    leaf = Environment(middle)
    leaf.assign(name('a'), 3.0)
    assert middle.values['a'] == 3.0
    assert root.values['a'] == 1.0
    assert 'a' not in leaf.values


def test_nil_is_a_real_binding():
    env = Environment()
    env.define('a', None)
    assert env.get(name('a')) is None


def test_get_undefined_raises_at_token():
    token = name('missing')
    with pytest.raises(LoxRuntimeError) as info:
        Environment(Environment()).get(token)
    assert info.value.token == token
    assert info.value.message == "Undefined variable 'missing'."


def test_assign_never_creates_binding():
    env = Environment()
    with pytest.raises(LoxRuntimeError):
        env.assign(name('x'), 1.0)
    assert 'x' not in env
