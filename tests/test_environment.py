import pytest

from monkey.environment import Environment
from monkey.errors import EvaluationError
from monkey.types import Integer


def test_get_walks_parent_chain():
    outer = Environment()
    outer.set('a', Integer(1))
    inner = Environment(parent=outer)
    assert inner.get('a') == Integer(1)
    assert 'a' in inner


def test_set_shadows_in_current_scope():
    outer = Environment()
    outer.set('a', Integer(1))
    inner = Environment(parent=outer)
    inner.set('a', Integer(2))
    assert inner.get('a') == Integer(2)
    assert outer.get('a') == Integer(1)


def test_rebinding_replaces_value():
    env = Environment()
    env.set('a', Integer(1))
    env.set('a', Integer(2))
    assert env.get('a') == Integer(2)


def test_missing_name():
    env = Environment(parent=Environment())
    assert 'nope' not in env
    with pytest.raises(EvaluationError) as excinfo:
        env.get('nope')
    assert excinfo.value.err.name == 'NameError'
    assert excinfo.value.message == 'identifier not found: nope'
