import io
import sys

import pytest

from monkey.errors import EvaluationError
from monkey.interpreter import Interpreter, parse_program, run_program
from monkey.types import (
    Array, FALSE, Function, Hash, Integer, NULL, String, TRUE, to_string,
)


def run(source):
    return run_program(source)


def run_error(source):
    with pytest.raises(EvaluationError) as excinfo:
        run_program(source)
    return excinfo.value.err


@pytest.mark.parametrize('source, expected', [
    ('5', 5),
    ('-10', -10),
    ('5 + 5 + 5 + 5 - 10', 10),
    ('2 * 2 * 2 * 2 * 2', 32),
    ('-50 + 100 + -50', 0),
    ('20 + 2 * -10', 0),
    ('50 / 2 * 2 + 10', 60),
    ('3 * (3 * 3) + 10', 37),
    ('(5 + 10 * 2 + 15 / 3) * 2 + -10', 50),
    ('7 / 2', 3),
    ('-7 / 2', -3),
    ('7 / -2', -3),
])
def test_integer_arithmetic(source, expected):
    assert run(source) == Integer(expected)


def test_integer_overflow_wraps():
    assert run('9223372036854775807 + 1') == Integer(-9223372036854775808)
    assert run('9223372036854775807 * 2') == Integer(-2)


@pytest.mark.parametrize('source, expected', [
    ('true', TRUE),
    ('1 < 2', TRUE),
    ('1 > 2', FALSE),
    ('1 == 1', TRUE),
    ('1 != 1', FALSE),
    ('true == true', TRUE),
    ('true != false', TRUE),
    ('(1 < 2) == true', TRUE),
    ('"a" == "a"', TRUE),
    ('"a" != "b"', TRUE),
    ('if (false) { 1 } == if (false) { 2 }', TRUE),
    ('if (false) { 1 } != if (false) { 2 }', FALSE),
])
def test_equality_and_comparison(source, expected):
    assert run(source) is expected


@pytest.mark.parametrize('source, expected', [
    ('!true', FALSE),
    ('!false', TRUE),
    ('!5', FALSE),
    ('!!5', TRUE),
    ('!0', FALSE),
    ('!""', FALSE),
    ('![]', FALSE),
])
def test_bang_operator(source, expected):
    # only false and null are falsy
    assert run(source) is expected


@pytest.mark.parametrize('source, expected', [
    ('if (true) { 10 }', Integer(10)),
    ('if (false) { 10 }', NULL),
    ('if (1) { 10 }', Integer(10)),
    ('if (0) { 10 } else { 20 }', Integer(10)),
    ('if (1 > 2) { 10 } else { 20 }', Integer(20)),
    ('if (true) { }', NULL),
])
def test_if_else(source, expected):
    assert run(source) == expected


def test_if_without_else_on_false_is_null():
    assert run('if (1 > 2) { 10 }') is NULL


@pytest.mark.parametrize('source', [
    'return 10;',
    'return 10; 9;',
    'return 2 * 5; 9;',
    '9; return 2 * 5; 9;',
    'if (10 > 1) { if (10 > 1) { return 10; } return 1; }',
])
def test_return_statements(source):
    assert run(source) == Integer(10)


def test_return_stops_at_function_boundary():
    source = '''
    let f = fn() { return 1; 2 };
    f() + 10;
    '''
    assert run(source) == Integer(11)


def test_let_statements():
    assert run('let a = 5; a;') == Integer(5)
    assert run('let a = 5 * 5; a;') == Integer(25)
    assert run('let a = 5; let b = a; let c = a + b + 5; c;') == Integer(15)


def test_let_result_is_none():
    assert run('let a = 5;') is None


def test_empty_program_result_is_none():
    assert run('') is None


def test_rebinding():
    assert run('let a = 1; let a = a + 1; a') == Integer(2)


def test_function_object():
    result = run('fn(x) { x + 2; };')
    assert isinstance(result, Function)
    assert [p.value for p in result.parameters] == ['x']
    assert str(result.body) == '{ (x + 2); }'
    assert to_string(result) == 'fn(x) { ... }'


@pytest.mark.parametrize('source, expected', [
    ('let identity = fn(x) { x; }; identity(5);', 5),
    ('let identity = fn(x) { return x; }; identity(5);', 5),
    ('let double = fn(x) { x * 2; }; double(5);', 10),
    ('let add = fn(x, y) { x + y; }; add(5, 5);', 10),
    ('let add = fn(x, y) { x + y; }; add(5 + 5, add(5, 5));', 20),
    ('fn(x) { x; }(5)', 5),
])
def test_function_application(source, expected):
    assert run(source) == Integer(expected)


def test_empty_function_body_returns_null():
    assert run('fn() { }()') is NULL


def test_closures():
    source = '''
    let newAdder = fn(x) { fn(y) { x + y }; };
    let addTwo = newAdder(2);
    addTwo(2);
    '''
    assert run(source) == Integer(4)


def test_closure_sees_later_rebinding():
    source = '''
    let x = 1;
    let f = fn() { x };
    let x = 2;
    f();
    '''
    assert run(source) == Integer(2)


def test_call_scope_does_not_leak():
    err = run_error('let f = fn(a) { let inner = a; inner }; f(1); inner')
    assert (err.name, err.message) == ('NameError', 'identifier not found: inner')


def test_block_shares_enclosing_scope():
    assert run('if (true) { let y = 3; } y') == Integer(3)


def test_recursion():
    source = '''
    let fact = fn(n) { if (n == 0) { 1 } else { n * fact(n - 1) } };
    fact(10);
    '''
    assert run(source) == Integer(3628800)


def test_string_concatenation():
    assert run('"Hello" + " " + "World!"') == String('Hello World!')


def test_array_literal_and_index():
    assert run('[1, 2 * 2, 3 + 3]') == Array([Integer(1), Integer(4), Integer(6)])
    assert run('let a = [1, 2, 3]; a[0] + a[1] + a[2]') == Integer(6)
    assert run('[1, 2, 3][1 + 1]') == Integer(3)


@pytest.mark.parametrize('source', ['[1, 2, 3][3]', '[1, 2, 3][-1]', '[][0]'])
def test_array_index_out_of_range(source):
    assert run(source) is NULL


def test_hash_literal():
    source = '''
    let two = "two";
    {"one": 10 - 9, two: 1 + 1, "thr" + "ee": 6 / 2, 4: 4, true: 5, false: 6}
    '''
    result = run(source)
    assert isinstance(result, Hash)
    assert result.pairs == {
        String('one'): Integer(1),
        String('two'): Integer(2),
        String('three'): Integer(3),
        Integer(4): Integer(4),
        TRUE: Integer(5),
        FALSE: Integer(6),
    }


def test_hash_keys_distinguish_types():
    assert run('{1: "int", true: "bool"}[true]') == String('bool')
    assert run('{1: "int", true: "bool"}[1]') == String('int')


@pytest.mark.parametrize('source, expected', [
    ('{"foo": 5}["foo"]', Integer(5)),
    ('{"foo": 5}["bar"]', NULL),
    ('let key = "foo"; {"foo": 5}[key]', Integer(5)),
    ('{}["foo"]', NULL),
    ('{5: 5}[5]', Integer(5)),
    ('{true: 5}[true]', Integer(5)),
])
def test_hash_index(source, expected):
    assert run(source) == expected


def test_hash_literal_stops_at_first_unusable_key(capsys):
    err = run_error('{"x": puts("a"), [1]: puts("b"), puts("c"): 2}')
    assert err.message == 'unusable as hash key: ARRAY'
    assert capsys.readouterr().out == 'a\n'


@pytest.mark.parametrize('source, name, message', [
    ('5 + true;', 'TypeError', 'type mismatch: INTEGER + BOOLEAN'),
    ('5 + true; 5;', 'TypeError', 'type mismatch: INTEGER + BOOLEAN'),
    ('-true', 'TypeError', 'unknown operator: -BOOLEAN'),
    ('true + false;', 'TypeError', 'unknown operator: BOOLEAN + BOOLEAN'),
    ('5; true + false; 5', 'TypeError', 'unknown operator: BOOLEAN + BOOLEAN'),
    ('if (10 > 1) { true + false; }', 'TypeError', 'unknown operator: BOOLEAN + BOOLEAN'),
    ('if (10 > 1) { if (10 > 1) { return true + false; } return 1; }',
     'TypeError', 'unknown operator: BOOLEAN + BOOLEAN'),
    ('"Hello" - "World"', 'TypeError', 'unknown operator: STRING - STRING'),
    ('"a" < "b"', 'TypeError', 'unknown operator: STRING < STRING'),
    ('true < false', 'TypeError', 'unknown operator: BOOLEAN < BOOLEAN'),
    ('foobar', 'NameError', 'identifier not found: foobar'),
    ('{"name": "Monkey"}[fn(x) { x }];', 'TypeError', 'unusable as hash key: FUNCTION'),
    ('{[1]: 2}', 'TypeError', 'unusable as hash key: ARRAY'),
    ('5[0]', 'TypeError', 'index operator not supported: INTEGER'),
    ('[1, 2]["a"]', 'TypeError', 'array index must be INTEGER, got STRING'),
    ('5()', 'TypeError', 'not a function: INTEGER'),
    ('fn(x) { x }(1, 2)', 'TypeError', 'wrong number of arguments. got=2, want=1'),
    ('fn(x, y) { x }(1)', 'TypeError', 'wrong number of arguments. got=1, want=2'),
    ('1 / 0', 'RuntimeError', 'division by zero'),
    ('1 == true', 'TypeError', 'type mismatch: INTEGER == BOOLEAN'),
    ('1 != "1"', 'TypeError', 'type mismatch: INTEGER != STRING'),
    ('fn(x) { x } == 1', 'TypeError', 'type mismatch: FUNCTION == INTEGER'),
    ('[1, 2] == [1, 2]', 'TypeError', 'unknown operator: ARRAY == ARRAY'),
    ('{"a": 1} != {"a": 1}', 'TypeError', 'unknown operator: HASH != HASH'),
    ('let f = fn() { 1 }; f == f', 'TypeError', 'unknown operator: FUNCTION == FUNCTION'),
])
def test_error_handling(source, name, message):
    err = run_error(source)
    assert (err.name, err.message) == (name, message)


def test_error_aborts_remaining_statements(capsys):
    run_error('puts(1); missing; puts(2);')
    assert capsys.readouterr().out == '1\n'


def test_runaway_recursion_is_reported():
    err = run_error('let f = fn(x) { f(x + 1) }; f(0);')
    assert (err.name, err.message) == ('RuntimeError', 'maximum recursion depth exceeded')


def test_deep_recursion_succeeds():
    source = 'let f = fn(n) { if (n == 0) { 0 } else { f(n - 1) } }; f(1000);'
    assert run(source) == Integer(0)


def test_recursive_map_over_long_array():
    source = '''
    let map = fn(arr, f) {
      if (len(arr) == 0) { [] } else { push(map(rest(arr), f), f(first(arr))) }
    };
    let build = fn(n, acc) { if (n == 0) { acc } else { build(n - 1, push(acc, n)) } };
    len(map(build(300, []), fn(x) { x * 2 }));
    '''
    assert run(source) == Integer(300)


def test_recursion_limit_is_restored():
    before = sys.getrecursionlimit()
    run('let f = fn(n) { if (n == 0) { 0 } else { f(n - 1) } }; f(10);')
    assert sys.getrecursionlimit() == before


def test_evaluation_error_str():
    with pytest.raises(EvaluationError, match='NameError: identifier not found: x'):
        run_program('x')


def test_builtins_can_be_shadowed():
    assert run('let len = fn(x) { 42 }; len("abc")') == Integer(42)


def test_interpreter_keeps_global_scope_between_runs():
    interp = Interpreter()
    interp.run(parse_program('let x = 10;'))
    assert interp.run(parse_program('x * 2')) == Integer(20)


def test_puts_writes_to_configured_stream():
    out = io.StringIO()
    interp = Interpreter(out=out)
    result = interp.run(parse_program('puts("a", 1, [true, "b"], {"k": if (false) { 1 }})'))
    assert result is NULL
    assert out.getvalue() == 'a\n1\n[true, b]\n{k: null}\n'


def test_debug_trace(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    interp = Interpreter(debug_level=3, debug_file=str(debug_file))
    interp.run(parse_program('let f = fn(x) { if (x > 1) { return x; } 0 }; f(2);'))
    interp.close()
    trace = debug_file.read_text().splitlines()
    assert trace[0] == 'exec let f = fn(x) { if ((x > 1)) { return x; }; 0; };'
    assert 'let f = fn(x) { ... }' in trace
    assert 'call fn(x) { ... }(2)' in trace
    assert 'if condition true -> True' in trace
    assert 'return 2' in trace
