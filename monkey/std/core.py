from typing import Any, List

from monkey.builtin_function import BuiltinFunction
from monkey.environment import Environment
from monkey.errors import type_error
from monkey.types import Array, Integer, NULL, String, type_name


def populate_core_environment() -> Environment:
    core_env = Environment()

    def std_len(args: List[Any]) -> Any:
        arg = args[0]
        if isinstance(arg, String):
            return Integer(len(arg.value))
        if isinstance(arg, Array):
            return Integer(len(arg.elements))
        raise type_error(f'argument to `len` not supported, got {type_name(arg)}')

    def std_first(args: List[Any]) -> Any:
        arr = expect_array('first', args[0])
        return arr.elements[0] if arr.elements else NULL

    def std_last(args: List[Any]) -> Any:
        arr = expect_array('last', args[0])
        return arr.elements[-1] if arr.elements else NULL

    def std_rest(args: List[Any]) -> Any:
        arr = expect_array('rest', args[0])
        if not arr.elements:
            return NULL
        return Array(list(arr.elements[1:]))

    def std_push(args: List[Any]) -> Any:
        arr = expect_array('push', args[0])
        return Array(list(arr.elements) + [args[1]])

    core_env.set('len', BuiltinFunction('len', 1, std_len))
    core_env.set('first', BuiltinFunction('first', 1, std_first))
    core_env.set('last', BuiltinFunction('last', 1, std_last))
    core_env.set('rest', BuiltinFunction('rest', 1, std_rest))
    core_env.set('push', BuiltinFunction('push', 2, std_push))

    return core_env


def expect_array(name: str, value: Any) -> Array:
    if not isinstance(value, Array):
        raise type_error(f'argument to `{name}` must be ARRAY, got {type_name(value)}')
    return value
