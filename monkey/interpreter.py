"""Tree-walking interpreter for the Monkey language.

`Interpreter` evaluates a parsed `Program` against a chain of
`Environment` scopes. Statements go through `execute`, expressions
through `evaluate`; both dispatch on the node class.

Control flow that must unwind several levels of Python recursion is
carried by exceptions: a `return` statement raises `ReturnSignal`,
which the nearest function call (or `run`, at top level) catches, and
every runtime error raises `EvaluationError`, which nothing inside the
language can catch.
"""

from __future__ import annotations

import sys
from typing import Any, List, Optional, TextIO

from .ast import (
    Program, Node, LetStatement, ReturnStatement, ExpressionStatement,
    BlockStatement, Identifier, IntegerLiteral, BooleanLiteral,
    StringLiteral, PrefixExpression, InfixExpression, IfExpression,
    FunctionLiteral, CallExpression, ArrayLiteral, HashLiteral,
    IndexExpression,
)
from .builtin_function import BuiltinFunction
from .environment import Environment
from .errors import EvaluationError, ReturnSignal, type_error
from .parser import parse_program
from .std import populate_std_environment
from .types import (
    EQUATABLE_TYPES, Array, ErrorVal, Function, Hash, Integer, NULL, String,
    is_hashable, is_truthy, native_bool, to_string, type_name, wrap_int64,
)


# Each Monkey call nests about seven Python frames
RECURSION_LIMIT = 10000


class Interpreter:
    """Core interpreter that executes Monkey AST."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt', out: Optional[TextIO] = None):
        self.std_env = populate_std_environment(out)
        self.global_env = Environment(parent=self.std_env)
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None

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

    # Public API
    def run(self, program: Program, env: Optional[Environment] = None) -> Any:
        """Evaluate every top-level statement and return the last result.

        The result is None when the last statement was a `let`. A
        top-level `return` stops the program and yields its value.
        """
        if env is None:
            env = self.global_env
        result = None
        old_limit = sys.getrecursionlimit()
        sys.setrecursionlimit(max(old_limit, RECURSION_LIMIT))
        try:
            for stmt in program.statements:
                if self.debug_level >= 1:
                    self.debug(f"exec {stmt}")
                result = self.execute(stmt, env)
        except ReturnSignal as r:
            result = r.value
        except RecursionError:
            raise EvaluationError(ErrorVal('RuntimeError', 'maximum recursion depth exceeded'))
        finally:
            sys.setrecursionlimit(old_limit)
        return result

    def execute_block(self, block: BlockStatement, env: Environment) -> Any:
        # blocks share the enclosing scope; only calls create a new one
        result = None
        for stmt in block.statements:
            result = self.execute(stmt, env)
        return result

    def execute(self, node: Node, env: Environment) -> Any:
        if isinstance(node, ExpressionStatement):
            return self.evaluate(node.expression, env)
        if isinstance(node, LetStatement):
            value = self.evaluate(node.value, env)
            env.set(node.name.value, value)
            if self.debug_level >= 2:
                self.debug(f"let {node.name.value} = {to_string(value)}")
            return None
        if isinstance(node, ReturnStatement):
            value = self.evaluate(node.value, env)
            if self.debug_level >= 3:
                self.debug(f"return {to_string(value)}")
            raise ReturnSignal(value)
        if isinstance(node, BlockStatement):
            return self.execute_block(node, env)
        raise NotImplementedError(f"execute: unexpected node type {type(node).__name__}")

    def evaluate(self, node: Node, env: Environment) -> Any:
        # Literals
        if isinstance(node, IntegerLiteral):
            return Integer(node.value)
        if isinstance(node, BooleanLiteral):
            return native_bool(node.value)
        if isinstance(node, StringLiteral):
            return String(node.value)
        if isinstance(node, Identifier):
            return env.get(node.value)
        if isinstance(node, PrefixExpression):
            right = self.evaluate(node.right, env)
            return self.apply_prefix_op(node.operator, right)
        if isinstance(node, InfixExpression):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_binary_op(node.operator, left, right)
        if isinstance(node, IfExpression):
            cond = self.evaluate(node.condition, env)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {to_string(cond)} -> {truthy}")
            if truthy:
                result = self.execute_block(node.consequence, env)
            elif node.alternative is not None:
                result = self.execute_block(node.alternative, env)
            else:
                result = None
            return NULL if result is None else result
        if isinstance(node, FunctionLiteral):
            return Function(node.parameters, node.body, env)
        if isinstance(node, CallExpression):
            func = self.evaluate(node.function, env)
            args = [self.evaluate(arg, env) for arg in node.arguments]
            return self.call_function(func, args)
        if isinstance(node, ArrayLiteral):
            return Array([self.evaluate(el, env) for el in node.elements])
        if isinstance(node, HashLiteral):
            pairs = {}
            for key_node, value_node in node.pairs:
                key = self.evaluate(key_node, env)
                if not is_hashable(key):
                    raise type_error(f'unusable as hash key: {type_name(key)}')
                pairs[key] = self.evaluate(value_node, env)
            return Hash(pairs)
        if isinstance(node, IndexExpression):
            left = self.evaluate(node.left, env)
            index = self.evaluate(node.index, env)
            return self.apply_index(left, index)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    def call_function(self, func: Any, args: List[Any]) -> Any:
        if isinstance(func, BuiltinFunction):
            # None means variadic
            if func.arity is not None and len(args) != func.arity:
                raise type_error(f"wrong number of arguments. got={len(args)}, want={func.arity}")
            if self.debug_level >= 2:
                self.debug(f"call builtin {func.name}({', '.join(to_string(a) for a in args)})")
            return func.fn(args)
        if isinstance(func, Function):
            if len(args) != len(func.parameters):
                raise type_error(f"wrong number of arguments. got={len(args)}, want={len(func.parameters)}")
            if self.debug_level >= 2:
                self.debug(f"call {to_string(func)}({', '.join(to_string(a) for a in args)})")
            # new scope for the call; the closure's environment is its parent
            call_env = Environment(parent=func.env)
            for param, arg in zip(func.parameters, args):
                call_env.set(param.value, arg)
            try:
                result = self.execute_block(func.body, call_env)
            except ReturnSignal as r:
                result = r.value
            return NULL if result is None else result
        raise type_error(f'not a function: {type_name(func)}')

    def apply_prefix_op(self, op: str, right: Any) -> Any:
        if op == '!':
            return native_bool(not is_truthy(right))
        if op == '-':
            if isinstance(right, Integer):
                return Integer(wrap_int64(-right.value))
            raise type_error(f'unknown operator: -{type_name(right)}')
        raise type_error(f'unknown operator: {op}{type_name(right)}')

    def apply_binary_op(self, op: str, a: Any, b: Any) -> Any:
        if isinstance(a, Integer) and isinstance(b, Integer):
            return self.apply_integer_op(op, a.value, b.value)
        if type_name(a) != type_name(b):
            raise type_error(f'type mismatch: {type_name(a)} {op} {type_name(b)}')
        if isinstance(a, String) and op == '+':
            return String(a.value + b.value)
        if op == '==' and isinstance(a, EQUATABLE_TYPES):
            return native_bool(self.equal_values(a, b))
        if op == '!=' and isinstance(a, EQUATABLE_TYPES):
            return native_bool(not self.equal_values(a, b))
        raise type_error(f'unknown operator: {type_name(a)} {op} {type_name(b)}')

    def apply_integer_op(self, op: str, a: int, b: int) -> Any:
        if op == '+':
            return Integer(wrap_int64(a + b))
        if op == '-':
            return Integer(wrap_int64(a - b))
        if op == '*':
            return Integer(wrap_int64(a * b))
        if op == '/':
            if b == 0:
                raise EvaluationError(ErrorVal('RuntimeError', 'division by zero'))
            # integer division truncating toward zero
            quotient = abs(a) // abs(b)
            return Integer(wrap_int64(quotient if (a < 0) == (b < 0) else -quotient))
        if op == '<':
            return native_bool(a < b)
        if op == '>':
            return native_bool(a > b)
        if op == '==':
            return native_bool(a == b)
        if op == '!=':
            return native_bool(a != b)
        raise type_error(f'unknown operator: INTEGER {op} INTEGER')

    def apply_index(self, left: Any, index: Any) -> Any:
        if isinstance(left, Array):
            if not isinstance(index, Integer):
                raise type_error(f'array index must be INTEGER, got {type_name(index)}')
            # out of range is null, not an error
            if index.value < 0 or index.value >= len(left.elements):
                return NULL
            return left.elements[index.value]
        if isinstance(left, Hash):
            if not is_hashable(index):
                raise type_error(f'unusable as hash key: {type_name(index)}')
            return left.pairs.get(index, NULL)
        raise type_error(f'index operator not supported: {type_name(left)}')

    def equal_values(self, a: Any, b: Any) -> bool:
        # structural equality between scalars of the same type
        if type(a) is not type(b):
            return False
        return a == b


def run_program(source: str, debug_level: int = 0) -> Any:
    """Convenience function to parse and run a Monkey program from source string."""
    program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    try:
        return interpreter.run(program)
    finally:
        interpreter.close()
