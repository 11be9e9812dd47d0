"""Runtime values for the Monkey interpreter.

Every value the interpreter produces is an instance of one of the
classes below: `Integer`, `Boolean`, `String`, `Array`, `Hash`,
`Function`, `BuiltinFunction` (see `builtin_function.py`) or `Null`.
The scalar values are frozen dataclasses, which gives them structural
equality and hashing and lets them serve directly as hash keys.

The module also holds the helpers shared by the interpreter and the
standard library: type names for error messages, the canonical display
form of a value, truthiness and 64-bit integer wrapping.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Tuple

if TYPE_CHECKING:
    from .ast import BlockStatement, Identifier
    from .environment import Environment


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def wrap_int64(value: int) -> int:
    """Wrap a Python integer into the signed 64-bit range (two's complement)."""
    return (value - INT64_MIN) % (2 ** 64) + INT64_MIN


@dataclass(frozen=True)
class Integer:
    value: int

    def __repr__(self) -> str:
        return f"Integer({self.value})"


@dataclass(frozen=True)
class Boolean:
    value: bool

    def __repr__(self) -> str:
        return f"Boolean({self.value})"


@dataclass(frozen=True)
class String:
    value: str

    def __repr__(self) -> str:
        return f"String({self.value!r})"


@dataclass(frozen=True)
class Null:
    """Marker object for the Monkey `null` value."""
    def __repr__(self) -> str:
        return 'Null'


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


@dataclass
class Array:
    """An ordered sequence of values.

    Arrays are never mutated once built; built-ins such as `push` return a
    new array instead.
    """
    elements: List[Any] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"Array({self.elements!r})"


@dataclass
class Hash:
    """A mapping from hashable values (Integer, Boolean, String) to values.

    `pairs` preserves insertion order, which is the order used for display.
    """
    pairs: Dict[Any, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"Hash({self.pairs!r})"


@dataclass(eq=False)
class Function:
    """A user-defined function closing over its defining environment."""
    parameters: Tuple['Identifier', ...]
    body: 'BlockStatement'
    env: 'Environment'

    def __repr__(self) -> str:
        return f"<function fn({', '.join(p.value for p in self.parameters)})>"


@dataclass
class ErrorVal:
    """Represents a Monkey evaluation error.

    Errors carry a category name (`NameError`, `TypeError`,
    `RuntimeError`) and a human-readable message.
    """
    name: str
    message: str

    def __repr__(self) -> str:
        return f"Error(name={self.name!r}, message={self.message!r})"


HASHABLE_TYPES = (Integer, Boolean, String)

# `==` and `!=` are defined only between two values of one of these types
EQUATABLE_TYPES = (Integer, Boolean, String, Null)


def is_hashable(value: Any) -> bool:
    return isinstance(value, HASHABLE_TYPES)


def native_bool(value: bool) -> Boolean:
    return TRUE if value else FALSE


def is_truthy(value: Any) -> bool:
    # only false and null are falsy; 0, "" and [] are truthy
    if isinstance(value, Null):
        return False
    if isinstance(value, Boolean):
        return value.value
    return True


def type_name(value: Any) -> str:
    """Return the Monkey type name of a runtime value."""
    from .builtin_function import BuiltinFunction

    if isinstance(value, Integer):
        return 'INTEGER'
    if isinstance(value, Boolean):
        return 'BOOLEAN'
    if isinstance(value, String):
        return 'STRING'
    if isinstance(value, Array):
        return 'ARRAY'
    if isinstance(value, Hash):
        return 'HASH'
    if isinstance(value, Function):
        return 'FUNCTION'
    if isinstance(value, BuiltinFunction):
        return 'BUILTIN'
    if isinstance(value, Null):
        return 'NULL'
    if isinstance(value, ErrorVal):
        return 'ERROR'
    return type(value).__name__


def to_string(value: Any) -> str:
    """Convert a Monkey value to its display form.

    Strings are shown without quotes, also inside arrays and hashes.
    Functions show their parameter list with an elided body.
    """
    from .builtin_function import BuiltinFunction

    if isinstance(value, Integer):
        return str(value.value)
    if isinstance(value, Boolean):
        return 'true' if value.value else 'false'
    if isinstance(value, String):
        return value.value
    if isinstance(value, Array):
        return '[' + ', '.join(to_string(item) for item in value.elements) + ']'
    if isinstance(value, Hash):
        entries = ', '.join(f"{to_string(k)}: {to_string(v)}" for k, v in value.pairs.items())
        return '{' + entries + '}'
    if isinstance(value, Function):
        params = ', '.join(p.value for p in value.parameters)
        return f"fn({params}) {{ ... }}"
    if isinstance(value, BuiltinFunction):
        return f"builtin {value.name}"
    if isinstance(value, Null):
        return 'null'
    if isinstance(value, ErrorVal):
        return f"ERROR: {value.message}"
    return str(value)
