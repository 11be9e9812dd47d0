"""Abstract Syntax Tree (AST) definitions for the Monkey language.

The parser builds these nodes bottom-up and the interpreter walks them.
Nodes are frozen dataclasses whose children are held in tuples, so a
parsed program is an immutable tree that can be evaluated any number of
times. Equality is structural.

`str(node)` renders the canonical source form of a node. Expressions
are fully parenthesised, so parsing the rendered text yields a tree
equal to the original.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


class Statement(Node):
    pass


class Expression(Node):
    pass


def _terminated(stmt: Statement) -> str:
    text = str(stmt)
    return text if text.endswith(';') else text + ';'


@dataclass(frozen=True)
class Program(Node):
    statements: Tuple[Statement, ...] = ()

    def __str__(self) -> str:
        return '\n'.join(_terminated(s) for s in self.statements)


# Expressions

@dataclass(frozen=True)
class Identifier(Expression):
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool

    def __str__(self) -> str:
        return 'true' if self.value else 'false'


@dataclass(frozen=True)
class StringLiteral(Expression):
    value: str

    def __str__(self) -> str:
        return f'"{self.value}"'


@dataclass(frozen=True)
class PrefixExpression(Expression):
    operator: str
    right: Expression

    def __str__(self) -> str:
        return f'({self.operator}{self.right})'


@dataclass(frozen=True)
class InfixExpression(Expression):
    left: Expression
    operator: str
    right: Expression

    def __str__(self) -> str:
        return f'({self.left} {self.operator} {self.right})'


@dataclass(frozen=True)
class BlockStatement(Statement):
    statements: Tuple[Statement, ...] = ()

    def __str__(self) -> str:
        if not self.statements:
            return '{ }'
        return '{ ' + ' '.join(_terminated(s) for s in self.statements) + ' }'


@dataclass(frozen=True)
class IfExpression(Expression):
    condition: Expression
    consequence: BlockStatement
    alternative: Optional[BlockStatement] = None

    def __str__(self) -> str:
        text = f'if ({self.condition}) {self.consequence}'
        if self.alternative is not None:
            text += f' else {self.alternative}'
        return text


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    parameters: Tuple[Identifier, ...]
    body: BlockStatement

    def __str__(self) -> str:
        params = ', '.join(str(p) for p in self.parameters)
        return f'fn({params}) {self.body}'


@dataclass(frozen=True)
class CallExpression(Expression):
    function: Expression
    arguments: Tuple[Expression, ...] = ()

    def __str__(self) -> str:
        args = ', '.join(str(a) for a in self.arguments)
        return f'{self.function}({args})'


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    elements: Tuple[Expression, ...] = ()

    def __str__(self) -> str:
        return '[' + ', '.join(str(e) for e in self.elements) + ']'


@dataclass(frozen=True)
class HashLiteral(Expression):
    pairs: Tuple[Tuple[Expression, Expression], ...] = ()

    def __str__(self) -> str:
        return '{' + ', '.join(f'{k}: {v}' for k, v in self.pairs) + '}'


@dataclass(frozen=True)
class IndexExpression(Expression):
    left: Expression
    index: Expression

    def __str__(self) -> str:
        return f'({self.left}[{self.index}])'


# Statements

@dataclass(frozen=True)
class LetStatement(Statement):
    name: Identifier
    value: Expression

    def __str__(self) -> str:
        return f'let {self.name} = {self.value};'


@dataclass(frozen=True)
class ReturnStatement(Statement):
    value: Expression

    def __str__(self) -> str:
        return f'return {self.value};'


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    expression: Expression

    def __str__(self) -> str:
        return str(self.expression)
