# Monkey language package
# This package provides a lexer, parser and tree-walking interpreter for Monkey.
from .errors import EvaluationError, ParseError
from .environment import Environment
from .interpreter import Interpreter, run_program
from .parser import parse, parse_program

__all__ = [
    'parse',
    'parse_program',
    'run_program',
    'Interpreter',
    'Environment',
    'EvaluationError',
    'ParseError',
]
