"""Built-in functions available to every Monkey program.

`populate_std_environment` returns the root scope holding the core
collection helpers (`len`, `first`, `last`, `rest`, `push`) and the
output function `puts`. The interpreter makes it the parent of the
global scope, so programs may shadow any built-in with `let`.
"""

from typing import Optional, TextIO

from monkey.environment import Environment

from .core import populate_core_environment
from .io import populate_io_environment


def populate_std_environment(out: Optional[TextIO] = None) -> Environment:
    std_env = Environment()
    std_env.values.update(populate_core_environment().values)
    std_env.values.update(populate_io_environment(out).values)
    return std_env


__all__ = [
    'populate_std_environment',
    'populate_core_environment',
    'populate_io_environment',
]
