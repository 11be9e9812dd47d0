from typing import Any, List, Optional, TextIO

from .basic_io import BasicIO
from monkey.builtin_function import BuiltinFunction
from monkey.environment import Environment


def populate_io_environment(out: Optional[TextIO] = None) -> Environment:
    basic_io = BasicIO(out)
    io_env = Environment()

    def std_puts(args: List[Any]) -> Any:
        return basic_io.puts(args)

    io_env.set('puts', BuiltinFunction('puts', None, std_puts))

    return io_env
