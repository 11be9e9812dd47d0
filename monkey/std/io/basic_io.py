import sys
from typing import Any, Iterable, Optional, TextIO

from monkey.types import NULL, Null, to_string


class BasicIO:
    """Output channel used by `puts`.

    The stream is looked up at write time when none is given, so output
    follows `sys.stdout` even if it is replaced after the interpreter was
    created.
    """
    def __init__(self, out: Optional[TextIO] = None):
        self.out = out

    @property
    def stream(self) -> TextIO:
        return self.out if self.out is not None else sys.stdout

    def write_line(self, text: str):
        self.stream.write(text + '\n')

    def puts(self, values: Iterable[Any]) -> Null:
        for value in values:
            self.write_line(to_string(value))
        self.stream.flush()
        return NULL
