"""Handles interactive mode for the Monkey interpreter. Uses cmd as backend.

One `Interpreter` lives for the whole session, so `let` bindings made on
one line are visible on the next. Syntax errors are printed one per line
and the offending input is not evaluated; evaluation errors are printed
and the session carries on.
"""

import cmd

from termcolor import colored

from .errors import EvaluationError
from .interpreter import Interpreter
from .parser import parse
from .types import to_string


class Shell(cmd.Cmd):
    """Monkey read-eval-print loop."""
    intro = "Monkey interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = ">> "
    ERROR = "red"
    COMMANDS = ("exit", "EOF", "help", "?")

    def __init__(self, interpreter=None, color=True, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # `puts` writes to the same stream as results and errors
        self.interpreter = interpreter if interpreter is not None else Interpreter(out=self.stdout)
        self.color = color

    def parseline(self, line):
        """Only a bare shell command is dispatched; anything else is Monkey source."""
        line = line.strip()
        if line in Shell.COMMANDS:
            return super().parseline(line)
        return None, None, line

    def _error(self, label, message):
        if self.color:
            label = colored(label, Shell.ERROR, attrs=["bold"])
        self.stdout.write(f"{label} {message}\n")

    def default(self, line):
        """Parses and evaluates a line of Monkey source."""
        program, errors = parse(line)
        if errors:
            for message in errors:
                self._error("parse error:", message)
            return
        try:
            result = self.interpreter.run(program)
        except EvaluationError as e:
            self._error(f"{e.err.name}:", e.err.message)
            return
        if result is not None:
            self.stdout.write(to_string(result) + "\n")

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        self.stdout.write(
            "Welcome to the Monkey interpreter!\n\n"
            "Type an expression such as '1 + 2 * 3' to evaluate it, or bind a name \n"
            "with 'let add = fn(a, b) { a + b };' and use it on the next line: \n"
            "'add(1, 2)'. Built-ins: len, first, last, rest, push, puts.\n"
            "Type 'exit' or press Ctrl-D to leave.\n"
        )

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        self.stdout.write("\n")
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
