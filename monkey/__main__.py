"""CLI entry point for the Monkey interpreter.

Usage:
    python -m monkey [-v|-vv|-vvv]                 start the REPL
    python -m monkey [-v...] <program_file>
    python -m monkey [-v...] --emit-ast <program_file>
    python -m monkey [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .monkey file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file
  --no-color    Do not highlight errors in the REPL

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Syntax errors are printed one per line
and prevent the program from running.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast_json import ast_to_obj, ast_from_obj
from .errors import EvaluationError, ParseError
from .interpreter import Interpreter
from .parser import parse_program
from .repl import Shell


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def parse_or_exit(source: str):
    try:
        return parse_program(source)
    except ParseError as e:
        for message in e.errors:
            print(f"Syntax error: {message}", file=sys.stderr)
        sys.exit(1)


def execute(program, debug_level: int) -> None:
    interpreter = Interpreter(debug_level=debug_level)
    try:
        interpreter.run(program)
    except EvaluationError as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        interpreter.close()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog='monkey', description="Monkey language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--no-color', action='store_true', help='do not highlight errors in the REPL')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='MONKEY_FILE', help='emit AST JSON for the given .monkey file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Monkey program file (.monkey) to execute; omit for the REPL')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        program = parse_or_exit(read_source(program_file))
        obj = ast_to_obj(program)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        data = json.loads(read_source(ast_path))
        execute(ast_from_obj(data), args.v)
        return

    # No program: interactive mode
    if not args.program:
        shell = Shell(Interpreter(debug_level=args.v), color=not args.no_color)
        try:
            shell.cmdloop()
        except KeyboardInterrupt:
            print()
        finally:
            shell.interpreter.close()
        return

    program = parse_or_exit(read_source(Path(args.program)))
    execute(program, args.v)


if __name__ == '__main__':
    main()
