"""CLI entry point for the Lox interpreter.

Usage:
    python -m lox [-v|-vv|-vvv] [script]
    python -m lox --tokens <script>
    python -m lox --ast <script>

Options:
  -v            Increase debug verbosity (can be repeated)
  --tokens      Print the scanned tokens instead of running the script
  --ast         Print the parsed statements in prefix notation instead of
                running the script

Without a script an interactive prompt is started; every line runs against
the same interpreter so definitions persist. Type `exit` or send EOF to
quit. Debug information is written to `debug.txt` in the current directory
when verbosity is greater than zero.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .ast_printer import AstPrinter
from .errors import Diagnostics
from .interpreter import Interpreter, run_source
from .parser import parse
from .scanner import scan

EXIT_DATAERR = 65
EXIT_SOFTWARE = 70


def run_prompt(interpreter: Interpreter) -> None:
    diagnostics = interpreter.diagnostics
    while True:
        try:
            line = input('> ')
        except EOFError:
            print()
            break
        if line.strip() == 'exit':
            break
        run_source(line, interpreter)
        diagnostics.reset()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog='lox', description='Lox language interpreter')
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--tokens', action='store_true', help='print scanned tokens and exit')
    group.add_argument('--ast', action='store_true', help='print parsed statements and exit')
    parser.add_argument('script', nargs='?', help='Lox script (.lox) to execute')
    args = parser.parse_args(argv)

    diagnostics = Diagnostics()

    if not args.script:
        if args.tokens or args.ast:
            parser.error('--tokens/--ast require a script')
        interpreter = Interpreter(diagnostics, debug_level=args.v)
        try:
            run_prompt(interpreter)
        finally:
            interpreter.close()
        return

    script = Path(args.script)
    if not script.exists():
        print(f"Error: file {script} not found", file=sys.stderr)
        sys.exit(1)
    with open(script, 'r', encoding='utf-8') as f:
        source = f.read()

    if args.tokens:
        tokens, _ = scan(source, diagnostics)
        for token in tokens:
            print(token)
        if diagnostics.had_error:
            sys.exit(EXIT_DATAERR)
        return

    if args.ast:
        tokens, _ = scan(source, diagnostics)
        printer = AstPrinter()
        for stmt in parse(tokens, diagnostics):
            print(printer.print_stmt(stmt))
        if diagnostics.had_error:
            sys.exit(EXIT_DATAERR)
        return

    interpreter = Interpreter(diagnostics, debug_level=args.v)
    try:
        run_source(source, interpreter)
    finally:
        interpreter.close()
    if diagnostics.had_error:
        sys.exit(EXIT_DATAERR)
    if diagnostics.had_runtime_error:
        sys.exit(EXIT_SOFTWARE)


if __name__ == '__main__':
    main()
