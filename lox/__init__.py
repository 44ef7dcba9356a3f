# Lox language package
# This package provides a scanner, parser and tree-walking interpreter for Lox.
from .errors import Diagnostics, LoxRuntimeError
from .interpreter import Interpreter, run_source, stringify
from .parser import parse
from .scanner import scan

__all__ = [
    'Diagnostics',
    'Interpreter',
    'LoxRuntimeError',
    'parse',
    'run_source',
    'scan',
    'stringify',
]
