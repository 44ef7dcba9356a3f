from __future__ import annotations

import sys
import traceback
from dataclasses import dataclass, field
from typing import Any, List, Optional, TextIO

from lox.tokens import Token, TokenType


class LoxRuntimeError(Exception):
    """Exception type used to propagate Lox runtime errors."""
    def __init__(self, token: Token, message: str):
        super().__init__(message)
        self.token = token
        self.message = message


class ParseError(Exception):
    """Internal exception used by the parser to unwind to a statement boundary."""


@dataclass(frozen=True)
class ReturnSignal:
    """Result of executing a `return` statement.

    `Interpreter.execute` hands this back instead of `None` so that blocks
    and loops can stop early; only a function call turns it into a value.
    """
    value: Any = None


@dataclass
class Diagnostics:
    """Collects scan, parse and runtime errors for one session.

    The caller owns the instance and calls `reset()` between REPL entries.
    """
    stream: Optional[TextIO] = None
    had_error: bool = False
    had_runtime_error: bool = False
    messages: List[str] = field(default_factory=list)

    def _write(self, text: str) -> None:
        # resolve lazily so pytest's capsys sees the output
        out = self.stream if self.stream is not None else sys.stderr
        print(text, file=out)
        self.messages.append(text)

    def error(self, line: int, message: str) -> None:
        self.report(line, '', message)

    def token_error(self, token: Token, message: str) -> None:
        if token.type == TokenType.EOF:
            self.report(token.line, ' at end', message)
        else:
            self.report(token.line, f" at '{token.lexeme}'", message)

    def report(self, line: int, where: str, message: str) -> None:
        self._write(f"[line {line}] Error{where}: {message}")
        self.had_error = True

    def runtime_error(self, err: LoxRuntimeError) -> None:
        self._write(f"{err.message}\n[line {err.token.line}]")
        self.had_runtime_error = True

    def exception(self, exc: BaseException) -> None:
        detail = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        self._write(f"Internal error: {exc!r}\n{detail}")
        self.had_runtime_error = True

    def reset(self) -> None:
        self.had_error = False
        self.had_runtime_error = False
        self.messages.clear()


class NativeError(Exception):
    """Raised by a native function on bad arguments.

    The interpreter re-raises it as a `LoxRuntimeError` at the call site.
    """
