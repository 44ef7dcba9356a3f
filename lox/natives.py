"""Native functions available in every interpreter's global scope."""

from __future__ import annotations

import re
import time
from typing import TYPE_CHECKING, Any, List

from lox.callable import NativeFunction
from lox.environment import Environment
from lox.errors import NativeError

NUMERIC_FIELD = re.compile(r"-?\d+(\.\d+)?")

if TYPE_CHECKING:
    from lox.interpreter import Interpreter


def _expect_string(fn_name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise NativeError(f"{fn_name} expects a string argument.")
    return value


def _expect_index(fn_name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, float):
        raise NativeError(f"{fn_name} expects a number argument.")
    return int(value)


def native_clock(interpreter: 'Interpreter', args: List[Any]) -> float:
    return time.time()


def native_strlen(interpreter: 'Interpreter', args: List[Any]) -> float:
    return float(len(_expect_string('strlen', args[0])))


def native_substring(interpreter: 'Interpreter', args: List[Any]) -> str:
    s = _expect_string('substring', args[0])
    start = _expect_index('substring', args[1])
    length = _expect_index('substring', args[2])
    if start < 0 or length < 0 or start + length > len(s):
        raise NativeError(f"substring range {start}..{start + length} out of bounds for length {len(s)}.")
    return s[start:start + length]


def native_indexof(interpreter: 'Interpreter', args: List[Any]) -> float:
    s = _expect_string('indexof', args[0])
    target = _expect_string('indexof', args[1])
    return float(s.find(target))


def native_strat(interpreter: 'Interpreter', args: List[Any]) -> Any:
    """strat("ab cde fghi", 2) => "fghi"; numeric fields come back as numbers."""
    fields = _expect_string('strat', args[0]).strip().split(' ')
    index = _expect_index('strat', args[1])
    if index < 0 or index >= len(fields):
        raise NativeError(f"strat index {index} out of range.")
    element = fields[index]
    if NUMERIC_FIELD.fullmatch(element):
        return float(element)
    return element


NATIVES = [
    NativeFunction('clock', 0, native_clock),
    NativeFunction('strlen', 1, native_strlen),
    NativeFunction('substring', 3, native_substring),
    NativeFunction('indexof', 2, native_indexof),
    NativeFunction('strat', 2, native_strat),
]


def populate_natives(env: Environment) -> Environment:
    for native in NATIVES:
        env.define(native.name, native)
    return env
