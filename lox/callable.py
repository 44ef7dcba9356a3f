from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, List

from lox.ast import FuncDecl
from lox.environment import Environment
from lox.errors import ReturnSignal

if TYPE_CHECKING:
    from lox.interpreter import Interpreter


class LoxCallable:
    """Anything a Lox call expression can invoke."""

    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        raise NotImplementedError


@dataclass
class NativeFunction(LoxCallable):
    name: str
    param_count: int
    fn: Callable[['Interpreter', List[Any]], Any]

    def arity(self) -> int:
        return self.param_count

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        return self.fn(interpreter, arguments)

    def __str__(self) -> str:
        return f"<native fn {self.name}>"


class LoxFunction(LoxCallable):
    """A user-defined function together with the environment it was declared in."""
    def __init__(self, declaration: FuncDecl, closure: Environment):
        self.declaration = declaration
        self.closure = closure

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        # parameters live in a child of the declaring scope, not the caller's
        env = Environment(self.closure)
        for param, arg in zip(self.declaration.params, arguments):
            env.define(param.lexeme, arg)
        result = interpreter.execute_block(self.declaration.body, env)
        if isinstance(result, ReturnSignal):
            return result.value
        return None

    def __str__(self) -> str:
        return f"<fn {self.name}>"

    def __repr__(self) -> str:
        return f"<function {self.name}>"
