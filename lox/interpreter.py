"""Tree-walking evaluator for Lox.

The interpreter keeps a fixed global environment (holding the native
functions) and a current environment that changes as blocks and function
bodies are entered. `execute` runs one statement and returns either `None`
or a `ReturnSignal` carrying a function's return value; `evaluate`
computes the value of one expression.

Runtime errors are raised as `LoxRuntimeError` and caught by `interpret`,
which reports them and abandons the rest of the statements it was given.
The same instance can be fed one REPL line after another so that global
definitions persist.
"""

from __future__ import annotations

import math
import sys
from collections import deque
from dataclasses import fields, is_dataclass
from typing import Any, List, Optional, Sequence, TextIO

from .ast import (
    Expr, Stmt, Literal, Variable, Assign, Unary, Binary, Logical, Grouping,
    Call, ExprStmt, PrintStmt, VarDecl, Block, IfStmt, WhileStmt, FuncDecl,
    ReturnStmt,
)
from .callable import LoxCallable, LoxFunction
from .environment import Environment
from .errors import Diagnostics, LoxRuntimeError, NativeError, ReturnSignal
from .natives import populate_natives
from .parser import parse
from .scanner import scan
from .tokens import Token, TokenType


def stringify(value: Any) -> str:
    """Convert a Lox value to the text `print` shows."""
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'True' if value else 'False'
    if isinstance(value, float):
        if value == 0:
            return '-0' if math.copysign(1.0, value) < 0 else '0'
        if value.is_integer() and abs(value) < 1e16:
            return str(int(value))
        return repr(value)
    return str(value)


def is_truthy(value: Any) -> bool:
    # only nil and false are falsy
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    # Python would say True == 1.0
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    return a == b


def check_number_operand(operator: Token, operand: Any) -> None:
    if isinstance(operand, float):
        return
    raise LoxRuntimeError(operator, 'Operand must be a number.')


def check_number_operands(operator: Token, left: Any, right: Any) -> None:
    if isinstance(left, float) and isinstance(right, float):
        return
    raise LoxRuntimeError(operator, 'Operands must be numbers.')


def first_token(node: Any) -> Optional[Token]:
    """Find the token closest to the root of an AST node, breadth first."""
    queue = deque([node])
    while queue:
        item = queue.popleft()
        if isinstance(item, Token):
            return item
        if isinstance(item, (list, tuple)):
            queue.extend(item)
        elif is_dataclass(item):
            queue.extend(getattr(item, f.name) for f in fields(item))
    return None


class Interpreter:
    """Core interpreter that executes Lox ASTs."""
    def __init__(self, diagnostics: Optional[Diagnostics] = None, out: Optional[TextIO] = None,
                 debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.out = out
        self.globals = populate_natives(Environment())
        self.environment = self.globals
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str) -> None:
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self) -> None:
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def interpret(self, statements: Sequence[Stmt]) -> None:
        try:
            for stmt in statements:
                if self.debug_level >= 1:
                    self.debug(f"execute {type(stmt).__name__}")
                if isinstance(self.execute(stmt), ReturnSignal):
                    # a top-level return ends this run
                    break
        except LoxRuntimeError as err:
            self.diagnostics.runtime_error(err)
        except RecursionError:
            # expression nesting deeper than the host stack
            token = first_token(stmt) or Token(TokenType.EOF, '', None, 0)
            self.diagnostics.runtime_error(LoxRuntimeError(token, 'Stack overflow.'))
        except Exception as ex:
            self.diagnostics.exception(ex)

    def execute_block(self, statements: Sequence[Stmt], env: Environment) -> Optional[ReturnSignal]:
        previous = self.environment
        try:
            self.environment = env
            for stmt in statements:
                result = self.execute(stmt)
                if isinstance(result, ReturnSignal):
                    return result
            return None
        finally:
            self.environment = previous

    def execute(self, stmt: Stmt) -> Optional[ReturnSignal]:
        if isinstance(stmt, ExprStmt):
            self.evaluate(stmt.expression)
            return None
        if isinstance(stmt, PrintStmt):
            value = self.evaluate(stmt.expression)
            print(stringify(value), file=self.out if self.out is not None else sys.stdout)
            return None
        if isinstance(stmt, VarDecl):
            value = self.evaluate(stmt.initializer) if stmt.initializer is not None else None
            self.environment.define(stmt.name.lexeme, value)
            if self.debug_level >= 2:
                self.debug(f"define {stmt.name.lexeme} = {stringify(value)}")
            return None
        if isinstance(stmt, Block):
            return self.execute_block(stmt.statements, Environment(self.environment))
        if isinstance(stmt, IfStmt):
            if is_truthy(self.evaluate(stmt.condition)):
                return self.execute(stmt.then_branch)
            if stmt.else_branch is not None:
                return self.execute(stmt.else_branch)
            return None
        if isinstance(stmt, WhileStmt):
            while is_truthy(self.evaluate(stmt.condition)):
                result = self.execute(stmt.body)
                if isinstance(result, ReturnSignal):
                    return result
            return None
        if isinstance(stmt, FuncDecl):
            function = LoxFunction(stmt, self.environment)
            self.environment.define(stmt.name.lexeme, function)
            if self.debug_level >= 2:
                self.debug(f"define function {stmt.name.lexeme}")
            return None
        if isinstance(stmt, ReturnStmt):
            value = self.evaluate(stmt.value) if stmt.value is not None else None
            return ReturnSignal(value)
        raise NotImplementedError(f"execute: unexpected node type {type(stmt)}")

    def evaluate(self, expr: Expr) -> Any:
        if isinstance(expr, Literal):
            return expr.value
        if isinstance(expr, Grouping):
            return self.evaluate(expr.expression)
        if isinstance(expr, Variable):
            return self.environment.get(expr.name)
        if isinstance(expr, Assign):
            value = self.evaluate(expr.value)
            self.environment.assign(expr.name, value)
            return value
        if isinstance(expr, Logical):
            left = self.evaluate(expr.left)
            if expr.operator.type == TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(expr.right)
        if isinstance(expr, Unary):
            right = self.evaluate(expr.right)
            if expr.operator.type == TokenType.BANG:
                return not is_truthy(right)
            if expr.operator.type == TokenType.MINUS:
                check_number_operand(expr.operator, right)
                return -right
            raise LoxRuntimeError(expr.operator, f"Unsupported unary operator '{expr.operator.lexeme}'.")
        if isinstance(expr, Binary):
            left = self.evaluate(expr.left)
            right = self.evaluate(expr.right)
            return self.apply_binary_op(expr.operator, left, right)
        if isinstance(expr, Call):
            callee = self.evaluate(expr.callee)
            arguments = [self.evaluate(arg) for arg in expr.arguments]
            return self.call_function(callee, arguments, expr.paren)
        raise NotImplementedError(f"evaluate: unexpected node type {type(expr)}")

    def call_function(self, callee: Any, arguments: List[Any], paren: Token) -> Any:
        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(paren, 'Can only call functions and classes.')
        if len(arguments) != callee.arity():
            raise LoxRuntimeError(paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")
        if self.debug_level >= 3:
            self.debug(f"call {callee} with ({', '.join(stringify(a) for a in arguments)})")
        try:
            result = callee.call(self, arguments)
        except NativeError as ex:
            raise LoxRuntimeError(paren, str(ex)) from ex
        except RecursionError:
            raise LoxRuntimeError(paren, 'Stack overflow.') from None
        if self.debug_level >= 3:
            self.debug(f"return {stringify(result)} from {callee}")
        return result

    def apply_binary_op(self, operator: Token, left: Any, right: Any) -> Any:
        op = operator.type
        if op == TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if op == TokenType.BANG_EQUAL:
            return not is_equal(left, right)
        if op == TokenType.PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            # either side being a string is enough for concatenation
            if isinstance(left, str) or isinstance(right, str):
                return stringify(left) + stringify(right)
            raise LoxRuntimeError(operator, 'Operands must be two numbers or two strings.')
        check_number_operands(operator, left, right)
        if op == TokenType.MINUS:
            return left - right
        if op == TokenType.STAR:
            return left * right
        if op == TokenType.SLASH:
            if right == 0:
                return None
            return left / right
        if op == TokenType.GREATER:
            return left > right
        if op == TokenType.GREATER_EQUAL:
            return left >= right
        if op == TokenType.LESS:
            return left < right
        if op == TokenType.LESS_EQUAL:
            return left <= right
        raise LoxRuntimeError(operator, f"Unsupported binary operator '{operator.lexeme}'.")


def run_source(source: str, interpreter: Optional[Interpreter] = None,
               diagnostics: Optional[Diagnostics] = None) -> Interpreter:
    """Scan, parse and run `source`, returning the interpreter used.

    Nothing is executed when scanning or parsing reported an error.
    """
    if interpreter is None:
        interpreter = Interpreter(diagnostics)
    diagnostics = interpreter.diagnostics
    tokens, _ = scan(source, diagnostics)
    statements = parse(tokens, diagnostics)
    if diagnostics.had_error:
        return interpreter
    interpreter.interpret(statements)
    return interpreter
