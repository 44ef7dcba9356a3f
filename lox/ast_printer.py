"""Fully parenthesized prefix rendering of expression trees, for debugging."""

from __future__ import annotations

from typing import Any

from .ast import (
    Expr, Stmt, Literal, Variable, Assign, Unary, Binary, Logical, Grouping,
    Call, ExprStmt, PrintStmt, VarDecl, Block, IfStmt, WhileStmt, FuncDecl,
    ReturnStmt,
)


def literal_to_string(value: Any) -> str:
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, str):
        return '"' + value + '"'
    return str(value)


class AstPrinter:
    def print(self, expr: Expr) -> str:
        if isinstance(expr, Literal):
            return literal_to_string(expr.value)
        if isinstance(expr, Variable):
            return expr.name.lexeme
        if isinstance(expr, Assign):
            return self.parenthesize('=', Variable(expr.name), expr.value)
        if isinstance(expr, Unary):
            return self.parenthesize(expr.operator.lexeme, expr.right)
        if isinstance(expr, (Binary, Logical)):
            return self.parenthesize(expr.operator.lexeme, expr.left, expr.right)
        if isinstance(expr, Grouping):
            return self.parenthesize('group', expr.expression)
        if isinstance(expr, Call):
            return self.parenthesize('call', expr.callee, *expr.arguments)
        raise NotImplementedError(f"print: unexpected node type {type(expr)}")

    def print_stmt(self, stmt: Stmt) -> str:
        """Render a statement in the same style; used by `python -m lox --ast`."""
        if isinstance(stmt, ExprStmt):
            return self.print(stmt.expression)
        if isinstance(stmt, PrintStmt):
            return f"(print {self.print(stmt.expression)})"
        if isinstance(stmt, VarDecl):
            if stmt.initializer is None:
                return f"(var {stmt.name.lexeme})"
            return f"(var {stmt.name.lexeme} {self.print(stmt.initializer)})"
        if isinstance(stmt, Block):
            return '(block' + ''.join(' ' + self.print_stmt(s) for s in stmt.statements) + ')'
        if isinstance(stmt, IfStmt):
            text = f"(if {self.print(stmt.condition)} {self.print_stmt(stmt.then_branch)}"
            if stmt.else_branch is not None:
                text += ' ' + self.print_stmt(stmt.else_branch)
            return text + ')'
        if isinstance(stmt, WhileStmt):
            return f"(while {self.print(stmt.condition)} {self.print_stmt(stmt.body)})"
        if isinstance(stmt, FuncDecl):
            params = ' '.join(p.lexeme for p in stmt.params)
            body = ''.join(' ' + self.print_stmt(s) for s in stmt.body)
            return f"(fun {stmt.name.lexeme} ({params}){body})"
        if isinstance(stmt, ReturnStmt):
            if stmt.value is None:
                return '(return)'
            return f"(return {self.print(stmt.value)})"
        raise NotImplementedError(f"print_stmt: unexpected node type {type(stmt)}")

    def parenthesize(self, name: str, *exprs: Expr) -> str:
        parts = [name] + [self.print(e) for e in exprs]
        return '(' + ' '.join(parts) + ')'
