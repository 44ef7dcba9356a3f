"""Reader for the prefix notation produced by `AstPrinter`.

`read_expression` turns text such as ``(* (- 123) (group 45.67))`` back
into expression nodes. The text is parsed with a small Lark grammar and the
parse tree is rebuilt into AST nodes by a transformer. Tokens in the
rebuilt tree are synthetic and all report line 1.

Syntax errors are raised as Lark exceptions.
"""

from __future__ import annotations

from lark import Lark, Transformer, v_args

from .ast import Expr, Literal, Variable, Assign, Unary, Binary, Logical, Grouping, Call
from .tokens import Token, TokenType


SEXPR_GRAMMAR = r"""
    ?start: expr

    ?expr: NUMBER -> number
         | STRING -> string
         | NAME -> name
         | "(" (OP | NAME) expr+ ")" -> form

    OP: "==" | "!=" | "<=" | ">=" | "<" | ">" | "+" | "-" | "*" | "/" | "!" | "="
    NUMBER: /\d+(\.\d+)?([eE][+-]?\d+)?/
    STRING: /"[^"]*"/
    NAME: /[A-Za-z_][A-Za-z0-9_]*/

    %import common.WS
    %ignore WS
"""


SEXPR_PARSER = Lark(SEXPR_GRAMMAR, parser='lalr', lexer='basic')

OPERATORS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.STAR,
    '/': TokenType.SLASH,
    '==': TokenType.EQUAL_EQUAL,
    '!=': TokenType.BANG_EQUAL,
    '<': TokenType.LESS,
    '<=': TokenType.LESS_EQUAL,
    '>': TokenType.GREATER,
    '>=': TokenType.GREATER_EQUAL,
    '!': TokenType.BANG,
    '=': TokenType.EQUAL,
    'and': TokenType.AND,
    'or': TokenType.OR,
}

UNARY_OPERATORS = {'!', '-'}
BINARY_OPERATORS = {'+', '-', '*', '/', '==', '!=', '<', '<=', '>', '>='}
KEYWORD_LITERALS = {'true': True, 'false': False, 'nil': None}


def synthetic(type_: TokenType, lexeme: str, literal=None) -> Token:
    return Token(type_, lexeme, literal, 1)


@v_args(inline=True)
class ExprBuilder(Transformer):
    """Transforms the prefix-notation parse tree into expression nodes."""

    def number(self, token):
        return Literal(float(token))

    def string(self, token):
        return Literal(str(token)[1:-1])

    def name(self, token):
        text = str(token)
        if text in KEYWORD_LITERALS:
            return Literal(KEYWORD_LITERALS[text])
        return Variable(synthetic(TokenType.IDENTIFIER, text, text))

    def form(self, head, *args):
        op = str(head)
        if op == 'group' and len(args) == 1:
            return Grouping(args[0])
        if op == 'call':
            return Call(args[0], synthetic(TokenType.RIGHT_PAREN, ')'), tuple(args[1:]))
        if op in ('and', 'or') and len(args) == 2:
            return Logical(args[0], synthetic(OPERATORS[op], op), args[1])
        if op == '=' and len(args) == 2 and isinstance(args[0], Variable):
            return Assign(args[0].name, args[1])
        if op in UNARY_OPERATORS and len(args) == 1:
            return Unary(synthetic(OPERATORS[op], op), args[0])
        if op in BINARY_OPERATORS and len(args) == 2:
            return Binary(args[0], synthetic(OPERATORS[op], op), args[1])
        raise ValueError(f"malformed form ({op} ...) with {len(args)} operand(s)")


def read_expression(text: str) -> Expr:
    """Parse prefix notation back into an expression tree."""
    tree = SEXPR_PARSER.parse(text)
    return ExprBuilder().transform(tree)
