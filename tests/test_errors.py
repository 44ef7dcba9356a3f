import pytest

from lox.ast import ExprStmt, Grouping, Literal, PrintStmt, Unary
from lox.errors import Diagnostics, LoxRuntimeError
from lox.interpreter import Interpreter, run_source
from lox.parser import parse
from lox.scanner import scan
from lox.tokens import Token, TokenType


def test_runtime_error_stops_remaining_statements(capsys):
    diagnostics = Diagnostics()
    run_source('print "before";\nprint missing;\nprint "after";', Interpreter(diagnostics))
    captured = capsys.readouterr()
    assert captured.out == 'before\n'
    assert "Undefined variable 'missing'.\n[line 2]" in captured.err
    assert diagnostics.had_runtime_error
    assert not diagnostics.had_error


def test_runtime_error_only_halts_current_pass(capsys):
    interpreter = Interpreter(Diagnostics())
    run_source('print nope;', interpreter)
    interpreter.diagnostics.reset()
    run_source('print "still alive";', interpreter)
    assert capsys.readouterr().out == 'still alive\n'
    assert not interpreter.diagnostics.had_runtime_error


def test_calling_non_callable(capsys):
    diagnostics = Diagnostics()
    run_source('var x = "text";\nx();', Interpreter(diagnostics))
    assert diagnostics.messages == ['Can only call functions and classes.\n[line 2]']


def test_arity_mismatch(capsys):
    diagnostics = Diagnostics()
    run_source('fun f(a, b) {}\nf(1);', Interpreter(diagnostics))
    assert diagnostics.messages == ['Expected 2 arguments but got 1.\n[line 2]']


def test_assigning_undeclared_variable(capsys):
    diagnostics = Diagnostics()
    run_source('ghost = 1;', Interpreter(diagnostics))
    assert diagnostics.had_runtime_error
    assert "Undefined variable 'ghost'." in diagnostics.messages[0]


def test_error_carries_offending_token():
    diagnostics = Diagnostics()
    tokens, _ = scan('\n\nprint oops;', diagnostics)
    statements = parse(tokens, diagnostics)
    errors = []
    diagnostics.runtime_error = errors.append
    Interpreter(diagnostics).interpret(statements)
    assert len(errors) == 1
    assert isinstance(errors[0], LoxRuntimeError)
    assert errors[0].token == Token(TokenType.IDENTIFIER, 'oops', 'oops', 3)


def test_while_false_never_evaluates_body(capsys):
    diagnostics = Diagnostics()
    run_source('while (false) print x;', Interpreter(diagnostics))
    assert capsys.readouterr().out == ''
    assert not diagnostics.had_error
    assert not diagnostics.had_runtime_error


def test_malformed_statement_does_not_abort_parse(capsys):
    diagnostics = Diagnostics()
    tokens, _ = scan('var = 1;\nprint "second";', diagnostics)
    statements = parse(tokens, diagnostics)
    assert diagnostics.had_error
    assert diagnostics.messages == ["[line 1] Error at '=': Expect variable name."]
    Interpreter(diagnostics).interpret(statements)
    assert capsys.readouterr().out == 'second\n'


def test_run_source_skips_execution_after_parse_error(capsys):
    diagnostics = Diagnostics()
    run_source('print 1;\nprint ;', Interpreter(diagnostics))
    assert capsys.readouterr().out == ''
    assert diagnostics.had_error


def test_host_failure_is_reported_as_internal_error(capsys):
    diagnostics = Diagnostics()
    interpreter = Interpreter(diagnostics)
    interpreter.interpret([object()])
    assert diagnostics.had_runtime_error
    assert not diagnostics.had_error
    assert 'Internal error' in capsys.readouterr().err


def test_stack_overflow_becomes_runtime_error(capsys):
    diagnostics = Diagnostics()
    run_source('fun f() { f(); }\nf();', Interpreter(diagnostics))
    assert diagnostics.had_runtime_error
    assert diagnostics.messages[-1].startswith('Stack overflow.')


def test_reset_clears_flags():
    diagnostics = Diagnostics()
    diagnostics.error(1, 'boom')
    diagnostics.runtime_error(LoxRuntimeError(Token(TokenType.NIL, 'nil', None, 4), 'bad'))
    assert diagnostics.had_error and diagnostics.had_runtime_error
    diagnostics.reset()
    assert not diagnostics.had_error
    assert not diagnostics.had_runtime_error
    assert diagnostics.messages == []


@pytest.mark.parametrize('source', [
    'print ' + '(' * 1000 + '1' + ')' * 1000 + ';',
    '{' * 1000 + '}' * 1000,
    'print ' + '!' * 5000 + 'true;',
    'print ' + '-' * 5000 + '1;',
])
def test_deep_nesting_is_a_syntax_error(source, capsys):
    diagnostics = Diagnostics()
    run_source(source, Interpreter(diagnostics))
    assert diagnostics.had_error
    assert not diagnostics.had_runtime_error
    assert 'Too much nesting.' in diagnostics.messages[-1]
    assert capsys.readouterr().out == ''


def test_parse_continues_to_work_after_deep_nesting():
    diagnostics = Diagnostics()
    tokens, _ = scan('print ' + '(' * 1000 + '1' + ')' * 1000 + ';', diagnostics)
    parse(tokens, diagnostics)
    assert diagnostics.had_error
    diagnostics.reset()
    tokens, _ = scan('print ((1));', diagnostics)
    assert len(parse(tokens, diagnostics)) == 1
    assert not diagnostics.had_error


def test_deep_expression_tree_becomes_stack_overflow(capsys):
    minus = Token(TokenType.MINUS, '-', None, 3)
    expr = Literal(1.0)
    for _ in range(5000):
        expr = Unary(minus, Grouping(expr))
    diagnostics = Diagnostics()
    interpreter = Interpreter(diagnostics)
    interpreter.interpret([ExprStmt(expr), PrintStmt(Literal('after'))])
    captured = capsys.readouterr()
    assert captured.out == ''
    assert 'Stack overflow.\n[line 3]' in captured.err
    assert diagnostics.had_runtime_error
    assert not diagnostics.had_error
    # the interpreter is still usable afterwards
    interpreter.interpret([PrintStmt(Literal('again'))])
    assert capsys.readouterr().out == 'again\n'
