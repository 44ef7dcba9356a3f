from lox.errors import Diagnostics
from lox.scanner import scan
from lox.tokens import Token, TokenType as T


def scan_ok(source):
    diagnostics = Diagnostics()
    tokens, had_error = scan(source, diagnostics)
    assert not had_error, diagnostics.messages
    return tokens


def test_single_identifier():
    assert scan_ok('andy') == [
        Token(T.IDENTIFIER, 'andy', 'andy', 1),
        Token(T.EOF, '', None, 1),
    ]


def test_identifiers():
    source = 'andy formless fo _ _123 _abc ab123\nabcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ1234567890_'
    long_name = 'abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ1234567890_'
    expected = [Token(T.IDENTIFIER, name, name, 1)
                for name in ['andy', 'formless', 'fo', '_', '_123', '_abc', 'ab123']]
    expected += [Token(T.IDENTIFIER, long_name, long_name, 2), Token(T.EOF, '', None, 2)]
    assert scan_ok(source) == expected


def test_keywords():
    source = 'and class else false for fun if nil or print return super this true var while'
    types = [T.AND, T.CLASS, T.ELSE, T.FALSE, T.FOR, T.FUN, T.IF, T.NIL, T.OR,
             T.PRINT, T.RETURN, T.SUPER, T.THIS, T.TRUE, T.VAR, T.WHILE]
    expected = [Token(t, word, word, 1) for t, word in zip(types, source.split())]
    expected.append(Token(T.EOF, '', None, 1))
    assert scan_ok(source) == expected


def test_numbers_and_trailing_dot():
    assert scan_ok('123 123.456 .456 123.') == [
        Token(T.NUMBER, '123', 123.0, 1),
        Token(T.NUMBER, '123.456', 123.456, 1),
        Token(T.DOT, '.', None, 1),
        Token(T.NUMBER, '456', 456.0, 1),
        Token(T.NUMBER, '123', 123.0, 1),
        Token(T.DOT, '.', None, 1),
        Token(T.EOF, '', None, 1),
    ]


def test_punctuators_use_maximal_munch():
    tokens = scan_ok('(){};,+-*!===<=>=!=<>/.')
    assert [t.type for t in tokens] == [
        T.LEFT_PAREN, T.RIGHT_PAREN, T.LEFT_BRACE, T.RIGHT_BRACE, T.SEMICOLON,
        T.COMMA, T.PLUS, T.MINUS, T.STAR, T.BANG_EQUAL, T.EQUAL_EQUAL,
        T.LESS_EQUAL, T.GREATER_EQUAL, T.BANG_EQUAL, T.LESS, T.GREATER,
        T.SLASH, T.DOT, T.EOF,
    ]
    assert tokens[9] == Token(T.BANG_EQUAL, '!=', None, 1)


def test_strings():
    assert scan_ok('"""string"') == [
        Token(T.STRING, '""', '', 1),
        Token(T.STRING, '"string"', 'string', 1),
        Token(T.EOF, '', None, 1),
    ]


def test_multiline_string_counts_lines():
    tokens = scan_ok('"a\nb" x')
    assert tokens[0] == Token(T.STRING, '"a\nb"', 'a\nb', 2)
    assert tokens[1].line == 2


def test_whitespace_and_comments():
    source = 'space    tabs\t\t\t\tnewlines\r\n\n// a comment\n\n\nend'
    assert scan_ok(source) == [
        Token(T.IDENTIFIER, 'space', 'space', 1),
        Token(T.IDENTIFIER, 'tabs', 'tabs', 1),
        Token(T.IDENTIFIER, 'newlines', 'newlines', 1),
        Token(T.IDENTIFIER, 'end', 'end', 6),
        Token(T.EOF, '', None, 6),
    ]


def test_unexpected_character_still_emits_eof(capsys):
    diagnostics = Diagnostics()
    tokens, had_error = scan('|', diagnostics)
    assert had_error
    assert diagnostics.had_error
    assert tokens == [Token(T.EOF, '', None, 1)]
    assert "[line 1] Error: Unexpected character '|'." in capsys.readouterr().err


def test_scanning_continues_after_error():
    diagnostics = Diagnostics()
    tokens, had_error = scan('a @ b', diagnostics)
    assert had_error
    assert [t.lexeme for t in tokens] == ['a', 'b', '']


def test_unterminated_string_reported_at_start_line():
    diagnostics = Diagnostics()
    tokens, had_error = scan('x\n"abc\ndef', diagnostics)
    assert had_error
    assert diagnostics.messages == ['[line 2] Error: Unterminated string.']
    assert [t.type for t in tokens] == [T.IDENTIFIER, T.EOF]
    assert tokens[-1].line == 3
