import logging
from collections import deque

import ply.lex as lex

from rustscript.errors import ParseError, SourceLocation, get_source_context
from rustscript.escapes import unescape

logger = logging.getLogger(__name__)


class Lexer:
    # A string containing ignored characters (spaces, tabs, carriage returns)
    t_ignore = ' \t\r'

    # Keywords
    reserved = {
        'let': 'LET',
        'var': 'VAR',
        'fn': 'FN',
        'if': 'IF',
        'then': 'THEN',
        'else': 'ELSE',
        'match': 'MATCH',
        'and': 'AND',       # match guard
        'mod': 'MOD',
        'pub': 'PUB',
        'imp': 'IMP',
        'from': 'FROM',
        'true': 'TRUE',
        'false': 'FALSE',
        'for': 'FOR',
        'in': 'IN',
    }

    # List of token names
    tokens = [
        'IDENTIFIER', 'QUALIFIED_NAME', 'NUMBER', 'FLOAT', 'STRING', 'CHAR',
        'PLUS', 'MINUS', 'TIMES', 'DIVIDE', 'MODULO',
        'LESS', 'GREATER', 'EQUALEQUAL', 'NOTEQUAL', 'ANDAND', 'OROR',
        'CARET', 'DOLLAR', 'EQUALS', 'ARROW', 'DOTDOT', 'PIPE',
        'LPAREN', 'RPAREN', 'LBRACKET', 'RBRACKET', 'LBRACE', 'RBRACE',
        'COMMA', 'SEMICOLON', 'NEWLINE',
    ] + list(reserved.values())

    # Regular expression rules for simple tokens
    t_PLUS = r'\+'
    t_MINUS = r'-'
    t_TIMES = r'\*'
    t_DIVIDE = r'/'
    t_MODULO = r'%'
    t_LESS = r'<'
    t_GREATER = r'>'
    t_EQUALEQUAL = r'=='
    t_NOTEQUAL = r'!='
    t_ANDAND = r'&&'
    t_OROR = r'\|\|'
    t_CARET = r'\^'
    t_DOLLAR = r'\$'
    t_EQUALS = r'='
    t_ARROW = r'=>'
    t_DOTDOT = r'\.\.'
    t_PIPE = r'\|'
    t_LPAREN = r'\('
    t_RPAREN = r'\)'
    t_LBRACKET = r'\['
    t_RBRACKET = r'\]'
    t_LBRACE = r'\{'
    t_RBRACE = r'\}'
    t_COMMA = r','
    t_SEMICOLON = r';'

    # A newline after one of these never ends a statement
    CONTINUES_AFTER = {
        'NEWLINE', 'SEMICOLON', 'LBRACE', 'LPAREN', 'LBRACKET', 'COMMA',
        'PLUS', 'MINUS', 'TIMES', 'DIVIDE', 'MODULO', 'LESS', 'GREATER',
        'EQUALEQUAL', 'NOTEQUAL', 'ANDAND', 'OROR', 'CARET', 'DOLLAR',
        'EQUALS', 'ARROW', 'DOTDOT', 'PIPE',
        'LET', 'VAR', 'FN', 'IF', 'THEN', 'ELSE', 'MATCH', 'AND', 'MOD',
        'PUB', 'IMP', 'FROM', 'FOR', 'IN',
    }

    # A line starting with one of these continues the previous line
    CONTINUES_BEFORE = {
        'PIPE', 'THEN', 'ELSE', 'AND', 'ARROW', 'RBRACE', 'RBRACKET', 'RPAREN',
        'PLUS', 'TIMES', 'DIVIDE', 'MODULO', 'LESS', 'GREATER',
        'EQUALEQUAL', 'NOTEQUAL', 'ANDAND', 'OROR', 'DOTDOT',
    }

    OPENERS = {'LPAREN': 'RPAREN', 'LBRACKET': 'RBRACKET', 'LBRACE': 'RBRACE'}

    # Regular expression rules with actions
    def t_COMMENT(self, t):
        r'//[^\n]*'
        pass

    def t_FLOAT(self, t):
        r'\d+\.\d+'
        t.value = float(t.value)
        return t

    def t_NUMBER(self, t):
        r'\d+'
        t.value = int(t.value)
        return t

    def t_STRING(self, t):
        r'"(\\.|[^"\\\n])*"'
        t.value = self._unescape(t, t.value[1:-1])
        return t

    def t_CHAR(self, t):
        r"'(\\.|[^'\\\n])*'"
        value = self._unescape(t, t.value[1:-1])
        if len(value) != 1:
            raise self._error(t, f"Invalid character literal {t.value}")
        t.value = value
        return t

    def t_IDENTIFIER(self, t):
        r'[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*'
        if '.' in t.value:
            t.type = 'QUALIFIED_NAME'
            t.value = tuple(t.value.split('.'))
        else:
            t.type = self.reserved.get(t.value, 'IDENTIFIER')
        return t

    # Define a rule so we can track line numbers
    def t_NEWLINE(self, t):
        r'\n+'
        for i in range(len(t.value)):
            self.line_starts.append(t.lexpos + i + 1)
        t.lexer.lineno += len(t.value)
        return t

    # Error handling rule
    def t_error(self, t):
        raise self._error(t, f"Illegal character '{t.value[0]}'")

    # Build the lexer
    def __init__(self, source_file="<input>"):
        self.source_file = source_file
        self.lexer = lex.lex(module=self)
        self.line_starts = [0]  # Track start of each line
        self._pending = deque()
        self._brackets = []
        self._last_type = None

    def input(self, data):
        self.lexer.input(data)
        self.lexer.lineno = 1
        self.line_starts = [0]  # Reset line starts
        self._pending.clear()
        self._brackets = []
        self._last_type = None

    def _column(self, lineno, lexpos):
        line_start = self.line_starts[min(lineno - 1, len(self.line_starts) - 1)]
        return lexpos - line_start + 1  # Make columns 1-based

    def _error(self, t, message):
        column = self._column(t.lineno, t.lexpos)
        return ParseError(
            message=message,
            location=SourceLocation(self.source_file, t.lineno, column),
            context=get_source_context(self.source_file, t.lineno),
        )

    def _unescape(self, t, text):
        try:
            return unescape(text)
        except ValueError as e:
            raise self._error(t, str(e)) from e

    def _raw_token(self):
        tok = self.lexer.token()
        if tok:
            tok.column = self._column(tok.lineno, tok.lexpos)
        return tok

    def _pop(self):
        if self._pending:
            return self._pending.popleft()
        return self._raw_token()

    def _peek_significant(self):
        """Next token that is not a newline, without consuming it"""
        for tok in self._pending:
            if tok.type != 'NEWLINE':
                return tok
        while True:
            tok = self._raw_token()
            if tok is None:
                return None
            self._pending.append(tok)
            if tok.type != 'NEWLINE':
                return tok

    def _skip_newline(self):
        if self._brackets and self._brackets[-1] != 'RBRACE':
            return True
        if self._last_type is None or self._last_type in self.CONTINUES_AFTER:
            return True
        upcoming = self._peek_significant()
        return upcoming is None or upcoming.type in self.CONTINUES_BEFORE

    def _track_brackets(self, tok):
        if tok.type in self.OPENERS:
            self._brackets.append(self.OPENERS[tok.type])
        elif self._brackets and tok.type == self._brackets[-1]:
            self._brackets.pop()

    def token(self):
        while True:
            tok = self._pop()
            if tok is None:
                return None
            if tok.type == 'NEWLINE':
                if self._skip_newline():
                    continue
                tok.value = '\n'
            self._track_brackets(tok)
            self._last_type = tok.type
            logger.debug(f"Token recognized: {tok.type}, value: {tok.value}")
            return tok

    def tokenize(self, data):
        """Return every significant token of data as a list"""
        self.input(data)
        result = []
        while True:
            tok = self.token()
            if tok is None:
                return result
            result.append(tok)
