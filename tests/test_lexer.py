import unittest

from rustscript.errors import ParseError
from rustscript.lexer import Lexer


class TestLexer(unittest.TestCase):
    def setUp(self):
        self.lexer = Lexer()

    def types(self, source):
        return [tok.type for tok in self.lexer.tokenize(source)]

    def test_floats_and_ranges(self):
        self.assertEqual(self.types("1.5 [1..5]"),
                         ['FLOAT', 'LBRACKET', 'NUMBER', 'DOTDOT', 'NUMBER', 'RBRACKET'])

    def test_qualified_name_is_one_token(self):
        tokens = self.lexer.tokenize("Math.Inner.cube")
        self.assertEqual(len(tokens), 1)
        self.assertEqual(tokens[0].type, 'QUALIFIED_NAME')
        self.assertEqual(tokens[0].value, ('Math', 'Inner', 'cube'))

    def test_keywords(self):
        self.assertEqual(self.types("let var fn pub mod imp from and"),
                         ['LET', 'VAR', 'FN', 'PUB', 'MOD', 'IMP', 'FROM', 'AND'])

    def test_operators(self):
        self.assertEqual(self.types("a == b != c && d || e => f | g"),
                         ['IDENTIFIER', 'EQUALEQUAL', 'IDENTIFIER', 'NOTEQUAL', 'IDENTIFIER',
                          'ANDAND', 'IDENTIFIER', 'OROR', 'IDENTIFIER', 'ARROW', 'IDENTIFIER',
                          'PIPE', 'IDENTIFIER'])

    def test_string_escapes(self):
        tokens = self.lexer.tokenize(r'"a\tbA\""')
        self.assertEqual(tokens[0].value, 'a\tbA"')

    def test_char_literal(self):
        tokens = self.lexer.tokenize(r"'\n' 'x'")
        self.assertEqual([tok.value for tok in tokens], ['\n', 'x'])

    def test_unknown_escape_raises(self):
        with self.assertRaises(ParseError):
            self.lexer.tokenize(r'"\q"')

    def test_multi_character_char_literal_raises(self):
        with self.assertRaises(ParseError):
            self.lexer.tokenize("'ab'")

    def test_illegal_character(self):
        with self.assertRaises(ParseError) as cm:
            self.lexer.tokenize("let x = #")
        self.assertEqual(cm.exception.location.line, 1)
        self.assertEqual(cm.exception.location.column, 9)

    def test_comments_are_skipped(self):
        self.assertEqual(self.types("1 // two\n3"), ['NUMBER', 'NEWLINE', 'NUMBER'])

    def test_newlines_inside_brackets_are_ignored(self):
        self.assertEqual(self.types("[1,\n2\n]"),
                         ['LBRACKET', 'NUMBER', 'COMMA', 'NUMBER', 'RBRACKET'])
        self.assertEqual(self.types("f(\n1\n)"),
                         ['IDENTIFIER', 'LPAREN', 'NUMBER', 'RPAREN'])

    def test_newlines_inside_braces_separate_statements(self):
        self.assertEqual(self.types("{1\n2}"),
                         ['LBRACE', 'NUMBER', 'NEWLINE', 'NUMBER', 'RBRACE'])

    def test_match_arms_continue_the_line(self):
        self.assertEqual(self.types("match x\n| y then 1\n| z then 2"),
                         ['MATCH', 'IDENTIFIER', 'PIPE', 'IDENTIFIER', 'THEN', 'NUMBER',
                          'PIPE', 'IDENTIFIER', 'THEN', 'NUMBER'])

    def test_trailing_operator_continues_the_line(self):
        self.assertEqual(self.types("1 +\n2"), ['NUMBER', 'PLUS', 'NUMBER'])

    def test_leading_minus_starts_a_new_statement(self):
        self.assertEqual(self.types("1\n-2"), ['NUMBER', 'NEWLINE', 'MINUS', 'NUMBER'])

    def test_blank_lines_collapse(self):
        self.assertEqual(self.types("\n\n1\n\n// note\n\n2\n"), ['NUMBER', 'NEWLINE', 'NUMBER'])

    def test_line_and_column(self):
        tokens = self.lexer.tokenize("x\n  y")
        self.assertEqual((tokens[0].lineno, tokens[0].column), (1, 1))
        self.assertEqual((tokens[2].lineno, tokens[2].column), (2, 3))


if __name__ == '__main__':
    unittest.main()
