import logging

import ply.lex as lex
import ply.yacc as yacc

import rustscript.rustscript_ast as ast
from rustscript.errors import ParseError, SourceLocation, get_source_context
from rustscript.lexer import Lexer
from rustscript.values import FALSE, TRUE, Char, Number, Str

logger = logging.getLogger(__name__)


class Parser:
    start = 'program'

    precedence = (
        ('right', 'EQUALS', 'ARROW', 'THEN', 'ELSE'),
        ('right', 'MATCH'),
        ('left', 'PIPE'),
        ('left', 'OROR'),
        ('left', 'ANDAND'),
        ('left', 'EQUALEQUAL', 'NOTEQUAL', 'LESS', 'GREATER'),
        ('left', 'PLUS', 'MINUS'),
        ('left', 'TIMES', 'DIVIDE', 'MODULO'),
        ('right', 'UNARY'),
    )

    def __init__(self):
        self.lexer = Lexer()
        self.tokens = self.lexer.tokens  # Get token list from lexer
        self.parser = yacc.yacc(module=self, debug=False, write_tables=False, errorlog=logger)
        self.source_file = "<input>"

    def parse(self, source: str, file_path: str = "<input>") -> ast.Program:
        """Parse source code into a Program"""
        logger.debug(f"Parsing {file_path}")
        self.source_file = file_path
        self.lexer.source_file = file_path
        self.lexer.input(source)
        statements = self.parser.parse(source, lexer=self.lexer)
        program = ast.Program(statements or [], source_file=file_path)
        program.location = SourceLocation(file_path, 1, 1)
        return program

    # --- Helpers ---

    def _location(self, p, index=1):
        symbol = p.slice[index]
        if isinstance(symbol, lex.LexToken):
            return SourceLocation(self.source_file, symbol.lineno, getattr(symbol, 'column', 0))
        return getattr(p[index], 'location', None)

    def _node(self, p, node, index=1):
        node.location = self._location(p, index)
        return node

    def _error(self, message, location):
        return ParseError(
            message=message,
            location=location,
            context=get_source_context(location.file, location.line) if location else None,
        )

    def _reject_public(self, statements, where):
        for statement in statements:
            if isinstance(statement, ast.ModuleDeclaration) or \
                    getattr(statement, 'is_public', False):
                raise self._error(f"'pub' and 'mod' declarations are not allowed inside {where}",
                                  statement.location)

    # --- Program structure ---

    def p_program(self, p):
        '''program : items'''
        p[0] = p[1]

    def p_items(self, p):
        '''items : item
                 | items separator item'''
        if len(p) == 2:
            p[0] = [p[1]] if p[1] is not None else []
        else:
            p[0] = p[1] + ([p[3]] if p[3] is not None else [])

    def p_separator(self, p):
        '''separator : NEWLINE
                     | SEMICOLON'''
        p[0] = p[1]

    def p_item(self, p):
        '''item : statement
                | empty'''
        p[0] = p[1]

    def p_empty(self, p):
        '''empty :'''
        p[0] = None

    def p_statement(self, p):
        '''statement : expression
                     | declaration'''
        p[0] = p[1]

    def p_declaration_pub_let(self, p):
        '''declaration : PUB LET IDENTIFIER EQUALS expression'''
        initializer = p[5]
        if isinstance(initializer, ast.LambdaExpression) and initializer.name is None:
            initializer.name = p[3]
        p[0] = self._node(p, ast.LetBinding(p[3], initializer, is_public=True))

    def p_declaration_var(self, p):
        '''declaration : VAR IDENTIFIER EQUALS expression'''
        if not isinstance(p[4], ast.LambdaExpression):
            raise self._error(f"'var {p[2]}' must be given a function", self._location(p, 1))
        p[0] = self._node(p, ast.Variation(p[2], p[4]))

    def p_declaration_module(self, p):
        '''declaration : MOD IDENTIFIER LBRACE items RBRACE
                       | PUB MOD IDENTIFIER LBRACE items RBRACE'''
        if len(p) == 6:
            p[0] = self._node(p, ast.ModuleDeclaration(p[2], p[4], is_public=False))
        else:
            p[0] = self._node(p, ast.ModuleDeclaration(p[3], p[5], is_public=True))

    def p_declaration_import(self, p):
        '''declaration : IMP import_names FROM STRING'''
        p[0] = self._node(p, ast.Import(p[2], p[4]))

    def p_import_names(self, p):
        '''import_names : IDENTIFIER
                        | import_names COMMA IDENTIFIER'''
        if len(p) == 2:
            p[0] = [p[1]]
        else:
            p[0] = p[1] + [p[3]]

    # --- Expressions ---

    def p_expression_let(self, p):
        '''expression : LET IDENTIFIER EQUALS expression'''
        initializer = p[4]
        if isinstance(initializer, ast.LambdaExpression) and initializer.name is None:
            initializer.name = p[2]
        p[0] = self._node(p, ast.LetBinding(p[2], initializer))

    def p_expression_lambda(self, p):
        '''expression : FN LPAREN params RPAREN ARROW expression'''
        params = p[3]
        if len(set(params)) != len(params):
            raise self._error("Duplicate parameter name", self._location(p, 1))
        p[0] = self._node(p, ast.LambdaExpression(params, p[6]))

    def p_params(self, p):
        '''params : empty
                  | param_list'''
        p[0] = p[1] or []

    def p_param_list(self, p):
        '''param_list : IDENTIFIER
                      | param_list COMMA IDENTIFIER'''
        if len(p) == 2:
            p[0] = [p[1]]
        else:
            p[0] = p[1] + [p[3]]

    def p_expression_if(self, p):
        '''expression : IF expression THEN expression ELSE expression'''
        p[0] = self._node(p, ast.IfExpression(p[2], p[4], p[6]))

    def p_expression_match(self, p):
        '''expression : MATCH expression match_cases'''
        p[0] = self._node(p, ast.MatchExpression(p[2], p[3]))

    def p_match_cases(self, p):
        '''match_cases : match_case
                       | match_cases match_case'''
        if len(p) == 2:
            p[0] = [p[1]]
        else:
            p[0] = p[1] + [p[2]]

    def p_match_case(self, p):
        '''match_case : PIPE IDENTIFIER THEN expression
                      | PIPE IDENTIFIER AND expression THEN expression'''
        if len(p) == 5:
            p[0] = self._node(p, ast.MatchCase(p[2], p[4]))
        else:
            p[0] = self._node(p, ast.MatchCase(p[2], p[6], guard=p[4]))

    def p_expression_binary(self, p):
        '''expression : expression OROR expression
                      | expression ANDAND expression
                      | expression EQUALEQUAL expression
                      | expression NOTEQUAL expression
                      | expression LESS expression
                      | expression GREATER expression
                      | expression PLUS expression
                      | expression MINUS expression
                      | expression TIMES expression
                      | expression DIVIDE expression
                      | expression MODULO expression'''
        node = ast.BinaryOperation(p[1], p[2], p[3])
        node.location = self._location(p, 2)
        p[0] = node

    def p_expression_unary(self, p):
        '''expression : MINUS expression %prec UNARY
                      | CARET expression %prec UNARY
                      | DOLLAR expression %prec UNARY'''
        p[0] = self._node(p, ast.UnaryOperation(p[1], p[2]))

    def p_expression_postfix(self, p):
        '''expression : postfix'''
        p[0] = p[1]

    def p_postfix_primary(self, p):
        '''postfix : primary'''
        p[0] = p[1]

    def p_postfix_call(self, p):
        '''postfix : postfix LPAREN arguments RPAREN'''
        callee, arguments = p[1], p[3]
        if isinstance(callee, ast.Identifier) and callee.name == 'seq' \
                and len(arguments) == 1 and isinstance(arguments[0], ast.ListLiteral):
            elements = arguments[0].elements
            self._reject_public(elements, "a sequence expression")
            node = ast.SequenceExpression(elements)
        else:
            node = ast.FunctionCall(callee, arguments)
        node.location = callee.location
        p[0] = node

    def p_arguments(self, p):
        '''arguments : empty
                     | argument_list'''
        p[0] = p[1] or []

    def p_argument_list(self, p):
        '''argument_list : expression
                         | argument_list COMMA expression'''
        if len(p) == 2:
            p[0] = [p[1]]
        else:
            p[0] = p[1] + [p[3]]

    # --- Primaries ---

    def p_primary_number(self, p):
        '''primary : NUMBER
                   | FLOAT'''
        p[0] = self._node(p, ast.Literal(Number(p[1])))

    def p_primary_string(self, p):
        '''primary : STRING'''
        p[0] = self._node(p, ast.Literal(Str(p[1])))

    def p_primary_char(self, p):
        '''primary : CHAR'''
        p[0] = self._node(p, ast.Literal(Char(p[1])))

    def p_primary_bool(self, p):
        '''primary : TRUE
                   | FALSE'''
        p[0] = self._node(p, ast.Literal(TRUE if p[1] == 'true' else FALSE))

    def p_primary_identifier(self, p):
        '''primary : IDENTIFIER'''
        p[0] = self._node(p, ast.Identifier(p[1]))

    def p_primary_qualified_name(self, p):
        '''primary : QUALIFIED_NAME'''
        p[0] = self._node(p, ast.QualifiedName(p[1]))

    def p_primary_group(self, p):
        '''primary : LPAREN expression RPAREN'''
        p[0] = p[2]

    def p_primary_unit(self, p):
        '''primary : LPAREN RPAREN'''
        p[0] = self._node(p, ast.UnitLiteral())

    def p_primary_block(self, p):
        '''primary : LBRACE items RBRACE'''
        self._reject_public(p[2], "a block")
        p[0] = self._node(p, ast.Block(p[2]))

    def p_primary_list(self, p):
        '''primary : LBRACKET arguments RBRACKET'''
        p[0] = self._node(p, ast.ListLiteral(p[2]))

    def p_primary_range(self, p):
        '''primary : LBRACKET expression DOTDOT expression RBRACKET'''
        p[0] = self._node(p, ast.RangeLiteral(p[2], p[4]))

    def p_primary_comprehension(self, p):
        '''primary : LBRACKET expression FOR IDENTIFIER IN expression RBRACKET
                   | LBRACKET expression FOR IDENTIFIER IN expression IF expression RBRACKET'''
        condition = p[8] if len(p) == 10 else None
        p[0] = self._node(p, ast.Comprehension(p[2], p[4], p[6], condition))

    def p_error(self, p):
        if p:
            value = '\\n' if p.type == 'NEWLINE' else p.value
            location = SourceLocation(self.source_file, p.lineno, getattr(p, 'column', 0))
            error = self._error(f"Syntax error at '{value}'", location)
            error.notes.append("Check syntax near this location")
            raise error
        raise ParseError(
            message="Syntax error at end of input",
            location=None,
            notes=["Unexpected end of file"],
        )
