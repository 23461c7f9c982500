import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
import unittest

from basic_ast import *
from errors import (
    BasicSyntaxError, ExtraneousToken, IllegalOperator, IllegalTerm,
    IllegalVariable, InvalidStatement, NestingTooDeep, UnbalancedParentheses,
)
from lexer import Lexer, TokenType
from parser import parse_expression, parse_statement


class LexerTest(unittest.TestCase):
  def test_token_types(self):
    types = [t.type for t in Lexer('x1 = 2.5e3 + ("a")').tokenize()]
    self.assertEqual(types, [TokenType.WORD, TokenType.OPERATOR, TokenType.NUMBER,
                             TokenType.OPERATOR, TokenType.OPERATOR, TokenType.QUOTE,
                             TokenType.WORD, TokenType.QUOTE, TokenType.OPERATOR,
                             TokenType.EOF])

  def test_exponent_needs_digits(self):
    values = [t.value for t in Lexer('2E').tokenize()]
    self.assertEqual(values, ['2', 'E', ''])

  def test_push_back_is_lifo(self):
    lexer = Lexer('a b c')
    a = lexer.next_token()
    b = lexer.next_token()
    lexer.save_token(b)
    lexer.save_token(a)
    self.assertEqual([lexer.next_token().value for _ in range(3)], ['a', 'b', 'c'])
    self.assertFalse(lexer.has_more_tokens())

  def test_rest_of_line_keeps_spacing(self):
    lexer = Lexer('REM  hello,   world!')
    lexer.next_token()
    self.assertEqual(lexer.rest_of_line(), 'hello,   world!')

  def test_only_ascii_digits_are_numbers(self):
    tokens = Lexer('1² ٣').tokenize()
    self.assertEqual([(t.type, t.value) for t in tokens],
                     [(TokenType.NUMBER, '1'), (TokenType.OPERATOR, '²'),
                      (TokenType.OPERATOR, '٣'), (TokenType.EOF, '')])
    self.assertFalse(tokens[1].is_integer())


class ExpressionParserTest(unittest.TestCase):
  def assert_parses(self, source, rendered):
    self.assertEqual(to_string(parse_expression(source)), rendered)

  def test_precedence(self):
    self.assert_parses('2+3*4', '(2 + (3 * 4))')

  def test_parentheses(self):
    self.assert_parses('(2+3)*4', '((2 + 3) * 4)')

  def test_left_associative(self):
    self.assert_parses('10-3-2', '((10 - 3) - 2)')
    self.assert_parses('8/4/2', '((8 / 4) / 2)')

  def test_unary_minus(self):
    self.assert_parses('-5+3', '((0 - 5) + 3)')
    self.assert_parses('-2*3', '(0 - (2 * 3))')
    self.assert_parses('3*-2', '(3 * (0 - 2))')

  def test_assignment_groups_right(self):
    self.assert_parses('a = b = 3', '(a = (b = 3))')
    self.assert_parses('x = 1 + 2', '(x = (1 + 2))')

  def test_assignment_target_checked_later(self):
    expr = parse_expression('3 = 4')
    self.assertEqual(expr, Compound('=', Constant(3.0), Constant(4.0)))

  def test_extra_token(self):
    with self.assertRaises(ExtraneousToken):
      parse_expression('1 2')

  def test_unbalanced(self):
    with self.assertRaises(UnbalancedParentheses):
      parse_expression('(1 + 2')

  def test_illegal_term(self):
    with self.assertRaises(IllegalTerm):
      parse_expression('1 + *')
    with self.assertRaises(IllegalTerm):
      parse_expression('')

  def test_syntax_errors_are_syntax_errors(self):
    with self.assertRaises(SyntaxError):
      parse_expression(')')

  def test_long_chain(self):
    exp = parse_expression('+'.join(['1'] * 1500))
    self.assertEqual(exp.op, '+')
    text = to_string(exp)
    self.assertTrue(text.startswith('(' * 1499 + '1 + 1)'))
    self.assertTrue(text.endswith(' + 1)'))

  def test_deep_nesting(self):
    source = '(' * 5000 + '1' + ')' * 5000
    with self.assertRaises(NestingTooDeep) as cm:
      parse_expression(source)
    self.assertEqual(cm.exception.kind, 'NestingTooDeep')
    with self.assertRaises(NestingTooDeep):
      parse_statement('PRINT ' + source)


class StatementParserTest(unittest.TestCase):
  def test_rem(self):
    self.assertEqual(parse_statement('REM  anything goes: 1 + ('), RemStatement('anything goes: 1 + ('))

  def test_let(self):
    self.assertEqual(parse_statement('LET x = 1'), LetStatement('x', Constant(1.0)))

  def test_implicit_let(self):
    self.assertEqual(parse_statement('total = total + 1'),
                     LetStatement('total', Compound('+', Identifier('total'), Constant(1.0))))

  def test_keywords_case_insensitive(self):
    self.assertEqual(parse_statement('goto 40'), GotoStatement(40))
    self.assertEqual(parse_statement('End'), EndStatement())

  def test_let_needs_equals(self):
    with self.assertRaises(IllegalOperator):
      parse_statement('LET x + 1')

  def test_let_needs_variable(self):
    with self.assertRaises(IllegalVariable):
      parse_statement('LET 5 = 1')

  def test_illegal_variable_has_its_own_kind(self):
    with self.assertRaises(IllegalVariable) as cm:
      parse_statement('INPUT 5')
    self.assertEqual(cm.exception.kind, 'IllegalVariable')
    self.assertTrue(str(cm.exception).startswith('IllegalVariable: '))

  def test_print_list(self):
    stmt = parse_statement('PRINT x, x + 1, 2')
    self.assertIsNone(stmt.literal)
    self.assertEqual([to_string(e) for e in stmt.exprs], ['x', '(x + 1)', '2'])

  def test_print_literal(self):
    self.assertEqual(parse_statement('PRINT "hello,  world"'), PrintStatement('hello,  world', ()))

  def test_print_literal_then_values(self):
    stmt = parse_statement('PRINT "x is", x')
    self.assertEqual(stmt.literal, 'x is')
    self.assertEqual(stmt.exprs, (Identifier('x'),))

  def test_print_unterminated_literal(self):
    with self.assertRaises(BasicSyntaxError):
      parse_statement('PRINT "oops')

  def test_print_needs_something(self):
    with self.assertRaises(IllegalTerm):
      parse_statement('PRINT')

  def test_input(self):
    self.assertEqual(parse_statement('INPUT n'), InputStatement('n'))
    with self.assertRaises(IllegalVariable):
      parse_statement('INPUT 3')

  def test_goto_needs_integer(self):
    with self.assertRaises(BasicSyntaxError):
      parse_statement('GOTO x')
    with self.assertRaises(BasicSyntaxError):
      parse_statement('GOTO 1.5')
    with self.assertRaises(BasicSyntaxError):
      parse_statement('GOTO ²')

  def test_if(self):
    stmt = parse_statement('IF x + 1 > 3 then 40')
    self.assertEqual(stmt, IfStatement(Compound('+', Identifier('x'), Constant(1.0)), '>',
                                       Constant(3.0), 40))

  def test_if_equals_is_comparison(self):
    stmt = parse_statement('IF x = 5 THEN 10')
    self.assertEqual(stmt.op, '=')
    self.assertEqual(stmt.left, Identifier('x'))

  def test_if_bad_operator(self):
    with self.assertRaises(IllegalOperator):
      parse_statement('IF x ! 5 THEN 10')

  def test_if_needs_then(self):
    with self.assertRaises(BasicSyntaxError):
      parse_statement('IF x > 5 GOTO 10')

  def test_if_target_must_be_number(self):
    with self.assertRaises(BasicSyntaxError):
      parse_statement('IF x > 5 THEN y')

  def test_extraneous_token(self):
    for source in ('END now', 'GOTO 10 20', 'INPUT a b', 'LET x = 1 2', 'IF 1 < 2 THEN 5 6'):
      with self.subTest(source=source):
        with self.assertRaises(ExtraneousToken):
          parse_statement(source)

  def test_invalid_statement(self):
    with self.assertRaises(InvalidStatement):
      parse_statement('42')
    with self.assertRaises(InvalidStatement):
      parse_statement('')

  def test_statement_to_string(self):
    stmt = parse_statement('if a < b * 2 then 100')
    self.assertEqual(statement_to_string(stmt), 'IF a < (b * 2) THEN 100')


if __name__ == '__main__':
    unittest.main()
