import unittest

from rustscript.errors import DivisionByZero, InvalidArgument, TypeMismatch
from rustscript.primitives import (
    add, divide, equals, head, less_than, modulo, negate, subtract, tail, truthy,
)
from rustscript.values import (
    FALSE, TRUE, UNIT, Bool, Char, ListValue, Number, Str, display, make_list,
)


class TestArithmetic(unittest.TestCase):
    def test_numbers_add(self):
        self.assertEqual(add(Number(2), Number(3)), Number(5))
        self.assertEqual(add(Number(2), Number(0.5)), Number(2.5))

    def test_string_concatenation_accepts_any_side(self):
        self.assertEqual(add(Str("a"), Number(1)), Str("a1"))
        self.assertEqual(add(Number(1), Str("a")), Str("1a"))
        self.assertEqual(add(Str("x = "), ListValue((Number(1), Str("b")))), Str('x = [1, "b"]'))

    def test_char_arithmetic_shifts_code_point(self):
        self.assertEqual(add(Char('a'), Number(2)), Char('c'))
        self.assertEqual(subtract(Char('i'), Number(8)), Char('a'))

    def test_list_concatenation_normalizes_chars(self):
        self.assertEqual(add(ListValue((Char('h'),)), ListValue((Char('i'),))), Str("hi"))
        self.assertEqual(add(ListValue((Number(1),)), ListValue((Number(2),))),
                         ListValue((Number(1), Number(2))))

    def test_integer_division_truncates_toward_zero(self):
        self.assertEqual(divide(Number(7), Number(2)), Number(3))
        self.assertEqual(divide(Number(-7), Number(2)), Number(-3))
        self.assertEqual(divide(Number(7.0), Number(2)), Number(3.5))

    def test_division_by_zero(self):
        with self.assertRaises(DivisionByZero):
            divide(Number(1), Number(0))
        with self.assertRaises(DivisionByZero):
            modulo(Number(1), Number(0))

    def test_modulo_takes_sign_of_dividend(self):
        self.assertEqual(modulo(Number(7), Number(3)), Number(1))
        self.assertEqual(modulo(Number(-7), Number(3)), Number(-1))

    def test_modulo_needs_integers(self):
        with self.assertRaises(TypeMismatch):
            modulo(Number(1.5), Number(1))

    def test_mismatched_operands(self):
        with self.assertRaises(TypeMismatch):
            subtract(Str("a"), Number(1))
        with self.assertRaises(TypeMismatch):
            add(TRUE, Number(1))


class TestComparison(unittest.TestCase):
    def test_ordering(self):
        self.assertEqual(less_than(Number(1), Number(2)), TRUE)
        self.assertEqual(less_than(Str("b"), Str("a")), FALSE)
        self.assertEqual(less_than(Char('a'), Char('b')), TRUE)

    def test_ordering_across_kinds_is_an_error(self):
        with self.assertRaises(TypeMismatch):
            less_than(Number(1), Str("a"))

    def test_structural_equality(self):
        self.assertTrue(equals(ListValue((Number(1), Str("a"))), ListValue((Number(1), Str("a")))))
        self.assertFalse(equals(Number(1), Str("1")))
        self.assertFalse(equals(Bool(True), Number(1)))
        self.assertTrue(equals(UNIT, UNIT))


class TestListOperations(unittest.TestCase):
    def test_head_and_tail(self):
        self.assertEqual(head(Str("ab")), Char('a'))
        self.assertEqual(tail(Str("ab")), Str("b"))
        self.assertEqual(tail(ListValue((Number(1), Number(2)))), ListValue((Number(2),)))

    def test_head_of_empty_list(self):
        with self.assertRaises(InvalidArgument):
            head(ListValue(()))

    def test_truthiness(self):
        self.assertFalse(truthy(ListValue(())))
        self.assertTrue(truthy(Str("x")))
        self.assertFalse(truthy(FALSE))
        with self.assertRaises(TypeMismatch):
            truthy(Number(1))

    def test_negate(self):
        self.assertEqual(negate(Number(3)), Number(-3))
        self.assertEqual(negate(TRUE), FALSE)

    def test_make_list(self):
        self.assertEqual(make_list([]), ListValue(()))
        self.assertEqual(make_list([Char('o'), Char('k')]), Str("ok"))


class TestDisplay(unittest.TestCase):
    def test_scalars(self):
        self.assertEqual(display(Number(3)), "3")
        self.assertEqual(display(Number(3.5)), "3.5")
        self.assertEqual(display(TRUE), "true")
        self.assertEqual(display(UNIT), "()")
        self.assertEqual(display(Str("hi")), "hi")

    def test_strings_are_quoted_inside_lists(self):
        value = ListValue((Str('a"b'), Char('c'), Number(1), ListValue(())))
        self.assertEqual(display(value), '["a\\"b", \'c\', 1, []]')


if __name__ == '__main__':
    unittest.main()
