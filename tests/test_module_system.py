import io
import unittest

from rustscript.errors import (
    DeclarationError, DivisionByZero, PrivateAccessDenied, TypeMismatch, UnboundIdentifier,
)
from rustscript.interpreter import Interpreter
from rustscript.module_table import ModulePath
from rustscript.values import Number, Str, display

MATH = """
let square = fn(x) => x * x

mod Math {
    pub let PI = 3.1415
    pub let TAU = 2 * PI
    let mul = fn(x, y) => x * y
    pub let cube = fn(x) => Math.mul(square(x), x)
    pub let cubeBare = fn(x) => mul(square(x), x)
}
"""


class TestModuleVisibility(unittest.TestCase):
    def setUp(self):
        self.output = io.StringIO()
        self.interpreter = Interpreter(output=self.output)
        self.interpreter.eval_source(MATH)

    def run_source(self, source):
        return self.interpreter.eval_source(source)

    def test_public_members_are_reachable_from_outside(self):
        self.assertEqual(self.run_source("Math.PI"), Number(3.1415))
        self.assertEqual(self.run_source("Math.TAU"), Number(6.283))

    def test_public_function_uses_private_helper(self):
        self.assertEqual(self.run_source("Math.cube(3)"), Number(27))
        self.assertEqual(self.run_source("Math.cubeBare(3)"), Number(27))

    def test_private_member_from_outside_is_denied(self):
        with self.assertRaises(PrivateAccessDenied) as cm:
            self.run_source("Math.mul(3, 3)")
        self.assertIn("mul", cm.exception.message)
        self.assertEqual(cm.exception.location.line, 1)

    def test_private_member_through_top_level_function_is_denied(self):
        self.run_source("let breakMul = fn() => Math.mul(1, 1)")
        with self.assertRaises(PrivateAccessDenied):
            self.run_source("breakMul()")

    def test_module_members_are_not_in_scope_outside(self):
        with self.assertRaises(UnboundIdentifier):
            self.run_source("cube(2)")

    def test_missing_member(self):
        with self.assertRaises(UnboundIdentifier):
            self.run_source("Math.nope")

    def test_qualifier_must_be_a_module(self):
        with self.assertRaises(TypeMismatch):
            self.run_source("square.x")

    def test_module_value(self):
        self.assertEqual(self.run_source("typeof(Math)"), Str("Module"))
        self.assertEqual(display(self.run_source("Math")), "<mod Math>")

    def test_module_is_registered(self):
        record = self.interpreter.modules.lookup(ModulePath("<input>", ("Math",)))
        self.assertIsNotNone(record)
        self.assertEqual(sorted(record.names()), ["PI", "TAU", "cube", "cubeBare", "mul"])


class TestModuleDeclarations(unittest.TestCase):
    def setUp(self):
        self.output = io.StringIO()
        self.interpreter = Interpreter(output=self.output)

    def run_source(self, source):
        return self.interpreter.eval_source(source)

    def test_closure_keeps_private_access_outside_the_module(self):
        source = """
mod Vault {
    let secret = 7
    pub let opener = fn() => fn() => secret
}
let open = Vault.opener()
open()
"""
        self.assertEqual(self.run_source(source), Number(7))

    def test_private_function_passed_out_still_runs(self):
        source = """
mod M {
    let helper = fn(x) => x + 1
    pub let apply = fn(xs) => fmap(helper, xs)
}
M.apply([1, 2])
"""
        self.assertEqual(display(self.run_source(source)), "[2, 3]")

    def test_nested_public_module(self):
        source = """
mod Outer {
    pub mod Inner {
        pub let greet = fn(name) => "Hello, " + name
    }
}
Outer.Inner.greet("world")
"""
        self.assertEqual(self.run_source(source), Str("Hello, world"))
        self.assertIsNotNone(self.interpreter.modules.lookup(ModulePath("<input>", ("Outer", "Inner"))))

    def test_private_nested_module_is_hidden(self):
        self.run_source("mod M {\n mod Hidden { pub let x = 1 }\n}")
        with self.assertRaises(PrivateAccessDenied):
            self.run_source("M.Hidden.x")

    def test_submodule_does_not_inherit_private_access(self):
        source = """
let mul = fn(x, y) => 0
mod M {
    let mul = fn(x, y) => x * y
    pub mod Inner {
        pub let bare = fn() => mul(2, 3)
        pub let qualified = fn() => M.mul(2, 3)
    }
}
"""
        self.run_source(source)
        with self.assertRaises(PrivateAccessDenied):
            self.run_source("M.Inner.bare()")
        with self.assertRaises(PrivateAccessDenied):
            self.run_source("M.Inner.qualified()")

    def test_siblings_declared_later_are_visible_inside_functions(self):
        self.run_source("mod M {\n pub let a = fn() => b() + 1\n let b = fn() => 1\n}")
        self.assertEqual(self.run_source("M.a()"), Number(2))

    def test_reading_a_member_before_initialization(self):
        with self.assertRaises(UnboundIdentifier) as cm:
            self.run_source("mod M {\n pub let a = b\n let b = 1\n}")
        self.assertIn("before initialization", cm.exception.message)

    def test_repeated_member_shadows(self):
        self.run_source("mod M {\n pub let a = 1\n pub let a = a + 1\n}")
        self.assertEqual(self.run_source("M.a"), Number(2))

    def test_member_cannot_change_visibility(self):
        with self.assertRaises(DeclarationError):
            self.run_source("mod M { let a = 1; pub let a = 2 }")

    def test_duplicate_module(self):
        self.run_source("mod M { }")
        with self.assertRaises(DeclarationError):
            self.run_source("mod M { }")

    def test_failed_module_can_be_declared_again(self):
        with self.assertRaises(DivisionByZero):
            self.run_source("mod M { pub let a = 1 / 0 }")
        with self.assertRaises(UnboundIdentifier):
            self.run_source("M")
        self.run_source("mod M { pub let a = 1 }")
        self.assertEqual(self.run_source("M.a"), Number(1))

    def test_failed_module_drops_its_submodules(self):
        with self.assertRaises(DivisionByZero):
            self.run_source("mod Outer {\n pub mod Inner { pub let x = 1 }\n pub let bad = 1 / 0\n}")
        self.assertIsNone(self.interpreter.modules.lookup(ModulePath("<input>", ("Outer",))))
        self.assertIsNone(self.interpreter.modules.lookup(ModulePath("<input>", ("Outer", "Inner"))))

    def test_failed_module_restores_the_shadowed_binding(self):
        self.run_source("let M = 5")
        with self.assertRaises(DivisionByZero):
            self.run_source("mod M { pub let a = 1 / 0 }")
        self.assertEqual(self.run_source("M"), Number(5))

    def test_top_level_function_refers_to_later_module(self):
        source = """
let useLater = fn() => Later.value
mod Later { pub let value = 5 }
useLater()
"""
        self.assertEqual(self.run_source(source), Number(5))

    def test_variation_inside_module(self):
        source = """
mod M {
    let f = fn() => 0
    var f = fn(x) => x
    pub let both = fn() => [f(), f(9)]
}
M.both()
"""
        self.assertEqual(display(self.run_source(source)), "[0, 9]")

    def test_module_body_output_runs_in_order(self):
        self.run_source('println("before")\nmod M { println("inside") }\nprintln("after")')
        self.assertEqual(self.output.getvalue(), "before\ninside\nafter\n")


if __name__ == '__main__':
    unittest.main()
