"""
Test suite for the Kody evaluator.

Tests cover:
- End-to-end programs through run_source
- Block scoping and function call scopes
- Return propagation and program results
- Runtime error detection
"""

import io
import unittest
import sys
import os
from contextlib import redirect_stdout

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

import kody
from kody.objects import Value, Number, EMPTY
from kody.parser import parse_string
from kody.runtime import (
    Interpreter, ScopeStack, execute, UnknownVariableError, TypeMismatchError,
    ArityMismatchError, NotCallableError, DivisionByZeroError,
    UnsupportedOperationError, RecursionDepthError
)


class EvaluatorTestCase(unittest.TestCase):
    """Runs programs with stdout captured."""

    def run_program(self, source: str):
        """Run a program; returns (result, printed text)."""
        output = io.StringIO()
        with redirect_stdout(output):
            result = kody.run_source(source)
        return result, output.getvalue()

    def output_of(self, source: str) -> str:
        return self.run_program(source)[1]


class TestPrograms(EvaluatorTestCase):
    """End-to-end programs."""

    def test_function_call(self):
        """Test the canonical add example."""
        source = "func add(x, y) { return x + y }\nprint(add(2, 3))"

        self.assertEqual(self.output_of(source), "5\n")

    def test_while_loop(self):
        """Test a counting loop."""
        source = """
        i = 0
        while i < 3 {
            print("i = ", i)
            i += 1
        }
        """

        self.assertEqual(self.output_of(source), "i = 0\ni = 1\ni = 2\n")

    def test_countdown_reaches_zero(self):
        """Test a loop that decrements a counter until its condition fails."""
        for start in ("0", "1", "3", "12"):
            with self.subTest(start=start):
                source = f"n = {start} while n > 0 {{ n -= 1 }} print(n)"
                self.assertEqual(self.output_of(source), "0\n")

    def test_exact_arithmetic(self):
        """Test that fractions are exact and displayed as decimals."""
        self.assertEqual(self.output_of("print(0.1 + 0.2)"), "0.3\n")
        self.assertEqual(self.output_of("print(1 / 3 + 1 / 6)"), "0.5\n")
        self.assertEqual(self.output_of("print(3 / -5)"), "-0.6\n")
        self.assertEqual(self.output_of("print(10 / 2)"), "5\n")

    def test_operator_precedence(self):
        """Test precedence through evaluation."""
        self.assertEqual(self.output_of("print(2 + 3 * 4)"), "14\n")
        self.assertEqual(self.output_of("print((2 + 3) * 4)"), "20\n")
        self.assertEqual(self.output_of("print((1 < 2) and not false)"), "true\n")

    def test_comparison_binds_looser_than_and(self):
        """Test that 'a < b and c' compares a with the conjunction."""
        with self.assertRaises(TypeMismatchError):
            self.run_program("print(1 < 2 and not false)")

    def test_right_grouping_of_subtraction(self):
        """Test that repeated subtraction groups to the right."""
        self.assertEqual(self.output_of("print(10 - 4 - 3)"), "9\n")

    def test_if_else(self):
        """Test both branches of an if statement."""
        source = """
        func sign(n) {
            if n < 0 { return "negative" } else if n == 0 { return "zero" }
            return "positive"
        }
        print(sign(-4), " ", sign(0), " ", sign(7))
        """

        self.assertEqual(self.output_of(source), "negative zero positive\n")

    def test_if_as_value(self):
        """Test that an if statement evaluates to its branch."""
        source = "x = if 1 < 2 { 10 } else { 20 } print(x)"

        self.assertEqual(self.output_of(source), "10\n")

    def test_recursion(self):
        """Test a recursive function."""
        source = """
        func fact(n) {
            if n <= 1 { return 1 }
            return n * fact(n - 1)
        }
        print(fact(10))
        """

        self.assertEqual(self.output_of(source), "3628800\n")

    def test_return_from_nested_loop(self):
        """Test that return leaves every enclosing block and loop."""
        source = """
        func first_over(limit) {
            i = 0
            while true {
                i += 1
                if i > limit { return i }
            }
        }
        print(first_over(3))
        """

        self.assertEqual(self.output_of(source), "4\n")

    def test_function_without_return(self):
        """Test that a function that never returns yields empty."""
        source = "func noop() { x = 1 }\nprint(noop())"

        self.assertEqual(self.output_of(source), "<empty>\n")

    def test_function_values(self):
        """Test printing function values."""
        source = "func f(a, b) a\nprint(f, \" \", print)"

        self.assertEqual(self.output_of(source), "<func f(a, b)> <native print>\n")

    def test_user_function_shadows_native(self):
        """Test that user bindings are found before natives."""
        source = "func __add(a, b) { return a * b }\nprint(2 + 3)"

        self.assertEqual(self.output_of(source), "6\n")

    def test_redeclared_function_uses_later_body(self):
        """Test that calls reach the last declaration of a repeated name."""
        with self.assertLogs("kody.parser.parser", level="WARNING"):
            output = self.output_of("print(f())\nfunc f() { return 1 }\nfunc f() { return 2 }")

        self.assertEqual(output, "2\n")

    def test_functions_declared_after_use(self):
        """Test that hoisting makes every function available from the start."""
        source = "print(twice(4))\nfunc twice(n) { return n * 2 }"

        self.assertEqual(self.output_of(source), "8\n")


class TestScoping(EvaluatorTestCase):
    """Test cases for variable scopes."""

    def test_assignment_updates_outer_binding(self):
        """Test that assignment overwrites an existing binding in an outer frame."""
        self.assertEqual(self.output_of("x = 1 { x = 2 } print(x)"), "2\n")

    def test_block_locals_are_dropped(self):
        """Test that a variable created in a block does not outlive it."""
        with self.assertRaises(UnknownVariableError):
            self.run_program("{ y = 1 } print(y)")

    def test_function_does_not_see_caller_locals(self):
        """Test that functions only see globals and their parameters."""
        source = "x = 1\nfunc f() { return x }\nprint(f())"

        with self.assertRaises(UnknownVariableError) as context:
            self.run_program(source)
        self.assertEqual(context.exception.name, "x")

    def test_function_sees_other_functions(self):
        """Test that functions are global."""
        source = "func one() { return 1 }\nfunc two() { return one() + one() }\nprint(two())"

        self.assertEqual(self.output_of(source), "2\n")

    def test_parameters_are_local(self):
        """Test that assigning to a parameter does not leak."""
        source = "func bump(n) { n += 1 return n }\nn = 5 print(bump(n), n)"

        self.assertEqual(self.output_of(source), "65\n")

    def test_scope_stack(self):
        """Test ScopeStack lookup and assignment rules directly."""
        scopes = ScopeStack({"g": Value.boolean(True)})
        scopes.push()
        scopes.assign("a", EMPTY)
        scopes.push({"b": EMPTY})
        scopes.assign("a", Value.boolean(False))

        self.assertEqual(scopes.depth, 3)
        self.assertEqual(scopes.lookup("a"), Value.boolean(False))
        self.assertNotIn("a", scopes.frames[2])
        self.assertIsNone(scopes.lookup("missing"))

        call_scopes = scopes.for_call({"p": EMPTY})
        self.assertEqual(call_scopes.depth, 2)
        self.assertIsNone(call_scopes.lookup("a"))
        self.assertIs(call_scopes.global_frame, scopes.global_frame)

    def test_global_frame_cannot_be_popped(self):
        """Test that the global frame always stays."""
        with self.assertRaises(IndexError):
            ScopeStack().pop()


class TestProgramResult(EvaluatorTestCase):
    """Test cases for the value a program evaluates to."""

    def test_top_level_return(self):
        """Test that a top-level return ends the program with its value."""
        result, output = self.run_program('x = 2 return x * 3 print("unreachable")')

        self.assertEqual(result, Value.number(Number.from_int(6)))
        self.assertEqual(output, "")

    def test_no_return(self):
        """Test that a program without return yields empty."""
        self.assertEqual(self.run_program("x = 1")[0], EMPTY)

    def test_execute(self):
        """Test the execute entry point with a parsed program."""
        program = parse_string("func id(v) { return v }\nreturn id(true)")

        self.assertEqual(execute(program.functions, program.main), Value.boolean(True))

    def test_custom_natives(self):
        """Test an interpreter configured without the native library."""
        program = parse_string("print(1)")

        with self.assertRaises(UnknownVariableError):
            Interpreter(program.functions, natives={}).run(program.main)


class TestRuntimeErrors(EvaluatorTestCase):
    """Test cases for runtime errors."""

    def test_unknown_variable(self):
        """Test reading an unbound name."""
        with self.assertRaises(UnknownVariableError) as context:
            self.run_program("print(nope)")
        self.assertEqual(context.exception.diagnostic.code, "R001")

    def test_non_bool_condition(self):
        """Test that conditions must be booleans."""
        with self.assertRaises(TypeMismatchError):
            self.run_program("if 1 { print(1) }")
        with self.assertRaises(TypeMismatchError):
            self.run_program('while "yes" { print(1) }')

    def test_operand_type_mismatch(self):
        """Test arithmetic on a string."""
        with self.assertRaises(TypeMismatchError):
            self.run_program('x = 1 + "a"')

    def test_no_short_circuit(self):
        """Test that both operands of 'and' are evaluated and checked."""
        with self.assertRaises(TypeMismatchError):
            self.run_program("x = false and 1")

    def test_arity_mismatch(self):
        """Test calling a user function with too few arguments."""
        source = "func add(x, y) { return x + y }\nadd(1)"

        with self.assertRaises(ArityMismatchError) as context:
            self.run_program(source)
        self.assertIn("'add' expects 2 arguments, received 1", context.exception.message)

    def test_not_callable(self):
        """Test calling a number."""
        with self.assertRaises(NotCallableError):
            self.run_program("x = 1 x(2)")

    def test_division_by_zero(self):
        """Test dividing by zero inside a program."""
        with self.assertRaises(DivisionByZeroError):
            self.run_program("print(1 / 0)")

    def test_member_access_unsupported(self):
        """Test that member access parses but cannot be evaluated."""
        with self.assertRaises(UnsupportedOperationError):
            self.run_program("x = 1 print(x.y)")

    def test_unbounded_recursion(self):
        """Test that runaway recursion is reported as a runtime error."""
        with self.assertRaises(RecursionDepthError) as context:
            self.run_program("func down(n) { return down(n + 1) }\ndown(0)")
        self.assertEqual(context.exception.diagnostic.code, "R007")

    def test_side_effects_before_error_remain(self):
        """Test that output before a failure is kept."""
        output = io.StringIO()
        with redirect_stdout(output):
            with self.assertRaises(UnknownVariableError):
                kody.run_source("print(1) print(nope)")

        self.assertEqual(output.getvalue(), "1\n")


if __name__ == "__main__":
    unittest.main(verbosity=2)
