"""
Test suite for the Kody rational number type.
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from kody.objects import Number, Ordering
from kody.objects.number import MAX_COMPONENT


class TestNumber(unittest.TestCase):
    """Test cases for construction, arithmetic and display."""

    def test_reduced_to_lowest_terms(self):
        """Test that fractions are stored reduced."""
        number = Number(6, 8)

        self.assertEqual((number.numerator, number.denominator), (3, 4))

    def test_zero_is_never_negative(self):
        """Test that a negative zero collapses to plain zero."""
        zero = Number(0, 5, True)

        self.assertFalse(zero.is_negative)
        self.assertEqual(zero.denominator, 1)
        self.assertEqual(str(zero), "0")
        self.assertFalse((Number.from_int(3) - Number.from_int(3)).is_negative)
        self.assertFalse((-Number()).is_negative)

    def test_invalid_construction(self):
        """Test that bad components are rejected."""
        with self.assertRaises(ZeroDivisionError):
            Number(1, 0)
        with self.assertRaises(ValueError):
            Number(-1, 2)

    def test_immutable(self):
        """Test that numbers cannot be modified after construction."""
        number = Number.from_int(5)
        with self.assertRaises(AttributeError):
            number.numerator = 7

    def test_from_literal(self):
        """Test construction from decimal literals."""
        self.assertEqual(Number.from_literal("25.3"), Number(253, 10))
        self.assertEqual(Number.from_literal("12"), Number.from_int(12))
        self.assertEqual(Number.from_literal("1_000.5"), Number(2001, 2))
        self.assertEqual(Number.from_literal("-0.25"), Number(1, 4, True))

        with self.assertRaises(ValueError):
            Number.from_literal("1.2.3")
        with self.assertRaises(ValueError):
            Number.from_literal("abc")

    def test_from_float(self):
        """Test approximate construction from a float."""
        self.assertEqual(Number.from_float(0.5), Number(1, 2))
        self.assertEqual(Number.from_float(-2.0), Number.from_int(-2))
        self.assertEqual(Number.from_float(0.0), Number())

    def test_addition_with_signs(self):
        """Test addition over every sign combination."""
        three = Number.from_int(3)
        five = Number.from_int(5)

        self.assertEqual(three + five, Number.from_int(8))
        self.assertEqual(-three + five, Number.from_int(2))
        self.assertEqual(three + -five, Number.from_int(-2))
        self.assertEqual(-three + -five, Number.from_int(-8))
        self.assertEqual(-five + three, Number.from_int(-2))

    def test_fraction_arithmetic(self):
        """Test that fractions stay exact."""
        third = Number(1, 3)
        sixth = Number(1, 6)

        self.assertEqual(third + sixth, Number(1, 2))
        self.assertEqual(third - sixth, Number(1, 6))
        self.assertEqual(third * sixth, Number(1, 18))
        self.assertEqual(third / sixth, Number.from_int(2))

    def test_division(self):
        """Test division results and signs."""
        self.assertEqual(Number.from_int(3) / Number.from_int(-5), Number(3, 5, True))

        with self.assertRaises(ZeroDivisionError):
            Number.from_int(1) / Number()

    def test_compare(self):
        """Test three-way comparison."""
        self.assertIs(Number.from_int(2).compare(Number.from_int(3)), Ordering.LESS)
        self.assertIs(Number(1, 2).compare(Number(2, 4)), Ordering.EQUAL)
        self.assertIs(Number.from_int(-2).compare(Number.from_int(-3)), Ordering.GREATER)
        self.assertIs(Number.from_int(-1).compare(Number()), Ordering.LESS)
        self.assertIs(Number().compare(Number.from_int(-1)), Ordering.GREATER)

    def test_ordering_operators(self):
        """Test the Python comparison operators derived from compare()."""
        self.assertLess(Number(1, 3), Number(1, 2))
        self.assertGreaterEqual(Number(1, 2), Number(2, 4))
        self.assertEqual(sorted([Number.from_int(2), Number.from_int(-7), Number()]),
                         [Number.from_int(-7), Number(), Number.from_int(2)])

    def test_display(self):
        """Test integer and fractional display forms."""
        self.assertEqual(str(Number.from_int(42)), "42")
        self.assertEqual(str(Number.from_int(-42)), "-42")
        self.assertEqual(str(Number(1, 4)), "0.25")
        self.assertEqual(str(Number(3, 5, True)), "-0.6")
        self.assertEqual(str(Number(1, 3)), "0.3333333333333333")

    def test_display_avoids_exponent(self):
        """Test that tiny fractions are displayed positionally."""
        self.assertEqual(str(Number(1, 10 ** 7)), "0.0000001")

    def test_overflow_is_clamped(self):
        """Test that oversized components are clamped into 64 bits."""
        big = Number.from_int(MAX_COMPONENT)
        product = big * big

        self.assertLessEqual(product.numerator, MAX_COMPONENT)
        self.assertEqual(product.denominator, 1)

        precise = Number(2 ** 40, MAX_COMPONENT) * Number(1, 11)
        self.assertLessEqual(precise.denominator, MAX_COMPONENT)
        self.assertFalse(precise.is_zero)
        self.assertAlmostEqual(float(precise) * 11 * MAX_COMPONENT / 2 ** 40, 1.0, places=6)


class TestArithmeticLaws(unittest.TestCase):
    """Algebraic identities over a grid of small signed fractions."""

    VALUES = [
        Number(), Number.from_int(3), Number.from_int(-7), Number(1, 3),
        Number(5, 4, True), Number(2, 9), Number.from_literal("0.25"), Number(11, 6, True),
    ]

    def _pairs(self):
        for a in self.VALUES:
            for b in self.VALUES:
                yield a, b

    def test_addition_and_multiplication_commute(self):
        """Test a + b == b + a and a * b == b * a."""
        for a, b in self._pairs():
            with self.subTest(a=str(a), b=str(b)):
                self.assertEqual(a + b, b + a)
                self.assertEqual(a * b, b * a)

    def test_subtraction_adds_negation(self):
        """Test a - b == a + (-b)."""
        for a, b in self._pairs():
            with self.subTest(a=str(a), b=str(b)):
                self.assertEqual(a - b, a + (-b))

    def test_division_undone_by_multiplication(self):
        """Test (a / b) * b == a for every nonzero b."""
        for a, b in self._pairs():
            if b.is_zero:
                continue
            with self.subTest(a=str(a), b=str(b)):
                self.assertEqual((a / b) * b, a)


if __name__ == "__main__":
    unittest.main(verbosity=2)
