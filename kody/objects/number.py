"""
Exact rational numbers for the Kody runtime.

Every numeric value in Kody is a ``Number``: an unsigned numerator and
denominator plus a sign flag. Results are always reduced to lowest terms and
then clamped so that both parts fit into 64 bits. Clamping halves numerator
and denominator together, so very large or very precise ratios lose
precision instead of growing without bound.
"""

from decimal import Decimal
from enum import Enum
from functools import total_ordering
from math import gcd
from typing import Tuple


MAX_COMPONENT = 2 ** 64 - 1


class Ordering(Enum):
    """Result of a three-way comparison."""
    LESS = -1
    EQUAL = 0
    GREATER = 1


def _normalize(numerator: int, denominator: int, is_negative: bool) -> Tuple[int, int, bool]:
    """Reduce a fraction and clamp both parts into the 64 bit range."""
    if numerator == 0:
        return 0, 1, False

    divisor = gcd(numerator, denominator)
    numerator //= divisor
    denominator //= divisor

    if numerator > MAX_COMPONENT or denominator > MAX_COMPONENT:
        while numerator > MAX_COMPONENT or denominator > MAX_COMPONENT:
            if denominator == 1:
                # Integer overflow saturates
                numerator = MAX_COMPONENT
                break
            numerator //= 2
            denominator //= 2

        if numerator == 0:
            return 0, 1, False
        divisor = gcd(numerator, denominator)
        numerator //= divisor
        denominator //= divisor

    return numerator, denominator, is_negative


@total_ordering
class Number:
    """
    Immutable signed rational number.

    Supports ``+ - * /``, unary ``-``, equality and ordering against other
    ``Number`` instances. Division by zero raises ``ZeroDivisionError``.
    """

    __slots__ = ("numerator", "denominator", "is_negative")

    def __init__(self, numerator: int = 0, denominator: int = 1, is_negative: bool = False):
        if numerator < 0 or denominator < 0:
            raise ValueError("numerator and denominator must be non-negative")
        if denominator == 0:
            raise ZeroDivisionError("Number denominator cannot be zero")

        n, d, negative = _normalize(numerator, denominator, is_negative)
        object.__setattr__(self, "numerator", n)
        object.__setattr__(self, "denominator", d)
        object.__setattr__(self, "is_negative", negative)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_int(cls, value: int) -> "Number":
        return cls(abs(value), 1, value < 0)

    @classmethod
    def from_literal(cls, literal: str) -> "Number":
        """
        Build a number from a decimal literal such as ``"25.3"``.

        Underscores are accepted so that raw lexemes can be converted as well
        as canonical token values.
        """
        text = literal.replace("_", "").strip()
        is_negative = text.startswith("-")
        if is_negative:
            text = text[1:]

        if not text or text.count(".") > 1:
            raise ValueError(f"Invalid number literal: {literal!r}")

        integer_part, _, fraction_part = text.partition(".")
        digits = (integer_part + fraction_part) or "0"
        if not digits.isdigit():
            raise ValueError(f"Invalid number literal: {literal!r}")

        return cls(int(digits), 10 ** len(fraction_part), is_negative)

    @classmethod
    def from_float(cls, value: float) -> "Number":
        """Approximate a float by a fraction with a power-of-two denominator."""
        if value == 0.0:
            return cls()
        magnitude = abs(value)
        denominator = 1
        while 2.0 * magnitude < MAX_COMPONENT and 2 * denominator < MAX_COMPONENT:
            magnitude *= 2.0
            denominator *= 2
        return cls(int(magnitude), denominator, value < 0.0)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _scaled_numerators(self, other: "Number") -> Tuple[int, int, int]:
        """Both numerators expressed over the least common denominator."""
        common = self.denominator * other.denominator // gcd(self.denominator, other.denominator)
        lhs = self.numerator * (common // self.denominator)
        rhs = other.numerator * (common // other.denominator)
        return lhs, rhs, common

    def __add__(self, other: "Number") -> "Number":
        if not isinstance(other, Number):
            return NotImplemented
        lhs, rhs, common = self._scaled_numerators(other)

        if self.is_negative == other.is_negative:
            return Number(lhs + rhs, common, self.is_negative)
        if self.is_negative:
            return Number(abs(lhs - rhs), common, lhs > rhs)
        return Number(abs(lhs - rhs), common, rhs > lhs)

    def __sub__(self, other: "Number") -> "Number":
        if not isinstance(other, Number):
            return NotImplemented
        return self + (-other)

    def __mul__(self, other: "Number") -> "Number":
        if not isinstance(other, Number):
            return NotImplemented
        return Number(
            self.numerator * other.numerator,
            self.denominator * other.denominator,
            self.is_negative != other.is_negative,
        )

    def __truediv__(self, other: "Number") -> "Number":
        if not isinstance(other, Number):
            return NotImplemented
        if other.is_zero:
            raise ZeroDivisionError("Division by zero")
        return Number(
            self.numerator * other.denominator,
            self.denominator * other.numerator,
            self.is_negative != other.is_negative,
        )

    def __neg__(self) -> "Number":
        return Number(self.numerator, self.denominator, not self.is_negative)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def compare(self, other: "Number") -> Ordering:
        """Three-way comparison; negative values always order below the rest."""
        lhs, rhs, _ = self._scaled_numerators(other)

        if self.is_negative and not other.is_negative:
            return Ordering.LESS
        if other.is_negative and not self.is_negative:
            return Ordering.GREATER
        if self.is_negative:
            lhs, rhs = rhs, lhs

        if lhs < rhs:
            return Ordering.LESS
        if lhs > rhs:
            return Ordering.GREATER
        return Ordering.EQUAL

    def __eq__(self, other) -> bool:
        if not isinstance(other, Number):
            return NotImplemented
        return self.compare(other) is Ordering.EQUAL

    def __lt__(self, other) -> bool:
        if not isinstance(other, Number):
            return NotImplemented
        return self.compare(other) is Ordering.LESS

    def __hash__(self) -> int:
        return hash((self.numerator, self.denominator, self.is_negative))

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    @property
    def is_zero(self) -> bool:
        return self.numerator == 0

    @property
    def is_integer(self) -> bool:
        return self.denominator == 1

    def __float__(self) -> float:
        value = self.numerator / self.denominator
        return -value if self.is_negative else value

    def __str__(self) -> str:
        sign = "-" if self.is_negative else ""
        if self.is_integer:
            return f"{sign}{self.numerator}"

        text = repr(self.numerator / self.denominator)
        if "e" in text:
            text = format(Decimal(text), "f")
        return f"{sign}{text}"

    def __repr__(self) -> str:
        sign = "-" if self.is_negative else ""
        return f"Number({sign}{self.numerator}/{self.denominator})"
