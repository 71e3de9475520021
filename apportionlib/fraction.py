'''Exact rational arithmetic for quotas, averages, remainders and thresholds.

All values compared during apportionment are exact fractions - the standard
library :class:`fractions.Fraction` over Python's unbounded integers, so
repeated multiplication of denominators can never overflow. A zero
denominator raises :class:`ZeroDivisionError` right away; it can only arise
from malformed seat counts and is not an apportionment outcome.

Floating point numbers are rejected at the boundary by :func:`exact`.
Fractions are never rounded before comparison; :class:`DisplayFraction` only
splits them into a whole part and a proper fraction for presentation.
'''

import math
from decimal import Decimal
from fractions import Fraction
from typing import Union

ExactFraction = Fraction

ExactNumber = Union[int, Fraction]


def exact(value: ExactNumber) -> Fraction:
    '''Convert an integer or fraction to an exact fraction.

    :param value: The number to convert.
    :raises TypeError: If the value is a float, a decimal, a boolean or any
        other type that could carry an inexact or unintended value.
    '''
    if isinstance(value, bool) or isinstance(value, (float, Decimal)):
        raise TypeError(f'inexact or invalid number in exact context: {value!r}')
    elif isinstance(value, Fraction):
        return value
    elif isinstance(value, int):
        return Fraction(value)
    else:
        raise TypeError(f'cannot convert {value!r} to an exact fraction')


def integer_part(value: Fraction) -> int:
    '''Return the whole number part of a non-negative fraction.'''
    return math.floor(value)


def fractional_part(value: Fraction) -> Fraction:
    '''Return what remains of a non-negative fraction after its whole part.

    ``integer_part(value) + fractional_part(value) == value`` always holds.
    '''
    return Fraction(value.numerator % value.denominator, value.denominator)


class DisplayFraction:
    '''A fraction split into its whole part and a proper fraction.

    Meant for reports, where quotas and averages are shown the way they are
    written in official documents (``624 1/2`` rather than ``1249/2``).

    :param value: The fraction to display.
    '''
    def __init__(self, value: ExactNumber):
        value = exact(value)
        self.integer = integer_part(value)
        rest = fractional_part(value)
        self.numerator = rest.numerator
        self.denominator = rest.denominator

    def to_fraction(self) -> Fraction:
        return self.integer + Fraction(self.numerator, self.denominator)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DisplayFraction):
            return NotImplemented
        return (
            self.integer == other.integer
            and self.numerator * other.denominator
            == other.numerator * self.denominator
        )

    def __hash__(self) -> int:
        return hash(self.to_fraction())

    def __str__(self) -> str:
        if self.numerator == 0:
            return str(self.integer)
        elif self.integer == 0:
            return f'{self.numerator}/{self.denominator}'
        else:
            return f'{self.integer} {self.numerator}/{self.denominator}'

    def __repr__(self) -> str:
        return f'<DisplayFraction({self})>'
