"""
Numeric policies behind conversions and comparisons.

Everything here works on exact quantities (integer ratios, integer
mantissas) so the results never depend on the precision of a temporary.
"""

import math
import sys
from typing import Tuple

import gmpy2

from ._engine import MPFR
from .rounding import RoundingMode

# Platform integers are C longs, the width the engine converts to natively.
INT_MAX = sys.maxsize
INT_MIN = -sys.maxsize - 1
UINT_MAX = 2 * sys.maxsize + 1

INT64_MAX = 2 ** 63 - 1
INT64_MIN = -(2 ** 63)
UINT64_MAX = 2 ** 64 - 1


def round_ratio(numerator: int, denominator: int, rounding: RoundingMode) -> int:
    """Round numerator/denominator (denominator > 0) to an integer."""
    floor, remainder = divmod(numerator, denominator)
    if remainder == 0:
        return floor
    ceiling = floor + 1
    if rounding is RoundingMode.TOWARD_NEGATIVE_INFINITY:
        return floor
    if rounding is RoundingMode.TOWARD_POSITIVE_INFINITY:
        return ceiling
    if rounding is RoundingMode.TOWARD_ZERO:
        return floor if numerator > 0 else ceiling
    if rounding is RoundingMode.AWAY_FROM_ZERO:
        return ceiling if numerator > 0 else floor
    # NEAREST, and FAITHFUL served by it: ties go to the even neighbour.
    twice = 2 * remainder
    if twice < denominator:
        return floor
    if twice > denominator:
        return ceiling
    return floor if floor % 2 == 0 else ceiling


def saturate(value: int, low: int, high: int) -> Tuple[int, bool]:
    """Clamp ``value`` into [low, high]; the flag tells whether it moved."""
    if value < low:
        return low, True
    if value > high:
        return high, True
    return value, False


def fits(value, low: int, high: int) -> bool:
    """True iff ``value`` is an exact integer within [low, high]."""
    if not gmpy2.is_finite(value) or not gmpy2.is_integer(value):
        return False
    return gmpy2.cmp(value, low) >= 0 and gmpy2.cmp(value, high) <= 0


def integer_part(mantissa: int, exponent: int, rounding: RoundingMode) -> int:
    """Round mantissa * 2**exponent to an integer without widening tiny values."""
    if mantissa == 0 or exponent >= 0:
        return mantissa << max(exponent, 0)
    shift = -exponent
    if shift > mantissa.bit_length() + 1:
        # Below 1/4 in magnitude: only the sign and the mode matter.
        mantissa, shift = (1 if mantissa > 0 else -1), 2
    return round_ratio(mantissa, 1 << shift, rounding)


def rational_hash(mantissa: int, exponent: int) -> int:
    """hash() of mantissa * 2**exponent as int, float and Fraction compute it."""
    modulus = sys.hash_info.modulus
    result = abs(mantissa) % modulus * pow(2, exponent, modulus) % modulus
    if mantissa < 0:
        result = -result
    return -2 if result == -1 else result


def ternary(result, exact) -> int:
    """Sign of result - exact: the direction an assignment rounded."""
    if gmpy2.is_nan(result):
        return 0
    return gmpy2.cmp(result, exact)


def is_unordered(*operands) -> bool:
    """True if any operand is a NaN, engine or native."""
    for operand in operands:
        if isinstance(operand, float):
            if math.isnan(operand):
                return True
        elif isinstance(operand, MPFR) and gmpy2.is_nan(operand):
            return True
    return False


def three_way(left, right) -> int:
    """Total-order comparison of two non-NaN reals."""
    return gmpy2.cmp(left, right)


def _leading_bits(mantissa: int, length: int, bits: int) -> int:
    if length > bits:
        return mantissa >> (length - bits)
    return mantissa << (bits - length)


def equal_bits(left, right, bits: int) -> bool:
    """
    True iff both values agree on their ``bits`` most significant bits.

    Both zero, or infinities of the same sign, also compare equal; NaN never
    does. Bits beyond a value's own precision count as zero.
    """
    if gmpy2.is_nan(left) or gmpy2.is_nan(right):
        return False
    if gmpy2.is_infinite(left) or gmpy2.is_infinite(right):
        return gmpy2.is_infinite(left) and gmpy2.is_infinite(right) and (left > 0) == (right > 0)
    if gmpy2.is_zero(left) or gmpy2.is_zero(right):
        return gmpy2.is_zero(left) and gmpy2.is_zero(right)
    if (left < 0) != (right < 0):
        return False

    left_mantissa, left_exponent = left.as_mantissa_exp()
    right_mantissa, right_exponent = right.as_mantissa_exp()
    left_mantissa, right_mantissa = abs(int(left_mantissa)), abs(int(right_mantissa))
    left_length = left_mantissa.bit_length()
    right_length = right_mantissa.bit_length()
    # Binary exponents of the leading bit must match.
    if int(left_exponent) + left_length != int(right_exponent) + right_length:
        return False
    return _leading_bits(left_mantissa, left_length, bits) == _leading_bits(
        right_mantissa, right_length, bits
    )


def positional(mantissa: str, exponent: int) -> str:
    """
    Lay out engine digits without an exponent field.

    ``mantissa`` is a digit string (optionally signed) and the value is
    0.mantissa * base**exponent.
    """
    sign = ""
    if mantissa.startswith("-"):
        sign, mantissa = "-", mantissa[1:]
    if exponent == 0:
        body = "0." + mantissa
    elif exponent > 0:
        if exponent >= len(mantissa):
            body = mantissa + "0" * (exponent - len(mantissa))
        else:
            body = mantissa[:exponent] + "." + mantissa[exponent:]
    else:
        body = "0." + "0" * -exponent + mantissa
    return sign + body


# Digit alphabets of the engine's string conversions.
_LOWER_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_MIXED_DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"

_MIRRORED = {
    RoundingMode.TOWARD_POSITIVE_INFINITY: RoundingMode.TOWARD_NEGATIVE_INFINITY,
    RoundingMode.TOWARD_NEGATIVE_INFINITY: RoundingMode.TOWARD_POSITIVE_INFINITY,
}


def _scaled(numerator: int, denominator: int, base: int, exponent: int) -> Tuple[int, int]:
    # numerator/denominator divided by base**(exponent - 1)
    if exponent >= 1:
        return numerator, denominator * base ** (exponent - 1)
    return numerator * base ** (1 - exponent), denominator


def leading_digit(mantissa: int, exponent: int, base: int, rounding: RoundingMode) -> Tuple[str, int]:
    """
    One significant digit of mantissa * 2**exponent (non-zero) in ``base``.

    Returns ``(digit, exponent)`` laid out like the engine's digit strings,
    value ~ 0.digit * base**exponent, rounded once from the exact value.
    """
    numerator, denominator = abs(mantissa) << max(exponent, 0), 1 << max(-exponent, 0)
    magnitude = numerator.bit_length() - denominator.bit_length()
    place = math.floor(magnitude / math.log2(base)) + 1
    scaled_numerator, scaled_denominator = _scaled(numerator, denominator, base, place)
    while scaled_numerator >= base * scaled_denominator:
        place += 1
        scaled_numerator, scaled_denominator = _scaled(numerator, denominator, base, place)
    while scaled_numerator < scaled_denominator:
        place -= 1
        scaled_numerator, scaled_denominator = _scaled(numerator, denominator, base, place)

    # Rounding the magnitude: directed modes swap for negative values.
    if mantissa < 0:
        rounding = _MIRRORED.get(rounding, rounding)
    digit = round_ratio(scaled_numerator, scaled_denominator, rounding)
    if digit == base:
        digit, place = 1, place + 1
    alphabet = _LOWER_DIGITS if base <= 36 else _MIXED_DIGITS
    return ("-" if mantissa < 0 else "") + alphabet[digit], place
