"""
Float: an arbitrary-precision floating point value with value semantics.

A Float is a thin handle on a Storage slot. Copies made with copy.copy() (or
Float.copy()) share the slot until one side mutates, at which point the
mutating side clones it first. Reads never clone.

Assignments report how they rounded with a ternary value: 0 when exact,
positive when the stored value is above the exact one, negative when below.

Examples:
    >>> x = Float(2.7, precision=2, rounding=RoundingMode.TOWARD_ZERO)
    >>> x.to_double()
    2.0
    >>> x.set(2.7)
    1
    >>> x.to_double()
    3.0
    >>> Float.from_string("1.8p0", base=16).to_double()
    1.5
    >>> Float.from_string("") is None
    True

Float is not thread-safe: values that share storage must not be mutated from
different threads without external synchronization.
"""

import logging
import math
import sys
from fractions import Fraction
from typing import Optional, TextIO, Tuple

import gmpy2

from . import _engine
from . import algorithms
from .defaults import default_precision
from .flags import ErrorFlags, raise_flags
from .rounding import RoundingMode
from .storage import Storage

logger = logging.getLogger(__name__)

NEAREST = RoundingMode.NEAREST

MPZ = type(gmpy2.mpz(0))
MPQ = type(gmpy2.mpq(0))


def _check_parse_base(base: int) -> None:
    if base != 0 and not 2 <= base <= 62:
        raise ValueError("base must be 0 or in the range 2-62, got %r" % (base,))


def _check_render_base(base: int) -> None:
    if not (2 <= base <= 62 or -36 <= base <= -2):
        raise ValueError("base must be in the range 2-62 or -36 to -2, got %r" % (base,))


def _check_width(value: int, low: int, high: int) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, MPZ)):
        raise TypeError("expected an integer, got %s" % type(value).__name__)
    if not low <= value <= high:
        raise ValueError("%d does not fit in [%d, %d]" % (value, low, high))


def _operand(other):
    """Engine form of a number, or None for unsupported types."""
    if isinstance(other, Float):
        return other._storage.value
    if isinstance(other, (int, MPZ)):
        return gmpy2.mpz(other)
    if isinstance(other, float):
        return other
    if isinstance(other, Fraction):
        return gmpy2.mpq(other.numerator, other.denominator)
    if isinstance(other, (MPQ, _engine.MPFR)):
        return other
    return None


class Float:
    __slots__ = ("_storage",)

    def __init__(self, value=None, precision: Optional[int] = None, rounding: RoundingMode = NEAREST):
        """
        Create a Float.

        Without a value the result is NaN. ``precision`` defaults to the
        process-wide default read now; ``rounding`` defaults to NEAREST, not
        to the process-wide default rounding mode.
        """
        if isinstance(value, str):
            raise TypeError("use Float.from_string() to parse text")
        if precision is None:
            precision = default_precision()
        self._storage = Storage.create(precision).retain()
        if value is not None:
            self.set(value, rounding)

    def __del__(self):
        storage = getattr(self, "_storage", None)
        if storage is not None:
            storage.drop()

    @classmethod
    def from_int(cls, value: int, precision: Optional[int] = None, rounding: RoundingMode = NEAREST) -> "Float":
        result = cls(precision=precision)
        result.set_int(value, rounding)
        return result

    @classmethod
    def from_uint(cls, value: int, precision: Optional[int] = None, rounding: RoundingMode = NEAREST) -> "Float":
        result = cls(precision=precision)
        result.set_uint(value, rounding)
        return result

    @classmethod
    def from_string(
        cls,
        text: str,
        base: int = 10,
        precision: Optional[int] = None,
        rounding: RoundingMode = NEAREST,
    ) -> Optional["Float"]:
        """
        Parse ``text`` in ``base`` (2-62, or 0 to detect it from a prefix).

        Returns None when the text is empty or not a valid number in that
        base. An invalid base or precision raises ValueError.
        """
        _check_parse_base(base)
        result = cls(precision=precision)
        if not result.set_string(text, base, rounding):
            return None
        return result

    parse = from_string

    @classmethod
    def read(
        cls,
        stream: TextIO,
        base: int = 10,
        precision: Optional[int] = None,
        rounding: RoundingMode = NEAREST,
    ) -> Optional["Float"]:
        """Parse the next line of ``stream``; None at end of input or on bad text."""
        _check_parse_base(base)
        line = stream.readline().strip()
        if not line:
            return None
        return cls.from_string(line, base, precision, rounding)

    # Copy-on-write

    def _ensure_unique(self) -> Storage:
        storage = self._storage
        if not storage.is_unique:
            clone = storage.clone().retain()
            storage.drop()
            self._storage = storage = clone
            logger.debug("cloned %d-bit storage before write", storage.precision)
        return storage

    def has_unique_storage(self) -> bool:
        return self._storage.is_unique

    def __copy__(self) -> "Float":
        twin = type(self).__new__(type(self))
        twin._storage = self._storage.retain()
        return twin

    copy = __copy__

    def __deepcopy__(self, memo) -> "Float":
        twin = type(self).__new__(type(self))
        twin._storage = self._storage.clone().retain()
        return twin

    def swap(self, other: "Float") -> None:
        """Exchange values, precisions included, with ``other``."""
        self._storage, other._storage = other._storage, self._storage

    @property
    def precision(self) -> int:
        return self._storage.precision

    @precision.setter
    def precision(self, precision: int) -> None:
        _engine.check_precision(precision)
        self._ensure_unique().set_precision(precision)

    # Assignment

    def _assign(self, exact, rounding: RoundingMode) -> int:
        storage = self._ensure_unique()
        result = _engine.convert(exact, storage.precision, rounding)
        storage.store(result)
        return algorithms.ternary(result, exact)

    def set(self, value, rounding: RoundingMode = NEAREST, base: int = 10):
        """
        Assign any supported number, rounding to this value's precision.

        Numbers return the ternary value; text (parsed in ``base``) returns
        whether it parsed, like set_string().
        """
        if isinstance(value, str):
            return self.set_string(value, base, rounding)
        exact = _operand(value)
        if exact is None:
            raise TypeError("cannot assign %s to Float" % type(value).__name__)
        return self._assign(exact, rounding)

    def set_float(self, other: "Float", rounding: RoundingMode = NEAREST) -> int:
        if not isinstance(other, Float):
            raise TypeError("expected a Float, got %s" % type(other).__name__)
        return self._assign(other._storage.value, rounding)

    def set_int(self, value: int, rounding: RoundingMode = NEAREST) -> int:
        _check_width(value, algorithms.INT_MIN, algorithms.INT_MAX)
        return self._assign(gmpy2.mpz(value), rounding)

    def set_uint(self, value: int, rounding: RoundingMode = NEAREST) -> int:
        _check_width(value, 0, algorithms.UINT_MAX)
        return self._assign(gmpy2.mpz(value), rounding)

    def set_double(self, value: float, rounding: RoundingMode = NEAREST) -> int:
        if not isinstance(value, float):
            raise TypeError("expected a float, got %s" % type(value).__name__)
        return self._assign(value, rounding)

    def set_integer(self, value, rounding: RoundingMode = NEAREST) -> int:
        if not isinstance(value, (int, MPZ)):
            raise TypeError("expected an integer, got %s" % type(value).__name__)
        return self._assign(gmpy2.mpz(value), rounding)

    def set_rational(self, value, rounding: RoundingMode = NEAREST) -> int:
        if not isinstance(value, (Fraction, MPQ)):
            raise TypeError("expected a rational, got %s" % type(value).__name__)
        return self._assign(_operand(value), rounding)

    def set_string(self, text: str, base: int = 10, rounding: RoundingMode = NEAREST) -> bool:
        """
        Parse ``text`` into this value.

        Returns False for empty or malformed text. After a failure the
        numeric content is unspecified; precision is kept.
        """
        _check_parse_base(base)
        if not isinstance(text, str):
            raise TypeError("expected a str, got %s" % type(text).__name__)
        storage = self._ensure_unique()
        if not text:
            return False
        parsed = _engine.parse(text, base, storage.precision, rounding)
        if parsed is None:
            return False
        storage.store(parsed)
        return True

    # Conversion

    def to_double(self, rounding: RoundingMode = NEAREST) -> float:
        return _engine.to_double(self._storage.value, rounding)

    def to_double_2exp(self, rounding: RoundingMode = NEAREST) -> Tuple[float, int]:
        """
        Split into ``(mantissa, exponent)`` with value == mantissa * 2**exponent.

        ``abs(mantissa)`` lies in [0.5, 1) for finite non-zero values; zero
        gives ``(0.0, 0)``.
        """
        value = self._storage.value
        if not gmpy2.is_finite(value):
            return float(value), 0
        if gmpy2.is_zero(value):
            return (-0.0 if gmpy2.is_signed(value) else 0.0), 0
        rounded = _engine.convert(value, _engine.DOUBLE_PRECISION, rounding)
        mantissa, exponent = rounded.as_mantissa_exp()
        mantissa = int(mantissa)
        length = abs(mantissa).bit_length()
        return math.ldexp(float(mantissa), -length), int(exponent) + length

    def _mantissa_exp(self) -> Tuple[int, int]:
        # Finite values only: value == mantissa * 2**exponent.
        mantissa, exponent = self._storage.value.as_mantissa_exp()
        return int(mantissa), int(exponent)

    def to_int(self, rounding: RoundingMode = NEAREST) -> int:
        """Round to a platform integer, saturating out-of-range values."""
        return self._to_integer(rounding, algorithms.INT_MIN, algorithms.INT_MAX)

    def to_uint(self, rounding: RoundingMode = NEAREST) -> int:
        """Round to a platform unsigned integer, saturating out-of-range values."""
        return self._to_integer(rounding, 0, algorithms.UINT_MAX)

    def _to_integer(self, rounding: RoundingMode, low: int, high: int) -> int:
        value = self._storage.value
        if gmpy2.is_nan(value):
            raise_flags(ErrorFlags.RANGE_ERROR)
            return 0
        if gmpy2.is_infinite(value):
            raise_flags(ErrorFlags.RANGE_ERROR)
            return high if value > 0 else low
        # Beyond the range by at least one: every mode saturates.
        if gmpy2.cmp(value, high + 1) >= 0:
            raise_flags(ErrorFlags.RANGE_ERROR)
            return high
        if gmpy2.cmp(value, low - 1) <= 0:
            raise_flags(ErrorFlags.RANGE_ERROR)
            return low
        rounded = algorithms.integer_part(*self._mantissa_exp(), rounding)
        result, clamped = algorithms.saturate(rounded, low, high)
        if clamped:
            raise_flags(ErrorFlags.RANGE_ERROR)
        return result

    def to_string(self, base: int = 10, digits: int = 0, rounding: RoundingMode = NEAREST) -> str:
        """
        Render in ``base`` without an exponent field.

        ``digits`` 0 asks for enough digits to read the value back at its
        precision; a positive count asks for that many significant digits.
        Negative bases (-36 to -2) use upper-case digits.
        """
        _check_render_base(base)
        if digits < 0:
            raise ValueError("digits must be non-negative, got %d" % digits)
        value = self._storage.value
        if gmpy2.is_nan(value):
            return "@NaN@"
        if gmpy2.is_infinite(value):
            return "-@Inf@" if value < 0 else "@Inf@"
        if gmpy2.is_zero(value):
            return "-0" if gmpy2.is_signed(value) else "0"
        if digits == 1:
            # gmpy2 renders two digits or more.
            mantissa, exponent = algorithms.leading_digit(*self._mantissa_exp(), abs(base), rounding)
        else:
            mantissa, exponent = _engine.digits(value, abs(base), digits, self.precision, rounding)
        text = algorithms.positional(mantissa, exponent)
        return text.upper() if base < 0 else text

    write_to_string = to_string

    def write(
        self,
        stream: TextIO,
        base: int = 10,
        digits: int = 0,
        rounding: RoundingMode = NEAREST,
    ) -> int:
        """Write to_string() and a newline to ``stream``; return the count written."""
        text = self.to_string(base, digits, rounding) + "\n"
        stream.write(text)
        return len(text)

    def fits_in_int(self) -> bool:
        return algorithms.fits(self._storage.value, algorithms.INT_MIN, algorithms.INT_MAX)

    def fits_in_uint(self) -> bool:
        return algorithms.fits(self._storage.value, 0, algorithms.UINT_MAX)

    def fits_in_int64(self) -> bool:
        return algorithms.fits(self._storage.value, algorithms.INT64_MIN, algorithms.INT64_MAX)

    def fits_in_uint64(self) -> bool:
        return algorithms.fits(self._storage.value, 0, algorithms.UINT64_MAX)

    # Comparison

    def compare(self, other) -> int:
        """
        Three-way comparison against a Float, integer, float or rational.

        Returns -1, 0 or 1. A NaN on either side gives 0 and raises
        RANGE_ERROR; callers must not rely on the result in that case.
        """
        operand = _operand(other)
        if operand is None:
            raise TypeError("cannot compare Float with %s" % type(other).__name__)
        value = self._storage.value
        if algorithms.is_unordered(value, operand):
            raise_flags(ErrorFlags.RANGE_ERROR)
            return 0
        return algorithms.three_way(value, operand)

    def _relate(self, other, holds):
        operand = _operand(other)
        if operand is None:
            return NotImplemented
        value = self._storage.value
        if algorithms.is_unordered(value, operand):
            return False
        return holds(algorithms.three_way(value, operand))

    def __eq__(self, other):
        return self._relate(other, lambda order: order == 0)

    def __lt__(self, other):
        return self._relate(other, lambda order: order < 0)

    def __le__(self, other):
        return self._relate(other, lambda order: order <= 0)

    def __gt__(self, other):
        return self._relate(other, lambda order: order > 0)

    def __ge__(self, other):
        return self._relate(other, lambda order: order >= 0)

    def __hash__(self):
        # Equal values hash equal whatever their precision, and agree with
        # int, float and Fraction. Mutating a Float used as a key breaks this.
        value = self._storage.value
        if gmpy2.is_nan(value):
            return sys.hash_info.nan
        if gmpy2.is_infinite(value):
            return hash(-math.inf if value < 0 else math.inf)
        return algorithms.rational_hash(*self._mantissa_exp())

    def is_equal(self, other: "Float", bits: int) -> bool:
        """True iff both values agree on their first ``bits`` bits."""
        if bits <= 0:
            raise ValueError("bits must be positive, got %d" % bits)
        return algorithms.equal_bits(self._storage.value, other._storage.value, bits)

    @property
    def sign(self) -> int:
        value = self._storage.value
        if gmpy2.is_nan(value):
            raise_flags(ErrorFlags.RANGE_ERROR)
            return 0
        return (value > 0) - (value < 0)

    @property
    def is_zero(self) -> bool:
        return gmpy2.is_zero(self._storage.value)

    @property
    def is_negative(self) -> bool:
        value = self._storage.value
        return not gmpy2.is_nan(value) and value < 0

    @property
    def is_positive(self) -> bool:
        value = self._storage.value
        return not gmpy2.is_nan(value) and value > 0

    @property
    def is_nan(self) -> bool:
        return gmpy2.is_nan(self._storage.value)

    @property
    def is_infinity(self) -> bool:
        return gmpy2.is_infinite(self._storage.value)

    @property
    def is_regular(self) -> bool:
        return gmpy2.is_finite(self._storage.value)

    # Python protocols

    def __bool__(self) -> bool:
        return not self.is_zero

    def __float__(self) -> float:
        return self.to_double()

    def __int__(self) -> int:
        value = self._storage.value
        if gmpy2.is_nan(value):
            raise ValueError("cannot convert NaN to integer")
        if gmpy2.is_infinite(value):
            raise OverflowError("cannot convert infinity to integer")
        return algorithms.integer_part(*self._mantissa_exp(), RoundingMode.TOWARD_ZERO)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return "Float(%r, precision=%d)" % (self.to_string(), self.precision)

    def __format__(self, spec: str) -> str:
        if not spec:
            return str(self)
        return _engine.format_value(self._storage.value, spec, self.precision)
