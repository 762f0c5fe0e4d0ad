#!/usr/bin/env python3
"""
MPFloat: Arbitrary Precision Floating-Point Values

This library provides a value-semantic arbitrary precision floating-point
type on top of MPFR (through gmpy2). Every value carries its own bit
precision; copies share storage until one of them is modified.

Examples:
    >>> from mpfloat import Float, RoundingMode, FP16
    >>> x = Float(2.7, precision=2, rounding=RoundingMode.TOWARD_ZERO)
    >>> x
    Float('2.0', precision=2)
    >>> x.set(2.7, RoundingMode.TOWARD_POSITIVE_INFINITY)
    1

    >>> y = Float(1 / 3, precision=FP16)
    >>> y.to_string(digits=5)
    '0.33325'

    >>> Float.from_string("1.1", base=2).to_double()
    1.5
    >>> nan = Float()
    >>> nan == nan
    False

Constants:
    BF16, FP16, FP32, FP64, FP128, FP256: Significand precisions of standard formats
    PRECISION_MIN, PRECISION_MAX: Bounds accepted for a precision
    Float, Storage: The value wrapper and the storage slot behind it
    RoundingMode, ErrorFlags: Rounding modes and numeric condition flags
"""

from ._engine import PRECISION_MAX, PRECISION_MIN
from .defaults import (
    Defaults,
    default_precision,
    default_rounding_mode,
    set_default_precision,
    set_default_rounding_mode,
)
from .flags import ALL_FLAGS, ErrorFlags, FlagError, check_flags, clear_flags, get_flags, raise_flags
from .rounding import RoundingMode
from .storage import Storage
from .value import Float


# Significand precisions, in bits, of the IEEE 754 formats and bfloat16
BF16 = 8  # BFloat16
FP16 = 11  # Half precision
FP32 = 24  # Single precision
FP64 = 53  # Double precision
FP128 = 113  # Quadruple precision
FP256 = 237  # Octuple precision

version = "0.1.0"
