"""
Adapter over the gmpy2 bindings to MPFR.

Every call runs under a fresh gmpy2 context carrying the precision and
rounding mode of the operation; the context is swapped in for the duration of
the call and its exception flags are harvested into the sticky register
afterwards. The caller's own gmpy2 context is restored untouched.
"""

import logging
from contextlib import contextmanager
from typing import Optional

import gmpy2

from .flags import record_engine_flags
from .rounding import RoundingMode

logger = logging.getLogger(__name__)

# gmpy2.mpfr is a factory on some releases; this is the class of its results.
MPFR = type(gmpy2.mpfr(0))

PRECISION_MIN = 1
PRECISION_MAX = gmpy2.get_max_precision()
DOUBLE_PRECISION = 53


def check_precision(precision: int) -> int:
    if isinstance(precision, bool) or not isinstance(precision, int):
        raise TypeError("precision must be an int, got %r" % (precision,))
    if not PRECISION_MIN <= precision <= PRECISION_MAX:
        raise ValueError(
            "precision must be between %d and %d, got %d"
            % (PRECISION_MIN, PRECISION_MAX, precision)
        )
    return precision


def platform_default_precision() -> int:
    return gmpy2.context().precision


@contextmanager
def _activated(ctx, harvest=True):
    previous = gmpy2.get_context()
    gmpy2.set_context(ctx)
    try:
        yield ctx
    finally:
        gmpy2.set_context(previous)
        if harvest:
            record_engine_flags(ctx)


def working_context(precision: int, rounding: RoundingMode):
    return _activated(gmpy2.context(precision=precision, round=rounding.engine_round))


def _precision_arg(precision: int) -> int:
    # gmpy2 reads precision=1 as "exact precision of the source"; 0 defers to
    # the active context, which already carries the requested precision.
    return precision if precision > 1 else 0


def nan(precision: int):
    # Allocation, not an operation: the NaN it starts from raises no flag.
    with _activated(gmpy2.context(precision=precision), harvest=False):
        return gmpy2.nan()


def convert(source, precision: int, rounding: RoundingMode):
    """Round ``source`` (mpfr, int, mpz, float or mpq) to ``precision`` bits."""
    with working_context(precision, rounding):
        if isinstance(source, MPFR) and not gmpy2.is_finite(source):
            # gmpy2 hands NaN and infinities back unchanged, whatever the
            # requested precision.
            if gmpy2.is_nan(source):
                return gmpy2.nan()
            return gmpy2.inf(-1 if source < 0 else 1)
        return gmpy2.mpfr(source, _precision_arg(precision))


def parse(text: str, base: int, precision: int, rounding: RoundingMode) -> Optional[object]:
    # gmpy2 reads blank text as zero and drops underscores before MPFR sees
    # the digits; neither is a number in the engine's own grammar.
    if not text.strip() or "_" in text:
        logger.debug("cannot parse %r in base %d", text, base)
        return None
    with working_context(precision, rounding):
        try:
            return gmpy2.mpfr(text, _precision_arg(precision), base)
        except ValueError:
            logger.debug("cannot parse %r in base %d", text, base)
            return None


def to_double(value, rounding: RoundingMode) -> float:
    # IEEE binary64 context: 53 bits, double exponent range, subnormals.
    ctx = gmpy2.ieee(64)
    ctx.round = rounding.engine_round
    with _activated(ctx):
        return float(gmpy2.mpfr(value, DOUBLE_PRECISION))


def digits(value, base: int, count: int, precision: int, rounding: RoundingMode):
    """Return ``(mantissa, exponent)`` with value = 0.mantissa * base**exponent."""
    with working_context(precision, rounding):
        mantissa, exponent, _ = value.digits(base, count)
    return mantissa, int(exponent)


def format_value(value, spec: str, precision: int) -> str:
    with working_context(precision, RoundingMode.NEAREST):
        return format(value, spec)
