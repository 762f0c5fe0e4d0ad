"""
Exception flags for numeric conditions.

Numeric conditions never interrupt control flow. Every engine operation
ORs the conditions it raised into a sticky register, one per thread like the
engine's own contexts, and callers poll it with get_flags().
"""

import enum
import functools
import operator
import threading
from typing import Iterable


class ErrorFlags(enum.IntFlag):
    """Bit set over the MPFR exception flags (``MPFR_FLAGS_*`` values)."""

    UNDERFLOW = 1
    OVERFLOW = 2
    NAN = 4
    RANGE_ERROR = 16
    DIVIDE_BY_ZERO = 32

    @classmethod
    def from_list(cls, flags: Iterable["ErrorFlags"]) -> "ErrorFlags":
        return functools.reduce(operator.or_, flags, cls(0))

    @property
    def is_underflow(self) -> bool:
        return bool(self & ErrorFlags.UNDERFLOW)

    @property
    def is_overflow(self) -> bool:
        return bool(self & ErrorFlags.OVERFLOW)

    @property
    def is_nan(self) -> bool:
        return bool(self & ErrorFlags.NAN)

    @property
    def is_range_error(self) -> bool:
        return bool(self & ErrorFlags.RANGE_ERROR)

    @property
    def is_divide_by_zero(self) -> bool:
        return bool(self & ErrorFlags.DIVIDE_BY_ZERO)


ALL_FLAGS = ErrorFlags.from_list(ErrorFlags.__members__.values())


class FlagError(ArithmeticError):
    """Raised by check_flags() when a requested condition is pending."""

    def __init__(self, flags: ErrorFlags):
        super().__init__("numeric condition raised: %s" % _describe(flags))
        self.flags = flags


class _Register(threading.local):
    bits = 0


_register = _Register()


def get_flags() -> ErrorFlags:
    return ErrorFlags(_register.bits)


def clear_flags(flags: ErrorFlags = ALL_FLAGS) -> None:
    _register.bits &= ~int(flags)


def raise_flags(flags: ErrorFlags) -> None:
    _register.bits |= int(flags)


def check_flags(mask: ErrorFlags = ALL_FLAGS) -> None:
    """Raise FlagError if any flag in ``mask`` is pending. Flags are kept."""
    pending = get_flags() & mask
    if pending:
        raise FlagError(pending)


def record_engine_flags(ctx) -> ErrorFlags:
    """Harvest the flags a gmpy2 context collected into the register."""
    raised = ErrorFlags(0)
    if ctx.underflow:
        raised |= ErrorFlags.UNDERFLOW
    if ctx.overflow:
        raised |= ErrorFlags.OVERFLOW
    if ctx.invalid:
        raised |= ErrorFlags.NAN
    if ctx.erange:
        raised |= ErrorFlags.RANGE_ERROR
    if ctx.divzero:
        raised |= ErrorFlags.DIVIDE_BY_ZERO
    if raised:
        raise_flags(raised)
    return raised


def _describe(flags: ErrorFlags) -> str:
    names = [flag.name for flag in ErrorFlags if flags & flag]
    return "|".join(names) or "none"
