"""
Storage: the single slot holding one engine float.

A Storage owns one MPFR value at a fixed precision. Float wrappers share a
Storage until one of them mutates; the owner count kept here is what the
wrappers consult before writing. Storage is not thread-safe: two wrappers
sharing it must not be mutated from different threads without external
locking.
"""

import logging

from . import _engine
from .rounding import RoundingMode

logger = logging.getLogger(__name__)


class Storage:
    __slots__ = ("precision", "value", "_owners", "_released")

    def __init__(self, precision: int, value):
        self.precision = precision
        self.value = value
        self._owners = 0
        self._released = False

    @classmethod
    def create(cls, precision: int) -> "Storage":
        """Allocate a NaN at ``precision`` bits. Bad precisions raise ValueError."""
        _engine.check_precision(precision)
        return cls(precision, _engine.nan(precision))

    def clone(self) -> "Storage":
        """Structural copy: same precision, same bits, no rounding."""
        self._check_live()
        return Storage(self.precision, self.value)

    def release(self) -> None:
        self._check_live()
        self.value = None
        self._released = True
        logger.debug("released %d-bit storage %#x", self.precision, id(self))

    def set_precision(self, precision: int) -> None:
        """Change precision; the current value is rounded to nearest."""
        self._check_live()
        _engine.check_precision(precision)
        self.value = _engine.convert(self.value, precision, RoundingMode.NEAREST)
        logger.debug("storage %#x precision %d -> %d", id(self), self.precision, precision)
        self.precision = precision

    def store(self, value) -> None:
        self._check_live()
        self.value = value

    # Owner bookkeeping for the copy-on-write wrappers.

    def retain(self) -> "Storage":
        self._check_live()
        self._owners += 1
        return self

    def drop(self) -> None:
        """Forget one owner; the last one out releases the value."""
        self._owners -= 1
        if self._owners == 0:
            self.release()

    @property
    def owners(self) -> int:
        return self._owners

    @property
    def is_unique(self) -> bool:
        return self._owners == 1

    @property
    def released(self) -> bool:
        return self._released

    def _check_live(self) -> None:
        if self._released:
            raise RuntimeError("storage %#x has already been released" % id(self))
