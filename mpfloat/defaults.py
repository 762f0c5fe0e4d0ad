"""
Process-wide defaults for new Float values.

The defaults are read when a Float is constructed without an explicit
precision and are never consulted again for that value: changing them has no
effect on values that already exist.
"""

import logging
import threading

from . import _engine
from .rounding import RoundingMode

logger = logging.getLogger(__name__)


class Defaults:
    """Default precision and rounding mode shared by every thread."""

    _lock = threading.Lock()
    _precision: int = _engine.platform_default_precision()
    _rounding: RoundingMode = RoundingMode.NEAREST

    @classmethod
    def precision(cls) -> int:
        with cls._lock:
            return cls._precision

    @classmethod
    def set_precision(cls, precision: int) -> None:
        _engine.check_precision(precision)
        with cls._lock:
            previous, cls._precision = cls._precision, precision
        logger.debug("default precision %d -> %d", previous, precision)

    @classmethod
    def rounding_mode(cls) -> RoundingMode:
        with cls._lock:
            return cls._rounding

    @classmethod
    def set_rounding_mode(cls, mode: RoundingMode) -> None:
        if not isinstance(mode, RoundingMode):
            raise TypeError("expected a RoundingMode, got %r" % (mode,))
        with cls._lock:
            previous, cls._rounding = cls._rounding, mode
        logger.debug("default rounding mode %s -> %s", previous.name, mode.name)


def default_precision() -> int:
    return Defaults.precision()


def set_default_precision(precision: int) -> None:
    Defaults.set_precision(precision)


def default_rounding_mode() -> RoundingMode:
    return Defaults.rounding_mode()


def set_default_rounding_mode(mode: RoundingMode) -> None:
    Defaults.set_rounding_mode(mode)
