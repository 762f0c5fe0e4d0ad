"""
Rounding modes understood by the engine.

The enumeration values are the MPFR ``mpfr_rnd_t`` codes, so a mode can be
handed to the engine as-is and any code coming back from it can be mapped to
exactly one mode.
"""

import enum
import logging

import gmpy2

logger = logging.getLogger(__name__)

# MPFR_RNDF has no gmpy2 constant.
MPFR_RNDF = 5


class RoundingMode(enum.Enum):
    NEAREST = gmpy2.RoundToNearest
    TOWARD_ZERO = gmpy2.RoundToZero
    TOWARD_POSITIVE_INFINITY = gmpy2.RoundUp
    TOWARD_NEGATIVE_INFINITY = gmpy2.RoundDown
    AWAY_FROM_ZERO = gmpy2.RoundAwayZero
    # Either of the two neighbours is acceptable.
    FAITHFUL = MPFR_RNDF

    def to_native(self) -> int:
        """Return the MPFR rounding code for this mode."""
        return self.value

    @classmethod
    def from_native(cls, code) -> "RoundingMode":
        """
        Map an MPFR rounding code back to a mode.

        Any code outside the known set maps to NEAREST.
        """
        try:
            return cls(code)
        except ValueError:
            logger.debug("unknown rounding code %r, using NEAREST", code)
            return cls.NEAREST

    @property
    def engine_round(self) -> int:
        """The rounding code a gmpy2 context accepts for this mode."""
        # gmpy2 contexts reject MPFR_RNDF; a correctly rounded result is
        # always one of the two faithful candidates.
        if self is RoundingMode.FAITHFUL:
            return gmpy2.RoundToNearest
        return self.value

    @property
    def is_deterministic(self) -> bool:
        return self is not RoundingMode.FAITHFUL
