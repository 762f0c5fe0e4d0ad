"""
Tests for Float assignment

Checks:
1. Rounding of every deterministic mode
2. The ternary result of numeric assignments
3. Copy-on-write: independence and uniqueness of storage
4. Text assignment, precision changes and swap
"""

import copy
import math
import sys
from fractions import Fraction

import gmpy2
import pytest

from mpfloat import Float, RoundingMode

# =============================================================================
# ROUNDING AND TERNARY
# =============================================================================


class TestRounding:
    """2.7 assigned at two bits of precision"""

    @pytest.mark.parametrize(
        "mode, expected",
        [
            (RoundingMode.TOWARD_ZERO, 2.0),
            (RoundingMode.TOWARD_POSITIVE_INFINITY, 3.0),
            (RoundingMode.TOWARD_NEGATIVE_INFINITY, 2.0),
            (RoundingMode.NEAREST, 3.0),
            (RoundingMode.AWAY_FROM_ZERO, 3.0),
        ],
    )
    def test_deterministic_modes(self, mode: RoundingMode, expected: float) -> None:
        """Each mode lands on its neighbour"""
        x = Float(precision=2)
        x.set(2.7, mode)
        assert x.to_double() == expected

    def test_faithful_picks_a_neighbour(self) -> None:
        """FAITHFUL lands on either neighbour"""
        x = Float(precision=2)
        x.set(2.7, RoundingMode.FAITHFUL)
        assert x.to_double() in (2.0, 3.0)

    def test_negative_values(self) -> None:
        """Directional modes follow the sign"""
        x = Float(precision=2)
        x.set(-2.7, RoundingMode.TOWARD_ZERO)
        assert x.to_double() == -2.0
        x.set(-2.7, RoundingMode.TOWARD_NEGATIVE_INFINITY)
        assert x.to_double() == -3.0
        x.set(-2.7, RoundingMode.AWAY_FROM_ZERO)
        assert x.to_double() == -3.0

    def test_ties_to_even(self) -> None:
        """Nearest breaks ties toward the even significand"""
        x = Float(precision=2)
        x.set(5)
        assert x.to_double() == 4.0
        x.set(7)
        assert x.to_double() == 8.0


class TestTernary:
    """Tests for the ternary result"""

    def test_rounded_up_is_positive(self) -> None:
        """2.7 to nearest at two bits rounds up"""
        assert Float(precision=2).set(2.7) > 0

    def test_rounded_down_is_negative(self) -> None:
        """Truncation rounds 2.7 down"""
        assert Float(precision=2).set(2.7, RoundingMode.TOWARD_ZERO) < 0

    @pytest.mark.parametrize("value", [1.5, 0.0, -3.0, 2, Fraction(3, 4)])
    def test_exact_is_zero(self, value) -> None:
        """Exactly representable values give 0"""
        assert Float(precision=2).set(value) == 0

    def test_integer_rounding_reports_direction(self) -> None:
        """Integers wider than the precision round like anything else"""
        x = Float(precision=2)
        assert x.set_int(7) > 0
        assert x.set_int(5) < 0
        assert x.set_uint(6) == 0

    def test_rational_ternary(self) -> None:
        """1/3 rounds away from its exact value"""
        x = Float(precision=10)
        ternary = x.set_rational(Fraction(1, 3))
        assert ternary != 0
        assert (x > Fraction(1, 3)) == (ternary > 0)

    def test_specials_are_exact(self) -> None:
        """NaN and infinities assign with ternary 0"""
        x = Float(precision=8)
        assert x.set_double(math.inf) == 0
        assert x.is_infinity
        assert x.set_double(math.nan) == 0
        assert x.is_nan

    def test_self_assignment(self) -> None:
        """Assigning a value to itself is exact and idempotent"""
        x = Float(0.1)
        assert x.set_float(x) == 0
        assert x.to_double() == 0.1

    def test_same_precision_other_instance(self) -> None:
        """Equal precisions copy exactly"""
        x = Float(precision=53)
        assert x.set_float(Float(0.1, precision=53)) == 0
        assert x.to_double() == 0.1

    def test_narrowing_from_float(self) -> None:
        """Fewer bits round the source"""
        x = Float(precision=2)
        assert x.set_float(Float(2.7), RoundingMode.TOWARD_POSITIVE_INFINITY) > 0
        assert x.to_double() == 3.0


# =============================================================================
# TYPED SETTERS
# =============================================================================


class TestTypedSetters:
    """Tests for the set_* variants"""

    def test_set_int_range(self) -> None:
        """set_int accepts exactly the platform range"""
        x = Float(precision=64)
        assert x.set_int(-sys.maxsize - 1) == 0
        with pytest.raises(ValueError):
            x.set_int(sys.maxsize + 1)

    def test_set_uint_range(self) -> None:
        """set_uint rejects negatives and overwide values"""
        x = Float(precision=64)
        with pytest.raises(ValueError):
            x.set_uint(-1)
        with pytest.raises(ValueError):
            x.set_uint(2 * sys.maxsize + 2)

    def test_set_double_type(self) -> None:
        """set_double wants a float"""
        with pytest.raises(TypeError):
            Float().set_double(1)

    def test_set_integer(self) -> None:
        """Big integers of any width"""
        x = Float(precision=300)
        assert x.set_integer(gmpy2.mpz(3) ** 150) == 0
        assert x == 3 ** 150
        with pytest.raises(TypeError):
            x.set_integer(1.5)

    def test_set_rational(self) -> None:
        """Fractions and mpq"""
        x = Float(precision=10)
        assert x.set_rational(gmpy2.mpq(3, 8)) == 0
        assert x.to_double() == 0.375
        with pytest.raises(TypeError):
            x.set_rational(0.375)

    def test_set_float_type(self) -> None:
        """set_float wants a Float"""
        with pytest.raises(TypeError):
            Float().set_float(1.0)

    def test_set_unsupported(self) -> None:
        """set() rejects unknown types"""
        with pytest.raises(TypeError):
            Float().set(object())


class TestSetString:
    """Tests for set_string() and set() with text"""

    def test_success(self) -> None:
        """Valid text parses into the receiver"""
        x = Float(precision=53)
        assert x.set_string("0.5")
        assert x.to_double() == 0.5

    def test_set_dispatches_text(self) -> None:
        """set() parses text in the given base"""
        x = Float()
        assert x.set("1.1", base=2) is True
        assert x.to_double() == 1.5

    def test_rounding(self) -> None:
        """Text rounds into the receiver's precision"""
        x = Float(precision=2)
        assert x.set_string("2.7", rounding=RoundingMode.TOWARD_POSITIVE_INFINITY)
        assert x.to_double() == 3.0

    def test_failure_keeps_precision(self) -> None:
        """A failed parse returns False and keeps the precision"""
        x = Float(1.0, precision=30)
        assert not x.set_string("not a number")
        assert not x.set_string("")
        assert x.precision == 30

    def test_lenient_text_rejected(self) -> None:
        """Blank text and digit separators fail like other bad text"""
        x = Float(1.0, precision=30)
        assert x.set_string("  ") is False
        assert x.set("2_5") is False
        assert x.precision == 30

    def test_bad_base(self) -> None:
        """Bad bases raise"""
        with pytest.raises(ValueError):
            Float().set_string("1", base=64)

    def test_failure_on_shared_storage(self) -> None:
        """Even a failed parse leaves other copies alone"""
        a = Float(2.0)
        b = a.copy()
        b.set_string("junk")
        assert a.to_double() == 2.0


# =============================================================================
# COPY-ON-WRITE
# =============================================================================


class TestCopyOnWrite:
    """Tests for value semantics over shared storage"""

    @pytest.mark.parametrize("value", [5.0, -1, Fraction(1, 7), math.nan])
    def test_copy_independence(self, value) -> None:
        """Setting a copy never changes the original"""
        a = Float(3.25)
        b = copy.copy(a)
        b.set(value)
        assert a.to_double() == 3.25

    def test_copy_shares(self) -> None:
        """A fresh copy shares storage"""
        a = Float(1.0)
        b = a.copy()
        assert not a.has_unique_storage()
        assert not b.has_unique_storage()
        assert a._storage is b._storage

    def test_unique_after_mutation(self) -> None:
        """Both sides are exclusive after one of them mutates"""
        a = Float(1.0)
        b = a.copy()
        b.set(2.0)
        assert a.has_unique_storage()
        assert b.has_unique_storage()

    def test_original_mutation(self) -> None:
        """Mutating the original leaves the copy alone"""
        a = Float(1.0)
        b = a.copy()
        a.set(9.0)
        assert b.to_double() == 1.0
        assert a.to_double() == 9.0

    def test_reads_never_clone(self) -> None:
        """Read-only operations keep sharing"""
        a = Float(1.5)
        b = a.copy()
        b.to_double()
        b.to_string()
        b.compare(a)
        assert b.is_positive
        assert a._storage is b._storage

    def test_unique_value_mutates_in_place(self) -> None:
        """Exclusive storage is reused, not cloned"""
        a = Float(1.5)
        storage = a._storage
        a.set(2.5)
        assert a._storage is storage

    def test_deepcopy_is_eager(self) -> None:
        """deepcopy clones at once"""
        a = Float(1.5)
        b = copy.deepcopy(a)
        assert a.has_unique_storage()
        assert b.has_unique_storage()
        assert b.to_double() == 1.5
        assert b.precision == a.precision

    def test_chain_of_copies(self) -> None:
        """Three owners, one writer"""
        a = Float(1.0)
        b = a.copy()
        c = b.copy()
        assert a._storage.owners == 3
        c.set(3.0)
        assert a._storage.owners == 2
        assert a._storage is b._storage
        assert c.has_unique_storage()


class TestPrecisionChange:
    """Tests for the precision setter"""

    def test_rounds_to_nearest(self) -> None:
        """Narrowing rounds the value to nearest"""
        x = Float(2.7)
        x.precision = 2
        assert x.precision == 2
        assert x.to_double() == 3.0

    def test_copy_keeps_old_precision(self) -> None:
        """Changing precision is a mutation"""
        a = Float(2.7)
        b = a.copy()
        b.precision = 2
        assert a.precision == 53
        assert a.to_double() == 2.7
        assert b.has_unique_storage()

    def test_bad_precision(self) -> None:
        """Bad precisions raise without cloning"""
        a = Float(1.0)
        b = a.copy()
        with pytest.raises(ValueError):
            b.precision = 0
        assert a._storage is b._storage


class TestSwap:
    """Tests for swap()"""

    def test_swaps_value_and_precision(self) -> None:
        """Values and precisions trade places"""
        a = Float(1.5, precision=10)
        b = Float(-4.0, precision=70)
        a.swap(b)
        assert (a.to_double(), a.precision) == (-4.0, 70)
        assert (b.to_double(), b.precision) == (1.5, 10)

    def test_swap_keeps_sharing(self) -> None:
        """Sharing follows the storage"""
        a = Float(1.0)
        shared = a.copy()
        b = Float(2.0)
        a.swap(b)
        assert b._storage is shared._storage
        assert a.has_unique_storage()


class TestPlatformSetterTypes:
    """set_int / set_uint take integers only"""

    @pytest.mark.parametrize("value", [1.5, "1", True])
    def test_rejects_non_integers(self, value) -> None:
        """Non-integers are not truncated"""
        with pytest.raises(TypeError):
            Float().set_int(value)
        with pytest.raises(TypeError):
            Float().set_uint(value)
