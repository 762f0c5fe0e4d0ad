"""Pytest configuration for the mpfloat test suite."""

import pytest

from mpfloat import Defaults, clear_flags


@pytest.fixture(autouse=True)
def pristine_state():
    """Restore the process-wide defaults and clear the flag register around each test."""
    precision, rounding = Defaults.precision(), Defaults.rounding_mode()
    clear_flags()
    yield
    Defaults.set_precision(precision)
    Defaults.set_rounding_mode(rounding)
    clear_flags()
