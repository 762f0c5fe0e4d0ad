"""
Test suite for mpfloat

Contains:
- tests/unit/          : Unit tests for individual modules
"""
