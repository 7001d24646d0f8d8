"""
Utilities and helpers for writing tests.
"""
from amrgen.common.testing.test_case import AmrGenTestCase
