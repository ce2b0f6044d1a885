"""Shared bit strings for the randlab test suite (NIST SP 800-22 worked examples)."""

import pytest

# First 100 binary digits of the expansion of pi (sections 2.1, 2.2, 2.3, 2.12 examples).
EPSILON_100 = (
    "1100100100001111110110101010001000100001011010001100001000110100"
    "110001001100011001100010100010111000"
)

# 128-bit example of the longest-run-of-ones test (section 2.4).
EPSILON_128 = (
    "11001100000101010110110001001100111000000000001001001101010100010"
    "001001111010110100000001101011111001100111001101101100010110010"
)


@pytest.fixture
def epsilon_100():
    return EPSILON_100


@pytest.fixture
def epsilon_128():
    return EPSILON_128
