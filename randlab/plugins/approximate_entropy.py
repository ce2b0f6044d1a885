"""Approximate Entropy (ApEn) test plugin (NIST SP 800-22 2.12)."""

import math

from ..bits import BitsLike, as_bits, window_histogram
from ..errors import InputTooSmallError, ParameterOutOfRangeError
from ..plugin_api import BitsView, TestResult, TestPlugin
from ..special import gammaincc


def phi(bits, m: int) -> float:
    """Sum of c*ln(c) over the wraparound m-bit pattern frequencies."""
    n = len(bits)
    total = 0.0
    for count in window_histogram(bits, m):
        # 0*log(0) is taken as 0
        if count == 0:
            continue
        c = count / n
        total += c * math.log(c)
    return total


def _compute(bits, m: int):
    n = len(bits)
    if n == 0:
        raise InputTooSmallError("approximate entropy needs a non-empty sequence")
    # 2**m must not exceed n, which also bounds the histogram size
    max_m = n.bit_length() - 1
    if m < 1 or m > max_m:
        raise ParameterOutOfRangeError(f"m must be between 1 and floor(log2 n) = {max_m}, got {m}")

    ap_en = phi(bits, m) - phi(bits, m + 1)
    # can dip below zero through rounding
    if ap_en <= 0:
        ap_en = 0.0

    # ApEn can land a few ULPs above ln 2 when every pattern is equally frequent
    chi_sq = max(0.0, 2.0 * n * (math.log(2.0) - ap_en))
    p_value = gammaincc(2.0 ** m / 2.0, chi_sq / 2.0)
    return ap_en, chi_sq, p_value


def approximate_entropy(bits: BitsLike, m: int) -> float:
    """Return the approximate-entropy p-value for template length ``m``."""
    return _compute(as_bits(bits), int(m))[2]


class ApproximateEntropyTest(TestPlugin):
    """Approximate Entropy test plugin.

    Compares the frequency of overlapping m-bit and (m+1)-bit patterns
    (wraparound windows) against the expectation for a random sequence.
    """

    def describe(self) -> str:
        return "Approximate Entropy test (NIST SP 800-22 2.12)"

    def run(self, data: BitsView, params: dict) -> TestResult:
        bits = data.bit_view()
        m = int(params.get("m", 3))
        ap_en, chi_sq, p_value = _compute(bits, m)
        self.logger.debug("apen m=%d ap_en=%f chi2=%f p=%f", m, ap_en, chi_sq, p_value)
        return TestResult(
            test_name="approximate_entropy",
            passed=p_value >= float(params.get("alpha", 0.01)),
            p_value=p_value,
            p_values={"ap_en": p_value},
            metrics={"m": m, "ap_en": ap_en, "chi_square": chi_sq, "total_bits": len(bits)},
        )
