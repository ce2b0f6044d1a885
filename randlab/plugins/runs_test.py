"""Runs test plugin (NIST SP 800-22 2.3)."""

import math

from ..bits import BitsLike, as_bits
from ..errors import InputTooSmallError
from ..plugin_api import BitsView, TestResult, TestPlugin
from ..special import erfc

MIN_BITS = 100


def count_runs(bits) -> int:
    """Number of maximal groups of identical bits."""
    runs = 1
    for prev, cur in zip(bits, bits[1:]):
        if cur != prev:
            runs += 1
    return runs


def _runs(bits):
    n = len(bits)
    if n < MIN_BITS:
        raise InputTooSmallError(f"runs test needs at least {MIN_BITS} bits, got {n}")
    pi = sum(bits) / n
    v_obs = count_runs(bits)
    pic = pi * (1.0 - pi)
    if pic == 0.0:
        # constant sequence: a single run, statistic is unbounded
        return pi, v_obs, 0.0
    p_value = erfc(abs(v_obs - 2.0 * n * pic) / (2.0 * math.sqrt(2.0 * n) * pic))
    return pi, v_obs, p_value


def runs(bits: BitsLike) -> float:
    """Return the runs-test p-value of ``bits``."""
    return _runs(as_bits(bits))[2]


class RunsTest(TestPlugin):
    """Total number of runs compared with the expectation for a random sequence."""

    def describe(self) -> str:
        return "Runs test (NIST SP 800-22 2.3)"

    def run(self, data: BitsView, params: dict) -> TestResult:
        bits = data.bit_view()
        pi, v_obs, p_value = _runs(bits)
        self.logger.debug("runs n=%d pi=%f v_obs=%d p=%f", len(bits), pi, v_obs, p_value)
        return TestResult(
            test_name="runs",
            passed=p_value >= float(params.get("alpha", 0.01)),
            p_value=p_value,
            p_values={"runs": p_value},
            metrics={"total_bits": len(bits), "pi": pi, "runs": v_obs},
        )
