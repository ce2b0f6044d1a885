"""Monobit (frequency) test plugin."""

import math

from ..bits import BitsLike, as_bits
from ..errors import InputTooSmallError
from ..plugin_api import BitsView, TestResult, TestPlugin
from ..special import erfc

MIN_BITS = 100


def _monobit(bits):
    n = len(bits)
    if n < MIN_BITS:
        raise InputTooSmallError(f"monobit needs at least {MIN_BITS} bits, got {n}")
    # 0 -> -1, 1 -> +1
    s = 2 * sum(bits) - n
    s_obs = abs(s) / math.sqrt(n)
    return s, s_obs, erfc(s_obs / math.sqrt(2))


def monobit(bits: BitsLike) -> float:
    """Return the monobit p-value of ``bits``."""
    return _monobit(as_bits(bits))[2]


class MonobitTest(TestPlugin):
    """Monobit frequency test plugin."""

    def describe(self) -> str:
        return "Monobit frequency test (NIST SP 800-22 2.1)"

    def run(self, data: BitsView, params: dict) -> TestResult:
        bits = data.bit_view()
        s, s_obs, p = _monobit(bits)
        self.logger.debug("monobit n=%d s=%d s_obs=%f p=%f", len(bits), s, s_obs, p)
        return TestResult(
            test_name="monobit",
            passed=p >= float(params.get("alpha", 0.01)),
            p_value=p,
            p_values={"monobit": p},
            metrics={"total_bits": len(bits), "ones_count": (s + len(bits)) // 2, "s_obs": s_obs},
        )
