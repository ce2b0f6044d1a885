"""NIST SP 800-22 Frequency Test within a Block plugin."""

from typing import List

from ..bits import BitsLike, as_bits
from ..errors import InputTooSmallError, ParameterOutOfRangeError
from ..plugin_api import BitsView, TestPlugin, TestResult
from ..special import gammaincc

MIN_BITS = 100


def _compute(bits, block_size: int):
    """Return (chi_square, p_value, ones_counts) per NIST SP 800-22 2.2."""
    n = len(bits)
    if n < MIN_BITS:
        raise InputTooSmallError(f"frequency within a block needs at least {MIN_BITS} bits, got {n}")
    if block_size < 1 or block_size > n:
        raise ParameterOutOfRangeError(f"block_size must be between 1 and {n}, got {block_size}")

    # trailing bits that do not fill a block are discarded
    block_count = n // block_size
    ones_counts: List[int] = []
    for i in range(block_count):
        start = i * block_size
        ones_counts.append(sum(bits[start:start + block_size]))

    chi_sq = 0.0
    for ones in ones_counts:
        chi_sq += (ones / block_size - 0.5) ** 2
    chi_sq *= 4.0 * block_size

    p_value = gammaincc(block_count / 2.0, chi_sq / 2.0)
    return chi_sq, p_value, ones_counts


def frequency_within_block(bits: BitsLike, block_size: int) -> float:
    """Return the frequency-within-a-block p-value for blocks of ``block_size`` bits."""
    return _compute(as_bits(bits), int(block_size))[1]


class FrequencyWithinBlockTest(TestPlugin):
    """NIST SP 800-22 Frequency Test within a Block plugin."""

    def describe(self) -> str:
        return "Frequency Test within a Block (NIST SP 800-22 2.2)"

    def run(self, data: BitsView, params: dict) -> TestResult:
        """Parameters: ``block_size`` (default 3), ``alpha`` (default 0.01)."""
        bits = data.bit_view()
        block_size = int(params.get("block_size", 3))
        chi_sq, p_value, ones_counts = _compute(bits, block_size)
        self.logger.debug("block frequency M=%d blocks=%d chi2=%f p=%f", block_size, len(ones_counts), chi_sq, p_value)

        return TestResult(
            test_name="frequency_within_block",
            passed=p_value >= float(params.get("alpha", 0.01)),
            p_value=p_value,
            p_values={"frequency_within_block": p_value},
            metrics={
                "block_count": len(ones_counts),
                "block_size": block_size,
                "total_bits": len(bits),
                "ones_counts": ones_counts,
                "chi_square": chi_sq,
            },
        )

