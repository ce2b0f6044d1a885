"""Longest Run of Ones in a Block test plugin (M = 8).

Category boundaries and reference probabilities are the NIST SP 800-22 table
for 8-bit blocks; they only hold for that block size.
"""

from typing import List

from ..bits import BitsLike, as_bits, longest_run_of_ones
from ..errors import InputTooSmallError
from ..plugin_api import BitsView, TestResult, TestPlugin
from ..special import gammaincc

BLOCK_SIZE = 8
MIN_BITS = 100
# categories: v <= 1, v == 2, v == 3, v >= 4
PROBS = (0.2148, 0.3672, 0.2305, 0.1875)
LABELS = ("<=1", "2", "3", ">=4")
DOF = 3


def _category(run: int) -> int:
    if run <= 1:
        return 0
    if run >= 4:
        return 3
    return run - 1


def _compute(bits):
    n = len(bits)
    if n < MIN_BITS:
        raise InputTooSmallError(f"longest run of ones needs at least {MIN_BITS} bits, got {n}")

    num_blocks = n // BLOCK_SIZE
    counts: List[int] = [0] * len(PROBS)
    for i in range(num_blocks):
        block = bits[i * BLOCK_SIZE:(i + 1) * BLOCK_SIZE]
        counts[_category(longest_run_of_ones(block))] += 1

    chi2_stat = 0.0
    for v, p in zip(counts, PROBS):
        chi2_stat += (v - num_blocks * p) ** 2 / p
    chi2_stat /= num_blocks

    p_value = gammaincc(DOF / 2.0, chi2_stat / 2.0)
    return counts, chi2_stat, p_value


def longest_run_of_ones_8(bits: BitsLike) -> float:
    """Return the longest-run-of-ones p-value of ``bits`` using 8-bit blocks."""
    return _compute(as_bits(bits))[2]


class LongestRunOnesTest(TestPlugin):
    """Longest run of ones in 8-bit blocks."""

    def describe(self) -> str:
        return "Longest run of ones in a block, M=8 (NIST SP 800-22 2.4)"

    def run(self, data: BitsView, params: dict) -> TestResult:
        bits = data.bit_view()
        counts, chi2_stat, p_value = _compute(bits)
        self.logger.debug("longest run counts=%s chi2=%f p=%f", counts, chi2_stat, p_value)
        num_blocks = len(bits) // BLOCK_SIZE
        return TestResult(
            test_name="longest_run",
            passed=p_value >= float(params.get("alpha", 0.01)),
            p_value=p_value,
            p_values={"longest_run": p_value},
            metrics={
                "counts": counts,
                "expected": [p * num_blocks for p in PROBS],
                "labels": list(LABELS),
                "chi2": chi2_stat,
                "dof": DOF,
                "num_blocks": num_blocks,
                "total_bits": len(bits),
            },
        )
