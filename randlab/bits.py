"""Bit sequence helpers shared by the randomness tests.

All tests work on plain tuples of Python ints. :func:`as_bits` is the single
entry point that validates caller input, so any integer representation of a
bit (``int``, ``bool``, NumPy integer scalars, raw byte values) is accepted and
anything else raises :class:`~randlab.errors.InvalidInputError`.
"""

import numbers
from typing import Iterable, List, Sequence, Tuple, Union

from .errors import InvalidInputError

BitsLike = Union[str, bytes, bytearray, Iterable[int]]


def from_text_bits(s: Union[str, bytes, bytearray]) -> List[int]:
    """Convert a ``'0'``/``'1'`` string into a list of bits.

    Characters whose code is already 0 or 1 pass through unchanged.
    """
    codes = [ord(ch) for ch in s] if isinstance(s, str) else bytes(s)
    bits: List[int] = []
    for pos, code in enumerate(codes):
        if code == 0x30:
            bits.append(0)
        elif code == 0x31:
            bits.append(1)
        elif code in (0, 1):
            bits.append(code)
        else:
            raise InvalidInputError(f"bad character in bit string at position {pos}: {chr(code)!r}")
    return bits


def as_bits(seq: BitsLike) -> Tuple[int, ...]:
    """Normalize ``seq`` into a tuple of 0/1 ints, validating every element."""
    if isinstance(seq, (str, bytes, bytearray)):
        return tuple(from_text_bits(seq))
    if hasattr(seq, "bit_view"):
        seq = seq.bit_view()
    out = []
    for pos, value in enumerate(seq):
        if not isinstance(value, numbers.Integral) or value not in (0, 1):
            raise InvalidInputError(f"element {pos} is not a bit: {value!r}")
        out.append(int(value))
    return tuple(out)


def to_text_bits(seq: Iterable[int]) -> str:
    """Render bits as a ``'0'``/``'1'`` string."""
    return "".join("0" if b == 0 else "1" for b in seq)


def extend_wraparound(bits: Sequence[int], m: int) -> Tuple[int, ...]:
    """Append the first ``m - 1`` bits to the end so ``len(bits)`` m-bit windows exist."""
    bits = tuple(bits)
    if m <= 1:
        return bits
    return bits + bits[: m - 1]


def window_as_integer(bits: Sequence[int], offset: int, m: int) -> int:
    """Fold ``m`` bits starting at ``offset`` into an unsigned int, MSB first.

    ``bits`` must already be wraparound-extended (see :func:`extend_wraparound`).
    """
    value = 0
    for b in bits[offset : offset + m]:
        value = value << 1 | b
    return value


def window_histogram(bits: Sequence[int], m: int) -> List[int]:
    """Count the ``n`` overlapping wraparound m-bit windows into ``2**m`` bins."""
    n = len(bits)
    bins = [0] * (1 << m)
    if m == 0:
        bins[0] = n
        return bins
    extended = extend_wraparound(bits, m)
    for i in range(n):
        bins[window_as_integer(extended, i, m)] += 1
    return bins


def longest_run_of_ones(block: Iterable[int]) -> int:
    """Return the length of the longest contiguous run of 1s in ``block``."""
    max_run = 0
    cur = 0
    for b in block:
        if b == 1:
            cur += 1
            if cur > max_run:
                max_run = cur
        else:
            cur = 0
    return max_run


__all__ = [
    "as_bits",
    "extend_wraparound",
    "from_text_bits",
    "longest_run_of_ones",
    "to_text_bits",
    "window_as_integer",
    "window_histogram",
]
