"""Properties every test must hold over a spread of valid inputs."""

import math

import pytest

from randlab import (
    approximate_entropy,
    frequency_within_block,
    longest_run_of_ones_8,
    monobit,
    runs,
    serial,
)
from randlab.bits import to_text_bits
from randlab.validation.p_value_calibration import generate_streams

STRUCTURED = {
    "zeros": "0" * 256,
    "ones": "1" * 256,
    "alternating": "01" * 128,
    "pairs": "0011" * 64,
    "de_bruijn_4": "0000100110101111" * 16,
    "half_and_half": "0" * 128 + "1" * 128,
}
RANDOM = {f"stream_{i}": to_text_bits(s) for i, s in enumerate(generate_streams(12, 256, seed=2024))}
INPUTS = {**STRUCTURED, **RANDOM}

TESTS = {
    "monobit": monobit,
    "frequency_within_block_3": lambda b: frequency_within_block(b, 3),
    "frequency_within_block_16": lambda b: frequency_within_block(b, 16),
    "runs": runs,
    "longest_run": longest_run_of_ones_8,
    "serial_2": lambda b: serial(b, 2),
    "serial_3": lambda b: serial(b, 3),
    "serial_5": lambda b: serial(b, 5),
    "approximate_entropy_1": lambda b: approximate_entropy(b, 1),
    "approximate_entropy_3": lambda b: approximate_entropy(b, 3),
    "approximate_entropy_5": lambda b: approximate_entropy(b, 5),
}


def _as_tuple(p):
    return p if isinstance(p, tuple) else (p,)


@pytest.mark.parametrize("input_name", sorted(INPUTS))
@pytest.mark.parametrize("test_name", sorted(TESTS))
def test_p_values_are_probabilities(test_name, input_name):
    for p in _as_tuple(TESTS[test_name](INPUTS[input_name])):
        assert not math.isnan(p)
        assert 0.0 <= p <= 1.0


@pytest.mark.parametrize("input_name", ["de_bruijn_4", "stream_0", "half_and_half"])
@pytest.mark.parametrize("test_name", sorted(TESTS))
def test_repeated_calls_agree(test_name, input_name):
    bits = INPUTS[input_name]
    assert TESTS[test_name](bits) == TESTS[test_name](bits)


def test_input_is_not_modified():
    bits = [int(c) for c in RANDOM["stream_1"]]
    before = list(bits)
    for func in TESTS.values():
        func(bits)
    assert bits == before


def test_monobit_of_constant_sequence_tends_to_zero():
    p_values = [monobit("1" * n) for n in (100, 400, 1600)]
    assert p_values[0] < 1e-20
    assert p_values[0] > p_values[1] >= p_values[2]
    assert p_values[2] == pytest.approx(0.0, abs=1e-300)
    assert monobit("0" * 100) == p_values[0]
