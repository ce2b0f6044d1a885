"""Tests for the longest run of ones (M=8) plugin."""

import pytest

from randlab import longest_run_of_ones_8
from randlab.errors import InputTooSmallError
from randlab.plugin_api import BitsView
from randlab.plugins.longest_run import PROBS, LongestRunOnesTest


class TestLongestRunOnes:
    def setup_method(self):
        self.plugin = LongestRunOnesTest()

    def test_reference_vector(self, epsilon_128):
        assert longest_run_of_ones_8(epsilon_128) == pytest.approx(0.180598, abs=1e-6)

    def test_reference_probabilities_sum_to_one(self):
        assert sum(PROBS) == pytest.approx(1.0, abs=1e-9)

    def test_plugin_metrics(self, epsilon_128):
        result = self.plugin.run(BitsView(epsilon_128), {})

        assert result.test_name == "longest_run"
        assert result.passed is True
        assert result.metrics["num_blocks"] == 16
        assert sum(result.metrics["counts"]) == 16
        assert result.metrics["labels"] == ["<=1", "2", "3", ">=4"]
        assert result.metrics["dof"] == 3

    def test_all_ones_fails(self):
        result = self.plugin.run(BitsView("1" * 128), {})
        assert result.metrics["counts"] == [0, 0, 0, 16]
        assert result.passed is False

    def test_partial_block_is_ignored(self, epsilon_128):
        assert longest_run_of_ones_8(epsilon_128 + "1111111") == longest_run_of_ones_8(epsilon_128)

    def test_too_short(self):
        with pytest.raises(InputTooSmallError):
            longest_run_of_ones_8("1" * 64)
