"""Error taxonomy for randlab.

Input and parameter errors also derive from :class:`ValueError` so callers that
only guard against bad values keep working.
"""

from typing import Sequence, Tuple


class RandlabError(Exception):
    """Base error type for randlab failures."""


class InvalidInputError(RandlabError, ValueError):
    """Raised when a sequence element is not a bit or a bit string has a bad character."""


class InputTooSmallError(RandlabError, ValueError):
    """Raised when a sequence is shorter than a test's required minimum."""


class ParameterOutOfRangeError(RandlabError, ValueError):
    """Raised when a block size or template length does not fit the sequence."""


class ConfigurationError(RandlabError, ValueError):
    """Raised when a suite configuration is malformed or invalid."""


class RandomnessTestFailure(RandlabError):
    """Raised when a sequence fails a test of the battery."""

    def __init__(self, test_name: str, p_values: Sequence[float]):
        self.test_name = test_name
        self.p_values: Tuple[float, ...] = tuple(p_values)
        formatted = " ".join(f"{p:f}" for p in self.p_values)
        super().__init__(f"failed {test_name} with p-value={formatted}")
