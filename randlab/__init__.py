"""randlab - NIST SP 800-22 style randomness tests for bit sequences."""

__version__ = "0.1.0"

# Package-level logger; the Engine attaches a JSONL FileHandler when run with a `log_path`.
import logging
logger = logging.getLogger("randlab")
logger.addHandler(logging.NullHandler())

from .errors import (  # noqa: E402
    ConfigurationError,
    InputTooSmallError,
    InvalidInputError,
    ParameterOutOfRangeError,
    RandlabError,
    RandomnessTestFailure,
)
from .bits import from_text_bits  # noqa: E402
from .plugins.monobit import monobit  # noqa: E402
from .plugins.frequency_within_block import frequency_within_block  # noqa: E402
from .plugins.runs_test import runs  # noqa: E402
from .plugins.longest_run import longest_run_of_ones_8  # noqa: E402
from .plugins.serial_test import serial  # noqa: E402
from .plugins.approximate_entropy import approximate_entropy  # noqa: E402
from .engine import Engine, SuiteOutcome, run_all  # noqa: E402

__all__ = [
    "ConfigurationError",
    "Engine",
    "InputTooSmallError",
    "InvalidInputError",
    "ParameterOutOfRangeError",
    "RandlabError",
    "RandomnessTestFailure",
    "SuiteOutcome",
    "approximate_entropy",
    "frequency_within_block",
    "from_text_bits",
    "logger",
    "longest_run_of_ones_8",
    "monobit",
    "run_all",
    "runs",
    "serial",
]
