"""Plugin API definitions for randlab."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple, Union

import numpy as np

from .bits import as_bits, to_text_bits
from .errors import RandlabError


@dataclass
class TestResult:
    """Test result container.

    ``p_value`` is the primary p-value of the test. Tests producing more than one
    p-value (serial) report the smallest one here and every value in ``p_values``.
    ``time_ms`` is filled in by the engine when the plugin does not set it.
    """
    __test__ = False
    test_name: str
    passed: bool
    p_value: float
    p_values: Dict[str, float] = field(default_factory=dict)
    metrics: Dict[str, Any] = field(default_factory=dict)
    time_ms: Optional[float] = None

    def __post_init__(self):
        if not (0.0 <= self.p_value <= 1.0):
            raise ValueError(f"p_value must be between 0 and 1, got {self.p_value!r}")
        if self.time_ms is not None:
            self.time_ms = float(self.time_ms)


def serialize_testresult(result: TestResult) -> Dict[str, Any]:
    """Serialize a TestResult into a JSON-compatible dict."""
    return {
        "test_name": result.test_name,
        "passed": result.passed,
        "p_value": result.p_value,
        "p_values": dict(result.p_values),
        "metrics": dict(result.metrics),
        "time_ms": result.time_ms,
    }


class BitsView:
    """Immutable view over a validated bit sequence."""

    def __init__(self, bits: Union[str, bytes, Iterable[int]]):
        self._bits: Tuple[int, ...] = as_bits(bits)

    @classmethod
    def from_text(cls, text: str) -> "BitsView":
        """Build a view from a ``'0'``/``'1'`` string."""
        return cls(text)

    @classmethod
    def from_bytes(cls, data: bytes) -> "BitsView":
        """Build a view from packed bytes, MSB-first per byte."""
        unpacked = np.unpackbits(np.frombuffer(bytes(data), dtype=np.uint8))
        return cls(unpacked.tolist())

    def __len__(self) -> int:
        return len(self._bits)

    def __getitem__(self, key):
        return self._bits[key]

    def __iter__(self):
        return iter(self._bits)

    def bit_view(self) -> Tuple[int, ...]:
        """Return the bits as a tuple of ints."""
        return self._bits

    def to_text(self) -> str:
        return to_text_bits(self._bits)

    def to_bytes(self) -> bytes:
        """Pack the bits MSB-first; a trailing partial byte is zero-padded."""
        return np.packbits(np.asarray(self._bits, dtype=np.uint8)).tobytes()


class TestPlugin(ABC):
    """Base class for statistical test plugins."""
    __test__ = False
    # Replaced by the Engine with a per-plugin "randlab.plugins.<name>" logger on registration.
    logger = logging.getLogger("randlab.plugins")

    @abstractmethod
    def describe(self) -> str:
        """Return plugin description."""

    @abstractmethod
    def run(self, data: BitsView, params: Dict[str, Any]) -> TestResult:
        """Run statistical test."""

    def safe_run(self, data: BitsView, params: Dict[str, Any]):
        """Execute the test, turning randlab errors into a structured error dict.

        Returns a TestResult on success, or ``{"status": "error", "reason": ...}`` when
        the input or parameters are rejected. Other exceptions propagate.
        """
        try:
            return self.run(data, params)
        except RandlabError as e:
            return {"status": "error", "reason": str(e), "error_type": type(e).__name__}
