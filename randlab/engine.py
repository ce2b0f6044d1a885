"""randlab analysis engine."""

import datetime
import json
import logging
import statistics
import time
import traceback
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .bits import BitsLike
from .config import DEFAULT_ALPHA, DEFAULT_TESTS, SuiteConfig
from .errors import ConfigurationError, RandomnessTestFailure
from .plugin_api import BitsView, TestPlugin, TestResult, serialize_testresult

logger = logging.getLogger(__name__)

# Significance level of the fixed battery.
RUN_ALL_ALPHA = 0.01


@dataclass(frozen=True)
class SuiteOutcome:
    """Outcome of :meth:`Engine.run_all`.

    ``results`` holds every test that was executed, in order; when a test fails the
    battery stops, so the failing test is the last entry.
    """

    passed: bool
    alpha: float
    results: Tuple[TestResult, ...]
    failed_test: Optional[str] = None
    failed_p_values: Tuple[float, ...] = ()

    def raise_for_failure(self) -> None:
        """Raise :class:`RandomnessTestFailure` if the battery failed."""
        if not self.passed:
            raise RandomnessTestFailure(self.failed_test, self.failed_p_values)


class _JSONFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record):
        rec = {
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        test_name = getattr(record, "test_name", None)
        if test_name is not None:
            rec["test_name"] = test_name
        if record.exc_info:
            rec["exc"] = "".join(traceback.format_exception(*record.exc_info))
        return json.dumps(rec, ensure_ascii=False)


class Engine:
    """Main analysis engine for randlab."""

    def __init__(self):
        self._tests: Dict[str, TestPlugin] = {}
        # Map of configured log_path -> handler to avoid duplicate handlers across analyze calls
        self._log_handlers: Dict[str, logging.Handler] = {}
        self._discover_plugins()

    def _discover_plugins(self):
        """Register the bundled plugins and any published via entry points."""
        from .plugins.approximate_entropy import ApproximateEntropyTest
        from .plugins.frequency_within_block import FrequencyWithinBlockTest
        from .plugins.longest_run import LongestRunOnesTest
        from .plugins.monobit import MonobitTest
        from .plugins.runs_test import RunsTest
        from .plugins.serial_test import SerialTest

        self.register_test("monobit", MonobitTest())
        self.register_test("frequency_within_block", FrequencyWithinBlockTest())
        self.register_test("runs", RunsTest())
        self.register_test("longest_run", LongestRunOnesTest())
        self.register_test("serial", SerialTest())
        self.register_test("approximate_entropy", ApproximateEntropyTest())

        # Load plugins published via entry points (group: 'randlab.plugins')
        import importlib.metadata as im
        for ep in im.entry_points(group="randlab.plugins"):
            try:
                cls = ep.load()
            except Exception:
                logger.warning("plugin_load_failed: %s", ep.name, exc_info=True)
                continue
            if isinstance(cls, type) and issubclass(cls, TestPlugin):
                self.register_test(ep.name, cls())
            else:
                logger.warning("plugin_skipped: %s is not a TestPlugin subclass", ep.name)

    def register_test(self, name: str, plugin: TestPlugin):
        """Register a test plugin and inject a logger for observability."""
        plugin.logger = logging.getLogger(f"randlab.plugins.{name}")
        self._tests[name] = plugin

    def get_available_tests(self) -> List[str]:
        """Get list of available test names."""
        return list(self._tests.keys())

    def _configure_logging(self, config: Dict[str, Any]) -> None:
        """Configure logging based on config options.

        - If config contains 'log_path', attach a FileHandler that writes JSONL log records.
        - Respect 'log_level' in config (default INFO). Avoid adding duplicate handlers.
        """
        log_path = config.get("log_path")
        level_no = getattr(logging, str(config.get("log_level", "INFO")).upper(), logging.INFO)

        pkg_logger = logging.getLogger("randlab")
        pkg_logger.setLevel(level_no)

        if not log_path:
            return

        existing = self._log_handlers.get(log_path)
        if existing:
            existing.setLevel(level_no)
            return

        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setLevel(level_no)
        fh.setFormatter(_JSONFormatter())
        pkg_logger.addHandler(fh)
        self._log_handlers[log_path] = fh

    def close(self) -> None:
        """Detach and close the file handlers added by :meth:`analyze`."""
        pkg_logger = logging.getLogger("randlab")
        for fh in self._log_handlers.values():
            pkg_logger.removeHandler(fh)
            fh.close()
        self._log_handlers.clear()

    def run_all(self, bits: BitsLike) -> SuiteOutcome:
        """Run the fixed battery at alpha = 0.01, stopping at the first failing test.

        Order: monobit, frequency within a block (M=3), runs, longest run of ones (M=8),
        serial (m=3, both p-values), approximate entropy (m=3). Invalid input or
        parameters raise the corresponding :mod:`randlab.errors` exception.
        """
        data = bits if isinstance(bits, BitsView) else BitsView(bits)
        results: List[TestResult] = []
        for entry in DEFAULT_TESTS:
            plugin = self._tests[entry.name]
            res = plugin.run(data, dict(entry.params, alpha=RUN_ALL_ALPHA))
            results.append(res)
            p_values = tuple(res.p_values.values()) or (res.p_value,)
            if any(p < RUN_ALL_ALPHA for p in p_values):
                logger.debug("test_failed", extra={"test_name": entry.name})
                return SuiteOutcome(
                    passed=False,
                    alpha=RUN_ALL_ALPHA,
                    results=tuple(results),
                    failed_test=entry.name,
                    failed_p_values=p_values,
                )
        return SuiteOutcome(passed=True, alpha=RUN_ALL_ALPHA, results=tuple(results))

    def _pvalue_stats(self, p_values: List[float]) -> Dict[str, Any]:
        """Return simple statistics and a small histogram for p-values distribution."""
        if not p_values:
            return {"count": 0, "mean": None, "median": None, "stdev": None, "histogram": {}}
        cnt = len(p_values)
        buckets = {"0-0.01": 0, "0.01-0.05": 0, "0.05-0.1": 0, "0.1-1.0": 0}
        for p in p_values:
            if p < 0.01:
                buckets["0-0.01"] += 1
            elif p < 0.05:
                buckets["0.01-0.05"] += 1
            elif p < 0.1:
                buckets["0.05-0.1"] += 1
            else:
                buckets["0.1-1.0"] += 1
        return {
            "count": cnt,
            "mean": statistics.mean(p_values),
            "median": statistics.median(p_values),
            "stdev": statistics.pstdev(p_values) if cnt > 1 else 0.0,
            "histogram": buckets,
        }

    def analyze(self, bits: BitsLike, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run every configured test (no short-circuit) and build a scorecard.

        config format:
        {
            'alpha': 0.01,
            'tests': [{'name': 'serial', 'params': {'m': 3}}, 'runs'],
            'log_path': 'randlab.jsonl',   # optional JSONL log
            'log_level': 'DEBUG',          # optional, default INFO
        }
        A :class:`~randlab.config.SuiteConfig` is accepted as well. Tests rejecting the
        input or their parameters are reported with ``status: "error"``.
        """
        if isinstance(config, SuiteConfig):
            config = config.to_engine_config()
        config = config or SuiteConfig().to_engine_config()
        self._configure_logging(config)

        alpha = float(config.get("alpha", DEFAULT_ALPHA))
        tests_conf = config.get("tests") or [t.to_dict() for t in DEFAULT_TESTS]
        tests_conf = [{"name": t, "params": {}} if isinstance(t, str) else t for t in tests_conf]
        unknown = [t["name"] for t in tests_conf if t["name"] not in self._tests]
        if unknown:
            raise ConfigurationError(f"Unknown test(s) in configuration: {', '.join(unknown)}")

        data = bits if isinstance(bits, BitsView) else BitsView(bits)
        logger.debug("analyze start - %d bits, tests: %s", len(data), [t["name"] for t in tests_conf])

        serialized_results: List[Dict[str, Any]] = []
        p_values: List[float] = []
        for c in tests_conf:
            name = c["name"]
            params = dict(c.get("params") or {}, alpha=alpha)
            logger.debug("starting_test", extra={"test_name": name})
            start = time.perf_counter()
            res = self._tests[name].safe_run(data, params)
            duration_ms = (time.perf_counter() - start) * 1000.0

            if isinstance(res, TestResult):
                if res.time_ms is None:
                    res.time_ms = duration_ms
                s = serialize_testresult(res)
                s["status"] = "completed"
                p_values.append(res.p_value)
                logger.debug("finished_test", extra={"test_name": name})
            else:
                s = {"test_name": name, "status": "error", "reason": res.get("reason"), "time_ms": duration_ms}
                logger.warning("test_error: %s", res.get("reason"), extra={"test_name": name})
            serialized_results.append(s)

        completed = [r for r in serialized_results if r["status"] == "completed"]
        scorecard = {
            "failed_tests": sum(1 for r in completed if not r["passed"]),
            "errored_tests": len(serialized_results) - len(completed),
            "total_tests": len(serialized_results),
            "alpha": alpha,
            "p_value_distribution": self._pvalue_stats(p_values),
        }
        return {"results": serialized_results, "scorecard": scorecard}


_default_engine: Optional[Engine] = None


def run_all(bits: BitsLike) -> SuiteOutcome:
    """Run the fixed battery on ``bits`` with a shared default :class:`Engine`."""
    global _default_engine
    if _default_engine is None:
        _default_engine = Engine()
    return _default_engine.run_all(bits)


__all__ = ["Engine", "RUN_ALL_ALPHA", "SuiteOutcome", "run_all"]
