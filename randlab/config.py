"""Suite configuration loading and validation."""

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from .errors import ConfigurationError

DEFAULT_ALPHA = 0.01
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class TestSpec:
    """One configured test: registered plugin name and its parameters."""

    __test__ = False
    name: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "params": dict(self.params)}


# Fixed battery run by the orchestrator, in order.
DEFAULT_TESTS: Tuple[TestSpec, ...] = (
    TestSpec("monobit"),
    TestSpec("frequency_within_block", {"block_size": 3}),
    TestSpec("runs"),
    TestSpec("longest_run"),
    TestSpec("serial", {"m": 3}),
    TestSpec("approximate_entropy", {"m": 3}),
)


@dataclass(frozen=True)
class SuiteConfig:
    """Configuration for :meth:`randlab.engine.Engine.analyze`."""

    alpha: float = DEFAULT_ALPHA
    tests: Tuple[TestSpec, ...] = DEFAULT_TESTS
    log_path: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SuiteConfig":
        """Build a config from a parsed YAML/JSON document."""
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration root must be a mapping.")

        try:
            alpha = float(data.get("alpha", DEFAULT_ALPHA))
        except (TypeError, ValueError) as exc:
            raise ConfigurationError("'alpha' must be numeric.") from exc
        if not 0.0 < alpha < 1.0:
            raise ConfigurationError("'alpha' must be between 0 and 1 (exclusive).")

        tests_conf = data.get("tests")
        if tests_conf is None:
            tests = DEFAULT_TESTS
        else:
            if not isinstance(tests_conf, (list, tuple)):
                raise ConfigurationError("'tests' must be a list of test names or {name, params} entries.")
            tests = tuple(_normalize_tests_entry(t) for t in tests_conf)
            if not tests:
                raise ConfigurationError("At least one test must be configured.")

        log_path = data.get("log_path")
        if log_path is not None:
            log_path = str(log_path)
        log_level = str(data.get("log_level", "INFO")).upper()
        if log_level not in LOG_LEVELS:
            raise ConfigurationError(f"'log_level' must be one of {', '.join(LOG_LEVELS)}.")

        return cls(alpha=alpha, tests=tests, log_path=log_path, log_level=log_level)

    def to_engine_config(self) -> Dict[str, Any]:
        """Return the plain dict accepted by ``Engine.analyze``."""
        conf: Dict[str, Any] = {
            "alpha": self.alpha,
            "tests": [t.to_dict() for t in self.tests],
            "log_level": self.log_level,
        }
        if self.log_path:
            conf["log_path"] = self.log_path
        return conf


def _normalize_tests_entry(t) -> TestSpec:
    """Normalize a single test entry which may be either a string or a mapping."""
    if isinstance(t, str):
        return TestSpec(t)
    if isinstance(t, Mapping):
        name = t.get("name")
        if not isinstance(name, str) or not name:
            raise ConfigurationError("Test entries must carry a non-empty 'name'.")
        params = t.get("params") or {}
        if not isinstance(params, Mapping):
            raise ConfigurationError(f"Params for test '{name}' must be a mapping.")
        return TestSpec(name, dict(params))
    raise ConfigurationError(f"Invalid test entry: {t!r}")


def load_config(path) -> SuiteConfig:
    """Load a YAML (``.yaml``/``.yml``) or JSON suite configuration file."""
    _, ext = os.path.splitext(str(path).lower())
    try:
        with open(path, "r", encoding="utf-8") as cf:
            if ext in (".yaml", ".yml"):
                data = yaml.safe_load(cf)
            else:
                data = json.load(cf)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Configuration file not found: {path}") from exc
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Could not parse configuration file {path}: {exc}") from exc
    return SuiteConfig.from_mapping(data or {})


__all__ = ["DEFAULT_ALPHA", "DEFAULT_TESTS", "SuiteConfig", "TestSpec", "load_config"]
