import json

import pytest

from randlab.config import DEFAULT_TESTS, SuiteConfig, TestSpec, load_config
from randlab.errors import ConfigurationError


class TestSuiteConfig:
    def test_defaults(self):
        config = SuiteConfig()
        assert config.alpha == 0.01
        assert [t.name for t in config.tests] == [t.name for t in DEFAULT_TESTS]
        assert config.log_path is None

    def test_default_battery_parameters(self):
        params = {t.name: dict(t.params) for t in DEFAULT_TESTS}
        assert params["frequency_within_block"] == {"block_size": 3}
        assert params["serial"] == {"m": 3}
        assert params["approximate_entropy"] == {"m": 3}

    def test_from_mapping_mixed_entries(self):
        config = SuiteConfig.from_mapping(
            {"alpha": 0.05, "tests": ["runs", {"name": "serial", "params": {"m": 2}}], "log_level": "debug"}
        )
        assert config.alpha == 0.05
        assert config.tests == (TestSpec("runs"), TestSpec("serial", {"m": 2}))
        assert config.log_level == "DEBUG"

    def test_unknown_keys_ignored(self):
        assert SuiteConfig.from_mapping({"colour": "blue"}).alpha == 0.01

    def test_to_engine_config(self):
        conf = SuiteConfig(log_path="out.jsonl").to_engine_config()
        assert conf["alpha"] == 0.01
        assert conf["log_path"] == "out.jsonl"
        assert conf["tests"][1] == {"name": "frequency_within_block", "params": {"block_size": 3}}
        assert "log_path" not in SuiteConfig().to_engine_config()

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {"alpha": 0},
            {"alpha": 1.5},
            {"alpha": "high"},
            {"tests": "runs"},
            {"tests": []},
            {"tests": [{"params": {}}]},
            {"tests": [{"name": "serial", "params": [3]}]},
            {"tests": [42]},
            {"log_level": "LOUD"},
        ],
    )
    def test_invalid_values(self, data):
        with pytest.raises(ConfigurationError):
            SuiteConfig.from_mapping(data)


class TestLoadConfig:
    def test_yaml(self, tmp_path):
        path = tmp_path / "suite.yaml"
        path.write_text(
            "alpha: 0.02\n"
            "tests:\n"
            "  - monobit\n"
            "  - name: approximate_entropy\n"
            "    params:\n"
            "      m: 2\n",
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.alpha == 0.02
        assert config.tests[1] == TestSpec("approximate_entropy", {"m": 2})

    def test_json(self, tmp_path):
        path = tmp_path / "suite.json"
        path.write_text(json.dumps({"tests": ["runs"], "log_path": "x.jsonl"}), encoding="utf-8")
        config = load_config(str(path))
        assert config.tests == (TestSpec("runs"),)
        assert config.log_path == "x.jsonl"

    def test_empty_yaml_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == SuiteConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "missing.yaml")

    def test_unparsable(self, tmp_path):
        bad_yaml = tmp_path / "bad.yaml"
        bad_yaml.write_text("tests: [monobit\n", encoding="utf-8")
        bad_json = tmp_path / "bad.json"
        bad_json.write_text("{", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(bad_yaml)
        with pytest.raises(ConfigurationError):
            load_config(bad_json)
