"""Tests for ProcessorConfig."""

import pytest

from chatstream.context.constants import DEFAULT_CONTEXT_WINDOW
from chatstream.runner.config import ConfigError, ProcessorConfig, load_config


class TestProcessorConfigDefaults:
    """Tests for default values."""

    def test_defaults(self):
        config = ProcessorConfig()
        assert config.max_result_length == 50_000
        assert config.mcp_prefix == "mcp__"
        assert "AskUserQuestion" in config.always_hidden_tools
        assert "Read" in config.quiet_tools
        assert config.default_context_window == DEFAULT_CONTEXT_WINDOW
        assert config.normalize_inputs is True


class TestFromDict:
    """Tests for ProcessorConfig.from_dict."""

    def test_overrides(self):
        config = ProcessorConfig.from_dict({
            "max_result_length": 100,
            "quiet_tools": ["Bash"],
            "context_windows": {"local-model": 8000},
            "normalize_inputs": False,
        })
        assert config.max_result_length == 100
        assert config.quiet_tools == frozenset({"Bash"})
        assert config.context_windows == {"local-model": 8000}
        assert config.normalize_inputs is False

    def test_non_mapping_rejected(self):
        with pytest.raises(ConfigError):
            ProcessorConfig.from_dict(["not", "a", "mapping"])

    @pytest.mark.parametrize(
        "data",
        [
            {"max_result_length": "lots"},
            {"max_result_length": 0},
            {"default_context_window": -1},
            {"context_windows": {"m": 0}},
            {"quiet_tools": "Read"},
        ],
    )
    def test_invalid_values_rejected(self, data):
        with pytest.raises(ConfigError):
            ProcessorConfig.from_dict(data)

    def test_to_dict_round_trip(self):
        config = ProcessorConfig(max_result_length=10, quiet_tools=frozenset({"Read"}))
        assert ProcessorConfig.from_dict(config.to_dict()) == config


class TestFromYaml:
    """Tests for loading YAML files."""

    def test_load(self, tmp_path):
        path = tmp_path / "chatstream.yaml"
        path.write_text("max_result_length: 200\nalways_hidden_tools:\n  - ExitPlanMode\n")
        config = ProcessorConfig.from_yaml(path)
        assert config.max_result_length == 200
        assert config.always_hidden_tools == frozenset({"ExitPlanMode"})

    def test_missing_file_gives_defaults(self, tmp_path):
        assert ProcessorConfig.from_yaml(tmp_path / "missing.yaml") == ProcessorConfig()

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert ProcessorConfig.from_yaml(path) == ProcessorConfig()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("max_result_length: [unclosed\n")
        with pytest.raises(ConfigError):
            ProcessorConfig.from_yaml(path)


class TestFromEnv:
    """Tests for environment configuration."""

    def test_env_overrides(self, tmp_path, monkeypatch):
        path = tmp_path / "chatstream.yaml"
        path.write_text("max_result_length: 200\n")
        monkeypatch.setenv("CHATSTREAM_CONFIG", str(path))
        monkeypatch.setenv("CHATSTREAM_DEFAULT_CONTEXT_WINDOW", "100000")
        config = load_config()
        assert config.max_result_length == 200
        assert config.default_context_window == 100_000

    @pytest.mark.parametrize(
        "name, value",
        [
            ("CHATSTREAM_MAX_RESULT_LENGTH", "0"),
            ("CHATSTREAM_MAX_RESULT_LENGTH", "-10"),
            ("CHATSTREAM_DEFAULT_CONTEXT_WINDOW", "0"),
        ],
    )
    def test_non_positive_env_values_rejected(self, monkeypatch, name, value):
        """Environment overrides get the same positivity checks as files."""
        monkeypatch.delenv("CHATSTREAM_CONFIG", raising=False)
        monkeypatch.delenv("CHATSTREAM_MAX_RESULT_LENGTH", raising=False)
        monkeypatch.delenv("CHATSTREAM_DEFAULT_CONTEXT_WINDOW", raising=False)
        monkeypatch.setenv(name, value)
        with pytest.raises(ConfigError):
            ProcessorConfig.from_env()

    def test_invalid_env_value(self, monkeypatch):
        monkeypatch.delenv("CHATSTREAM_CONFIG", raising=False)
        monkeypatch.setenv("CHATSTREAM_MAX_RESULT_LENGTH", "big")
        with pytest.raises(ConfigError):
            ProcessorConfig.from_env()
