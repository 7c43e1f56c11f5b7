"""Configuration handling for the stream processor."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional

import yaml

from ..context.constants import DEFAULT_CONTEXT_WINDOW
from .formatter import ALWAYS_HIDDEN_TOOLS, MAX_RESULT_LENGTH, QUIET_TOOLS


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or is invalid."""


@dataclass
class ProcessorConfig:
    """Configuration for the stream processor."""

    # Result normalization
    max_result_length: int = MAX_RESULT_LENGTH
    mcp_prefix: str = "mcp__"

    # Visibility: control-flow tools whose result repeats assistant text
    always_hidden_tools: FrozenSet[str] = ALWAYS_HIDDEN_TOOLS
    # Tools whose successful output is not worth showing
    quiet_tools: FrozenSet[str] = QUIET_TOOLS

    # Context window budgets, merged over the built-in table
    context_windows: Dict[str, int] = field(default_factory=dict)
    default_context_window: int = DEFAULT_CONTEXT_WINDOW

    # Tool input cleanup (Windows path separators, Read bounds)
    normalize_inputs: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProcessorConfig":
        """Create config from a dictionary, validating value types."""
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a mapping, got {type(data).__name__}")

        defaults = cls()
        try:
            max_result_length = int(data.get("max_result_length", defaults.max_result_length))
            default_window = int(
                data.get("default_context_window", defaults.default_context_window)
            )
            context_windows = {
                str(k): int(v) for k, v in (data.get("context_windows") or {}).items()
            }
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigError(f"Invalid configuration value: {e}") from e

        if max_result_length <= 0:
            raise ConfigError("max_result_length must be positive")
        if default_window <= 0 or any(v <= 0 for v in context_windows.values()):
            raise ConfigError("context window sizes must be positive")

        def tool_set(key: str, default: FrozenSet[str]) -> FrozenSet[str]:
            value = data.get(key)
            if value is None:
                return default
            if not isinstance(value, (list, tuple, set, frozenset)):
                raise ConfigError(f"{key} must be a list of tool names")
            return frozenset(str(v) for v in value)

        return cls(
            max_result_length=max_result_length,
            mcp_prefix=str(data.get("mcp_prefix", defaults.mcp_prefix)),
            always_hidden_tools=tool_set("always_hidden_tools", defaults.always_hidden_tools),
            quiet_tools=tool_set("quiet_tools", defaults.quiet_tools),
            context_windows=context_windows,
            default_context_window=default_window,
            normalize_inputs=bool(data.get("normalize_inputs", defaults.normalize_inputs)),
        )

    @classmethod
    def from_yaml(cls, path: Path) -> "ProcessorConfig":
        """Load configuration from a YAML file.

        A missing file yields the defaults; an empty file too.

        Raises:
            ConfigError: If the file cannot be read or parsed.
        """
        path = Path(path)
        if not path.exists():
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e

        if data is None:
            return cls()
        return cls.from_dict(data)

    @classmethod
    def from_env(cls) -> "ProcessorConfig":
        """Create config from environment variables."""
        config_path = os.environ.get("CHATSTREAM_CONFIG")
        config = cls.from_yaml(Path(config_path)) if config_path else cls()

        max_length = os.environ.get("CHATSTREAM_MAX_RESULT_LENGTH")
        default_window = os.environ.get("CHATSTREAM_DEFAULT_CONTEXT_WINDOW")
        try:
            if max_length:
                config.max_result_length = int(max_length)
            if default_window:
                config.default_context_window = int(default_window)
        except ValueError as e:
            raise ConfigError(f"Invalid environment value: {e}") from e

        if config.max_result_length <= 0:
            raise ConfigError("CHATSTREAM_MAX_RESULT_LENGTH must be positive")
        if config.default_context_window <= 0:
            raise ConfigError("CHATSTREAM_DEFAULT_CONTEXT_WINDOW must be positive")

        return config

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_result_length": self.max_result_length,
            "mcp_prefix": self.mcp_prefix,
            "always_hidden_tools": sorted(self.always_hidden_tools),
            "quiet_tools": sorted(self.quiet_tools),
            "context_windows": dict(self.context_windows),
            "default_context_window": self.default_context_window,
            "normalize_inputs": self.normalize_inputs,
        }


def load_config(path: Optional[Path] = None) -> ProcessorConfig:
    """Load from ``path`` when given, else from the environment."""
    if path is not None:
        return ProcessorConfig.from_yaml(path)
    return ProcessorConfig.from_env()
