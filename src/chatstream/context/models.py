"""Data models for token and context tracking."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


def _count(value: Any) -> int:
    """Coerce a token count from loosely typed event data."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return max(0, int(value))
    return 0


@dataclass
class TokenUsage:
    """Token usage carried by a message or a run summary."""

    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0

    @classmethod
    def from_dict(cls, usage: Optional[Dict[str, Any]]) -> "TokenUsage":
        """Build from a stream ``usage`` object, tolerating missing fields."""
        if not isinstance(usage, dict):
            return cls()
        return cls(
            input_tokens=_count(usage.get("input_tokens")),
            output_tokens=_count(usage.get("output_tokens")),
            cache_creation_tokens=_count(usage.get("cache_creation_input_tokens")),
            cache_read_tokens=_count(usage.get("cache_read_input_tokens")),
        )

    @property
    def total_input(self) -> int:
        """Total input tokens including cache."""
        return self.input_tokens + self.cache_creation_tokens + self.cache_read_tokens

    @property
    def total(self) -> int:
        """Total tokens (input + output)."""
        return self.total_input + self.output_tokens


@dataclass
class ModelUsage:
    """Per-model usage from a run summary's ``modelUsage`` breakdown."""

    model: str
    input_tokens: int = 0
    cache_read_input_tokens: int = 0
    cache_creation_input_tokens: int = 0

    @classmethod
    def from_dict(cls, model: str, data: Any) -> "ModelUsage":
        """Build from a breakdown entry (camelCase or snake_case keys)."""
        if not isinstance(data, dict):
            return cls(model=model)

        def pick(camel: str, snake: str) -> int:
            return _count(data.get(camel, data.get(snake)))

        return cls(
            model=model,
            input_tokens=pick("inputTokens", "input_tokens"),
            cache_read_input_tokens=pick("cacheReadInputTokens", "cache_read_input_tokens"),
            cache_creation_input_tokens=pick(
                "cacheCreationInputTokens", "cache_creation_input_tokens"
            ),
        )

    @property
    def context_tokens(self) -> int:
        """Tokens occupying the model's context window."""
        return (
            self.input_tokens
            + self.cache_read_input_tokens
            + self.cache_creation_input_tokens
        )


@dataclass
class ContextStats:
    """Context window usage of the bottleneck model for a turn."""

    model: Optional[str]
    context_tokens: int
    context_window_size: int
    percentage: float  # Unbounded, rounded to one decimal
    is_near_limit: bool  # True if >= 80%
    is_over_limit: bool  # True if > 100%

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "model": self.model,
            "context_tokens": self.context_tokens,
            "context_window_size": self.context_window_size,
            "percentage": self.percentage,
            "is_near_limit": self.is_near_limit,
            "is_over_limit": self.is_over_limit,
        }
