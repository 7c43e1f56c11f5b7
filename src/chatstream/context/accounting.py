"""Running token and cost totals for one conversation session."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .models import TokenUsage


@dataclass
class TokenUpdate:
    """Token figures reported after each message that carries usage."""

    total_tokens_input: int
    total_tokens_output: int
    current_input_tokens: int
    current_output_tokens: int
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_tokens_input": self.total_tokens_input,
            "total_tokens_output": self.total_tokens_output,
            "current_input_tokens": self.current_input_tokens,
            "current_output_tokens": self.current_output_tokens,
            "cache_creation_tokens": self.cache_creation_tokens,
            "cache_read_tokens": self.cache_read_tokens,
        }


@dataclass
class SessionTotals:
    """Snapshot of the session accumulator."""

    total_cost: float
    total_tokens_input: int
    total_tokens_output: int
    request_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_cost": self.total_cost,
            "total_tokens_input": self.total_tokens_input,
            "total_tokens_output": self.total_tokens_output,
            "request_count": self.request_count,
        }


@dataclass
class SessionAccumulator:
    """Running totals for a session plus the counters of the current turn.

    Cache creation and cache read tokens are reported for display but never
    added to the input/output totals.
    """

    total_tokens_input: int = 0
    total_tokens_output: int = 0
    total_cost: float = 0.0
    request_count: int = 0
    current_tokens_input: int = 0
    current_tokens_output: int = 0

    def add_usage(self, usage: Optional[Dict[str, Any]]) -> TokenUpdate:
        """Add a message's usage to the session and turn totals."""
        tokens = TokenUsage.from_dict(usage)

        self.total_tokens_input += tokens.input_tokens
        self.total_tokens_output += tokens.output_tokens
        self.current_tokens_input += tokens.input_tokens
        self.current_tokens_output += tokens.output_tokens

        return TokenUpdate(
            total_tokens_input=self.total_tokens_input,
            total_tokens_output=self.total_tokens_output,
            current_input_tokens=tokens.input_tokens,
            current_output_tokens=tokens.output_tokens,
            cache_creation_tokens=tokens.cache_creation_tokens,
            cache_read_tokens=tokens.cache_read_tokens,
        )

    def finish_turn(self, cost: Any = None) -> tuple[int, int]:
        """Close the current turn.

        Returns:
            The turn's (input, output) token counts, which are then zeroed.
        """
        self.request_count += 1
        if isinstance(cost, (int, float)) and not isinstance(cost, bool) and cost > 0:
            self.total_cost += cost

        turn = (self.current_tokens_input, self.current_tokens_output)
        self.current_tokens_input = 0
        self.current_tokens_output = 0
        return turn

    def totals(self) -> SessionTotals:
        return SessionTotals(
            total_cost=self.total_cost,
            total_tokens_input=self.total_tokens_input,
            total_tokens_output=self.total_tokens_output,
            request_count=self.request_count,
        )

    def reset(self) -> None:
        """Reset all counters for a new conversation."""
        self.total_tokens_input = 0
        self.total_tokens_output = 0
        self.total_cost = 0.0
        self.request_count = 0
        self.current_tokens_input = 0
        self.current_tokens_output = 0
