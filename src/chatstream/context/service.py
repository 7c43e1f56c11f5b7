"""Context window tracking service."""

from typing import Any, Dict, Mapping, Optional

from .constants import DEFAULT_CONTEXT_WINDOW, MODEL_CONTEXT_WINDOWS, NEAR_LIMIT_PERCENTAGE
from .models import ContextStats, ModelUsage, TokenUsage


class ContextService:
    """Service for computing context window usage from run summaries.

    Resolves each model's context budget from the context limit table and
    reports the model that consumes the largest fraction of its window.

    Example:
        service = ContextService()

        stats = service.find_bottleneck(
            model_usage={"claude-sonnet-4-5": {"inputTokens": 150_000}},
        )
        stats.model       # "claude-sonnet-4-5"
        stats.percentage  # 75.0
    """

    def __init__(
        self,
        context_windows: Optional[Mapping[str, int]] = None,
        default_context_window: int = DEFAULT_CONTEXT_WINDOW,
    ):
        """Initialize context service.

        Args:
            context_windows: Extra or overriding entries for the limit table.
            default_context_window: Budget for models with no table entry.
        """
        self._windows: Dict[str, int] = dict(MODEL_CONTEXT_WINDOWS)
        if context_windows:
            self._windows.update(context_windows)
        self._default_window = default_context_window

    @property
    def default_context_window(self) -> int:
        """Budget used for unknown models."""
        return self._default_window

    def get_context_window(self, model: Optional[str]) -> int:
        """Get context window size for a model.

        Tries an exact match, then the longest known prefix, then the default.
        """
        if not model:
            return self._default_window

        if model in self._windows:
            return self._windows[model]

        model_lower = model.lower()
        best_key: Optional[str] = None
        for key in self._windows:
            if model_lower.startswith(key.lower()):
                if best_key is None or len(key) > len(best_key):
                    best_key = key
        if best_key is not None:
            return self._windows[best_key]

        return self._default_window

    def get_stats(self, model: Optional[str], context_tokens: int) -> ContextStats:
        """Get context statistics for one model."""
        window = self.get_context_window(model)
        raw_pct = self._percentage(context_tokens, window)
        return ContextStats(
            model=model,
            context_tokens=context_tokens,
            context_window_size=window,
            percentage=round(raw_pct, 1),
            is_near_limit=raw_pct >= NEAR_LIMIT_PERCENTAGE,
            is_over_limit=raw_pct > 100.0,
        )

    def find_bottleneck(
        self,
        model_usage: Optional[Mapping[str, Any]] = None,
        usage: Optional[Dict[str, Any]] = None,
    ) -> Optional[ContextStats]:
        """Find the model whose context window is fullest for a turn.

        Args:
            model_usage: The run summary's per-model breakdown.
            usage: The run summary's top-level usage, used against the
                default budget when no breakdown is present.

        Returns:
            ContextStats for the bottleneck model, or None if the turn
            reported no usage at all.
        """
        if isinstance(model_usage, Mapping) and model_usage:
            best: Optional[ContextStats] = None
            best_raw = -1.0
            for model, data in model_usage.items():
                entry = ModelUsage.from_dict(str(model), data)
                window = self.get_context_window(entry.model)
                raw_pct = self._percentage(entry.context_tokens, window)
                # Strictly greater keeps the first-seen model on ties
                if raw_pct > best_raw:
                    best_raw = raw_pct
                    best = self.get_stats(entry.model, entry.context_tokens)
            return best

        if isinstance(usage, dict):
            tokens = TokenUsage.from_dict(usage)
            window = self._default_window
            raw_pct = self._percentage(tokens.total_input, window)
            return ContextStats(
                model=None,
                context_tokens=tokens.total_input,
                context_window_size=window,
                percentage=round(raw_pct, 1),
                is_near_limit=raw_pct >= NEAR_LIMIT_PERCENTAGE,
                is_over_limit=raw_pct > 100.0,
            )

        return None

    def format_summary(self, stats: ContextStats) -> str:
        """Format context usage for text output.

        Returns:
            Formatted string like "Context: 45.2% of 200K (claude-sonnet-4-5)"
        """
        window_k = stats.context_window_size // 1000
        suffix = f" ({stats.model})" if stats.model else ""

        if stats.is_over_limit:
            return (
                f"Context: {stats.percentage:.1f}% of {window_k}K{suffix} "
                "(WARNING: tokens exceed window)"
            )

        return f"Context: {stats.percentage:.1f}% of {window_k}K{suffix}"

    @staticmethod
    def _percentage(tokens: int, window: int) -> float:
        if window <= 0:
            return 0.0
        return (tokens / window) * 100
