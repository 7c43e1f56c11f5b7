"""Context and token accounting for chatstream.

This module provides:
- Model-aware context window sizes with prefix lookup
- Bottleneck detection across the models used in a turn
- The per-session token and cost accumulator
"""

from .accounting import SessionAccumulator, SessionTotals, TokenUpdate
from .constants import DEFAULT_CONTEXT_WINDOW, MODEL_CONTEXT_WINDOWS
from .models import ContextStats, ModelUsage, TokenUsage
from .service import ContextService

__all__ = [
    "ContextService",
    "ContextStats",
    "ModelUsage",
    "TokenUsage",
    "SessionAccumulator",
    "SessionTotals",
    "TokenUpdate",
    "MODEL_CONTEXT_WINDOWS",
    "DEFAULT_CONTEXT_WINDOW",
]
