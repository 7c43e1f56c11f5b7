"""Context window sizes for known models."""

# Context window sizes by model identifier or identifier prefix.
# Lookup tries an exact match first, then the longest matching prefix.
MODEL_CONTEXT_WINDOWS: dict[str, int] = {
    # Claude 4 family (current)
    "claude-opus-4-1-20250805": 200_000,
    "claude-sonnet-4-5-20250929": 200_000,
    "claude-haiku-4-5-20251001": 200_000,
    "claude-sonnet-4-20250514": 200_000,
    "claude-opus-4-20250514": 200_000,
    # Claude 3.x family
    "claude-3-7-sonnet-20250219": 200_000,
    "claude-3-5-sonnet-20241022": 200_000,
    "claude-3-5-haiku-20241022": 200_000,
    "claude-3-opus-20240229": 200_000,
    "claude-3-haiku-20240307": 200_000,
    # Legacy models with smaller windows
    "claude-2.0": 100_000,
    "claude-instant": 100_000,
    # Family prefixes for versioned ids
    "claude-opus-4": 200_000,
    "claude-sonnet-4": 200_000,
    "claude-haiku-4": 200_000,
    "claude-3": 200_000,
    "claude-2": 200_000,
    # Aliases for convenience
    "claude-sonnet": 200_000,
    "claude-opus": 200_000,
    "claude-haiku": 200_000,
    "sonnet": 200_000,
    "opus": 200_000,
    "haiku": 200_000,
}

DEFAULT_CONTEXT_WINDOW = 200_000  # Fallback for unknown models

NEAR_LIMIT_PERCENTAGE = 80.0
