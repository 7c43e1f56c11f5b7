"""Stream processing for chatstream.

Decodes the assistant's stream-json output, correlates tool calls with
their results, and reports display text, token figures and operations
through MessageCallbacks.
"""

from .callbacks import MessageCallbacks, null_callbacks
from .config import ConfigError, ProcessorConfig, load_config
from .output import FinalResult, ReplayOutput, ToolResult, create_output
from .processor import AUTH_REQUIRED_MESSAGE, PendingToolUse, StreamProcessor

__all__ = [
    "AUTH_REQUIRED_MESSAGE",
    "ConfigError",
    "FinalResult",
    "MessageCallbacks",
    "PendingToolUse",
    "ProcessorConfig",
    "ReplayOutput",
    "StreamProcessor",
    "ToolResult",
    "create_output",
    "load_config",
    "null_callbacks",
]
