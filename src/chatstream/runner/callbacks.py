"""Callback contract between the stream processor and its host."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..context.accounting import TokenUpdate
from ..operations.models import Operation
from .output import FinalResult, ToolResult

DisplayMessage = Dict[str, Any]
StoredEntry = Dict[str, Any]


@dataclass
class MessageCallbacks:
    """Hooks the processor calls while handling a stream.

    The processor never calls back into itself through these. The last two
    hooks are optional capabilities; leave them as None when the host has
    no use for them.
    """

    on_system_message: Callable[[str], None]
    on_assistant_message: Callable[[str], None]
    on_tool_status: Callable[[str, str], None]
    on_tool_result: Callable[[ToolResult], None]
    on_token_update: Callable[[TokenUpdate], None]
    on_final_result: Callable[[FinalResult], None]
    on_error: Callable[[str], None]
    send_to_display: Callable[[DisplayMessage], None]
    save_message: Callable[[StoredEntry], None]
    on_operation_tracked: Optional[Callable[[Operation], None]] = None
    on_plan_mode_change: Optional[Callable[[bool], None]] = None


def _ignore(*_args: Any) -> None:
    return None


def null_callbacks(**overrides: Any) -> MessageCallbacks:
    """Callbacks that drop everything, with selected hooks overridden."""
    hooks: Dict[str, Any] = {
        "on_system_message": _ignore,
        "on_assistant_message": _ignore,
        "on_tool_status": _ignore,
        "on_tool_result": _ignore,
        "on_token_update": _ignore,
        "on_final_result": _ignore,
        "on_error": _ignore,
        "send_to_display": _ignore,
        "save_message": _ignore,
    }
    hooks.update(overrides)
    return MessageCallbacks(**hooks)
