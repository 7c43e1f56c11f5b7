"""Callback payloads and the replay transcript."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..context.accounting import TokenUpdate
from ..context.models import ContextStats
from ..context.service import ContextService
from ..operations.models import Operation

if TYPE_CHECKING:
    from .callbacks import MessageCallbacks


@dataclass
class ToolResult:
    """A normalized tool result ready for display."""

    content: str
    is_error: bool = False
    tool_use_id: Optional[str] = None
    tool_name: Optional[str] = None
    hidden: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "is_error": self.is_error,
            "tool_use_id": self.tool_use_id,
            "tool_name": self.tool_name,
            "hidden": self.hidden,
        }


@dataclass
class FinalResult:
    """Summary of a finished turn."""

    session_id: Optional[str] = None
    total_cost: Optional[float] = None
    duration_ms: Optional[int] = None
    num_turns: Optional[int] = None
    context: Optional[ContextStats] = None  # Bottleneck model for the turn
    current_tokens_input: int = 0
    current_tokens_output: int = 0

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "session_id": self.session_id,
            "total_cost": self.total_cost,
            "duration_ms": self.duration_ms,
            "num_turns": self.num_turns,
            "current_tokens_input": self.current_tokens_input,
            "current_tokens_output": self.current_tokens_output,
        }
        if self.context is not None:
            d["context"] = self.context.to_dict()
        return d


@dataclass
class ReplayOutput:
    """Everything a stream processor reported while replaying a log."""

    schema: str = "chatstream.replay.v1"
    started_at: str = ""
    ended_at: str = ""

    text: List[str] = field(default_factory=list)
    tool_statuses: List[Dict[str, str]] = field(default_factory=list)
    tool_results: List[ToolResult] = field(default_factory=list)
    operations: List[Operation] = field(default_factory=list)
    final_results: List[FinalResult] = field(default_factory=list)
    entries: List[Dict[str, Any]] = field(default_factory=list)
    display: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    plan_mode: Optional[bool] = None

    # Latest token figures
    last_token_update: Optional[TokenUpdate] = None

    def callbacks(self) -> "MessageCallbacks":
        """Build callbacks that record into this transcript."""
        from .callbacks import MessageCallbacks

        return MessageCallbacks(
            on_system_message=self.text.append,
            on_assistant_message=self.text.append,
            on_tool_status=self._on_tool_status,
            on_tool_result=self.tool_results.append,
            on_token_update=self._on_token_update,
            on_final_result=self.final_results.append,
            on_error=self.errors.append,
            send_to_display=self._on_display,
            save_message=self.entries.append,
            on_operation_tracked=self.operations.append,
            on_plan_mode_change=self._on_plan_mode_change,
        )

    def _on_tool_status(self, tool_name: str, details: str) -> None:
        self.tool_statuses.append({"tool_name": tool_name, "details": details})

    def _on_token_update(self, update: TokenUpdate) -> None:
        self.last_token_update = update

    def _on_display(self, message: Dict[str, Any]) -> None:
        self.display.append(message)
        if message.get("type") == "text" and isinstance(message.get("data"), str):
            self.text.append(message["data"])

    def _on_plan_mode_change(self, in_plan_mode: bool) -> None:
        self.plan_mode = in_plan_mode

    def finalize(self) -> None:
        self.ended_at = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        stats: Dict[str, Any] = {
            "text_count": len(self.text),
            "tool_call_count": len(self.tool_statuses),
            "operation_count": len(self.operations),
            "turn_count": len(self.final_results),
            "error_count": len(self.errors),
        }
        if self.last_token_update is not None:
            stats["tokens"] = {
                "input": self.last_token_update.total_tokens_input,
                "output": self.last_token_update.total_tokens_output,
            }
        costs = [r.total_cost for r in self.final_results if r.total_cost is not None]
        if costs:
            stats["cost_usd"] = sum(costs)
        return {
            "schema": self.schema,
            "started_at": self.started_at,
            "ended_at": self.ended_at,
            "text": list(self.text),
            "tool_statuses": list(self.tool_statuses),
            "tool_results": [r.to_dict() for r in self.tool_results],
            "operations": [o.to_dict() for o in self.operations],
            "final_results": [r.to_dict() for r in self.final_results],
            "errors": list(self.errors),
            "plan_mode": self.plan_mode,
            "stats": stats,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: Path) -> None:
        """Save to a JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json())

    def to_text(self, show_hidden: bool = False) -> str:
        """Plain text rendering of the replay."""
        lines: List[str] = list(self.text)

        for status in self.tool_statuses:
            details = f" • {status['details']}" if status["details"] else ""
            lines.append(f"[TOOL] {status['tool_name']}{details}")

        for result in self.tool_results:
            if result.hidden and not show_hidden:
                continue
            label = "TOOL ERROR" if result.is_error else "TOOL RESULT"
            lines.append(f"[{label}] {result.tool_name or 'unknown'}: {result.content[:500]}")

        for operation in self.operations:
            lines.append(f"[OPERATION] {operation.description}")

        for error in self.errors:
            lines.append(f"[ERROR] {error}")

        if self.final_results:
            lines.append("")
            lines.append("--- Usage Summary ---")
            if self.last_token_update is not None:
                total_in = self.last_token_update.total_tokens_input
                total_out = self.last_token_update.total_tokens_output
                lines.append(
                    f"Tokens: {total_in:,} in / {total_out:,} out ({total_in + total_out:,} total)"
                )
            last = self.final_results[-1]
            if last.context is not None:
                lines.append(ContextService().format_summary(last.context))
            cost = self.to_dict()["stats"].get("cost_usd")
            if cost is not None:
                lines.append(f"Cost: ${cost:.4f}")

        return "\n".join(lines)


def create_output() -> ReplayOutput:
    """Create a new replay transcript."""
    output = ReplayOutput()
    output.started_at = datetime.now(timezone.utc).isoformat()
    return output
