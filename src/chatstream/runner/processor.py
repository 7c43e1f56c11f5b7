"""Stream processor: turns assistant stream-json lines into callbacks.

One processor handles one conversation session. Lines are processed
synchronously, one at a time; all state (token totals and the single pending
tool invocation) belongs to the processor instance.
"""

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..context.accounting import SessionAccumulator, SessionTotals
from ..context.service import ContextService
from ..operations.extractor import extract_operation, extract_operation_from_result
from ..operations.models import ExtractedOperation, Operation
from ..operations.tracker import OperationStore
from .callbacks import MessageCallbacks
from .config import ProcessorConfig
from .events import (
    AssistantEvent,
    DecodeFailure,
    ErrorEvent,
    Event,
    MessageEvent,
    ResultEvent,
    SystemEvent,
    UnrecognizedEvent,
    UserEvent,
    decode_event,
    decode_line,
)
from .formatter import format_tool_result, should_hide_tool_result, truncate_result
from .output import FinalResult, ToolResult
from .tools import PLAN_MODE_TOOLS, get_tool_details, get_tool_status_text, normalize_tool_input

AUTH_REQUIRED_MESSAGE = 'Authentication required. Please run "claude login" in your terminal.'

# Invocation ids remembered for duplicate suppression, newest kept
TRACKED_ID_HISTORY = 1000

_ROLE_BY_EVENT = {
    AssistantEvent: "assistant",
    UserEvent: "user",
    SystemEvent: "system",
}


@dataclass
class PendingToolUse:
    """The most recent tool invocation, awaiting its result."""

    id: Optional[str]
    name: Optional[str]
    input: Any
    tracked: bool = False


class StreamProcessor:
    """Processes one session's event stream.

    Example:
        processor = StreamProcessor(operation_store=OperationTracker())
        output = create_output()
        for line in lines:
            processor.process_line(line, output.callbacks())
    """

    def __init__(
        self,
        operation_store: Optional[OperationStore] = None,
        config: Optional[ProcessorConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the processor.

        Args:
            operation_store: Receives every extracted operation. Without one,
                operations are classified but not reported.
            config: Processor configuration; defaults when omitted.
            logger: Logger for this session; the module logger by default.
        """
        self.config = config or ProcessorConfig()
        self._store = operation_store
        self._log = logger if logger is not None else logging.getLogger(__name__)
        self._context = ContextService(
            context_windows=self.config.context_windows,
            default_context_window=self.config.default_context_window,
        )
        self._accumulator = SessionAccumulator()
        self._is_first_system_message = True
        self._pending: Optional[PendingToolUse] = None
        self._current_message_id: Optional[str] = None
        self._tracked_tool_ids: "OrderedDict[str, None]" = OrderedDict()

    @property
    def pending_tool_use(self) -> Optional[PendingToolUse]:
        return self._pending

    @property
    def current_message_id(self) -> Optional[str]:
        return self._current_message_id

    def reset(self) -> None:
        """Reset state for a new conversation."""
        self._accumulator.reset()
        self._is_first_system_message = True
        self._pending = None
        self._current_message_id = None
        self._tracked_tool_ids.clear()

    def get_totals(self) -> SessionTotals:
        """Get the running session totals."""
        return self._accumulator.totals()

    def process_line(self, line: str, callbacks: MessageCallbacks) -> None:
        """Process one line of the assistant's output stream.

        Lines that are not structured events are forwarded to the display as
        plain text. This method does not raise.
        """
        try:
            event = decode_line(line)
            if isinstance(event, DecodeFailure):
                self._log.debug("Non-JSON line (%s): %.200s", event.reason, event.line)
                callbacks.send_to_display({"type": "text", "data": event.line})
                return
            self._dispatch(event, callbacks)
        except Exception as e:
            self._report_failure(e, callbacks)

    def process_event(self, data: Dict[str, Any], callbacks: MessageCallbacks) -> None:
        """Process an event that has already been parsed. Does not raise."""
        try:
            self._dispatch(decode_event(data), callbacks)
        except Exception as e:
            self._report_failure(e, callbacks)

    def _report_failure(self, error: Exception, callbacks: MessageCallbacks) -> None:
        self._log.exception("Failed to process event")
        try:
            callbacks.on_error(f"Message processing error: {error}")
        except Exception:
            self._log.exception("Error callback failed")

    def _dispatch(self, event: Event, callbacks: MessageCallbacks) -> None:
        self._log.debug("Received %s", type(event).__name__)

        if isinstance(event, MessageEvent):
            self._process_message(event, callbacks)
        elif isinstance(event, ResultEvent):
            self._process_result(event, callbacks)
        elif isinstance(event, ErrorEvent):
            self._process_error(event.error, callbacks)
        elif isinstance(event, UnrecognizedEvent):
            self._log.debug("Ignoring event of type %r", event.type)

    # Message handling

    def _process_message(self, event: MessageEvent, callbacks: MessageCallbacks) -> None:
        if event.usage is not None:
            callbacks.on_token_update(self._accumulator.add_usage(event.usage))

        role = event.role
        if role not in ("system", "assistant", "user"):
            role = _ROLE_BY_EVENT.get(type(event))

        if role == "system":
            self._process_system_message(event, callbacks)
        elif role == "assistant":
            self._process_assistant_message(event, callbacks)
        elif role == "user":
            self._process_user_message(event, callbacks)

    def _process_system_message(self, event: MessageEvent, callbacks: MessageCallbacks) -> None:
        if self._is_first_system_message:
            self._is_first_system_message = False
            callbacks.send_to_display({"type": "connected"})

        for block in event.content_blocks:
            text = block.get("text")
            if block.get("type") == "text" and isinstance(text, str) and text:
                callbacks.on_system_message(text)
                callbacks.save_message({"type": "system", "data": text})

    def _process_assistant_message(self, event: MessageEvent, callbacks: MessageCallbacks) -> None:
        blocks = event.content_blocks
        if not blocks:
            return

        message_id = event.message_id if isinstance(event, AssistantEvent) else None
        self._current_message_id = message_id or f"msg_{int(time.time() * 1000)}"

        for block in blocks:
            block_type = block.get("type")
            if block_type == "text":
                text = block.get("text")
                if isinstance(text, str) and text:
                    callbacks.on_assistant_message(text)
            elif block_type == "thinking":
                thinking = block.get("thinking") or block.get("text")
                if isinstance(thinking, str) and thinking:
                    callbacks.save_message({"type": "thinking", "data": thinking})
            elif block_type == "tool_use":
                self._process_tool_use(block, callbacks)

    def _process_user_message(self, event: MessageEvent, callbacks: MessageCallbacks) -> None:
        for block in event.content_blocks:
            if block.get("type") == "tool_result":
                self._process_tool_result(block, callbacks)

    # Tool calls

    def _process_tool_use(self, block: Dict[str, Any], callbacks: MessageCallbacks) -> None:
        tool_id = block.get("id") if isinstance(block.get("id"), str) else None
        name = block.get("name") if isinstance(block.get("name"), str) else None
        raw_input = block.get("input") if isinstance(block.get("input"), dict) else {}

        tool_input = raw_input
        if self.config.normalize_inputs:
            tool_input = normalize_tool_input(name, raw_input)

        self._pending = PendingToolUse(id=tool_id, name=name, input=tool_input)

        if name in PLAN_MODE_TOOLS:
            self._log.debug("Plan mode change requested by %s", name)
            if callbacks.on_plan_mode_change is not None:
                callbacks.on_plan_mode_change(PLAN_MODE_TOOLS[name])

        extracted = extract_operation(name, tool_input)
        if extracted is not None:
            self._track(extracted, tool_id, callbacks)
            self._pending.tracked = True

        callbacks.save_message({
            "type": "toolUse",
            "data": {
                "tool_name": name,
                "tool_info": f"🔧 Executing: {name}",
                "status": get_tool_status_text(name),
                "raw_input": tool_input,
                "tool_use_id": tool_id,
            },
        })
        callbacks.on_tool_status(name or "unknown", get_tool_details(name, tool_input))

    def _process_tool_result(self, block: Dict[str, Any], callbacks: MessageCallbacks) -> None:
        is_error = block.get("is_error") is True
        pending = self._pending
        tool_name = pending.name if pending else None
        tool_use_id = block.get("tool_use_id")
        if not isinstance(tool_use_id, str) or not tool_use_id:
            tool_use_id = pending.id if pending else None
        content = block.get("content")

        # Servers that did not describe the call up front still confirm it here
        if pending is not None and not pending.tracked and not is_error and tool_name:
            extracted = extract_operation_from_result(tool_name, content)
            if extracted is not None:
                self._track(extracted, tool_use_id, callbacks)
        if pending is not None:
            pending.tracked = False

        text = format_tool_result(
            content,
            tool_name,
            pending.input if pending else None,
            mcp_prefix=self.config.mcp_prefix,
        )
        text = truncate_result(text, self.config.max_result_length)
        hidden = should_hide_tool_result(
            tool_name,
            is_error,
            always_hidden=self.config.always_hidden_tools,
            quiet=self.config.quiet_tools,
        )

        result = ToolResult(
            content=text,
            is_error=is_error,
            tool_use_id=tool_use_id,
            tool_name=tool_name,
            hidden=hidden,
        )
        callbacks.on_tool_result(result)
        callbacks.save_message({"type": "toolResult", "data": result.to_dict()})

    def _track(
        self,
        extracted: ExtractedOperation,
        tool_use_id: Optional[str],
        callbacks: MessageCallbacks,
    ) -> Optional[Operation]:
        """Hand an extracted operation to the store, at most once per invocation."""
        if tool_use_id and tool_use_id in self._tracked_tool_ids:
            self._log.debug("Operation for %s already tracked", tool_use_id)
            return None
        if self._store is None:
            self._log.debug("No operation store; dropping %s", extracted.type.value)
            return None

        operation = self._store.track_operation(
            extracted.type,
            extracted.data,
            self._current_message_id,
            tool_use_id,
        )
        if tool_use_id:
            self._tracked_tool_ids[tool_use_id] = None
            while len(self._tracked_tool_ids) > TRACKED_ID_HISTORY:
                self._tracked_tool_ids.popitem(last=False)
        self._log.debug("Tracked %s operation %s", extracted.type.value, operation.id)

        if callbacks.on_operation_tracked is not None:
            callbacks.on_operation_tracked(operation)
        return operation

    # Turn summaries and errors

    def _process_result(self, event: ResultEvent, callbacks: MessageCallbacks) -> None:
        if event.error:
            if "login" in event.error:
                callbacks.on_error(AUTH_REQUIRED_MESSAGE)
                return
            self._process_error(event.error, callbacks)

        turn_input, turn_output = self._accumulator.finish_turn(event.total_cost_usd)
        context = self._context.find_bottleneck(event.model_usage, event.usage)
        if context is not None:
            self._log.debug("Context bottleneck: %s", self._context.format_summary(context))

        callbacks.on_final_result(FinalResult(
            session_id=event.session_id,
            total_cost=event.total_cost_usd,
            duration_ms=event.duration_ms,
            num_turns=event.num_turns,
            context=context,
            current_tokens_input=turn_input,
            current_tokens_output=turn_output,
        ))

        totals = self._accumulator.totals()
        callbacks.send_to_display({
            "type": "updateTotals",
            "data": {
                **totals.to_dict(),
                "current_cost": event.total_cost_usd,
                "current_duration": event.duration_ms,
                "current_turns": event.num_turns,
                "current_tokens_input": turn_input,
                "current_tokens_output": turn_output,
            },
        })

    def _process_error(self, error: str, callbacks: MessageCallbacks) -> None:
        if "login" in error:
            callbacks.on_error(AUTH_REQUIRED_MESSAGE)
            return
        message = error or "Unknown error occurred"
        self._log.warning("Assistant reported an error: %s", message)
        callbacks.on_error(message)
        callbacks.save_message({"type": "error", "data": message})
