"""Decoding of stream-json lines into typed events.

Every line decodes to exactly one of the event classes below or to a
DecodeFailure; callers branch on the class rather than on raw dict keys.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class MessageEvent:
    """An event carrying a ``message`` object."""

    message: Dict[str, Any]
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def role(self) -> Optional[str]:
        role = self.message.get("role")
        return role if isinstance(role, str) else None

    @property
    def usage(self) -> Optional[Dict[str, Any]]:
        usage = self.message.get("usage")
        return usage if isinstance(usage, dict) else None

    @property
    def content_blocks(self) -> List[Dict[str, Any]]:
        """Content blocks that are objects; string content yields none."""
        content = self.message.get("content")
        if not isinstance(content, list):
            return []
        return [block for block in content if isinstance(block, dict)]


@dataclass
class AssistantEvent(MessageEvent):
    @property
    def message_id(self) -> Optional[str]:
        message_id = self.message.get("id")
        return message_id if isinstance(message_id, str) and message_id else None


@dataclass
class UserEvent(MessageEvent):
    pass


@dataclass
class SystemEvent(MessageEvent):
    pass


@dataclass
class ResultEvent:
    """Run summary that closes a turn."""

    session_id: Optional[str] = None
    total_cost_usd: Optional[float] = None
    duration_ms: Optional[int] = None
    num_turns: Optional[int] = None
    usage: Optional[Dict[str, Any]] = None
    model_usage: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    subtype: Optional[str] = None
    result: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ErrorEvent:
    """Any other event exposing a top-level error."""

    error: str
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class UnrecognizedEvent:
    """Valid structured data this processor has no handling for."""

    type: Optional[str]
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DecodeFailure:
    """A line that is not a structured event."""

    line: str
    reason: str


Event = Union[AssistantEvent, UserEvent, SystemEvent, ResultEvent, ErrorEvent, UnrecognizedEvent]

_MESSAGE_EVENTS = {
    "assistant": AssistantEvent,
    "user": UserEvent,
    "system": SystemEvent,
}


def _error_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, dict) and isinstance(value.get("message"), str):
        return value["message"]
    return None


def _number(value: Any) -> Optional[Any]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return None


def decode_event(data: Dict[str, Any]) -> Event:
    """Classify an already-parsed event object."""
    event_type = data.get("type")

    message = data.get("message")
    if event_type in _MESSAGE_EVENTS and isinstance(message, dict):
        return _MESSAGE_EVENTS[event_type](message=message, raw=data)

    if event_type == "result":
        usage = data.get("usage")
        model_usage = data.get("modelUsage", data.get("model_usage"))
        session_id = data.get("session_id")
        result = data.get("result")
        return ResultEvent(
            session_id=session_id if isinstance(session_id, str) else None,
            total_cost_usd=_number(data.get("total_cost_usd")),
            duration_ms=_number(data.get("duration_ms")),
            num_turns=_number(data.get("num_turns")),
            usage=usage if isinstance(usage, dict) else None,
            model_usage=model_usage if isinstance(model_usage, dict) else None,
            error=_error_text(data.get("error")),
            subtype=data.get("subtype") if isinstance(data.get("subtype"), str) else None,
            result=result if isinstance(result, str) else None,
            raw=data,
        )

    error = _error_text(data.get("error"))
    if error is not None:
        return ErrorEvent(error=error, raw=data)

    # Session init events carry no message but still announce the connection
    if event_type == "system":
        return SystemEvent(message={}, raw=data)

    return UnrecognizedEvent(type=event_type if isinstance(event_type, str) else None, raw=data)


def decode_line(line: str) -> Union[Event, DecodeFailure]:
    """Decode one line of assistant output."""
    text = line.rstrip("\r\n")
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        return DecodeFailure(line=text, reason=str(e))

    if not isinstance(data, dict):
        return DecodeFailure(line=text, reason=f"expected an object, got {type(data).__name__}")

    return decode_event(data)
