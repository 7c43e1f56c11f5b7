"""Normalization of tool result payloads for display."""

import json
import logging
from typing import Any, Iterable, List, Optional

logger = logging.getLogger(__name__)

MAX_RESULT_LENGTH = 50_000
TRUNCATION_MARKER = "\n\n[... truncated due to length ...]"

ALWAYS_HIDDEN_TOOLS = frozenset({"AskUserQuestion", "ExitPlanMode"})
QUIET_TOOLS = frozenset({"Read", "Edit", "TodoWrite", "MultiEdit"})


def _dump(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)


def format_thought(thought: dict, index: int) -> str:
    """Render a thought record as a status line followed by its body.

    Example:
        🧠 Step 2/5 • continue
        Consider the edge cases first.
    """
    number = thought.get("thoughtNumber")
    step = f"{number}/{thought.get('totalThoughts') or '?'}" if number else str(index)

    if thought.get("nextThoughtNeeded") is False:
        status = "complete"
    elif thought.get("isRevision"):
        status = f"revising step {thought.get('revisesThought')}"
    else:
        status = "continue"

    return f"🧠 Step {step} • {status}\n{thought['thought']}"


def _format_thinking_text(text: str, index: int, tool_input: Any) -> Optional[List[str]]:
    """Format a text item of a thinking tool; None if it is not a thought."""
    try:
        data = json.loads(text)
    except ValueError:
        logger.debug("Thinking result is not JSON, showing raw text")
        return None
    if not isinstance(data, dict):
        return None

    if data.get("thought"):
        return [format_thought(data, index)]

    number, total = data.get("thoughtNumber"), data.get("totalThoughts")
    if number and total:
        mark = "✅" if data.get("nextThoughtNeeded") is False else "⏳"
        parts = [f"🧠 Thinking Step {number}/{total} {mark}"]
        if isinstance(tool_input, dict) and tool_input.get("thought"):
            parts.append(f"Current thought: {tool_input['thought']}")
        return parts

    return [_dump(data)]


def format_mcp_tool_result(content: Any, tool_name: str, tool_input: Any = None) -> str:
    """Format the content items of an MCP tool result.

    Thinking-style tools have their JSON thought records rendered compactly;
    other tools contribute their text items. Non-list payloads are dumped
    as JSON.
    """
    if not isinstance(content, list):
        return _dump(content)

    is_thinking = "thinking" in tool_name
    parts: List[str] = []
    thought_count = 0

    for item in content:
        if not isinstance(item, dict):
            continue

        text = item.get("text")
        if item.get("type") == "text" and isinstance(text, str) and text:
            if not is_thinking:
                parts.append(text)
                continue
            thought_count += 1
            formatted = _format_thinking_text(text, thought_count, tool_input)
            parts.extend(formatted if formatted is not None else [text])
        elif isinstance(text, str) and text:
            parts.append(text)
        elif is_thinking and item.get("thought"):
            thought_count += 1
            parts.append(format_thought(item, thought_count))

    return "\n".join(parts)


def format_tool_result(
    content: Any,
    tool_name: Optional[str] = None,
    tool_input: Any = None,
    mcp_prefix: str = "mcp__",
) -> str:
    """Convert a tool result payload into display text."""
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if tool_name and tool_name.startswith(mcp_prefix):
        return format_mcp_tool_result(content, tool_name, tool_input)
    return _dump(content)


def truncate_result(text: str, limit: int = MAX_RESULT_LENGTH) -> str:
    """Cut text to ``limit`` characters, appending a truncation marker."""
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def should_hide_tool_result(
    tool_name: Optional[str],
    is_error: bool,
    always_hidden: Iterable[str] = ALWAYS_HIDDEN_TOOLS,
    quiet: Iterable[str] = QUIET_TOOLS,
) -> bool:
    """Decide whether a tool result is hidden from display.

    Control-flow tools are hidden even on error; errors from any other tool
    are shown; successful results of quiet tools are hidden.
    """
    if tool_name and tool_name in always_hidden:
        return True
    if is_error:
        return False
    return bool(tool_name) and tool_name in quiet
