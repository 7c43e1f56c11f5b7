"""Classify tool invocations into operations.

Structured extraction reads the tool's input parameters. When a server did
not describe the invocation structurally, ``parse_operation_from_result``
recovers an equivalent input from the tool's confirmation text.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from .bash import analyze_bash_command
from .models import EditOperation, ExtractedOperation, OperationData, OperationType

logger = logging.getLogger(__name__)

_WRITE_RESULT = re.compile(r"File created successfully at:\s*(.+)")
_EDIT_RESULTS = (
    re.compile(r"File (?:updated|edited) successfully at:\s*(.+)"),
    re.compile(r"The file (.+?) has been updated\b"),
)


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _edits(raw: Any) -> List[EditOperation]:
    if not isinstance(raw, list):
        return []
    return [EditOperation.from_dict(e) for e in raw if isinstance(e, dict)]


def extract_operation(tool_name: Optional[str], tool_input: Any) -> Optional[ExtractedOperation]:
    """Classify a tool invocation from its input parameters.

    Args:
        tool_name: Name of the invoked tool (e.g. "Write", "Bash").
        tool_input: The invocation's raw parameters.

    Returns:
        The classified operation, or None when the tool has no file-system
        effect or its parameters are missing.
    """
    if not tool_name or not isinstance(tool_input, dict):
        return None

    if tool_name == "Write":
        file_path = _text(tool_input.get("file_path"))
        if not file_path:
            return None
        return ExtractedOperation(
            type=OperationType.FILE_CREATE,
            data=OperationData(file_path=file_path, content=_text(tool_input.get("content"))),
        )

    if tool_name == "Edit":
        file_path = _text(tool_input.get("file_path"))
        if not file_path:
            return None
        return ExtractedOperation(
            type=OperationType.FILE_EDIT,
            data=OperationData(
                file_path=file_path,
                old_string=_text(tool_input.get("old_string")),
                new_string=_text(tool_input.get("new_string")),
                replace_all=bool(tool_input.get("replace_all", False)),
            ),
        )

    if tool_name == "MultiEdit":
        file_path = _text(tool_input.get("file_path"))
        if not file_path:
            return None
        return ExtractedOperation(
            type=OperationType.MULTI_EDIT,
            data=OperationData(
                file_path=file_path,
                edits=_edits(tool_input.get("edits")),
                is_multi_edit=True,
            ),
        )

    if tool_name == "Bash":
        command = _text(tool_input.get("command"))
        if not command.strip():
            return None
        return analyze_bash_command(command) or ExtractedOperation(
            type=OperationType.BASH_COMMAND,
            data=OperationData(command=command),
        )

    return None


def result_text(content: Any) -> str:
    """Flatten tool result content into plain text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for item in content:
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, dict) and isinstance(item.get("text"), str):
                parts.append(item["text"])
        return "\n".join(parts)
    return ""


def parse_operation_from_result(tool_name: Optional[str], content: Any) -> Optional[Dict[str, Any]]:
    """Recover a tool's input parameters from its confirmation text.

    Fields the result cannot tell us (file content, edit strings) are empty.
    Shell commands are never recovered: the command is not in the output.
    """
    text = result_text(content)
    if not text:
        return None

    if tool_name == "Write":
        match = _WRITE_RESULT.search(text)
        if match:
            return {"file_path": match.group(1).strip(), "content": ""}

    elif tool_name in ("Edit", "MultiEdit"):
        for pattern in _EDIT_RESULTS:
            match = pattern.search(text)
            if match:
                recovered: Dict[str, Any] = {
                    "file_path": match.group(1).strip(),
                    "old_string": "",
                    "new_string": "",
                }
                if tool_name == "MultiEdit":
                    recovered["edits"] = []
                return recovered

    return None


def extract_operation_from_result(tool_name: Optional[str], content: Any) -> Optional[ExtractedOperation]:
    """Fallback extraction from a tool result's text."""
    recovered = parse_operation_from_result(tool_name, content)
    if recovered is None:
        logger.debug("No operation recovered from %s result", tool_name)
        return None
    return extract_operation(tool_name, recovered)
