"""Tool-specific helpers: status text, status details, input normalization."""

import posixpath
import sys
from typing import Any, Dict, Optional
from urllib.parse import urlparse

# Human-readable status shown while a tool runs
TOOL_STATUS_MAP: Dict[str, str] = {
    "Task": "Exploring project structure",
    "Bash": "Executing command",
    "Read": "Reading file",
    "Edit": "Editing file",
    "Write": "Writing file",
    "Grep": "Searching files",
    "Glob": "Finding files",
    "LS": "Listing directory",
    "TodoWrite": "Updating tasks",
    "TodoRead": "Reading tasks",
    "WebFetch": "Fetching web content",
    "WebSearch": "Searching web",
    "MultiEdit": "Editing multiple files",
    "NotebookRead": "Reading notebook",
    "NotebookEdit": "Editing notebook",
    "EnterPlanMode": "Entering plan mode",
    "ExitPlanMode": "Exiting plan mode",
    "mcp__sequential-thinking__sequentialthinking": "Analyzing with sequential thinking",
}

DEFAULT_TOOL_STATUS = "Processing"

# Tools that toggle plan mode and never carry an operation
PLAN_MODE_TOOLS: Dict[str, bool] = {
    "EnterPlanMode": True,
    "ExitPlanMode": False,
}

FILE_TOOLS = frozenset({"Read", "Edit", "Write", "MultiEdit", "NotebookRead", "NotebookEdit"})

# Read calls without bounds get a conservative window
READ_DEFAULT_OFFSET = 0
READ_DEFAULT_LIMIT = 500

COMMAND_DETAIL_LENGTH = 50
PATTERN_DETAIL_LENGTH = 30


def get_tool_status_text(tool_name: Optional[str]) -> str:
    """Status text for a tool, deriving one for unmapped MCP tools."""
    if not tool_name:
        return DEFAULT_TOOL_STATUS
    if tool_name in TOOL_STATUS_MAP:
        return TOOL_STATUS_MAP[tool_name]

    if tool_name.startswith("mcp__"):
        parts = tool_name.split("__")
        if len(parts) >= 3:
            server, action = parts[1], parts[2]
            if "thinking" in action:
                return "Analyzing with enhanced reasoning"
            if "search" in action:
                return f"Searching via {server}"
            if "read" in action:
                return f"Reading via {server}"
            if "write" in action:
                return f"Writing via {server}"
            if "query" in action:
                return f"Querying {server}"
            return f"Processing with {server}"

    return DEFAULT_TOOL_STATUS


def _truncate(text: str, length: int) -> str:
    return text[:length] + ("..." if len(text) > length else "")


def extract_file_name(tool_input: Dict[str, Any]) -> str:
    """Base name of the file a tool operates on, if any."""
    file_path = (
        tool_input.get("file_path")
        or tool_input.get("path")
        or tool_input.get("notebook_path")
    )
    if not file_path:
        edits = tool_input.get("edits")
        if isinstance(edits, list) and edits and isinstance(edits[0], dict):
            file_path = edits[0].get("file_path")
    if not isinstance(file_path, str) or not file_path:
        return ""
    return posixpath.basename(file_path.replace("\\", "/").rstrip("/"))


def get_tool_details(tool_name: Optional[str], tool_input: Any) -> str:
    """Short tool-specific detail for the status line.

    File tools show the file name, shell tools a truncated command, search
    tools a truncated pattern, fetch tools the host name. Tools without a
    meaningful parameter yield an empty string.
    """
    if not isinstance(tool_input, dict):
        return ""

    if tool_name in FILE_TOOLS:
        return extract_file_name(tool_input)

    if tool_name == "Bash":
        command = tool_input.get("command")
        return _truncate(command, COMMAND_DETAIL_LENGTH) if isinstance(command, str) else ""

    if tool_name in ("Grep", "Glob"):
        pattern = tool_input.get("pattern")
        if not isinstance(pattern, str) or not pattern:
            return ""
        details = f'"{_truncate(pattern, PATTERN_DETAIL_LENGTH)}"'
        path = tool_input.get("path")
        if isinstance(path, str) and path and path != ".":
            details += f" in {path}"
        include = tool_input.get("include") or tool_input.get("glob")
        if isinstance(include, str) and include:
            details += f" ({include})"
        return details

    if tool_name == "WebFetch":
        url = tool_input.get("url")
        if not isinstance(url, str) or not url:
            return ""
        try:
            hostname = urlparse(url).hostname
        except ValueError:
            return _truncate(url, PATTERN_DETAIL_LENGTH)
        return hostname or _truncate(url, PATTERN_DETAIL_LENGTH)

    if tool_name == "WebSearch":
        query = tool_input.get("query")
        return _truncate(query, COMMAND_DETAIL_LENGTH) if isinstance(query, str) else ""

    if tool_name == "Task":
        description = tool_input.get("description")
        return description if isinstance(description, str) else ""

    if tool_name == "TaskOutput" and tool_input.get("task_id"):
        return f"task: {tool_input['task_id']}"

    if tool_name == "KillShell" and tool_input.get("shell_id"):
        return f"shell: {tool_input['shell_id']}"

    if tool_name == "AskUserQuestion":
        questions = tool_input.get("questions")
        if isinstance(questions, list) and questions:
            return f"{len(questions)} question(s)"
        return ""

    if tool_name == "Skill" and tool_input.get("skill"):
        return f"/{tool_input['skill']}"

    return ""


def normalize_tool_input(
    tool_name: Optional[str],
    tool_input: Any,
    platform: Optional[str] = None,
) -> Any:
    """Return a cleaned-up copy of a tool's input.

    On Windows, file tool paths use forward slashes. Read calls get explicit
    offset and limit bounds. Non-dict inputs are returned unchanged.
    """
    if not isinstance(tool_input, dict):
        return tool_input

    normalized = dict(tool_input)
    platform = platform or sys.platform

    if platform == "win32" and tool_name in FILE_TOOLS:
        for key in ("file_path", "path", "notebook_path"):
            value = normalized.get(key)
            if isinstance(value, str):
                normalized[key] = value.replace("\\", "/")

    if tool_name == "Read":
        normalized.setdefault("offset", READ_DEFAULT_OFFSET)
        normalized.setdefault("limit", READ_DEFAULT_LIMIT)

    return normalized
