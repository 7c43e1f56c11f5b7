"""Heuristic classification of shell commands into file-system operations.

Each matcher is a pure function from command text to an optional
ExtractedOperation. ``BASH_PATTERNS`` fixes the order in which they are
consulted; the first match wins.
"""

import re
from typing import Callable, Optional, Pattern, Tuple

from .models import ExtractedOperation, OperationData, OperationType

# A command word only counts at the start of the text or after a separator,
# so "npm run format" is not an rm and "git mv" still is an mv.
_BOUNDARY = r"(?:^|(?<=[\s;&|(]))"
_FLAGS = r"(?:--?[A-Za-z][\w-]*\s+)*"
_END_OF_OPTIONS = r"(?:--\s+)?"
_QUOTED = r"""["']([^"']+)["']"""
_UNQUOTED = r"""(?!["'-])([^\s;&|]+)"""


def _command(word: str, *args: str) -> Pattern[str]:
    return re.compile(_BOUNDARY + word + r"\s+" + _FLAGS + _END_OF_OPTIONS + r"\s+".join(args))


_RMDIR_QUOTED = _command("rmdir", _QUOTED)
_RMDIR_UNQUOTED = _command("rmdir", _UNQUOTED)
_RM_QUOTED = _command("rm", _QUOTED)
_RM_UNQUOTED = _command("rm", _UNQUOTED)
_MKDIR_QUOTED = _command("mkdir", _QUOTED)
_MKDIR_UNQUOTED = _command("mkdir", _UNQUOTED)

# Tried in order: both quoted, first quoted, second quoted, neither quoted.
_MV_PATTERNS = (
    _command("mv", _QUOTED, _QUOTED),
    _command("mv", _QUOTED, _UNQUOTED),
    _command("mv", _UNQUOTED, _QUOTED),
    _command("mv", _UNQUOTED, _UNQUOTED),
)


def _first_path(command: str, quoted: Pattern[str], unquoted: Pattern[str]) -> Optional[str]:
    """Extract the first argument, preferring a quoted one."""
    match = quoted.search(command) or unquoted.search(command)
    if not match:
        return None
    path = match.group(1).strip()
    return path or None


def match_directory_delete(command: str) -> Optional[ExtractedOperation]:
    """``rmdir <dir>``"""
    path = _first_path(command, _RMDIR_QUOTED, _RMDIR_UNQUOTED)
    if path is None:
        return None
    return ExtractedOperation(
        type=OperationType.DIRECTORY_DELETE,
        data=OperationData(dir_path=path),
    )


def match_file_delete(command: str) -> Optional[ExtractedOperation]:
    """``rm [-flags] <path>``, recursive flags included."""
    path = _first_path(command, _RM_QUOTED, _RM_UNQUOTED)
    if path is None:
        return None
    # Content is captured by the undo engine before it deletes anything
    return ExtractedOperation(
        type=OperationType.FILE_DELETE,
        data=OperationData(file_path=path, content=""),
    )


def match_rename(command: str) -> Optional[ExtractedOperation]:
    """``mv <old> <new>``"""
    for pattern in _MV_PATTERNS:
        match = pattern.search(command)
        if match:
            old_path, new_path = match.group(1).strip(), match.group(2).strip()
            if old_path and new_path:
                return ExtractedOperation(
                    type=OperationType.FILE_RENAME,
                    data=OperationData(old_path=old_path, new_path=new_path),
                )
    return None


def match_directory_create(command: str) -> Optional[ExtractedOperation]:
    """``mkdir [-p] <dir>``"""
    path = _first_path(command, _MKDIR_QUOTED, _MKDIR_UNQUOTED)
    if path is None:
        return None
    return ExtractedOperation(
        type=OperationType.DIRECTORY_CREATE,
        data=OperationData(dir_path=path),
    )


BashMatcher = Callable[[str], Optional[ExtractedOperation]]

BASH_PATTERNS: Tuple[Tuple[str, BashMatcher], ...] = (
    ("directory_delete", match_directory_delete),
    ("file_delete", match_file_delete),
    ("file_rename", match_rename),
    ("directory_create", match_directory_create),
)


def analyze_bash_command(command: str) -> Optional[ExtractedOperation]:
    """Classify a shell command as a file-system operation.

    Returns:
        The first matching operation in ``BASH_PATTERNS`` order, or None if
        the command is not a recognized file-system mutation.
    """
    if not command or not command.strip():
        return None
    for _name, matcher in BASH_PATTERNS:
        result = matcher(command)
        if result is not None:
            return result
    return None
