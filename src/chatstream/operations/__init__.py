"""File-system and shell operation extraction for chatstream."""

from .bash import BASH_PATTERNS, analyze_bash_command
from .extractor import (
    extract_operation,
    extract_operation_from_result,
    parse_operation_from_result,
)
from .models import (
    EditOperation,
    ExtractedOperation,
    Operation,
    OperationData,
    OperationStatus,
    OperationType,
)
from .tracker import OperationStore, OperationTracker

__all__ = [
    "BASH_PATTERNS",
    "EditOperation",
    "ExtractedOperation",
    "Operation",
    "OperationData",
    "OperationStatus",
    "OperationStore",
    "OperationTracker",
    "OperationType",
    "analyze_bash_command",
    "extract_operation",
    "extract_operation_from_result",
    "parse_operation_from_result",
]
