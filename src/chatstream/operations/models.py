"""Operation records produced for the undo/redo subsystem."""

import random
import string
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class OperationType(str, Enum):
    """Operation types understood by the undo/redo subsystem."""

    FILE_CREATE = "file_create"
    FILE_EDIT = "file_edit"
    MULTI_EDIT = "multi_edit"
    FILE_DELETE = "file_delete"
    FILE_RENAME = "file_rename"
    DIRECTORY_CREATE = "directory_create"
    DIRECTORY_DELETE = "directory_delete"
    BASH_COMMAND = "bash_command"


class OperationStatus(str, Enum):
    """Lifecycle status of a tracked operation."""

    ACTIVE = "active"
    UNDONE = "undone"
    FAILED = "failed"
    PARTIAL = "partial"
    PENDING = "pending"


@dataclass
class EditOperation:
    """A single replacement within a file."""

    old_string: str = ""
    new_string: str = ""
    replace_all: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditOperation":
        return cls(
            old_string=data.get("old_string") or "",
            new_string=data.get("new_string") or "",
            replace_all=bool(data.get("replace_all", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "old_string": self.old_string,
            "new_string": self.new_string,
            "replace_all": self.replace_all,
        }


@dataclass
class OperationData:
    """Variant payload of an operation; which fields are set depends on the type."""

    file_path: Optional[str] = None

    # FILE_CREATE and FILE_DELETE
    content: Optional[str] = None

    # FILE_EDIT
    old_string: Optional[str] = None
    new_string: Optional[str] = None
    replace_all: Optional[bool] = None

    # MULTI_EDIT
    edits: Optional[List[EditOperation]] = None
    is_multi_edit: Optional[bool] = None

    # FILE_RENAME
    old_path: Optional[str] = None
    new_path: Optional[str] = None

    # DIRECTORY_CREATE and DIRECTORY_DELETE
    dir_path: Optional[str] = None

    # BASH_COMMAND
    command: Optional[str] = None
    output: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the fields that are set."""
        d: Dict[str, Any] = {}
        for name in self.__dataclass_fields__:
            value = getattr(self, name)
            if value is None:
                continue
            if name == "edits":
                value = [e.to_dict() for e in value]
            d[name] = value
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OperationData":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        if known.get("edits") is not None:
            known["edits"] = [
                e if isinstance(e, EditOperation) else EditOperation.from_dict(e)
                for e in known["edits"]
            ]
        return cls(**known)


@dataclass
class ExtractedOperation:
    """An operation classified from a tool call, before it is tracked."""

    type: OperationType
    data: OperationData


def generate_operation_id() -> str:
    """Generate an id shaped like ``op_<base36 ms>_<random>``."""
    millis = int(time.time() * 1000)
    digits = string.digits + string.ascii_lowercase
    encoded = ""
    while millis:
        millis, rem = divmod(millis, 36)
        encoded = digits[rem] + encoded
    suffix = "".join(random.choices(digits, k=6))
    return f"op_{encoded or '0'}_{suffix}"


_DESCRIPTIONS = {
    OperationType.FILE_CREATE: "Create file: {file_path}",
    OperationType.FILE_EDIT: "Edit file: {file_path}",
    OperationType.FILE_DELETE: "Delete file: {file_path}",
    OperationType.FILE_RENAME: "Rename: {old_path} → {new_path}",
    OperationType.DIRECTORY_CREATE: "Create directory: {dir_path}",
    OperationType.DIRECTORY_DELETE: "Delete directory: {dir_path}",
    OperationType.BASH_COMMAND: "Run command: {command}",
}


@dataclass
class Operation:
    """A tracked file-system or shell side effect.

    Created by an operation store from an extracted operation and never
    mutated by the stream processor afterwards.
    """

    type: OperationType
    data: OperationData
    message_id: Optional[str] = None
    tool_use_id: Optional[str] = None
    id: str = field(default_factory=generate_operation_id)
    timestamp: str = ""
    status: OperationStatus = OperationStatus.ACTIVE
    session_id: Optional[str] = None
    error: Optional[str] = None
    dependencies: List[str] = field(default_factory=list)  # Operations depending on this one
    depends_on: List[str] = field(default_factory=list)  # Operations this one depends on

    def __post_init__(self) -> None:
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    @property
    def undone(self) -> bool:
        return self.status == OperationStatus.UNDONE

    @property
    def description(self) -> str:
        """Human-readable description of the operation."""
        if self.type == OperationType.MULTI_EDIT:
            count = len(self.data.edits or [])
            return f"Multi-edit file: {self.data.file_path} ({count} changes)"
        template = _DESCRIPTIONS.get(self.type)
        if template is None:
            return f"Unknown operation: {self.type}"
        return template.format(**{k: getattr(self.data, k) for k in self.data.__dataclass_fields__})

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        d: Dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "data": self.data.to_dict(),
            "timestamp": self.timestamp,
            "status": self.status.value,
            "undone": self.undone,
            "dependencies": list(self.dependencies),
            "depends_on": list(self.depends_on),
        }
        if self.message_id:
            d["message_id"] = self.message_id
        if self.tool_use_id:
            d["tool_use_id"] = self.tool_use_id
        if self.session_id:
            d["session_id"] = self.session_id
        if self.error:
            d["error"] = self.error
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Operation":
        status = data.get("status")
        if status is None:
            status = OperationStatus.UNDONE if data.get("undone") else OperationStatus.ACTIVE
        return cls(
            type=OperationType(data["type"]),
            data=OperationData.from_dict(data.get("data") or {}),
            message_id=data.get("message_id"),
            tool_use_id=data.get("tool_use_id"),
            id=data.get("id") or generate_operation_id(),
            timestamp=data.get("timestamp", ""),
            status=OperationStatus(status),
            session_id=data.get("session_id"),
            error=data.get("error"),
            dependencies=list(data.get("dependencies") or []),
            depends_on=list(data.get("depends_on") or []),
        )
