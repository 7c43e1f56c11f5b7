"""Operation store interface and an in-memory reference store."""

import logging
import posixpath
from collections import OrderedDict
from typing import Dict, List, Optional, Protocol

from .models import Operation, OperationData, OperationType

logger = logging.getLogger(__name__)

NO_SESSION = "__no_session__"
MAX_OPERATIONS = 1000


class OperationStore(Protocol):
    """What the stream processor needs from an operation store."""

    def track_operation(
        self,
        type: OperationType,
        data: OperationData,
        message_id: Optional[str] = None,
        tool_use_id: Optional[str] = None,
    ) -> Operation:
        ...


class OperationTracker:
    """In-memory operation store.

    Indexes operations by originating message and by session, links
    operations that touch the same paths, and keeps at most
    ``max_operations`` records (oldest dropped first).

    Example:
        tracker = OperationTracker()
        tracker.set_current_session("session-1")
        op = tracker.track_operation(
            OperationType.FILE_CREATE,
            OperationData(file_path="/tmp/a.txt", content="hi"),
            message_id="msg_1",
            tool_use_id="toolu_1",
        )
        tracker.get_operations_by_message("msg_1")  # [op]
    """

    def __init__(self, max_operations: int = MAX_OPERATIONS):
        self._operations: "OrderedDict[str, Operation]" = OrderedDict()
        self._by_message: Dict[str, List[str]] = {}
        self._by_session: Dict[str, List[str]] = {}
        self._current_session: Optional[str] = None
        self._max_operations = max_operations

    @property
    def current_session(self) -> Optional[str]:
        return self._current_session

    def set_current_session(self, session_id: Optional[str]) -> None:
        self._current_session = session_id

    def track_operation(
        self,
        type: OperationType,
        data: OperationData,
        message_id: Optional[str] = None,
        tool_use_id: Optional[str] = None,
    ) -> Operation:
        """Record a new operation and return it."""
        operation = Operation(
            type=type,
            data=data,
            message_id=message_id,
            tool_use_id=tool_use_id,
            session_id=self._current_session,
        )
        if tool_use_id:
            operation.id = tool_use_id

        self._operations[operation.id] = operation

        if message_id:
            self._by_message.setdefault(message_id, []).append(operation.id)

        # Operations are tracked even before the assistant announces a session
        session_key = self._current_session or NO_SESSION
        self._by_session.setdefault(session_key, []).append(operation.id)

        self._establish_dependencies(operation, session_key)
        self._cleanup_old_operations()

        logger.debug("Tracked operation %s: %s", operation.id, operation.description)
        return operation

    def get_operation(self, operation_id: str) -> Optional[Operation]:
        return self._operations.get(operation_id)

    def get_operations_by_message(self, message_id: str) -> List[Operation]:
        return self._collect(self._by_message.get(message_id, []))

    def get_operations_by_session(self, session_id: Optional[str] = None) -> List[Operation]:
        key = session_id or self._current_session or NO_SESSION
        return self._collect(self._by_session.get(key, []))

    def all_operations(self) -> List[Operation]:
        return list(self._operations.values())

    def clear(self) -> None:
        self._operations.clear()
        self._by_message.clear()
        self._by_session.clear()

    def __len__(self) -> int:
        return len(self._operations)

    def _collect(self, ids: List[str]) -> List[Operation]:
        return [self._operations[i] for i in ids if i in self._operations]

    def _link(self, dependent: Operation, prerequisite: Operation) -> None:
        if prerequisite.id not in dependent.depends_on:
            dependent.depends_on.append(prerequisite.id)
        if dependent.id not in prerequisite.dependencies:
            prerequisite.dependencies.append(dependent.id)

    def _establish_dependencies(self, new_op: Operation, session_key: str) -> None:
        """Link the new operation to earlier ones in the same session."""
        earlier = [
            op for op in self._collect(self._by_session.get(session_key, []))
            if op.id != new_op.id and not op.undone
        ]

        file_path = new_op.data.file_path
        if file_path:
            for op in earlier:
                if op.data.file_path == file_path:
                    self._link(new_op, op)
                if op.type == OperationType.FILE_RENAME and op.data.new_path == file_path:
                    self._link(new_op, op)
                if op.type == OperationType.DIRECTORY_CREATE and op.data.dir_path:
                    if file_path.startswith(op.data.dir_path.rstrip("/") + posixpath.sep):
                        self._link(new_op, op)

        dir_path = new_op.data.dir_path
        if dir_path:
            prefix = dir_path.rstrip("/") + posixpath.sep
            for op in earlier:
                if not (op.data.file_path and op.data.file_path.startswith(prefix)):
                    continue
                if new_op.type == OperationType.DIRECTORY_CREATE:
                    self._link(op, new_op)
                elif new_op.type == OperationType.DIRECTORY_DELETE:
                    self._link(new_op, op)

    def _cleanup_old_operations(self) -> None:
        while len(self._operations) > self._max_operations:
            old_id, _ = self._operations.popitem(last=False)
            for index in (self._by_message, self._by_session):
                for key in list(index):
                    ids = [i for i in index[key] if i != old_id]
                    if ids:
                        index[key] = ids
                    else:
                        del index[key]
