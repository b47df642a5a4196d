# itinerary_editor/managers/operation_locks.py
"""
Named "operation in flight" guards.

Unlike ``asyncio.Lock`` these never wait: a second attempt to take a held
guard fails immediately so the caller can ignore the repeated trigger.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from logging import DEBUG, getLogger

from itinerary_editor.configs import file_logger

logger = file_logger(getLogger(__name__))


class OperationType(Enum):
    SAVE = "save"
    LOAD = "load"
    ADD_DAY = "add_day"
    DELETE_DAY = "delete_day"
    ADD_ACTIVITY = "add_activity"
    EDIT_ACTIVITY = "edit_activity"
    DELETE_ACTIVITY = "delete_activity"
    MOVE_ACTIVITY = "move_activity"
    ADD_TIP = "add_tip"
    EDIT_TIP = "edit_tip"
    DELETE_TIP = "delete_tip"


class OperationLocks:
    """Set of non-blocking guards keyed by operation type."""

    __slots__ = ("_held",)

    def __init__(self) -> None:
        self._held: set[OperationType] = set()

    def held(self, operation: OperationType) -> bool:
        return operation in self._held

    @property
    def active(self) -> frozenset[OperationType]:
        return frozenset(self._held)

    def acquire(self, operation: OperationType) -> bool:
        """Take the guard. Returns False if it is already held."""
        if operation in self._held:
            if logger.isEnabledFor(DEBUG):
                logger.debug("Operation %s already in flight, ignoring trigger", operation.value)
            return False
        self._held.add(operation)
        return True

    def release(self, operation: OperationType) -> None:
        self._held.discard(operation)

    @contextmanager
    def hold(self, operation: OperationType) -> Iterator[bool]:
        """
        Hold the guard for the duration of the block.

        Yields:
            Whether the guard was acquired; the block must do nothing when False.
        """
        acquired = self.acquire(operation)
        try:
            yield acquired
        finally:
            if acquired:
                self.release(operation)
