from itinerary_editor.managers.debouncer import Debouncer
from itinerary_editor.managers.operation_locks import OperationLocks, OperationType

__all__ = [
    "Debouncer",
    "OperationLocks",
    "OperationType",
]
