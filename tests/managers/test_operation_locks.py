# tests/managers/test_operation_locks.py
"""Tests for itinerary_editor/managers/operation_locks.py module."""

from itinerary_editor.managers import OperationLocks, OperationType


class TestOperationLocks:
    """Tests for OperationLocks."""

    def test_acquire_and_release(self) -> None:
        """Test a guard can be taken once until released."""
        locks = OperationLocks()
        assert locks.acquire(OperationType.SAVE) is True
        assert locks.acquire(OperationType.SAVE) is False
        assert locks.held(OperationType.SAVE) is True

        locks.release(OperationType.SAVE)
        assert locks.held(OperationType.SAVE) is False
        assert locks.acquire(OperationType.SAVE) is True

    def test_guards_are_independent(self) -> None:
        """Test different operations do not block each other."""
        locks = OperationLocks()
        locks.acquire(OperationType.ADD_DAY)
        assert locks.acquire(OperationType.ADD_TIP) is True
        assert locks.active == frozenset({OperationType.ADD_DAY, OperationType.ADD_TIP})

    def test_hold_releases_on_exit(self) -> None:
        """Test the context manager releases what it acquired."""
        locks = OperationLocks()
        with locks.hold(OperationType.DELETE_DAY) as acquired:
            assert acquired is True
            with locks.hold(OperationType.DELETE_DAY) as nested:
                assert nested is False
            assert locks.held(OperationType.DELETE_DAY) is True
        assert locks.held(OperationType.DELETE_DAY) is False

    def test_hold_releases_on_error(self) -> None:
        """Test the guard is released when the block raises."""
        locks = OperationLocks()
        try:
            with locks.hold(OperationType.LOAD):
                msg = "load failed"
                raise ValueError(msg)
        except ValueError:
            pass
        assert locks.active == frozenset()
