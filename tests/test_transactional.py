"""
Tests for TransactionalCell.

These tests verify the two-phase commit behaviour and the deferred change
notification of the wrapper, for both observable and plain wrapped cells.
"""

import pytest

from formbind.core.cells import ObservableCell, ValueCell
from formbind.core.errors import ReadOnlyViolation
from formbind.core.transactional import TransactionalCell


@pytest.fixture
def wrapped():
    return ObservableCell(30)


@pytest.fixture
def cell(wrapped):
    return TransactionalCell(wrapped)


class TestPassThrough:
    """Tests for reads and writes outside any transaction."""

    def test_get_value_reflects_wrapped(self, cell, wrapped):
        wrapped.set_value(40)
        assert cell.get_value() == 40

    def test_set_value_writes_through(self, cell, wrapped):
        cell.set_value(31)
        assert wrapped.get_value() == 31

    def test_unbuffered_edit_notifies_immediately(self, cell, recorder):
        cell.add_listener(recorder)
        cell.set_value(31)
        assert recorder.values == [31]

    def test_plain_wrapped_cell_notifies(self, recorder):
        cell = TransactionalCell(ValueCell(1))
        cell.add_listener(recorder)
        cell.set_value(2)
        assert recorder.values == [2]

    def test_read_only_wrapped_cell_rejects_write(self, recorder):
        cell = TransactionalCell(ObservableCell(1, read_only=True))
        cell.add_listener(recorder)
        with pytest.raises(ReadOnlyViolation):
            cell.set_value(2)
        assert cell.get_value() == 1
        assert recorder.count == 0

    def test_type_and_read_only_forwarded(self, cell, wrapped):
        assert cell.type is int
        cell.set_read_only(True)
        assert wrapped.is_read_only()
        assert cell.is_read_only()

    def test_read_only_change_forwarded_once(self, cell):
        events = []
        cell.add_read_only_listener(events.append)
        cell.set_read_only(True)
        assert [event.read_only for event in events] == [True]
        assert events[0].cell is cell

    def test_detach_stops_forwarding(self, cell, wrapped, recorder):
        cell.add_listener(recorder)
        cell.detach()
        wrapped.set_value(99)
        assert recorder.count == 0
        assert wrapped.listener_count() == 0


class TestTransaction:
    """Tests for start_transaction / commit / rollback."""

    def test_start_records_rollback_point(self, cell):
        cell.start_transaction()
        assert cell.in_transaction
        assert cell.value_before_transaction == 30

    def test_notifications_deferred_until_commit(self, cell, recorder):
        cell.add_listener(recorder)
        cell.start_transaction()
        cell.set_value(31)
        cell.set_value(32)
        cell.set_value(33)
        assert recorder.count == 0
        assert cell.value_change_pending

        cell.commit()
        assert recorder.values == [33]
        assert not cell.in_transaction
        assert cell.value_before_transaction is None

    def test_commit_without_change_does_not_notify(self, cell, recorder):
        cell.add_listener(recorder)
        cell.start_transaction()
        cell.commit()
        assert recorder.count == 0

    def test_external_change_during_transaction_is_deferred(self, cell, wrapped, recorder):
        cell.add_listener(recorder)
        cell.start_transaction()
        wrapped.set_value(50)
        assert recorder.count == 0
        cell.commit()
        assert recorder.values == [50]

    def test_rollback_restores_value_silently(self, cell, wrapped, recorder):
        wrapped_events = []
        wrapped.add_listener(wrapped_events.append)
        cell.add_listener(recorder)

        cell.start_transaction()
        cell.set_value(31)
        cell.set_value(32)
        cell.rollback()

        assert cell.get_value() == 30
        assert recorder.count == 0
        assert not cell.in_transaction
        assert not cell.value_change_pending
        # The wrapped cell saw the edits and the restore
        assert [event.value for event in wrapped_events] == [31, 32, 30]

    def test_rollback_bypasses_read_only_set_during_transaction(self, cell, wrapped):
        cell.start_transaction()
        cell.set_value(31)
        wrapped.set_read_only(True)
        cell.rollback()
        assert wrapped.get_value() == 30
        assert wrapped.is_read_only()

    def test_rollback_of_plain_cell(self, recorder):
        plain = ValueCell("a")
        cell = TransactionalCell(plain)
        cell.add_listener(recorder)
        cell.start_transaction()
        cell.set_value("b")
        cell.rollback()
        assert plain.get_value() == "a"
        assert recorder.count == 0

    def test_rollback_finalizes_state_when_restore_fails(self):
        class Failing(ObservableCell):
            fail = False

            def set_value(self, value):
                if self.fail:
                    raise RuntimeError("storage refused the value")
                super().set_value(value)

        failing = Failing(1)
        cell = TransactionalCell(failing)
        cell.start_transaction()
        cell.set_value(2)
        failing.fail = True

        with pytest.raises(RuntimeError):
            cell.rollback()
        assert not cell.in_transaction
        assert not cell.value_change_pending

    def test_reentrant_listener_edit_is_deferred(self, cell, wrapped, recorder):
        other = ObservableCell(0)

        def mirror(event):
            other.set_value(event.value)

        wrapped.add_listener(mirror)
        cell.add_listener(recorder)
        cell.start_transaction()
        cell.set_value(35)
        assert other.get_value() == 35
        assert recorder.count == 0
        cell.commit()
        assert recorder.values == [35]


class TestBufferedEdits:
    """Tests for the edit session opened by buffered writes."""

    def test_buffered_edit_defers_notification(self, cell, recorder):
        cell.set_buffered(True)
        cell.add_listener(recorder)
        cell.set_value(31)
        assert cell.get_value() == 31
        assert cell.is_modified()
        assert recorder.count == 0

    def test_commit_flushes_single_notification(self, cell, recorder):
        cell.set_buffered(True)
        cell.add_listener(recorder)
        cell.set_value(31)
        cell.set_value(32)
        cell.start_transaction()
        cell.commit()
        assert recorder.values == [32]
        assert not cell.is_modified()

    def test_rollback_outside_transaction_restores_pre_edit_value(self, cell, recorder):
        cell.set_buffered(True)
        cell.add_listener(recorder)
        cell.set_value(31)
        cell.set_value(32)
        cell.rollback()
        assert cell.get_value() == 30
        assert not cell.is_modified()
        assert recorder.count == 0

    def test_transaction_rollback_keeps_edit_session(self, cell, recorder):
        cell.set_buffered(True)
        cell.add_listener(recorder)
        cell.set_value(31)

        cell.start_transaction()
        cell.set_value(40)
        cell.rollback()

        assert cell.get_value() == 31
        assert cell.is_modified()
        assert recorder.count == 0

        cell.rollback()
        assert cell.get_value() == 30

    def test_external_change_outside_session_is_forwarded(self, cell, wrapped, recorder):
        cell.set_buffered(True)
        cell.add_listener(recorder)
        wrapped.set_value(45)
        assert recorder.values == [45]
        assert not cell.is_modified()

    def test_switching_mode_keeps_session(self, cell, recorder):
        cell.set_buffered(True)
        cell.add_listener(recorder)
        cell.set_value(31)
        cell.set_buffered(False)
        assert cell.is_modified()
        cell.rollback()
        assert cell.get_value() == 30

    def test_failed_write_does_not_open_session(self):
        cell = TransactionalCell(ObservableCell(1, read_only=True))
        cell.set_buffered(True)
        with pytest.raises(ReadOnlyViolation):
            cell.set_value(2)
        assert not cell.is_modified()

    def test_rollback_restores_value_that_only_compares_equal(self):
        wrapped = ObservableCell(1)
        cell = TransactionalCell(wrapped)
        cell.set_buffered(True)

        cell.set_value(True)
        cell.rollback()

        assert type(wrapped.get_value()) is int
        assert wrapped.get_value() == 1

    def test_rollback_handles_values_without_boolean_equality(self):
        class Vector:
            def __init__(self, *items):
                self.items = items

            def __eq__(self, other):
                raise TypeError("element-wise comparison has no truth value")

        before = Vector(1, 2)
        after = Vector(3, 4)
        wrapped = ObservableCell(before)
        cell = TransactionalCell(wrapped)
        cell.set_buffered(True)

        cell.set_value(after)
        cell.start_transaction()
        cell.rollback()
        assert wrapped.get_value() is after

        cell.rollback()
        assert wrapped.get_value() is before
