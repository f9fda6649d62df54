"""
Tests for InputBinding resolution and configuration.
"""

import pytest

from formbind.core.binding import GroupState, InputBinding
from formbind.core.errors import NoRecordBound, SlotNotFound
from formbind.core.fields import BasicField
from formbind.core.transactional import TransactionalCell


class TestResolve:
    """Tests for resolving a binding against a record."""

    def test_resolve_installs_transactional_cell(self, person_record):
        field = BasicField("Age")
        binding = InputBinding(field, "age")
        cell = binding.resolve(person_record)

        assert isinstance(cell, TransactionalCell)
        assert cell.wrapped is person_record.get_slot("age")
        assert field.get_value_source() is cell
        assert field.get_value() == 30
        assert binding.is_resolved

    def test_resolve_without_record(self):
        binding = InputBinding(BasicField(), "age")
        with pytest.raises(NoRecordBound):
            binding.resolve(None)
        assert not binding.is_resolved

    def test_resolve_missing_slot(self, person_record):
        binding = InputBinding(BasicField(), "salary")
        with pytest.raises(SlotNotFound) as exc_info:
            binding.resolve(person_record)
        assert exc_info.value.slot_names == ["salary"]
        assert not binding.is_resolved

    def test_resolve_again_detaches_previous_cell(self, person_record):
        binding = InputBinding(BasicField(), "age")
        first = binding.resolve(person_record)
        second = binding.resolve(person_record)

        assert first is not second
        slot = person_record.get_slot("age")
        assert slot.listener_count() == 1

    def test_release(self, person_record):
        field = BasicField()
        binding = InputBinding(field, "age")
        binding.resolve(person_record)
        binding.release()
        assert binding.cell is None
        assert field.get_value_source() is None
        assert person_record.get_slot("age").listener_count() == 0


class TestConfigure:
    """Tests for pushing group state onto the field and cell."""

    def test_buffered_state(self, person_record):
        field = BasicField()
        binding = InputBinding(field, "name")
        binding.resolve(person_record)

        binding.configure(GroupState(buffered=True))
        assert binding.cell.is_buffered()
        assert not field.is_read_through()
        assert not field.is_write_through()

        binding.configure(GroupState(buffered=False))
        assert not binding.cell.is_buffered()
        assert field.is_read_through()
        assert field.is_write_through()

    def test_enabled_and_read_only(self, person_record):
        field = BasicField()
        binding = InputBinding(field, "name")
        binding.resolve(person_record)

        binding.configure(GroupState(enabled=False, read_only=True))
        assert not field.is_enabled()
        assert field.is_read_only()

    def test_read_only_slot_overrides_group(self, person_record):
        field = BasicField()
        binding = InputBinding(field, "id")
        binding.resolve(person_record)

        binding.configure(GroupState(read_only=False))
        assert field.is_read_only()

    def test_configure_unresolved_binding(self):
        field = BasicField()
        binding = InputBinding(field, "name")
        binding.configure(GroupState(enabled=False))
        assert not field.is_enabled()
        assert not field.is_read_only()
