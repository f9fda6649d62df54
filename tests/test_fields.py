"""
Tests for the headless field and the stock validators.
"""

import pytest

from formbind.core.cells import ObservableCell
from formbind.core.errors import ReadOnlyViolation
from formbind.core.fields import BasicField, Field
from formbind.core.transactional import TransactionalCell
from formbind.core.validation import InvalidValueError, in_range, is_empty, matches, max_length, not_empty


class TestBasicField:
    """Tests for BasicField."""

    def test_unbound_field_keeps_own_value(self):
        field = BasicField("Name", value="x")
        field.set_value("y")
        assert field.get_value() == "y"

    def test_bound_field_reads_and_writes_source(self):
        cell = TransactionalCell(ObservableCell(1))
        field = BasicField()
        field.set_value_source(cell)
        field.set_value(2)
        assert cell.get_value() == 2
        assert field.get_value() == 2

    def test_read_only_field_rejects_input(self):
        field = BasicField()
        field.set_read_only(True)
        with pytest.raises(ReadOnlyViolation):
            field.set_value(1)

    def test_disabled_field_rejects_input(self):
        field = BasicField()
        field.set_enabled(False)
        with pytest.raises(ReadOnlyViolation):
            field.set_value(1)

    def test_validators_run_in_order(self):
        field = BasicField(value=5)
        seen = []
        field.add_validator(lambda value: seen.append("first"))
        field.add_validator(lambda value: seen.append("second"))
        field.validate()
        assert seen == ["first", "second"]

    def test_remove_validator(self):
        field = BasicField(value=500)
        check = in_range(0, 10)
        field.add_validator(check)
        assert not field.is_valid()
        field.remove_validator(check)
        assert field.is_valid()
        assert field.get_validators() == []

    def test_required(self):
        field = BasicField(value="")
        assert field.is_valid()
        field.required = True
        field.required_error = "Name is required"
        with pytest.raises(InvalidValueError, match="Name is required"):
            field.validate()

    def test_base_class_is_abstract(self):
        with pytest.raises(NotImplementedError):
            Field().get_value()


class TestValidators:
    """Tests for the stock validators."""

    def test_not_empty(self):
        check = not_empty()
        check("a")
        for value in (None, "", []):
            with pytest.raises(InvalidValueError):
                check(value)

    def test_in_range(self):
        check = in_range(0, 10)
        check(0)
        check(10)
        check(None)
        with pytest.raises(InvalidValueError):
            check(11)
        with pytest.raises(InvalidValueError):
            check(-1)

    def test_open_range(self):
        in_range(minimum=5)(1000)
        with pytest.raises(InvalidValueError):
            in_range(maximum=5)(6)

    def test_max_length(self):
        check = max_length(3)
        check("abc")
        with pytest.raises(InvalidValueError, match="longer than 3"):
            check("abcd")

    def test_matches(self):
        check = matches(r"\d{3}")
        check("123")
        with pytest.raises(InvalidValueError):
            check("12a")

    def test_is_empty(self):
        assert is_empty(None)
        assert is_empty("")
        assert not is_empty(0)
        assert not is_empty(False)
