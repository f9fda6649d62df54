"""
Field interface seen by the binding layer.

A field is an input widget that displays and edits the value of a cell (its
value source). The binding layer drives fields through the methods below and
never renders them. Concrete widget toolkits subclass Field; BasicField is a
headless implementation.
"""

from typing import Any, Optional

from .errors import ReadOnlyViolation
from .validation import InvalidValueError, Validator, is_empty


class Field:
    """
    Base class for bindable input fields.

    Subclasses must implement the value source, state and value methods.
    Validation is shared: validators registered with add_validator() run
    against get_value() in registration order.
    """

    def __init__(self, caption: str = ""):
        self.caption = caption
        self.required = False
        self.required_error = "Value is required"
        self._validators: list[Validator] = []

    def set_value_source(self, cell: Optional[Any]) -> None:
        """Use cell (a TransactionalCell, or None to unbind) as value source."""
        raise NotImplementedError("Subclasses must implement set_value_source()")

    def get_value_source(self) -> Optional[Any]:
        raise NotImplementedError("Subclasses must implement get_value_source()")

    def get_value(self) -> Any:
        raise NotImplementedError("Subclasses must implement get_value()")

    def set_value(self, value: Any) -> None:
        raise NotImplementedError("Subclasses must implement set_value()")

    def set_enabled(self, enabled: bool) -> None:
        raise NotImplementedError("Subclasses must implement set_enabled()")

    def is_enabled(self) -> bool:
        raise NotImplementedError("Subclasses must implement is_enabled()")

    def set_read_only(self, read_only: bool) -> None:
        raise NotImplementedError("Subclasses must implement set_read_only()")

    def is_read_only(self) -> bool:
        raise NotImplementedError("Subclasses must implement is_read_only()")

    def set_read_through(self, read_through: bool) -> None:
        raise NotImplementedError("Subclasses must implement set_read_through()")

    def set_write_through(self, write_through: bool) -> None:
        raise NotImplementedError("Subclasses must implement set_write_through()")

    def discard(self) -> None:
        """Re-read the displayed value from the value source."""
        raise NotImplementedError("Subclasses must implement discard()")

    def add_validator(self, validator: Validator) -> None:
        self._validators.append(validator)

    def remove_validator(self, validator: Validator) -> None:
        if validator in self._validators:
            self._validators.remove(validator)

    def get_validators(self) -> list[Validator]:
        return list(self._validators)

    def validate(self) -> None:
        """
        Check the current value.

        Raises:
            InvalidValueError: If the field is required and empty, or if any
                validator rejects the value.
        """
        value = self.get_value()
        if self.required and is_empty(value):
            raise InvalidValueError(self.required_error)
        for validator in self._validators:
            validator(value)

    def is_valid(self) -> bool:
        try:
            self.validate()
        except InvalidValueError:
            return False
        return True


class BasicField(Field):
    """
    Headless field.

    The displayed value is always read from the value source, so there is
    nothing to refresh on discard(). Editing a disabled or read-only field
    raises ReadOnlyViolation, as a real widget would refuse the input.
    """

    def __init__(self, caption: str = "", value: Any = None):
        super().__init__(caption)
        self._source = None
        self._value = value
        self._enabled = True
        self._read_only = False
        self._read_through = True
        self._write_through = True

    def set_value_source(self, cell):
        self._source = cell

    def get_value_source(self):
        return self._source

    def get_value(self) -> Any:
        if self._source is not None:
            return self._source.get_value()
        return self._value

    def set_value(self, value: Any) -> None:
        if not self._enabled or self._read_only:
            raise ReadOnlyViolation(f"Field '{self.caption}' does not accept input")
        if self._source is not None:
            self._source.set_value(value)
        else:
            self._value = value

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = bool(enabled)

    def is_enabled(self) -> bool:
        return self._enabled

    def set_read_only(self, read_only: bool) -> None:
        self._read_only = bool(read_only)

    def is_read_only(self) -> bool:
        return self._read_only

    def set_read_through(self, read_through: bool) -> None:
        self._read_through = bool(read_through)

    def is_read_through(self) -> bool:
        return self._read_through

    def set_write_through(self, write_through: bool) -> None:
        self._write_through = bool(write_through)

    def is_write_through(self) -> bool:
        return self._write_through

    def discard(self) -> None:
        pass

    def __repr__(self) -> str:
        return f"BasicField(caption={self.caption!r})"


class FieldFactory:
    """Creates a field suitable for editing values of a given type."""

    def create_field(self, value_type: type, caption: str = "") -> Field:
        raise NotImplementedError("Subclasses must implement create_field()")


class BasicFieldFactory(FieldFactory):
    """Creates a BasicField for every type."""

    def create_field(self, value_type: type, caption: str = "") -> Field:
        return BasicField(caption)
