"""
Value cells holding the per-slot values of a record.

A cell is a mutable container for one value with a read-only flag and a type
tag. Change notification is an optional capability: cells that support it
return an Observable from as_observable(), plain cells return None.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from .errors import ReadOnlyViolation


@dataclass(frozen=True)
class ValueChangeEvent:
    """Notification that the value of a cell has changed."""

    cell: Any
    """The cell whose value changed."""

    value: Any
    """The value of the cell when the event was fired."""


@dataclass(frozen=True)
class ReadOnlyStatusChangeEvent:
    """Notification that the read-only flag of a cell has changed."""

    cell: Any
    read_only: bool


ValueChangeListener = Callable[[ValueChangeEvent], None]
ReadOnlyStatusListener = Callable[[ReadOnlyStatusChangeEvent], None]


class Observable:
    """
    Change-notification capability.

    Keeps the listener lists and dispatches events. Listeners are called
    synchronously in registration order; a listener may add or remove
    listeners while being notified.
    """

    def __init__(self):
        self._value_listeners: list[ValueChangeListener] = []
        self._read_only_listeners: list[ReadOnlyStatusListener] = []

    def add_listener(self, listener: ValueChangeListener) -> None:
        """Register a listener for value changes. Duplicates are ignored."""
        if listener not in self._value_listeners:
            self._value_listeners.append(listener)

    def remove_listener(self, listener: ValueChangeListener) -> None:
        """Unregister a value change listener if it is registered."""
        if listener in self._value_listeners:
            self._value_listeners.remove(listener)

    def add_read_only_listener(self, listener: ReadOnlyStatusListener) -> None:
        """Register a listener for read-only status changes."""
        if listener not in self._read_only_listeners:
            self._read_only_listeners.append(listener)

    def remove_read_only_listener(self, listener: ReadOnlyStatusListener) -> None:
        """Unregister a read-only status listener if it is registered."""
        if listener in self._read_only_listeners:
            self._read_only_listeners.remove(listener)

    def listener_count(self) -> int:
        """Return the number of registered value change listeners."""
        return len(self._value_listeners)

    def _notify_value_change(self, value: Any) -> None:
        event = ValueChangeEvent(cell=self, value=value)
        for listener in list(self._value_listeners):
            listener(event)

    def _notify_read_only_change(self, read_only: bool) -> None:
        event = ReadOnlyStatusChangeEvent(cell=self, read_only=read_only)
        for listener in list(self._read_only_listeners):
            listener(event)


class ValueCell:
    """
    A single mutable value slot without change notification.

    Attributes:
        type: Type tag of the value held by the cell.
    """

    def __init__(self, value: Any = None, value_type: Optional[type] = None, read_only: bool = False):
        """
        Initialize the cell.

        Args:
            value: Initial value.
            value_type: Type tag for the value. Defaults to the type of the
                initial value, or object when the value is None.
            read_only: Whether writes are rejected.
        """
        self._value = value
        if value_type is None:
            value_type = type(value) if value is not None else object
        self._type = value_type
        self._read_only = read_only

    @property
    def type(self) -> type:
        return self._type

    def get_value(self) -> Any:
        """Return the current value."""
        return self._value

    def set_value(self, value: Any) -> None:
        """
        Write a new value.

        Raises:
            ReadOnlyViolation: If the cell is read-only.
        """
        if self.is_read_only():
            raise ReadOnlyViolation(f"Cannot write to read-only cell {self!r}")
        self._store(value)

    def is_read_only(self) -> bool:
        return self._read_only

    def set_read_only(self, read_only: bool) -> None:
        self._read_only = bool(read_only)

    def as_observable(self) -> Optional[Observable]:
        """Return the change-notification capability, or None if unsupported."""
        return None

    def _store(self, value: Any) -> None:
        self._value = value

    def __repr__(self) -> str:
        return f"{type(self).__name__}(value={self.get_value()!r}, read_only={self.is_read_only()})"


class ObservableCell(Observable, ValueCell):
    """A value cell that notifies listeners after every successful write."""

    def __init__(self, value: Any = None, value_type: Optional[type] = None, read_only: bool = False):
        ValueCell.__init__(self, value, value_type, read_only)
        Observable.__init__(self)

    def set_value(self, value: Any) -> None:
        super().set_value(value)
        self._notify_value_change(self.get_value())

    def set_read_only(self, read_only: bool) -> None:
        old_status = self.is_read_only()
        super().set_read_only(read_only)
        if old_status != self.is_read_only():
            self._notify_read_only_change(self.is_read_only())

    def as_observable(self) -> Optional[Observable]:
        return self


class AttributeCell(ObservableCell):
    """
    Observable cell backed by an attribute of a Python object.

    Reads go through getattr() and writes through setattr(), so the object
    always holds the current value. A property without a setter yields a cell
    that is permanently read-only.
    """

    def __init__(self, obj: Any, name: str, read_only: bool = False, value_type: Optional[type] = None):
        """
        Initialize the cell.

        Args:
            obj: The object owning the attribute.
            name: Attribute name.
            read_only: Whether writes are rejected.
            value_type: Type tag. Defaults to the class annotation for the
                attribute, or to the type of its current value.

        Raises:
            AttributeError: If the object has no such attribute.
        """
        self._obj = obj
        self._name = name
        current = getattr(obj, name)

        descriptor = getattr(type(obj), name, None)
        self._fixed_read_only = isinstance(descriptor, property) and descriptor.fset is None

        if value_type is None:
            value_type = _annotated_type(type(obj), name)
        ObservableCell.__init__(self, current, value_type, read_only or self._fixed_read_only)

    @property
    def name(self) -> str:
        return self._name

    def get_value(self) -> Any:
        return getattr(self._obj, self._name)

    def set_read_only(self, read_only: bool) -> None:
        if not read_only and self._fixed_read_only:
            raise ReadOnlyViolation(f"Attribute '{self._name}' has no setter")
        super().set_read_only(read_only)

    def _store(self, value: Any) -> None:
        setattr(self._obj, self._name, value)


def _annotated_type(cls: type, name: str) -> Optional[type]:
    """Return the class-level annotation for an attribute if it is a real type."""
    for klass in cls.__mro__:
        annotation = getattr(klass, "__annotations__", {}).get(name)
        if annotation is not None:
            return annotation if isinstance(annotation, type) else None
    return None
