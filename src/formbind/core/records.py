"""
Records: named collections of value cells.

A record is anything that exposes get_slot(name) returning a ValueCell (or
None when the slot does not exist). The binding layer only ever looks up
slots; it never creates or removes them.
"""

import dataclasses
from typing import Any, Iterable, Mapping, Optional

from .cells import AttributeCell, ObservableCell, ValueCell


class Record:
    """An ordered, in-memory mapping of slot names to cells."""

    def __init__(self):
        self._slots: dict[str, ValueCell] = {}

    @classmethod
    def from_values(cls, values: Mapping[str, Any], read_only: Iterable[str] = ()) -> "Record":
        """
        Build a record of observable cells from a mapping of initial values.

        Args:
            values: Slot names and their initial values.
            read_only: Names of slots whose cells are created read-only.

        Returns:
            A new Record.
        """
        read_only = set(read_only)
        record = cls()
        for name, value in values.items():
            record.add_slot(name, ObservableCell(value, read_only=name in read_only))
        return record

    def add_slot(self, name: str, cell: ValueCell) -> None:
        """Add or replace the cell for a slot."""
        self._slots[name] = cell

    def remove_slot(self, name: str) -> bool:
        """
        Remove a slot.

        Returns:
            True if the slot existed.
        """
        return self._slots.pop(name, None) is not None

    def get_slot(self, name: str) -> Optional[ValueCell]:
        return self._slots.get(name)

    def slot_names(self) -> list[str]:
        return list(self._slots)

    def values(self) -> dict[str, Any]:
        """Return a snapshot of every slot's current value."""
        return {name: cell.get_value() for name, cell in self._slots.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._slots

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        return f"Record({self.values()!r})"


class ObjectRecord(Record):
    """
    Record exposing the attributes of a Python object as slots.

    Each slot is an AttributeCell, so committed edits land directly on the
    wrapped object. Dataclass instances expose their fields by default;
    other objects expose their annotated attributes.
    """

    def __init__(self, obj: Any, names: Optional[Iterable[str]] = None, read_only: Iterable[str] = ()):
        """
        Initialize the record.

        Args:
            obj: The object to expose.
            names: Attribute names to expose. Defaults to the dataclass fields
                or class annotations of the object.
            read_only: Attribute names whose cells are read-only.
        """
        super().__init__()
        self._obj = obj
        read_only = set(read_only)

        if names is None:
            names = _default_attribute_names(obj)

        for name in names:
            self.add_slot(name, AttributeCell(obj, name, read_only=name in read_only))

    @property
    def obj(self) -> Any:
        return self._obj


def _default_attribute_names(obj: Any) -> list[str]:
    if dataclasses.is_dataclass(obj):
        return [f.name for f in dataclasses.fields(obj)]

    names = []
    for klass in reversed(type(obj).__mro__):
        for name in getattr(klass, "__annotations__", {}):
            if not name.startswith("_") and name not in names:
                names.append(name)
    return names
