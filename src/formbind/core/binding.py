"""
Bindings between one field and one named slot of a record.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .errors import NoRecordBound, SlotNotFound
from .fields import Field
from .transactional import TransactionalCell
from ..infrastructure.logging_config import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class GroupState:
    """Group-level flags pushed onto every binding."""

    buffered: bool = True
    enabled: bool = True
    read_only: bool = False


class InputBinding:
    """
    Pairs a field with a slot name and the TransactionalCell wrapping that
    slot's cell on the current record.

    A binding created before a record is available is unresolved: its cell is
    None until resolve() is called with a record.
    """

    def __init__(self, field: Field, slot_name: str):
        self.field = field
        self.slot_name = slot_name
        self.cell: Optional[TransactionalCell] = None

    @property
    def is_resolved(self) -> bool:
        return self.cell is not None

    def resolve(self, record: Optional[Any]) -> TransactionalCell:
        """
        Look up the slot on record, wrap it and install it on the field.

        Any previously resolved cell is detached.

        Args:
            record: Slot provider exposing get_slot(name).

        Returns:
            The new TransactionalCell.

        Raises:
            NoRecordBound: If record is None.
            SlotNotFound: If the record has no slot named slot_name.
        """
        if record is None:
            raise NoRecordBound(f"Cannot resolve slot '{self.slot_name}' without a record")

        slot = record.get_slot(self.slot_name)
        if slot is None:
            raise SlotNotFound([self.slot_name])

        self.attach(TransactionalCell(slot))
        return self.cell

    def attach(self, cell: TransactionalCell) -> None:
        """Replace the binding's cell and make it the field's value source."""
        self.drop_cell()
        self.cell = cell
        self.field.set_value_source(cell)
        logger.debug(f"Slot '{self.slot_name}' attached to {self.field!r}")

    def release(self) -> None:
        """Drop the cell and clear the field's value source."""
        self.drop_cell()
        self.field.set_value_source(None)

    def drop_cell(self) -> None:
        """
        Detach the cell without touching the field.

        Uncommitted buffered edits are rolled back first, so the slot gets
        its pre-edit value back. The cell is detached even if that fails.
        """
        if self.cell is None:
            return
        cell, self.cell = self.cell, None
        try:
            if cell.is_modified():
                logger.info(f"Discarding uncommitted edits of slot '{self.slot_name}'")
                cell.rollback()
        finally:
            cell.detach()

    def configure(self, state: GroupState) -> None:
        """
        Push the group's flags onto the field and its cell.

        A read-only slot always makes the field read-only, whatever the
        group's read_only flag says.
        """
        if self.cell is not None:
            self.cell.set_buffered(state.buffered)
        self.field.set_read_through(not state.buffered)
        self.field.set_write_through(not state.buffered)
        self.field.set_enabled(state.enabled)

        if self.cell is not None and self.cell.is_read_only():
            self.field.set_read_only(True)
        else:
            self.field.set_read_only(state.read_only)

    def is_modified(self) -> bool:
        return self.cell is not None and self.cell.is_modified()

    def __repr__(self) -> str:
        return f"InputBinding(slot_name={self.slot_name!r}, field={self.field!r}, resolved={self.is_resolved})"
