"""
Two-phase commit wrapper for non-transactional cells.

When accessing a cell through the wrapper, getting and setting its value take
place immediately. The wrapper keeps the old value so that it can be written
back on rollback, which means the wrapped cell may change several times
(first by the edits, then back on rollback).

Value change events on the TransactionalCell fire only at the end of a
successful transaction, whereas listeners attached to the wrapped cell may
receive several events.
"""

from typing import Any, Optional

from .cells import Observable, ReadOnlyStatusChangeEvent, ValueCell, ValueChangeEvent
from .errors import ReadOnlyViolation
from ..infrastructure.logging_config import get_logger


logger = get_logger(__name__)

_ABSENT = object()


class TransactionalCell(Observable):
    """
    Wraps a ValueCell with start/commit/rollback semantics.

    While a transaction is open, value changes of the wrapped cell are not
    forwarded to this cell's listeners; a single deferred notification is
    fired on commit instead.

    In buffered mode the first edit made through the wrapper also opens an
    edit session: the pre-edit value is kept so that rollback() can restore
    it, and notifications are withheld until commit(). This is what makes a
    buffered form "write immediately, notify on commit".
    """

    def __init__(self, wrapped: ValueCell):
        """
        Initialize the wrapper.

        Args:
            wrapped: The cell to wrap. Its change notifications are
                intercepted if it supports them.
        """
        super().__init__()
        self._wrapped = wrapped
        self._in_transaction = False
        self._value_change_pending = False
        self._value_before_transaction: Any = _ABSENT
        self._value_before_edit: Any = _ABSENT
        self._buffered = False
        self._forcing = False

        self._observed = wrapped.as_observable()
        if self._observed is not None:
            self._observed.add_listener(self._on_wrapped_value_change)
            self._observed.add_read_only_listener(self._on_wrapped_read_only_change)

    @property
    def wrapped(self) -> ValueCell:
        return self._wrapped

    @property
    def type(self) -> type:
        return self._wrapped.type

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    @property
    def value_change_pending(self) -> bool:
        """True if the wrapped cell changed during the open transaction."""
        return self._value_change_pending

    @property
    def value_before_transaction(self) -> Optional[Any]:
        """The rollback point of the open transaction, or None outside one."""
        if self._value_before_transaction is _ABSENT:
            return None
        return self._value_before_transaction

    def get_value(self) -> Any:
        return self._wrapped.get_value()

    def set_value(self, value: Any) -> None:
        """
        Write a value through to the wrapped cell.

        Raises:
            ReadOnlyViolation: If the wrapped cell is read-only.
        """
        if self._wrapped.is_read_only():
            raise ReadOnlyViolation(f"Cannot write to read-only cell {self._wrapped!r}")

        opened_edit = False
        if self._buffered and not self._in_transaction and self._value_before_edit is _ABSENT:
            self._value_before_edit = self._wrapped.get_value()
            opened_edit = True

        try:
            # Observable cells call back into _on_wrapped_value_change
            self._wrapped.set_value(value)
        except Exception:
            if opened_edit:
                self._value_before_edit = _ABSENT
            raise

        if self._observed is None:
            self._fire_value_change()

    def is_read_only(self) -> bool:
        return self._wrapped.is_read_only()

    def set_read_only(self, read_only: bool) -> None:
        old_status = self.is_read_only()
        self._wrapped.set_read_only(read_only)
        if self._observed is None and old_status != self.is_read_only():
            self._notify_read_only_change(self.is_read_only())

    def is_buffered(self) -> bool:
        return self._buffered

    def set_buffered(self, buffered: bool) -> None:
        """
        Switch between buffered and write-through notification.

        An edit session that is already open stays open; switching modes
        neither commits nor discards it.
        """
        self._buffered = bool(buffered)

    def is_modified(self) -> bool:
        """True if buffered edits are waiting for commit() or rollback()."""
        return self._value_before_edit is not _ABSENT

    def start_transaction(self) -> None:
        """
        Open a transaction, recording the current value as rollback point.

        Transactions must not be nested: starting again before commit() or
        rollback() replaces the rollback point.
        """
        if self._in_transaction:
            logger.warning(f"Transaction restarted on {self._wrapped!r}; previous rollback point lost")
        self._in_transaction = True
        self._value_before_transaction = self.get_value()

    def commit(self) -> None:
        """End the transaction, keeping the current value."""
        self._end_transaction()

    def rollback(self) -> None:
        """
        Restore the wrapped cell and end the transaction.

        Inside a transaction the value at start_transaction() is restored and
        an enclosing edit session is left open. Outside a transaction the
        edit session is closed and the pre-edit value is restored. No
        notification is fired to this cell's listeners. Transaction state is
        finalized even if writing the old value back fails.
        """
        if self._in_transaction:
            try:
                self._force_value(self._value_before_transaction)
            finally:
                self._value_change_pending = False
                self._in_transaction = False
                self._value_before_transaction = _ABSENT
        elif self._value_before_edit is not _ABSENT:
            try:
                self._force_value(self._value_before_edit)
            finally:
                self._value_before_edit = _ABSENT

    def detach(self) -> None:
        """Stop listening to the wrapped cell."""
        if self._observed is not None:
            self._observed.remove_listener(self._on_wrapped_value_change)
            self._observed.remove_read_only_listener(self._on_wrapped_read_only_change)

    def _end_transaction(self) -> None:
        pending = self._value_change_pending or self._value_before_edit is not _ABSENT
        self._in_transaction = False
        self._value_before_transaction = _ABSENT
        self._value_change_pending = False
        self._value_before_edit = _ABSENT
        if pending:
            self._fire_value_change()

    def _fire_value_change(self) -> None:
        if self._in_transaction:
            self._value_change_pending = True
        elif self._value_before_edit is _ABSENT:
            self._notify_value_change(self.get_value())
        # An open edit session is flushed by commit()

    def _force_value(self, value: Any) -> None:
        # Only the same object is skipped; 1 == True
        if self._wrapped.get_value() is value:
            return

        self._forcing = True
        try:
            if self._wrapped.is_read_only():
                self._wrapped.set_read_only(False)
                try:
                    self._wrapped.set_value(value)
                finally:
                    self._wrapped.set_read_only(True)
            else:
                self._wrapped.set_value(value)
        finally:
            self._forcing = False

        if self._observed is None:
            self._fire_value_change()

    def _on_wrapped_value_change(self, event: ValueChangeEvent) -> None:
        self._fire_value_change()

    def _on_wrapped_read_only_change(self, event: ReadOnlyStatusChangeEvent) -> None:
        if not self._forcing:
            self._notify_read_only_change(event.read_only)

    def __repr__(self) -> str:
        return (
            f"TransactionalCell(wrapped={self._wrapped!r}, in_transaction={self._in_transaction}, "
            f"modified={self.is_modified()})"
        )
